"""
Vehicle API Endpoints.

Read access for every authenticated user; registration and odometer edits
for admins. Status and defect flag are never writable here.
"""

from fastapi import APIRouter, Depends, HTTPException, status, Path
from sqlalchemy.ext.asyncio import AsyncSession
from fleetinspect.app.db.session import get_db
from fleetinspect.app.models.enums import UserRole
from fleetinspect.app.schemas.vehicle import VehicleCreate, VehicleUpdate, VehicleResponse, VehicleListResponse
from fleetinspect.app.core.guards import require_role
from fleetinspect.app.core.dependencies import get_current_user, get_consistency_engine
from fleetinspect.app.core.exceptions import ResourceNotFoundError
from fleetinspect.app.services.consistency import ConsistencyEngine
from fleetinspect.app.services.vehicle_store import VehicleStore
from fleetinspect.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])


@router.get("", response_model=VehicleListResponse)
async def list_vehicles(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List all vehicles ordered by bus number."""
    vehicles = await VehicleStore(db).list()
    return VehicleListResponse(
        vehicles=[VehicleResponse.model_validate(v) for v in vehicles],
        total=len(vehicles)
    )


@router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(
    vehicle_id: str = Path(..., description="Vehicle ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    vehicle = await VehicleStore(db).get(vehicle_id)
    if not vehicle:
        raise ResourceNotFoundError("Vehicle", vehicle_id)
    return VehicleResponse.model_validate(vehicle)


@router.post("", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle_data: VehicleCreate,
    current_user: dict = Depends(require_role([UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db)
):
    """Register a new vehicle (Admin only). It starts out pending inspection."""
    store = VehicleStore(db)
    if await store.get(vehicle_data.id) or await store.get_by_bus_number(vehicle_data.bus_number):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Vehicle id or bus number already registered"
        )
    
    vehicle = await store.create(
        vehicle_data.id,
        vehicle_data.bus_number,
        model=vehicle_data.model,
        year=vehicle_data.year,
        odometer_reading=vehicle_data.odometer_reading,
    )
    await log_event(
        db=db,
        action=AuditAction.VEHICLE_CREATED,
        actor_username=current_user["sub"],
        target_id=vehicle.id,
        metadata={"bus_number": vehicle.bus_number}
    )
    await db.commit()
    await db.refresh(vehicle)
    
    return VehicleResponse.model_validate(vehicle)


@router.patch("/{vehicle_id}", response_model=VehicleResponse)
async def update_vehicle(
    vehicle_id: str = Path(..., description="Vehicle ID"),
    vehicle_data: VehicleUpdate = ...,
    current_user: dict = Depends(require_role([UserRole.ADMIN])),
    engine: ConsistencyEngine = Depends(get_consistency_engine),
    db: AsyncSession = Depends(get_db)
):
    """
    Correct a vehicle's odometer or last inspection date (Admin only).
    
    Only supplied fields are written, under the vehicle lock. Returns 409
    while a report for the same vehicle is being processed.
    """
    vehicle = await engine.update_vehicle_details(
        vehicle_id,
        odometer_reading=vehicle_data.odometer_reading,
        last_inspection_date=vehicle_data.last_inspection_date,
        actor_username=current_user["sub"],
    )
    await db.refresh(vehicle)
    
    return VehicleResponse.model_validate(vehicle)
