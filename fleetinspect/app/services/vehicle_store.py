"""
Vehicle Store.

Per-vehicle current status, last inspection date, odometer and defect flag.
"""

from datetime import date
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from fleetinspect.app.core.exceptions import ResourceNotFoundError
from fleetinspect.app.models.enums import InspectionStatus
from fleetinspect.app.models.vehicle import Vehicle


class VehicleStore:
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def list(self) -> List[Vehicle]:
        result = await self.db.execute(select(Vehicle).order_by(Vehicle.bus_number))
        return list(result.scalars().all())
    
    async def get(self, vehicle_id: str) -> Optional[Vehicle]:
        return await self.db.get(Vehicle, vehicle_id)
    
    async def get_by_bus_number(self, bus_number: str) -> Optional[Vehicle]:
        result = await self.db.execute(
            select(Vehicle).where(Vehicle.bus_number == bus_number)
        )
        return result.scalar_one_or_none()
    
    async def create(
        self,
        vehicle_id: str,
        bus_number: str,
        model: Optional[str] = None,
        year: Optional[int] = None,
        odometer_reading: int = 0,
    ) -> Vehicle:
        """Register a vehicle. New vehicles start PENDING without defects."""
        vehicle = Vehicle(
            id=vehicle_id,
            bus_number=bus_number,
            model=model,
            year=year,
            status=InspectionStatus.PENDING,
            last_inspection_date=None,
            odometer_reading=odometer_reading,
            has_defects=False,
        )
        self.db.add(vehicle)
        await self.db.flush()
        return vehicle
    
    async def update(
        self,
        vehicle_id: str,
        *,
        status: Optional[InspectionStatus] = None,
        last_inspection_date: Optional[date] = None,
        odometer_reading: Optional[int] = None,
        has_defects: Optional[bool] = None,
    ) -> Vehicle:
        """
        Partially update a vehicle.
        
        Only the supplied (non-None) fields are written; the rest keep their
        previous values.
        
        Raises:
            ResourceNotFoundError: If the vehicle does not exist
        """
        vehicle = await self.get(vehicle_id)
        if vehicle is None:
            raise ResourceNotFoundError("Vehicle", vehicle_id)
        
        if status is not None:
            vehicle.status = status
        if last_inspection_date is not None:
            vehicle.last_inspection_date = last_inspection_date
        if odometer_reading is not None:
            vehicle.odometer_reading = odometer_reading
        if has_defects is not None:
            vehicle.has_defects = has_defects
        
        await self.db.flush()
        return vehicle
