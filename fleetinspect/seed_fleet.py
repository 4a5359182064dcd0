"""
Database seeding script for the demo fleet.

Creates the tables and registers buses 101-105 (pending inspection).
Run this once against a fresh database, or set SEED_DEMO_DATA=true and let
the app seed itself on startup.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fleetinspect.app.db.session import AsyncSessionLocal, engine, Base
from fleetinspect.app.services.seed import DEMO_FLEET, seed_vehicles

# Register models with Base
from fleetinspect.app.models.vehicle import Vehicle
from fleetinspect.app.models.inspection_report import InspectionReport, InspectionFile
from fleetinspect.app.models.maintenance_alert import MaintenanceAlert
from fleetinspect.app.models.audit_log import AuditLog


async def seed_fleet():
    """
    Seed the demo fleet.
    
    Existing vehicles (same id or bus number) are left untouched.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    async with AsyncSessionLocal() as db:
        print("🌱 Starting fleet seeding...")
        added = await seed_vehicles(db)
    
    await engine.dispose()
    
    if added:
        print(f"✅ Registered {added} of {len(DEMO_FLEET)} demo vehicles")
    else:
        print("ℹ️  Demo fleet already present, nothing to do")
    
    print("\nDemo accounts (fixed):")
    print("  - DRIVER: driver1 / driver123 (John Driver)")
    print("  - DRIVER: driver2 / driver123 (Jane Driver)")
    print("  - ADMIN:  admin / admin123")


if __name__ == "__main__":
    asyncio.run(seed_fleet())
