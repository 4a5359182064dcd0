"""
Demo fleet seeding.
"""

import logging
from sqlalchemy.ext.asyncio import AsyncSession

from fleetinspect.app.services.vehicle_store import VehicleStore

logger = logging.getLogger(__name__)

DEMO_FLEET = [
    ("1", "101", "Blue Bird Vision", 2019, 45230),
    ("2", "102", "Thomas C2", 2020, 38110),
    ("3", "103", "IC CE Series", 2018, 61875),
    ("4", "104", "Blue Bird All American", 2021, 22640),
    ("5", "105", "Thomas Saf-T-Liner HDX", 2017, 78390),
]


async def seed_vehicles(db: AsyncSession) -> int:
    """Insert the demo fleet vehicles that are missing. Returns how many were added."""
    store = VehicleStore(db)
    added = 0
    for vehicle_id, bus_number, model, year, odometer in DEMO_FLEET:
        if await store.get(vehicle_id) or await store.get_by_bus_number(bus_number):
            continue
        await store.create(vehicle_id, bus_number, model=model, year=year, odometer_reading=odometer)
        added += 1
    await db.commit()
    if added:
        logger.info("Seeded %d demo vehicles", added)
    return added
