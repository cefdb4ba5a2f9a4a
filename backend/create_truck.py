import asyncio
import sys

from truck_tracker.db import AsyncSessionLocal, engine, Base
from truck_tracker.errors import TrackerError
from truck_tracker.models import TruckModel
from truck_tracker.services.registry import SqlTruckRegistry

async def create_truck(identifier, model, key, latitude=None, longitude=None):
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        async with AsyncSessionLocal() as db:
            registry = SqlTruckRegistry(db)
            try:
                truck = await registry.create(identifier, model, key, latitude, longitude)
            except TrackerError as e:
                print(f"Could not create truck: {e.message}")
                return 1

        print("✅ Truck created successfully!")
        print(f"Identifier: {truck.identifier}")
        print(f"Model: {truck.model}")
        print(f"Document ID: {truck.document_id}")
        if truck.latitude is not None:
            print(f"Position: {truck.latitude}, {truck.longitude}")
        return 0
    finally:
        await engine.dispose()

if __name__ == "__main__":
    args = sys.argv[1:]
    if len(args) not in (3, 5):
        models = ", ".join(m.value for m in TruckModel)
        print("Usage: python create_truck.py <identifier> <model> <key> [<latitude> <longitude>]")
        print(f"Models: {models}")
        sys.exit(1)

    lat = lon = None
    if len(args) == 5:
        try:
            lat, lon = float(args[3]), float(args[4])
        except ValueError:
            print("Latitude and longitude must be numbers")
            sys.exit(1)

    sys.exit(asyncio.run(create_truck(args[0], args[1], args[2], lat, lon)))
