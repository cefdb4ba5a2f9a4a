import asyncio
import json
import sys

import httpx

from truck_tracker.client import TrackerClientError, update_truck_position

async def main(identifier, latitude, longitude, key):
    try:
        data = await update_truck_position(identifier, latitude, longitude, key)
    except TrackerClientError as e:
        print(f"Error updating position: {e}")
        return 1
    except httpx.HTTPError as e:
        print(f"Network Error: {e}")
        return 1
    print("Position updated successfully:")
    print(json.dumps(data, indent=2))
    return 0

if __name__ == "__main__":
    args = sys.argv[1:]
    if len(args) != 4:
        print("Usage: python update_truck_position.py <identifier> <latitude> <longitude> <key>")
        sys.exit(1)

    identifier, latitude, longitude, key = args
    try:
        latitude, longitude = float(latitude), float(longitude)
    except ValueError:
        print("Latitude and longitude must be numbers")
        sys.exit(1)

    sys.exit(asyncio.run(main(identifier, latitude, longitude, key)))
