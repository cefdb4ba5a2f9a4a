import asyncio
import json
import sys

import httpx

from truck_tracker.client import TrackerClientError, get_truck_positions
from truck_tracker.schemas import Position
from truck_tracker.services.positions import centroid

async def main():
    try:
        trucks = await get_truck_positions()
    except TrackerClientError as e:
        print(f"Failed to fetch truck positions: {e}")
        return 1
    except httpx.HTTPError as e:
        print(f"Network Error: {e}")
        return 1

    print("Current truck positions:")
    print(json.dumps(trucks, indent=2))

    positions = [Position(**t["position"]) for t in trucks if t.get("position")]
    center = centroid(positions)
    print(f"Map center: {center.latitude:.6f}, {center.longitude:.6f} ({len(positions)} trucks)")
    return 0

if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
