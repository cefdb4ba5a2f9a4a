from typing import List

from fastapi import APIRouter, Depends

from truck_tracker.dependencies import get_query_service, get_update_service
from truck_tracker.schemas import MapCenter, TruckPosition, UpdatePositionRequest, UpdatePositionResponse
from truck_tracker.services.tracking import PositionQueryService, PositionUpdateService

router = APIRouter(tags=["Truck Tracker"])


@router.post("/update-position", response_model=UpdatePositionResponse)
async def update_position(
    payload: UpdatePositionRequest,
    service: PositionUpdateService = Depends(get_update_service),
):
    """Move a truck. The body must carry the truck's key."""
    summary = await service.update_position(
        payload.identifier, payload.latitude, payload.longitude, payload.key
    )
    return {"data": summary}


@router.get("/truck-positions", response_model=List[TruckPosition])
async def get_truck_positions(service: PositionQueryService = Depends(get_query_service)):
    return await service.list_positions()


@router.get("/truck-positions/center", response_model=MapCenter)
async def get_map_center(service: PositionQueryService = Depends(get_query_service)):
    """Where the dashboard should center its map"""
    return await service.map_center()
