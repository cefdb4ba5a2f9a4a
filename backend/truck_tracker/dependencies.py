from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from truck_tracker.config import settings
from truck_tracker.db import get_db
from truck_tracker.errors import ServiceUnavailableError
from truck_tracker.services.positions import WORLD_VIEW
from truck_tracker.services.registry import SqlTruckRegistry, TruckRegistry
from truck_tracker.services.tracking import PositionQueryService, PositionUpdateService


async def require_db_ready(request: Request) -> None:
    """Fail fast while the startup task is still creating tables"""
    if not getattr(request.app.state, "db_ready", False):
        raise ServiceUnavailableError("System is initializing. Please wait.")


async def get_registry(
    _ready: None = Depends(require_db_ready),
    db: AsyncSession = Depends(get_db),
) -> TruckRegistry:
    return SqlTruckRegistry(db)


async def get_update_service(
    registry: TruckRegistry = Depends(get_registry),
) -> PositionUpdateService:
    return PositionUpdateService(registry)


async def get_query_service(
    registry: TruckRegistry = Depends(get_registry),
) -> PositionQueryService:
    return PositionQueryService(registry, fallback=WORLD_VIEW, zoom=settings.DEFAULT_ZOOM)
