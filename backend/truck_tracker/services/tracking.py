import hmac
import math
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from truck_tracker.errors import NotFoundError, UnauthorizedError
from truck_tracker.models import Truck
from truck_tracker.schemas import MapCenter, Position, TruckPosition, TruckSummary
from truck_tracker.services.positions import WORLD_VIEW, centroid, has_changed, position_of
from truck_tracker.services.registry import TruckRegistry

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid identifier or key"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Authenticator:
    """Checks a caller-supplied key against the truck's stored secret."""

    def __init__(self, registry: TruckRegistry):
        self.registry = registry

    @staticmethod
    def key_matches(truck: Truck, supplied_key: Optional[str]) -> bool:
        if supplied_key is None or truck.key is None:
            return False
        # Exact match, compared in constant time; surrogatepass keeps lone surrogates comparable
        stored = truck.key.encode("utf-8", "surrogatepass")
        supplied = supplied_key.encode("utf-8", "surrogatepass")
        return hmac.compare_digest(stored, supplied)

    async def authenticate(self, identifier: str, supplied_key: Optional[str]) -> bool:
        truck = await self.registry.find_by_identifier(identifier)
        if truck is None:
            return False
        return self.key_matches(truck, supplied_key)


class PositionUpdateService:
    """Authenticated write path for truck positions.

    Concurrent updates for the same truck are not coordinated: last writer wins.
    """

    def __init__(
        self,
        registry: TruckRegistry,
        change_detector: Callable[[Optional[Position], Position], bool] = has_changed,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.registry = registry
        self.authenticator = Authenticator(registry)
        self.change_detector = change_detector
        self.clock = clock

    async def update_position(
        self, identifier: str, latitude: float, longitude: float, key: Optional[str]
    ) -> TruckSummary:
        # Lookup happens before the key check, so an unknown identifier is reported as such
        truck = await self.registry.find_by_identifier(identifier)
        if truck is None:
            logger.info("Position update for unknown truck %s", identifier)
            raise NotFoundError("Truck not found")

        if not self.authenticator.key_matches(truck, key):
            logger.warning("Rejected position update for truck %s: bad key", identifier)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        new_position = Position(latitude=latitude, longitude=longitude)
        changed = self.change_detector(position_of(truck), new_position)

        data = {"latitude": latitude, "longitude": longitude}
        if changed:
            data["position_updated_at"] = self.clock().astimezone(timezone.utc)

        updated = await self.registry.update_by_id(truck.document_id, data)
        logger.info(
            "Truck %s at (%s, %s)%s",
            identifier, latitude, longitude, "" if changed else " (unchanged)",
        )
        return summarize(updated)


class PositionQueryService:
    """Read path: current positions of every truck, without secrets."""

    def __init__(self, registry: TruckRegistry, fallback: Position = WORLD_VIEW, zoom: int = 4):
        self.registry = registry
        self.fallback = fallback
        self.zoom = zoom

    async def list_positions(self) -> List[TruckPosition]:
        trucks = await self.registry.find_all()
        return [project(t) for t in trucks]

    async def map_center(self) -> MapCenter:
        positions = [p.position for p in await self.list_positions() if p.position is not None]
        center = centroid(positions, fallback=self.fallback)
        if not (math.isfinite(center.latitude) and math.isfinite(center.longitude)):
            # Sums of extreme stored values overflow; a map cannot center on inf
            logger.warning("Fleet centroid is not finite, using the default view")
            center = self.fallback
        return MapCenter(
            latitude=center.latitude,
            longitude=center.longitude,
            zoom=self.zoom,
            count=len(positions),
        )


def summarize(truck: Truck) -> TruckSummary:
    return TruckSummary(
        identifier=truck.identifier,
        position=position_of(truck),
        position_updated_at=truck.position_updated_at,
    )


def project(truck: Truck) -> TruckPosition:
    return TruckPosition(
        identifier=truck.identifier,
        model=truck.model,
        document_id=truck.document_id,
        position=position_of(truck),
        position_updated_at=truck.position_updated_at,
    )
