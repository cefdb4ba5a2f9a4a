from typing import Iterable, Optional

from truck_tracker.config import settings
from truck_tracker.schemas import Position

# Fallback view when there is nothing to average
WORLD_VIEW = Position(
    latitude=settings.DEFAULT_CENTER_LATITUDE,
    longitude=settings.DEFAULT_CENTER_LONGITUDE,
)


def position_of(truck) -> Optional[Position]:
    """Stored position of a truck record, or None if it was never placed."""
    if truck.latitude is None or truck.longitude is None:
        return None
    return Position(latitude=truck.latitude, longitude=truck.longitude)


def has_changed(old: Optional[Position], new: Position) -> bool:
    """True when ``new`` differs from ``old`` in either coordinate.

    Exact float comparison: resubmitting the stored coordinates is a no-op.
    A missing old position always counts as a change.
    """
    if old is None:
        return True
    return new.latitude != old.latitude or new.longitude != old.longitude


def centroid(positions: Iterable[Position], fallback: Position = WORLD_VIEW) -> Position:
    """Planar mean of latitudes and longitudes, for centering a map.

    Not a great-circle centroid. An empty input yields ``fallback``.
    Out-of-range or infinite values average to inf or nan instead of raising.
    """
    points = list(positions)
    if not points:
        return fallback
    count = len(points)
    return Position(
        latitude=sum(p.latitude for p in points) / count,
        longitude=sum(p.longitude for p in points) / count,
    )
