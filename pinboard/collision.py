"""Pin collision rule: a placement is rejected when it sits within the collision
radius of an existing pin whose dates overlap its own.

Positions are stored as percentages of the displayed floor plan and converted to
pixels of the caller's current rendering surface at check time, so the radius is
measured in on-screen pixels. The same two pins can collide on a large map and
not on a small one.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .intervals import DateLike, ranges_overlap
from .schemas import BookingRead

logger = logging.getLogger(__name__)

COLLISION_RADIUS_PX = 10.0


@dataclass(frozen=True)
class CollisionResult:
    collision: bool
    conflict: Optional[BookingRead] = None


def to_pixels(x: float, y: float, map_width: float, map_height: float) -> Tuple[float, float]:
    return (x / 100) * map_width, (y / 100) * map_height


def pixel_distance(
    x1: float, y1: float, x2: float, y2: float, map_width: float, map_height: float
) -> float:
    """Euclidean distance in pixels between two percentage positions."""

    p1 = to_pixels(x1, y1, map_width, map_height)
    p2 = to_pixels(x2, y2, map_width, map_height)
    return math.hypot(p1[0] - p2[0], p1[1] - p2[1])


def check_collision(
    x: float,
    y: float,
    date_from: DateLike,
    date_to: DateLike,
    existing: Iterable[BookingRead],
    map_width: float,
    map_height: float,
    exclude_id: Optional[str] = None,
    radius: float = COLLISION_RADIUS_PX,
) -> CollisionResult:
    """Return the first existing booking the candidate placement conflicts with.

    ``exclude_id`` skips the booking being edited. Iteration order decides which
    conflict is reported when there are several. ``date_from <= date_to`` is the
    caller's job; it is not re-validated here.
    """

    for booking in existing:
        if exclude_id is not None and booking.id == exclude_id:
            continue
        distance = pixel_distance(x, y, booking.x, booking.y, map_width, map_height)
        if distance >= radius:
            continue
        if ranges_overlap(date_from, date_to, booking.date_from, booking.date_to):
            logger.debug("Placement (%.2f, %.2f) collides with booking %s at %.2fpx", x, y, booking.id, distance)
            return CollisionResult(collision=True, conflict=booking)
    return CollisionResult(collision=False)
