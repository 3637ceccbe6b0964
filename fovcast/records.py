"""Transient records produced during a single visibility computation.

None of these outlive a ``VisibilityCaster.compute_visibility`` call. A ray
cast that strikes nothing is represented by ``None`` rather than an empty
record, so every layer (geometry -> Segment -> Obstacle -> caster) passes
``RaycastHit | None`` around.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .vector import Vector2

if TYPE_CHECKING:
    from .segment import Segment


class RayKind(str, Enum):
    REGULAR = "regular"  # FOV edge, or cast at/near an obstacle vertex
    LINE_INTERSECTION = "lineIntersection"
    PERIMETER_INTERSECTION = "perimeterIntersection"
    PERIMETER_FILL = "perimeterFill"  # synthesized arc point, never cast


@dataclass
class RaycastHit:
    """Where a ray struck a segment.

    ``ray_scalar`` is the distance along the (unit) ray direction and
    ``segment_scalar`` the distance along the struck segment from its start.
    ``segment_scalar`` is None for points synthesized on the view circle.
    """

    point: Vector2
    ray_scalar: float
    segment_scalar: float | None
    segment: Segment | None = None


@dataclass
class Candidate:
    """A point the caster wants to aim a ray at."""

    point: Vector2
    kind: RayKind
    segment: Segment | None = None  # source edge for perimeter candidates


@dataclass
class Ray:
    """A ray from the light position.

    ``sweep`` is the counter-clockwise angle from the start of the field of
    view, the key the sweep is ordered by. ``source`` is the segment a
    perimeter ray was aimed along, if any.
    """

    heading: float
    direction: Vector2
    kind: RayKind
    sweep: float = 0.0
    source: Segment | None = None


@dataclass
class CastResult:
    ray: Ray
    hit: RaycastHit | None

    @property
    def kind(self) -> RayKind:
        return self.ray.kind

    @property
    def heading(self) -> float:
        return self.ray.heading

    def resolve(self, origin: Vector2, radius: float) -> Vector2:
        """Concrete boundary point: the hit, else the circle at this bearing."""
        if self.hit is not None:
            return self.hit.point.copy()
        return origin + Vector2.from_heading(self.ray.heading, radius)
