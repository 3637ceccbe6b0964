"""Oriented line segment with precomputed unit direction and length."""

from __future__ import annotations

from .geometry import raycast, segment_intersection
from .records import RaycastHit
from .vector import Vector2


class Segment:
    """Immutable segment from ``start`` to ``end``.

    Endpoints are copied on construction and on access, so a Segment can't
    be changed through a vector the caller still holds.
    """

    def __init__(self, start: Vector2, end: Vector2) -> None:
        self._start = Vector2.of(start)
        self._end = Vector2.of(end)
        self._length = self._start.distance_to(self._end)
        if self._length == 0:
            raise ValueError(f"Zero-length segment at {self._start}")
        self._direction = (self._end - self._start).divide(self._length)

    @property
    def start(self) -> Vector2:
        return self._start.copy()

    @property
    def end(self) -> Vector2:
        return self._end.copy()

    @property
    def direction(self) -> Vector2:
        return self._direction.copy()

    @property
    def length(self) -> float:
        return self._length

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self._start.x, self._start.y, self._end.x, self._end.y)

    def intersects(self, other: Segment) -> Vector2 | None:
        return segment_intersection(
            self._start, self._end, other._start, other._end
        )

    def raycast(self, origin: Vector2, direction: Vector2) -> RaycastHit | None:
        """Cast a unit-direction ray against this segment.

        The returned hit records this segment so callers can tell which
        physical edge was struck.
        """
        hit = raycast(self._start, self._end, origin, direction)
        if hit is not None:
            hit.segment = self
        return hit

    def __repr__(self) -> str:
        return (
            f"Segment(({self._start.x}, {self._start.y}) -> "
            f"({self._end.x}, {self._end.y}))"
        )
