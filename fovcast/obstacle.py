"""Opaque obstacles: open or closed polylines of connected segments.

An Obstacle exclusively owns its segments. Its vertex list is the start of
every segment, plus the end of the last segment when the polyline is open
(a closed polyline's last end is its first start).

``rectangle`` and ``random_polygon`` are convenience constructors for
building scenes; the visibility sweep only needs ``segments``,
``vertices`` and ``raycast``.
"""

from __future__ import annotations

import math
import random
from typing import Sequence

from .records import RaycastHit
from .segment import Segment
from .vector import Vector2


class Obstacle:
    def __init__(self, segments: Sequence[Segment], closed: bool = False) -> None:
        if not segments:
            raise ValueError("Obstacle needs at least one segment")
        self._segments: tuple[Segment, ...] = tuple(segments)
        self._closed = closed

        if closed:
            n = len(self._segments)
            for i in range(n):
                nxt = self._segments[(i + 1) % n]
                if self._segments[i].end != nxt.start:
                    raise ValueError(
                        f"Closed obstacle does not chain: segment {i} ends at "
                        f"{self._segments[i].end}, segment {(i + 1) % n} "
                        f"starts at {nxt.start}"
                    )

        vertices = [seg.start for seg in self._segments]
        if not closed:
            vertices.append(self._segments[-1].end)
        self._vertices: tuple[Vector2, ...] = tuple(vertices)

    @staticmethod
    def from_points(
        points: Sequence[Vector2 | tuple[float, float]], closed: bool = False
    ) -> Obstacle:
        """Build a polyline through ``points``; closed joins last to first."""
        pts = [Vector2.of(p) for p in points]
        if len(pts) < 2:
            raise ValueError("Obstacle needs at least two points")
        segments = [Segment(pts[i], pts[i + 1]) for i in range(len(pts) - 1)]
        if closed:
            segments.append(Segment(pts[-1], pts[0]))
        return Obstacle(segments, closed)

    @staticmethod
    def rectangle(
        position: Vector2,
        width: float,
        height: float,
        rotation: float = 0.0,
        centred: bool = True,
    ) -> Obstacle:
        """Closed rectangle rotated by ``rotation`` radians about its centre.

        With ``centred`` false, ``position`` is the top-left corner of the
        unrotated rectangle.
        """
        cx = position.x
        cy = position.y
        if not centred:
            cx += width / 2
            cy += height / 2
        hw = width / 2
        hh = height / 2
        corners = [
            Vector2(lx, ly).rotate(rotation).add(cx, cy)
            for lx, ly in ((-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh))
        ]
        return Obstacle.from_points(corners, closed=True)

    @staticmethod
    def random_polygon(
        position: Vector2,
        radius: float,
        num_vertices: int,
        variance: float,
        rng: random.Random | None = None,
    ) -> Obstacle:
        """Closed star-shaped polygon with jittered vertex radii.

        Vertex ``i`` sits at angle ``i * 2*pi / num_vertices`` and a radius
        drawn uniformly from ``radius +/- variance / 2``.
        """
        if num_vertices < 3:
            raise ValueError(f"num_vertices must be >= 3, got {num_vertices}")
        rng = rng or random.Random()
        points = []
        for i in range(num_vertices):
            angle = i * (2 * math.pi / num_vertices)
            r = radius - variance / 2 + variance * rng.random()
            points.append(position + Vector2.from_heading(angle, r))
        return Obstacle.from_points(points, closed=True)

    @property
    def segments(self) -> tuple[Segment, ...]:
        return self._segments

    @property
    def vertices(self) -> tuple[Vector2, ...]:
        return tuple(v.copy() for v in self._vertices)

    @property
    def closed(self) -> bool:
        return self._closed

    def raycast(self, origin: Vector2, direction: Vector2) -> RaycastHit | None:
        """Nearest hit along the ray among this obstacle's segments."""
        closest: RaycastHit | None = None
        for seg in self._segments:
            hit = seg.raycast(origin, direction)
            if hit is not None and (
                closest is None or hit.ray_scalar < closest.ray_scalar
            ):
                closest = hit
        return closest

    def __repr__(self) -> str:
        kind = "closed" if self._closed else "open"
        return f"Obstacle({len(self._segments)} segments, {kind})"
