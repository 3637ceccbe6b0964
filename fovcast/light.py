"""A light: a visibility caster plus the polygon it computed last.

``LightSource`` is the object a frame loop holds on to. Each frame the
caller adjusts it (``move``, ``face_towards``, ``set_radius``, ``set_fov``)
and calls ``update`` with the current obstacles; the renderer then draws a
fan from ``position`` through ``points``.

The lit region is also available as a shapely polygon for queries such as
"is this point lit?" or "how much floor does this light cover?".
"""

from __future__ import annotations

from typing import Iterable

from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon as ShapelyPolygon

from .caster import VisibilityCaster
from .geometry import ANGLE_TOLERANCE
from .obstacle import Obstacle
from .records import Candidate
from .vector import TWO_PI, Vector2

DEFAULT_FILL_COLOUR = (255, 0, 0, 128)


class LightSource:
    def __init__(
        self,
        position: Vector2,
        radius: float,
        heading: float,
        fov: float,
        resolution: float,
        fill_colour: tuple[int, int, int, int] = DEFAULT_FILL_COLOUR,
        vectorized: bool = True,
    ) -> None:
        self.caster = VisibilityCaster(
            position, radius, heading, fov, resolution, vectorized=vectorized
        )
        self.fill_colour = fill_colour
        self.points: list[Vector2] = []

    @property
    def position(self) -> Vector2:
        return self.caster.position

    def set_radius(self, radius: float) -> None:
        self.caster.radius = radius

    def set_fov(self, fov: float) -> None:
        self.caster.fov = fov

    def face_towards(self, point: Vector2) -> None:
        self.caster.face_towards(point)

    def move(self, delta: Vector2) -> None:
        self.caster.move(delta)

    def update(
        self,
        obstacles: Iterable[Obstacle],
        candidates: Iterable[Candidate] | None = None,
    ) -> list[Vector2]:
        self.points = self.caster.compute_visibility(obstacles, candidates)
        return self.points

    def fan(self) -> ShapelyPolygon:
        """The lit region from the last ``update``.

        Anchored at the light position, except for a full-turn cone whose
        boundary already closes on itself.
        """
        ring = [p.as_tuple() for p in self.points]
        if self.caster.fov < TWO_PI - ANGLE_TOLERANCE:
            ring.insert(0, self.caster.position.as_tuple())
        if len(ring) < 3:
            return ShapelyPolygon()
        return ShapelyPolygon(ring)

    def lit_area(self) -> float:
        return self.fan().area

    def illuminates(self, point: Vector2 | tuple[float, float]) -> bool:
        """True if ``point`` lies inside or on the edge of the lit region."""
        x, y = Vector2.of(point)
        return self.fan().covers(ShapelyPoint(x, y))

    def coverage_ratio(self) -> float:
        """Lit area as a fraction of the unobstructed cone's area."""
        full = 0.5 * self.caster.fov * self.caster.radius**2
        if full == 0:
            return 0.0
        return min(self.lit_area() / full, 1.0)

    def __repr__(self) -> str:
        return f"LightSource({self.caster!r}, {len(self.points)} points)"
