"""2D point / free-vector primitive.

``Vector2`` is mutable. The in-place methods (``add``,
``subtract``, ``scale``, ``divide``, ``normalize``, ``rotate``,
``set_heading``) modify the instance and return it so calls can be chained.
The arithmetic operators and ``normalized``/``rotated``/``copy`` are pure
and always return a new instance.

Aliasing rule: every object in this package that keeps a ``Vector2`` it was
handed (segment endpoints, caster position) stores its own copy, and every
accessor hands out a copy. Callers never share a live vector with the core.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

TWO_PI = 2.0 * math.pi


@dataclass
class Vector2:
    x: float = 0.0
    y: float = 0.0

    @staticmethod
    def of(value: Vector2 | tuple[float, float]) -> Vector2:
        """Coerce a ``Vector2`` or an ``(x, y)`` pair into a new Vector2."""
        if isinstance(value, Vector2):
            return Vector2(value.x, value.y)
        x, y = value
        return Vector2(float(x), float(y))

    @staticmethod
    def from_heading(rads: float, length: float = 1.0) -> Vector2:
        return Vector2(math.cos(rads) * length, math.sin(rads) * length)

    # -- In-place arithmetic --

    def add(self, x: Vector2 | float, y: float | None = None) -> Vector2:
        if isinstance(x, Vector2):
            self.x += x.x
            self.y += x.y
        else:
            self.x += x
            self.y += y if y is not None else 0.0
        return self

    def subtract(self, x: Vector2 | float, y: float | None = None) -> Vector2:
        if isinstance(x, Vector2):
            self.x -= x.x
            self.y -= x.y
        else:
            self.x -= x
            self.y -= y if y is not None else 0.0
        return self

    def scale(self, factor: float) -> Vector2:
        self.x *= factor
        self.y *= factor
        return self

    def divide(self, factor: float) -> Vector2:
        self.x /= factor
        self.y /= factor
        return self

    def normalize(self) -> Vector2:
        """Scale to unit length. A zero vector raises ZeroDivisionError."""
        return self.divide(self.magnitude())

    def rotate(self, rads: float) -> Vector2:
        cos_r = math.cos(rads)
        sin_r = math.sin(rads)
        self.x, self.y = (
            self.x * cos_r - self.y * sin_r,
            self.x * sin_r + self.y * cos_r,
        )
        return self

    def set_heading(self, rads: float) -> Vector2:
        """Rotate so that ``heading()`` becomes ``rads``, keeping the length."""
        return self.rotate(rads - self.heading())

    # -- Queries --

    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def squared_magnitude(self) -> float:
        return self.x * self.x + self.y * self.y

    def heading(self) -> float:
        """Angle of the vector in [0, 2*pi)."""
        return (math.atan2(self.y, self.x) + TWO_PI) % TWO_PI

    def dot(self, other: Vector2) -> float:
        return self.x * other.x + self.y * other.y

    def distance_to(self, other: Vector2) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    # -- Pure variants --

    def copy(self) -> Vector2:
        return Vector2(self.x, self.y)

    def normalized(self) -> Vector2:
        return self.copy().normalize()

    def rotated(self, rads: float) -> Vector2:
        return self.copy().rotate(rads)

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Vector2:
        return Vector2(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, factor: float) -> Vector2:
        return Vector2(self.x / factor, self.y / factor)

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
