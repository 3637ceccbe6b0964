"""Field-of-view visibility polygons for a point light among 2D obstacles."""

from .caster import VisibilityCaster
from .light import LightSource
from .obstacle import Obstacle
from .records import CastResult, RaycastHit, RayKind
from .segment import Segment
from .vector import Vector2

__all__ = [
    "CastResult",
    "LightSource",
    "Obstacle",
    "RayKind",
    "RaycastHit",
    "Segment",
    "Vector2",
    "VisibilityCaster",
]
