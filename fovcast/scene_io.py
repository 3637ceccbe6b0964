"""Scene configuration: light parameters and obstacles as JSON.

A scene file looks like::

    {
      "light": {"x": 400, "y": 300, "radius": 200,
                "heading": 5.4978, "fov": 1.5708, "resolution": 0.01},
      "obstacles": [
        {"points": [[10, 10], [60, 10], [60, 40]], "closed": true},
        {"points": [[100, 200], [300, 250]]}
      ]
    }

Angles are radians. ``heading``, ``fov``, ``resolution``, ``fill_colour``
and ``closed`` are optional. Used by ``scripts/render_scene.py`` and
``scripts/bench_visibility.py``; the bundled demo ships inside the package in ``fovcast/scenes/``.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path

from .light import DEFAULT_FILL_COLOUR, LightSource
from .obstacle import Obstacle
from .vector import Vector2

logger = logging.getLogger(__name__)

_SCENES_DIR = Path(__file__).parent / "scenes"


def demo_scene_path() -> Path:
    """Return the path to the bundled demo scene."""
    return _SCENES_DIR / "demo.json"


@dataclass
class LightParams:
    x: float
    y: float
    radius: float
    heading: float = 0.0
    fov: float = math.pi / 2
    resolution: float = 0.01
    fill_colour: tuple[int, int, int, int] = DEFAULT_FILL_COLOUR

    @staticmethod
    def from_dict(d: dict) -> LightParams:
        try:
            return LightParams(
                x=float(d["x"]),
                y=float(d["y"]),
                radius=float(d["radius"]),
                heading=float(d.get("heading", 0.0)),
                fov=float(d.get("fov", math.pi / 2)),
                resolution=float(d.get("resolution", 0.01)),
                fill_colour=tuple(d.get("fill_colour", DEFAULT_FILL_COLOUR)),
            )
        except KeyError as e:
            raise ValueError(f"Light is missing required key {e}") from e

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "radius": self.radius,
            "heading": self.heading,
            "fov": self.fov,
            "resolution": self.resolution,
            "fill_colour": list(self.fill_colour),
        }

    def make_light(self, vectorized: bool = True) -> LightSource:
        return LightSource(
            Vector2(self.x, self.y),
            self.radius,
            self.heading,
            self.fov,
            self.resolution,
            fill_colour=self.fill_colour,
            vectorized=vectorized,
        )


@dataclass
class ObstacleSpec:
    points: list[tuple[float, float]]
    closed: bool = False

    @staticmethod
    def from_dict(d: dict) -> ObstacleSpec:
        raw = d.get("points")
        if not raw or len(raw) < 2:
            raise ValueError(f"Obstacle needs at least two points, got {raw!r}")
        return ObstacleSpec(
            points=[(float(p[0]), float(p[1])) for p in raw],
            closed=bool(d.get("closed", False)),
        )

    @staticmethod
    def from_obstacle(obstacle: Obstacle) -> ObstacleSpec:
        return ObstacleSpec(
            points=[v.as_tuple() for v in obstacle.vertices],
            closed=obstacle.closed,
        )

    def to_dict(self) -> dict:
        d: dict = {"points": [list(p) for p in self.points]}
        if self.closed:
            d["closed"] = True
        return d

    def build(self) -> Obstacle:
        return Obstacle.from_points(self.points, closed=self.closed)


@dataclass
class Scene:
    light: LightParams
    obstacles: list[ObstacleSpec] = field(default_factory=list)

    @staticmethod
    def from_dict(d: dict) -> Scene:
        if "light" not in d:
            raise ValueError("Scene is missing the 'light' section")
        return Scene(
            light=LightParams.from_dict(d["light"]),
            obstacles=[ObstacleSpec.from_dict(o) for o in d.get("obstacles", [])],
        )

    def to_dict(self) -> dict:
        return {
            "light": self.light.to_dict(),
            "obstacles": [o.to_dict() for o in self.obstacles],
        }

    def build_obstacles(self) -> list[Obstacle]:
        return [o.build() for o in self.obstacles]


def load_scene_dict(path: Path) -> dict:
    with open(path) as f:
        return json.load(f)


def load_scene(path: Path) -> Scene:
    """Load a JSON scene file into a typed ``Scene``."""
    scene = Scene.from_dict(load_scene_dict(path))
    logger.info("Loaded scene %s with %d obstacles", path, len(scene.obstacles))
    return scene


def save_scene(scene: Scene, path: Path) -> None:
    """Write a scene to a JSON file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(scene.to_dict(), f, indent=2)
        f.write("\n")
    logger.info("Saved scene to %s", path)
