#!/usr/bin/env python3
"""Render a visibility scene to a PNG.

Usage (from the repo root):
    python scripts/render_scene.py                              # bundled demo -> visibility.png
    python scripts/render_scene.py fovcast/scenes/demo.json -o out.png --debug
    python scripts/render_scene.py --face 600 100 --fov 2.0 --radius 300
    python scripts/render_scene.py --random 6 --seed 7          # add random obstacles
"""

import argparse
import logging
import random
import sys
from pathlib import Path

from PIL import Image, ImageDraw

# Add the repo root to path
SCRIPT_DIR = Path(__file__).resolve().parent
ROOT_DIR = SCRIPT_DIR.parent
sys.path.insert(0, str(ROOT_DIR))

from fovcast.light import LightSource  # noqa: E402
from fovcast.obstacle import Obstacle  # noqa: E402
from fovcast.records import RayKind  # noqa: E402
from fovcast.scene_io import demo_scene_path, load_scene  # noqa: E402
from fovcast.vector import Vector2  # noqa: E402

BACKGROUND = (255, 255, 255)
OBSTACLE_FILL = (100, 100, 100)
OBSTACLE_LINE = (0, 0, 0)
MARKER_FILL = (255, 255, 0)
KIND_COLORS = {
    RayKind.REGULAR: (255, 0, 0),
    RayKind.LINE_INTERSECTION: (0, 160, 0),
    RayKind.PERIMETER_INTERSECTION: (0, 170, 220),
    RayKind.PERIMETER_FILL: (150, 150, 150),
}


def random_obstacles(
    count: int, width: int, height: int, rng: random.Random
) -> list[Obstacle]:
    """Alternate rotated rectangles and jittered polygons across the canvas."""
    obstacles = []
    for i in range(count):
        pos = Vector2(rng.uniform(0, width), rng.uniform(0, height))
        if i % 2 == 0:
            obstacles.append(
                Obstacle.rectangle(
                    pos,
                    rng.uniform(30, 120),
                    rng.uniform(30, 120),
                    rotation=rng.uniform(0, 3.14159),
                )
            )
        else:
            obstacles.append(
                Obstacle.random_polygon(
                    pos, rng.uniform(30, 80), rng.randint(5, 9), 20, rng=rng
                )
            )
    return obstacles


def _draw_marker(draw: ImageDraw.ImageDraw, light: LightSource) -> None:
    """Small triangle pointing along the light's heading."""
    heading = light.caster.heading
    pos = light.position
    front = pos + Vector2.from_heading(heading, 10)
    left = pos + Vector2.from_heading(heading + 2.0944, 6)
    right = pos + Vector2.from_heading(heading - 2.0944, 6)
    draw.polygon(
        [front.as_tuple(), left.as_tuple(), right.as_tuple()],
        fill=MARKER_FILL,
        outline=OBSTACLE_LINE,
    )


def _draw_debug(
    draw: ImageDraw.ImageDraw, light: LightSource, obstacles: list[Obstacle]
) -> None:
    caster = light.caster
    pos = caster.position
    r = caster.radius
    draw.ellipse(
        [pos.x - r, pos.y - r, pos.x + r, pos.y + r], outline=OBSTACLE_LINE
    )
    for angle in (caster.fov_start, caster.fov_end):
        edge = pos + Vector2.from_heading(angle, r)
        draw.line([pos.as_tuple(), edge.as_tuple()], fill=OBSTACLE_LINE)
    for result in caster.cast(obstacles):
        p = result.resolve(pos, r)
        color = KIND_COLORS[result.kind]
        draw.ellipse([p.x - 2, p.y - 2, p.x + 2, p.y + 2], fill=color)


def render(
    light: LightSource,
    obstacles: list[Obstacle],
    size: tuple[int, int],
    debug: bool = False,
) -> Image.Image:
    img = Image.new("RGBA", size, BACKGROUND)
    draw = ImageDraw.Draw(img)

    for obstacle in obstacles:
        pts = [v.as_tuple() for v in obstacle.vertices]
        if obstacle.closed:
            draw.polygon(pts, fill=OBSTACLE_FILL)
        else:
            draw.line(pts, fill=OBSTACLE_LINE, width=1)

    # Lit fan, alpha-blended over the obstacles
    overlay = Image.new("RGBA", size, (0, 0, 0, 0))
    fan = [light.position.as_tuple()] + [p.as_tuple() for p in light.points]
    if len(fan) >= 3:
        ImageDraw.Draw(overlay).polygon(fan, fill=tuple(light.fill_colour))
    img = Image.alpha_composite(img, overlay)

    draw = ImageDraw.Draw(img)
    if debug:
        _draw_debug(draw, light, obstacles)
    _draw_marker(draw, light)
    return img.convert("RGB")


def main():
    parser = argparse.ArgumentParser(description="Render a visibility scene")
    parser.add_argument(
        "scene",
        nargs="?",
        type=Path,
        default=demo_scene_path(),
        help="Scene JSON file (default: bundled demo)",
    )
    parser.add_argument(
        "-o", "--output", type=Path, default=Path("visibility.png")
    )
    parser.add_argument(
        "--size",
        type=int,
        nargs=2,
        default=(800, 600),
        metavar=("W", "H"),
        help="Image size in pixels (default: 800 600)",
    )
    parser.add_argument(
        "--face",
        type=float,
        nargs=2,
        metavar=("X", "Y"),
        help="Turn the light towards this point",
    )
    parser.add_argument("--fov", type=float, help="Cone angle in radians")
    parser.add_argument("--radius", type=float, help="View radius")
    parser.add_argument(
        "--random",
        type=int,
        default=0,
        help="Number of random obstacles to add (default: 0)",
    )
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Draw the view circle, cone edges and raw boundary points",
    )
    parser.add_argument(
        "--python-cast",
        action="store_true",
        help="Cast rays one at a time instead of as a numpy batch",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        scene = load_scene(args.scene)
    except (OSError, ValueError) as e:
        print(f"Error: cannot load {args.scene}: {e}", file=sys.stderr)
        sys.exit(1)

    light = scene.light.make_light(vectorized=not args.python_cast)
    try:
        if args.radius is not None:
            light.set_radius(args.radius)
        if args.fov is not None:
            light.set_fov(args.fov)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if args.face is not None:
        light.face_towards(Vector2(*args.face))

    obstacles = scene.build_obstacles()
    if args.random:
        width, height = args.size
        obstacles += random_obstacles(
            args.random, width, height, random.Random(args.seed)
        )

    points = light.update(obstacles)
    img = render(light, obstacles, tuple(args.size), debug=args.debug)
    img.save(args.output)

    print(f"Obstacles:      {len(obstacles)}")
    print(f"Boundary points: {len(points)}")
    print(f"Lit area:       {light.lit_area():.1f}")
    print(f"Coverage:       {light.coverage_ratio() * 100:.1f}%")
    print(f"Wrote {args.output}")


if __name__ == "__main__":
    main()
