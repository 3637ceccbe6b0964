"""Stateless 2D geometry used by the visibility sweep.

Every function here treats degenerate input (zero-length directions,
parallel lines, a line that misses a circle) as "no intersection" and
returns ``None`` or an empty list. Degeneracy is routine in a scene full of
axis-aligned walls, so nothing in this module raises for it.

Tolerances:

  ANGLE_TOLERANCE     Angular residues smaller than this (at either end of
                      the [0, 2*pi) range) snap to exactly zero, so that a
                      ray aimed at the FOV start never sorts to the far end
                      of the sweep because of floating-point wraparound.
  RAY_TOLERANCE       Case split in ``ray_intersection``: when the second
                      direction's x component is below this, its closed form
                      would divide by noise, so the vertical formula is used.
  RAYCAST_TOLERANCE   Slack on the segment parameter in ``raycast`` so a ray
                      aimed exactly at a vertex still registers the hit.
  PARALLEL_EPSILON    Cross products below this are parallel in the numpy
                      batch path.

``raycast_many`` is the numpy-vectorized counterpart of ``raycast``: all
rays are tested against all segments in a single (R x S) matrix operation
instead of an O(R*S) Python loop.
"""

from __future__ import annotations

import math

import numpy as np

from .records import RaycastHit
from .vector import TWO_PI, Vector2

ANGLE_TOLERANCE = 1e-5
RAY_TOLERANCE = 1e-4
RAYCAST_TOLERANCE = 1e-3
PARALLEL_EPSILON = 1e-12

ANGLE_MODES = ("ccw", "cw", "min")


def ray_intersection(
    pos1: Vector2,
    dir1: Vector2,
    pos2: Vector2,
    dir2: Vector2,
    tolerance: float = RAY_TOLERANCE,
) -> tuple[float, float] | None:
    """Solve ``pos1 + t*dir1 == pos2 + s*dir2`` for (t, s).

    Returns None if either direction is zero or the rays are parallel.
    The scalars are signed; callers apply their own bounds.
    """
    x1, y1 = pos1.x, pos1.y
    dx1, dy1 = dir1.x, dir1.y
    x2, y2 = pos2.x, pos2.y
    dx2, dy2 = dir2.x, dir2.y

    if dx1 == 0 and dy1 == 0:
        return None
    if dx2 == 0 and dy2 == 0:
        return None
    if (
        (dx1 == 0 and dx2 == 0)
        or (dy1 == 0 and dy2 == 0)
        or (dx1 == dx2 and dy1 == dy2)
        or (dx1 == -dx2 and dy1 == -dy2)
    ):
        return None

    if abs(dx2) < tolerance:
        # Second ray is (near) vertical: x is fixed by the first ray alone.
        if dx1 == 0 or dy2 == 0:
            return None
        t = (x2 - x1) / dx1
        s = ((y1 - y2) + t * dy1) / dy2
    else:
        denom = dy1 - (dx1 / dx2) * dy2
        if denom == 0:
            return None
        t = ((y2 - y1) + (x1 - x2) * dy2 / dx2) / denom
        s = ((x1 - x2) + t * dx1) / dx2

    return t, s


def segment_intersection(
    start1: Vector2, end1: Vector2, start2: Vector2, end2: Vector2
) -> Vector2 | None:
    """Crossing point of two segments, or None if they don't cross."""
    length1 = start1.distance_to(end1)
    length2 = start2.distance_to(end2)
    if length1 == 0 or length2 == 0:
        return None
    dir1 = (end1 - start1).divide(length1)
    dir2 = (end2 - start2).divide(length2)

    scalars = ray_intersection(start1, dir1, start2, dir2)
    if scalars is None:
        return None
    t, s = scalars
    if t < 0 or s < 0 or t > length1 or s > length2:
        return None
    return start1 + dir1 * t


def raycast(
    seg_start: Vector2,
    seg_end: Vector2,
    ray_origin: Vector2,
    ray_dir: Vector2,
    tolerance: float = RAYCAST_TOLERANCE,
) -> RaycastHit | None:
    """Cast a ray against one segment.

    Accepts the hit when the segment parameter lies in
    ``[-tolerance, length + tolerance]`` and the ray parameter is
    non-negative. The ray direction is expected to be unit length, so the
    returned ``ray_scalar`` is a distance.
    """
    length = seg_start.distance_to(seg_end)
    if length == 0:
        return None
    seg_dir = (seg_end - seg_start).divide(length)

    scalars = ray_intersection(seg_start, seg_dir, ray_origin, ray_dir)
    if scalars is None:
        return None
    seg_scalar, ray_scalar = scalars
    if -tolerance <= seg_scalar <= length + tolerance and ray_scalar >= 0:
        return RaycastHit(
            point=ray_origin + ray_dir * ray_scalar,
            ray_scalar=ray_scalar,
            segment_scalar=seg_scalar,
        )
    return None


def segment_circle_intersection(
    seg_start: Vector2,
    seg_end: Vector2,
    center: Vector2,
    radius: float,
    bounds_check: bool = True,
) -> list[Vector2]:
    """Points where the line through a segment crosses a circle.

    Solves ``|seg_start + t*u - center|^2 == radius^2`` for the unit
    direction ``u``. A discriminant <= 0 (miss or tangent) yields no points.
    With ``bounds_check`` only points on the segment itself are kept.
    """
    length = seg_start.distance_to(seg_end)
    if length == 0:
        return []
    u = (seg_end - seg_start).divide(length)
    f = seg_start - center

    b = f.dot(u)
    c = f.squared_magnitude() - radius * radius
    discriminant = b * b - c
    if discriminant <= 0:
        return []

    root = math.sqrt(discriminant)
    points: list[Vector2] = []
    for t in (-b + root, -b - root):
        if bounds_check and (t < 0 or t > length):
            continue
        points.append(seg_start + u * t)
    return points


def normalize_angle(a: float) -> float:
    """Map an angle into [0, 2*pi)."""
    a %= TWO_PI
    # tiny negative inputs round up to exactly 2*pi
    return 0.0 if a >= TWO_PI else a


def _snap(diff: float) -> float:
    if diff < ANGLE_TOLERANCE or TWO_PI - diff < ANGLE_TOLERANCE:
        return 0.0
    return diff


def angle_difference(a1: float, a2: float, mode: str = "min") -> float:
    """Angular distance from ``a1`` to ``a2``.

    ``"ccw"`` is the counter-clockwise traversal needed to reach ``a2`` from
    ``a1``, ``"cw"`` the clockwise one, and ``"min"`` the smaller of the two.
    """
    a1 = normalize_angle(a1)
    a2 = normalize_angle(a2)
    ccw = _snap(normalize_angle(a2 - a1))
    cw = _snap(normalize_angle(a1 - a2))

    if mode == "ccw":
        return ccw
    if mode == "cw":
        return cw
    if mode == "min":
        return min(ccw, cw)
    raise ValueError(f"Unknown angle mode {mode!r}, expected one of {ANGLE_MODES}")


def raycast_many(
    origin: Vector2,
    directions: np.ndarray,
    segments: np.ndarray,
    tolerance: float = RAYCAST_TOLERANCE,
    ray_tolerance: float = RAY_TOLERANCE,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Nearest hit of each ray among all segments.

    Follows the same rules as ``raycast``: rays whose x component is below
    ``ray_tolerance`` are solved with the vertical formula of
    ``ray_intersection``, and the exact-parallel and axis-degenerate pairs
    it rejects are rejected here too. Elsewhere a cross-product solve is
    used, with pairs whose cross product is below ``PARALLEL_EPSILON``
    treated as parallel.

    Args:
        origin: Shared origin of every ray.
        directions: (R, 2) unit ray directions.
        segments: (S, 4) rows of ``(x1, y1, x2, y2)``.
        tolerance: Segment-parameter slack, as in ``raycast``.
        ray_tolerance: Near-vertical threshold, as in ``ray_intersection``.

    Returns:
        ``(ray_scalars, segment_indices, segment_scalars)``, each of shape
        (R,). A ray that hits nothing has scalar ``inf``, index ``-1`` and
        segment scalar ``nan``.
    """
    n_rays = len(directions)
    n_segs = len(segments)
    if n_rays == 0 or n_segs == 0:
        return (
            np.full(n_rays, np.inf),
            np.full(n_rays, -1, dtype=np.int64),
            np.full(n_rays, np.nan),
        )

    directions = np.asarray(directions, dtype=np.float64)
    segments = np.asarray(segments, dtype=np.float64)

    # Per-segment values (1, S)
    seg_vx = segments[:, 2] - segments[:, 0]
    seg_vy = segments[:, 3] - segments[:, 1]
    seg_len = np.hypot(seg_vx, seg_vy)
    has_len = seg_len > 0
    safe_len = np.where(has_len, seg_len, 1.0)
    sdx = (seg_vx / safe_len)[None, :]
    sdy = (seg_vy / safe_len)[None, :]
    w_x = (segments[:, 0] - origin.x)[None, :]
    w_y = (segments[:, 1] - origin.y)[None, :]

    # Per-ray values (R, 1)
    rdx = directions[:, 0][:, None]
    rdy = directions[:, 1][:, None]

    # Pairs ray_intersection rejects before solving, (R, S)
    degenerate = (
        ((sdx == 0) & (rdx == 0))
        | ((sdy == 0) & (rdy == 0))
        | ((sdx == rdx) & (sdy == rdy))
        | ((sdx == -rdx) & (sdy == -rdy))
        | ~has_len[None, :]
    )

    # General case: cross-product solve
    denom = rdx * sdy - rdy * sdx
    general_ok = np.abs(denom) >= PARALLEL_EPSILON
    safe_denom = np.where(general_ok, denom, 1.0)
    t = (w_x * sdy - w_y * sdx) / safe_denom
    u = (w_x * rdy - w_y * rdx) / safe_denom

    # Near-vertical rays: the segment alone fixes the x coordinate
    vertical = np.abs(rdx) < ray_tolerance
    vertical_ok = (sdx != 0) & (rdy != 0)
    u_vert = -w_x / np.where(sdx != 0, sdx, 1.0)
    t_vert = (w_y + u_vert * sdy) / np.where(rdy != 0, rdy, 1.0)

    t = np.where(vertical, t_vert, t)
    u = np.where(vertical, u_vert, u)
    solvable = np.where(vertical, vertical_ok, general_ok) & ~degenerate

    valid = (
        solvable
        & (t >= 0)
        & (u >= -tolerance)
        & (u <= seg_len[None, :] + tolerance)
    )
    t_valid = np.where(valid, t, np.inf)

    nearest = np.argmin(t_valid, axis=1)
    rows = np.arange(n_rays)
    ray_scalars = t_valid[rows, nearest]
    hit = np.isfinite(ray_scalars)
    segment_indices = np.where(hit, nearest, -1)
    segment_scalars = np.where(hit, u[rows, nearest], np.nan)
    return ray_scalars, segment_indices, segment_scalars
