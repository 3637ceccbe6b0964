"""Visibility polygon of a point light with a heading, cone and range.

The caster answers: standing at ``position`` and looking along ``heading``
with a cone ``fov`` radians wide, out to ``radius``, which part of the plane
is not hidden behind an obstacle? The answer is the ordered boundary of a
fan anchored at ``position``, swept from the start of the cone
(``heading - fov/2``) to its end.

The algorithm is an angular sweep, one pass per call:

  1. Candidates. Every obstacle vertex, every crossing between segments of
     *different* obstacles, and every point where a segment crosses the view
     circle. Only these bearings can change what the nearest surface is.
  2. Filtering. Candidates outside the cone or beyond the radius are
     dropped (circle crossings are only checked by angle, they sit on the
     radius by construction).
  3. Rays. One ray per cone edge; three per obstacle vertex (at the vertex
     and offset by +/- ANGLE_OFFSET, so the sweep sees both sides of an
     occluding corner); one per crossing or circle point.
  4. Sort by counter-clockwise angle from the cone start (the ray's
     ``sweep``). The cone edges are pinned to sweep 0 and ``fov``; any
     other ray outside that range is dropped.
  5. Cast. Nearest hit per ray; a hit beyond the radius counts as a miss.
     Runs either per ray through ``Obstacle.raycast`` or as one numpy batch
     (``vectorized``); both give the same boundary.
  6. Gap filling. Between consecutive results, arc points are inserted
     every ``resolution`` radians when either neighbour missed, or when both
     are circle points on different segments (the arc between them would
     otherwise be drawn as a chord across unlit space).
  7. Every result becomes a concrete point: its hit, or the circle point
     at its bearing.

Each call is a pure function of the caster's current parameters and the
obstacle snapshot; nothing is cached between calls.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Sequence

import numpy as np

from .geometry import (
    angle_difference,
    normalize_angle,
    raycast_many,
    segment_circle_intersection,
)
from .obstacle import Obstacle
from .records import Candidate, CastResult, RaycastHit, Ray, RayKind
from .segment import Segment
from .vector import TWO_PI, Vector2

logger = logging.getLogger(__name__)

ANGLE_OFFSET = 1e-4  # radians between a vertex ray and its two siblings
POINT_EPSILON = 1e-9  # consecutive boundary points closer than this merge


class VisibilityCaster:
    def __init__(
        self,
        position: Vector2,
        radius: float,
        heading: float,
        fov: float,
        resolution: float,
        vectorized: bool = True,
    ) -> None:
        self._position = Vector2.of(position)
        self.radius = radius
        self.heading = heading
        self.fov = fov
        self.resolution = resolution
        self.vectorized = vectorized

    # -- Live parameters --

    @property
    def position(self) -> Vector2:
        return self._position.copy()

    @position.setter
    def position(self, value: Vector2) -> None:
        self._position = Vector2.of(value)

    @property
    def radius(self) -> float:
        return self._radius

    @radius.setter
    def radius(self, value: float) -> None:
        if not value > 0:
            raise ValueError(f"radius must be > 0, got {value}")
        self._radius = float(value)

    @property
    def heading(self) -> float:
        return self._heading

    @heading.setter
    def heading(self, value: float) -> None:
        self._heading = normalize_angle(value)

    @property
    def fov(self) -> float:
        """Full cone angle in radians, at most one turn."""
        return self._fov

    @fov.setter
    def fov(self, value: float) -> None:
        if not value >= 0:
            raise ValueError(f"fov must be >= 0, got {value}")
        self._fov = min(TWO_PI, float(value))

    @property
    def resolution(self) -> float:
        """Angular step in radians between perimeter-fill points."""
        return self._resolution

    @resolution.setter
    def resolution(self, value: float) -> None:
        if not value > 0:
            raise ValueError(f"resolution must be > 0, got {value}")
        self._resolution = float(value)

    @property
    def fov_start(self) -> float:
        return self._heading - self._fov / 2

    @property
    def fov_end(self) -> float:
        return self._heading + self._fov / 2

    def face_towards(self, point: Vector2) -> None:
        """Point the heading at ``point``; a no-op when standing on it."""
        offset = Vector2.of(point) - self._position
        if offset.squared_magnitude() == 0:
            return
        self.heading = offset.heading()

    def move(self, delta: Vector2) -> None:
        self._position.add(Vector2.of(delta))

    # -- Sweep steps --

    def generate_candidates(self, obstacles: Iterable[Obstacle]) -> list[Candidate]:
        """Collect obstacle vertices, cross-obstacle crossings and circle points.

        The result can be passed to ``cast``/``compute_visibility`` of any
        caster that shares this caster's position and radius, which saves
        regenerating it when several lights look at the same scene.
        """
        vertices: list[Candidate] = []
        crossings: list[Candidate] = []
        perimeter: list[Candidate] = []

        # (group, segment): group is the owning obstacle's index, used only
        # to skip crossings between siblings
        tagged: list[tuple[int, Segment]] = []
        for group, obstacle in enumerate(obstacles):
            vertices.extend(
                Candidate(v, RayKind.REGULAR) for v in obstacle.vertices
            )
            tagged.extend((group, seg) for seg in obstacle.segments)

        n = len(tagged)
        for i in range(n):
            group, seg = tagged[i]
            for point in segment_circle_intersection(
                seg.start, seg.end, self._position, self._radius, True
            ):
                perimeter.append(
                    Candidate(point, RayKind.PERIMETER_INTERSECTION, seg)
                )
            for j in range(i + 1, n):
                other_group, other = tagged[j]
                if group == other_group:
                    continue
                point = seg.intersects(other)
                if point is not None:
                    crossings.append(
                        Candidate(point, RayKind.LINE_INTERSECTION)
                    )

        logger.debug(
            "Generated %d vertex, %d crossing, %d perimeter candidates",
            len(vertices),
            len(crossings),
            len(perimeter),
        )
        return vertices + crossings + perimeter

    def filter_candidates(self, candidates: Iterable[Candidate]) -> list[Candidate]:
        half_fov = self._fov / 2
        kept: list[Candidate] = []
        for candidate in candidates:
            offset = candidate.point - self._position
            if angle_difference(self._heading, offset.heading()) > half_fov:
                continue
            if (
                candidate.kind is not RayKind.PERIMETER_INTERSECTION
                and offset.magnitude() > self._radius
            ):
                continue
            kept.append(candidate)
        return kept

    def _sweep(self, heading: float) -> float:
        return angle_difference(self.fov_start, heading, "ccw")

    def _ray_at(
        self, heading: float, kind: RayKind, sweep: float | None = None
    ) -> Ray:
        return Ray(
            heading=normalize_angle(heading),
            direction=Vector2.from_heading(heading),
            kind=kind,
            sweep=self._sweep(heading) if sweep is None else sweep,
        )

    def build_rays(self, candidates: Iterable[Candidate]) -> list[Ray]:
        rays = [
            self._ray_at(self.fov_start, RayKind.REGULAR, sweep=0.0),
            self._ray_at(self.fov_end, RayKind.REGULAR, sweep=self._fov),
        ]
        for candidate in candidates:
            offset = candidate.point - self._position
            if offset.squared_magnitude() == 0:
                continue  # no bearing to aim at
            if candidate.kind is RayKind.REGULAR:
                angle = offset.heading()
                for delta in (-ANGLE_OFFSET, 0.0, ANGLE_OFFSET):
                    rays.append(self._ray_at(angle + delta, RayKind.REGULAR))
            else:
                direction = offset.normalize()
                heading = direction.heading()
                rays.append(
                    Ray(
                        heading=heading,
                        direction=direction,
                        kind=candidate.kind,
                        sweep=self._sweep(heading),
                        source=candidate.segment,
                    )
                )
        return rays

    def sort_rays(self, rays: Iterable[Ray]) -> list[Ray]:
        """Order rays by sweep angle, dropping any that fall past the cone end."""
        kept = [ray for ray in rays if ray.sweep <= self._fov]
        kept.sort(key=lambda ray: ray.sweep)
        return kept

    def _nearest_hit(
        self, ray: Ray, obstacles: Sequence[Obstacle]
    ) -> RaycastHit | None:
        closest: RaycastHit | None = None
        for obstacle in obstacles:
            hit = obstacle.raycast(self._position, ray.direction)
            if hit is not None and (
                closest is None or hit.ray_scalar < closest.ray_scalar
            ):
                closest = hit
        return closest

    def _nearest_hits_batch(
        self, rays: Sequence[Ray], obstacles: Sequence[Obstacle]
    ) -> list[RaycastHit | None]:
        segments = [seg for obstacle in obstacles for seg in obstacle.segments]
        if not segments or not rays:
            return [None] * len(rays)
        seg_arr = np.array([seg.as_tuple() for seg in segments], dtype=np.float64)
        dir_arr = np.array(
            [ray.direction.as_tuple() for ray in rays], dtype=np.float64
        )
        ray_scalars, indices, seg_scalars = raycast_many(
            self._position, dir_arr, seg_arr
        )

        hits: list[RaycastHit | None] = []
        for ray, t, index, u in zip(
            rays, ray_scalars.tolist(), indices.tolist(), seg_scalars.tolist()
        ):
            if index < 0:
                hits.append(None)
                continue
            hits.append(
                RaycastHit(
                    point=self._position + ray.direction * t,
                    ray_scalar=t,
                    segment_scalar=u,
                    segment=segments[index],
                )
            )
        return hits

    def _finish_cast(self, ray: Ray, hit: RaycastHit | None) -> CastResult:
        if hit is not None and hit.ray_scalar > self._radius:
            hit = None
        if hit is None and ray.kind is RayKind.PERIMETER_INTERSECTION:
            # Aimed at a circle crossing but rounding put the hit just past
            # the radius: land on the circle, on the segment that made it.
            hit = RaycastHit(
                point=self._position + ray.direction * self._radius,
                ray_scalar=self._radius,
                segment_scalar=None,
                segment=ray.source,
            )
        return CastResult(ray, hit)

    def cast_ray(self, ray: Ray, obstacles: Sequence[Obstacle]) -> CastResult:
        """Nearest hit for one ray, treating hits past the radius as misses."""
        return self._finish_cast(ray, self._nearest_hit(ray, obstacles))

    def fill_perimeter(
        self, start_angle: float, end_angle: float, span: float | None = None
    ) -> list[CastResult]:
        """Arc points on the view circle from ``start_angle`` to ``end_angle``.

        Points are ``resolution`` apart, counter-clockwise, with both ends
        included so radial shadow edges meet the arc. ``span`` overrides the
        counter-clockwise distance between the angles; the sweep passes it
        so a full-turn arc isn't mistaken for an empty one.
        """
        if span is None:
            span = angle_difference(start_angle, end_angle, "ccw")
        if span <= 0:
            return []
        start_sweep = self._sweep(start_angle)
        steps = math.ceil(span / self._resolution)
        filled: list[CastResult] = []
        for k in range(steps + 1):
            offset = min(k * self._resolution, span)
            theta = start_angle + offset
            ray = self._ray_at(
                theta, RayKind.PERIMETER_FILL, sweep=start_sweep + offset
            )
            filled.append(
                CastResult(
                    ray,
                    RaycastHit(
                        point=self._position + ray.direction * self._radius,
                        ray_scalar=self._radius,
                        segment_scalar=None,
                    ),
                )
            )
        return filled

    @staticmethod
    def _needs_fill(previous: CastResult, current: CastResult) -> bool:
        if previous.hit is None or current.hit is None:
            return True
        return (
            previous.kind is RayKind.PERIMETER_INTERSECTION
            and current.kind is RayKind.PERIMETER_INTERSECTION
            and previous.hit.segment is not current.hit.segment
        )

    def cast_rays(
        self, rays: Sequence[Ray], obstacles: Sequence[Obstacle]
    ) -> list[CastResult]:
        """Cast sorted rays and stitch them, filling arcs where needed."""
        if self.vectorized:
            hits = self._nearest_hits_batch(rays, obstacles)
        else:
            hits = [self._nearest_hit(ray, obstacles) for ray in rays]
        casts = [self._finish_cast(ray, hit) for ray, hit in zip(rays, hits)]

        results: list[CastResult] = []
        previous: CastResult | None = None
        for cast in casts:
            if previous is not None and self._needs_fill(previous, cast):
                results.extend(
                    self.fill_perimeter(
                        previous.heading,
                        cast.heading,
                        span=cast.ray.sweep - previous.ray.sweep,
                    )
                )
            results.append(cast)
            previous = cast
        return results

    # -- Entry points --

    def cast(
        self,
        obstacles: Iterable[Obstacle],
        candidates: Iterable[Candidate] | None = None,
    ) -> list[CastResult]:
        """Run steps 1-6 and return every boundary result with its ray.

        This is the debugging view of ``compute_visibility``: each result
        says which kind of ray produced it and whether it struck anything.
        """
        snapshot = list(obstacles)
        if candidates is None:
            candidates = self.generate_candidates(snapshot)
        kept = self.filter_candidates(candidates)
        rays = self.sort_rays(self.build_rays(kept))
        results = self.cast_rays(rays, snapshot)
        logger.debug(
            "Cast %d rays from %d candidates over %d obstacles: %d results",
            len(rays),
            len(kept),
            len(snapshot),
            len(results),
        )
        return results

    def compute_visibility(
        self,
        obstacles: Iterable[Obstacle],
        candidates: Iterable[Candidate] | None = None,
    ) -> list[Vector2]:
        """Ordered boundary of the visible region, from cone start to end.

        Render as a fan: ``position`` followed by these points, closed.
        """
        points: list[Vector2] = []
        for result in self.cast(obstacles, candidates):
            point = result.resolve(self._position, self._radius)
            if points:
                last = points[-1]
                if (
                    abs(last.x - point.x) <= POINT_EPSILON
                    and abs(last.y - point.y) <= POINT_EPSILON
                ):
                    continue
            points.append(point)
        return points

    def __repr__(self) -> str:
        return (
            f"VisibilityCaster(position=({self._position.x}, "
            f"{self._position.y}), radius={self._radius}, "
            f"heading={self._heading:.4f}, fov={self._fov:.4f}, "
            f"resolution={self._resolution})"
        )
