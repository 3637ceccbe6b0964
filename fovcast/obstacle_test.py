"""Tests for Segment and Obstacle."""

import math
import random

import pytest

from fovcast.obstacle import Obstacle
from fovcast.segment import Segment
from fovcast.vector import Vector2

V = Vector2


class TestSegment:
    def test_derived_fields(self):
        seg = Segment(V(1, 1), V(4, 5))
        assert seg.length == pytest.approx(5.0)
        assert seg.direction.x == pytest.approx(0.6)
        assert seg.direction.y == pytest.approx(0.8)

    def test_zero_length_rejected(self):
        with pytest.raises(ValueError):
            Segment(V(2, 2), V(2, 2))

    def test_endpoints_are_copied(self):
        start = V(0, 0)
        seg = Segment(start, V(10, 0))
        start.add(5, 5)
        assert seg.start == V(0, 0)
        seg.end.add(1, 1)
        assert seg.end == V(10, 0)

    def test_raycast_tags_segment(self):
        seg = Segment(V(5, -5), V(5, 5))
        hit = seg.raycast(V(0, 0), V(1, 0))
        assert hit is not None
        assert hit.segment is seg
        assert hit.ray_scalar == pytest.approx(5.0)

    def test_raycast_miss(self):
        seg = Segment(V(5, 1), V(5, 5))
        assert seg.raycast(V(0, 0), V(1, 0)) is None

    def test_intersects(self):
        a = Segment(V(0, 0), V(10, 10))
        b = Segment(V(0, 10), V(10, 0))
        p = a.intersects(b)
        assert p.x == pytest.approx(5.0)
        assert p.y == pytest.approx(5.0)
        assert a.intersects(Segment(V(20, 0), V(30, 5))) is None


class TestObstacle:
    def test_open_vertices_include_last_end(self):
        obs = Obstacle.from_points([(0, 0), (10, 0), (10, 10)])
        assert not obs.closed
        assert len(obs.segments) == 2
        assert obs.vertices == (V(0, 0), V(10, 0), V(10, 10))

    def test_closed_vertices(self):
        obs = Obstacle.from_points([(0, 0), (10, 0), (10, 10)], closed=True)
        assert obs.closed
        assert len(obs.segments) == 3
        assert obs.vertices == (V(0, 0), V(10, 0), V(10, 10))

    def test_closed_must_chain(self):
        segs = [Segment(V(0, 0), V(1, 0)), Segment(V(2, 0), V(2, 1))]
        with pytest.raises(ValueError):
            Obstacle(segs, closed=True)

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            Obstacle([])
        with pytest.raises(ValueError):
            Obstacle.from_points([(1, 1)])

    def test_vertices_are_read_only_copies(self):
        obs = Obstacle.from_points([(0, 0), (10, 0)])
        obs.vertices[0].add(3, 3)
        assert obs.vertices[0] == V(0, 0)

    def test_raycast_nearest(self):
        # Ray along +x crosses the square's left edge first
        square = Obstacle.rectangle(V(10, 0), 4, 4)
        hit = square.raycast(V(0, 0), V(1, 0))
        assert hit is not None
        assert hit.point.x == pytest.approx(8.0)
        assert hit.ray_scalar == pytest.approx(8.0)
        assert hit.segment in square.segments

    def test_raycast_miss(self):
        square = Obstacle.rectangle(V(10, 0), 4, 4)
        assert square.raycast(V(0, 0), V(-1, 0)) is None
        assert square.raycast(V(0, 0), V(0, 1)) is None


class TestFactories:
    def test_rectangle_centred(self):
        rect = Obstacle.rectangle(V(5, 5), 4, 2)
        xs = sorted(v.x for v in rect.vertices)
        ys = sorted(v.y for v in rect.vertices)
        assert xs == pytest.approx([3, 3, 7, 7])
        assert ys == pytest.approx([4, 4, 6, 6])
        assert rect.closed

    def test_rectangle_corner_anchored(self):
        rect = Obstacle.rectangle(V(0, 0), 4, 2, centred=False)
        xs = sorted(v.x for v in rect.vertices)
        ys = sorted(v.y for v in rect.vertices)
        assert xs == pytest.approx([0, 0, 4, 4])
        assert ys == pytest.approx([0, 0, 2, 2])

    def test_rectangle_rotated(self):
        rect = Obstacle.rectangle(V(0, 0), 2, 2, rotation=math.pi / 4)
        for v in rect.vertices:
            assert v.magnitude() == pytest.approx(math.sqrt(2))
        # A 45 degree square has its corners on the axes
        assert max(v.x for v in rect.vertices) == pytest.approx(math.sqrt(2))

    def test_random_polygon_radii(self):
        center = V(100, 100)
        poly = Obstacle.random_polygon(center, 50, 8, 10, rng=random.Random(3))
        assert poly.closed
        assert len(poly.vertices) == 8
        for v in poly.vertices:
            assert 45 - 1e-9 <= v.distance_to(center) <= 55 + 1e-9

    def test_random_polygon_reproducible(self):
        a = Obstacle.random_polygon(V(0, 0), 10, 6, 4, rng=random.Random(42))
        b = Obstacle.random_polygon(V(0, 0), 10, 6, 4, rng=random.Random(42))
        assert a.vertices == b.vertices

    def test_random_polygon_too_few_vertices(self):
        with pytest.raises(ValueError):
            Obstacle.random_polygon(V(0, 0), 10, 2, 0)
