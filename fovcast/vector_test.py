"""Tests for the Vector2 primitive."""

import math

import pytest

from fovcast.vector import Vector2


class TestInPlace:
    def test_add_vector(self):
        v = Vector2(1, 2)
        result = v.add(Vector2(3, 4))
        assert result is v
        assert v == Vector2(4, 6)

    def test_add_raw(self):
        v = Vector2(1, 2).add(-1, 5)
        assert v == Vector2(0, 7)

    def test_subtract(self):
        assert Vector2(5, 5).subtract(Vector2(2, 1)) == Vector2(3, 4)
        assert Vector2(5, 5).subtract(1, 1) == Vector2(4, 4)

    def test_scale_and_divide(self):
        v = Vector2(2, -3).scale(2)
        assert v == Vector2(4, -6)
        v.divide(4)
        assert v == Vector2(1, -1.5)

    def test_normalize(self):
        v = Vector2(3, 4).normalize()
        assert v.x == pytest.approx(0.6)
        assert v.y == pytest.approx(0.8)
        assert v.magnitude() == pytest.approx(1.0)

    def test_normalize_zero_raises(self):
        with pytest.raises(ZeroDivisionError):
            Vector2(0, 0).normalize()

    def test_rotate_quarter_turn(self):
        v = Vector2(1, 0).rotate(math.pi / 2)
        assert v.x == pytest.approx(0.0, abs=1e-12)
        assert v.y == pytest.approx(1.0)

    def test_set_heading_keeps_length(self):
        v = Vector2(3, 4).set_heading(math.pi)
        assert v.heading() == pytest.approx(math.pi)
        assert v.magnitude() == pytest.approx(5.0)


class TestQueries:
    def test_magnitudes(self):
        v = Vector2(3, 4)
        assert v.magnitude() == pytest.approx(5.0)
        assert v.squared_magnitude() == pytest.approx(25.0)

    def test_heading_range(self):
        assert Vector2(1, 0).heading() == pytest.approx(0.0)
        assert Vector2(0, 1).heading() == pytest.approx(math.pi / 2)
        assert Vector2(-1, 0).heading() == pytest.approx(math.pi)
        # Negative y wraps into [0, 2pi)
        assert Vector2(0, -1).heading() == pytest.approx(3 * math.pi / 2)

    def test_dot(self):
        assert Vector2(1, 0).dot(Vector2(0, 1)) == 0
        assert Vector2(2, 3).dot(Vector2(4, -1)) == 5

    def test_distance(self):
        assert Vector2(1, 1).distance_to(Vector2(4, 5)) == pytest.approx(5.0)


class TestPure:
    def test_operators_do_not_mutate(self):
        a = Vector2(1, 2)
        b = Vector2(3, 4)
        assert a + b == Vector2(4, 6)
        assert b - a == Vector2(2, 2)
        assert a * 3 == Vector2(3, 6)
        assert 3 * a == Vector2(3, 6)
        assert b / 2 == Vector2(1.5, 2)
        assert -a == Vector2(-1, -2)
        assert a == Vector2(1, 2)
        assert b == Vector2(3, 4)

    def test_normalized_and_rotated_are_copies(self):
        v = Vector2(0, 2)
        n = v.normalized()
        r = v.rotated(math.pi)
        assert v == Vector2(0, 2)
        assert n == Vector2(0, 1)
        assert r.y == pytest.approx(-2.0)

    def test_from_heading(self):
        v = Vector2.from_heading(math.pi / 3, length=2)
        assert v.magnitude() == pytest.approx(2.0)
        assert v.heading() == pytest.approx(math.pi / 3)

    def test_of_copies(self):
        src = Vector2(1, 1)
        dst = Vector2.of(src)
        dst.add(1, 1)
        assert src == Vector2(1, 1)
        assert Vector2.of((2, 3)) == Vector2(2.0, 3.0)

    def test_unpack(self):
        x, y = Vector2(7, 8)
        assert (x, y) == (7, 8)
