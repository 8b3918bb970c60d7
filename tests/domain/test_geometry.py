"""Tests for point helpers — sphere scatter, orbit placement, distance."""

from __future__ import annotations

import math
import random

import pytest

from mindspace.domain.geometry import Point3, distance, orbit_point, random_point_in_sphere

ORIGIN = Point3(x=0, y=0, z=0)


class TestRandomPointInSphere:
    def test_points_stay_inside_radius(self) -> None:
        rng = random.Random(7)
        for _ in range(500):
            p = random_point_in_sphere(15.0, rng)
            assert distance(ORIGIN, p) <= 15.0 + 1e-9

    def test_seeded_rng_is_deterministic(self) -> None:
        a = random_point_in_sphere(10.0, random.Random(42))
        b = random_point_in_sphere(10.0, random.Random(42))
        assert a == b

    def test_uniform_by_volume(self) -> None:
        """Half the volume lies beyond r * 0.5 ** (1/3); about half the points should too."""
        rng = random.Random(3)
        cutoff = 10.0 * 0.5 ** (1 / 3)
        outside = sum(
            distance(ORIGIN, random_point_in_sphere(10.0, rng)) > cutoff for _ in range(4000)
        )
        assert 0.45 < outside / 4000 < 0.55

    def test_zero_radius_is_center(self) -> None:
        assert distance(ORIGIN, random_point_in_sphere(0.0, random.Random(1))) == 0.0


class TestOrbitPoint:
    def test_evenly_spaced_without_jitter(self) -> None:
        points = [orbit_point(i, 4, ORIGIN, 10.0, jitter=0.0) for i in range(4)]
        assert points[0].x == pytest.approx(10.0)
        assert points[0].z == pytest.approx(0.0)
        assert points[1].x == pytest.approx(0.0, abs=1e-9)
        assert points[1].z == pytest.approx(10.0)
        assert points[2].x == pytest.approx(-10.0)
        assert all(p.y == 0.0 for p in points)

    def test_centered_on_center(self) -> None:
        center = Point3(x=5, y=-2, z=1)
        p = orbit_point(3, 7, center, 6.0, jitter=0.0)
        assert math.hypot(p.x - center.x, p.z - center.z) == pytest.approx(6.0)
        assert p.y == pytest.approx(center.y)

    def test_jitter_bounds_y(self) -> None:
        rng = random.Random(9)
        for i in range(100):
            p = orbit_point(i, 100, ORIGIN, 8.0, jitter=1.0, rng=rng)
            assert -1.0 <= p.y < 1.0

    def test_zero_total_does_not_divide_by_zero(self) -> None:
        p = orbit_point(0, 0, ORIGIN, 8.0, jitter=0.0)
        assert p.x == pytest.approx(8.0)


class TestDistance:
    def test_pythagorean(self) -> None:
        assert distance(ORIGIN, Point3(x=2, y=3, z=6)) == pytest.approx(7.0)

    def test_symmetric(self) -> None:
        a, b = Point3(x=1, y=2, z=3), Point3(x=-4, y=0, z=9)
        assert distance(a, b) == distance(b, a)
