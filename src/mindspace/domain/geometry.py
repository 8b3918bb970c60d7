"""Pure 3D point helpers for galaxy scatter and solar rearrangement.

No state. Every function accepts an optional ``random.Random`` so callers
(and tests) can make placement deterministic; the module-level random
source is used otherwise.
"""

from __future__ import annotations

import math
import random
from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from collections.abc import Callable

DEFAULT_ORBIT_RADIUS = 8.0


class Point3(BaseModel):
    """An immutable 3D coordinate."""

    model_config = {"frozen": True}

    x: float
    y: float
    z: float


def _uniform(rng: random.Random | None) -> Callable[[], float]:
    return rng.random if rng is not None else random.random


def random_point_in_sphere(radius: float, rng: random.Random | None = None) -> Point3:
    """Return a point uniformly distributed by volume inside a sphere.

    The radial fraction is the cube root of a uniform scalar; the direction
    uses a uniform azimuth and an inverse-cosine sampled polar angle, so
    points do not bunch up near the center or the poles.
    """
    u = _uniform(rng)
    theta = u() * math.pi * 2
    phi = math.acos(u() * 2 - 1)
    r = math.cbrt(u()) * radius
    return Point3(
        x=r * math.sin(phi) * math.cos(theta),
        y=r * math.sin(phi) * math.sin(theta),
        z=r * math.cos(phi),
    )


def orbit_point(
    index: int,
    total: int,
    center: Point3,
    radius: float = DEFAULT_ORBIT_RADIUS,
    *,
    jitter: float = 1.0,
    rng: random.Random | None = None,
) -> Point3:
    """Place item *index* of *total* evenly on a horizontal circle.

    The circle lies in the x/z plane around *center*. ``y`` gets a uniform
    offset in ``[-jitter, jitter)``; pass ``jitter=0`` for exact placement.
    """
    angle = (index / max(total, 1)) * math.pi * 2
    return Point3(
        x=center.x + math.cos(angle) * radius,
        y=center.y + (_uniform(rng)() - 0.5) * 2 * jitter,
        z=center.z + math.sin(angle) * radius,
    )


def distance(a: Point3, b: Point3) -> float:
    """Euclidean distance between two points."""
    return math.sqrt((b.x - a.x) ** 2 + (b.y - a.y) ** 2 + (b.z - a.z) ** 2)
