"""Planes and view frustums."""
from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field

Vec3 = tuple[float, float, float]


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return sum(x * y for x, y in zip(a, b))


@dataclass
class Plane:
    """Points p with dot(normal, p) == distance."""

    normal: Vec3 = (0.0, 1.0, 0.0)
    distance: float = 0.0

    @classmethod
    def from_normal_and_point(cls, normal: Sequence[float], point: Sequence[float]) -> "Plane":
        """Plane through point; the normal is normalized first."""
        length = math.hypot(*normal)
        if length == 0.0:
            raise ValueError("plane normal must not be zero")
        unit = tuple(float(c) / length for c in normal)
        return cls(unit, _dot(unit, point))  # type: ignore[arg-type]

    def signed_distance(self, point: Sequence[float]) -> float:
        """Positive on the side the normal points to."""
        return _dot(self.normal, point) - self.distance


@dataclass
class Frustum:
    top_plane: Plane = field(default_factory=Plane)
    bottom_plane: Plane = field(default_factory=Plane)
    right_plane: Plane = field(default_factory=Plane)
    left_plane: Plane = field(default_factory=Plane)
    far_plane: Plane = field(default_factory=Plane)
    near_plane: Plane = field(default_factory=Plane)