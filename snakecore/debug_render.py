"""Queued debug primitives drawn over a frame."""
from __future__ import annotations

from dataclasses import dataclass, field

Vec3 = tuple[float, float, float]
Vec4 = tuple[float, float, float, float]


@dataclass(frozen=True)
class Line:
    colour: Vec4
    p0: Vec3
    p1: Vec3


@dataclass(frozen=True)
class Sphere:
    colour: Vec4
    pos: Vec3
    r: float


@dataclass
class DebugRenderQueue:
    """Debug lines and spheres waiting to be drawn, in queue order."""

    lines: list[Line] = field(default_factory=list)
    spheres: list[Sphere] = field(default_factory=list)

    def queue_line(self, pos0: Vec3, pos1: Vec3, colour: Vec4) -> None:
        self.lines.append(Line(colour, pos0, pos1))

    def clear(self) -> None:
        self.lines.clear()
        self.spheres.clear()