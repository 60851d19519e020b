"""Host-side layouts of structures shared with shaders."""
from __future__ import annotations

import struct
from dataclasses import astuple, dataclass
from enum import IntEnum
from typing import Any

from snakecore.components import Component

_PHYSICS = struct.Struct("<7f")
_INSTANCE = struct.Struct("<5I")
_GBUFFER_PC = struct.Struct("<4I2f")


def _pack(layout: struct.Struct, values: tuple, name: str) -> bytes:
    try:
        return layout.pack(*values)
    except struct.error as exc:
        raise ValueError(f"cannot pack {name}: {exc}") from None


class ParticleComputeShader(IntEnum):
    INIT = 0
    CELL_KEY_GENERATION = 1
    BITONIC_CELL_KEY_SORT = 2
    CELL_KEY_START_IDX_GENERATION = 3


@dataclass
class PhysicsParams:
    """Particle simulation parameters, packed as seven 32-bit floats."""

    particle_restitution: float = 0.2
    timestep: float = 1.0 / 120.0
    friction_coefficient: float = 0.5
    repulsion_factor: float = 0.08
    penetration_slop: float = 0.005
    restitution_slop: float = 0.05
    sleep_threshold: float = 0.05

    SIZE = _PHYSICS.size

    def pack(self) -> bytes:
        return _pack(_PHYSICS, astuple(self), "PhysicsParams")

    @classmethod
    def unpack(cls, data: bytes) -> "PhysicsParams":
        return cls(*_PHYSICS.unpack(data))


@dataclass
class InstanceData:
    """Per-instance ray-tracing data, packed as five 32-bit unsigned ints."""

    transform_idx: int
    # Offsets into the shared mesh buffers
    mesh_buffer_index_offset: int
    mesh_buffer_vertex_offset: int
    material_idx: int
    num_mesh_indices: int

    SIZE = _INSTANCE.size

    def pack(self) -> bytes:
        return _pack(_INSTANCE, astuple(self), "InstanceData")

    @classmethod
    def unpack(cls, data: bytes) -> "InstanceData":
        return cls(*_INSTANCE.unpack(data))


class RaytracingInstanceBufferIdxComponent(Component):
    """Slot of the entity's instance data in the ray-tracing instance buffer."""

    def __init__(self, entity: Any, idx: int) -> None:
        super().__init__(entity)
        self.idx = idx


@dataclass
class GBufferPushConstants:
    """Push constants of the G-buffer pass: two indices, a uvec2 and a vec2."""

    transform_idx: int
    material_idx: int
    render_resolution: tuple[int, int]
    jitter_offset: tuple[float, float]

    SIZE = _GBUFFER_PC.size

    def pack(self) -> bytes:
        values = (
            self.transform_idx,
            self.material_idx,
            *self.render_resolution,
            *self.jitter_offset,
        )
        if len(values) != 6:
            raise ValueError("render_resolution and jitter_offset need two components each")
        return _pack(_GBUFFER_PC, values, "GBufferPushConstants")

    @classmethod
    def unpack(cls, data: bytes) -> "GBufferPushConstants":
        t, m, w, h, jx, jy = _GBUFFER_PC.unpack(data)
        return cls(t, m, (w, h), (jx, jy))