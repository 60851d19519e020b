"""Vertex layout, queue-family bookkeeping and validation-message helpers."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Optional

logger = logging.getLogger(__name__)

_VEC2_SIZE = 8
_VEC3_SIZE = 12


class Format(IntEnum):
    """The image/vertex formats the engine refers to, with their Vulkan values."""

    UNDEFINED = 0
    R32G32_SFLOAT = 103
    R32G32B32_SFLOAT = 106
    D32_SFLOAT = 126
    D24_UNORM_S8_UINT = 129
    D32_SFLOAT_S8_UINT = 130


class VertexInputRate(IntEnum):
    VERTEX = 0
    INSTANCE = 1


@dataclass(frozen=True)
class VertexBindingDescription:
    binding: int
    stride: int
    input_rate: VertexInputRate = VertexInputRate.VERTEX


@dataclass(frozen=True)
class VertexAttributeDescription:
    location: int
    binding: int
    format: Format
    offset: int = 0


@dataclass
class QueueFamilyIndices:
    graphics_family: Optional[int] = None
    present_family: Optional[int] = None

    def is_complete(self) -> bool:
        return self.graphics_family is not None and self.present_family is not None


class DescriptorSetIndex(IntEnum):
    CAMERA_MATRIX_UBO = 0
    GLOBAL_TEX_MAT = 1
    LIGHTS = 2


class DebugSeverity(IntFlag):
    VERBOSE = 0x1
    INFO = 0x10
    WARNING = 0x100
    ERROR = 0x1000


class DebugMessageType(IntFlag):
    GENERAL = 0x1
    VALIDATION = 0x2
    PERFORMANCE = 0x4


def aligned_size(value: int, alignment: int) -> int:
    """Round value up to a multiple of alignment (a power of two)."""
    return (value + alignment - 1) & ~(alignment - 1)


def has_stencil_component(fmt: Format) -> bool:
    return fmt in (Format.D32_SFLOAT_S8_UINT, Format.D24_UNORM_S8_UINT)


def binding_descriptions() -> list[VertexBindingDescription]:
    """One binding each for positions, normals, texture coordinates, tangents."""
    strides = (_VEC3_SIZE, _VEC3_SIZE, _VEC2_SIZE, _VEC3_SIZE)
    return [
        VertexBindingDescription(binding, stride, VertexInputRate.VERTEX)
        for binding, stride in enumerate(strides)
    ]


def attribute_descriptions() -> list[VertexAttributeDescription]:
    """Shader locations for positions, normals, texture coordinates, tangents."""
    formats = (
        Format.R32G32B32_SFLOAT,
        Format.R32G32B32_SFLOAT,
        Format.R32G32_SFLOAT,
        Format.R32G32B32_SFLOAT,
    )
    return [
        VertexAttributeDescription(location=i, binding=i, format=fmt, offset=0)
        for i, fmt in enumerate(formats)
    ]


_TYPE_NAMES = {
    int(DebugMessageType.GENERAL): "general",
    int(DebugMessageType.PERFORMANCE): "performance",
    int(DebugMessageType.VALIDATION): "validation",
}

_SEVERITIES = {
    int(DebugSeverity.ERROR): (logging.ERROR, "Vulkan error"),
    int(DebugSeverity.INFO): (logging.INFO, "Vulkan info"),
    int(DebugSeverity.WARNING): (logging.WARNING, "Vulkan warning"),
    int(DebugSeverity.VERBOSE): (logging.DEBUG, "Vulkan verbose info"),
}


def log_debug_message(severity: int, message_type: int, message: str) -> bool:
    """Log a validation-layer message; always returns False (do not abort)."""
    type_str = _TYPE_NAMES.get(int(message_type), "")
    entry = _SEVERITIES.get(int(severity))
    if entry is not None:
        level, label = entry
        logger.log(level, "%s '%s': %s", label, type_str, message)
    return False