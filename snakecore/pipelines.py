"""Builders that collect pipeline layout, vertex input and ray-tracing shader data."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntFlag
from typing import Any

from snakecore.vk_common import (
    Format,
    VertexAttributeDescription,
    VertexBindingDescription,
)


class ShaderStage(IntFlag):
    """Shader stage bits with their Vulkan values."""

    VERTEX = 0x1
    TESSELLATION_CONTROL = 0x2
    TESSELLATION_EVALUATION = 0x4
    GEOMETRY = 0x8
    FRAGMENT = 0x10
    COMPUTE = 0x20
    ALL_GRAPHICS = 0x1F
    RAYGEN = 0x100
    ANY_HIT = 0x200
    CLOSEST_HIT = 0x400
    MISS = 0x800
    INTERSECTION = 0x1000
    CALLABLE = 0x2000
    ALL = 0x7FFFFFFF


@dataclass(frozen=True)
class PushConstantRange:
    stage_flags: ShaderStage
    offset: int
    size: int


@dataclass
class PipelineLayoutBuilder:
    """Descriptor set specs by set index and push-constant ranges of a layout."""

    push_constants: list[PushConstantRange] = field(default_factory=list)
    descriptor_set_layouts: dict[int, Any] = field(default_factory=dict)
    reflected_descriptor_specs: list[Any] = field(default_factory=list)

    def add_descriptor_set(self, set_idx: int, spec: Any) -> "PipelineLayoutBuilder":
        """Use spec for set_idx, replacing any spec already there."""
        if set_idx < 0:
            raise ValueError(f"descriptor set index must not be negative: {set_idx}")
        self.descriptor_set_layouts[set_idx] = spec
        self.descriptor_set_layouts = dict(sorted(self.descriptor_set_layouts.items()))
        return self

    def add_push_constant(
        self, offset: int, size: int, stage_flags: ShaderStage
    ) -> "PipelineLayoutBuilder":
        if offset < 0 or size < 0:
            raise ValueError(f"push constant offset and size must not be negative: {offset}, {size}")
        self.push_constants.append(PushConstantRange(ShaderStage(stage_flags), offset, size))
        return self


@dataclass
class GraphicsPipelineBuilder:
    """Vertex input and attachment description of a graphics pipeline."""

    pipeline_layout_builder: PipelineLayoutBuilder = field(default_factory=PipelineLayoutBuilder)
    vertex_attribute_descriptions: list[VertexAttributeDescription] = field(default_factory=list)
    vertex_binding_descriptions: list[VertexBindingDescription] = field(default_factory=list)
    colour_attachment_formats: list[Format] = field(default_factory=list)
    depth_format: Format = Format.UNDEFINED
    dynamic_states: tuple[str, ...] = ("viewport", "scissor")

    def add_vertex_binding(
        self, attribute: VertexAttributeDescription, binding: VertexBindingDescription
    ) -> "GraphicsPipelineBuilder":
        self.vertex_attribute_descriptions.append(attribute)
        self.vertex_binding_descriptions.append(binding)
        return self


@dataclass
class RtPipelineBuilder:
    """Shader counts per stage and shader groups of a ray-tracing pipeline."""

    shader_counts: dict[ShaderStage, int] = field(default_factory=dict)
    shaders: list[Any] = field(default_factory=list)
    shader_groups: list[Any] = field(default_factory=list)

    def shader_count(self, stage: ShaderStage) -> int:
        """Number of shaders added for stage; 0 if none."""
        return self.shader_counts.get(ShaderStage(stage), 0)