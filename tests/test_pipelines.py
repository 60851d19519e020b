import pytest

from snakecore.pipelines import (
    GraphicsPipelineBuilder,
    PipelineLayoutBuilder,
    PushConstantRange,
    RtPipelineBuilder,
    ShaderStage,
)
from snakecore.vk_common import attribute_descriptions, binding_descriptions


def test_shader_stage_values_match_vulkan():
    builder = PipelineLayoutBuilder()
    builder.add_push_constant(0, 4, ShaderStage.VERTEX)
    builder.add_push_constant(4, 4, ShaderStage.FRAGMENT)
    builder.add_push_constant(8, 4, ShaderStage.ALL)
    assert [r.stage_flags for r in builder.push_constants] == [0x1, 0x10, 0x7FFFFFFF]


def test_add_push_constant_appends_range_and_chains():
    builder = PipelineLayoutBuilder()
    result = builder.add_push_constant(0, 64, ShaderStage.ALL)
    assert result is builder
    assert builder.push_constants == [PushConstantRange(ShaderStage.ALL, 0, 64)]


def test_push_constants_keep_order():
    builder = PipelineLayoutBuilder()
    builder.add_push_constant(0, 16, ShaderStage.VERTEX).add_push_constant(16, 8, ShaderStage.FRAGMENT)
    assert [r.offset for r in builder.push_constants] == [0, 16]
    assert [r.stage_flags for r in builder.push_constants] == [ShaderStage.VERTEX, ShaderStage.FRAGMENT]


def test_negative_push_constant_rejected():
    with pytest.raises(ValueError):
        PipelineLayoutBuilder().add_push_constant(-4, 4, ShaderStage.ALL)


def test_descriptor_sets_sorted_by_index_and_replaced():
    builder = PipelineLayoutBuilder()
    a, b, c = object(), object(), object()
    builder.add_descriptor_set(2, a).add_descriptor_set(0, b)
    assert list(builder.descriptor_set_layouts) == [0, 2]
    builder.add_descriptor_set(2, c)
    assert builder.descriptor_set_layouts[2] is c
    assert builder.descriptor_set_layouts[0] is b


def test_negative_descriptor_set_rejected():
    with pytest.raises(ValueError):
        PipelineLayoutBuilder().add_descriptor_set(-1, object())


def test_add_vertex_binding_pairs_descriptions():
    builder = GraphicsPipelineBuilder()
    attrs = attribute_descriptions()
    binds = binding_descriptions()
    for attr, bind in zip(attrs, binds):
        assert builder.add_vertex_binding(attr, bind) is builder
    assert builder.vertex_attribute_descriptions == attrs
    assert builder.vertex_binding_descriptions == binds


def test_graphics_builders_do_not_share_state():
    first = GraphicsPipelineBuilder()
    second = GraphicsPipelineBuilder()
    first.pipeline_layout_builder.add_push_constant(0, 4, ShaderStage.ALL)
    assert second.pipeline_layout_builder.push_constants == []
    assert first.dynamic_states == ("viewport", "scissor")


def test_shader_count_defaults_to_zero():
    builder = RtPipelineBuilder()
    assert builder.shader_count(ShaderStage.MISS) == 0
    builder.shader_counts[ShaderStage.MISS] = 2
    assert builder.shader_count(ShaderStage.MISS) == 2
    assert builder.shader_count(ShaderStage.RAYGEN) == 0