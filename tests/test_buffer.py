import numpy as np
import pytest

from planetsim.buffer import (
    BufferElement,
    BufferLayout,
    IndexBuffer,
    ShaderDataType,
    VertexArray,
    VertexBuffer,
    shader_data_type_size,
)


def test_sizes_fixed_by_type():
    assert shader_data_type_size(ShaderDataType.FLOAT3) == 4 * 3
    assert shader_data_type_size(ShaderDataType.MAT4) == 4 * 4 * 4
    assert shader_data_type_size(ShaderDataType.BOOL) == 1


def test_none_type_has_no_size():
    with pytest.raises(ValueError):
        shader_data_type_size(ShaderDataType.NONE)
    with pytest.raises(ValueError):
        BufferElement(ShaderDataType.NONE, "bad")


def test_component_counts():
    assert BufferElement(ShaderDataType.MAT3, "m").component_count() == 3
    assert BufferElement(ShaderDataType.FLOAT2, "uv").component_count() == 2


def test_layout_offsets_and_stride():
    layout = BufferLayout(
        [
            BufferElement(ShaderDataType.FLOAT3, "a_Position"),
            (ShaderDataType.FLOAT2, "a_TexCoord"),
            BufferElement(ShaderDataType.FLOAT3, "a_Color"),
        ]
    )
    elements = list(layout)
    assert [e.name for e in elements] == ["a_Position", "a_TexCoord", "a_Color"]
    assert elements[0].offset == 0
    for prev, cur in zip(elements, elements[1:]):
        assert cur.offset == prev.offset + prev.size
    assert layout.stride == sum(e.size for e in elements)
    assert len(layout) == 3


def test_empty_layout():
    layout = BufferLayout()
    assert layout.stride == 0
    assert len(layout) == 0


def test_vertex_buffer_from_vertices():
    vb = VertexBuffer([1.0, 2.0, 3.0])
    assert vb.data.dtype == np.float32
    assert vb.data.tolist() == [1.0, 2.0, 3.0]
    assert vb.capacity == 3


def test_vertex_buffer_from_size_and_set_data():
    vb = VertexBuffer(size=4)
    assert vb.data.tolist() == [0.0] * 4
    vb.set_data([5.0, 6.0])
    assert vb.data.tolist() == [5.0, 6.0, 0.0, 0.0]
    with pytest.raises(ValueError):
        vb.set_data([0.0] * 5)


def test_vertex_buffer_needs_vertices_or_size():
    with pytest.raises(ValueError):
        VertexBuffer()


def test_buffers_get_distinct_ids():
    ids = {VertexBuffer([0.0]).id, VertexBuffer([0.0]).id, IndexBuffer([0]).id}
    assert len(ids) == 3


def test_index_buffer():
    ib = IndexBuffer([0, 1, 2, 2, 3, 0])
    assert ib.count == 6
    assert ib.indices.dtype == np.uint32
    with pytest.raises(ValueError):
        IndexBuffer([-1])


def test_vertex_array_holds_and_releases_buffers():
    va = VertexArray()
    vb = VertexBuffer([0.0, 1.0])
    ib = IndexBuffer([0, 1])
    va.add_vertex_buffer(vb)
    va.set_index_buffer(ib)
    assert va.vertex_buffers == [vb]
    assert va.index_buffer is ib
    va.clean_up()
    assert va.vertex_buffers == []
    assert va.index_buffer is None