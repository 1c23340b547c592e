"""Vertex layouts and the vertex, index and vertex-array containers."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Sequence

import numpy as np


class ShaderDataType(Enum):
    """Types of a single shader input attribute."""

    NONE = 0
    FLOAT = 1
    FLOAT2 = 2
    FLOAT3 = 3
    FLOAT4 = 4
    MAT3 = 5
    MAT4 = 6
    INT = 7
    INT2 = 8
    INT3 = 9
    INT4 = 10
    BOOL = 11


_SIZES = {
    ShaderDataType.FLOAT: 4,
    ShaderDataType.FLOAT2: 4 * 2,
    ShaderDataType.FLOAT3: 4 * 3,
    ShaderDataType.FLOAT4: 4 * 4,
    ShaderDataType.MAT3: 4 * 3 * 3,
    ShaderDataType.MAT4: 4 * 4 * 4,
    ShaderDataType.INT: 4,
    ShaderDataType.INT2: 4 * 2,
    ShaderDataType.INT3: 4 * 3,
    ShaderDataType.INT4: 4 * 4,
    ShaderDataType.BOOL: 1,
}

_COMPONENTS = {
    ShaderDataType.FLOAT: 1,
    ShaderDataType.FLOAT2: 2,
    ShaderDataType.FLOAT3: 3,
    ShaderDataType.FLOAT4: 4,
    ShaderDataType.MAT3: 3,
    ShaderDataType.MAT4: 4,
    ShaderDataType.INT: 1,
    ShaderDataType.INT2: 2,
    ShaderDataType.INT3: 3,
    ShaderDataType.INT4: 4,
    ShaderDataType.BOOL: 1,
}


def shader_data_type_size(data_type: ShaderDataType) -> int:
    """Return the size in bytes of one value of ``data_type``."""
    try:
        return _SIZES[data_type]
    except KeyError:
        raise ValueError(f"Unknown ShaderDataType: {data_type!r}") from None


@dataclass
class BufferElement:
    """One named attribute within an interleaved vertex."""

    type: ShaderDataType
    name: str
    normalized: bool = False
    size: int = field(init=False)
    offset: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.size = shader_data_type_size(self.type)

    def component_count(self) -> int:
        """Return how many scalar (or, for matrices, column) components it has."""
        try:
            return _COMPONENTS[self.type]
        except KeyError:
            raise ValueError(f"Unknown ShaderDataType: {self.type!r}") from None


class BufferLayout:
    """Ordered attributes of a vertex, with offsets and stride computed."""

    def __init__(
        self, elements: Iterable[BufferElement | tuple[ShaderDataType, str]] = ()
    ) -> None:
        self.elements: tuple[BufferElement, ...] = tuple(
            e if isinstance(e, BufferElement) else BufferElement(*e) for e in elements
        )
        offset = 0
        for element in self.elements:
            element.offset = offset
            offset += element.size
        self.stride = offset

    def __iter__(self) -> Iterator[BufferElement]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def __repr__(self) -> str:
        return f"BufferLayout({list(self.elements)!r})"


_ids = itertools.count(1)


class VertexBuffer:
    """Vertex data as 32-bit floats, with a fixed capacity in floats."""

    def __init__(
        self,
        vertices: Sequence[float] | np.ndarray | None = None,
        *,
        size: int | None = None,
        layout: BufferLayout | None = None,
    ) -> None:
        if vertices is None:
            if size is None or size < 0:
                raise ValueError("a vertex buffer needs vertices or a non-negative size")
            self.data = np.zeros(size, dtype=np.float32)
        else:
            self.data = np.array(vertices, dtype=np.float32).ravel()
        self.layout = layout if layout is not None else BufferLayout()
        self.id = next(_ids)

    @property
    def capacity(self) -> int:
        return self.data.size

    def set_data(self, data: Sequence[float] | np.ndarray) -> None:
        """Overwrite the start of the buffer with ``data``."""
        values = np.asarray(data, dtype=np.float32).ravel()
        if values.size > self.capacity:
            raise ValueError(
                f"{values.size} floats do not fit in a buffer of {self.capacity}"
            )
        self.data[: values.size] = values


class IndexBuffer:
    """Triangle indices as 32-bit unsigned integers."""

    def __init__(self, indices: Sequence[int] | np.ndarray) -> None:
        values = np.asarray(indices)
        if values.size and (values.min() < 0 or values.max() > 0xFFFFFFFF):
            raise ValueError("indices must fit in 32 unsigned bits")
        self.indices = values.astype(np.uint32).ravel()
        self.id = next(_ids)

    @property
    def count(self) -> int:
        return int(self.indices.size)


class VertexArray:
    """Vertex buffers drawn together with one index buffer."""

    def __init__(self) -> None:
        self.vertex_buffers: list[VertexBuffer] = []
        self.index_buffer: IndexBuffer | None = None

    def add_vertex_buffer(self, vertex_buffer: VertexBuffer) -> None:
        self.vertex_buffers.append(vertex_buffer)

    def set_index_buffer(self, index_buffer: IndexBuffer) -> None:
        self.index_buffer = index_buffer

    def clean_up(self) -> None:
        """Release every buffer this array holds."""
        self.vertex_buffers.clear()
        self.index_buffer = None