"""The rendering back-end interface, a recording back-end and the scene renderer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Sequence

import numpy as np

from planetsim.buffer import VertexArray


class GraphicsAPI(Enum):
    """Graphics interfaces a back-end can target."""

    NONE = 0
    OPENGL = 1
    VULKAN = 2


def _matrix(matrix: Any) -> np.ndarray:
    values = np.array(matrix, dtype=np.float32)
    if values.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {values.shape}")
    return values


def _color(color: Sequence[float]) -> np.ndarray:
    values = np.array(color, dtype=np.float32)
    if values.shape != (4,):
        raise ValueError(f"expected an RGBA colour, got shape {values.shape}")
    return values


class RendererAPI(ABC):
    """Low-level drawing commands a graphics back-end carries out."""

    graphics_api: GraphicsAPI = GraphicsAPI.NONE

    @abstractmethod
    def init(self) -> None: ...

    @abstractmethod
    def set_view_matrix(self, matrix: Any) -> None: ...

    @abstractmethod
    def set_projection_matrix(self, matrix: Any) -> None: ...

    @abstractmethod
    def set_viewport(self, x: int, y: int, width: int, height: int) -> None: ...

    @abstractmethod
    def set_clear_color(self, color: Sequence[float]) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...

    @abstractmethod
    def draw_indexed(self, vertex_array: VertexArray) -> None: ...


class RecordingRendererAPI(RendererAPI):
    """A back-end that keeps the state it is given and logs every command."""

    graphics_api = GraphicsAPI.VULKAN

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.initialized = False
        self.view_matrix = np.identity(4, dtype=np.float32)
        self.projection_matrix = np.identity(4, dtype=np.float32)
        self.viewport = (0, 0, 0, 0)
        self.clear_color = np.zeros(4, dtype=np.float32)
        self.clear_count = 0
        self.draws: list[VertexArray] = []

    def init(self) -> None:
        self.initialized = True
        self.calls.append(("init", ()))

    def set_view_matrix(self, matrix: Any) -> None:
        self.view_matrix = _matrix(matrix)
        self.calls.append(("set_view_matrix", (self.view_matrix,)))

    def set_projection_matrix(self, matrix: Any) -> None:
        self.projection_matrix = _matrix(matrix)
        self.calls.append(("set_projection_matrix", (self.projection_matrix,)))

    def set_viewport(self, x: int, y: int, width: int, height: int) -> None:
        self.viewport = (int(x), int(y), int(width), int(height))
        self.calls.append(("set_viewport", self.viewport))

    def set_clear_color(self, color: Sequence[float]) -> None:
        self.clear_color = _color(color)
        self.calls.append(("set_clear_color", (self.clear_color,)))

    def clear(self) -> None:
        self.clear_count += 1
        self.calls.append(("clear", ()))

    def draw_indexed(self, vertex_array: VertexArray) -> None:
        if vertex_array.index_buffer is None:
            raise ValueError("cannot draw a vertex array without an index buffer")
        self.draws.append(vertex_array)
        self.calls.append(("draw_indexed", (vertex_array,)))


class Renderer:
    """Begins and ends scenes and submits geometry to a back-end."""

    def __init__(self, api: RendererAPI | None = None) -> None:
        self.api = api if api is not None else RecordingRendererAPI()
        self.view_projection_matrix = np.identity(4, dtype=np.float32)
        self.viewport_size: tuple[int, int] | None = None
        self.in_scene = False

    @property
    def graphics_api(self) -> GraphicsAPI:
        return self.api.graphics_api

    def init(self) -> None:
        self.api.init()

    def shutdown(self) -> None:
        self.in_scene = False

    def on_window_resize(self, width: int, height: int) -> None:
        """Remember the new framebuffer size."""
        self.viewport_size = (int(width), int(height))

    def begin_scene(self, camera: Any) -> None:
        """Take the camera's view-projection matrix for the coming draws."""
        self.view_projection_matrix = _matrix(camera.view_projection_matrix)
        self.in_scene = True

    def end_scene(self) -> None:
        self.in_scene = False

    def submit(self, vertex_array: VertexArray, transform: Any = None) -> None:
        """Draw ``vertex_array``; ``transform`` defaults to the identity."""
        if transform is not None:
            _matrix(transform)
        self.api.draw_indexed(vertex_array)