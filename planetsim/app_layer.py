"""The planet simulation's layer, application factory and command entry point."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

import numpy as np

from planetsim import log
from planetsim.application import Application
from planetsim.assets import AssetLibraries, get_asset_libraries
from planetsim.buffer import (
    BufferElement,
    BufferLayout,
    IndexBuffer,
    ShaderDataType,
    VertexArray,
    VertexBuffer,
)
from planetsim.camera import CameraController
from planetsim.events import Event
from planetsim.layers import Layer
from planetsim.renderer import Renderer
from planetsim.window import HeadlessWindow, Window

_CLEAR_COLOR = (0.1, 0.1, 0.1, 1.0)
_DEFAULT_MODEL = "assets/models/chalet.obj"
_DEFAULT_TEXTURE = "assets/textures/chalet.jpg"


class PlanetSimLayer(Layer):
    """Loads one textured model and draws it through a free-flying camera."""

    def __init__(
        self,
        model_path: str | Path,
        texture_path: str | Path,
        renderer: Renderer,
        aspect_ratio: float = 1280.0 / 720.0,
        assets: AssetLibraries | None = None,
    ) -> None:
        super().__init__("PlanetSimLayer")
        self.renderer = renderer
        self.assets = assets if assets is not None else get_asset_libraries()
        self.camera_controller = CameraController(aspect_ratio)
        self.square_color = np.array([0.2, 0.3, 0.8])
        self.settings: dict[str, tuple[float, ...]] = {}
        self.attached = False

        self.layout = BufferLayout(
            [
                BufferElement(ShaderDataType.FLOAT3, "a_Position"),
                BufferElement(ShaderDataType.FLOAT2, "a_TexCoord"),
                BufferElement(ShaderDataType.FLOAT3, "a_Color"),
            ]
        )
        log.core_logger().debug("vertex stride %d", self.layout.stride)

        self.mesh = self.assets.model_library.load(
            model_path, False, True, False, False
        )
        self.vertex_array = VertexArray()
        self.vertex_array.add_vertex_buffer(VertexBuffer(self.mesh.data, layout=self.layout))
        self.vertex_array.set_index_buffer(IndexBuffer(self.mesh.indices))

        self.texture = self.assets.texture_library.load(texture_path)
        self.assets.texture_library.bind_texture(self.texture.name)

    def on_attach(self) -> None:
        self.attached = True

    def on_detach(self) -> None:
        """Release the layer's geometry."""
        self.attached = False
        self.vertex_array.clean_up()

    def on_update(self, ts: float) -> None:
        """Move the camera, then clear the frame and draw the model."""
        self.camera_controller.on_update(ts)
        camera = self.camera_controller.camera

        api = self.renderer.api
        api.set_clear_color(_CLEAR_COLOR)
        api.set_view_matrix(camera.view_matrix)
        api.set_projection_matrix(camera.projection_matrix)
        api.clear()

        self.renderer.begin_scene(camera)
        self.renderer.submit(self.vertex_array)
        self.renderer.end_scene()

    def on_imgui_render(self) -> None:
        """Publish the values shown in the settings panel."""
        self.settings = {"Square Color": tuple(float(c) for c in self.square_color)}

    def on_event(self, event: Event) -> None:
        self.camera_controller.on_event(event)


def create_application(
    model_path: str | Path = _DEFAULT_MODEL,
    texture_path: str | Path = _DEFAULT_TEXTURE,
    window: Window | None = None,
    renderer: Renderer | None = None,
) -> Application:
    """Create the application with the planet simulation layer pushed."""
    app = Application(window, renderer)
    try:
        layer = PlanetSimLayer(
            model_path,
            texture_path,
            app.renderer,
            app.window.width / app.window.height,
        )
        app.push_layer(layer)
    except BaseException:
        app.__exit__(None, None, None)
        raise
    return app


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="planetsim", description="Render a textured model."
    )
    parser.add_argument("model", nargs="?", default=_DEFAULT_MODEL)
    parser.add_argument("texture", nargs="?", default=_DEFAULT_TEXTURE)
    parser.add_argument(
        "--frames", type=int, default=None, help="stop after this many frames"
    )
    args = parser.parse_args(argv)

    log.init()
    try:
        try:
            app = create_application(args.model, args.texture, HeadlessWindow())
        except (OSError, ValueError) as exc:
            print(f"planetsim: {exc}", file=sys.stderr)
            return 1
        with app:
            try:
                app.run(args.frames)
            except KeyboardInterrupt:
                app.close()
    finally:
        log.shutdown()
    return 0