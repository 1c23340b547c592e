"""The application: owns the window, renderer and layer stack and runs the loop."""

from __future__ import annotations

import time
from typing import Callable, ClassVar

from planetsim.events import Event, EventDispatcher, WindowCloseEvent, WindowResizeEvent
from planetsim.layers import Layer, LayerStack
from planetsim.log import TRACE, core_logger
from planetsim.renderer import Renderer
from planetsim.window import HeadlessWindow, Window


class Application:
    """The single running application.

    Use it as a context manager: leaving the block detaches every layer,
    shuts the renderer down and allows a new application to be created.
    """

    _instance: ClassVar[Application | None] = None

    def __init__(
        self,
        window: Window | None = None,
        renderer: Renderer | None = None,
        *,
        debug: bool = False,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        if Application._instance is not None:
            raise RuntimeError("Application already exists!")
        Application._instance = self
        self.window = window if window is not None else HeadlessWindow()
        self.window.set_event_callback(self.on_event)
        self.renderer = renderer if renderer is not None else Renderer()
        self.renderer.init()
        self.debug = debug
        self.layer_stack = LayerStack()
        self.running = True
        self.minimized = False
        self._clock = clock
        self._start = clock()
        self.last_frame_time = 0.0

    @classmethod
    def get(cls) -> Application:
        """Return the running application."""
        if cls._instance is None:
            raise RuntimeError("no application exists")
        return cls._instance

    def push_layer(self, layer: Layer) -> None:
        self.layer_stack.push_layer(layer)
        layer.on_attach()

    def push_overlay(self, layer: Layer) -> None:
        self.layer_stack.push_overlay(layer)
        layer.on_attach()

    def on_event(self, event: Event) -> None:
        """Handle window events, then pass ``event`` down from the top layer."""
        dispatcher = EventDispatcher(event)
        dispatcher.dispatch(WindowCloseEvent, self._on_window_close)
        dispatcher.dispatch(WindowResizeEvent, self._on_window_resize)
        for layer in reversed(self.layer_stack):
            if event.handled:
                break
            layer.on_event(event)

    def run(self, max_frames: int | None = None) -> int:
        """Run frames until closed or ``max_frames`` ran; return the frame count."""
        frames = 0
        while self.running and (max_frames is None or frames < max_frames):
            now = self._clock() - self._start
            timestep = now - self.last_frame_time
            self.last_frame_time = now
            core_logger().log(TRACE, "frame time %s", self.last_frame_time)

            if not self.minimized:
                for layer in self.layer_stack:
                    layer.on_update(timestep)
                if self.debug:
                    for layer in self.layer_stack:
                        layer.on_imgui_render()

            self.window.on_update()
            frames += 1
        return frames

    def close(self) -> None:
        """Stop the main loop after the current frame."""
        self.running = False

    def _on_window_close(self, event: WindowCloseEvent) -> bool:
        self.close()
        return True

    def _on_window_resize(self, event: WindowResizeEvent) -> bool:
        if event.width == 0 or event.height == 0:
            self.minimized = True
            return False
        self.minimized = False
        self.renderer.on_window_resize(event.width, event.height)
        return False

    def _release(self) -> None:
        self.layer_stack.clear()
        self.renderer.shutdown()
        if Application._instance is self:
            Application._instance = None

    def __enter__(self) -> Application:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._release()