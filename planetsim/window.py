"""Window properties, the window interface and a window with no display."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from typing import Callable

from planetsim.events import Event, WindowResizeEvent

EventCallback = Callable[[Event], None]


@dataclass
class WindowProps:
    """Title and size a window is opened with."""

    title: str = "Planet Sim"
    width: int = 1280
    height: int = 720


class Window(ABC):
    """A desktop window that turns platform input into engine events."""

    vsync: bool = True

    @property
    @abstractmethod
    def width(self) -> int:
        """Current width in pixels."""

    @property
    @abstractmethod
    def height(self) -> int:
        """Current height in pixels."""

    @abstractmethod
    def on_update(self) -> None:
        """Process pending platform events and present the frame."""

    @abstractmethod
    def set_event_callback(self, callback: EventCallback) -> None:
        """Route every event the window produces to ``callback``."""


class HeadlessWindow(Window):
    """A window without a display; events are posted to it by code.

    Posted events are delivered, in order, on the next ``on_update`` once a
    callback is set. A delivered resize event also changes the window size.
    """

    def __init__(self, props: WindowProps | None = None) -> None:
        self.props = props if props is not None else WindowProps()
        self.title = self.props.title
        self._width = self.props.width
        self._height = self.props.height
        self._callback: EventCallback | None = None
        self._pending: deque[Event] = deque()
        self.frame_count = 0

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def pending(self) -> int:
        """Number of events waiting for delivery."""
        return len(self._pending)

    def on_update(self) -> None:
        """Count a presented frame and deliver the queued events."""
        self.frame_count += 1
        if self._callback is None:
            return
        while self._pending:
            event = self._pending.popleft()
            if isinstance(event, WindowResizeEvent):
                self._width, self._height = event.width, event.height
            self._callback(event)

    def set_event_callback(self, callback: EventCallback) -> None:
        self._callback = callback

    def post(self, event: Event) -> None:
        """Queue ``event`` as if the platform had produced it."""
        if not isinstance(event, Event):
            raise TypeError(f"expected an Event, got {type(event).__name__}")
        self._pending.append(event)