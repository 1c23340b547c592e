"""Blocking event types and a dispatcher that routes them by type."""

from __future__ import annotations

from enum import Enum, IntFlag
from typing import Callable, ClassVar, TypeVar

from planetsim.codes import KeyCode, MouseCode


class EventType(Enum):
    """Every kind of event the engine knows."""

    NONE = 0
    WINDOW_CLOSE = 1
    WINDOW_RESIZE = 2
    WINDOW_FOCUS = 3
    WINDOW_LOST_FOCUS = 4
    WINDOW_MOVED = 5
    APP_TICK = 6
    APP_UPDATE = 7
    APP_RENDER = 8
    KEY_PRESSED = 9
    KEY_RELEASED = 10
    KEY_TYPED = 11
    MOUSE_BUTTON_PRESSED = 12
    MOUSE_BUTTON_RELEASED = 13
    MOUSE_MOVED = 14
    MOUSE_SCROLLED = 15


class EventCategory(IntFlag):
    """Bit flags grouping event types."""

    NONE = 0
    APPLICATION = 1 << 0
    INPUT = 1 << 1
    KEYBOARD = 1 << 2
    MOUSE = 1 << 3
    MOUSE_BUTTON = 1 << 4


def _fmt(value: float) -> str:
    return f"{value:g}"


class Event:
    """Base of all events; ``handled`` stops further propagation."""

    event_type: ClassVar[EventType] = EventType.NONE
    name: ClassVar[str] = "None"
    category: ClassVar[EventCategory] = EventCategory.NONE

    def __init__(self) -> None:
        self.handled = False

    def is_in_category(self, category: EventCategory) -> bool:
        """Return whether this event carries any flag of ``category``."""
        return bool(self.category & category)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self}>"


class WindowResizeEvent(Event):
    event_type = EventType.WINDOW_RESIZE
    name = "WindowResize"
    category = EventCategory.APPLICATION

    def __init__(self, width: int, height: int) -> None:
        super().__init__()
        self.width = width
        self.height = height

    def __str__(self) -> str:
        return f"WindowResizeEvent: {self.width}, {self.height}"


class WindowCloseEvent(Event):
    event_type = EventType.WINDOW_CLOSE
    name = "WindowClose"
    category = EventCategory.APPLICATION


class AppTickEvent(Event):
    event_type = EventType.APP_TICK
    name = "AppTick"
    category = EventCategory.APPLICATION


class AppUpdateEvent(Event):
    event_type = EventType.APP_UPDATE
    name = "AppUpdate"
    category = EventCategory.APPLICATION


class AppRenderEvent(Event):
    event_type = EventType.APP_RENDER
    name = "AppRender"
    category = EventCategory.APPLICATION


class KeyEvent(Event):
    """Base of keyboard events."""

    category = EventCategory.KEYBOARD | EventCategory.INPUT

    def __init__(self, key_code: KeyCode | int) -> None:
        super().__init__()
        self.key_code = KeyCode(key_code)


class KeyPressedEvent(KeyEvent):
    event_type = EventType.KEY_PRESSED
    name = "KeyPressed"

    def __init__(self, key_code: KeyCode | int, repeat_count: int) -> None:
        super().__init__(key_code)
        self.repeat_count = repeat_count

    def __str__(self) -> str:
        return f"KeyPressedEvent: {self.key_code} ({self.repeat_count} repeats)"


class KeyReleasedEvent(KeyEvent):
    event_type = EventType.KEY_RELEASED
    name = "KeyReleased"

    def __str__(self) -> str:
        return f"KeyReleasedEvent: {self.key_code}"


class KeyTypedEvent(KeyEvent):
    event_type = EventType.KEY_TYPED
    name = "KeyTyped"

    def __str__(self) -> str:
        return f"KeyTypedEvent: {self.key_code}"


class MouseMovedEvent(Event):
    event_type = EventType.MOUSE_MOVED
    name = "MouseMoved"
    category = EventCategory.MOUSE | EventCategory.INPUT

    def __init__(self, x: float, y: float) -> None:
        super().__init__()
        self.x = float(x)
        self.y = float(y)

    def __str__(self) -> str:
        return f"MouseMovedEvent: {_fmt(self.x)}, {_fmt(self.y)}"


class MouseScrolledEvent(Event):
    event_type = EventType.MOUSE_SCROLLED
    name = "MouseScrolled"
    category = EventCategory.MOUSE | EventCategory.INPUT

    def __init__(self, x_offset: float, y_offset: float) -> None:
        super().__init__()
        self.x_offset = float(x_offset)
        self.y_offset = float(y_offset)

    def __str__(self) -> str:
        return f"MouseScrolledEvent: {_fmt(self.x_offset)}, {_fmt(self.y_offset)}"


class MouseButtonEvent(Event):
    """Base of mouse button events."""

    category = EventCategory.MOUSE | EventCategory.INPUT

    def __init__(self, button: MouseCode | int) -> None:
        super().__init__()
        self.button = MouseCode(button)


class MouseButtonPressedEvent(MouseButtonEvent):
    event_type = EventType.MOUSE_BUTTON_PRESSED
    name = "MouseButtonPressed"

    def __str__(self) -> str:
        return f"MouseButtonPressedEvent: {self.button}"


class MouseButtonReleasedEvent(MouseButtonEvent):
    event_type = EventType.MOUSE_BUTTON_RELEASED
    name = "MouseButtonReleased"

    def __str__(self) -> str:
        return f"MouseButtonReleasedEvent: {self.button}"


E = TypeVar("E", bound=Event)


class EventDispatcher:
    """Routes one event to handlers registered for its concrete type."""

    def __init__(self, event: Event) -> None:
        self.event = event

    def dispatch(self, event_class: type[E], func: Callable[[E], bool]) -> bool:
        """Call ``func`` if the event is of ``event_class``'s type.

        The handler's return value becomes the event's ``handled`` flag.
        Returns whether the handler was called.
        """
        if event_class.event_type is EventType.NONE:
            raise TypeError(f"{event_class.__name__} is not a concrete event type")
        if self.event.event_type is event_class.event_type:
            self.event.handled = bool(func(self.event))  # type: ignore[arg-type]
            return True
        return False