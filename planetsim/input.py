"""Polled keyboard and mouse state behind a swappable backend."""

from __future__ import annotations

from abc import ABC, abstractmethod

from planetsim.codes import KeyCode, MouseCode


class InputBackend(ABC):
    """Source of the current keyboard and mouse state."""

    @abstractmethod
    def is_key_pressed(self, key: KeyCode | int) -> bool:
        """Return whether ``key`` is held down."""

    @abstractmethod
    def is_mouse_button_pressed(self, button: MouseCode | int) -> bool:
        """Return whether ``button`` is held down."""

    @abstractmethod
    def mouse_position(self) -> tuple[float, float]:
        """Return the cursor position as ``(x, y)``."""


class InputState(InputBackend):
    """An in-memory backend whose state is set by calling its methods."""

    def __init__(self) -> None:
        self._keys: set[KeyCode] = set()
        self._buttons: set[MouseCode] = set()
        self._position = (0.0, 0.0)

    def press(self, key: KeyCode | int) -> None:
        self._keys.add(KeyCode(key))

    def release(self, key: KeyCode | int) -> None:
        self._keys.discard(KeyCode(key))

    def press_button(self, button: MouseCode | int) -> None:
        self._buttons.add(MouseCode(button))

    def release_button(self, button: MouseCode | int) -> None:
        self._buttons.discard(MouseCode(button))

    def move_mouse(self, x: float, y: float) -> None:
        self._position = (float(x), float(y))

    def is_key_pressed(self, key: KeyCode | int) -> bool:
        return KeyCode(key) in self._keys

    def is_mouse_button_pressed(self, button: MouseCode | int) -> bool:
        return MouseCode(button) in self._buttons

    def mouse_position(self) -> tuple[float, float]:
        return self._position


_backend: InputBackend = InputState()


def set_backend(backend: InputBackend) -> None:
    """Make ``backend`` the source of all input queries."""
    global _backend
    if not isinstance(backend, InputBackend):
        raise TypeError(f"expected an InputBackend, got {type(backend).__name__}")
    _backend = backend


def get_backend() -> InputBackend:
    """Return the backend currently answering input queries."""
    return _backend


def is_key_pressed(key: KeyCode | int) -> bool:
    return _backend.is_key_pressed(key)


def is_mouse_button_pressed(button: MouseCode | int) -> bool:
    return _backend.is_mouse_button_pressed(button)


def get_mouse_position() -> tuple[float, float]:
    return _backend.mouse_position()


def get_mouse_x() -> float:
    return _backend.mouse_position()[0]


def get_mouse_y() -> float:
    return _backend.mouse_position()[1]