"""Perspective camera and a first-person controller driven by input and events."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from planetsim.codes import KeyCode
from planetsim.events import (
    Event,
    EventDispatcher,
    MouseMovedEvent,
    MouseScrolledEvent,
    WindowResizeEvent,
)
from planetsim.input import is_key_pressed

_NEAR = 0.1
_FAR = 100.0


def perspective(fov_radians: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Right-handed perspective projection with depth mapped to [-1, 1]."""
    if aspect == 0:
        raise ValueError("aspect ratio must not be zero")
    if near == far:
        raise ValueError("near and far planes must differ")
    tan_half = math.tan(fov_radians / 2.0)
    if tan_half == 0:
        raise ValueError("field of view must not be zero")
    m = np.zeros((4, 4), dtype=np.float64)
    m[0, 0] = 1.0 / (aspect * tan_half)
    m[1, 1] = 1.0 / tan_half
    m[2, 2] = -(far + near) / (far - near)
    m[3, 2] = -1.0
    m[2, 3] = -(2.0 * far * near) / (far - near)
    return m.astype(np.float32)


def look_at(
    eye: Sequence[float], center: Sequence[float], up: Sequence[float]
) -> np.ndarray:
    """Right-handed view matrix looking from ``eye`` towards ``center``."""
    eye_v = np.asarray(eye, dtype=np.float64)
    forward = np.asarray(center, dtype=np.float64) - eye_v
    length = np.linalg.norm(forward)
    if length == 0:
        raise ValueError("eye and center must differ")
    forward /= length
    side = np.cross(forward, np.asarray(up, dtype=np.float64))
    side_length = np.linalg.norm(side)
    if side_length == 0:
        raise ValueError("up must not be parallel to the viewing direction")
    side /= side_length
    true_up = np.cross(side, forward)
    m = np.identity(4, dtype=np.float64)
    m[0, :3] = side
    m[1, :3] = true_up
    m[2, :3] = -forward
    m[0, 3] = -side @ eye_v
    m[1, 3] = -true_up @ eye_v
    m[2, 3] = forward @ eye_v
    return m.astype(np.float32)


# Turns the model's z-up space into the camera's y-up space (-90 degrees about x).
_X_ROTATION = np.array(
    [[1, 0, 0, 0], [0, 0, 1, 0], [0, -1, 0, 0], [0, 0, 0, 1]], dtype=np.float32
)


def _vec3(value: Sequence[float]) -> np.ndarray:
    vector = np.array(value, dtype=np.float64)
    if vector.shape != (3,):
        raise ValueError(f"expected a 3-vector, got shape {vector.shape}")
    return vector


class Camera:
    """A perspective camera looking along ``front`` from ``position``.

    While the viewing direction is degenerate (zero ``front`` or ``up``
    parallel to it) the previous view matrix is kept.
    """

    def __init__(self, fov: float, aspect_ratio: float = 1280.0 / 720.0) -> None:
        self._position = np.zeros(3)
        self._up = np.zeros(3)
        self._front = np.zeros(3)
        self._rotation = 0.0
        self.aspect_ratio = aspect_ratio
        self.view_matrix = np.identity(4, dtype=np.float32)
        self.projection_matrix = np.identity(4, dtype=np.float32)
        self.view_projection_matrix = np.identity(4, dtype=np.float32)
        self.set_projection(fov, aspect_ratio)

    def set_projection(self, fov: float, aspect_ratio: float | None = None) -> None:
        """Rebuild the projection from a field of view in degrees."""
        if aspect_ratio is not None:
            self.aspect_ratio = aspect_ratio
        self.projection_matrix = perspective(
            math.radians(fov), self.aspect_ratio, _NEAR, _FAR
        )
        self._recalculate_view_projection()

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @position.setter
    def position(self, value: Sequence[float]) -> None:
        self._position = _vec3(value)
        self._recalculate_view()

    @property
    def up(self) -> np.ndarray:
        return self._up.copy()

    @up.setter
    def up(self, value: Sequence[float]) -> None:
        self._up = _vec3(value)
        self._recalculate_view()

    @property
    def front(self) -> np.ndarray:
        return self._front.copy()

    @front.setter
    def front(self, value: Sequence[float]) -> None:
        self._front = _vec3(value)
        self._recalculate_view()

    @property
    def rotation(self) -> float:
        return self._rotation

    @rotation.setter
    def rotation(self, value: float) -> None:
        self._rotation = float(value)
        self._recalculate_view()

    def _recalculate_view(self) -> None:
        try:
            view = look_at(self._position, self._position + self._front, self._up)
        except ValueError:
            return
        self.view_matrix = view @ _X_ROTATION
        self._recalculate_view_projection()

    def _recalculate_view_projection(self) -> None:
        self.view_projection_matrix = self.projection_matrix @ self.view_matrix


class CameraController:
    """Moves a camera with W/A/S/D, space and left shift, and turns it with the mouse."""

    SENSITIVITY = 0.1
    MIN_ZOOM = 0.25

    def __init__(self, aspect_ratio: float, rotation: bool = False) -> None:
        self.aspect_ratio = aspect_ratio
        self.rotation = rotation
        self.fov = 45.0
        self.camera_position = np.array([0.0, 0.5, 2.0])
        self.camera_front = np.zeros(3)
        self.camera_up = np.array([0.0, 1.0, 0.0])
        self.camera_rotation = 0.0
        self.translation_speed = 5.0
        self.rotation_speed = 180.0
        self.zoom_level = 1.0
        self.first_mouse = True
        self.yaw = -90.0
        self.pitch = 0.0
        self.last_x = 800.0 / 2.0
        self.last_y = 600.0 / 2.0

        self.camera = Camera(self.fov, aspect_ratio)
        self.camera.up = self.camera_up
        self.camera.position = self.camera_position
        self.camera.set_projection(self.fov, aspect_ratio)
        self.camera.front = self.camera_front

    def on_update(self, ts: float) -> None:
        """Move the camera according to the keys held during ``ts`` seconds."""
        step = ts * self.translation_speed
        right = np.cross(self.camera_front, self.camera_up)
        right_length = np.linalg.norm(right)
        if right_length > 0:
            right = right / right_length
            if is_key_pressed(KeyCode.A):
                self.camera_position = self.camera_position - right * step
            elif is_key_pressed(KeyCode.D):
                self.camera_position = self.camera_position + right * step

        if is_key_pressed(KeyCode.W):
            self.camera_position = self.camera_position + self.camera_front * step
        elif is_key_pressed(KeyCode.S):
            self.camera_position = self.camera_position - self.camera_front * step

        if is_key_pressed(KeyCode.SPACE):
            self.camera_position[1] += self.camera_up[1] * ts
        elif is_key_pressed(KeyCode.LEFT_SHIFT):
            self.camera_position[1] -= self.camera_up[1] * ts

        self.camera.position = self.camera_position
        self.translation_speed = self.zoom_level

    def on_event(self, event: Event) -> None:
        dispatcher = EventDispatcher(event)
        dispatcher.dispatch(MouseScrolledEvent, self._on_mouse_scrolled)
        dispatcher.dispatch(MouseMovedEvent, self._on_mouse_moved)
        dispatcher.dispatch(WindowResizeEvent, self._on_window_resized)

    def on_resize(self, width: float, height: float) -> None:
        """Adopt a new viewport size; a zero-sized (minimised) one is ignored."""
        if width == 0 or height == 0:
            return
        self.aspect_ratio = width / height
        self.camera.set_projection(self.fov, self.aspect_ratio)

    def _on_mouse_scrolled(self, event: MouseScrolledEvent) -> bool:
        self.zoom_level = max(self.zoom_level - event.y_offset * 0.25, self.MIN_ZOOM)
        self.camera.set_projection(self.fov, self.aspect_ratio)
        return False

    def _on_mouse_moved(self, event: MouseMovedEvent) -> bool:
        if self.first_mouse:
            self.last_x = event.x
            self.last_y = event.y
            self.first_mouse = False

        x_offset = (event.x - self.last_x) * self.SENSITIVITY
        y_offset = (self.last_y - event.y) * self.SENSITIVITY
        self.last_x = event.x
        self.last_y = event.y

        self.yaw += x_offset
        self.pitch = min(max(self.pitch + y_offset, -89.0), 89.0)

        yaw, pitch = math.radians(self.yaw), math.radians(self.pitch)
        self.camera_front = np.array(
            [
                math.cos(yaw) * math.cos(pitch),
                math.sin(pitch),
                math.sin(yaw) * math.cos(pitch),
            ]
        )
        self.camera.front = self.camera_front
        return False

    def _on_window_resized(self, event: WindowResizeEvent) -> bool:
        self.on_resize(float(event.width), float(event.height))
        return False