"""Two-dimensional RGBA textures and a named texture library."""

from __future__ import annotations

import itertools
from pathlib import Path
from typing import Iterator

import numpy as np
from PIL import Image

from planetsim.log import client_logger
from planetsim.model import mesh_name_from_path

_CHANNELS = 4
_ids = itertools.count(1)


class Texture2D:
    """An RGBA image held as a ``(height, width, 4)`` array of bytes."""

    def __init__(
        self,
        name: str,
        width: int,
        height: int,
        data: bytes | np.ndarray | None = None,
        path: str | None = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"texture size must be positive, got {width}x{height}")
        self.name = name
        self.width = int(width)
        self.height = int(height)
        self.path = path
        self.slot = 0
        self.destroyed = False
        self.renderer_id = next(_ids)
        self.pixels = np.zeros((self.height, self.width, _CHANNELS), dtype=np.uint8)
        if data is not None:
            self.set_data(data)

    @classmethod
    def from_file(cls, path: str | Path) -> Texture2D:
        """Read an image file; the texture is named after the file."""
        text_path = str(path)
        with Image.open(text_path) as image:
            rgba = np.asarray(image.convert("RGBA"), dtype=np.uint8)
        height, width = rgba.shape[:2]
        return cls(mesh_name_from_path(text_path), width, height, rgba, path=text_path)

    @property
    def size(self) -> int:
        """Size of the whole image in bytes."""
        return self.width * self.height * _CHANNELS

    def set_data(self, data: bytes | np.ndarray) -> None:
        """Replace every pixel; ``data`` must cover the entire texture."""
        if self.destroyed:
            raise RuntimeError(f"texture '{self.name}' has been destroyed")
        if isinstance(data, (bytes, bytearray, memoryview)):
            values = np.frombuffer(bytes(data), dtype=np.uint8)
        else:
            values = np.asarray(data, dtype=np.uint8)
        if values.size != self.size:
            raise ValueError(
                f"data must be the entire texture: expected {self.size} bytes, got {values.size}"
            )
        self.pixels = values.reshape(self.height, self.width, _CHANNELS).copy()

    def bind(self, slot: int = 0) -> None:
        """Attach the texture to sampler ``slot``."""
        if self.destroyed:
            raise RuntimeError(f"texture '{self.name}' has been destroyed")
        if slot < 0:
            raise ValueError(f"texture slot must be non-negative, got {slot}")
        self.slot = slot

    def destroy(self) -> None:
        """Release the pixel storage; the texture cannot be used afterwards."""
        self.destroyed = True
        self.pixels = np.zeros((0, 0, _CHANNELS), dtype=np.uint8)

    def __repr__(self) -> str:
        return f"<Texture2D {self.name!r} {self.width}x{self.height}>"


class TextureLibrary:
    """Textures kept by name, plus the list of names bound for drawing."""

    def __init__(self) -> None:
        self._textures: dict[str, Texture2D] = {}
        self.bound_textures: list[str] = []

    def add(self, texture: Texture2D, name: str | None = None) -> bool:
        """Store ``texture``; an existing name is kept and a warning logged."""
        key = texture.name if name is None else name
        if key in self._textures:
            client_logger().warning("Texture %s already exists!", key)
            return False
        self._textures[key] = texture
        return True

    def create(self, name: str, width: int, height: int) -> Texture2D:
        """Make a blank texture, store it under ``name`` and return it."""
        texture = Texture2D(name, width, height)
        self.add(texture, name)
        return texture

    def load(self, path: str | Path) -> Texture2D:
        """Read a texture from ``path``, store it and return it."""
        texture = Texture2D.from_file(path)
        self.add(texture)
        return texture

    def get(self, name: str) -> Texture2D:
        try:
            return self._textures[name]
        except KeyError:
            raise KeyError(f"Texture '{name}' not found!") from None

    def exists(self, name: str) -> bool:
        return name in self._textures

    def remove(self, name: str) -> bool:
        """Destroy and drop the texture called ``name``; warn if there is none."""
        texture = self._textures.pop(name, None)
        if texture is None:
            client_logger().warning("Texture with name %s doesn't exist!", name)
            return False
        texture.destroy()
        return True

    def bind_texture(self, name: str) -> bool:
        """Add ``name`` to the bound textures if such a texture exists."""
        if name not in self._textures:
            return False
        self.bound_textures.append(name)
        return True

    def reset_bound_textures(self) -> None:
        self.bound_textures.clear()

    def clean_up(self) -> None:
        """Destroy every texture and empty the library."""
        for texture in self._textures.values():
            texture.destroy()
        self._textures.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._textures

    def __len__(self) -> int:
        return len(self._textures)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._textures))