"""A small layered rendering engine: events, layers, input, OBJ models, textures, camera and a recording renderer."""

__version__ = "0.1.0"