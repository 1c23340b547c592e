"""The process-wide model and texture libraries."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

from planetsim.model import ModelLibrary
from planetsim.texture import TextureLibrary


@dataclass
class AssetLibraries:
    """Every asset library the engine shares between layers."""

    model_library: ModelLibrary = field(default_factory=ModelLibrary)
    texture_library: TextureLibrary = field(default_factory=TextureLibrary)


@lru_cache(maxsize=None)
def get_asset_libraries() -> AssetLibraries:
    """Return the single shared set of asset libraries, creating it once."""
    return AssetLibraries()