"""Layers and the ordered stack the application updates each frame."""

from __future__ import annotations

from typing import Iterator

from planetsim.events import Event


class Layer:
    """A unit of per-frame behaviour; subclasses override the hooks they need."""

    def __init__(self, name: str = "Layer") -> None:
        self.name = name

    def on_attach(self) -> None:
        """Called when the layer is pushed onto an application."""

    def on_detach(self) -> None:
        """Called when the layer is removed from its stack."""

    def on_update(self, ts: float) -> None:
        """Called once per frame with the elapsed time in seconds."""

    def on_imgui_render(self) -> None:
        """Called once per frame while the debug overlay is drawn."""

    def on_event(self, event: Event) -> None:
        """Called for every event that reaches this layer."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class LayerStack:
    """Ordered layers with overlays always kept above ordinary layers.

    Iteration runs bottom to top (update order); ``reversed`` runs top to
    bottom (event order).
    """

    def __init__(self) -> None:
        self._layers: list[Layer] = []
        self._insert_index = 0

    def push_layer(self, layer: Layer) -> None:
        """Insert ``layer`` above the other layers but below every overlay."""
        self._layers.insert(self._insert_index, layer)
        self._insert_index += 1

    def push_overlay(self, overlay: Layer) -> None:
        """Put ``overlay`` on top of the stack."""
        self._layers.append(overlay)

    @staticmethod
    def _find(layers: list[Layer], target: Layer) -> int | None:
        return next((i for i, layer in enumerate(layers) if layer is target), None)

    def pop_layer(self, layer: Layer) -> bool:
        """Detach and remove ``layer`` if it is among the ordinary layers."""
        position = self._find(self._layers[: self._insert_index], layer)
        if position is None:
            return False
        layer.on_detach()
        del self._layers[position]
        self._insert_index -= 1
        return True

    def pop_overlay(self, overlay: Layer) -> bool:
        """Detach and remove ``overlay`` if it is among the overlays."""
        position = self._find(self._layers[self._insert_index :], overlay)
        if position is None:
            return False
        overlay.on_detach()
        del self._layers[self._insert_index + position]
        return True

    def clear(self) -> None:
        """Detach every layer, bottom to top, and empty the stack."""
        for layer in self._layers:
            layer.on_detach()
        self._layers.clear()
        self._insert_index = 0

    def __iter__(self) -> Iterator[Layer]:
        return iter(list(self._layers))

    def __reversed__(self) -> Iterator[Layer]:
        return reversed(list(self._layers))

    def __len__(self) -> int:
        return len(self._layers)