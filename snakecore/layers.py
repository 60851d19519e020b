"""Application layers and the manager that drives them each frame."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any, Optional


class Layer(ABC):
    """A unit of application logic that receives frame callbacks."""

    @abstractmethod
    def on_init(self) -> None: ...

    @abstractmethod
    def on_frame_start(self) -> None:
        """Render and update work are synchronized here."""

    @abstractmethod
    def on_update(self) -> None:
        """Runs concurrently with on_render."""

    @abstractmethod
    def on_render(self) -> None:
        """Runs concurrently with on_update."""

    @abstractmethod
    def on_imgui_render(self) -> None: ...

    @abstractmethod
    def on_shutdown(self) -> None: ...


class LayerManager:
    """An ordered collection of layers; callbacks run in push order."""

    def __init__(self, window: Optional[Any] = None) -> None:
        self.window = window
        self._layers: list[Layer] = []

    def __iter__(self) -> Iterator[Layer]:
        return iter(list(self._layers))

    def __len__(self) -> int:
        return len(self._layers)

    def push_layer(self, layer: Layer) -> None:
        if layer in self._layers:
            raise ValueError("LayerManager.push_layer failed, layer already added")
        self._layers.append(layer)

    def remove_layer(self, layer: Layer) -> None:
        try:
            self._layers.remove(layer)
        except ValueError:
            raise ValueError(
                "LayerManager.remove_layer failed, layer not found in LayerManager"
            ) from None

    def on_frame_start(self) -> None:
        for layer in self._layers:
            layer.on_frame_start()

    def on_update(self) -> None:
        for layer in self._layers:
            layer.on_update()

    def on_render(self) -> None:
        for layer in self._layers:
            layer.on_render()

    def shutdown_layers(self) -> None:
        """Shut every layer down and forget them."""
        for layer in self._layers:
            layer.on_shutdown()
        self._layers.clear()