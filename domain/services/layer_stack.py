from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence
from typing import Any

from domain.models import DEFAULT_LAYER_COLOR, DEFAULT_SEGMENT_LENGTH, Layer

logger = logging.getLogger(__name__)

LAYER_PALETTE: tuple[str, ...] = (
    "#1e293b",
    "#ef4444",
    "#f97316",
    "#eab308",
    "#22c55e",
    "#06b6d4",
    "#3b82f6",
    "#a855f7",
    "#ec4899",
    "#64748b",
)


def default_layers(
    text: str = "Hello World", segment_length: int = DEFAULT_SEGMENT_LENGTH
) -> list[Layer]:
    return [
        Layer(
            id="1",
            name="Base Layer",
            text=text,
            color=DEFAULT_LAYER_COLOR,
            segment_length=segment_length,
        )
    ]


def _new_layer_id() -> str:
    return str(uuid.uuid4())


class LayerStack:
    """Ordered list of layers plus the active selection.

    Layers are immutable models; every edit replaces the stored instance with
    a re-validated copy. The stack never becomes empty.
    """

    def __init__(
        self,
        layers: Sequence[Layer] | None = None,
        *,
        palette: Sequence[str] = LAYER_PALETTE,
        segment_length: int = DEFAULT_SEGMENT_LENGTH,
        id_factory: Callable[[], str] = _new_layer_id,
    ) -> None:
        initial = list(layers) if layers else default_layers(segment_length=segment_length)
        seen: set[str] = set()
        for layer in initial:
            if layer.id in seen:
                msg = f"Duplicate layer id found: {layer.id}"
                raise ValueError(msg)
            seen.add(layer.id)
        if not palette:
            msg = "Layer palette must contain at least one color"
            raise ValueError(msg)
        self._layers = initial
        self._palette = tuple(palette)
        self._segment_length = segment_length
        self._id_factory = id_factory
        self._active_layer_id = initial[0].id

    @property
    def layers(self) -> tuple[Layer, ...]:
        return tuple(self._layers)

    @property
    def active_layer_id(self) -> str:
        return self._active_layer_id

    @property
    def active_layer(self) -> Layer:
        return self.require(self._active_layer_id)

    def visible_layers(self) -> list[Layer]:
        return [layer for layer in self._layers if layer.visible]

    def get(self, layer_id: str) -> Layer | None:
        for layer in self._layers:
            if layer.id == layer_id:
                return layer
        return None

    def require(self, layer_id: str) -> Layer:
        layer = self.get(layer_id)
        if layer is None:
            msg = f"Layer not found: {layer_id}"
            raise KeyError(msg)
        return layer

    def select(self, layer_id: str) -> Layer:
        layer = self.require(layer_id)
        self._active_layer_id = layer.id
        return layer

    def add_layer(self) -> Layer:
        count = len(self._layers)
        layer = Layer(
            id=self._id_factory(),
            name=f"Layer {count + 1}",
            text="",
            color=self._palette[count % len(self._palette)],
            segment_length=self._segment_length,
        )
        self._layers.append(layer)
        self._active_layer_id = layer.id
        return layer

    def remove_layer(self, layer_id: str) -> bool:
        self.require(layer_id)
        if len(self._layers) == 1:
            logger.debug("Refusing to remove the last layer %s", layer_id)
            return False
        self._layers = [layer for layer in self._layers if layer.id != layer_id]
        if self._active_layer_id == layer_id:
            self._active_layer_id = self._layers[0].id
        return True

    def update_layer(self, layer_id: str, **changes: Any) -> Layer:
        current = self.require(layer_id)
        changes.pop("id", None)
        updated = Layer.model_validate({**current.model_dump(), **changes})
        self._layers = [updated if layer.id == layer_id else layer for layer in self._layers]
        return updated

    def move_layer(self, layer_id: str, dx: float, dy: float) -> Layer:
        current = self.require(layer_id)
        return self.update_layer(layer_id, x=current.x + dx, y=current.y + dy)
