from __future__ import annotations

from typing import Any, Protocol

from domain.models import Layer


class LayerStore(Protocol):
    def get(self, layer_id: str) -> Layer | None: ...

    def update_layer(self, layer_id: str, **changes: Any) -> Layer: ...
