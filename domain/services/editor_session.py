from __future__ import annotations

import logging
from typing import Any

from domain.models import Bounds, Layer, Size
from domain.ports.scheduling import Scheduler
from domain.services.content_bounds import aggregate_content_bounds, centering_offset
from domain.services.layer_stack import LayerStack
from domain.services.loop_growth import LoopConfig, LoopGrowthController
from domain.services.path_cache import PathCache
from domain.services.scene import LayerView, Scene
from domain.services.viewport_controller import (
    InteractionMode,
    LayerTranslation,
    PointerEvent,
    ViewportController,
)

logger = logging.getLogger(__name__)


class LayerEditBlockedError(ValueError):
    pass


class EditorSession:
    """Single coordinating context for one editor canvas.

    Every layer mutation goes through here so the aggregated content bounds
    (and with them the auto-fit framing) stay in sync with the layer stack.
    """

    def __init__(
        self,
        stack: LayerStack,
        viewport: ViewportController,
        scheduler: Scheduler,
        *,
        loop_config: LoopConfig | None = None,
        paths: PathCache | None = None,
    ) -> None:
        self.stack = stack
        self.viewport = viewport
        self.paths = paths or PathCache()
        self.loop = LoopGrowthController(self, scheduler, loop_config, paths=self.paths)
        self._content_bounds = self._refresh_content_bounds()

    @property
    def content_bounds(self) -> Bounds:
        return self._content_bounds

    # --- LayerStore ---

    def get(self, layer_id: str) -> Layer | None:
        return self.stack.get(layer_id)

    def update_layer(self, layer_id: str, **changes: Any) -> Layer:
        layer = self.stack.update_layer(layer_id, **changes)
        self._refresh_content_bounds()
        return layer

    # --- Host-facing layer commands ---

    def edit_layer(self, layer_id: str, **changes: Any) -> Layer:
        if "text" in changes and self.loop.layer_id == layer_id:
            msg = f"Layer {layer_id} text is locked while the loop is running"
            raise LayerEditBlockedError(msg)
        return self.update_layer(layer_id, **changes)

    def add_layer(self) -> Layer:
        layer = self.stack.add_layer()
        self._refresh_content_bounds()
        return layer

    def remove_layer(self, layer_id: str) -> bool:
        if not self.stack.remove_layer(layer_id):
            return False
        if self.loop.layer_id == layer_id:
            self.loop.stop()
        self.viewport.cancel_drag(layer_id)
        self.paths.forget(layer_id)
        self._refresh_content_bounds()
        return True

    def select_layer(self, layer_id: str) -> Layer:
        return self.stack.select(layer_id)

    def center_layer(self, layer_id: str) -> Layer:
        layer = self.stack.require(layer_id)
        offset = centering_offset(self.paths.get(layer).bounds)
        return self.update_layer(layer_id, x=offset.x, y=offset.y)

    def move_layer(self, translation: LayerTranslation) -> Layer:
        layer = self.stack.move_layer(translation.layer_id, translation.dx, translation.dy)
        self._refresh_content_bounds()
        return layer

    # --- Loop ---

    def start_loop(self) -> bool:
        return self.loop.start(self.stack.active_layer)

    def stop_loop(self) -> None:
        self.loop.stop()

    # --- Camera & pointer ---

    def resize_canvas(self, width: float, height: float) -> None:
        self.viewport.resize_canvas(Size(width, height))

    def pointer_down(self, event: PointerEvent, layer_id: str | None = None) -> InteractionMode:
        layer = self.stack.get(layer_id) if layer_id else None
        if layer is not None and not layer.visible:
            layer = None
        return self.viewport.pointer_down(event, layer)

    def pointer_move(self, event: PointerEvent) -> LayerTranslation | None:
        translation = self.viewport.pointer_move(event)
        if translation is not None:
            self.move_layer(translation)
        return translation

    def pointer_up(self) -> None:
        self.viewport.pointer_up()

    # --- Rendering boundary ---

    def scene(self) -> Scene:
        active_id = self.stack.active_layer_id
        drawables = tuple(
            LayerView(
                layer=layer,
                path=self.paths.get(layer),
                active=layer.id == active_id,
                opacity=self.viewport.layer_opacity(layer.id),
                cursor=self.viewport.layer_cursor(layer),
            )
            for layer in self.stack.visible_layers()
        )
        mode = self.viewport.mode
        return Scene(
            view_box=self.viewport.view_box,
            content_bounds=self._content_bounds,
            auto_fit=self.viewport.auto_fit,
            mode=mode.value,
            cursor=self.viewport.cursor,
            capture_pointer=mode is not InteractionMode.IDLE,
            active_layer_id=active_id,
            looping_layer_id=self.loop.layer_id,
            layers=self.stack.layers,
            drawables=drawables,
        )

    def _refresh_content_bounds(self) -> Bounds:
        self.paths.retain(layer.id for layer in self.stack.layers)
        self._content_bounds = aggregate_content_bounds(self.stack.layers, self.paths)
        self.viewport.update_content_bounds(self._content_bounds)
        return self._content_bounds
