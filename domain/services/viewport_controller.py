from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum

from domain.models import Bounds, Layer, Point, Size, ViewBox
from domain.ports.interaction import PointerCapture
from domain.services.viewport import (
    BUTTON_ZOOM_IN,
    BUTTON_ZOOM_OUT,
    DEFAULT_VIEW_BOX,
    fit_view_box,
    pan_view_box,
    screen_to_plane_delta,
    units_per_pixel,
    wheel_zoom_factor,
    zoom_view_box,
)

logger = logging.getLogger(__name__)

DEFAULT_CANVAS_SIZE = Size(800.0, 600.0)
DIMMED_LAYER_OPACITY = 0.4


class InteractionMode(str, Enum):
    IDLE = "idle"
    DRAGGING_LAYER = "dragging-layer"
    PANNING_CAMERA = "panning-camera"


class PointerButton(IntEnum):
    PRIMARY = 0
    MIDDLE = 1
    SECONDARY = 2


@dataclass(frozen=True)
class PointerEvent:
    x: float
    y: float
    button: int = PointerButton.PRIMARY
    modifier: bool = False

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    def starts_pan(self) -> bool:
        if self.button in (PointerButton.MIDDLE, PointerButton.SECONDARY):
            return True
        return self.button == PointerButton.PRIMARY and self.modifier


@dataclass(frozen=True)
class LayerTranslation:
    layer_id: str
    dx: float
    dy: float


@dataclass(frozen=True)
class _DragState:
    layer_id: str
    anchor: Point


@dataclass(frozen=True)
class _PanState:
    start: Point
    start_view: ViewBox
    scale: float


class ViewportController:
    """Camera state plus the pointer state machine driving it.

    At most one of dragging and panning is active at a time. Panning and
    zooming only ever replace the view box; dragging only ever reports layer
    translations for the host to apply.
    """

    def __init__(
        self,
        canvas_size: Size = DEFAULT_CANVAS_SIZE,
        *,
        capture: PointerCapture | None = None,
    ) -> None:
        self._canvas_size = canvas_size
        self._capture = capture
        self._view_box = DEFAULT_VIEW_BOX
        self._auto_fit = True
        self._content_bounds: Bounds | None = None
        self._drag: _DragState | None = None
        self._pan: _PanState | None = None

    @property
    def view_box(self) -> ViewBox:
        return self._view_box

    @property
    def auto_fit(self) -> bool:
        return self._auto_fit

    @property
    def canvas_size(self) -> Size:
        return self._canvas_size

    @property
    def mode(self) -> InteractionMode:
        if self._drag is not None:
            return InteractionMode.DRAGGING_LAYER
        if self._pan is not None:
            return InteractionMode.PANNING_CAMERA
        return InteractionMode.IDLE

    @property
    def dragging_layer_id(self) -> str | None:
        return self._drag.layer_id if self._drag else None

    @property
    def cursor(self) -> str:
        return "grabbing" if self._pan is not None else "grab"

    def layer_cursor(self, layer: Layer) -> str:
        return "default" if layer.locked else "move"

    def layer_opacity(self, layer_id: str) -> float:
        if self._drag is not None and self._drag.layer_id != layer_id:
            return DIMMED_LAYER_OPACITY
        return 1.0

    def resize_canvas(self, size: Size) -> None:
        if size.width <= 0 or size.height <= 0:
            msg = f"Canvas size must be positive, got {size.width}x{size.height}"
            raise ValueError(msg)
        self._canvas_size = size

    # --- Auto-fit ---

    def update_content_bounds(self, bounds: Bounds) -> None:
        if bounds == self._content_bounds:
            return
        self._content_bounds = bounds
        if self._auto_fit:
            self._view_box = fit_view_box(bounds)

    def enable_auto_fit(self) -> None:
        self._auto_fit = True
        if self._content_bounds is not None:
            self._view_box = fit_view_box(self._content_bounds)

    # --- Zoom ---

    def wheel(self, delta_y: float) -> None:
        self.zoom(wheel_zoom_factor(delta_y))

    def zoom_in(self) -> None:
        self.zoom(BUTTON_ZOOM_IN)

    def zoom_out(self) -> None:
        self.zoom(BUTTON_ZOOM_OUT)

    def zoom(self, factor: float) -> None:
        self._auto_fit = False
        self._view_box = zoom_view_box(self._view_box, factor)

    # --- Pointer state machine ---

    def pointer_down(self, event: PointerEvent, layer: Layer | None = None) -> InteractionMode:
        """Start a drag (press on an unlocked layer) or a pan (pan button on the canvas).

        A press on a locked layer falls through to the canvas, so it can still
        start a pan but never a drag.
        """
        if self.mode is not InteractionMode.IDLE:
            return self.mode
        if layer is not None and event.button == PointerButton.PRIMARY:
            if not layer.locked:
                self._drag = _DragState(layer_id=layer.id, anchor=event.position)
                self._attach_capture()
                return self.mode
            logger.debug("Ignoring drag on locked layer %s", layer.id)
        if event.starts_pan():
            self._auto_fit = False
            self._pan = _PanState(
                start=event.position,
                start_view=self._view_box,
                scale=units_per_pixel(self._view_box, self._canvas_size),
            )
            self._attach_capture()
        return self.mode

    def pointer_move(self, event: PointerEvent) -> LayerTranslation | None:
        if self._pan is not None:
            self._view_box = pan_view_box(
                self._pan.start_view,
                self._pan.scale,
                event.x - self._pan.start.x,
                event.y - self._pan.start.y,
            )
            return None
        if self._drag is not None:
            delta = screen_to_plane_delta(
                self._view_box,
                self._canvas_size,
                event.x - self._drag.anchor.x,
                event.y - self._drag.anchor.y,
            )
            layer_id = self._drag.layer_id
            self._drag = _DragState(layer_id=layer_id, anchor=event.position)
            return LayerTranslation(layer_id=layer_id, dx=delta.x, dy=delta.y)
        return None

    def pointer_up(self) -> None:
        was_active = self.mode is not InteractionMode.IDLE
        self._drag = None
        self._pan = None
        if was_active and self._capture is not None:
            self._capture.detach()

    def cancel_drag(self, layer_id: str) -> None:
        if self._drag is not None and self._drag.layer_id == layer_id:
            self.pointer_up()

    def _attach_capture(self) -> None:
        if self._capture is not None:
            self._capture.attach()
