from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from domain.models import Bounds, GeneratedPath, Layer, ViewBox

STROKE_OPACITY = 0.9


def stroke_width(layer: Layer, active: bool) -> float:
    if active:
        return max(0.75, layer.segment_length * 0.1)
    return max(0.5, layer.segment_length * 0.075)


def hit_stroke_width(layer: Layer) -> float:
    # Transparent stroke around the visible line so thin curves stay grabbable.
    return max(10.0, layer.segment_length * 2.0)


@dataclass(frozen=True)
class LayerView:
    layer: Layer
    path: GeneratedPath
    active: bool
    opacity: float
    cursor: str

    @property
    def stroke_width(self) -> float:
        return stroke_width(self.layer, self.active)

    @property
    def hit_stroke_width(self) -> float:
        return hit_stroke_width(self.layer)

    @property
    def transform(self) -> str:
        return f"translate({self.layer.x}, {self.layer.y})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.layer.id,
            "color": self.layer.color,
            "transform": self.transform,
            "active": self.active,
            "opacity": self.opacity,
            "cursor": self.cursor,
            "stroke_width": self.stroke_width,
            "hit_stroke_width": self.hit_stroke_width,
            "path": self.path.to_dict(),
        }


@dataclass(frozen=True)
class Scene:
    view_box: ViewBox
    content_bounds: Bounds
    auto_fit: bool
    mode: str
    cursor: str
    capture_pointer: bool
    active_layer_id: str
    looping_layer_id: str | None
    layers: tuple[Layer, ...]
    drawables: tuple[LayerView, ...]

    @property
    def visible_count(self) -> int:
        return len(self.drawables)

    def to_dict(self) -> dict[str, Any]:
        return {
            "view_box": self.view_box.to_dict(),
            "view_box_attribute": self.view_box.to_attribute(),
            "content_bounds": self.content_bounds.to_dict(),
            "auto_fit": self.auto_fit,
            "mode": self.mode,
            "cursor": self.cursor,
            "capture_pointer": self.capture_pointer,
            "active_layer_id": self.active_layer_id,
            "looping_layer_id": self.looping_layer_id,
            "layers": [layer.model_dump() for layer in self.layers],
            "drawables": [drawable.to_dict() for drawable in self.drawables],
        }
