from __future__ import annotations

from collections.abc import Iterable

from domain.models import Bounds, Layer, Point
from domain.services.path_cache import PathCache

# Framing used when nothing visible contributes geometry.
DEFAULT_CONTENT_BOUNDS = Bounds(-50.0, 50.0, -50.0, 50.0)


def layer_world_bounds(layer: Layer, paths: PathCache) -> Bounds:
    return paths.get(layer).bounds.translated(layer.x, layer.y)


def aggregate_content_bounds(layers: Iterable[Layer], paths: PathCache) -> Bounds:
    combined: Bounds | None = None
    for layer in layers:
        if not layer.visible:
            continue
        bounds = layer_world_bounds(layer, paths)
        combined = bounds if combined is None else combined.union(bounds)
    return combined or DEFAULT_CONTENT_BOUNDS


def centering_offset(bounds: Bounds) -> Point:
    """Layer offset that puts the center of ``bounds`` on the origin."""
    center = bounds.center
    return Point(-center.x, -center.y)
