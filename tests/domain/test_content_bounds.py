from __future__ import annotations

import pytest

from domain.models import Bounds, Layer
from domain.services.content_bounds import (
    DEFAULT_CONTENT_BOUNDS,
    aggregate_content_bounds,
    centering_offset,
    layer_world_bounds,
)
from domain.services.generate_path import generate_path
from domain.services.path_cache import PathCache


def test_world_bounds_apply_layer_offset() -> None:
    cache = PathCache()
    layer = Layer(id="a", text="Hello World", x=100.0, y=-40.0)
    local = generate_path("Hello World", 10).bounds

    assert layer_world_bounds(layer, cache) == local.translated(100.0, -40.0)


def test_aggregate_unions_visible_layers_only() -> None:
    cache = PathCache()
    left = Layer(id="left", text="A", x=-100.0)
    right = Layer(id="right", text="A", x=200.0, y=30.0)
    hidden = Layer(id="hidden", text="A", x=5000.0, visible=False)

    bounds = aggregate_content_bounds([left, right, hidden], cache)

    assert bounds.min_x == pytest.approx(-90.0)
    assert bounds.max_x == pytest.approx(210.0)
    assert bounds.min_y == pytest.approx(0.0)
    assert bounds.max_y == pytest.approx(30.0)
    assert "hidden" not in cache


def test_no_visible_layers_fall_back_to_default_box() -> None:
    cache = PathCache()
    assert aggregate_content_bounds([], cache) == DEFAULT_CONTENT_BOUNDS
    hidden = Layer(id="h", text="ABC", visible=False)
    assert aggregate_content_bounds([hidden], cache) == DEFAULT_CONTENT_BOUNDS


def test_centering_offset_moves_box_center_to_origin() -> None:
    bounds = Bounds(10.0, 30.0, -8.0, 2.0)
    offset = centering_offset(bounds)
    centered = bounds.translated(offset.x, offset.y)

    assert offset.x == pytest.approx(-20.0)
    assert offset.y == pytest.approx(3.0)
    assert centered.min_x == pytest.approx(-centered.max_x)
    assert centered.min_y == pytest.approx(-centered.max_y)
