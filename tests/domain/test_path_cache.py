from __future__ import annotations

from domain.models import Layer
from domain.services.generate_path import generate_path
from domain.services.path_cache import PathCache


def test_position_and_style_changes_reuse_cached_geometry() -> None:
    cache = PathCache()
    layer = Layer(id="a", text="Hello", segment_length=10)

    first = cache.get(layer)
    moved = layer.model_copy(update={"x": 50.0, "y": -20.0, "color": "#ff0000", "locked": True})
    assert cache.get(moved) is first
    assert cache.generated_count == 1


def test_text_or_segment_change_regenerates() -> None:
    cache = PathCache()
    layer = Layer(id="a", text="Hello", segment_length=10)
    cache.get(layer)

    longer = cache.get(layer.model_copy(update={"text": "Hello!"}))
    assert cache.generated_count == 2
    assert longer == generate_path("Hello!", 10)

    cache.get(layer.model_copy(update={"text": "Hello!", "segment_length": 12}))
    assert cache.generated_count == 3


def test_entries_are_tracked_per_layer() -> None:
    cache = PathCache()
    cache.get(Layer(id="a", text="AB"))
    cache.get(Layer(id="b", text="AB"))
    assert cache.generated_count == 2
    assert len(cache) == 2

    cache.retain(["b"])
    assert "a" not in cache
    assert "b" in cache

    cache.forget("b")
    cache.forget("missing")
    assert len(cache) == 0
