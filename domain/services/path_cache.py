from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from domain.models import GeneratedPath, Layer
from domain.services.generate_path import generate_path

PathGenerator = Callable[[str, float], GeneratedPath]


@dataclass(frozen=True)
class _CacheEntry:
    text: str
    segment_length: int
    path: GeneratedPath


class PathCache:
    """Per-layer memo of generated geometry.

    An entry is reused while the layer's text and segment length are unchanged;
    position, color and flag edits never trigger regeneration.
    """

    def __init__(self, generator: PathGenerator = generate_path) -> None:
        self._generator = generator
        self._entries: dict[str, _CacheEntry] = {}
        self.generated_count = 0

    def get(self, layer: Layer) -> GeneratedPath:
        entry = self._entries.get(layer.id)
        if (
            entry is not None
            and entry.text == layer.text
            and entry.segment_length == layer.segment_length
        ):
            return entry.path
        path = self._generator(layer.text, layer.segment_length)
        self.generated_count += 1
        self._entries[layer.id] = _CacheEntry(layer.text, layer.segment_length, path)
        return path

    def forget(self, layer_id: str) -> None:
        self._entries.pop(layer_id, None)

    def retain(self, layer_ids: Iterable[str]) -> None:
        keep = set(layer_ids)
        for layer_id in [key for key in self._entries if key not in keep]:
            del self._entries[layer_id]

    def __contains__(self, layer_id: object) -> bool:
        return layer_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
