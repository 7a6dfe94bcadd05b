from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from domain.models import Layer, Point
from domain.ports.layers import LayerStore
from domain.ports.scheduling import ScheduledTask, Scheduler
from domain.services.content_bounds import centering_offset
from domain.services.path_cache import PathCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoopConfig:
    tick_interval_seconds: float = 0.015
    closure_tolerance: float = 0.5
    min_length_factor: int = 4
    min_length_floor: int = 40
    max_text_length: int = 8000

    def min_closure_length(self, seed: str) -> int:
        return max(len(seed) * self.min_length_factor, self.min_length_floor)


class LoopStatus(str, Enum):
    GROWING = "growing"
    CLOSED = "closed"
    LIMIT_REACHED = "limit_reached"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class LoopStep:
    layer_id: str
    text: str
    distance: float
    status: LoopStatus
    offset: Point | None = None


class LoopGrowthController:
    """Grow a layer's text from its seed until the path closes on itself.

    Each tick appends the next seed character (cyclically) to the layer's
    live text and stops once the end point lands back near the origin after
    the minimum length, re-centering the layer on its bounds. A hard length
    ceiling stops runaway loops without re-centering.
    """

    def __init__(
        self,
        store: LayerStore,
        scheduler: Scheduler,
        config: LoopConfig | None = None,
        *,
        paths: PathCache | None = None,
    ) -> None:
        self._store = store
        self._paths = paths or PathCache()
        self._scheduler = scheduler
        self.config = config or LoopConfig()
        self._task: ScheduledTask | None = None
        self._layer_id: str | None = None
        self._seed = ""
        self._cursor = 0
        self.last_step: LoopStep | None = None

    @property
    def running(self) -> bool:
        return self._task is not None

    @property
    def layer_id(self) -> str | None:
        return self._layer_id if self.running else None

    @property
    def seed(self) -> str:
        return self._seed

    def start(self, layer: Layer) -> bool:
        if self.running:
            logger.debug("Loop already running on layer %s", self._layer_id)
            return False
        if not layer.text:
            logger.debug("Refusing to loop layer %s with empty text", layer.id)
            return False
        self._layer_id = layer.id
        self._seed = layer.text
        self._cursor = 0
        self.last_step = None
        self._task = self._scheduler.schedule_repeating(
            self.config.tick_interval_seconds, self.tick
        )
        logger.info("Loop started on layer %s with seed of %d chars", layer.id, len(layer.text))
        return True

    def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        logger.info("Loop stopped on layer %s", self._layer_id)

    def tick(self) -> LoopStep | None:
        if not self.running or self._layer_id is None:
            return None
        layer = self._store.get(self._layer_id)
        if layer is None:
            self.stop()
            self.last_step = LoopStep(self._layer_id, "", 0.0, LoopStatus.ABANDONED)
            return self.last_step

        char = self._seed[self._cursor % len(self._seed)]
        self._cursor += 1
        text = layer.text + char
        # Cached under the layer id, so the refresh after the write is a hit.
        path = self._paths.get(layer.model_copy(update={"text": text}))
        distance = path.end_point.distance_to_origin()

        if (
            len(text) > self.config.min_closure_length(self._seed)
            and distance < self.config.closure_tolerance
        ):
            self.stop()
            offset = centering_offset(path.bounds)
            self._store.update_layer(layer.id, text=text, x=offset.x, y=offset.y)
            logger.info("Loop closed on layer %s after %d chars", layer.id, len(text))
            self.last_step = LoopStep(layer.id, text, distance, LoopStatus.CLOSED, offset)
            return self.last_step

        status = LoopStatus.GROWING
        if len(text) > self.config.max_text_length:
            self.stop()
            logger.info("Loop on layer %s hit the %d char limit", layer.id, len(text))
            status = LoopStatus.LIMIT_REACHED
        self._store.update_layer(layer.id, text=text)
        self.last_step = LoopStep(layer.id, text, distance, status)
        return self.last_step
