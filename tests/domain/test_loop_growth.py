from __future__ import annotations

import pytest

from adapters.scheduling.manual_scheduler import ManualScheduler
from domain.models import Layer
from domain.services.generate_path import generate_path
from domain.services.layer_stack import LayerStack
from domain.services.loop_growth import LoopConfig, LoopGrowthController, LoopStatus
from domain.services.path_cache import PathCache


def build_loop(
    text: str,
    scheduler: ManualScheduler,
    config: LoopConfig | None = None,
) -> tuple[LayerStack, LoopGrowthController]:
    stack = LayerStack([Layer(id="seed", text=text, segment_length=10)])
    return stack, LoopGrowthController(stack, scheduler, config)


def test_start_captures_seed_and_schedules_one_task(scheduler: ManualScheduler) -> None:
    stack, loop = build_loop("AB", scheduler)

    assert loop.start(stack.require("seed"))
    assert loop.running
    assert loop.seed == "AB"
    assert loop.layer_id == "seed"
    assert len(scheduler.active_tasks) == 1
    assert scheduler.active_tasks[0].interval_seconds == pytest.approx(0.015)


def test_empty_seed_is_refused(scheduler: ManualScheduler) -> None:
    stack, loop = build_loop("", scheduler)
    assert not loop.start(stack.require("seed"))
    assert not loop.running
    assert scheduler.active_tasks == []


def test_only_one_loop_runs_at_a_time(scheduler: ManualScheduler) -> None:
    stack, loop = build_loop("AB", scheduler)
    loop.start(stack.require("seed"))
    assert not loop.start(stack.require("seed"))
    assert len(scheduler.active_tasks) == 1


def test_ticks_append_seed_characters_cyclically(scheduler: ManualScheduler) -> None:
    stack, loop = build_loop("AB", scheduler)
    loop.start(stack.require("seed"))

    scheduler.advance(5)

    assert stack.require("seed").text == "AB" + "ABABA"


def test_appends_follow_live_text_not_seed(scheduler: ManualScheduler) -> None:
    stack, loop = build_loop("AB", scheduler)
    loop.start(stack.require("seed"))
    stack.update_layer("seed", text="ABZZ")

    scheduler.advance(1)

    assert stack.require("seed").text == "ABZZA"


def test_closure_is_not_checked_before_minimum_length(scheduler: ManualScheduler) -> None:
    stack, loop = build_loop("AB", scheduler)
    loop.start(stack.require("seed"))

    min_length = loop.config.min_closure_length("AB")
    assert min_length == 40
    while len(stack.require("seed").text) < min_length:
        step = loop.tick()
        assert step is not None
        assert step.status is LoopStatus.GROWING
    assert loop.running


def test_closed_loop_stops_and_recenters(scheduler: ManualScheduler) -> None:
    # "N" turns by 180 degrees, so the walk bounces between (0, 0) and (-10, 0).
    stack, loop = build_loop("N", scheduler)
    loop.start(stack.require("seed"))

    scheduler.run_until_idle(max_ticks=500)

    step = loop.last_step
    assert step is not None
    assert step.status is LoopStatus.CLOSED
    assert not loop.running
    assert scheduler.active_tasks == []

    layer = stack.require("seed")
    assert len(layer.text) == 42
    assert step.distance < 0.5
    assert layer.x == pytest.approx(5.0, abs=1e-9)
    assert layer.y == pytest.approx(0.0, abs=1e-9)

    bounds = generate_path(layer.text, layer.segment_length).bounds.translated(layer.x, layer.y)
    assert bounds.min_x == pytest.approx(-bounds.max_x, abs=1e-9)
    assert bounds.min_y == pytest.approx(-bounds.max_y, abs=1e-9)


def test_length_ceiling_stops_without_recentering(scheduler: ManualScheduler) -> None:
    # "A" never turns, so the path walks away forever.
    config = LoopConfig(max_text_length=60)
    stack, loop = build_loop("A", scheduler, config)
    loop.start(stack.require("seed"))

    scheduler.run_until_idle(max_ticks=500)

    step = loop.last_step
    assert step is not None
    assert step.status is LoopStatus.LIMIT_REACHED
    layer = stack.require("seed")
    assert len(layer.text) == 61
    assert (layer.x, layer.y) == (0.0, 0.0)
    assert not loop.running


def test_stop_is_idempotent_and_halts_ticks(scheduler: ManualScheduler) -> None:
    stack, loop = build_loop("AB", scheduler)
    loop.start(stack.require("seed"))
    scheduler.advance(2)

    loop.stop()
    loop.stop()

    assert scheduler.advance(10) == 0
    assert loop.tick() is None
    assert stack.require("seed").text == "ABAB"


def test_loop_can_restart_with_new_seed(scheduler: ManualScheduler) -> None:
    stack, loop = build_loop("AB", scheduler)
    loop.start(stack.require("seed"))
    scheduler.advance(1)
    loop.stop()

    assert loop.start(stack.require("seed"))
    assert loop.seed == "ABA"


def test_removed_layer_abandons_loop(scheduler: ManualScheduler) -> None:
    stack = LayerStack([Layer(id="keep"), Layer(id="seed", text="AB")])
    loop = LoopGrowthController(stack, scheduler)
    loop.start(stack.require("seed"))
    stack.remove_layer("seed")

    scheduler.advance(1)

    assert not loop.running
    assert loop.last_step is not None
    assert loop.last_step.status is LoopStatus.ABANDONED


def test_tick_leaves_grown_path_in_shared_cache(scheduler: ManualScheduler) -> None:
    stack = LayerStack([Layer(id="seed", text="AB")])
    paths = PathCache()
    loop = LoopGrowthController(stack, scheduler, paths=paths)
    loop.start(stack.require("seed"))

    scheduler.advance(1)
    grown = stack.require("seed")

    assert paths.generated_count == 1
    assert paths.get(grown) == generate_path("ABA", grown.segment_length)
    assert paths.generated_count == 1
