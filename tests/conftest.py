from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from adapters.browser.pointer_capture import BrowserPointerCapture
from adapters.scheduling.manual_scheduler import ManualScheduler
from app.config import AppSettings, EditorSettings, LoopSettings
from domain.models import Layer, Size
from domain.services.editor_session import EditorSession
from domain.services.layer_stack import LayerStack
from domain.services.loop_growth import LoopConfig
from domain.services.viewport_controller import ViewportController


def _clear_curves_env() -> None:
    for key in list(os.environ):
        if key.startswith("CURVES_"):
            os.environ.pop(key, None)


_clear_curves_env()


@pytest.fixture(autouse=True)
def clear_curves_env() -> Generator[None, None, None]:
    _clear_curves_env()
    yield
    _clear_curves_env()


@pytest.fixture
def editor_settings() -> EditorSettings:
    return EditorSettings(
        title="Test Composer",
        theme="light",
        initial_text="Hello World",
        default_segment_length=10,
        canvas_width=800.0,
        canvas_height=600.0,
    )


@pytest.fixture
def app_settings_factory(editor_settings: EditorSettings) -> Callable[..., AppSettings]:
    def _factory(**loop_overrides: object) -> AppSettings:
        return AppSettings(
            editor=editor_settings,
            loop=LoopSettings().model_copy(update=loop_overrides),
        )

    return _factory


@pytest.fixture
def app_settings(app_settings_factory: Callable[..., AppSettings]) -> AppSettings:
    return app_settings_factory()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def capture() -> BrowserPointerCapture:
    return BrowserPointerCapture()


@pytest.fixture
def session_factory(
    scheduler: ManualScheduler, capture: BrowserPointerCapture
) -> Callable[..., EditorSession]:
    def _factory(
        layers: list[Layer] | None = None,
        loop_config: LoopConfig | None = None,
        canvas: Size = Size(800.0, 600.0),
    ) -> EditorSession:
        ids = iter(f"layer-{index}" for index in range(2, 100))
        return EditorSession(
            LayerStack(layers, id_factory=lambda: next(ids)),
            ViewportController(canvas, capture=capture),
            scheduler,
            loop_config=loop_config,
        )

    return _factory
