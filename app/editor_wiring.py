from __future__ import annotations

from adapters.browser.pointer_capture import BrowserPointerCapture
from app.config import AppSettings
from domain.models import Size
from domain.ports.interaction import PointerCapture
from domain.ports.scheduling import Scheduler
from domain.services.editor_session import EditorSession
from domain.services.layer_stack import LayerStack, default_layers
from domain.services.viewport_controller import ViewportController


def build_layer_stack(settings: AppSettings) -> LayerStack:
    editor = settings.editor
    return LayerStack(
        default_layers(editor.initial_text, editor.default_segment_length),
        palette=editor.palette,
        segment_length=editor.default_segment_length,
    )


def build_editor_session(
    settings: AppSettings,
    scheduler: Scheduler,
    capture: PointerCapture | None = None,
) -> EditorSession:
    viewport = ViewportController(
        Size(settings.editor.canvas_width, settings.editor.canvas_height),
        capture=capture or BrowserPointerCapture(),
    )
    return EditorSession(
        build_layer_stack(settings),
        viewport,
        scheduler,
        loop_config=settings.loop.to_loop_config(),
    )
