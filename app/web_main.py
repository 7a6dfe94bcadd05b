from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, ORJSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field, ValidationError

from adapters.scheduling.asyncio_scheduler import AsyncioScheduler
from app.config import AppSettings
from app.editor_wiring import build_editor_session
from domain.models import Layer, LayerPatch, format_number
from domain.ports.scheduling import Scheduler
from domain.services.editor_session import EditorSession, LayerEditBlockedError
from domain.services.viewport_controller import PointerEvent

TEMPLATES_DIR = Path(__file__).parent / "web" / "templates"
STATIC_DIR = Path(__file__).parent / "web" / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["fmt"] = format_number
logger = logging.getLogger(__name__)


class PointerPayload(BaseModel):
    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)
    button: int = Field(default=0, ge=0, le=4)
    modifier: bool = False
    layer_id: str | None = None

    def to_event(self) -> PointerEvent:
        return PointerEvent(x=self.x, y=self.y, button=self.button, modifier=self.modifier)


class WheelPayload(BaseModel):
    delta_y: float = Field(allow_inf_nan=False)


class CanvasPayload(BaseModel):
    width: float = Field(gt=0, allow_inf_nan=False)
    height: float = Field(gt=0, allow_inf_nan=False)


@dataclass(frozen=True)
class EditorContext:
    settings: AppSettings
    session: EditorSession


def create_app(settings: AppSettings, scheduler: Scheduler | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        context.session.stop_loop()

    app = FastAPI(title=settings.editor.title, lifespan=lifespan)
    context = EditorContext(
        settings=settings,
        session=build_editor_session(settings, scheduler or AsyncioScheduler()),
    )
    app.state.context = context

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        return ORJSONResponse(status_code=422, content={"detail": error_details(exc.errors())})

    if STATIC_DIR.exists():
        app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    def render_template(
        request: Request, template_name: str, template_context: dict[str, Any]
    ) -> HTMLResponse:
        context_data = dict(template_context)
        context_data.update(
            {
                "request": request,
                "settings": context.settings,
                "theme": request.query_params.get("theme") or context.settings.editor.theme,
            }
        )
        return templates.TemplateResponse(request, template_name, context_data)

    @app.get("/", response_class=HTMLResponse)
    async def editor_view(
        request: Request, context: EditorContext = Depends(get_context)
    ) -> HTMLResponse:
        return render_template(request, "editor.html", {"scene": context.session.scene()})

    @app.get("/canvas", response_class=HTMLResponse)
    async def canvas_view(
        request: Request, context: EditorContext = Depends(get_context)
    ) -> HTMLResponse:
        return render_template(request, "canvas.html", {"scene": context.session.scene()})

    @app.get("/api/scene")
    async def api_scene(context: EditorContext = Depends(get_context)) -> ORJSONResponse:
        return scene_response(context)

    # --- Layers ---

    @app.post("/api/layers")
    async def api_add_layer(context: EditorContext = Depends(get_context)) -> ORJSONResponse:
        context.session.add_layer()
        return scene_response(context)

    @app.patch("/api/layers/{layer_id}")
    async def api_update_layer(
        layer_id: str,
        patch: LayerPatch,
        context: EditorContext = Depends(get_context),
    ) -> ORJSONResponse:
        require_layer(context, layer_id)
        try:
            context.session.edit_layer(layer_id, **patch.changes())
        except LayerEditBlockedError as exc:
            logger.debug("Rejected edit of layer %s: %s", layer_id, exc)
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except ValidationError as exc:
            raise HTTPException(status_code=422, detail=error_details(exc.errors())) from exc
        return scene_response(context)

    @app.delete("/api/layers/{layer_id}")
    async def api_remove_layer(
        layer_id: str, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        require_layer(context, layer_id)
        if not context.session.remove_layer(layer_id):
            raise HTTPException(status_code=409, detail="At least one layer must remain")
        return scene_response(context)

    @app.post("/api/layers/{layer_id}/select")
    async def api_select_layer(
        layer_id: str, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        require_layer(context, layer_id)
        context.session.select_layer(layer_id)
        return scene_response(context)

    @app.post("/api/layers/{layer_id}/center")
    async def api_center_layer(
        layer_id: str, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        require_layer(context, layer_id)
        context.session.center_layer(layer_id)
        return scene_response(context)

    # --- Camera & pointer ---

    @app.post("/api/canvas")
    async def api_resize_canvas(
        payload: CanvasPayload, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        context.session.resize_canvas(payload.width, payload.height)
        return scene_response(context)

    @app.post("/api/pointer/down")
    async def api_pointer_down(
        payload: PointerPayload, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        context.session.pointer_down(payload.to_event(), payload.layer_id)
        return scene_response(context)

    @app.post("/api/pointer/move")
    async def api_pointer_move(
        payload: PointerPayload, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        context.session.pointer_move(payload.to_event())
        return scene_response(context)

    @app.post("/api/pointer/up")
    async def api_pointer_up(context: EditorContext = Depends(get_context)) -> ORJSONResponse:
        context.session.pointer_up()
        return scene_response(context)

    @app.post("/api/wheel")
    async def api_wheel(
        payload: WheelPayload, context: EditorContext = Depends(get_context)
    ) -> ORJSONResponse:
        context.session.viewport.wheel(payload.delta_y)
        return scene_response(context)

    @app.post("/api/view/zoom-in")
    async def api_zoom_in(context: EditorContext = Depends(get_context)) -> ORJSONResponse:
        context.session.viewport.zoom_in()
        return scene_response(context)

    @app.post("/api/view/zoom-out")
    async def api_zoom_out(context: EditorContext = Depends(get_context)) -> ORJSONResponse:
        context.session.viewport.zoom_out()
        return scene_response(context)

    @app.post("/api/view/auto-fit")
    async def api_auto_fit(context: EditorContext = Depends(get_context)) -> ORJSONResponse:
        context.session.viewport.enable_auto_fit()
        return scene_response(context)

    # --- Loop ---

    @app.post("/api/loop/start")
    async def api_loop_start(context: EditorContext = Depends(get_context)) -> ORJSONResponse:
        if not context.session.start_loop():
            logger.debug(
                "Loop start refused for layer %s", context.session.stack.active_layer_id
            )
            raise HTTPException(
                status_code=409, detail="Loop needs non-empty text and no running loop"
            )
        return scene_response(context)

    @app.post("/api/loop/stop")
    async def api_loop_stop(context: EditorContext = Depends(get_context)) -> ORJSONResponse:
        context.session.stop_loop()
        return scene_response(context)

    return app


def error_details(errors: Sequence[Any]) -> list[dict[str, Any]]:
    # Rejected input values are left out; they may be NaN or infinite.
    return [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in errors
    ]


def get_context(request: Request) -> EditorContext:
    return cast(EditorContext, request.app.state.context)


def require_layer(context: EditorContext, layer_id: str) -> Layer:
    try:
        return context.session.stack.require(layer_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Layer not found") from exc


def scene_response(context: EditorContext) -> ORJSONResponse:
    payload = context.session.scene().to_dict()
    last_step = context.session.loop.last_step
    payload["loop"] = {
        "running": context.session.loop.running,
        "status": last_step.status.value if last_step else None,
        "text_length": len(last_step.text) if last_step else None,
    }
    return ORJSONResponse(payload)
