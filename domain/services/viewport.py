"""Camera math over the infinite drawing plane.

All functions are pure: they take a view box (the visible rectangle in plane
units) and return a new one, so they can be exercised without a display.
"""

from __future__ import annotations

from domain.models import Bounds, Point, Size, ViewBox

AUTO_FIT_MIN_PADDING = 100.0
AUTO_FIT_PADDING_RATIO = 0.15
MIN_VIEW_SIZE = 100.0

WHEEL_ZOOM_IN = 0.9
WHEEL_ZOOM_OUT = 1.1
BUTTON_ZOOM_IN = 0.8
BUTTON_ZOOM_OUT = 1.2

DEFAULT_VIEW_BOX = ViewBox(-50.0, -50.0, 100.0, 100.0)


def fit_view_box(bounds: Bounds) -> ViewBox:
    padding_x = max(AUTO_FIT_MIN_PADDING, bounds.width * AUTO_FIT_PADDING_RATIO)
    padding_y = max(AUTO_FIT_MIN_PADDING, bounds.height * AUTO_FIT_PADDING_RATIO)
    return ViewBox(
        x=bounds.min_x - padding_x,
        y=bounds.min_y - padding_y,
        width=max(bounds.width + padding_x * 2, MIN_VIEW_SIZE),
        height=max(bounds.height + padding_y * 2, MIN_VIEW_SIZE),
    )


def zoom_view_box(view: ViewBox, factor: float) -> ViewBox:
    """Scale the view box by ``factor`` around its center.

    Factors below 1 zoom in, above 1 zoom out.
    """
    if factor <= 0:
        msg = f"Zoom factor must be positive, got {factor}"
        raise ValueError(msg)
    new_width = view.width * factor
    new_height = view.height * factor
    return ViewBox(
        x=view.x + (view.width - new_width) / 2,
        y=view.y + (view.height - new_height) / 2,
        width=new_width,
        height=new_height,
    )


def wheel_zoom_factor(delta_y: float) -> float:
    return WHEEL_ZOOM_OUT if delta_y > 0 else WHEEL_ZOOM_IN


def units_per_pixel(view: ViewBox, canvas: Size) -> float:
    """Plane units covered by one screen pixel.

    The view box is letterboxed into the canvas keeping its aspect ratio
    (``xMidYMid meet``), so a single uniform scale applies on both axes and is
    set by whichever axis is the tighter fit.
    """
    if canvas.width <= 0 or canvas.height <= 0:
        msg = f"Canvas size must be positive, got {canvas.width}x{canvas.height}"
        raise ValueError(msg)
    return max(view.width / canvas.width, view.height / canvas.height)


def screen_to_plane_delta(view: ViewBox, canvas: Size, dx_px: float, dy_px: float) -> Point:
    scale = units_per_pixel(view, canvas)
    return Point(dx_px * scale, dy_px * scale)


def pan_view_box(start_view: ViewBox, scale: float, dx_px: float, dy_px: float) -> ViewBox:
    """Translate ``start_view`` so the plane follows a pointer moved by (dx, dy) pixels."""
    return ViewBox(
        x=start_view.x - dx_px * scale,
        y=start_view.y - dy_px * scale,
        width=start_view.width,
        height=start_view.height,
    )
