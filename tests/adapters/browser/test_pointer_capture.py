from __future__ import annotations

import logging

import pytest

from adapters.browser.pointer_capture import BrowserPointerCapture
from domain.models import Size
from domain.services.viewport_controller import PointerButton, PointerEvent, ViewportController


def test_duplicate_attach_is_ignored(caplog: pytest.LogCaptureFixture) -> None:
    capture = BrowserPointerCapture()
    capture.attach()
    with caplog.at_level(logging.WARNING, logger="adapters.browser.pointer_capture"):
        capture.attach()

    assert capture.attached
    assert capture.attach_count == 1
    assert "already attached" in caplog.text


def test_pan_attaches_and_release_detaches() -> None:
    capture = BrowserPointerCapture()
    controller = ViewportController(Size(800, 600), capture=capture)

    controller.pointer_down(PointerEvent(10, 10, button=PointerButton.MIDDLE))
    assert capture.attached
    controller.pointer_up()
    assert not capture.attached

    controller.pointer_down(PointerEvent(10, 10, button=PointerButton.PRIMARY, modifier=True))
    controller.pointer_up()
    assert capture.attach_count == 2


def test_release_without_interaction_leaves_capture_alone() -> None:
    capture = BrowserPointerCapture()
    controller = ViewportController(Size(800, 600), capture=capture)

    controller.pointer_down(PointerEvent(10, 10))
    controller.pointer_up()

    assert capture.attach_count == 0
    assert not capture.attached
