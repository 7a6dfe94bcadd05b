from __future__ import annotations

import logging

from domain.ports.interaction import PointerCapture

logger = logging.getLogger(__name__)


class BrowserPointerCapture(PointerCapture):
    """Tracks whether the browser client should hold window-level pointer listeners.

    The flag is published in every scene payload. The client binds
    ``mousemove``/``mouseup`` on ``window`` at press time and drops them on
    release, or early when the press response reports no capture.
    """

    def __init__(self) -> None:
        self.attached = False
        self.attach_count = 0

    def attach(self) -> None:
        if self.attached:
            logger.warning("Pointer capture already attached; ignoring duplicate attach.")
            return
        self.attached = True
        self.attach_count += 1

    def detach(self) -> None:
        self.attached = False
