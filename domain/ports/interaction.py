from __future__ import annotations

from typing import Protocol


class PointerCapture(Protocol):
    """Window-wide pointer listeners, held only while an interaction is active."""

    def attach(self) -> None: ...

    def detach(self) -> None: ...
