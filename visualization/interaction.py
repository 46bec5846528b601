"""
Brush interaction state and pointer handlers for the context pane.
Pressing inside the window drags it; pressing elsewhere starts a new selection.
All positions are pixels along the context x range [0, width].
"""

import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

DRAG = "drag"
SELECT = "select"


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


@dataclass
class InteractionState:
    """Selection window: pixel offset x and pixel width dx."""

    x: float = 200.0
    dx: float = 100.0

    def clamp(self, width: float) -> "InteractionState":
        """Keep 0 <= x, 0 <= dx and x + dx <= width (mutates and returns self)."""
        width = max(0.0, float(width))
        self.dx = _clamp(float(self.dx), 0.0, width)
        self.x = _clamp(float(self.x), 0.0, width - self.dx)
        return self


class BrushController:
    """
    Translate pointer down/move/up into InteractionState updates.

    on_change is called after every state change (the chart uses it for a focus-only redraw).
    """

    def __init__(
        self,
        state: InteractionState,
        width: float,
        on_change: Callable[[InteractionState], None] | None = None,
    ):
        self.state = state
        self.width = float(width)
        self.on_change = on_change
        self.mode: str | None = None
        self._anchor = 0.0
        self._grab_offset = 0.0

    @property
    def active(self) -> bool:
        return self.mode is not None

    def hit(self, px: float) -> bool:
        """True if px falls inside the current window."""
        return self.state.x <= px <= self.state.x + self.state.dx

    def on_pointer_down(self, px: float) -> None:
        if self.hit(px) and self.state.dx > 0:
            self.mode = DRAG
            self._grab_offset = px - self.state.x
            return
        self.mode = SELECT
        self._anchor = _clamp(px, 0.0, self.width)
        self.state.x = self._anchor
        self.state.dx = 0.0
        self._changed()

    def on_pointer_move(self, px: float) -> None:
        if self.mode == DRAG:
            self.state.x = _clamp(px - self._grab_offset, 0.0, self.width - self.state.dx)
        elif self.mode == SELECT:
            p = _clamp(px, 0.0, self.width)
            self.state.x = min(self._anchor, p)
            self.state.dx = abs(p - self._anchor)
        else:
            return
        self._changed()

    def on_pointer_up(self, px: float | None = None) -> None:
        if self.mode is None:
            return
        if px is not None:
            self.on_pointer_move(px)
        logger.info("Brush %s ended at x=%.1f dx=%.1f", self.mode, self.state.x, self.state.dx)
        self.mode = None

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self.state)
