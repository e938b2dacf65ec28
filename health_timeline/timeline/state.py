"""Explicit view state threaded through layout and gesture handling."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum

from .zoom import DEFAULT_ZOOM_LEVEL, month_width, zoom_in, zoom_out


class Grip(str, Enum):
    """Drag affordance on an entry bar."""

    MOVE = "move"
    RESIZE_START = "resize-start"
    RESIZE_END = "resize-end"


class Mode(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    PANNING = "panning"


@dataclass(frozen=True)
class DragState:
    entry_id: str
    grip: Grip
    anchor_x: float
    original_start: date
    original_end: date | None


@dataclass(frozen=True)
class DragPreview:
    start_date: date
    end_date: date | None


@dataclass(frozen=True)
class PanState:
    anchor_x: float
    scroll_offset: float


@dataclass(frozen=True)
class ViewState:
    """Ephemeral UI state: zoom plus at most one active gesture.

    ``drag`` and ``preview`` exist only while an entry is being dragged,
    ``pan`` only while the canvas is being panned. The two never coexist.
    """

    zoom_level: int = DEFAULT_ZOOM_LEVEL
    drag: DragState | None = None
    preview: DragPreview | None = None
    pan: PanState | None = None

    @property
    def month_width(self) -> int:
        return month_width(self.zoom_level)

    @property
    def mode(self) -> Mode:
        if self.drag is not None:
            return Mode.DRAGGING
        if self.pan is not None:
            return Mode.PANNING
        return Mode.IDLE

    def zoomed_in(self) -> "ViewState":
        return replace(self, zoom_level=zoom_in(self.zoom_level))

    def zoomed_out(self) -> "ViewState":
        return replace(self, zoom_level=zoom_out(self.zoom_level))

    def idle(self) -> "ViewState":
        return replace(self, drag=None, preview=None, pan=None)


__all__ = ["DragPreview", "DragState", "Grip", "Mode", "PanState", "ViewState"]
