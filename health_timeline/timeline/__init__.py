"""Timeline layout and direct-manipulation engine."""

from .controller import TimelineController
from .gestures import (
    ActivateCell,
    ActivateEntry,
    CellDoubleClick,
    CommitEntry,
    EntryPointerDown,
    GridPointerDown,
    PointerLeave,
    PointerMove,
    PointerUp,
    ScrollTo,
    compute_preview,
    transition,
)
from .layout import (
    DEFAULT_METRICS,
    CellHit,
    DrawableLayout,
    EntryHit,
    EntryRect,
    LayoutMetrics,
    compute_layout,
    visible_year_range,
)
from .mapper import drag_delta_days, to_date, to_offset
from .packing import pack_rows
from .state import DragPreview, DragState, Grip, Mode, PanState, ViewState
from .zoom import MONTH_WIDTH_OPTIONS, month_width, zoom_in, zoom_out

__all__ = [
    "ActivateCell",
    "ActivateEntry",
    "CellDoubleClick",
    "CellHit",
    "CommitEntry",
    "DEFAULT_METRICS",
    "DragPreview",
    "DragState",
    "DrawableLayout",
    "EntryHit",
    "EntryPointerDown",
    "EntryRect",
    "Grip",
    "GridPointerDown",
    "LayoutMetrics",
    "MONTH_WIDTH_OPTIONS",
    "Mode",
    "PanState",
    "PointerLeave",
    "PointerMove",
    "PointerUp",
    "ScrollTo",
    "TimelineController",
    "ViewState",
    "compute_layout",
    "compute_preview",
    "drag_delta_days",
    "month_width",
    "pack_rows",
    "to_date",
    "to_offset",
    "transition",
    "visible_year_range",
    "zoom_in",
    "zoom_out",
]
