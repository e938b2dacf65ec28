"""Pure state machine for entry dragging, canvas panning and activation.

:func:`transition` takes the current :class:`~.state.ViewState` and one input
event and returns the next state plus a list of effects for the caller to carry
out. Nothing here mutates entries or touches a rendering surface.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import List, Sequence, Union

from ..models import Category, TimelineEntry
from .mapper import drag_delta_days
from .state import DragPreview, DragState, Grip, PanState, ViewState

LOGGER = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EntryPointerDown:
    entry_id: str
    grip: Grip
    x: float


@dataclass(frozen=True)
class GridPointerDown:
    x: float
    scroll_offset: float


@dataclass(frozen=True)
class PointerMove:
    x: float


@dataclass(frozen=True)
class PointerUp:
    pass


@dataclass(frozen=True)
class PointerLeave:
    pass


@dataclass(frozen=True)
class CellDoubleClick:
    month: date
    category: Category


GestureEvent = Union[
    EntryPointerDown, GridPointerDown, PointerMove, PointerUp, PointerLeave, CellDoubleClick
]


# ---------------------------------------------------------------------------
# Effects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CommitEntry:
    """Replace the owner's copy of ``entry`` (only its dates changed)."""

    entry: TimelineEntry


@dataclass(frozen=True)
class ActivateEntry:
    entry: TimelineEntry


@dataclass(frozen=True)
class ActivateCell:
    date: date
    category: Category


@dataclass(frozen=True)
class ScrollTo:
    offset: float


Effect = Union[CommitEntry, ActivateEntry, ActivateCell, ScrollTo]
Transition = tuple[ViewState, List[Effect]]


# ---------------------------------------------------------------------------
# Date arithmetic
# ---------------------------------------------------------------------------


def compute_preview(drag: DragState, delta_days: int) -> DragPreview:
    """Derive the tentative date range for ``drag`` shifted by ``delta_days``.

    The result is never inverted: a resized edge that would cross the opposite
    edge is clamped onto it, giving a zero-length interval.
    """

    delta = timedelta(days=delta_days)
    start = drag.original_start
    end = drag.original_end

    if drag.grip is Grip.MOVE:
        return DragPreview(start + delta, end + delta if end is not None else None)

    if drag.grip is Grip.RESIZE_START:
        new_start = start + delta
        if end is not None and new_start > end:
            new_start = end
        return DragPreview(new_start, end)

    # Resize-end on a point entry stretches it from its start date.
    new_end = (end if end is not None else start) + delta
    if new_end < start:
        new_end = start
    return DragPreview(start, new_end)


def _find_entry(entries: Sequence[TimelineEntry], entry_id: str) -> TimelineEntry | None:
    for entry in entries:
        if entry.id == entry_id:
            return entry
    return None


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def transition(
    state: ViewState,
    event: GestureEvent,
    entries: Sequence[TimelineEntry],
) -> Transition:
    """Apply one input event. Events that do not fit the current mode are no-ops."""

    if isinstance(event, EntryPointerDown):
        return _start_drag(state, event, entries)
    if isinstance(event, GridPointerDown):
        return _start_pan(state, event)
    if isinstance(event, PointerMove):
        return _move(state, event)
    if isinstance(event, PointerUp):
        return _release(state, entries, from_leave=False)
    if isinstance(event, PointerLeave):
        return _release(state, entries, from_leave=True)
    if isinstance(event, CellDoubleClick):
        if state.drag is not None or state.pan is not None:
            return state, []
        return state, [ActivateCell(event.month, event.category)]
    raise TypeError(f"Unsupported gesture event: {event!r}")


def _start_drag(
    state: ViewState,
    event: EntryPointerDown,
    entries: Sequence[TimelineEntry],
) -> Transition:
    if state.drag is not None or state.pan is not None:
        LOGGER.debug("Ignoring pointer-down on %s while %s", event.entry_id, state.mode.value)
        return state, []

    entry = _find_entry(entries, event.entry_id)
    if entry is None:
        LOGGER.debug("Ignoring pointer-down on unknown entry %s", event.entry_id)
        return state, []

    drag = DragState(
        entry_id=entry.id,
        grip=event.grip,
        anchor_x=event.x,
        original_start=entry.start_date,
        original_end=entry.end_date,
    )
    LOGGER.debug("Started %s drag on entry %s at x=%.1f", event.grip.value, entry.id, event.x)
    return replace(state, drag=drag, preview=None), []


def _start_pan(state: ViewState, event: GridPointerDown) -> Transition:
    if state.drag is not None or state.pan is not None:
        return state, []
    LOGGER.debug("Started pan at x=%.1f from scroll offset %.1f", event.x, event.scroll_offset)
    return replace(state, pan=PanState(event.x, event.scroll_offset)), []


def _move(state: ViewState, event: PointerMove) -> Transition:
    if state.pan is not None:
        offset = state.pan.scroll_offset - (event.x - state.pan.anchor_x)
        return state, [ScrollTo(offset)]

    if state.drag is None:
        return state, []

    delta_days = drag_delta_days(event.x - state.drag.anchor_x, state.month_width)
    preview = compute_preview(state.drag, delta_days)
    return replace(state, preview=preview), []


def _release(
    state: ViewState,
    entries: Sequence[TimelineEntry],
    *,
    from_leave: bool,
) -> Transition:
    if state.pan is not None:
        return state.idle(), []

    drag = state.drag
    if drag is None:
        return state, []

    entry = _find_entry(entries, drag.entry_id)
    effects: List[Effect] = []
    if entry is None:
        LOGGER.debug("Dragged entry %s disappeared before release", drag.entry_id)
    elif state.preview is not None:
        updated = entry.with_dates(state.preview.start_date, state.preview.end_date)
        LOGGER.debug(
            "Committing entry %s as %s..%s",
            entry.id,
            updated.start_date.isoformat(),
            updated.end_date.isoformat() if updated.end_date else "",
        )
        effects.append(CommitEntry(updated))
    elif not from_leave:
        effects.append(ActivateEntry(entry))

    return state.idle(), effects


__all__ = [
    "ActivateCell",
    "ActivateEntry",
    "CellDoubleClick",
    "CommitEntry",
    "Effect",
    "EntryPointerDown",
    "GestureEvent",
    "GridPointerDown",
    "PointerLeave",
    "PointerMove",
    "PointerUp",
    "ScrollTo",
    "Transition",
    "compute_preview",
    "transition",
]
