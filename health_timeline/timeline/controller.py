"""Stateful front end to the gesture state machine for a rendering surface."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Iterable, Optional, Sequence

from ..models import Category, TimelineEntry
from .gestures import (
    ActivateCell,
    ActivateEntry,
    CellDoubleClick,
    CommitEntry,
    Effect,
    EntryPointerDown,
    GestureEvent,
    GridPointerDown,
    PointerLeave,
    PointerMove,
    PointerUp,
    ScrollTo,
    transition,
)
from .layout import DEFAULT_METRICS, CellHit, DrawableLayout, EntryHit, LayoutMetrics, compute_layout
from .state import Mode, ViewState

LOGGER = logging.getLogger(__name__)

EntryCallback = Callable[[TimelineEntry], None]
CellCallback = Callable[[date, Category], None]


class TimelineController:
    """Owns the view state and scroll offset of one timeline surface.

    Pointer coordinates are surface coordinates: ``x`` from the left edge of
    the visible viewport (including the sticky label column) and ``y`` from the
    top of the year header. The entry collection is read through
    ``entries_provider`` on every event and is never modified here; changes are
    proposed through the callbacks.
    """

    def __init__(
        self,
        entries_provider: Callable[[], Sequence[TimelineEntry]],
        *,
        on_entry_commit: Optional[EntryCallback] = None,
        on_entry_activate: Optional[EntryCallback] = None,
        on_cell_activate: Optional[CellCallback] = None,
        view: ViewState | None = None,
        viewport_width: float | None = None,
        today_provider: Callable[[], date] = date.today,
        metrics: LayoutMetrics = DEFAULT_METRICS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.entries_provider = entries_provider
        self.on_entry_commit = on_entry_commit
        self.on_entry_activate = on_entry_activate
        self.on_cell_activate = on_cell_activate
        self.viewport_width = viewport_width
        self.today_provider = today_provider
        self.metrics = metrics
        self.logger = logger or LOGGER

        self._view = view or ViewState()
        self._scroll_offset = 0.0

    @property
    def view(self) -> ViewState:
        return self._view

    @property
    def mode(self) -> Mode:
        return self._view.mode

    @property
    def scroll_offset(self) -> float:
        return self._scroll_offset

    def layout(self) -> DrawableLayout:
        return compute_layout(
            self.entries_provider(),
            self._view,
            today=self.today_provider(),
            metrics=self.metrics,
        )

    def to_grid(self, x: float, y: float) -> tuple[float, float]:
        return x - self.metrics.label_column_width + self._scroll_offset, y

    def scroll_to(self, offset: float, layout: DrawableLayout | None = None) -> None:
        if self.viewport_width is None:
            self._scroll_offset = max(0.0, offset)
            return
        layout = layout or self.layout()
        self._scroll_offset = max(0.0, min(offset, layout.max_scroll(self.viewport_width)))

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------

    def pointer_down(self, x: float, y: float) -> None:
        if x < self.metrics.label_column_width:
            return
        hit = self.layout().hit_test(*self.to_grid(x, y))
        if isinstance(hit, EntryHit):
            self.dispatch(EntryPointerDown(hit.entry_id, hit.grip, x))
        elif isinstance(hit, CellHit):
            self.dispatch(GridPointerDown(x, self._scroll_offset))

    def pointer_move(self, x: float) -> None:
        self.dispatch(PointerMove(x))

    def pointer_up(self) -> None:
        self.dispatch(PointerUp())

    def pointer_leave(self) -> None:
        self.dispatch(PointerLeave())

    def double_click(self, x: float, y: float) -> None:
        if x < self.metrics.label_column_width:
            return
        hit = self.layout().hit_test(*self.to_grid(x, y))
        if isinstance(hit, CellHit):
            self.dispatch(CellDoubleClick(hit.month, hit.category))

    # ------------------------------------------------------------------
    # Zoom
    # ------------------------------------------------------------------

    def zoom_in(self) -> bool:
        return self._set_view(self._view.zoomed_in())

    def zoom_out(self) -> bool:
        return self._set_view(self._view.zoomed_out())

    def _set_view(self, view: ViewState) -> bool:
        if view == self._view:
            return False
        self.logger.debug("Zoom level %d -> %d", self._view.zoom_level, view.zoom_level)
        self._view = view
        self.scroll_to(self._scroll_offset)
        return True

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, event: GestureEvent) -> list[Effect]:
        self._view, effects = transition(self._view, event, self.entries_provider())
        self._apply(effects)
        return effects

    def _apply(self, effects: Iterable[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, ScrollTo):
                self.scroll_to(effect.offset)
            elif isinstance(effect, CommitEntry):
                if self.on_entry_commit is not None:
                    self.on_entry_commit(effect.entry)
            elif isinstance(effect, ActivateEntry):
                if self.on_entry_activate is not None:
                    self.on_entry_activate(effect.entry)
            elif isinstance(effect, ActivateCell):
                if self.on_cell_activate is not None:
                    self.on_cell_activate(effect.date, effect.category)


__all__ = ["CellCallback", "EntryCallback", "TimelineController"]
