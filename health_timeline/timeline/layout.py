"""Layout engine turning entries and view state into drawable geometry."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Final, Iterable, List, Sequence

from ..models import CATEGORY_CONFIG, CATEGORY_ORDER, Category, TimelineEntry, display_date
from .mapper import add_months, to_offset
from .packing import pack_rows
from .state import Grip, ViewState


@dataclass(frozen=True)
class LayoutMetrics:
    """Collection of reusable layout constants for the timeline grid."""

    label_column_width: int = 150
    year_header_height: int = 25
    month_header_height: int = 30
    row_height: int = 36
    bar_height: int = 30
    bar_top_inset: int = 6
    bar_left_inset: int = 2
    bar_gap: int = 4
    section_padding: int = 12
    grip_width: int = 8
    min_width_months: float = 0.5
    default_years: int = 3

    @property
    def header_height(self) -> int:
        return self.year_header_height + self.month_header_height

    def section_height(self, row_count: int) -> int:
        return max(row_count, 1) * self.row_height + self.section_padding

    def row_top(self, row_index: int) -> int:
        return row_index * self.row_height + self.bar_top_inset


DEFAULT_METRICS: Final[LayoutMetrics] = LayoutMetrics()


# ---------------------------------------------------------------------------
# Drawable primitives
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class YearCell:
    year: int
    left: float
    width: float
    is_current_year: bool


@dataclass(frozen=True)
class MonthCell:
    month: date
    left: float
    width: float
    is_current_month: bool
    is_year_end: bool

    @property
    def key(self) -> str:
        return self.month.strftime("%Y-%m")


@dataclass(frozen=True)
class SectionLayout:
    category: Category
    label: str
    color: str
    top: int
    height: int
    rows: tuple[tuple[str, ...], ...]

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def bottom(self) -> int:
        return self.top + self.height


@dataclass(frozen=True)
class EntryRect:
    """Screen rectangle of one entry in grid coordinates.

    ``entry`` carries the dates the bar is drawn with, which are the preview
    dates while the entry is being dragged.
    """

    entry: TimelineEntry
    row_index: int
    left: float
    top: float
    width: float
    height: float
    is_dragging: bool = False

    @property
    def entry_id(self) -> str:
        return self.entry.id

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def visible_span(self, total_width: float, inset: float = 0) -> tuple[float, float]:
        """Horizontal extent of the bar once clipped to ``[0, total_width]``."""

        x0 = max(self.left, 0) + inset
        x1 = min(self.left + self.width + inset, total_width)
        return x0, max(x0, x1)


@dataclass(frozen=True)
class EntryHit:
    entry_id: str
    grip: Grip


@dataclass(frozen=True)
class CellHit:
    month: date
    category: Category


HitTarget = EntryHit | CellHit


@dataclass(frozen=True)
class DrawableLayout:
    start_year: int
    end_year: int
    view_start: date
    month_width: int
    total_width: int
    total_height: int
    years: tuple[YearCell, ...]
    months: tuple[MonthCell, ...]
    sections: tuple[SectionLayout, ...]
    entries: tuple[EntryRect, ...]
    metrics: LayoutMetrics = field(default=DEFAULT_METRICS)
    preview_label: str | None = None

    def entry_rect(self, entry_id: str) -> EntryRect | None:
        for rect in self.entries:
            if rect.entry_id == entry_id:
                return rect
        return None

    def section(self, category: Category) -> SectionLayout:
        for section in self.sections:
            if section.category is category:
                return section
        raise KeyError(category)

    def month_at(self, x: float) -> date | None:
        if self.month_width <= 0:
            return None
        index = math.floor(x / self.month_width)
        if 0 <= index < len(self.months):
            return self.months[index].month
        return None

    def section_at(self, y: float) -> SectionLayout | None:
        for section in self.sections:
            if section.top <= y < section.bottom:
                return section
        return None

    def max_scroll(self, viewport_width: float) -> float:
        content = self.metrics.label_column_width + self.total_width
        return max(0.0, content - viewport_width)

    def hit_test(self, x: float, y: float) -> HitTarget | None:
        """Resolve a point in grid coordinates to an entry grip or an empty cell.

        ``x`` is measured from the left edge of the month grid, ``y`` from the
        top of the year header. Bars drawn later (the dragged one last) win.
        """

        if x < 0 or x >= self.total_width or y < self.metrics.header_height:
            return None

        inset = self.metrics.bar_left_inset
        grip_width = self.metrics.grip_width
        for rect in reversed(self.entries):
            if not rect.top <= y <= rect.bottom:
                continue
            x0, x1 = rect.visible_span(self.total_width, inset)
            if not x0 <= x <= x1:
                continue
            if x < x0 + grip_width:
                return EntryHit(rect.entry_id, Grip.RESIZE_START)
            if x > x1 - grip_width:
                return EntryHit(rect.entry_id, Grip.RESIZE_END)
            return EntryHit(rect.entry_id, Grip.MOVE)

        section = self.section_at(y)
        month = self.month_at(x)
        if section is None or month is None:
            return None
        return CellHit(month, section.category)


# ---------------------------------------------------------------------------
# Layout computation
# ---------------------------------------------------------------------------


def visible_year_range(entries: Iterable[TimelineEntry], today: date) -> tuple[int, int]:
    """Return the inclusive year span covering ``today`` and every entry.

    The span starts two years before the current year at the latest and ends no
    earlier than the current year, so it never covers fewer than three years.
    """

    min_year = today.year - 2
    max_year = today.year
    for entry in entries:
        min_year = min(min_year, entry.start_date.year)
        max_year = max(max_year, entry.last_date.year)
    return min_year, max_year


def entry_geometry(
    start: date,
    end: date | None,
    view_start: date,
    month_width: float,
    metrics: LayoutMetrics = DEFAULT_METRICS,
) -> tuple[float, float]:
    """Return ``(left, width)`` for a bar spanning ``start..end`` inclusive."""

    last = end if end is not None else start
    start_offset = to_offset(start, view_start, month_width)
    end_offset = to_offset(last, view_start, month_width)
    span = (end_offset - start_offset) / month_width + 1
    width = max(span * month_width - metrics.bar_gap, month_width * metrics.min_width_months)
    return start_offset, width


def compute_layout(
    entries: Sequence[TimelineEntry],
    view: ViewState | None = None,
    *,
    today: date | None = None,
    metrics: LayoutMetrics = DEFAULT_METRICS,
) -> DrawableLayout:
    """Compute the full drawable grid for ``entries`` under ``view``.

    Rows are always packed from the committed entry dates; an entry that is
    being dragged keeps its row and only has its bar positioned from the
    preview dates.
    """

    view = view or ViewState()
    today = today or date.today()
    entries = list(entries)

    start_year, end_year = visible_year_range(entries, today)
    view_start = date(start_year, 1, 1)
    width = view.month_width
    year_count = end_year - start_year + 1
    total_months = year_count * 12
    total_width = width * total_months

    years = tuple(
        YearCell(
            year=start_year + index,
            left=index * 12 * width,
            width=12 * width,
            is_current_year=start_year + index == today.year,
        )
        for index in range(year_count)
    )

    months: List[MonthCell] = []
    for index in range(total_months):
        month = add_months(view_start, index)
        months.append(
            MonthCell(
                month=month,
                left=index * width,
                width=width,
                is_current_month=(month.year, month.month) == (today.year, today.month),
                is_year_end=month.month == 12,
            )
        )

    grouped: dict[Category, List[TimelineEntry]] = {category: [] for category in CATEGORY_ORDER}
    for entry in entries:
        grouped[entry.category].append(entry)

    drag = view.drag
    preview = view.preview
    sections: List[SectionLayout] = []
    rects: List[EntryRect] = []
    top = metrics.header_height

    for category in CATEGORY_ORDER:
        rows = pack_rows(grouped[category])
        height = metrics.section_height(len(rows))
        style = CATEGORY_CONFIG[category]
        sections.append(
            SectionLayout(
                category=category,
                label=style.label,
                color=style.color,
                top=top,
                height=height,
                rows=tuple(tuple(entry.id for entry in row) for row in rows),
            )
        )

        for row_index, row in enumerate(rows):
            for entry in row:
                is_dragging = drag is not None and drag.entry_id == entry.id
                shown = entry
                if is_dragging and preview is not None:
                    shown = entry.with_dates(preview.start_date, preview.end_date)

                left, bar_width = entry_geometry(
                    shown.start_date, shown.end_date, view_start, width, metrics
                )
                if left + bar_width < 0 or left > total_width:
                    continue

                rects.append(
                    EntryRect(
                        entry=shown,
                        row_index=row_index,
                        left=left,
                        top=top + metrics.row_top(row_index),
                        width=bar_width,
                        height=metrics.bar_height,
                        is_dragging=is_dragging,
                    )
                )
        top += height

    # The dragged bar is drawn (and hit-tested) above the others.
    rects.sort(key=lambda rect: rect.is_dragging)

    preview_label = None
    if preview is not None:
        preview_label = display_date(preview.start_date)
        if preview.end_date is not None:
            preview_label += f" - {display_date(preview.end_date)}"

    return DrawableLayout(
        start_year=start_year,
        end_year=end_year,
        view_start=view_start,
        month_width=width,
        total_width=total_width,
        total_height=top,
        years=years,
        months=tuple(months),
        sections=tuple(sections),
        entries=tuple(rects),
        metrics=metrics,
        preview_label=preview_label,
    )


__all__ = [
    "DEFAULT_METRICS",
    "CellHit",
    "DrawableLayout",
    "EntryHit",
    "EntryRect",
    "HitTarget",
    "LayoutMetrics",
    "MonthCell",
    "SectionLayout",
    "YearCell",
    "compute_layout",
    "entry_geometry",
    "visible_year_range",
]
