"""First-fit row packing of entries within a category band."""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Sequence

from ..models import TimelineEntry

Span = tuple[date, date]


def entry_span(entry: TimelineEntry) -> Span:
    """Inclusive day range occupied by ``entry``; point entries cover one day."""

    return entry.start_date, entry.last_date


def spans_overlap(a: Span, b: Span) -> bool:
    # Disjoint only when one range ends strictly before the other starts.
    return not (a[1] < b[0] or a[0] > b[1])


def pack_rows(entries: Iterable[TimelineEntry]) -> List[List[TimelineEntry]]:
    """Assign each entry to the lowest row where it overlaps nothing.

    Entries are visited in start-date order (Python's sort is stable, so ties
    keep their input order). This greedy first-fit never produces overlaps but
    is not guaranteed to use the minimum number of rows.
    """

    rows: List[List[TimelineEntry]] = []
    spans: List[List[Span]] = []

    for entry in sorted(entries, key=lambda item: item.start_date):
        span = entry_span(entry)
        for row, row_spans in zip(rows, spans):
            if not any(spans_overlap(span, other) for other in row_spans):
                row.append(entry)
                row_spans.append(span)
                break
        else:
            rows.append([entry])
            spans.append([span])

    return rows


def row_index_map(rows: Sequence[Sequence[TimelineEntry]]) -> dict[str, int]:
    return {entry.id: index for index, row in enumerate(rows) for entry in row}


__all__ = ["Span", "entry_span", "pack_rows", "row_index_map", "spans_overlap"]
