"""Local JSON persistence, import/export and the text report."""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from .models import (
    CATEGORY_CONFIG,
    CATEGORY_ORDER,
    Category,
    TimelineEntry,
    display_date,
)
from .timeline.mapper import add_months

LOGGER = logging.getLogger(__name__)

CURRENT_VERSION = 1


@dataclass(frozen=True)
class HealthData:
    entries: tuple[TimelineEntry, ...] = field(default_factory=tuple)
    version: int = CURRENT_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "entries": [entry.to_dict() for entry in self.entries],
            "version": self.version,
        }


# ---------------------------------------------------------------------------
# Pure collection updates
# ---------------------------------------------------------------------------


def add_entry(data: HealthData, entry: TimelineEntry) -> HealthData:
    return replace(data, entries=data.entries + (entry,))


def update_entry(data: HealthData, entry: TimelineEntry) -> HealthData:
    return replace(
        data,
        entries=tuple(entry if existing.id == entry.id else existing for existing in data.entries),
    )


def delete_entry(data: HealthData, entry_id: str) -> HealthData:
    return replace(data, entries=tuple(entry for entry in data.entries if entry.id != entry_id))


def new_entry_for_cell(
    start: date,
    category: Category,
    *,
    title: str = "",
    description: str | None = None,
) -> TimelineEntry:
    """Draft a new entry for a double-clicked grid cell.

    The draft spans two months from ``start`` (ending the day before).
    """

    return TimelineEntry(
        id=str(uuid.uuid4()),
        category=category,
        start_date=start,
        end_date=add_months(start, 2) - timedelta(days=1),
        title=title,
        description=description,
    )


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _parse_entries(raw_entries: Iterable[Any]) -> List[TimelineEntry]:
    entries: List[TimelineEntry] = []
    for index, raw in enumerate(raw_entries):
        if not isinstance(raw, Mapping):
            LOGGER.warning("Skipping malformed entry at index %d: not an object", index)
            continue
        try:
            entries.append(TimelineEntry.from_dict(raw))
        except (KeyError, TypeError, ValueError) as exc:
            LOGGER.warning("Skipping malformed entry at index %d: %s", index, exc)
    return entries


def export_json(data: HealthData) -> str:
    return json.dumps(data.to_dict(), indent=2)


def import_json(text: str) -> Optional[HealthData]:
    """Parse an exported payload, returning ``None`` when it is unusable.

    Only the presence of an ``entries`` list is required; the stored version is
    replaced with :data:`CURRENT_VERSION`.
    """

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        LOGGER.error("Failed to parse import data: %s", exc)
        return None

    if not isinstance(payload, dict) or not isinstance(payload.get("entries"), list):
        LOGGER.error("Import data has no entries list")
        return None

    return HealthData(entries=tuple(_parse_entries(payload["entries"])), version=CURRENT_VERSION)


def export_text(data: HealthData) -> str:
    """Render a readable report grouped by category."""

    lines: List[str] = ["Health Timeline", ""]
    for category in CATEGORY_ORDER:
        entries = sorted(
            (entry for entry in data.entries if entry.category is category),
            key=lambda entry: entry.start_date,
        )
        if not entries:
            continue
        lines.append(f"## {CATEGORY_CONFIG[category].label}")
        for entry in entries:
            when = display_date(entry.start_date)
            if entry.end_date is not None:
                when = f"{when} - {display_date(entry.end_date)}"
            lines.append(f"- {when}: {entry.title}")
            if entry.description:
                for detail in entry.description.splitlines():
                    lines.append(f"    {detail}")
        lines.append("")

    if len(lines) == 2:
        lines.append("No entries.")
    return "\n".join(lines).rstrip() + "\n"


# ---------------------------------------------------------------------------
# File persistence
# ---------------------------------------------------------------------------


def load_data(path: Path) -> HealthData:
    """Load persisted data, falling back to an empty dataset on any failure."""

    path = Path(path)
    if not path.exists():
        return HealthData()

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        LOGGER.exception("Failed to load data from %s", path)
        return HealthData()

    if not isinstance(payload, dict) or not isinstance(payload.get("entries"), list):
        LOGGER.error("Data file %s has no entries list", path)
        return HealthData()

    return HealthData(entries=tuple(_parse_entries(payload["entries"])), version=CURRENT_VERSION)


def save_data(path: Path, data: HealthData) -> None:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(export_json(data), encoding="utf-8")
    except OSError:
        LOGGER.exception("Failed to save data to %s", path)
        return
    LOGGER.debug("Saved %d entries to %s", len(data.entries), path)


def clear_data(path: Path) -> None:
    Path(path).unlink(missing_ok=True)


class HealthStore:
    """Owns the entry collection and writes it back after every change."""

    def __init__(self, path: Path, *, data: HealthData | None = None) -> None:
        self.path = Path(path)
        self._data = data if data is not None else load_data(self.path)

    @property
    def data(self) -> HealthData:
        return self._data

    @property
    def entries(self) -> tuple[TimelineEntry, ...]:
        return self._data.entries

    def get(self, entry_id: str) -> TimelineEntry | None:
        for entry in self._data.entries:
            if entry.id == entry_id:
                return entry
        return None

    def add(self, entry: TimelineEntry) -> None:
        self._set(add_entry(self._data, entry))

    def update(self, entry: TimelineEntry) -> None:
        self._set(update_entry(self._data, entry))

    def remove(self, entry_id: str) -> None:
        self._set(delete_entry(self._data, entry_id))

    def clear(self) -> None:
        clear_data(self.path)
        self._data = HealthData()

    def import_from_json(self, text: str) -> bool:
        imported = import_json(text)
        if imported is None:
            return False
        self._set(imported)
        return True

    def _set(self, data: HealthData) -> None:
        self._data = data
        save_data(self.path, data)


__all__ = [
    "CURRENT_VERSION",
    "HealthData",
    "HealthStore",
    "add_entry",
    "clear_data",
    "delete_entry",
    "export_json",
    "export_text",
    "import_json",
    "load_data",
    "new_entry_for_cell",
    "save_data",
    "update_entry",
]
