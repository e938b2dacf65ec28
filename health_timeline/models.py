"""Entry and category definitions shared by the timeline and storage layers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any, Final, Mapping


class Category(str, Enum):
    """Classification bucket for an entry; values match the persisted ``sectionType``."""

    SYMPTOM = "symptom"
    MEDICATION = "medication"
    SUPPLEMENT = "supplement"
    DIET = "diet"
    BODY_COMPOSITION = "bodyComposition"
    FITNESS = "fitness"
    MISC = "misc"


@dataclass(frozen=True)
class CategoryStyle:
    label: str
    color: str


CATEGORY_CONFIG: Final[Mapping[Category, CategoryStyle]] = {
    Category.SYMPTOM: CategoryStyle("Symptoms", "red"),
    Category.MEDICATION: CategoryStyle("Medications", "blue"),
    Category.SUPPLEMENT: CategoryStyle("Supplements", "green"),
    Category.DIET: CategoryStyle("Diet", "orange"),
    Category.BODY_COMPOSITION: CategoryStyle("Body Composition", "violet"),
    Category.FITNESS: CategoryStyle("Fitness", "teal"),
    Category.MISC: CategoryStyle("Misc", "gray"),
}

CATEGORY_ORDER: Final[tuple[Category, ...]] = (
    Category.SYMPTOM,
    Category.MEDICATION,
    Category.SUPPLEMENT,
    Category.DIET,
    Category.BODY_COMPOSITION,
    Category.FITNESS,
    Category.MISC,
)


def parse_date(value: str | date) -> date:
    """Parse a ``YYYY-MM-DD`` string (or pass a date through unchanged)."""

    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def format_date(value: date) -> str:
    return value.isoformat()


def display_date(value: date) -> str:
    """Format as ``Jan 5, 2024``."""

    return f"{value.strftime('%b')} {value.day}, {value.year}"


@dataclass(frozen=True)
class TimelineEntry:
    """One dated record in a category.

    ``end_date`` is optional; without it the entry is a point-in-time event.
    Instances are immutable, changes are made with :meth:`with_dates` or
    :func:`dataclasses.replace` and handed back to the owner of the collection.
    """

    id: str
    category: Category
    start_date: date
    title: str
    end_date: date | None = None
    description: str | None = None

    @property
    def last_date(self) -> date:
        """Inclusive end of the occupied range."""

        return self.end_date if self.end_date is not None else self.start_date

    def with_dates(self, start_date: date, end_date: date | None) -> "TimelineEntry":
        return replace(self, start_date=start_date, end_date=end_date)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "TimelineEntry":
        """Build an entry from the persisted camelCase mapping.

        Raises ``KeyError`` or ``ValueError`` when required fields are missing or
        malformed.
        """

        end_raw = payload.get("endDate")
        description = payload.get("description")
        return cls(
            id=str(payload["id"]),
            category=Category(payload["sectionType"]),
            start_date=parse_date(payload["startDate"]),
            end_date=parse_date(end_raw) if end_raw else None,
            title=str(payload["title"]),
            description=str(description) if description else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "sectionType": self.category.value,
            "startDate": format_date(self.start_date),
        }
        if self.end_date is not None:
            data["endDate"] = format_date(self.end_date)
        data["title"] = self.title
        if self.description:
            data["description"] = self.description
        return data


__all__ = [
    "CATEGORY_CONFIG",
    "CATEGORY_ORDER",
    "Category",
    "CategoryStyle",
    "TimelineEntry",
    "display_date",
    "format_date",
    "parse_date",
]
