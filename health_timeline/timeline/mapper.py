"""Conversions between calendar dates and horizontal pixel offsets."""

from __future__ import annotations

import calendar
import math
from datetime import date, timedelta

DRAG_DAYS_PER_MONTH = 30


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(value: date, months: int) -> date:
    """Shift ``value`` by whole months, clamping the day to the target month."""

    year, month_index = divmod(value.year * 12 + value.month - 1 + months, 12)
    month = month_index + 1
    return date(year, month, min(value.day, days_in_month(year, month)))


def month_position(value: date) -> float:
    """Return the absolute fractional month index of ``value``.

    Whole months count from year 0; the fraction is ``(day - 1) / days_in_month``
    so that positions advance smoothly by day instead of snapping at month starts.
    """

    whole = value.year * 12 + (value.month - 1)
    return whole + (value.day - 1) / days_in_month(value.year, value.month)


def months_between(start: date, value: date) -> float:
    return month_position(value) - month_position(start)


def to_offset(value: date, view_start: date, month_width: float) -> float:
    """Pixel offset of ``value`` from ``view_start`` at ``month_width`` px per month."""

    return months_between(view_start, value) * month_width


def to_date(pixels: float, view_start: date, month_width: float) -> date:
    """Inverse of :func:`to_offset`, resolved to the nearest calendar day."""

    position = month_position(view_start) + pixels / month_width
    whole = math.floor(position)
    year, month_index = divmod(whole, 12)
    base = date(year, month_index + 1, 1)
    fraction = position - whole
    # A fraction that rounds up to a full month rolls over into the next one.
    return base + timedelta(days=round(fraction * days_in_month(base.year, base.month)))


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def drag_delta_days(pixel_delta: float, month_width: float) -> int:
    """Translate pointer displacement into a whole-day delta.

    A month of drag distance is treated as exactly 30 days regardless of the
    calendar, so this is not the inverse of :func:`to_offset`.
    """

    return round_half_up(pixel_delta / month_width * DRAG_DAYS_PER_MONTH)


__all__ = [
    "DRAG_DAYS_PER_MONTH",
    "add_months",
    "days_in_month",
    "drag_delta_days",
    "month_position",
    "months_between",
    "round_half_up",
    "to_date",
    "to_offset",
]
