"""Discrete zoom levels selecting the pixel width of one month."""

from __future__ import annotations

from typing import Final

MONTH_WIDTH_OPTIONS: Final[tuple[int, ...]] = (8, 12, 18, 28, 45)
DEFAULT_ZOOM_LEVEL: Final[int] = 3
MIN_ZOOM_LEVEL: Final[int] = 0
MAX_ZOOM_LEVEL: Final[int] = len(MONTH_WIDTH_OPTIONS) - 1


def clamp_zoom_level(level: int) -> int:
    return max(MIN_ZOOM_LEVEL, min(MAX_ZOOM_LEVEL, level))


def zoom_in(level: int) -> int:
    """Step to the next wider month; a no-op at the widest level."""

    return clamp_zoom_level(level + 1)


def zoom_out(level: int) -> int:
    """Step to the next narrower month; a no-op at the narrowest level."""

    return clamp_zoom_level(level - 1)


def month_width(level: int) -> int:
    return MONTH_WIDTH_OPTIONS[clamp_zoom_level(level)]


__all__ = [
    "DEFAULT_ZOOM_LEVEL",
    "MAX_ZOOM_LEVEL",
    "MIN_ZOOM_LEVEL",
    "MONTH_WIDTH_OPTIONS",
    "clamp_zoom_level",
    "month_width",
    "zoom_in",
    "zoom_out",
]
