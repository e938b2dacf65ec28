"""Top-level package for the personal health timeline editor."""

from __future__ import annotations

from .models import CATEGORY_CONFIG, CATEGORY_ORDER, Category, TimelineEntry
from .timeline import TimelineController, ViewState, compute_layout

__all__ = [
    "__version__",
    "CATEGORY_CONFIG",
    "CATEGORY_ORDER",
    "Category",
    "TimelineController",
    "TimelineEntry",
    "ViewState",
    "compute_layout",
]

__version__ = "0.1.0"
