#!/usr/bin/env python3
"""Generate a sample timeline preview PNG, optionally mid-drag."""

from __future__ import annotations

import argparse
from datetime import date
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from health_timeline.models import Category, TimelineEntry
from health_timeline.rendering import TimelineRenderer
from health_timeline.timeline import (
    EntryPointerDown,
    Grip,
    PointerMove,
    ViewState,
    compute_layout,
    transition,
)


PREVIEWS_DIR = PROJECT_ROOT / "previews"
DEFAULT_OUTPUT = PREVIEWS_DIR / "timeline_sample.png"


def sample_entries(today: date) -> list[TimelineEntry]:
    year = today.year
    return [
        TimelineEntry("flu", Category.SYMPTOM, date(year, 1, 10), "Flu", end_date=date(year, 1, 20)),
        TimelineEntry("migraine", Category.SYMPTOM, date(year - 1, 6, 2), "Migraine"),
        TimelineEntry("headaches", Category.SYMPTOM, date(year - 1, 5, 20), "Headaches", end_date=date(year - 1, 7, 1)),
        TimelineEntry("statin", Category.MEDICATION, date(year - 1, 3, 1), "Atorvastatin", end_date=date(year, 2, 28)),
        TimelineEntry("abx", Category.MEDICATION, date(year, 1, 12), "Antibiotics", end_date=date(year, 1, 22)),
        TimelineEntry("vitd", Category.SUPPLEMENT, date(year - 2, 10, 1), "Vitamin D", end_date=date(year, 4, 1)),
        TimelineEntry("keto", Category.DIET, date(year - 1, 1, 1), "Low carb", end_date=date(year - 1, 9, 30)),
        TimelineEntry("dexa", Category.BODY_COMPOSITION, date(year - 1, 11, 5), "DEXA scan"),
        TimelineEntry("run", Category.FITNESS, date(year - 1, 4, 1), "Marathon training", end_date=date(year - 1, 10, 15)),
        TimelineEntry("move", Category.MISC, date(year - 2, 8, 15), "Moved house"),
    ]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to write the preview file (defaults to previews/timeline_sample.png).",
    )
    parser.add_argument("--zoom", type=int, default=3, help="Zoom level 0-4.")
    parser.add_argument(
        "--drag-days",
        type=int,
        default=None,
        help="Render the flu entry mid-drag, moved by this many days.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    output_path = args.output or DEFAULT_OUTPUT
    output_path.parent.mkdir(parents=True, exist_ok=True)

    today = date.today()
    entries = sample_entries(today)
    view = ViewState(zoom_level=args.zoom)
    if args.drag_days is not None:
        view, _ = transition(view, EntryPointerDown("flu", Grip.MOVE, 0.0), entries)
        pixels = args.drag_days * view.month_width / 30
        view, _ = transition(view, PointerMove(pixels), entries)

    layout = compute_layout(entries, view, today=today)
    image = TimelineRenderer().render(layout)
    image.save(output_path)

    print(f"Wrote preview to {output_path}")


if __name__ == "__main__":
    main()
