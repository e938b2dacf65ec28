"""Command line entry point for the health timeline."""

from __future__ import annotations

import argparse
import logging
import sys
import uuid
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Iterable, Optional

from .config import ConfigError, data_file_from_env, load_env_file, parse_zoom_level, zoom_level_from_env
from .models import CATEGORY_ORDER, Category, TimelineEntry, parse_date
from .rendering import TimelineRenderer
from .storage import HealthStore, export_json, export_text, new_entry_for_cell
from .timeline import (
    EntryPointerDown,
    Grip,
    PointerMove,
    PointerUp,
    TimelineController,
    ViewState,
)
from .timeline.mapper import DRAG_DAYS_PER_MONTH

LOGGER = logging.getLogger(__name__)
DEFAULT_RENDER_OUTPUT = Path("timeline.png")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Personal health timeline editor")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Optional path to a .env file loaded before the app starts.",
    )
    parser.add_argument(
        "--data-file",
        type=Path,
        default=None,
        help="JSON file holding the timeline entries (defaults to $HEALTH_TIMELINE_DATA_FILE).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    render = commands.add_parser("render", help="Render the timeline to a PNG image.")
    render.add_argument("--output", type=Path, default=DEFAULT_RENDER_OUTPUT)
    render.add_argument(
        "--zoom",
        type=str,
        default=None,
        help="Zoom level 0-4 (defaults to $HEALTH_TIMELINE_ZOOM or 3).",
    )
    render.add_argument("--scroll", type=float, default=0.0, help="Horizontal scroll in pixels.")
    render.add_argument(
        "--viewport-width",
        type=int,
        default=None,
        help="Width of the rendered viewport; the full grid is rendered when omitted.",
    )

    export = commands.add_parser("export", help="Print the data as JSON or a text report.")
    export.add_argument("--format", choices=("json", "text"), default="json")
    export.add_argument("--output", type=Path, default=None)

    import_ = commands.add_parser("import", help="Replace all data with an exported JSON file.")
    import_.add_argument("path", type=Path)

    add = commands.add_parser("add", help="Add a new entry.")
    add.add_argument(
        "--category",
        choices=[category.value for category in CATEGORY_ORDER],
        required=True,
    )
    add.add_argument("--start", type=parse_date, required=True, help="Start date (YYYY-MM-DD).")
    add.add_argument("--end", type=parse_date, default=None, help="Optional end date.")
    add.add_argument("--title", required=True)
    add.add_argument("--description", default=None)

    move = commands.add_parser("move", help="Drag an entry by a number of days.")
    move.add_argument("entry_id")
    move.add_argument("days", type=int)
    move.add_argument(
        "--grip",
        choices=[grip.value for grip in Grip],
        default=Grip.MOVE.value,
        help="Which part of the bar to drag.",
    )

    delete = commands.add_parser("delete", help="Delete an entry.")
    delete.add_argument("entry_id")

    commands.add_parser("clear", help="Delete all entries.")
    commands.add_parser("list", help="List entries with their identifiers.")

    return parser


@dataclass
class AppSettings:
    data_file: Path
    zoom_level: int
    verbose: bool


class TimelineSession:
    """Wires the timeline controller to the entry store.

    Commits from the controller are written straight to the store. Activating
    an entry selects it; activating an empty cell prepares a draft entry for
    the create surface.
    """

    def __init__(
        self,
        store: HealthStore,
        *,
        zoom_level: int,
        viewport_width: float | None = None,
        today_provider: Callable[[], date] = date.today,
        renderer_factory: Callable[[], TimelineRenderer] = TimelineRenderer,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.renderer_factory = renderer_factory
        self.logger = logger or LOGGER
        self.selected: TimelineEntry | None = None
        self.draft: TimelineEntry | None = None
        self.controller = TimelineController(
            lambda: self.store.entries,
            on_entry_commit=self.commit_entry,
            on_entry_activate=self.activate_entry,
            on_cell_activate=self.activate_cell,
            view=ViewState(zoom_level=zoom_level),
            viewport_width=viewport_width,
            today_provider=today_provider,
            logger=self.logger,
        )

    def commit_entry(self, entry: TimelineEntry) -> None:
        self.logger.info("Updating %s to %s", entry.id, _format_range(entry))
        self.store.update(entry)

    def activate_entry(self, entry: TimelineEntry) -> None:
        self.selected = entry

    def activate_cell(self, start: date, category: Category) -> None:
        self.draft = new_entry_for_cell(start, category)

    def drag_entry(self, entry_id: str, days: int, grip: Grip = Grip.MOVE) -> bool:
        """Run a complete drag gesture shifting ``entry_id`` by ``days``.

        Returns ``False`` when the entry does not exist.
        """

        if self.store.get(entry_id) is None:
            return False
        pixels = days * self.controller.view.month_width / DRAG_DAYS_PER_MONTH
        self.controller.dispatch(EntryPointerDown(entry_id, grip, 0.0))
        self.controller.dispatch(PointerMove(pixels))
        self.controller.dispatch(PointerUp())
        return True

    def render(self, output: Path, *, scroll_offset: float = 0.0, viewport_width: int | None = None) -> Path:
        self.controller.scroll_to(scroll_offset)
        layout = self.controller.layout()
        image = self.renderer_factory().render(
            layout,
            scroll_offset=self.controller.scroll_offset,
            viewport_width=viewport_width,
        )
        output.parent.mkdir(parents=True, exist_ok=True)
        image.save(output)
        self.logger.info("Wrote %dx%d timeline to %s", image.width, image.height, output)
        return output


def _format_range(entry: TimelineEntry) -> str:
    if entry.end_date is None:
        return entry.start_date.isoformat()
    return f"{entry.start_date.isoformat()}..{entry.end_date.isoformat()}"


def resolve_settings(args: argparse.Namespace) -> AppSettings:
    load_env_file(args.env_file)
    data_file = args.data_file or data_file_from_env()
    raw_zoom = getattr(args, "zoom", None)
    zoom_level = parse_zoom_level(raw_zoom) if raw_zoom is not None else zoom_level_from_env()
    return AppSettings(data_file=data_file, zoom_level=zoom_level, verbose=args.verbose)


def _write_output(text: str, output: Path | None) -> None:
    if output is None:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        return
    output.write_text(text, encoding="utf-8")
    LOGGER.info("Wrote export to %s", output)


def run_command(args: argparse.Namespace, session: TimelineSession) -> int:
    store = session.store
    command = args.command

    if command == "render":
        session.render(args.output, scroll_offset=args.scroll, viewport_width=args.viewport_width)
        return 0

    if command == "export":
        content = export_json(store.data) if args.format == "json" else export_text(store.data)
        _write_output(content, args.output)
        return 0

    if command == "import":
        try:
            text = args.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            LOGGER.exception("Could not read %s", args.path)
            return 1
        if not store.import_from_json(text):
            LOGGER.error("Invalid JSON format in %s", args.path)
            return 1
        LOGGER.info("Imported %d entries", len(store.entries))
        return 0

    if command == "add":
        entry = TimelineEntry(
            id=str(uuid.uuid4()),
            category=Category(args.category),
            start_date=args.start,
            end_date=args.end,
            title=args.title,
            description=args.description,
        )
        store.add(entry)
        sys.stdout.write(f"{entry.id}\n")
        return 0

    if command == "move":
        if not session.drag_entry(args.entry_id, args.days, Grip(args.grip)):
            LOGGER.error("No entry with id %s", args.entry_id)
            return 1
        return 0

    if command == "delete":
        if store.get(args.entry_id) is None:
            LOGGER.error("No entry with id %s", args.entry_id)
            return 1
        store.remove(args.entry_id)
        return 0

    if command == "clear":
        store.clear()
        LOGGER.info("Cleared all data")
        return 0

    if command == "list":
        for entry in sorted(store.entries, key=lambda item: (item.category.value, item.start_date)):
            sys.stdout.write(
                f"{entry.id}\t{entry.category.value}\t{_format_range(entry)}\t{entry.title}\n"
            )
        return 0

    raise ValueError(f"Unknown command {command!r}")


def main(
    argv: Optional[Iterable[str]] = None,
    *,
    today_provider: Callable[[], date] = date.today,
    renderer_factory: Callable[[], TimelineRenderer] = TimelineRenderer,
) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = resolve_settings(args)
    except ConfigError as exc:
        parser.error(str(exc))

    store = HealthStore(settings.data_file)
    session = TimelineSession(
        store,
        zoom_level=settings.zoom_level,
        viewport_width=getattr(args, "viewport_width", None),
        today_provider=today_provider,
        renderer_factory=renderer_factory,
    )
    return run_command(args, session)


__all__ = [
    "AppSettings",
    "TimelineSession",
    "build_parser",
    "main",
    "resolve_settings",
    "run_command",
]


if __name__ == "__main__":
    sys.exit(main())
