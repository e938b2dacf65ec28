"""Pillow renderer turning a :class:`DrawableLayout` into an image."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Sequence

from PIL import Image, ImageDraw, ImageFont

from ..timeline.layout import DrawableLayout, EntryRect, SectionLayout


def _font_length(font: ImageFont.ImageFont, text: str) -> float:
    try:
        return font.getlength(text)  # type: ignore[attr-defined]
    except AttributeError:  # pragma: no cover - fallback for older Pillow
        dummy_img = Image.new("L", (1, 1), color=255)
        draw = ImageDraw.Draw(dummy_img)
        return float(draw.textlength(text, font=font))


def _load_font(path_candidates: Sequence[Path], size: int) -> ImageFont.ImageFont:
    for candidate in path_candidates:
        if candidate and candidate.exists():
            return ImageFont.truetype(str(candidate), size=size)
    return ImageFont.load_default()


def _default_font_candidates(bold: bool) -> List[Path]:
    names = [
        "DejaVuSans-Bold.ttf" if bold else "DejaVuSans.ttf",
        "Arial Bold.ttf" if bold else "Arial.ttf",
    ]
    candidates: List[Path] = []
    search_dirs = [
        Path("/usr/share/fonts/truetype/dejavu"),
        Path("/usr/share/fonts"),
        Path("/Library/Fonts"),
        Path.home() / ".fonts",
    ]
    for name in names:
        for directory in search_dirs:
            candidates.append(directory / name)
    return candidates


def _truncate_line(line: str, font: ImageFont.ImageFont, max_width: float) -> str:
    if _font_length(font, line) <= max_width:
        return line
    ellipsis = "…"
    current = line
    while current and _font_length(font, current + ellipsis) > max_width:
        current = current[:-1].rstrip()
    return (current + ellipsis) if current else ""


# Shades 0-9 per colour token, lightest first.
DEFAULT_PALETTE: Mapping[str, Mapping[int, str]] = {
    "red": {0: "#fff5f5", 1: "#ffe3e3", 2: "#ffc9c9", 4: "#ff8787", 6: "#fa5252", 9: "#c92a2a"},
    "blue": {0: "#e7f5ff", 1: "#d0ebff", 2: "#a5d8ff", 4: "#4dabf7", 6: "#228be6", 9: "#1864ab"},
    "green": {0: "#ebfbee", 1: "#d3f9d8", 2: "#b2f2bb", 4: "#69db7c", 6: "#40c057", 9: "#2b8a3e"},
    "orange": {0: "#fff4e6", 1: "#ffe8cc", 2: "#ffd8a8", 4: "#ffa94d", 6: "#fd7e14", 9: "#d9480f"},
    "violet": {0: "#f3f0ff", 1: "#e5dbff", 2: "#d0bfff", 4: "#9775fa", 6: "#7950f2", 9: "#5f3dc4"},
    "teal": {0: "#e6fcf5", 1: "#c3fae8", 2: "#96f2d7", 4: "#38d9a9", 6: "#12b886", 9: "#087f5b"},
    "gray": {0: "#f8f9fa", 1: "#f1f3f5", 2: "#e9ecef", 4: "#ced4da", 6: "#868e96", 9: "#212529"},
}


@dataclass
class RendererConfig:
    """Colours, fonts and preview output for the timeline renderer."""

    font_regular_path: Path | None = None
    font_bold_path: Path | None = None
    preview_output_dir: Path | None = None
    palette: Mapping[str, Mapping[int, str]] = field(default_factory=lambda: DEFAULT_PALETTE)
    background_color: str = "#ffffff"
    text_color: str = "#212529"
    dimmed_text_color: str = "#868e96"
    highlight_color: str = "#e7f5ff"
    highlight_text_color: str = "#228be6"
    border_color: str = "#dee2e6"
    grid_line_color: str = "#f1f3f5"
    year_line_color: str = "#ced4da"
    year_font_size: int = 13
    month_font_size: int = 10
    label_font_size: int = 12
    entry_font_size: int = 11
    preview_font_size: int = 10
    corner_radius: int = 4
    grip_bar_width: int = 3
    grip_bar_height: int = 14
    min_month_label_width: int = 12

    def __post_init__(self) -> None:
        if self.preview_output_dir is not None:
            self.preview_output_dir = Path(self.preview_output_dir)
            self.preview_output_dir.mkdir(parents=True, exist_ok=True)

    def _font_candidates(self, bold: bool) -> List[Path]:
        provided = self.font_bold_path if bold else self.font_regular_path
        candidates: List[Path] = []
        if provided is not None:
            candidates.append(Path(provided))
        candidates.extend(_default_font_candidates(bold))
        return candidates

    def font(self, size: int, *, bold: bool = False) -> ImageFont.ImageFont:
        return _load_font(self._font_candidates(bold), size)

    def shade(self, color: str, level: int) -> str:
        shades = self.palette.get(color) or self.palette["gray"]
        return shades[level]


class TimelineRenderer:
    """Render the timeline grid with a sticky category label column."""

    def __init__(self, config: RendererConfig | None = None) -> None:
        self.config = config or RendererConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def render(
        self,
        layout: DrawableLayout,
        *,
        scroll_offset: float = 0,
        viewport_width: int | None = None,
        preview_name: str | None = None,
    ) -> Image.Image:
        """Render ``layout`` as seen through a horizontally scrolled viewport.

        Args:
            layout: Geometry produced by :func:`compute_layout`.
            scroll_offset: Horizontal scroll of the grid in pixels.
            viewport_width: Width of the output image. ``None`` renders the
                whole grid without scrolling.
            preview_name: Optional file name (without extension) used when a
                preview output directory is configured.
        Returns:
            An RGB Pillow image.
        """

        cfg = self.config
        metrics = layout.metrics
        label_width = metrics.label_column_width
        height = layout.total_height

        grid = Image.new("RGB", (max(layout.total_width, 1), height), color=cfg.background_color)
        grid_draw = ImageDraw.Draw(grid)
        self._draw_year_headers(grid_draw, layout)
        self._draw_month_headers(grid_draw, layout)
        self._draw_sections(grid_draw, layout)
        self._draw_entries(grid_draw, layout)

        if viewport_width is None:
            viewport_width = label_width + layout.total_width
            scroll_offset = 0
        viewport_width = max(int(viewport_width), label_width + 1)
        scroll = int(round(max(0.0, min(scroll_offset, layout.max_scroll(viewport_width)))))
        visible_width = min(viewport_width - label_width, grid.width - scroll)

        canvas = Image.new("RGB", (viewport_width, height), color=cfg.background_color)
        canvas.paste(grid.crop((scroll, 0, scroll + visible_width, height)), (label_width, 0))

        draw = ImageDraw.Draw(canvas)
        self._draw_label_column(draw, layout)

        if cfg.preview_output_dir is not None and preview_name is not None:
            canvas.save(cfg.preview_output_dir / f"{preview_name}.png")

        return canvas

    # ------------------------------------------------------------------
    # Drawing helpers
    # ------------------------------------------------------------------
    def _draw_year_headers(self, draw: ImageDraw.ImageDraw, layout: DrawableLayout) -> None:
        cfg = self.config
        header = layout.metrics.year_header_height
        font = cfg.font(cfg.year_font_size, bold=True)
        for cell in layout.years:
            box = (cell.left, 0, cell.left + cell.width - 1, header - 1)
            if cell.is_current_year:
                draw.rectangle(box, fill=cfg.highlight_color)
            draw.line(
                (cell.left + cell.width - 1, 0, cell.left + cell.width - 1, header),
                fill=cfg.year_line_color,
                width=2,
            )
            text = str(cell.year)
            text_x = cell.left + (cell.width - _font_length(font, text)) / 2
            draw.text((text_x, 5), text, font=font, fill=cfg.text_color)
        draw.line((0, header - 1, layout.total_width, header - 1), fill=cfg.border_color)

    def _draw_month_headers(self, draw: ImageDraw.ImageDraw, layout: DrawableLayout) -> None:
        cfg = self.config
        metrics = layout.metrics
        top = metrics.year_header_height
        bottom = metrics.header_height
        font = cfg.font(cfg.month_font_size)
        for cell in layout.months:
            if cell.is_current_month:
                draw.rectangle(
                    (cell.left, top, cell.left + cell.width - 1, bottom - 1),
                    fill=cfg.highlight_color,
                )
            self._draw_month_divider(draw, cell.left + cell.width - 1, top, bottom, cell.is_year_end)
            if cell.width < cfg.min_month_label_width:
                continue
            text = cell.month.strftime("%b") if cell.width >= 80 else str(cell.month.month)
            text_x = cell.left + (cell.width - _font_length(font, text)) / 2
            fill = cfg.highlight_text_color if cell.is_current_month else cfg.dimmed_text_color
            draw.text((text_x, top + 9), text, font=font, fill=fill)
        draw.line((0, bottom - 1, layout.total_width, bottom - 1), fill=cfg.border_color)

    def _draw_month_divider(
        self,
        draw: ImageDraw.ImageDraw,
        x: float,
        top: float,
        bottom: float,
        is_year_end: bool,
    ) -> None:
        cfg = self.config
        if is_year_end:
            draw.line((x, top, x, bottom), fill=cfg.year_line_color, width=2)
        else:
            draw.line((x, top, x, bottom), fill=cfg.grid_line_color, width=1)

    def _draw_sections(self, draw: ImageDraw.ImageDraw, layout: DrawableLayout) -> None:
        cfg = self.config
        for section in layout.sections:
            for cell in layout.months:
                if cell.is_current_month:
                    draw.rectangle(
                        (cell.left, section.top, cell.left + cell.width - 1, section.bottom - 1),
                        fill=cfg.highlight_color,
                    )
                self._draw_month_divider(
                    draw, cell.left + cell.width - 1, section.top, section.bottom, cell.is_year_end
                )
            draw.line(
                (0, section.bottom - 1, layout.total_width, section.bottom - 1),
                fill=cfg.border_color,
            )

    def _draw_entries(self, draw: ImageDraw.ImageDraw, layout: DrawableLayout) -> None:
        colors = {section.category: section.color for section in layout.sections}
        font = self.config.font(self.config.entry_font_size)
        for rect in layout.entries:
            self._draw_entry(draw, layout, rect, colors.get(rect.entry.category, "gray"), font)

    def _draw_entry(
        self,
        draw: ImageDraw.ImageDraw,
        layout: DrawableLayout,
        rect: EntryRect,
        color: str,
        font: ImageFont.ImageFont,
    ) -> None:
        cfg = self.config
        metrics = layout.metrics
        x0, x1 = rect.visible_span(layout.total_width, metrics.bar_left_inset)
        if x1 - x0 < 1:
            return
        top, bottom = rect.top, rect.bottom - 1

        draw.rounded_rectangle(
            (x0, top, x1, bottom),
            radius=cfg.corner_radius,
            fill=cfg.shade(color, 2 if rect.is_dragging else 1),
            outline=cfg.shade(color, 6 if rect.is_dragging else 4),
            width=1,
        )

        grip_top = top + (rect.height - cfg.grip_bar_height) / 2
        grip_fill = cfg.shade(color, 4)
        if x1 - x0 >= 2 * metrics.grip_width:
            draw.rectangle(
                (x0 + 2, grip_top, x0 + 2 + cfg.grip_bar_width - 1, grip_top + cfg.grip_bar_height),
                fill=grip_fill,
            )
            draw.rectangle(
                (x1 - 2 - cfg.grip_bar_width + 1, grip_top, x1 - 2, grip_top + cfg.grip_bar_height),
                fill=grip_fill,
            )

        padding = 12
        title = _truncate_line(rect.entry.title, font, x1 - x0 - 2 * padding)
        if title:
            text_y = top + (rect.height - cfg.entry_font_size) / 2 - 1
            draw.text((x0 + padding, text_y), title, font=font, fill=cfg.shade(color, 9))

    def _draw_label_column(self, draw: ImageDraw.ImageDraw, layout: DrawableLayout) -> None:
        cfg = self.config
        metrics = layout.metrics
        width = metrics.label_column_width
        draw.rectangle((0, 0, width - 1, layout.total_height), fill=cfg.background_color)
        draw.line((width - 1, 0, width - 1, layout.total_height), fill=cfg.border_color)
        draw.line(
            (0, metrics.year_header_height - 1, width, metrics.year_header_height - 1),
            fill=cfg.border_color,
        )
        draw.line(
            (0, metrics.header_height - 1, width, metrics.header_height - 1),
            fill=cfg.border_color,
        )

        range_font = cfg.font(cfg.preview_font_size)
        draw.text(
            (8, 7),
            f"{layout.start_year} - {layout.end_year}",
            font=range_font,
            fill=cfg.dimmed_text_color,
        )
        if layout.preview_label:
            label = _truncate_line(layout.preview_label, range_font, width - 16)
            draw.text(
                (8, metrics.year_header_height + 9),
                label,
                font=range_font,
                fill=cfg.highlight_text_color,
            )

        font = cfg.font(cfg.label_font_size, bold=True)
        for section in layout.sections:
            self._draw_section_badge(draw, section, font, width)
            draw.line((0, section.bottom - 1, width, section.bottom - 1), fill=cfg.border_color)

    def _draw_section_badge(
        self,
        draw: ImageDraw.ImageDraw,
        section: SectionLayout,
        font: ImageFont.ImageFont,
        column_width: int,
    ) -> None:
        cfg = self.config
        text = _truncate_line(section.label.upper(), font, column_width - 32)
        text_width = _font_length(font, text)
        badge_height = cfg.label_font_size + 8
        left = 8
        top = section.top + (section.height - badge_height) / 2
        draw.rounded_rectangle(
            (left, top, left + text_width + 16, top + badge_height),
            radius=badge_height // 2,
            fill=cfg.shade(section.color, 1),
        )
        draw.text((left + 8, top + 3), text, font=font, fill=cfg.shade(section.color, 9))


__all__ = ["DEFAULT_PALETTE", "RendererConfig", "TimelineRenderer"]
