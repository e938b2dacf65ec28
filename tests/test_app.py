from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest
from PIL import Image

from health_timeline import app
from health_timeline.models import Category, TimelineEntry
from health_timeline.storage import HealthData, HealthStore

TODAY = date(2024, 6, 15)
FLU = TimelineEntry("a", Category.SYMPTOM, date(2024, 1, 10), "Flu", end_date=date(2024, 1, 20))


def _main(data_file: Path, *argv: str, **kwargs) -> int:
    return app.main(
        ["--data-file", str(data_file), *argv],
        today_provider=lambda: TODAY,
        **kwargs,
    )


def _add_flu(data_file: Path, capsys: pytest.CaptureFixture[str]) -> str:
    code = _main(
        data_file,
        "add",
        "--category",
        "symptom",
        "--start",
        "2024-01-10",
        "--end",
        "2024-01-20",
        "--title",
        "Flu",
    )
    assert code == 0
    return capsys.readouterr().out.strip()


def test_add_and_list(tmp_path, capsys):
    data_file = tmp_path / "data.json"
    entry_id = _add_flu(data_file, capsys)

    assert _main(data_file, "list") == 0
    out = capsys.readouterr().out
    assert out == f"{entry_id}\tsymptom\t2024-01-10..2024-01-20\tFlu\n"


def test_move_command_drags_entry(tmp_path, capsys):
    data_file = tmp_path / "data.json"
    entry_id = _add_flu(data_file, capsys)

    assert _main(data_file, "move", entry_id, "15") == 0

    entry = HealthStore(data_file).get(entry_id)
    assert entry is not None
    assert (entry.start_date, entry.end_date) == (date(2024, 1, 25), date(2024, 2, 4))


def test_move_command_with_resize_grip(tmp_path, capsys):
    data_file = tmp_path / "data.json"
    entry_id = _add_flu(data_file, capsys)

    assert _main(data_file, "move", entry_id, "-30", "--grip", "resize-end") == 0

    entry = HealthStore(data_file).get(entry_id)
    assert entry is not None
    assert entry.end_date == entry.start_date == date(2024, 1, 10)


def test_move_unknown_entry_fails(tmp_path):
    assert _main(tmp_path / "data.json", "move", "missing", "3") == 1


def test_export_text_and_json(tmp_path, capsys):
    data_file = tmp_path / "data.json"
    _add_flu(data_file, capsys)

    assert _main(data_file, "export", "--format", "text") == 0
    assert "- Jan 10, 2024 - Jan 20, 2024: Flu" in capsys.readouterr().out

    output = tmp_path / "export.json"
    assert _main(data_file, "export", "--output", str(output)) == 0
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["version"] == 1
    assert payload["entries"][0]["title"] == "Flu"


def test_import_replaces_data(tmp_path):
    data_file = tmp_path / "data.json"
    source = tmp_path / "import.json"
    source.write_text(
        json.dumps(
            {
                "version": 9,
                "entries": [
                    {"id": "d", "sectionType": "diet", "startDate": "2023-02-01", "title": "Keto"}
                ],
            }
        ),
        encoding="utf-8",
    )

    assert _main(data_file, "import", str(source)) == 0

    store = HealthStore(data_file)
    assert [entry.id for entry in store.entries] == ["d"]
    assert store.entries[0].category is Category.DIET
    assert json.loads(data_file.read_text(encoding="utf-8"))["version"] == 1


def test_import_invalid_file_fails(tmp_path):
    source = tmp_path / "bad.json"
    source.write_text("{not json", encoding="utf-8")

    assert _main(tmp_path / "data.json", "import", str(source)) == 1
    assert _main(tmp_path / "data.json", "import", str(tmp_path / "missing.json")) == 1

    binary = tmp_path / "binary.json"
    binary.write_bytes(b"\xff\xfe\x00garbage")
    assert _main(tmp_path / "data.json", "import", str(binary)) == 1


def test_delete_and_clear(tmp_path, capsys):
    data_file = tmp_path / "data.json"
    entry_id = _add_flu(data_file, capsys)
    _add_flu(data_file, capsys)

    assert _main(data_file, "delete", entry_id) == 0
    assert len(HealthStore(data_file).entries) == 1
    assert _main(data_file, "delete", entry_id) == 1

    assert _main(data_file, "clear") == 0
    assert not data_file.exists()


def test_render_writes_png(tmp_path, capsys):
    data_file = tmp_path / "data.json"
    _add_flu(data_file, capsys)
    output = tmp_path / "out" / "timeline.png"

    assert _main(data_file, "render", "--output", str(output), "--zoom", "0") == 0

    with Image.open(output) as image:
        assert image.size[0] == 150 + 36 * 8


def test_render_viewport_uses_injected_renderer(tmp_path):
    calls: list[dict] = []

    class FakeRenderer:
        def render(self, layout, *, scroll_offset, viewport_width):
            calls.append(
                {
                    "month_width": layout.month_width,
                    "scroll_offset": scroll_offset,
                    "viewport_width": viewport_width,
                }
            )
            return Image.new("RGB", (viewport_width, 10), "white")

    output = tmp_path / "view.png"
    code = _main(
        tmp_path / "data.json",
        "render",
        "--output",
        str(output),
        "--scroll",
        "5000",
        "--viewport-width",
        "400",
        renderer_factory=FakeRenderer,
    )

    assert code == 0
    assert calls == [{"month_width": 28, "scroll_offset": 150 + 36 * 28 - 400, "viewport_width": 400}]
    assert output.exists()


def test_zoom_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("HEALTH_TIMELINE_ZOOM", "1")
    seen: list[int] = []

    class FakeRenderer:
        def render(self, layout, **_):
            seen.append(layout.month_width)
            return Image.new("RGB", (1, 1))

    assert _main(tmp_path / "data.json", "render", "--output", str(tmp_path / "x.png"), renderer_factory=FakeRenderer) == 0
    assert seen == [12]


def test_bad_zoom_is_a_usage_error(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        _main(tmp_path / "data.json", "render", "--zoom", "9")
    assert excinfo.value.code == 2


def _session(tmp_path):
    store = HealthStore(tmp_path / "data.json", data=HealthData(entries=(FLU,)))
    return app.TimelineSession(store, zoom_level=3, today_provider=lambda: TODAY)


def test_double_click_on_empty_cell_prepares_draft(tmp_path):
    session = _session(tmp_path)

    # Grid x 100 in the symptom band is April 2022 at the default zoom.
    session.controller.double_click(250, 75)

    draft = session.draft
    assert draft is not None
    assert draft.category is Category.SYMPTOM
    assert (draft.start_date, draft.end_date) == (date(2022, 4, 1), date(2022, 5, 31))
    assert draft.title == ""
    assert session.store.entries == (FLU,)


def test_clicking_a_bar_selects_its_entry(tmp_path):
    session = _session(tmp_path)

    session.controller.pointer_down(848, 75)
    session.controller.pointer_up()

    assert session.selected == FLU
    assert session.draft is None
