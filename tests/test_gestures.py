from __future__ import annotations

from datetime import date

import pytest

from health_timeline.models import Category, TimelineEntry
from health_timeline.timeline.gestures import (
    ActivateCell,
    ActivateEntry,
    CellDoubleClick,
    CommitEntry,
    EntryPointerDown,
    GridPointerDown,
    PointerLeave,
    PointerMove,
    PointerUp,
    ScrollTo,
    compute_preview,
    transition,
)
from health_timeline.timeline.state import DragPreview, DragState, Grip, Mode, ViewState

FLU = TimelineEntry("a", Category.SYMPTOM, date(2024, 1, 10), "Flu", end_date=date(2024, 1, 20))
CHECKUP = TimelineEntry("p", Category.MISC, date(2024, 3, 5), "Checkup")
ENTRIES = [FLU, CHECKUP]

# At zoom level 3 one month is 28 px, so 14 px is 15 days of drag.
FIFTEEN_DAYS = 14


def _run(view: ViewState, *events):
    effects = []
    for event in events:
        view, produced = transition(view, event, ENTRIES)
        effects.extend(produced)
    return view, effects


def test_move_drag_scenario():
    view, effects = _run(
        ViewState(),
        EntryPointerDown("a", Grip.MOVE, 100.0),
        PointerMove(100.0 + FIFTEEN_DAYS),
    )

    assert view.mode is Mode.DRAGGING
    assert view.preview == DragPreview(date(2024, 1, 25), date(2024, 2, 4))
    assert effects == []

    view, effects = _run(view, PointerUp())

    assert effects == [CommitEntry(FLU.with_dates(date(2024, 1, 25), date(2024, 2, 4)))]
    assert view == ViewState()


def test_commit_happens_once_with_final_preview():
    _, effects = _run(
        ViewState(),
        EntryPointerDown("a", Grip.MOVE, 0.0),
        PointerMove(5.0),
        PointerMove(-40.0),
        PointerMove(28.0),
        PointerUp(),
    )

    assert len(effects) == 1
    assert effects[0] == CommitEntry(FLU.with_dates(date(2024, 2, 9), date(2024, 2, 19)))


def test_zero_displacement_move_still_commits():
    _, effects = _run(
        ViewState(),
        EntryPointerDown("a", Grip.MOVE, 50.0),
        PointerMove(50.0),
        PointerUp(),
    )

    assert effects == [CommitEntry(FLU)]


def test_click_without_move_activates_entry():
    view, effects = _run(ViewState(), EntryPointerDown("a", Grip.MOVE, 50.0), PointerUp())

    assert effects == [ActivateEntry(FLU)]
    assert view.mode is Mode.IDLE


def test_drag_state_records_original_dates():
    view, _ = _run(ViewState(), EntryPointerDown("a", Grip.RESIZE_END, 12.5))

    assert view.drag == DragState("a", Grip.RESIZE_END, 12.5, date(2024, 1, 10), date(2024, 1, 20))
    assert view.preview is None


def test_resize_start_clamps_to_end():
    view, _ = _run(
        ViewState(),
        EntryPointerDown("a", Grip.RESIZE_START, 0.0),
        PointerMove(28.0 * 3),
    )

    assert view.preview == DragPreview(date(2024, 1, 20), date(2024, 1, 20))


def test_resize_end_clamps_to_start():
    view, effects = _run(
        ViewState(),
        EntryPointerDown("a", Grip.RESIZE_END, 0.0),
        PointerMove(-28.0 * 2),
        PointerUp(),
    )

    assert effects == [CommitEntry(FLU.with_dates(date(2024, 1, 10), date(2024, 1, 10)))]


def test_resize_start_within_range():
    view, _ = _run(
        ViewState(),
        EntryPointerDown("a", Grip.RESIZE_START, 0.0),
        PointerMove(-FIFTEEN_DAYS),
    )

    assert view.preview == DragPreview(date(2023, 12, 26), date(2024, 1, 20))


def test_moving_a_point_entry_keeps_it_a_point():
    view, _ = _run(
        ViewState(),
        EntryPointerDown("p", Grip.MOVE, 0.0),
        PointerMove(FIFTEEN_DAYS),
    )

    assert view.preview == DragPreview(date(2024, 3, 20), None)


def test_resize_start_on_point_entry_shifts_start_only():
    preview = compute_preview(DragState("p", Grip.RESIZE_START, 0.0, date(2024, 3, 5), None), 10)
    assert preview == DragPreview(date(2024, 3, 15), None)


def test_resize_end_on_point_entry_introduces_end_date():
    _, effects = _run(
        ViewState(),
        EntryPointerDown("p", Grip.RESIZE_END, 0.0),
        PointerMove(FIFTEEN_DAYS),
        PointerUp(),
    )

    assert effects == [CommitEntry(CHECKUP.with_dates(date(2024, 3, 5), date(2024, 3, 20)))]


@pytest.mark.parametrize("grip", list(Grip))
@pytest.mark.parametrize("delta", [-400, -31, -1, 0, 1, 17, 90, 400])
def test_previews_are_never_inverted(grip: Grip, delta: int):
    preview = compute_preview(DragState("a", grip, 0.0, FLU.start_date, FLU.end_date), delta)
    assert preview.end_date is not None
    assert preview.start_date <= preview.end_date


def test_pan_scrolls_relative_to_start_offset():
    view, effects = _run(
        ViewState(),
        GridPointerDown(300.0, 120.0),
        PointerMove(250.0),
        PointerMove(400.0),
    )

    assert view.mode is Mode.PANNING
    assert effects == [ScrollTo(170.0), ScrollTo(20.0)]

    view, effects = _run(view, PointerUp())
    assert view.mode is Mode.IDLE
    assert effects == []


def test_pan_is_ignored_while_dragging():
    view, _ = _run(ViewState(), EntryPointerDown("a", Grip.MOVE, 0.0))
    after, effects = _run(view, GridPointerDown(10.0, 0.0))

    assert after == view
    assert after.mode is Mode.DRAGGING
    assert effects == []


def test_drag_is_ignored_while_panning():
    view, _ = _run(ViewState(), GridPointerDown(10.0, 0.0))
    after, effects = _run(view, EntryPointerDown("a", Grip.MOVE, 10.0))

    assert after == view
    assert after.mode is Mode.PANNING
    assert effects == []


def test_panning_never_touches_entries():
    _, effects = _run(ViewState(), GridPointerDown(0.0, 0.0), PointerMove(-50.0), PointerUp())

    assert all(isinstance(effect, ScrollTo) for effect in effects)


def test_leaving_surface_commits_drag():
    view, effects = _run(
        ViewState(),
        EntryPointerDown("a", Grip.MOVE, 100.0),
        PointerMove(100.0 + FIFTEEN_DAYS),
        PointerLeave(),
    )

    assert effects == [CommitEntry(FLU.with_dates(date(2024, 1, 25), date(2024, 2, 4)))]
    assert view.mode is Mode.IDLE


def test_leaving_surface_without_move_is_silent():
    view, effects = _run(ViewState(), EntryPointerDown("a", Grip.MOVE, 0.0), PointerLeave())

    assert effects == []
    assert view.mode is Mode.IDLE


def test_leaving_surface_ends_pan():
    view, effects = _run(ViewState(), GridPointerDown(0.0, 0.0), PointerLeave())

    assert view.mode is Mode.IDLE
    assert effects == []


@pytest.mark.parametrize("event", [PointerMove(10.0), PointerUp(), PointerLeave()])
def test_events_without_gesture_are_noops(event):
    view = ViewState(zoom_level=1)
    assert transition(view, event, ENTRIES) == (view, [])


def test_pointer_down_on_unknown_entry_is_ignored():
    view = ViewState()
    assert transition(view, EntryPointerDown("missing", Grip.MOVE, 0.0), ENTRIES) == (view, [])


def test_double_click_activates_cell_when_idle():
    event = CellDoubleClick(date(2023, 5, 1), Category.DIET)

    _, effects = _run(ViewState(), event)
    assert effects == [ActivateCell(date(2023, 5, 1), Category.DIET)]

    dragging, _ = _run(ViewState(), EntryPointerDown("a", Grip.MOVE, 0.0))
    assert _run(dragging, event)[1] == []

    panning, _ = _run(ViewState(), GridPointerDown(0.0, 0.0))
    assert _run(panning, event)[1] == []


def test_committed_entries_are_not_mutated():
    _run(
        ViewState(),
        EntryPointerDown("a", Grip.MOVE, 0.0),
        PointerMove(100.0),
        PointerUp(),
    )

    assert FLU.start_date == date(2024, 1, 10)
    assert FLU.end_date == date(2024, 1, 20)


def test_drag_delta_depends_on_zoom():
    view, _ = _run(
        ViewState(zoom_level=0),
        EntryPointerDown("a", Grip.MOVE, 0.0),
        PointerMove(8.0),
    )

    assert view.preview == DragPreview(date(2024, 2, 9), date(2024, 2, 19))
