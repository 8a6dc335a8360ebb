from __future__ import annotations

import logging

import pytest

from crewtrack.apps.compliance.enums import FocusFilter, StatusLabel, ViewMode
from crewtrack.apps.compliance.expansion import UnknownViewError
from crewtrack.apps.compliance.filters import RecordFilters
from crewtrack.apps.compliance.hierarchy import make_key
from crewtrack.apps.compliance.schemas import ComplianceSnapshot, StatusCounts
from crewtrack.apps.compliance.services import ComplianceBoard, _default_view_from_env, to_record_read
from crewtrack.utils.cache import LOCATION_SCOPED_CACHE_KEYS, ResponseCache


@pytest.fixture()
def loaded_board(board, make_record):
    board.load_snapshot(
        ComplianceSnapshot(
            location_id=1,
            records=[
                make_record(crew_id=1, crew_name="Dana", overdue=3),
                make_record(crew_id=1, crew_name="Dana", track_id=11, track_name="Audio", due_in=4),
                make_record(crew_id=2, crew_name="Eli", never_completed=True),
                make_record(crew_id=3, crew_name="Fox", active=False),
            ],
        )
    )
    return board


def test_to_record_read_adds_classification(make_record):
    read = to_record_read(make_record(overdue=2))
    assert read.status_label == StatusLabel.OVERDUE
    assert read.tone.value == "danger"
    assert read.urgency == "Overdue by 2 days"


def test_urgent_records_are_sorted_and_filtered(loaded_board):
    rows = loaded_board.urgent_records()
    assert [r.status_label for r in rows] == [
        StatusLabel.OVERDUE,
        StatusLabel.DUE_SOON,
        StatusLabel.NOT_COMPLETED,
    ]


def test_summary_ignores_focus(loaded_board):
    focused = RecordFilters(focus=FocusFilter.OVERDUE)

    assert len(loaded_board.urgent_records(focused)) == 1
    assert loaded_board.summary(focused) == StatusCounts(overdue=1, due=1, not_completed=1)


def test_grouped_does_not_switch_active_view(loaded_board):
    view = loaded_board.grouped(ViewMode.CREW)

    assert loaded_board.expansion.active == ViewMode.LIST
    assert [n.title for n in view.nodes] == ["Dana", "Eli"]
    assert view.subtitles == {"1": "Automation", "2": "Automation"}


def test_grouped_reports_open_keys_of_that_view(loaded_board):
    loaded_board.set_view(ViewMode.CREW)
    loaded_board.toggle("1")

    assert loaded_board.grouped().open_keys == ["1"]
    assert loaded_board.grouped(ViewMode.TRAINING).open_keys == []


def test_expand_and_collapse_top(loaded_board):
    keys = loaded_board.expand_top(ViewMode.CREW)
    assert keys == ["1", "2"]

    loaded_board.toggle(make_key("1", "11"), ViewMode.CREW)
    assert make_key("1", "11") in loaded_board.expansion.open_keys(ViewMode.CREW)

    loaded_board.toggle("1", ViewMode.CREW)
    assert loaded_board.expansion.open_keys(ViewMode.CREW) == ["2"]

    assert loaded_board.collapse_top(ViewMode.CREW) == []


def test_expand_top_leaves_list_view_alone(loaded_board):
    assert loaded_board.expand_top(ViewMode.LIST) == []


def test_reset_all_returns_to_list_view(loaded_board):
    loaded_board.set_view("department")
    loaded_board.expand_top()
    loaded_board.reset_all()

    assert loaded_board.expansion.active == ViewMode.LIST
    assert loaded_board.expansion.open_keys(ViewMode.DEPARTMENT) == []


def test_unknown_view_is_rejected(loaded_board):
    with pytest.raises(UnknownViewError):
        loaded_board.grouped("planner")


def test_reload_is_visible_immediately(loaded_board, make_record):
    loaded_board.load_snapshot(ComplianceSnapshot(location_id=1, records=[make_record()]))
    assert loaded_board.summary() == StatusCounts(complete=1)


def test_location_change_drops_location_scoped_responses(board):
    cache: ResponseCache = board.cache
    scoped = ResponseCache.key_for(LOCATION_SCOPED_CACHE_KEYS[0], tag="roster")
    other = ResponseCache.key_for("/rest/v1/locations")
    bare = LOCATION_SCOPED_CACHE_KEYS[1] + "?select=*"

    board.load_snapshot(ComplianceSnapshot(location_id=1))
    cache.set(scoped, ["row"])
    cache.set(other, ["loc"])
    cache.set(bare, ["track"])

    board.load_snapshot(ComplianceSnapshot(location_id=1))
    assert bare in cache
    assert scoped in cache

    board.load_snapshot(ComplianceSnapshot(location_id=2))
    assert bare not in cache
    assert scoped not in cache
    assert other in cache


def test_default_view_env_is_honoured(monkeypatch):
    monkeypatch.setenv("CREWTRACK_DEFAULT_VIEW", "department")
    assert _default_view_from_env() == ViewMode.DEPARTMENT

    monkeypatch.delenv("CREWTRACK_DEFAULT_VIEW")
    assert _default_view_from_env() == ViewMode.LIST


def test_bad_default_view_env_falls_back_to_list(monkeypatch, caplog):
    monkeypatch.setenv("CREWTRACK_DEFAULT_VIEW", "crwe")

    with caplog.at_level(logging.WARNING):
        view = _default_view_from_env()

    assert view == ViewMode.LIST
    assert "Unknown CREWTRACK_DEFAULT_VIEW" in caplog.text
    assert ComplianceBoard(default_view=view).expansion.active == ViewMode.LIST
