from __future__ import annotations

import logging
from datetime import date

from crewtrack.apps.compliance.schemas import (
    SnapshotLoad,
    StatusCounts,
    TrainingGroupRow,
    TrainingRecordRow,
    TrainingRow,
)


def _row(**overrides):
    data = {
        "id": 501,
        "location_id": 2,
        "crew_id": "14",
        "track_id": 3,
        "training_id": 9,
        "is_record_active": True,
        "last_completed": "2024-03-02",
        "training_status": "Training Due",
        "due_date": "2025-03-02T00:00:00",
        "days_until_due": "12",
        "days_overdue": None,
        "crew_name": "Dana Reyes",
        "home_department": "AUDIO",
        "crew_status": "Active",
        "track_name": "A1",
        "training_name": "RF Safety",
        "last_signed_off_by": "Sam",
        "last_signed_off_on": "2024-03-03",
        "some_new_column": "ignored",
    }
    data.update(overrides)
    return TrainingRecordRow(**data)


def test_row_maps_to_strict_record():
    record = _row().to_record()

    assert record.id == 501
    assert record.crew_id == 14
    assert record.active is True
    assert record.last_completed == date(2024, 3, 2)
    assert record.due_date == date(2025, 3, 2)
    assert record.status == "Training Due"
    assert record.days_until_due == 12
    assert record.days_overdue is None
    assert record.home_department == "AUDIO"
    assert record.last_signed_off_on == date(2024, 3, 3)


def test_inactive_flag_maps_to_active_false():
    assert _row(is_record_active=False).to_record().active is False
    assert _row(is_record_active=None).to_record().active is False


def test_bad_dates_degrade_to_none_and_log(caplog):
    with caplog.at_level(logging.WARNING):
        record = _row(last_completed="not a date", due_date=12345).to_record()

    assert record.last_completed is None
    assert record.due_date is None
    assert "Unparseable date on training row" in caplog.text


def test_non_finite_numbers_degrade_to_none(caplog):
    with caplog.at_level(logging.WARNING):
        record = _row(days_until_due="NaN", days_overdue=float("inf")).to_record()

    assert record.days_until_due is None
    assert record.days_overdue is None
    assert "Non-finite number on training row" in caplog.text


def test_blank_text_becomes_none():
    record = _row(crew_name="   ", training_status="").to_record()
    assert record.crew_name is None
    assert record.status is None


def test_lookup_rows_fall_back_to_id_for_names():
    training = TrainingRow(id=4, training_name=None, is_training_active=1, training_group_id="7").to_training()
    assert training.name == "4"
    assert training.active is True
    assert training.training_group_id == 7

    group = TrainingGroupRow(id=7, name="", color=" #ff0000 ", active=None).to_group()
    assert group.name == "7"
    assert group.color == "#ff0000"
    assert group.description == ""
    assert group.active is True


def test_snapshot_load_maps_every_collection():
    payload = SnapshotLoad(
        location_id=2,
        records=[_row()],
        trainings=[{"id": 9, "training_name": "RF Safety", "is_training_active": True}],
        training_groups=[{"id": 1, "name": "Electrical"}],
        tracks=[{"id": 3, "track_name": "A1", "is_track_active": True}],
        requirements=[{"id": 1, "track_id": 3, "training_id": 9, "is_requirement_active": True}],
    )

    snapshot = payload.to_snapshot()

    assert snapshot.location_id == 2
    assert snapshot.records[0].training_name == "RF Safety"
    assert snapshot.trainings[0].name == "RF Safety"
    assert snapshot.training_groups[0].name == "Electrical"
    assert snapshot.tracks[0].name == "A1"
    assert snapshot.requirements[0].active is True


def test_status_counts_add_and_total():
    a = StatusCounts(overdue=1, due=2)
    b = StatusCounts(due=1, complete=4, inactive=1)
    assert a + b == StatusCounts(overdue=1, due=3, complete=4, inactive=1)
    assert (a + b).total == 9
