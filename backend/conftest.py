from __future__ import annotations

import itertools
import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent
sys.path.append(str(ROOT))

from crewtrack.apps.compliance.schemas import TrainingRecord  # noqa: E402
from crewtrack.apps.compliance.services import ComplianceBoard  # noqa: E402
from crewtrack.utils.cache import create_response_cache  # noqa: E402


@pytest.fixture()
def make_record():
    """
    Factory for TrainingRecord with sensible defaults (an active, complete,
    expiring record). Override any field by keyword; the status shortcuts
    `overdue=N` / `due_in=N` / `never_completed=True` / `never_expires=True`
    set the related fields together.
    """
    ids = itertools.count(1)

    def _make(
        *,
        overdue=None,
        due_in=None,
        never_completed=False,
        never_expires=False,
        **overrides,
    ) -> TrainingRecord:
        fields = {
            "id": next(ids),
            "crew_id": 1,
            "track_id": 10,
            "training_id": 100,
            "active": True,
            "last_completed": date(2024, 1, 1),
            "status": "Training Complete",
            "due_date": date(2025, 1, 1),
            "crew_name": "Alex",
            "track_name": "Fly Rail",
            "training_name": "Harness",
            "home_department": "AUTOMATION",
        }
        if overdue is not None:
            fields.update(status="Training Overdue", days_overdue=overdue)
        if due_in is not None:
            fields.update(status="Training Due", days_until_due=due_in)
        if never_completed:
            fields.update(last_completed=None)
        if never_expires:
            fields.update(due_date=None)
        fields.update(overrides)
        return TrainingRecord(**fields)

    return _make


@pytest.fixture()
def board():
    return ComplianceBoard(default_view="list", cache=create_response_cache(ttl_seconds=30))
