# backend/crewtrack/apps/compliance/status.py

from __future__ import annotations

from typing import Iterable

from .enums import UPSTREAM_DUE, UPSTREAM_OVERDUE, StatusLabel, StatusTone
from .schemas import StatusCounts, TrainingRecord

_TONES = {
    StatusLabel.OVERDUE: StatusTone.DANGER,
    StatusLabel.DUE_SOON: StatusTone.WARN,
    StatusLabel.NOT_COMPLETED: StatusTone.MUTED,
    StatusLabel.NEVER_EXPIRES: StatusTone.MUTED2,
    StatusLabel.COMPLETE: StatusTone.GOOD,
}


def classify(record: TrainingRecord) -> StatusLabel:
    """
    Pure status computation for a single record.

    Order matters:
    - never completed wins over anything the upstream flag says
    - a completion without a due date never expires
    - only then is the upstream Overdue / Due flag consulted
    """
    if record.last_completed is None:
        return StatusLabel.NOT_COMPLETED
    if record.due_date is None:
        return StatusLabel.NEVER_EXPIRES
    if record.status == UPSTREAM_OVERDUE:
        return StatusLabel.OVERDUE
    if record.status == UPSTREAM_DUE:
        return StatusLabel.DUE_SOON
    return StatusLabel.COMPLETE


def _plural_days(n: int) -> str:
    return "1 day" if n == 1 else f"{n} days"


def describe_urgency(record: TrainingRecord) -> str:
    """
    Human text for the urgency distance, e.g. 'Overdue by 3 days', 'Due today'.

    Reads only the record; there is no clock involved.
    """
    label = classify(record)

    if label in (StatusLabel.NOT_COMPLETED, StatusLabel.NEVER_EXPIRES):
        return label.value

    if label == StatusLabel.OVERDUE:
        n = record.days_overdue
        if n is None or n <= 0:
            return "Overdue"
        return f"Overdue by {_plural_days(n)}"

    n = record.days_until_due
    if n is None:
        return "Due soon" if label == StatusLabel.DUE_SOON else "Complete"
    if n == 0:
        return "Due today"
    return f"Due in {_plural_days(n)}"


def status_tone(record: TrainingRecord) -> StatusTone:
    return _TONES[classify(record)]


def compute_counts(records: Iterable[TrainingRecord]) -> StatusCounts:
    """
    Rollup tallies for a flat set of records.

    Inactive records are counted only as `inactive`, whatever their status.
    """
    overdue = due = not_completed = complete = inactive = 0

    for record in records:
        if not record.active:
            inactive += 1
            continue
        label = classify(record)
        if label == StatusLabel.OVERDUE:
            overdue += 1
        elif label == StatusLabel.DUE_SOON:
            due += 1
        elif label == StatusLabel.NOT_COMPLETED:
            not_completed += 1
        else:
            complete += 1

    return StatusCounts(
        overdue=overdue,
        due=due,
        not_completed=not_completed,
        complete=complete,
        inactive=inactive,
    )
