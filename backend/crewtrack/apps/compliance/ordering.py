# backend/crewtrack/apps/compliance/ordering.py

from __future__ import annotations

import math
from typing import Iterable, List, Tuple

from ...utils.strings import base_key, locale_key
from .enums import StatusLabel
from .schemas import TrainingRecord
from .status import classify

BUCKET_OVERDUE = 0
BUCKET_DUE_SOON = 1
BUCKET_OTHER = 2


def urgency_bucket(record: TrainingRecord) -> int:
    label = classify(record)
    if label == StatusLabel.OVERDUE:
        return BUCKET_OVERDUE
    if label == StatusLabel.DUE_SOON:
        return BUCKET_DUE_SOON
    return BUCKET_OTHER


def urgency_sort_key(record: TrainingRecord) -> Tuple:
    """
    Key for "most urgent first" ordering.

    (bucket, distance, crew, track, training) where distance is:
    - overdue: days overdue negated, so more overdue sorts first
    - due soon: days until due, so sooner sorts first
    - other buckets: 0
    A missing day count is the least urgent value of its bucket.
    """
    bucket = urgency_bucket(record)

    distance: float = 0
    if bucket == BUCKET_OVERDUE:
        distance = math.inf if record.days_overdue is None else -record.days_overdue
    elif bucket == BUCKET_DUE_SOON:
        distance = math.inf if record.days_until_due is None else record.days_until_due

    return (
        bucket,
        distance,
        locale_key(record.crew_name),
        locale_key(record.track_name),
        locale_key(record.training_name),
    )


def compare_records(a: TrainingRecord, b: TrainingRecord) -> int:
    """
    Three-way compare matching urgency_sort_key: -1, 0 or 1.
    """
    ka = urgency_sort_key(a)
    kb = urgency_sort_key(b)
    if ka < kb:
        return -1
    if ka > kb:
        return 1
    return 0


def sort_by_urgency(records: Iterable[TrainingRecord]) -> List[TrainingRecord]:
    # sorted() is stable: records equal under the whole key keep input order.
    return sorted(records, key=urgency_sort_key)


def list_sort_key(record: TrainingRecord) -> Tuple[str, str, str]:
    return (
        base_key(record.crew_name),
        base_key(record.training_name),
        base_key(record.track_name),
    )


def sort_for_list(records: Iterable[TrainingRecord]) -> List[TrainingRecord]:
    """
    Plain list view order: crew, then training, then track (case-insensitive).
    """
    return sorted(records, key=list_sort_key)
