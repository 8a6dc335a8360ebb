# backend/crewtrack/apps/compliance/filters.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from .enums import ActiveFilter, FocusFilter, StatusLabel
from .schemas import TrainingRecord
from .status import classify

_FOCUS_LABELS = {
    FocusFilter.OVERDUE: {StatusLabel.OVERDUE},
    FocusFilter.DUE: {StatusLabel.DUE_SOON},
    FocusFilter.NOT_COMPLETED: {StatusLabel.NOT_COMPLETED},
    FocusFilter.COMPLETE: {StatusLabel.COMPLETE, StatusLabel.NEVER_EXPIRES},
}


@dataclass(frozen=True)
class RecordFilters:
    """
    Narrowing applied to the fetched snapshot before sorting or grouping.

    `apply_base` covers the id / active / search filters and is what the
    summary counts are computed from; `apply` additionally keeps only the
    focused status, so picking a focus never changes the summary.
    """

    crew_id: Optional[int] = None
    track_id: Optional[int] = None
    training_id: Optional[int] = None
    query: str = ""
    active: ActiveFilter = ActiveFilter.ACTIVE
    focus: FocusFilter = FocusFilter.ALL

    def _matches_base(self, record: TrainingRecord, needle: str) -> bool:
        if self.crew_id is not None and record.crew_id != self.crew_id:
            return False
        if self.track_id is not None and record.track_id != self.track_id:
            return False
        if self.training_id is not None and record.training_id != self.training_id:
            return False

        if self.active == ActiveFilter.ACTIVE and record.active is False:
            return False
        if self.active == ActiveFilter.INACTIVE and record.active is not False:
            return False

        if needle:
            hay = " ".join(
                [record.crew_name or "", record.track_name or "", record.training_name or ""]
            ).lower()
            if needle not in hay:
                return False
        return True

    def apply_base(self, records: Iterable[TrainingRecord]) -> List[TrainingRecord]:
        needle = (self.query or "").strip().lower()
        return [r for r in records if self._matches_base(r, needle)]

    def apply(self, records: Iterable[TrainingRecord]) -> List[TrainingRecord]:
        rows = self.apply_base(records)
        if self.focus == FocusFilter.ALL:
            return rows
        wanted = _FOCUS_LABELS[self.focus]
        return [r for r in rows if classify(r) in wanted]
