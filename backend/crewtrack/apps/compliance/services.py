# backend/crewtrack/apps/compliance/services.py

from __future__ import annotations

import logging
import os
import threading
from typing import List, Optional, Tuple

from ...utils.cache import ResponseCache, create_response_cache, invalidate_location_scope
from .enums import RequirementGrouping, ViewMode
from .expansion import ExpansionStore, UnknownViewError, ViewName, coerce_view
from .filters import RecordFilters
from .ordering import sort_by_urgency, sort_for_list
from .requirements import group_requirements
from .schemas import (
    ComplianceSnapshot,
    GroupedViewRead,
    RecordRead,
    RequirementGroup,
    StatusCounts,
    TrainingRecord,
)
from .status import classify, compute_counts, describe_urgency, status_tone
from .views import TrainingGroupResolver, build_view, top_subtitles

logger = logging.getLogger(__name__)


def _default_view_from_env() -> ViewMode:
    raw = os.getenv("CREWTRACK_DEFAULT_VIEW", "").strip()
    if not raw:
        return ViewMode.LIST
    try:
        return coerce_view(raw)
    except UnknownViewError:
        logger.warning(
            "Unknown CREWTRACK_DEFAULT_VIEW; using the list view",
            extra={"value": raw},
        )
        return ViewMode.LIST


DEFAULT_VIEW = _default_view_from_env()


def to_record_read(record: TrainingRecord) -> RecordRead:
    return RecordRead(
        **record.model_dump(),
        status_label=classify(record),
        tone=status_tone(record),
        urgency=describe_urgency(record),
    )


class ComplianceBoard:
    """
    Holds the last-good snapshot plus per-view expansion state, and turns
    them into the flat list / grouped trees the rendering layer shows.

    Trees and sort results are never memoised: every read recomputes from
    the snapshot, so a reload is visible immediately. `cache` is the
    response cache the fetch side reads through.
    """

    def __init__(
        self,
        default_view: ViewName = DEFAULT_VIEW,
        cache: Optional[ResponseCache] = None,
    ) -> None:
        self.snapshot = ComplianceSnapshot()
        self.expansion = ExpansionStore(active=default_view)
        self.cache = cache if cache is not None else create_response_cache()
        self._resolver = TrainingGroupResolver()
        # Guards the (snapshot, resolver) pair; they are swapped together.
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # SNAPSHOT
    # ------------------------------------------------------------------

    def _current(self) -> Tuple[ComplianceSnapshot, TrainingGroupResolver]:
        with self._lock:
            return self.snapshot, self._resolver

    def load_snapshot(self, snapshot: ComplianceSnapshot) -> None:
        resolver = TrainingGroupResolver(snapshot.trainings, snapshot.training_groups)
        with self._lock:
            previous = self.snapshot
            self.snapshot = snapshot
            self._resolver = resolver

        if snapshot.location_id != previous.location_id:
            removed = invalidate_location_scope(self.cache)
            logger.info(
                "Location changed; dropped location-scoped responses",
                extra={
                    "from_location": previous.location_id,
                    "to_location": snapshot.location_id,
                    "removed": removed,
                },
            )

        logger.info(
            "Compliance snapshot loaded",
            extra={"location_id": snapshot.location_id, "records": len(snapshot.records)},
        )

    # ------------------------------------------------------------------
    # FLAT READS
    # ------------------------------------------------------------------

    def urgent_records(self, filters: RecordFilters = RecordFilters()) -> List[RecordRead]:
        rows = sort_by_urgency(filters.apply(self._current()[0].records))
        return [to_record_read(r) for r in rows]

    def list_records(self, filters: RecordFilters = RecordFilters()) -> List[RecordRead]:
        rows = sort_for_list(filters.apply(self._current()[0].records))
        return [to_record_read(r) for r in rows]

    def summary(self, filters: RecordFilters = RecordFilters()) -> StatusCounts:
        return compute_counts(filters.apply_base(self._current()[0].records))

    # ------------------------------------------------------------------
    # GROUPED READS + EXPANSION
    # ------------------------------------------------------------------

    def set_view(self, view: ViewName) -> ViewMode:
        return self.expansion.switch(view)

    def grouped(
        self,
        view: Optional[ViewName] = None,
        filters: RecordFilters = RecordFilters(),
    ) -> GroupedViewRead:
        mode = self.expansion.active if view is None else coerce_view(view)
        snapshot, resolver = self._current()
        rows = filters.apply(snapshot.records)
        nodes = build_view(mode, rows, resolver)
        return GroupedViewRead(
            view=mode,
            counts=compute_counts(filters.apply_base(snapshot.records)),
            nodes=nodes,
            open_keys=self.expansion.open_keys(mode),
            subtitles=top_subtitles(mode, nodes, rows, resolver),
        )

    def toggle(self, key: str, view: Optional[ViewName] = None) -> bool:
        return self.expansion.toggle(key, view)

    def expand_top(
        self,
        view: Optional[ViewName] = None,
        filters: RecordFilters = RecordFilters(),
    ) -> List[str]:
        """
        Open every top-level node of the view as currently filtered.
        The flat list view has no nodes and is left untouched.
        """
        state = self.expansion.state(view)
        mode = self.expansion.active if view is None else coerce_view(view)
        if mode == ViewMode.LIST:
            return state.open_keys
        snapshot, resolver = self._current()
        nodes = build_view(mode, filters.apply(snapshot.records), resolver)
        state.expand_all(n.key for n in nodes)
        return state.open_keys

    def collapse_top(self, view: Optional[ViewName] = None) -> List[str]:
        state = self.expansion.state(view)
        state.collapse_all()
        return state.open_keys

    def reset_all(self) -> None:
        self.expansion.reset()
        self.expansion.switch(ViewMode.LIST)

    # ------------------------------------------------------------------
    # REQUIREMENTS
    # ------------------------------------------------------------------

    def requirements(
        self, by: RequirementGrouping = RequirementGrouping.TRAINING
    ) -> List[RequirementGroup]:
        snapshot, _ = self._current()
        return group_requirements(
            snapshot.requirements,
            snapshot.trainings,
            snapshot.tracks,
            by=by,
        )
