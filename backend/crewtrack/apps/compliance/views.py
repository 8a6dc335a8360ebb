# backend/crewtrack/apps/compliance/views.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from ...utils.strings import pretty_title
from .enums import ViewMode
from .hierarchy import GroupLevel, build_hierarchy
from .schemas import GroupNode, Training, TrainingGroup, TrainingRecord

UNKNOWN_CREW = "Unknown"
UNKNOWN_TRACK = "Unknown Track"
UNKNOWN_TRAINING = "Unknown Training"
NO_DEPARTMENT = "No Department"
UNGROUPED = "Ungrouped"


# ---------------------------------------------------------------------------
# PER-DIMENSION KEY / TITLE FUNCTIONS
# ---------------------------------------------------------------------------
#
# Keys prefer the id, then the name, then the level's fallback. Titles prefer
# the name, then the id as text, then the fallback.
# ---------------------------------------------------------------------------


def _key(id_value: Optional[int], name: Optional[str], fallback: str) -> str:
    if id_value is not None:
        return str(id_value)
    return name or fallback


def _title(id_value: Optional[int], name: Optional[str], fallback: str) -> str:
    if name:
        return name
    if id_value is not None:
        return str(id_value)
    return fallback


def crew_key(r: TrainingRecord) -> str:
    return _key(r.crew_id, r.crew_name, UNKNOWN_CREW)


def crew_title(r: TrainingRecord) -> str:
    return _title(r.crew_id, r.crew_name, UNKNOWN_CREW)


def track_key(r: TrainingRecord) -> str:
    return _key(r.track_id, r.track_name, UNKNOWN_TRACK)


def track_title(r: TrainingRecord) -> str:
    return _title(r.track_id, r.track_name, UNKNOWN_TRACK)


def training_key(r: TrainingRecord) -> str:
    return _key(r.training_id, r.training_name, UNKNOWN_TRAINING)


def training_title(r: TrainingRecord) -> str:
    return _title(r.training_id, r.training_name, UNKNOWN_TRAINING)


def department_title(r: TrainingRecord) -> str:
    return pretty_title(r.home_department) or NO_DEPARTMENT


CREW_LEVEL = GroupLevel(key_of=crew_key, title_of=crew_title, fallback_key=UNKNOWN_CREW)
TRACK_LEVEL = GroupLevel(key_of=track_key, title_of=track_title, fallback_key=UNKNOWN_TRACK)
TRAINING_LEVEL = GroupLevel(
    key_of=training_key, title_of=training_title, fallback_key=UNKNOWN_TRAINING
)
DEPARTMENT_LEVEL = GroupLevel(
    key_of=department_title, title_of=department_title, fallback_key=NO_DEPARTMENT
)


class TrainingGroupResolver:
    """
    Resolves a record's training group through the Training and
    TrainingGroup lookups.

    A record whose training is unknown, has no group, or points at a group
    missing from the lookup lands in the single "Ungrouped" bucket.
    """

    def __init__(
        self,
        trainings: Iterable[Training] = (),
        groups: Iterable[TrainingGroup] = (),
    ) -> None:
        self._group_id_by_training: Dict[int, Optional[int]] = {
            t.id: t.training_group_id for t in trainings
        }
        self._groups: Dict[int, TrainingGroup] = {g.id: g for g in groups}

    def group_of(self, r: TrainingRecord) -> Optional[TrainingGroup]:
        if r.training_id is None:
            return None
        group_id = self._group_id_by_training.get(r.training_id)
        if group_id is None:
            return None
        return self._groups.get(group_id)

    def key_of(self, r: TrainingRecord) -> str:
        group = self.group_of(r)
        return UNGROUPED if group is None else str(group.id)

    def title_of(self, r: TrainingRecord) -> str:
        group = self.group_of(r)
        if group is None:
            return UNGROUPED
        return group.name or str(group.id)

    def level(self) -> GroupLevel:
        return GroupLevel(key_of=self.key_of, title_of=self.title_of, fallback_key=UNGROUPED)


# ---------------------------------------------------------------------------
# VIEW DEFINITIONS
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ViewDefinition:
    levels: Sequence[GroupLevel]
    leaf_tie_break_field: str
    top_subtitle: str = ""


def view_definition(view: ViewMode, resolver: TrainingGroupResolver) -> Optional[ViewDefinition]:
    """
    Level stack for a grouping view; None for the flat list view.
    """
    if view == ViewMode.CREW:
        return ViewDefinition(levels=[CREW_LEVEL, TRACK_LEVEL], leaf_tie_break_field="training_name")
    if view == ViewMode.TRAINING:
        return ViewDefinition(
            levels=[TRAINING_LEVEL, TRACK_LEVEL],
            leaf_tie_break_field="crew_name",
            top_subtitle="Tracks",
        )
    if view == ViewMode.TRAINING_GROUP:
        return ViewDefinition(
            levels=[resolver.level(), TRAINING_LEVEL],
            leaf_tie_break_field="crew_name",
            top_subtitle="Trainings",
        )
    if view == ViewMode.DEPARTMENT:
        return ViewDefinition(
            levels=[DEPARTMENT_LEVEL, CREW_LEVEL, TRACK_LEVEL],
            leaf_tie_break_field="training_name",
            top_subtitle="Department",
        )
    return None


def build_view(
    view: ViewMode,
    records: Sequence[TrainingRecord],
    resolver: TrainingGroupResolver,
) -> List[GroupNode]:
    definition = view_definition(view, resolver)
    if definition is None:
        return []
    return build_hierarchy(records, definition.levels, definition.leaf_tie_break_field)


def crew_subtitles(records: Iterable[TrainingRecord]) -> Dict[str, str]:
    """
    Crew node key -> home department (first one seen), pretty-titled.
    """
    out: Dict[str, str] = {}
    for r in records:
        key = crew_key(r)
        if key not in out:
            out[key] = pretty_title(r.home_department) or "—"
    return out


def top_subtitles(
    view: ViewMode,
    nodes: Sequence[GroupNode],
    records: Iterable[TrainingRecord],
    resolver: TrainingGroupResolver,
) -> Dict[str, str]:
    if view == ViewMode.CREW:
        by_crew = crew_subtitles(records)
        return {n.key: by_crew.get(n.key, "—") for n in nodes}

    definition = view_definition(view, resolver)
    if definition is None:
        return {}
    return {n.key: definition.top_subtitle for n in nodes}
