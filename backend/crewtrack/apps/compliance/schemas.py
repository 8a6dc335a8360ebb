# backend/crewtrack/apps/compliance/schemas.py

from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import StatusLabel, StatusTone, ViewMode

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# BOUNDARY COERCION
# ---------------------------------------------------------------------------
#
# Rows from the hosted backend are loosely typed. Everything below converts
# them into the strict shapes used by the classifier / comparator / builder.
# Malformed values never raise here: they degrade to None and are logged.
# ---------------------------------------------------------------------------


def _parse_date(value: Any, *, field: str, row_id: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
    logger.warning(
        "Unparseable date on training row",
        extra={"field": field, "row_id": row_id, "value": repr(value)},
    )
    return None


def _finite_int(value: Any, *, field: str, row_id: Any) -> Optional[int]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = math.nan
    if not math.isfinite(number):
        logger.warning(
            "Non-finite number on training row",
            extra={"field": field, "row_id": row_id, "value": repr(value)},
        )
        return None
    return int(number)


def _optional_id(value: Any) -> Optional[int]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


# ---------------------------------------------------------------------------
# TRAINING RECORDS (ONE ROW PER CREW / TRACK / TRAINING)
# ---------------------------------------------------------------------------


class TrainingRecord(BaseModel):
    """
    One (crew, track, training) compliance fact.

    Immutable: a snapshot is replaced wholesale on every fetch.
    The record's training group is not stored here; it is resolved through
    the Training lookup (see views.TrainingGroupResolver).
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    location_id: Optional[int] = None
    crew_id: Optional[int] = None
    track_id: Optional[int] = None
    training_id: Optional[int] = None
    active: bool = True

    last_completed: Optional[date] = None
    status: Optional[str] = Field(
        None,
        description="Upstream status flag, e.g. 'Training Overdue' / 'Training Due'.",
    )
    due_date: Optional[date] = None
    days_until_due: Optional[int] = None
    days_overdue: Optional[int] = None

    crew_name: Optional[str] = None
    home_department: Optional[str] = None
    track_name: Optional[str] = None
    training_name: Optional[str] = None
    last_signed_off_by: Optional[str] = None
    last_signed_off_on: Optional[date] = None


class TrainingRecordRow(BaseModel):
    """
    Raw row of the `v_training_dashboard_with_signer` view.
    """

    model_config = ConfigDict(extra="ignore")

    id: Any = None
    location_id: Any = None
    crew_id: Any = None
    track_id: Any = None
    training_id: Any = None
    is_record_active: Any = None
    last_completed: Any = None
    training_status: Any = None
    due_date: Any = None
    days_until_due: Any = None
    days_overdue: Any = None
    crew_name: Any = None
    home_department: Any = None
    crew_status: Any = None
    track_name: Any = None
    training_name: Any = None
    last_signed_off_by: Any = None
    last_signed_off_on: Any = None

    def to_record(self) -> TrainingRecord:
        row_id = self.id
        return TrainingRecord(
            id=_optional_id(self.id),
            location_id=_optional_id(self.location_id),
            crew_id=_optional_id(self.crew_id),
            track_id=_optional_id(self.track_id),
            training_id=_optional_id(self.training_id),
            active=bool(self.is_record_active),
            last_completed=_parse_date(self.last_completed, field="last_completed", row_id=row_id),
            status=_optional_text(self.training_status),
            due_date=_parse_date(self.due_date, field="due_date", row_id=row_id),
            days_until_due=_finite_int(self.days_until_due, field="days_until_due", row_id=row_id),
            days_overdue=_finite_int(self.days_overdue, field="days_overdue", row_id=row_id),
            crew_name=_optional_text(self.crew_name),
            home_department=_optional_text(self.home_department),
            track_name=_optional_text(self.track_name),
            training_name=_optional_text(self.training_name),
            last_signed_off_by=_optional_text(self.last_signed_off_by),
            last_signed_off_on=_parse_date(
                self.last_signed_off_on, field="last_signed_off_on", row_id=row_id
            ),
        )


# ---------------------------------------------------------------------------
# LOOKUPS (TRAININGS / GROUPS / TRACKS / REQUIREMENTS)
# ---------------------------------------------------------------------------


class Training(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    local_id: Optional[int] = None
    name: str = ""
    active: bool = True
    expires_after_weeks: Optional[int] = None
    training_group_id: Optional[int] = None


class TrainingRow(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    local_id: Any = None
    training_name: Any = None
    is_training_active: Any = None
    expires_after_weeks: Any = None
    training_group_id: Any = None

    def to_training(self) -> Training:
        return Training(
            id=self.id,
            local_id=_optional_id(self.local_id),
            name=_optional_text(self.training_name) or str(self.id),
            active=bool(self.is_training_active),
            expires_after_weeks=_finite_int(
                self.expires_after_weeks, field="expires_after_weeks", row_id=self.id
            ),
            training_group_id=_optional_id(self.training_group_id),
        )


class TrainingGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    local_id: Optional[int] = None
    name: str = ""
    active: bool = True
    sort_order: Optional[int] = None
    color: str = ""
    description: str = ""


class TrainingGroupRow(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    local_id: Any = None
    name: Any = None
    active: Any = None
    sort_order: Any = None
    color: Any = None
    description: Any = None

    def to_group(self) -> TrainingGroup:
        return TrainingGroup(
            id=self.id,
            local_id=_optional_id(self.local_id),
            name=_optional_text(self.name) or str(self.id),
            active=self.active is not False,
            sort_order=_optional_id(self.sort_order),
            color=(_optional_text(self.color) or "").strip(),
            description=(_optional_text(self.description) or "").strip(),
        )


class Track(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    local_id: Optional[int] = None
    name: str = ""
    active: bool = True


class TrackRow(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    local_id: Any = None
    track_name: Any = None
    is_track_active: Any = None

    def to_track(self) -> Track:
        return Track(
            id=self.id,
            local_id=_optional_id(self.local_id),
            name=_optional_text(self.track_name) or str(self.id),
            active=bool(self.is_track_active),
        )


class Requirement(BaseModel):
    """
    A (Track, Training) pairing: the training is required for the track.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    track_id: int
    training_id: int
    active: Optional[bool] = None


class RequirementRow(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    track_id: int
    training_id: int
    is_requirement_active: Optional[bool] = None

    def to_requirement(self) -> Requirement:
        return Requirement(
            id=self.id,
            track_id=self.track_id,
            training_id=self.training_id,
            active=self.is_requirement_active,
        )


# ---------------------------------------------------------------------------
# SNAPSHOT (WHAT THE FETCH COLLABORATOR HANDS OVER)
# ---------------------------------------------------------------------------


class ComplianceSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    location_id: Optional[int] = None
    records: List[TrainingRecord] = Field(default_factory=list)
    trainings: List[Training] = Field(default_factory=list)
    training_groups: List[TrainingGroup] = Field(default_factory=list)
    tracks: List[Track] = Field(default_factory=list)
    requirements: List[Requirement] = Field(default_factory=list)


class SnapshotLoad(BaseModel):
    """
    Raw payload accepted by PUT /compliance/snapshot.
    """

    location_id: Optional[int] = None
    records: List[TrainingRecordRow] = Field(default_factory=list)
    trainings: List[TrainingRow] = Field(default_factory=list)
    training_groups: List[TrainingGroupRow] = Field(default_factory=list)
    tracks: List[TrackRow] = Field(default_factory=list)
    requirements: List[RequirementRow] = Field(default_factory=list)

    def to_snapshot(self) -> ComplianceSnapshot:
        return ComplianceSnapshot(
            location_id=self.location_id,
            records=[row.to_record() for row in self.records],
            trainings=[row.to_training() for row in self.trainings],
            training_groups=[row.to_group() for row in self.training_groups],
            tracks=[row.to_track() for row in self.tracks],
            requirements=[row.to_requirement() for row in self.requirements],
        )


class SnapshotLoadResult(BaseModel):
    location_id: Optional[int] = None
    records: int
    trainings: int
    training_groups: int
    tracks: int
    requirements: int


# ---------------------------------------------------------------------------
# ROLLUPS / GROUP TREES
# ---------------------------------------------------------------------------


class StatusCounts(BaseModel):
    overdue: int = 0
    due: int = 0
    not_completed: int = 0
    complete: int = 0
    inactive: int = 0

    def __add__(self, other: "StatusCounts") -> "StatusCounts":
        return StatusCounts(
            overdue=self.overdue + other.overdue,
            due=self.due + other.due,
            not_completed=self.not_completed + other.not_completed,
            complete=self.complete + other.complete,
            inactive=self.inactive + other.inactive,
        )

    @property
    def total(self) -> int:
        return self.overdue + self.due + self.not_completed + self.complete + self.inactive


class GroupNode(BaseModel):
    """
    One node of a grouping tree.

    Exactly one of `children` (branch) / `items` (leaf) is populated.
    `key` is the stable path of raw level keys joined by KEY_SEP.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    title: str
    counts: StatusCounts
    children: Optional[List["GroupNode"]] = None
    items: Optional[List[TrainingRecord]] = None

    @property
    def is_leaf(self) -> bool:
        return self.items is not None


GroupNode.model_rebuild()


# ---------------------------------------------------------------------------
# READ MODELS FOR THE RENDERING LAYER
# ---------------------------------------------------------------------------


class RecordRead(TrainingRecord):
    """
    Training record plus its derived classification.
    """

    status_label: StatusLabel
    tone: StatusTone
    urgency: str


class GroupedViewRead(BaseModel):
    view: ViewMode
    counts: StatusCounts
    nodes: List[GroupNode]
    open_keys: List[str]
    subtitles: Dict[str, str] = Field(
        default_factory=dict,
        description="Top-level node key -> subtitle (crew view: home department).",
    )


class ExpansionToggle(BaseModel):
    key: str = Field(..., description="Path key of the node to open/close.")


class ExpansionRead(BaseModel):
    view: ViewMode
    open_keys: List[str]


class RequirementItem(BaseModel):
    id: int
    track_id: int
    training_id: int
    active: Optional[bool] = None
    name: str = Field(..., description="Name of the other side of the pairing.")


class RequirementGroup(BaseModel):
    id: int
    name: str
    items: List[RequirementItem]
