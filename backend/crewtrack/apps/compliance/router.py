from __future__ import annotations

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from . import schemas as compliance_schemas
from .enums import ActiveFilter, FocusFilter, RequirementGrouping, ViewMode
from .expansion import UnknownViewError, coerce_view
from .filters import RecordFilters
from .services import ComplianceBoard

router = APIRouter(prefix="/compliance", tags=["compliance"])

_board = ComplianceBoard()


# ---------------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------------


def get_board() -> ComplianceBoard:
    """
    Process-wide board. Tests swap it out through dependency_overrides.
    """
    return _board


def _record_filters(
    crew_id: Optional[int] = None,
    track_id: Optional[int] = None,
    training_id: Optional[int] = None,
    q: str = "",
    active: ActiveFilter = ActiveFilter.ACTIVE,
    focus: FocusFilter = FocusFilter.ALL,
) -> RecordFilters:
    return RecordFilters(
        crew_id=crew_id,
        track_id=track_id,
        training_id=training_id,
        query=q,
        active=active,
        focus=focus,
    )


def _view_or_404(view: str) -> ViewMode:
    try:
        return coerce_view(view)
    except UnknownViewError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        )


# ---------------------------------------------------------------------------
# SNAPSHOT
# ---------------------------------------------------------------------------


@router.put(
    "/snapshot",
    response_model=compliance_schemas.SnapshotLoadResult,
    summary="Replace the current compliance snapshot with freshly fetched rows",
)
def load_snapshot(
    payload: compliance_schemas.SnapshotLoad,
    board: ComplianceBoard = Depends(get_board),
):
    """
    Rows arrive exactly as the hosted backend returns them and are mapped to
    strict records here. Malformed optional fields degrade to empty values.
    """
    snapshot = payload.to_snapshot()
    board.load_snapshot(snapshot)
    return compliance_schemas.SnapshotLoadResult(
        location_id=snapshot.location_id,
        records=len(snapshot.records),
        trainings=len(snapshot.trainings),
        training_groups=len(snapshot.training_groups),
        tracks=len(snapshot.tracks),
        requirements=len(snapshot.requirements),
    )


# ---------------------------------------------------------------------------
# FLAT RECORDS / SUMMARY
# ---------------------------------------------------------------------------


@router.get(
    "/records",
    response_model=List[compliance_schemas.RecordRead],
    summary="Training records, most urgent first (or list order)",
)
def list_records(
    order: Literal["urgency", "list"] = "urgency",
    filters: RecordFilters = Depends(_record_filters),
    board: ComplianceBoard = Depends(get_board),
):
    """
    - order=urgency: Overdue (most days first), Due soon (soonest first), rest
    - order=list: crew, training, track
    """
    if order == "list":
        return board.list_records(filters)
    return board.urgent_records(filters)


@router.get(
    "/summary",
    response_model=compliance_schemas.StatusCounts,
    summary="Overdue / due / not completed / complete / inactive counts",
)
def get_summary(
    filters: RecordFilters = Depends(_record_filters),
    board: ComplianceBoard = Depends(get_board),
):
    # The status focus never narrows the summary.
    return board.summary(filters)


# ---------------------------------------------------------------------------
# GROUPED VIEWS + EXPANSION STATE
# ---------------------------------------------------------------------------


@router.get(
    "/views/{view}",
    response_model=compliance_schemas.GroupedViewRead,
    summary="Grouping tree for a view (crew / training / trainingGroup / department / list)",
)
def get_view(
    view: str,
    filters: RecordFilters = Depends(_record_filters),
    board: ComplianceBoard = Depends(get_board),
):
    mode = _view_or_404(view)
    board.set_view(mode)
    return board.grouped(mode, filters)


@router.post(
    "/views/{view}/toggle",
    response_model=compliance_schemas.ExpansionRead,
    summary="Open or close one node (closing also closes its descendants)",
)
def toggle_node(
    view: str,
    payload: compliance_schemas.ExpansionToggle,
    board: ComplianceBoard = Depends(get_board),
):
    mode = _view_or_404(view)
    board.toggle(payload.key, mode)
    return compliance_schemas.ExpansionRead(view=mode, open_keys=board.expansion.open_keys(mode))


@router.post(
    "/views/{view}/expand",
    response_model=compliance_schemas.ExpansionRead,
    summary="Open every top-level node of the view",
)
def expand_view(
    view: str,
    filters: RecordFilters = Depends(_record_filters),
    board: ComplianceBoard = Depends(get_board),
):
    mode = _view_or_404(view)
    open_keys = board.expand_top(mode, filters)
    return compliance_schemas.ExpansionRead(view=mode, open_keys=open_keys)


@router.post(
    "/views/{view}/collapse",
    response_model=compliance_schemas.ExpansionRead,
    summary="Close every node of the view",
)
def collapse_view(
    view: str,
    board: ComplianceBoard = Depends(get_board),
):
    mode = _view_or_404(view)
    open_keys = board.collapse_top(mode)
    return compliance_schemas.ExpansionRead(view=mode, open_keys=open_keys)


# ---------------------------------------------------------------------------
# REQUIREMENTS
# ---------------------------------------------------------------------------


@router.get(
    "/requirements",
    response_model=List[compliance_schemas.RequirementGroup],
    summary="Track / training requirements grouped by training or by track",
)
def list_requirements(
    by: RequirementGrouping = RequirementGrouping.TRAINING,
    board: ComplianceBoard = Depends(get_board),
):
    return board.requirements(by)
