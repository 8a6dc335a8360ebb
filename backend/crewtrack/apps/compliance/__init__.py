from .enums import StatusLabel, ViewMode
from .expansion import ExpansionState, ExpansionStore, UnknownViewError
from .filters import RecordFilters
from .hierarchy import KEY_SEP, GroupLevel, build_hierarchy, make_key
from .ordering import compare_records, sort_by_urgency
from .services import ComplianceBoard
from .status import classify, compute_counts, describe_urgency

__all__ = [
    "KEY_SEP",
    "ComplianceBoard",
    "ExpansionState",
    "ExpansionStore",
    "GroupLevel",
    "RecordFilters",
    "StatusLabel",
    "UnknownViewError",
    "ViewMode",
    "build_hierarchy",
    "classify",
    "compare_records",
    "compute_counts",
    "describe_urgency",
    "make_key",
    "sort_by_urgency",
]
