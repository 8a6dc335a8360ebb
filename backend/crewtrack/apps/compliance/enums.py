# backend/crewtrack/apps/compliance/enums.py
from __future__ import annotations

import enum


# Raw values of the upstream `training_status` column.
UPSTREAM_OVERDUE = "Training Overdue"
UPSTREAM_DUE = "Training Due"


class StatusLabel(str, enum.Enum):
    NOT_COMPLETED = "Not completed"
    NEVER_EXPIRES = "Never expires"
    OVERDUE = "Overdue"
    DUE_SOON = "Due soon"
    COMPLETE = "Complete"


class StatusTone(str, enum.Enum):
    DANGER = "danger"
    WARN = "warn"
    MUTED = "muted"
    MUTED2 = "muted2"
    GOOD = "good"


class ActiveFilter(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ALL = "ALL"


class FocusFilter(str, enum.Enum):
    ALL = "ALL"
    OVERDUE = "OVERDUE"
    DUE = "DUE"
    NOT_COMPLETED = "NOT_COMPLETED"
    COMPLETE = "COMPLETE"


class ViewMode(str, enum.Enum):
    CREW = "crew"
    TRAINING = "training"
    TRAINING_GROUP = "trainingGroup"
    DEPARTMENT = "department"
    LIST = "list"


class RequirementGrouping(str, enum.Enum):
    TRAINING = "training"
    TRACK = "track"
