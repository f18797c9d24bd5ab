"""Closed vocabularies for roles, shifts and workflow states."""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    STORE_MANAGER = "store_manager"
    SUPERVISOR = "supervisor"
    BRAND_HEAD = "jefe_marca"
    RECRUITER = "recruiter"
    CLIENT_ADMIN = "client_admin"
    SUPER_ADMIN = "super_admin"


class Shift(str, Enum):
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    NIGHT = "Night"
    ROTATING = "Rotating"
    ADMINISTRATIVE = "Administrative"


class Modality(str, Enum):
    PART_TIME_19H = "Part-Time-19h"
    PART_TIME_23H = "Part-Time-23h"
    FULL_TIME = "Full-Time"


class Category(str, Enum):
    OPERATIONAL = "operational"
    MANAGERIAL = "managerial"


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class StepStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RequisitionStatus(str, Enum):
    RECRUITING = "recruiting"
    FILLED = "filled"
    CLOSED = "closed"
    CANCELLED = "cancelled"


class Decision(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class Flow(str, Enum):
    """Post-application routing outcome."""

    A = "A"  # automatic interview scheduling
    B = "B"  # manual recruiter review


class DistanceCategory(str, Enum):
    PERFECT = "perfect"
    ACCEPTABLE = "acceptable"
    FAR = "far"


class Relevance(str, Enum):
    MATCH = "match"
    NEARBY = "nearby"
    OTHER = "other"


class ReviewReason(str, Enum):
    GEO_MISMATCH = "geo_mismatch"
    SCREENING_FAILED = "screening_failed"


TERMINAL_STATUSES = frozenset({RequisitionStatus.CLOSED, RequisitionStatus.CANCELLED})
