"""Pydantic schema definitions for the documents the core reads and writes."""

from __future__ import annotations

from .application import Application
from .approver import Approver
from .enums import (
    ApprovalStatus,
    Category,
    Decision,
    DistanceCategory,
    Flow,
    Modality,
    Relevance,
    RequisitionStatus,
    ReviewReason,
    Role,
    Shift,
    StepStatus,
)
from .location import Candidate, Coordinates, Store
from .requisition import ApprovalStep, Requisition
from .screening import ScreeningQuestion, default_questions

__all__ = [
    "Application",
    "ApprovalStatus",
    "ApprovalStep",
    "Approver",
    "Candidate",
    "Category",
    "Coordinates",
    "Decision",
    "DistanceCategory",
    "Flow",
    "Modality",
    "Relevance",
    "Requisition",
    "RequisitionStatus",
    "ReviewReason",
    "Role",
    "ScreeningQuestion",
    "Shift",
    "StepStatus",
    "Store",
    "default_questions",
]
