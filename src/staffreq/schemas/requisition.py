from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import (
    ApprovalStatus,
    Category,
    Modality,
    RequisitionStatus,
    Role,
    Shift,
    StepStatus,
)
from .screening import ScreeningQuestion

MIN_SEATS = 1
MAX_SEATS = 20


class ApprovalStep(BaseModel):
    """One role-gated level of a requisition's approval chain."""

    level: int = Field(ge=1)
    role: Role
    status: StepStatus = StepStatus.PENDING
    assigned_approver_id: str | None = None
    assigned_approver_name: str | None = None
    delegated_from: str | None = None
    acted_by: str | None = None
    acted_by_name: str | None = None
    acted_at: datetime | None = None
    rejection_reason: str | None = None

    model_config = ConfigDict(extra="forbid")


class Requisition(BaseModel):
    """One open staffing need at one store for one position."""

    id: str
    number: str | None = None
    brand_id: str
    store_id: str
    position: str = Field(min_length=1)
    shift: Shift | None = None
    modality: Modality
    seat_count: int = Field(ge=MIN_SEATS, le=MAX_SEATS)
    category: Category = Category.OPERATIONAL

    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    current_approval_level: int = Field(default=1, ge=1)
    approval_chain: list[ApprovalStep] = Field(default_factory=list)
    status: RequisitionStatus | None = None
    filled_slots: int = Field(default=0, ge=0)

    screening_questions: list[ScreeningQuestion] = Field(default_factory=list)
    created_by: str | None = None
    created_by_role: Role | None = None
    created_at: datetime | None = None
    filled_at: datetime | None = None
    closed_at: datetime | None = None
    cancelled_at: datetime | None = None
    closure_reason: str | None = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def _default_managerial_shift(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("shift") is None:
            category = data.get("category")
            if category in (Category.MANAGERIAL, Category.MANAGERIAL.value):
                data = {**data, "shift": Shift.ADMINISTRATIVE}
        return data

    @model_validator(mode="after")
    def _check_invariants(self) -> "Requisition":
        if self.shift is None:
            raise ValueError("shift is required for operational requisitions")
        if self.category is Category.MANAGERIAL:
            if self.modality is not Modality.FULL_TIME:
                raise ValueError("managerial requisitions must be Full-Time")
            if self.shift is not Shift.ADMINISTRATIVE:
                raise ValueError("managerial requisitions must use the Administrative shift")
        if self.filled_slots > self.seat_count:
            raise ValueError("filled_slots cannot exceed seat_count")
        if (
            self.status in (RequisitionStatus.FILLED, RequisitionStatus.CLOSED)
            and self.approval_status is not ApprovalStatus.APPROVED
        ):
            raise ValueError(f"status {self.status.value!r} requires an approved requisition")
        return self

    @property
    def current_step(self) -> ApprovalStep | None:
        for step in self.approval_chain:
            if step.level == self.current_approval_level:
                return step
        return None

    @property
    def final_level(self) -> int:
        return max((step.level for step in self.approval_chain), default=0)

    @property
    def unassigned_levels(self) -> list[int]:
        """Pending levels with nobody to act on them."""
        return [
            step.level
            for step in self.approval_chain
            if step.status is StepStatus.PENDING and step.assigned_approver_id is None
        ]

    @property
    def open_slots(self) -> int:
        return self.seat_count - self.filled_slots

    @property
    def is_recruiting(self) -> bool:
        return self.status is RequisitionStatus.RECRUITING
