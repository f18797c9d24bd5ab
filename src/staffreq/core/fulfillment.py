"""Seat fill counts and the recruiting → filled → closed lifecycle."""

from __future__ import annotations

from typing import Any, Callable

import pendulum
import structlog

from ..errors import ConflictError, ValidationError
from ..repositories import RequisitionStore
from ..schemas import ApprovalStatus, Requisition, RequisitionStatus
from ..schemas.enums import TERMINAL_STATUSES


class SlotFulfillmentTracker:
    """Track hires against a requisition's requested seat count."""

    def __init__(
        self,
        *,
        requisitions: RequisitionStore,
        now_provider: Callable[[], Any] | None = None,
    ) -> None:
        self._requisitions = requisitions
        self._now_provider = now_provider or pendulum.now
        self._logger = structlog.get_logger(__name__)

    def confirm_hire(self, requisition: Requisition) -> Requisition:
        if requisition.approval_status is not ApprovalStatus.APPROVED:
            raise ConflictError(
                "requisition is not approved",
                requisition_id=requisition.id,
                approval_status=requisition.approval_status.value,
            )
        if requisition.open_slots < 1:
            raise ValidationError(
                "hire would exceed requested seat count",
                requisition_id=requisition.id,
                filled_slots=requisition.filled_slots,
                seat_count=requisition.seat_count,
            )
        if not requisition.is_recruiting:
            raise ConflictError(
                "requisition is not recruiting",
                requisition_id=requisition.id,
                status=_status_value(requisition),
            )

        filled_slots = requisition.filled_slots + 1
        update: dict[str, Any] = {"filled_slots": filled_slots}
        if filled_slots == requisition.seat_count:
            update.update(status=RequisitionStatus.FILLED, filled_at=self._now_provider())

        stored = self._write(requisition, update)
        self._logger.info(
            "fulfillment.hire_confirmed",
            requisition_id=requisition.id,
            filled_slots=stored.filled_slots,
            seat_count=stored.seat_count,
            status=_status_value(stored),
        )
        return stored

    def release_hire(self, requisition: Requisition) -> Requisition:
        """Give a seat back after a hire falls through; reopens a filled requisition."""
        if requisition.status not in (RequisitionStatus.RECRUITING, RequisitionStatus.FILLED):
            raise ConflictError(
                "requisition is not open for hiring",
                requisition_id=requisition.id,
                status=_status_value(requisition),
            )
        if requisition.filled_slots == 0:
            raise ValidationError("no confirmed hires to release", requisition_id=requisition.id)

        stored = self._write(
            requisition,
            {
                "filled_slots": requisition.filled_slots - 1,
                "status": RequisitionStatus.RECRUITING,
                "filled_at": None,
            },
        )
        self._logger.info(
            "fulfillment.hire_released",
            requisition_id=requisition.id,
            filled_slots=stored.filled_slots,
            reopened=requisition.status is RequisitionStatus.FILLED,
        )
        return stored

    def close(self, requisition: Requisition, reason: str | None = None) -> Requisition:
        if requisition.status is not RequisitionStatus.FILLED:
            raise ConflictError(
                "only filled requisitions can be closed",
                requisition_id=requisition.id,
                status=_status_value(requisition),
            )
        stored = self._write(
            requisition,
            {
                "status": RequisitionStatus.CLOSED,
                "closed_at": self._now_provider(),
                "closure_reason": reason
                or f"All {requisition.seat_count} seats have been filled",
            },
        )
        self._logger.info("fulfillment.closed", requisition_id=requisition.id)
        return stored

    def cancel(self, requisition: Requisition, reason: str) -> Requisition:
        """Withdraw a requisition that has not reached a terminal state."""
        if requisition.status in TERMINAL_STATUSES:
            raise ConflictError(
                "requisition is already terminal",
                requisition_id=requisition.id,
                status=_status_value(requisition),
            )
        if not reason or not reason.strip():
            raise ValidationError("a cancellation reason is required", requisition_id=requisition.id)

        update: dict[str, Any] = {
            "status": RequisitionStatus.CANCELLED,
            "cancelled_at": self._now_provider(),
            "closure_reason": reason.strip(),
        }
        if requisition.approval_status is ApprovalStatus.PENDING:
            update["approval_status"] = ApprovalStatus.REJECTED
        stored = self._write(requisition, update)
        self._logger.info(
            "fulfillment.cancelled",
            requisition_id=requisition.id,
            reason=stored.closure_reason,
        )
        return stored

    def _write(self, requisition: Requisition, update: dict[str, Any]) -> Requisition:
        return self._requisitions.replace(
            requisition.model_copy(update=update),
            expected={
                "filled_slots": requisition.filled_slots,
                "status": requisition.status,
                "approval_status": requisition.approval_status,
            },
        )


def _status_value(requisition: Requisition) -> str | None:
    return requisition.status.value if requisition.status else None
