"""Role-conditioned approval chain for requisitions."""

from __future__ import annotations

from typing import Any, Callable

import pendulum
import structlog

from ..errors import AuthorizationError, ConflictError, ValidationError
from ..repositories import ApproverStore, RequisitionStore
from ..schemas import (
    ApprovalStatus,
    ApprovalStep,
    Approver,
    Decision,
    Requisition,
    RequisitionStatus,
    Role,
    StepStatus,
)
from .delegation import DelegationResolver

# Chain roles keyed by creator role; level 1 is always signed by the creator.
CHAIN_TEMPLATES: dict[Role, tuple[Role, ...]] = {
    Role.STORE_MANAGER: (Role.STORE_MANAGER, Role.SUPERVISOR, Role.BRAND_HEAD),
    Role.SUPERVISOR: (Role.SUPERVISOR, Role.BRAND_HEAD),
}


class ApprovalChainEngine:
    """Build a requisition's approval chain and advance it level by level."""

    def __init__(
        self,
        *,
        approvers: ApproverStore,
        requisitions: RequisitionStore,
        resolver: DelegationResolver,
        now_provider: Callable[[], Any] | None = None,
    ) -> None:
        self._approvers = approvers
        self._requisitions = requisitions
        self._resolver = resolver
        self._now_provider = now_provider or pendulum.now
        self._logger = structlog.get_logger(__name__)

    def initiate(
        self,
        requisition: Requisition,
        creator_role: Role,
        creator_id: str,
        creator_name: str | None = None,
    ) -> Requisition:
        """Return ``requisition`` with a fresh chain; level 1 is signed by the creator."""
        template = CHAIN_TEMPLATES.get(Role(creator_role))
        if template is None:
            raise AuthorizationError(
                "role cannot open requisitions",
                role=Role(creator_role).value,
                requisition_id=requisition.id,
            )

        now = self._now_provider()
        chain = [
            ApprovalStep(
                level=1,
                role=template[0],
                status=StepStatus.APPROVED,
                assigned_approver_id=creator_id,
                assigned_approver_name=creator_name,
                acted_by=creator_id,
                acted_by_name=creator_name,
                acted_at=now,
            )
        ]
        for level, role in enumerate(template[1:], start=2):
            chain.append(self._assign(requisition, level, role))

        initiated = requisition.model_copy(
            update={
                "approval_chain": chain,
                "current_approval_level": 2,
                "approval_status": ApprovalStatus.PENDING,
                "status": None,
                "created_by": creator_id,
                "created_by_role": Role(creator_role),
            }
        )
        for level in initiated.unassigned_levels:
            self._logger.warning(
                "approval.unassigned_level",
                requisition_id=requisition.id,
                level=level,
                role=chain[level - 1].role.value,
            )
        return initiated

    def advance(
        self,
        requisition: Requisition,
        acting_role: Role,
        decision: Decision,
        *,
        approver_id: str | None = None,
        approver_name: str | None = None,
        reason: str | None = None,
    ) -> Requisition:
        """Apply a decision at the current level and persist it.

        ``requisition`` is the caller's observed snapshot; the write only lands
        if the stored level and status still match it.
        """
        decision = Decision(decision)
        if requisition.approval_status is not ApprovalStatus.PENDING:
            raise ConflictError(
                "approval chain already decided",
                requisition_id=requisition.id,
                approval_status=requisition.approval_status.value,
            )

        step = requisition.current_step
        if step is None:
            raise ConflictError(
                "no approval step at current level",
                requisition_id=requisition.id,
                level=requisition.current_approval_level,
            )
        if Role(acting_role) is not step.role:
            raise AuthorizationError(
                "acting role does not match the current approval level",
                requisition_id=requisition.id,
                level=step.level,
                required_role=step.role.value,
                acting_role=Role(acting_role).value,
            )
        if decision is Decision.REJECT and not (reason and reason.strip()):
            raise ValidationError("a rejection reason is required", requisition_id=requisition.id)

        now = self._now_provider()
        acted = step.model_copy(
            update={
                "status": StepStatus.APPROVED if decision is Decision.APPROVE else StepStatus.REJECTED,
                "acted_by": approver_id,
                "acted_by_name": approver_name,
                "acted_at": now,
                "rejection_reason": reason.strip() if decision is Decision.REJECT else None,
            }
        )
        chain = [acted if item.level == step.level else item for item in requisition.approval_chain]
        update: dict[str, Any] = {"approval_chain": chain}

        if decision is Decision.REJECT:
            update.update(
                approval_status=ApprovalStatus.REJECTED,
                status=RequisitionStatus.CANCELLED,
                cancelled_at=now,
                closure_reason=reason.strip(),
            )
        elif step.level >= requisition.final_level:
            update.update(
                approval_status=ApprovalStatus.APPROVED,
                status=RequisitionStatus.RECRUITING,
            )
        else:
            update["current_approval_level"] = step.level + 1

        advanced = requisition.model_copy(update=update)
        stored = self._requisitions.replace(
            advanced,
            expected={
                "current_approval_level": requisition.current_approval_level,
                "approval_status": requisition.approval_status,
            },
        )
        self._logger.info(
            "approval.advanced",
            requisition_id=requisition.id,
            level=step.level,
            decision=decision.value,
            approval_status=stored.approval_status.value,
            current_level=stored.current_approval_level,
        )
        return stored

    def _assign(self, requisition: Requisition, level: int, role: Role) -> ApprovalStep:
        found = self._find_approver(requisition, role)
        if found is None:
            return ApprovalStep(level=level, role=role)

        effective = self._resolver.resolve(found)
        if effective.user_id == found.user_id:
            return ApprovalStep(
                level=level,
                role=role,
                assigned_approver_id=found.user_id,
                assigned_approver_name=found.display_name,
            )
        # Backup records may carry no name; fall back to the one the absent approver published.
        return ApprovalStep(
            level=level,
            role=role,
            assigned_approver_id=effective.user_id,
            assigned_approver_name=effective.display_name or found.backup_display_name,
            delegated_from=found.user_id,
        )

    def _find_approver(self, requisition: Requisition, role: Role) -> Approver | None:
        if role is Role.SUPERVISOR:
            return self._approvers.find_active(role, store_id=requisition.store_id)
        if role is Role.BRAND_HEAD:
            return self._approvers.find_active(role, brand_id=requisition.brand_id)
        return None
