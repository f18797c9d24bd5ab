"""Caller-facing operations over the requisition core."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, TypeVar

import pendulum
import pydantic
import structlog

from .core import (
    ApplicationRouter,
    ApprovalChainEngine,
    GeoMatchEngine,
    SlotFulfillmentTracker,
    StoreMatch,
)
from .errors import StaffingError, ValidationError
from .repositories import (
    ApplicationStore,
    CandidateStore,
    RequisitionStore,
    StoreDirectory,
)
from .schemas import (
    Application,
    ApprovalStatus,
    Category,
    Decision,
    Flow,
    Modality,
    Requisition,
    Role,
    ScreeningQuestion,
    Shift,
    Store,
    default_questions,
)

E = TypeVar("E", bound=Enum)

DEFAULT_BRAND_CODES: dict[str, str] = {
    "papajohns": "PJ",
    "papa_johns": "PJ",
    "kfc": "KFC",
    "starbucks": "SBX",
    "popeyes": "POP",
    "chillis": "CHL",
    "burgerking": "BK",
}


class RequisitionNumberer:
    """Format per-brand sequential display numbers, e.g. ``RQ-KFC-00042``."""

    def __init__(self, brand_codes: Mapping[str, str] | None = None) -> None:
        self._brand_codes = dict(DEFAULT_BRAND_CODES)
        self._brand_codes.update(brand_codes or {})

    def brand_code(self, brand_id: str) -> str:
        if brand_id in self._brand_codes:
            return self._brand_codes[brand_id]
        bare = brand_id.removeprefix("marca_")
        if bare in self._brand_codes:
            return self._brand_codes[bare]
        return bare[:3].upper()

    def format(self, brand_id: str, sequence: int) -> str:
        return f"RQ-{self.brand_code(brand_id)}-{sequence:05d}"


@dataclass(slots=True)
class BulkResult:
    succeeded: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


class RequisitionService:
    """Entry point for the UI/API layer."""

    def __init__(
        self,
        *,
        requisitions: RequisitionStore,
        applications: ApplicationStore,
        candidates: CandidateStore,
        stores: StoreDirectory,
        approval: ApprovalChainEngine,
        router: ApplicationRouter,
        tracker: SlotFulfillmentTracker,
        geo: GeoMatchEngine,
        numberer: RequisitionNumberer | None = None,
        now_provider: Callable[[], Any] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._requisitions = requisitions
        self._applications = applications
        self._candidates = candidates
        self._stores = stores
        self._approval = approval
        self._router = router
        self._tracker = tracker
        self._geo = geo
        self._numberer = numberer or RequisitionNumberer()
        self._now_provider = now_provider or pendulum.now
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self._logger = structlog.get_logger(__name__)

    # -- requisitions -----------------------------------------------------

    def create_requisition(
        self,
        *,
        store_id: str,
        brand_id: str,
        position: str,
        shift: Shift | str | None = None,
        modality: Modality | str,
        seat_count: int,
        category: Category | str = Category.OPERATIONAL,
        creator_role: Role | str = Role.STORE_MANAGER,
        creator_id: str,
        creator_name: str | None = None,
        screening_questions: Iterable[ScreeningQuestion | Mapping[str, Any]] | None = None,
    ) -> Requisition:
        store = self._stores.get(store_id)
        if store.brand_id != brand_id:
            raise ValidationError(
                "store does not belong to brand",
                store_id=store_id,
                brand_id=brand_id,
                store_brand_id=store.brand_id,
            )

        role = _enum(Role, creator_role, "creator_role")
        payload: dict[str, Any] = {
            "id": self._id_factory(),
            "brand_id": brand_id,
            "store_id": store_id,
            "position": position,
            "shift": shift,
            "modality": modality,
            "seat_count": seat_count,
            "category": category,
            "created_at": self._now_provider(),
        }
        if screening_questions is not None:
            payload["screening_questions"] = list(screening_questions)
        requisition = _build(Requisition, payload)
        if screening_questions is None:
            requisition = requisition.model_copy(
                update={"screening_questions": default_questions(requisition.category)}
            )

        requisition = self._approval.initiate(requisition, role, creator_id, creator_name)
        number = self._numberer.format(brand_id, self._requisitions.next_number(brand_id))
        stored = self._requisitions.add(requisition.model_copy(update={"number": number}))

        self._logger.info(
            "requisition.created",
            requisition_id=stored.id,
            number=stored.number,
            store_id=store_id,
            creator_role=role.value,
            levels=len(stored.approval_chain),
            unassigned_levels=stored.unassigned_levels,
        )
        return stored

    def approve_requisition(
        self,
        requisition_id: str,
        acting_role: Role | str,
        acting_approver_id: str,
        acting_approver_name: str | None = None,
        *,
        observed: Requisition | None = None,
    ) -> Requisition:
        snapshot = self._snapshot(requisition_id, observed)
        return self._approval.advance(
            snapshot,
            _enum(Role, acting_role, "acting_role"),
            Decision.APPROVE,
            approver_id=acting_approver_id,
            approver_name=acting_approver_name,
        )

    def reject_requisition(
        self,
        requisition_id: str,
        acting_role: Role | str,
        reason: str,
        acting_approver_id: str | None = None,
        *,
        observed: Requisition | None = None,
    ) -> Requisition:
        snapshot = self._snapshot(requisition_id, observed)
        return self._approval.advance(
            snapshot,
            _enum(Role, acting_role, "acting_role"),
            Decision.REJECT,
            approver_id=acting_approver_id,
            reason=reason,
        )

    def bulk_approve(
        self,
        requisition_ids: Iterable[str],
        acting_role: Role | str,
        acting_approver_id: str,
        acting_approver_name: str | None = None,
    ) -> BulkResult:
        return self._bulk(
            requisition_ids,
            lambda requisition_id: self.approve_requisition(
                requisition_id, acting_role, acting_approver_id, acting_approver_name
            ),
        )

    def bulk_reject(
        self,
        requisition_ids: Iterable[str],
        acting_role: Role | str,
        reason: str,
        acting_approver_id: str | None = None,
    ) -> BulkResult:
        return self._bulk(
            requisition_ids,
            lambda requisition_id: self.reject_requisition(
                requisition_id, acting_role, reason, acting_approver_id
            ),
        )

    def pending_for_approver(self, user_id: str) -> list[Requisition]:
        pending: list[Requisition] = []
        for requisition in self._requisitions.list():
            if requisition.approval_status is not ApprovalStatus.PENDING:
                continue
            step = requisition.current_step
            if step is not None and step.assigned_approver_id == user_id:
                pending.append(requisition)
        return pending

    # -- matching and applications -----------------------------------------

    def match_candidate_to_stores(
        self,
        candidate_coords: Any,
        stores: Iterable[Store],
        shift: Shift | str,
    ) -> list[StoreMatch]:
        return self._geo.rank_stores(candidate_coords, stores, _enum(Shift, shift, "shift"))

    def submit_application(
        self,
        candidate_id: str,
        requisition_id: str,
        answers: Mapping[str, Any] | None = None,
    ) -> Application:
        candidate = self._candidates.get(candidate_id)
        requisition = self._requisitions.get(requisition_id)
        store = self._stores.get(requisition.store_id)

        application = _build(
            Application,
            {
                "id": self._id_factory(),
                "candidate_id": candidate.id,
                "requisition_id": requisition.id,
                "answers": _normalize_answers(answers or {}),
                "created_at": self._now_provider(),
            },
        )
        return self._router.route(application, requisition, candidate, store)

    def review_queue(self, requisition_id: str) -> list[Application]:
        """Flow B applications awaiting a recruiter."""
        self._requisitions.get(requisition_id)
        return [
            application
            for application in self._applications.list_for_requisition(requisition_id)
            if application.flow is Flow.B
        ]

    # -- fulfillment ---------------------------------------------------------

    def confirm_hire(self, requisition_id: str) -> Requisition:
        return self._tracker.confirm_hire(self._requisitions.get(requisition_id))

    def release_hire(self, requisition_id: str) -> Requisition:
        return self._tracker.release_hire(self._requisitions.get(requisition_id))

    def close_requisition(self, requisition_id: str, reason: str | None = None) -> Requisition:
        return self._tracker.close(self._requisitions.get(requisition_id), reason)

    def cancel_requisition(self, requisition_id: str, reason: str) -> Requisition:
        return self._tracker.cancel(self._requisitions.get(requisition_id), reason)

    # -- helpers -------------------------------------------------------------

    def _snapshot(self, requisition_id: str, observed: Requisition | None) -> Requisition:
        if observed is None:
            return self._requisitions.get(requisition_id)
        if observed.id != requisition_id:
            raise ValidationError(
                "observed snapshot belongs to another requisition",
                requisition_id=requisition_id,
                observed_id=observed.id,
            )
        return observed

    def _bulk(self, requisition_ids: Iterable[str], action: Callable[[str], Any]) -> BulkResult:
        result = BulkResult()
        for requisition_id in requisition_ids:
            try:
                action(requisition_id)
            except StaffingError as exc:
                result.failed[requisition_id] = str(exc)
                self._logger.warning(
                    "requisition.bulk_failed",
                    requisition_id=requisition_id,
                    error=str(exc),
                )
                continue
            result.succeeded.append(requisition_id)
        return result


def _enum(kind: type[E], value: Any, name: str) -> E:
    try:
        return kind(value)
    except ValueError as exc:
        raise ValidationError(f"invalid {name}", value=value) from exc


ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


def _build(model: type[ModelT], payload: dict[str, Any]) -> ModelT:
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError(
            f"invalid {model.__name__.lower()}",
            errors=[
                f"{'.'.join(str(part) for part in err['loc']) or model.__name__}: {err['msg']}"
                for err in exc.errors()
            ],
        ) from exc


def _normalize_answers(answers: Mapping[str, Any]) -> dict[str, str]:
    normalized: dict[str, str] = {}
    for key, value in answers.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "yes" if value else "no"
        normalized[str(key)] = str(value)
    return normalized
