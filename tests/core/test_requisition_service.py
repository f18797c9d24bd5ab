from __future__ import annotations

import pytest

from staffreq.container import StaffingContainer, create_container
from staffreq.errors import (
    AuthorizationError,
    ConcurrencyConflict,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from staffreq.schemas import (
    ApprovalStatus,
    Approver,
    Candidate,
    Coordinates,
    Flow,
    RequisitionStatus,
    Role,
    Shift,
    Store,
)
from staffreq.service import RequisitionNumberer

STORES = [
    Store(id="S-1", brand_id="marca_kfc", name="KFC Larco", district="Miraflores", coordinates=Coordinates(lat=0.0, lng=0.0)),
    Store(id="S-2", brand_id="marca_kfc", name="KFC Benavides", district="Surquillo", coordinates=Coordinates(lat=0.05, lng=0.0)),
    Store(id="S-3", brand_id="marca_pj", name="Papa John's Pardo", district="Miraflores"),
]

APPROVERS = [
    Approver(user_id="sup-1", display_name="Ana Soto", role=Role.SUPERVISOR, assigned_store_ids=["S-1", "S-2"]),
    Approver(user_id="bh-1", display_name="Lucia Rojas", role=Role.BRAND_HEAD, assigned_brand_ids=["marca_kfc"]),
]

CANDIDATES = [
    Candidate(id="C-near", name="Rosa", coordinates=Coordinates(lat=0.02, lng=0.0)),
    Candidate(id="C-far", name="Luis", coordinates=Coordinates(lat=0.2, lng=0.0)),
]


def build_container() -> StaffingContainer:
    container = create_container()
    container.database().load(approvers=APPROVERS, stores=STORES, candidates=CANDIDATES)
    return container


def create(service, **overrides):
    payload = {
        "store_id": "S-1",
        "brand_id": "marca_kfc",
        "position": "Crew Member",
        "shift": "Morning",
        "modality": "Part-Time-19h",
        "seat_count": 2,
        "creator_role": "store_manager",
        "creator_id": "sm-1",
    }
    payload.update(overrides)
    return service.create_requisition(**payload)


def approve_fully(service, requisition_id: str):
    service.approve_requisition(requisition_id, Role.SUPERVISOR, "sup-1")
    return service.approve_requisition(requisition_id, Role.BRAND_HEAD, "bh-1")


def test_numberer_formats_brand_codes():
    numberer = RequisitionNumberer({"marca_bembos": "BMB"})

    assert numberer.format("marca_kfc", 42) == "RQ-KFC-00042"
    assert numberer.format("marca_bembos", 7) == "RQ-BMB-00007"
    assert numberer.format("marca_tanta", 1) == "RQ-TAN-00001"


def test_create_requisition_assigns_number_chain_and_questions():
    service = build_container().service()

    first = create(service)
    second = create(service, store_id="S-2", seat_count=1)

    assert first.number == "RQ-KFC-00001"
    assert second.number == "RQ-KFC-00002"
    assert first.approval_status is ApprovalStatus.PENDING
    assert first.current_approval_level == 2
    assert [q.id for q in first.screening_questions][:2] == ["health_card", "weekend_availability"]
    assert service.pending_for_approver("sup-1") == [first, second]
    assert service.pending_for_approver("bh-1") == []


def test_create_managerial_requisition():
    service = build_container().service()

    requisition = create(
        service,
        position="Assistant Manager",
        shift=None,
        modality="Full-Time",
        category="managerial",
        seat_count=1,
    )

    assert requisition.shift is Shift.ADMINISTRATIVE
    assert requisition.screening_questions[0].id == "team_leadership"


def test_create_requisition_validates_input():
    service = build_container().service()

    with pytest.raises(ValidationError) as excinfo:
        create(service, seat_count=25)
    assert any("seat_count" in error for error in excinfo.value.context["errors"])

    with pytest.raises(ValidationError):
        create(service, brand_id="marca_pj")
    with pytest.raises(ValidationError):
        create(service, creator_role="cashier")
    with pytest.raises(NotFoundError):
        create(service, store_id="S-404")
    with pytest.raises(AuthorizationError):
        create(service, creator_role="recruiter")


def test_approve_reject_and_bulk():
    container = build_container()
    service = container.service()
    first = create(service)
    second = create(service)
    third = create(service)

    result = service.bulk_approve([first.id, second.id, "missing"], Role.SUPERVISOR, "sup-1")
    assert result.succeeded == [first.id, second.id]
    assert list(result.failed) == ["missing"]

    assert [item.id for item in service.pending_for_approver("bh-1")] == [first.id, second.id]
    assert container.requisition_store().get(first.id).current_approval_level == 3

    rejected = service.bulk_reject([second.id, third.id], Role.BRAND_HEAD, "Budget cut", "bh-1")
    assert rejected.succeeded == [second.id]
    assert third.id in rejected.failed

    approved = service.approve_requisition(first.id, Role.BRAND_HEAD, "bh-1", "Lucia Rojas")
    assert approved.status is RequisitionStatus.RECRUITING
    assert approved.approval_chain[-1].acted_by_name == "Lucia Rojas"

    cancelled = service.reject_requisition(third.id, Role.SUPERVISOR, "Duplicate", "sup-1")
    assert cancelled.status is RequisitionStatus.CANCELLED


def test_stale_observed_snapshot_is_refused():
    service = build_container().service()
    requisition = create(service)

    service.approve_requisition(requisition.id, Role.SUPERVISOR, "sup-1", observed=requisition)
    with pytest.raises(ConcurrencyConflict):
        service.reject_requisition(requisition.id, Role.SUPERVISOR, "Too late", "sup-2", observed=requisition)
    with pytest.raises(ValidationError):
        service.approve_requisition("other", Role.SUPERVISOR, "sup-1", observed=requisition)


def test_match_candidate_to_stores():
    service = build_container().service()

    matches = service.match_candidate_to_stores((0.01, 0.0), STORES, "Morning")

    assert [item.store.id for item in matches] == ["S-1", "S-2", "S-3"]
    assert [item.eligible for item in matches] == [True, True, False]
    with pytest.raises(ValidationError):
        service.match_candidate_to_stores((0.01, 0.0), STORES, "Graveyard")


def test_applications_route_and_fill_requisition():
    service = build_container().service()
    requisition = approve_fully(service, create(service).id)

    near = service.submit_application(
        "C-near", requisition.id, {"health_card": True, "weekend_availability": "yes"}
    )
    far = service.submit_application(
        "C-far", requisition.id, {"health_card": True, "weekend_availability": True}
    )

    assert near.flow is Flow.A
    assert near.answers["health_card"] == "yes"
    assert far.flow is Flow.B
    assert service.review_queue(requisition.id) == [far]
    with pytest.raises(ConflictError):
        service.submit_application("C-near", requisition.id, {})
    with pytest.raises(NotFoundError):
        service.submit_application("C-ghost", requisition.id, {})

    service.confirm_hire(requisition.id)
    filled = service.confirm_hire(requisition.id)
    assert filled.status is RequisitionStatus.FILLED

    reopened = service.release_hire(requisition.id)
    assert reopened.status is RequisitionStatus.RECRUITING
    service.confirm_hire(requisition.id)

    closed = service.close_requisition(requisition.id, "Seats covered")
    assert closed.status is RequisitionStatus.CLOSED
    assert closed.closure_reason == "Seats covered"


def test_pending_requisition_does_not_accept_applications():
    service = build_container().service()
    requisition = create(service)

    with pytest.raises(ConflictError):
        service.submit_application("C-near", requisition.id, {})
    with pytest.raises(ConflictError):
        service.confirm_hire(requisition.id)

    cancelled = service.cancel_requisition(requisition.id, "Store closing")
    assert cancelled.approval_status is ApprovalStatus.REJECTED
    assert cancelled.status is RequisitionStatus.CANCELLED


def test_store_manager_is_the_default_creator_role():
    service = build_container().service()

    requisition = service.create_requisition(
        store_id="S-1",
        brand_id="marca_kfc",
        position="Crew Member",
        shift="Night",
        modality="Full-Time",
        seat_count=1,
        creator_id="sm-1",
    )

    assert requisition.created_by_role is Role.STORE_MANAGER
    assert len(requisition.approval_chain) == 3
