from __future__ import annotations

import pytest

from staffreq.core import (
    ApplicationRouter,
    GeoConfig,
    GeoMatchEngine,
    decide_flow,
    evaluate_screening,
)
from staffreq.errors import ConflictError
from staffreq.repositories import MemoryApplicationStore, MemoryDatabase
from staffreq.schemas import (
    Application,
    Candidate,
    Coordinates,
    Flow,
    Requisition,
    ReviewReason,
    ScreeningQuestion,
    Store,
)

QUESTIONS = [
    ScreeningQuestion(id="health_card", expected_answer="yes"),
    ScreeningQuestion(id="weekend_availability", expected_answer="Yes"),
    ScreeningQuestion(id="experience", required=False, expected_answer="yes"),
    ScreeningQuestion(id="languages"),
]

STORE = Store(id="S-1", brand_id="marca_kfc", district="Miraflores", coordinates=Coordinates(lat=0.0, lng=0.0))


def build_requisition(**overrides) -> Requisition:
    payload = {
        "id": "REQ-1",
        "brand_id": "marca_kfc",
        "store_id": "S-1",
        "position": "Crew Member",
        "shift": "Morning",
        "modality": "Part-Time-19h",
        "seat_count": 2,
        "approval_status": "approved",
        "current_approval_level": 3,
        "status": "recruiting",
        "screening_questions": QUESTIONS,
    }
    payload.update(overrides)
    return Requisition.model_validate(payload)


def build_router(requisition: Requisition, config: GeoConfig | None = None):
    db = MemoryDatabase()
    db.load(requisitions=[requisition], stores=[STORE])
    applications = MemoryApplicationStore(db)
    return ApplicationRouter(geo=GeoMatchEngine(config=config), applications=applications), applications


def build_application(candidate_id: str = "C-1", **answers: str) -> Application:
    base = {"health_card": "yes", "weekend_availability": "yes", "languages": "Spanish"}
    base.update(answers)
    return Application(id=f"APP-{candidate_id}", candidate_id=candidate_id, requisition_id="REQ-1", answers=base)


def build_candidate(candidate_id: str = "C-1", lat: float | None = 0.02, district: str | None = None) -> Candidate:
    coordinates = Coordinates(lat=lat, lng=0.0) if lat is not None else None
    return Candidate(id=candidate_id, district=district, coordinates=coordinates)


def test_evaluate_screening_only_counts_required_questions():
    passed = evaluate_screening(QUESTIONS, {"health_card": " YES ", "weekend_availability": "yes", "languages": "es"})
    assert passed.passed is True
    assert passed.failed_questions == []

    failed = evaluate_screening(QUESTIONS, {"health_card": "no", "weekend_availability": "", "experience": "no"})
    assert failed.passed is False
    assert failed.failed_questions == ["health_card", "weekend_availability", "languages"]


def test_decide_flow():
    assert decide_flow(True, True) is Flow.A
    assert decide_flow(True, False) is Flow.B
    assert decide_flow(False, True) is Flow.B
    assert decide_flow(False, False) is Flow.B


def test_screened_nearby_candidate_goes_to_flow_a():
    router, applications = build_router(build_requisition())

    routed = router.route(build_application(), build_requisition(), build_candidate(), STORE)

    assert routed.flow is Flow.A
    assert routed.kq_passed is True
    assert routed.is_geo_match is True
    assert routed.match_score == 87
    assert routed.distance_km == pytest.approx(2.2)
    assert routed.review_reasons == []
    assert applications.get(routed.id) == routed


def test_edge_of_shift_radius_still_matches():
    router, _ = build_router(build_requisition())

    routed = router.route(build_application(), build_requisition(), build_candidate(lat=0.062), STORE)

    assert routed.match_score == 60
    assert routed.flow is Flow.A


def test_distant_candidate_goes_to_flow_b():
    router, _ = build_router(build_requisition())

    routed = router.route(build_application(), build_requisition(), build_candidate(lat=0.081), STORE)

    assert routed.match_score == 42
    assert routed.is_geo_match is False
    assert routed.flow is Flow.B
    assert routed.review_reasons == [ReviewReason.GEO_MISMATCH]


def test_failed_screening_goes_to_flow_b():
    router, _ = build_router(build_requisition())

    routed = router.route(build_application(health_card="no"), build_requisition(), build_candidate(), STORE)

    assert routed.flow is Flow.B
    assert routed.kq_passed is False
    assert routed.failed_questions == ["health_card"]
    assert routed.review_reasons == [ReviewReason.SCREENING_FAILED]


def test_ungeocoded_candidate_falls_back_to_districts():
    router, _ = build_router(build_requisition())
    candidate = build_candidate(lat=None, district="Surquillo")

    routed = router.route(build_application(), build_requisition(), candidate, STORE)

    assert routed.distance_km is None
    assert routed.match_score == 80
    assert routed.flow is Flow.A


def test_threshold_is_configurable():
    router, _ = build_router(build_requisition(), GeoConfig(geo_match_threshold=90))

    routed = router.route(build_application(), build_requisition(), build_candidate(), STORE)

    assert routed.flow is Flow.B


def test_routing_requires_recruiting_requisition():
    pending = build_requisition(approval_status="pending", current_approval_level=2, status=None)
    router, applications = build_router(pending)

    with pytest.raises(ConflictError):
        router.route(build_application(), pending, build_candidate(), STORE)
    assert applications.list_for_requisition("REQ-1") == []

    closed = build_requisition(status="closed", filled_slots=2, closure_reason="All 2 seats have been filled")
    router, _ = build_router(closed)
    with pytest.raises(ConflictError):
        router.route(build_application(), closed, build_candidate(), STORE)


def test_routing_happens_once():
    router, _ = build_router(build_requisition())
    routed = router.route(build_application(), build_requisition(), build_candidate(), STORE)

    with pytest.raises(ConflictError):
        router.route(routed, build_requisition(), build_candidate(), STORE)

    duplicate = build_application().model_copy(update={"id": "APP-dup"})
    with pytest.raises(ConflictError):
        router.route(duplicate, build_requisition(), build_candidate(), STORE)
