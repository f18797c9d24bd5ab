"""Flow A / Flow B routing of submitted applications."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

import structlog

from ..errors import ConflictError
from ..repositories import ApplicationStore
from ..schemas import (
    Application,
    Candidate,
    Flow,
    Requisition,
    RequisitionStatus,
    ReviewReason,
    ScreeningQuestion,
    Store,
)
from .geo import GeoMatchEngine


@dataclass(slots=True)
class ScreeningResult:
    passed: bool
    failed_questions: list[str] = field(default_factory=list)


def evaluate_screening(
    questions: Iterable[ScreeningQuestion],
    answers: Mapping[str, str],
) -> ScreeningResult:
    """Required questions must be answered and match their expected answer."""
    failed: list[str] = []
    for question in questions:
        if not question.required:
            continue
        answer = (answers.get(question.id) or "").strip()
        if not answer:
            failed.append(question.id)
            continue
        if question.expected_answer is not None and (
            answer.casefold() != question.expected_answer.strip().casefold()
        ):
            failed.append(question.id)
    return ScreeningResult(passed=not failed, failed_questions=failed)


def decide_flow(kq_passed: bool, is_geo_match: bool) -> Flow:
    return Flow.A if kq_passed and is_geo_match else Flow.B


class ApplicationRouter:
    """Decide once whether an application is auto-scheduled or manually reviewed."""

    def __init__(self, *, geo: GeoMatchEngine, applications: ApplicationStore) -> None:
        self._geo = geo
        self._applications = applications
        self._logger = structlog.get_logger(__name__)

    def route(
        self,
        application: Application,
        requisition: Requisition,
        candidate: Candidate,
        store: Store,
    ) -> Application:
        if application.is_routed:
            raise ConflictError("application already routed", application_id=application.id)
        if not requisition.is_recruiting:
            raise ConflictError(
                "requisition is not recruiting",
                requisition_id=requisition.id,
                status=requisition.status.value if requisition.status else None,
            )

        screening = evaluate_screening(requisition.screening_questions, application.answers)
        assessment = self._geo.assess(candidate, store, requisition.shift)
        is_geo_match = assessment.score >= self._geo.config.geo_match_threshold
        flow = decide_flow(screening.passed, is_geo_match)

        review_reasons: list[ReviewReason] = []
        if not is_geo_match:
            review_reasons.append(ReviewReason.GEO_MISMATCH)
        if not screening.passed:
            review_reasons.append(ReviewReason.SCREENING_FAILED)

        routed = application.model_copy(
            update={
                "kq_passed": screening.passed,
                "match_score": assessment.score,
                "is_geo_match": is_geo_match,
                "flow": flow,
                "distance_km": assessment.distance_km,
                "failed_questions": screening.failed_questions,
                "review_reasons": review_reasons,
            }
        )
        stored = self._applications.create(
            routed,
            requisition_expected={"status": RequisitionStatus.RECRUITING},
        )
        self._logger.info(
            "routing.decided",
            application_id=stored.id,
            candidate_id=stored.candidate_id,
            requisition_id=requisition.id,
            flow=flow.value,
            kq_passed=screening.passed,
            match_score=assessment.score,
            score_source=assessment.source,
            relevance=assessment.relevance.value,
            failed_questions=screening.failed_questions,
        )
        return stored
