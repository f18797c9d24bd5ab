from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .enums import Flow, ReviewReason


class Application(BaseModel):
    """A candidate's submission against one requisition.

    The routing fields stay ``None`` until the router has decided; they are
    written exactly once.
    """

    id: str
    candidate_id: str
    requisition_id: str
    answers: dict[str, str] = Field(default_factory=dict)

    kq_passed: bool | None = None
    match_score: int | None = Field(default=None, ge=0, le=100)
    is_geo_match: bool | None = None
    flow: Flow | None = None
    distance_km: float | None = None
    failed_questions: list[str] = Field(default_factory=list)
    review_reasons: list[ReviewReason] = Field(default_factory=list)
    created_at: datetime | None = None

    model_config = ConfigDict(extra="forbid")

    @property
    def is_routed(self) -> bool:
        return self.flow is not None
