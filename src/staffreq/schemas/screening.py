from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .enums import Category


class ScreeningQuestion(BaseModel):
    """Knock-out question attached to a requisition.

    ``expected_answer`` is only enforced when ``required`` is set.
    """

    id: str
    text: str = ""
    required: bool = True
    expected_answer: str | None = None

    model_config = ConfigDict(extra="forbid")


DEFAULT_SCREENING_QUESTIONS: dict[Category, tuple[ScreeningQuestion, ...]] = {
    Category.OPERATIONAL: (
        ScreeningQuestion(
            id="health_card",
            text="Do you hold a valid food-handler health card?",
            expected_answer="yes",
        ),
        ScreeningQuestion(
            id="weekend_availability",
            text="Are you available to work weekends?",
            expected_answer="yes",
        ),
        ScreeningQuestion(
            id="customer_service_experience",
            text="Do you have customer service experience?",
            required=False,
        ),
    ),
    Category.MANAGERIAL: (
        ScreeningQuestion(
            id="team_leadership",
            text="Have you led a team before?",
            expected_answer="yes",
        ),
        ScreeningQuestion(
            id="higher_education",
            text="Do you have higher education in business or a related field?",
        ),
        ScreeningQuestion(
            id="multi_store_travel",
            text="Can you visit several stores as part of the role?",
            expected_answer="yes",
        ),
    ),
}


def default_questions(category: Category) -> list[ScreeningQuestion]:
    """Return fresh copies of the suggested questions for a category."""
    return [question.model_copy() for question in DEFAULT_SCREENING_QUESTIONS[category]]
