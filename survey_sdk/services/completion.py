from __future__ import annotations

from survey_sdk.models.answers import AnswerSet
from survey_sdk.models.survey import SurveyDefinition


def is_complete(definition: SurveyDefinition, answers: AnswerSet) -> bool:
    """Return True when every required question has been answered.

    A survey without required questions is always complete. Answer validity
    is not checked here; invalid answers never reach the answer set.
    """

    return all(answers.is_answered(question.index) for question in definition.required_questions)


def missing_required(definition: SurveyDefinition, answers: AnswerSet) -> list[int]:
    """Return the identities of required questions that still need an answer."""

    return [
        question.index
        for question in definition.required_questions
        if not answers.is_answered(question.index)
    ]
