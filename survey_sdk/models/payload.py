from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Tuple

from pydantic import BaseModel, Field

from survey_sdk.models.answers import AnswerSet
from survey_sdk.models.survey import SurveyDefinition


class QuestionResponse(BaseModel):
    """Answer values captured for one question at submission time."""

    question_index: int
    question_id: str
    values: Tuple[str, ...]

    model_config = {"extra": "forbid", "frozen": True}


class SurveyPayload(BaseModel):
    """Immutable, queue-ready snapshot of a submitted survey."""

    nonce: str = Field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    survey_id: str
    responses: Tuple[QuestionResponse, ...] = ()

    model_config = {"extra": "forbid", "frozen": True}

    @classmethod
    def build(cls, definition: SurveyDefinition, answers: AnswerSet) -> "SurveyPayload":
        """Snapshot ``answers`` against ``definition``.

        Values are copied into tuples, so later changes to the answer set do
        not leak into the payload.
        """

        responses = []
        for index, values in answers.items():
            question = definition.question(index)
            responses.append(
                QuestionResponse(
                    question_index=index,
                    question_id=question.remote_id,
                    values=tuple(values),
                )
            )
        return cls(survey_id=definition.id, responses=tuple(responses))

    def response_for(self, question_index: int) -> QuestionResponse | None:
        for response in self.responses:
            if response.question_index == question_index:
                return response
        return None

    def to_json(self) -> str:
        return self.model_dump_json()
