from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from survey_sdk.core.errors import MalformedQuestionError
from survey_sdk.models.survey import SurveyDefinition

_CHOICE_TYPES = {"multichoice", "multiselect"}
_KNOWN_TYPES = {"singleline", "stackrank", *_CHOICE_TYPES}


class SurveyLoader:
    """Build survey definitions from backend responses.

    The response carries a ``surveys`` list; only the first entry is used. Each
    question looks like::

        {"id": "q1", "type": "multiselect", "value": "Pick some",
         "required": true, "answer_choices": [{"id": "a", "value": "A"}],
         "max_selections": 2}

    A question's identity is its position in the list. Any structural problem
    rejects the whole definition with ``MalformedQuestionError``.
    """

    def parse(self, payload: Mapping[str, Any] | None) -> SurveyDefinition | None:
        """Return the first survey in ``payload`` or ``None`` when there is none."""

        if not payload:
            return None
        if not isinstance(payload, Mapping):
            raise MalformedQuestionError("Survey response must be a JSON object")

        surveys = payload.get("surveys")
        if not surveys:
            return None
        if not isinstance(surveys, list):
            raise MalformedQuestionError("'surveys' must be a list")

        return self.parse_survey(surveys[0])

    def parse_survey(self, raw_survey: Any) -> SurveyDefinition:
        if not isinstance(raw_survey, Mapping):
            raise MalformedQuestionError("Survey entry must be a JSON object")

        raw_questions = raw_survey.get("questions")
        if raw_questions is None:
            raw_questions = []
        if not isinstance(raw_questions, list):
            raise MalformedQuestionError("'questions' must be a list")

        questions = [self._question_fields(index, raw) for index, raw in enumerate(raw_questions)]

        try:
            return SurveyDefinition(
                id=str(raw_survey.get("id") or ""),
                name=str(raw_survey.get("name") or ""),
                description=_clean_str(raw_survey.get("description")),
                required=bool(raw_survey.get("required", False)),
                show_success_message=bool(raw_survey.get("show_success_message", False)),
                success_message=_clean_str(raw_survey.get("success_message")),
                questions=questions,
            )
        except ValidationError as exc:
            raise MalformedQuestionError(f"Invalid survey definition: {exc}") from exc

    def parse_json(self, text: str) -> SurveyDefinition | None:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedQuestionError(f"Survey response is not valid JSON: {exc}") from exc
        return self.parse(payload)

    def load_file(self, source: str | Path) -> SurveyDefinition | None:
        """Load a survey response stored as a local JSON file."""

        path = Path(source)
        if not path.is_file():
            raise FileNotFoundError(f"Survey file not found: {path}")
        return self.parse_json(path.read_text(encoding="utf-8"))

    def _question_fields(self, index: int, raw: Any) -> Dict[str, Any]:
        if not isinstance(raw, Mapping):
            raise MalformedQuestionError(f"Question {index}: must be a JSON object")

        question_type = raw.get("type")
        if question_type not in _KNOWN_TYPES:
            raise MalformedQuestionError(f"Question {index}: unknown type {question_type!r}")

        prompt = raw.get("value")
        if not isinstance(prompt, str) or not prompt.strip():
            raise MalformedQuestionError(f"Question {index}: prompt text is missing")

        fields: Dict[str, Any] = {
            "type": question_type,
            "index": index,
            "remote_id": str(raw.get("id") or index),
            "prompt": prompt,
            "required": bool(raw.get("required", False)),
        }

        if question_type == "singleline":
            fields["multiline"] = bool(raw.get("multiline", False))
        elif question_type in _CHOICE_TYPES:
            fields["choices"] = self._choices(index, raw.get("answer_choices"))
            if question_type == "multiselect":
                fields["max_selections"] = raw.get("max_selections")

        return fields

    @staticmethod
    def _choices(index: int, raw_choices: Any) -> List[Dict[str, str]]:
        if not isinstance(raw_choices, list) or not raw_choices:
            raise MalformedQuestionError(f"Question {index}: choice questions must define answer_choices")

        choices: List[Dict[str, str]] = []
        for raw_choice in raw_choices:
            if not isinstance(raw_choice, Mapping) or raw_choice.get("id") in (None, ""):
                raise MalformedQuestionError(f"Question {index}: every answer choice needs an id")
            choices.append({"id": str(raw_choice["id"]), "label": str(raw_choice.get("value") or "")})
        return choices


def _clean_str(value: Any) -> str | None:
    """Return a trimmed string representation or ``None``."""

    if value is None:
        return None
    text = str(value).strip()
    return text or None
