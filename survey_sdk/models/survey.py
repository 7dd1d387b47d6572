from __future__ import annotations

from typing import Annotated, Any, List, Literal, Sequence, Tuple, Union

from pydantic import BaseModel, Field, field_validator, model_validator


class AnswerChoice(BaseModel):
    """A selectable option offered by a choice question."""

    id: str = Field(min_length=1)
    label: str

    model_config = {"extra": "forbid", "frozen": True}


class BaseQuestion(BaseModel):
    """Fields shared by every question variant."""

    index: int = Field(ge=0)
    remote_id: str = Field(min_length=1)
    prompt: str
    required: bool = False

    model_config = {"extra": "forbid", "frozen": True}

    @field_validator("prompt")
    @classmethod
    def _ensure_prompt(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("prompt cannot be empty")
        return cleaned


class _ChoiceQuestion(BaseQuestion):
    choices: Tuple[AnswerChoice, ...] = Field(min_length=1)

    @field_validator("choices")
    @classmethod
    def _ensure_unique_choices(cls, value: Tuple[AnswerChoice, ...]) -> Tuple[AnswerChoice, ...]:
        ids = [choice.id for choice in value]
        if len(set(ids)) != len(ids):
            raise ValueError("choice ids must be unique")
        return value

    @property
    def choice_ids(self) -> List[str]:
        """Return the choice identifiers in display order."""

        return [choice.id for choice in self.choices]

    def label_for(self, choice_id: str) -> str:
        for choice in self.choices:
            if choice.id == choice_id:
                return choice.label
        raise KeyError(choice_id)


class SingleLineQuestion(BaseQuestion):
    """Free text answered with a single string."""

    type: Literal["singleline"] = Field(default="singleline", frozen=True)
    multiline: bool = False

    def is_answer_valid(self, values: Sequence[str]) -> bool:
        if len(values) != 1:
            return False
        return bool(values[0].strip()) or not self.required


class SingleSelectQuestion(_ChoiceQuestion):
    """Multiple choice where exactly one option may be chosen."""

    type: Literal["multichoice"] = Field(default="multichoice", frozen=True)

    def is_answer_valid(self, values: Sequence[str]) -> bool:
        return len(values) == 1 and values[0] in self.choice_ids


class MultiSelectQuestion(_ChoiceQuestion):
    """Multiple choice where up to ``max_selections`` options may be chosen."""

    type: Literal["multiselect"] = Field(default="multiselect", frozen=True)
    max_selections: int = Field(ge=1)

    @model_validator(mode="before")
    @classmethod
    def _default_max_selections(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("max_selections") is None:
            data = dict(data)
            data["max_selections"] = len(data.get("choices") or ()) or 1
        return data

    @model_validator(mode="after")
    def _ensure_limit_within_choices(self) -> "MultiSelectQuestion":
        if self.max_selections > len(self.choices):
            raise ValueError("max_selections cannot exceed the number of choices")
        return self

    def is_answer_valid(self, values: Sequence[str]) -> bool:
        selected = [value for value in values if value]
        if len(set(selected)) != len(selected):
            return False
        if len(selected) > self.max_selections:
            return False
        known = set(self.choice_ids)
        return all(value in known for value in selected)


class StackRankQuestion(BaseQuestion):
    """Ranked ordering of items. Declared by the backend but not supported yet."""

    type: Literal["stackrank"] = Field(default="stackrank", frozen=True)

    def is_answer_valid(self, values: Sequence[str]) -> bool:
        raise NotImplementedError("Ranked-ordering questions are not supported.")


Question = Annotated[
    Union[SingleLineQuestion, SingleSelectQuestion, MultiSelectQuestion, StackRankQuestion],
    Field(discriminator="type"),
]


class SurveyDefinition(BaseModel):
    """An immutable survey: ordered questions plus survey-level metadata."""

    id: str = Field(min_length=1)
    name: str = ""
    description: str | None = None
    required: bool = False
    show_success_message: bool = False
    success_message: str | None = None
    questions: Tuple[Question, ...] = ()

    model_config = {"extra": "forbid", "frozen": True}

    @model_validator(mode="after")
    def _ensure_stable_indices(self) -> "SurveyDefinition":
        for position, question in enumerate(self.questions):
            if question.index != position:
                raise ValueError(
                    f"question at position {position} has index {question.index}; "
                    "indices must match question order"
                )
        return self

    def question(self, index: int) -> Question:
        """Return the question with the given identity."""

        if index < 0 or index >= len(self.questions):
            raise KeyError(index)
        return self.questions[index]

    @property
    def required_questions(self) -> List[Question]:
        return [question for question in self.questions if question.required]
