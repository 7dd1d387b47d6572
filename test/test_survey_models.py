from __future__ import annotations

import pytest
from pydantic import ValidationError

from survey_sdk.models.answers import AnswerSet
from survey_sdk.models.survey import (
    AnswerChoice,
    MultiSelectQuestion,
    SingleLineQuestion,
    SingleSelectQuestion,
    StackRankQuestion,
    SurveyDefinition,
)
from survey_sdk.services.completion import is_complete, missing_required

CHOICES = (AnswerChoice(id="a", label="A"), AnswerChoice(id="b", label="B"), AnswerChoice(id="c", label="C"))


def _multi_select(max_selections: int | None = 2) -> MultiSelectQuestion:
    return MultiSelectQuestion(
        index=0,
        remote_id="q",
        prompt="Pick",
        choices=CHOICES,
        max_selections=max_selections,
    )


def test_single_line_requires_text_only_when_required() -> None:
    required = SingleLineQuestion(index=0, remote_id="q", prompt="Name?", required=True)
    optional = SingleLineQuestion(index=0, remote_id="q", prompt="Name?")

    assert required.is_answer_valid(["hello"])
    assert not required.is_answer_valid(["  "])
    assert optional.is_answer_valid([""])
    assert not optional.is_answer_valid(["a", "b"])


def test_single_select_accepts_exactly_one_known_choice() -> None:
    question = SingleSelectQuestion(index=0, remote_id="q", prompt="Pick", choices=CHOICES)

    assert question.is_answer_valid(["b"])
    assert not question.is_answer_valid(["z"])
    assert not question.is_answer_valid(["a", "b"])
    assert question.label_for("c") == "C"


def test_multi_select_boundary_at_max_selections() -> None:
    question = _multi_select(max_selections=2)

    assert question.is_answer_valid(["a", "b"])
    assert not question.is_answer_valid(["a", "b", "c"])


def test_multi_select_rejects_unknown_and_duplicate_choices() -> None:
    question = _multi_select()

    assert not question.is_answer_valid(["a", "x"])
    assert not question.is_answer_valid(["a", "a"])
    assert question.is_answer_valid([""])


def test_multi_select_defaults_max_to_choice_count() -> None:
    assert _multi_select(max_selections=None).max_selections == 3


def test_multi_select_limit_cannot_exceed_choices() -> None:
    with pytest.raises(ValidationError):
        _multi_select(max_selections=4)


def test_choice_ids_must_be_unique() -> None:
    with pytest.raises(ValidationError):
        SingleSelectQuestion(
            index=0,
            remote_id="q",
            prompt="Pick",
            choices=(AnswerChoice(id="a", label="A"), AnswerChoice(id="a", label="Again")),
        )


def test_stack_rank_validation_is_not_implemented() -> None:
    question = StackRankQuestion(index=0, remote_id="q", prompt="Rank these")

    with pytest.raises(NotImplementedError):
        question.is_answer_valid(["a"])


def test_definition_is_frozen() -> None:
    definition = SurveyDefinition(id="s", questions=())

    with pytest.raises(ValidationError):
        definition.required = True  # type: ignore[misc]


def test_definition_requires_indices_to_match_order() -> None:
    with pytest.raises(ValidationError):
        SurveyDefinition(
            id="s",
            questions=(SingleLineQuestion(index=1, remote_id="q", prompt="Out of order"),),
        )


def test_definition_lookup_by_identity() -> None:
    question = SingleLineQuestion(index=0, remote_id="q", prompt="Hi")
    definition = SurveyDefinition(id="s", questions=(question,))

    assert definition.question(0) is question
    with pytest.raises(KeyError):
        definition.question(1)


def test_answered_requires_a_non_empty_value() -> None:
    answers = AnswerSet("s")

    assert not answers.is_answered(0)
    answers.set_answer(0, "")
    assert not answers.is_answered(0)
    answers.set_answer(0, "", "b")
    assert answers.is_answered(0)


def test_set_answer_replaces_previous_values() -> None:
    answers = AnswerSet("s")
    answers.set_answer(2, "a", "b")
    answers.set_answer(2, "c")

    assert answers.get_answer(2) == ("c",)


def test_completion_tracks_required_questions_only() -> None:
    definition = SurveyDefinition(
        id="s",
        questions=(
            SingleLineQuestion(index=0, remote_id="q1", prompt="Required", required=True),
            SingleSelectQuestion(index=1, remote_id="q2", prompt="Optional", choices=CHOICES),
        ),
    )
    answers = AnswerSet("s")

    assert not is_complete(definition, answers)
    assert missing_required(definition, answers) == [0]

    answers.set_answer(0, "hello")
    assert is_complete(definition, answers)

    answers.set_answer(1, "a")
    assert is_complete(definition, answers)

    answers.set_answer(0, "")
    assert not is_complete(definition, answers)


def test_survey_without_required_questions_is_complete() -> None:
    definition = SurveyDefinition(
        id="s",
        questions=(SingleLineQuestion(index=0, remote_id="q1", prompt="Optional"),),
    )

    assert is_complete(definition, AnswerSet("s"))
