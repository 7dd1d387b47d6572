from __future__ import annotations

from typing import Callable, List

import streamlit as st

from survey_sdk.core.errors import InvalidAnswerError
from survey_sdk.models.survey import (
    MultiSelectQuestion,
    Question,
    SingleLineQuestion,
    SingleSelectQuestion,
    StackRankQuestion,
    SurveyDefinition,
)
from survey_sdk.services.survey_session import SurveySession

from . import state

PLACEHOLDER_OPTION = "__unanswered__"


def render_survey_header(definition: SurveyDefinition) -> None:
    st.title(definition.name or "Survey")
    if definition.description:
        st.markdown(definition.description)


def render_question(session: SurveySession, question: Question) -> None:
    """Render the widget matching the question's variant."""

    label = f"{question.prompt} *" if question.required else question.prompt
    key = state.widget_key(question.index)

    if isinstance(question, SingleLineQuestion):
        widget = st.text_area if question.multiline else st.text_input
        widget(label, key=key, on_change=_on_text_change, args=(session, question.index))
    elif isinstance(question, SingleSelectQuestion):
        st.radio(
            label,
            options=[PLACEHOLDER_OPTION, *question.choice_ids],
            format_func=lambda choice_id: "No answer" if choice_id == PLACEHOLDER_OPTION else question.label_for(choice_id),
            key=key,
            on_change=_on_single_select_change,
            args=(session, question.index),
        )
    elif isinstance(question, MultiSelectQuestion):
        st.multiselect(
            label,
            options=question.choice_ids,
            format_func=question.label_for,
            max_selections=question.max_selections,
            key=key,
            on_change=_on_multi_select_change,
            args=(session, question.index),
        )
        st.caption(f"Choose up to {question.max_selections}.")
    elif isinstance(question, StackRankQuestion):
        st.markdown(f"**{label}**")
        st.info("Ranking questions are not supported yet.")
    else:
        raise TypeError(f"Unsupported question type: {type(question).__name__}")

    error = state.get_answer_errors().get(question.index)
    if error:
        st.warning(error)


def render_actions(session: SurveySession, *, on_submit: Callable[[], None], on_skip: Callable[[], None]) -> None:
    """Render the submit button, gated on completion, plus skip when allowed."""

    submit_col, skip_col = st.columns(2)
    with submit_col:
        st.button("Send", type="primary", on_click=on_submit, disabled=not session.is_complete())
    if session.is_skippable():
        with skip_col:
            st.button("Skip", on_click=on_skip)


def _apply_answer(session: SurveySession, index: int, values: List[str]) -> None:
    try:
        session.set_answer(index, *values)
    except InvalidAnswerError as exc:
        state.set_answer_error(index, str(exc))
    else:
        state.clear_answer_error(index)


def _on_text_change(session: SurveySession, index: int) -> None:
    value = str(st.session_state.get(state.widget_key(index)) or "")
    _apply_answer(session, index, [value])


def _on_single_select_change(session: SurveySession, index: int) -> None:
    value = st.session_state.get(state.widget_key(index))
    _apply_answer(session, index, ["" if value in (None, PLACEHOLDER_OPTION) else str(value)])


def _on_multi_select_change(session: SurveySession, index: int) -> None:
    selected = [str(value) for value in st.session_state.get(state.widget_key(index)) or []]
    _apply_answer(session, index, selected or [""])
