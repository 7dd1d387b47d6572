from __future__ import annotations

import streamlit as st

from survey_sdk.API.survey_client import FileSurveyClient, HttpSurveyClient, SurveyClientInterface
from survey_sdk.core.config import settings
from survey_sdk.services.survey_session import SurveySession, SurveyState

from . import components, state


def run_app() -> None:
    """Entry point for the Streamlit survey UI."""

    st.set_page_config(page_title="Feedback Survey", page_icon="📝", layout="centered")

    session = state.get_session(_build_session)

    notice = state.pop_notice()
    if notice:
        st.success(notice)

    if session.state is SurveyState.NO_SURVEY:
        _render_fetch(session)
        return

    if session.state is SurveyState.READY:
        state.reset_widgets()
        session.show()

    definition = session.definition
    if definition is None:
        return

    components.render_survey_header(definition)
    for question in definition.questions:
        components.render_question(session, question)

    answers = session.answers
    answered = answers.answered_count() if answers is not None else 0
    st.caption(f"Answered {answered} of {len(definition.questions)} questions")

    components.render_actions(
        session,
        on_submit=lambda: _submit(session),
        on_skip=lambda: _skip(session),
    )


def _build_session() -> SurveySession:
    client: SurveyClientInterface
    if settings.survey_file_path is not None:
        client = FileSurveyClient(settings.survey_file_path)
    else:
        client = HttpSurveyClient()
    return SurveySession(client)


def _render_fetch(session: SurveySession) -> None:
    st.info("No survey loaded.")
    if not st.button("Check for survey"):
        return

    future = session.fetch_survey()
    if future is None:
        st.info("A survey request is already running.")
        return

    with st.spinner("Fetching survey..."):
        success = future.result()

    if success:
        st.rerun()
    st.warning("No survey is available right now.")


def _submit(session: SurveySession) -> None:
    message = session.success_message()
    session.submit()
    state.reset_widgets()
    state.set_notice(message)


def _skip(session: SurveySession) -> None:
    session.skip()
    state.reset_widgets()
