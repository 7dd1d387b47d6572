from __future__ import annotations

from typing import Callable, Dict, Optional

import streamlit as st

from survey_sdk.services.survey_session import SurveySession

SESSION_KEY = "survey_session"
NOTICE_KEY = "survey_notice"
ANSWER_ERRORS_KEY = "answer_errors"
WIDGET_PREFIX = "response_"


def get_session(factory: Callable[[], SurveySession]) -> SurveySession:
    """Return this browser session's survey session, creating it on first use."""

    session = st.session_state.get(SESSION_KEY)
    if session is None:
        session = factory()
        st.session_state[SESSION_KEY] = session
    return session


def widget_key(index: int) -> str:
    return f"{WIDGET_PREFIX}{index}"


def reset_widgets() -> None:
    """Forget widget values and answer errors left over from a finished survey."""

    for key in [name for name in st.session_state.keys() if str(name).startswith(WIDGET_PREFIX)]:
        del st.session_state[key]
    st.session_state[ANSWER_ERRORS_KEY] = {}


def set_notice(message: Optional[str]) -> None:
    st.session_state[NOTICE_KEY] = message


def pop_notice() -> Optional[str]:
    """Return the pending notice once, then clear it."""

    return st.session_state.pop(NOTICE_KEY, None)


def get_answer_errors() -> Dict[int, str]:
    return st.session_state.setdefault(ANSWER_ERRORS_KEY, {})


def set_answer_error(index: int, message: str) -> None:
    get_answer_errors()[index] = message


def clear_answer_error(index: int) -> None:
    get_answer_errors().pop(index, None)
