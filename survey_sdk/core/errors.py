from __future__ import annotations


class SurveyError(RuntimeError):
    """Base class for every error raised by the survey engine."""


class MalformedQuestionError(SurveyError, ValueError):
    """Raised when a survey definition cannot be built from its source data."""


class FetchFailure(SurveyError):
    """Raised by survey clients when the definition could not be retrieved."""


class InvalidAnswerError(SurveyError, ValueError):
    """Raised when an answer is rejected by its question's validation rules."""


class EnqueueFailure(SurveyError):
    """Raised by a payload queue that failed to persist a payload."""


class SurveyStateError(SurveyError):
    """Raised when a lifecycle operation is called in the wrong state."""


__all__ = [
    "SurveyError",
    "MalformedQuestionError",
    "FetchFailure",
    "InvalidAnswerError",
    "EnqueueFailure",
    "SurveyStateError",
]
