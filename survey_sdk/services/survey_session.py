from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from enum import Enum
from typing import Callable, Optional, Sequence

from survey_sdk.API.survey_client import SurveyClientInterface
from survey_sdk.core.errors import (
    FetchFailure,
    InvalidAnswerError,
    MalformedQuestionError,
    SurveyStateError,
)
from survey_sdk.models.answers import AnswerSet
from survey_sdk.models.payload import SurveyPayload
from survey_sdk.models.survey import Question, SurveyDefinition
from survey_sdk.services import completion
from survey_sdk.services.payload_queue import PayloadQueueInterface, get_payload_queue
from survey_sdk.services.submission import SubmissionGateway

logger = logging.getLogger(__name__)

FetchListener = Callable[[bool], None]


class SurveyState(str, Enum):
    NO_SURVEY = "no_survey"
    READY = "ready"
    IN_PROGRESS = "in_progress"


class SurveySession:
    """Owns the survey lifecycle: fetch, display, answer, submit or skip.

    Fetches are single-flight. While one is running, further ``fetch_survey``
    calls are dropped: they return ``None`` and their listeners are never
    called. The accepted call gets a ``Future`` resolving to the same boolean
    its listener receives.

    Everything except the fetch itself is synchronous and expected to run on
    one thread (the display layer's).
    """

    def __init__(
        self,
        client: SurveyClientInterface,
        *,
        queue: PayloadQueueInterface | None = None,
        executor: Executor | None = None,
    ) -> None:
        self._client = client
        self._gateway = SubmissionGateway(
            queue if queue is not None else get_payload_queue(),
            on_submitted=self.cleanup,
        )
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="survey-fetch")
        self._lock = threading.Lock()
        self._inflight: Optional[Future[bool]] = None
        self._definition: Optional[SurveyDefinition] = None
        self._answers: Optional[AnswerSet] = None

    # ------------------------------------------------------------------ fetch

    def fetch_survey(self, listener: FetchListener | None = None) -> Optional[Future[bool]]:
        """Start fetching the active survey in the background.

        Returns the future of the fetch, or ``None`` when another fetch is
        already in flight and this request was dropped.
        """

        with self._lock:
            if self._inflight is not None:
                logger.debug("Already fetching survey; dropping duplicate request")
                return None
            future: Future[bool] = Future()
            self._inflight = future

        logger.debug("Started survey fetch")
        try:
            self._executor.submit(self._run_fetch, future, listener)
        except RuntimeError:
            with self._lock:
                if self._inflight is future:
                    self._inflight = None
            future.cancel()
            raise
        return future

    @property
    def is_fetching(self) -> bool:
        with self._lock:
            return self._inflight is not None

    def _run_fetch(self, future: Future[bool], listener: FetchListener | None) -> None:
        definition: Optional[SurveyDefinition] = None
        try:
            definition = self._client.get_survey_definition()
        except (FetchFailure, MalformedQuestionError) as exc:
            logger.warning("Survey fetch failed: %s", exc)
        except Exception:
            logger.exception("Unexpected error while fetching survey")
        finally:
            with self._lock:
                if definition is not None:
                    self._definition = definition
                    self._answers = None
                if self._inflight is future:
                    self._inflight = None

        success = definition is not None
        logger.info("Survey fetch finished", extra={"success": success})
        if listener is not None:
            try:
                listener(success)
            except Exception:
                logger.exception("Survey fetch listener raised")
        future.set_result(success)

    # ---------------------------------------------------------------- display

    @property
    def state(self) -> SurveyState:
        if self._definition is None:
            return SurveyState.NO_SURVEY
        if self._answers is None:
            return SurveyState.READY
        return SurveyState.IN_PROGRESS

    def is_survey_ready(self) -> bool:
        return self._definition is not None

    @property
    def definition(self) -> Optional[SurveyDefinition]:
        return self._definition

    @property
    def questions(self) -> Sequence[Question]:
        return self._require_definition().questions

    @property
    def answers(self) -> Optional[AnswerSet]:
        return self._answers

    def show(self) -> AnswerSet:
        """Begin displaying the ready survey with a fresh answer set."""

        definition = self._require_definition()
        self._answers = AnswerSet(definition.id)
        logger.debug("Displaying survey %s", definition.id)
        return self._answers

    def is_skippable(self) -> bool:
        return not self._require_definition().required

    def success_message(self) -> Optional[str]:
        """Return the message to show once the survey is sent, if any."""

        definition = self._require_definition()
        if definition.show_success_message and definition.success_message:
            return definition.success_message
        return None

    # ---------------------------------------------------------------- answers

    def set_answer(self, question_index: int, *values: str) -> bool:
        """Record an answer and return whether the survey is now complete.

        Values that are all blank clear the question. Anything else must pass
        the question's validation or ``InvalidAnswerError`` is raised and the
        answer set is left untouched.
        """

        answers = self._require_answers()
        try:
            question = self._require_definition().question(question_index)
        except KeyError as exc:
            raise InvalidAnswerError(f"Unknown question {question_index}") from exc

        if not values:
            raise InvalidAnswerError("At least one value is required")
        if any(not isinstance(value, str) for value in values):
            raise InvalidAnswerError("Answer values must be strings")

        if any(value.strip() for value in values) and not question.is_answer_valid(values):
            raise InvalidAnswerError(f"Answer rejected for question {question_index}: {list(values)!r}")

        answers.set_answer(question_index, *values)
        return self.is_complete()

    def is_complete(self) -> bool:
        definition = self._definition
        if definition is None:
            return False
        answers = self._answers if self._answers is not None else AnswerSet(definition.id)
        return completion.is_complete(definition, answers)

    # -------------------------------------------------------------- lifecycle

    def submit(self) -> SurveyPayload:
        """Queue the completed survey for delivery and release it."""

        answers = self._require_answers()
        definition = self._require_definition()
        if not completion.is_complete(definition, answers):
            missing = completion.missing_required(definition, answers)
            raise SurveyStateError(f"Required questions are unanswered: {missing}")
        return self._gateway.submit(definition, answers)

    def skip(self) -> None:
        """Dismiss an optional survey without sending anything."""

        definition = self._require_definition()
        if definition.required:
            raise SurveyStateError("This survey is required and cannot be skipped")
        logger.info("Survey skipped", extra={"survey_id": definition.id})
        self.cleanup()

    def cleanup(self) -> None:
        """Forget the current survey and answers. Safe to call repeatedly."""

        with self._lock:
            self._definition = None
            self._answers = None

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def _require_definition(self) -> SurveyDefinition:
        definition = self._definition
        if definition is None:
            raise SurveyStateError("No survey is ready")
        return definition

    def _require_answers(self) -> AnswerSet:
        answers = self._answers
        if answers is None:
            raise SurveyStateError("The survey has not been shown yet")
        return answers
