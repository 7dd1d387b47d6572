from __future__ import annotations

import logging
from typing import Callable

from survey_sdk.models.answers import AnswerSet
from survey_sdk.models.payload import SurveyPayload
from survey_sdk.models.survey import SurveyDefinition
from survey_sdk.services.payload_queue import PayloadQueueInterface

logger = logging.getLogger(__name__)


class SubmissionGateway:
    """Hand completed surveys to the delivery queue."""

    def __init__(
        self,
        queue: PayloadQueueInterface,
        *,
        on_submitted: Callable[[], None] | None = None,
    ) -> None:
        self._queue = queue
        self._on_submitted = on_submitted

    def submit(self, definition: SurveyDefinition, answers: AnswerSet) -> SurveyPayload:
        """Snapshot the answers, enqueue the payload and release survey state.

        Delivery is fire-and-forget: an enqueue failure is logged, never
        raised, and the survey state is released either way.
        """

        payload = SurveyPayload.build(definition, answers)
        try:
            self._queue.enqueue(payload)
        except Exception:
            logger.exception("Failed to enqueue payload %s for survey %s", payload.nonce, definition.id)
        else:
            logger.info(
                "Queued survey payload",
                extra={"survey_id": definition.id, "nonce": payload.nonce},
            )
        finally:
            if self._on_submitted is not None:
                self._on_submitted()
        return payload
