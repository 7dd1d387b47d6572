from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import httpx

from survey_sdk.core.errors import FetchFailure
from survey_sdk.models.survey import SurveyDefinition
from survey_sdk.services.survey_loader import SurveyLoader

logger = logging.getLogger(__name__)

SURVEYS_PATH = "/surveys/active"


class SurveyClientInterface(Protocol):
    """Source of survey definitions."""

    def get_survey_definition(self) -> SurveyDefinition | None:
        """Return the active survey, ``None`` when there is none.

        Raises ``FetchFailure`` on transport problems and
        ``MalformedQuestionError`` when the response cannot be parsed.
        """


class HttpSurveyClient(SurveyClientInterface):
    """Fetch survey definitions from the feedback backend over HTTP."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
        loader: SurveyLoader | None = None,
    ) -> None:
        if api_key is None or base_url is None or timeout is None:
            from survey_sdk.core.config import settings

            api_key = api_key or settings.api_key
            base_url = base_url or settings.api_base_url
            timeout = timeout if timeout is not None else settings.fetch_timeout

        if not api_key:
            raise ValueError("SURVEY_API_KEY is required for the HTTP survey client.")

        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Authorization": f"OAuth {api_key}", "Accept": "application/json"},
        )
        self._loader = loader or SurveyLoader()

    def get_survey_definition(self) -> SurveyDefinition | None:
        try:
            response = self._client.get(SURVEYS_PATH)
        except httpx.HTTPError as exc:
            raise FetchFailure(f"Survey request failed: {exc}") from exc

        if response.status_code in (204, 404):
            logger.debug("No active survey (HTTP %s)", response.status_code)
            return None

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchFailure(f"Survey request returned HTTP {response.status_code}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise FetchFailure("Survey response is not valid JSON") from exc

        return self._loader.parse(payload)

    def close(self) -> None:
        self._client.close()


class FileSurveyClient(SurveyClientInterface):
    """Serve a survey definition from a local JSON file."""

    def __init__(self, source: str | Path, *, loader: SurveyLoader | None = None) -> None:
        self._path = Path(source)
        self._loader = loader or SurveyLoader()

    def get_survey_definition(self) -> SurveyDefinition | None:
        try:
            return self._loader.load_file(self._path)
        except OSError as exc:
            raise FetchFailure(f"Could not read survey file {self._path}: {exc}") from exc


__all__ = [
    "SurveyClientInterface",
    "HttpSurveyClient",
    "FileSurveyClient",
]
