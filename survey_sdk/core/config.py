from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _strip_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def _float_or_default(value: Optional[str], default: float) -> float:
    cleaned = _strip_or_none(value)
    if cleaned is None:
        return default
    try:
        return float(cleaned)
    except ValueError as exc:
        raise RuntimeError(f"Expected a number but got {cleaned!r}.") from exc


class Settings:

    def __init__(self) -> None:
        # Only the HTTP client needs a key; offline sessions run without one.
        self.api_key = _strip_or_none(os.getenv("SURVEY_API_KEY"))

        base_url = _strip_or_none(os.getenv("SURVEY_API_BASE_URL")) or "http://localhost:8000"
        self.api_base_url = base_url.rstrip("/")

        self.fetch_timeout = _float_or_default(os.getenv("SURVEY_FETCH_TIMEOUT"), 30.0)

        queue_path = _strip_or_none(os.getenv("SURVEY_PAYLOAD_QUEUE_PATH")) or "survey_sdk/data/pending_payloads.json"
        self.payload_queue_path = Path(queue_path).expanduser().resolve()

        survey_path = _strip_or_none(os.getenv("SURVEY_FILE_PATH"))
        self.survey_file_path = Path(survey_path).expanduser().resolve() if survey_path else None

        self.log_level = (_strip_or_none(os.getenv("LOG_LEVEL")) or "INFO").upper()


settings = Settings()
