from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from survey_sdk.core.errors import EnqueueFailure
from survey_sdk.models.payload import SurveyPayload

logger = logging.getLogger(__name__)


class PayloadQueueInterface(Protocol):
    """Durable queue that delivers survey payloads when the network allows."""

    def enqueue(self, payload: SurveyPayload) -> None: ...


class FilePayloadQueue(PayloadQueueInterface):
    """File-backed store of payloads waiting for delivery.

    Delivery and retries belong to whatever drains the queue; this class only
    persists payloads and lets the consumer acknowledge them.
    """

    def __init__(self, storage_path: Path) -> None:
        self._path = Path(storage_path)
        self._lock = threading.Lock()

    def enqueue(self, payload: SurveyPayload) -> None:
        with self._lock:
            pending = self._read_all_unlocked()
            pending.append(payload.model_dump(mode="json"))
            self._write_all_unlocked(pending)
        logger.debug("Queued survey payload %s", payload.nonce)

    def pending(self) -> List[Dict[str, Any]]:
        """Return the queued payloads in submission order."""

        with self._lock:
            return self._read_all_unlocked()

    def acknowledge(self, nonce: str) -> bool:
        """Drop a delivered payload. Returns False when it was not queued."""

        with self._lock:
            pending = self._read_all_unlocked()
            remaining = [entry for entry in pending if entry.get("nonce") != nonce]
            if len(remaining) == len(pending):
                return False
            self._write_all_unlocked(remaining)
        return True

    def _read_all_unlocked(self) -> List[Dict[str, Any]]:
        if not self._path.is_file():
            return []
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise EnqueueFailure(f"Could not read payload queue {self._path}: {exc}") from exc
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            data = None
        if not isinstance(data, list):
            self._quarantine_unlocked()
            return []
        return data

    def _quarantine_unlocked(self) -> Path:
        """Move an unreadable queue file aside so its contents are not overwritten."""

        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
        target = self._path.with_name(f"{self._path.name}.corrupt-{stamp}")
        try:
            os.replace(self._path, target)
        except OSError as exc:
            raise EnqueueFailure(f"Could not move corrupt payload queue {self._path} aside: {exc}") from exc
        logger.warning("Payload queue at %s is corrupt; moved to %s", self._path, target)
        return target

    def _write_all_unlocked(self, pending: List[Dict[str, Any]]) -> None:
        # Write a sibling temp file and swap it in so a torn write never replaces the queue.
        tmp_name: Optional[str] = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(json.dumps(pending, indent=2))
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise EnqueueFailure(f"Could not write payload queue {self._path}: {exc}") from exc


_QUEUE_INSTANCE: Optional[PayloadQueueInterface] = None
_QUEUE_LOCK = threading.Lock()


def get_payload_queue() -> PayloadQueueInterface:
    """Return the shared payload queue instance."""

    global _QUEUE_INSTANCE
    if _QUEUE_INSTANCE is None:
        with _QUEUE_LOCK:
            if _QUEUE_INSTANCE is None:
                from survey_sdk.core.config import settings

                _QUEUE_INSTANCE = FilePayloadQueue(settings.payload_queue_path)
    return _QUEUE_INSTANCE


__all__ = [
    "PayloadQueueInterface",
    "FilePayloadQueue",
    "get_payload_queue",
]
