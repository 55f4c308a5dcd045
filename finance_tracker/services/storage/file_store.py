"""
Local File Storage Implementation

DESIGN DECISION: The "cookie jar" is a single JSON file in the state
directory, so the session and the transaction list survive an app reload.
Each entry records its own expiry, just like a browser cookie.

TRADEOFFS:
- Single user, single process (no locking)
- The whole jar is rewritten on every change (fine at this data scale)

Writes go to a temp file and are swapped in with os.replace, retried a
few times on OSError (e.g. a virus scanner briefly holding the file).
"""

import json
import os
import time
from pathlib import Path
from typing import Callable, Optional

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_tracker.models.audit import AuditEvent
from finance_tracker.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStoreInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)

JAR_FILENAME = "cookies.json"
AUDIT_FILENAME = "audit.jsonl"


class FileKeyValueStore(KeyValueStoreInterface):
    """
    JSON-file-backed key-value store with per-entry expiry.

    File layout:
        {"<key>": {"value": "<string>", "expires_at": <epoch seconds or null>}}
    """

    def __init__(
        self,
        state_dir: Path,
        clock: Callable[[], float] = time.time,
    ):
        self._state_dir = Path(state_dir)
        self._path = self._state_dir / JAR_FILENAME
        self._clock = clock

    @property
    def path(self) -> Path:
        return self._path

    def _read_jar(self) -> dict[str, dict]:
        """Load the jar, dropping it entirely if the file is unreadable."""
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(
                "cookie_jar_unreadable",
                path=str(self._path),
                error=str(e),
            )
            return {}
        if not isinstance(data, dict):
            logger.warning("cookie_jar_unreadable", path=str(self._path), error="not an object")
            return {}
        return data

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _write_jar(self, jar: dict[str, dict]) -> None:
        self._state_dir.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(jar), encoding="utf-8")
        os.replace(tmp_path, self._path)

    def _save(self, jar: dict[str, dict]) -> None:
        try:
            self._write_jar(jar)
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}")

    @staticmethod
    def _is_malformed(entry: object) -> bool:
        if not isinstance(entry, dict):
            return True
        expires_at = entry.get("expires_at")
        if expires_at is None:
            return False
        return isinstance(expires_at, bool) or not isinstance(expires_at, (int, float))

    def _purge_expired(self, jar: dict[str, dict]) -> bool:
        """
        Drop expired and malformed entries in place.

        Returns True if anything was removed.
        """
        now = self._clock()
        malformed = [key for key, entry in jar.items() if self._is_malformed(entry)]
        if malformed:
            logger.warning(
                "cookie_jar_entries_dropped",
                path=str(self._path),
                keys=malformed,
            )
        expired = malformed + [
            key for key, entry in jar.items()
            if key not in malformed
            and entry.get("expires_at") is not None
            and now >= entry["expires_at"]
        ]
        for key in expired:
            del jar[key]
        return bool(expired)

    def get(self, key: str) -> Optional[str]:
        jar = self._read_jar()
        if self._purge_expired(jar):
            self._save(jar)
        entry = jar.get(key)
        if entry is None:
            return None
        value = entry.get("value")
        return value if isinstance(value, str) else None

    def set(
        self,
        key: str,
        value: str,
        max_age_seconds: Optional[int] = None,
    ) -> None:
        jar = self._read_jar()
        self._purge_expired(jar)
        jar[key] = {
            "value": value,
            "expires_at": (
                self._clock() + max_age_seconds
                if max_age_seconds is not None
                else None
            ),
        }
        self._save(jar)

    def delete(self, key: str) -> None:
        jar = self._read_jar()
        if key in jar:
            del jar[key]
            self._save(jar)


class JsonLinesAuditStorage(AuditStorageInterface):
    """Append-only audit log, one JSON object per line."""

    def __init__(self, state_dir: Path):
        self._path = Path(state_dir) / AUDIT_FILENAME

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _append_line(self, line: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")

    def append_event(self, event: AuditEvent) -> bool:
        try:
            self._append_line(event.to_json_line())
            return True
        except OSError as e:
            raise StorageError(f"Failed to append audit event: {e}")

    def get_recent_events(self, limit: int = 100) -> list[dict]:
        if not self._path.exists():
            return []
        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise StorageError(f"Failed to read audit log: {e}")

        events = []
        for line in reversed(lines):
            if len(events) >= limit:
                break
            try:
                events.append(json.loads(line))
            except ValueError:
                continue
        return events
