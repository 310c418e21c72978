"""JSONL lookup log with size-based rotation.

Each completed lookup is appended as one ``LookupRecord`` line so failed
queries and upstream latency can be inspected after the fact. Records are
dataclasses so the schema stays visible in code while still producing plain
JSON objects.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, IO, Optional


def _utc_now() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


@dataclass
class LookupRecord:
    """WHAT: structured schema for a single lookup.

    HOW: dataclass storing the submitted text, the tool that ran, its outcome,
    plus a ``new`` factory that stamps the timestamp.
    """

    timestamp: str
    query: str
    tool_name: str
    success: bool
    latency_ms: int
    policy: Optional[str] = None
    error: Optional[str] = None
    message: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def new(
        cls,
        *,
        query: str,
        tool_name: str,
        success: bool,
        latency_ms: int,
        policy: Optional[str] = None,
        error: Optional[str] = None,
        message: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> "LookupRecord":
        return cls(
            timestamp=_utc_now(),
            query=query,
            tool_name=tool_name,
            success=success,
            latency_ms=latency_ms,
            policy=policy,
            error=error,
            message=message,
            latitude=latitude,
            longitude=longitude,
        )


class LookupLogger:
    """WHAT: append-only JSONL logger for lookup records.

    HOW: accept the log path plus rotation settings, expose ``log_lookup``,
    and keep write/rotation logic private.
    """

    def __init__(
        self,
        *,
        log_path: Path,
        enabled: bool = True,
        max_bytes: int = 0,
        backup_count: int = 0,
    ) -> None:
        self._log_path = log_path
        self._enabled = enabled
        self._max_bytes = max_bytes
        self._backup_count = backup_count

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def log_path(self) -> Path:
        return self._log_path

    def log_lookup(self, record: LookupRecord) -> None:
        """Persist ``record`` unless logging is disabled."""

        if not self._enabled:
            return
        self._append_json_line(self._log_path, asdict(record))

    def _append_json_line(self, path: Path, payload: Dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(payload, ensure_ascii=False)
        encoded = line.encode("utf-8")
        self._rotate_if_needed(path, len(encoded) + 1)
        with self._open_file(path) as handle:
            handle.write(line)
            handle.write("\n")

    @staticmethod
    def _open_file(path: Path) -> IO[str]:
        return path.open("a", encoding="utf-8")

    def _rotate_if_needed(self, path: Path, incoming_bytes: int) -> None:
        """WHAT: enforce ``max_bytes`` on the log file.

        HOW: when the next write would exceed the limit, shift numbered
        backups up by one (``lookups.jsonl.1`` → ``.2``) and move the live file
        to ``.1``; with no backups configured the live file is deleted.
        """
        if self._max_bytes <= 0:
            return
        if not path.exists():
            return

        current_size = path.stat().st_size
        if current_size + incoming_bytes <= self._max_bytes:
            return

        if self._backup_count <= 0:
            path.unlink()
            return

        for index in range(self._backup_count - 1, 0, -1):
            src = Path(f"{path}.{index}")
            dst = Path(f"{path}.{index + 1}")
            if src.exists():
                src.replace(dst)

        rotated = Path(f"{path}.1")
        if rotated.exists():
            rotated.unlink()
        path.replace(rotated)
