"""Explicit request lifecycle for one lookup input.

A ``LookupSession`` replaces independent loading/error/result flags with a
single status. Each ``begin`` issues a new ticket; completions carrying an
older ticket are ignored so the displayed state always reflects the latest
submitted query. Surfaces render from ``snapshot`` or subscribe a listener
that receives every applied transition.
"""

from __future__ import annotations

import enum
import itertools
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional


class LookupStatus(str, enum.Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class LookupSnapshot:
    status: LookupStatus
    query: Optional[str] = None
    result: Any = None
    error_message: Optional[str] = None


SnapshotListener = Callable[[LookupSnapshot], None]


class LookupSession:
    """Tracks the lifecycle of the most recent lookup for one input field.

    Ticket checks and state writes happen under one lock, so a completion
    racing a newer ``begin`` either lands before it or is discarded.
    """

    def __init__(self, listener: Optional[SnapshotListener] = None) -> None:
        self._lock = threading.Lock()
        self._tickets = itertools.count(1)
        self._current_ticket: Optional[int] = None
        self._snapshot = LookupSnapshot(status=LookupStatus.IDLE)
        self._listener = listener

    @property
    def snapshot(self) -> LookupSnapshot:
        with self._lock:
            return self._snapshot

    @property
    def status(self) -> LookupStatus:
        return self.snapshot.status

    def begin(self, query: str) -> int:
        """Move to PENDING for ``query``, clearing any prior result or error."""
        with self._lock:
            ticket = next(self._tickets)
            self._current_ticket = ticket
            snapshot = self._snapshot = LookupSnapshot(status=LookupStatus.PENDING, query=query)
        self._notify(snapshot)
        return ticket

    def succeed(self, ticket: int, result: Any) -> bool:
        """Record ``result`` if ``ticket`` is still current; return whether it applied."""
        with self._lock:
            if not self._accepts(ticket):
                return False
            snapshot = self._snapshot = LookupSnapshot(
                status=LookupStatus.SUCCEEDED,
                query=self._snapshot.query,
                result=result,
            )
        self._notify(snapshot)
        return True

    def fail(self, ticket: int, message: str) -> bool:
        with self._lock:
            if not self._accepts(ticket):
                return False
            snapshot = self._snapshot = LookupSnapshot(
                status=LookupStatus.FAILED,
                query=self._snapshot.query,
                error_message=message,
            )
        self._notify(snapshot)
        return True

    def reset(self) -> None:
        with self._lock:
            self._current_ticket = None
            snapshot = self._snapshot = LookupSnapshot(status=LookupStatus.IDLE)
        self._notify(snapshot)

    def _accepts(self, ticket: int) -> bool:
        # Caller holds ``_lock``.
        return (
            self._current_ticket is not None
            and ticket == self._current_ticket
            and self._snapshot.status is LookupStatus.PENDING
        )

    def _notify(self, snapshot: LookupSnapshot) -> None:
        if self._listener is not None:
            self._listener(snapshot)
