"""
feedpush.core.error_log - Run-Scoped Error Log
================================================

The RunErrorLog is the single sink for every failure of a publishing run:
upload failures, registry integrity misses, escalation problems and anything
unexpected caught at the orchestrator boundary.

    ┌───────────────┐
    │ FeedPublisher │ ──┐
    └───────────────┘   │  record()    ┌─────────────┐   has_errors   ┌──────────────┐
    ┌───────────────┐   ├────────────→ │ RunErrorLog │ ─────────────→ │ Orchestrator │
    │  Reconciler   │ ──┤              └─────────────┘                └──────────────┘
    └───────────────┘   │
    ┌───────────────┐   │
    │   Escalator   │ ──┘
    └───────────────┘

Many producers, one consumer. A fresh log is created for every run and passed
explicitly into each component; there is no process-wide error state.

Appends take a lock so producers running in worker threads (e.g. transports
that offload blocking I/O) can record safely alongside event-loop coroutines.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from pydantic import BaseModel, Field

from feedpush.core.exceptions import FeedPushError


logger = structlog.get_logger()


class ErrorEntry(BaseModel):
    """One recorded error.

    Attributes:
        message: Human-readable description (what ends up in the issue body).
        code: Machine-readable code, UPPER_SNAKE_CASE.
        details: Structured context for diagnostics.
        recorded_at: When the error was recorded (UTC).
    """

    message: str
    code: str = "ERROR"
    details: dict[str, Any] = Field(default_factory=dict)
    recorded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class RunErrorLog:
    """Append-only, ordered error log for one publishing run.

    Example:
        >>> log = RunErrorLog()
        >>> log.record("Asset with Id Foo isn't registered", code="ASSET_NOT_REGISTERED")
        >>> log.has_errors
        True
        >>> log.messages
        ["Asset with Id Foo isn't registered"]
    """

    def __init__(self) -> None:
        self._entries: list[ErrorEntry] = []
        self._lock = threading.Lock()
        self._logger = logger.bind(component="run_error_log")

    # =========================================================================
    # Producers
    # =========================================================================

    def record(
        self,
        message: str,
        code: str = "ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> ErrorEntry:
        """Append an error message to the log.

        Args:
            message: Human-readable description of the failure.
            code: Machine-readable error code.
            details: Optional structured context.

        Returns:
            The recorded ErrorEntry.
        """
        entry = ErrorEntry(message=message, code=code, details=details or {})
        with self._lock:
            self._entries.append(entry)
        self._logger.error("run_error_recorded", code=code, error=message)
        return entry

    def record_exception(self, exc: BaseException, context: str = "") -> ErrorEntry:
        """Append an exception, keeping the structured fields of FeedPushErrors."""
        prefix = f"{context}: " if context else ""
        if isinstance(exc, FeedPushError):
            return self.record(
                f"{prefix}{exc.message}",
                code=exc.error_code,
                details=exc.details,
            )
        return self.record(
            f"{prefix}{type(exc).__name__}: {exc}",
            code="UNEXPECTED_ERROR",
            details={"exception_type": type(exc).__name__},
        )

    # =========================================================================
    # Consumer
    # =========================================================================

    @property
    def has_errors(self) -> bool:
        with self._lock:
            return bool(self._entries)

    @property
    def entries(self) -> list[ErrorEntry]:
        """Snapshot of the recorded entries, oldest first."""
        with self._lock:
            return list(self._entries)

    @property
    def messages(self) -> list[str]:
        return [entry.message for entry in self.entries]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[ErrorEntry]:
        return iter(self.entries)
