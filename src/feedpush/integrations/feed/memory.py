"""
feedpush.integrations.feed.memory - In-Memory Feed Transport
==============================================================

A dict-backed FeedTransport for tests, examples and dry runs.

Test Hooks:
    - seed(address, content):    pre-populate the feed
    - fail_address(address):     make uploads to an address fail
    - delay_address(address, s): make uploads to an address slow
    - upload_calls / fetch_calls: every call, for assertions
    - max_in_flight:             highest number of concurrent uploads seen

Usage:
    >>> transport = InMemoryFeedTransport()
    >>> transport.seed("assets/a.zip", b"existing")
    >>> await transport.exists("assets/a.zip")
    True
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Optional

import structlog

from feedpush.core.enums import UploadResult
from feedpush.core.exceptions import TransportError
from feedpush.integrations.feed.base import FeedTransport


logger = structlog.get_logger()


class InMemoryFeedTransport(FeedTransport):
    """In-memory feed transport.

    Attributes:
        _objects: Feed-relative address → stored bytes.
        _failing: Addresses whose uploads raise TransportError.
        _delays: Address → seconds to sleep before completing an upload.
        _upload_calls: One record per upload() call.
        _fetch_calls: Addresses passed to fetch_content().
    """

    def __init__(self, feed_url: str = "memory://feed") -> None:
        super().__init__(feed_url)
        self._objects: dict[str, bytes] = {}
        self._failing: set[str] = set()
        self._delays: dict[str, float] = {}
        self._upload_calls: list[dict[str, Any]] = []
        self._fetch_calls: list[str] = []
        self._in_flight = 0
        self._max_in_flight = 0
        self._logger = logger.bind(component="in_memory_feed_transport")

    # =========================================================================
    # Test Hooks
    # =========================================================================

    def seed(self, remote_address: str, content: bytes) -> None:
        self._objects[remote_address] = content

    def fail_address(self, remote_address: str) -> None:
        self._failing.add(remote_address)

    def delay_address(self, remote_address: str, seconds: float) -> None:
        self._delays[remote_address] = seconds

    def get(self, remote_address: str) -> Optional[bytes]:
        return self._objects.get(remote_address)

    @property
    def objects(self) -> dict[str, bytes]:
        return dict(self._objects)

    @property
    def upload_calls(self) -> list[dict[str, Any]]:
        return self._upload_calls

    @property
    def fetch_calls(self) -> list[str]:
        return self._fetch_calls

    @property
    def max_in_flight(self) -> int:
        return self._max_in_flight

    # =========================================================================
    # FeedTransport
    # =========================================================================

    async def upload(
        self,
        local_path: Path,
        remote_address: str,
        overwrite: bool,
        timeout: Optional[float] = None,
    ) -> UploadResult:
        self._upload_calls.append({
            "local_path": Path(local_path),
            "remote_address": remote_address,
            "overwrite": overwrite,
        })
        self._in_flight += 1
        self._max_in_flight = max(self._max_in_flight, self._in_flight)
        try:
            delay = self._delays.get(remote_address, 0.0)
            # Yield even without a delay so uploads genuinely interleave
            await asyncio.sleep(delay)

            if remote_address in self._failing:
                raise TransportError(
                    message=f"Simulated storage failure for {remote_address}",
                    remote_address=remote_address,
                    error_code="UPLOAD_FAILED",
                )

            if not overwrite and remote_address in self._objects:
                return UploadResult.EXISTS

            self._objects[remote_address] = Path(local_path).read_bytes()
            self._logger.debug("object_stored", remote_address=remote_address)
            return UploadResult.CREATED
        finally:
            self._in_flight -= 1

    async def exists(self, remote_address: str) -> bool:
        return remote_address in self._objects

    async def fetch_content(self, remote_address: str) -> bytes:
        self._fetch_calls.append(remote_address)
        if remote_address not in self._objects:
            raise TransportError(
                message=f"No object at {remote_address}",
                remote_address=remote_address,
                error_code="NOT_FOUND",
            )
        return self._objects[remote_address]
