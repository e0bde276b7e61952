"""
feedpush.integrations.feed.base - Abstract Feed Transport Interface
=====================================================================

The contract every feed storage backend implements. The FeedPublisher never
talks to storage directly; it only uses these three operations:

    upload(local_path, remote_address, overwrite, timeout) → UploadResult
    exists(remote_address)                                 → bool
    fetch_content(remote_address)                          → bytes

    ┌───────────────┐     upload()     ┌──────────────────┐
    │ FeedPublisher │ ───────────────→ │  FeedTransport   │
    │               │ ←─ UploadResult ─│  (abstract)      │
    └───────────────┘                  └────────┬─────────┘
                                                │
                          ┌─────────────────────┼─────────────────────┐
                          │                     │                     │
                    ┌─────▼─────┐       ┌───────▼───────┐     ┌───────▼───────┐
                    │ InMemory  │       │ LocalDirectory│     │     Http      │
                    └───────────┘       └───────────────┘     └───────────────┘

Remote addresses are feed-relative, forward-slash paths such as
``flatcontainer/contoso.sdk/1.2.3/contoso.sdk.1.2.3.nupkg`` or
``assets/sdk/contoso-sdk.zip``.

Implementations either return UploadResult.FAILED or raise TransportError
for storage failures; the publisher treats both the same way.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from feedpush.core.enums import UploadResult


class FeedTransport(ABC):
    """Abstract base class for feed storage transports.

    Attributes:
        feed_url: The URL the feed was configured with. Recorded as the
            artifact location in the build-asset registry.
    """

    def __init__(self, feed_url: str) -> None:
        self._feed_url = feed_url

    @property
    def feed_url(self) -> str:
        return self._feed_url

    @abstractmethod
    async def upload(
        self,
        local_path: Path,
        remote_address: str,
        overwrite: bool,
        timeout: Optional[float] = None,
    ) -> UploadResult:
        """Write a local file to the feed.

        Args:
            local_path: File to upload.
            remote_address: Feed-relative destination.
            overwrite: Replace an existing object. When False and the
                destination is occupied, nothing is written and
                UploadResult.EXISTS is returned.
            timeout: Optional per-request timeout in seconds.

        Returns:
            CREATED, EXISTS or FAILED.
        """
        ...

    @abstractmethod
    async def exists(self, remote_address: str) -> bool:
        """Return whether an object exists at ``remote_address``."""
        ...

    @abstractmethod
    async def fetch_content(self, remote_address: str) -> bytes:
        """Download the object at ``remote_address``.

        Only used to compare an existing object with the local artifact.

        Raises:
            TransportError: If the object cannot be downloaded.
        """
        ...

    async def close(self) -> None:
        """Release network resources. No-op by default."""
        return None
