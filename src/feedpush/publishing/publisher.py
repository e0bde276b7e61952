"""
feedpush.publishing.publisher - Bounded-Concurrency Feed Publisher
====================================================================

The FeedPublisher uploads a batch of artifacts into the feed and returns one
UploadOutcome per artifact. It is the heart of a publishing run.

Architecture Context:

    ┌──────────────┐  publish(artifacts, policy)  ┌─────────────────────────┐
    │ Orchestrator │ ───────────────────────────→ │      FeedPublisher      │
    │              │ ←─ {artifact: UploadOutcome} │                         │
    └──────────────┘                              │  Semaphore(max_uploads) │
                                                  │   ┌───┐ ┌───┐ ┌───┐     │
                                                  │   │ w │ │ w │ │ w │ ... │──→ FeedTransport
                                                  │   └───┘ └───┘ └───┘     │
                                                  │  failures → RunErrorLog │
                                                  └─────────────────────────┘

Per-Artifact Decision Tree:

    local file missing? ──YES──→ FAILED(LOCAL_FILE_MISSING)
            │ NO
    allow_overwrite? ──YES──→ upload(overwrite=True) ──→ CREATED
            │ NO
    exists remotely? ──NO──→ upload(overwrite=False) ──→ CREATED
            │ YES                 (EXISTS on race → treat as existing)
    pass_if_existing_identical? ──NO──→ FAILED(ALREADY_EXISTS)
            │ YES
    fetch remote, compare SHA-256 ──same──→ SKIPPED_IDENTICAL
                                  ──diff──→ FAILED(CONTENT_MISMATCH)

Batch Guarantees:
    - At most ``policy.max_concurrent_uploads`` artifacts are in flight.
    - Each artifact is bounded by ``policy.upload_timeout_seconds``; a timeout
      is a FAILED(TIMEOUT) outcome, never a retry.
    - A failure never cancels siblings; the whole batch is drained and every
      submitted artifact gets exactly one outcome.
    - Every FAILED outcome is recorded once in the RunErrorLog.
"""

from __future__ import annotations

import asyncio
import hashlib
from collections.abc import Iterable
from pathlib import Path

import structlog

from feedpush.core.enums import ArtifactKind, FailureReason, UploadResult
from feedpush.core.error_log import RunErrorLog
from feedpush.core.exceptions import ConfigurationError, FeedPushError
from feedpush.core.models import ArtifactRef, PushPolicy, UploadOutcome
from feedpush.integrations.feed.base import FeedTransport
from feedpush.publishing.layout import ArtifactLayout


logger = structlog.get_logger()

HASH_CHUNK_SIZE = 64 * 1024


def file_sha256(path: Path, chunk_size: int = HASH_CHUNK_SIZE) -> str:
    """Compute the SHA-256 hex digest of a file, streaming in chunks."""
    sha256 = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            sha256.update(chunk)
    return sha256.hexdigest()


def content_matches(local_path: Path, remote_content: bytes) -> bool:
    """Return whether a local file has exactly the given content."""
    if local_path.stat().st_size != len(remote_content):
        return False
    return file_sha256(local_path) == hashlib.sha256(remote_content).hexdigest()


class FeedPublisher:
    """Publishes artifact batches into a feed.

    One publisher serves every artifact variant: the variant-specific parts
    (local path, remote address) come from the ArtifactLayout registered for
    that variant.

    Attributes:
        _transport: Feed storage transport.
        _error_log: Run error log receiving one entry per failed artifact.
        _layouts: ArtifactKind → ArtifactLayout.

    Example:
        >>> publisher = FeedPublisher(transport, error_log)
        >>> publisher.register_layout(PackageLayout("/build/packages"))
        >>> outcomes = await publisher.publish(manifest.packages, policy)
    """

    def __init__(
        self,
        transport: FeedTransport,
        error_log: RunErrorLog,
        layouts: Iterable[ArtifactLayout] = (),
    ) -> None:
        self._transport = transport
        self._error_log = error_log
        self._layouts: dict[ArtifactKind, ArtifactLayout] = {}
        for layout in layouts:
            self.register_layout(layout)
        self._logger = logger.bind(component="feed_publisher")

    def register_layout(self, layout: ArtifactLayout) -> None:
        self._layouts[layout.kind] = layout

    # =========================================================================
    # Batch
    # =========================================================================

    async def publish(
        self,
        artifacts: Iterable[ArtifactRef],
        policy: PushPolicy,
    ) -> dict[ArtifactRef, UploadOutcome]:
        """Publish a batch of artifacts.

        Args:
            artifacts: Artifacts to publish. Duplicates are published once.
            policy: Overwrite/idempotency/concurrency settings.

        Returns:
            Mapping from every submitted artifact to its outcome, in
            submission order.

        Raises:
            ConfigurationError: If the batch contains a variant with no
                registered layout. Raised before any upload starts.
        """
        batch = list(dict.fromkeys(artifacts))
        missing_kinds = {a.kind for a in batch} - set(self._layouts)
        if missing_kinds:
            raise ConfigurationError(
                message=f"No layout registered for: {sorted(k.value for k in missing_kinds)}",
                error_code="MISSING_LAYOUT",
            )
        if not batch:
            return {}

        self._logger.info(
            "publish_started",
            artifact_count=len(batch),
            max_concurrent_uploads=policy.max_concurrent_uploads,
            allow_overwrite=policy.allow_overwrite,
            pass_if_existing_identical=policy.pass_if_existing_identical,
        )

        semaphore = asyncio.Semaphore(policy.max_concurrent_uploads)
        outcomes: dict[ArtifactRef, UploadOutcome] = {}

        async def worker(artifact: ArtifactRef) -> None:
            async with semaphore:
                outcome = await self._publish_one(artifact, policy)
            self._settle(outcomes, artifact, outcome)

        results = await asyncio.gather(
            *(worker(artifact) for artifact in batch),
            return_exceptions=True,
        )

        # Anything a worker let escape still gets its one outcome
        for artifact, result in zip(batch, results):
            if isinstance(result, BaseException) and artifact not in outcomes:
                self._settle(
                    outcomes,
                    artifact,
                    UploadOutcome.failed(
                        FailureReason.TRANSPORT_ERROR,
                        f"{type(result).__name__}: {result}",
                    ),
                )

        failed = sum(1 for o in outcomes.values() if not o.succeeded)
        self._logger.info(
            "publish_finished",
            artifact_count=len(batch),
            succeeded=len(batch) - failed,
            failed=failed,
        )
        return {artifact: outcomes[artifact] for artifact in batch}

    def _settle(
        self,
        outcomes: dict[ArtifactRef, UploadOutcome],
        artifact: ArtifactRef,
        outcome: UploadOutcome,
    ) -> None:
        outcomes[artifact] = outcome
        if outcome.succeeded:
            self._logger.info(
                "upload_completed",
                artifact=artifact.display_name,
                kind=artifact.kind.value,
                status=outcome.status.value,
                remote_address=outcome.remote_address,
            )
            return
        self._error_log.record(
            f"Failed to publish {artifact.kind.value} {artifact.display_name}: {outcome.message}",
            code=f"UPLOAD_{outcome.reason.value.upper()}",
            details={
                "artifact": artifact.display_name,
                "remote_address": outcome.remote_address,
            },
        )

    # =========================================================================
    # Single Artifact
    # =========================================================================

    async def _publish_one(self, artifact: ArtifactRef, policy: PushPolicy) -> UploadOutcome:
        layout = self._layouts[artifact.kind]
        local_path = layout.local_path(artifact)
        remote_address = layout.remote_address(artifact)

        if not local_path.is_file():
            return UploadOutcome.failed(
                FailureReason.LOCAL_FILE_MISSING,
                f"Local file {local_path} does not exist",
                remote_address,
            )

        try:
            return await asyncio.wait_for(
                self._push(local_path, remote_address, policy),
                timeout=policy.upload_timeout_seconds,
            )
        except asyncio.TimeoutError:
            return UploadOutcome.failed(
                FailureReason.TIMEOUT,
                f"Upload to {remote_address} timed out after {policy.upload_timeout_seconds:g}s",
                remote_address,
            )
        except FeedPushError as e:
            return UploadOutcome.failed(FailureReason.TRANSPORT_ERROR, e.message, remote_address)
        except Exception as e:
            return UploadOutcome.failed(
                FailureReason.TRANSPORT_ERROR,
                f"{type(e).__name__}: {e}",
                remote_address,
            )

    async def _push(
        self,
        local_path: Path,
        remote_address: str,
        policy: PushPolicy,
    ) -> UploadOutcome:
        timeout = policy.upload_timeout_seconds

        if policy.allow_overwrite:
            result = await self._transport.upload(local_path, remote_address, True, timeout)
            return self._from_upload_result(result, remote_address)

        if await self._transport.exists(remote_address):
            return await self._handle_existing(local_path, remote_address, policy)

        result = await self._transport.upload(local_path, remote_address, False, timeout)
        if result == UploadResult.EXISTS:
            # Someone else wrote it between the existence check and the upload
            return await self._handle_existing(local_path, remote_address, policy)
        return self._from_upload_result(result, remote_address)

    async def _handle_existing(
        self,
        local_path: Path,
        remote_address: str,
        policy: PushPolicy,
    ) -> UploadOutcome:
        if not policy.pass_if_existing_identical:
            return UploadOutcome.failed(
                FailureReason.ALREADY_EXISTS,
                f"Item '{remote_address}' already exists in the feed and overwrite is not allowed",
                remote_address,
            )

        remote_content = await self._transport.fetch_content(remote_address)
        if await asyncio.to_thread(content_matches, local_path, remote_content):
            self._logger.debug("existing_item_identical", remote_address=remote_address)
            return UploadOutcome.skipped_identical(remote_address)

        return UploadOutcome.failed(
            FailureReason.CONTENT_MISMATCH,
            f"Item '{remote_address}' already exists in the feed with different content",
            remote_address,
        )

    @staticmethod
    def _from_upload_result(result: UploadResult, remote_address: str) -> UploadOutcome:
        if result == UploadResult.CREATED:
            return UploadOutcome.created(remote_address)
        return UploadOutcome.failed(
            FailureReason.TRANSPORT_ERROR,
            f"Transport reported '{result.value}' uploading {remote_address}",
            remote_address,
        )
