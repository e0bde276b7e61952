"""
feedpush.publishing.orchestrator - Publishing Run Pipeline
============================================================

The PublishingOrchestrator runs one publishing run end to end and reports a
single boolean: did the run finish without logging an error?

Pipeline:
    1. Validate inputs            ─┐ failures here skip steps 3-5, so no
    2. Parse the build manifest   ─┘ feed or registry call is made
    3. Fetch the registry build record (once)
    4. Packages: validate base path → publish → reconcile
    5. Blobs:    validate base path → publish → reconcile
    6. Errors logged in 1-5 → escalate (one tracking issue)
    7. Result = error log is empty

Error Boundary:
    run() never raises. Expected failures are recorded where they happen;
    anything unexpected is caught here, recorded and escalated like any
    other failure.

Every run gets a fresh RunErrorLog, so one orchestrator can be run several
times without leaking errors between runs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import structlog

from feedpush.core.config import FeedPushConfig
from feedpush.core.error_log import RunErrorLog
from feedpush.core.exceptions import FeedPushError
from feedpush.core.models import (
    ArtifactRef,
    BuildIdentity,
    BuildManifest,
    PushPolicy,
    PushRunResult,
    UploadOutcome,
)
from feedpush.integrations.feed.base import FeedTransport
from feedpush.integrations.issues.base import IssueTracker
from feedpush.integrations.registry.base import BuildAssetRegistry, BuildRecord
from feedpush.manifest.parser import load_manifest
from feedpush.publishing.escalator import FailureEscalator
from feedpush.publishing.layout import ArtifactLayout, BlobLayout, PackageLayout
from feedpush.publishing.publisher import FeedPublisher
from feedpush.publishing.reconciler import RegistryReconciler


logger = structlog.get_logger()


class PublishingOrchestrator:
    """Runs publishing runs against a set of collaborators.

    Args:
        config: Run configuration.
        transport: Feed storage transport.
        registry: Build-asset registry client.
        issue_tracker: Issue tracker used for escalation.

    Example:
        >>> orchestrator = PublishingOrchestrator(config, transport, registry, tracker)
        >>> result = await orchestrator.run()
        >>> result.succeeded
        True
    """

    def __init__(
        self,
        config: FeedPushConfig,
        transport: FeedTransport,
        registry: BuildAssetRegistry,
        issue_tracker: IssueTracker,
    ) -> None:
        self._config = config
        self._transport = transport
        self._registry = registry
        self._issue_tracker = issue_tracker
        self._logger = logger.bind(component="publishing_orchestrator")

    async def execute(self) -> bool:
        """Run once and return whether no error was logged."""
        result = await self.run()
        return result.succeeded

    async def run(self) -> PushRunResult:
        """Run the full pipeline once. Never raises."""
        error_log = RunErrorLog()
        outcomes: dict[ArtifactRef, UploadOutcome] = {}
        identity: Optional[BuildIdentity] = None

        self._logger.info(
            "run_started",
            manifest_path=self._config.manifest_path,
            feed_url=self._config.feed.url,
        )

        try:
            manifest = None
            if self._validate_inputs(error_log):
                manifest = load_manifest(self._config.manifest_path, error_log)
            if manifest is not None:
                identity = manifest.identity
                await self._publish_manifest(
                    manifest, self._config.to_push_policy(), error_log, outcomes
                )
        except Exception as e:
            self._logger.exception("run_crashed", error=str(e))
            error_log.record_exception(e, context="Unexpected failure while publishing")

        issue_id = None
        if error_log.has_errors:
            escalator = FailureEscalator(
                issue_tracker=self._issue_tracker,
                release=self._config.release,
                issue_repository=self._config.issues.repository,
                notify_handles=self._config.issues.notify_handles,
                error_log=error_log,
            )
            issue_id = await escalator.escalate(identity)

        return self._finish(error_log, outcomes, issue_id)

    # =========================================================================
    # Pipeline Steps
    # =========================================================================

    def _validate_inputs(self, error_log: RunErrorLog) -> bool:
        config = self._config
        problems: list[tuple[str, str]] = []

        if not (config.feed.url or "").strip():
            problems.append(("MISSING_FEED_URL", "The target feed URL must be set"))
        if not (config.feed.account_key or "").strip():
            problems.append(("MISSING_ACCOUNT_KEY", "The feed account key must be set"))
        if not config.manifest_path or not Path(config.manifest_path).is_file():
            problems.append((
                "MANIFEST_NOT_FOUND",
                f"Problem reading asset manifest path from '{config.manifest_path}'",
            ))
        if config.max_concurrent_uploads <= 0:
            problems.append((
                "INVALID_CONCURRENCY",
                f"Max concurrent uploads must be positive, got {config.max_concurrent_uploads}",
            ))
        if config.upload_timeout_minutes <= 0:
            problems.append((
                "INVALID_TIMEOUT",
                f"Upload timeout must be positive, got {config.upload_timeout_minutes} minutes",
            ))
        if config.registry.build_id is None:
            problems.append(("MISSING_BUILD_ID", "The registry build id must be set"))

        for code, message in problems:
            error_log.record(message, code=code)
        return not problems

    async def _publish_manifest(
        self,
        manifest: BuildManifest,
        policy: PushPolicy,
        error_log: RunErrorLog,
        outcomes: dict[ArtifactRef, UploadOutcome],
    ) -> None:
        try:
            build_record = await self._registry.get_build(self._config.registry.build_id)
        except FeedPushError as e:
            error_log.record_exception(e, context="Failed to fetch the build from the registry")
            return

        batches = [
            (manifest.packages, self._config.package_assets_base_path, PackageLayout, "package"),
            (manifest.blobs, self._config.blob_assets_base_path, BlobLayout, "blob"),
        ]
        for artifacts, base_path, layout_cls, label in batches:
            if not artifacts:
                continue
            if not base_path or not Path(base_path).is_dir():
                error_log.record(
                    f"Invalid {label} assets base path: '{base_path}'",
                    code="INVALID_BASE_PATH",
                    details={"kind": label, "base_path": base_path},
                )
                return
            batch_outcomes = await self._publish_and_reconcile(
                artifacts,
                layout_cls(base_path),
                policy,
                build_record,
                error_log,
            )
            outcomes.update(batch_outcomes)

    async def _publish_and_reconcile(
        self,
        artifacts: list[ArtifactRef],
        layout: ArtifactLayout,
        policy: PushPolicy,
        build_record: BuildRecord,
        error_log: RunErrorLog,
    ) -> dict[ArtifactRef, UploadOutcome]:
        publisher = FeedPublisher(self._transport, error_log, layouts=[layout])
        batch_outcomes = await publisher.publish(artifacts, policy)

        reconciler = RegistryReconciler(self._registry, error_log)
        report = await reconciler.reconcile(batch_outcomes, build_record, self._config.feed.url)
        self._logger.info(
            "batch_reconciled",
            kind=layout.kind.value,
            base_path=str(layout.base_path),
            registered=len(report.registered),
            unmatched=len(report.unmatched),
            failed=len(report.failed),
            skipped=len(report.skipped),
            clean=report.clean,
        )
        return batch_outcomes

    def _finish(
        self,
        error_log: RunErrorLog,
        outcomes: dict[ArtifactRef, UploadOutcome],
        issue_id: Optional[int] = None,
    ) -> PushRunResult:
        result = PushRunResult(
            succeeded=not error_log.has_errors,
            errors=error_log.messages,
            outcomes=outcomes,
            issue_id=issue_id,
        )
        self._logger.info(
            "run_finished",
            succeeded=result.succeeded,
            error_count=len(result.errors),
            artifact_count=len(outcomes),
            issue_id=issue_id,
        )
        return result
