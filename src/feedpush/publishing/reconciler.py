"""
feedpush.publishing.reconciler - Build-Asset Registry Reconciliation
======================================================================

After a batch is published, each artifact that landed in the feed is matched
to the asset the build registered, and the feed is recorded as a new
location of that asset.

Matching Rules:
    Package  → asset.name == id AND asset.version == version, exactly one
    Blob     → asset.name == id, first match wins

Packages must be unambiguous because a package id can be registered under
several versions. Blob names are unique paths in practice, so the first
match is accepted.

A miss (or an ambiguous package) is an integrity error: it is recorded in the
run error log and reconciliation moves on to the next artifact. Failed
uploads are never reconciled.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Optional

import structlog
from pydantic import BaseModel, Field

from feedpush.core.enums import ArtifactKind, LocationType
from feedpush.core.error_log import RunErrorLog
from feedpush.core.exceptions import FeedPushError
from feedpush.core.models import ArtifactRef, UploadOutcome
from feedpush.integrations.registry.base import (
    AssetRecord,
    BuildAssetRegistry,
    BuildRecord,
)


logger = structlog.get_logger()


class ReconcileReport(BaseModel):
    """Summary of one reconciliation pass.

    Attributes:
        registered: Display names of artifacts whose location was added.
        unmatched: Display names with no (or no unique) registry asset.
        failed: Display names whose location update the registry rejected.
        skipped: Display names not eligible because their upload failed.
    """

    registered: list[str] = Field(default_factory=list)
    unmatched: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.unmatched and not self.failed


class RegistryReconciler:
    """Records feed locations for published artifacts in the registry."""

    def __init__(self, registry: BuildAssetRegistry, error_log: RunErrorLog) -> None:
        self._registry = registry
        self._error_log = error_log
        self._logger = logger.bind(component="registry_reconciler")

    async def reconcile(
        self,
        outcomes: Mapping[ArtifactRef, UploadOutcome],
        build_record: BuildRecord,
        feed_url: str,
    ) -> ReconcileReport:
        """Add ``feed_url`` as a location for every successfully published artifact.

        Args:
            outcomes: Publisher outcomes keyed by artifact.
            build_record: The registry's view of the build.
            feed_url: Location recorded for each matched asset.

        Returns:
            A ReconcileReport. Problems are also recorded in the error log;
            this method does not raise for them.
        """
        report = ReconcileReport()

        for artifact, outcome in outcomes.items():
            if not outcome.succeeded:
                report.skipped.append(artifact.display_name)
                continue

            asset = self._match(artifact, build_record)
            if asset is None:
                report.unmatched.append(artifact.display_name)
                continue

            try:
                await self._registry.add_asset_location(
                    asset.id,
                    feed_url,
                    LocationType.NUGET_FEED,
                )
            except FeedPushError as e:
                self._error_log.record(
                    f"Failed to add location of {artifact.display_name} "
                    f"to asset {asset.id} in build {build_record.id}: {e.message}",
                    code="ADD_LOCATION_FAILED",
                    details={"asset_id": asset.id, "build_id": build_record.id},
                )
                report.failed.append(artifact.display_name)
                continue

            report.registered.append(artifact.display_name)
            self._logger.debug(
                "asset_location_recorded",
                artifact=artifact.display_name,
                asset_id=asset.id,
                location=feed_url,
            )

        self._logger.info(
            "reconcile_finished",
            build_id=build_record.id,
            registered=len(report.registered),
            unmatched=len(report.unmatched),
            failed=len(report.failed),
            skipped=len(report.skipped),
        )
        return report

    def _match(self, artifact: ArtifactRef, build_record: BuildRecord) -> Optional[AssetRecord]:
        if artifact.kind == ArtifactKind.PACKAGE:
            matches = [
                asset
                for asset in build_record.assets
                if asset.name == artifact.id and asset.version == artifact.version
            ]
            if len(matches) == 1:
                return matches[0]
            if not matches:
                self._integrity_error(
                    f"Asset with Id {artifact.id}, Version {artifact.version} "
                    f"isn't registered on build {build_record.id}",
                    artifact,
                    build_record,
                )
            else:
                self._integrity_error(
                    f"Asset with Id {artifact.id}, Version {artifact.version} "
                    f"is registered {len(matches)} times on build {build_record.id}",
                    artifact,
                    build_record,
                )
            return None

        asset = next((a for a in build_record.assets if a.name == artifact.id), None)
        if asset is None:
            self._integrity_error(
                f"Asset with Id {artifact.id} isn't registered on build {build_record.id}",
                artifact,
                build_record,
            )
        return asset

    def _integrity_error(
        self,
        message: str,
        artifact: ArtifactRef,
        build_record: BuildRecord,
    ) -> None:
        self._logger.warning(
            "integrity_error",
            artifact=artifact.display_name,
            build_id=build_record.id,
        )
        self._error_log.record(
            message,
            code="ASSET_NOT_REGISTERED",
            details={"artifact": artifact.display_name, "build_id": build_record.id},
        )
