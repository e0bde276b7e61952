"""
feedpush.publishing - Publishing Run Components
=================================================

    - ArtifactLayout / PackageLayout / BlobLayout:  Local and remote addressing.
    - FeedPublisher:           Bounded-concurrency uploads with overwrite and
                               idempotent-skip semantics.
    - RegistryReconciler:      Records feed locations in the build-asset registry.
    - FailureEscalator:        Files one tracking issue for a failed run.
    - PublishingOrchestrator:  Runs the whole pipeline and reports success.
"""

from feedpush.publishing.escalator import (
    AUTHOR_PLACEHOLDER,
    MAX_ERRORS_IN_ISSUE,
    FailureEscalator,
    compose_issue,
)
from feedpush.publishing.layout import (
    ArtifactLayout,
    BlobLayout,
    PackageLayout,
)
from feedpush.publishing.orchestrator import PublishingOrchestrator
from feedpush.publishing.publisher import FeedPublisher, content_matches, file_sha256
from feedpush.publishing.reconciler import ReconcileReport, RegistryReconciler

__all__ = [
    "AUTHOR_PLACEHOLDER",
    "MAX_ERRORS_IN_ISSUE",
    "ArtifactLayout",
    "BlobLayout",
    "FailureEscalator",
    "FeedPublisher",
    "PackageLayout",
    "PublishingOrchestrator",
    "ReconcileReport",
    "RegistryReconciler",
    "compose_issue",
    "content_matches",
    "file_sha256",
]
