"""
feedpush.core - Foundation Layer
==================================

Foundational building blocks every other feedpush module depends on:

    - config:     Configuration management (FeedPushConfig and sections)
    - enums:      Statuses and kinds (ArtifactKind, UploadStatus, ...)
    - models:     Pydantic data models (BuildManifest, PushPolicy, UploadOutcome)
    - exceptions: Structured exception hierarchy
    - error_log:  Run-scoped error sink (RunErrorLog)
    - logging:    structlog configuration

Dependency Rule:
    core/ depends on NOTHING else in the feedpush package.
"""

from feedpush.core.config import (
    FeedConfig,
    FeedPushConfig,
    IssueTrackerConfig,
    RegistryConfig,
    ReleaseContext,
)
from feedpush.core.enums import (
    ArtifactKind,
    EscalationState,
    FailureReason,
    LocationType,
    UploadResult,
    UploadStatus,
)
from feedpush.core.error_log import ErrorEntry, RunErrorLog
from feedpush.core.exceptions import (
    ConfigurationError,
    FeedPushError,
    IssueTrackerError,
    ManifestError,
    RegistryError,
    TransportError,
)
from feedpush.core.models import (
    ArtifactRef,
    BlobArtifact,
    BuildIdentity,
    BuildManifest,
    PackageArtifact,
    PushPolicy,
    PushRunResult,
    UploadOutcome,
)

__all__ = [
    # Config
    "FeedPushConfig",
    "FeedConfig",
    "RegistryConfig",
    "IssueTrackerConfig",
    "ReleaseContext",
    # Enums
    "ArtifactKind",
    "UploadStatus",
    "FailureReason",
    "UploadResult",
    "LocationType",
    "EscalationState",
    # Error log
    "ErrorEntry",
    "RunErrorLog",
    # Models
    "ArtifactRef",
    "BuildIdentity",
    "PackageArtifact",
    "BlobArtifact",
    "BuildManifest",
    "PushPolicy",
    "UploadOutcome",
    "PushRunResult",
    # Exceptions
    "FeedPushError",
    "ConfigurationError",
    "ManifestError",
    "TransportError",
    "RegistryError",
    "IssueTrackerError",
]
