"""
feedpush.core.enums - Type-Safe Enumerations
==============================================

All enums inherit from both `str` and `Enum`, which means:
    - They serialize to strings in JSON/YAML (Pydantic-friendly)
    - They can be compared with plain strings: UploadStatus.CREATED == "created"

    ┌─────────────────────────────────────────────────────────────────┐
    │  MANIFEST        ArtifactKind: package vs. blob                 │
    ├─────────────────────────────────────────────────────────────────┤
    │  PUBLISHING      UploadStatus / FailureReason: per-artifact     │
    │                  UploadResult: raw transport answer             │
    ├─────────────────────────────────────────────────────────────────┤
    │  REGISTRY        LocationType: kind of location recorded        │
    ├─────────────────────────────────────────────────────────────────┤
    │  ESCALATION      EscalationState: escalator state machine       │
    └─────────────────────────────────────────────────────────────────┘
"""

from enum import Enum


# =============================================================================
# Artifact Kind
# =============================================================================
class ArtifactKind(str, Enum):
    """The two artifact variants a build manifest can describe.

    PACKAGE artifacts are pushed into the package feed's flat container and
    are identified by (id, version). BLOB artifacts are loose files pushed
    under the feed's assets directory and are identified by id alone.
    """

    PACKAGE = "package"
    BLOB = "blob"


# =============================================================================
# Upload Status
# =============================================================================
# Every artifact submitted to the FeedPublisher ends in exactly one of these.
#
#   CREATED           → object written (new, or overwritten by policy)
#   SKIPPED_IDENTICAL → object already existed with identical content
#   FAILED            → see FailureReason
# =============================================================================
class UploadStatus(str, Enum):
    """Final status of one artifact upload."""

    CREATED = "created"
    SKIPPED_IDENTICAL = "skipped_identical"
    FAILED = "failed"


class FailureReason(str, Enum):
    """Why an upload ended in UploadStatus.FAILED."""

    ALREADY_EXISTS = "already_exists"           # Exists remotely, overwrite not allowed
    CONTENT_MISMATCH = "content_mismatch"       # Exists remotely with different bytes
    TRANSPORT_ERROR = "transport_error"         # Storage call failed
    TIMEOUT = "timeout"                         # Upload exceeded the per-upload timeout
    LOCAL_FILE_MISSING = "local_file_missing"   # Nothing to upload at the local path


# =============================================================================
# Transport Upload Result
# =============================================================================
class UploadResult(str, Enum):
    """Raw answer of a FeedTransport.upload() call.

    EXISTS is only returned for non-overwrite uploads whose destination is
    already occupied; the publisher then applies the existing-item policy.
    """

    CREATED = "created"
    EXISTS = "exists"
    FAILED = "failed"


# =============================================================================
# Registry Location Type
# =============================================================================
class LocationType(str, Enum):
    """Kind of storage location recorded against a registry asset.

    Values match the registry's wire names.
    """

    NUGET_FEED = "NugetFeed"
    CONTAINER = "Container"


# =============================================================================
# Escalation State
# =============================================================================
# State machine of the FailureEscalator:
#
#   IDLE → RESOLVING_AUTHOR → CREATING_ISSUE → DONE
#
# DONE is terminal; a second escalate() call on the same escalator is a no-op.
# =============================================================================
class EscalationState(str, Enum):
    """Lifecycle states of a FailureEscalator."""

    IDLE = "idle"
    RESOLVING_AUTHOR = "resolving_author"
    CREATING_ISSUE = "creating_issue"
    DONE = "done"
