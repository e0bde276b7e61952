"""
feedpush.core.models - Core Data Models
=========================================

This module defines the Pydantic data models that flow through every
component of a publishing run.

Model Hierarchy:
    BuildIdentity     → Which build produced the artifacts? (repo, commit, id)
    PackageArtifact   → A package to push (id, version)
    BlobArtifact      → A loose file to push (id)
    BuildManifest     → Identity + all artifacts of a build
    PushPolicy        → How to push (overwrite, idempotency, concurrency)
    UploadOutcome     → What happened to one artifact
    PushRunResult     → What happened to the whole run

Data Flow:
    ┌──────────────┐  BuildManifest  ┌──────────────┐  outcomes  ┌──────────────┐
    │   Manifest   │ ──────────────→ │     Feed     │ ─────────→ │   Registry   │
    │    Parser    │                 │   Publisher  │            │  Reconciler  │
    └──────────────┘                 └──────────────┘            └──────────────┘

Artifact references are frozen (immutable and hashable) so they can key the
outcome mapping returned by the publisher.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from feedpush.core.enums import ArtifactKind, FailureReason, UploadStatus


# =============================================================================
# Build Identity
# =============================================================================
class BuildIdentity(BaseModel):
    """Identity of the build that produced the artifacts.

    Loaded once from the manifest and only used for failure reporting
    (the escalation issue links back to the repository, commit and build).

    Attributes:
        repo_url: Source repository URL (GitHub or Azure DevOps).
        commit_sha: Commit the build was produced from.
        build_id: CI build identifier.
        branch: Source branch, when the manifest records it.
        build_number: Human-facing CI build number, when recorded.
    """

    model_config = {"frozen": True}

    repo_url: str = Field(description="Source repository URL")
    commit_sha: str = Field(description="Commit SHA the build was produced from")
    build_id: str = Field(description="CI build identifier")
    branch: Optional[str] = Field(default=None, description="Source branch")
    build_number: Optional[str] = Field(default=None, description="CI build number")


# =============================================================================
# Artifact References
# =============================================================================
# Two variants with different identity keys:
#   PackageArtifact  → (id, version)
#   BlobArtifact     → id
# Paths are NOT stored on the artifact. They are produced by an ArtifactLayout
# (see feedpush.publishing.layout) so the same publish routine serves both.
# =============================================================================
class PackageArtifact(BaseModel):
    """A versioned package listed in the build manifest.

    Example:
        >>> PackageArtifact(id="Contoso.Sdk", version="1.2.3").key
        ('Contoso.Sdk', '1.2.3')
    """

    model_config = {"frozen": True}

    id: str = Field(min_length=1, description="Package identifier")
    version: str = Field(min_length=1, description="Package version")

    @property
    def kind(self) -> ArtifactKind:
        return ArtifactKind.PACKAGE

    @property
    def key(self) -> tuple[str, str]:
        return (self.id, self.version)

    @property
    def display_name(self) -> str:
        return f"{self.id} {self.version}"


class BlobArtifact(BaseModel):
    """A loose file listed in the build manifest.

    The id is a relative path such as ``"sdk/1.0/contoso-sdk.zip"``; the
    local file is looked up by its base name and the remote object lives
    under the feed's assets directory at the full id.
    """

    model_config = {"frozen": True}

    id: str = Field(min_length=1, description="Blob identifier (relative path)")

    @property
    def kind(self) -> ArtifactKind:
        return ArtifactKind.BLOB

    @property
    def key(self) -> str:
        return self.id

    @property
    def display_name(self) -> str:
        return self.id


ArtifactRef = Union[PackageArtifact, BlobArtifact]


# =============================================================================
# Build Manifest
# =============================================================================
class BuildManifest(BaseModel):
    """In-memory form of a build manifest: identity plus artifact lists."""

    identity: BuildIdentity
    packages: list[PackageArtifact] = Field(default_factory=list)
    blobs: list[BlobArtifact] = Field(default_factory=list)

    @property
    def artifact_count(self) -> int:
        return len(self.packages) + len(self.blobs)


# =============================================================================
# Push Policy
# =============================================================================
class PushPolicy(BaseModel):
    """How artifacts are pushed to the feed.

    Existing-item behaviour:
        allow_overwrite=True
            Always overwrite; pass_if_existing_identical is ignored.
        allow_overwrite=False, pass_if_existing_identical=True
            Download the existing object; identical → skip, different → fail.
        allow_overwrite=False, pass_if_existing_identical=False
            Any existing object fails the upload.

    Attributes:
        allow_overwrite: Replace objects that already exist in the feed.
        pass_if_existing_identical: Treat byte-identical existing objects
            as success when overwrite is not allowed.
        max_concurrent_uploads: Upper bound on uploads in flight.
        upload_timeout_seconds: Timeout for a single upload.
    """

    model_config = {"frozen": True}

    allow_overwrite: bool = False
    pass_if_existing_identical: bool = False
    max_concurrent_uploads: int = Field(default=8, gt=0)
    upload_timeout_seconds: float = Field(default=300.0, gt=0)


# =============================================================================
# Upload Outcome
# =============================================================================
class UploadOutcome(BaseModel):
    """Result of publishing one artifact.

    Attributes:
        status: CREATED, SKIPPED_IDENTICAL or FAILED.
        reason: Set only when status is FAILED.
        message: Human-readable detail for failures.
        remote_address: Feed-relative address the artifact was pushed to.
    """

    status: UploadStatus
    reason: Optional[FailureReason] = None
    message: Optional[str] = None
    remote_address: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        """True for CREATED and SKIPPED_IDENTICAL."""
        return self.status != UploadStatus.FAILED

    @classmethod
    def created(cls, remote_address: Optional[str] = None) -> UploadOutcome:
        return cls(status=UploadStatus.CREATED, remote_address=remote_address)

    @classmethod
    def skipped_identical(cls, remote_address: Optional[str] = None) -> UploadOutcome:
        return cls(status=UploadStatus.SKIPPED_IDENTICAL, remote_address=remote_address)

    @classmethod
    def failed(
        cls,
        reason: FailureReason,
        message: str,
        remote_address: Optional[str] = None,
    ) -> UploadOutcome:
        return cls(
            status=UploadStatus.FAILED,
            reason=reason,
            message=message,
            remote_address=remote_address,
        )


# =============================================================================
# Run Result
# =============================================================================
class PushRunResult(BaseModel):
    """Top-level result of one orchestrator run.

    ``succeeded`` is True exactly when no error was logged during the run.
    Whether escalation itself worked does not affect it; ``issue_id`` only
    reports the tracking issue that was filed, if any.
    """

    model_config = {"arbitrary_types_allowed": True}

    succeeded: bool
    errors: list[str] = Field(default_factory=list)
    outcomes: dict[Any, UploadOutcome] = Field(default_factory=dict)
    issue_id: Optional[int] = None
