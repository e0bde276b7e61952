"""
feedpush.core.exceptions - Custom Exception Hierarchy
=======================================================

This module defines the structured exception hierarchy for feedpush.
Collaborators (manifest parser, feed transports, registry client, issue
tracker) raise these; the publishing components catch them and turn them
into per-artifact outcomes or run error log entries.

Exception Hierarchy:
    FeedPushError (base)
        ├── ConfigurationError   - Invalid or missing options
        ├── ManifestError        - Unreadable or malformed build manifest
        ├── TransportError       - Feed storage upload/download failures
        ├── RegistryError        - Build-asset registry failures
        └── IssueTrackerError    - Issue tracker failures

Error Flow in a Publishing Run:
    Transport raises TransportError
        → FeedPublisher converts it to UploadOutcome(FAILED, TRANSPORT_ERROR)
        → FeedPublisher records the failure in the RunErrorLog
        → Orchestrator sees a non-empty log
        → FailureEscalator files a tracking issue

Usage:
    >>> from feedpush.core.exceptions import TransportError
    >>> raise TransportError(
    ...     message="PUT assets/sdk.zip returned 503",
    ...     error_code="UPLOAD_FAILED",
    ...     details={"status_code": 503},
    ... )
"""

from __future__ import annotations

from typing import Any, Optional


# =============================================================================
# Base Exception
# =============================================================================
# All feedpush exceptions inherit from this base class, so callers can catch
# every framework-specific failure with a single except clause.
# =============================================================================
class FeedPushError(Exception):
    """Base exception for all feedpush errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code. Convention: UPPER_SNAKE_CASE
            (e.g., "UPLOAD_FAILED", "ASSET_NOT_REGISTERED").
        details: Arbitrary dict with additional debugging context.

    Example:
        >>> try:
        ...     await transport.upload(path, "assets/a.zip", overwrite=False)
        ... except FeedPushError as e:
        ...     print(f"[{e.error_code}] {e.message}")
    """

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize this exception to a dictionary.

        Returns:
            Dictionary with error_type, message, error_code, and details.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


# =============================================================================
# Configuration Error
# =============================================================================
class ConfigurationError(FeedPushError):
    """Raised when feedpush configuration is invalid or missing.

    Common Causes:
        - Feed URL or storage credential not set
        - Feed URL scheme not supported by any transport
        - Non-positive concurrency or timeout values
    """

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIG_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


# =============================================================================
# Manifest Error
# =============================================================================
class ManifestError(FeedPushError):
    """Raised when a build manifest cannot be read or understood.

    Attributes:
        manifest_path: Path of the manifest that failed to parse.

    Example:
        >>> raise ManifestError(
        ...     message="Package element is missing the 'Version' attribute",
        ...     manifest_path="/build/manifest.xml",
        ...     error_code="MISSING_ATTRIBUTE",
        ... )
    """

    def __init__(
        self,
        message: str,
        manifest_path: str,
        error_code: str = "MANIFEST_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["manifest_path"] = manifest_path

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.manifest_path = manifest_path


# =============================================================================
# Transport Error
# =============================================================================
# Raised by FeedTransport implementations. The publisher never lets one of
# these escape: it becomes a FAILED outcome for the artifact involved.
# =============================================================================
class TransportError(FeedPushError):
    """Raised when the feed storage transport fails.

    Attributes:
        remote_address: Feed-relative address of the object involved.

    Common Causes:
        - Storage service returned a server error
        - Network connection dropped mid-upload
        - Credential rejected by the storage account
    """

    def __init__(
        self,
        message: str,
        remote_address: Optional[str] = None,
        error_code: str = "TRANSPORT_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        if remote_address:
            enriched_details["remote_address"] = remote_address

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.remote_address = remote_address


# =============================================================================
# Registry Error
# =============================================================================
class RegistryError(FeedPushError):
    """Raised when the build-asset registry cannot be queried or updated."""

    def __init__(
        self,
        message: str,
        error_code: str = "REGISTRY_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


# =============================================================================
# Issue Tracker Error
# =============================================================================
class IssueTrackerError(FeedPushError):
    """Raised when the issue tracker rejects a lookup or an issue creation."""

    def __init__(
        self,
        message: str,
        error_code: str = "ISSUE_TRACKER_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)
