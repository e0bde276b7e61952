"""
Shared Test Fixtures for feedpush
===================================

This module provides reusable pytest fixtures used across the entire
test suite. Fixtures are organized by layer:

    1. Core fixtures (error log, policies)
    2. File fixtures (asset directories, manifests)
    3. Integration fixtures (in-memory transport, registry, issue tracker)
    4. Run fixtures (configuration wired to the fixtures above)
"""

from __future__ import annotations

from pathlib import Path

import pytest

from feedpush.core.config import (
    FeedConfig,
    FeedPushConfig,
    IssueTrackerConfig,
    RegistryConfig,
    ReleaseContext,
)
from feedpush.core.error_log import RunErrorLog
from feedpush.core.models import BuildIdentity, PushPolicy
from feedpush.integrations.feed.memory import InMemoryFeedTransport
from feedpush.integrations.issues.memory import InMemoryIssueTracker
from feedpush.integrations.registry.memory import InMemoryBuildAssetRegistry


REPO_URL = "https://github.com/contoso/sdk"
COMMIT_SHA = "6f1c2e9d0b7a4c3e8f5a1b2c3d4e5f60718293a4"
BUILD_ID = "20240101.3"
REGISTRY_BUILD_ID = 4242
FEED_URL = "memory://feed"


# =============================================================================
# Helpers
# =============================================================================
def write_package(base: Path, package_id: str, version: str, content: bytes) -> Path:
    """Write ``<base>/<id>.<version>.nupkg`` and return its path."""
    base.mkdir(parents=True, exist_ok=True)
    path = base / f"{package_id}.{version}.nupkg"
    path.write_bytes(content)
    return path


def write_xml_manifest(
    path: Path,
    packages: list[tuple[str, str]] = (),
    blobs: list[str] = (),
) -> Path:
    """Write an XML build manifest for the standard test build."""
    lines = [
        f'<Build Name="{REPO_URL}" Commit="{COMMIT_SHA}" BuildId="{BUILD_ID}" '
        f'Branch="refs/heads/main">'
    ]
    lines += [f'  <Package Id="{pid}" Version="{version}" />' for pid, version in packages]
    lines += [f'  <Blob Id="{blob_id}" />' for blob_id in blobs]
    lines.append("</Build>")
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


# =============================================================================
# Core
# =============================================================================

@pytest.fixture
def error_log():
    """Fresh RunErrorLog."""
    return RunErrorLog()


@pytest.fixture
def identity():
    """Identity of the standard test build."""
    return BuildIdentity(repo_url=REPO_URL, commit_sha=COMMIT_SHA, build_id=BUILD_ID)


@pytest.fixture
def strict_policy():
    """Neither overwrite nor identical-skip."""
    return PushPolicy(max_concurrent_uploads=4, upload_timeout_seconds=5)


@pytest.fixture
def idempotent_policy():
    """No overwrite, byte-identical existing items pass."""
    return PushPolicy(
        pass_if_existing_identical=True,
        max_concurrent_uploads=4,
        upload_timeout_seconds=5,
    )


@pytest.fixture
def overwrite_policy():
    """Overwrite everything."""
    return PushPolicy(allow_overwrite=True, max_concurrent_uploads=4, upload_timeout_seconds=5)


# =============================================================================
# Files
# =============================================================================

@pytest.fixture
def package_dir(tmp_path):
    """Empty directory for package files."""
    path = tmp_path / "packages"
    path.mkdir()
    return path


@pytest.fixture
def blob_dir(tmp_path):
    """Empty directory for blob files."""
    path = tmp_path / "blobs"
    path.mkdir()
    return path


# =============================================================================
# Integrations
# =============================================================================

@pytest.fixture
def transport():
    """Fresh InMemoryFeedTransport."""
    return InMemoryFeedTransport(FEED_URL)


@pytest.fixture
def registry():
    """Fresh InMemoryBuildAssetRegistry with no builds."""
    return InMemoryBuildAssetRegistry()


@pytest.fixture
def issue_tracker():
    """InMemoryIssueTracker that knows the author of the standard commit."""
    tracker = InMemoryIssueTracker(first_issue_id=101)
    tracker.set_author(REPO_URL, COMMIT_SHA, "@octocat")
    return tracker


# =============================================================================
# Run Configuration
# =============================================================================

@pytest.fixture
def run_config(tmp_path, package_dir, blob_dir):
    """FeedPushConfig pointing at the fixture directories.

    The manifest file itself is written by each test at ``tmp_path / "manifest.xml"``.
    """
    return FeedPushConfig(
        manifest_path=str(tmp_path / "manifest.xml"),
        package_assets_base_path=str(package_dir),
        blob_assets_base_path=str(blob_dir),
        pass_if_existing_identical=True,
        max_concurrent_uploads=4,
        upload_timeout_minutes=1,
        feed=FeedConfig(url=FEED_URL, account_key="test-key"),
        registry=RegistryConfig(endpoint="memory://registry", build_id=REGISTRY_BUILD_ID),
        issues=IssueTrackerConfig(
            provider="memory",
            repository="https://github.com/contoso/release-issues",
            notify_handles=["@contoso/release"],
        ),
        release=ReleaseContext(
            pipeline_url="https://ci.contoso.dev/release/77",
            description="SDK 1.2.3",
            triggered_by_build_url="https://ci.contoso.dev/build/3",
        ),
    )
