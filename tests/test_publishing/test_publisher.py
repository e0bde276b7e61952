"""
Tests for feedpush.publishing.publisher
=========================================

These tests verify the FeedPublisher against an InMemoryFeedTransport.

What's Being Tested:
    - Completeness: one outcome per submitted artifact, whatever fails
    - Existing-item handling under each policy (overwrite / identical / strict)
    - Timeouts, transport failures and missing local files
    - The concurrency bound
    - Error log entries for failed artifacts
"""

import hashlib
from pathlib import Path

import pytest

from feedpush.core.enums import FailureReason, UploadResult, UploadStatus
from feedpush.core.exceptions import ConfigurationError
from feedpush.core.models import BlobArtifact, PackageArtifact, PushPolicy
from feedpush.integrations.feed.memory import InMemoryFeedTransport
from feedpush.publishing.layout import BlobLayout, PackageLayout
from feedpush.publishing.publisher import FeedPublisher, content_matches, file_sha256

from tests.conftest import write_package


# =============================================================================
# Helpers
# =============================================================================
def _address(package_id: str, version: str) -> str:
    pid, ver = package_id.lower(), version.lower()
    return f"flatcontainer/{pid}/{ver}/{pid}.{ver}.nupkg"


class _RacingTransport(InMemoryFeedTransport):
    """Never admits an item exists, so conflicts surface on upload."""

    async def exists(self, remote_address: str) -> bool:
        return False


class _RejectingTransport(InMemoryFeedTransport):
    """Reports FAILED for every upload without raising."""

    async def upload(self, local_path, remote_address, overwrite, timeout=None):
        return UploadResult.FAILED


@pytest.fixture
def publisher(transport, error_log, package_dir, blob_dir):
    return FeedPublisher(
        transport,
        error_log,
        layouts=[PackageLayout(package_dir), BlobLayout(blob_dir)],
    )


@pytest.fixture
def three_packages(package_dir):
    """P1..P3 written to disk with distinct content."""
    packages = []
    for n in (1, 2, 3):
        write_package(package_dir, f"Contoso.P{n}", "1.0.0", f"package {n}".encode())
        packages.append(PackageArtifact(id=f"Contoso.P{n}", version="1.0.0"))
    return packages


# =============================================================================
# Tests: Fresh Uploads and Completeness
# =============================================================================
class TestPublishBasics:
    """Tests for uploads into an empty feed."""

    async def test_all_created(self, publisher, transport, three_packages, strict_policy) -> None:
        outcomes = await publisher.publish(three_packages, strict_policy)

        assert list(outcomes) == three_packages
        assert all(o.status == UploadStatus.CREATED for o in outcomes.values())
        assert transport.get(_address("Contoso.P1", "1.0.0")) == b"package 1"

    async def test_non_overwrite_uploads_are_conditional(
        self, publisher, transport, three_packages, strict_policy
    ) -> None:
        await publisher.publish(three_packages, strict_policy)
        assert all(call["overwrite"] is False for call in transport.upload_calls)

    async def test_empty_batch(self, publisher, strict_policy) -> None:
        assert await publisher.publish([], strict_policy) == {}

    async def test_duplicates_published_once(
        self, publisher, transport, three_packages, strict_policy
    ) -> None:
        batch = three_packages + [PackageArtifact(id="Contoso.P1", version="1.0.0")]
        outcomes = await publisher.publish(batch, strict_policy)
        assert len(outcomes) == 3
        assert len(transport.upload_calls) == 3

    async def test_every_artifact_gets_an_outcome_despite_failures(
        self, publisher, transport, error_log, three_packages, strict_policy
    ) -> None:
        transport.fail_address(_address("Contoso.P2", "1.0.0"))

        outcomes = await publisher.publish(three_packages, strict_policy)

        assert len(outcomes) == 3
        failed = outcomes[three_packages[1]]
        assert failed.status == UploadStatus.FAILED
        assert failed.reason == FailureReason.TRANSPORT_ERROR
        assert outcomes[three_packages[0]].succeeded
        assert outcomes[three_packages[2]].succeeded
        assert len(error_log) == 1
        assert "Contoso.P2 1.0.0" in error_log.messages[0]

    async def test_blobs(self, publisher, transport, blob_dir, strict_policy) -> None:
        (blob_dir / "sdk.zip").write_bytes(b"zip")
        blob = BlobArtifact(id="sdk/1.0/sdk.zip")

        outcomes = await publisher.publish([blob], strict_policy)

        assert outcomes[blob].status == UploadStatus.CREATED
        assert transport.get("assets/sdk/1.0/sdk.zip") == b"zip"

    async def test_missing_local_file(self, publisher, transport, error_log, strict_policy) -> None:
        ghost = PackageArtifact(id="Ghost", version="0.1")
        outcomes = await publisher.publish([ghost], strict_policy)

        assert outcomes[ghost].reason == FailureReason.LOCAL_FILE_MISSING
        assert transport.upload_calls == []
        assert error_log.entries[0].code == "UPLOAD_LOCAL_FILE_MISSING"

    async def test_missing_layout_raises_before_uploading(
        self, transport, error_log, package_dir, strict_policy
    ) -> None:
        publisher = FeedPublisher(transport, error_log, layouts=[PackageLayout(package_dir)])
        with pytest.raises(ConfigurationError) as exc_info:
            await publisher.publish([BlobArtifact(id="a.zip")], strict_policy)
        assert exc_info.value.error_code == "MISSING_LAYOUT"
        assert transport.upload_calls == []


# =============================================================================
# Tests: Existing Items
# =============================================================================
class TestExistingItems:
    """Tests for the overwrite / identical-skip / strict protocol."""

    async def test_overwrite_dominates(
        self, publisher, transport, three_packages, overwrite_policy
    ) -> None:
        transport.seed(_address("Contoso.P2", "1.0.0"), b"something else entirely")

        outcomes = await publisher.publish(three_packages, overwrite_policy)

        assert outcomes[three_packages[1]].status == UploadStatus.CREATED
        assert transport.get(_address("Contoso.P2", "1.0.0")) == b"package 2"
        assert transport.fetch_calls == []

    async def test_identical_existing_is_skipped(
        self, publisher, transport, three_packages, idempotent_policy
    ) -> None:
        transport.seed(_address("Contoso.P2", "1.0.0"), b"package 2")

        outcomes = await publisher.publish(three_packages, idempotent_policy)

        assert outcomes[three_packages[0]].status == UploadStatus.CREATED
        assert outcomes[three_packages[1]].status == UploadStatus.SKIPPED_IDENTICAL
        assert outcomes[three_packages[2]].status == UploadStatus.CREATED
        uploaded = {call["remote_address"] for call in transport.upload_calls}
        assert _address("Contoso.P2", "1.0.0") not in uploaded

    async def test_different_existing_is_a_mismatch(
        self, publisher, transport, error_log, three_packages, idempotent_policy
    ) -> None:
        transport.seed(_address("Contoso.P2", "1.0.0"), b"package 2, rebuilt")

        outcomes = await publisher.publish(three_packages, idempotent_policy)

        assert outcomes[three_packages[1]].reason == FailureReason.CONTENT_MISMATCH
        # The existing object is left alone
        assert transport.get(_address("Contoso.P2", "1.0.0")) == b"package 2, rebuilt"
        assert len(error_log) == 1

    async def test_strict_mode_fails_without_fetching(
        self, publisher, transport, three_packages, strict_policy
    ) -> None:
        transport.seed(_address("Contoso.P2", "1.0.0"), b"package 2")

        outcomes = await publisher.publish(three_packages, strict_policy)

        assert outcomes[three_packages[1]].reason == FailureReason.ALREADY_EXISTS
        assert transport.fetch_calls == []

    async def test_upload_race_follows_existing_protocol(
        self, error_log, package_dir, idempotent_policy
    ) -> None:
        transport = _RacingTransport()
        publisher = FeedPublisher(transport, error_log, layouts=[PackageLayout(package_dir)])
        write_package(package_dir, "A", "1.0", b"same")
        transport.seed(_address("A", "1.0"), b"same")

        outcomes = await publisher.publish([PackageArtifact(id="A", version="1.0")], idempotent_policy)

        assert outcomes[PackageArtifact(id="A", version="1.0")].status == UploadStatus.SKIPPED_IDENTICAL
        assert transport.fetch_calls == [_address("A", "1.0")]

    async def test_transport_reported_failure(self, error_log, package_dir, strict_policy) -> None:
        publisher = FeedPublisher(
            _RejectingTransport(), error_log, layouts=[PackageLayout(package_dir)]
        )
        write_package(package_dir, "A", "1.0", b"a")

        outcomes = await publisher.publish([PackageArtifact(id="A", version="1.0")], strict_policy)

        assert outcomes[PackageArtifact(id="A", version="1.0")].reason == FailureReason.TRANSPORT_ERROR
        assert error_log.entries[0].code == "UPLOAD_TRANSPORT_ERROR"


# =============================================================================
# Tests: Timeouts and Concurrency
# =============================================================================
class TestTimeoutsAndConcurrency:
    """Tests for per-upload timeouts and the in-flight bound."""

    async def test_hung_upload_times_out_while_siblings_complete(
        self, publisher, transport, three_packages
    ) -> None:
        transport.delay_address(_address("Contoso.P3", "1.0.0"), 5)
        policy = PushPolicy(max_concurrent_uploads=3, upload_timeout_seconds=0.1)

        outcomes = await publisher.publish(three_packages, policy)

        assert outcomes[three_packages[2]].reason == FailureReason.TIMEOUT
        assert outcomes[three_packages[0]].succeeded
        assert outcomes[three_packages[1]].succeeded
        assert transport.get(_address("Contoso.P3", "1.0.0")) is None

    async def test_in_flight_never_exceeds_limit(self, publisher, transport, package_dir) -> None:
        packages = []
        for n in range(12):
            write_package(package_dir, f"Pkg{n}", "1.0", b"x")
            transport.delay_address(_address(f"Pkg{n}", "1.0"), 0.02)
            packages.append(PackageArtifact(id=f"Pkg{n}", version="1.0"))
        policy = PushPolicy(max_concurrent_uploads=3, upload_timeout_seconds=5)

        outcomes = await publisher.publish(packages, policy)

        assert all(o.succeeded for o in outcomes.values())
        assert transport.max_in_flight == 3

    async def test_serial_when_limit_is_one(self, publisher, transport, three_packages) -> None:
        policy = PushPolicy(max_concurrent_uploads=1, upload_timeout_seconds=5)
        await publisher.publish(three_packages, policy)
        assert transport.max_in_flight == 1


# =============================================================================
# Tests: Hashing Helpers
# =============================================================================
class TestContentComparison:
    """Tests for file_sha256() and content_matches()."""

    def test_file_sha256(self, tmp_path) -> None:
        path = tmp_path / "f.bin"
        path.write_bytes(b"hello" * 50_000)
        assert file_sha256(path, chunk_size=1024) == hashlib.sha256(b"hello" * 50_000).hexdigest()

    def test_content_matches(self, tmp_path) -> None:
        path: Path = tmp_path / "f.bin"
        path.write_bytes(b"abc")
        assert content_matches(path, b"abc")
        assert not content_matches(path, b"abd")
        assert not content_matches(path, b"abcd")
