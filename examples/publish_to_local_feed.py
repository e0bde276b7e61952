"""
Local Feed Example: Publish a Build into a Directory
=====================================================

This example publishes a small build (two packages and one blob) into a
feed that lives in a temporary directory, then publishes it a second time
to show that re-running an identical build is a no-op.

The build-asset registry and the issue tracker are in-memory, so nothing
leaves the machine.

Usage:
    python examples/publish_to_local_feed.py
"""

from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

from feedpush import FeedPush, configure_logging
from feedpush.core.config import FeedConfig, FeedPushConfig, IssueTrackerConfig, RegistryConfig
from feedpush.integrations.issues.memory import InMemoryIssueTracker
from feedpush.integrations.registry.base import AssetRecord, BuildRecord
from feedpush.integrations.registry.memory import InMemoryBuildAssetRegistry


MANIFEST = """\
<Build Name="https://github.com/contoso/sdk" Commit="6f1c2e9d" BuildId="20240101.3">
  <Package Id="Contoso.Sdk" Version="1.2.3" />
  <Package Id="Contoso.Sdk.Tools" Version="1.2.3" />
  <Blob Id="sdk/1.2.3/contoso-sdk.zip" />
</Build>
"""


def _write_build(root: Path) -> None:
    """Lay out the manifest and the files it lists."""
    (root / "packages").mkdir()
    (root / "blobs").mkdir()
    (root / "manifest.xml").write_text(MANIFEST, encoding="utf-8")
    (root / "packages" / "Contoso.Sdk.1.2.3.nupkg").write_bytes(b"sdk package")
    (root / "packages" / "Contoso.Sdk.Tools.1.2.3.nupkg").write_bytes(b"tools package")
    (root / "blobs" / "contoso-sdk.zip").write_bytes(b"sdk archive")


async def main() -> None:
    """Publish the build twice and print what happened."""
    configure_logging("WARNING", json_output=False)

    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        _write_build(root)

        config = FeedPushConfig(
            manifest_path=str(root / "manifest.xml"),
            package_assets_base_path=str(root / "packages"),
            blob_assets_base_path=str(root / "blobs"),
            pass_if_existing_identical=True,
            feed=FeedConfig(url=(root / "feed" / "index.json").as_uri(), account_key="local"),
            registry=RegistryConfig(endpoint="memory://registry", build_id=1),
            issues=IssueTrackerConfig(provider="memory"),
        )

        # The registry knows the build and its three assets
        registry = InMemoryBuildAssetRegistry()
        registry.add_build(BuildRecord(
            id=1,
            assets=[
                AssetRecord(id=1, name="Contoso.Sdk", version="1.2.3"),
                AssetRecord(id=2, name="Contoso.Sdk.Tools", version="1.2.3"),
                AssetRecord(id=3, name="sdk/1.2.3/contoso-sdk.zip"),
            ],
        ))
        tracker = InMemoryIssueTracker()

        async with FeedPush(config, registry=registry, issue_tracker=tracker) as feedpush:
            for attempt in ("First run", "Second run"):
                result = await feedpush.run()

                print(attempt)
                print("-" * 40)
                for artifact, outcome in result.outcomes.items():
                    print(f"{artifact.display_name:<32} {outcome.status.value}")
                print(f"Succeeded : {result.succeeded}")
                print()

        print("Feed contents:")
        for path in sorted((root / "feed").rglob("*")):
            if path.is_file():
                print(f"  {path.relative_to(root / 'feed')}")
        print(f"Registry locations added: {len(registry.locations)}")
        print(f"Issues filed: {len(tracker.issues)}")


if __name__ == "__main__":
    asyncio.run(main())
