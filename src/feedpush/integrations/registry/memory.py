"""
feedpush.integrations.registry.memory - In-Memory Build-Asset Registry
========================================================================

Holds builds in a dict and records every added location, so tests can
assert exactly which assets were updated.

Usage:
    >>> registry = InMemoryBuildAssetRegistry()
    >>> registry.add_build(BuildRecord(id=42, assets=[AssetRecord(id=1, name="A", version="1.0")]))
    >>> await registry.add_asset_location(1, "https://feed/index.json", LocationType.NUGET_FEED)
    >>> registry.locations
    [(1, 'https://feed/index.json', <LocationType.NUGET_FEED: 'NugetFeed'>)]
"""

from __future__ import annotations

import structlog

from feedpush.core.enums import LocationType
from feedpush.core.exceptions import RegistryError
from feedpush.integrations.registry.base import BuildAssetRegistry, BuildRecord


logger = structlog.get_logger()


class InMemoryBuildAssetRegistry(BuildAssetRegistry):
    """In-memory build-asset registry for tests and dry runs."""

    def __init__(self) -> None:
        self._builds: dict[int, BuildRecord] = {}
        self._locations: list[tuple[int, str, LocationType]] = []
        self._failing_assets: set[int] = set()
        self._get_build_calls = 0
        self._logger = logger.bind(component="in_memory_registry")

    def add_build(self, build: BuildRecord) -> None:
        self._builds[build.id] = build

    def fail_asset(self, asset_id: int) -> None:
        """Make add_asset_location() fail for ``asset_id``."""
        self._failing_assets.add(asset_id)

    @property
    def locations(self) -> list[tuple[int, str, LocationType]]:
        return list(self._locations)

    @property
    def get_build_calls(self) -> int:
        return self._get_build_calls

    async def get_build(self, build_id: int) -> BuildRecord:
        self._get_build_calls += 1
        build = self._builds.get(build_id)
        if build is None:
            raise RegistryError(
                message=f"Build {build_id} not found in the registry",
                error_code="BUILD_NOT_FOUND",
                details={"build_id": build_id},
            )
        return build

    async def add_asset_location(
        self,
        asset_id: int,
        location: str,
        location_type: LocationType,
    ) -> None:
        if asset_id in self._failing_assets:
            raise RegistryError(
                message=f"Simulated registry failure for asset {asset_id}",
                error_code="ADD_LOCATION_FAILED",
                details={"asset_id": asset_id},
            )
        self._locations.append((asset_id, location, location_type))
        self._logger.debug(
            "asset_location_added",
            asset_id=asset_id,
            location=location,
            location_type=location_type.value,
        )
