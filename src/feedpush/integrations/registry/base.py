"""
feedpush.integrations.registry.base - Build-Asset Registry Interface
======================================================================

The build-asset registry knows every asset a build produced. After
publishing, feedpush records the feed as a new location of each uploaded
asset.

    get_build(build_id)                                 → BuildRecord
    add_asset_location(asset_id, location, location_type)

BuildRecord:
    A build with the list of AssetRecords it registered. Package assets carry
    a version; blob assets usually don't.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel, Field

from feedpush.core.enums import LocationType


class AssetRecord(BaseModel):
    """One asset registered against a build.

    Attributes:
        id: Registry-assigned asset id (used to add locations).
        name: Asset name; matches a package id or a blob id.
        version: Asset version, None for unversioned assets.
    """

    id: int
    name: str
    version: Optional[str] = None


class BuildRecord(BaseModel):
    """A build as known by the registry."""

    id: int
    assets: list[AssetRecord] = Field(default_factory=list)


class BuildAssetRegistry(ABC):
    """Abstract client for the build-asset registry."""

    @abstractmethod
    async def get_build(self, build_id: int) -> BuildRecord:
        """Fetch a build and its assets.

        Raises:
            RegistryError: If the build cannot be fetched.
        """
        ...

    @abstractmethod
    async def add_asset_location(
        self,
        asset_id: int,
        location: str,
        location_type: LocationType,
    ) -> None:
        """Record a new storage location for an asset.

        Raises:
            RegistryError: If the registry rejects the update.
        """
        ...

    async def close(self) -> None:
        """Release network resources. No-op by default."""
        return None
