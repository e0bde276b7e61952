"""
feedpush.integrations.registry - Build-Asset Registry Clients
===============================================================

    - BuildAssetRegistry:          Abstract client contract.
    - InMemoryBuildAssetRegistry:  Dict-backed, for tests and dry runs.
    - HttpBuildAssetRegistry:      REST client.
    - AssetRecord / BuildRecord:   Registry entities.
    - create_build_asset_registry: Picks a client from RegistryConfig.
"""

from feedpush.integrations.registry.base import (
    AssetRecord,
    BuildAssetRegistry,
    BuildRecord,
)
from feedpush.integrations.registry.factory import create_build_asset_registry
from feedpush.integrations.registry.http import HttpBuildAssetRegistry
from feedpush.integrations.registry.memory import InMemoryBuildAssetRegistry

__all__ = [
    "AssetRecord",
    "BuildAssetRegistry",
    "BuildRecord",
    "HttpBuildAssetRegistry",
    "InMemoryBuildAssetRegistry",
    "create_build_asset_registry",
]
