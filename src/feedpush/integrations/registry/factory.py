"""
feedpush.integrations.registry.factory - Registry Client Factory
==================================================================

    memory://...     → InMemoryBuildAssetRegistry
    http(s)://...    → HttpBuildAssetRegistry
"""

from __future__ import annotations

from urllib.parse import urlparse

from feedpush.core.config import RegistryConfig
from feedpush.core.exceptions import ConfigurationError
from feedpush.integrations.registry.base import BuildAssetRegistry


def create_build_asset_registry(config: RegistryConfig) -> BuildAssetRegistry:
    """Create the registry client for ``config.endpoint``.

    Raises:
        ConfigurationError: If the endpoint scheme is not supported.
    """
    scheme = urlparse(config.endpoint).scheme.lower()

    if scheme == "memory":
        from feedpush.integrations.registry.memory import InMemoryBuildAssetRegistry
        return InMemoryBuildAssetRegistry()

    if scheme in ("http", "https"):
        from feedpush.integrations.registry.http import HttpBuildAssetRegistry
        return HttpBuildAssetRegistry(config.endpoint, token=config.token)

    raise ConfigurationError(
        message=(
            f"Unsupported registry endpoint: '{config.endpoint}'. "
            f"Supported schemes: memory, http, https."
        ),
        error_code="UNSUPPORTED_REGISTRY_ENDPOINT",
        details={"endpoint": config.endpoint},
    )
