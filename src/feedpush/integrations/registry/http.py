"""
feedpush.integrations.registry.http - HTTP Build-Asset Registry Client
========================================================================

Talks to the registry REST API:

    GET  {endpoint}/api/builds/{build_id}
    POST {endpoint}/api/assets/{asset_id}/locations?location=...&locationType=...

Every request carries ``api-version`` and a bearer token.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
import structlog
from pydantic import ValidationError

from feedpush.core.enums import LocationType
from feedpush.core.exceptions import RegistryError
from feedpush.integrations.registry.base import BuildAssetRegistry, BuildRecord


logger = structlog.get_logger()

REGISTRY_API_VERSION = "2019-01-16"
REGISTRY_TIMEOUT = 30.0


class HttpBuildAssetRegistry(BuildAssetRegistry):
    """Build-asset registry client over HTTP.

    Args:
        endpoint: Registry base URL.
        token: Bearer token (optional for anonymous read-only registries).
        client: Optional pre-built httpx.AsyncClient.
    """

    def __init__(
        self,
        endpoint: str,
        token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._headers = {"Accept": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=REGISTRY_TIMEOUT)
        self._logger = logger.bind(component="http_registry", endpoint=self._endpoint)

    async def get_build(self, build_id: int) -> BuildRecord:
        data = await self._request(
            "GET",
            f"/api/builds/{build_id}",
            params={"api-version": REGISTRY_API_VERSION},
        )
        try:
            return BuildRecord.model_validate(data)
        except ValidationError as e:
            raise RegistryError(
                message=f"Unexpected build payload for build {build_id}",
                error_code="INVALID_BUILD_PAYLOAD",
                details={"build_id": build_id, "errors": e.errors(include_url=False)},
            ) from e

    async def add_asset_location(
        self,
        asset_id: int,
        location: str,
        location_type: LocationType,
    ) -> None:
        await self._request(
            "POST",
            f"/api/assets/{asset_id}/locations",
            params={
                "location": location,
                "locationType": location_type.value,
                "api-version": REGISTRY_API_VERSION,
            },
        )
        self._logger.debug("asset_location_added", asset_id=asset_id, location=location)

    async def _request(self, method: str, path: str, params: dict[str, Any]) -> Any:
        try:
            response = await self._client.request(
                method,
                f"{self._endpoint}{path}",
                params=params,
                headers=self._headers,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RegistryError(
                message=f"{method} {path} failed: {e.response.status_code}",
                error_code="REGISTRY_HTTP_ERROR",
                details={"status_code": e.response.status_code, "path": path},
            ) from e
        except httpx.HTTPError as e:
            raise RegistryError(
                message=f"{method} {path} failed: {e}",
                error_code="REGISTRY_UNREACHABLE",
                details={"path": path},
            ) from e

        if not response.content:
            return None
        return response.json()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
