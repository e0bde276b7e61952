"""
feedpush.integrations.feed.http - HTTP Blob Storage Feed Transport
====================================================================

Publishes to a feed hosted in HTTP blob storage, e.g.
``https://account.blob.core.windows.net/feed/index.json``. The feed root is
the URL with the trailing ``index.json`` removed; every remote address is
resolved beneath it.

Wire Protocol:
    upload         PUT  <root>/<address>   x-ms-blob-type: BlockBlob
                   (non-overwrite adds If-None-Match: *; 409/412 → EXISTS)
    exists         HEAD <root>/<address>   200 → True, 404 → False
    fetch_content  GET  <root>/<address>

Credentials:
    A credential that starts with ``?`` or contains ``sig=`` is a SAS token
    and is appended to every request URL. Anything else is sent as a bearer
    token.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import httpx
import structlog

from feedpush.core.enums import UploadResult
from feedpush.core.exceptions import TransportError
from feedpush.integrations.feed.base import FeedTransport


logger = structlog.get_logger()

STORAGE_API_VERSION = "2019-12-12"
EXISTS_STATUS_CODES = {409, 412}


def feed_root_from_http_url(feed_url: str) -> str:
    """Strip a trailing ``/index.json`` and slash from a feed URL."""
    root = feed_url.split("?", 1)[0].rstrip("/")
    if root.endswith("/index.json"):
        root = root[: -len("/index.json")]
    return root


class HttpFeedTransport(FeedTransport):
    """Feed transport speaking the blob storage REST protocol.

    Args:
        feed_url: Feed URL (``https://.../index.json``).
        credential: SAS token or bearer token.
        timeout: Default request timeout in seconds.
        client: Optional pre-built httpx.AsyncClient (its lifecycle stays
            with the caller).
    """

    def __init__(
        self,
        feed_url: str,
        credential: Optional[str] = None,
        timeout: float = 100.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(feed_url)
        self._root = feed_root_from_http_url(feed_url)
        self._sas: Optional[str] = None
        self._headers = {"x-ms-version": STORAGE_API_VERSION}

        if credential:
            if credential.startswith("?") or "sig=" in credential:
                self._sas = credential.lstrip("?")
            else:
                self._headers["Authorization"] = f"Bearer {credential}"

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._logger = logger.bind(component="http_feed_transport", root=self._root)

    def url_for(self, remote_address: str) -> str:
        url = f"{self._root}/{quote(remote_address.lstrip('/'))}"
        if self._sas:
            url = f"{url}?{self._sas}"
        return url

    async def upload(
        self,
        local_path: Path,
        remote_address: str,
        overwrite: bool,
        timeout: Optional[float] = None,
    ) -> UploadResult:
        content = await asyncio.to_thread(Path(local_path).read_bytes)
        headers = dict(self._headers)
        headers["x-ms-blob-type"] = "BlockBlob"
        if not overwrite:
            headers["If-None-Match"] = "*"

        request_timeout = timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT
        try:
            response = await self._client.put(
                self.url_for(remote_address),
                content=content,
                headers=headers,
                timeout=request_timeout,
            )
        except httpx.HTTPError as e:
            raise TransportError(
                message=f"Upload of {remote_address} failed: {e}",
                remote_address=remote_address,
                error_code="UPLOAD_FAILED",
            ) from e

        if not overwrite and response.status_code in EXISTS_STATUS_CODES:
            return UploadResult.EXISTS
        if response.is_success:
            self._logger.debug("blob_uploaded", remote_address=remote_address)
            return UploadResult.CREATED

        self._logger.warning(
            "blob_upload_rejected",
            remote_address=remote_address,
            status_code=response.status_code,
        )
        return UploadResult.FAILED

    async def exists(self, remote_address: str) -> bool:
        try:
            response = await self._client.head(
                self.url_for(remote_address), headers=self._headers
            )
        except httpx.HTTPError as e:
            raise TransportError(
                message=f"Existence check of {remote_address} failed: {e}",
                remote_address=remote_address,
                error_code="EXISTS_CHECK_FAILED",
            ) from e

        if response.status_code == 404:
            return False
        if response.is_success:
            return True
        raise TransportError(
            message=f"Existence check of {remote_address} returned {response.status_code}",
            remote_address=remote_address,
            error_code="EXISTS_CHECK_FAILED",
            details={"status_code": response.status_code},
        )

    async def fetch_content(self, remote_address: str) -> bytes:
        try:
            response = await self._client.get(
                self.url_for(remote_address), headers=self._headers
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError(
                message=f"Download of {remote_address} failed: {e}",
                remote_address=remote_address,
                error_code="DOWNLOAD_FAILED",
            ) from e
        return response.content

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
