"""
feedpush.integrations.feed.local - Local Directory Feed Transport
===================================================================

Publishes into a directory tree (``file:///srv/feed``). Useful for
file-share feeds and for staging a feed layout before syncing it elsewhere.

Blocking filesystem work runs in a worker thread (``asyncio.to_thread``) so
concurrent uploads do not stall the event loop.

Write semantics:
    Every upload is first copied into a temporary sibling of the target and
    then committed:

    overwrite=True   → atomic rename over the target (``os.replace``)
    overwrite=False  → hard link into place (``os.link``); an existing file
                       yields UploadResult.EXISTS without touching it

    A cancelled upload (e.g. a per-upload timeout) never commits: the worker
    thread sees the cancellation flag, drops the temporary file and leaves
    the feed unchanged.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import structlog

from feedpush.core.enums import UploadResult
from feedpush.core.exceptions import ConfigurationError, TransportError
from feedpush.integrations.feed.base import FeedTransport


logger = structlog.get_logger()

COPY_CHUNK_SIZE = 1024 * 1024


def feed_root_from_url(feed_url: str) -> Path:
    """Resolve the directory a ``file://`` feed URL points to.

    A trailing ``index.json`` is stripped so the same URL shape works for
    local and remote feeds.

    Raises:
        ConfigurationError: If the URL is not a file URL.
    """
    parsed = urlparse(feed_url)
    if parsed.scheme != "file":
        raise ConfigurationError(
            message=f"Not a file feed URL: {feed_url}",
            error_code="UNSUPPORTED_FEED_URL",
        )
    root = Path(unquote(parsed.path))
    if root.name == "index.json":
        root = root.parent
    return root


class LocalDirectoryFeedTransport(FeedTransport):
    """Feed transport backed by a local directory."""

    def __init__(self, feed_url: str, root: Optional[Path] = None) -> None:
        super().__init__(feed_url)
        self._root = Path(root) if root is not None else feed_root_from_url(feed_url)
        self._logger = logger.bind(component="local_feed_transport", root=str(self._root))

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, remote_address: str) -> Path:
        target = (self._root / remote_address).resolve()
        if not target.is_relative_to(self._root.resolve()):
            raise TransportError(
                message=f"Address escapes the feed root: {remote_address}",
                remote_address=remote_address,
                error_code="INVALID_ADDRESS",
            )
        return target

    async def upload(
        self,
        local_path: Path,
        remote_address: str,
        overwrite: bool,
        timeout: Optional[float] = None,
    ) -> UploadResult:
        target = self._resolve(remote_address)
        cancelled = threading.Event()
        try:
            created = await asyncio.to_thread(
                _write_file, Path(local_path), target, overwrite, cancelled
            )
        except asyncio.CancelledError:
            cancelled.set()
            self._logger.debug("upload_cancelled", remote_address=remote_address)
            raise
        except OSError as e:
            raise TransportError(
                message=f"Failed to write {remote_address}: {e}",
                remote_address=remote_address,
                error_code="UPLOAD_FAILED",
            ) from e

        if not created:
            return UploadResult.EXISTS
        self._logger.debug("file_written", remote_address=remote_address)
        return UploadResult.CREATED

    async def exists(self, remote_address: str) -> bool:
        return self._resolve(remote_address).is_file()

    async def fetch_content(self, remote_address: str) -> bytes:
        target = self._resolve(remote_address)
        try:
            return await asyncio.to_thread(target.read_bytes)
        except OSError as e:
            raise TransportError(
                message=f"Failed to read {remote_address}: {e}",
                remote_address=remote_address,
                error_code="DOWNLOAD_FAILED",
            ) from e


def _write_file(
    source: Path,
    target: Path,
    overwrite: bool,
    cancelled: threading.Event,
) -> bool:
    """Copy ``source`` to ``target`` through a temporary sibling.

    Returns False if the target existed and overwrite was not allowed, or if
    ``cancelled`` was set before the commit.
    """
    if not overwrite and target.exists():
        return False

    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = _copy_to_temp(source, target, cancelled)
    try:
        if cancelled.is_set():
            return False
        return _commit(tmp_path, target, overwrite)
    finally:
        tmp_path.unlink(missing_ok=True)


def _copy_to_temp(source: Path, target: Path, cancelled: threading.Event) -> Path:
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as dst, source.open("rb") as src:
            for chunk in iter(lambda: src.read(COPY_CHUNK_SIZE), b""):
                if cancelled.is_set():
                    break
                dst.write(chunk)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return tmp_path


def _commit(tmp_path: Path, target: Path, overwrite: bool) -> bool:
    if overwrite:
        os.replace(tmp_path, target)
        return True
    try:
        os.link(tmp_path, target)
    except FileExistsError:
        return False
    return True
