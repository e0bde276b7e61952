"""
feedpush.integrations.feed.factory - Feed Transport Factory
=============================================================

Maps the scheme of the configured feed URL to a FeedTransport:

    memory://...        → InMemoryFeedTransport
    file://...          → LocalDirectoryFeedTransport
    http(s)://...       → HttpFeedTransport

Usage:
    >>> transport = create_feed_transport(FeedConfig(url="file:///srv/feed"))
"""

from __future__ import annotations

from urllib.parse import urlparse

from feedpush.core.config import FeedConfig
from feedpush.core.exceptions import ConfigurationError
from feedpush.integrations.feed.base import FeedTransport


def create_feed_transport(config: FeedConfig) -> FeedTransport:
    """Create the feed transport for ``config.url``.

    Raises:
        ConfigurationError: If the URL is missing or its scheme is unknown.
    """
    if not config.url:
        raise ConfigurationError(
            message="Feed URL is not set",
            error_code="MISSING_FEED_URL",
        )

    scheme = urlparse(config.url).scheme.lower()

    if scheme == "memory":
        from feedpush.integrations.feed.memory import InMemoryFeedTransport
        return InMemoryFeedTransport(config.url)

    if scheme == "file":
        from feedpush.integrations.feed.local import LocalDirectoryFeedTransport
        return LocalDirectoryFeedTransport(config.url)

    if scheme in ("http", "https"):
        from feedpush.integrations.feed.http import HttpFeedTransport
        return HttpFeedTransport(
            config.url,
            credential=config.account_key,
            timeout=config.request_timeout_seconds,
        )

    raise ConfigurationError(
        message=(
            f"Unsupported feed URL scheme: '{scheme}'. "
            f"Supported schemes: memory, file, http, https."
        ),
        error_code="UNSUPPORTED_FEED_URL",
        details={"feed_url": config.url},
    )
