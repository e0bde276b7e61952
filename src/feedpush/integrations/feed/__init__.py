"""
feedpush.integrations.feed - Feed Storage Transports
======================================================

    - FeedTransport:               Abstract transport contract.
    - InMemoryFeedTransport:       Dict-backed, for tests and dry runs.
    - LocalDirectoryFeedTransport: Directory-backed (``file://`` feeds).
    - HttpFeedTransport:           HTTP blob storage (``https://`` feeds).
    - create_feed_transport:       Picks a transport from FeedConfig.
"""

from feedpush.integrations.feed.base import FeedTransport
from feedpush.integrations.feed.factory import create_feed_transport
from feedpush.integrations.feed.http import HttpFeedTransport
from feedpush.integrations.feed.local import LocalDirectoryFeedTransport
from feedpush.integrations.feed.memory import InMemoryFeedTransport

__all__ = [
    "FeedTransport",
    "HttpFeedTransport",
    "InMemoryFeedTransport",
    "LocalDirectoryFeedTransport",
    "create_feed_transport",
]
