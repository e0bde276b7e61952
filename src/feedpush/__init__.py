"""
feedpush - Build Artifact Feed Publisher
==========================================

feedpush publishes the packages and blobs listed in a build manifest to a
feed, records the feed as a new location of each asset in the build-asset
registry, and files a tracking issue when anything goes wrong:

    Manifest  →  Feed Publisher  →  Registry Reconciler  →  (Escalator)
    (parse)      (upload N at a     (add feed location)     (file issue on
                  time, idempotent)                          any error)

Layers (top to bottom):
    1. Facade               - FeedPush
    2. Publishing Layer     - Orchestrator, Publisher, Reconciler, Escalator
    3. Manifest Layer       - Build manifest parsing
    4. Integration Layer    - Feed transports, registry clients, issue trackers
    5. Core                 - Config, models, enums, exceptions, error log

Quick Start:
    >>> from feedpush import FeedPush, load_config
    >>> async with FeedPush(load_config("feedpush.yaml")) as feedpush:
    ...     ok = await feedpush.execute()
"""

# =============================================================================
# Package Version
# =============================================================================
# Keep in step with the version in pyproject.toml:
#   from feedpush import __version__
# =============================================================================
__version__ = "0.1.0"

# =============================================================================
# Package-Level Exports
# =============================================================================
# The FeedPush facade is the main entry point for users.
# For specific components, import from submodules directly:
#   from feedpush.publishing import FeedPublisher
#   from feedpush.integrations.feed import LocalDirectoryFeedTransport
# =============================================================================
from feedpush.core.config import FeedPushConfig, load_config
from feedpush.core.logging import configure_logging
from feedpush.facade import FeedPush

__all__ = [
    "FeedPush",
    "FeedPushConfig",
    "__version__",
    "configure_logging",
    "load_config",
]
