"""
feedpush.facade - feedpush Top-Level Facade
=============================================

The FeedPush facade is the single entry point for publishing a build. It
builds the collaborators from configuration (unless they are injected),
runs the orchestrator and releases network clients afterwards.

Architecture Context:

    ┌────────────────────────────────────────────────┐
    │                FeedPush (Facade)                │
    │                                                 │
    │  ┌───────────────────────────────────────────┐ │
    │  │          PublishingOrchestrator            │ │
    │  │  FeedPublisher, RegistryReconciler,        │ │
    │  │  FailureEscalator                          │ │
    │  └─────────────────────┬─────────────────────┘ │
    │                        │                        │
    │  ┌─────────────────────▼─────────────────────┐ │
    │  │           Integration Layer                │ │
    │  │  FeedTransport, BuildAssetRegistry,        │ │
    │  │  IssueTracker                              │ │
    │  └───────────────────────────────────────────┘ │
    └────────────────────────────────────────────────┘

Usage:
    >>> from feedpush import FeedPush, load_config
    >>>
    >>> async with FeedPush(load_config("feedpush.yaml")) as feedpush:
    ...     ok = await feedpush.execute()
"""

from __future__ import annotations

from typing import Any, Optional

import structlog

from feedpush.core.config import FeedPushConfig
from feedpush.core.exceptions import ConfigurationError
from feedpush.core.models import PushRunResult
from feedpush.integrations.feed.base import FeedTransport
from feedpush.integrations.feed.factory import create_feed_transport
from feedpush.integrations.issues.base import IssueTracker
from feedpush.integrations.issues.factory import create_issue_tracker
from feedpush.integrations.registry.base import BuildAssetRegistry
from feedpush.integrations.registry.factory import create_build_asset_registry
from feedpush.publishing.orchestrator import PublishingOrchestrator


logger = structlog.get_logger()


class FeedPush:
    """Top-level facade for publishing a build manifest to a feed.

    Collaborators not passed in are created lazily from the configuration
    on the first run, so an invalid feed URL surfaces as a failed run rather
    than a constructor error.

    Lifecycle:
        1. ``FeedPush(config)``  - Instantiate with configuration
        2. ``await run()``       - Publish (may be called more than once)
        3. ``await close()``     - Release HTTP clients

    Or use the async context manager:
        async with FeedPush(config) as feedpush:
            ...

    Attributes:
        _config: Run configuration.
        _transport / _registry / _issue_tracker: Collaborators, injected or
            built from the configuration.
    """

    def __init__(
        self,
        config: Optional[FeedPushConfig] = None,
        *,
        transport: Optional[FeedTransport] = None,
        registry: Optional[BuildAssetRegistry] = None,
        issue_tracker: Optional[IssueTracker] = None,
    ) -> None:
        self._config = config or FeedPushConfig()
        self._transport = transport
        self._registry = registry
        self._issue_tracker = issue_tracker
        self._logger = logger.bind(component="feedpush")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def config(self) -> FeedPushConfig:
        return self._config

    @property
    def transport(self) -> Optional[FeedTransport]:
        return self._transport

    @property
    def registry(self) -> Optional[BuildAssetRegistry]:
        return self._registry

    @property
    def issue_tracker(self) -> Optional[IssueTracker]:
        return self._issue_tracker

    # =========================================================================
    # Running
    # =========================================================================

    async def run(self) -> PushRunResult:
        """Publish the configured manifest once.

        Returns:
            PushRunResult. A configuration problem that prevents building
            the collaborators is reported as a failed result.
        """
        try:
            self._build_collaborators()
        except ConfigurationError as e:
            self._logger.error(
                "collaborator_setup_failed",
                error_code=e.error_code,
                error=e.message,
            )
            return PushRunResult(succeeded=False, errors=[e.message])

        orchestrator = PublishingOrchestrator(
            config=self._config,
            transport=self._transport,
            registry=self._registry,
            issue_tracker=self._issue_tracker,
        )
        return await orchestrator.run()

    async def execute(self) -> bool:
        """Publish once and return whether the run logged no error."""
        result = await self.run()
        return result.succeeded

    def _build_collaborators(self) -> None:
        if self._transport is None:
            self._transport = create_feed_transport(self._config.feed)
        if self._registry is None:
            self._registry = create_build_asset_registry(self._config.registry)
        if self._issue_tracker is None:
            self._issue_tracker = create_issue_tracker(self._config.issues)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def close(self) -> None:
        """Close every collaborator. Safe to call more than once."""
        for collaborator in (self._transport, self._registry, self._issue_tracker):
            if collaborator is not None:
                await collaborator.close()
        self._logger.debug("feedpush_closed")

    async def __aenter__(self) -> FeedPush:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
