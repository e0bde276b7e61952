"""
feedpush.integrations.issues.factory - Issue Tracker Factory
==============================================================

    provider="github"  → GitHubIssueTracker
    provider="memory"  → InMemoryIssueTracker
"""

from __future__ import annotations

from feedpush.core.config import IssueTrackerConfig
from feedpush.core.exceptions import ConfigurationError
from feedpush.integrations.issues.base import IssueTracker


def create_issue_tracker(config: IssueTrackerConfig) -> IssueTracker:
    """Create the issue tracker named by ``config.provider``.

    Raises:
        ConfigurationError: If the provider name is not recognized.
    """
    provider_name = config.provider.lower()

    if provider_name == "memory":
        from feedpush.integrations.issues.memory import InMemoryIssueTracker
        return InMemoryIssueTracker()

    if provider_name == "github":
        from feedpush.integrations.issues.github import GitHubIssueTracker
        return GitHubIssueTracker(
            github_token=config.github_token,
            azure_devops_token=config.azure_devops_token,
            api_base_url=config.api_base_url,
        )

    raise ConfigurationError(
        message=(
            f"Unknown issue tracker provider: '{provider_name}'. "
            f"Available providers: 'github', 'memory'."
        ),
        error_code="UNKNOWN_ISSUE_TRACKER",
    )
