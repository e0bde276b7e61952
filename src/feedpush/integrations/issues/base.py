"""
feedpush.integrations.issues.base - Issue Tracker Interface
=============================================================

Used only by the FailureEscalator:

    get_commit_author(repo_url, commit_sha) → handle
    create_issue(repo_url, title, body)     → issue id
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IssueTracker(ABC):
    """Abstract client for the issue tracker."""

    @abstractmethod
    async def get_commit_author(self, repo_url: str, commit_sha: str) -> str:
        """Return a human-readable handle for the author of a commit.

        Raises:
            IssueTrackerError: If the author cannot be determined.
        """
        ...

    @abstractmethod
    async def create_issue(self, repo_url: str, title: str, body: str) -> int:
        """File an issue and return its number.

        Raises:
            IssueTrackerError: If the issue cannot be created.
        """
        ...

    async def close(self) -> None:
        """Release network resources. No-op by default."""
        return None
