"""
feedpush.integrations.issues.memory - In-Memory Issue Tracker
===============================================================

Records created issues instead of filing them. Commit authors are looked up
from a dict; unknown commits raise, which exercises the escalator's
fallback path.
"""

from __future__ import annotations

from typing import Any

from feedpush.core.exceptions import IssueTrackerError
from feedpush.integrations.issues.base import IssueTracker


class InMemoryIssueTracker(IssueTracker):
    """In-memory issue tracker for tests and dry runs.

    Attributes:
        _authors: (repo_url, commit_sha) → author handle.
        _issues: Every created issue as a dict (id, repo_url, title, body).
        _fail_create: When True, create_issue() raises.
    """

    def __init__(self, first_issue_id: int = 1) -> None:
        self._authors: dict[tuple[str, str], str] = {}
        self._issues: list[dict[str, Any]] = []
        self._next_id = first_issue_id
        self._fail_create = False
        self._author_lookups = 0

    def set_author(self, repo_url: str, commit_sha: str, handle: str) -> None:
        self._authors[(repo_url, commit_sha)] = handle

    def fail_issue_creation(self, fail: bool = True) -> None:
        self._fail_create = fail

    @property
    def issues(self) -> list[dict[str, Any]]:
        return list(self._issues)

    @property
    def author_lookups(self) -> int:
        return self._author_lookups

    async def get_commit_author(self, repo_url: str, commit_sha: str) -> str:
        self._author_lookups += 1
        handle = self._authors.get((repo_url, commit_sha))
        if handle is None:
            raise IssueTrackerError(
                message=f"Commit {commit_sha} not found in {repo_url}",
                error_code="COMMIT_NOT_FOUND",
            )
        return handle

    async def create_issue(self, repo_url: str, title: str, body: str) -> int:
        if self._fail_create:
            raise IssueTrackerError(
                message=f"Simulated failure creating an issue in {repo_url}",
                error_code="CREATE_ISSUE_FAILED",
            )
        issue_id = self._next_id
        self._next_id += 1
        self._issues.append({
            "id": issue_id,
            "repo_url": repo_url,
            "title": title,
            "body": body,
        })
        return issue_id
