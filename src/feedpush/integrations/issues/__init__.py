"""
feedpush.integrations.issues - Issue Tracker Clients
======================================================

    - IssueTracker:          Abstract client contract.
    - InMemoryIssueTracker:  Records issues, for tests and dry runs.
    - GitHubIssueTracker:    GitHub issues, GitHub/Azure DevOps commit authors.
    - create_issue_tracker:  Picks a tracker from IssueTrackerConfig.
"""

from feedpush.integrations.issues.base import IssueTracker
from feedpush.integrations.issues.factory import create_issue_tracker
from feedpush.integrations.issues.github import (
    GitHubIssueTracker,
    parse_azure_devops_repo_url,
    parse_github_repo_url,
)
from feedpush.integrations.issues.memory import InMemoryIssueTracker

__all__ = [
    "GitHubIssueTracker",
    "InMemoryIssueTracker",
    "IssueTracker",
    "create_issue_tracker",
    "parse_azure_devops_repo_url",
    "parse_github_repo_url",
]
