"""GitHub issue tracker with Azure DevOps commit lookups.

Uses httpx for async HTTP calls. Issues are always filed on GitHub; commit
authors are resolved from whichever host the source repository lives on:

1. ``https://github.com/{owner}/{repo}`` → GitHub commits API (``@login``)
2. ``https://dev.azure.com/{org}/{project}/_git/{repo}`` → Azure DevOps
   commits API (author display name)
"""

from __future__ import annotations

import re
from typing import Any, Optional
from urllib.parse import urlparse

import httpx
import structlog

from feedpush.core.exceptions import IssueTrackerError
from feedpush.integrations.issues.base import IssueTracker


logger = structlog.get_logger()

GITHUB_API_BASE = "https://api.github.com"
AZURE_DEVOPS_API_VERSION = "5.0"
ISSUE_TRACKER_TIMEOUT = 30.0

_GITHUB_PATH = re.compile(r"^/(?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?/?$")
_AZDO_PATH = re.compile(r"^/(?P<org>[^/]+)/(?P<project>[^/]+)/_git/(?P<repo>[^/]+)/?$")


def parse_github_repo_url(repo_url: str) -> Optional[tuple[str, str]]:
    """Split a GitHub repository URL into (owner, repo).

    Returns None when the URL path is not ``/{owner}/{repo}``.
    """
    parsed = urlparse(repo_url)
    match = _GITHUB_PATH.match(parsed.path)
    if not match:
        return None
    return match.group("owner"), match.group("repo")


def parse_azure_devops_repo_url(repo_url: str) -> Optional[tuple[str, str, str]]:
    """Split ``https://dev.azure.com/{org}/{project}/_git/{repo}`` into its parts."""
    parsed = urlparse(repo_url)
    if parsed.hostname != "dev.azure.com":
        return None
    match = _AZDO_PATH.match(parsed.path)
    if not match:
        return None
    return match.group("org"), match.group("project"), match.group("repo")


class GitHubIssueTracker(IssueTracker):
    """Issue tracker backed by the GitHub REST API.

    Args:
        github_token: Token for GitHub (issues and GitHub commits).
        azure_devops_token: Personal access token for Azure DevOps commits.
        api_base_url: GitHub API base URL.
        client: Optional pre-built httpx.AsyncClient.
    """

    def __init__(
        self,
        github_token: Optional[str] = None,
        azure_devops_token: Optional[str] = None,
        api_base_url: str = GITHUB_API_BASE,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._github_token = github_token
        self._azure_devops_token = azure_devops_token
        self._api_base_url = api_base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=ISSUE_TRACKER_TIMEOUT)

    async def get_commit_author(self, repo_url: str, commit_sha: str) -> str:
        github_repo = parse_github_repo_url(repo_url)
        if github_repo and urlparse(repo_url).hostname == "github.com":
            owner, repo = github_repo
            data = await self._get_json(
                f"{self._api_base_url}/repos/{owner}/{repo}/commits/{commit_sha}",
                headers=self._github_headers(),
            )
            author = data.get("author") or {}
            if author.get("login"):
                return f"@{author['login']}"
            name = ((data.get("commit") or {}).get("author") or {}).get("name")
            if name:
                return name
            raise IssueTrackerError(
                message=f"Commit {commit_sha} in {repo_url} has no author",
                error_code="AUTHOR_NOT_FOUND",
            )

        azdo_repo = parse_azure_devops_repo_url(repo_url)
        if azdo_repo:
            org, project, repo = azdo_repo
            auth = httpx.BasicAuth("", self._azure_devops_token) if self._azure_devops_token else None
            data = await self._get_json(
                f"https://dev.azure.com/{org}/{project}/_apis/git/repositories/{repo}/commits/{commit_sha}",
                params={"api-version": AZURE_DEVOPS_API_VERSION},
                auth=auth,
            )
            name = (data.get("author") or {}).get("name")
            if name:
                return name
            raise IssueTrackerError(
                message=f"Commit {commit_sha} in {repo_url} has no author",
                error_code="AUTHOR_NOT_FOUND",
            )

        raise IssueTrackerError(
            message=f"Unsupported repository URL: {repo_url}",
            error_code="UNSUPPORTED_REPOSITORY",
        )

    async def create_issue(self, repo_url: str, title: str, body: str) -> int:
        github_repo = parse_github_repo_url(repo_url)
        if github_repo is None:
            raise IssueTrackerError(
                message=f"Cannot file issues in {repo_url}: not a GitHub repository URL",
                error_code="UNSUPPORTED_REPOSITORY",
            )
        owner, repo = github_repo
        try:
            response = await self._client.post(
                f"{self._api_base_url}/repos/{owner}/{repo}/issues",
                headers=self._github_headers(),
                json={"title": title, "body": body},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise IssueTrackerError(
                message=f"Creating an issue in {owner}/{repo} failed: {e}",
                error_code="CREATE_ISSUE_FAILED",
            ) from e
        return int(response.json()["number"])

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _github_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._github_token:
            headers["Authorization"] = f"Bearer {self._github_token}"
        return headers

    async def _get_json(self, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.get(url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise IssueTrackerError(
                message=f"GET {url} failed: {e}",
                error_code="LOOKUP_FAILED",
            ) from e
        return response.json()
