"""
Tests for feedpush.integrations.issues
=======================================

What's Being Tested:
    - Repository URL parsing (GitHub, Azure DevOps)
    - GitHubIssueTracker commit author lookups and issue creation (respx)
    - InMemoryIssueTracker hooks
    - create_issue_tracker() provider mapping
"""

import json

import httpx
import pytest
import respx

from feedpush.core.config import IssueTrackerConfig
from feedpush.core.exceptions import IssueTrackerError
from feedpush.integrations.issues import (
    GitHubIssueTracker,
    InMemoryIssueTracker,
    create_issue_tracker,
    parse_azure_devops_repo_url,
    parse_github_repo_url,
)


API = "https://api.github.com"
SHA = "0123abcd"


# =============================================================================
# Tests: URL Parsing
# =============================================================================
class TestRepoUrlParsing:
    """Tests for the repository URL parsers."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://github.com/dotnet/arcade", ("dotnet", "arcade")),
            ("https://github.com/dotnet/arcade/", ("dotnet", "arcade")),
            ("https://github.com/dotnet/arcade.git", ("dotnet", "arcade")),
            ("https://github.com/dotnet", None),
            ("https://github.com/dotnet/arcade/issues", None),
        ],
    )
    def test_github(self, url, expected) -> None:
        assert parse_github_repo_url(url) == expected

    def test_azure_devops(self) -> None:
        url = "https://dev.azure.com/contoso/public/_git/sdk"
        assert parse_azure_devops_repo_url(url) == ("contoso", "public", "sdk")

    def test_azure_devops_rejects_other_hosts(self) -> None:
        assert parse_azure_devops_repo_url("https://github.com/contoso/public/_git/sdk") is None


# =============================================================================
# Tests: GitHub Tracker
# =============================================================================
class TestGitHubIssueTracker:
    """Tests for the GitHub REST tracker."""

    @respx.mock
    async def test_github_commit_author_login(self) -> None:
        route = respx.get(f"{API}/repos/contoso/sdk/commits/{SHA}").mock(
            return_value=httpx.Response(200, json={"author": {"login": "octocat"}})
        )
        tracker = GitHubIssueTracker(github_token="gh-token")

        author = await tracker.get_commit_author("https://github.com/contoso/sdk", SHA)

        assert author == "@octocat"
        assert route.calls.last.request.headers["Authorization"] == "Bearer gh-token"
        await tracker.close()

    @respx.mock
    async def test_github_commit_author_name_fallback(self) -> None:
        respx.get(f"{API}/repos/contoso/sdk/commits/{SHA}").mock(
            return_value=httpx.Response(200, json={
                "author": None,
                "commit": {"author": {"name": "Mona Lisa"}},
            })
        )
        tracker = GitHubIssueTracker()
        assert await tracker.get_commit_author("https://github.com/contoso/sdk", SHA) == "Mona Lisa"
        await tracker.close()

    @respx.mock
    async def test_azure_devops_commit_author(self) -> None:
        route = respx.get(
            f"https://dev.azure.com/contoso/public/_apis/git/repositories/sdk/commits/{SHA}"
        ).mock(return_value=httpx.Response(200, json={"author": {"name": "Build Bot"}}))
        tracker = GitHubIssueTracker(azure_devops_token="pat")

        author = await tracker.get_commit_author("https://dev.azure.com/contoso/public/_git/sdk", SHA)

        assert author == "Build Bot"
        request = route.calls.last.request
        assert request.url.params["api-version"] == "5.0"
        assert request.headers["Authorization"].startswith("Basic ")
        await tracker.close()

    async def test_unsupported_repository(self) -> None:
        tracker = GitHubIssueTracker()
        with pytest.raises(IssueTrackerError) as exc_info:
            await tracker.get_commit_author("https://gitlab.com/contoso/sdk", SHA)
        assert exc_info.value.error_code == "UNSUPPORTED_REPOSITORY"
        await tracker.close()

    @respx.mock
    async def test_lookup_failure(self) -> None:
        respx.get(f"{API}/repos/contoso/sdk/commits/{SHA}").mock(return_value=httpx.Response(404))
        tracker = GitHubIssueTracker()
        with pytest.raises(IssueTrackerError) as exc_info:
            await tracker.get_commit_author("https://github.com/contoso/sdk", SHA)
        assert exc_info.value.error_code == "LOOKUP_FAILED"
        await tracker.close()

    @respx.mock
    async def test_create_issue(self) -> None:
        route = respx.post(f"{API}/repos/dotnet/arcade/issues").mock(
            return_value=httpx.Response(201, json={"number": 1234, "id": 999})
        )
        tracker = GitHubIssueTracker(github_token="gh-token")

        issue_id = await tracker.create_issue("https://github.com/dotnet/arcade", "title", "body")

        assert issue_id == 1234
        assert json.loads(route.calls.last.request.content) == {"title": "title", "body": "body"}
        await tracker.close()

    @respx.mock
    async def test_create_issue_failure(self) -> None:
        respx.post(f"{API}/repos/dotnet/arcade/issues").mock(return_value=httpx.Response(403))
        tracker = GitHubIssueTracker()
        with pytest.raises(IssueTrackerError) as exc_info:
            await tracker.create_issue("https://github.com/dotnet/arcade", "t", "b")
        assert exc_info.value.error_code == "CREATE_ISSUE_FAILED"
        await tracker.close()

    async def test_create_issue_requires_github_url(self) -> None:
        tracker = GitHubIssueTracker()
        with pytest.raises(IssueTrackerError):
            await tracker.create_issue("not a url", "t", "b")
        await tracker.close()


# =============================================================================
# Tests: In-Memory Tracker and Factory
# =============================================================================
class TestInMemoryIssueTracker:
    """Tests for the in-memory tracker."""

    async def test_issue_ids_increase(self) -> None:
        tracker = InMemoryIssueTracker(first_issue_id=5)
        assert await tracker.create_issue("r", "t1", "b") == 5
        assert await tracker.create_issue("r", "t2", "b") == 6
        assert [issue["title"] for issue in tracker.issues] == ["t1", "t2"]

    async def test_unknown_commit(self) -> None:
        with pytest.raises(IssueTrackerError):
            await InMemoryIssueTracker().get_commit_author("r", "c")


class TestCreateIssueTracker:
    """Tests for create_issue_tracker()."""

    def test_memory(self) -> None:
        tracker = create_issue_tracker(IssueTrackerConfig(provider="memory"))
        assert isinstance(tracker, InMemoryIssueTracker)

    async def test_github(self) -> None:
        tracker = create_issue_tracker(IssueTrackerConfig(github_token="t"))
        assert isinstance(tracker, GitHubIssueTracker)
        await tracker.close()
