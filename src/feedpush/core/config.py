"""
feedpush.core.config - Configuration Management
=================================================

Configuration can be loaded from multiple sources with the following priority
(highest first):

    1. Explicit constructor arguments
    2. Environment variables (prefixed with FEEDPUSH_)
    3. YAML configuration file (feedpush.yaml)
    4. Default values defined in the models below

Architecture Context:
    The top-level FeedPushConfig is created once per run and handed to the
    facade, which wires the sub-configurations into the collaborators:

        FeedPushConfig
            ├── FeedConfig          → FeedTransport (where artifacts go)
            ├── RegistryConfig      → BuildAssetRegistry (where locations are recorded)
            ├── IssueTrackerConfig  → IssueTracker (where failures are filed)
            ├── ReleaseContext      → FailureEscalator (what the issue links to)
            └── (run settings)      → PushPolicy, manifest and asset paths

Required values (feed URL, credential, manifest path...) deliberately have no
pydantic constraints: the orchestrator validates them and reports problems
through the run error log instead of failing at construction time.

Usage:
    # Load from environment variables:
    config = FeedPushConfig()

    # Load from YAML file:
    config = load_config("feedpush.yaml")

Environment Variables:
    FEEDPUSH_MANIFEST_PATH=/build/manifest.xml
    FEEDPUSH_FEED__URL=https://account.blob.core.windows.net/feed/index.json
    FEEDPUSH_FEED__ACCOUNT_KEY=...
    FEEDPUSH_REGISTRY__BUILD_ID=12345
    FEEDPUSH_ISSUES__GITHUB_TOKEN=...
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from feedpush.core.models import PushPolicy


DEFAULT_ISSUE_REPOSITORY = "https://github.com/dotnet/arcade"
DEFAULT_NOTIFY_HANDLES = ["@dotnet/dnceng", "@dotnet/arcade-publishing"]


# =============================================================================
# Feed Configuration
# =============================================================================
class FeedConfig(BaseModel):
    """Target feed and the credential to write into it.

    Attributes:
        url: Feed URL. The scheme selects the transport:
            ``https://.../index.json`` → HTTP blob storage,
            ``file:///srv/feed`` → local directory,
            ``memory://name`` → in-memory (tests and dry runs).
        account_key: Opaque storage credential. For HTTP feeds a value
            starting with ``?`` or containing ``sig=`` is used as a SAS query
            string, anything else is sent as a bearer token.
        request_timeout_seconds: Connect/read timeout for HTTP transports.
    """

    url: Optional[str] = Field(default=None, description="Target feed URL")
    account_key: Optional[str] = Field(default=None, description="Feed storage credential")
    request_timeout_seconds: float = Field(
        default=100.0,
        gt=0,
        description="HTTP connect/read timeout for the feed transport",
    )


# =============================================================================
# Registry Configuration
# =============================================================================
class RegistryConfig(BaseModel):
    """Build-asset registry access.

    Attributes:
        endpoint: Base URL of the registry API. ``memory://`` selects the
            in-memory registry.
        token: Bearer token for the registry API.
        build_id: Registry id of the build that produced the artifacts.
    """

    endpoint: str = Field(
        default="https://maestro-prod.westus2.cloudapp.azure.com",
        description="Build-asset registry API endpoint",
    )
    token: Optional[str] = Field(default=None, description="Registry API token")
    build_id: Optional[int] = Field(default=None, description="Registry build id")


# =============================================================================
# Issue Tracker Configuration
# =============================================================================
class IssueTrackerConfig(BaseModel):
    """Where and how publishing failures are escalated.

    Attributes:
        github_token: Token for the GitHub REST API (issues and commits).
        azure_devops_token: Token used to read commit authors from Azure
            DevOps repositories.
        repository: Repository in which tracking issues are filed.
        notify_handles: Handles mentioned in the issue body.
        api_base_url: GitHub API base URL (GitHub Enterprise support).
        provider: "github" files real issues, "memory" records them in
            process (dry runs).
    """

    provider: Literal["github", "memory"] = "github"
    github_token: Optional[str] = None
    azure_devops_token: Optional[str] = None
    repository: str = Field(
        default=DEFAULT_ISSUE_REPOSITORY,
        description="Repository URL where failure issues are filed",
    )
    notify_handles: list[str] = Field(
        default_factory=lambda: list(DEFAULT_NOTIFY_HANDLES),
        description="Handles to mention in filed issues",
    )
    api_base_url: str = Field(default="https://api.github.com")


# =============================================================================
# Release Context
# =============================================================================
class ReleaseContext(BaseModel):
    """Describes the release run that triggered publishing.

    Used only to compose the escalation issue.
    """

    pipeline_url: str = Field(default="", description="URL of the release pipeline run")
    description: str = Field(default="", description="Title of the release")
    triggered_by_build_url: str = Field(default="", description="URL of the source build")


# =============================================================================
# Main Configuration
# =============================================================================
class FeedPushConfig(BaseSettings):
    """Top-level configuration for a feedpush run.

    Attributes:
        environment: Deployment environment.
        log_level: Minimum structlog level.
        manifest_path: Path to the build manifest to publish.
        package_assets_base_path: Directory holding the ``.nupkg`` files.
        blob_assets_base_path: Directory holding the blob files.
        overwrite: Replace artifacts that already exist in the feed.
        pass_if_existing_identical: Accept existing byte-identical artifacts.
        max_concurrent_uploads: Upload parallelism (must be > 0).
        upload_timeout_minutes: Per-upload timeout (must be > 0).
        feed / registry / issues / release: Nested sections.

    Example:
        >>> config = FeedPushConfig(
        ...     manifest_path="/build/manifest.xml",
        ...     feed=FeedConfig(url="file:///srv/feed", account_key="local"),
        ... )
    """

    # -------------------------------------------------------------------------
    # General Settings
    # -------------------------------------------------------------------------
    environment: Literal["dev", "staging", "prod"] = "dev"
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )

    # -------------------------------------------------------------------------
    # Run Settings
    # -------------------------------------------------------------------------
    manifest_path: Optional[str] = None
    package_assets_base_path: Optional[str] = None
    blob_assets_base_path: Optional[str] = None
    overwrite: bool = False
    pass_if_existing_identical: bool = False
    max_concurrent_uploads: int = 8
    upload_timeout_minutes: float = 5

    # -------------------------------------------------------------------------
    # Nested Configurations
    # -------------------------------------------------------------------------
    feed: FeedConfig = Field(default_factory=FeedConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    issues: IssueTrackerConfig = Field(default_factory=IssueTrackerConfig)
    release: ReleaseContext = Field(default_factory=ReleaseContext)

    model_config = SettingsConfigDict(
        env_prefix="FEEDPUSH_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML sits below the environment; only read when yaml_file is set
        return (init_settings, env_settings, YamlConfigSettingsSource(settings_cls))

    def to_push_policy(self) -> PushPolicy:
        """Build the PushPolicy for this run.

        Raises:
            pydantic.ValidationError: If concurrency or timeout are not positive.
                Callers validate these first (see PublishingOrchestrator).
        """
        return PushPolicy(
            allow_overwrite=self.overwrite,
            pass_if_existing_identical=self.pass_if_existing_identical,
            max_concurrent_uploads=self.max_concurrent_uploads,
            upload_timeout_seconds=self.upload_timeout_minutes * 60,
        )


# =============================================================================
# Configuration Loader
# =============================================================================
def load_config(path: Optional[str] = None) -> FeedPushConfig:
    """Load configuration from a YAML file and/or environment variables.

    Args:
        path: Path to a YAML configuration file. If None, looks for
            'feedpush.yaml' in the current directory, and falls back to
            pure defaults + environment variables.

    Returns:
        A validated FeedPushConfig instance.

    Environment variables take precedence over values from the file.

    Raises:
        FileNotFoundError: If an explicit path is provided but doesn't exist.
    """
    if path is None:
        default_path = Path("feedpush.yaml")
        if default_path.exists():
            path = str(default_path)

    if path is None:
        return FeedPushConfig()

    if not Path(path).exists():
        raise FileNotFoundError(
            f"Configuration file not found: {path}. "
            f"Create one or use FEEDPUSH_* environment variables."
        )

    class FileFeedPushConfig(FeedPushConfig):
        model_config = SettingsConfigDict(yaml_file=path)

    return FileFeedPushConfig()


def get_default_config() -> FeedPushConfig:
    """Create a FeedPushConfig from defaults and environment variables."""
    return FeedPushConfig()
