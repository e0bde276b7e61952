"""
Tests for feedpush.cli - Command-Line Interface
=================================================

These tests invoke the Typer app in-process with CliRunner.

What's Being Tested:
    - --help and --version
    - Exit code 0 for a clean run, 1 for a failed run, 2 for bad configuration
    - Logging options are accepted

Runs use in-memory collaborators; no network or real feed is touched.
"""

import os

import pytest
import structlog
import yaml
from typer.testing import CliRunner

from feedpush import __version__
from feedpush.cli import app
from feedpush.integrations.registry.base import AssetRecord, BuildRecord

from tests.conftest import REGISTRY_BUILD_ID, write_package, write_xml_manifest


runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolate(monkeypatch):
    """Keep shell FEEDPUSH_* variables out and undo configure_logging()."""
    for key in list(os.environ):
        if key.upper().startswith("FEEDPUSH_"):
            monkeypatch.delenv(key, raising=False)
    yield
    structlog.reset_defaults()


@pytest.fixture
def config_file(tmp_path, run_config):
    path = tmp_path / "feedpush.yaml"
    path.write_text(yaml.safe_dump(run_config.model_dump(mode="json")))
    return path


@pytest.fixture
def published_build(tmp_path, package_dir, registry, monkeypatch):
    """A one-package build, with the registry the CLI run will use."""
    write_package(package_dir, "Contoso.Sdk", "1.0.0", b"sdk")
    write_xml_manifest(tmp_path / "manifest.xml", packages=[("Contoso.Sdk", "1.0.0")])
    registry.add_build(BuildRecord(
        id=REGISTRY_BUILD_ID,
        assets=[AssetRecord(id=1, name="Contoso.Sdk", version="1.0.0")],
    ))
    monkeypatch.setattr(
        "feedpush.facade.create_build_asset_registry",
        lambda config: registry,
    )


# =============================================================================
# Tests: Help and Version
# =============================================================================
class TestCLIHelp:
    """Tests for --help and --version."""

    def test_help_returns_zero(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "--log-level" in result.output
        assert "--json-logs" in result.output

    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


# =============================================================================
# Tests: Publishing
# =============================================================================
class TestCLIPublish:
    """Tests for running a publish from the command line."""

    def test_clean_run_exits_zero(self, config_file, registry, published_build) -> None:
        result = runner.invoke(app, [str(config_file), "--console-logs"])

        assert result.exit_code == 0, result.output
        assert "Published 1 artifact(s)" in result.output
        assert [asset_id for asset_id, _, _ in registry.locations] == [1]

    def test_failed_run_exits_one(self, config_file, tmp_path) -> None:
        # Manifest lists a package that is not on disk, and no build is registered
        write_xml_manifest(tmp_path / "manifest.xml", packages=[("Contoso.Sdk", "1.0.0")])

        result = runner.invoke(app, [str(config_file), "--log-level", "ERROR"])

        assert result.exit_code == 1
        assert "Publishing failed" in result.output
        assert "Failed to fetch the build" in result.output
        assert "Tracking issue: #" in result.output

    def test_missing_config_exits_two(self, tmp_path) -> None:
        result = runner.invoke(app, [str(tmp_path / "nope.yaml")])

        assert result.exit_code == 2
        assert "could not load configuration" in result.output

    def test_invalid_config_exits_two(self, tmp_path) -> None:
        path = tmp_path / "feedpush.yaml"
        path.write_text("environment: qa\n")

        result = runner.invoke(app, [str(path)])

        assert result.exit_code == 2

    def test_environment_overrides_config_file(
        self, config_file, registry, published_build, monkeypatch
    ) -> None:
        monkeypatch.setenv("FEEDPUSH_MAX_CONCURRENT_UPLOADS", "0")

        result = runner.invoke(app, [str(config_file)])

        assert result.exit_code == 1
        assert "Max concurrent uploads must be positive, got 0" in result.output
