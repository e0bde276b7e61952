"""
feedpush.cli - Command-Line Interface
=======================================

Thin Typer wrapper around the FeedPush facade. All publishing logic lives in
the library; this module only loads configuration, sets up logging and maps
the run result to an exit code.

Usage:
    feedpush                      # feedpush.yaml (if present) + FEEDPUSH_* env
    feedpush release.yaml --log-level DEBUG --json-logs

Exit Codes:
    0 - the run logged no error
    1 - the run logged at least one error (an issue was filed if possible)
    2 - the configuration could not be loaded
"""

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml

from feedpush import __version__
from feedpush.core.config import FeedPushConfig, load_config
from feedpush.core.logging import configure_logging
from feedpush.core.models import PushRunResult
from feedpush.facade import FeedPush


app = typer.Typer(
    name="feedpush",
    help="Publish build manifest artifacts to a feed and record them in the build-asset registry.",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"feedpush version {__version__}")
        raise typer.Exit()


async def _publish(config: FeedPushConfig) -> PushRunResult:
    async with FeedPush(config) as feedpush:
        return await feedpush.run()


@app.command()
def publish(
    config_path: Annotated[
        Optional[Path],
        typer.Argument(
            help="YAML configuration file (defaults to ./feedpush.yaml when present)",
            show_default=False,
        ),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Override the configured log level"),
    ] = None,
    json_logs: Annotated[
        Optional[bool],
        typer.Option(
            "--json-logs/--console-logs",
            help="Render logs as JSON lines (default: JSON outside the dev environment)",
            show_default=False,
        ),
    ] = None,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Publish the configured build manifest once."""
    try:
        config = load_config(str(config_path) if config_path else None)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        typer.echo(f"Error: could not load configuration: {e}", err=True)
        raise typer.Exit(code=2) from None

    if json_logs is None:
        json_logs = config.environment != "dev"
    configure_logging(log_level or config.log_level, json_output=json_logs)

    result = asyncio.run(_publish(config))

    if result.succeeded:
        typer.echo(f"Published {len(result.outcomes)} artifact(s)")
        return

    typer.echo(f"Publishing failed with {len(result.errors)} error(s):", err=True)
    for error in result.errors:
        typer.echo(f"  - {error}", err=True)
    if result.issue_id is not None:
        typer.echo(f"Tracking issue: #{result.issue_id}", err=True)
    raise typer.Exit(code=1)
