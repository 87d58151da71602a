"""gh-info CLI - terminal viewer for GitHub user profiles.

Commands:
- watch: Interactive view, r to refresh, q to quit
- show: Fetch once and print the profile card

Settings come from GHINFO_* environment variables (see gh_info.config);
command-line options take precedence.
"""

import asyncio
import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.text import Text

from gh_info.config import Settings
from gh_info.errors import FetchError
from gh_info.github.client import GitHubClient, create_http_client
from gh_info.tui.controller import ProfileViewer
from gh_info.tui.render import format_card

app = typer.Typer(
    name="gh-info",
    help="Terminal viewer for GitHub user profiles",
    no_args_is_help=True,
)

console = Console()
logger = logging.getLogger(__name__)


def _load_settings(**overrides: object) -> Settings:
    """Build Settings from the environment, applying non-None CLI overrides."""
    settings = Settings()
    updates = {key: value for key, value in overrides.items() if value is not None}
    return settings.model_copy(update=updates) if updates else settings


def _configure_logging(settings: Settings) -> None:
    """Send logs to the configured file; without one, logging stays silent."""
    if settings.log_file is None:
        return

    settings.log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=settings.log_file,
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("watch")
def watch(
    username: str = typer.Argument(None, help="Profile to view (default: GHINFO_USERNAME)"),
    interval: float = typer.Option(
        None, "--interval", "-i", min=0.01, help="Loading timer interval in seconds"
    ),
    timeout: float = typer.Option(
        None, "--timeout", "-t", min=0.01, help="HTTP request timeout in seconds"
    ),
    api_url: str = typer.Option(
        None, "--api-url", envvar="GHINFO_API_BASE_URL", help="GitHub API base URL"
    ),
    log_file: Path = typer.Option(None, "--log-file", help="Write logs to this file"),
) -> None:
    """
    Show a profile interactively.

    Press r to refresh and q (or Ctrl+C) to quit. Fetch failures are shown
    on screen and can be retried with r.
    """

    async def _run(settings: Settings) -> None:
        async with create_http_client(settings) as http:
            viewer = ProfileViewer(
                GitHubClient(http=http),
                settings.username,
                tick_interval=settings.tick_interval,
                console=console,
            )
            await viewer.run()

    try:
        settings = _load_settings(
            username=username,
            tick_interval=interval,
            timeout=timeout,
            api_base_url=api_url,
            log_file=log_file,
        )
        _configure_logging(settings)
        asyncio.run(_run(settings))
    except Exception as e:
        logger.exception("Viewer failed")
        console.print(Text(f"Error: {e}", style="red"))
        raise typer.Exit(1)


@app.command("show")
def show(
    username: str = typer.Argument(None, help="Profile to show (default: GHINFO_USERNAME)"),
    timeout: float = typer.Option(
        None, "--timeout", "-t", min=0.01, help="HTTP request timeout in seconds"
    ),
    api_url: str = typer.Option(
        None, "--api-url", envvar="GHINFO_API_BASE_URL", help="GitHub API base URL"
    ),
) -> None:
    """Fetch a profile once and print it."""

    async def _fetch(settings: Settings):
        async with create_http_client(settings) as http:
            return await GitHubClient(http=http).get_user(settings.username)

    try:
        settings = _load_settings(username=username, timeout=timeout, api_base_url=api_url)
        _configure_logging(settings)
        record = asyncio.run(_fetch(settings))
    except (FetchError, ValidationError, OSError) as e:
        console.print(Text(f"Error: {e}", style="red"))
        raise typer.Exit(1)

    console.print(Text(format_card(record, footer=False)))


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
