"""Command line interface for shipit."""

import json
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax

from shipit import __version__
from shipit.core.config import default_config_path, load_settings, masked, save_settings
from shipit.core.errors import ShipItError
from shipit.core.pipeline import ShipPipeline
from shipit.models.platform import Platform
from shipit.models.result import ShipOutcome, ShipResult
from shipit.models.settings import Settings

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _print_text(text: str) -> None:
    """Print user or model supplied text without markup interpretation."""
    console.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True)


def _fail(error: Exception) -> None:
    err_console.print(f"Error: {error}", style="red", markup=False, soft_wrap=True)
    raise click.Abort() from error


def _load_or_exit(config_path: Optional[str]) -> Settings:
    try:
        return load_settings(config_path)
    except ShipItError as e:
        _fail(e)


@click.group()
@click.version_option(version=__version__, prog_name="shipit")
def main():
    """Shipit - open a request for the commits between two branches."""


@main.command()
@click.argument("source")
@click.argument("target")
@click.option("--ai", is_flag=True, help="Summarize the commits with Ollama")
@click.option("--dryrun", is_flag=True, help="Stop before opening the request")
@click.option(
    "--dir",
    "directory",
    type=click.Path(file_okay=False),
    help="Repository directory (defaults to the current directory)",
)
@click.option(
    "--id",
    "identifier",
    help="GitHub 'owner/repo' or numeric GitLab project ID",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Settings file to use instead of the default",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def b2b(
    source: str,
    target: str,
    ai: bool,
    dryrun: bool,
    directory: Optional[str],
    identifier: Optional[str],
    config_path: Optional[str],
    verbose: bool,
):
    """Open a request shipping SOURCE into TARGET."""
    _configure_logging(verbose)
    settings = _load_or_exit(config_path).with_overrides(ai=ai, dryrun=dryrun)

    if identifier is None and not settings.shipit.dryrun:
        raise click.UsageError("Missing option '--id' (required unless --dryrun).")

    pipeline = ShipPipeline(settings)
    try:
        result = pipeline.run(source, target, directory=directory, identifier=identifier)
    except ShipItError as e:
        _fail(e)

    _report(result, source, target)


def _report(result: ShipResult, source: str, target: str) -> None:
    console.print(
        f"Found a git repository at {result.repository_path}",
        markup=False,
        soft_wrap=True,
    )

    if result.outcome is ShipOutcome.NOTHING_TO_DO:
        console.print(
            f"No commits found between '{source}' and '{target}'. Nothing to do.",
            markup=False,
            soft_wrap=True,
        )
        return

    console.print(f"Commits to ship: {len(result.commits)}")
    if result.summarized:
        heading = "The AI summarized description is:"
    else:
        heading = "The request description is:"
    console.print(f"\n{heading}\n", style="bold")
    _print_text(result.description or "")

    if result.outcome is ShipOutcome.DRY_RUN:
        console.print(
            "\n\nDry run complete! Re-run without the dry-run flag to open a request.",
            style="green",
        )
        return

    kind = "pull request" if result.platform is Platform.GITHUB else "merge request"
    console.print(f"\n\nThe {kind} is available at:\n", style="green")
    _print_text(result.url or "")


@main.group("config")
def config_group():
    """Manage the shipit settings file."""


@config_group.command("generate")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Where to write the settings file",
)
@click.option("--force", is_flag=True, help="Overwrite an existing settings file")
def generate(config_path: Optional[str], force: bool):
    """Write the default settings file."""
    try:
        written = save_settings(Settings(), config_path, overwrite=force)
    except ShipItError as e:
        _fail(e)
    console.print(f"Config written to: {written}", markup=False, soft_wrap=True)


@config_group.command("show")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Settings file to show instead of the default",
)
def show(config_path: Optional[str]):
    """Print the effective settings with tokens masked."""
    settings = _load_or_exit(config_path)
    path = Path(config_path) if config_path else default_config_path()
    console.print(f"# {path}\n", markup=False, soft_wrap=True)
    console.print(Syntax(json.dumps(masked(settings), indent=2), "json"))


if __name__ == "__main__":
    main()
