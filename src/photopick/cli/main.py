"""Photopick CLI entry point."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from photopick.cli.activity import activity_cmd
from photopick.cli.gallery import (
    finalize_cmd,
    gallery_cmd,
    later_cmd,
    resume_cmd,
    select_cmd,
    view_cmd,
)
from photopick.cli.init import init_cmd
from photopick.cli.remove import remove_cmd
from photopick.cli.sync import sync_cmd
from photopick.cli.users import users_app
from photopick.config import ConfigError, load_config


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"photopick {_installed_version()}")
        raise typer.Exit()


def _installed_version() -> str:
    try:
        return importlib.metadata.version("photopick")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else "WARNING"
    if not verbose:
        try:
            level = load_config().logging.level
        except ConfigError:
            pass  # reported by the command itself
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


app = typer.Typer(
    name="photopick",
    help=(
        "Photopick — client photo selection from Google Drive.\n\n"
        "  photopick sync    Operator: pull a Drive folder tree into a user's gallery.\n"
        "  photopick select  Client: mark a photo as selected (capped per user)."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log debug output to stderr.")
    ] = False,
) -> None:
    """Photopick — client photo selection from Google Drive."""
    _configure_logging(verbose)


app.command("init")(init_cmd)
app.add_typer(users_app, name="user")
app.command("sync")(sync_cmd)
app.command("gallery")(gallery_cmd)
app.command("view")(view_cmd)
app.command("resume")(resume_cmd)
app.command("select")(select_cmd)
app.command("later")(later_cmd)
app.command("finalize")(finalize_cmd)
app.command("activity")(activity_cmd)
app.command("remove")(remove_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed Photopick version."""
    typer.echo(f"photopick {_installed_version()}")


if __name__ == "__main__":
    app()
