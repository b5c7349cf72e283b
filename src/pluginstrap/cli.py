"""
pluginstrap.cli - Command Line Interface
========================================

This module provides the command-line interface for pluginstrap using Typer.

Architecture
------------
    app (main entry point)
    └── plugin   - Create a new WordPress plugin from the boilerplate

Every non-derived question has a matching option. Answered options are
never prompted; the rest are asked interactively, followed by a summary
to confirm. ``--yes`` skips the summary.

Usage Examples
--------------
Interactive mode:
    $ pluginstrap plugin

Mostly scripted:
    $ pluginstrap plugin --project-name "Acme Tools" --framework vue --yes

Show help:
    $ pluginstrap --help
    $ pluginstrap plugin --help

See Also
--------
- resolver.py: Question resolution
- pipeline.py: Clone, rewrite, install, clean up
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from pluginstrap import __version__
from pluginstrap.errors import StrapError, UserCancelled
from pluginstrap.logging_config import setup_logging
from pluginstrap.models import StrapSettings
from pluginstrap.pipeline import create_plugin
from pluginstrap.questions import PLUGIN_QUESTIONS
from pluginstrap.resolver import resolve


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="pluginstrap",
    help="Bootstrap a WordPress plugin from the boilerplate.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=True,
)

console = Console()


# =============================================================================
# Version Callback
# =============================================================================

def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(Panel(
            f"[bold green]pluginstrap[/] version [cyan]{__version__}[/]\n\n"
            f"[dim]WordPress plugin bootstrapper[/]",
            border_style="green",
        ))
        raise typer.Exit()


# =============================================================================
# Main Application Callback
# =============================================================================

@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log every rewrite rule and command.",
        ),
    ] = False,
) -> None:
    """
    [bold]pluginstrap[/] - WordPress plugin bootstrapper.

    Clones the plugin boilerplate and renames everything in it after
    your project.

    [bold]Quick Start:[/]

        pluginstrap plugin
    """
    setup_logging(verbose)


# =============================================================================
# Plugin Command
# =============================================================================

@app.command()
def plugin(
    project_name: Annotated[
        str | None,
        typer.Option("--project-name", "-n", help="Project name (e.g. The Plugin Name)"),
    ] = None,
    description: Annotated[
        str | None,
        typer.Option("--description", "-d", help="Plugin description"),
    ] = None,
    plugin_version: Annotated[
        str | None,
        typer.Option("--plugin-version", help="Plugin version (default: 1.0.0)"),
    ] = None,
    license_: Annotated[
        str | None,
        typer.Option("--license", "-l", help="Plugin license (default: MIT)"),
    ] = None,
    author: Annotated[
        str | None,
        typer.Option("--author", "-a", help="Author name"),
    ] = None,
    author_email: Annotated[
        str | None,
        typer.Option("--author-email", "-e", help="Author e-mail address"),
    ] = None,
    url: Annotated[
        str | None,
        typer.Option("--url", "-u", help="Author url without https://"),
    ] = None,
    framework: Annotated[
        str | None,
        typer.Option("--framework", "-f", help="Admin front-end framework: react, vue"),
    ] = None,
    directory: Annotated[
        Path | None,
        typer.Option(
            "--directory",
            "-C",
            help="Plugins folder to create the project in (default: current directory)",
            file_okay=False,
        ),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            help="Settings file (default: ./pluginstrap.toml if present)",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    no_install: Annotated[
        bool,
        typer.Option("--no-install", help="Skip installing dependencies"),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip the summary confirmation"),
    ] = False,
) -> None:
    """
    Create a new WordPress plugin.

    Should be run inside your plugins folder (wp-content/plugins), or
    pointed at it with [cyan]--directory[/].

    [bold]Examples:[/]

        # Interactive
        pluginstrap plugin

        # Vue admin, no summary
        pluginstrap plugin --project-name "Acme Tools" --framework vue --yes
    """
    overrides = {
        "projectName": project_name,
        "description": description,
        "pluginVersion": plugin_version,
        "license": license_,
        "author": author,
        "authorEmail": author_email,
        "url": url,
        "framework": framework,
    }

    try:
        settings = StrapSettings.load(config)
        answers = resolve(PLUGIN_QUESTIONS, overrides, auto_confirm=yes)
        destination = (directory or Path.cwd()) / answers["package"]

        console.print()
        result = create_plugin(
            answers,
            destination,
            settings,
            install=not no_install,
        )
    except UserCancelled:
        raise typer.Abort()
    except (StrapError, FileExistsError) as e:
        rprint(f"[red]Error:[/] {escape(str(e))}")
        raise typer.Exit(1)

    if not result.success:
        raise typer.Exit(1)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    app()
