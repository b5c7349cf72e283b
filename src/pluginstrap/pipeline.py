"""
pluginstrap.pipeline - Plugin Creation Pipeline
===============================================

Runs the steps that follow question resolution:

    1. Clone the boilerplate into the destination
    2. Rewrite placeholder tokens with the answers
    3. Install dependencies (composer by default)
    4. Clean up (remove the cloned .git directory)

Unlike a template generator this pipeline never removes partial output:
if a step fails, whatever was cloned or rewritten stays on disk so the
user can inspect it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from pluginstrap.rewriter import rewrite
from pluginstrap.shell import clean_up, clone_repository, install_dependencies


if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from pluginstrap.models import StrapSettings


console = Console()


@dataclass
class StrapResult:
    """
    Outcome of a plugin creation run.

    Attributes
    ----------
    success : bool
        Whether every step completed.

    project_path : Path
        Where the plugin was created.

    steps_completed : list[str]
        Descriptions of the steps that finished, in order.
    """

    success: bool
    project_path: Path
    steps_completed: list[str] = field(default_factory=list)


def create_plugin(
    answers: Mapping[str, str],
    destination: Path,
    settings: StrapSettings,
    *,
    install: bool = True,
    verbose: bool = True,
) -> StrapResult:
    """
    Clone, rewrite, install and clean up a new plugin.

    Parameters
    ----------
    answers : Mapping[str, str]
        Confirmed answers from the resolver.

    destination : Path
        Directory to clone into. Must not exist yet.

    settings : StrapSettings
        Repository, branch, clone timeout and installers.

    install : bool, default=True
        Run the configured dependency installers.

    verbose : bool, default=True
        Print step progress.

    Returns
    -------
    StrapResult
        Result with the completed steps.

    Raises
    ------
    FileExistsError
        If ``destination`` already exists.
    StrapError
        From whichever step failed; partial output is left in place.
    """
    if destination.exists():
        raise FileExistsError(
            f"Directory '{destination}' already exists. "
            "Use a different project name or remove the existing directory."
        )

    result = StrapResult(success=False, project_path=destination)

    steps: list[tuple[str, Callable[[], None]]] = [
        (
            "Cloning plugin repository",
            lambda: clone_repository(
                settings.repository,
                destination,
                branch=settings.branch,
                timeout=settings.clone_timeout,
            ),
        ),
        ("Replacing plugin data", lambda: rewrite(answers, destination)),
    ]

    if install:
        for kind in settings.installers:
            steps.append((
                f"Installing {kind} dependencies. This may take a while...",
                lambda kind=kind: install_dependencies(kind, destination),
            ))

    steps.append(("Cleaning up", lambda: clean_up(destination)))

    for number, (description, action) in enumerate(steps, 1):
        if verbose:
            console.print(f"[bold]{number}.[/] {description}")

        action()
        result.steps_completed.append(description)

        if verbose:
            console.print("  [green]✓[/] Done")

    result.success = True

    if verbose:
        console.print()
        console.print(
            Panel(
                "[bold green]✔ Project is created[/]\n\n"
                "The plugin data, namespace and prefixes have been changed "
                "according to your input.\n\n"
                f"[dim]Location:[/] {escape(str(destination))}\n\n"
                "[bold]Next steps:[/]\n"
                f"  cd {escape(destination.name)}\n"
                "  npm install\n"
                "  npm run production\n\n"
                "You can activate the plugin in WordPress and work on it straight away.",
                title="[bold green]Success[/]",
                border_style="green",
            )
        )

    return result
