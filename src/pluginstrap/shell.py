"""
pluginstrap.shell - External Commands
=====================================

Thin wrappers around ``git`` and the dependency installers. Every
command runs to completion before the next step starts; failures raise
``ProcessError`` and are never retried. Only the clone is time-bounded.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from pluginstrap.errors import ConfigurationError, ProcessError


logger = logging.getLogger(__name__)

# Installer kind -> command run inside the project directory
INSTALL_COMMANDS: dict[str, list[str]] = {
    "webpack": ["yarn", "install"],
    "composer": ["composer", "install", "--ignore-platform-reqs"],
}

DEFAULT_CLONE_TIMEOUT = 45.0


def run_command(
    command: list[str],
    *,
    cwd: Path | None = None,
    timeout: float | None = None,
) -> str:
    """
    Run a command and return its captured stdout.

    Parameters
    ----------
    command : list[str]
        Program and arguments (no shell).

    cwd : Path | None
        Working directory.

    timeout : float | None
        Seconds before the process is killed.

    Returns
    -------
    str
        Stripped stdout.

    Raises
    ------
    ProcessError
        On a non-zero exit, a timeout, or a missing executable.
    """
    logger.debug("Running: %s (cwd=%s)", " ".join(command), cwd)

    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        raise ProcessError(
            f"'{' '.join(command)}' timed out after {timeout:g}s",
            command=command,
        ) from e
    except FileNotFoundError as e:
        raise ProcessError(
            f"'{command[0]}' is not installed or not on PATH",
            command=command,
        ) from e

    if result.returncode != 0:
        output = (result.stderr or result.stdout).strip()
        raise ProcessError(
            f"'{' '.join(command)}' exited with code {result.returncode}"
            + (f": {output}" if output else ""),
            command=command,
            returncode=result.returncode,
            output=output,
        )

    return result.stdout.strip()


def clone_repository(
    repository: str,
    destination: Path,
    branch: str = "",
    timeout: float = DEFAULT_CLONE_TIMEOUT,
) -> None:
    """
    Clone the boilerplate into ``destination``.

    Parameters
    ----------
    repository : str
        Git URL.

    destination : Path
        Target directory; git refuses a non-empty one.

    branch : str, default=""
        Branch to check out; empty clones the default branch.

    timeout : float, default=45.0
        Seconds before the clone is aborted.
    """
    command = ["git", "clone"]
    if branch:
        command += ["-b", branch]
    command += [repository, str(destination)]

    run_command(command, timeout=timeout)


def install_dependencies(kind: str, project_path: Path) -> None:
    """
    Run one dependency installer inside the project.

    Raises
    ------
    ConfigurationError
        If ``kind`` isn't a known installer.
    ProcessError
        If the installer fails.
    """
    command = INSTALL_COMMANDS.get(kind)
    if command is None:
        raise ConfigurationError(f"Don't know how to install '{kind}'.")

    run_command(command, cwd=project_path)


def clean_up(project_path: Path) -> None:
    """Delete the cloned git history so the project starts fresh."""
    git_dir = project_path / ".git"
    if git_dir.exists():
        shutil.rmtree(git_dir)
        logger.debug("Removed %s", git_dir)
