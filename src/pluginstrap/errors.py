"""
pluginstrap.errors - Error Taxonomy
===================================

Every failure pluginstrap knows how to describe derives from ``StrapError``.
None of them are retried: the CLI prints the message and exits non-zero,
leaving any partial output on disk for inspection.

    StrapError
    ├── ConfigurationError  - bad schema, unknown installer, bad settings
    ├── RewriteError        - I/O failure while rewriting the cloned tree
    ├── ManifestError       - a structured file (composer.json) won't parse
    ├── ProcessError        - git/composer/yarn exited non-zero or timed out
    └── UserCancelled       - the user interrupted a prompt
"""

from __future__ import annotations


class StrapError(Exception):
    """Base class for all pluginstrap errors."""


class ConfigurationError(StrapError):
    """
    The question schema, settings, or a requested installer is invalid.

    Raised before any file in the destination is touched.
    """


class RewriteError(StrapError):
    """A substitution rule or file operation failed during the rewrite."""


class ManifestError(StrapError):
    """A manifest consumed as structured data is malformed."""


class ProcessError(StrapError):
    """
    An external command failed.

    Attributes
    ----------
    command : list[str]
        The argv that was executed.

    returncode : int | None
        Exit status, or None when the process timed out or never started.

    output : str
        Captured stdout/stderr, stripped.
    """

    def __init__(
        self,
        message: str,
        *,
        command: list[str],
        returncode: int | None = None,
        output: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.output = output


class UserCancelled(StrapError):
    """The user aborted an interactive prompt (e.g. Ctrl-C)."""
