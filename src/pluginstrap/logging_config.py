"""
Logging configuration, set up once by the CLI callback.

Modules do ``logger = logging.getLogger(__name__)`` and inherit this.
Diagnostics go to stderr through rich so they don't interleave badly
with the progress output printed on stdout.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False) -> None:
    """
    Configure the root logger.

    Parameters
    ----------
    verbose : bool, default=False
        DEBUG level when True (shows every applied rule), WARNING otherwise.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbose,
        show_time=verbose,
        markup=False,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # prompt_toolkit's event loop is noisy at DEBUG
    logging.getLogger("asyncio").setLevel(logging.WARNING)
