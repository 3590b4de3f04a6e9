"""Define utility functions to simplify logging to the CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger("pddl_semantics")
console = Console()


def log_info(message: str) -> None:
    """Log the given string at the info level."""
    logger.info(message)


def log_debug(message: str) -> None:
    """Log the given string at the debug level."""
    logger.debug(message)


def configure_logging(verbose: bool = False) -> None:
    """Route the package's log messages to the shared Rich console.

    :param verbose: Whether to include debug messages (defaults to False)
    """
    handler = RichHandler(console=console, show_path=False, markup=False)
    logging.basicConfig(level=logging.WARNING, format="%(message)s", handlers=[handler])
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
