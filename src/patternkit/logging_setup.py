"""Centralized logging configuration for patternkit."""

from __future__ import annotations

import logging
import os
from typing import Final

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["console", "configure_logging"]

_LOG_LEVEL_ENV: Final[str] = "PATTERNKIT_LOG_LEVEL"
_DEFAULT_LEVEL_NAME: Final[str] = "INFO"

console = Console(stderr=True)


def _resolve_level(debug: bool) -> int:
    """Return the logging level for this run."""
    if debug:
        return logging.DEBUG
    level_name = os.getenv(_LOG_LEVEL_ENV, _DEFAULT_LEVEL_NAME).upper()
    return getattr(logging, level_name, logging.INFO)


def configure_logging(*, debug: bool = False) -> None:
    """Configure logging once with a Rich handler.

    Calling it again only updates the level; the managed handler is reused.
    """
    root_logger = logging.getLogger()

    managed = [
        handler
        for handler in root_logger.handlers
        if isinstance(handler, RichHandler) and getattr(handler, "_patternkit_managed", False)
    ]
    if not managed:
        root_logger.handlers.clear()
        handler = RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._patternkit_managed = True  # type: ignore[attr-defined]
        root_logger.addHandler(handler)

    root_logger.setLevel(_resolve_level(debug))
    logging.captureWarnings(True)
