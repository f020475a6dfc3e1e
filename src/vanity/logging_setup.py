"""Logging for the vanity CLI.

Every log record goes through one :class:`~rich.logging.RichHandler` bound to
the same :data:`console` that prompts, previews and tables print on, so log
lines and interactive output never interleave out of order. The level comes
from ``--debug`` or from ``VANITY_LOG_LEVEL``.
"""

from __future__ import annotations

import logging
import os
from typing import Final

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["configure_logging", "console", "resolve_level"]

LOG_LEVEL_ENV: Final[str] = "VANITY_LOG_LEVEL"

# Pillow logs every PNG chunk at DEBUG.
_CHATTY_LOGGERS: Final[tuple[str, ...]] = ("PIL",)

console = Console()


class _VanityHandler(RichHandler):
    """Marker subclass so reconfiguration can find the handler it installed."""


def resolve_level(*, debug: bool = False) -> int:
    """Pick the root level: ``--debug`` wins, then ``VANITY_LOG_LEVEL``, then INFO.

    Unknown names in the environment fall back to INFO rather than failing the
    command.
    """
    if debug:
        return logging.DEBUG
    name = os.getenv(LOG_LEVEL_ENV, "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(*, debug: bool = False) -> None:
    """Install the console handler on the root logger and set its level.

    The CLI callback runs this on each invocation. A second call only moves the
    level, so tests driving several commands in one process get one handler.
    """
    root = logging.getLogger()
    if not any(isinstance(h, _VanityHandler) for h in root.handlers):
        root.handlers.clear()
        handler = _VanityHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            markup=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)

    level = resolve_level(debug=debug)
    root.setLevel(level)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
    logging.captureWarnings(True)
