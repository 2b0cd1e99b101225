"""Logging for rxdesk.

Every module logger is a child of the ``rxdesk`` logger, which owns the only
handler (Rich, on stderr). Level comes from ``RXDESK_LOG_LEVEL``.
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "rxdesk"


def configure_logging(level: str | None = None, *, console: Console | None = None) -> logging.Logger:
    """(Re)install the Rich handler on the package logger and return it."""
    root = logging.getLogger(ROOT_LOGGER)
    for handler in [h for h in root.handlers if isinstance(h, RichHandler)]:
        root.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("[%(name)s] %(message)s"))
    root.addHandler(handler)
    root.setLevel((level or os.getenv("RXDESK_LOG_LEVEL", "INFO")).upper())
    return root


def get_logger(name: str) -> logging.Logger:
    """Logger for `name`, nested under the package logger."""
    root = logging.getLogger(ROOT_LOGGER)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        configure_logging()
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
