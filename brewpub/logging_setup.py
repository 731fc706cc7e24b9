"""
logging_setup.py

Responsibility: Configure process-wide logging for the CLI.

Library modules only call `logging.getLogger(__name__)`; handlers are attached
here, once, by `cli.main`.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_CONFIGURED = False


def configure_logging(*, level: str = "INFO") -> None:
    """Attach a single stderr RichHandler to the root logger. Safe to call twice."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(level.upper())
    root.addHandler(handler)

    # requests/urllib3 log every connection at DEBUG.
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    _CONFIGURED = True
