"""Process logging bootstrap for the dyadt CLI.

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed here, once per process, by the command-line entry point.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "dyadt-rich"


def configure_logging(level: str = "WARNING", console: Console | None = None) -> logging.Logger:
    """Attach a stderr RichHandler to the ``dyadt`` logger and set its level.

    Calling again only updates the level; a second handler is never added.
    """
    log_level = getattr(logging, str(level or "WARNING").upper(), logging.WARNING)

    logger = logging.getLogger("dyadt")
    logger.setLevel(log_level)

    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=False,
        )
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
