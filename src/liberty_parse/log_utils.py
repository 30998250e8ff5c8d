"""Logging utilities for liberty-parse.

Log records from the parser carry raw Liberty text (group names, attribute
values), so the Rich handler never interprets markup. Logs go to stderr by
default so that commands writing Liberty text to stdout stay pipeable.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "liberty_parse"


def make_handler(console: Optional[Console] = None) -> RichHandler:
    """Builds the Rich handler used for liberty-parse log output.

    Args:
        console: Console to write to (a stderr console if omitted).
    """
    return RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
    )


def setup_logging(quiet: bool = False, console: Optional[Console] = None) -> None:
    """Configures the logging for the application.

    Args:
        quiet: If True, set log level to WARNING (show only warnings/errors).
               If False (default), set to DEBUG (verbose mode).
        console: Console for the log handler (stderr if omitted).
    """
    level = logging.WARNING if quiet else logging.DEBUG

    root = logging.getLogger()
    if not root.hasHandlers():
        logging.basicConfig(
            level=level,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[make_handler(console)],
        )
    else:
        root.setLevel(level)
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
