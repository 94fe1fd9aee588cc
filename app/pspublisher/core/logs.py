"""Logging setup for the command line.

Diagnostic logs go to standard error through Rich. User-facing progress
lines are printed separately via :mod:`pspublisher.utils.formatting`.
"""

import logging

from rich.logging import RichHandler

from pspublisher.utils.formatting import err_console

LOGGER_NAME = "pspublisher"
WIRE_LOGGER_NAME = "pspublisher.publisher.wire"


def configure_logging(verbose: bool = False, debug: bool = False) -> logging.Logger:
    """Configure the package logger.

    Levels:
    - default: warnings and errors only
    - debug: step details
    - verbose: step details plus raw API responses

    Calling this again replaces the previous handler.

    Args:
        verbose: Enable verbose logging (implies debug).
        debug: Enable debug logging.

    Returns:
        The configured package logger.
    """
    root = logging.getLogger(LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose or debug else logging.WARNING)

    logging.getLogger(WIRE_LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.INFO)
    return root
