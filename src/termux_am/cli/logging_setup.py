"""Logging configuration for the ``termux-am`` command.

Library modules only create ``logging.getLogger(__name__)`` loggers;
handlers are attached here, once per CLI run, to the package logger.
Records are rendered through Rich on stderr when it is installed.
"""

from __future__ import annotations

import logging

PACKAGE_LOGGER: str = "termux_am"

_HANDLER_MARKER = "_termux_am_handler"


def _build_handler() -> logging.Handler:
    try:
        from rich.logging import RichHandler
    except ModuleNotFoundError:
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(levelname)s %(name)s: %(message)s"),
        )
        return handler

    from termux_am.cli.console import get_rich_console

    return RichHandler(
        console=get_rich_console(),
        show_time=False,
        show_path=False,
        markup=False,
    )


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """Attach a single stderr handler to the package logger at *level*.

    Calling this again replaces the handler installed by a previous call.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_MARKER, False):
            logger.removeHandler(existing)

    handler = _build_handler()
    setattr(handler, _HANDLER_MARKER, True)
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    return logger
