"""Leveled console logging rendered with rich."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

LOGGER_NAME = "srt_narrator"

THEME = Theme({
    "logging.level.info": "blue",
    "logging.level.success": "green",
    "logging.level.warning": "yellow",
    "logging.level.error": "red",
})


def make_console(stream=None) -> Console:
    """Console on the given stream, or on stderr when none is given."""
    if stream is None:
        return Console(stderr=True, theme=THEME)
    return Console(file=stream, theme=THEME)


def setup_logging(level: int = logging.INFO, stream=None) -> logging.Logger:
    """Configure the package logger with a single rich console handler.

    Safe to call more than once; earlier handlers are replaced.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = RichHandler(
        console=make_console(stream),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def log_success(logger: logging.Logger, message: str, *args) -> None:
    logger.log(SUCCESS, message, *args)
