"""pixform.utils.log – colourised logger helper"""

from __future__ import annotations

import logging
from typing import Optional, cast

import colorlog

from pixform.utils import config

# Map level names to logging constants
LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _get_level_from_config() -> int:
    """Gets the logging level from config, defaulting to INFO."""
    level_name = config.get_logging_level().upper()
    return LOG_LEVEL_MAP.get(level_name, logging.INFO)


_LEVEL = _get_level_from_config()

_handler: Optional[logging.Handler] = None


def _build_handler() -> logging.Handler:
    handler = cast(logging.Handler, colorlog.StreamHandler())
    handler.setFormatter(
        colorlog.ColoredFormatter(
            fmt="%(log_color)s[%(levelname).1s] %(name)s: %(message)s",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "white",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bold",
            },
        )
    )
    return handler


def get_logger(name: str | None = None) -> logging.Logger:
    """Gets a logger instance sharing the package colour handler."""
    global _handler

    logger = logging.getLogger(name)
    logger.setLevel(_LEVEL)

    if _handler is None:
        _handler = _build_handler()
        _handler.setLevel(_LEVEL)

    if _handler not in logger.handlers:
        logger.addHandler(_handler)

    return logger


def set_global_log_level(level: int) -> None:
    """
    Configure the root logger with a single handler and set its level.
    This relies on propagation for named loggers.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(_build_handler())
    root_logger.setLevel(level)
    root_logger.info("Log level set to %s", logging.getLevelName(level))


def set_level(debug_mode: bool) -> None:
    """Set the package logging level based on debug mode."""
    global _LEVEL
    _LEVEL = logging.DEBUG if debug_mode else logging.INFO

    if _handler:
        _handler.setLevel(_LEVEL)

    for name in list(logging.Logger.manager.loggerDict):
        if name == "pixform" or name.startswith("pixform."):
            logging.getLogger(name).setLevel(_LEVEL)
