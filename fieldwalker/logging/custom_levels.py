"""Custom log levels for fieldwalker.

The walker reports every visited or pruned location. That is too chatty for
DEBUG, so those lines use TRACE, a level below DEBUG registered here at
import time.

Example:
    >>> from fieldwalker.logging import enable_trace
    >>> enable_trace()  # per-location lines from fieldwalker.* on stderr
"""

import logging
from typing import Any, Dict, Optional, Set

# Level name -> number, for levels registered through this module
_custom_levels: Dict[str, int] = {}


def add_custom_log_level(
    level_name: str, level_number: int, method_name: Optional[str] = None
) -> int:
    """Register a log level and a Logger method of the same name.

    Args:
        level_name: Name shown in log records, e.g. "TRACE"
        level_number: Numeric level; DEBUG is 10, NOTSET is 0
        method_name: Logger method to add, defaults to level_name.lower()

    Returns:
        The registered level number

    Raises:
        ValueError: If level_name is already bound to another number
    """
    known = logging.getLevelName(level_name)
    if isinstance(known, int):
        if known != level_number:
            raise ValueError(
                f"Log level '{level_name}' already exists with number {known}"
            )
        _custom_levels[level_name] = level_number
        return level_number

    logging.addLevelName(level_number, level_name)
    setattr(logging, level_name, level_number)

    def log_at_level(self, message: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(level_number):
            self._log(level_number, message, args, **kwargs)

    setattr(logging.getLoggerClass(), method_name or level_name.lower(), log_at_level)
    _custom_levels[level_name] = level_number

    return level_number


def get_custom_levels() -> Set[str]:
    """Names of the levels registered through add_custom_log_level."""
    return set(_custom_levels)


def is_custom_level(level_name: str) -> bool:
    return level_name in _custom_levels


TRACE_LEVEL_NUMBER = 5
add_custom_log_level("TRACE", TRACE_LEVEL_NUMBER)


def enable_trace(
    logger_name: str = "fieldwalker", handler: Optional[logging.Handler] = None
) -> logging.Logger:
    """Turn on TRACE output for a fieldwalker logger.

    Args:
        logger_name: Logger to enable; child loggers inherit the level
        handler: Handler to attach, defaults to a stderr StreamHandler.
            Skipped if the logger already has handlers.

    Returns:
        The configured logger
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(TRACE_LEVEL_NUMBER)
    if not logger.handlers:
        logger.addHandler(handler or logging.StreamHandler())
    return logger


__all__ = [
    "add_custom_log_level",
    "get_custom_levels",
    "is_custom_level",
    "enable_trace",
    "TRACE_LEVEL_NUMBER",
]
