"""Logging helpers for fieldwalker."""

from .custom_levels import (
    TRACE_LEVEL_NUMBER,
    add_custom_log_level,
    enable_trace,
    get_custom_levels,
    is_custom_level,
)

__all__ = [
    "TRACE_LEVEL_NUMBER",
    "add_custom_log_level",
    "enable_trace",
    "get_custom_levels",
    "is_custom_level",
]
