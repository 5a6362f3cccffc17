"""Core postcollections utilities.

This module exports core utilities for use throughout the application.
"""

from postcollections.core.config import Settings, get_settings
from postcollections.core.logging import (
    LoggingContext,
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "LoggingContext",
    "bind_correlation_id",
    "clear_context",
]
