"""
Utils Module

Logging configuration and async utility functions.
"""

from .logging import setup_logging, get_logger, get_sheet_logger, PerformanceTimer
from .async_helpers import retry_with_backoff, timeout_after, run_sync, in_event_loop

__all__ = [
    "setup_logging",
    "get_logger",
    "get_sheet_logger",
    "PerformanceTimer",
    "retry_with_backoff",
    "timeout_after",
    "run_sync",
    "in_event_loop",
]
