"""
CLI Module

Rich output formatting for the command-line interface.
"""

from .formatting import (
    console,
    format_records_table,
    format_report_summary,
    format_report_table,
    display_error,
)

__all__ = [
    "console",
    "format_records_table",
    "format_report_summary",
    "format_report_table",
    "display_error",
]
