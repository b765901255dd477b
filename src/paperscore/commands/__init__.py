"""
Commands Module

Click command implementations for the paperscore CLI.
"""

from .grade import grade
from .parse import parse
from .health import health

__all__ = [
    "grade",
    "parse",
    "health",
]
