"""
Core Module

Foundational components used across the application including configuration
management and custom exceptions.
"""

from .config import get_config, set_config, reload_config, validate_config, AppConfig
from .exceptions import (
    PaperScoreException,
    ConfigurationError,
    ParseError,
    EmptyInputError,
    NoValidRecordsError,
    GradingError,
    ScorerError,
    RateLimitError,
    ScorerResponseError,
)

__all__ = [
    "get_config",
    "set_config",
    "reload_config",
    "validate_config",
    "AppConfig",
    "PaperScoreException",
    "ConfigurationError",
    "ParseError",
    "EmptyInputError",
    "NoValidRecordsError",
    "GradingError",
    "ScorerError",
    "RateLimitError",
    "ScorerResponseError",
]
