"""
Scorers Module

Pluggable external answer scorers consulted before the heuristic grader.
"""

from .base import ExternalScorer, ScorerResponse
from .http_scorer import HTTPScorer, create_scorer
from .response_parser import EvaluationResponseParser

__all__ = [
    "ExternalScorer",
    "ScorerResponse",
    "HTTPScorer",
    "create_scorer",
    "EvaluationResponseParser",
]
