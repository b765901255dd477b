"""
Custom Exception Classes

Application-specific exception classes for parsing, grading and
external scorer failures across the answer grading system.
"""

from typing import Optional, Any, Dict, List


class PaperScoreException(Exception):
    """Base exception class for all paperscore errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(PaperScoreException):
    """Raised when there's an issue with configuration setup or validation."""
    pass


class ParseError(PaperScoreException):
    """Base class for answer sheet parsing failures."""

    def __init__(self, message: str, file_name: Optional[str] = None, **kwargs):
        super().__init__(message, kwargs)
        self.file_name = file_name


class EmptyInputError(ParseError):
    """Raised when an uploaded answer sheet is empty or whitespace only."""

    def __init__(self, message: str = "File is empty or contains no readable content",
                 **kwargs):
        super().__init__(message, **kwargs)


class NoValidRecordsError(ParseError):
    """Raised when segments were found but none held a question and an answer."""

    def __init__(self, message: str, segments_found: int = 0,
                 strategy: Optional[str] = None,
                 sample_lines: Optional[List[str]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.segments_found = segments_found
        self.strategy = strategy
        self.sample_lines = sample_lines or []

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Diagnostic payload for callers that render their own message."""
        return {
            'segments_found': self.segments_found,
            'strategy': self.strategy,
            'sample_lines': list(self.sample_lines),
            'file_name': self.file_name,
        }


class GradingError(PaperScoreException):
    """Raised when answer grading fails."""

    def __init__(self, message: str, question: Optional[str] = None,
                 student_answer: Optional[str] = None,
                 reference_answer: Optional[str] = None, **kwargs):
        super().__init__(message, kwargs)
        self.question = question
        self.student_answer = student_answer
        self.reference_answer = reference_answer


class ScorerError(PaperScoreException):
    """Raised when calls to an external scoring service fail."""

    def __init__(self, message: str, scorer_name: Optional[str] = None,
                 status_code: Optional[int] = None,
                 response_body: Optional[str] = None, **kwargs):
        super().__init__(message, kwargs)
        self.scorer_name = scorer_name
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(ScorerError):
    """Raised when the scoring service rate limit is exceeded."""

    def __init__(self, message: str, retry_after: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ScorerResponseError(ScorerError):
    """Raised when a scorer reply cannot be turned into a score."""
    pass
