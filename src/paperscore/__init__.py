"""
paperscore

Parses uploaded free-text answer sheets and grades each student answer
against its reference answer with lexical similarity and key-term coverage.
"""

__version__ = "1.0.0"

from .core.config import get_config
from .core.exceptions import PaperScoreException, EmptyInputError, NoValidRecordsError
from .parsing import AnswerSetParser, ParsedRecord, parse
from .evaluation import AnswerGrader, GradingResult, grade

__all__ = [
    "get_config",
    "PaperScoreException",
    "EmptyInputError",
    "NoValidRecordsError",
    "AnswerSetParser",
    "ParsedRecord",
    "parse",
    "AnswerGrader",
    "GradingResult",
    "grade",
]
