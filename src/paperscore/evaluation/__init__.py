"""
Evaluation Module

Heuristic answer grading with key-term feedback, optional external scoring,
and report aggregation.
"""

from .grader import AnswerGrader, HeuristicGrader, GradingCriteria, GradingResult, GradingSource, grade
from .similarity import LexicalMatcher, KeyTermExtractor, jaccard_similarity
from .feedback import FeedbackBuilder, ScoreBand, score_band
from .report import ReportBuilder, GradingReport, QuestionOutcome, summarize_scores, letter_grade

__all__ = [
    "AnswerGrader",
    "HeuristicGrader",
    "GradingCriteria",
    "GradingResult",
    "GradingSource",
    "grade",
    "LexicalMatcher",
    "KeyTermExtractor",
    "jaccard_similarity",
    "FeedbackBuilder",
    "ScoreBand",
    "score_band",
    "ReportBuilder",
    "GradingReport",
    "QuestionOutcome",
    "summarize_scores",
    "letter_grade",
]
