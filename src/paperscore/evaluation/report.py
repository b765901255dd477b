"""
Grading Report

Aggregates per-question grading results into a report with average score,
pass and excellence counts, a letter grade and per-question detail.
"""

from typing import Dict, List, Optional, Any, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from .grader import GradingResult
from ..core.config import ReportConfig
from ..parsing.answer_parser import ParsedRecord
from ..utils.logging import get_logger

logger = get_logger(__name__)


LETTER_GRADES = (
    (90, 'A'),
    (80, 'B'),
    (70, 'C'),
    (60, 'D'),
)


def letter_grade(score: float) -> str:
    """Letter grade for an average score."""
    for threshold, letter in LETTER_GRADES:
        if score >= threshold:
            return letter
    return 'F'


def summarize_scores(scores: Sequence[int], pass_threshold: int = 60,
                     excellent_threshold: int = 80) -> Dict[str, Any]:
    """
    Aggregate a list of scores.

    Args:
        scores: Per-question scores
        pass_threshold: Minimum score counted as passed
        excellent_threshold: Minimum score counted as excellent

    Returns:
        Dict with total, total_score, average_score, passed_count and excellent_count;
        average_score is 0.0 for an empty list
    """
    total = len(scores)
    total_score = sum(scores)
    return {
        'total': total,
        'total_score': total_score,
        'average_score': total_score / total if total else 0.0,
        'passed_count': sum(1 for s in scores if s >= pass_threshold),
        'excellent_count': sum(1 for s in scores if s >= excellent_threshold),
    }


@dataclass
class QuestionOutcome:
    """A parsed question paired with its grade."""
    record: ParsedRecord
    result: GradingResult

    def to_dict(self) -> Dict[str, Any]:
        data = self.record.to_dict()
        data.update({
            'score': self.result.score,
            'feedback': self.result.feedback,
            'confidence': self.result.confidence,
            'source': self.result.source.value,
            'key_terms_found': list(self.result.key_terms_found),
            'key_terms_missing': list(self.result.key_terms_missing),
        })
        return data


@dataclass
class GradingReport:
    """Graded answer sheet."""
    file_name: str
    outcomes: List[QuestionOutcome]
    total_questions: int
    total_score: int
    average_score: float
    passed_count: int
    excellent_count: int
    letter_grade: str
    low_confidence_count: int
    review_confidence: float = 0.5
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def needs_review(self) -> List[QuestionOutcome]:
        """Outcomes whose confidence is below the review threshold."""
        return [o for o in self.outcomes if o.result.confidence < self.review_confidence]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'file_name': self.file_name,
            'total_questions': self.total_questions,
            'total_score': self.total_score,
            'average_score': round(self.average_score, 1),
            'passed_count': self.passed_count,
            'excellent_count': self.excellent_count,
            'letter_grade': self.letter_grade,
            'low_confidence_count': self.low_confidence_count,
            'generated_at': self.generated_at.isoformat(),
            'questions': [o.to_dict() for o in self.outcomes],
        }


class ReportBuilder:
    """Builds grading reports from parsed records and their results."""

    def __init__(self, config: Optional[ReportConfig] = None):
        self.config = config or ReportConfig()

    def build(self, file_name: str, records: Sequence[ParsedRecord],
              results: Sequence[GradingResult]) -> GradingReport:
        """
        Build a report.

        Args:
            file_name: Name of the graded answer sheet
            records: Parsed records in order
            results: Grading results in the same order

        Returns:
            GradingReport

        Raises:
            ValueError: If records and results differ in length
        """
        if len(records) != len(results):
            raise ValueError("Records and results must have the same length")

        outcomes = [QuestionOutcome(record=r, result=g) for r, g in zip(records, results)]
        summary = summarize_scores(
            [g.score for g in results],
            pass_threshold=self.config.pass_threshold,
            excellent_threshold=self.config.excellent_threshold
        )
        low_confidence = sum(1 for g in results if g.confidence < self.config.review_confidence)

        report = GradingReport(
            file_name=file_name,
            outcomes=outcomes,
            total_questions=summary['total'],
            total_score=summary['total_score'],
            average_score=summary['average_score'],
            passed_count=summary['passed_count'],
            excellent_count=summary['excellent_count'],
            letter_grade=letter_grade(summary['average_score']),
            low_confidence_count=low_confidence,
            review_confidence=self.config.review_confidence
        )

        logger.info(f"Report for {file_name}: {report.total_questions} questions, "
                    f"average {report.average_score:.1f} ({report.letter_grade})")
        return report
