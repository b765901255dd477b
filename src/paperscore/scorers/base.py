"""
Base Scorer Interface

Abstract base class for external answer scorers so the grader can consult a
remote inference API, a local model, or nothing at all through one API.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class ScorerResponse:
    """Standardized result from an external scorer."""
    score: int
    feedback: str
    scorer_name: str
    raw_text: str = ""
    latency_ms: float = 0.0
    timestamp: Optional[datetime] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now()


class ExternalScorer(ABC):
    """Abstract base class for external answer scorers."""

    name = "external"

    def __init__(self):
        self._total_requests = 0
        self._failed_requests = 0

    @abstractmethod
    async def score(self, question: str, reference: str, student_answer: str) -> ScorerResponse:
        """
        Score a student answer.

        Args:
            question: Question text
            reference: Reference answer
            student_answer: Student's answer

        Returns:
            ScorerResponse with a 0-100 score and feedback

        Raises:
            ScorerError: If the scorer cannot produce a usable score
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check whether the scorer is configured and usable.

        Returns:
            True if the scorer can be called, False otherwise
        """
        pass

    async def close(self) -> None:
        """Release any held resources."""
        return None

    def format_evaluation_prompt(self, question: str, reference: str, student_answer: str) -> str:
        """
        Build the evaluation prompt sent to a language model.

        Args:
            question: Question text
            reference: Reference answer
            student_answer: Student's answer

        Returns:
            Prompt asking for a 'Score:' line and a 'Feedback:' line
        """
        return f"""Evaluate this student answer:

Question: {question}
Correct Answer: {reference}
Student Answer: {student_answer}

Rate the student answer on a scale of 0-100 and provide constructive feedback.
Format your response as:
Score: [0-100]
Feedback: [Your feedback here]"""

    def record_request(self, success: bool) -> None:
        self._total_requests += 1
        if not success:
            self._failed_requests += 1

    def get_usage_summary(self) -> Dict[str, Any]:
        """Request counters for this scorer."""
        return {
            'scorer': self.name,
            'total_requests': self._total_requests,
            'failed_requests': self._failed_requests,
        }
