"""
Feedback Synthesis

Builds natural-language feedback for a graded answer from its score band
and the key terms it did or did not mention.
"""

from typing import List, Optional
from enum import Enum

from ..core.config import FeedbackBandsConfig


NO_ANSWER_FEEDBACK = "No answer provided. Please provide a response to the question."
ERROR_FEEDBACK = "Error occurred during grading. Please review this answer manually."
DETAIL_HINT = "Try to provide more detail in your explanation."
SENTENCE_HINT = "Consider writing in complete sentences."


class ScoreBand(str, Enum):
    """Feedback bands ordered from best to worst."""
    EXCELLENT = "excellent"
    GOOD = "good"
    PARTIAL = "partial"
    NEEDS_IMPROVEMENT = "needs_improvement"
    INCORRECT = "incorrect"


def score_band(score: int, bands: Optional[FeedbackBandsConfig] = None) -> ScoreBand:
    """Map a 0-100 score to its feedback band."""
    bands = bands or FeedbackBandsConfig()
    if score >= bands.excellent:
        return ScoreBand.EXCELLENT
    if score >= bands.good:
        return ScoreBand.GOOD
    if score >= bands.partial:
        return ScoreBand.PARTIAL
    if score >= bands.needs_improvement:
        return ScoreBand.NEEDS_IMPROVEMENT
    return ScoreBand.INCORRECT


class FeedbackBuilder:
    """Selects a feedback template by score band and fills in key terms."""

    def __init__(self, bands: Optional[FeedbackBandsConfig] = None,
                 detail_hint_length: int = 10):
        self.bands = bands or FeedbackBandsConfig()
        self.detail_hint_length = detail_hint_length

    def build(self, score: int, student_answer: str,
              found: List[str], missing: List[str]) -> str:
        """
        Compose feedback for a graded answer.

        Args:
            score: Final 0-100 score
            student_answer: The answer as written
            found: Key terms the answer mentions
            missing: Key terms the answer lacks

        Returns:
            Feedback text
        """
        band = score_band(score, self.bands)
        parts = self._band_feedback(band, found, missing)

        if len(student_answer) < self.detail_hint_length:
            parts.append(DETAIL_HINT)

        if not any(mark in student_answer for mark in '.!?'):
            parts.append(SENTENCE_HINT)

        return ' '.join(parts)

    def _band_feedback(self, band: ScoreBand, found: List[str], missing: List[str]) -> List[str]:
        found_text = ', '.join(found)
        missing_text = ', '.join(missing)

        if band == ScoreBand.EXCELLENT:
            parts = ["Excellent answer!"]
            if found:
                parts.append(f"You correctly included key terms: {found_text}.")
            else:
                parts.append("Your response demonstrates a strong understanding of the concept.")

        elif band == ScoreBand.GOOD:
            parts = ["Good answer!"]
            if found:
                parts.append(f"You included important terms: {found_text}.")
            if missing:
                parts.append(f"Consider mentioning: {missing_text}.")

        elif band == ScoreBand.PARTIAL:
            parts = ["Partially correct."]
            if found:
                parts.append(f"You got some key points: {found_text}.")
            if missing:
                parts.append(f"Missing important elements: {missing_text}.")

        elif band == ScoreBand.NEEDS_IMPROVEMENT:
            parts = ["Needs improvement."]
            if found:
                parts.append(f"You mentioned: {found_text}, which is correct.")
            if missing:
                parts.append(f"Key missing concepts: {missing_text}.")
            parts.append("Review the material and try to be more specific.")

        else:
            parts = ["Incorrect or incomplete answer."]
            if missing:
                parts.append(f"The answer should include: {missing_text}.")
            parts.append("Please review the topic and provide a more detailed response.")

        return parts
