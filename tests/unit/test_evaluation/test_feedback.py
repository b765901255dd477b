"""
Tests for Feedback Synthesis
"""

import pytest

from paperscore.core.config import FeedbackBandsConfig
from paperscore.evaluation.feedback import (
    DETAIL_HINT, SENTENCE_HINT, FeedbackBuilder, ScoreBand, score_band
)


class TestScoreBand:
    """Test cases for score_band."""

    @pytest.mark.parametrize("score,band", [
        (100, ScoreBand.EXCELLENT),
        (90, ScoreBand.EXCELLENT),
        (89, ScoreBand.GOOD),
        (75, ScoreBand.GOOD),
        (74, ScoreBand.PARTIAL),
        (60, ScoreBand.PARTIAL),
        (59, ScoreBand.NEEDS_IMPROVEMENT),
        (40, ScoreBand.NEEDS_IMPROVEMENT),
        (39, ScoreBand.INCORRECT),
        (0, ScoreBand.INCORRECT),
    ])
    def test_default_bands(self, score, band):
        assert score_band(score) == band

    def test_custom_bands(self):
        bands = FeedbackBandsConfig(excellent=95, good=85, partial=70, needs_improvement=50)

        assert score_band(92, bands) == ScoreBand.GOOD
        assert score_band(45, bands) == ScoreBand.INCORRECT


class TestFeedbackBuilder:
    """Test cases for FeedbackBuilder."""

    def setup_method(self):
        self.builder = FeedbackBuilder()
        self.answer = "A complete sentence about the topic."

    def test_excellent_lists_found_terms(self):
        feedback = self.builder.build(95, self.answer, ["light", "energy"], [])

        assert feedback == "Excellent answer! You correctly included key terms: light, energy."

    def test_excellent_without_terms(self):
        feedback = self.builder.build(95, self.answer, [], [])

        assert feedback == (
            "Excellent answer! Your response demonstrates a strong understanding of the concept."
        )

    def test_good_mentions_found_and_missing(self):
        feedback = self.builder.build(80, self.answer, ["light"], ["chemical"])

        assert feedback == (
            "Good answer! You included important terms: light. Consider mentioning: chemical."
        )

    def test_partial(self):
        feedback = self.builder.build(65, self.answer, ["light"], ["energy"])

        assert feedback.startswith("Partially correct.")
        assert "You got some key points: light." in feedback
        assert "Missing important elements: energy." in feedback

    def test_needs_improvement(self):
        feedback = self.builder.build(45, self.answer, ["light"], ["energy"])

        assert feedback.startswith("Needs improvement.")
        assert "You mentioned: light, which is correct." in feedback
        assert feedback.endswith("Review the material and try to be more specific.")

    def test_incorrect(self):
        feedback = self.builder.build(10, self.answer, [], ["photosynthesis", "light"])

        assert feedback == (
            "Incorrect or incomplete answer. The answer should include: photosynthesis, light. "
            "Please review the topic and provide a more detailed response."
        )

    def test_short_answer_gets_detail_hint(self):
        feedback = self.builder.build(95, "Paris.", ["paris"], [])

        assert DETAIL_HINT in feedback
        assert SENTENCE_HINT not in feedback

    def test_unpunctuated_answer_gets_sentence_hint(self):
        feedback = self.builder.build(95, "Paris is the capital", ["paris"], [])

        assert feedback.endswith(SENTENCE_HINT)
        assert DETAIL_HINT not in feedback

    def test_hints_follow_band_text(self):
        feedback = self.builder.build(20, "plants", [], ["photosynthesis"])

        assert feedback.endswith(f"{DETAIL_HINT} {SENTENCE_HINT}")
