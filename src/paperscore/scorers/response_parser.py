"""
Evaluation Response Parser

Extracts a numeric score and feedback text from an external scorer's reply.
"""

import json
import re
from typing import Optional, Tuple

from ..core.exceptions import ScorerResponseError


DEFAULT_FEEDBACK = "Unable to evaluate answer."


class EvaluationResponseParser:
    """Parses 'Score: N' / 'Feedback: ...' replies, or a JSON object with the same keys."""

    SCORE_PATTERN = re.compile(r'^\s*\**score\**\s*[:=]\s*\**\s*(-?\d+(?:\.\d+)?)', re.IGNORECASE | re.MULTILINE)
    FEEDBACK_PATTERN = re.compile(r'^\s*\**feedback\**\s*[:=]\s*\**\s*(.*)', re.IGNORECASE | re.MULTILINE | re.DOTALL)

    def parse(self, text: Optional[str]) -> Tuple[int, str]:
        """
        Parse a scorer reply.

        Args:
            text: Raw reply text

        Returns:
            Tuple of (score clamped to 0-100, feedback)

        Raises:
            ScorerResponseError: If no score can be found
        """
        if not text or not text.strip():
            raise ScorerResponseError("Empty response from scorer", response_body=text)

        parsed = self._parse_json(text)
        if parsed is not None:
            return parsed

        score_match = self.SCORE_PATTERN.search(text)
        if not score_match:
            raise ScorerResponseError("No score found in scorer response", response_body=text)

        feedback = DEFAULT_FEEDBACK
        feedback_match = self.FEEDBACK_PATTERN.search(text)
        if feedback_match:
            # Feedback may run over several lines
            lines = [line.strip() for line in feedback_match.group(1).splitlines()]
            feedback = ' '.join(line for line in lines if line and not self.SCORE_PATTERN.match(line))
            feedback = feedback or DEFAULT_FEEDBACK

        return self._clamp(float(score_match.group(1))), feedback

    def _parse_json(self, text: str) -> Optional[Tuple[int, str]]:
        stripped = text.strip()
        if not stripped.startswith('{'):
            return None
        try:
            data = json.loads(stripped)
        except json.JSONDecodeError:
            return None
        if not isinstance(data, dict) or 'score' not in data:
            return None

        try:
            score = float(data['score'])
        except (TypeError, ValueError) as e:
            raise ScorerResponseError(f"Invalid score value: {data['score']!r}", response_body=text) from e

        feedback = str(data.get('feedback') or '').strip() or DEFAULT_FEEDBACK
        return self._clamp(score), feedback

    @staticmethod
    def _clamp(score: float) -> int:
        return max(0, min(100, int(round(score))))
