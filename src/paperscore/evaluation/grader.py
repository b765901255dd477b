"""
Answer Grading System

Grades free-text student answers against a reference answer with lexical
similarity and key-term coverage, optionally consulting an external scorer
first and falling back to the deterministic heuristic when it is unavailable.
"""

import asyncio
from typing import Dict, List, Optional, Any, Sequence
from dataclasses import dataclass, field, asdict
from enum import Enum

from .similarity import LexicalMatcher, round_half_up
from .feedback import FeedbackBuilder, NO_ANSWER_FEEDBACK, ERROR_FEEDBACK
from ..core.config import AppConfig, FeedbackBandsConfig, GradingConfig, DEFAULT_KEY_TERM_PATTERN, get_config
from ..core.exceptions import GradingError, ScorerError
from ..parsing.answer_parser import ParsedRecord
from ..scorers.base import ExternalScorer
from ..scorers.http_scorer import create_scorer
from ..utils.async_helpers import in_event_loop, run_sync, timeout_after
from ..utils.logging import get_logger

logger = get_logger(__name__)

SYNC_IN_LOOP_REASON = "grade() was called inside a running event loop; use grade_async() to reach the scorer"


class GradingSource(str, Enum):
    """Where a grade came from."""
    HEURISTIC = "heuristic"
    EXTERNAL = "external"
    NO_ANSWER = "no_answer"
    ERROR = "error"


@dataclass
class GradingResult:
    """Result of grading one answer."""
    score: int  # 0 to 100
    feedback: str
    confidence: float  # 0.0 to 1.0
    source: GradingSource = GradingSource.HEURISTIC
    key_terms_found: List[str] = field(default_factory=list)
    key_terms_missing: List[str] = field(default_factory=list)
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['source'] = self.source.value
        return data


@dataclass
class GradingCriteria:
    """Constants used by the heuristic grading path."""
    min_answer_length: int = 2
    noise_token_length: int = 2
    key_term_pattern: str = DEFAULT_KEY_TERM_PATTERN

    # Length-ratio penalties
    short_ratio: float = 0.3
    short_penalty: float = 0.8
    long_ratio: float = 3.0
    long_penalty: float = 0.9

    detail_hint_length: int = 10
    heuristic_confidence: float = 0.85
    external_confidence: float = 0.8
    error_confidence: float = 0.1

    # Parser placeholder for a missing student answer
    missing_answer_sentinel: Optional[str] = "No answer provided"
    bands: FeedbackBandsConfig = field(default_factory=FeedbackBandsConfig)

    @classmethod
    def from_config(cls, grading: GradingConfig,
                    missing_answer_sentinel: Optional[str] = None) -> "GradingCriteria":
        """Build criteria from the grading section of the configuration."""
        return cls(
            min_answer_length=grading.min_answer_length,
            noise_token_length=grading.noise_token_length,
            key_term_pattern=grading.key_term_pattern,
            short_ratio=grading.short_ratio,
            short_penalty=grading.short_penalty,
            long_ratio=grading.long_ratio,
            long_penalty=grading.long_penalty,
            detail_hint_length=grading.detail_hint_length,
            heuristic_confidence=grading.heuristic_confidence,
            external_confidence=grading.external_confidence,
            error_confidence=grading.error_confidence,
            missing_answer_sentinel=missing_answer_sentinel if grading.treat_sentinel_as_empty else None,
            bands=grading.bands,
        )


class HeuristicGrader:
    """Deterministic grader based on token overlap and key-term coverage."""

    def __init__(self, criteria: Optional[GradingCriteria] = None):
        """
        Initialize the heuristic grader.

        Args:
            criteria: Grading criteria (defaults if None)
        """
        self.criteria = criteria or GradingCriteria()
        self.matcher = LexicalMatcher(
            noise_token_length=self.criteria.noise_token_length,
            key_term_pattern=self.criteria.key_term_pattern
        )
        self.feedback_builder = FeedbackBuilder(
            bands=self.criteria.bands,
            detail_hint_length=self.criteria.detail_hint_length
        )

    def is_unanswered(self, student_answer: Optional[str]) -> bool:
        """Whether an answer is too short to grade."""
        if student_answer is None:
            return True
        stripped = student_answer.strip()
        if len(stripped) < self.criteria.min_answer_length:
            return True
        sentinel = self.criteria.missing_answer_sentinel
        return bool(sentinel) and stripped == sentinel

    def no_answer_result(self) -> GradingResult:
        return GradingResult(
            score=0,
            feedback=NO_ANSWER_FEEDBACK,
            confidence=1.0,
            source=GradingSource.NO_ANSWER
        )

    def error_result(self, reason: str) -> GradingResult:
        return GradingResult(
            score=0,
            feedback=ERROR_FEEDBACK,
            confidence=self.criteria.error_confidence,
            source=GradingSource.ERROR,
            details={'error': reason}
        )

    def grade(self, question: str, reference: str, student_answer: str) -> GradingResult:
        """
        Grade an answer. Never raises.

        Args:
            question: Question text
            reference: Reference answer
            student_answer: Student's answer

        Returns:
            GradingResult with a 0-100 score
        """
        try:
            if self.is_unanswered(student_answer):
                return self.no_answer_result()
            return self._evaluate(reference, student_answer)
        except Exception as e:
            logger.error(f"Grading failed for question {question[:60]!r}: {str(e)}")
            return self.error_result(str(e))

    def _evaluate(self, reference: str, student_answer: str) -> GradingResult:
        """Run the similarity, coverage and penalty steps."""
        if not reference or not reference.strip():
            raise GradingError("Reference answer is empty", student_answer=student_answer)

        analysis = self.matcher.analyze(reference, student_answer)
        score = float(analysis.blended_score)

        length_ratio = len(student_answer) / len(reference)
        penalty = None
        if length_ratio < self.criteria.short_ratio:
            score *= self.criteria.short_penalty
            penalty = 'too_short'
        elif length_ratio > self.criteria.long_ratio:
            score *= self.criteria.long_penalty
            penalty = 'too_verbose'

        score = max(0, min(100, round_half_up(score)))

        found = analysis.coverage.found
        missing = analysis.coverage.missing
        feedback = self.feedback_builder.build(score, student_answer, found, missing)

        details = dict(analysis.details)
        details.update({
            'blended_score': analysis.blended_score,
            'length_ratio': round(length_ratio, 3),
            'length_penalty': penalty,
        })

        return GradingResult(
            score=score,
            feedback=feedback,
            confidence=self.criteria.heuristic_confidence,
            source=GradingSource.HEURISTIC,
            key_terms_found=list(found),
            key_terms_missing=list(missing),
            details=details
        )


class AnswerGrader:
    """Grades answers, asking an external scorer first when one is configured."""

    def __init__(self, criteria: Optional[GradingCriteria] = None,
                 scorer: Optional[ExternalScorer] = None,
                 scorer_timeout: float = 10.0):
        """
        Initialize the answer grader.

        Args:
            criteria: Heuristic grading criteria
            scorer: Optional external scorer consulted before the heuristic
            scorer_timeout: Seconds to wait for the external scorer
        """
        self.heuristic = HeuristicGrader(criteria)
        self.criteria = self.heuristic.criteria
        self.scorer = scorer
        self.scorer_timeout = scorer_timeout

        self.grading_stats = self._empty_stats()

    @classmethod
    def from_config(cls, config: Optional[AppConfig] = None,
                    use_scorer: bool = True) -> "AnswerGrader":
        """Build a grader (and its scorer, if enabled) from configuration."""
        config = config or get_config()
        criteria = GradingCriteria.from_config(config.grading, config.parsing.missing_answer_sentinel)
        scorer = create_scorer(config) if use_scorer else None
        return cls(criteria=criteria, scorer=scorer, scorer_timeout=config.scorer.timeout)

    async def grade_async(self, question: str, reference: str, student_answer: str) -> GradingResult:
        """
        Grade an answer, consulting the external scorer when available.

        A scorer that is missing, times out, errors or returns an unparseable
        reply triggers the heuristic path. Never raises.
        """
        if self.heuristic.is_unanswered(student_answer):
            result = self.heuristic.no_answer_result()
            self._update_stats(result)
            return result

        fallback_reason = None
        if self.scorer is not None and self.scorer.is_available():
            try:
                response = await timeout_after(
                    self.scorer.score(question, reference, student_answer),
                    self.scorer_timeout,
                    f"External scorer did not answer within {self.scorer_timeout}s"
                )
                result = GradingResult(
                    score=max(0, min(100, int(response.score))),
                    feedback=response.feedback or ERROR_FEEDBACK,
                    confidence=self.criteria.external_confidence,
                    source=GradingSource.EXTERNAL,
                    details={
                        'scorer': response.scorer_name,
                        'latency_ms': round(response.latency_ms, 1),
                    }
                )
                self._update_stats(result)
                return result
            except asyncio.TimeoutError as e:
                fallback_reason = str(e)
            except ScorerError as e:
                fallback_reason = e.message
            except Exception as e:
                fallback_reason = f"{type(e).__name__}: {str(e)}"
            logger.warning(f"External scorer unavailable, using heuristic grading: {fallback_reason}")

        result = self.heuristic.grade(question, reference, student_answer)
        if fallback_reason:
            result.details['fallback_reason'] = fallback_reason
        self._update_stats(result)
        return result

    def grade(self, question: str, reference: str, student_answer: str) -> GradingResult:
        """
        Grade an answer synchronously. Never raises.

        Args:
            question: Question text
            reference: Reference answer
            student_answer: Student's answer

        Returns:
            GradingResult with score, feedback and confidence
        """
        if self.scorer is None:
            result = self.heuristic.grade(question, reference, student_answer)
            self._update_stats(result)
            return result

        if in_event_loop():
            # The scorer needs grade_async once a loop is running
            logger.warning(f"Cannot reach external scorer synchronously: {SYNC_IN_LOOP_REASON}")
            return self._heuristic_fallback(question, reference, student_answer, SYNC_IN_LOOP_REASON)

        return run_sync(self._with_scorer_cleanup(
            self.grade_async(question, reference, student_answer)
        ))

    async def grade_records_async(self, records: Sequence[ParsedRecord]) -> List[GradingResult]:
        """Grade parsed records one at a time, in order."""
        results = []
        for record in records:
            result = await self.grade_async(
                record.question_text, record.reference_answer, record.student_answer
            )
            logger.debug(f"Question {record.sequence_id} graded: {result.score} ({result.source.value})")
            results.append(result)
        return results

    def grade_records(self, records: Sequence[ParsedRecord]) -> List[GradingResult]:
        """
        Grade parsed records sequentially.

        Args:
            records: Records from the answer set parser

        Returns:
            One GradingResult per record, in the same order
        """
        logger.info(f"Grading {len(records)} answers")

        if self.scorer is None:
            results = [self.grade(r.question_text, r.reference_answer, r.student_answer) for r in records]
        elif in_event_loop():
            logger.warning(f"Cannot reach external scorer synchronously: {SYNC_IN_LOOP_REASON}")
            results = [
                self._heuristic_fallback(r.question_text, r.reference_answer, r.student_answer,
                                         SYNC_IN_LOOP_REASON)
                for r in records
            ]
        else:
            results = run_sync(self._with_scorer_cleanup(self.grade_records_async(records)))

        logger.info(f"Grading complete: {sum(1 for r in results if r.source != GradingSource.ERROR)}/{len(results)} graded")
        return results

    def grade_batch(self, questions: List[str], references: List[str],
                    student_answers: List[str]) -> List[GradingResult]:
        """
        Grade parallel lists of questions, references and answers.

        Raises:
            ValueError: If the lists differ in length
        """
        if not len(questions) == len(references) == len(student_answers):
            raise ValueError("Questions, references and student answers must have the same length")

        records = [
            ParsedRecord(sequence_id=i + 1, question_text=q, reference_answer=r, student_answer=s)
            for i, (q, r, s) in enumerate(zip(questions, references, student_answers))
        ]
        return self.grade_records(records)

    async def check_scorer_health(self) -> Dict[str, str]:
        """
        Probe the external scorer with a trivial question.

        Returns:
            Dict with 'status' (healthy, unavailable or error) and 'message'
        """
        if self.scorer is None or not self.scorer.is_available():
            return {'status': 'unavailable', 'message': 'No external scorer configured; heuristic grading in use'}

        try:
            response = await timeout_after(
                self.scorer.score("What is 2 + 2?", "4", "4"),
                self.scorer_timeout,
                "Health check timed out"
            )
            return {'status': 'healthy', 'message': f"Scorer {response.scorer_name} is working"}
        except Exception as e:
            return {'status': 'error', 'message': str(e)}
        finally:
            await self.scorer.close()

    def _heuristic_fallback(self, question: str, reference: str, student_answer: str,
                            reason: str) -> GradingResult:
        result = self.heuristic.grade(question, reference, student_answer)
        if result.source == GradingSource.HEURISTIC:
            result.details['fallback_reason'] = reason
        self._update_stats(result)
        return result

    async def _with_scorer_cleanup(self, coro):
        try:
            return await coro
        finally:
            await self.scorer.close()

    @staticmethod
    def _empty_stats() -> Dict[str, Any]:
        return {
            'total_graded': 0,
            'score_sum': 0,
            'source_distribution': {},
        }

    def _update_stats(self, result: GradingResult) -> None:
        """Update grading statistics."""
        self.grading_stats['total_graded'] += 1
        self.grading_stats['score_sum'] += result.score
        source = result.source.value
        self.grading_stats['source_distribution'][source] = \
            self.grading_stats['source_distribution'].get(source, 0) + 1

    def get_grading_statistics(self) -> Dict[str, Any]:
        """Counters accumulated over this grader's lifetime."""
        total = self.grading_stats['total_graded']
        stats = {
            'total_graded': total,
            'average_score': self.grading_stats['score_sum'] / total if total else 0.0,
            'source_distribution': dict(self.grading_stats['source_distribution']),
        }
        return stats

    def reset_statistics(self) -> None:
        self.grading_stats = self._empty_stats()


def grade(question: str, reference: str, student_answer: str,
          criteria: Optional[GradingCriteria] = None) -> GradingResult:
    """Grade one answer with the heuristic grader."""
    return HeuristicGrader(criteria).grade(question, reference, student_answer)
