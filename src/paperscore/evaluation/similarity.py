"""
Lexical Similarity and Key Term Matching

Token-overlap similarity and key-term coverage used to compare a student's
free-text answer with the reference answer.
"""

import math
import re
from typing import Dict, List, Set, Any
from dataclasses import dataclass, field
from fuzzywuzzy import fuzz

from ..core.config import DEFAULT_KEY_TERM_PATTERN
from ..utils.logging import get_logger

logger = get_logger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return int(math.floor(value + 0.5))


def tokenize(text: str, noise_token_length: int = 2) -> Set[str]:
    """
    Split text on whitespace into lower-cased tokens.

    Args:
        text: Text to tokenize
        noise_token_length: Tokens this long or shorter are dropped

    Returns:
        Set of meaningful tokens
    """
    return {token for token in text.lower().split() if len(token) > noise_token_length}


def jaccard_similarity(reference: str, answer: str, noise_token_length: int = 2) -> float:
    """
    Jaccard similarity of the two token sets on a 0-100 scale.

    Returns 0.0 when neither text has any meaningful token.
    """
    reference_tokens = tokenize(reference, noise_token_length)
    answer_tokens = tokenize(answer, noise_token_length)

    union = reference_tokens | answer_tokens
    if not union:
        return 0.0

    return len(reference_tokens & answer_tokens) / len(union) * 100


@dataclass
class KeyTermCoverage:
    """Key terms of a reference answer split by presence in the student answer."""
    key_terms: List[str]
    found: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)

    @property
    def ratio(self) -> float:
        if not self.key_terms:
            return 0.0
        return len(self.found) / len(self.key_terms)


class KeyTermExtractor:
    """Extracts the concepts a reference answer is expected to contain."""

    def __init__(self, pattern: str = DEFAULT_KEY_TERM_PATTERN):
        """
        Initialize the extractor.

        Args:
            pattern: Regex matching capitalized words, numbers and long lowercase words
        """
        self.pattern = re.compile(pattern)

    def extract(self, text: str) -> List[str]:
        """Key terms in first-appearance order, lower-cased and de-duplicated."""
        seen = set()
        terms = []
        for match in self.pattern.findall(text):
            term = match.lower()
            if term not in seen:
                seen.add(term)
                terms.append(term)
        return terms

    def coverage(self, reference: str, answer: str) -> KeyTermCoverage:
        """Partition the reference's key terms into found and missing."""
        key_terms = self.extract(reference)
        answer_lower = answer.lower()

        coverage = KeyTermCoverage(key_terms=key_terms)
        for term in key_terms:
            if term in answer_lower:
                coverage.found.append(term)
            else:
                coverage.missing.append(term)
        return coverage


@dataclass
class SimilarityAnalysis:
    """Result of comparing an answer with a reference answer."""
    similarity: float
    key_term_score: float
    blended_score: int
    coverage: KeyTermCoverage
    details: Dict[str, Any] = field(default_factory=dict)


class LexicalMatcher:
    """Combines token overlap with key-term coverage."""

    def __init__(self, noise_token_length: int = 2,
                 key_term_pattern: str = DEFAULT_KEY_TERM_PATTERN):
        self.noise_token_length = noise_token_length
        self.extractor = KeyTermExtractor(key_term_pattern)

    def analyze(self, reference: str, answer: str) -> SimilarityAnalysis:
        """
        Compare an answer with the reference answer.

        The blended score averages the Jaccard similarity and the key-term
        score; with no key terms the key-term score equals the similarity.

        Args:
            reference: Reference answer text
            answer: Student answer text

        Returns:
            SimilarityAnalysis with the blended 0-100 score
        """
        similarity = jaccard_similarity(reference, answer, self.noise_token_length)
        coverage = self.extractor.coverage(reference, answer)

        if coverage.key_terms:
            key_term_score = coverage.ratio * 100
        else:
            key_term_score = similarity

        blended = round_half_up((similarity + key_term_score) / 2)

        return SimilarityAnalysis(
            similarity=similarity,
            key_term_score=key_term_score,
            blended_score=blended,
            coverage=coverage,
            details={
                'similarity': round(similarity, 2),
                'key_term_score': round(key_term_score, 2),
                'key_term_count': len(coverage.key_terms),
                'token_set_ratio': fuzz.token_set_ratio(reference, answer),
            }
        )
