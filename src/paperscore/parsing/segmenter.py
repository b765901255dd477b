"""
Answer Sheet Segmentation

Splits raw answer sheet text into per-question segments by trying an ordered
list of segmentation strategies until one produces more than one segment.
"""

import re
from typing import Dict, List, Optional, Pattern, Sequence, Tuple
from dataclasses import dataclass
from enum import Enum


class SegmentationStrategy(str, Enum):
    """Ways an answer sheet can be cut into question segments."""
    DELIMITER_LINE = "delimiter_line"  # a line holding only ---
    BLANK_LINES = "blank_lines"        # one or more blank lines
    DASH_RUNS = "dash_runs"            # runs of two or more - or =
    ENUMERATION = "enumeration"        # leading 1. 2. 3. markers
    WHOLE = "whole"                    # the entire text as one segment


DEFAULT_STRATEGY_ORDER: Tuple[SegmentationStrategy, ...] = (
    SegmentationStrategy.DELIMITER_LINE,
    SegmentationStrategy.BLANK_LINES,
    SegmentationStrategy.DASH_RUNS,
    SegmentationStrategy.ENUMERATION,
)

_SPLIT_PATTERNS: Dict[SegmentationStrategy, Pattern] = {
    SegmentationStrategy.DELIMITER_LINE: re.compile(r'^[ \t]*---[ \t]*$', re.MULTILINE),
    SegmentationStrategy.BLANK_LINES: re.compile(r'\n[ \t]*\n'),
    SegmentationStrategy.DASH_RUNS: re.compile(r'[-=]{2,}'),
    SegmentationStrategy.ENUMERATION: re.compile(r'^[ \t]*\d+\.(?=\s)', re.MULTILINE),
}


@dataclass
class SegmentationResult:
    """Segments produced from one answer sheet."""
    strategy: SegmentationStrategy
    segments: List[str]

    @property
    def count(self) -> int:
        return len(self.segments)


def normalize_newlines(text: str) -> str:
    """Convert Windows and old Mac line endings to \\n."""
    return text.replace('\r\n', '\n').replace('\r', '\n')


def split_with(text: str, strategy: SegmentationStrategy) -> List[str]:
    """
    Split text with a single strategy.

    Args:
        text: Normalized answer sheet text
        strategy: Strategy to apply

    Returns:
        Non-blank segments in input order
    """
    if strategy == SegmentationStrategy.WHOLE:
        pieces = [text]
    else:
        pieces = _SPLIT_PATTERNS[strategy].split(text)

    return [piece for piece in pieces if piece.strip()]


def segment(text: str,
            strategies: Optional[Sequence[SegmentationStrategy]] = None) -> SegmentationResult:
    """
    Cut an answer sheet into question segments.

    Each strategy is tried in order; the first one that yields more than one
    segment wins. If none does, the whole text is a single segment.

    Args:
        text: Answer sheet text (line endings normalized here)
        strategies: Strategy order (defaults to DEFAULT_STRATEGY_ORDER)

    Returns:
        SegmentationResult naming the strategy used
    """
    text = normalize_newlines(text)

    for strategy in strategies or DEFAULT_STRATEGY_ORDER:
        segments = split_with(text, strategy)
        if len(segments) > 1:
            return SegmentationResult(strategy=strategy, segments=segments)

    return SegmentationResult(
        strategy=SegmentationStrategy.WHOLE,
        segments=split_with(text, SegmentationStrategy.WHOLE)
    )
