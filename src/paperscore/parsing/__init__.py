"""
Parsing Module

Answer sheet segmentation and question/answer record extraction.
"""

from .answer_parser import AnswerSetParser, ParsedRecord, parse, format_help
from .segmenter import SegmentationStrategy, SegmentationResult, segment
from .labels import FieldKind, classify_line

__all__ = [
    "AnswerSetParser",
    "ParsedRecord",
    "parse",
    "format_help",
    "SegmentationStrategy",
    "SegmentationResult",
    "segment",
    "FieldKind",
    "classify_line",
]
