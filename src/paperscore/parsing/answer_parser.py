"""
Answer Set Parser

Turns an uploaded answer sheet into ordered question / reference answer /
student answer records, tolerating several delimiter and label conventions.
"""

from pathlib import Path
from typing import Dict, List, Optional, Any, Sequence, Union
from dataclasses import dataclass, asdict

from .segmenter import SegmentationStrategy, SegmentationResult, segment, normalize_newlines
from .labels import FieldKind, POSITIONAL_FIELDS, classify_line, strip_enumeration
from ..core.config import ParsingConfig
from ..core.exceptions import EmptyInputError, NoValidRecordsError
from ..utils.logging import get_logger

logger = get_logger(__name__)


FORMAT_HELP = """The file should contain questions in one of these formats:

Format 1 (Preferred):
Q: What is the capital of France?
A: Paris
S: Paris
---

Format 2:
Question: What is 2+2?
Answer: 4
Student: 4

Format 3:
1. What is photosynthesis?
Photosynthesis is...
The student wrote...

Lines without a label continue the field above them. If the question is
labeled (Q:), label the answers too (A:, S:); otherwise leave all three
lines unlabeled as in Format 3."""


@dataclass
class ParsedRecord:
    """One question parsed from an answer sheet."""
    sequence_id: int
    question_text: str
    reference_answer: str
    student_answer: str
    segment_index: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class _SegmentFields:
    """Accumulates field text while scanning the lines of one segment."""

    def __init__(self):
        self.values: Dict[FieldKind, List[str]] = {kind: [] for kind in FieldKind}
        self.current: Optional[FieldKind] = None
        self.labeled = False

    def open(self, kind: FieldKind, text: str) -> None:
        self.current = kind
        if text:
            self.values[kind].append(text)

    def append(self, text: str) -> None:
        if self.current is not None:
            self.values[self.current].append(text)

    def is_empty(self, kind: FieldKind) -> bool:
        return not self.values[kind]

    def text(self, kind: FieldKind) -> str:
        return ' '.join(self.values[kind]).strip()


class AnswerSetParser:
    """Parses raw answer sheet text into ParsedRecord objects."""

    def __init__(self, config: Optional[ParsingConfig] = None,
                 strategies: Optional[Sequence[SegmentationStrategy]] = None):
        """
        Initialize the parser.

        Args:
            config: Parsing configuration (defaults if None)
            strategies: Segmentation strategy order (default order if None)
        """
        self.config = config or ParsingConfig()
        self.strategies = strategies
        self.last_segmentation: Optional[SegmentationResult] = None

    def parse(self, raw_text: Optional[str], file_name: Optional[str] = None) -> List[ParsedRecord]:
        """
        Parse an answer sheet.

        Args:
            raw_text: Uploaded text content
            file_name: Optional name of the uploaded file, used in diagnostics

        Returns:
            Records in segment order with dense 1-based ids

        Raises:
            EmptyInputError: If the text is empty or whitespace only
            NoValidRecordsError: If no segment holds both a question and an answer
        """
        if raw_text is None or not raw_text.strip():
            raise EmptyInputError(file_name=file_name)

        text = normalize_newlines(raw_text)
        segmentation = segment(text, self.strategies)
        self.last_segmentation = segmentation
        logger.debug(f"Found {segmentation.count} segments using {segmentation.strategy.value} strategy")

        records: List[ParsedRecord] = []
        for index, segment_text in enumerate(segmentation.segments):
            record = self._parse_segment(segment_text, index, len(records) + 1)
            if record is None:
                logger.warning(f"Segment {index + 1} is missing a question or reference answer; skipped")
                continue
            records.append(record)

        if not records:
            raise self._no_records_error(text, segmentation, file_name)

        logger.info(f"Parsed {len(records)} of {segmentation.count} segments")
        return records

    def parse_file(self, path: Union[str, Path]) -> List[ParsedRecord]:
        """
        Read and parse an answer sheet file.

        Args:
            path: Path to a UTF-8 text file

        Returns:
            Parsed records
        """
        path = Path(path)
        content = path.read_text(encoding=self.config.encoding, errors='replace')
        return self.parse(content, file_name=path.name)

    def _parse_segment(self, segment_text: str, segment_index: int,
                       sequence_id: int) -> Optional[ParsedRecord]:
        """Scan one segment's lines and build a record if it is complete."""
        lines = [line.strip() for line in segment_text.split('\n')]
        lines = [line for line in lines if line]
        if not lines:
            return None

        fields = _SegmentFields()
        for position, line in enumerate(lines):
            if position == 0:
                line = strip_enumeration(line)

            kind, text = classify_line(line)
            if kind is not None:
                fields.labeled = True
                fields.open(kind, text)
                continue

            positional = POSITIONAL_FIELDS[position] if position < len(POSITIONAL_FIELDS) else None
            if not fields.labeled and positional is not None and fields.is_empty(positional):
                fields.open(positional, text)
            else:
                fields.append(text)

        question = fields.text(FieldKind.QUESTION)
        reference = fields.text(FieldKind.REFERENCE)
        if not question or not reference:
            return None

        return ParsedRecord(
            sequence_id=sequence_id,
            question_text=question,
            reference_answer=reference,
            student_answer=fields.text(FieldKind.STUDENT) or self.config.missing_answer_sentinel,
            segment_index=segment_index
        )

    def _no_records_error(self, text: str, segmentation: SegmentationResult,
                          file_name: Optional[str]) -> NoValidRecordsError:
        """Build the diagnostic error raised when nothing could be parsed."""
        sample_lines = text.split('\n')[:self.config.diagnostic_line_count]
        numbered = '\n'.join(f"{i + 1}: {line}" for i, line in enumerate(sample_lines))

        message = (
            "Could not parse any questions from your file.\n\n"
            f"Found {segmentation.count} section(s). Here's what I found in the first few lines:\n"
            f"{numbered}\n\n"
            f"{FORMAT_HELP}\n\n"
            "Please check your file format and try again."
        )
        return NoValidRecordsError(
            message,
            segments_found=segmentation.count,
            strategy=segmentation.strategy.value,
            sample_lines=sample_lines,
            file_name=file_name
        )


def format_help() -> str:
    """Describe the accepted answer sheet formats."""
    return FORMAT_HELP


def parse(raw_text: str, config: Optional[ParsingConfig] = None) -> List[ParsedRecord]:
    """Parse answer sheet text with a default parser."""
    return AnswerSetParser(config).parse(raw_text)
