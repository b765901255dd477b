"""
Line Label Classification

Recognizes the label prefixes that mark question, reference answer and
student answer lines in an uploaded answer sheet.
"""

import re
from typing import Optional, Tuple
from enum import Enum


class FieldKind(str, Enum):
    """Fields a segment line can contribute to."""
    QUESTION = "question"
    REFERENCE = "reference"
    STUDENT = "student"


# Long forms first; every label must be followed by ':' or '.'
LABEL_PATTERNS = [
    (FieldKind.QUESTION, re.compile(r'^(?:question|query|q)\s*[:.]\s*', re.IGNORECASE)),
    (FieldKind.REFERENCE, re.compile(r'^(?:answer|correct|solution|a)\s*[:.]\s*', re.IGNORECASE)),
    (FieldKind.STUDENT, re.compile(r'^(?:student|response|reply|s)\s*[:.]\s*', re.IGNORECASE)),
]

ENUMERATION_PREFIX = re.compile(r'^\d+[.)]\s+')

POSITIONAL_FIELDS = (FieldKind.QUESTION, FieldKind.REFERENCE, FieldKind.STUDENT)


def classify_line(line: str) -> Tuple[Optional[FieldKind], str]:
    """
    Classify a trimmed line by its label prefix.

    Args:
        line: Trimmed, non-empty line

    Returns:
        Tuple of (field kind or None for unlabeled lines, text without label)
    """
    for kind, pattern in LABEL_PATTERNS:
        match = pattern.match(line)
        if match:
            return kind, line[match.end():].strip()
    return None, line


def strip_enumeration(line: str) -> str:
    """Remove a leading '1.' or '1)' marker from a line."""
    return ENUMERATION_PREFIX.sub('', line, count=1)
