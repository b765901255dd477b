"""
Pytest Configuration

Global test configuration, fixtures, and utilities for the
answer sheet grading test suite.
"""

import pytest
import asyncio
import tempfile
from pathlib import Path
from typing import List, Optional

# Add src to Python path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from paperscore.core.config import AppConfig, LoggingConfig, set_config
from paperscore.scorers.base import ExternalScorer, ScorerResponse


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def test_config(temp_dir):
    """Provide test configuration."""
    return AppConfig(
        name="Test paperscore",
        version="test",
        debug=True,
        logging=LoggingConfig(
            level="DEBUG",
            console_level="CRITICAL",
            file=str(temp_dir / "test.log")
        )
    )


@pytest.fixture
def delimited_sheet():
    """Three Q/A/S blocks separated by --- lines."""
    return (
        "Q: What is the capital of France?\n"
        "A: Paris\n"
        "S: Paris\n"
        "---\n"
        "Q: What is photosynthesis?\n"
        "A: Photosynthesis converts light energy into chemical energy\n"
        "S: plants\n"
        "---\n"
        "Q: What is the powerhouse of the cell?\n"
        "A: The mitochondria is the powerhouse of the cell\n"
        "S: The mitochondria is the powerhouse of the cell\n"
    )


@pytest.fixture
def long_label_sheet():
    """Blocks using long-form labels separated by blank lines."""
    return (
        "Question: What is 2+2?\n"
        "Answer: 4\n"
        "Student: 4\n"
        "\n"
        "Query: Name the largest ocean.\n"
        "Solution: The Pacific Ocean\n"
        "Reply: Pacific\n"
    )


@pytest.fixture
def enumerated_sheet():
    """Unlabeled, numbered questions resolved by line position."""
    return (
        "1. What is photosynthesis?\n"
        "Photosynthesis converts light energy into chemical energy.\n"
        "Plants turn light into chemical energy.\n"
        "2. What is gravity?\n"
        "Gravity is the force that attracts masses toward each other.\n"
        "A force that pulls things down.\n"
    )


@pytest.fixture
def sheet_file(temp_dir, delimited_sheet):
    """Answer sheet written to disk."""
    path = temp_dir / "answers.txt"
    path.write_text(delimited_sheet, encoding="utf-8")
    return path


class FakeScorer(ExternalScorer):
    """In-memory external scorer for grader tests."""

    name = "fake"

    def __init__(self, fixed_score: int = 90, feedback: str = "Well reasoned answer.",
                 error: Optional[Exception] = None, delay: float = 0.0,
                 available: bool = True):
        super().__init__()
        self.fixed_score = fixed_score
        self.feedback = feedback
        self.error = error
        self.delay = delay
        self.available = available
        self.calls: List[tuple] = []
        self.close_count = 0

    async def score(self, question, reference, student_answer):
        self.calls.append((question, reference, student_answer))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return ScorerResponse(score=self.fixed_score, feedback=self.feedback,
                              scorer_name=self.name, latency_ms=12.5)

    def is_available(self):
        return self.available

    async def close(self):
        self.close_count += 1


@pytest.fixture
def fake_scorer():
    """External scorer that always answers with a fixed grade."""
    return FakeScorer()


@pytest.fixture
def scorer_factory():
    """Build fake scorers with custom behavior."""
    return FakeScorer


# Pytest markers for test categorization

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external dependencies"
    )
    config.addinivalue_line(
        "markers", "api: Tests that require external API access"
    )


# Test environment setup

@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, test_config):
    """Isolate tests from the developer's environment and config file."""
    for var in ("PAPERSCORE_LOG_LEVEL", "PAPERSCORE_SCORER_URL", "PAPERSCORE_SCORER_MODEL",
                "PAPERSCORE_SCORER_TIMEOUT", "PAPERSCORE_SCORER_ENABLED", "PAPERSCORE_DEBUG",
                "PAPERSCORE_ENVIRONMENT", "PAPERSCORE_SCORER_API_KEY"):
        monkeypatch.delenv(var, raising=False)

    set_config(test_config)
    yield
    set_config(None)
