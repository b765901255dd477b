"""
Tests for Answer Set Parser
"""

import pytest

from paperscore.core.config import ParsingConfig
from paperscore.core.exceptions import EmptyInputError, NoValidRecordsError
from paperscore.parsing.answer_parser import AnswerSetParser, ParsedRecord, parse, format_help


class TestAnswerSetParser:
    """Test cases for AnswerSetParser class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = AnswerSetParser()

    def test_empty_input_raises(self):
        """Empty and whitespace-only input are rejected."""
        for text in ["", "   ", "\n\n\t  \n"]:
            with pytest.raises(EmptyInputError):
                self.parser.parse(text)

    def test_none_input_raises(self):
        with pytest.raises(EmptyInputError):
            self.parser.parse(None)

    def test_delimited_sheet_yields_records_in_order(self, delimited_sheet):
        """Three --- separated blocks give three records with ids 1, 2, 3."""
        records = self.parser.parse(delimited_sheet)

        assert [r.sequence_id for r in records] == [1, 2, 3]
        assert self.parser.last_segmentation.strategy.value == "delimiter_line"
        assert records[0].question_text == "What is the capital of France?"
        assert records[0].reference_answer == "Paris"
        assert records[0].student_answer == "Paris"
        assert records[1].question_text == "What is photosynthesis?"
        assert records[1].student_answer == "plants"
        assert records[2].reference_answer == "The mitochondria is the powerhouse of the cell"

    def test_long_form_labels(self, long_label_sheet):
        """Question/Answer/Student and Query/Solution/Reply labels are accepted."""
        records = self.parser.parse(long_label_sheet)

        assert len(records) == 2
        assert records[0].question_text == "What is 2+2?"
        assert records[0].reference_answer == "4"
        assert records[0].student_answer == "4"
        assert records[1].question_text == "Name the largest ocean."
        assert records[1].reference_answer == "The Pacific Ocean"
        assert records[1].student_answer == "Pacific"

    def test_labels_are_case_insensitive(self):
        text = "q: lower question\nANSWER: upper answer\nresponse. dotted reply"
        records = self.parser.parse(text)

        assert len(records) == 1
        assert records[0].question_text == "lower question"
        assert records[0].reference_answer == "upper answer"
        assert records[0].student_answer == "dotted reply"

    def test_correct_label_maps_to_reference(self):
        records = self.parser.parse("Q. What is H2O?\nCorrect: Water\nS. water")

        assert records[0].reference_answer == "Water"
        assert records[0].student_answer == "water"

    def test_missing_student_answer_uses_sentinel(self):
        """A segment with Q and A but no S gets the placeholder answer."""
        records = self.parser.parse("Q: What is 2+2?\nA: 4")

        assert len(records) == 1
        assert records[0].student_answer == "No answer provided"

    def test_custom_sentinel(self):
        parser = AnswerSetParser(ParsingConfig(missing_answer_sentinel="(blank)"))
        records = parser.parse("Q: What is 2+2?\nA: 4")

        assert records[0].student_answer == "(blank)"

    def test_multiline_answers_are_joined(self):
        """Unlabeled lines continue the most recently opened field."""
        text = (
            "Q: Explain photosynthesis.\n"
            "A: Plants use light energy\n"
            "to make glucose from carbon dioxide and water.\n"
            "S: Plants make food\n"
            "using sunlight.\n"
        )
        records = self.parser.parse(text)

        assert records[0].reference_answer == (
            "Plants use light energy to make glucose from carbon dioxide and water."
        )
        assert records[0].student_answer == "Plants make food using sunlight."

    def test_label_with_text_on_following_line(self):
        text = "Question:\nWhat is the boiling point of water?\nAnswer:\n100 degrees Celsius\nStudent: 100C"
        records = self.parser.parse(text)

        assert records[0].question_text == "What is the boiling point of water?"
        assert records[0].reference_answer == "100 degrees Celsius"
        assert records[0].student_answer == "100C"

    def test_repeated_label_appends(self):
        records = self.parser.parse("Q: First part\nQ: second part\nA: Answer")

        assert records[0].question_text == "First part second part"

    def test_unlabeled_lines_resolved_by_position(self):
        records = self.parser.parse("What is 2+2?\n4\nfour")

        assert len(records) == 1
        assert records[0].question_text == "What is 2+2?"
        assert records[0].reference_answer == "4"
        assert records[0].student_answer == "four"

    def test_enumerated_sheet(self, enumerated_sheet):
        """Numbered, unlabeled questions are split and resolved positionally."""
        records = self.parser.parse(enumerated_sheet)

        assert len(records) == 2
        assert records[0].question_text == "What is photosynthesis?"
        assert records[0].reference_answer == "Photosynthesis converts light energy into chemical energy."
        assert records[0].student_answer == "Plants turn light into chemical energy."
        assert records[1].question_text == "What is gravity?"
        assert records[1].student_answer == "A force that pulls things down."

    def test_enumerated_blocks_separated_by_blank_lines(self):
        text = "1. What is 2+2?\n4\n4\n\n2. What is 3+3?\n6\nsix"
        records = self.parser.parse(text)

        assert [r.question_text for r in records] == ["What is 2+2?", "What is 3+3?"]
        assert records[1].student_answer == "six"

    def test_incomplete_segments_do_not_consume_ids(self):
        """Skipped segments leave ids dense over emitted records."""
        text = (
            "Q: Valid one\nA: Yes\n"
            "---\n"
            "Q: Question without an answer\n"
            "---\n"
            "Q: Valid two\nA: Also yes\n"
        )
        records = self.parser.parse(text)

        assert [r.sequence_id for r in records] == [1, 2]
        assert records[1].question_text == "Valid two"
        assert records[0].segment_index == 0
        assert records[1].segment_index == 2

    def test_windows_line_endings(self):
        text = "Q: One?\r\nA: 1\r\nS: 1\r\n---\r\nQ: Two?\r\nA: 2\r\nS: 2\r\n"
        records = self.parser.parse(text)

        assert len(records) == 2
        assert records[1].student_answer == "2"

    def test_fields_are_trimmed(self):
        records = self.parser.parse("   Q:    spaced question   \n\tA:   spaced answer  ")

        assert records[0].question_text == "spaced question"
        assert records[0].reference_answer == "spaced answer"

    def test_no_valid_records_error_carries_diagnostics(self):
        """Segments without a reference answer produce a diagnostic error."""
        text = "Q: Only a question\n---\nQ: Another question"

        with pytest.raises(NoValidRecordsError) as exc_info:
            self.parser.parse(text)

        error = exc_info.value
        assert error.segments_found == 2
        assert error.strategy == "delimiter_line"
        assert error.sample_lines[0] == "Q: Only a question"
        assert "Could not parse any questions" in error.message
        assert "Format 1 (Preferred)" in error.message
        assert error.to_dict()['segments_found'] == 2

    def test_labeled_question_with_unlabeled_answers(self):
        """Unlabeled lines after a Q: label continue the question, and the help says so."""
        with pytest.raises(NoValidRecordsError) as exc_info:
            self.parser.parse("Q: What is the capital of France?\nParis\nParis")

        assert "label the answers too (A:, S:)" in exc_info.value.message

    def test_sample_lines_are_limited(self):
        parser = AnswerSetParser(ParsingConfig(diagnostic_line_count=3))
        text = "\n".join(f"Q: question {i}" for i in range(20))

        with pytest.raises(NoValidRecordsError) as exc_info:
            parser.parse(text)

        assert exc_info.value.sample_lines == ["Q: question 0", "Q: question 1", "Q: question 2"]

    def test_parse_file(self, sheet_file):
        records = self.parser.parse_file(sheet_file)

        assert len(records) == 3
        assert isinstance(records[0], ParsedRecord)

    def test_parse_file_error_names_file(self, temp_dir):
        path = temp_dir / "blank.txt"
        path.write_text("   \n", encoding="utf-8")

        with pytest.raises(EmptyInputError) as exc_info:
            self.parser.parse_file(path)

        assert exc_info.value.file_name == "blank.txt"

    def test_record_to_dict(self):
        record = self.parser.parse("Q: a?\nA: b")[0]

        assert record.to_dict() == {
            'sequence_id': 1,
            'question_text': 'a?',
            'reference_answer': 'b',
            'student_answer': 'No answer provided',
            'segment_index': 0,
        }


class TestParseFunction:
    """Test cases for the module-level helpers."""

    def test_parse_uses_default_parser(self, delimited_sheet):
        assert len(parse(delimited_sheet)) == 3

    def test_parse_empty(self):
        with pytest.raises(EmptyInputError):
            parse("")

    def test_format_help_lists_formats(self):
        help_text = format_help()

        assert "Q: What is the capital of France?" in help_text
        assert "Question: What is 2+2?" in help_text
        assert "1. What is photosynthesis?" in help_text
        assert "Lines without a label continue the field above them." in help_text
