"""
End-to-End CLI Tests

Runs the paperscore commands through click's CliRunner against answer
sheets written to a temporary directory.
"""

import json

import pytest
from click.testing import CliRunner

from paperscore.main import cli


@pytest.fixture
def runner():
    return CliRunner()


class TestParseCommand:
    """Test cases for 'paperscore parse'."""

    def test_parse_json(self, runner, sheet_file):
        result = runner.invoke(cli, ['parse', str(sheet_file), '--json'])

        assert result.exit_code == 0
        records = json.loads(result.stdout)
        assert [r['sequence_id'] for r in records] == [1, 2, 3]
        assert records[0]['question_text'] == "What is the capital of France?"

    def test_parse_table(self, runner, sheet_file):
        result = runner.invoke(cli, ['parse', str(sheet_file)])

        assert result.exit_code == 0
        assert "3 question(s) parsed" in result.stdout
        assert "delimiter_line" in result.stdout

    def test_parse_without_records(self, runner, temp_dir):
        path = temp_dir / "questions_only.txt"
        path.write_text("Q: Only a question\n---\nQ: Another question\n", encoding="utf-8")

        result = runner.invoke(cli, ['parse', str(path)])

        assert result.exit_code == 1
        assert "Could not parse any questions" in result.stdout

    def test_parse_missing_file(self, runner, temp_dir):
        result = runner.invoke(cli, ['parse', str(temp_dir / "missing.txt")])

        assert result.exit_code != 0


class TestGradeCommand:
    """Test cases for 'paperscore grade'."""

    def test_grade_json(self, runner, sheet_file):
        result = runner.invoke(cli, ['grade', str(sheet_file), '--json', '--no-scorer'])

        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report['file_name'] == "answers.txt"
        assert report['total_questions'] == 3
        assert [q['score'] for q in report['questions']] == [100, 0, 100]
        assert report['passed_count'] == 2
        assert all(q['source'] == "heuristic" for q in report['questions'])

    def test_grade_table(self, runner, sheet_file):
        result = runner.invoke(cli, ['grade', str(sheet_file), '--no-scorer', '--no-feedback'])

        assert result.exit_code == 0
        assert "answers.txt" in result.stdout

    def test_grade_empty_file(self, runner, temp_dir):
        path = temp_dir / "empty.txt"
        path.write_text("", encoding="utf-8")

        result = runner.invoke(cli, ['grade', str(path), '--json'])

        assert result.exit_code == 1
        assert "File is empty" in result.stdout

    def test_grade_uses_scorer_when_configured(self, runner, sheet_file, fake_scorer):
        from unittest.mock import patch

        with patch('paperscore.evaluation.grader.create_scorer', return_value=fake_scorer):
            result = runner.invoke(cli, ['grade', str(sheet_file), '--json'])

        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert [q['score'] for q in report['questions']] == [90, 90, 90]
        assert fake_scorer.close_count == 1


class TestHealthCommand:
    """Test cases for 'paperscore health'."""

    def test_health_skip_scorer(self, runner):
        result = runner.invoke(cli, ['health', '--skip-scorer'])

        assert result.exit_code == 0
        assert "Configuration" in result.stdout

    def test_health_without_scorer_passes(self, runner):
        result = runner.invoke(cli, ['health'])

        assert result.exit_code == 0
        assert "External Scorer" in result.stdout

    def test_health_invalid_config_fails(self, runner, test_config):
        test_config.report.pass_threshold = 95

        result = runner.invoke(cli, ['health', '--skip-scorer'])

        assert result.exit_code == 1
        assert "FAILED" in result.stdout


class TestMainGroup:
    """Test cases for the top-level group."""

    def test_banner_without_subcommand(self, runner):
        result = runner.invoke(cli, [])

        assert result.exit_code == 0
        assert "paperscore" in result.stdout

    def test_config_option(self, runner, temp_dir, sheet_file):
        config_path = temp_dir / "custom.yaml"
        config_path.write_text(
            "logging:\n"
            f"  file: {temp_dir / 'custom.log'}\n"
            "  console_level: CRITICAL\n"
            "report:\n"
            "  pass_threshold: 100\n",
            encoding="utf-8"
        )

        result = runner.invoke(cli, ['--config', str(config_path), 'grade', str(sheet_file),
                                     '--json', '--no-scorer'])

        assert result.exit_code == 0
        assert json.loads(result.stdout)['passed_count'] == 2
