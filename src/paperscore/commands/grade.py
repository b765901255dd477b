"""
Grade Command

Parses an answer sheet, grades every question in order and prints the report.
"""

import asyncio
import json
from pathlib import Path
from typing import List

import click

from ..cli.formatting import (
    console, display_error, format_progress, format_report_summary, format_report_table
)
from ..core.exceptions import ParseError
from ..evaluation.grader import AnswerGrader, GradingResult
from ..evaluation.report import ReportBuilder
from ..parsing.answer_parser import AnswerSetParser, ParsedRecord
from ..utils.logging import get_sheet_logger, PerformanceTimer


async def _grade_sequentially(grader: AnswerGrader, records: List[ParsedRecord],
                              show_progress: bool) -> List[GradingResult]:
    """Grade records one by one, advancing a progress bar."""
    results = []
    try:
        if not show_progress:
            return await grader.grade_records_async(records)

        with format_progress() as progress:
            task = progress.add_task("Grading answers...", total=len(records))
            for record in records:
                result = await grader.grade_async(
                    record.question_text, record.reference_answer, record.student_answer
                )
                results.append(result)
                progress.advance(task)
        return results
    finally:
        if grader.scorer is not None:
            await grader.scorer.close()


@click.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--json', 'as_json', is_flag=True, help='Print the report as JSON')
@click.option('--no-scorer', is_flag=True, help='Skip the external scorer and grade heuristically')
@click.option('--no-feedback', is_flag=True, help='Hide per-question feedback in the table')
@click.pass_context
def grade(ctx, file, as_json, no_scorer, no_feedback):
    """Grade a free-text answer sheet.

    \b
    EXAMPLES:

    paperscore grade answers.txt
    paperscore grade answers.txt --no-scorer
    paperscore grade answers.txt --json > report.json

    \b
    The sheet holds Q:/A:/S: blocks separated by --- lines, or any of
    the other accepted layouts (see 'paperscore parse').
    """
    config = ctx.obj['config']
    logger = get_sheet_logger(file.name)

    try:
        records = AnswerSetParser(config.parsing).parse_file(file)
    except ParseError as e:
        logger.warning(f"Parsing failed: {e.message.splitlines()[0]}")
        display_error(e.message, "Could not parse answer sheet")
        ctx.exit(1)

    grader = AnswerGrader.from_config(config, use_scorer=not no_scorer)
    if grader.scorer is not None:
        logger.info(f"Using external scorer {config.scorer.model}")

    with PerformanceTimer(f"grading {len(records)} answers", logger.logger):
        results = asyncio.run(_grade_sequentially(grader, records, show_progress=not as_json))

    report = ReportBuilder(config.report).build(file.name, records, results)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    console.print(format_report_summary(report))
    console.print(format_report_table(report, show_feedback=not no_feedback))
