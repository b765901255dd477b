"""
Parse Command

Shows how an answer sheet is split into question records without grading it.
"""

import json
from pathlib import Path

import click

from ..cli.formatting import console, display_error, format_records_table
from ..core.exceptions import ParseError, NoValidRecordsError
from ..parsing.answer_parser import AnswerSetParser
from ..utils.logging import get_logger

logger = get_logger(__name__)


@click.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--json', 'as_json', is_flag=True, help='Print records as JSON')
@click.pass_context
def parse(ctx, file, as_json):
    """Parse an answer sheet and list its questions.

    \b
    EXAMPLES:

    paperscore parse answers.txt
    paperscore parse answers.txt --json
    """
    config = ctx.obj['config']
    parser = AnswerSetParser(config.parsing)

    try:
        records = parser.parse_file(file)
    except NoValidRecordsError as e:
        logger.warning(f"No questions parsed from {file.name}: {e.segments_found} segments found")
        display_error(e.message, "Could not parse answer sheet")
        ctx.exit(1)
    except ParseError as e:
        display_error(e.message, "Could not parse answer sheet")
        ctx.exit(1)

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in records], indent=2))
        return

    console.print(format_records_table(records, title=f"Parsed Questions: {file.name}"))
    segmentation = parser.last_segmentation
    console.print(f"[green]{len(records)} question(s) parsed[/green] "
                  f"[dim]from {segmentation.count} section(s), split by {segmentation.strategy.value}[/dim]")
