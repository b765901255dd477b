"""
Health Command

Configuration and external scorer checks for paperscore.
"""

import asyncio

import click
from rich.table import Table

from ..cli.formatting import console
from ..core.config import validate_config
from ..evaluation.grader import AnswerGrader
from ..utils.logging import get_logger

logger = get_logger(__name__)


@click.command()
@click.option('--skip-scorer', is_flag=True, help='Only validate the configuration')
@click.pass_context
def health(ctx, skip_scorer):
    """Check configuration and external scorer connectivity.

    \b
    EXAMPLES:

    paperscore health
    paperscore health --skip-scorer
    """
    config = ctx.obj['config']
    health_results = []
    all_checks_passed = True

    problems = validate_config(config)
    if problems:
        all_checks_passed = False
        health_results.append(("Configuration", False, "; ".join(problems)))
    else:
        health_results.append(("Configuration", True, "Valid"))

    if not skip_scorer:
        try:
            grader = AnswerGrader.from_config(config)
            status = asyncio.run(grader.check_scorer_health())
        except Exception as e:
            logger.exception("Scorer health check failed")
            status = {'status': 'error', 'message': str(e)}

        if status['status'] == 'error':
            all_checks_passed = False
        # An unconfigured scorer is fine: grading falls back to the heuristic
        health_results.append(("External Scorer", status['status'] != 'error', status['message']))

    table = Table(title="Health Check Results")
    table.add_column("Check", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Details", style="dim")

    for check, passed, details in health_results:
        table.add_row(check, "[green]OK[/green]" if passed else "[red]FAILED[/red]", details)

    console.print(table)

    if not all_checks_passed:
        ctx.exit(1)
