"""
CLI Entry Point

Command-line interface for grading free-text answer sheets, using the Click
framework with rich output formatting.
"""

import sys
from pathlib import Path

import click
from rich.panel import Panel

from .cli.formatting import console
from .core.config import get_config, reload_config
from .utils.logging import setup_logging, get_logger
from .commands import grade, parse, health

logger = get_logger(__name__)


@click.group(invoke_without_command=True)
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False), help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--json-logs', is_flag=True, help='Write logs as JSON lines')
@click.version_option(package_name='paperscore')
@click.pass_context
def cli(ctx, config, verbose, json_logs):
    """paperscore - free-text answer sheet grading"""
    ctx.ensure_object(dict)

    try:
        if config:
            app_config = reload_config(Path(config))
        else:
            app_config = get_config()

        if verbose:
            app_config.logging.level = 'DEBUG'
            app_config.logging.console_level = 'DEBUG'
        setup_logging(app_config, enable_json=json_logs)

        ctx.obj['config'] = app_config

    except Exception as e:
        console.print(f"[red]Error initializing application: {str(e)}[/red]")
        sys.exit(1)

    if ctx.invoked_subcommand is None:
        _display_banner()


def _display_banner():
    """Display application banner."""
    banner = Panel.fit(
        "[bold blue]paperscore[/bold blue]\n"
        "[dim]Free-text answer sheet grading[/dim]\n\n"
        "Use --help for available commands",
        border_style="blue"
    )
    console.print(banner)


cli.add_command(grade)
cli.add_command(parse)
cli.add_command(health)


if __name__ == '__main__':
    cli()
