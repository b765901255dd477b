"""
CLI Output Formatting

Rich text formatting utilities for parsed records, grading reports and
status messages.
"""

from typing import List
from rich.console import Console
from rich.table import Table
from rich.progress import Progress, TextColumn, BarColumn
from rich.panel import Panel
from rich.markup import escape

from ..evaluation.report import GradingReport
from ..parsing.answer_parser import ParsedRecord

console = Console()


def score_style(score: float) -> str:
    """Color for a score, matching the pass and excellence thresholds."""
    if score >= 80:
        return "green"
    if score >= 60:
        return "yellow"
    return "red"


def _truncate(text: str, limit: int = 60) -> str:
    return text if len(text) <= limit else text[:limit - 3] + "..."


def format_records_table(records: List[ParsedRecord], title: str = "Parsed Questions") -> Table:
    """
    Format parsed records as a Rich table.

    Args:
        records: Parsed answer sheet records
        title: Table title

    Returns:
        Rich Table object
    """
    table = Table(title=title, show_header=True, header_style="bold blue")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Question", style="white")
    table.add_column("Reference Answer", style="white")
    table.add_column("Student Answer", style="white")

    for record in records:
        table.add_row(
            str(record.sequence_id),
            escape(_truncate(record.question_text)),
            escape(_truncate(record.reference_answer)),
            escape(_truncate(record.student_answer))
        )

    return table


def format_report_summary(report: GradingReport) -> Panel:
    """Summary panel with totals, average and letter grade."""
    style = score_style(report.average_score)
    lines = [
        f"File: [bold]{escape(report.file_name)}[/bold]",
        f"Total Questions: [bold]{report.total_questions}[/bold]",
        f"Average Score: [bold {style}]{report.average_score:.1f}%[/bold {style}]",
        f"Passed (60%+): [bold]{report.passed_count}[/bold]",
        f"Excellent (80%+): [bold]{report.excellent_count}[/bold]",
        f"Overall Grade: [bold {style}]{report.letter_grade}[/bold {style}]",
    ]
    if report.low_confidence_count:
        lines.append(f"[yellow]Needs manual review: {report.low_confidence_count}[/yellow]")

    return Panel("\n".join(lines), title="Grading Summary", border_style="blue")


def format_report_table(report: GradingReport, show_feedback: bool = True) -> Table:
    """Per-question results table."""
    table = Table(title="Question Results", show_header=True, header_style="bold blue")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Question", style="white")
    table.add_column("Score", justify="right")
    table.add_column("Confidence", justify="right", style="dim")
    if show_feedback:
        table.add_column("Feedback", style="white")

    for outcome in report.outcomes:
        style = score_style(outcome.result.score)
        row = [
            str(outcome.record.sequence_id),
            escape(_truncate(outcome.record.question_text, 50)),
            f"[{style}]{outcome.result.score}[/{style}]",
            f"{outcome.result.confidence:.2f}",
        ]
        if show_feedback:
            row.append(escape(outcome.result.feedback))
        table.add_row(*row)

    return table


def format_progress() -> Progress:
    """Progress bar for grading questions."""
    return Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        console=console,
        transient=True
    )


def display_error(message: str, error_type: str = "Error") -> None:
    """Display a formatted error message."""
    console.print(Panel(f"[red]{escape(message)}[/red]", title=error_type, border_style="red"))

