"""Rich terminal formatting for a11ylocate output."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from a11ylocate.change.metadata import line_label
from a11ylocate.core.models import (
    Confidence,
    DetectionOutcome,
    FindingWithFix,
    Match,
    NoSignal,
    WeakMatch,
)
from a11ylocate.detect.batch import BatchSummary

console = Console()
error_console = Console(stderr=True)


CONFIDENCE_COLORS = {
    Confidence.HIGH: "green",
    Confidence.MEDIUM: "yellow",
    Confidence.LOW: "red",
}


def outcome_label(outcome: DetectionOutcome | None) -> str:
    """Short coloured status for a detection outcome."""
    if outcome is None:
        return "[dim]not run[/dim]"
    if isinstance(outcome, Match):
        color = CONFIDENCE_COLORS[outcome.confidence]
        return f"[{color}]{outcome.confidence.value}[/{color}]"
    if isinstance(outcome, WeakMatch):
        return "[yellow]weak[/yellow]"
    if isinstance(outcome, NoSignal):
        return "[dim]no signal[/dim]"
    return "[red]no match[/red]"


def print_detection_table(
    items: list[FindingWithFix],
    results: dict[str, DetectionOutcome | None],
) -> None:
    """Print one row per item with its resolved path and outcome."""
    table = Table(show_header=True, header_style="bold", padding=(0, 1))
    table.add_column("Finding")
    table.add_column("Rule")
    table.add_column("File")
    table.add_column("Location")
    table.add_column("Result")
    table.add_column("Reason", overflow="fold")

    for item in items:
        outcome = results.get(item.finding.id)
        location = ""
        if isinstance(outcome, Match):
            location = line_label(outcome.line_start, outcome.line_end)
        table.add_row(
            item.finding.id,
            item.finding.rule_id or "-",
            item.file_path or "[dim]-[/dim]",
            location,
            outcome_label(outcome),
            outcome.reason if outcome else "",
        )

    console.print(table)


def print_batch_summary(
    summary: BatchSummary, mapped: int, high_confidence: int, total: int
) -> None:
    """Print the result of a batch detection run."""
    color = "green" if mapped == total else "yellow" if mapped else "red"
    lines = [
        "",
        f"  Mapped:           [{color}]{mapped}/{total}[/{color}]",
        f"  High confidence:  {high_confidence}",
        "",
        f"  {summary.attempted} searched | {summary.matched} matched | "
        f"{summary.weak} weak | {summary.unmatched} unmatched | {summary.skipped} skipped",
        "",
    ]
    if high_confidence < mapped:
        lines.append("  [yellow]Review weak and low-confidence paths before opening a PR.[/yellow]")
        lines.append("")

    console.print(Panel(
        "\n".join(lines),
        title="[bold]File Detection[/bold]",
        border_style=color,
        padding=(0, 1),
    ))


def get_progress() -> Progress:
    """Create a progress instance for detection."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    )
