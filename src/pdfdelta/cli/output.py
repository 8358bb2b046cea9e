"""Utility functions for cli output."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/pdfdelta/cli/output.py
import argparse
import sys
from typing import TextIO

from pdfdelta.models import ComparisonResult


def should_use_rich_output(args: argparse.Namespace, stream: TextIO | None = None) -> bool:
    """Determine if Rich output should be used based on TTY and args.

    Rich output is used when the ``--rich`` flag is set and ``stream``
    (stdout by default) is a terminal.
    """
    if not getattr(args, "rich", False):
        return False

    target = stream or sys.stdout
    isatty = getattr(target, "isatty", None)
    return bool(callable(isatty) and isatty())


def print_comparison_summary(result: ComparisonResult, baseline_label: str, revised_label: str) -> None:
    """Print a summary table of a comparison to stderr."""
    from rich.console import Console
    from rich.table import Table

    console = Console(stderr=True)
    table = Table(title=f"{baseline_label} → {revised_label}", show_header=True, header_style="bold")
    table.add_column("Measure")
    table.add_column("Baseline", justify="right")
    table.add_column("Revised", justify="right")

    extraction_a, extraction_b = result.extraction_a, result.extraction_b
    if extraction_a is not None and extraction_b is not None:
        table.add_row("Pages", str(extraction_a.page_count), str(extraction_b.page_count))
        table.add_row("Tokens", str(len(extraction_a.tokens)), str(len(extraction_b.tokens)))
    table.add_row("Changed tokens", f"[red]{len(result.change_set.removed)}[/red]", f"[green]{len(result.change_set.added)}[/green]")
    table.add_row("Changed words", f"[red]-{result.stats.removed}[/red]", f"[green]+{result.stats.added}[/green]")
    console.print(table)
    console.print(f"Mode: [bold]{result.mode.value}[/bold]")
    if result.note:
        console.print(f"[yellow]{result.note}[/yellow]")
