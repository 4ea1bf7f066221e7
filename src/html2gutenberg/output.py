"""Serialize conversion results and render reports."""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from .models.config import OutputFormat
from .models.report import ConversionReport, ConversionResult

logger = logging.getLogger(__name__)


def format_result(
    result: ConversionResult,
    fmt: Union[OutputFormat, str] = OutputFormat.HTML,
    include_report: bool = True,
    pretty: bool = True,
) -> str:
    """
    Serialize a conversion result.

    Args:
        result: Result to serialize
        fmt: ``html`` returns the document as-is; ``json`` wraps it with the report
        include_report: Include the report in JSON output
        pretty: Indent JSON output

    Returns:
        Serialized text
    """
    fmt = OutputFormat(fmt)
    if fmt == OutputFormat.HTML:
        return result.html
    return json.dumps(
        result.to_dict(include_report=include_report),
        indent=2 if pretty else None,
        ensure_ascii=False,
    )


def write_result(
    result: ConversionResult,
    path: Union[str, Path],
    fmt: Union[OutputFormat, str] = OutputFormat.HTML,
    include_report: bool = True,
    pretty: bool = True,
) -> Path:
    """
    Write a conversion result to a file, creating parent directories.

    Returns:
        The path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_result(result, fmt, include_report, pretty), encoding="utf-8")
    logger.info(f"Wrote {path}")
    return path


def write_report(report: ConversionReport, path: Union[str, Path]) -> Path:
    """Write a report on its own as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def _add_section(table: Table, label: str, items: list[str], style: str) -> None:
    for index, item in enumerate(items):
        table.add_row(label if index == 0 else "", Text(item), style=style)


def render_report(report: ConversionReport, console: Optional[Console] = None) -> None:
    """Print a human-readable summary of a report."""
    console = console or Console(stderr=True)

    status = "[green]success[/green]" if report.success else "[red]failed[/red]"
    console.print(f"[bold]Conversion report[/bold] for {escape(report.input_file)}: {status}")
    if report.output_file:
        console.print(f"  Output: {escape(report.output_file)}")
    console.print(f"  Duration: {report.execution_time_ms:.1f}ms")

    if report.policies_triggered:
        console.print(f"  Policies triggered: {', '.join(report.policies_triggered)}")
    if report.failed_policies:
        console.print(f"  Policies failed: [red]{', '.join(report.failed_policies)}[/red]")

    if not (report.actions or report.warnings or report.errors):
        console.print("  No changes or issues")
        return

    table = Table(show_header=False, box=None)
    table.add_column("Kind", style="bold")
    table.add_column("Message")
    _add_section(table, "Action", report.actions, "cyan")
    _add_section(table, "Warning", report.warnings, "yellow")
    _add_section(table, "Error", report.errors, "red")
    console.print(table)
