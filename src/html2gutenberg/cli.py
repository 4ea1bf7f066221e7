"""Command-line interface for html2gutenberg."""

import argparse
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from . import __version__
from .converter import convert
from .errors import ConfigurationError, DocumentLoadError, DocumentParseError
from .loader import load_html, load_linked_css
from .logging_config import setup_logging
from .models.config import ConverterConfig, load_config
from .output import format_result, render_report, write_report, write_result
from .policy.registry import default_registry

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ERROR = 2

PREVIEW_CHARS = 500


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="html2gutenberg",
        description="Convert HTML exported from Google Docs or Word into editor-ready HTML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert and print to stdout
  html2gutenberg article.html

  # Fail on the first policy violation
  html2gutenberg article.html --mode strict -o out/article.html

  # JSON output with the report
  html2gutenberg article.html --format json --report

  # Write a starter config file
  html2gutenberg --init-config html2gutenberg.yaml
        """,
    )

    parser.add_argument(
        "input",
        nargs="?",
        help="Input HTML file",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file (default: stdout)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Config file (YAML or JSON)",
    )

    # Conversion settings
    conversion_group = parser.add_argument_group("conversion settings")
    conversion_group.add_argument(
        "--mode",
        "-m",
        choices=["strict", "relaxed"],
        default=None,
        help="strict stops at the first failed policy (default: from config, else relaxed)",
    )
    conversion_group.add_argument(
        "--format",
        "-f",
        choices=["html", "json"],
        default=None,
        help="Output format (default: from config, else html)",
    )
    conversion_group.add_argument(
        "--keep-classes",
        action="store_true",
        help="Keep class attributes after inlining styles",
    )
    conversion_group.add_argument(
        "--no-inline-styles",
        action="store_true",
        help="Do not inline CSS into style attributes",
    )
    conversion_group.add_argument(
        "--no-clean",
        action="store_true",
        help="Keep Google Docs and Word export artifacts",
    )

    # Output control
    output_group = parser.add_argument_group("output control")
    output_group.add_argument(
        "--report",
        action="store_true",
        help="Print the conversion report",
    )
    output_group.add_argument(
        "--report-file",
        type=Path,
        default=None,
        metavar="PATH",
        help="Save the report as JSON",
    )
    output_group.add_argument(
        "--dry-run",
        action="store_true",
        help="Run the conversion without writing output",
    )
    output_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    output_group.add_argument(
        "--log-file",
        type=Path,
        default=None,
        metavar="PATH",
        help="Also write logs to this file",
    )

    # Utilities
    utility_group = parser.add_argument_group("utilities")
    utility_group.add_argument(
        "--list-policies",
        action="store_true",
        help="List available policies and exit",
    )
    utility_group.add_argument(
        "--init-config",
        type=Path,
        default=None,
        metavar="PATH",
        help="Write the default configuration to PATH and exit",
    )

    return parser


def list_policies(console: Console) -> int:
    """Print the registered policies in execution order."""
    table = Table(title="Available policies")
    table.add_column("Priority", justify="right")
    table.add_column("Name", style="green", no_wrap=True)
    table.add_column("Description")

    for policy in sorted(default_registry(), key=lambda p: p.priority):
        table.add_row(str(policy.priority), policy.name, policy.description)

    console.print(table)
    return EXIT_OK


def init_config(path: Path, console: Console) -> int:
    """Write the default configuration as YAML."""
    if path.exists():
        console.print(f"[red]Error:[/red] {path} already exists")
        return EXIT_ERROR
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(ConverterConfig().to_yaml(), encoding="utf-8")
    console.print(f"[green]Created config file:[/green] {path}")
    return EXIT_OK


def build_config(args: argparse.Namespace) -> ConverterConfig:
    """Load the config file and apply command-line overrides."""
    if args.config is not None and not args.config.exists():
        raise ConfigurationError(f"Config file not found: {args.config}")
    config = load_config(args.config)

    overrides: dict = {}
    if args.mode:
        overrides["mode"] = args.mode
    if args.format:
        overrides["output_format"] = args.format
    if args.keep_classes:
        overrides["keep_classes"] = True
    if args.no_inline_styles:
        overrides["inline_styles"] = False
    if args.no_clean:
        overrides["clean_html"] = False

    if overrides:
        config = ConverterConfig.model_validate({**config.model_dump(), **overrides})
    return config


def run_converter(args: argparse.Namespace) -> int:
    """Run a conversion with given arguments."""
    console = Console(stderr=True)

    if not args.input:
        console.print("[red]Error:[/red] Please provide an input HTML file")
        return EXIT_ERROR

    try:
        config = build_config(args)
        document = load_html(Path(args.input))
    except (ConfigurationError, DocumentLoadError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return EXIT_ERROR

    output_path = args.output.resolve() if args.output and not args.dry_run else None

    if args.verbose:
        console.print(f"[bold blue]html2gutenberg[/bold blue] v{__version__}")
        console.print(f"Input: {document.source_path}")
        if output_path:
            console.print(f"Output: {output_path}")
        console.print(f"Mode: {config.mode.value}")
        console.print(f"Format: {config.output_format.value}")

    try:
        result = convert(
            document.html,
            config,
            source_path=document.source_path,
            css=load_linked_css(document.html, document.base_dir),
            output_path=output_path,
        )
    except DocumentParseError as e:
        console.print(f"[red]Fatal:[/red] {e}")
        if e.report is not None and args.report_file:
            write_report(e.report, args.report_file)
        return EXIT_ERROR

    if args.report or args.verbose:
        render_report(result.report, console)

    if args.report_file:
        write_report(result.report, args.report_file)
        if args.verbose:
            console.print(f"Report saved to: {args.report_file}")

    if not result.report.success:
        console.print("[red]Conversion failed in strict mode[/red]")
        for error in result.report.errors:
            console.print(f"  - {error}", markup=False)
        return EXIT_FAILED

    fmt = config.output_format
    if args.dry_run:
        console.print("[yellow]Dry run - no output written[/yellow]")
        if args.verbose:
            console.print(result.html[:PREVIEW_CHARS], markup=False, highlight=False)
    elif output_path:
        write_result(result, output_path, fmt, include_report=True)
        console.print(f"[green]Output saved to:[/green] {output_path}")
    else:
        sys.stdout.write(format_result(result, fmt, include_report=True))
        sys.stdout.write("\n")

    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(
        level="DEBUG" if args.verbose else "WARNING",
        log_file=str(args.log_file) if args.log_file else None,
        force=True,
    )

    if args.list_policies:
        return list_policies(Console())
    if args.init_config:
        return init_config(args.init_config, Console(stderr=True))

    return run_converter(args)


if __name__ == "__main__":
    sys.exit(main())
