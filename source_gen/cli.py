"""
Command-line interface for Salesforce source generation.

Usage:
  source-gen picklists [options]
  source-gen record-types [options]
"""

import argparse
import sys
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table
from rich import box

from .apex import generate_picklist_classes, generate_record_types_class
from .core.config import ConfigError, load_options
from .core.generator import GenerationResult, GeneratorError
from .core.templates import TemplateError
from .logging_config import configure_logging, get_logger
from .metadata import MetadataReadError

logger = get_logger(__name__)

# Initialize rich console
console = Console()

# CLI operation name -> section of the sourceGen config
OPERATIONS = {
    "picklists": "picklists",
    "record-types": "recordTypes",
}


def _add_common_args(parser: argparse.ArgumentParser):
    """Arguments shared by every operation."""
    parser.add_argument(
        "--project-dir",
        metavar="DIR",
        help="Project root (default: current working directory)",
    )
    parser.add_argument(
        "--output-dir",
        metavar="DIR",
        help="Default: default package directory from sfdx-project.json",
    )
    parser.add_argument(
        "--source-api-version",
        metavar="VERSION",
        help="Default: from sfdx-project.json",
    )
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="JSON file with options (package.json 'sourceGen' section or plain object)",
    )
    parser.add_argument(
        "--include",
        metavar="NAME",
        action="append",
        help="Only process this name; repeatable",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show debug logging"
    )


def create_parser() -> argparse.ArgumentParser:
    """Build the top-level parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="source-gen",
        description="Generate Apex constants from Salesforce source metadata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  source-gen picklists --picklist-suffix Values
  source-gen record-types --output-class-name RecordTypes --include-inactive
  source-gen record-types --config package.json
        """.strip(),
    )
    subparsers = parser.add_subparsers(dest="operation", metavar="OPERATION")

    picklists = subparsers.add_parser(
        "picklists",
        help="Generate Apex constants from field picklists and value sets",
    )
    _add_common_args(picklists)
    picklists.add_argument(
        "--ignore-picklists", action="store_true", default=None,
        help="Ignore custom fields",
    )
    picklists.add_argument(
        "--ignore-standard-value-sets", action="store_true", default=None,
        help="Ignore standard value sets",
    )
    picklists.add_argument(
        "--ignore-global-value-sets", action="store_true", default=None,
        help="Ignore global value sets",
    )
    for option, help_text in [
        ("--picklist-prefix", "Prefix for classes generated from custom fields"),
        ("--picklist-suffix", "Suffix for classes generated from custom fields"),
        ("--picklist-infix", "String between object and field name (default: '_')"),
        ("--standard-value-set-prefix", "Prefix for standard value set classes"),
        ("--standard-value-set-suffix", "Suffix for standard value set classes"),
        ("--global-value-set-prefix", "Prefix for global value set classes"),
        ("--global-value-set-suffix", "Suffix for global value set classes"),
    ]:
        picklists.add_argument(option, metavar="TEXT", help=help_text)

    record_types = subparsers.add_parser(
        "record-types",
        help="Generate Apex constants from record types",
        description=(
            "Use RecordTypes.ACCOUNT_AGENT_ID instead of "
            "Schema.SObjectType.Account.getRecordTypeInfosByDeveloperName().get('Agent'), "
            "or RecordTypes.ACCOUNT_AGENT to access the RecordTypeInfo."
        ),
    )
    _add_common_args(record_types)
    record_types.add_argument(
        "--output-class-name", metavar="NAME", help="Default: 'RecordTypes'"
    )
    record_types.add_argument(
        "--include-inactive", action="store_true", default=None,
        help="Include inactive record types",
    )
    record_types.add_argument(
        "--ignore-test-class", action="store_true", default=None,
        help="Do not generate test class",
    )

    return parser


def _build_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect option overrides from parsed arguments."""
    skip = {"operation", "config", "verbose"}
    return {
        key: value
        for key, value in vars(args).items()
        if key not in skip and value is not None
    }


def _print_result(result: GenerationResult):
    """Show written classes and skipped sources."""
    if result.classes:
        table = Table(
            title="📋 Generated Classes", box=box.ROUNDED, title_style="bold cyan"
        )
        table.add_column("Class", style="bold green", no_wrap=True)
        table.add_column("Source", style="cyan")

        for generated in result.classes:
            table.add_row(generated.class_name, generated.source_name or "")

        console.print()
        console.print(table)
    else:
        console.print("[yellow]⚠️ No classes generated[/yellow]")

    for name in result.skipped:
        console.print(f"[dim]Skipped (no values): {name}[/dim]")
    for warning in result.warnings:
        console.print(f"[yellow]⚠️ {warning}[/yellow]")

    console.print(
        f"\n[green]✓[/green] Wrote {len(result.written)} file(s)"
        + (f" to {result.metadata['output_dir']}" if "output_dir" in result.metadata else "")
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the CLI.

    Args:
        argv: Arguments without the program name (default: ``sys.argv[1:]``)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.operation:
        parser.print_help()
        return 1

    configure_logging(verbose=args.verbose)

    try:
        options = load_options(
            OPERATIONS[args.operation], args.config, _build_overrides(args)
        )
        logger.debug("Running %s with %s", args.operation, options)

        if args.operation == "picklists":
            result = generate_picklist_classes(options)
        else:
            result = generate_record_types_class(options)

        _print_result(result)
        return 0

    except (ConfigError, GeneratorError, MetadataReadError, TemplateError) as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
