"""Command-line interface for sheetfill."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import settings


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="sheetfill - Fill Excel templates with JSON data"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Render command
    render_parser = subparsers.add_parser("render", help="Render a template with data")
    render_parser.add_argument("template", help="Path to the .xlsx template")
    render_parser.add_argument("data", help="Path to a JSON data file ('-' for stdin)")
    render_parser.add_argument("output", help="Path of the rendered workbook")
    render_parser.add_argument(
        "--auto-parse-numbers",
        action="store_true",
        default=settings.auto_parse_numbers,
        help="Convert numeric strings to numbers (drops leading zeros)",
    )
    render_parser.add_argument(
        "--log-level", default=settings.log_level, help="Logging level (default: INFO)"
    )

    args = parser.parse_args(argv)

    if args.command == "render":
        logging.basicConfig(
            level=args.log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        sys.exit(run_render(args.template, args.data, args.output, args.auto_parse_numbers))
    else:
        parser.print_help()
        sys.exit(1)


def load_data(source: str):
    """Read the JSON data object from a file or stdin."""
    if source == "-":
        return json.load(sys.stdin)
    with open(source, encoding="utf-8") as f:
        return json.load(f)


def run_render(template: str, data_source: str, output: str, auto_parse_numbers: bool) -> int:
    """Render a template file; returns the process exit code."""
    from . import render_template
    from .engine import RenderOptions
    from .errors import TemplateLoadError

    try:
        data = load_data(data_source)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Could not read data from {data_source}: {e}", file=sys.stderr)
        return 1

    try:
        reports = render_template(
            Path(template),
            data,
            Path(output),
            RenderOptions(auto_parse_numbers=auto_parse_numbers),
        )
    except TemplateLoadError as e:
        print(str(e), file=sys.stderr)
        return 1

    for report in reports:
        print(
            f"{report.sheet_name}: {report.tables_expanded} table(s), "
            f"{report.rows_inserted} row(s) inserted, {len(report.cell_errors)} cell error(s)"
        )
    print(f"Wrote {output}")
    return 0


if __name__ == "__main__":
    main()
