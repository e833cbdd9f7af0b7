"""CLI entry point — ``commentkit extract``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from commentkit import __version__
from commentkit.config import Settings
from commentkit.constants import CommentStyle
from commentkit.diagnostics import Diagnostics
from commentkit.errors import ErrorClass
from commentkit.logging_config import setup_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"commentkit {__version__}")
        return 0

    if args.command == "extract":
        return _run_extract(args)
    parser.print_help()
    return 0


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="commentkit",
        description=(
            "Resolve JSDoc / TSDoc comments for declarations "
            "in JavaScript and TypeScript files."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    extract = sub.add_parser(
        "extract",
        help="Print the comment attached to every declaration",
    )
    extract.add_argument(
        "files",
        nargs="+",
        help="Source files to read",
    )
    extract.add_argument(
        "--format",
        "-f",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)",
    )
    extract.add_argument(
        "--style",
        "-s",
        choices=[s.value for s in CommentStyle],
        default=None,
        help="Which comments to consider (default: from settings)",
    )
    extract.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    return parser


def _run_extract(args: argparse.Namespace) -> int:
    """Execute the extract command. Returns the exit status."""
    from commentkit.export import export_json, export_text
    from commentkit.project import Project

    settings = Settings()
    setup_logging("DEBUG" if args.verbose else settings.log_level)
    if args.style:
        settings = settings.model_copy(
            update={"comment_style": CommentStyle(args.style)}
        )

    project = Project(settings)
    for name in args.files:
        path = Path(name)
        if not path.is_file():
            print(f"Error: {path} does not exist", file=sys.stderr)
            return 1
        project.add_file(path)

    diagnostics = Diagnostics()
    items = project.document(diagnostics)
    logger.debug(
        "Resolved %d items from %d files (%d parses)",
        len(items),
        len(project.units),
        project.resolver.cache.parse_count,
    )

    if args.format == "json":
        print(export_json(items, diagnostics.warning_count))
    else:
        print(export_text(items))

    _print_error_summary(diagnostics)
    return 1 if diagnostics.has_errors() else 0


def _print_error_summary(diagnostics: Diagnostics) -> None:
    skipped = diagnostics.error_classes[ErrorClass.UNSUPPORTED]
    internal = diagnostics.error_classes[ErrorClass.INVARIANT]
    if skipped:
        print(
            f"Skipped {skipped} file(s) with no supported grammar",
            file=sys.stderr,
        )
    if internal:
        print(
            f"{internal} item(s) failed with internal errors; "
            "please file a bug report with the input that triggers them",
            file=sys.stderr,
        )


if __name__ == "__main__":
    sys.exit(main())
