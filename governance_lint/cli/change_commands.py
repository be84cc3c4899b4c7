"""
validate-changes
================

Validate change entries under ``<docs-root>/changes``: all of them, or one
by id.
"""

from __future__ import annotations

import argparse
import sys

from ..constants import CHANGE_ID
from ..linter import GovernanceLinter
from .common import add_common_arguments, emit, prepare, run_guarded


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="validate-changes",
        description="Validate CHANGE entries (schema, compliance, signatures)",
    )
    parser.add_argument(
        "change_id",
        nargs="?",
        metavar="CHANGE-ID",
        help="Validate a single change entry (default: all)",
    )
    add_common_arguments(parser)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for validate-changes."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.change_id and not CHANGE_ID.match(args.change_id):
        parser.error(f"expected a CHANGE-XXX id, got {args.change_id}")

    def command() -> int:
        config = prepare(args)
        linter = GovernanceLinter(config)
        if args.change_id:
            results = linter.lint_record(args.change_id)
        else:
            results = linter.lint_changes()
        emit(results, args.format, title="📝 Change Entry Validation")
        return results.exit_code

    return run_guarded(command)


if __name__ == "__main__":
    sys.exit(main())
