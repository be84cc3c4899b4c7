"""
validate-bdd-tags
=================

Validate ``@CAP-XXX`` and ``@ROAD-XXX`` tags in BDD feature files.

Feature files are searched under the configured feature directories
(``stack-tests/features``, ``tests/features``, ``features``, ``e2e`` and
``bdd`` by default) relative to the project root.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ..linter import GovernanceLinter
from .common import add_common_arguments, emit, prepare, run_guarded


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="validate-bdd-tags",
        description="Validate capability tags in BDD feature files",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings (e.g. a file with no capability tag) as errors",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        help="Directory the feature directories are relative to (default: parent of the docs root)",
    )
    add_common_arguments(parser)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for validate-bdd-tags."""
    args = build_parser().parse_args(argv)

    def command() -> int:
        config = prepare(args)
        if args.project_root:
            config.project_root = args.project_root.resolve()
        if args.strict:
            config.strict_bdd = True

        linter = GovernanceLinter(config)
        results = linter.lint_features()

        if results.total == 0 and args.format != "json":
            print("🥒 No feature files found (this is OK if BDD tests are not set up yet)")
            print(f"   Searched under {config.resolved_project_root}: {', '.join(config.feature_dirs)}")
            return results.exit_code

        emit(results, args.format, title="🥒 BDD Feature Files")
        return results.exit_code

    return run_guarded(command)


if __name__ == "__main__":
    sys.exit(main())
