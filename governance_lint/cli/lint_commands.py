"""
governance-lint
===============

Validate governance records in a docs tree.

Usage:
    governance-lint ROAD-005
    governance-lint --all-roads
    governance-lint --adrs | --changes | --nfrs
    governance-lint --capabilities | --user-stories | --personas
    governance-lint --ci
    governance-lint --format=json --all-roads
    governance-lint --all-roads --snapshot --update-snapshot
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ..config import GovernanceConfig
from ..linter import GovernanceLinter
from ..models import LintResults
from ..snapshot import StatusSnapshot, load_snapshot, save_snapshot
from .common import EXIT_OK, add_common_arguments, emit, prepare, run_guarded

logger = logging.getLogger(__name__)

EXAMPLES = """\
examples:
  governance-lint ROAD-005
  governance-lint --all-roads
  governance-lint --ci --format=json
  governance-lint --all-roads --snapshot --update-snapshot
"""

MODES = {
    "all_roads": GovernanceLinter.lint_all_roads,
    "adrs": GovernanceLinter.lint_adrs,
    "changes": GovernanceLinter.lint_changes,
    "nfrs": GovernanceLinter.lint_nfrs,
    "capabilities": GovernanceLinter.lint_capabilities,
    "user_stories": GovernanceLinter.lint_user_stories,
    "personas": GovernanceLinter.lint_personas,
    "ci": GovernanceLinter.lint_ci,
}

# Passes that check every roadmap item and may move the snapshot baseline
SNAPSHOT_UPDATE_MODES = ("all_roads", "ci")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="governance-lint",
        description="Validate roadmap, ADR, change, NFR and catalog records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EXAMPLES,
    )
    parser.add_argument(
        "record_id",
        nargs="?",
        metavar="ID",
        help="Validate one record (ROAD-, ADR-, CHANGE-, NFR-, CAP-, US- or PER- id)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--all-roads", action="store_true", help="Validate every roadmap item")
    mode.add_argument("--adrs", action="store_true", help="Validate every ADR")
    mode.add_argument("--changes", action="store_true", help="Validate every change entry")
    mode.add_argument("--nfrs", action="store_true", help="Validate every NFR")
    mode.add_argument("--capabilities", action="store_true", help="Validate every capability")
    mode.add_argument("--user-stories", action="store_true", help="Validate every user story")
    mode.add_argument("--personas", action="store_true", help="Validate every persona")
    mode.add_argument(
        "--ci",
        action="store_true",
        help="Validate everything, including dependencies and BDD tags",
    )
    add_common_arguments(parser)
    parser.add_argument(
        "--snapshot",
        nargs="?",
        const="",
        metavar="PATH",
        help="Enforce lifecycle transitions against a status snapshot "
        "(default path: <docs-root>/.governance-status.json)",
    )
    parser.add_argument(
        "--update-snapshot",
        action="store_true",
        help="Check transitions against the snapshot, then write current roadmap statuses "
        "to it after a run with no errors (only with --all-roads or --ci)",
    )
    return parser


def _snapshot_path(args: argparse.Namespace, config: GovernanceConfig) -> Path | None:
    if args.snapshot:
        return Path(args.snapshot)
    if args.snapshot == "" or args.update_snapshot:
        return config.default_snapshot_path
    return None


def run_lint(args: argparse.Namespace, config: GovernanceConfig) -> LintResults:
    """Run the pass selected on the command line."""
    snapshot: StatusSnapshot | None = None
    if args.snapshot is not None or args.update_snapshot:
        snapshot = load_snapshot(_snapshot_path(args, config))

    linter = GovernanceLinter(config, snapshot=snapshot)

    if args.record_id:
        results = linter.lint_record(args.record_id)
    else:
        selected = next(name for name in MODES if getattr(args, name))
        results = MODES[selected](linter)

    if args.update_snapshot:
        path = _snapshot_path(args, config)
        if results.exit_code == EXIT_OK:
            save_snapshot(path, linter.current_road_statuses())
        else:
            logger.warning("Errors found; not updating status snapshot %s", path)

    return results


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for governance-lint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    modes = [name for name in MODES if getattr(args, name)]
    if args.record_id and modes:
        parser.error("a record ID cannot be combined with --" + modes[0].replace("_", "-"))
    if not args.record_id and not modes:
        parser.error(
            "choose a record ID or one of --all-roads, --adrs, --changes, --nfrs, "
            "--capabilities, --user-stories, --personas, --ci"
        )
    if args.update_snapshot and not any(name in SNAPSHOT_UPDATE_MODES for name in modes):
        parser.error("--update-snapshot requires --all-roads or --ci")

    def command() -> int:
        config = prepare(args)
        results = run_lint(args, config)
        emit(results, args.format)
        return results.exit_code

    return run_guarded(command)


if __name__ == "__main__":
    sys.exit(main())
