"""
capability-coverage
===================

Report which capabilities have BDD scenarios tagged for them. Exits 1 when
coverage is below 100%.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ..core.safe_io import safe_write_json
from ..coverage import CapabilityInfo, build_coverage_report
from ..linter import GovernanceLinter
from ..models import RecordKind
from ..reporter import render_coverage_human, render_coverage_json
from .common import EXIT_OK, add_common_arguments, prepare, run_guarded


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="capability-coverage",
        description="Report BDD scenario coverage per capability",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Also write the JSON report to this file",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        help="Directory the feature directories are relative to (default: parent of the docs root)",
    )
    add_common_arguments(parser)
    return parser


def known_capabilities(linter: GovernanceLinter) -> list[CapabilityInfo]:
    """Capabilities declared by capability files, else the configured ids."""
    found = []
    for doc in linter.layout.documents(RecordKind.CAPABILITY):
        if doc.front_matter.ok and doc.record_id:
            found.append(
                CapabilityInfo(
                    id=doc.record_id,
                    name=str(doc.record.get("title") or ""),
                    status=str(doc.record.get("status") or ""),
                )
            )
    if found:
        return found
    return [CapabilityInfo(id=cap_id) for cap_id in linter.config.capabilities]


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for capability-coverage."""
    args = build_parser().parse_args(argv)

    def command() -> int:
        config = prepare(args)
        if args.project_root:
            config.project_root = args.project_root.resolve()

        root = config.resolved_project_root
        if not any((root / d).is_dir() for d in config.feature_dirs):
            print("📊 Capability Coverage Report")
            print(f"ℹ️  No features directory found under {root} ({', '.join(config.feature_dirs)})")
            print("   Skipping coverage report")
            return EXIT_OK

        linter = GovernanceLinter(config)
        report = build_coverage_report(known_capabilities(linter), linter.feature_files(), root)

        if args.output:
            safe_write_json(args.output, report.to_dict())

        if args.format == "json":
            print(render_coverage_json(report))
        else:
            print(render_coverage_human(report))
        return report.exit_code

    return run_guarded(command)


if __name__ == "__main__":
    sys.exit(main())
