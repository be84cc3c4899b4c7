"""
Report rendering for lint and coverage results.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from .coverage import CoverageReport
from .models import Finding, LintResults

RULE = "─" * 43
DOUBLE_RULE = "═" * 43


def _display_path(path: Path | None, cwd: Path) -> str:
    if path is None:
        return "N/A"
    try:
        return os.path.relpath(path, cwd)
    except ValueError:
        # different drive on Windows
        return str(path)


def _header(finding: Finding, cwd: Path) -> str:
    prefix = f"[{finding.record_id}] " if finding.record_id else ""
    return f"{prefix}{_display_path(finding.file, cwd)}"


def render_human(
    results: LintResults,
    cwd: Path | None = None,
    title: str = "🔍 Governance Linter",
) -> str:
    """
    Render lint results as grouped ERRORS / WARNINGS / PASSED sections.

    Paths are shown relative to ``cwd`` (default: the working directory).
    """
    cwd = cwd or Path.cwd()
    lines = [title, DOUBLE_RULE, ""]

    for heading, findings in (("❌ ERRORS", results.errors), ("⚠️  WARNINGS", results.warnings)):
        if not findings:
            continue
        lines.append(f"{heading} ({len(findings)})")
        lines.append(RULE)
        for finding in findings:
            lines.append("")
            lines.append(_header(finding, cwd))
            lines.append(f"  {finding.message}")
        lines.append("")

    if results.passed:
        lines.append(f"✅ PASSED ({len(results.passed)})")
        lines.append(RULE)
        for finding in results.passed:
            lines.append(f"  {_header(finding, cwd)}")
        lines.append("")

    lines.append(RULE)
    lines.append(
        f"Summary: {len(results.errors)} errors, {len(results.warnings)} warnings, "
        f"{len(results.passed)} passed"
    )
    lines.append(f"Total items checked: {results.total}")
    return "\n".join(lines) + "\n"


def render_json(results: LintResults) -> str:
    return json.dumps(results.to_dict(), indent=2, ensure_ascii=False)


def render_coverage_human(report: CoverageReport) -> str:
    lines = ["📊 Capability Coverage Report", DOUBLE_RULE, ""]
    lines.append(f"Generated: {report.generated_at}")
    lines.append(
        f"Coverage: {report.covered_count}/{report.total} capabilities ({report.coverage_percent}%)"
    )
    lines.append("")
    lines.append("Capability Coverage:")
    lines.append(RULE)
    lines.append("")

    for cap_id, cap in report.capabilities.items():
        mark = "✅" if cap.covered else "❌"
        tests = f"{cap.scenario_count} scenarios" if cap.scenario_count else "No test coverage"
        lines.append(f"{mark} {cap_id}: {cap.name}")
        if cap.status:
            lines.append(f"   Status: {cap.status}")
        lines.append(f"   Tests: {tests}")
        if cap.feature_files:
            lines.append(f"   Features: {len(cap.feature_files)} files")
        lines.append("")

    uncovered = report.uncovered()
    if uncovered:
        lines.append("❌ Uncovered Capabilities:")
        lines.append(RULE)
        for cap_id in uncovered:
            cap = report.capabilities[cap_id]
            suffix = f" ({cap.status})" if cap.status else ""
            lines.append(f"  {cap_id}: {cap.name}{suffix}")
        lines.append("")

    return "\n".join(lines) + "\n"


def render_coverage_json(report: CoverageReport) -> str:
    return json.dumps(report.to_dict(), indent=2, ensure_ascii=False)
