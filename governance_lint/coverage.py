"""
Capability coverage: which capabilities have BDD scenarios tagged for them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .bdd import parse_feature
from .core.safe_io import read_text

logger = logging.getLogger(__name__)


@dataclass
class CapabilityInfo:
    id: str
    name: str = ""
    status: str = ""


@dataclass
class CapabilityCoverage:
    name: str
    status: str
    scenario_count: int = 0
    feature_files: list[str] = field(default_factory=list)

    @property
    def covered(self) -> bool:
        return bool(self.feature_files)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "scenarioCount": self.scenario_count,
            "featureFiles": self.feature_files,
            "covered": self.covered,
        }


@dataclass
class CoverageReport:
    capabilities: dict[str, CapabilityCoverage]
    generated_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def total(self) -> int:
        return len(self.capabilities)

    @property
    def covered_count(self) -> int:
        return sum(1 for c in self.capabilities.values() if c.covered)

    @property
    def coverage_percent(self) -> int:
        if not self.capabilities:
            return 100
        return round(self.covered_count / self.total * 100)

    def uncovered(self) -> list[str]:
        return [cap_id for cap_id, cap in self.capabilities.items() if not cap.covered]

    @property
    def exit_code(self) -> int:
        """1 when any capability lacks coverage."""
        return 1 if self.coverage_percent < 100 else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "generatedAt": self.generated_at,
            "summary": {
                "totalCapabilities": self.total,
                "coveredCapabilities": self.covered_count,
                "coveragePercent": self.coverage_percent,
            },
            "capabilities": {cap_id: cap.to_dict() for cap_id, cap in self.capabilities.items()},
        }


def build_coverage_report(
    capabilities: Iterable[CapabilityInfo],
    feature_files: Sequence[Path],
    relative_to: Path,
) -> CoverageReport:
    """
    Count tagged scenarios per capability.

    Every ``@CAP-XXX`` tag in a feature file credits that file's whole
    scenario count to the capability. Tags naming unknown capabilities are
    ignored here; ``validate-bdd-tags`` reports them.
    """
    report = CoverageReport(
        capabilities={
            cap.id: CapabilityCoverage(name=cap.name or cap.id, status=cap.status)
            for cap in sorted(capabilities, key=lambda c: c.id)
        }
    )

    for path in feature_files:
        try:
            parsed = parse_feature(read_text(path))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping unreadable feature file %s: %s", path, e)
            continue

        try:
            display = str(path.relative_to(relative_to))
        except ValueError:
            display = str(path)

        scenario_count = len(parsed.scenarios)
        for tag in dict.fromkeys(parsed.capability_tags()):
            coverage = report.capabilities.get(tag[1:])
            if coverage is None:
                continue
            coverage.scenario_count += scenario_count
            coverage.feature_files.append(display)

    return report
