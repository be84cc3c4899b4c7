"""
BDD Feature Tag Validation
==========================

Gherkin feature files link scenarios to system capabilities with
``@CAP-XXX`` tags and, optionally, to roadmap items with ``@ROAD-XXX`` tags.

Rules:
- A ``@CAP-XXX`` tag (feature or scenario level) that names no known
  capability is always an error
- A file with no ``@CAP-XXX`` tag anywhere gets a warning
- Missing feature name, no scenarios, or an unnamed scenario is an error
- A scenario without Given/When, or without Then, gets a warning
- A ``@ROAD-XXX`` tag naming an unknown roadmap item gets a warning

In strict mode every warning is promoted to an error.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .constants import CAPABILITY_TAG, ROAD_TAG
from .core.safe_io import read_text
from .models import ValidationResult

logger = logging.getLogger(__name__)

_SCENARIO_PREFIX = re.compile(r"^Scenario(?: Outline)?:")


@dataclass
class Scenario:
    name: str
    line_number: int
    tags: list[str] = field(default_factory=list)
    has_given: bool = False
    has_when: bool = False
    has_then: bool = False


@dataclass
class ParsedFeature:
    """Tags and structure of one feature file."""

    feature_tags: list[str] = field(default_factory=list)
    name: str = ""
    scenarios: list[Scenario] = field(default_factory=list)

    def all_tags(self) -> list[str]:
        tags = list(self.feature_tags)
        for scenario in self.scenarios:
            tags.extend(scenario.tags)
        return tags

    def capability_tags(self) -> list[str]:
        return [t for t in self.all_tags() if CAPABILITY_TAG.match(t)]

    def road_tags(self) -> list[str]:
        return [t for t in self.all_tags() if ROAD_TAG.match(t)]


def parse_feature(text: str) -> ParsedFeature:
    """
    Extract feature tags, the feature name and scenarios from Gherkin text.

    Tag lines apply to the next ``Feature:`` or ``Scenario:`` line.
    """
    parsed = ParsedFeature()
    pending_tags: list[str] = []
    current: Scenario | None = None

    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()

        if line.startswith("@"):
            pending_tags = [t for t in line.split() if t.startswith("@")]
            continue

        if line.startswith("Feature:"):
            parsed.name = line[len("Feature:"):].strip()
            parsed.feature_tags = pending_tags
            pending_tags = []
            continue

        match = _SCENARIO_PREFIX.match(line)
        if match:
            current = Scenario(
                name=line[match.end():].strip(),
                line_number=line_number,
                tags=pending_tags,
            )
            parsed.scenarios.append(current)
            pending_tags = []
            continue

        if current is not None:
            if line.startswith("Given "):
                current.has_given = True
            elif line.startswith("When "):
                current.has_when = True
            elif line.startswith("Then "):
                current.has_then = True

    return parsed


def check_feature(
    parsed: ParsedFeature,
    known_capabilities: Iterable[str],
    known_roads: Iterable[str] | None = None,
    strict: bool = False,
) -> ValidationResult:
    """Validate a parsed feature against the known capability and roadmap ids."""
    known_capabilities = set(known_capabilities)
    result = ValidationResult()

    if not parsed.name:
        result.error("Missing feature name")
    if not parsed.scenarios:
        result.error("No scenarios found")

    for scenario in parsed.scenarios:
        if not scenario.name:
            result.error(f"Line {scenario.line_number}: Scenario has no name")
        if not scenario.has_given and not scenario.has_when:
            result.warn(
                f'Scenario "{scenario.name}" (line {scenario.line_number}): Missing Given or When step'
            )
        if not scenario.has_then:
            result.warn(f'Scenario "{scenario.name}" (line {scenario.line_number}): Missing Then step')

    cap_tags = parsed.capability_tags()
    if not cap_tags:
        result.warn("No capability tag found")
    for tag in _unique(cap_tags):
        if tag[1:] not in known_capabilities:
            result.error(f"Unknown capability tag: {tag}")

    if known_roads is not None:
        known_roads = set(known_roads)
        for tag in _unique(parsed.road_tags()):
            if tag[1:] not in known_roads:
                result.warn(f"Unknown roadmap tag: {tag}")

    if strict:
        result = result.promote_warnings()
    return result


def validate_feature(
    path: Path,
    known_capabilities: Iterable[str],
    known_roads: Iterable[str] | None = None,
    strict: bool = False,
) -> ValidationResult:
    """
    Read and validate one feature file.

    Args:
        path: Feature file
        known_capabilities: Capability ids such as ``CAP-001``
        known_roads: Roadmap ids; None skips the ``@ROAD-XXX`` check
        strict: Promote warnings to errors

    Returns:
        ValidationResult
    """
    try:
        text = read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read feature file %s: %s", path, e)
        result = ValidationResult()
        result.error(f"Failed to parse file: {e}")
        return result
    return check_feature(parse_feature(text), known_capabilities, known_roads, strict)


def find_feature_files(project_root: Path, feature_dirs: Sequence[str]) -> list[Path]:
    """All ``*.feature`` files under the feature directories, deduplicated and sorted."""
    found: set[Path] = set()
    for directory in feature_dirs:
        base = project_root / directory
        if not base.is_dir():
            continue
        for path in base.rglob("*.feature"):
            if path.is_file():
                found.add(path.resolve())
    if not found:
        logger.info("No feature files found under %s", project_root)
    return sorted(found)


def _unique(items: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(items))
