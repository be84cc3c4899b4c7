"""
Dependency graph checks across roadmap items.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .constants import ROAD_ID

DEPENDENCY_FIELDS = ("depends_on", "blocked_by", "blocks")


@dataclass
class RoadNode:
    """A roadmap item reduced to its id and outgoing references."""

    id: str
    depends_on: list[str] = field(default_factory=list)
    blocked_by: list[str] = field(default_factory=list)
    blocks: list[str] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> RoadNode:
        def ids(name: str) -> list[str]:
            value = record.get(name)
            if not isinstance(value, list):
                return []
            return [str(v) for v in value if ROAD_ID.match(str(v))]

        return cls(
            id=str(record.get("id")),
            depends_on=ids("depends_on"),
            blocked_by=ids("blocked_by"),
            blocks=ids("blocks"),
        )

    def references(self) -> list[str]:
        return self.depends_on + self.blocked_by + self.blocks


@dataclass
class DependencyReport:
    """Result of dependency validation."""

    missing: dict[str, list[str]]
    circular_paths: list[list[str]]
    reverse_deps_map: dict[str, list[str]]

    @property
    def has_missing(self) -> bool:
        return bool(self.missing)

    @property
    def has_circular(self) -> bool:
        return bool(self.circular_paths)

    def warnings_for(self, road_id: str) -> list[str]:
        """Warning messages attributed to one roadmap item."""
        messages = [f"Unknown dependency: {dep}" for dep in self.missing.get(road_id, [])]
        for cycle in self.circular_paths:
            if cycle[0] == road_id:
                messages.append(f"Circular dependency: {' -> '.join(cycle)}")
        return messages


class DependencyValidator:
    """Validates references between roadmap items."""

    def validate_all(self, nodes: Iterable[RoadNode]) -> DependencyReport:
        """
        Validates all dependencies in the roadmap.

        Args:
            nodes: Roadmap items to validate

        Returns:
            DependencyReport with validation metadata
        """
        nodes = list(nodes)
        return DependencyReport(
            missing=self._find_missing_deps(nodes),
            circular_paths=self._detect_circular_deps(nodes),
            reverse_deps_map=self._calculate_reverse_deps(nodes),
        )

    def _find_missing_deps(self, nodes: list[RoadNode]) -> dict[str, list[str]]:
        """Find references to roadmap items that do not exist, keyed by referrer."""
        valid_ids = {n.id for n in nodes}
        missing: dict[str, list[str]] = {}

        for node in nodes:
            unknown = sorted({ref for ref in node.references() if ref not in valid_ids})
            if unknown:
                missing[node.id] = unknown

        return missing

    def _detect_circular_deps(self, nodes: list[RoadNode]) -> list[list[str]]:
        """Detect cycles in the depends_on graph using DFS."""
        graph = {n.id: n.depends_on for n in nodes}
        circular_paths = []
        seen_cycles = set()

        def normalize_cycle(cycle: list[str]) -> list[str]:
            """Rotate cycle to start from the smallest id."""
            body = cycle[:-1]
            start = body.index(min(body))
            rotated = body[start:] + body[:start]
            return rotated + [rotated[0]]

        def dfs(node: str, path: list[str], done: set[str]) -> None:
            if node in path:
                cycle = normalize_cycle(path[path.index(node):] + [node])
                key = ",".join(cycle)
                if key not in seen_cycles:
                    seen_cycles.add(key)
                    circular_paths.append(cycle)
                return

            if node in done:
                return

            path.append(node)
            for neighbor in graph.get(node, []):
                if neighbor in graph:  # dangling ids are reported as missing
                    dfs(neighbor, path, done)
            path.pop()
            done.add(node)

        done: set[str] = set()
        for node_id in sorted(graph):
            dfs(node_id, [], done)

        return circular_paths

    def _calculate_reverse_deps(self, nodes: list[RoadNode]) -> dict[str, list[str]]:
        """Calculate which items depend on each item."""
        reverse_deps: dict[str, list[str]] = {n.id: [] for n in nodes}

        for node in nodes:
            for dep_id in node.depends_on:
                reverse_deps.setdefault(dep_id, []).append(node.id)

        return reverse_deps


def check_dependencies(records: Iterable[Mapping[str, Any]]) -> DependencyReport:
    """Run the dependency checks over roadmap front matter records."""
    nodes = [RoadNode.from_record(r) for r in records if r.get("id")]
    return DependencyValidator().validate_all(nodes)
