"""Pytest configuration and fixtures for governance-lint tests."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import pytest
import yaml

COMPLETE_ROAD: dict[str, Any] = {
    "id": "ROAD-001",
    "title": "Escrow release flow",
    "status": "complete",
    "priority": "high",
    "phase": 1,
    "created": "2024-01-10",
    "completed": "2024-03-01",
    "governance": {
        "adrs": {"validated": True, "validated_by": "@arch-inspector"},
        "bdd": {"id": "BDD-001", "status": "approved"},
        "nfrs": {
            "applicable": ["NFR-PERF-001"],
            "status": "pass",
            "results": {"NFR-PERF-001": {"status": "pass"}},
        },
        "capabilities": ["CAP-001"],
    },
}

PROPOSED_ROAD: dict[str, Any] = {
    "id": "ROAD-002",
    "title": "Reputation scores",
    "status": "proposed",
    "priority": "medium",
    "governance": {
        "adrs": {"validated": False},
        "capabilities": ["CAP-002"],
    },
}

ADR: dict[str, Any] = {
    "id": "ADR-001",
    "title": "Use event sourcing for escrow",
    "status": "accepted",
    "category": "architecture",
}

NFR: dict[str, Any] = {
    "id": "NFR-PERF-001",
    "title": "Escrow API latency",
    "type": "performance",
}

SIGNATURE_AGENTS = (
    "@arch-inspector",
    "@bdd-writer",
    "@bdd-runner",
    "@code-writer",
    "@performance-agent",
    "@security-agent",
    "@a11y-agent",
)

PUBLISHED_CHANGE: dict[str, Any] = {
    "id": "CHANGE-001",
    "road_id": "ROAD-001",
    "title": "Escrow release flow shipped",
    "date": "2024-03-02",
    "version": "1.2.0",
    "status": "published",
    "categories": ["Added"],
    "compliance": {
        "adr_check": {"status": "pass"},
        "bdd_check": {"status": "pass", "scenarios": 12, "passed": 12},
        "nfr_checks": {
            "performance": {"status": "pass"},
            "security": {"status": "pass"},
            "accessibility": {"status": "na"},
        },
    },
    "signatures": [
        {"agent": agent, "role": "reviewer", "status": "approved", "timestamp": "2024-03-02T10:00:00Z"}
        for agent in SIGNATURE_AGENTS
    ],
}

CAPABILITY: dict[str, Any] = {
    "id": "CAP-001",
    "title": "Authentication",
    "category": "Security",
    "tag": "@CAP-001",
    "status": "stable",
}

PERSONA: dict[str, Any] = {
    "id": "PER-001",
    "name": "Marketplace seller",
    "tag": "@PER-001",
    "type": "human",
    "status": "approved",
    "archetype": "creator",
}

USER_STORY: dict[str, Any] = {
    "id": "US-001",
    "title": "Seller releases escrow",
    "persona": "PER-001",
    "status": "approved",
    "capabilities": ["CAP-001"],
}


def render_document(record: dict[str, Any] | None, body: str = "# Body\n") -> str:
    """Markdown text with the record as YAML front matter."""
    if record is None:
        return body
    block = yaml.safe_dump(record, sort_keys=False, allow_unicode=True)
    return f"---\n{block}---\n\n{body}"


class DocsTree:
    """Builds a docs root (and its parent project root) on disk."""

    def __init__(self, project_root: Path):
        self.project_root = project_root
        self.root = project_root / "docs"
        self.root.mkdir(parents=True, exist_ok=True)

    def write(self, directory: str, name: str, record: dict[str, Any] | None, body: str = "# Body\n") -> Path:
        path = self.root / directory / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_document(record, body), encoding="utf-8")
        return path

    def write_raw(self, directory: str, name: str, text: str) -> Path:
        path = self.root / directory / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def road(self, record: dict[str, Any]) -> Path:
        return self.write("roads", f"{record['id']}.md", record)

    def adr(self, record: dict[str, Any]) -> Path:
        return self.write("adr", f"{record['id']}-decision.md", record)

    def change(self, record: dict[str, Any]) -> Path:
        return self.write("changes", f"{record['id']}.md", record)

    def nfr(self, record: dict[str, Any]) -> Path:
        return self.write("nfr", f"{record['id']}.md", record)

    def capability(self, record: dict[str, Any]) -> Path:
        return self.write("capabilities", f"{record['id']}.md", record)

    def persona(self, record: dict[str, Any]) -> Path:
        return self.write("personas", f"{record['id']}.md", record)

    def user_story(self, record: dict[str, Any]) -> Path:
        return self.write("user-stories", f"{record['id']}.md", record)

    def feature(self, relative: str, text: str) -> Path:
        path = self.project_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def config(self, data: dict[str, Any]) -> Path:
        path = self.root / "governance.yaml"
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path_factory, monkeypatch):
    """Keep GOVERNANCE_* variables and any .env file out of every test."""
    for name in (
        "GOVERNANCE_DOCS_ROOT",
        "GOVERNANCE_PROJECT_ROOT",
        "GOVERNANCE_STRICT_BDD",
        "GOVERNANCE_LOG_LEVEL",
        "GOVERNANCE_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path_factory.mktemp("cwd")
    monkeypatch.chdir(workdir)


@pytest.fixture
def docs_tree(tmp_path) -> DocsTree:
    """An empty docs tree under tmp_path/project/docs."""
    return DocsTree(tmp_path / "project")


@pytest.fixture
def complete_road() -> dict[str, Any]:
    return copy.deepcopy(COMPLETE_ROAD)


@pytest.fixture
def proposed_road() -> dict[str, Any]:
    return copy.deepcopy(PROPOSED_ROAD)


@pytest.fixture
def adr_record() -> dict[str, Any]:
    return copy.deepcopy(ADR)


@pytest.fixture
def nfr_record() -> dict[str, Any]:
    return copy.deepcopy(NFR)


@pytest.fixture
def published_change() -> dict[str, Any]:
    return copy.deepcopy(PUBLISHED_CHANGE)


@pytest.fixture
def capability_record() -> dict[str, Any]:
    return copy.deepcopy(CAPABILITY)


@pytest.fixture
def persona_record() -> dict[str, Any]:
    return copy.deepcopy(PERSONA)


@pytest.fixture
def user_story_record() -> dict[str, Any]:
    return copy.deepcopy(USER_STORY)


@pytest.fixture
def populated_tree(docs_tree, complete_road, proposed_road, adr_record, nfr_record,
                   published_change, capability_record, persona_record, user_story_record) -> DocsTree:
    """A docs tree in which every record is valid."""
    docs_tree.road(complete_road)
    docs_tree.road(proposed_road)
    docs_tree.adr(adr_record)
    docs_tree.nfr(nfr_record)
    docs_tree.change(published_change)
    docs_tree.capability(capability_record)
    docs_tree.capability({**capability_record, "id": "CAP-002", "tag": "@CAP-002", "title": "Audit Logging"})
    docs_tree.persona(persona_record)
    docs_tree.user_story(user_story_record)
    docs_tree.feature(
        "stack-tests/features/escrow.feature",
        "@CAP-001 @ROAD-001\n"
        "Feature: Escrow release\n"
        "\n"
        "  Scenario: Seller releases funds\n"
        "    Given an escrow holding funds\n"
        "    When the seller releases it\n"
        "    Then the buyer is paid\n",
    )
    docs_tree.feature(
        "stack-tests/features/audit.feature",
        "@CAP-002\n"
        "Feature: Audit trail\n"
        "\n"
        "  Scenario: Actions are logged\n"
        "    When a user signs in\n"
        "    Then an audit entry is written\n",
    )
    return docs_tree
