"""
Tests for the GovernanceLinter passes over a docs tree.
"""

import pytest

from governance_lint.config import load_config
from governance_lint.linter import GovernanceLinter
from governance_lint.snapshot import StatusSnapshot


def _linter(docs_tree, snapshot=None):
    return GovernanceLinter(load_config(docs_root=docs_tree.root), snapshot=snapshot)


def _messages(findings):
    return [f.message for f in findings]


class TestScenarios:
    """End-to-end scenarios over small docs trees."""

    def test_complete_item_with_pending_nfrs(self, docs_tree, complete_road):
        """Test a complete item whose NFRs are pending fails."""
        complete_road["governance"]["nfrs"]["status"] = "pending"
        docs_tree.road(complete_road)

        results = _linter(docs_tree).lint_all_roads()

        assert "All NFRs must pass before complete" in _messages(results.errors)
        assert results.exit_code == 1

    def test_adr_with_withdrawn_status(self, docs_tree, adr_record):
        """Test an ADR with a status outside the enum fails."""
        adr_record["status"] = "withdrawn"
        docs_tree.adr(adr_record)

        results = _linter(docs_tree).lint_adrs()

        assert any(m.startswith('Invalid status: "withdrawn"') for m in _messages(results.errors))
        assert results.exit_code == 1

    def test_published_change_without_signatures(self, docs_tree, complete_road, published_change):
        """Test a published change with an empty signatures list fails."""
        docs_tree.road(complete_road)
        published_change["signatures"] = []
        docs_tree.change(published_change)

        results = _linter(docs_tree).lint_changes()

        assert "Published CHANGE entries must have signatures array" in _messages(results.errors)
        assert results.exit_code == 1

    def test_well_formed_item_passes(self, docs_tree, complete_road):
        """Test a valid roadmap item passes."""
        docs_tree.road(complete_road)

        results = _linter(docs_tree).lint_road_item("ROAD-001")

        assert results.errors == []
        assert results.total == 1
        assert _messages(results.passed) == ["All validations passed"]
        assert results.exit_code == 0

    def test_unknown_capability_tag_in_feature(self, docs_tree):
        """Test a feature tagged with an unknown capability fails."""
        docs_tree.feature(
            "stack-tests/features/x.feature",
            "@CAP-999\nFeature: X\n  Scenario: s\n    Given a\n    Then b\n",
        )

        results = _linter(docs_tree).lint_features()

        assert "Unknown capability tag: @CAP-999" in _messages(results.errors)
        assert results.exit_code == 1

    def test_change_referencing_missing_item(self, docs_tree, published_change):
        """Test a dangling road_id error names the id."""
        published_change["road_id"] = "ROAD-042"
        docs_tree.change(published_change)

        results = _linter(docs_tree).lint_changes()

        assert "Referenced ROAD item not found: ROAD-042" in _messages(results.errors)


class TestBatchBehaviour:
    """Tests for batch-level properties."""

    def test_missing_directory(self, docs_tree):
        """Test an absent roads directory is an empty pass."""
        results = _linter(docs_tree).lint_all_roads()

        assert results.summary() == {"total": 0, "errors": 0, "warnings": 0, "passed": 0}
        assert results.exit_code == 0

    def test_empty_directory(self, docs_tree):
        """Test an empty roads directory is an empty pass."""
        (docs_tree.root / "roads").mkdir()
        assert _linter(docs_tree).lint_all_roads().exit_code == 0

    def test_idempotent(self, populated_tree, complete_road):
        """Test two runs over the same files give identical results."""
        broken = dict(complete_road, id="ROAD-003", status="shipped")
        populated_tree.road(broken)

        first = _linter(populated_tree).lint_ci().to_dict()
        second = _linter(populated_tree).lint_ci().to_dict()

        assert first == second

    def test_parse_error_does_not_stop_batch(self, docs_tree, proposed_road):
        """Test a broken file is reported and later files are still checked."""
        docs_tree.write_raw("roads", "ROAD-001.md", "---\nid: [ROAD-001\n---\n")
        docs_tree.road(proposed_road)

        results = _linter(docs_tree).lint_all_roads()

        assert results.total == 2
        assert len(results.errors) == 1
        assert results.errors[0].message.startswith("Invalid YAML:")
        assert results.errors[0].record_id == "ROAD-001"
        assert [f.record_id for f in results.passed] == ["ROAD-002"]

    def test_list_status_does_not_stop_batch(self, populated_tree, complete_road):
        """Test a non-string status is reported and the other items are still checked."""
        populated_tree.road({**complete_road, "id": "ROAD-003", "status": ["complete"]})

        results = _linter(populated_tree).lint_all_roads()

        assert results.total == 3
        assert [f.record_id for f in results.errors] == ["ROAD-003"]
        assert results.errors[0].message.startswith("Invalid status:")
        assert [f.record_id for f in results.passed] == ["ROAD-001", "ROAD-002"]

    def test_malformed_applicable_nfr_does_not_stop_batch(self, populated_tree, complete_road):
        """Test a mapping in nfrs.applicable is a schema error, not a crash."""
        complete_road["id"] = "ROAD-003"
        complete_road["governance"]["nfrs"]["applicable"] = [{"NFR-PERF-001": "pass"}]
        populated_tree.road(complete_road)

        results = _linter(populated_tree).lint_all_roads()

        assert results.total == 3
        assert [f.record_id for f in results.errors] == ["ROAD-003"]
        assert results.errors[0].message.startswith("Invalid NFR reference:")

    def test_item_with_template_in_slug_is_checked(self, docs_tree, proposed_road):
        """Test a roadmap item whose file name mentions templates is validated."""
        docs_tree.write("roads", "ROAD-009-template-engine.md", {**proposed_road, "id": "ROAD-009", "status": "withdrawn"})

        results = _linter(docs_tree).lint_all_roads()

        assert results.total == 1
        assert results.exit_code == 1

    def test_file_without_front_matter(self, docs_tree):
        """Test a markdown file without front matter is an error."""
        docs_tree.write("roads", "ROAD-001.md", None)
        results = _linter(docs_tree).lint_all_roads()
        assert _messages(results.errors) == ["No front matter found"]

    def test_warnings_do_not_fail(self, docs_tree, proposed_road):
        """Test warnings alone keep exit code 0."""
        del proposed_road["governance"]
        docs_tree.road(proposed_road)

        results = _linter(docs_tree).lint_all_roads()

        assert results.warnings
        assert results.exit_code == 0

    def test_ci_on_valid_tree(self, populated_tree):
        """Test --ci over a fully valid tree passes."""
        results = _linter(populated_tree).lint_ci()

        assert results.errors == []
        assert results.warnings == []
        # 2 roads, 2 capabilities, 1 story, 1 persona, 1 change, 1 ADR, 1 NFR, 2 features
        assert results.total == 11


class TestSingleRecord:
    """Tests for lint_record."""

    def test_record_not_found(self, docs_tree):
        """Test an unknown id is reported as an error."""
        results = _linter(docs_tree).lint_record("ROAD-404")

        assert _messages(results.errors) == ["ROAD item not found: ROAD-404"]
        assert results.total == 0
        assert results.exit_code == 1

    @pytest.mark.parametrize("record_id", ["ADR-001", "NFR-PERF-001", "CAP-001", "PER-001", "US-001", "CHANGE-001"])
    def test_any_kind_by_id(self, populated_tree, record_id):
        """Test every record kind can be linted by id."""
        results = _linter(populated_tree).lint_record(record_id)

        assert results.total == 1
        assert results.errors == []


class TestCrossReferences:
    """Tests for context built from the docs tree and config."""

    def test_capability_files_extend_known_ids(self, docs_tree, complete_road, capability_record):
        """Test capabilities declared by files are known."""
        docs_tree.capability({**capability_record, "id": "CAP-020", "tag": "@CAP-020"})
        complete_road["governance"]["capabilities"] = ["CAP-020"]
        docs_tree.road(complete_road)

        assert _linter(docs_tree).lint_all_roads().errors == []

    def test_config_overrides_known_capabilities(self, docs_tree, complete_road):
        """Test governance.yaml replaces the default capability list."""
        docs_tree.config({"capabilities": ["CAP-100"]})
        docs_tree.road(complete_road)

        results = _linter(docs_tree).lint_all_roads()

        assert "Unknown capability: CAP-001" in _messages(results.errors)

    def test_config_signature_agents(self, docs_tree, complete_road, published_change):
        """Test governance.yaml controls required signature agents."""
        docs_tree.config({"required_signature_agents": ["@release-manager"]})
        docs_tree.road(complete_road)
        docs_tree.change(published_change)

        results = _linter(docs_tree).lint_changes()

        assert _messages(results.errors) == ["Missing signature from @release-manager"]


class TestDependencies:
    """Tests for the dependency pass."""

    def test_dependency_warnings_do_not_fail(self, docs_tree, proposed_road):
        """Test dangling and circular references only warn."""
        docs_tree.road({**proposed_road, "id": "ROAD-001", "depends_on": ["ROAD-002", "ROAD-050"]})
        docs_tree.road({**proposed_road, "depends_on": ["ROAD-001"]})

        results = _linter(docs_tree).lint_dependencies()

        assert _messages(results.warnings) == [
            "Unknown dependency: ROAD-050",
            "Circular dependency: ROAD-001 -> ROAD-002 -> ROAD-001",
        ]
        assert results.exit_code == 0


class TestSnapshotTransitions:
    """Tests for transition checks against a status snapshot."""

    def test_illegal_jump_is_reported(self, docs_tree, complete_road):
        """Test moving from proposed straight to complete fails."""
        docs_tree.road(complete_road)
        snapshot = StatusSnapshot(statuses={"ROAD-001": "proposed"})

        results = _linter(docs_tree, snapshot).lint_all_roads()

        assert any(m.startswith("Invalid state transition: proposed -> complete") for m in _messages(results.errors))

    def test_legal_step_passes(self, docs_tree, complete_road):
        """Test nfr_validating -> complete is accepted."""
        docs_tree.road(complete_road)
        snapshot = StatusSnapshot(statuses={"ROAD-001": "nfr_validating"})

        assert _linter(docs_tree, snapshot).lint_all_roads().errors == []

    def test_new_item_has_no_history(self, docs_tree, complete_road):
        """Test items absent from the snapshot only get gate checks."""
        docs_tree.road(complete_road)

        assert _linter(docs_tree, StatusSnapshot()).lint_all_roads().errors == []

    def test_current_statuses(self, populated_tree):
        """Test the statuses written to a snapshot."""
        statuses = _linter(populated_tree).current_road_statuses()
        assert statuses == {"ROAD-001": "complete", "ROAD-002": "proposed"}
