"""
Tests for the roadmap lifecycle state machine.
"""

import pytest

from governance_lint.constants import ROAD_STATUSES
from governance_lint.state_machine import (
    TRANSITIONS,
    allowed_next,
    check_gates,
    check_state,
    is_valid_transition,
    status_rank,
)


def _record(status, adrs_validated=True, bdd_status="approved", nfr_status="pass", results=None):
    return {
        "id": "ROAD-001",
        "status": status,
        "governance": {
            "adrs": {"validated": adrs_validated},
            "bdd": {"status": bdd_status},
            "nfrs": {
                "applicable": ["NFR-PERF-001"],
                "status": nfr_status,
                "results": results if results is not None else {"NFR-PERF-001": {"status": "pass"}},
            },
        },
    }


class TestTransitions:
    """Tests for the transition table."""

    def test_forward_chain(self):
        """Test each state can advance to the next one."""
        chain = ["proposed", "adr_validated", "bdd_pending", "bdd_complete",
                 "implementing", "nfr_validating", "complete"]
        for previous, current in zip(chain, chain[1:]):
            assert is_valid_transition(previous, current)

    def test_nfr_loop(self):
        """Test nfr_validating and nfr_blocked loop into each other."""
        assert is_valid_transition("nfr_validating", "nfr_blocked")
        assert is_valid_transition("nfr_blocked", "nfr_validating")

    def test_skipping_states_is_invalid(self):
        """Test jumping ahead is rejected."""
        assert not is_valid_transition("proposed", "implementing")
        assert not is_valid_transition("nfr_blocked", "complete")

    def test_backwards_is_invalid(self):
        """Test moving backwards is rejected."""
        assert not is_valid_transition("implementing", "bdd_pending")

    def test_complete_is_terminal(self):
        """Test complete has no outgoing transitions."""
        assert allowed_next("complete") == ()

    def test_same_status_is_allowed(self):
        """Test an unchanged status is always valid."""
        for status in ROAD_STATUSES:
            assert is_valid_transition(status, status)

    def test_unknown_status_has_no_successors(self):
        """Test an unknown status has nothing allowed."""
        assert allowed_next("withdrawn") == ()

    def test_table_covers_every_status(self):
        """Test the transition table and rank table name exactly the lifecycle statuses."""
        assert set(TRANSITIONS) == set(ROAD_STATUSES)
        for status in ROAD_STATUSES:
            status_rank(status)
        for targets in TRANSITIONS.values():
            assert set(targets) <= set(ROAD_STATUSES)


class TestStatusRank:
    """Tests for status_rank."""

    def test_forward_order(self):
        """Test ranks increase along the lifecycle."""
        assert status_rank("proposed") < status_rank("bdd_pending") < status_rank("complete")

    def test_blocked_ranks_with_validating(self):
        """Test nfr_blocked ranks with nfr_validating."""
        assert status_rank("nfr_blocked") == status_rank("nfr_validating")

    def test_unknown_status_raises(self):
        """Test an unknown status raises KeyError."""
        with pytest.raises(KeyError):
            status_rank("withdrawn")


class TestGates:
    """Tests for gate preconditions."""

    def test_complete_with_everything_passing(self):
        """Test a fully satisfied complete item has no errors."""
        assert check_gates(_record("complete")).errors == []

    def test_complete_with_pending_nfrs(self):
        """Test complete requires nfrs.status pass."""
        result = check_gates(_record("complete", nfr_status="pending"))
        assert "All NFRs must pass before complete" in result.errors

    def test_complete_with_failing_nfr_result(self):
        """Test each applicable NFR must have a passing result."""
        result = check_gates(_record("complete", results={"NFR-PERF-001": {"status": "fail"}}))
        assert "NFR NFR-PERF-001 must pass before complete" in result.errors

    def test_complete_with_missing_nfr_result(self):
        """Test an applicable NFR without any result fails the gate."""
        result = check_gates(_record("complete", results={}))
        assert "NFR NFR-PERF-001 must pass before complete" in result.errors

    @pytest.mark.parametrize(
        "status",
        ["bdd_pending", "bdd_complete", "implementing", "nfr_validating", "nfr_blocked", "complete"],
    )
    def test_adr_gate(self, status):
        """Test ADR validation is required from bdd_pending on."""
        result = check_gates(_record(status, adrs_validated=False))
        assert f"ADR validation required before {status}" in result.errors

    @pytest.mark.parametrize("status", ["proposed", "adr_validated"])
    def test_adr_gate_not_applied_early(self, status):
        """Test early states do not need ADR validation."""
        assert check_gates(_record(status, adrs_validated=False)).errors == []

    @pytest.mark.parametrize("status", ["implementing", "nfr_validating", "nfr_blocked", "complete"])
    def test_bdd_gate(self, status):
        """Test BDD approval is required from implementing on."""
        result = check_gates(_record(status, bdd_status="draft"))
        assert f"BDD approval required before {status}" in result.errors

    def test_bdd_gate_not_applied_before_implementing(self):
        """Test bdd_complete does not need approval yet."""
        assert check_gates(_record("bdd_complete", bdd_status="draft")).errors == []

    def test_missing_governance_fails_gates(self):
        """Test gates apply even when the governance block is absent."""
        result = check_gates({"id": "ROAD-001", "status": "implementing"})
        assert "ADR validation required before implementing" in result.errors
        assert "BDD approval required before implementing" in result.errors

    def test_invalid_status_is_left_to_schema(self):
        """Test an unknown status produces no gate errors."""
        assert check_gates({"status": "withdrawn"}).errors == []

    @pytest.mark.parametrize("status", [["complete"], {"name": "complete"}, 3, None])
    def test_non_string_status_is_left_to_schema(self, status):
        """Test a list, mapping or number status produces no gate errors."""
        assert check_gates(_record(status)).errors == []

    def test_malformed_applicable_entries_are_skipped(self):
        """Test non-string applicable entries do not break the NFR gate."""
        record = _record("complete")
        record["governance"]["nfrs"]["applicable"] = [{"NFR-PERF-001": "pass"}, "NFR-SEC-001"]

        result = check_gates(record)

        assert result.errors == ["NFR NFR-SEC-001 must pass before complete"]


class TestCheckState:
    """Tests for check_state."""

    def test_without_previous_status_only_gates(self):
        """Test no transition error is possible without history."""
        assert check_state(_record("complete")).errors == []

    def test_invalid_transition(self):
        """Test an illegal jump is reported."""
        result = check_state(_record("implementing"), previous_status="proposed")
        assert any(e.startswith("Invalid state transition: proposed -> implementing") for e in result.errors)

    def test_valid_transition(self):
        """Test a legal step has no errors."""
        result = check_state(_record("complete"), previous_status="nfr_validating")
        assert result.errors == []

    def test_unchanged_status(self):
        """Test staying in place is fine."""
        assert check_state(_record("implementing"), previous_status="implementing").errors == []

    def test_unknown_previous_status_warns(self):
        """Test an unrecognized snapshot status is a warning."""
        result = check_state(_record("proposed"), previous_status="draft")
        assert result.errors == []
        assert result.warnings
