"""
Roadmap Lifecycle State Machine
===============================

Eight states, forward-only, with a single loop between ``nfr_validating``
and ``nfr_blocked``::

    proposed -> adr_validated -> bdd_pending -> bdd_complete -> implementing
             -> nfr_validating -> complete
                              \\-> nfr_blocked -> nfr_validating

Besides the transition table, each status has gate preconditions on the
item's ``governance`` block that must already hold:

- ``bdd_pending`` and later: ``governance.adrs.validated`` is true
- ``implementing`` and later: ``governance.bdd.status`` is ``approved``
- ``complete``: ``governance.nfrs.status`` is ``pass`` and every applicable
  NFR has a passing entry in ``governance.nfrs.results``
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .models import ValidationResult
from .validators.common import get_path

TRANSITIONS: dict[str, tuple[str, ...]] = {
    "proposed": ("adr_validated",),
    "adr_validated": ("bdd_pending",),
    "bdd_pending": ("bdd_complete",),
    "bdd_complete": ("implementing",),
    "implementing": ("nfr_validating",),
    "nfr_validating": ("complete", "nfr_blocked"),
    "nfr_blocked": ("nfr_validating",),
    "complete": (),
}

INITIAL_STATE = "proposed"
TERMINAL_STATES = frozenset({"complete"})

# nfr_blocked sits beside nfr_validating, not after it
_RANK = {
    "proposed": 0,
    "adr_validated": 1,
    "bdd_pending": 2,
    "bdd_complete": 3,
    "implementing": 4,
    "nfr_validating": 5,
    "nfr_blocked": 5,
    "complete": 6,
}

_ADR_GATE_RANK = _RANK["bdd_pending"]
_BDD_GATE_RANK = _RANK["implementing"]


def status_rank(status: str) -> int:
    """Position of a status in the lifecycle; raises KeyError for unknown statuses."""
    return _RANK[status]


def allowed_next(status: str) -> tuple[str, ...]:
    return TRANSITIONS.get(status, ())


def is_valid_transition(previous: str, current: str) -> bool:
    """Staying in the same status is always allowed."""
    if previous == current:
        return True
    return current in allowed_next(previous)


def check_transition(previous: str, current: str) -> ValidationResult:
    result = ValidationResult()
    if previous not in TRANSITIONS:
        result.warn(f"Unknown previous status in snapshot: {previous}")
        return result
    if current in TRANSITIONS and not is_valid_transition(previous, current):
        allowed = ", ".join(allowed_next(previous)) or "none"
        result.error(f"Invalid state transition: {previous} -> {current} (allowed: {allowed})")
    return result


def check_gates(record: Mapping[str, Any]) -> ValidationResult:
    """Check the gate preconditions for the record's declared status."""
    result = ValidationResult()
    status = record.get("status")
    if not isinstance(status, str) or status not in _RANK:
        # enum violations are reported by the schema validator
        return result

    rank = _RANK[status]

    if rank >= _ADR_GATE_RANK and get_path(record, "governance.adrs.validated") is not True:
        result.error(f"ADR validation required before {status}")

    if rank >= _BDD_GATE_RANK and get_path(record, "governance.bdd.status") != "approved":
        result.error(f"BDD approval required before {status}")

    if status == "complete":
        if get_path(record, "governance.nfrs.status") != "pass":
            result.error("All NFRs must pass before complete")

        applicable = get_path(record, "governance.nfrs.applicable") or []
        results = get_path(record, "governance.nfrs.results") or {}
        if not isinstance(results, Mapping):
            results = {}
        if isinstance(applicable, list):
            for nfr_id in applicable:
                if not isinstance(nfr_id, str):
                    # malformed entries are reported by the schema validator
                    continue
                outcome = results.get(nfr_id)
                if not isinstance(outcome, Mapping) or outcome.get("status") != "pass":
                    result.error(f"NFR {nfr_id} must pass before complete")

    return result


def check_state(record: Mapping[str, Any], previous_status: str | None = None) -> ValidationResult:
    """
    Validate a roadmap record against the lifecycle.

    Args:
        record: Roadmap front matter
        previous_status: Last observed status, if known; without it only the
            gate preconditions are checked

    Returns:
        ValidationResult with transition and gate errors
    """
    result = ValidationResult()
    current = record.get("status")
    if previous_status is not None and isinstance(current, str):
        result.extend(check_transition(previous_status, current))
    result.extend(check_gates(record))
    return result
