"""
Roadmap item front matter validation.

Lifecycle gates are not checked here; see ``governance_lint.state_machine``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..constants import (
    BDD_STATUSES,
    CAPABILITY_ID,
    NFR_ID,
    NFR_STATUSES,
    ROAD_ID,
    ROAD_PRIORITIES,
    ROAD_STATUSES,
)
from ..models import ValidationResult
from .common import (
    ValidationContext,
    check_date,
    check_enum,
    check_id,
    check_id_list,
    check_placeholders,
    is_missing,
    require_fields,
)

REQUIRED_FIELDS = ("id", "title", "status")
DATE_FIELDS = ("created", "started", "completed")
DEPENDENCY_FIELDS = ("depends_on", "blocked_by", "blocks")

_RESULTS_REQUIRED = ("nfr_validating", "nfr_blocked", "complete")


def validate_road(record: Mapping[str, Any], context: ValidationContext | None = None) -> ValidationResult:
    """
    Validate a roadmap item record.

    Args:
        record: Parsed front matter
        context: Cross-reference data (known capability ids)

    Returns:
        ValidationResult
    """
    context = context or ValidationContext()
    result = ValidationResult()

    require_fields(record, REQUIRED_FIELDS, result)
    check_id(record, ROAD_ID, "ROAD-XXX", result)
    check_enum(record.get("status"), ROAD_STATUSES, result)
    check_enum(record.get("priority"), ROAD_PRIORITIES, result, label="priority")

    phase = record.get("phase")
    if phase is not None and (isinstance(phase, bool) or not isinstance(phase, int) or phase < 0):
        result.error(f"Invalid phase: {phase} (expected a non-negative integer)")

    for name in DATE_FIELDS:
        check_date(record, name, result)

    for name in DEPENDENCY_FIELDS:
        check_id_list(record, name, ROAD_ID, "ROAD", result)

    governance = record.get("governance")
    if governance is None:
        result.warn("Missing governance section")
    elif not isinstance(governance, Mapping):
        result.error("governance must be a mapping")
    else:
        _check_governance(governance, record.get("status"), context, result)

    check_placeholders(record, result)
    return result


def _check_governance(
    governance: Mapping[str, Any],
    status: Any,
    context: ValidationContext,
    result: ValidationResult,
) -> None:
    adrs = governance.get("adrs")
    if isinstance(adrs, Mapping):
        if "validated" not in adrs:
            result.warn("governance.adrs.validated not specified")
        elif adrs.get("validated") is True and is_missing(adrs.get("validated_by")):
            result.warn("governance.adrs.validated is true but validated_by is missing")
    elif adrs is not None:
        result.error("governance.adrs must be a mapping")

    bdd = governance.get("bdd")
    if isinstance(bdd, Mapping):
        check_enum(bdd.get("status"), BDD_STATUSES, result, label="governance.bdd.status")
    elif bdd is not None:
        result.error("governance.bdd must be a mapping")

    nfrs = governance.get("nfrs")
    applicable: list[Any] = []
    failing = False
    if isinstance(nfrs, Mapping):
        applicable = check_id_list(nfrs, "applicable", NFR_ID, "NFR", result)
        check_enum(nfrs.get("status"), NFR_STATUSES, result, label="governance.nfrs.status")
        failing = nfrs.get("status") == "fail"

        results = nfrs.get("results")
        if results is not None and not isinstance(results, Mapping):
            result.error("governance.nfrs.results must be a mapping")
        elif results is None and status in _RESULTS_REQUIRED:
            result.error(f"governance.nfrs.results required when status is {status}")
    elif nfrs is not None:
        result.error("governance.nfrs must be a mapping")
    elif status in _RESULTS_REQUIRED:
        result.error(f"governance.nfrs.results required when status is {status}")

    capabilities = check_id_list(governance, "capabilities", CAPABILITY_ID, "capability", result)
    for cap in capabilities:
        if cap not in context.capabilities:
            result.error(f"Unknown capability: {cap}")

    if not capabilities and not applicable and not failing:
        result.warn("ROAD item should have at least one capability or applicable NFR")
