"""
Change entry validation.

A change entry documents a shipped roadmap item. Drafts only need a sound
schema; a published entry must point at a completed roadmap item and carry an
approved signature from every required agent.
"""

from __future__ import annotations

import numbers
from collections.abc import Mapping
from typing import Any

from ..constants import (
    CHANGE_CATEGORIES,
    CHANGE_ID,
    CHANGE_STATUSES,
    COMPLIANCE_CHECKS,
    COMPLIANCE_STATUSES,
    NFR_TYPES,
    ROAD_ID,
    SIGNATURE_FIELDS,
)
from ..models import ValidationResult
from .common import (
    ValidationContext,
    check_date,
    check_enum,
    check_id,
    check_placeholders,
    get_path,
    is_missing,
    require_fields,
)

REQUIRED_FIELDS = ("id", "road_id", "title", "date", "version", "status", "categories")


def validate_change(record: Mapping[str, Any], context: ValidationContext | None = None) -> ValidationResult:
    """
    Validate a change entry record.

    Args:
        record: Parsed front matter
        context: Cross-reference data; ``road_statuses`` resolves ``road_id``
            and ``required_signature_agents`` lists who must sign

    Returns:
        ValidationResult
    """
    context = context or ValidationContext()
    result = ValidationResult()
    status = record.get("status")

    require_fields(record, REQUIRED_FIELDS, result)
    check_id(record, CHANGE_ID, "CHANGE-XXX", result)
    check_enum(status, CHANGE_STATUSES, result)
    check_date(record, "date", result)

    _check_categories(record.get("categories"), result)
    _check_road_reference(record.get("road_id"), status, context, result)
    _check_compliance(record.get("compliance"), result)

    if status == "published":
        _check_signatures(record.get("signatures"), context.required_signature_agents, result)

    check_placeholders(record, result)
    return result


def _check_categories(categories: Any, result: ValidationResult) -> None:
    if is_missing(categories):
        return
    if not isinstance(categories, list):
        result.error("categories must be an array")
        return
    for category in categories:
        if category not in CHANGE_CATEGORIES:
            result.error(f'Invalid category: "{category}" (expected one of: {", ".join(CHANGE_CATEGORIES)})')


def _check_road_reference(
    road_id: Any, status: Any, context: ValidationContext, result: ValidationResult
) -> None:
    if is_missing(road_id):
        return
    if not ROAD_ID.match(str(road_id)):
        result.error(f"Invalid road_id format: {road_id} (expected ROAD-XXX)")
        return
    if road_id not in context.road_statuses:
        result.error(f"Referenced ROAD item not found: {road_id}")
        return
    road_status = context.road_statuses[road_id]
    if status == "published" and road_status != "complete":
        result.error(f"Referenced ROAD item is not complete: {road_id} (status: {road_status})")


def _check_compliance(compliance: Any, result: ValidationResult) -> None:
    if compliance is None:
        result.error("Missing compliance section")
        return
    if not isinstance(compliance, Mapping):
        result.error("compliance must be a mapping")
        return

    for check in COMPLIANCE_CHECKS:
        if is_missing(compliance.get(check)):
            result.error(f"Missing compliance check: {check}")

    for check in ("adr_check", "bdd_check"):
        check_enum(
            get_path(compliance, f"{check}.status"),
            COMPLIANCE_STATUSES,
            result,
            label=f"compliance.{check}.status",
        )

    for count in ("scenarios", "passed"):
        value = get_path(compliance, f"bdd_check.{count}")
        if value is not None and (isinstance(value, bool) or not isinstance(value, numbers.Number)):
            result.error(f"compliance.bdd_check.{count} must be a number")

    nfr_checks = compliance.get("nfr_checks")
    if isinstance(nfr_checks, Mapping):
        for nfr_type in NFR_TYPES:
            entry = nfr_checks.get(nfr_type)
            if is_missing(entry):
                result.error(f"Missing nfr_checks.{nfr_type}")
            elif not isinstance(entry, Mapping):
                result.error(f"compliance.nfr_checks.{nfr_type} must be a mapping")
            elif is_missing(entry.get("status")):
                result.error(f"Missing nfr_checks.{nfr_type}.status")
            else:
                check_enum(
                    entry["status"],
                    COMPLIANCE_STATUSES,
                    result,
                    label=f"compliance.nfr_checks.{nfr_type}.status",
                )
    elif nfr_checks is not None and not is_missing(nfr_checks):
        result.error("compliance.nfr_checks must be a mapping")


def _check_signatures(signatures: Any, required_agents: tuple[str, ...], result: ValidationResult) -> None:
    if not isinstance(signatures, list) or not signatures:
        result.error("Published CHANGE entries must have signatures array")
        return

    by_agent: dict[str, Mapping[str, Any]] = {}
    for index, signature in enumerate(signatures):
        if not isinstance(signature, Mapping):
            result.error(f"signatures[{index}] must be a mapping")
            continue
        for name in SIGNATURE_FIELDS:
            if is_missing(signature.get(name)):
                label = signature.get("agent") or f"signatures[{index}]"
                result.error(f"Signature {label} missing field: {name}")
        agent = signature.get("agent")
        if agent and signature.get("status") != "approved":
            result.error(f"{agent} signature status must be 'approved'")
        if agent:
            by_agent.setdefault(str(agent), signature)

    for agent in required_agents:
        if agent not in by_agent:
            result.error(f"Missing signature from {agent}")
