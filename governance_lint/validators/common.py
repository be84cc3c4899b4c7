"""
Field-level checks shared by every record validator.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..constants import DEFAULT_SIGNATURE_AGENTS, ISO_DATE, PLACEHOLDER
from ..models import ValidationResult


@dataclass
class ValidationContext:
    """
    Cross-reference data available to validators.

    Validators never touch the file system; the linter builds this from the
    docs tree (tests build it by hand).
    """

    road_statuses: Mapping[str, Any] = field(default_factory=dict)
    capabilities: set[str] = field(default_factory=set)
    personas: set[str] = field(default_factory=set)
    persona_statuses: Mapping[str, Any] = field(default_factory=dict)
    user_stories: set[str] = field(default_factory=set)
    required_signature_agents: tuple[str, ...] = DEFAULT_SIGNATURE_AGENTS


def is_missing(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def get_path(record: Mapping[str, Any], dotted: str, default: Any = None) -> Any:
    """Read ``a.b.c`` from nested mappings, returning default on any gap."""
    current: Any = record
    for part in dotted.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


def require_fields(record: Mapping[str, Any], fields: Iterable[str], result: ValidationResult) -> None:
    for name in fields:
        if is_missing(record.get(name)):
            result.error(f"Missing required field: {name}")


def check_id(
    record: Mapping[str, Any],
    pattern: re.Pattern[str],
    expected: str,
    result: ValidationResult,
    field_name: str = "id",
) -> None:
    value = record.get(field_name)
    if is_missing(value):
        return
    if not pattern.match(str(value)):
        result.error(f"Invalid {field_name} format: {value} (expected {expected})")


def check_enum(
    value: Any,
    allowed: Iterable[str],
    result: ValidationResult,
    label: str = "status",
) -> None:
    if is_missing(value):
        return
    allowed = tuple(allowed)
    if value not in allowed:
        result.error(f'Invalid {label}: "{value}" (expected one of: {", ".join(allowed)})')


def check_date(record: Mapping[str, Any], field_name: str, result: ValidationResult) -> None:
    """Dates must be strict YYYY-MM-DD; a bad date is a warning."""
    value = record.get(field_name)
    if is_missing(value):
        return
    text = str(value)
    if not ISO_DATE.match(text):
        result.warn(f'Invalid date format for {field_name}: "{text}" (expected YYYY-MM-DD)')
        return
    try:
        datetime.strptime(text, "%Y-%m-%d")
    except ValueError:
        result.warn(f'Invalid date for {field_name}: "{text}"')


def check_id_list(
    record: Mapping[str, Any],
    field_name: str,
    pattern: re.Pattern[str],
    label: str,
    result: ValidationResult,
) -> list[str]:
    """
    Check an optional list of ids; returns the well-formed entries.
    """
    value = record.get(field_name)
    if value is None:
        return []
    if not isinstance(value, list):
        result.error(f"{field_name} must be an array")
        return []
    valid = []
    for item in value:
        text = str(item)
        if pattern.match(text):
            valid.append(text)
        else:
            result.error(f"Invalid {label} reference: {text}")
    return valid


def check_placeholders(record: Mapping[str, Any], result: ValidationResult) -> None:
    """Warn about template placeholders (XXX / YYY) left in string values."""
    for path, value in _iter_strings(record, ""):
        if PLACEHOLDER.search(value):
            result.warn(f"Unresolved template placeholder in {path}: {value}")


def _iter_strings(value: Any, prefix: str):
    if isinstance(value, Mapping):
        for key, item in value.items():
            yield from _iter_strings(item, f"{prefix}.{key}" if prefix else str(key))
    elif isinstance(value, list):
        for index, item in enumerate(value):
            yield from _iter_strings(item, f"{prefix}[{index}]")
    elif isinstance(value, str):
        yield prefix, value
