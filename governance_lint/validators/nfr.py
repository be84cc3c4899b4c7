"""Non-functional requirement validation."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..constants import NFR_ID, NFR_TYPES
from ..models import ValidationResult
from .common import ValidationContext, check_enum, check_id, check_placeholders, require_fields

REQUIRED_FIELDS = ("id", "type")


def validate_nfr(record: Mapping[str, Any], context: ValidationContext | None = None) -> ValidationResult:
    result = ValidationResult()
    require_fields(record, REQUIRED_FIELDS, result)
    check_id(record, NFR_ID, "NFR-TYPE-XXX", result)
    check_enum(record.get("type"), NFR_TYPES, result, label="type")
    check_placeholders(record, result)
    return result
