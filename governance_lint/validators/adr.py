"""Architecture decision record validation."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..constants import ADR_CATEGORIES, ADR_ID, ADR_STATUSES
from ..models import ValidationResult
from .common import ValidationContext, check_enum, check_id, check_placeholders, require_fields

REQUIRED_FIELDS = ("id", "title", "status", "category")


def validate_adr(record: Mapping[str, Any], context: ValidationContext | None = None) -> ValidationResult:
    result = ValidationResult()
    require_fields(record, REQUIRED_FIELDS, result)
    check_id(record, ADR_ID, "ADR-XXX", result)
    check_enum(record.get("status"), ADR_STATUSES, result)
    check_enum(record.get("category"), ADR_CATEGORIES, result, label="category")
    check_placeholders(record, result)
    return result
