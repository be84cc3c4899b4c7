"""
Schema validators, one per record kind.

Every validator has the signature ``(record, context) -> ValidationResult``
and never touches the file system.
"""

from collections.abc import Callable, Mapping
from typing import Any

from ..models import RecordKind, ValidationResult
from .adr import validate_adr
from .catalog import validate_capability, validate_persona, validate_user_story
from .change import validate_change
from .common import ValidationContext
from .nfr import validate_nfr
from .roadmap import validate_road

Validator = Callable[[Mapping[str, Any], ValidationContext], ValidationResult]

VALIDATORS: dict[RecordKind, Validator] = {
    RecordKind.ROAD: validate_road,
    RecordKind.ADR: validate_adr,
    RecordKind.CHANGE: validate_change,
    RecordKind.NFR: validate_nfr,
    RecordKind.CAPABILITY: validate_capability,
    RecordKind.PERSONA: validate_persona,
    RecordKind.USER_STORY: validate_user_story,
}


def validate_record(
    kind: RecordKind, record: Mapping[str, Any], context: ValidationContext
) -> ValidationResult:
    """Dispatch to the validator for a record kind."""
    return VALIDATORS[kind](record, context)


__all__ = [
    "VALIDATORS",
    "ValidationContext",
    "Validator",
    "validate_adr",
    "validate_capability",
    "validate_change",
    "validate_nfr",
    "validate_persona",
    "validate_record",
    "validate_road",
    "validate_user_story",
]
