"""
Catalog record validation: capabilities, personas and user stories.

These records are the vocabulary that roadmap items, user stories and BDD
feature tags refer to.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..constants import (
    CAPABILITY_CATEGORIES,
    CAPABILITY_ID,
    CAPABILITY_TAG,
    PERSONA_ARCHETYPES,
    PERSONA_ID,
    PERSONA_STATUSES,
    PERSONA_TAG,
    PERSONA_TYPES,
    USE_CASE_ID,
    USER_STORY_ID,
)
from ..models import ValidationResult
from .common import (
    ValidationContext,
    check_enum,
    check_id,
    check_id_list,
    check_placeholders,
    is_missing,
    require_fields,
)

CAPABILITY_FIELDS = ("id", "title", "category", "tag")
PERSONA_FIELDS = ("id", "name", "tag", "type", "status", "archetype")
USER_STORY_FIELDS = ("id", "title", "persona", "status", "capabilities")


def validate_capability(
    record: Mapping[str, Any], context: ValidationContext | None = None
) -> ValidationResult:
    result = ValidationResult()
    require_fields(record, CAPABILITY_FIELDS, result)
    check_id(record, CAPABILITY_ID, "CAP-XXX", result)
    check_id(record, CAPABILITY_TAG, "@CAP-XXX", result, field_name="tag")

    category = record.get("category")
    if not is_missing(category) and category not in CAPABILITY_CATEGORIES:
        result.warn(f"Unusual category: {category}")

    check_placeholders(record, result)
    return result


def validate_persona(
    record: Mapping[str, Any], context: ValidationContext | None = None
) -> ValidationResult:
    result = ValidationResult()
    require_fields(record, PERSONA_FIELDS, result)
    check_id(record, PERSONA_ID, "PER-XXX", result)
    check_id(record, PERSONA_TAG, "@PER-XXX", result, field_name="tag")
    check_enum(record.get("type"), PERSONA_TYPES, result, label="type")
    check_enum(record.get("status"), PERSONA_STATUSES, result)
    check_enum(record.get("archetype"), PERSONA_ARCHETYPES, result, label="archetype")

    check_id_list(record, "typical_capabilities", CAPABILITY_ID, "capability", result)
    check_id_list(record, "related_stories", USER_STORY_ID, "story", result)
    check_id_list(record, "related_personas", PERSONA_ID, "persona", result)

    check_placeholders(record, result)
    return result


def validate_user_story(
    record: Mapping[str, Any], context: ValidationContext | None = None
) -> ValidationResult:
    """
    Validate a user story.

    The persona must be a known persona id; referencing a deprecated persona
    is a warning. Every capability must be a known capability id.
    """
    context = context or ValidationContext()
    result = ValidationResult()
    require_fields(record, USER_STORY_FIELDS, result)
    check_id(record, USER_STORY_ID, "US-XXX", result)

    persona = record.get("persona")
    if not is_missing(persona):
        persona = str(persona)
        if not PERSONA_ID.match(persona):
            result.error(f"Invalid persona format: {persona} (expected PER-XXX)")
        elif persona not in context.personas:
            result.error(f"Unknown persona: {persona}")
        elif context.persona_statuses.get(persona) == "deprecated":
            result.warn(f"Referenced persona is deprecated: {persona}")

    for cap in check_id_list(record, "capabilities", CAPABILITY_ID, "capability", result):
        if cap not in context.capabilities:
            result.error(f"Unknown capability: {cap}")

    check_id_list(record, "use_cases", USE_CASE_ID, "use case", result)

    check_placeholders(record, result)
    return result
