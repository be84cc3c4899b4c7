"""
Governance vocabulary: record id patterns, enumerations and defaults.
"""

import re

# Roadmap lifecycle, in forward order
ROAD_STATUSES = (
    "proposed",
    "adr_validated",
    "bdd_pending",
    "bdd_complete",
    "implementing",
    "nfr_validating",
    "nfr_blocked",
    "complete",
)
ROAD_PRIORITIES = ("high", "medium", "low")

ADR_STATUSES = ("proposed", "accepted", "deprecated", "superseded")
ADR_CATEGORIES = ("architecture", "infrastructure", "security", "performance")

CHANGE_STATUSES = ("draft", "published")
CHANGE_CATEGORIES = ("Added", "Changed", "Deprecated", "Removed", "Fixed", "Security")
COMPLIANCE_STATUSES = ("pending", "pass", "fail", "na")
COMPLIANCE_CHECKS = ("adr_check", "bdd_check", "nfr_checks")
SIGNATURE_FIELDS = ("agent", "role", "status", "timestamp")

NFR_TYPES = ("performance", "security", "accessibility")
NFR_STATUSES = ("pending", "validating", "pass", "fail")
BDD_STATUSES = ("draft", "approved")

CAPABILITY_CATEGORIES = ("Security", "Observability", "Communication", "Business")

PERSONA_TYPES = ("human", "bot", "system", "external_api")
PERSONA_STATUSES = ("draft", "approved", "deprecated")
PERSONA_ARCHETYPES = ("creator", "operator", "administrator", "consumer", "integrator")

ROAD_ID = re.compile(r"^ROAD-\d+\Z")
ADR_ID = re.compile(r"^ADR-\d+\Z")
CHANGE_ID = re.compile(r"^CHANGE-\d+\Z")
NFR_ID = re.compile(r"^NFR-[A-Z]+-\d+\Z")
CAPABILITY_ID = re.compile(r"^CAP-\d+\Z")
CAPABILITY_TAG = re.compile(r"^@CAP-\d+\Z")
PERSONA_ID = re.compile(r"^PER-\d+\Z")
PERSONA_TAG = re.compile(r"^@PER-\d+\Z")
USER_STORY_ID = re.compile(r"^US-\d+\Z")
USE_CASE_ID = re.compile(r"^UC-\d+\Z")
ROAD_TAG = re.compile(r"^@ROAD-\d+\Z")

ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}\Z")
PLACEHOLDER = re.compile(r"XXX|YYY")

DEFAULT_CAPABILITY_IDS = (
    "CAP-001",
    "CAP-002",
    "CAP-003",
    "CAP-004",
    "CAP-005",
    "CAP-006",
    "CAP-007",
    "CAP-008",
)
DEFAULT_PERSONA_IDS = ("PER-001", "PER-002", "PER-003", "PER-004", "PER-005")
DEFAULT_USER_STORY_IDS = ("US-001", "US-002", "US-004")

DEFAULT_SIGNATURE_AGENTS = (
    "@arch-inspector",
    "@bdd-writer",
    "@bdd-runner",
    "@code-writer",
    "@performance-agent",
    "@security-agent",
    "@a11y-agent",
)

DEFAULT_FEATURE_DIRS = (
    "stack-tests/features",
    "tests/features",
    "features",
    "e2e",
    "bdd",
)

CONFIG_FILE_NAME = "governance.yaml"
SNAPSHOT_FILE_NAME = ".governance-status.json"
