"""
governance-lint
===============

Front-matter linter for documentation governance records: roadmap items,
ADRs, change entries, NFRs, capabilities, personas and user stories, plus
BDD feature-file tag checks.
"""

__version__ = "1.0.0"

from .config import GovernanceConfig, load_config
from .frontmatter import FrontMatter, extract_front_matter
from .linter import GovernanceLinter
from .models import Finding, LintResults, RecordKind, Severity, ValidationResult
from .state_machine import check_state

__all__ = [
    "Finding",
    "FrontMatter",
    "GovernanceConfig",
    "GovernanceLinter",
    "LintResults",
    "RecordKind",
    "Severity",
    "ValidationResult",
    "__version__",
    "check_state",
    "extract_front_matter",
    "load_config",
]
