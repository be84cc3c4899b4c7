"""
Command-line entry points.

- ``governance-lint``: validate governance records
- ``validate-changes``: validate change entries
- ``validate-bdd-tags``: validate feature file tags
- ``capability-coverage``: BDD coverage per capability
"""

from .bdd_commands import main as validate_bdd_tags_main
from .change_commands import main as validate_changes_main
from .coverage_commands import main as capability_coverage_main
from .lint_commands import main as governance_lint_main

__all__ = [
    "capability_coverage_main",
    "governance_lint_main",
    "validate_bdd_tags_main",
    "validate_changes_main",
]
