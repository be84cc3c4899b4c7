"""
Governance Linter
=================

Runs validation passes over a docs tree. Each pass returns its own
``LintResults``; callers merge them.

    linter = GovernanceLinter(load_config("docs"))
    results = linter.lint_all_roads().merge(linter.lint_adrs())
"""

from __future__ import annotations

import logging
from pathlib import Path

from .bdd import find_feature_files, validate_feature
from .config import GovernanceConfig
from .core.exceptions import ErrorContext, RecordNotFoundError
from .core.logging import Timer, log_context
from .dependencies import DependencyReport, check_dependencies
from .discovery import Document, DocsLayout, kind_for_id
from .models import LintResults, RecordKind, ValidationResult
from .snapshot import StatusSnapshot
from .state_machine import check_state
from .validators import ValidationContext, validate_record

logger = logging.getLogger(__name__)

# Pass order for --ci
CI_KINDS = (
    RecordKind.ROAD,
    RecordKind.CAPABILITY,
    RecordKind.USER_STORY,
    RecordKind.PERSONA,
    RecordKind.CHANGE,
    RecordKind.ADR,
    RecordKind.NFR,
)


class GovernanceLinter:
    """Validates governance records under one docs root."""

    def __init__(self, config: GovernanceConfig, snapshot: StatusSnapshot | None = None):
        self.config = config
        self.snapshot = snapshot
        self.layout = DocsLayout(config.docs_root)
        self._context: ValidationContext | None = None

    @property
    def context(self) -> ValidationContext:
        if self._context is None:
            self._context = self.build_context()
        return self._context

    def build_context(self) -> ValidationContext:
        """Collect the ids and statuses that validators cross-reference."""
        road_statuses = {}
        for doc in self.layout.documents(RecordKind.ROAD):
            if doc.front_matter.ok and doc.record_id:
                road_statuses[doc.record_id] = doc.record.get("status")

        persona_statuses = {}
        for doc in self.layout.documents(RecordKind.PERSONA):
            if doc.front_matter.ok and doc.record_id:
                persona_statuses[doc.record_id] = doc.record.get("status")

        return ValidationContext(
            road_statuses=road_statuses,
            capabilities=set(self.config.capabilities) | self.layout.record_ids(RecordKind.CAPABILITY),
            personas=set(self.config.personas) | set(persona_statuses),
            persona_statuses=persona_statuses,
            user_stories=set(self.config.user_stories) | self.layout.record_ids(RecordKind.USER_STORY),
            required_signature_agents=tuple(self.config.required_signature_agents),
        )

    # Single records

    def get_document(self, record_id: str) -> tuple[RecordKind, Document]:
        """
        Locate a record file by id.

        Raises:
            RecordNotFoundError: If no file declares the id
        """
        kind = kind_for_id(record_id)
        doc = self.layout.find(kind, record_id) if kind else None
        if kind is None or doc is None:
            raise RecordNotFoundError(
                record_id, context=ErrorContext(operation="get_document", path=str(self.config.docs_root))
            )
        return kind, doc

    def lint_record(self, record_id: str) -> LintResults:
        """Validate one record of any kind by id (``ROAD-005``, ``ADR-002``, ...)."""
        results = LintResults()
        try:
            kind, doc = self.get_document(record_id)
        except RecordNotFoundError:
            kind = kind_for_id(record_id) or RecordKind.ROAD
            prefix = record_id.split("-")[0].upper()
            results.add_error(None, record_id, kind, f"{prefix} item not found: {record_id}")
            return results
        return self._lint_document(kind, doc)

    def lint_road_item(self, road_id: str) -> LintResults:
        return self.lint_record(road_id)

    # Batch passes

    def lint_kind(self, kind: RecordKind) -> LintResults:
        """Validate every record file of one kind."""
        results = LintResults()
        with Timer(kind.value) as timer:
            for doc in self.layout.documents(kind):
                results.merge(self._lint_document(kind, doc))
        logger.debug(
            "Checked %d %s records",
            results.total,
            kind.value,
            extra={"duration_ms": timer.duration_ms, "record_count": results.total},
        )
        return results

    def lint_all_roads(self) -> LintResults:
        return self.lint_kind(RecordKind.ROAD)

    def lint_adrs(self) -> LintResults:
        return self.lint_kind(RecordKind.ADR)

    def lint_changes(self) -> LintResults:
        return self.lint_kind(RecordKind.CHANGE)

    def lint_nfrs(self) -> LintResults:
        return self.lint_kind(RecordKind.NFR)

    def lint_capabilities(self) -> LintResults:
        return self.lint_kind(RecordKind.CAPABILITY)

    def lint_user_stories(self) -> LintResults:
        return self.lint_kind(RecordKind.USER_STORY)

    def lint_personas(self) -> LintResults:
        return self.lint_kind(RecordKind.PERSONA)

    def check_dependencies(self) -> DependencyReport:
        records = [
            doc.record for doc in self.layout.documents(RecordKind.ROAD) if doc.front_matter.ok
        ]
        return check_dependencies(records)

    def lint_dependencies(self) -> LintResults:
        """Report dangling and circular roadmap references as warnings."""
        results = LintResults()
        report = self.check_dependencies()
        files = {
            doc.record_id: doc.path
            for doc in self.layout.documents(RecordKind.ROAD)
            if doc.record_id
        }
        for road_id in sorted(files):
            for message in report.warnings_for(road_id):
                results.add_warning(files[road_id], road_id, RecordKind.ROAD, message)
        return results

    def feature_files(self) -> list[Path]:
        return find_feature_files(self.config.resolved_project_root, self.config.feature_dirs)

    def lint_features(self, strict: bool | None = None) -> LintResults:
        """Validate BDD tags in every feature file under the project root."""
        if strict is None:
            strict = self.config.strict_bdd
        results = LintResults()
        known_roads = set(self.context.road_statuses)
        for path in self.feature_files():
            with log_context(file=str(path)):
                logger.debug("Validating feature file")
                result = validate_feature(path, self.context.capabilities, known_roads, strict=strict)
            results.add_record(path, None, RecordKind.FEATURE, result)
        return results

    def lint_ci(self) -> LintResults:
        """Every record kind, then the dependency graph and feature tags."""
        results = LintResults()
        for kind in CI_KINDS:
            results.merge(self.lint_kind(kind))
        results.merge(self.lint_dependencies())
        results.merge(self.lint_features())
        return results

    def current_road_statuses(self) -> dict[str, str]:
        """Statuses of every parseable roadmap item, for snapshot updates."""
        return {
            road_id: status
            for road_id, status in self.context.road_statuses.items()
            if isinstance(status, str)
        }

    def _lint_document(self, kind: RecordKind, doc: Document) -> LintResults:
        results = LintResults()
        record_id = doc.record_id or doc.stem

        problem = doc.problem()
        if problem:
            logger.warning("Skipping %s: %s", doc.path, problem)
            results.add_record(doc.path, record_id, kind, ValidationResult(errors=[problem]))
            return results

        with log_context(file=str(doc.path), record_id=record_id):
            logger.debug("Validating %s record", kind.value)
            result = validate_record(kind, doc.record, self.context)
            if kind is RecordKind.ROAD:
                previous = self.snapshot.previous_status(record_id) if self.snapshot else None
                result.extend(check_state(doc.record, previous))

        results.add_record(doc.path, record_id, kind, result)
        return results
