"""
Docs Layout
===========

Knows where each record kind lives under the docs root and loads files into
``Document`` values. Missing directories yield no files.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

from .core.safe_io import read_text
from .frontmatter import FrontMatter, extract_front_matter
from .models import RecordKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KindLayout:
    """Directory and file-name rules for one record kind."""

    directory: str
    file_pattern: re.Pattern[str]
    id_prefix: str


LAYOUTS: dict[RecordKind, KindLayout] = {
    RecordKind.ROAD: KindLayout("roads", re.compile(r"^ROAD-.*\.md$"), "ROAD-"),
    RecordKind.ADR: KindLayout("adr", re.compile(r"^ADR-.*\.md$", re.IGNORECASE), "ADR-"),
    RecordKind.CHANGE: KindLayout("changes", re.compile(r"^CHANGE-.*\.md$"), "CHANGE-"),
    RecordKind.NFR: KindLayout("nfr", re.compile(r"^NFR-.*\.md$"), "NFR-"),
    RecordKind.CAPABILITY: KindLayout("capabilities", re.compile(r"^CAP-.*\.md$"), "CAP-"),
    RecordKind.PERSONA: KindLayout("personas", re.compile(r"^PER-.*\.md$"), "PER-"),
    RecordKind.USER_STORY: KindLayout("user-stories", re.compile(r"^US-.*\.md$"), "US-"),
}

_SKIPPED_NAMES = {"index.md", "readme.md"}
# TEMPLATE.md, ROAD-TEMPLATE.md, ADR_TEMPLATE.md; case-sensitive
_TEMPLATE_NAME = re.compile(r"^(?:.*[-_])?TEMPLATE\.md\Z")


def kind_for_id(record_id: str) -> RecordKind | None:
    """Map an id such as ``ROAD-005`` or ``NFR-PERF-001`` to its record kind."""
    for kind, layout in LAYOUTS.items():
        if record_id.upper().startswith(layout.id_prefix):
            return kind
    return None


@dataclass
class Document:
    """A Markdown file read from the docs tree."""

    path: Path
    front_matter: FrontMatter
    read_error: str | None = None

    @property
    def record(self) -> dict[str, Any]:
        return self.front_matter.record

    @property
    def record_id(self) -> str | None:
        value = self.record.get("id")
        return str(value) if value is not None else None

    @property
    def stem(self) -> str:
        return self.path.stem

    def problem(self) -> str | None:
        """The per-file parse problem, if the document cannot be validated."""
        if self.read_error:
            return self.read_error
        if not self.front_matter.present:
            return "No front matter found"
        if self.front_matter.error:
            return f"Invalid YAML: {self.front_matter.error}"
        return None


def load_document(path: Path) -> Document:
    """Read and parse one Markdown file; never raises for content problems."""
    try:
        text = read_text(path)
    except UnicodeDecodeError:
        logger.warning("File is not UTF-8 encoded: %s", path)
        return Document(path=path, front_matter=FrontMatter(), read_error="File is not UTF-8 encoded")
    except OSError as e:
        logger.warning("Cannot read %s: %s", path, e)
        return Document(path=path, front_matter=FrontMatter(), read_error=f"Cannot read file: {e}")
    return Document(path=path, front_matter=extract_front_matter(text))


@dataclass
class DocsLayout:
    """File-system view of a docs root."""

    root: Path
    _cache: dict[Path, Document] = field(default_factory=dict, repr=False)

    def directory(self, kind: RecordKind) -> Path:
        return self.root / LAYOUTS[kind].directory

    def files(self, kind: RecordKind) -> list[Path]:
        """All record files of a kind, sorted, skipping templates and index pages."""
        directory = self.directory(kind)
        if not directory.is_dir():
            logger.debug("No %s directory at %s", kind.value, directory)
            return []

        pattern = LAYOUTS[kind].file_pattern
        found = []
        for path in sorted(directory.iterdir()):
            if not path.is_file():
                continue
            name = path.name
            if name.lower() in _SKIPPED_NAMES or _TEMPLATE_NAME.match(name):
                continue
            if pattern.match(name):
                found.append(path)
        return found

    def load(self, path: Path) -> Document:
        """Load a document, caching it for cross-reference lookups within a run."""
        if path not in self._cache:
            self._cache[path] = load_document(path)
        return self._cache[path]

    def documents(self, kind: RecordKind) -> Iterator[Document]:
        for path in self.files(kind):
            yield self.load(path)

    def find(self, kind: RecordKind, record_id: str) -> Document | None:
        """
        Find a record by id.

        A file named ``<id>.md`` or ``<id>-<slug>.md`` is preferred; otherwise
        the front matter ``id`` of every file of the kind is compared.
        """
        candidates = self.files(kind)
        for path in candidates:
            if path.stem == record_id or path.stem.startswith(f"{record_id}-"):
                doc = self.load(path)
                if doc.record_id in (None, record_id):
                    return doc
        for path in candidates:
            doc = self.load(path)
            if doc.record_id == record_id:
                return doc
        return None

    def record_ids(self, kind: RecordKind) -> set[str]:
        """Ids declared in the front matter of every file of a kind."""
        ids = set()
        for doc in self.documents(kind):
            if doc.record_id:
                ids.add(doc.record_id)
        return ids
