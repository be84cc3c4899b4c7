"""
Front Matter Extraction
=======================

Splits a Markdown document into its YAML front matter and body.

The block must open the document with a ``---`` line and close with another
``---`` line. Parsing is done with PyYAML's safe loader; malformed YAML is
reported through ``FrontMatter.error`` instead of raising so one broken file
never stops a batch.

Dates are kept as the literal strings written by the author so that
``YYYY-MM-DD`` checks see exactly what is in the file.
"""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass, field
from typing import Any

import yaml

_BLOCK_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class FrontMatterLoader(yaml.SafeLoader):
    """Safe loader that leaves implicit timestamps as plain strings."""


FrontMatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass
class FrontMatter:
    """Result of extracting front matter from a document."""

    record: dict[str, Any] = field(default_factory=dict)
    body: str = ""
    error: str | None = None
    present: bool = False

    @property
    def ok(self) -> bool:
        return self.present and self.error is None


def split_front_matter(text: str) -> tuple[str | None, str]:
    """
    Return the raw YAML block and the remaining body.

    The block is None when the document does not start with front matter.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    match = _BLOCK_PATTERN.match(text)
    if not match:
        return None, text
    return match.group(1), text[match.end():]


def extract_front_matter(text: str) -> FrontMatter:
    """
    Parse the front matter of a Markdown document.

    Args:
        text: Full document text

    Returns:
        FrontMatter with the parsed record; ``present`` is False when the
        document has no block, ``error`` is set when the YAML is invalid.
    """
    block, body = split_front_matter(text)
    if block is None:
        return FrontMatter(record={}, body=body, present=False)

    try:
        data = yaml.load(block, Loader=FrontMatterLoader)
    except yaml.YAMLError as e:
        return FrontMatter(record={}, body=body, error=_yaml_error_message(e), present=True)
    except ValueError as e:
        # explicit !!timestamp / !!int tags with bad values
        return FrontMatter(record={}, body=body, error=str(e), present=True)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        return FrontMatter(
            record={},
            body=body,
            error=f"front matter must be a mapping, got {type(data).__name__}",
            present=True,
        )

    return FrontMatter(record=_normalize(data), body=body, present=True)


def _yaml_error_message(error: yaml.YAMLError) -> str:
    mark = getattr(error, "problem_mark", None)
    problem = getattr(error, "problem", None)
    if mark is not None and problem:
        # +2: the opening '---' line plus 1-based numbering
        return f"{problem} (line {mark.line + 2}, column {mark.column + 1})"
    return str(error).replace("\n", " ")


def _normalize(value: Any) -> Any:
    """Stringify mapping keys and any dates produced by explicit tags."""
    if isinstance(value, dict):
        return {str(k): _normalize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalize(v) for v in value]
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return value
