"""
Status Snapshot
===============

Records the last observed status of every roadmap item so the next run can
check that each item moved along an allowed lifecycle transition.

File format::

    {
      "generatedAt": "2024-05-01T12:00:00+00:00",
      "statuses": {"ROAD-001": "implementing", "ROAD-002": "proposed"}
    }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from .core.exceptions import ErrorContext, SnapshotError, wrap_error
from .core.safe_io import safe_read_json, safe_write_json

logger = logging.getLogger(__name__)


@dataclass
class StatusSnapshot:
    """Previous roadmap statuses keyed by item id."""

    statuses: dict[str, str] = field(default_factory=dict)
    generated_at: str | None = None

    def previous_status(self, road_id: str) -> str | None:
        return self.statuses.get(road_id)

    def to_dict(self) -> dict:
        return {
            "generatedAt": self.generated_at,
            "statuses": dict(sorted(self.statuses.items())),
        }


def load_snapshot(path: Path) -> StatusSnapshot:
    """
    Load a snapshot file; a missing file is an empty snapshot.

    Raises:
        SnapshotError: If the file is not valid JSON or has the wrong shape
    """
    context = ErrorContext(operation="load_snapshot", path=str(path))
    if not path.exists():
        logger.info("No status snapshot at %s; transitions start fresh", path)
        return StatusSnapshot()

    try:
        data = safe_read_json(path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise wrap_error(e, SnapshotError, message=f"Cannot read status snapshot: {e}", context=context) from e

    statuses = data.get("statuses") if isinstance(data, dict) else None
    if not isinstance(statuses, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in statuses.items()
    ):
        raise SnapshotError("Status snapshot must map roadmap ids to status strings", context=context)

    logger.debug("Loaded %d statuses from %s", len(statuses), path)
    return StatusSnapshot(statuses=statuses, generated_at=data.get("generatedAt"))


def save_snapshot(path: Path, statuses: Mapping[str, str]) -> StatusSnapshot:
    """Write the current statuses atomically and return the new snapshot."""
    snapshot = StatusSnapshot(
        statuses=dict(statuses),
        generated_at=datetime.now(timezone.utc).isoformat(),
    )
    try:
        safe_write_json(path, snapshot.to_dict())
    except OSError as e:
        raise wrap_error(
            e,
            SnapshotError,
            message=f"Cannot write status snapshot: {e}",
            context=ErrorContext(operation="save_snapshot", path=str(path)),
        ) from e
    logger.info("Wrote %d statuses to %s", len(snapshot.statuses), path)
    return snapshot
