"""
Safe I/O Utilities
==================

File helpers used by the linter:
- UTF-8 reads of Markdown and feature files (BOM tolerant)
- Atomic JSON writes for the status snapshot and coverage reports

On POSIX the JSON write is atomic via os.replace(). On Windows os.replace()
is attempted first and falls back to unlink-then-rename, which is not atomic.
"""

from __future__ import annotations

import json
import os
import sys
import tempfile
from pathlib import Path
from typing import Any


def read_text(path: Path | str, encoding: str = "utf-8") -> str:
    """
    Read a text file, stripping a leading byte-order mark.

    Raises:
        FileNotFoundError: If the file does not exist
        UnicodeDecodeError: If the file is not valid UTF-8
    """
    with open(path, "r", encoding=encoding) as f:
        content = f.read()
    if content.startswith("\ufeff"):
        content = content[1:]
    return content


def safe_write_json(
    path: Path | str,
    data: Any,
    indent: int = 2,
    encoding: str = "utf-8",
) -> None:
    """
    Write JSON to file atomically (POSIX) or best-effort (Windows).

    Uses write-to-temp-then-rename so a crash never leaves a half-written
    snapshot behind.

    Raises:
        OSError: If write fails
        TypeError: If data is not JSON serializable
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )

    try:
        with os.fdopen(fd, "w", encoding=encoding) as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())

        _atomic_replace(tmp_path, path)

    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def safe_read_json(
    path: Path | str,
    encoding: str = "utf-8",
    default: Any = None,
) -> Any:
    """
    Read JSON from file with explicit encoding.

    Args:
        path: File path to read
        encoding: Character encoding (default: utf-8)
        default: Value returned when the file does not exist
                 (None = raise FileNotFoundError)

    Raises:
        FileNotFoundError: If file doesn't exist and no default provided
        json.JSONDecodeError: If JSON is invalid
    """
    path = Path(path)

    if not path.exists():
        if default is not None:
            return default
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, "r", encoding=encoding) as f:
        return json.load(f)


def _atomic_replace(src: str | Path, dst: str | Path) -> None:
    """Replace dst with src (atomic on POSIX)."""
    src = str(src)
    dst = str(dst)

    if sys.platform == "win32":
        try:
            os.replace(src, dst)
        except OSError:
            # Not atomic; best effort when dst is locked
            try:
                os.unlink(dst)
            except OSError:
                pass
            os.rename(src, dst)
    else:
        os.replace(src, dst)
