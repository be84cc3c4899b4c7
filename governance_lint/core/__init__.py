"""
Core Module
===========

Shared infrastructure for the governance linter:
- Logging: console/JSON logging with per-file context
- Exceptions: typed hierarchy for tool failures
- Safe I/O: UTF-8 reads and atomic JSON writes
"""

__all__ = [
    # Logging
    "configure_logging",
    "log_context",
    "log_exception",
    "Timer",
    # Exceptions
    "GovernanceError",
    "ConfigurationError",
    "InvalidConfigError",
    "DocsRootNotFoundError",
    "RecordNotFoundError",
    "SnapshotError",
    # Safe I/O
    "read_text",
    "safe_read_json",
    "safe_write_json",
]


def __getattr__(name):
    """Lazy imports keep `import governance_lint.core` cheap."""
    if name in ("configure_logging", "log_context", "log_exception", "Timer"):
        from . import logging as _logging

        return getattr(_logging, name)

    if name in (
        "GovernanceError",
        "ConfigurationError",
        "InvalidConfigError",
        "DocsRootNotFoundError",
        "RecordNotFoundError",
        "SnapshotError",
    ):
        from . import exceptions

        return getattr(exceptions, name)

    if name in ("read_text", "safe_read_json", "safe_write_json"):
        from . import safe_io

        return getattr(safe_io, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
