"""
Shared CLI plumbing: common arguments, logging setup, error handling.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from ..config import GovernanceConfig, load_config
from ..core.exceptions import GovernanceError
from ..core.logging import configure_logging, log_exception, resolve_log_level
from ..models import LintResults
from ..reporter import render_human, render_json

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_USAGE = 2
EXIT_INTERNAL = 3


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        choices=["human", "json"],
        default="human",
        help="Report format (default: human)",
    )
    parser.add_argument(
        "--docs-root",
        type=Path,
        help="Docs directory (default: $GOVERNANCE_DOCS_ROOT or the current directory)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging on stderr",
    )
    parser.add_argument(
        "--log-format",
        choices=["console", "json"],
        help="Log format on stderr (default: console)",
    )


def prepare(args: argparse.Namespace) -> GovernanceConfig:
    """Load configuration and configure logging from it."""
    configure_logging(resolve_log_level(None, args.verbose))
    config = load_config(docs_root=args.docs_root)
    log_format = args.log_format or config.log_format
    configure_logging(
        resolve_log_level(config.log_level, args.verbose),
        structured=log_format == "json",
    )
    logger.debug("Docs root: %s", config.docs_root)
    return config


def emit(results: LintResults, output_format: str, title: str = "🔍 Governance Linter") -> None:
    if output_format == "json":
        print(render_json(results))
    else:
        print(render_human(results, title=title))


def run_guarded(command: Callable[[], int]) -> int:
    """
    Run a command body, turning tool failures into exit code 3.

    Findings in documents never raise; anything that does is a failure of
    the linter itself (bad config, corrupt snapshot, missing docs root).
    """
    try:
        return command()
    except GovernanceError as e:
        log_exception(logger, "Linter failed", e, level=logging.DEBUG, component="cli")
        print(f"❌ Linter error: {e}", file=sys.stderr)
        return EXIT_INTERNAL
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
