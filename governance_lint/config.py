"""
Linter Configuration
====================

Settings are resolved in this order (later wins):
1. Built-in defaults
2. ``governance.yaml`` at the docs root
3. Environment variables (a ``.env`` file in the working directory is loaded first)
4. Explicit arguments from the command line

Recognized ``governance.yaml`` keys::

    capabilities: [CAP-001, CAP-002]
    personas: [PER-001]
    user_stories: [US-001]
    required_signature_agents: ["@arch-inspector", "@code-writer"]
    feature_dirs: [stack-tests/features]
    project_root: ..
    snapshot: .governance-status.json
    strict_bdd: false
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .constants import (
    CONFIG_FILE_NAME,
    DEFAULT_CAPABILITY_IDS,
    DEFAULT_FEATURE_DIRS,
    DEFAULT_PERSONA_IDS,
    DEFAULT_SIGNATURE_AGENTS,
    DEFAULT_USER_STORY_IDS,
    SNAPSHOT_FILE_NAME,
)
from .core.exceptions import DocsRootNotFoundError, ErrorContext, InvalidConfigError, wrap_error

logger = logging.getLogger(__name__)

ENV_DOCS_ROOT = "GOVERNANCE_DOCS_ROOT"
ENV_PROJECT_ROOT = "GOVERNANCE_PROJECT_ROOT"
ENV_STRICT_BDD = "GOVERNANCE_STRICT_BDD"
ENV_LOG_LEVEL = "GOVERNANCE_LOG_LEVEL"
ENV_LOG_FORMAT = "GOVERNANCE_LOG_FORMAT"

_LIST_KEYS = ("capabilities", "personas", "user_stories", "required_signature_agents", "feature_dirs")
_KNOWN_KEYS = set(_LIST_KEYS) | {"project_root", "snapshot", "strict_bdd"}


@dataclass
class GovernanceConfig:
    """Resolved configuration for one linter run."""

    docs_root: Path
    project_root: Path | None = None
    capabilities: list[str] = field(default_factory=lambda: list(DEFAULT_CAPABILITY_IDS))
    personas: list[str] = field(default_factory=lambda: list(DEFAULT_PERSONA_IDS))
    user_stories: list[str] = field(default_factory=lambda: list(DEFAULT_USER_STORY_IDS))
    required_signature_agents: list[str] = field(
        default_factory=lambda: list(DEFAULT_SIGNATURE_AGENTS)
    )
    feature_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_FEATURE_DIRS))
    snapshot_path: Path | None = None
    strict_bdd: bool = False
    log_level: str = "warning"
    log_format: str = "console"

    @property
    def resolved_project_root(self) -> Path:
        """Root that feature directories are relative to (docs root's parent by default)."""
        if self.project_root is not None:
            return self.project_root
        return self.docs_root.parent

    @property
    def default_snapshot_path(self) -> Path:
        return self.snapshot_path or self.docs_root / SNAPSHOT_FILE_NAME

    def apply_file(self, data: dict[str, Any], source: Path) -> None:
        """Merge values read from a governance.yaml file."""
        unknown = set(data) - _KNOWN_KEYS
        if unknown:
            logger.warning("Ignoring unknown config keys in %s: %s", source, ", ".join(sorted(unknown)))

        for key in _LIST_KEYS:
            if key in data:
                setattr(self, key, _string_list(data[key], key, source))

        if "project_root" in data:
            self.project_root = (self.docs_root / _string(data["project_root"], "project_root", source)).resolve()
        if "snapshot" in data:
            self.snapshot_path = self.docs_root / _string(data["snapshot"], "snapshot", source)
        if "strict_bdd" in data:
            if not isinstance(data["strict_bdd"], bool):
                raise InvalidConfigError(
                    "strict_bdd must be true or false",
                    context=ErrorContext(operation="load_config", path=str(source)),
                )
            self.strict_bdd = data["strict_bdd"]

    def apply_env(self, environ: Mapping[str, str]) -> None:
        """Merge values from GOVERNANCE_* environment variables."""
        if environ.get(ENV_PROJECT_ROOT):
            self.project_root = Path(environ[ENV_PROJECT_ROOT]).resolve()
        if environ.get(ENV_STRICT_BDD):
            self.strict_bdd = environ[ENV_STRICT_BDD].strip().lower() in ("1", "true", "yes", "on")
        if environ.get(ENV_LOG_LEVEL):
            self.log_level = environ[ENV_LOG_LEVEL].strip().lower()
        if environ.get(ENV_LOG_FORMAT):
            self.log_format = environ[ENV_LOG_FORMAT].strip().lower()


def load_config(
    docs_root: Path | str | None = None,
    env_file: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> GovernanceConfig:
    """
    Build the configuration for a run.

    Args:
        docs_root: Explicit docs root (``--docs-root``); must exist when given
        env_file: .env file to load (default: ./.env when present)
        environ: Environment mapping (default: os.environ)

    Raises:
        DocsRootNotFoundError: If an explicit docs root does not exist
        InvalidConfigError: If governance.yaml is malformed
    """
    env_path = env_file or Path.cwd() / ".env"
    if env_path.is_file():
        load_dotenv(env_path, override=False)
    if environ is None:
        environ = os.environ

    if docs_root is not None:
        root = Path(docs_root)
        if not root.is_dir():
            raise DocsRootNotFoundError(
                f"Docs root does not exist: {root}",
                context=ErrorContext(operation="load_config", path=str(root)),
            )
    elif environ.get(ENV_DOCS_ROOT):
        root = Path(environ[ENV_DOCS_ROOT])
    else:
        root = Path.cwd()

    config = GovernanceConfig(docs_root=root.resolve())

    config_file = config.docs_root / CONFIG_FILE_NAME
    if config_file.is_file():
        config.apply_file(_read_config_file(config_file), config_file)
        logger.debug("Loaded configuration from %s", config_file)

    config.apply_env(environ)
    return config


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise wrap_error(
            e,
            InvalidConfigError,
            message=f"Cannot read {path.name}: {e}",
            context=ErrorContext(operation="load_config", path=str(path)),
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigError(
            f"{path.name} must contain a mapping",
            context=ErrorContext(operation="load_config", path=str(path)),
        )
    return data


def _string_list(value: Any, key: str, source: Path) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise InvalidConfigError(
            f"{key} must be a list of strings",
            context=ErrorContext(operation="load_config", path=str(source)),
        )
    return list(value)


def _string(value: Any, key: str, source: Path) -> str:
    if not isinstance(value, str):
        raise InvalidConfigError(
            f"{key} must be a string",
            context=ErrorContext(operation="load_config", path=str(source)),
        )
    return value
