"""Config resolution: built-in defaults <- project contextor.yaml <- caller overrides."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import ProjectConfig

logger = logging.getLogger(__name__)

PROJECT_CONFIG_NAMES = ("contextor.yaml", "contextor.yml", ".contextor.yaml")

# Sections whose keys are config names (normalized) rather than user paths
_NESTED_SECTIONS = {"check", "threshold", "reporter"}


class ConfigError(ValueError):
    """Raised when a config file cannot be parsed or fails validation."""


def find_project_config(project_root: str | Path) -> Path | None:
    """Return the first project-local config file present in *project_root*."""
    root = Path(project_root)
    for name in PROJECT_CONFIG_NAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_config(
    project_root: str | Path = ".",
    config_path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ProjectConfig:
    """Build the run's config in three stages, later stages winning.

    1. Built-in defaults from ProjectConfig.
    2. The project-local file (*config_path* if given, else the first of
       PROJECT_CONFIG_NAMES found in *project_root*).
    3. *overrides* supplied programmatically (CLI flags, library callers).

    Nested sections (check, threshold, reporter) are deep-merged; lists and
    the mappings table are replaced wholesale.
    """
    merged: dict[str, Any] = ProjectConfig().model_dump()

    path = Path(config_path) if config_path else find_project_config(project_root)
    if config_path and not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    if path is not None:
        raw = _read_yaml(path)
        if raw:
            logger.debug("Merging project config from %s", path)
            merged = _deep_merge(merged, _normalize_keys(_expand_env_vars(raw)))

    if overrides:
        merged = _deep_merge(merged, _normalize_keys(dict(overrides)))

    try:
        return ProjectConfig.model_validate(merged)
    except ValidationError as e:
        source = path if path is not None else "overrides"
        raise ConfigError(f"Invalid config in {source}: {e}") from e


def _read_yaml(path: Path) -> dict[str, Any] | None:
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ConfigError(f"Config in {path} must be a mapping, got {type(raw).__name__}")
    return raw


def _snake(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def _normalize_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert camelCase config keys to field names, leaving mapping paths alone."""
    out: dict[str, Any] = {}
    for key, value in data.items():
        name = _snake(key)
        if name in _NESTED_SECTIONS and isinstance(value, Mapping):
            value = {_snake(k): v for k, v in value.items()}
        out[name] = value
    return out


def _deep_merge(base: dict[str, Any], update: Mapping[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in update.items():
        if key in _NESTED_SECTIONS and isinstance(value, Mapping) and isinstance(result.get(key), dict):
            result[key] = {**result[key], **value}
        else:
            result[key] = value
    return result


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `contextor config init`
DEFAULT_CONFIG_TEMPLATE = """\
# contextor.yaml

# Documentation root, relative to the project root
docsDir: ".ai"

# Directories whose changes trigger a documentation check
sourceDirs:
{source_dirs}

# Source file (or directory) -> docs that must reflect it.
# Doc paths are relative to docsDir unless absolute.
mappings: {{}}
#  src/api/: [api/README.md]
#  src/db/schema.prisma: [database/schema.md]

requiredSections:
  - "**Last Updated**"
  - "**Version**"

check:
  lastUpdated: true
  links: true
  structure: true

# Days
threshold:
  error: 7
  warning: 30

cacheFile: ".ai/docs-check-cache.json"

reporter:
  format: "console"            # console | json
  errorsOnly: false

logLevel: "info"               # debug | info | warn | error
"""


def render_config_template(source_dirs: list[str] | None = None) -> str:
    dirs = source_dirs or ["src"]
    return DEFAULT_CONFIG_TEMPLATE.format(
        source_dirs="\n".join(f"  - {d}" for d in dirs)
    )
