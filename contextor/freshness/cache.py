"""Persisted check state so repeated runs can skip unchanged projects."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

FALLBACK_CACHE_FILE = ".docs-check-cache.json"


class CheckState(BaseModel):
    """What the previous completed run observed."""

    model_config = ConfigDict(populate_by_name=True)

    last_check: datetime | None = Field(default=None, alias="lastCheck")
    last_git_hash: str | None = Field(default=None, alias="lastGitHash")
    last_warnings: int = Field(default=0, alias="lastWarnings")
    last_errors: int = Field(default=0, alias="lastErrors")

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json", by_alias=True), indent=2)


def cache_path(root: str | Path, cache_file: str | None = None) -> Path:
    return Path(root) / (cache_file or FALLBACK_CACHE_FILE)


def load_cache(root: str | Path, cache_file: str | None = None) -> CheckState:
    """Read the cache, falling back to an empty state on any problem."""
    path = cache_path(root, cache_file)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return CheckState()
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.debug("Ignoring unreadable cache %s: %s", path, e)
        return CheckState()

    if not isinstance(data, dict):
        logger.debug("Ignoring cache %s: expected object, got %s", path, type(data).__name__)
        return CheckState()
    try:
        return CheckState.model_validate(data)
    except ValidationError as e:
        logger.debug("Ignoring malformed cache %s: %s", path, e)
        return CheckState()


def save_cache(root: str | Path, cache_file: str | None, state: CheckState) -> bool:
    """Write *state* via temp file + rename. Returns False if the write failed."""
    path = cache_path(root, cache_file)
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(state.to_json())
        os.replace(tmp_name, path)
        tmp_name = None
        return True
    except OSError as e:
        logger.warning("Could not write check cache %s: %s", path, e)
        return False
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
