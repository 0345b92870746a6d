"""Shared test fixtures for Contextor."""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from contextor.config.models import ProjectConfig
from contextor.vcs.git import GitAdapter

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def set_mtime(path: Path, when: datetime) -> None:
    ts = when.timestamp()
    os.utime(path, (ts, ts))


def days_ago(n: float) -> datetime:
    return NOW - timedelta(days=n)


def doc_body(last_updated: str | None = "2025-06-01", version: bool = True, extra: str = "") -> str:
    lines = ["# Module docs", ""]
    if last_updated is not None:
        lines.append(f"**Last Updated**: {last_updated}")
    if version:
        lines.append("**Version**: 1.0")
    if extra:
        lines.extend(["", extra])
    return "\n".join(lines) + "\n"


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def fake_vcs():
    """A GitAdapter double: no repository unless a test says otherwise."""
    vcs = MagicMock(spec=GitAdapter)
    vcs.current_revision.return_value = None
    vcs.changed_since.return_value = False
    return vcs


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project with src/ and an empty .ai/ docs directory."""
    (tmp_path / "src").mkdir()
    (tmp_path / ".ai").mkdir()
    return tmp_path


@pytest.fixture
def sample_config():
    return ProjectConfig()
