"""Filesystem readers: modification times, "Last Updated" dates, doc discovery.

Each accessor returns None (or an empty list) when the target is absent or
unreadable, so callers branch on the value instead of catching exceptions.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timezone
from pathlib import Path

from contextor.config.models import DEFAULT_DATE_PATTERN

logger = logging.getLogger(__name__)

DOC_SUFFIXES = {".md", ".markdown", ".mdx"}

_DEFAULT_DATE_RE = re.compile(DEFAULT_DATE_PATTERN)


def resolve_path(root: str | Path, path: str | Path) -> Path:
    """Absolute paths pass through; relative ones are joined to *root*."""
    p = Path(path)
    return p if p.is_absolute() else Path(root) / p


def mod_time(root: str | Path, path: str | Path) -> datetime | None:
    """UTC modification time of a regular file, or None."""
    full = resolve_path(root, path)
    try:
        st = full.stat()
    except (OSError, ValueError):
        return None
    if not full.is_file():
        return None
    return datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)


def read_text(path: Path) -> str | None:
    """Decode as UTF-8, replacing invalid bytes so markers and dates still match."""
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("Cannot read %s: %s", path, e)
        return None


def parse_last_updated(content: str, pattern: str | re.Pattern[str] | None = None) -> date | None:
    """Apply *pattern* to *content* and parse the first group as an ISO date."""
    if pattern is None:
        regex = _DEFAULT_DATE_RE
    elif isinstance(pattern, re.Pattern):
        regex = pattern
    else:
        regex = re.compile(pattern)

    match = regex.search(content)
    if not match:
        return None
    try:
        return date.fromisoformat(match.group(1).strip())
    except (ValueError, IndexError, AttributeError):
        return None


def last_updated_date(
    root: str | Path,
    path: str | Path,
    pattern: str | re.Pattern[str] | None = None,
) -> date | None:
    """Extract the "Last Updated" date from a document, or None."""
    content = read_text(resolve_path(root, path))
    if content is None:
        return None
    return parse_last_updated(content, pattern)


def list_documents(root: str | Path) -> list[Path]:
    """All markdown files under *root*, recursively, in sorted order."""
    base = Path(root)
    if not base.is_dir():
        return []
    return sorted(
        p for p in base.rglob("*")
        if p.suffix.lower() in DOC_SUFFIXES and p.is_file()
    )
