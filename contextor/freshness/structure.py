"""Structural checks on a single document: required markers and internal links.

Both checks are plain text scans; no markdown parsing is attempted.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path
from typing import NamedTuple

LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_LINK_TITLE_RE = re.compile(r'\s+"[^"]*"$')

# Link targets that are never resolved against the filesystem
EXTERNAL_PREFIXES = ("http", "#", "mailto:")


class Link(NamedTuple):
    text: str
    target: str


def missing_sections(content: str, sections: Iterable[str]) -> list[str]:
    """Required literal markers absent from *content*, in configured order."""
    return [s for s in sections if s not in content]


def find_links(content: str) -> list[Link]:
    return [Link(m.group(1), m.group(2)) for m in LINK_RE.finditer(content)]


def is_internal(target: str) -> bool:
    return not target.startswith(EXTERNAL_PREFIXES)


def resolve_link(target: str, doc_file: Path) -> Path:
    """Resolve *target* relative to the directory holding *doc_file*.

    A trailing ``#fragment`` and an optional ``"title"`` are dropped, and a
    leading slash is treated as relative to the document, not the filesystem.
    """
    path_part = _LINK_TITLE_RE.sub("", target.strip())
    path_part = path_part.split("#", 1)[0].lstrip("/")
    return (doc_file.parent / path_part).resolve()


def broken_links(content: str, doc_file: Path) -> list[Link]:
    """Internal links in *content* whose target does not exist on disk."""
    broken: list[Link] = []
    for link in find_links(content):
        if not is_internal(link.target):
            continue
        if not resolve_link(link.target, doc_file).exists():
            broken.append(link)
    return broken
