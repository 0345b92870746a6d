"""Dependency-name extraction from project manifests via a parser registry.

Supporting another manifest type means defining a parser class and
appending an instance to PARSERS.
"""

from __future__ import annotations

import json
import re
from typing import Protocol, runtime_checkable

_NAME_SPLIT = re.compile(r"[>=<!~\[;\s]")
_QUOTED = re.compile(r'"[^"]*"')


@runtime_checkable
class ManifestParser(Protocol):
    """Protocol for manifest file parsers."""

    file_name: str

    def parse(self, content: str) -> list[str]:
        """Extract dependency names from file content."""
        ...


def _requirement_name(spec: str) -> str:
    return _NAME_SPLIT.split(spec.strip(), maxsplit=1)[0].strip().lower()


class PackageJsonParser:
    """dependencies + devDependencies, plus a ``workspaces`` marker."""

    file_name = "package.json"

    def parse(self, content: str) -> list[str]:
        try:
            data = json.loads(content)
        except json.JSONDecodeError:
            return []
        if not isinstance(data, dict):
            return []
        names: list[str] = []
        for section in ("dependencies", "devDependencies"):
            deps = data.get(section)
            if isinstance(deps, dict):
                names.extend(deps.keys())
        if data.get("workspaces"):
            names.append("workspaces")
        return names


class PyprojectTomlParser:
    """Quoted requirement strings inside ``dependencies = [...]`` blocks."""

    file_name = "pyproject.toml"

    def parse(self, content: str) -> list[str]:
        names: list[str] = []
        in_deps = False
        for line in content.splitlines():
            stripped = line.strip()
            if not in_deps and re.match(r"^[\w-]*dependencies\s*=", stripped):
                in_deps = True
                stripped = stripped.split("=", 1)[1]
            if not in_deps:
                continue
            for item in re.findall(r'"([^"]+)"', stripped):
                name = _requirement_name(item)
                if name:
                    names.append(name)
            # extras like "uvicorn[standard]" sit inside quotes
            unquoted = _QUOTED.sub("", stripped).split("#", 1)[0]
            if "]" in unquoted:
                in_deps = False
        return names


class RequirementsTxtParser:
    file_name = "requirements.txt"

    def parse(self, content: str) -> list[str]:
        names: list[str] = []
        for line in content.splitlines():
            line = line.strip()
            if not line or line.startswith(("#", "-")):
                continue
            name = _requirement_name(line)
            if name:
                names.append(name)
        return names


PARSERS: list[ManifestParser] = [
    PackageJsonParser(),
    PyprojectTomlParser(),
    RequirementsTxtParser(),
]
