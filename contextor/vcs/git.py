"""Git working-copy queries: current revision and "touched since" checks."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_DIRS = ("src",)


class GitAdapter:
    """Shells out to the ``git`` binary against a working copy.

    Every query is best-effort: a missing ``.git`` directory, a missing
    binary, a non-zero exit or a timeout all degrade to ``None``/``False``
    instead of raising.
    """

    def __init__(self, timeout: float = 10.0, binary: str = "git") -> None:
        self.timeout = timeout
        self.binary = binary

    def is_repository(self, root: str | Path) -> bool:
        return (Path(root) / ".git").exists()

    def current_revision(self, root: str | Path) -> str | None:
        """Return the HEAD commit hash, or None when it cannot be determined."""
        if not self.is_repository(root):
            return None
        out = self._run(root, ["rev-parse", "HEAD"])
        if out is None:
            return None
        return out.strip() or None

    def changed_since(
        self,
        root: str | Path,
        paths: Sequence[str],
        since: datetime | None,
    ) -> bool:
        """True if a commit touching *paths* exists since *since*.

        With ``since=None`` only the most recent commit for *paths* is
        considered. Tooling failures report False so an unknown state never
        forces a check by itself.
        """
        if not self.is_repository(root):
            return False
        dirs = list(paths) if paths else list(DEFAULT_SOURCE_DIRS)
        if since is not None:
            args = ["log", f"--since={since.isoformat()}", "--name-only", "--pretty=format:", "--", *dirs]
        else:
            args = ["log", "-1", "--name-only", "--pretty=format:", "--", *dirs]
        out = self._run(root, args)
        if out is None:
            return False
        return bool(out.strip())

    def _run(self, root: str | Path, args: list[str]) -> str | None:
        try:
            result = subprocess.run(
                [self.binary, *args],
                cwd=str(root),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            logger.debug("%s not found on PATH", self.binary)
            return None
        except subprocess.TimeoutExpired:
            logger.debug("git %s timed out after %.1fs", args[0], self.timeout)
            return None
        except OSError as e:
            logger.debug("git %s failed: %s", args[0], e)
            return None

        if result.returncode != 0:
            logger.debug("git %s exited %d: %s", args[0], result.returncode, result.stderr[:200])
            return None
        return result.stdout


_default_adapter = GitAdapter()


def current_revision(root: str | Path) -> str | None:
    """Convenience wrapper around GitAdapter().current_revision()."""
    return _default_adapter.current_revision(root)


def changed_since(root: str | Path, paths: Sequence[str], since: datetime | None) -> bool:
    """Convenience wrapper around GitAdapter().changed_since()."""
    return _default_adapter.changed_since(root, paths, since)
