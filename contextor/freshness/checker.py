"""Documentation freshness engine: gate, mapping sweep, structural sweep, cache update."""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Callable, Sequence
from datetime import datetime, time, timezone
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from contextor.config.models import ProjectConfig
from contextor.freshness.cache import CheckState, load_cache, save_cache
from contextor.freshness.parser import (
    last_updated_date,
    list_documents,
    mod_time,
    read_text,
    resolve_path,
)
from contextor.freshness.structure import broken_links, missing_sections
from contextor.vcs.git import GitAdapter

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 86400

FindingKind = Literal[
    "missing_doc",
    "missing_date",
    "stale",
    "recent_change",
    "missing_section",
    "broken_link",
]


class Finding(BaseModel):
    """A single warning or error produced during a run."""

    severity: Literal["warning", "error"]
    kind: FindingKind
    message: str
    doc_path: str | None = None
    source_path: str | None = None
    days_since_doc_update: int | None = None
    days_since_source_change: int | None = None


class CheckResult(BaseModel):
    """Outcome of one DocChecker.run()."""

    errors: int = 0
    warnings: int = 0
    needs_update: bool = False
    skipped: bool = False
    findings: list[Finding] = Field(default_factory=list)

    @property
    def error_findings(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == "error"]

    @property
    def warning_findings(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == "warning"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _days_between(then: datetime, now: datetime) -> int:
    return math.floor((now - then).total_seconds() / _SECONDS_PER_DAY)


class DocChecker:
    """Checks a project's documentation against its source tree.

    One instance performs one run. The check-state cache is read when the
    checker is built and written once, at the end of a run that was not
    skipped by the gate.
    """

    def __init__(
        self,
        project_root: str | Path = ".",
        config: ProjectConfig | None = None,
        *,
        force: bool = False,
        quiet: bool = False,
        vcs: GitAdapter | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.project_root = Path(project_root).resolve()
        self.config = config or ProjectConfig()
        self.force = force
        self.quiet = quiet
        self.vcs = vcs or GitAdapter()
        self._clock = clock or _utcnow
        self._date_re = self.config.compiled_date_pattern
        self._now: datetime | None = None
        self._revision: str | None = None
        self._revision_known = False

        self.errors: list[Finding] = []
        self.warnings: list[Finding] = []
        self.previous_state = load_cache(self.project_root, self.config.cache_file)
        self.cache = self.previous_state

    @property
    def docs_dir(self) -> Path:
        return self.project_root / self.config.docs_dir

    @property
    def now(self) -> datetime:
        return self._now if self._now is not None else self._clock()

    def current_revision(self) -> str | None:
        """HEAD revision, queried once per checker."""
        if not self._revision_known:
            self._revision = self.vcs.current_revision(self.project_root)
            self._revision_known = True
        return self._revision

    def _log(self, msg: str, *args: object) -> None:
        logger.log(logging.DEBUG if self.quiet else logging.INFO, msg, *args)

    # ------------------------------------------------------------------
    # Gate
    # ------------------------------------------------------------------

    def should_check(self) -> tuple[bool, str]:
        """Decide whether this run needs to do any work, with the reason."""
        if self.force:
            return True, "forced"

        revision = self.current_revision()
        if revision is None:
            return True, "no version control revision available"

        if revision != self.cache.last_git_hash:
            return True, "revision changed since last check"

        if self.cache.last_check is not None:
            if self.vcs.changed_since(self.project_root, self.config.source_dirs, self.cache.last_check):
                return True, "source files changed since last check"
            return False, "no code changes since last check"

        return True, "no previous check recorded"

    # ------------------------------------------------------------------
    # Mapping sweep
    # ------------------------------------------------------------------

    def check_freshness(self) -> None:
        """Evaluate every configured source -> docs mapping, in order."""
        for src_path, doc_paths in self.config.mappings.items():
            src_mtime = mod_time(self.project_root, src_path)
            if src_mtime is not None:
                self.check_doc_for_source(src_path, src_mtime, doc_paths)
                continue

            if not self._looks_like_directory(src_path):
                continue
            dir_path = resolve_path(self.project_root, src_path)
            if not dir_path.is_dir():
                continue

            try:
                children = sorted(dir_path.iterdir())
            except OSError as e:
                logger.debug("Cannot list %s: %s", dir_path, e)
                continue
            for child in children:
                if child.suffix.lower() not in self.config.source_extensions:
                    continue
                child_mtime = mod_time(self.project_root, child)
                if child_mtime is None:
                    continue
                child_rel = f"{src_path.rstrip('/')}/{child.name}"
                self.check_doc_for_source(child_rel, child_mtime, doc_paths)

    def _looks_like_directory(self, src_path: str) -> bool:
        has_sep = "/" in src_path or os.sep in src_path
        return has_sep and Path(src_path).suffix.lower() not in self.config.source_extensions

    def _resolve_doc(self, doc_path: str) -> Path:
        p = Path(doc_path)
        return p if p.is_absolute() else self.docs_dir / p

    def check_doc_for_source(
        self,
        src_path: str,
        src_mtime: datetime,
        doc_paths: Sequence[str],
    ) -> None:
        """Apply the staleness policy to each doc mapped to one source file."""
        for doc_path in doc_paths:
            try:
                self._check_single_doc(src_path, src_mtime, doc_path)
            except (OSError, ValueError) as e:
                logger.debug("Skipping %s for %s: %s", doc_path, src_path, e)

    def _check_single_doc(self, src_path: str, src_mtime: datetime, doc_path: str) -> None:
        full_doc = self._resolve_doc(doc_path)
        doc_mtime = mod_time(self.project_root, full_doc)
        if doc_mtime is None:
            self._warn("missing_doc", f"Documentation file missing: {doc_path}", doc_path=doc_path, source_path=src_path)
            return

        last_updated = last_updated_date(self.project_root, full_doc, self._date_re)
        if last_updated is None and self.config.check.last_updated:
            self._warn("missing_date", f'Missing "Last Updated" date in: {doc_path}', doc_path=doc_path, source_path=src_path)
            return

        if last_updated is None or src_mtime <= doc_mtime:
            return

        now = self.now
        updated_at = datetime.combine(last_updated, time.min, tzinfo=timezone.utc)
        days_doc = _days_between(updated_at, now)
        days_src = _days_between(src_mtime, now)
        threshold = self.config.threshold

        if days_doc > threshold.error and days_src < threshold.warning:
            self.errors.append(Finding(
                severity="error",
                kind="stale",
                message=(
                    f"{doc_path} may be outdated (source {src_path} modified {days_src} days ago, "
                    f"doc updated {days_doc} days ago)"
                ),
                doc_path=doc_path,
                source_path=src_path,
                days_since_doc_update=days_doc,
                days_since_source_change=days_src,
            ))
        elif src_mtime > updated_at and days_src < threshold.error:
            self._warn(
                "recent_change",
                f"{doc_path} may need update (source {src_path} modified after last doc update)",
                doc_path=doc_path,
                source_path=src_path,
                days_since_doc_update=days_doc,
                days_since_source_change=days_src,
            )

    # ------------------------------------------------------------------
    # Structural sweep
    # ------------------------------------------------------------------

    def check_structure(self) -> None:
        """Required sections and internal links across every doc under docs_dir."""
        for doc_file in list_documents(self.docs_dir):
            try:
                self._check_doc_structure(doc_file)
            except (OSError, ValueError) as e:
                logger.debug("Skipping structure check for %s: %s", doc_file, e)

    def _check_doc_structure(self, doc_file: Path) -> None:
        content = read_text(doc_file)
        if content is None:
            return
        rel = self._relative(doc_file)

        for section in missing_sections(content, self.config.required_sections):
            self._warn("missing_section", f'Missing "{section}" in: {rel}', doc_path=rel)

        if self.config.check.links:
            for link in broken_links(content, doc_file):
                self._warn("broken_link", f"Broken link in {rel}: {link.text} -> {link.target}", doc_path=rel)

    def _relative(self, path: Path) -> str:
        try:
            return str(path.relative_to(self.project_root))
        except ValueError:
            return str(path)

    def _warn(self, kind: FindingKind, message: str, **fields: object) -> None:
        self.warnings.append(Finding(severity="warning", kind=kind, message=message, **fields))

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self) -> CheckResult:
        """Run all checks and persist the new check state."""
        self._now = self._clock()
        self.errors = []
        self.warnings = []

        proceed, reason = self.should_check()
        if not proceed:
            self._log("Documentation check skipped: %s", reason)
            return CheckResult(skipped=True)

        self._log("Checking documentation freshness (%s)", reason)
        self.check_freshness()
        if self.config.check.structure:
            self.check_structure()

        state = CheckState(
            last_check=self._now,
            last_git_hash=self.current_revision(),
            last_warnings=len(self.warnings),
            last_errors=len(self.errors),
        )
        save_cache(self.project_root, self.config.cache_file, state)
        self.cache = state

        logger.debug("Check finished: %d error(s), %d warning(s)", len(self.errors), len(self.warnings))
        return CheckResult(
            errors=len(self.errors),
            warnings=len(self.warnings),
            needs_update=bool(self.errors),
            findings=[*self.errors, *self.warnings],
        )


def check_docs(
    project_root: str | Path = ".",
    config: ProjectConfig | None = None,
    *,
    force: bool = False,
    quiet: bool = False,
) -> CheckResult:
    """Convenience wrapper around DocChecker(...).run()."""
    return DocChecker(project_root, config, force=force, quiet=quiet).run()
