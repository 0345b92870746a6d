"""Contextor - keeps a project's documentation in sync with its source code."""

from contextor.analyzer import ProjectAnalysis, ProjectAnalyzer
from contextor.config import ConfigError, ProjectConfig, load_config
from contextor.freshness import CheckResult, CheckState, DocChecker, Finding, check_docs
from contextor.vcs import GitAdapter

__version__ = "0.1.0"

__all__ = [
    "CheckResult",
    "CheckState",
    "ConfigError",
    "DocChecker",
    "Finding",
    "GitAdapter",
    "ProjectAnalysis",
    "ProjectAnalyzer",
    "ProjectConfig",
    "check_docs",
    "load_config",
]
