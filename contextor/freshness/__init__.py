"""Freshness tracking: change detection, staleness policy, structural checks."""

from contextor.freshness.cache import CheckState, load_cache, save_cache
from contextor.freshness.checker import (
    CheckResult,
    DocChecker,
    Finding,
    check_docs,
)
from contextor.freshness.parser import last_updated_date, list_documents, mod_time

__all__ = [
    "CheckResult",
    "CheckState",
    "DocChecker",
    "Finding",
    "check_docs",
    "last_updated_date",
    "list_documents",
    "load_cache",
    "mod_time",
    "save_cache",
]
