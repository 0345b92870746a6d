"""Version-control access for freshness checks."""

from contextor.vcs.git import GitAdapter, changed_since, current_revision

__all__ = [
    "GitAdapter",
    "changed_since",
    "current_revision",
]
