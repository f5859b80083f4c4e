"""Data models for compatbot."""

from .github_types import ChangedFile, CommitDetail, PullRequestEvent
from .outputs import Finding, ReviewOutcome

__all__ = [
    "ChangedFile",
    "CommitDetail",
    "PullRequestEvent",
    "Finding",
    "ReviewOutcome",
]
