"""Services for external API and tool interactions."""

from compatbot.services.commit_fetcher import fetch_commits
from compatbot.services.compat_analyzer import ContentFetchError, analyze
from compatbot.services.config_resolver import resolve_config
from compatbot.services.feature_detector import (
    DetectorError,
    DoiuseDetector,
    FeatureDetector,
)
from compatbot.services.github_client import GitHubClient

__all__ = [
    "ContentFetchError",
    "DetectorError",
    "DoiuseDetector",
    "FeatureDetector",
    "GitHubClient",
    "analyze",
    "fetch_commits",
    "resolve_config",
]
