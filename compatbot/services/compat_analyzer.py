"""Find browser-compatibility issues in a commit's changed stylesheets."""

import logging
from collections.abc import AsyncIterator, Sequence

import httpx

from compatbot.models.github_types import ChangedFile
from compatbot.models.outputs import Finding
from compatbot.services.feature_detector import FeatureDetector
from compatbot.services.github_client import GitHubClient
from compatbot.utils.filters import StylesheetKind, stylesheet_kind

logger = logging.getLogger(__name__)


class ContentFetchError(Exception):
    """Raised when a changed file's contents cannot be retrieved."""


async def _file_contents(
    file: ChangedFile, kind: StylesheetKind, client: GitHubClient
) -> str:
    if kind == "stylus" and file.contents is not None:
        return file.contents
    if not file.raw_url:
        raise ContentFetchError(f"{file.filename} has no raw URL")
    try:
        return await client.fetch_raw(file.raw_url)
    except httpx.HTTPError as e:
        raise ContentFetchError(f"Fetching {file.filename} failed: {e}") from e


async def analyze(
    file: ChangedFile,
    targets: Sequence[str],
    *,
    client: GitHubClient,
    detector: FeatureDetector,
) -> AsyncIterator[Finding]:
    """Yield the compatibility findings for one changed file.

    Stylus files use their inline contents when present; everything else
    is downloaded from the file's raw URL. Files that are not stylesheets,
    were removed, or have no patch to anchor comments in produce nothing.

    Args:
        file: Changed file from a commit
        targets: Browser targets to check against
        client: GitHub client used for raw-content downloads
        detector: Feature detector to delegate to

    Yields:
        Findings with post-change line numbers

    Raises:
        ContentFetchError: If the file's contents cannot be downloaded
        DetectorError: If the detector fails
    """
    kind = stylesheet_kind(file.filename)
    if kind is None:
        return
    if file.is_removed:
        logger.debug(f"Skipping {file.filename}: removed in this commit")
        return
    if not file.has_patch:
        logger.debug(f"Skipping {file.filename}: no patch to comment on")
        return

    contents = await _file_contents(file, kind, client)
    async for finding in detector.detect(
        contents, targets, filename=file.filename, syntax=kind
    ):
        yield finding
