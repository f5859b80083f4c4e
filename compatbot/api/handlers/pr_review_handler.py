"""Pull request review event handler.

Runs the compatibility review for one pull_request webhook event:
fetch commits and browser config concurrently, check every changed
stylesheet of every commit, and post one inline comment per finding.
"""

import asyncio
import logging
from collections.abc import Sequence

from compatbot.config.settings import Settings, settings as default_settings
from compatbot.models.github_types import ChangedFile, CommitDetail, PullRequestEvent
from compatbot.models.outputs import Finding, ReviewOutcome
from compatbot.services.commit_fetcher import fetch_commits
from compatbot.services.compat_analyzer import analyze
from compatbot.services.config_resolver import resolve_config
from compatbot.services.feature_detector import DoiuseDetector, FeatureDetector
from compatbot.services.github_client import GitHubClient
from compatbot.utils.concurrency import gather_all
from compatbot.utils.diff_position import resolve_position
from compatbot.utils.filters import is_stylesheet

logger = logging.getLogger(__name__)


# === MAIN HANDLER ===


async def handle_pr_review(
    event: PullRequestEvent,
    settings: Settings | None = None,
    client: GitHubClient | None = None,
    detector: FeatureDetector | None = None,
) -> ReviewOutcome:
    """
    Review a pull request's stylesheets for browser compatibility.

    === DEPENDENCIES ===
    - GitHub client (commits, config file, raw contents, review comments)
    - Feature detector (doiuse by default)

    === BEHAVIOR ===

    Input:
        event: Repositories, branch, PR number and comments URL from the webhook
        settings: Optional settings (default: module settings)
        client: Optional GitHub client (default: built from settings, closed on exit)
        detector: Optional feature detector (default: DoiuseDetector)

    Output:
        ReviewOutcome with counters (side effects: posts review comments)

    Logic Flow:

    FETCH concurrently
        commits FROM destination repo / PR number
        browser targets FROM origin repo / branch
    IF either fails THEN cancel the other, log and stop, nothing is posted

    FOR EACH commit, FOR EACH stylesheet (at most max_concurrent_files at once):
        analyze file with targets
        FOR EACH finding:
            resolve diff position
            IF not in diff THEN skip
            ELSE post "<title> not supported by: <missing>"

    Edge Cases:
        - File content fetch or detector fails: that file is logged and skipped
        - Comment post fails: logged, no retry, siblings continue
    """
    settings = settings or default_settings
    if detector is None:
        detector = DoiuseDetector(settings)

    logger.info(f"Compatibility test requested from: {event.origin_repo}")

    if client is None:
        async with GitHubClient(settings) as owned_client:
            return await _run_review(event, settings, owned_client, detector)
    return await _run_review(event, settings, client, detector)


# === HELPER FUNCTIONS ===


async def _run_review(
    event: PullRequestEvent,
    settings: Settings,
    client: GitHubClient,
    detector: FeatureDetector,
) -> ReviewOutcome:
    outcome = ReviewOutcome()
    review_key = event.review_key
    logger.info(f"Starting compatibility review for {review_key}")

    try:
        commits, targets = await gather_all(
            fetch_commits(client, event.destination_repo, event.pr_number),
            resolve_config(client, event.origin_repo, event.origin_branch, settings),
        )
    except Exception:
        logger.exception(f"Fetching commits for {review_key} failed, stopping review")
        return outcome

    outcome.commits = len(commits)
    slots = asyncio.Semaphore(settings.max_concurrent_files)

    await asyncio.gather(
        *(
            _review_file(event, commit, file, targets, client, detector, outcome, slots)
            for commit in commits
            for file in commit.files
            if is_stylesheet(file.filename)
        )
    )

    logger.info(
        f"Review completed for {review_key}: "
        f"{outcome.comments_posted} comments posted, "
        f"{outcome.comments_skipped} findings outside the diff, "
        f"{outcome.comments_failed} failed posts, "
        f"{outcome.files_failed} files failed"
    )
    return outcome


async def _review_file(
    event: PullRequestEvent,
    commit: CommitDetail,
    file: ChangedFile,
    targets: Sequence[str],
    client: GitHubClient,
    detector: FeatureDetector,
    outcome: ReviewOutcome,
    slots: asyncio.Semaphore,
) -> None:
    """Analyze one file and post its comments. Never raises."""
    outcome.files_checked += 1
    try:
        async with slots:
            async for finding in analyze(
                file, targets, client=client, detector=detector
            ):
                await _post_finding(event, commit, file, finding, client, outcome)
    except Exception:
        outcome.files_failed += 1
        logger.exception(f"Checking {file.filename} at {commit.sha[:7]} failed")


async def _post_finding(
    event: PullRequestEvent,
    commit: CommitDetail,
    file: ChangedFile,
    finding: Finding,
    client: GitHubClient,
    outcome: ReviewOutcome,
) -> None:
    """Post a single finding as an inline comment, if its line is in the diff."""
    position = resolve_position(file.patch, finding.line)
    if position is None:
        logger.debug(
            f"Skipping comment on {file.filename}:{finding.line} - line not in diff"
        )
        outcome.comments_skipped += 1
        return

    try:
        await client.create_review_comment(
            event.comments_url,
            body=finding.comment_body,
            path=file.filename,
            commit_id=commit.sha,
            position=position,
        )
    except Exception:
        outcome.comments_failed += 1
        logger.exception(
            f"Posting comment on {file.filename}:{finding.line} "
            f"(position {position}) failed"
        )
        return

    logger.debug(f"Posted comment on {file.filename}:{finding.line}")
    outcome.comments_posted += 1
