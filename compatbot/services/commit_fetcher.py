"""Fetch every commit of a pull request with its changed files."""

import logging

from compatbot.models.github_types import CommitDetail
from compatbot.services.github_client import GitHubClient
from compatbot.utils.concurrency import gather_all

logger = logging.getLogger(__name__)


async def fetch_commits(
    client: GitHubClient, repo: str, pr_number: int
) -> list[CommitDetail]:
    """Get the full detail of each commit in a pull request.

    All-or-nothing: if listing the commits or fetching any single commit
    fails, the outstanding detail requests are cancelled, the error
    propagates and no partial result is returned.

    Args:
        client: GitHub client
        repo: Repository full name the pull request belongs to
        pr_number: Pull request number

    Returns:
        CommitDetail list in the order GitHub lists the commits

    Raises:
        httpx.HTTPError: If any request fails
    """
    shas = await client.list_pull_request_commits(repo, pr_number)
    commits = await gather_all(*(client.get_commit_detail(repo, sha) for sha in shas))
    logger.info(f"Fetched {len(commits)} commits for {repo}#{pr_number}")
    return list(commits)
