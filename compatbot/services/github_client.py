"""Async GitHub REST client for the operations the review pipeline needs."""

import base64
import logging
from typing import Any

import httpx

from compatbot.config.settings import Settings, settings as default_settings
from compatbot.models.github_types import CommitDetail

logger = logging.getLogger(__name__)

COMMITS_PER_PAGE = 100


class GitHubClient:
    """Thin wrapper over ``httpx.AsyncClient`` for the GitHub REST API.

    Every method raises ``httpx.HTTPError`` on transport failures and
    ``httpx.HTTPStatusError`` on non-2xx responses; callers decide whether
    that is fatal.

    Example:
        async with GitHubClient() as client:
            commits = await client.list_pull_request_commits("owner/repo", 1)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Settings to read the token, API URL and user agent from
            http_client: Pre-built client (tests inject one with a mock transport)
        """
        self.settings = settings or default_settings

        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": self.settings.user_agent,
        }
        if self.settings.github_token:
            headers["Authorization"] = f"Bearer {self.settings.github_token}"

        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=self.settings.http_timeout)
        self._http.headers.update(headers)

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    def _api_url(self, path: str) -> str:
        return f"{self.settings.github_api_url.rstrip('/')}/{path.lstrip('/')}"

    async def _get(
        self, url: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        response = await self._http.get(url, params=params)
        response.raise_for_status()
        return response

    async def get_file_content(self, repo: str, path: str, branch: str) -> str:
        """Get the decoded content of a file on a branch.

        Args:
            repo: Repository full name (owner/repo)
            path: Path to the file relative to the repository root
            branch: Branch or other ref to read from

        Returns:
            File content as text

        Raises:
            httpx.HTTPError: If the file is missing or the request fails
            ValueError: If the path is a directory
        """
        response = await self._get(
            self._api_url(f"repos/{repo}/contents/{path}"), params={"ref": branch}
        )
        data = response.json()

        if isinstance(data, list):
            raise ValueError(f"{path} is a directory, not a file")

        content = base64.b64decode(data.get("content") or "").decode("utf-8")
        logger.debug(f"Retrieved {path} from {repo}@{branch} ({len(content)} bytes)")
        return content

    async def list_pull_request_commits(self, repo: str, pr_number: int) -> list[str]:
        """List the SHAs of a pull request's commits, oldest first.

        Follows ``Link: rel="next"`` pagination.

        Args:
            repo: Repository full name
            pr_number: Pull request number

        Returns:
            Commit SHAs in the order GitHub returns them
        """
        url: str | None = self._api_url(f"repos/{repo}/pulls/{pr_number}/commits")
        params: dict[str, Any] | None = {"per_page": COMMITS_PER_PAGE}
        shas: list[str] = []

        while url:
            response = await self._get(url, params=params)
            shas.extend(commit["sha"] for commit in response.json())
            url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            params = None

        logger.debug(f"Listed {len(shas)} commits for {repo}#{pr_number}")
        return shas

    async def get_commit_detail(self, repo: str, sha: str) -> CommitDetail:
        """Get a commit with its changed files and their patches.

        Args:
            repo: Repository full name
            sha: Commit SHA

        Returns:
            CommitDetail
        """
        response = await self._get(self._api_url(f"repos/{repo}/commits/{sha}"))
        return CommitDetail.from_api(response.json())

    async def create_review_comment(
        self,
        url: str,
        *,
        body: str,
        path: str,
        commit_id: str,
        position: int,
    ) -> dict[str, Any]:
        """Create an inline review comment.

        Args:
            url: The pull request's review comments URL
            body: Comment text
            path: File path relative to the repository root
            commit_id: SHA of the commit the position refers to
            position: Diff position (see ``compatbot.utils.diff_position``)

        Returns:
            The created comment data
        """
        payload = {
            "body": body,
            "path": path,
            "commit_id": commit_id,
            "position": position,
        }
        response = await self._http.post(url, json=payload)
        response.raise_for_status()
        return response.json()

    async def fetch_raw(self, url: str) -> str:
        """Download raw file content.

        Args:
            url: A ``raw_url`` from a commit's file list

        Returns:
            Response body as text
        """
        response = await self._http.get(url, follow_redirects=True)
        response.raise_for_status()
        return response.text
