"""GitHub-specific type definitions."""

from typing import Any

from pydantic import BaseModel, Field


class ChangedFile(BaseModel):
    """A file touched by a single commit.

    Built from the ``files`` entries of GitHub's "get a commit" response.
    """

    filename: str
    patch: str | None = None
    raw_url: str | None = None
    status: str = "modified"
    contents: str | None = None
    """Post-change file contents, when the caller already has them."""

    @property
    def has_patch(self) -> bool:
        """Check if GitHub returned a diff for this file.

        Returns:
            False for binary files and diffs too large to inline
        """
        return bool(self.patch)

    @property
    def is_removed(self) -> bool:
        """Check if the commit deleted this file."""
        return self.status == "removed"


class CommitDetail(BaseModel):
    """A commit and the files it changed, in API order."""

    sha: str
    files: list[ChangedFile] = Field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CommitDetail":
        """Build a CommitDetail from a "get a commit" response body.

        Args:
            data: Decoded JSON body

        Returns:
            CommitDetail with one ChangedFile per entry in ``files``
        """
        return cls(
            sha=data["sha"],
            files=[
                ChangedFile(
                    filename=file["filename"],
                    patch=file.get("patch"),
                    raw_url=file.get("raw_url"),
                    status=file.get("status", "modified"),
                )
                for file in data.get("files") or []
            ],
        )


class PullRequestEvent(BaseModel):
    """The parts of a pull_request webhook payload the review needs.

    Comments are read from the destination (base) repository, while the
    browser configuration lives on the origin (head) branch, which may be a
    fork.
    """

    destination_repo: str
    origin_repo: str
    origin_branch: str
    pr_number: int
    comments_url: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "PullRequestEvent":
        """Extract the review inputs from a webhook payload.

        Args:
            payload: Decoded pull_request event body

        Returns:
            PullRequestEvent

        Raises:
            KeyError: If the payload is missing required fields
        """
        pull_request = payload["pull_request"]
        head = pull_request["head"]
        head_repo = head.get("repo") or payload["repository"]
        return cls(
            destination_repo=payload["repository"]["full_name"],
            origin_repo=head_repo["full_name"],
            origin_branch=head["ref"],
            pr_number=payload.get("number", pull_request.get("number")),
            comments_url=pull_request["review_comments_url"],
        )

    @property
    def review_key(self) -> str:
        """Human-readable key for logging."""
        return f"{self.destination_repo}#{self.pr_number}"
