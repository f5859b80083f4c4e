"""Output models for compatibility findings and review results."""

from pydantic import BaseModel, Field


class Finding(BaseModel):
    """A feature usage that some target browsers do not support.

    ``line`` is in post-change file coordinates.
    """

    line: int
    title: str
    missing: list[str] = Field(default_factory=list)

    @property
    def comment_body(self) -> str:
        """Render the review comment text for this finding.

        Returns:
            Plain text "<title> not supported by: <missing>"
        """
        return f"{self.title} not supported by: {', '.join(self.missing)}"


class ReviewOutcome(BaseModel):
    """Counters for one pull request event."""

    commits: int = 0
    files_checked: int = 0
    files_failed: int = 0
    comments_posted: int = 0
    comments_skipped: int = 0
    comments_failed: int = 0

    @property
    def total_findings(self) -> int:
        """Every finding seen, whether posted, skipped or failed."""
        return self.comments_posted + self.comments_skipped + self.comments_failed
