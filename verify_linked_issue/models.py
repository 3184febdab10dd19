"""Data models for pull request context, comments and run outcome (Pydantic)."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class PullRequestContext(BaseModel):
    """Pull request under review, as supplied by the CI event."""

    model_config = ConfigDict(frozen=True)

    number: int | None = None
    author: str | None = None
    owner: str
    repo: str

    @property
    def repository(self) -> str:
        """Full repository name (owner/repo)."""
        return f"{self.owner}/{self.repo}"


class Comment(BaseModel):
    """Comment on an issue or PR."""

    id: int
    body: str = ""
    author: str = ""
    # GitHub user type: User, Bot or Organization
    author_type: str = "User"
    app_slug: str | None = None
    created_at: datetime | None = None
    html_url: str | None = None

    @property
    def is_bot(self) -> bool:
        return self.author_type == "Bot"


class Outcome(str, Enum):
    """Result of one verification run."""

    SKIPPED = "skipped"
    VERIFIED = "verified"
    MISSING_TICKET = "missing_ticket"

    @property
    def passed(self) -> bool:
        """False only when no ticket was found (the CI step fails)."""
        return self is not Outcome.MISSING_TICKET
