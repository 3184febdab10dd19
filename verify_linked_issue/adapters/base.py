"""Abstract base for comment stores."""

from abc import ABC, abstractmethod
from typing import List

from verify_linked_issue.models import Comment


class ExternalCallError(Exception):
    """Raised when a call to the hosting platform API fails."""

    pass


class CommentStore(ABC):
    """Abstract interface for reading and writing PR comments."""

    @abstractmethod
    def list_comments(self, repo: str, issue_number: int) -> List[Comment]:
        """Fetch the first page of comments on an issue or PR."""
        ...

    @abstractmethod
    def delete_comment(self, repo: str, comment_id: int) -> None:
        """Delete a comment by id."""
        ...

    @abstractmethod
    def create_comment(self, repo: str, issue_number: int, body: str) -> Comment:
        """Post a comment on an issue or PR."""
        ...
