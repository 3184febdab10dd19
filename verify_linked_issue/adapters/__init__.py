"""Comment store adapters (GitHub)."""

from verify_linked_issue.adapters.base import CommentStore, ExternalCallError
from verify_linked_issue.adapters.github import GitHubAdapter

__all__ = ["CommentStore", "ExternalCallError", "GitHubAdapter"]
