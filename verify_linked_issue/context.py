"""Build the pull request context from the Actions event payload.

The runner writes the triggering event as JSON to GITHUB_EVENT_PATH and
sets GITHUB_REPOSITORY. CLI overrides take precedence over both.
"""

import json
from pathlib import Path
from typing import Any, Dict

from verify_linked_issue.models import PullRequestContext


class ConfigurationError(Exception):
    """Raised when the run lacks the PR context it needs."""

    pass


def _read_event(event_path: Path | str) -> Dict[str, Any]:
    path = Path(event_path)
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot read event payload {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Event payload {path} is not a JSON object")
    return data


def split_repository(repository: str) -> tuple[str, str]:
    """Split owner/repo into its parts."""
    owner, sep, repo = repository.strip().partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise ConfigurationError(f"Repository must be owner/repo, got {repository!r}")
    return owner, repo


def load_pull_request_context(
    event_path: Path | str | None = None,
    repository: str | None = None,
    number: int | None = None,
    author: str | None = None,
    fallback_repository: str | None = None,
) -> PullRequestContext:
    """Resolve PR number, author and owner/repo.

    The event payload supplies pull_request.number, pull_request.user.login
    and repository.full_name. Explicit repository/number/author arguments
    win over the payload; fallback_repository (GITHUB_REPOSITORY) is
    used only when neither names the repository. Number and author may
    still be missing here; the verifier rejects such a context.
    """
    payload: Dict[str, Any] = _read_event(event_path) if event_path else {}
    pull_request = payload.get("pull_request") or {}
    user = pull_request.get("user") or {}
    repo_payload = payload.get("repository") or {}

    full_name = repository or repo_payload.get("full_name") or fallback_repository
    if not full_name:
        raise ConfigurationError("No repository found in context, exiting.")
    owner, repo = split_repository(full_name)

    return PullRequestContext(
        number=number if number is not None else pull_request.get("number"),
        author=author or user.get("login"),
        owner=owner,
        repo=repo,
    )
