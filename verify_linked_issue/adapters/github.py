"""GitHub API adapter."""

from datetime import datetime
from typing import Any, Dict, List

import requests

from verify_linked_issue.adapters.base import CommentStore, ExternalCallError
from verify_linked_issue.models import Comment

REQUEST_TIMEOUT = 30


def _parse_iso(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _comment_from_api(data: Dict[str, Any]) -> Comment:
    user = data.get("user") or {}
    app = data.get("performed_via_github_app") or {}
    created = data.get("created_at")
    return Comment(
        id=data["id"],
        body=data.get("body") or "",
        author=user.get("login", ""),
        author_type=user.get("type", "User"),
        app_slug=app.get("slug"),
        created_at=_parse_iso(created) if created else None,
        html_url=data.get("html_url"),
    )


class GitHubAdapter(CommentStore):
    """GitHub REST implementation of the comment store."""

    def __init__(self, token: str, api_url: str = "https://api.github.com") -> None:
        self._api_url = api_url.rstrip("/")
        self._session = requests.Session()
        self._session.headers["Authorization"] = f"token {token}"
        self._session.headers["Accept"] = "application/vnd.github.v3+json"

    def _request(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
        json: Dict[str, Any] | None = None,
    ) -> requests.Response:
        url = f"{self._api_url}{path}" if path.startswith("/") else f"{self._api_url}/{path}"
        try:
            resp = self._session.request(method, url, params=params, json=json, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            raise ExternalCallError(f"{method} {path} failed: {e}") from e
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                msg = resp.json().get("message", msg)
            except (ValueError, AttributeError):
                pass
            raise ExternalCallError(f"{resp.status_code}: {msg}")
        return resp

    def list_comments(self, repo: str, issue_number: int) -> List[Comment]:
        resp = self._request("GET", f"/repos/{repo}/issues/{issue_number}/comments")
        data = resp.json() or []
        return [_comment_from_api(d) for d in data]

    def delete_comment(self, repo: str, comment_id: int) -> None:
        self._request("DELETE", f"/repos/{repo}/issues/comments/{comment_id}")

    def create_comment(self, repo: str, issue_number: int, body: str) -> Comment:
        resp = self._request(
            "POST",
            f"/repos/{repo}/issues/{issue_number}/comments",
            json={"body": body},
        )
        return _comment_from_api(resp.json())
