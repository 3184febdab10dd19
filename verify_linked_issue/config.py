"""Configuration loading from YAML and environment.

The token is taken from GITHUB_TOKEN or from a file named in
GITHUB_TOKEN_FILE (Docker secrets). Never put real tokens in config files
committed to the repo.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MISSING_MESSAGE = (
    "No Linear ticket found for this pull request. "
    "Please link an issue in Linear by mentioning the ticket."
)
DEFAULT_TICKET_APP_SLUG = "verify-linked-issue-bot"
DEFAULT_TICKET_URL_PATTERN = r"https?://linear\.app/[\w.-]+/issue/[A-Za-z][A-Za-z0-9]*-\d+"

# GitHub Actions passes the `skip-users` input under this name
ACTIONS_SKIP_USERS_INPUT = "INPUT_SKIP-USERS"


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = _current_env.get(env_key)
    if value:
        return value.strip()
    file_path = _current_env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


# Injected by load_config so properties can read env/file
_current_env: dict[str, str] = {}


class VerifierConfig(BaseSettings):
    """What counts as a ticket link and how to warn when it is missing."""

    model_config = SettingsConfigDict(env_prefix="VERIFIER_", extra="ignore")

    skip_users: str = Field(default="", description="Comma-separated PR author logins to skip")
    missing_message: str = Field(
        default=DEFAULT_MISSING_MESSAGE,
        min_length=1,
        description="Body of the warning comment; also used to find stale warnings",
    )
    ticket_app_slug: str = Field(
        default=DEFAULT_TICKET_APP_SLUG,
        min_length=1,
        description="GitHub App slug (or bot login) of the tracker integration",
    )
    ticket_url_pattern: str = Field(
        default=DEFAULT_TICKET_URL_PATTERN,
        description="Regex a ticket-link comment body must match",
    )

    @field_validator("skip_users", mode="before")
    @classmethod
    def _join_skip_users(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple, set)):
            return ",".join(str(v) for v in value)
        return value

    @field_validator("missing_message")
    @classmethod
    def _check_message(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("missing_message must contain non-whitespace text")
        return value

    @field_validator("ticket_url_pattern")
    @classmethod
    def _check_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid ticket_url_pattern: {e}") from e
        return value

    @property
    def skip_user_set(self) -> frozenset[str]:
        """Logins from skip_users, trimmed and casefolded, empties dropped."""
        return frozenset(u.strip().casefold() for u in self.skip_users.split(",") if u.strip())

    def is_skipped(self, login: str) -> bool:
        """GitHub logins compare case-insensitively."""
        return login.strip().casefold() in self.skip_user_set


class GitHubConfig(BaseSettings):
    """GitHub API and Actions runner settings."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="Workflow or PAT token; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="API base URL")
    repository: str | None = Field(default=None, description="owner/repo (set by the runner)")
    event_path: str | None = Field(default=None, description="Path to the event payload JSON (set by the runner)")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    workflow_commands: bool = Field(
        default=False,
        description="Render records as GitHub Actions workflow commands (::error:: etc.)",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    verifier: VerifierConfig = Field(default_factory=VerifierConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from config, env or Docker secret file."""
        t = self.github.token
        if t and not t.startswith("${"):
            return t
        return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE")


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    """Top-level YAML section as a mapping; absent or empty means {}."""
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"config section '{name}' must be a mapping, got {type(value).__name__}")
    return value


def _explicit(logging_raw: dict[str, Any], key: str) -> bool:
    """True if a logging option is set in the YAML file or via LOGGING_* env."""
    return key in logging_raw or f"LOGGING_{key.upper()}" in _current_env


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    A missing file is not an error: defaults plus env are used. The
    runner-provided INPUT_SKIP-USERS overrides verifier.skip_users, and
    on a runner (GITHUB_ACTIONS=true) workflow commands are on unless
    set explicitly. RUNNER_DEBUG=1 switches the default level to DEBUG.
    """
    global _current_env

    _current_env = dict(os.environ)

    path = config_path or Path("config.yaml")
    raw: dict[str, Any] = {}
    if path.is_file():
        loaded = yaml.safe_load(path.read_text()) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"{path}: top level must be a mapping, got {type(loaded).__name__}")
        raw = _substitute_env(loaded)

    verifier_raw = _section(raw, "verifier")
    skip_input = _current_env.get(ACTIONS_SKIP_USERS_INPUT)
    if skip_input:
        verifier_raw = {**verifier_raw, "skip_users": skip_input}

    logging_raw = _section(raw, "logging")
    if _current_env.get("GITHUB_ACTIONS") == "true" and not _explicit(logging_raw, "workflow_commands"):
        logging_raw = {**logging_raw, "workflow_commands": True}
    if _current_env.get("RUNNER_DEBUG") == "1" and not _explicit(logging_raw, "level"):
        logging_raw = {**logging_raw, "level": "DEBUG"}

    verifier = VerifierConfig(**verifier_raw)
    github = GitHubConfig(**_section(raw, "github"))
    logging = LoggingConfig(**logging_raw)

    return AppConfig(verifier=verifier, github=github, logging=logging)
