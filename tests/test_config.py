"""Tests for config loading (YAML + env, Actions inputs, secrets)."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from verify_linked_issue.config import (
    DEFAULT_MISSING_MESSAGE,
    DEFAULT_TICKET_APP_SLUG,
    AppConfig,
    VerifierConfig,
    load_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop runner/env settings that would leak into config."""
    for key in (
        "GITHUB_ACTIONS",
        "RUNNER_DEBUG",
        "GITHUB_TOKEN",
        "GITHUB_TOKEN_FILE",
        "GITHUB_API_URL",
        "INPUT_SKIP-USERS",
        "VERIFIER_SKIP_USERS",
        "LOGGING_LEVEL",
        "LOGGING_WORKFLOW_COMMANDS",
    ):
        monkeypatch.delenv(key, raising=False)


def test_missing_file_returns_defaults(tmp_path: Path) -> None:
    """No config file: built-in defaults (Linear message, bot slug)."""
    config = load_config(tmp_path / "nope.yaml")
    assert isinstance(config, AppConfig)
    assert config.verifier.missing_message == DEFAULT_MISSING_MESSAGE
    assert config.verifier.ticket_app_slug == DEFAULT_TICKET_APP_SLUG
    assert config.verifier.skip_user_set == frozenset()
    assert config.github.api_url == "https://api.github.com"
    assert config.logging.level == "INFO"
    assert config.logging.workflow_commands is False


def test_yaml_values_and_env_substitution(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """YAML sections build nested models; ${VAR} is substituted."""
    monkeypatch.setenv("MY_TOKEN", "from-env")
    path = tmp_path / "config.yaml"
    path.write_text(
        "verifier:\n"
        "  skip_users:\n"
        "    - 'dependabot[bot]'\n"
        "    - ' octocat '\n"
        "  missing_message: Link a ticket please\n"
        "github:\n"
        "  token: ${MY_TOKEN}\n"
        "  api_url: https://ghe.example.com/api/v3\n"
        "logging:\n"
        "  level: DEBUG\n"
    )
    config = load_config(path)
    assert config.verifier.skip_user_set == frozenset({"dependabot[bot]", "octocat"})
    assert config.verifier.missing_message == "Link a ticket please"
    assert config.github.token == "from-env"
    assert config.github_token_resolved == "from-env"
    assert config.github.api_url == "https://ghe.example.com/api/v3"
    assert config.logging.level == "DEBUG"


def test_actions_input_overrides_skip_users(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """INPUT_SKIP-USERS (the action input) wins over the file."""
    path = tmp_path / "config.yaml"
    path.write_text("verifier:\n  skip_users: alice\n")
    monkeypatch.setenv("INPUT_SKIP-USERS", "bob, carol,,")
    config = load_config(path)
    assert config.verifier.skip_user_set == frozenset({"bob", "carol"})


def test_skip_users_from_env_prefix(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VERIFIER_SKIP_USERS", "alice,bob")
    config = load_config(tmp_path / "nope.yaml")
    assert config.verifier.skip_user_set == frozenset({"alice", "bob"})


def test_runner_enables_workflow_commands_and_debug(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """On a runner, workflow commands default on; RUNNER_DEBUG=1 means DEBUG."""
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    monkeypatch.setenv("RUNNER_DEBUG", "1")
    config = load_config(tmp_path / "nope.yaml")
    assert config.logging.workflow_commands is True
    assert config.logging.level == "DEBUG"


def test_explicit_logging_wins_on_runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    monkeypatch.setenv("RUNNER_DEBUG", "1")
    path = tmp_path / "config.yaml"
    path.write_text("logging:\n  level: WARNING\n  workflow_commands: false\n")
    config = load_config(path)
    assert config.logging.workflow_commands is False
    assert config.logging.level == "WARNING"


def test_token_from_secret_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """GITHUB_TOKEN_FILE is read when GITHUB_TOKEN is unset."""
    secret = tmp_path / "token"
    secret.write_text("file-token\n")
    monkeypatch.setenv("GITHUB_TOKEN_FILE", str(secret))
    config = load_config(tmp_path / "nope.yaml")
    assert config.github_token_resolved == "file-token"


def test_token_none_when_unset(tmp_path: Path) -> None:
    config = load_config(tmp_path / "nope.yaml")
    assert config.github_token_resolved is None


def test_invalid_pattern_rejected() -> None:
    with pytest.raises(ValidationError):
        VerifierConfig(ticket_url_pattern="[unclosed")


def test_empty_missing_message_rejected() -> None:
    """An empty message would mark every bot comment as a stale warning."""
    with pytest.raises(ValidationError):
        VerifierConfig(missing_message="")


def test_whitespace_missing_message_rejected() -> None:
    """A blank message would match nearly every bot comment too."""
    with pytest.raises(ValidationError):
        VerifierConfig(missing_message=" \n\t")


@pytest.mark.parametrize(
    "content",
    ["- a\n- b\n", "verifier: oops\n", "logging: 1\n", "github: [x]\n", "just text\n"],
)
def test_non_mapping_yaml_rejected(tmp_path: Path, content: str) -> None:
    """Valid YAML of the wrong shape raises ValueError, not a TypeError."""
    path = tmp_path / "config.yaml"
    path.write_text(content)
    with pytest.raises(ValueError, match="must be a mapping"):
        load_config(path)


def test_empty_sections_use_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("verifier:\nlogging:\n")
    config = load_config(path)
    assert config.verifier.missing_message == DEFAULT_MISSING_MESSAGE


def test_skip_users_case_insensitive() -> None:
    """GitHub logins are case-insensitive."""
    cfg = VerifierConfig(skip_users="Dependabot[bot], OctoCat")
    assert cfg.is_skipped("dependabot[bot]")
    assert cfg.is_skipped("octocat")
    assert cfg.is_skipped("OCTOCAT")
    assert not cfg.is_skipped("octo")
