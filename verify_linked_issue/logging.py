"""Logging from config and env.

Levels (inclusive):
- ERROR: the run failed (missing ticket, API or config error)
- WARNING: non-critical issues and ERROR
- NOTICE: notable results (ticket found, author skipped) and above
- INFO: service messages and above
- DEBUG: debugging and all levels above

Configure via config.yaml (logging.level, logging.format,
logging.workflow_commands) or env (LOGGING_LEVEL, LOGGING_FORMAT,
LOGGING_WORKFLOW_COMMANDS). With workflow commands on, records are
printed to stdout as GitHub Actions commands (::debug::, ::notice::,
::warning::, ::error::) so the runner turns them into annotations.
"""

import logging
import os
import sys

from verify_linked_issue.config import LoggingConfig

NOTICE = 25
logging.addLevelName(NOTICE, "NOTICE")

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "NOTICE": NOTICE,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
WORKFLOW_FORMAT = "%(message)s"


def _resolve_level(level: str) -> int:
    """Map level name to logging constant.

    Falls back to INFO if unknown.
    """
    return LEVELS.get(level.upper().strip(), logging.INFO)


def _escape_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _workflow_command(levelno: int) -> str | None:
    """Workflow command name for a record level; None prints the line as is."""
    if levelno >= logging.ERROR:
        return "error"
    if levelno >= logging.WARNING:
        return "warning"
    if levelno >= NOTICE:
        return "notice"
    if levelno >= logging.INFO:
        return None
    return "debug"


class WorkflowCommandFormatter(logging.Formatter):
    """Render records as GitHub Actions workflow commands."""

    def __init__(self, fmt: str = WORKFLOW_FORMAT) -> None:
        super().__init__(fmt)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = _workflow_command(record.levelno)
        if command is None:
            return message
        return f"::{command}::{_escape_data(message)}"


def _configure_root(level: int, fmt: str, workflow_commands: bool) -> None:
    if workflow_commands:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(WorkflowCommandFormatter())
        logging.basicConfig(level=level, handlers=[handler], force=True)
        return
    logging.basicConfig(level=level, format=fmt, force=True)


def setup_fallback_logging() -> None:
    """Root logging for when config itself failed to load.

    Reads GITHUB_ACTIONS directly so errors still become annotations on
    a runner.
    """
    _configure_root(logging.INFO, DEFAULT_FORMAT, os.environ.get("GITHUB_ACTIONS") == "true")


class VerifierLogging:
    """Configures root logger from LoggingConfig (YAML + env LOGGING_*)."""

    def __init__(self, config: LoggingConfig) -> None:
        """Store logging config (level, format, workflow command mode)."""
        self._level = _resolve_level(config.level)
        self._format = config.format or DEFAULT_FORMAT
        self._workflow_commands = config.workflow_commands

    def setup(self) -> None:
        """Apply level and format to the root logger."""
        _configure_root(self._level, self._format, self._workflow_commands)

    def get_logger(self, name: str) -> logging.Logger:
        """Return a logger with the given name (uses root config)."""
        return logging.getLogger(name)
