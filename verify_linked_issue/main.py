"""verify-linked-issue entry point.

Runs as a CI step on a pull request: checks that the tracker integration
left a ticket-link comment, posts or retracts the warning comment and
exits non-zero when no ticket is linked. Usage: verify-linked-issue [-c config.yaml].
"""

import argparse
import logging
import sys
from pathlib import Path

import yaml
from verify_linked_issue.adapters import ExternalCallError, GitHubAdapter
from verify_linked_issue.config import AppConfig, load_config
from verify_linked_issue.context import ConfigurationError, load_pull_request_context
from verify_linked_issue.logging import VerifierLogging, setup_fallback_logging
from verify_linked_issue.models import Outcome
from verify_linked_issue.verifier import verify


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI options; PR overrides default to the Actions event."""
    parser = argparse.ArgumentParser(
        prog="verify-linked-issue",
        description="Fail the CI step unless the pull request links a tracker ticket",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    parser.add_argument("--event-path", type=Path, default=None, help="Event payload JSON (default: GITHUB_EVENT_PATH)")
    parser.add_argument("--repository", default=None, help="owner/repo (default: from event or GITHUB_REPOSITORY)")
    parser.add_argument("--pr-number", type=int, default=None, help="Pull request number")
    parser.add_argument("--author", default=None, help="Pull request author login")
    return parser.parse_args(argv if argv is not None else sys.argv[1:])


def run(config: AppConfig, args: argparse.Namespace) -> Outcome:
    """Build context and GitHub adapter from config/args, then verify."""
    event_path = args.event_path or config.github.event_path
    context = load_pull_request_context(
        event_path=event_path,
        repository=args.repository,
        number=args.pr_number,
        author=args.author,
        fallback_repository=config.github.repository,
    )
    token = config.github_token_resolved
    if not token:
        raise ConfigurationError("GITHUB_TOKEN is not set, exiting.")
    adapter = GitHubAdapter(token=token, api_url=config.github.api_url)
    return verify(context, adapter, config.verifier, log=logging.getLogger("verify_linked_issue.verifier"))


def main(argv: list[str] | None = None) -> int:
    """Entry point: exit 0 when the PR is verified or skipped, 1 otherwise."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except (ValueError, yaml.YAMLError, OSError) as e:
        setup_fallback_logging()
        logging.getLogger("verify_linked_issue").error("Invalid configuration: %s", e)
        return 1

    VerifierLogging(config.logging).setup()
    log = logging.getLogger("verify_linked_issue")

    if args.check:
        print("Config OK:", config.verifier.ticket_app_slug, sorted(config.verifier.skip_user_set))
        return 0

    try:
        outcome = run(config, args)
    except (ConfigurationError, ExternalCallError) as e:
        log.error("%s", e)
        return 1
    except Exception as e:
        log.exception("Fatal error: %s", e)
        return 1

    log.debug("Outcome: %s", outcome.value)
    return 0 if outcome.passed else 1


if __name__ == "__main__":
    sys.exit(main())
