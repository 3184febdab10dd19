"""
Check a pull request for a linked ticket and reconcile the warning comment.

Sequential: list comments, delete stale warnings, then either accept the
ticket-link comment or post a fresh warning. Deletes always happen before
the create, so reruns leave at most one live warning.
"""

import logging
import re
from typing import Iterable, List

from verify_linked_issue.adapters.base import CommentStore
from verify_linked_issue.config import VerifierConfig
from verify_linked_issue.context import ConfigurationError
from verify_linked_issue.logging import NOTICE
from verify_linked_issue.models import Comment, Outcome, PullRequestContext


def is_stale_warning(comment: Comment, missing_message: str) -> bool:
    """Bot-authored comment whose body contains the warning text verbatim."""
    return comment.is_bot and missing_message in comment.body


def is_integration_author(comment: Comment, app_slug: str) -> bool:
    """Comment was posted by the tracker integration (GitHub App or its bot user)."""
    if comment.app_slug == app_slug:
        return True
    return comment.author in (app_slug, f"{app_slug}[bot]")


def is_ticket_link(comment: Comment, config: VerifierConfig) -> bool:
    """Integration comment whose body references a tracker ticket URL."""
    if not is_integration_author(comment, config.ticket_app_slug):
        return False
    return re.search(config.ticket_url_pattern, comment.body) is not None


def find_stale_warnings(comments: Iterable[Comment], missing_message: str) -> List[Comment]:
    return [c for c in comments if is_stale_warning(c, missing_message)]


def find_ticket_link(comments: Iterable[Comment], config: VerifierConfig) -> Comment | None:
    for comment in comments:
        if is_stale_warning(comment, config.missing_message):
            continue
        if is_ticket_link(comment, config):
            return comment
    return None


def verify(
    context: PullRequestContext,
    store: CommentStore,
    config: VerifierConfig,
    log: logging.Logger | None = None,
) -> Outcome:
    """
    Verify one PR references a ticket and reconcile warning comments.

    1. Reject a context without PR number or author (ConfigurationError).
    2. Skip authors listed in skip_users without touching comments.
    3. List the first page of comments and delete stale warnings.
    4. If the integration left a ticket-link comment, the PR is verified;
       otherwise post the warning and report the ticket as missing.

    Store errors (ExternalCallError) propagate; nothing is retried.
    """
    logger = log or logging.getLogger("verify_linked_issue.verifier")

    if not context.number:
        raise ConfigurationError("No pull request number found in context, exiting.")
    if not context.author:
        raise ConfigurationError("No pull request author found in context, exiting.")

    if config.is_skipped(context.author):
        logger.log(NOTICE, "Skipping ticket check for %s (in skip-users).", context.author)
        return Outcome.SKIPPED

    logger.debug("Searching for ticket link on %s#%s ...", context.repository, context.number)
    comments = store.list_comments(context.repository, context.number)
    logger.debug("Fetched %d comment(s)", len(comments))

    for comment in find_stale_warnings(comments, config.missing_message):
        logger.debug("Deleting stale warning comment %s", comment.id)
        store.delete_comment(context.repository, comment.id)

    ticket_comment = find_ticket_link(comments, config)
    if ticket_comment is not None:
        logger.log(NOTICE, "Found linked ticket (comment %s).", ticket_comment.id)
        return Outcome.VERIFIED

    created = store.create_comment(context.repository, context.number, config.missing_message)
    logger.debug("Posted warning comment %s", created.id)
    logger.error("No linked ticket found.")
    return Outcome.MISSING_TICKET
