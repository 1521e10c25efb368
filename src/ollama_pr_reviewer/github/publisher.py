"""
Review Publisher

Posts review text as an issue comment on the pull request thread.
"""

import logging
from typing import Optional

from .client import GitHubClient
from ..errors import RemoteFetchFailure
from ..models.pr_diff import PullRequestContext


logger = logging.getLogger(__name__)


class Publisher:
    """Publishes one review comment per call, without retry."""

    def __init__(self, client: GitHubClient):
        self.client = client

    def publish(self, context: PullRequestContext, text: str) -> Optional[RemoteFetchFailure]:
        """
        Post text verbatim as a new comment on the PR's issue thread.

        Returns:
            None on success, otherwise the failure (already logged)
        """
        try:
            self.client.create_issue_comment(
                context.owner, context.repo, context.issue_number, text
            )
        except RemoteFetchFailure as e:
            logger.error(f"Failed to post review comment to {context.full_name}#{context.issue_number}. {e.describe()}")
            return e

        logger.info(f"Posted review comment to {context.full_name}#{context.issue_number}")
        return None
