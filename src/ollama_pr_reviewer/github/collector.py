"""
Diff Collector

Retrieves the changed files of a pull request and converts them into
ChangedFile records.
"""

import logging
from typing import List

from .client import GitHubClient
from ..errors import RemoteFetchFailure
from ..models.pr_diff import ChangedFile, PullRequestContext


logger = logging.getLogger(__name__)


class DiffCollector:
    """Collects per-file diffs for one pull request."""

    def __init__(self, client: GitHubClient):
        self.client = client

    def collect(self, context: PullRequestContext) -> List[ChangedFile]:
        """
        Collect changed files in the host API's order.

        Args:
            context: Pull request coordinates

        Returns:
            List of ChangedFile, possibly empty

        Raises:
            RemoteFetchFailure: When the GitHub API call fails
        """
        files_data = self.client.get_pull_request_files(
            context.owner, context.repo, context.pull_number
        )

        files = []
        try:
            for file_data in files_data:
                files.append(ChangedFile.from_api(file_data))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise RemoteFetchFailure(f"Malformed file list response: {e!r}")

        self._log_files(context, files)
        return files

    def _log_files(self, context: PullRequestContext, files: List[ChangedFile]) -> None:
        logger.info(f"Files changed in PR #{context.pull_number}:")
        for f in files:
            logger.info(f"  {f.status}: {f.filename} (+{f.additions} -{f.deletions})")
            if f.has_patch:
                logger.debug(f"Patch for {f.filename}:\n{f.patch}")
            else:
                logger.info(f"  no patch for {f.filename}")
