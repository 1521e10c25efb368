"""
GitHub API Client

Handles authenticated communication with the GitHub REST API.
Provides methods for PR file retrieval and issue comment creation.
"""

import logging
from typing import Callable, Dict, List, Optional
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..errors import RemoteFetchFailure


logger = logging.getLogger(__name__)


class GitHubClient:
    """
    GitHub API client with installation-token authentication and error handling.

    Provides methods for:
    - PR changed-file retrieval (paginated)
    - Issue comment creation
    """

    def __init__(
        self,
        token_provider: Callable[[], str],
        base_url: str = "https://api.github.com",
        api_version: str = "2022-11-28",
        timeout: Optional[float] = 30,
        max_retries: int = 3,
    ):
        """
        Initialize GitHub client.

        Args:
            token_provider: Callable returning an installation access token
            base_url: GitHub API base URL (default: https://api.github.com)
            api_version: Value of the X-GitHub-Api-Version header
            timeout: Request timeout in seconds
            max_retries: Retries for idempotent requests on 5xx/429
        """
        self.token_provider = token_provider
        self.base_url = base_url.rstrip('/')
        self.api_version = api_version
        self.timeout = timeout
        self.session = self._create_session(max_retries)

    def _create_session(self, max_retries: int) -> requests.Session:
        """Create requests session with retry strategy for GET requests."""
        session = requests.Session()

        # POST is not in allowed_methods, so comments are never re-sent
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=frozenset(['GET']),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': self.api_version,
            'User-Agent': 'Ollama-PR-Reviewer/1.0'
        })

        return session

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to GitHub API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            RemoteFetchFailure: For API and transport errors
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        headers = {'Authorization': f'Bearer {self.token_provider()}'}

        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise RemoteFetchFailure(f"Request failed: {str(e)}")

        if not response.ok:
            raise RemoteFetchFailure.from_status(
                response.status_code,
                self._error_message(response),
                body=response.text,
            )

        return response

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            error_data = response.json() if response.content else {}
        except ValueError:
            return response.text or 'Unknown error'
        if isinstance(error_data, dict):
            return error_data.get('message', 'Unknown error')
        return 'Unknown error'

    def get_pull_request_files(self, owner: str, repo: str, pr_number: int) -> List[Dict]:
        """
        Get files changed in a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            List of file change data in GitHub's order
        """
        logger.info(f"Fetching PR files for {owner}/{repo}#{pr_number}")

        files = []
        page = 1
        per_page = 100

        while True:
            response = self._make_request(
                'GET',
                f'/repos/{owner}/{repo}/pulls/{pr_number}/files',
                params={'page': page, 'per_page': per_page}
            )

            try:
                page_files = response.json()
            except ValueError as e:
                raise RemoteFetchFailure(f"Malformed file list response: {e}")

            if not isinstance(page_files, list):
                raise RemoteFetchFailure("Malformed file list response: expected a JSON array")

            if not page_files:
                break

            files.extend(page_files)

            if len(page_files) < per_page:
                break

            page += 1

        logger.info(f"Found {len(files)} changed files")
        return files

    def create_issue_comment(self, owner: str, repo: str, issue_number: int, body: str) -> Dict:
        """
        Create a comment on an issue or pull request thread.

        Args:
            owner: Repository owner
            repo: Repository name
            issue_number: Issue (or pull request) number
            body: Comment markdown

        Returns:
            Created comment data
        """
        logger.info(f"Posting comment to {owner}/{repo}#{issue_number}")

        response = self._make_request(
            'POST',
            f'/repos/{owner}/{repo}/issues/{issue_number}/comments',
            json={'body': body}
        )
        try:
            return response.json()
        except ValueError:
            return {}
