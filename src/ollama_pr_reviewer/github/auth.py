"""
GitHub App Authentication

Signs App JWTs with the App private key and exchanges them for
installation access tokens.
"""

import logging
import threading
import time
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple

import jwt
import requests

from ..errors import RemoteFetchFailure


logger = logging.getLogger(__name__)


class GitHubAppAuth:
    """
    Installation token provider for a GitHub App.

    Tokens are cached per installation and refreshed five minutes before
    GitHub expires them.
    """

    def __init__(
        self,
        app_id: str,
        private_key: str,
        base_url: str = "https://api.github.com",
        timeout: Optional[float] = 30,
    ):
        """
        Initialize App authentication.

        Args:
            app_id: GitHub App identifier
            private_key: PEM-encoded RSA private key text
            base_url: GitHub API base URL
            timeout: Timeout in seconds for the token exchange
        """
        self.app_id = app_id
        self.private_key = private_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._tokens: Dict[int, Tuple[str, datetime]] = {}
        self._locks: Dict[int, threading.Lock] = {}
        self._lock = threading.Lock()

    def generate_jwt(self) -> str:
        """Generate JWT to authenticate as the GitHub App."""
        now = int(time.time())
        payload = {
            'iat': now - 60,  # clock drift allowance
            'exp': now + 600,
            'iss': str(self.app_id),
        }
        return jwt.encode(payload, self.private_key, algorithm='RS256')

    def get_installation_token(self, installation_id: int) -> str:
        """
        Get installation access token (cached).

        Only callers for the same installation wait on one another while a
        token exchange is in flight.

        Raises:
            RemoteFetchFailure: When GitHub refuses or the exchange fails
        """
        with self._installation_lock(installation_id):
            cached = self._tokens.get(installation_id)
            if cached and datetime.now() < cached[1]:
                return cached[0]

            token, expires_at = self._request_token(installation_id)
            self._tokens[installation_id] = (token, expires_at)
            return token

    def _installation_lock(self, installation_id: int) -> threading.Lock:
        with self._lock:
            return self._locks.setdefault(installation_id, threading.Lock())

    def _request_token(self, installation_id: int) -> Tuple[str, datetime]:
        url = f"{self.base_url}/app/installations/{installation_id}/access_tokens"
        try:
            app_jwt = self.generate_jwt()
        except (jwt.PyJWTError, ValueError, TypeError) as e:
            logger.error(f"Failed to sign App JWT: {e}")
            raise RemoteFetchFailure(f"Failed to sign App JWT: {e}")

        headers = {
            'Authorization': f'Bearer {app_jwt}',
            'Accept': 'application/vnd.github+json',
            'User-Agent': 'Ollama-PR-Reviewer/1.0',
        }

        try:
            response = requests.post(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Installation token request failed: {e}")
            raise RemoteFetchFailure(f"Installation token request failed: {e}")

        if not response.ok:
            raise RemoteFetchFailure.from_status(
                response.status_code,
                f"Installation token request rejected for installation {installation_id}",
                body=response.text,
            )

        try:
            token = response.json()['token']
        except (ValueError, KeyError, TypeError) as e:
            raise RemoteFetchFailure(f"Malformed installation token response: {e}")

        logger.info(f"GitHub App installation token refreshed for installation {installation_id}")
        # Tokens expire in 1 hour
        return token, datetime.now() + timedelta(minutes=55)

    def token_provider(self, installation_id: Optional[int]):
        """Return a zero-argument callable yielding a token for one installation."""
        def provide() -> str:
            if installation_id is None:
                raise RemoteFetchFailure("Event carries no installation id; cannot authenticate")
            return self.get_installation_token(installation_id)
        return provide
