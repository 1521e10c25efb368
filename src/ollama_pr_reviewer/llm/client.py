"""
Ollama Client

Minimal client for a locally hosted Ollama text-generation endpoint.
"""

import logging
from typing import Optional
import requests

from ..errors import RemoteFetchFailure


logger = logging.getLogger(__name__)


class OllamaClient:
    """Blocking, non-streaming client for ``POST /api/generate``."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "gemma3n:latest",
        timeout: Optional[float] = None,
    ):
        """
        Initialize Ollama client.

        Args:
            base_url: Ollama server URL
            model: Model identifier sent with every request
            timeout: Request timeout in seconds (None waits indefinitely)
        """
        self.base_url = base_url.rstrip('/')
        self.model = model
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({'Content-Type': 'application/json'})

    def generate(self, prompt: str) -> str:
        """
        Generate text for a prompt.

        Returns:
            The ``response`` field of the reply (may be empty)

        Raises:
            RemoteFetchFailure: Non-success status or transport failure
        """
        url = f"{self.base_url}/api/generate"
        payload = {
            'model': self.model,
            'prompt': prompt,
            'stream': False,
        }

        logger.info(f"Calling Ollama API ({self.model})")
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteFetchFailure(f"Ollama request failed: {e}")

        logger.info(f"Ollama response status: {response.status_code}")

        if not response.ok:
            error_text = response.text
            raise RemoteFetchFailure.from_status(
                response.status_code,
                f"Ollama request failed: {response.status_code} - {error_text}",
                body=error_text,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteFetchFailure(f"Malformed Ollama response body: {e}")

        if not isinstance(data, dict):
            raise RemoteFetchFailure("Malformed Ollama response body: expected a JSON object")

        text = data.get('response')
        if text is None:
            return ""
        if not isinstance(text, str):
            raise RemoteFetchFailure("Malformed Ollama response body: 'response' is not a string")
        return text
