"""
Review Engine

Sends review prompts to the inference endpoint and absorbs every failure
into a fallback ReviewResult.
"""

import logging

from .client import OllamaClient
from ..errors import FailureKind, RemoteFetchFailure
from ..models.review import ReviewResult


logger = logging.getLogger(__name__)


class ReviewEngine:
    """
    Generates review text for a prompt.

    ``review`` never raises: inference failures are logged and turned into
    ``ReviewResult.fallback()``.
    """

    def __init__(self, client: OllamaClient):
        self.client = client

    @property
    def model_name(self) -> str:
        return self.client.model

    def review(self, prompt: str) -> ReviewResult:
        """Review a prompt, returning generated text or the fallback message."""
        try:
            text = self.client.generate(prompt)
        except RemoteFetchFailure as e:
            if e.kind is FailureKind.HTTP_STATUS:
                logger.error(f"Ollama error response: {e.status_code} - {e.body}")
            else:
                logger.error(f"Error calling Ollama: {e.message}")
            return ReviewResult.fallback()
        except Exception:
            logger.exception("Unexpected error calling Ollama")
            return ReviewResult.fallback()

        logger.info("Ollama response received")
        return ReviewResult.success(text)
