"""
Error Types

Failures raised across the review pipeline. Remote calls are reported with a
tagged ``RemoteFetchFailure`` so every stage boundary can tell a host that
answered with an error status apart from a call that never completed.
"""

from enum import Enum
from typing import Optional


class FailureKind(Enum):
    """Kind of remote failure."""
    HTTP_STATUS = "http_status"
    TRANSPORT = "transport"


class RemoteFetchFailure(Exception):
    """GitHub or inference API call that returned non-success or failed in transit"""
    def __init__(
        self,
        message: str,
        kind: FailureKind = FailureKind.TRANSPORT,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code
        self.body = body

    @classmethod
    def from_status(cls, status_code: int, message: str, body: Optional[str] = None) -> "RemoteFetchFailure":
        return cls(message, kind=FailureKind.HTTP_STATUS, status_code=status_code, body=body)

    @property
    def is_http_status(self) -> bool:
        return self.kind is FailureKind.HTTP_STATUS

    def describe(self) -> str:
        """One-line diagnostic for logs."""
        if self.kind is FailureKind.HTTP_STATUS:
            return f"Status: {self.status_code}. Message: {self.message}"
        return f"Transport error: {self.message}"


class ConfigurationMissing(ValueError):
    """Required startup configuration is absent or invalid"""


class WebhookVerificationError(Exception):
    """Webhook delivery failed signature or payload verification"""
