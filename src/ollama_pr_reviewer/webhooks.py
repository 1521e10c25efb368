"""
Webhook Dispatcher

Verifies GitHub webhook deliveries and routes them to handlers through an
explicit table keyed by ``"<event>"`` or ``"<event>.<action>"``.
"""

import hashlib
import hmac
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .errors import WebhookVerificationError


logger = logging.getLogger(__name__)

Handler = Callable[[dict], Any]
ErrorHook = Callable[["WebhookEvent", Exception], None]


@dataclass(frozen=True)
class WebhookEvent:
    """A verified webhook delivery."""
    delivery_id: str
    name: str
    payload: dict

    @property
    def action(self) -> Optional[str]:
        return self.payload.get('action')

    @property
    def keys(self) -> List[str]:
        """Dispatch keys, most specific first."""
        if self.action:
            return [f"{self.name}.{self.action}", self.name]
        return [self.name]


def verify_signature(payload_body: bytes, signature: Optional[str], secret: str) -> bool:
    """Verify GitHub webhook signature"""
    if not signature or not secret:
        return False

    hash_object = hmac.new(
        secret.encode('utf-8'),
        msg=payload_body,
        digestmod=hashlib.sha256
    )
    expected_signature = "sha256=" + hash_object.hexdigest()
    return hmac.compare_digest(expected_signature, signature)


def sign_payload(payload_body: bytes, secret: str) -> str:
    """Compute the X-Hub-Signature-256 header value for a body."""
    digest = hmac.new(secret.encode('utf-8'), msg=payload_body, digestmod=hashlib.sha256)
    return "sha256=" + digest.hexdigest()


class WebhookDispatcher:
    """
    Verifies deliveries and dispatches them to registered handlers.

    Handlers are looked up in ``self.handlers``; events without a handler
    are ignored. Handler exceptions go to the error hook and are not
    re-raised.
    """

    def __init__(self, secret: str, on_error: Optional[ErrorHook] = None):
        self.secret = secret
        self.handlers: Dict[str, List[Handler]] = {}
        self.on_error = on_error or self._log_error

    def on(self, key: str, handler: Handler) -> None:
        """Register a handler for an event key such as ``pull_request.opened``."""
        self.handlers.setdefault(key, []).append(handler)

    def verify(self, delivery_id: str, name: str, signature: Optional[str], body: bytes) -> WebhookEvent:
        """
        Verify a raw delivery and decode its payload.

        Raises:
            WebhookVerificationError: Bad signature, missing event name or invalid JSON
        """
        if not name:
            raise WebhookVerificationError("Missing event name")

        if not verify_signature(body, signature, self.secret):
            raise WebhookVerificationError("Invalid signature")

        try:
            payload = json.loads(body)
        except (ValueError, UnicodeDecodeError) as e:
            raise WebhookVerificationError(f"Invalid JSON payload: {e}")

        if not isinstance(payload, dict):
            raise WebhookVerificationError("Payload must be a JSON object")

        return WebhookEvent(delivery_id=delivery_id, name=name, payload=payload)

    def handlers_for(self, event: WebhookEvent) -> List[Handler]:
        matched = []
        for key in event.keys:
            matched.extend(self.handlers.get(key, []))
        return matched

    def dispatch(self, event: WebhookEvent) -> int:
        """
        Run every handler registered for the event.

        Returns:
            Number of handlers invoked
        """
        handlers = self.handlers_for(event)
        if not handlers:
            logger.info(f"No handler for event {event.keys[0]} (delivery {event.delivery_id}), ignoring")
            return 0

        for handler in handlers:
            try:
                handler(event.payload)
            except Exception as e:
                self.on_error(event, e)
        return len(handlers)

    @staticmethod
    def _log_error(event: WebhookEvent, error: Exception) -> None:
        logger.error(
            f"Error processing event {event.keys[0]} (delivery {event.delivery_id}): {error}",
            exc_info=error,
        )
