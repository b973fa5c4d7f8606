"""Delivery Service - Transactional email sending through Resend.

Interface Contract:
- send_batch(messages) -> DeliveryResult
- A failed chunk is recorded in DeliveryResult.errors, never raised
- DeliveryServiceError when the service is not configured
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from config import EMAIL_FROM, RESEND_API_KEY, RESEND_API_URL

logger = logging.getLogger(__name__)

# Resend accepts at most this many messages per batch request
MAX_BATCH_SIZE = 100


class DeliveryServiceError(Exception):
    """Raised when emails cannot be sent at all."""
    pass


@dataclass
class OutgoingEmail:
    """A single addressed message."""
    to: str
    subject: str
    body: str
    tags: dict[str, str] = field(default_factory=dict)


@dataclass
class DeliveryResult:
    """Provider message ids aligned with the input order (None = not sent)."""
    message_ids: list[str | None] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def sent(self) -> int:
        return sum(1 for message_id in self.message_ids if message_id)


class ResendDeliveryService:
    """Send email batches via the Resend HTTP API."""

    def __init__(
        self,
        api_key: str = RESEND_API_KEY,
        sender: str = EMAIL_FROM,
        *,
        base_url: str = RESEND_API_URL,
        timeout: int = 15,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.sender = sender
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def is_configured(self) -> bool:
        return bool(self.api_key and self.sender)

    def configuration_error(self) -> str | None:
        """Describe what is missing, or None when ready to send."""
        if not self.api_key:
            return "RESEND_API_KEY not configured"
        if not self.sender:
            return "EMAIL_FROM not configured"
        return None

    def _payload(self, message: OutgoingEmail) -> dict[str, Any]:
        return {
            "from": self.sender,
            "to": [message.to],
            "subject": message.subject,
            "text": message.body,
            "tags": [{"name": k, "value": v} for k, v in message.tags.items()],
        }

    def _send_chunk(self, chunk: list[OutgoingEmail]) -> list[str | None]:
        resp = self.session.post(
            f"{self.base_url}/emails/batch",
            json=[self._payload(m) for m in chunk],
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        data = resp.json().get("data") or []
        ids = [item.get("id") for item in data]
        # Pad so ids stay aligned with the chunk even on a short response
        return (ids + [None] * len(chunk))[:len(chunk)]

    def send_batch(self, messages: list[OutgoingEmail]) -> DeliveryResult:
        """Send messages in chunks of MAX_BATCH_SIZE.

        Raises:
            DeliveryServiceError: If the API key or sender address is missing
        """
        problem = self.configuration_error()
        if problem:
            raise DeliveryServiceError(f"Email not configured: {problem}")

        result = DeliveryResult()
        for start in range(0, len(messages), MAX_BATCH_SIZE):
            chunk = messages[start:start + MAX_BATCH_SIZE]
            try:
                result.message_ids.extend(self._send_chunk(chunk))
            except (requests.RequestException, ValueError) as e:
                logger.error("[delivery] batch starting at %d failed: %s", start, e)
                result.errors.append(str(e))
                result.message_ids.extend([None] * len(chunk))

        logger.info("[delivery] sent=%d total=%d errors=%d", result.sent, len(messages), len(result.errors))
        return result
