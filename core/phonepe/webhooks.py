"""
PhonePe webhook authentication and payload parsing.

PhonePe signs server-to-server callbacks with an ``Authorization`` header
holding ``sha256("<username>:<password>")`` in hex, where the credentials
are the ones configured on the merchant dashboard.
"""

import hashlib
import hmac
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from django.conf import settings

from core.exceptions import WebhookValidationException

logger = logging.getLogger(__name__)

# Checkout callbacks carry their outcome in ``type``; older integrations send
# it as a dotted ``event`` name instead.
CHECKOUT_EVENT_STATES = {
    "CHECKOUT_ORDER_COMPLETED": "COMPLETED",
    "CHECKOUT_ORDER_FAILED": "FAILED",
    "checkout.order.completed": "COMPLETED",
    "checkout.order.failed": "FAILED",
}


@dataclass
class WebhookEvent:
    event: str
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def state(self) -> Optional[str]:
        state = self.payload.get("state")
        if state:
            return CHECKOUT_EVENT_STATES.get(state, state)
        return CHECKOUT_EVENT_STATES.get(self.event)

    @property
    def merchant_order_id(self) -> Optional[str]:
        return self.payload.get("originalMerchantOrderId") or self.payload.get("merchantOrderId")

    @property
    def transaction_id(self) -> Optional[str]:
        details = self.payload.get("paymentDetails") or []
        if details:
            return details[0].get("transactionId")
        return None


def expected_authorization() -> str:
    credentials = f"{settings.PHONEPE_WEBHOOK_USERNAME}:{settings.PHONEPE_WEBHOOK_PASSWORD}"
    return hashlib.sha256(credentials.encode("utf-8")).hexdigest()


def validate_authorization(header: Optional[str]) -> None:
    """
    Check the callback ``Authorization`` header.

    Raises:
        WebhookValidationException: If the header is missing, the webhook
            credentials are not configured, or the hash does not match
    """
    if not header:
        raise WebhookValidationException("Missing Authorization header")
    if not settings.PHONEPE_WEBHOOK_USERNAME or not settings.PHONEPE_WEBHOOK_PASSWORD:
        logger.error("PhonePe webhook credentials are not configured")
        raise WebhookValidationException("Webhook authentication is not configured")

    received = header.strip()
    if received.lower().startswith("sha256 "):
        received = received[len("sha256 "):]
    if not hmac.compare_digest(received.lower(), expected_authorization()):
        raise WebhookValidationException("Invalid webhook authorization")


def parse_callback(body: Any) -> WebhookEvent:
    """Normalise a webhook body into an event name and payload."""
    if not isinstance(body, dict):
        raise WebhookValidationException("Malformed webhook body", status_code=400)
    payload = body.get("payload") or {}
    event = body.get("event") or body.get("type") or ""
    return WebhookEvent(event=event, payload=payload)
