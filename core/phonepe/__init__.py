from .client import PhonePeClient, get_phonepe_client
from .webhooks import WebhookEvent, parse_callback, validate_authorization

__all__ = [
    "PhonePeClient",
    "get_phonepe_client",
    "WebhookEvent",
    "parse_callback",
    "validate_authorization",
]
