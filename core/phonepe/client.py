"""
PhonePe Payment Gateway Client

REST client for the PhonePe Standard Checkout and Subscriptions (UPI
AutoPay) APIs. It implements the OAuth 2.0 client credentials flow with
token caching in Django's cache, and thin wrappers around every gateway
call the backend needs.

Amounts are always passed to the gateway in paise.

Author: Seva Development Team
Version: 1.0.0
"""

import logging
from datetime import datetime, timedelta, timezone as dt_timezone
from threading import Lock
from typing import Any, Dict, Optional

import requests
from django.conf import settings
from django.core.cache import cache

from core.exceptions import PaymentAuthException, PaymentGatewayException

logger = logging.getLogger(__name__)

PRODUCTION_BASE_URL = "https://api.phonepe.com/apis/pg"
PRODUCTION_OAUTH_URL = "https://api.phonepe.com/apis/identity-manager/v1/oauth/token"
SANDBOX_BASE_URL = "https://api-preprod.phonepe.com/apis/pg-sandbox"
SANDBOX_OAUTH_URL = f"{SANDBOX_BASE_URL}/v1/oauth/token"

SUBSCRIPTION_VALIDITY_YEARS = 30
SETUP_ORDER_EXPIRY = timedelta(minutes=5)
REDEMPTION_NOTIFY_EXPIRY = timedelta(hours=48)


def _epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _now() -> datetime:
    return datetime.now(dt_timezone.utc)


def _add_years(moment: datetime, years: int) -> datetime:
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        # 29 February in a non leap target year
        return moment.replace(year=moment.year + years, day=28)


class PhonePeClient:
    """
    Client for the PhonePe payment gateway.

    Attributes:
        CACHE_PREFIX (str): Prefix for the cached OAuth token key
        TOKEN_BUFFER_SECONDS (int): Refresh the token this long before it expires

    Example:
        >>> client = get_phonepe_client()
        >>> order = client.pay("ORD_1", 49900, redirect_url)
        >>> order["redirectUrl"]
    """

    CACHE_PREFIX = "phonepe_token"
    TOKEN_BUFFER_SECONDS = 60

    def __init__(self) -> None:
        self._lock = Lock()
        self.client_id = settings.PHONEPE_CLIENT_ID
        self.client_secret = settings.PHONEPE_CLIENT_SECRET
        self.client_version = settings.PHONEPE_CLIENT_VERSION
        self.timeout = settings.PHONEPE_TIMEOUT

        if settings.PHONEPE_ENV.lower() == "production":
            self.base_url = PRODUCTION_BASE_URL
            self.oauth_url = PRODUCTION_OAUTH_URL
        else:
            self.base_url = SANDBOX_BASE_URL
            self.oauth_url = SANDBOX_OAUTH_URL

    # --- OAuth ---------------------------------------------------------------

    @property
    def _cache_key(self) -> str:
        return f"{self.CACHE_PREFIX}_{self.client_id}"

    def get_authorization_header(self, force_refresh: bool = False) -> str:
        """
        Return the ``Authorization`` header value, requesting a token if needed.

        Raises:
            PaymentAuthException: If the token endpoint rejects the credentials
        """
        with self._lock:
            if not force_refresh:
                cached_header = cache.get(self._cache_key)
                if cached_header:
                    return cached_header

            if not self.client_id or not self.client_secret:
                raise PaymentAuthException(
                    "Missing PHONEPE_CLIENT_ID or PHONEPE_CLIENT_SECRET"
                )

            logger.info("Requesting new PhonePe access token")
            try:
                response = requests.post(
                    self.oauth_url,
                    data={
                        "client_id": self.client_id,
                        "client_version": self.client_version,
                        "client_secret": self.client_secret,
                        "grant_type": "client_credentials",
                    },
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                    timeout=self.timeout,
                )
            except requests.exceptions.RequestException as e:
                raise PaymentAuthException(f"PhonePe token request failed: {e}") from e

            if response.status_code != 200:
                logger.error(
                    "PhonePe token request failed: %s - %s",
                    response.status_code,
                    response.text[:200],
                )
                raise PaymentAuthException(
                    f"PhonePe authentication failed with status {response.status_code}"
                )

            token_data = response.json()
            access_token = token_data.get("access_token")
            if not access_token:
                raise PaymentAuthException("No access_token in PhonePe response", details=token_data)

            header = f"{token_data.get('token_type', 'O-Bearer')} {access_token}"
            expires_at = token_data.get("expires_at")
            if expires_at:
                timeout = int(expires_at - _now().timestamp()) - self.TOKEN_BUFFER_SECONDS
            else:
                timeout = 3600
            cache.set(self._cache_key, header, timeout=max(timeout, 30))
            return header

    # --- Transport -------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        headers = {
            "Content-Type": "application/json",
            "Authorization": self.get_authorization_header(),
        }
        logger.debug("PhonePe %s %s", method, url)

        try:
            response = requests.request(
                method,
                url,
                json=payload,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise PaymentGatewayException(
                f"PhonePe {operation} timed out after {self.timeout}s", operation=operation
            ) from e
        except requests.exceptions.RequestException as e:
            raise PaymentGatewayException(
                f"PhonePe {operation} failed: {e}", operation=operation
            ) from e

        if response.status_code == 401:
            # Token revoked on the gateway side
            cache.delete(self._cache_key)

        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = {"raw": response.text[:500]}

        if not response.ok:
            logger.error(
                "PhonePe %s returned %s: %s", operation, response.status_code, data
            )
            raise PaymentGatewayException(
                data.get("message") or f"PhonePe {operation} failed",
                operation=operation,
                error_code=data.get("code"),
                details=data,
            )
        return data

    # --- Standard checkout ------------------------------------------------------

    def pay(
        self,
        merchant_order_id: str,
        amount_paise: int,
        redirect_url: str,
        meta_info: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Create a checkout order.

        Args:
            merchant_order_id: Our unique order id
            amount_paise: Amount in paise
            redirect_url: Where PhonePe sends the customer afterwards
            meta_info: Up to five ``udfN`` values echoed back by the gateway

        Returns:
            Gateway response with ``orderId``, ``state`` and ``redirectUrl``
        """
        payload = {
            "merchantOrderId": merchant_order_id,
            "amount": int(amount_paise),
            "paymentFlow": {
                "type": "PG_CHECKOUT",
                "merchantUrls": {"redirectUrl": redirect_url},
            },
        }
        if meta_info:
            payload["metaInfo"] = meta_info
        logger.info("Creating PhonePe order %s for %s paise", merchant_order_id, amount_paise)
        return self._request("POST", "/checkout/v2/pay", "pay", payload)

    def order_status(self, merchant_order_id: str) -> Dict[str, Any]:
        return self._request(
            "GET", f"/checkout/v2/order/{merchant_order_id}/status", "order_status"
        )

    # --- Subscriptions ----------------------------------------------------------

    def validate_vpa(self, vpa: str) -> Dict[str, Any]:
        return self._request(
            "POST", "/v2/validate/upi", "validate_vpa", {"type": "VPA", "vpa": vpa}
        )

    def setup_subscription(
        self,
        merchant_order_id: str,
        merchant_subscription_id: str,
        amount_paise: int,
        vpa: str,
        auth_workflow_type: str = "TRANSACTION",
        amount_type: str = "FIXED",
        frequency: str = "YEARLY",
        max_amount_paise: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Start a UPI AutoPay mandate setup with a collect request on ``vpa``.

        The setup order expires after five minutes; the mandate itself is
        valid for thirty years.
        """
        now = _now()
        payload = {
            "merchantOrderId": merchant_order_id,
            "amount": int(amount_paise),
            "expireAt": _epoch_millis(now + SETUP_ORDER_EXPIRY),
            "paymentFlow": {
                "type": "SUBSCRIPTION_SETUP",
                "merchantSubscriptionId": merchant_subscription_id,
                "authWorkflowType": auth_workflow_type,
                "amountType": amount_type,
                "maxAmount": int(max_amount_paise or amount_paise),
                "frequency": frequency,
                "expireAt": _epoch_millis(_add_years(now, SUBSCRIPTION_VALIDITY_YEARS)),
                "paymentMode": {
                    "type": "UPI_COLLECT",
                    "details": {"type": "VPA", "vpa": vpa},
                },
            },
        }
        logger.info(
            "Setting up subscription %s (order %s)", merchant_subscription_id, merchant_order_id
        )
        return self._request("POST", "/subscriptions/v2/setup", "subscription_setup", payload)

    def subscription_order_status(self, merchant_order_id: str) -> Dict[str, Any]:
        return self._request(
            "GET",
            f"/subscriptions/v2/order/{merchant_order_id}/status",
            "subscription_order_status",
            params={"details": "true"},
        )

    def subscription_status(self, merchant_subscription_id: str) -> Dict[str, Any]:
        return self._request(
            "GET",
            f"/subscriptions/v2/{merchant_subscription_id}/status",
            "subscription_status",
            params={"details": "true"},
        )

    def notify_redemption(
        self,
        merchant_order_id: str,
        merchant_subscription_id: str,
        amount_paise: int,
        auto_debit: bool = True,
    ) -> Dict[str, Any]:
        """Send the pre-debit notification that must precede a redemption."""
        payload = {
            "merchantOrderId": merchant_order_id,
            "amount": int(amount_paise),
            "expireAt": _epoch_millis(_now() + REDEMPTION_NOTIFY_EXPIRY),
            "paymentFlow": {
                "type": "SUBSCRIPTION_REDEMPTION",
                "merchantSubscriptionId": merchant_subscription_id,
                "redemptionRetryStrategy": "STANDARD",
                "autoDebit": auto_debit,
            },
        }
        return self._request("POST", "/subscriptions/v2/notify", "redemption_notify", payload)

    def execute_redemption(self, merchant_order_id: str) -> Dict[str, Any]:
        return self._request(
            "POST",
            "/subscriptions/v2/redeem",
            "redemption_execute",
            {"merchantOrderId": merchant_order_id},
        )

    def cancel_subscription(self, merchant_subscription_id: str) -> Dict[str, Any]:
        return self._request(
            "POST",
            f"/subscriptions/v2/{merchant_subscription_id}/cancel",
            "subscription_cancel",
        )


_client: Optional[PhonePeClient] = None


def get_phonepe_client() -> PhonePeClient:
    """Return the process-wide gateway client."""
    global _client
    if _client is None:
        _client = PhonePeClient()
    return _client
