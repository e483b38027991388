"""
Commerce Services

Order bookkeeping shared by the redirect callbacks, the webhooks and the
status polling endpoints: the same gateway outcome may arrive through
all three, so every transition here is idempotent.

Author: Seva Development Team
Version: 1.0.0
"""

import logging
import secrets
import string
import time
from typing import Optional, Tuple

from django.db import transaction
from django.db.models import F

from core.exceptions import PaymentGatewayException
from core.phonepe import get_phonepe_client

from .models import (
    BookCoupon,
    BookOrder,
    BookPurchase,
    Donation,
    OrderStatus,
    Payment,
    PaymentStatus,
)

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_uppercase + string.digits

# Gateway order state -> BookOrder status
ORDER_STATES = {
    "COMPLETED": OrderStatus.COMPLETED,
    "FAILED": OrderStatus.FAILED,
}

# Gateway order state -> Donation / Payment log status
PAYMENT_STATES = {
    "COMPLETED": PaymentStatus.SUCCESS,
    "FAILED": PaymentStatus.FAILED,
}


def generate_merchant_id(prefix: str) -> str:
    """``<PREFIX>_<epoch millis>_<6 random chars>``, e.g. ``SUB_1718000000000_K3J9QX``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(6))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


def payment_status_for(state: Optional[str]) -> str:
    return PAYMENT_STATES.get(state or "", PaymentStatus.PENDING)


def update_payment_log(reference_id: str, status: str, user=None) -> int:
    queryset = Payment.objects.filter(reference_id=reference_id)
    if user is not None:
        queryset = queryset.filter(user=user)
    return queryset.update(status=status)


# ------------------------------------------------------------
# Book orders
# ------------------------------------------------------------


def grant_purchases(order: BookOrder) -> int:
    """Create the missing BookPurchase rows of a completed order."""
    granted = 0
    for item in order.items.all():
        _, created = BookPurchase.objects.get_or_create(
            user_id=order.user_id,
            book_id=item.book_id,
            defaults={"order": order, "access_granted": True},
        )
        if created:
            granted += 1
            logger.info("Purchase created for user %s, book %s", order.user_id, item.book_id)
    return granted


def apply_order_state(order: BookOrder, state: Optional[str], transaction_id: Optional[str] = None) -> BookOrder:
    """
    Move ``order`` to the outcome reported by the gateway.

    Completed orders are final; repeated notifications only re-run the
    idempotent purchase granting.
    """
    new_status = ORDER_STATES.get(state or "")
    if new_status is None:
        return order

    with transaction.atomic():
        order = BookOrder.objects.select_for_update().get(pk=order.pk)
        if order.status == OrderStatus.COMPLETED:
            grant_purchases(order)
            return order

        order.status = new_status
        if transaction_id:
            order.payment_id = transaction_id
        order.save(update_fields=["status", "payment_id", "updated_at"])
        update_payment_log(order.order_id, PAYMENT_STATES[state], user=order.user)

        if new_status == OrderStatus.COMPLETED:
            grant_purchases(order)
            if order.coupon_id:
                BookCoupon.objects.filter(pk=order.coupon_id).update(times_used=F("times_used") + 1)

    logger.info("Book order %s is now %s", order.order_id, order.status)
    return order


def public_order_status(order: BookOrder) -> str:
    if order.status == OrderStatus.COMPLETED:
        return "PAYMENT_SUCCESS"
    if order.status == OrderStatus.FAILED:
        return "PAYMENT_FAILED"
    return "PENDING"


# ------------------------------------------------------------
# Donations
# ------------------------------------------------------------


def apply_donation_state(merchant_order_id: str, state: Optional[str]) -> Optional[Donation]:
    donation = Donation.objects.filter(transaction_id=merchant_order_id).first()
    if donation is None:
        logger.warning("Donation %s not found", merchant_order_id)
        return None
    new_status = payment_status_for(state)
    if donation.status == PaymentStatus.SUCCESS or new_status == donation.status:
        return donation
    donation.status = new_status
    donation.save(update_fields=["status", "updated_at"])
    update_payment_log(merchant_order_id, new_status)
    logger.info("Donation %s is now %s", merchant_order_id, new_status)
    return donation


def fetch_order_state(merchant_order_id: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Ask the gateway for a checkout order's state.

    Returns:
        (state, gateway transaction id); (None, None) when the gateway
        cannot be reached, which leaves the order pending
    """
    try:
        data = get_phonepe_client().order_status(merchant_order_id)
    except PaymentGatewayException as e:
        logger.error("Order status for %s unavailable: %s", merchant_order_id, e.message)
        return None, None
    detail = (data.get("paymentDetails") or [{}])[0]
    return data.get("state"), detail.get("transactionId") or data.get("transactionId")
