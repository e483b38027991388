"""
UPI AutoPay Subscriptions

Keeps ``MembershipPayment`` and ``RecurringPayment`` rows in step with the
PhonePe subscription state machine. The gateway owns the state; this
module only mirrors it and schedules the next debit.

Lifecycle of one AutoPay membership:

1. Setup: the customer approves the mandate on their UPI app. The setup
   order reaches COMPLETED and the membership becomes ``active`` with
   the first ``next_billing_date`` one year ahead.
2. Notify: 48 to 72 hours before ``next_billing_date`` a pre-debit
   notification creates a PENDING ``RecurringPayment``.
3. Execute: at least 24 hours after the notification the redemption
   is executed.
4. Outcome: a COMPLETED redemption is logged as a ``recurring_payment``
   and moves ``next_billing_date`` forward by one billing period.

Author: Seva Development Team
Version: 1.0.0
"""

import calendar
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.exceptions import NotificationException
from core.notifications import get_email_service
from core.phonepe import get_phonepe_client

from .models import (
    Frequency,
    MembershipPayment,
    MembershipStatus,
    Payment,
    PaymentStatus,
    PaymentType,
    RecurringPayment,
    RedemptionStatus,
)
from .pricing import from_paise, to_paise
from .services import generate_merchant_id, payment_status_for, update_payment_log

logger = logging.getLogger(__name__)

# Setup order state -> membership status
SETUP_STATES = {
    "COMPLETED": MembershipStatus.ACTIVE,
    "FAILED": MembershipStatus.FAILED,
}

# Subscription state -> membership status
SUBSCRIPTION_STATES = {
    "ACTIVE": MembershipStatus.ACTIVE,
    "CANCELLED": MembershipStatus.CANCELLED,
    "REVOKED": MembershipStatus.REVOKED,
    "EXPIRED": MembershipStatus.EXPIRED,
    "PAUSED": MembershipStatus.PAUSED,
}

# Redemption order state -> recurring payment status
REDEMPTION_STATES = {
    "COMPLETED": RedemptionStatus.SUCCESS,
    "FAILED": RedemptionStatus.FAILED,
}

BILLING_DAYS = {
    Frequency.DAILY: 1,
    Frequency.WEEKLY: 7,
    Frequency.FORTNIGHTLY: 14,
}

BILLING_MONTHS = {
    Frequency.MONTHLY: 1,
    Frequency.BIMONTHLY: 2,
    Frequency.QUARTERLY: 3,
    Frequency.HALFYEARLY: 6,
    Frequency.YEARLY: 12,
}

# Memberships in these states are never synced again
FINAL_STATUSES = (
    MembershipStatus.CANCELLED,
    MembershipStatus.REVOKED,
    MembershipStatus.EXPIRED,
    MembershipStatus.FAILED,
)

NOTIFY_WINDOW_START = timedelta(hours=48)
NOTIFY_WINDOW_END = timedelta(hours=72)
EXECUTE_AFTER = timedelta(hours=24)


def add_months(moment: datetime, months: int) -> datetime:
    """Calendar month arithmetic; the day is clamped to the target month's length."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def advance_billing_date(moment: Optional[datetime], frequency: str) -> datetime:
    """
    Next billing date one period after ``moment``.

    ON_DEMAND and unknown frequencies leave the date unchanged.
    """
    moment = moment or timezone.now()
    if frequency in BILLING_DAYS:
        return moment + timedelta(days=BILLING_DAYS[frequency])
    if frequency in BILLING_MONTHS:
        return add_months(moment, BILLING_MONTHS[frequency])
    return moment


def first_payment_detail(data: Dict[str, Any]) -> Dict[str, Any]:
    details = data.get("paymentDetails") or []
    return details[0] if details else {}


def send_thank_you(membership: MembershipPayment) -> None:
    if not membership.email:
        return
    try:
        get_email_service().send_membership_thank_you(
            name=membership.name,
            email=membership.email,
            amount=membership.amount,
            transaction_id=membership.transaction_id,
            membership_type=membership.membership_type,
        )
    except NotificationException as e:
        logger.error("Thank-you email for membership %s failed: %s", membership.pk, e.message)


# ------------------------------------------------------------
# Setup
# ------------------------------------------------------------


def setup_subscription(
    *,
    user,
    contact: Dict[str, str],
    vpa: str,
    membership_type: str = "",
    auth_workflow_type: str = "TRANSACTION",
    amount_type: str = "FIXED",
    frequency: str = Frequency.YEARLY,
    recurring_count: Optional[int] = None,
) -> tuple:
    """
    Start the mandate setup and record it.

    Returns:
        (MembershipPayment, gateway response)
    """
    amount_paise = int(settings.PHONEPE_AUTOPAY_AMOUNT)
    merchant_order_id = generate_merchant_id("ORD")
    merchant_subscription_id = generate_merchant_id("SUB")

    response = get_phonepe_client().setup_subscription(
        merchant_order_id,
        merchant_subscription_id,
        amount_paise,
        vpa,
        auth_workflow_type=auth_workflow_type,
        amount_type=amount_type,
        frequency=frequency,
    )

    with transaction.atomic():
        membership = MembershipPayment.objects.create(
            user=user,
            membership_type=membership_type,
            amount=from_paise(amount_paise),
            status=MembershipStatus.PENDING,
            payment_method=MembershipPayment.AUTOPAY,
            transaction_id=merchant_order_id,
            merchant_order_id=merchant_order_id,
            order_id=response.get("orderId") or merchant_order_id,
            merchant_subscription_id=merchant_subscription_id,
            subscription_state=response.get("state") or "PENDING",
            subscription_frequency=frequency,
            amount_type=amount_type,
            auth_workflow_type=auth_workflow_type,
            recurring_count=recurring_count,
            vpa=vpa,
            metadata={
                "merchantUserId": str(user.pk) if user else "",
                "paymentMode": {"type": "UPI_COLLECT", "details": {"type": "VPA", "vpa": vpa}},
                "maxAmount": amount_paise,
            },
            **contact,
        )
        Payment.objects.create(
            user=user,
            reference_id=merchant_subscription_id,
            amount=membership.amount,
            type=PaymentType.SUBSCRIPTION_SETUP,
            metadata={"membershipPaymentId": membership.pk},
        )

    logger.info(
        "Subscription %s set up for membership %s", merchant_subscription_id, membership.pk
    )
    return membership, response


def apply_setup_status(membership: MembershipPayment, data: Dict[str, Any], callback: bool = False) -> MembershipPayment:
    """
    Mirror a setup order status (API response or webhook payload).

    On the first COMPLETED the subscription starts now, the next billing
    date is one year ahead and the thank-you email goes out.
    """
    state = data.get("state") or ""
    was_active = membership.status == MembershipStatus.ACTIVE

    if state and not was_active:
        # A completed setup order means the mandate itself is live
        membership.subscription_state = "ACTIVE" if state == "COMPLETED" else state
        membership.status = SETUP_STATES.get(state, MembershipStatus.PENDING)
    if data.get("orderId"):
        membership.order_id = data["orderId"]
    subscription_id = (data.get("paymentFlow") or {}).get("subscriptionId")
    if subscription_id:
        membership.phonepe_subscription_id = subscription_id
    detail = first_payment_detail(data)
    if detail.get("transactionId"):
        membership.provider_reference_id = detail["transactionId"]
    if detail.get("errorCode"):
        membership.pay_response_code = detail["errorCode"]
    if callback:
        membership.callback_data = data

    newly_active = state == "COMPLETED" and not was_active
    if newly_active:
        now = timezone.now()
        membership.subscription_start_date = now
        membership.next_billing_date = add_months(now, 12)

    membership.save()
    if state and membership.merchant_subscription_id:
        update_payment_log(membership.merchant_subscription_id, payment_status_for(state))

    if newly_active:
        logger.info("Subscription %s is active", membership.merchant_subscription_id)
        send_thank_you(membership)
    return membership


def apply_subscription_state(membership: MembershipPayment, state: str, data: Optional[Dict[str, Any]] = None,
                             callback: bool = False) -> MembershipPayment:
    if not state:
        return membership
    membership.subscription_state = state
    membership.status = SUBSCRIPTION_STATES.get(state, MembershipStatus.PENDING)
    if data and data.get("subscriptionId"):
        membership.phonepe_subscription_id = data["subscriptionId"]
    if callback:
        membership.callback_data = data
    membership.save()
    return membership


def sync_subscription(membership: MembershipPayment) -> MembershipPayment:
    data = get_phonepe_client().subscription_status(membership.merchant_subscription_id)
    return apply_subscription_state(membership, data.get("state") or "", data)


def cancel_subscription(merchant_subscription_id: str) -> Dict[str, Any]:
    response = get_phonepe_client().cancel_subscription(merchant_subscription_id)
    updated = MembershipPayment.objects.filter(
        merchant_subscription_id=merchant_subscription_id
    ).update(subscription_state="CANCELLED", status=MembershipStatus.CANCELLED, updated_at=timezone.now())
    logger.info("Subscription %s cancelled (%s row(s))", merchant_subscription_id, updated)
    return response


# ------------------------------------------------------------
# Redemptions
# ------------------------------------------------------------


class InactiveSubscription(Exception):
    pass


def notify_redemption(
    membership: MembershipPayment,
    amount: Optional[Decimal] = None,
    auto_debit: bool = True,
    retry_strategy: str = "STANDARD",
) -> RecurringPayment:
    """
    Send the pre-debit notification and record a PENDING redemption.

    Raises:
        InactiveSubscription: If the mandate is not ACTIVE
    """
    if not membership.merchant_subscription_id or membership.subscription_state != "ACTIVE":
        raise InactiveSubscription(membership.pk)

    amount = Decimal(amount) if amount is not None else membership.amount
    merchant_order_id = generate_merchant_id("ORD")
    response = get_phonepe_client().notify_redemption(
        merchant_order_id,
        membership.merchant_subscription_id,
        to_paise(amount),
        auto_debit=auto_debit,
    )

    recurring = RecurringPayment.objects.create(
        membership=membership,
        merchant_order_id=merchant_order_id,
        order_id=response.get("orderId") or "",
        amount=amount,
        status=RedemptionStatus.PENDING,
        state=response.get("state") or "NOTIFICATION_IN_PROGRESS",
        due_date=membership.next_billing_date or timezone.now(),
        notified_at=timezone.now(),
        redemption_retry_strategy=retry_strategy,
        auto_debit=auto_debit,
    )
    logger.info("Redemption %s notified for membership %s", merchant_order_id, membership.pk)
    return recurring


def execute_redemption(recurring: RecurringPayment) -> Dict[str, Any]:
    response = get_phonepe_client().execute_redemption(recurring.merchant_order_id)
    recurring.state = response.get("state") or "PENDING"
    recurring.provider_reference_id = response.get("transactionId") or recurring.provider_reference_id
    recurring.executed_at = timezone.now()
    recurring.save(update_fields=["state", "provider_reference_id", "executed_at", "updated_at"])
    logger.info("Redemption %s executed (%s)", recurring.merchant_order_id, recurring.state)
    return response


def apply_redemption_status(recurring: RecurringPayment, data: Dict[str, Any], callback: bool = False) -> RecurringPayment:
    """
    Mirror a redemption order status. The first COMPLETED logs the debit and
    moves the membership's next billing date one period forward.
    """
    state = data.get("state") or ""
    already_settled = recurring.status == RedemptionStatus.SUCCESS

    if state:
        recurring.state = state
        if not already_settled:
            recurring.status = REDEMPTION_STATES.get(state, RedemptionStatus.PENDING)
    if data.get("orderId"):
        recurring.order_id = data["orderId"]
    detail = first_payment_detail(data)
    if detail.get("transactionId"):
        recurring.provider_reference_id = detail["transactionId"]
    if detail.get("errorCode"):
        recurring.pay_response_code = detail["errorCode"]
    if callback:
        recurring.callback_data = data

    if state != "COMPLETED" or already_settled:
        recurring.save()
        return recurring

    with transaction.atomic():
        recurring.completed_at = timezone.now()
        recurring.save()
        membership = MembershipPayment.objects.select_for_update().get(pk=recurring.membership_id)
        membership.next_billing_date = advance_billing_date(
            membership.next_billing_date, membership.subscription_frequency
        )
        membership.save(update_fields=["next_billing_date", "updated_at"])
        Payment.objects.create(
            user_id=membership.user_id,
            reference_id=recurring.merchant_order_id,
            amount=recurring.amount,
            status=PaymentStatus.SUCCESS,
            type=PaymentType.RECURRING_PAYMENT,
            metadata={"recurringPaymentId": recurring.pk},
        )
    logger.info(
        "Redemption %s completed; next billing %s",
        recurring.merchant_order_id,
        membership.next_billing_date,
    )
    return recurring


# ------------------------------------------------------------
# Webhooks
# ------------------------------------------------------------


def handle_subscription_event(event_name: str, payload: Dict[str, Any]) -> Optional[str]:
    """
    Dispatch a subscription webhook by its event name.

    Returns:
        The handler that processed the event, or None when it was ignored
    """
    if "subscription.setup" in event_name:
        membership = MembershipPayment.objects.filter(
            merchant_order_id=payload.get("merchantOrderId")
        ).first()
        if membership:
            apply_setup_status(membership, payload, callback=True)
        return "setup"

    if "subscription.notification" in event_name:
        changes = {"callback_data": payload, "updated_at": timezone.now()}
        if payload.get("state"):
            changes["state"] = payload["state"]
        RecurringPayment.objects.filter(merchant_order_id=payload.get("merchantOrderId")).update(**changes)
        return "notification"

    if "subscription.redemption" in event_name:
        recurring = RecurringPayment.objects.filter(
            merchant_order_id=payload.get("merchantOrderId")
        ).first()
        if recurring:
            apply_redemption_status(recurring, payload, callback=True)
        return "redemption"

    if any(
        f"subscription.{change}" in event_name
        for change in ("cancelled", "revoked", "paused", "unpaused")
    ):
        memberships = MembershipPayment.objects.filter(
            merchant_subscription_id=payload.get("merchantSubscriptionId")
        )
        for membership in memberships:
            apply_subscription_state(membership, payload.get("state") or "", payload, callback=True)
        return "state_change"

    logger.info("Ignoring subscription webhook event %s", event_name)
    return None


# ------------------------------------------------------------
# Scheduled work
# ------------------------------------------------------------


def subscriptions_to_sync():
    return MembershipPayment.objects.filter(merchant_subscription_id__isnull=False).exclude(
        status__in=FINAL_STATUSES
    )


def subscriptions_due_for_notification(now: Optional[datetime] = None):
    """ACTIVE mandates billing in 48 to 72 hours without a pending redemption."""
    now = now or timezone.now()
    return (
        MembershipPayment.objects.filter(
            subscription_state="ACTIVE",
            next_billing_date__gte=now + NOTIFY_WINDOW_START,
            next_billing_date__lte=now + NOTIFY_WINDOW_END,
        )
        .exclude(recurring_payments__status=RedemptionStatus.PENDING)
        .distinct()
    )


def redemptions_ready_for_execution(now: Optional[datetime] = None):
    """PENDING redemptions notified at least 24 hours ago and not executed yet."""
    now = now or timezone.now()
    return RecurringPayment.objects.filter(
        status=RedemptionStatus.PENDING,
        notified_at__lte=now - EXECUTE_AFTER,
        executed_at__isnull=True,
    ).select_related("membership")
