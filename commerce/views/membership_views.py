"""
Membership Views

Life memberships paid once through Standard Checkout, and yearly
memberships paid by UPI AutoPay. The AutoPay bookkeeping lives in
``commerce.subscriptions``; these views validate input, check access and
shape the responses.

Endpoints (under membership/):
- POST create-order/                                  : one-time life membership
- GET  callback/?orderId=                             : one-time checkout redirect
- POST validate-vpa/                                  : UPI VPA lookup
- POST subscription/setup/                            : AutoPay mandate setup
- GET  subscription/order-status/<merchantOrderId>/   : setup order status
- GET  subscription/status/<merchantSubscriptionId>/  : mandate status
- POST subscription/<merchantSubscriptionId>/cancel/  : cancel mandate
- POST redemption/notify/                             : pre-debit notification (admin)
- POST redemption/execute/                            : execute a debit (admin)
- GET  redemption/order-status/<merchantOrderId>/     : debit status (admin)
- POST webhook/                                       : PhonePe subscription events
- GET  /                                              : all memberships (admin)
- GET  <id>/recurring-payments/                       : debits of one membership (admin)

Author: Seva Development Team
Version: 1.0.0
"""

import logging
from decimal import Decimal, InvalidOperation
from urllib.parse import urlencode

from django.conf import settings
from django.db import transaction
from django.http import HttpResponse, HttpResponseRedirect
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import Role
from accounts.permissions import IsAdminRole, IsUserRole, get_role
from core.exceptions import WebhookValidationException
from core.phonepe import get_phonepe_client, parse_callback, validate_authorization
from core.utils import as_bool, error_response, first_error, missing_fields

from ..models import (
    Frequency,
    MembershipPayment,
    Payment,
    PaymentStatus,
    PaymentType,
    RecurringPayment,
)
from ..pricing import to_paise
from ..serializers import (
    MembershipContactSerializer,
    MembershipPaymentSerializer,
    RecurringPaymentSerializer,
)
from ..services import fetch_order_state, generate_merchant_id, payment_status_for, update_payment_log
from .. import subscriptions

logger = logging.getLogger(__name__)

LIFE_MEMBERSHIP = "Life Time"


def _can_access(user, membership: MembershipPayment) -> bool:
    return get_role(user) == Role.ADMIN or (membership.user_id is not None and membership.user_id == user.pk)


def _contact_or_error(data, *required):
    """Validated contact fields, or an error response."""
    missing = missing_fields(data, *required)
    if missing:
        return None, error_response(f"Missing required fields: {', '.join(required)}")
    serializer = MembershipContactSerializer(data=data)
    if not serializer.is_valid():
        return None, error_response(first_error(serializer.errors))
    return serializer.validated_data, None


# ------------------------------------------------------------
# One-time life membership
# ------------------------------------------------------------


class CreateMembershipOrderView(APIView):
    permission_classes = [IsUserRole]

    def post(self, request: Request) -> Response:
        contact, error = _contact_or_error(request.data, "name", "email", "phone")
        if error:
            return error

        amount = Decimal(settings.PHONEPE_LIFE_MEMBERSHIP_AMOUNT)
        merchant_order_id = generate_merchant_id("TXN")
        redirect_url = f"{settings.BACKEND_URL}/api/membership/callback/?" + urlencode(
            {"orderId": merchant_order_id}
        )
        gateway_order = get_phonepe_client().pay(
            merchant_order_id,
            to_paise(amount),
            redirect_url,
            meta_info={"udf1": str(request.user.pk), "udf2": "Life Time Membership Payment"},
        )
        if not gateway_order.get("redirectUrl"):
            logger.error("PhonePe returned no redirect URL for membership %s", merchant_order_id)
            return error_response("Failed to initiate PhonePe payment", status.HTTP_502_BAD_GATEWAY)

        with transaction.atomic():
            membership = MembershipPayment.objects.create(
                user=request.user,
                membership_type=LIFE_MEMBERSHIP,
                amount=amount,
                transaction_id=merchant_order_id,
                merchant_order_id=merchant_order_id,
                order_id=gateway_order.get("orderId") or merchant_order_id,
                payment_method=MembershipPayment.ONE_TIME,
                **contact,
            )
            Payment.objects.create(
                user=request.user,
                reference_id=merchant_order_id,
                amount=amount,
                type=PaymentType.ONE_TIME,
                metadata={"membershipPaymentId": membership.pk},
            )
        logger.info("Life membership %s started by user %s", merchant_order_id, request.user.pk)
        return Response({"redirectUrl": gateway_order["redirectUrl"], "orderId": merchant_order_id})


class MembershipCallbackView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request: Request):
        order_id = request.query_params.get("orderId")
        if not order_id:
            return HttpResponse("Missing orderId in callback", status=400)

        membership = MembershipPayment.objects.filter(merchant_order_id=order_id).first()
        if membership is None:
            logger.error("Callback for unknown membership order %s", order_id)
            return HttpResponseRedirect(
                f"{settings.FRONTEND_URL}/magazine-status?"
                + urlencode({"status": PaymentStatus.FAILED, "txn": order_id})
            )

        state, _ = fetch_order_state(order_id)
        new_status = payment_status_for(state)
        if membership.status != PaymentStatus.SUCCESS and new_status != membership.status:
            membership.status = new_status
            membership.save(update_fields=["status", "updated_at"])
            update_payment_log(order_id, new_status)
            if new_status == PaymentStatus.SUCCESS:
                subscriptions.send_thank_you(membership)

        return HttpResponseRedirect(
            f"{settings.FRONTEND_URL}/magazine-status?"
            + urlencode({"status": membership.status, "txn": order_id, "amount": membership.amount})
        )


# ------------------------------------------------------------
# AutoPay
# ------------------------------------------------------------


class ValidateVpaView(APIView):
    permission_classes = [IsUserRole]

    def post(self, request: Request) -> Response:
        vpa = str(request.data.get("vpa") or "").strip()
        if not vpa:
            return error_response("VPA is required")
        data = get_phonepe_client().validate_vpa(vpa)
        return Response({"success": True, "data": {"valid": bool(data.get("valid")), "name": data.get("name")}})


class SubscriptionSetupView(APIView):
    permission_classes = [IsUserRole]

    def post(self, request: Request) -> Response:
        contact, error = _contact_or_error(request.data, "name", "email", "phone", "vpa")
        if error:
            return error

        frequency = str(request.data.get("frequency") or Frequency.YEARLY).upper()
        if frequency not in Frequency.values:
            return error_response("Invalid subscription frequency")
        recurring_count = request.data.get("recurringCount")

        membership, response = subscriptions.setup_subscription(
            user=request.user,
            contact=contact,
            vpa=str(request.data["vpa"]).strip(),
            membership_type=request.data.get("membershipType") or "",
            auth_workflow_type=request.data.get("authWorkflowType") or "TRANSACTION",
            amount_type=request.data.get("amountType") or "FIXED",
            frequency=frequency,
            recurring_count=int(recurring_count) if str(recurring_count or "").isdigit() else None,
        )
        return Response(
            {
                "success": True,
                "message": "Subscription setup initiated",
                "data": {
                    "membershipPaymentId": membership.pk,
                    "merchantSubscriptionId": membership.merchant_subscription_id,
                    "merchantOrderId": membership.merchant_order_id,
                    "orderId": response.get("orderId"),
                    "state": response.get("state"),
                    "intentUrl": response.get("intentUrl"),
                },
            }
        )


class SubscriptionOrderStatusView(APIView):
    permission_classes = [IsUserRole]

    def get(self, request: Request, merchant_order_id: str) -> Response:
        membership = MembershipPayment.objects.filter(merchant_order_id=merchant_order_id).first()
        if membership is None or not _can_access(request.user, membership):
            return error_response("Subscription not found", status.HTTP_404_NOT_FOUND)

        data = get_phonepe_client().subscription_order_status(merchant_order_id)
        membership = subscriptions.apply_setup_status(membership, data)
        return Response(
            {
                "success": True,
                "data": data,
                "membership": MembershipPaymentSerializer(membership).data,
            }
        )


class SubscriptionStatusView(APIView):
    permission_classes = [IsUserRole]

    def get(self, request: Request, merchant_subscription_id: str) -> Response:
        membership = MembershipPayment.objects.filter(
            merchant_subscription_id=merchant_subscription_id
        ).first()
        if membership is None or not _can_access(request.user, membership):
            return error_response("Subscription not found", status.HTTP_404_NOT_FOUND)

        data = get_phonepe_client().subscription_status(merchant_subscription_id)
        membership = subscriptions.apply_subscription_state(membership, data.get("state") or "", data)
        return Response(
            {
                "success": True,
                "data": data,
                "membership": MembershipPaymentSerializer(membership).data,
            }
        )


class CancelSubscriptionView(APIView):
    permission_classes = [IsUserRole]

    def post(self, request: Request, merchant_subscription_id: str) -> Response:
        membership = MembershipPayment.objects.filter(
            merchant_subscription_id=merchant_subscription_id
        ).first()
        if membership is None or not _can_access(request.user, membership):
            return error_response("Subscription not found", status.HTTP_404_NOT_FOUND)

        data = subscriptions.cancel_subscription(merchant_subscription_id)
        return Response({"success": True, "message": "Subscription cancelled successfully", "data": data})


class NotifyRedemptionView(APIView):
    permission_classes = [IsAdminRole]

    def post(self, request: Request) -> Response:
        membership_id = request.data.get("membershipPaymentId")
        membership = (
            MembershipPayment.objects.filter(pk=membership_id).first()
            if str(membership_id or "").isdigit()
            else None
        )
        amount = request.data.get("amount")
        if amount not in (None, ""):
            try:
                amount = Decimal(str(amount))
            except InvalidOperation:
                return error_response("Invalid amount")
        else:
            amount = None

        if membership is None:
            return error_response("Invalid or inactive subscription")
        try:
            recurring = subscriptions.notify_redemption(
                membership,
                amount=amount,
                auto_debit=as_bool(request.data.get("autoDebit")) is not False,
                retry_strategy=request.data.get("redemptionRetryStrategy") or "STANDARD",
            )
        except subscriptions.InactiveSubscription:
            return error_response("Invalid or inactive subscription")

        return Response(
            {
                "success": True,
                "message": "Redemption notification sent",
                "data": {
                    "recurringPaymentId": recurring.pk,
                    "merchantOrderId": recurring.merchant_order_id,
                    "orderId": recurring.order_id,
                    "state": recurring.state,
                },
            }
        )


class ExecuteRedemptionView(APIView):
    permission_classes = [IsAdminRole]

    def post(self, request: Request) -> Response:
        recurring_id = request.data.get("recurringPaymentId")
        recurring = (
            RecurringPayment.objects.filter(pk=recurring_id).first()
            if str(recurring_id or "").isdigit()
            else None
        )
        if recurring is None:
            return error_response("Recurring payment not found", status.HTTP_404_NOT_FOUND)
        data = subscriptions.execute_redemption(recurring)
        return Response({"success": True, "message": "Redemption executed", "data": data})


class RedemptionOrderStatusView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request: Request, merchant_order_id: str) -> Response:
        recurring = RecurringPayment.objects.filter(merchant_order_id=merchant_order_id).first()
        if recurring is None:
            return error_response("Recurring payment not found", status.HTTP_404_NOT_FOUND)
        data = get_phonepe_client().subscription_order_status(merchant_order_id)
        recurring = subscriptions.apply_redemption_status(recurring, data)
        return Response(
            {"success": True, "data": data, "recurringPayment": RecurringPaymentSerializer(recurring).data}
        )


class SubscriptionWebhookView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request: Request) -> Response:
        try:
            validate_authorization(request.headers.get("Authorization"))
            event = parse_callback(request.data)
        except WebhookValidationException as e:
            logger.warning("Rejected subscription webhook: %s", e.message)
            return error_response(e.message, e.status_code)

        logger.info("PhonePe subscription webhook %s", event.event)
        subscriptions.handle_subscription_event(event.event, event.payload)
        return Response({"success": True, "message": "Webhook processed"})


# ------------------------------------------------------------
# Admin listings
# ------------------------------------------------------------


class MembershipListView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request: Request) -> Response:
        memberships = MembershipPayment.objects.all()
        params = request.query_params
        if str(params.get("userId", "")).isdigit():
            memberships = memberships.filter(user_id=params["userId"])
        if params.get("email"):
            memberships = memberships.filter(email__iexact=params["email"])
        if params.get("phone"):
            memberships = memberships.filter(phone=params["phone"])
        return Response({"success": True, "data": MembershipPaymentSerializer(memberships, many=True).data})


class RecurringPaymentListView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request: Request, membership_id: int) -> Response:
        payments = RecurringPayment.objects.filter(membership_id=membership_id)
        return Response({"success": True, "data": RecurringPaymentSerializer(payments, many=True).data})
