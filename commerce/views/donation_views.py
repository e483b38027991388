"""
Donation Views

One-off donations through PhonePe Standard Checkout, plus the admin
listing and totals.
"""

import logging
import uuid
from decimal import Decimal, InvalidOperation
from urllib.parse import urlencode

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Q, Sum
from django.http import HttpResponse, HttpResponseRedirect
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole, IsUserRole
from core.exceptions import WebhookValidationException
from core.phonepe import get_phonepe_client, parse_callback, validate_authorization
from core.utils import error_response, paginate, parse_positive_int

from ..models import Donation, Payment, PaymentStatus, PaymentType
from ..pricing import to_paise
from ..serializers import DonationAdminSerializer
from ..services import apply_donation_state, fetch_order_state

logger = logging.getLogger(__name__)

# Largest value Donation.amount (max_digits=10, decimal_places=2) can hold
MAX_AMOUNT = Decimal("99999999.99")


def parse_amount(value):
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not amount.is_finite() or amount < 1 or amount > MAX_AMOUNT:
        return None
    amount = amount.quantize(Decimal("0.01"))
    return amount if amount <= MAX_AMOUNT else None


class CreateDonationView(APIView):
    permission_classes = [IsUserRole]

    def post(self, request: Request) -> Response:
        amount = parse_amount(request.data.get("amount"))
        if amount is None:
            return error_response("Invalid donation amount")

        merchant_order_id = str(uuid.uuid4())
        redirect_url = f"{settings.BACKEND_URL}/api/donations/callback/?" + urlencode(
            {"orderId": merchant_order_id}
        )
        gateway_order = get_phonepe_client().pay(
            merchant_order_id,
            to_paise(amount),
            redirect_url,
            meta_info={"udf1": str(request.user.pk), "udf2": "Donation Payment"},
        )
        if not gateway_order.get("redirectUrl"):
            logger.error("PhonePe returned no redirect URL for donation %s", merchant_order_id)
            return error_response("Failed to initiate PhonePe payment", status.HTTP_502_BAD_GATEWAY)

        with transaction.atomic():
            Donation.objects.create(user=request.user, amount=amount, transaction_id=merchant_order_id)
            Payment.objects.create(
                user=request.user,
                reference_id=merchant_order_id,
                amount=amount,
                type=PaymentType.DONATION,
            )
        logger.info("Donation %s of %s started by user %s", merchant_order_id, amount, request.user.pk)
        return Response({"redirectUrl": gateway_order["redirectUrl"], "orderId": merchant_order_id})


class DonationCallbackView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request: Request):
        order_id = request.query_params.get("orderId")
        if not order_id:
            return HttpResponse("Missing orderId in callback", status=400)

        state, _ = fetch_order_state(order_id)
        donation = apply_donation_state(order_id, state)
        donation_status = donation.status if donation else PaymentStatus.FAILED
        return HttpResponseRedirect(
            f"{settings.FRONTEND_URL}/donation-status?"
            + urlencode({"status": donation_status, "orderId": order_id})
        )


class DonationWebhookView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request: Request):
        try:
            validate_authorization(request.headers.get("Authorization"))
            event = parse_callback(request.data)
        except WebhookValidationException as e:
            logger.warning("Rejected donation webhook: %s", e.message)
            return error_response(e.message, e.status_code)

        if event.merchant_order_id:
            apply_donation_state(event.merchant_order_id, event.state)
        return HttpResponse("OK")


class DonationListView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request: Request) -> Response:
        page = parse_positive_int(request.query_params.get("page"), 1)
        limit = parse_positive_int(request.query_params.get("limit"), 20, maximum=100)
        donations = Donation.objects.select_related("user__profile")
        donation_status = request.query_params.get("status")
        if donation_status:
            donations = donations.filter(status=donation_status)

        items, total, total_pages = paginate(donations, page, limit)
        return Response(
            {
                "success": True,
                "data": DonationAdminSerializer(items, many=True).data,
                "pagination": {"page": page, "limit": limit, "total": total, "totalPages": total_pages},
            }
        )


class DonationStatsView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request: Request) -> Response:
        stats = Donation.objects.aggregate(
            totalAmount=Sum("amount", filter=Q(status=PaymentStatus.SUCCESS)),
            totalDonations=Count("id"),
            successful=Count("id", filter=Q(status=PaymentStatus.SUCCESS)),
            pending=Count("id", filter=Q(status=PaymentStatus.PENDING)),
            failed=Count("id", filter=Q(status=PaymentStatus.FAILED)),
        )
        stats["totalAmount"] = stats["totalAmount"] or Decimal("0")
        return Response({"success": True, "data": stats})
