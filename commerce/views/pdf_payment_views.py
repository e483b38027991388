"""
PDF Book Payment Views

PhonePe Standard Checkout for single book purchases.

Flow:
1. ``create-order`` prices the book (optional coupon), creates the
   gateway order and records a PENDING BookOrder with its item and a
   payment log entry.
2. PhonePe redirects the customer to ``callback``; the order state is
   fetched from the gateway, purchases are granted on success and the
   customer is sent back to the frontend.
3. PhonePe posts ``webhook`` server-to-server with the same outcome.
4. The frontend may poll ``status/<transactionId>/`` meanwhile.

Author: Seva Development Team
Version: 1.0.0
"""

import logging
import uuid
from urllib.parse import urlencode

from django.conf import settings
from django.db import transaction
from django.http import HttpResponse, HttpResponseRedirect
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsUserRole, is_owner_or_admin
from core.exceptions import WebhookValidationException
from core.phonepe import get_phonepe_client, parse_callback, validate_authorization
from core.utils import error_response

from ..models import Book, BookOrder, BookOrderItem, BookPurchase, OrderStatus, Payment, PaymentType
from ..pricing import quote, redeemable_coupon, to_paise
from ..serializers import BookPurchaseSerializer, BookSummarySerializer
from ..services import apply_order_state, fetch_order_state, public_order_status

logger = logging.getLogger(__name__)


class CreateBookOrderView(APIView):
    permission_classes = [IsUserRole]

    def post(self, request: Request) -> Response:
        book_id = request.data.get("bookId")
        coupon_code = request.data.get("couponCode")
        if not book_id:
            return error_response("पुस्तक ID आवश्यक है")

        book = Book.objects.filter(pk=book_id).first() if str(book_id).isdigit() else None
        if book is None:
            return error_response("पुस्तक नहीं मिली", status.HTTP_404_NOT_FOUND)
        if BookPurchase.objects.filter(user=request.user, book=book).exists():
            return error_response("आपने यह पुस्तक पहले ही खरीद ली है")

        coupon = redeemable_coupon(coupon_code)
        price = quote(book.price, coupon)
        merchant_order_id = str(uuid.uuid4())
        redirect_url = f"{settings.BACKEND_URL}/api/pdf-payment/callback/?" + urlencode(
            {"transactionId": merchant_order_id}
        )

        gateway_order = get_phonepe_client().pay(
            merchant_order_id,
            to_paise(price.final),
            redirect_url,
            meta_info={
                "udf1": str(request.user.pk),
                "udf2": f"Book Purchase: {book.name}",
                "udf3": str(book.pk),
                "udf4": coupon.code if coupon else "NO_COUPON",
            },
        )
        payment_url = gateway_order.get("redirectUrl")
        if not payment_url:
            logger.error("PhonePe returned no redirect URL for %s: %s", merchant_order_id, gateway_order)
            return error_response("भुगतान शुरू करने में विफल", status.HTTP_502_BAD_GATEWAY)

        with transaction.atomic():
            order = BookOrder.objects.create(
                user=request.user,
                coupon=coupon,
                order_id=merchant_order_id,
                total_amount=price.original,
                discount_amount=price.discount,
                final_amount=price.final,
            )
            BookOrderItem.objects.create(order=order, book=book, price=price.final)
            Payment.objects.create(
                user=request.user,
                reference_id=merchant_order_id,
                amount=price.final,
                type=PaymentType.BOOK_PURCHASE,
                metadata={"bookId": book.pk, "orderId": order.pk},
            )

        logger.info(
            "Book order %s started by user %s for book %s (%s, discount %s)",
            merchant_order_id,
            request.user.pk,
            book.pk,
            price.final,
            price.discount,
        )
        return Response(
            {
                "success": True,
                "message": "भुगतान सफलतापूर्वक शुरू किया गया",
                "paymentUrl": payment_url,
                "transactionId": merchant_order_id,
                "amount": price.final,
                "originalAmount": price.original,
                "discount": price.discount,
                "couponApplied": coupon is not None,
            }
        )


class BookPaymentCallbackView(APIView):
    """Customer redirect from PhonePe after the checkout page."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request: Request):
        transaction_id = request.query_params.get("transactionId")
        if not transaction_id:
            return HttpResponse("Missing transactionId in callback", status=400)

        failure_url = f"{settings.FRONTEND_URL}/donation-status?" + urlencode(
            {"status": "failed", "transactionId": transaction_id}
        )
        order = BookOrder.objects.filter(order_id=transaction_id).first()
        if order is None:
            logger.error("Callback for unknown book order %s", transaction_id)
            return HttpResponseRedirect(failure_url)

        state, gateway_transaction_id = fetch_order_state(transaction_id)
        order = apply_order_state(order, state, gateway_transaction_id)

        if order.status == OrderStatus.COMPLETED:
            return HttpResponseRedirect(f"{settings.FRONTEND_URL}/pdf-books")
        return HttpResponseRedirect(failure_url)


class BookPaymentWebhookView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request: Request):
        try:
            validate_authorization(request.headers.get("Authorization"))
            event = parse_callback(request.data)
        except WebhookValidationException as e:
            logger.warning("Rejected book payment webhook: %s", e.message)
            return error_response(e.message, e.status_code)

        order = BookOrder.objects.filter(order_id=event.merchant_order_id).first()
        if order is None:
            logger.warning("Webhook for unknown book order %s", event.merchant_order_id)
        else:
            apply_order_state(order, event.state, event.transaction_id)
        return HttpResponse("OK")


class BookPaymentStatusView(APIView):
    permission_classes = [IsUserRole]

    def get(self, request: Request, transaction_id: str) -> Response:
        order = (
            BookOrder.objects.filter(order_id=transaction_id, user=request.user)
            .prefetch_related("items__book")
            .first()
        )
        if order is None:
            return error_response("भुगतान नहीं मिला", status.HTTP_404_NOT_FOUND)

        if order.status == OrderStatus.PENDING:
            state, gateway_transaction_id = fetch_order_state(transaction_id)
            order = apply_order_state(order, state, gateway_transaction_id)

        return Response(
            {
                "success": True,
                "paymentStatus": public_order_status(order),
                "transactionId": order.order_id,
                "amount": order.final_amount,
                "discount": order.discount_amount,
                "books": BookSummarySerializer([item.book for item in order.items.all()], many=True).data,
                "createdAt": order.created_at,
            }
        )


class PurchasedBooksView(APIView):
    permission_classes = [IsUserRole]

    def get(self, request: Request, user_id: int) -> Response:
        if not is_owner_or_admin(request.user, user_id):
            return error_response("Forbidden", status.HTTP_403_FORBIDDEN)
        purchases = (
            BookPurchase.objects.filter(user_id=user_id, access_granted=True)
            .select_related("book")
            .order_by("-purchased_at")
        )
        return Response({"success": True, "purchases": BookPurchaseSerializer(purchases, many=True).data})
