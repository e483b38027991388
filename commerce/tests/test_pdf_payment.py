"""
Book checkout: order creation, gateway redirect callback, webhook and
status polling.
"""

import hashlib
from decimal import Decimal
from unittest import mock

from django.test import TestCase, override_settings

from commerce.models import (
    Book,
    BookCoupon,
    BookOrder,
    BookOrderItem,
    BookPurchase,
    CouponType,
    OrderStatus,
    Payment,
    PaymentStatus,
    PaymentType,
)
from core.exceptions import PaymentGatewayException
from core.testing import authenticate, create_account, patch_phonepe

WEBHOOK_AUTH = hashlib.sha256(b"phonepe:secret").hexdigest()


def completed(transaction_id="T2406011234"):
    return {"state": "COMPLETED", "paymentDetails": [{"transactionId": transaction_id}]}


@override_settings(
    FRONTEND_URL="https://gopalparivar.test",
    BACKEND_URL="https://api.gopalparivar.test",
    PHONEPE_WEBHOOK_USERNAME="phonepe",
    PHONEPE_WEBHOOK_PASSWORD="secret",
)
class BookPaymentTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = create_account("devotee@example.org")
        cls.other = create_account("other@example.org")
        cls.book = Book.objects.create(
            name="Gau Mahima", author="Sant Ji", price=Decimal("200.00"), file_key="books/pdfs/file1.pdf"
        )

    def setUp(self):
        self.gateway = mock.Mock()
        self.gateway.pay.return_value = {"orderId": "OMO123", "redirectUrl": "https://phonepe.test/checkout/OMO123"}
        patcher = patch_phonepe(self.gateway)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _pending_order(self, order_id="order-1", coupon=None):
        order = BookOrder.objects.create(
            user=self.user,
            coupon=coupon,
            order_id=order_id,
            total_amount=Decimal("200"),
            final_amount=Decimal("200"),
        )
        BookOrderItem.objects.create(order=order, book=self.book, price=Decimal("200"))
        Payment.objects.create(
            user=self.user, reference_id=order_id, amount=Decimal("200"), type=PaymentType.BOOK_PURCHASE
        )
        return order

    def _webhook(self, body, auth=WEBHOOK_AUTH):
        return self.client.post(
            "/api/pdf-payment/webhook/", body, content_type="application/json", HTTP_AUTHORIZATION=auth
        )

    def testBestellungMitGutschein(self):
        BookCoupon.objects.create(code="FLAT50", discount=50, type=CouponType.FIXED)
        authenticate(self.client, self.user)
        response = self.client.post(
            "/api/pdf-payment/create-order/",
            {"bookId": self.book.pk, "couponCode": "flat50"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["paymentUrl"], "https://phonepe.test/checkout/OMO123")
        self.assertTrue(data["couponApplied"])
        self.assertEqual(data["amount"], 150.0)

        merchant_order_id, amount, redirect_url = self.gateway.pay.call_args[0]
        self.assertEqual(merchant_order_id, data["transactionId"])
        self.assertEqual(amount, 15000)
        self.assertEqual(
            redirect_url,
            f"https://api.gopalparivar.test/api/pdf-payment/callback/?transactionId={merchant_order_id}",
        )
        self.assertEqual(self.gateway.pay.call_args[1]["meta_info"]["udf4"], "FLAT50")

        order = BookOrder.objects.get(order_id=merchant_order_id)
        self.assertEqual(order.status, OrderStatus.PENDING)
        self.assertEqual(order.discount_amount, Decimal("50"))
        self.assertEqual(order.items.get().price, Decimal("150"))
        self.assertEqual(Payment.objects.get(reference_id=merchant_order_id).type, PaymentType.BOOK_PURCHASE)

    def testUngueltigerGutscheinWirdIgnoriert(self):
        BookCoupon.objects.create(code="OLD", discount=50, type=CouponType.FIXED, active=False)
        authenticate(self.client, self.user)
        response = self.client.post(
            "/api/pdf-payment/create-order/",
            {"bookId": self.book.pk, "couponCode": "OLD"},
            content_type="application/json",
        )
        self.assertFalse(response.json()["couponApplied"])
        self.assertEqual(self.gateway.pay.call_args[0][1], 20000)

    def testBereitsGekauft(self):
        BookPurchase.objects.create(user=self.user, book=self.book)
        authenticate(self.client, self.user)
        response = self.client.post(
            "/api/pdf-payment/create-order/", {"bookId": self.book.pk}, content_type="application/json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "आपने यह पुस्तक पहले ही खरीद ली है")
        self.gateway.pay.assert_not_called()

    def testUnbekanntesBuch(self):
        authenticate(self.client, self.user)
        response = self.client.post("/api/pdf-payment/create-order/", {"bookId": 999}, content_type="application/json")
        self.assertEqual(response.status_code, 404)
        response = self.client.post("/api/pdf-payment/create-order/", {}, content_type="application/json")
        self.assertEqual(response.json()["message"], "पुस्तक ID आवश्यक है")

    def testCallbackErfolg(self):
        coupon = BookCoupon.objects.create(code="FLAT50", discount=50, type=CouponType.FIXED)
        order = self._pending_order(coupon=coupon)
        self.gateway.order_status.return_value = completed()

        response = self.client.get("/api/pdf-payment/callback/", {"transactionId": order.order_id})

        self.assertEqual(response.status_code, 302)
        self.assertEqual(response["Location"], "https://gopalparivar.test/pdf-books")
        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.COMPLETED)
        self.assertEqual(order.payment_id, "T2406011234")
        self.assertTrue(BookPurchase.objects.filter(user=self.user, book=self.book, access_granted=True).exists())
        self.assertEqual(Payment.objects.get(reference_id=order.order_id).status, PaymentStatus.SUCCESS)
        coupon.refresh_from_db()
        self.assertEqual(coupon.times_used, 1)

    def testCallbackFehlschlag(self):
        order = self._pending_order()
        self.gateway.order_status.return_value = {"state": "FAILED"}
        response = self.client.get("/api/pdf-payment/callback/", {"transactionId": order.order_id})
        self.assertEqual(
            response["Location"],
            f"https://gopalparivar.test/donation-status?status=failed&transactionId={order.order_id}",
        )
        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.FAILED)
        self.assertFalse(BookPurchase.objects.exists())

    def testCallbackOhneTransaktion(self):
        self.assertEqual(self.client.get("/api/pdf-payment/callback/").status_code, 400)

    def testWebhookIstIdempotent(self):
        coupon = BookCoupon.objects.create(code="FLAT50", discount=50, type=CouponType.FIXED)
        order = self._pending_order(coupon=coupon)
        body = {
            "event": "checkout.order.completed",
            "payload": {"merchantOrderId": order.order_id, **completed()},
        }

        for _ in range(2):
            response = self._webhook(body)
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.content, b"OK")

        self.assertEqual(BookPurchase.objects.filter(user=self.user).count(), 1)
        coupon.refresh_from_db()
        self.assertEqual(coupon.times_used, 1)

    def testWebhookFehlschlagNachErfolgBleibtErfolg(self):
        order = self._pending_order()
        self._webhook({"event": "checkout.order.completed", "payload": {"merchantOrderId": order.order_id}})
        self._webhook({"event": "checkout.order.failed", "payload": {"merchantOrderId": order.order_id}})
        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.COMPLETED)

    def testWebhookFalscheSignatur(self):
        order = self._pending_order()
        response = self._webhook(
            {"event": "checkout.order.completed", "payload": {"merchantOrderId": order.order_id}},
            auth=hashlib.sha256(b"phonepe:wrong").hexdigest(),
        )
        self.assertEqual(response.status_code, 401)
        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.PENDING)

    @override_settings(PHONEPE_WEBHOOK_USERNAME="", PHONEPE_WEBHOOK_PASSWORD="")
    def testWebhookOhneKonfiguration(self):
        response = self._webhook({"event": "checkout.order.completed", "payload": {}})
        self.assertEqual(response.status_code, 401)

    def testStatusAbfrage(self):
        order = self._pending_order()
        self.gateway.order_status.return_value = {"state": "PENDING"}
        authenticate(self.client, self.user)

        response = self.client.get(f"/api/pdf-payment/status/{order.order_id}/")
        self.assertEqual(response.json()["paymentStatus"], "PENDING")
        self.assertEqual(response.json()["books"][0]["name"], "Gau Mahima")

        self.gateway.order_status.return_value = completed()
        response = self.client.get(f"/api/pdf-payment/status/{order.order_id}/")
        self.assertEqual(response.json()["paymentStatus"], "PAYMENT_SUCCESS")

        self.gateway.order_status.reset_mock()
        self.client.get(f"/api/pdf-payment/status/{order.order_id}/")
        self.gateway.order_status.assert_not_called()

    def testStatusGatewayNichtErreichbar(self):
        order = self._pending_order()
        self.gateway.order_status.side_effect = PaymentGatewayException("Gateway timeout")
        authenticate(self.client, self.user)
        response = self.client.get(f"/api/pdf-payment/status/{order.order_id}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["paymentStatus"], "PENDING")

    def testStatusNurEigeneBestellung(self):
        order = self._pending_order()
        authenticate(self.client, self.other)
        self.assertEqual(self.client.get(f"/api/pdf-payment/status/{order.order_id}/").status_code, 404)

    def testGekaufteBuecher(self):
        BookPurchase.objects.create(user=self.user, book=self.book)
        authenticate(self.client, self.user)
        response = self.client.get(f"/api/pdf-payment/books/purchased/{self.user.pk}/")
        purchases = response.json()["purchases"]
        self.assertEqual([(p["bookId"], p["name"]) for p in purchases], [(self.book.pk, "Gau Mahima")])

        authenticate(self.client, self.other)
        response = self.client.get(f"/api/pdf-payment/books/purchased/{self.user.pk}/")
        self.assertEqual(response.status_code, 403)
