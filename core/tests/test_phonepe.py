import hashlib
import time
from unittest import mock

import requests
from django.core.cache import cache
from django.test import SimpleTestCase, TestCase, override_settings

from core.exceptions import PaymentAuthException, PaymentGatewayException, WebhookValidationException
from core.phonepe import PhonePeClient, parse_callback, validate_authorization


def gateway_response(status_code=200, json_data=None):
    response = mock.Mock(status_code=status_code, ok=status_code < 400, text="", content=b"{}")
    response.json.return_value = json_data or {}
    return response


@override_settings(PHONEPE_CLIENT_ID="merchant", PHONEPE_CLIENT_SECRET="secret", PHONEPE_ENV="sandbox")
class PhonePeClientTests(TestCase):
    def setUp(self):
        cache.clear()
        token = gateway_response(json_data={
            "access_token": "tok",
            "token_type": "O-Bearer",
            "expires_at": int(time.time()) + 3600,
        })
        post_patcher = mock.patch("core.phonepe.client.requests.post", return_value=token)
        self.token_post = post_patcher.start()
        self.addCleanup(post_patcher.stop)

    def testTokenWirdZwischengespeichert(self):
        client = PhonePeClient()
        self.assertEqual(client.get_authorization_header(), "O-Bearer tok")
        self.assertEqual(client.get_authorization_header(), "O-Bearer tok")
        self.assertEqual(self.token_post.call_count, 1)

    @override_settings(PHONEPE_CLIENT_SECRET="")
    def testFehlendeZugangsdaten(self):
        with self.assertRaises(PaymentAuthException):
            PhonePeClient().get_authorization_header()

    def testAbgelehntesToken(self):
        self.token_post.return_value = gateway_response(status_code=400)
        with self.assertRaises(PaymentAuthException):
            PhonePeClient().get_authorization_header()

    @mock.patch("core.phonepe.client.requests.request")
    def testZahlungInPaise(self, request):
        request.return_value = gateway_response(json_data={"orderId": "OMO1", "redirectUrl": "https://pay"})
        result = PhonePeClient().pay("ORD_1", 49900, "https://api.example.org/cb", meta_info={"udf1": "7"})

        self.assertEqual(result["redirectUrl"], "https://pay")
        method, url = request.call_args.args
        payload = request.call_args.kwargs["json"]
        self.assertEqual(method, "POST")
        self.assertTrue(url.endswith("/apis/pg-sandbox/checkout/v2/pay"))
        self.assertEqual(payload["amount"], 49900)
        self.assertEqual(payload["paymentFlow"]["merchantUrls"]["redirectUrl"], "https://api.example.org/cb")
        self.assertEqual(payload["metaInfo"], {"udf1": "7"})
        self.assertEqual(request.call_args.kwargs["headers"]["Authorization"], "O-Bearer tok")

    @mock.patch("core.phonepe.client.requests.request")
    def testGatewayFehler(self, request):
        request.return_value = gateway_response(status_code=400, json_data={"code": "BAD_REQUEST", "message": "Bad"})
        with self.assertRaises(PaymentGatewayException) as ctx:
            PhonePeClient().order_status("ORD_1")
        self.assertEqual(ctx.exception.message, "Bad")

    @mock.patch("core.phonepe.client.requests.request", side_effect=requests.exceptions.Timeout())
    def testZeitueberschreitung(self, request):
        with self.assertRaises(PaymentGatewayException):
            PhonePeClient().order_status("ORD_1")

    @mock.patch("core.phonepe.client.requests.request")
    def testUngueltigesTokenWirdVerworfen(self, request):
        client = PhonePeClient()
        client.get_authorization_header()
        request.return_value = gateway_response(status_code=401)
        with self.assertRaises(PaymentGatewayException):
            client.order_status("ORD_1")
        self.assertIsNone(cache.get(client._cache_key))


@override_settings(PHONEPE_WEBHOOK_USERNAME="phonepe", PHONEPE_WEBHOOK_PASSWORD="secret")
class WebhookTests(SimpleTestCase):
    signature = hashlib.sha256(b"phonepe:secret").hexdigest()

    def testGueltigeSignatur(self):
        validate_authorization(self.signature)
        validate_authorization(f"SHA256 {self.signature.upper()}")

    def testFalscheSignatur(self):
        with self.assertRaises(WebhookValidationException):
            validate_authorization(hashlib.sha256(b"phonepe:other").hexdigest())
        with self.assertRaises(WebhookValidationException):
            validate_authorization(None)

    @override_settings(PHONEPE_WEBHOOK_PASSWORD="")
    def testNichtKonfiguriert(self):
        with self.assertRaises(WebhookValidationException):
            validate_authorization(self.signature)

    def testEreignisAuswerten(self):
        event = parse_callback({
            "type": "CHECKOUT_ORDER_COMPLETED",
            "payload": {"merchantOrderId": "ORD_1", "paymentDetails": [{"transactionId": "T1"}]},
        })
        self.assertEqual((event.state, event.merchant_order_id, event.transaction_id), ("COMPLETED", "ORD_1", "T1"))

        event = parse_callback({"event": "checkout.order.failed", "payload": {"originalMerchantOrderId": "ORD_2"}})
        self.assertEqual((event.state, event.merchant_order_id, event.transaction_id), ("FAILED", "ORD_2", None))

    def testUngueltigerKoerper(self):
        with self.assertRaises(WebhookValidationException) as ctx:
            parse_callback(["not", "a", "dict"])
        self.assertEqual(ctx.exception.status_code, 400)
