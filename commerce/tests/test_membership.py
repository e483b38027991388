"""
Life memberships, UPI AutoPay mandates and their redemptions.
"""

import datetime
import hashlib
from decimal import Decimal
from unittest import mock

from django.core import mail
from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone

from accounts.models import Role
from commerce.models import (
    Frequency,
    MembershipPayment,
    MembershipStatus,
    Payment,
    PaymentStatus,
    PaymentType,
    RecurringPayment,
    RedemptionStatus,
)
from commerce.subscriptions import advance_billing_date, apply_subscription_state, handle_subscription_event
from core.testing import authenticate, create_account, patch_phonepe

UTC = datetime.timezone.utc
WEBHOOK_AUTH = hashlib.sha256(b"phonepe:secret").hexdigest()

CONTACT = {"name": "Radha Devi", "email": "radha@example.org", "phone": "9812345678", "city": "Mathura"}


def autopay_membership(user, **extra):
    fields = {
        "user": user,
        "name": "Radha Devi",
        "email": "radha@example.org",
        "phone": "9812345678",
        "amount": Decimal("11.00"),
        "payment_method": MembershipPayment.AUTOPAY,
        "merchant_order_id": "ORD_1_AAAAAA",
        "transaction_id": "ORD_1_AAAAAA",
        "merchant_subscription_id": "SUB_1_AAAAAA",
        "subscription_frequency": Frequency.YEARLY,
    }
    fields.update(extra)
    return MembershipPayment.objects.create(**fields)


class BillingDateTests(SimpleTestCase):
    def testMonatsendeWirdBegrenzt(self):
        moment = datetime.datetime(2024, 1, 31, 9, 30, tzinfo=UTC)
        self.assertEqual(advance_billing_date(moment, Frequency.MONTHLY), datetime.datetime(2024, 2, 29, 9, 30, tzinfo=UTC))
        self.assertEqual(
            advance_billing_date(datetime.datetime(2023, 1, 31, tzinfo=UTC), Frequency.MONTHLY),
            datetime.datetime(2023, 2, 28, tzinfo=UTC),
        )

    def testPerioden(self):
        moment = datetime.datetime(2024, 11, 15, tzinfo=UTC)
        expected = {
            Frequency.DAILY: datetime.datetime(2024, 11, 16, tzinfo=UTC),
            Frequency.WEEKLY: datetime.datetime(2024, 11, 22, tzinfo=UTC),
            Frequency.FORTNIGHTLY: datetime.datetime(2024, 11, 29, tzinfo=UTC),
            Frequency.BIMONTHLY: datetime.datetime(2025, 1, 15, tzinfo=UTC),
            Frequency.QUARTERLY: datetime.datetime(2025, 2, 15, tzinfo=UTC),
            Frequency.HALFYEARLY: datetime.datetime(2025, 5, 15, tzinfo=UTC),
            Frequency.YEARLY: datetime.datetime(2025, 11, 15, tzinfo=UTC),
            Frequency.ON_DEMAND: moment,
        }
        for frequency, date in expected.items():
            with self.subTest(frequency=frequency):
                self.assertEqual(advance_billing_date(moment, frequency), date)

    def testSchaltjahrJaehrlich(self):
        moment = datetime.datetime(2024, 2, 29, tzinfo=UTC)
        self.assertEqual(advance_billing_date(moment, Frequency.YEARLY), datetime.datetime(2025, 2, 28, tzinfo=UTC))


class SubscriptionStateTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = create_account("radha@example.org")

    def testZustandsabbildung(self):
        membership = autopay_membership(self.user)
        expected = {
            "ACTIVE": MembershipStatus.ACTIVE,
            "CANCELLED": MembershipStatus.CANCELLED,
            "REVOKED": MembershipStatus.REVOKED,
            "EXPIRED": MembershipStatus.EXPIRED,
            "PAUSED": MembershipStatus.PAUSED,
            "ACTIVATION_IN_PROGRESS": MembershipStatus.PENDING,
        }
        for state, status in expected.items():
            with self.subTest(state=state):
                apply_subscription_state(membership, state)
                membership.refresh_from_db()
                self.assertEqual((membership.subscription_state, membership.status), (state, status))

    def testLeererZustandAendertNichts(self):
        membership = autopay_membership(self.user, status=MembershipStatus.ACTIVE, subscription_state="ACTIVE")
        apply_subscription_state(membership, "")
        membership.refresh_from_db()
        self.assertEqual(membership.status, MembershipStatus.ACTIVE)

    def testSetupOhneZustandBehaeltMandat(self):
        membership = autopay_membership(
            self.user, merchant_order_id="ORD_P", subscription_state="ACTIVATION_IN_PROGRESS"
        )
        handle_subscription_event("subscription.setup.order.completed", {"merchantOrderId": "ORD_P", "orderId": "OMO1"})
        membership.refresh_from_db()
        self.assertEqual(membership.subscription_state, "ACTIVATION_IN_PROGRESS")
        self.assertEqual(membership.status, MembershipStatus.PENDING)
        self.assertEqual(membership.order_id, "OMO1")

    def testRedemptionOhneZustandBehaeltStatus(self):
        membership = autopay_membership(self.user, status=MembershipStatus.ACTIVE, subscription_state="ACTIVE")
        recurring = RecurringPayment.objects.create(
            membership=membership,
            merchant_order_id="ORD_R",
            amount=Decimal("11"),
            status=RedemptionStatus.FAILED,
            state="FAILED",
        )
        handle_subscription_event("subscription.redemption.order.failed", {"merchantOrderId": "ORD_R", "orderId": "OMO2"})
        handle_subscription_event("subscription.notification.completed", {"merchantOrderId": "ORD_R"})
        recurring.refresh_from_db()
        self.assertEqual((recurring.state, recurring.status), ("FAILED", RedemptionStatus.FAILED))
        self.assertEqual(recurring.order_id, "OMO2")


@override_settings(
    FRONTEND_URL="https://gopalparivar.test",
    BACKEND_URL="https://api.gopalparivar.test",
    PHONEPE_WEBHOOK_USERNAME="phonepe",
    PHONEPE_WEBHOOK_PASSWORD="secret",
    PHONEPE_LIFE_MEMBERSHIP_AMOUNT=11000,
    PHONEPE_AUTOPAY_AMOUNT=1100,
)
class MembershipApiTestCase(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = create_account("admin@example.org", role=Role.ADMIN)
        cls.user = create_account("radha@example.org")
        cls.other = create_account("other@example.org")

    def setUp(self):
        self.gateway = mock.Mock()
        patcher = patch_phonepe(self.gateway)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _post(self, url, payload):
        return self.client.post(url, payload, content_type="application/json")


class LifeMembershipTests(MembershipApiTestCase):
    def testBestellungAnlegen(self):
        self.gateway.pay.return_value = {"orderId": "OMO1", "redirectUrl": "https://phonepe.test/checkout/OMO1"}
        authenticate(self.client, self.user)
        response = self._post("/api/membership/create-order/", CONTACT)

        self.assertEqual(response.status_code, 200)
        order_id = response.json()["orderId"]
        self.assertTrue(order_id.startswith("TXN_"))
        merchant_order_id, amount, redirect_url = self.gateway.pay.call_args[0]
        self.assertEqual((merchant_order_id, amount), (order_id, 1100000))
        self.assertEqual(
            redirect_url, f"https://api.gopalparivar.test/api/membership/callback/?orderId={order_id}"
        )
        membership = MembershipPayment.objects.get(merchant_order_id=order_id)
        self.assertEqual(membership.membership_type, "Life Time")
        self.assertEqual(membership.city, "Mathura")
        self.assertEqual(membership.status, MembershipStatus.PENDING)
        self.assertEqual(Payment.objects.get(reference_id=order_id).type, PaymentType.ONE_TIME)

    def testPflichtfelder(self):
        authenticate(self.client, self.user)
        response = self._post("/api/membership/create-order/", {"name": "Radha", "email": "radha@example.org"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Missing required fields: name, email, phone")
        self.gateway.pay.assert_not_called()

    def testCallbackErfolgSendetDankEinmal(self):
        membership = MembershipPayment.objects.create(
            user=self.user, amount=Decimal("11000"), merchant_order_id="TXN_1_ABCDEF", **CONTACT
        )
        Payment.objects.create(reference_id="TXN_1_ABCDEF", amount=Decimal("11000"), type=PaymentType.ONE_TIME)
        self.gateway.order_status.return_value = {"state": "COMPLETED"}

        for _ in range(2):
            response = self.client.get("/api/membership/callback/", {"orderId": "TXN_1_ABCDEF"})
            self.assertEqual(
                response["Location"],
                "https://gopalparivar.test/magazine-status?status=success&txn=TXN_1_ABCDEF&amount=11000.00",
            )

        membership.refresh_from_db()
        self.assertEqual(membership.status, PaymentStatus.SUCCESS)
        self.assertEqual(Payment.objects.get(reference_id="TXN_1_ABCDEF").status, PaymentStatus.SUCCESS)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["radha@example.org"])

    def testCallbackFehlschlag(self):
        MembershipPayment.objects.create(amount=Decimal("11000"), merchant_order_id="TXN_2_ABCDEF", **CONTACT)
        self.gateway.order_status.return_value = {"state": "FAILED"}
        response = self.client.get("/api/membership/callback/", {"orderId": "TXN_2_ABCDEF"})
        self.assertIn("status=failed", response["Location"])
        self.assertEqual(mail.outbox, [])


class AutoPaySetupTests(MembershipApiTestCase):
    def testVpaPruefen(self):
        self.gateway.validate_vpa.return_value = {"valid": True, "name": "RADHA DEVI"}
        authenticate(self.client, self.user)
        response = self._post("/api/membership/validate-vpa/", {"vpa": "radha@ybl"})
        self.assertEqual(response.json()["data"], {"valid": True, "name": "RADHA DEVI"})
        self.gateway.validate_vpa.assert_called_once_with("radha@ybl")

    def testEinrichtung(self):
        self.gateway.setup_subscription.return_value = {
            "orderId": "OMO77",
            "state": "PENDING",
            "intentUrl": "upi://mandate?pa=x",
        }
        authenticate(self.client, self.user)
        response = self._post("/api/membership/subscription/setup/", {**CONTACT, "vpa": "radha@ybl"})

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertTrue(data["merchantSubscriptionId"].startswith("SUB_"))
        self.assertTrue(data["merchantOrderId"].startswith("ORD_"))
        self.assertEqual(data["intentUrl"], "upi://mandate?pa=x")

        args, kwargs = self.gateway.setup_subscription.call_args
        self.assertEqual(args[2:], (1100, "radha@ybl"))
        self.assertEqual(
            (kwargs["auth_workflow_type"], kwargs["amount_type"], kwargs["frequency"]),
            ("TRANSACTION", "FIXED", Frequency.YEARLY),
        )

        membership = MembershipPayment.objects.get(pk=data["membershipPaymentId"])
        self.assertEqual(membership.amount, Decimal("11.00"))
        self.assertEqual(membership.payment_method, MembershipPayment.AUTOPAY)
        self.assertEqual(membership.status, MembershipStatus.PENDING)
        self.assertEqual(membership.order_id, "OMO77")
        log = Payment.objects.get(reference_id=membership.merchant_subscription_id)
        self.assertEqual(log.type, PaymentType.SUBSCRIPTION_SETUP)

    def testEinrichtungPflichtfelderUndFrequenz(self):
        authenticate(self.client, self.user)
        response = self._post("/api/membership/subscription/setup/", CONTACT)
        self.assertEqual(response.json()["message"], "Missing required fields: name, email, phone, vpa")

        response = self._post(
            "/api/membership/subscription/setup/", {**CONTACT, "vpa": "radha@ybl", "frequency": "hourly"}
        )
        self.assertEqual(response.json()["message"], "Invalid subscription frequency")
        self.gateway.setup_subscription.assert_not_called()

    def testAuftragsstatusAbgeschlossen(self):
        membership = autopay_membership(self.user)
        self.gateway.subscription_order_status.return_value = {
            "orderId": "OMO77",
            "state": "COMPLETED",
            "paymentFlow": {"subscriptionId": "OMS55"},
            "paymentDetails": [{"transactionId": "OM123"}],
        }
        authenticate(self.client, self.user)

        before = timezone.now()
        response = self.client.get(f"/api/membership/subscription/order-status/{membership.merchant_order_id}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["membership"]["status"], MembershipStatus.ACTIVE)

        membership.refresh_from_db()
        self.assertEqual(membership.subscription_state, "ACTIVE")
        self.assertEqual(membership.phonepe_subscription_id, "OMS55")
        self.assertGreaterEqual(membership.subscription_start_date, before)
        self.assertEqual(membership.next_billing_date.year, membership.subscription_start_date.year + 1)
        self.assertEqual(len(mail.outbox), 1)

        self.client.get(f"/api/membership/subscription/order-status/{membership.merchant_order_id}/")
        self.assertEqual(len(mail.outbox), 1)

    def testAuftragsstatusFehlgeschlagen(self):
        membership = autopay_membership(self.user)
        self.gateway.subscription_order_status.return_value = {"state": "FAILED"}
        authenticate(self.client, self.user)
        self.client.get(f"/api/membership/subscription/order-status/{membership.merchant_order_id}/")
        membership.refresh_from_db()
        self.assertEqual(membership.status, MembershipStatus.FAILED)
        self.assertIsNone(membership.next_billing_date)

    def testFremdeMitgliedschaftUnsichtbar(self):
        membership = autopay_membership(self.user)
        authenticate(self.client, self.other)
        response = self.client.get(f"/api/membership/subscription/status/{membership.merchant_subscription_id}/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Subscription not found")
        self.gateway.subscription_status.assert_not_called()

    def testAbonnementstatus(self):
        membership = autopay_membership(self.user, status=MembershipStatus.ACTIVE, subscription_state="ACTIVE")
        self.gateway.subscription_status.return_value = {"state": "PAUSED", "subscriptionId": "OMS55"}
        authenticate(self.client, self.admin)
        response = self.client.get(f"/api/membership/subscription/status/{membership.merchant_subscription_id}/")
        self.assertEqual(response.json()["membership"]["status"], MembershipStatus.PAUSED)

    def testKuendigen(self):
        membership = autopay_membership(self.user, status=MembershipStatus.ACTIVE, subscription_state="ACTIVE")
        self.gateway.cancel_subscription.return_value = {}
        authenticate(self.client, self.user)
        response = self._post(f"/api/membership/subscription/{membership.merchant_subscription_id}/cancel/", {})
        self.assertEqual(response.status_code, 200)
        membership.refresh_from_db()
        self.assertEqual((membership.status, membership.subscription_state), (MembershipStatus.CANCELLED, "CANCELLED"))


class RedemptionTests(MembershipApiTestCase):
    def _active(self, **extra):
        return autopay_membership(
            self.user,
            status=MembershipStatus.ACTIVE,
            subscription_state="ACTIVE",
            next_billing_date=datetime.datetime(2025, 1, 31, 6, 0, tzinfo=UTC),
            **extra,
        )

    def _recurring(self, membership, merchant_order_id="ORD_9_REDEEM", **extra):
        return RecurringPayment.objects.create(
            membership=membership,
            merchant_order_id=merchant_order_id,
            amount=Decimal("11.00"),
            notified_at=timezone.now(),
            **extra,
        )

    def testBenachrichtigen(self):
        membership = self._active()
        self.gateway.notify_redemption.return_value = {"orderId": "OMO88", "state": "NOTIFICATION_IN_PROGRESS"}
        authenticate(self.client, self.admin)
        response = self._post("/api/membership/redemption/notify/", {"membershipPaymentId": membership.pk})

        self.assertEqual(response.status_code, 200)
        recurring = RecurringPayment.objects.get(pk=response.json()["data"]["recurringPaymentId"])
        self.assertEqual(recurring.status, RedemptionStatus.PENDING)
        self.assertEqual(recurring.due_date, membership.next_billing_date)
        self.assertTrue(recurring.auto_debit)
        args, kwargs = self.gateway.notify_redemption.call_args
        self.assertEqual(args[1:], (membership.merchant_subscription_id, 1100))
        self.assertTrue(kwargs["auto_debit"])

    def testBenachrichtigenMitBetrag(self):
        membership = self._active()
        self.gateway.notify_redemption.return_value = {}
        authenticate(self.client, self.admin)
        self._post(
            "/api/membership/redemption/notify/",
            {"membershipPaymentId": membership.pk, "amount": "25.50", "autoDebit": False},
        )
        args, kwargs = self.gateway.notify_redemption.call_args
        self.assertEqual(args[2], 2550)
        self.assertFalse(kwargs["auto_debit"])

    def testBenachrichtigenNurAktiv(self):
        membership = autopay_membership(self.user, subscription_state="PAUSED")
        authenticate(self.client, self.admin)
        response = self._post("/api/membership/redemption/notify/", {"membershipPaymentId": membership.pk})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Invalid or inactive subscription")
        self.gateway.notify_redemption.assert_not_called()

    def testNurAdmin(self):
        membership = self._active()
        authenticate(self.client, self.user)
        response = self._post("/api/membership/redemption/notify/", {"membershipPaymentId": membership.pk})
        self.assertEqual(response.status_code, 403)

    def testAusfuehren(self):
        recurring = self._recurring(self._active())
        self.gateway.execute_redemption.return_value = {"state": "PENDING", "transactionId": "OM999"}
        authenticate(self.client, self.admin)
        response = self._post("/api/membership/redemption/execute/", {"recurringPaymentId": recurring.pk})
        self.assertEqual(response.status_code, 200)
        recurring.refresh_from_db()
        self.assertIsNotNone(recurring.executed_at)
        self.assertEqual(recurring.provider_reference_id, "OM999")

    def testAbbuchungAbgeschlossen(self):
        membership = self._active(subscription_frequency=Frequency.MONTHLY)
        recurring = self._recurring(membership)
        self.gateway.subscription_order_status.return_value = {
            "state": "COMPLETED",
            "paymentDetails": [{"transactionId": "OM1000"}],
        }
        authenticate(self.client, self.admin)

        for _ in range(2):
            response = self.client.get(f"/api/membership/redemption/order-status/{recurring.merchant_order_id}/")
            self.assertEqual(response.json()["recurringPayment"]["status"], RedemptionStatus.SUCCESS)

        membership.refresh_from_db()
        self.assertEqual(membership.next_billing_date, datetime.datetime(2025, 2, 28, 6, 0, tzinfo=UTC))
        logs = Payment.objects.filter(type=PaymentType.RECURRING_PAYMENT)
        self.assertEqual([(log.reference_id, log.status) for log in logs], [(recurring.merchant_order_id, "success")])

    def testAbbuchungFehlgeschlagen(self):
        membership = self._active()
        recurring = self._recurring(membership)
        self.gateway.subscription_order_status.return_value = {
            "state": "FAILED",
            "paymentDetails": [{"errorCode": "INSUFFICIENT_FUNDS"}],
        }
        authenticate(self.client, self.admin)
        self.client.get(f"/api/membership/redemption/order-status/{recurring.merchant_order_id}/")
        recurring.refresh_from_db()
        self.assertEqual((recurring.status, recurring.pay_response_code), (RedemptionStatus.FAILED, "INSUFFICIENT_FUNDS"))
        membership.refresh_from_db()
        self.assertEqual(membership.next_billing_date, datetime.datetime(2025, 1, 31, 6, 0, tzinfo=UTC))

    def testListen(self):
        membership = self._active()
        autopay_membership(
            self.other, email="other@example.org", merchant_order_id="ORD_2", merchant_subscription_id="SUB_2"
        )
        self._recurring(membership)
        authenticate(self.client, self.admin)

        response = self.client.get("/api/membership/", {"email": "RADHA@example.org"})
        self.assertEqual([m["id"] for m in response.json()["data"]], [membership.pk])

        response = self.client.get(f"/api/membership/{membership.pk}/recurring-payments/")
        self.assertEqual(response.json()["data"][0]["merchantOrderId"], "ORD_9_REDEEM")


class SubscriptionWebhookTests(MembershipApiTestCase):
    def _webhook(self, event, payload, auth=WEBHOOK_AUTH):
        return self.client.post(
            "/api/membership/webhook/",
            {"event": event, "payload": payload},
            content_type="application/json",
            HTTP_AUTHORIZATION=auth,
        )

    def testEinrichtungAbgeschlossen(self):
        membership = autopay_membership(self.user)
        response = self._webhook(
            "subscription.setup.order.completed",
            {"merchantOrderId": membership.merchant_order_id, "state": "COMPLETED"},
        )
        self.assertEqual(response.json(), {"success": True, "message": "Webhook processed"})
        membership.refresh_from_db()
        self.assertEqual(membership.status, MembershipStatus.ACTIVE)
        self.assertEqual(membership.callback_data["state"], "COMPLETED")
        self.assertEqual(len(mail.outbox), 1)

    def testAbbuchung(self):
        membership = autopay_membership(
            self.user,
            status=MembershipStatus.ACTIVE,
            subscription_state="ACTIVE",
            next_billing_date=datetime.datetime(2025, 3, 1, tzinfo=UTC),
        )
        recurring = RecurringPayment.objects.create(
            membership=membership, merchant_order_id="ORD_5_REDEEM", amount=Decimal("11.00")
        )
        self._webhook("subscription.redemption.order.completed", {"merchantOrderId": "ORD_5_REDEEM", "state": "COMPLETED"})
        recurring.refresh_from_db()
        self.assertEqual(recurring.status, RedemptionStatus.SUCCESS)
        membership.refresh_from_db()
        self.assertEqual(membership.next_billing_date, datetime.datetime(2026, 3, 1, tzinfo=UTC))

    def testBenachrichtigungsZustand(self):
        membership = autopay_membership(self.user)
        RecurringPayment.objects.create(membership=membership, merchant_order_id="ORD_6_REDEEM", amount=Decimal("11"))
        self._webhook("subscription.notification.completed", {"merchantOrderId": "ORD_6_REDEEM", "state": "NOTIFIED"})
        self.assertEqual(RecurringPayment.objects.get().state, "NOTIFIED")

    def testWiderruf(self):
        membership = autopay_membership(self.user, status=MembershipStatus.ACTIVE, subscription_state="ACTIVE")
        self._webhook(
            "subscription.revoked",
            {"merchantSubscriptionId": membership.merchant_subscription_id, "state": "REVOKED"},
        )
        membership.refresh_from_db()
        self.assertEqual(membership.status, MembershipStatus.REVOKED)

    def testFalscheAutorisierung(self):
        membership = autopay_membership(self.user)
        response = self._webhook(
            "subscription.setup.order.completed",
            {"merchantOrderId": membership.merchant_order_id, "state": "COMPLETED"},
            auth="not-a-hash",
        )
        self.assertEqual(response.status_code, 401)
        membership.refresh_from_db()
        self.assertEqual(membership.status, MembershipStatus.PENDING)
