"""
Coupon administration, checkout validation and discount arithmetic.
"""

import datetime
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from django.utils import timezone

from accounts.models import Role
from commerce.models import Book, BookCoupon, BookOrder, CouponType
from commerce.pricing import CouponError, check_coupon, quote, redeemable_coupon, to_paise
from core.testing import authenticate, create_account


def make_book(name="Gau Mahima", price="200.00"):
    return Book.objects.create(name=name, author="Sant Ji", price=Decimal(price), file_key="books/pdfs/file1.pdf")


class DiscountArithmeticTests(SimpleTestCase):
    def testProzentrabatt(self):
        coupon = BookCoupon(code="P10", discount=Decimal("10"), type=CouponType.PERCENTAGE)
        price = quote(Decimal("199.00"), coupon)
        self.assertEqual(price.discount, Decimal("19.90"))
        self.assertEqual(price.final, Decimal("179.10"))

    def testFesterRabattNieUeberPreis(self):
        coupon = BookCoupon(code="F500", discount=Decimal("500"), type=CouponType.FIXED)
        price = quote(Decimal("200.00"), coupon)
        self.assertEqual(price.discount, Decimal("200.00"))
        self.assertEqual(price.final, Decimal("0.00"))

    def testOhneGutschein(self):
        price = quote(Decimal("50"))
        self.assertEqual((price.original, price.discount, price.final), (Decimal("50"), Decimal("0.00"), Decimal("50")))

    def testPaise(self):
        self.assertEqual(to_paise(Decimal("179.10")), 17910)
        self.assertEqual(to_paise("11000"), 1100000)


class CouponRulesTests(TestCase):
    def testCodeWirdGrossgeschrieben(self):
        coupon = BookCoupon.objects.create(code=" diwali ", discount=Decimal("5"), type=CouponType.FIXED)
        self.assertEqual(coupon.code, "DIWALI")
        self.assertEqual(redeemable_coupon("Diwali"), coupon)

    def testInaktivAbgelaufenErschoepft(self):
        inactive = BookCoupon(code="A", discount=1, type=CouponType.FIXED, active=False)
        expired = BookCoupon(
            code="B", discount=1, type=CouponType.FIXED, expires_at=timezone.now() - datetime.timedelta(minutes=1)
        )
        exhausted = BookCoupon(code="C", discount=1, type=CouponType.FIXED, usage_limit=2, times_used=2)
        messages = []
        for coupon in (inactive, expired, exhausted):
            with self.assertRaises(CouponError) as ctx:
                check_coupon(coupon)
            messages.append(ctx.exception.message)
        self.assertEqual(
            messages,
            [
                "This coupon is no longer active",
                "This coupon has expired",
                "This coupon has reached its usage limit",
            ],
        )

    def testUnbekannterCode(self):
        with self.assertRaises(CouponError) as ctx:
            check_coupon(None)
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertIsNone(redeemable_coupon("NOPE"))


class CouponApiTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = create_account("admin@example.org", role=Role.ADMIN)
        cls.editor = create_account("editor@example.org", role=Role.SUBADMIN)
        cls.user = create_account("devotee@example.org")
        cls.book = make_book()

    def _create(self, **overrides):
        payload = {"code": "seva20", "discount": "20", "type": "percentage", "description": "Seva"}
        payload.update(overrides)
        return self.client.post("/api/coupons/", payload, content_type="application/json")

    def testAnlegen(self):
        authenticate(self.client, self.editor)
        response = self._create()
        self.assertEqual(response.status_code, 201)
        coupon = response.json()["data"]["coupon"]
        self.assertEqual(coupon["code"], "SEVA20")
        self.assertEqual(coupon["type"], "PERCENTAGE")
        self.assertTrue(coupon["active"])
        self.assertEqual(coupon["orderCount"], 0)

    def testDoppelterCode(self):
        BookCoupon.objects.create(code="SEVA20", discount=5, type=CouponType.FIXED)
        authenticate(self.client, self.admin)
        response = self._create()
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Coupon code already exists")

    def testValidierung(self):
        authenticate(self.client, self.admin)
        cases = [
            ({"type": "bogus"}, "Type must be either PERCENTAGE or FIXED"),
            ({"discount": "0"}, "Discount must be greater than 0"),
            ({"discount": "150"}, "Percentage discount must be between 0 and 100"),
            ({"code": ""}, "Code, discount, and type are required"),
        ]
        for overrides, message in cases:
            with self.subTest(overrides=overrides):
                response = self._create(**overrides)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()["message"], message)

    def testNurRedakteureVerwalten(self):
        authenticate(self.client, self.user)
        self.assertEqual(self._create().status_code, 403)
        self.assertEqual(self.client.get("/api/coupons/").status_code, 403)

    def testUmschalten(self):
        coupon = BookCoupon.objects.create(code="TOGGLE", discount=5, type=CouponType.FIXED)
        authenticate(self.client, self.editor)
        response = self.client.patch(f"/api/coupons/toggle/{coupon.pk}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Coupon deactivated successfully")
        coupon.refresh_from_db()
        self.assertFalse(coupon.active)

    def testLoeschenNurOhneBestellungen(self):
        coupon = BookCoupon.objects.create(code="USED", discount=5, type=CouponType.FIXED)
        BookOrder.objects.create(
            user=self.user,
            coupon=coupon,
            order_id="order-1",
            total_amount=Decimal("200"),
            discount_amount=Decimal("5"),
            final_amount=Decimal("195"),
        )
        authenticate(self.client, self.editor)
        self.assertEqual(self.client.delete(f"/api/coupons/{coupon.pk}/").status_code, 403)

        authenticate(self.client, self.admin)
        response = self.client.delete(f"/api/coupons/{coupon.pk}/")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Cannot delete coupon. It has been used in 1 order(s).")

    def testPruefenBerechnetEndpreis(self):
        BookCoupon.objects.create(code="FLAT50", discount=50, type=CouponType.FIXED)
        authenticate(self.client, self.user)
        response = self.client.post(
            "/api/coupons/validate/", {"code": "flat50", "bookId": self.book.pk}, content_type="application/json"
        )
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["coupon"]["code"], "FLAT50")
        self.assertEqual(Decimal(str(data["discountAmount"])), Decimal("50"))
        self.assertEqual(Decimal(str(data["finalAmount"])), Decimal("150"))

    def testPruefenUnbekannt(self):
        authenticate(self.client, self.user)
        response = self.client.post(
            "/api/coupons/validate/", {"code": "MISSING", "bookId": self.book.pk}, content_type="application/json"
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Invalid coupon code")
