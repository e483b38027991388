from decimal import Decimal

from django.contrib.auth.models import User
from django.test import TestCase, override_settings

from accounts.models import Role
from commerce.models import Book, BookPurchase, Donation, MembershipPayment, PaymentStatus
from core.testing import authenticate, create_account


class UserAdminTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = create_account("admin@example.org", role=Role.ADMIN, name="Admin")
        cls.editor = create_account("editor@example.org", role=Role.SUBADMIN, name="Editor")
        cls.user = create_account("radha@example.org", name="Radha Devi", phone="9812345678")

    def setUp(self):
        authenticate(self.client, self.admin)

    def testListeMitSucheUndStatistik(self):
        response = self.client.get("/api/admin/users/", {"search": "radha"})
        body = response.json()
        self.assertEqual([u["email"] for u in body["data"]], ["radha@example.org"])
        self.assertEqual(body["pagination"]["totalUsers"], 1)
        self.assertEqual(body["stats"], {"total": 1, "admins": 1, "subadmins": 1, "users": 1})

    def testListeNachRolle(self):
        response = self.client.get("/api/admin/users/", {"role": "SUBADMIN"})
        self.assertEqual([u["email"] for u in response.json()["data"]], ["editor@example.org"])

    def testSeitenweise(self):
        for i in range(7):
            create_account(f"devotee{i}@example.org")
        body = self.client.get("/api/admin/users/", {"page": 2}).json()
        self.assertEqual(len(body["data"]), 4)
        self.assertEqual(body["pagination"]["totalPages"], 2)
        self.assertFalse(body["pagination"]["hasNextPage"])
        self.assertTrue(body["pagination"]["hasPrevPage"])

    @override_settings(DEFAULT_USER_PASSWORD="Seva-Standard-99")
    def testAnlegenMitStandardpasswort(self):
        response = self.client.post(
            "/api/admin/users/",
            {"name": "Govind", "email": "Govind@Example.org", "phone": "9000000000", "role": "SUBADMIN"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 201)
        data = response.json()["data"]
        self.assertEqual((data["email"], data["role"], data["isVerified"]), ("govind@example.org", "subadmin", True))
        self.assertTrue(User.objects.get(username="govind@example.org").check_password("Seva-Standard-99"))

    def testDoppelteEmail(self):
        response = self.client.post(
            "/api/admin/users/",
            {"name": "X", "email": "radha@example.org", "phone": "1"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["email"], ["Email already exists"])

    def testTeilaktualisierung(self):
        response = self.client.put(
            f"/api/admin/users/{self.user.pk}/", {"phone": "9111111111"}, content_type="application/json"
        )
        self.assertEqual(response.status_code, 200)
        self.user.profile.refresh_from_db()
        self.assertEqual((self.user.profile.phone, self.user.profile.name), ("9111111111", "Radha Devi"))

    def testLeeresUpdate(self):
        for method in (self.client.put, self.client.patch):
            with self.subTest(method=method.__name__):
                response = method(f"/api/admin/users/{self.user.pk}/", {}, content_type="application/json")
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()["non_field_errors"], ["No fields provided to update"])
        self.user.profile.refresh_from_db()
        self.assertEqual(self.user.profile.name, "Radha Devi")

    def testRolleAendern(self):
        response = self.client.patch(
            f"/api/admin/users/{self.user.pk}/role/", {"role": "Admin"}, content_type="application/json"
        )
        self.assertEqual(response.json()["data"]["role"], "admin")

        response = self.client.patch(
            f"/api/admin/users/{self.user.pk}/role/", {"role": "owner"}, content_type="application/json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["role"], ["Invalid role. Must be admin, subadmin, or user"])

    def testLoeschen(self):
        response = self.client.delete(f"/api/admin/users/{self.admin.pk}/")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Cannot delete your own account")

        response = self.client.delete(f"/api/admin/users/{self.user.pk}/")
        self.assertEqual(response.status_code, 200)
        self.assertFalse(User.objects.filter(pk=self.user.pk).exists())

    def testNurAdmin(self):
        authenticate(self.client, self.editor)
        self.assertEqual(self.client.get("/api/admin/users/").status_code, 403)


class UserDataTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = create_account("admin@example.org", role=Role.ADMIN)
        cls.user = create_account("radha@example.org", name="Radha Devi")
        cls.other = create_account("other@example.org")
        book = Book.objects.create(name="Gau Mahima", author="Sant Ji", price=Decimal("200"), file_key="books/pdfs/a.pdf")
        BookPurchase.objects.create(user=cls.user, book=book)
        Donation.objects.create(user=cls.user, amount=Decimal("501"), transaction_id="don-1", status=PaymentStatus.SUCCESS)
        MembershipPayment.objects.create(
            user=cls.user,
            name="Radha Devi",
            email="radha@example.org",
            phone="9812345678",
            amount=Decimal("11000"),
            merchant_order_id="TXN_1",
        )

    def testEigeneDaten(self):
        authenticate(self.client, self.user)
        data = self.client.get(f"/api/users/{self.user.pk}/data/").json()["data"]
        self.assertEqual(data["user"]["name"], "Radha Devi")
        self.assertEqual([b["name"] for b in data["purchasedBooks"]], ["Gau Mahima"])
        self.assertEqual([d["transactionId"] for d in data["donations"]], ["don-1"])
        self.assertEqual([m["merchantOrderId"] for m in data["memberships"]], ["TXN_1"])

    def testAdminSiehtAlles(self):
        authenticate(self.client, self.admin)
        self.assertEqual(self.client.get(f"/api/users/{self.user.pk}/data/").status_code, 200)

    def testFremdeDatenVerboten(self):
        authenticate(self.client, self.other)
        self.assertEqual(self.client.get(f"/api/users/{self.user.pk}/data/").status_code, 403)
