from django.conf import settings
from django.core import mail
from django.test import TestCase

from accounts.models import Role
from content.models import GauKathaBooking, LegalDocument, LegalSection
from core.testing import authenticate, create_account


class LegalDocumentTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = create_account("admin@example.org", role=Role.ADMIN)

    def _document(self, title, sections):
        return {
            "title": title,
            "subtitle": "Gopal Parivar",
            "lastUpdated": "2024-05-01T10:00:00Z",
            "sections": [{"title": name, "content": f"{name} text", "order": i} for i, name in enumerate(sections)],
            "contact": {"email": "legal@example.org", "phoneHours": "10-6"},
        }

    def testLeerOhneDokument(self):
        response = self.client.get("/api/privacy-policy/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "application/json")
        self.assertEqual(response.content, b"null")
        self.assertIsNone(response.json())

    def testSpeichernErsetztDokument(self):
        authenticate(self.client, self.admin)
        self.client.post(
            "/api/privacy-policy/", self._document("Alt", ["Daten", "Cookies"]), content_type="application/json"
        )
        response = self.client.post(
            "/api/privacy-policy/", self._document("Neu", ["Daten"]), content_type="application/json"
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(LegalDocument.objects.filter(kind=LegalDocument.PRIVACY).count(), 1)
        self.assertEqual(LegalSection.objects.count(), 1)

        body = self.client.get("/api/privacy-policy/").json()
        self.assertEqual(body["title"], "Neu")
        self.assertEqual(body["contact"]["phoneHours"], "10-6")
        self.assertEqual([s["title"] for s in body["sections"]], ["Daten"])

    def testSeitenSindGetrennt(self):
        authenticate(self.client, self.admin)
        self.client.post(
            "/api/terms-conditions/", self._document("AGB", ["Nutzung"]), content_type="application/json"
        )
        self.assertIsNone(self.client.get("/api/privacy-policy/").json())
        self.assertEqual(self.client.get("/api/terms-conditions/").json()["title"], "AGB")

    def testSpeichernNurAdmin(self):
        authenticate(self.client, create_account("user@example.org"))
        response = self.client.post(
            "/api/terms-conditions/", self._document("AGB", []), content_type="application/json"
        )
        self.assertEqual(response.status_code, 403)


class SendMessageTests(TestCase):
    def _post(self, **overrides):
        payload = {
            "name": "Radha",
            "email": "radha@example.org",
            "mobile": "98765 43210",
            "message": "Jai Shri Krishna",
        }
        payload.update(overrides)
        return self.client.post("/api/send-message/", payload, content_type="application/json")

    def testSendetZweiMails(self):
        response = self._post()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json()["message"], "Message sent successfully! Check your email for confirmation."
        )
        self.assertEqual(len(mail.outbox), 2)
        admin_mail, confirmation = mail.outbox
        self.assertEqual(admin_mail.to, [settings.ADMIN_EMAIL])
        self.assertEqual(admin_mail.reply_to, ["radha@example.org"])
        self.assertIn("9876543210", admin_mail.subject)
        self.assertEqual(confirmation.to, ["radha@example.org"])

    def testPflichtfelder(self):
        response = self._post(message="")
        self.assertEqual(response.json()["message"], "All fields are required")
        self.assertEqual(mail.outbox, [])

    def testUngueltigeEmail(self):
        response = self._post(email="radha-at-example")
        self.assertEqual(response.json()["message"], "Invalid email format")

    def testUngueltigeNummer(self):
        response = self._post(mobile="12345")
        self.assertEqual(response.json()["message"], "Invalid mobile number")


class GauKathaBookingTests(TestCase):
    def _post(self, **overrides):
        payload = {
            "name": "Shyam",
            "contact": "9123456780",
            "state": "Rajasthan",
            "city": "Jaipur",
            "email": "shyam@example.org",
        }
        payload.update(overrides)
        return self.client.post("/api/message-submit/", payload, content_type="application/json")

    def testBuchungWirdGespeichertUndGemeldet(self):
        response = self._post()

        self.assertEqual(response.status_code, 200)
        booking_id = response.json()["bookingId"]
        self.assertTrue(booking_id.startswith("GK"))
        self.assertEqual(GauKathaBooking.objects.get().booking_id, booking_id)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, [settings.ADMIN_EMAIL])
        self.assertIn("Jaipur, Rajasthan", mail.outbox[0].subject)

    def testFehlendeFelder(self):
        response = self._post(city="")
        self.assertEqual(response.status_code, 400)
        self.assertIn("All fields are required", response.json()["message"])

    def testUngueltigeNummer(self):
        response = self._post(contact="5123456780")
        self.assertIn("valid 10-digit mobile number", response.json()["message"])
        self.assertFalse(GauKathaBooking.objects.exists())
