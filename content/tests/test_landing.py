"""
Landing page tests: public cached reads, banner/card administration and
cache invalidation on writes.
"""

from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase

from accounts.models import Role
from content.models import Banner, Card, DirectorMessage
from core import cache as content_cache
from core.testing import InMemoryStorage, authenticate, create_account, patch_storage

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"0" * 64


def png(name="banner.png"):
    return SimpleUploadedFile(name, PNG_BYTES, content_type="image/png")


class LandingPublicTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        Banner.objects.create(title="Zweiter", image_url="https://cdn.example.org/b2.png", order=2)
        Banner.objects.create(title="Erster", image_url="https://cdn.example.org/b1.png", order=1)
        Card.objects.create(title="गौ सेवा", title_en="Gau Seva", link="/seva", order=1)

    def setUp(self):
        cache.clear()

    def testBannersSortiertNachOrder(self):
        response = self.client.get("/api/landing/banners/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([b["title"] for b in response.json()], ["Erster", "Zweiter"])

    def testBannersWerdenGecached(self):
        self.client.get("/api/landing/banners/")
        self.assertIsNotNone(cache.get(content_cache.BANNER_KEY))

        # A row written behind the API's back stays invisible until invalidation
        Banner.objects.create(title="Dritter", image_url="https://cdn.example.org/b3.png", order=3)
        response = self.client.get("/api/landing/banners/")
        self.assertEqual(len(response.json()), 2)

    def testQuoteOhneNachrichtIst404(self):
        response = self.client.get("/api/landing/quote/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Message not found")

    def testQuoteLiefertNeuesteNachricht(self):
        DirectorMessage.objects.create(info="Alt")
        DirectorMessage.objects.create(info="Neu")
        response = self.client.get("/api/landing/quote/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["info"], "Neu")

    def testCardsHabenCamelCaseFelder(self):
        response = self.client.get("/api/landing/cards/")
        self.assertEqual(response.json()[0]["titleEn"], "Gau Seva")

    def testFoundationsLandingFormat(self):
        response = self.client.get("/api/landing/foundations/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"foundations": []})


class BannerAdminTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = create_account("admin@example.org", role=Role.ADMIN)
        cls.user = create_account("user@example.org")

    def setUp(self):
        cache.clear()
        self.storage = InMemoryStorage()
        patcher = patch_storage("content.views.landing_views", self.storage)
        patcher.start()
        self.addCleanup(patcher.stop)

    def testUploadOhneLoginIst401(self):
        response = self.client.post("/api/admin/banners/", {"file": png()})
        self.assertEqual(response.status_code, 401)

    def testUploadAlsUserIst403(self):
        authenticate(self.client, self.user)
        response = self.client.post("/api/admin/banners/", {"file": png()})
        self.assertEqual(response.status_code, 403)

    def testUploadOhneDatei(self):
        authenticate(self.client, self.admin)
        response = self.client.post("/api/admin/banners/", {"title": "Leer"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "No file uploaded")

    def testUploadFalscherDateityp(self):
        authenticate(self.client, self.admin)
        text_file = SimpleUploadedFile("notes.txt", b"hello", content_type="text/plain")
        response = self.client.post("/api/admin/banners/", {"file": text_file})
        self.assertEqual(response.status_code, 400)

    def testUploadSpeichertUndInvalidiertCache(self):
        cache.set(content_cache.BANNER_KEY, [{"stale": True}], 600)
        authenticate(self.client, self.admin)

        response = self.client.post("/api/admin/banners/", {"file": png(), "title": "Holi", "order": "3"})

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["message"], "Banner uploaded successfully")
        self.assertEqual(body["banner"]["order"], 3)
        self.assertTrue(body["banner"]["imageUrl"].startswith("https://cdn.example.org/banners/"))
        self.assertIsNone(cache.get(content_cache.BANNER_KEY))
        self.assertEqual(len(self.storage.objects), 1)

    def testDeleteEntferntObjekt(self):
        banner = Banner.objects.create(
            title="Alt", image_url="https://cdn.example.org/banners/x.png", image_key="banners/x.png"
        )
        authenticate(self.client, self.admin)
        response = self.client.delete(f"/api/admin/banners/{banner.pk}/")
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Banner.objects.filter(pk=banner.pk).exists())
        self.assertEqual(self.storage.deleted, ["banners/x.png"])

    def testReorderSetztReihenfolge(self):
        first = Banner.objects.create(title="A", image_url="https://cdn.example.org/a.png", order=1)
        second = Banner.objects.create(title="B", image_url="https://cdn.example.org/b.png", order=2)
        authenticate(self.client, self.admin)

        response = self.client.put(
            "/api/admin/banners/reorder/",
            {"orderList": [{"id": first.pk, "order": 2}, {"id": second.pk, "order": 1}]},
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True, "message": "Banner order updated"})
        first.refresh_from_db()
        second.refresh_from_db()
        self.assertEqual((first.order, second.order), (2, 1))

    def testReorderUngueltigeListe(self):
        authenticate(self.client, self.admin)
        response = self.client.put(
            "/api/admin/banners/reorder/", {"orderList": "1,2"}, content_type="application/json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Invalid order list")


class CardAndMessageAdminTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = create_account("admin@example.org", role=Role.ADMIN)

    def setUp(self):
        cache.clear()
        authenticate(self.client, self.admin)

    def testCardPflichtfelder(self):
        response = self.client.post("/api/admin/cards/", {"title": "Ohne Link"}, content_type="application/json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Title and link are required")

    def testCardAnlegenUndBearbeiten(self):
        cache.set(content_cache.CARDS_KEY, [], 600)
        response = self.client.post(
            "/api/admin/cards/",
            {"title": "दान", "titleEn": "Donate", "link": "/donate"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertIsNone(cache.get(content_cache.CARDS_KEY))
        card_id = response.json()["card"]["id"]

        response = self.client.put(
            f"/api/admin/cards/{card_id}/", {"link": "/donations"}, content_type="application/json"
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(Card.objects.get(pk=card_id).link, "/donations")
        self.assertEqual(Card.objects.get(pk=card_id).title_en, "Donate")

    def testMessagePflichtfeld(self):
        response = self.client.post("/api/admin/messages/", {}, content_type="application/json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Message info is required")

    def testMessageAnlegenInvalidiertQuote(self):
        DirectorMessage.objects.create(info="Alt")
        self.client.get("/api/landing/quote/")

        response = self.client.post("/api/admin/messages/", {"info": "Jai Gau Mata"}, content_type="application/json")
        self.assertEqual(response.status_code, 201)

        response = self.client.get("/api/landing/quote/")
        self.assertEqual(response.json()["info"], "Jai Gau Mata")
