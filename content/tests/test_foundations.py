import json

from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase

from accounts.models import Role
from content.models import Foundation, FoundationStat, GopalPariwar
from core import cache as content_cache
from core.testing import InMemoryStorage, authenticate, create_account, patch_storage

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"0" * 64


def logo(name="logo.png"):
    return SimpleUploadedFile(name, PNG_BYTES, content_type="image/png")


def make_foundation(name, order, **extra):
    return Foundation.objects.create(
        name=name, logo_url=f"https://cdn.example.org/{name}.png", logo_key=f"foundations/{name}.png",
        order=order, **extra
    )


class FoundationTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = create_account("admin@example.org", role=Role.ADMIN)

    def setUp(self):
        cache.clear()
        self.storage = InMemoryStorage()
        patcher = patch_storage("content.views.foundation_views", self.storage)
        patcher.start()
        self.addCleanup(patcher.stop)

    def testAnlegenMitVerschachteltenDaten(self):
        authenticate(self.client, self.admin)
        make_foundation("Bestehend", 1)

        response = self.client.post(
            "/api/admin/foundation/",
            {
                "name": "Gau Raksha Trust",
                "tagline": "Seva for every cow",
                "establishedYear": "2005",
                "logo": logo(),
                "stats": json.dumps([{"label": "Cows", "value": "1200", "displayOrder": 1}]),
                "activities": json.dumps([{"activityText": "Feeding"}]),
                "objectives": json.dumps([{"title": "Protect", "description": "Shelter"}]),
                "contact": json.dumps({"email": "trust@example.org", "phone": "9876543210"}),
            },
        )

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data["order"], 2)
        self.assertEqual(data["establishedYear"], 2005)
        self.assertEqual(data["stats"][0]["label"], "Cows")
        self.assertEqual(data["activities"][0]["activityText"], "Feeding")
        self.assertEqual(data["objectives"][0]["objectiveType"], "main")
        self.assertEqual(data["contact"]["email"], "trust@example.org")

    def testAnlegenOhneLogo(self):
        authenticate(self.client, self.admin)
        response = self.client.post("/api/admin/foundation/", {"name": "Ohne Logo"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Logo is required")

    def testUpdateVerschiebtReihenfolge(self):
        first = make_foundation("A", 1)
        second = make_foundation("B", 2)
        third = make_foundation("C", 3)
        authenticate(self.client, self.admin)

        response = self.client.put(
            f"/api/admin/foundation/{third.pk}/", {"order": "1"}, content_type="application/json"
        )

        self.assertEqual(response.status_code, 200)
        orders = dict(Foundation.objects.values_list("name", "order"))
        self.assertEqual(orders, {"C": 1, "A": 2, "B": 3})
        self.assertEqual(first.pk, Foundation.objects.get(order=2).pk)
        self.assertEqual(second.pk, Foundation.objects.get(order=3).pk)

    def testUpdateErsetztStatistiken(self):
        foundation = make_foundation("A", 1)
        FoundationStat.objects.create(foundation=foundation, label="Alt", value="1")
        authenticate(self.client, self.admin)

        self.client.put(
            f"/api/admin/foundation/{foundation.pk}/",
            {"stats": json.dumps([{"label": "Neu", "value": "2"}, {"label": "Mehr", "value": "3"}])},
            content_type="application/json",
        )

        self.assertEqual(
            sorted(foundation.stats.values_list("label", flat=True)), ["Mehr", "Neu"]
        )

    def testLoeschenSchliesstLuecke(self):
        make_foundation("A", 1)
        middle = make_foundation("B", 2)
        make_foundation("C", 3)
        authenticate(self.client, self.admin)

        response = self.client.delete(f"/api/admin/foundation/{middle.pk}/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(dict(Foundation.objects.values_list("name", "order")), {"A": 1, "C": 2})
        self.assertEqual(self.storage.deleted, ["foundations/B.png"])

    def testDetailCacheWirdInvalidiert(self):
        foundation = make_foundation("A", 1)
        self.client.get(f"/api/admin/foundation/{foundation.pk}/")
        self.assertIsNotNone(cache.get(f"foundation:{foundation.pk}"))

        authenticate(self.client, self.admin)
        self.client.put(
            f"/api/admin/foundation/{foundation.pk}/", {"tagline": "Neu"}, content_type="application/json"
        )

        self.assertIsNone(cache.get(f"foundation:{foundation.pk}"))
        response = self.client.get(f"/api/admin/foundation/{foundation.pk}/")
        self.assertEqual(response.json()["tagline"], "Neu")

    def testListeNachAnlegenAktuell(self):
        make_foundation("A", 1)
        response = self.client.get("/api/admin/foundation/")
        self.assertEqual(response.json()["pagination"]["total"], 1)

        authenticate(self.client, self.admin)
        self.client.post("/api/admin/foundation/", {"name": "B", "logo": logo()})

        response = self.client.get("/api/admin/foundation/")
        self.assertEqual(response.json()["pagination"]["total"], 2)

    def testListeFilterAktiv(self):
        make_foundation("Aktiv", 1)
        make_foundation("Inaktiv", 2, is_active=False)
        response = self.client.get("/api/admin/foundation/", {"isActive": "false"})
        self.assertEqual([f["name"] for f in response.json()["data"]], ["Inaktiv"])

    def testUnbekannt(self):
        response = self.client.get("/api/admin/foundation/4711/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Foundation not found")

    def testLandingZeigtNurNameUndLogo(self):
        make_foundation("A", 1)
        response = self.client.get("/api/landing/foundations/")
        self.assertEqual(list(response.json()["foundations"][0]), ["id", "name", "logoUrl"])
        self.assertIsNotNone(cache.get(content_cache.FOUNDATION_LANDING_KEY))


class GopalPariwarTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = create_account("admin@example.org", role=Role.ADMIN)

    def setUp(self):
        cache.clear()
        self.storage = InMemoryStorage()
        patcher = patch_storage("content.views.foundation_views", self.storage)
        patcher.start()
        self.addCleanup(patcher.stop)
        authenticate(self.client, self.admin)

    def _make(self, order):
        return GopalPariwar.objects.create(
            hero_title=f"Profil {order}", hero_image="https://cdn.example.org/p.png",
            hero_image_key=f"gopalpariwar/{order}.png", order=order,
        )

    def testAnlegenOhneFoto(self):
        response = self.client.post("/api/admin/gopalpariwar/", {"heroTitle": "Ohne"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "No file uploaded")

    def testAnlegenHaengtAn(self):
        self._make(1)
        response = self.client.post(
            "/api/admin/gopalpariwar/",
            {
                "heroTitle": "Shri Gopal",
                "photo": logo("photo.png"),
                "spiritualEducation": json.dumps(["Bhagavad Gita"]),
                "socialLinks": json.dumps({"youtube": "https://youtube.com/@gopal"}),
            },
        )
        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data["order"], 2)
        self.assertEqual(data["spiritualEducation"], ["Bhagavad Gita"])
        self.assertTrue(data["heroImage"].startswith("https://cdn.example.org/gopalpariwar/"))

    def testAnlegenInvalidiertLandingCache(self):
        cache.set(content_cache.GOPAL_PARIWAR_KEY, [], 600)
        self.client.post("/api/admin/gopalpariwar/", {"heroTitle": "X", "photo": logo("p.png")})
        self.assertIsNone(cache.get(content_cache.GOPAL_PARIWAR_KEY))

    def testLoeschenSchliesstLuecke(self):
        first = self._make(1)
        second = self._make(2)
        response = self.client.delete(f"/api/admin/gopalpariwar/{first.pk}/")
        self.assertEqual(response.status_code, 200)
        second.refresh_from_db()
        self.assertEqual(second.order, 1)

    def testUpdateVerschiebt(self):
        first = self._make(1)
        second = self._make(2)
        self.client.put(
            f"/api/admin/gopalpariwar/{first.pk}/", {"order": "2"}, content_type="application/json"
        )
        first.refresh_from_db()
        second.refresh_from_db()
        self.assertEqual((first.order, second.order), (2, 1))
