import datetime
import json

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase

from accounts.models import Role
from content.models import News
from core.testing import InMemoryStorage, authenticate, create_account, patch_storage
from core.utils import unique_slug


def make_news(title_en, category="seva", day=1, **extra):
    return News.objects.create(
        title=title_en,
        title_en=title_en,
        slug=unique_slug(News, title_en),
        excerpt=f"About {title_en}",
        category=category,
        date=datetime.date(2024, 1, day),
        read_time="3 min",
        **extra,
    )


class NewsReadTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        for day in range(1, 13):
            make_news(f"Seva Bericht {day}", day=day)
        cls.featured = make_news("Gopashtami Utsav", category="festival", day=20, featured=True)

    def testListePaginiert(self):
        response = self.client.get("/api/news/", {"page": 2, "limit": 5})
        body = response.json()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(body["data"]), 5)
        self.assertEqual(body["pagination"], {"page": 2, "limit": 5, "total": 13, "totalPages": 3})

    def testNeuesteZuerst(self):
        response = self.client.get("/api/news/")
        self.assertEqual(response.json()["data"][0]["titleEn"], "Gopashtami Utsav")

    def testKategorieAllIgnoriertFilter(self):
        response = self.client.get("/api/news/", {"category": "all"})
        self.assertEqual(response.json()["pagination"]["total"], 13)

    def testKategorieUndFeaturedFilter(self):
        response = self.client.get("/api/news/", {"category": "festival"})
        self.assertEqual(response.json()["pagination"]["total"], 1)
        response = self.client.get("/api/news/", {"featured": "true"})
        self.assertEqual(response.json()["data"][0]["id"], self.featured.pk)

    def testSuche(self):
        response = self.client.get("/api/news/", {"search": "gopashtami"})
        self.assertEqual(response.json()["pagination"]["total"], 1)

    def testDetailZaehltAufrufe(self):
        self.client.get(f"/api/news/{self.featured.pk}/")
        response = self.client.get(f"/api/news/slug/{self.featured.slug}/")
        self.assertEqual(response.json()["data"]["views"], 2)

    def testDetailUnbekannt(self):
        response = self.client.get("/api/news/99999/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "News not found")

    def testVerwandteNachrichten(self):
        news = News.objects.get(title_en="Seva Bericht 1")
        response = self.client.get(f"/api/news/related/{news.pk}/")
        data = response.json()["data"]
        self.assertEqual(len(data), 3)
        self.assertNotIn(news.pk, [item["id"] for item in data])
        self.assertTrue(all(item["category"] == "seva" for item in data))

    def testKategorienMitAnzahl(self):
        response = self.client.get("/api/news/categories/")
        self.assertEqual(
            response.json()["data"],
            [{"category": "festival", "count": 1}, {"category": "seva", "count": 12}],
        )


class NewsWriteTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = create_account("admin@example.org", role=Role.ADMIN)
        cls.editor = create_account("editor@example.org", role=Role.SUBADMIN)

    def setUp(self):
        self.storage = InMemoryStorage()
        patcher = patch_storage("content.views.news_views", self.storage)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _payload(self, **overrides):
        payload = {
            "title": "गौशाला उद्घाटन",
            "titleEn": "Gaushala Opening",
            "excerpt": "A new shelter opened",
            "category": "seva",
            "date": "2024-03-01",
            "readTime": "2 min",
            "content": json.dumps(["Erster Absatz", "Zweiter Absatz"]),
            "tags": json.dumps(["gaushala", "seva"]),
            "featured": "true",
        }
        payload.update(overrides)
        return payload

    def testEditorLegtNewsMitBildAn(self):
        authenticate(self.client, self.editor)
        image = SimpleUploadedFile("cover.jpg", b"\xff\xd8\xff" + b"0" * 32, content_type="image/jpeg")
        response = self.client.post("/api/news/", {**self._payload(), "image": image})

        self.assertEqual(response.status_code, 201)
        data = response.json()["data"]
        self.assertEqual(data["slug"], "gaushala-opening")
        self.assertEqual(data["tags"], ["gaushala", "seva"])
        self.assertEqual(data["content"], ["Erster Absatz", "Zweiter Absatz"])
        self.assertTrue(data["featured"])
        self.assertTrue(data["image"].startswith("https://cdn.example.org/news/"))

    def testSlugWirdEindeutig(self):
        authenticate(self.client, self.editor)
        self.client.post("/api/news/", self._payload())
        response = self.client.post("/api/news/", self._payload())
        self.assertEqual(response.json()["data"]["slug"], "gaushala-opening-1")

    def testPflichtfelder(self):
        authenticate(self.client, self.editor)
        response = self.client.post("/api/news/", self._payload(readTime=""))
        self.assertEqual(response.status_code, 400)

    def testUngueltigesJson(self):
        authenticate(self.client, self.editor)
        response = self.client.post("/api/news/", self._payload(tags="[kaputt"))
        self.assertEqual(response.status_code, 400)

    def testUpdateErneuertSlugNurBeiTitelwechsel(self):
        news = make_news("Old Title")
        authenticate(self.client, self.editor)

        response = self.client.put(f"/api/news/{news.pk}/", {"excerpt": "Neu"}, content_type="application/json")
        self.assertEqual(response.json()["data"]["slug"], "old-title")

        response = self.client.put(
            f"/api/news/{news.pk}/", {"titleEn": "New Title"}, content_type="application/json"
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["slug"], "new-title")
        self.assertEqual(response.json()["data"]["excerpt"], "Neu")

    def testLoeschenNurAdmin(self):
        news = make_news("Zu loeschen")
        authenticate(self.client, self.editor)
        self.assertEqual(self.client.delete(f"/api/news/{news.pk}/").status_code, 403)

        authenticate(self.client, self.admin)
        response = self.client.delete(f"/api/news/{news.pk}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "News deleted successfully")

    def testAnonymerSchreibzugriff(self):
        response = self.client.post("/api/news/", self._payload())
        self.assertEqual(response.status_code, 401)


class UniqueSlugTests(TestCase):
    def testZaehltHoch(self):
        make_news("Gau Katha")
        make_news("Gau Katha")
        self.assertEqual(unique_slug(News, "Gau Katha"), "gau-katha-2")

    def testEigeneZeileWirdIgnoriert(self):
        news = make_news("Gau Katha")
        self.assertEqual(unique_slug(News, "Gau Katha", instance_pk=news.pk), "gau-katha")
