"""API tests for short URL management: creation, listing, ownership gates."""

from datetime import datetime, timedelta, timezone

from shortlink.models import AuditLog, ShortUrl
from tests.support import ApiTestCase


class TestCreateUrl(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = self.create_user("user@x.com")
        self.headers = self.auth_headers(self.user)

    def test_create_returns_201_with_generated_code(self) -> None:
        resp = self.client.post(
            "/urls", json={"originalUrl": "https://example.org/some/path?q=1"}, headers=self.headers
        )
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body["originalUrl"], "https://example.org/some/path?q=1")
        self.assertEqual(len(body["shortCode"]), 7)
        self.assertEqual(body["userId"], self.user.id)
        self.assertEqual(body["shortUrl"], f"http://sho.rt/{body['shortCode']}")
        self.assertIn("createdAt", body)

    def test_create_is_audited(self) -> None:
        self.client.post("/urls", json={"originalUrl": "https://example.org/"}, headers=self.headers)
        with self.SessionLocal() as s:
            entry = s.query(AuditLog).one()
        self.assertEqual(entry.action, "create_url")
        self.assertIn("https://example.org/", entry.details)

    def test_requires_authentication(self) -> None:
        resp = self.client.post("/urls", json={"originalUrl": "https://example.org/"})
        self.assertEqual(resp.status_code, 401)

    def test_rejects_invalid_urls(self) -> None:
        for bad in ["", "example.org", "ftp://example.org/file", "javascript:alert(1)", "http://", "https://exa mple.org"]:
            resp = self.client.post("/urls", json={"originalUrl": bad}, headers=self.headers)
            self.assertEqual(resp.status_code, 400, bad)
            self.assertIn("error", resp.json())

    def test_rejects_characters_outside_rfc3986(self) -> None:
        for bad in ["https://example.org/a|b", "https://example.org/{x}", "https://example.org/a^b", "https://example.org/caf\u00e9"]:
            resp = self.client.post("/urls", json={"originalUrl": bad}, headers=self.headers)
            self.assertEqual(resp.status_code, 400, bad)
        with self.SessionLocal() as s:
            self.assertEqual(s.query(ShortUrl).count(), 0)

    def test_accepts_percent_encoded_url(self) -> None:
        resp = self.client.post(
            "/urls", json={"originalUrl": "https://example.org/a%7Cb?x=1&y=(2)"}, headers=self.headers
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["originalUrl"], "https://example.org/a%7Cb?x=1&y=(2)")

    def test_missing_original_url_is_400(self) -> None:
        resp = self.client.post("/urls", json={}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)


class TestListUrls(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = self.create_user("user@x.com")
        self.other = self.create_user("other@x.com")
        base = datetime(2025, 1, 1, tzinfo=timezone.utc)
        for i in range(7):
            url = ShortUrl(
                original_url=f"https://site{i}.example/Page",
                short_code=f"code00{i}",
                user_id=self.user.id,
                created_at=base + timedelta(minutes=i),
            )
            self.db.add(url)
        self.db.add(
            ShortUrl(original_url="https://other.example/", short_code="othr001", user_id=self.other.id)
        )
        self.db.commit()
        self.headers = self.auth_headers(self.user)

    def test_default_page_is_five_newest_first(self) -> None:
        resp = self.client.get("/urls", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["total"], 7)
        self.assertEqual(
            [u["shortCode"] for u in body["urls"]],
            ["code006", "code005", "code004", "code003", "code002"],
        )

    def test_second_page(self) -> None:
        resp = self.client.get("/urls", params={"page": 2, "pageSize": 5}, headers=self.headers)
        self.assertEqual([u["shortCode"] for u in resp.json()["urls"]], ["code001", "code000"])

    def test_only_own_urls_are_listed(self) -> None:
        resp = self.client.get("/urls", params={"pageSize": 100}, headers=self.headers)
        self.assertNotIn("othr001", [u["shortCode"] for u in resp.json()["urls"]])

    def test_search_is_case_insensitive_substring(self) -> None:
        resp = self.client.get("/urls", params={"search": "SITE3"}, headers=self.headers)
        body = resp.json()
        self.assertEqual(body["total"], 1)
        self.assertEqual(body["urls"][0]["shortCode"], "code003")
        by_code = self.client.get("/urls", params={"search": "CODE00"}, headers=self.headers)
        self.assertEqual(by_code.json()["total"], 7)

    def test_invalid_page_is_400(self) -> None:
        resp = self.client.get("/urls", params={"page": 0}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)

    def test_page_beyond_limit_is_400(self) -> None:
        resp = self.client.get("/urls", params={"page": 10**19}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        self.assertIn("error", resp.json())

    def test_search_treats_like_wildcards_literally(self) -> None:
        for term in ["_", "%", "site_"]:
            resp = self.client.get("/urls", params={"search": term}, headers=self.headers)
            self.assertEqual(resp.json()["total"], 0, term)


class TestOwnership(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.owner = self.create_user("owner@x.com")
        self.stranger = self.create_user("stranger@x.com")
        self.admin = self.create_user("admin@x.com", role="admin")
        self.url = self.create_url(self.owner, "own1234", "https://owner.example/")

    def test_owner_can_read(self) -> None:
        resp = self.client.get(f"/urls/{self.url.id}", headers=self.auth_headers(self.owner))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["shortCode"], "own1234")

    def test_non_owner_read_is_403(self) -> None:
        resp = self.client.get(f"/urls/{self.url.id}", headers=self.auth_headers(self.stranger))
        self.assertEqual(resp.status_code, 403)

    def test_missing_url_is_404(self) -> None:
        resp = self.client.get("/urls/9999", headers=self.auth_headers(self.owner))
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "URL not found"})

    def test_owner_can_update_destination(self) -> None:
        resp = self.client.put(
            f"/urls/{self.url.id}",
            json={"originalUrl": "https://moved.example/"},
            headers=self.auth_headers(self.owner),
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["originalUrl"], "https://moved.example/")
        self.assertEqual(resp.json()["shortCode"], "own1234")

    def test_non_owner_update_is_403_and_leaves_url_unchanged(self) -> None:
        resp = self.client.put(
            f"/urls/{self.url.id}",
            json={"originalUrl": "https://evil.example/"},
            headers=self.auth_headers(self.stranger),
        )
        self.assertEqual(resp.status_code, 403)
        with self.SessionLocal() as s:
            stored = s.query(ShortUrl).filter(ShortUrl.short_code == "own1234").one()
        self.assertEqual(stored.original_url, "https://owner.example/")

    def test_non_owner_delete_is_403(self) -> None:
        resp = self.client.delete(f"/urls/{self.url.id}", headers=self.auth_headers(self.stranger))
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json(), {"error": "Forbidden"})
        with self.SessionLocal() as s:
            self.assertEqual(s.query(ShortUrl).count(), 1)

    def test_admin_delete_succeeds(self) -> None:
        resp = self.client.delete(f"/urls/{self.url.id}", headers=self.auth_headers(self.admin))
        self.assertEqual(resp.status_code, 204)
        with self.SessionLocal() as s:
            self.assertEqual(s.query(ShortUrl).count(), 0)
            entry = s.query(AuditLog).one()
        self.assertEqual(entry.action, "delete_url")
        self.assertTrue(entry.user.startswith("admin@x.com"))
