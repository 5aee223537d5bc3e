"""API tests for the admin audit trail endpoint."""

from datetime import datetime, timezone

from shortlink.models import AuditLog
from tests.support import ApiTestCase


def _entry(ts: datetime, user: str, action: str, details: str = "{}", ip: str = "10.0.0.1") -> AuditLog:
    return AuditLog(timestamp=ts, user=user, action=action, details=details, ip=ip)


class TestAuditLogQuery(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.create_user("admin@x.com", role="admin")
        self.user = self.create_user("user@x.com")
        self.db.add_all(
            [
                _entry(datetime(2025, 1, 1, 10, tzinfo=timezone.utc), "admin@x.com (id:1)", "create_user"),
                _entry(datetime(2025, 1, 2, 10, tzinfo=timezone.utc), "user@x.com (id:2)", "create_url",
                       details='{"shortCode": "abc1234"}'),
                _entry(datetime(2025, 1, 3, 10, tzinfo=timezone.utc), "user@x.com (id:2)", "delete_url"),
                _entry(datetime(2025, 1, 4, 10, tzinfo=timezone.utc), "anon", "reset_password", ip="192.168.1.9"),
            ]
        )
        self.db.commit()
        self.headers = self.auth_headers(self.admin)

    def _get(self, **params: object) -> dict:
        resp = self.client.get("/audit-logs", params=params, headers=self.headers)
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()

    def test_lists_newest_first(self) -> None:
        body = self._get()
        self.assertEqual(body["total"], 4)
        self.assertEqual(
            [log["action"] for log in body["logs"]],
            ["reset_password", "delete_url", "create_url", "create_user"],
        )
        self.assertEqual(set(body["logs"][0]), {"id", "timestamp", "user", "action", "details", "ip"})

    def test_filter_by_user(self) -> None:
        body = self._get(user="USER@x.com")
        self.assertEqual(body["total"], 2)

    def test_filter_by_action(self) -> None:
        body = self._get(action="url")
        self.assertEqual({log["action"] for log in body["logs"]}, {"create_url", "delete_url"})

    def test_search_matches_details_and_ip(self) -> None:
        self.assertEqual(self._get(search="ABC1234")["total"], 1)
        self.assertEqual(self._get(search="192.168")["total"], 1)

    def test_like_wildcards_match_literally(self) -> None:
        self.assertEqual(self._get(user="x_com")["total"], 0)
        self.assertEqual(self._get(search="%")["total"], 0)
        self.assertEqual(self._get(action="e_u")["total"], 3)

    def test_date_range_is_inclusive(self) -> None:
        body = self._get(dateFrom="2025-01-02T10:00:00Z", dateTo="2025-01-03T10:00:00Z")
        self.assertEqual([log["action"] for log in body["logs"]], ["delete_url", "create_url"])

    def test_pagination(self) -> None:
        body = self._get(page=2, pageSize=3)
        self.assertEqual(body["total"], 4)
        self.assertEqual([log["action"] for log in body["logs"]], ["create_user"])

    def test_page_beyond_limit_is_400(self) -> None:
        resp = self.client.get("/audit-logs", params={"page": 10**19}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)

    def test_non_admin_is_403(self) -> None:
        resp = self.client.get("/audit-logs", headers=self.auth_headers(self.user))
        self.assertEqual(resp.status_code, 403)

    def test_anonymous_is_401(self) -> None:
        resp = self.client.get("/audit-logs")
        self.assertEqual(resp.status_code, 401)
