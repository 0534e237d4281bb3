"""
Application-level behaviour: the role gate, error handlers and health check.
"""

from __future__ import annotations

import httpx
import pytest

from portal.api.client import ApiError


# ---------------------------------------------------------------------------
# Role gate
# ---------------------------------------------------------------------------

class TestRoleGate:
    def test_anonymous_private_page_redirects_to_login(self, client):
        resp = client.get("/admin", follow_redirects=False)
        assert resp.status_code == 303
        assert resp.headers["location"] == "/login"

    def test_wrong_role_redirects_to_own_dashboard(self, client, auth_headers):
        resp = client.get("/admin/users", headers=auth_headers("investor"), follow_redirects=False)
        assert resp.status_code == 303
        assert resp.headers["location"] == "/investor"

    def test_bad_token_counts_as_anonymous(self, client):
        resp = client.get("/profile", headers={"Authorization": "Bearer forged.token"}, follow_redirects=False)
        assert resp.headers["location"] == "/login"

    def test_session_cookie_is_accepted(self, client, backend, session_token):
        backend.admin.get_stats.return_value = {"totalUsers": 3}
        client.cookies.set("sky_session", session_token("admin"))
        resp = client.get("/admin", follow_redirects=False)
        assert resp.status_code == 200
        assert resp.json()["cards"][0]["value"] == 3

    def test_landing_page_is_public(self, client, backend):
        backend.public.get_stats.return_value = {"businesses": 4}
        backend.public.get_categories.return_value = {"categories": [{"name": "Fintech"}]}
        backend.public.get_businesses.return_value = {"businesses": [{"_id": str(i)} for i in range(6)]}

        resp = client.get("/")

        body = resp.json()
        assert resp.status_code == 200
        assert body["user"] is None
        assert len(body["featured"]) == 4
        assert body["categories"] == [{"name": "Fintech"}]

    def test_health_bypasses_gate(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
        assert resp.json()["cache_backend"] == "memory"

    def test_logout_reachable_without_session(self, client):
        resp = client.post("/logout", follow_redirects=False)
        assert resp.status_code == 200


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------

class TestErrorHandlers:
    def test_backend_error_keeps_status_and_message(self, client, backend, auth_headers):
        backend.admin.get_stats.side_effect = ApiError("Forbidden area", status_code=403)
        resp = client.get("/admin", headers=auth_headers("admin"))
        assert resp.status_code == 403
        assert resp.json()["toast"]["description"] == "Forbidden area"
        assert resp.json()["toast"]["variant"] == "destructive"

    def test_transport_error_is_502(self, client, backend, auth_headers):
        backend.admin.get_stats.side_effect = httpx.ConnectError("refused")
        resp = client.get("/admin", headers=auth_headers("admin"))
        assert resp.status_code == 502
        assert resp.json()["toast"]["description"] == "Something went wrong"

    def test_landing_sections_fail_independently(self, client, backend):
        backend.public.get_stats.side_effect = ApiError("down", status_code=500)
        backend.public.get_categories.return_value = []
        backend.public.get_businesses.return_value = [{"_id": "b1"}]

        body = client.get("/").json()

        assert body["stats"] is None
        assert body["featured"] == [{"_id": "b1"}]

    def test_unreachable_landing_section_is_skipped(self, client, backend):
        backend.public.get_stats.side_effect = httpx.ConnectError("refused")
        backend.public.get_categories.return_value = {"categories": [{"name": "Fintech"}]}
        backend.public.get_businesses.return_value = [{"_id": "b1"}]

        resp = client.get("/")

        assert resp.status_code == 200
        assert resp.json()["stats"] is None
        assert resp.json()["categories"] == [{"name": "Fintech"}]
        assert resp.json()["featured"] == [{"_id": "b1"}]

    def test_http_exception_becomes_toast(self, client, auth_headers):
        resp = client.get("/entrepreneur/intakes/create/unknown", headers=auth_headers("entrepreneur"))
        assert resp.status_code == 404
        assert resp.json()["toast"]["description"] == "Invalid form type"

    def test_unknown_route_for_allowed_prefix_is_404(self, client, auth_headers):
        resp = client.get("/admin/does-not-exist", headers=auth_headers("admin"))
        assert resp.status_code == 404


@pytest.mark.parametrize("path,role", [
    ("/entrepreneur", "entrepreneur"),
    ("/investor", "investor"),
])
def test_dashboards_survive_missing_intake(client, backend, auth_headers, path, role):
    backend.entrepreneur.get_businesses.return_value = []
    backend.investor.get_investments.return_value = []
    backend.intake.get_all.side_effect = ApiError("not found", status_code=404)

    resp = client.get(path, headers=auth_headers(role))

    assert resp.status_code == 200
    assert resp.json()["intake_warning"]["title"] == "Intake Form Required"
