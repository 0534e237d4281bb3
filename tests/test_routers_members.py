"""
Entrepreneur, investor, profile and intake-wizard pages.
"""

from __future__ import annotations

from portal.auth import COOKIE_NAME, session_from_token


PDF = ("plan.pdf", b"%PDF-1.4 plan", "application/pdf")


def _walk_to_last_step(client, base, headers, steps):
    for _ in range(steps - 1):
        client.post(f"{base}/next", headers=headers)


# ---------------------------------------------------------------------------
# Entrepreneur
# ---------------------------------------------------------------------------

class TestEntrepreneurBusinesses:
    def test_list_adds_funding(self, client, backend, auth_headers):
        backend.entrepreneur.get_businesses.return_value = {"businesses": [
            {"_id": "b1", "title": "Agri", "total_shares": 1000, "share_value": 12.5},
        ]}
        body = client.get("/entrepreneur/businesses", headers=auth_headers("entrepreneur")).json()
        assert body["businesses"][0]["funding"] == 12500.0
        assert body["businesses"][0]["funding_label"] == "$12,500.00"
        assert body["nav"][1]["active"] is True

    def test_create_business_uploads_plan(self, client, backend, auth_headers):
        backend.entrepreneur.create_business.return_value = {"_id": "b1"}

        resp = client.post("/entrepreneur/businesses/new", headers=auth_headers("entrepreneur"),
                           data={"title": "Agri"}, files={"business_plan": PDF})

        assert resp.status_code == 200
        assert resp.json()["redirect"] == "/entrepreneur/businesses"
        token, form = backend.entrepreneur.create_business.await_args.args
        assert token == "jwt-entrepreneur"
        assert form["title"] == "Agri"
        assert form["business_plan"].filename == "plan.pdf"

    def test_missing_title_is_422(self, client, backend, auth_headers):
        resp = client.post("/entrepreneur/businesses/new", headers=auth_headers("entrepreneur"),
                           files={"business_plan": PDF})
        assert resp.status_code == 422
        assert resp.json()["missing"] == ["title"]
        backend.entrepreneur.create_business.assert_not_awaited()

    def test_oversized_plan_is_rejected_before_backend(self, client, backend, auth_headers):
        big = ("plan.pdf", b"x" * (2 * 1024 * 1024 + 1), "application/pdf")
        resp = client.post("/entrepreneur/businesses/new", headers=auth_headers("entrepreneur"),
                           data={"title": "Agri"}, files={"business_plan": big})
        assert resp.status_code == 400
        assert resp.json()["toast"]["description"].startswith("File size exceeds 2MB limit")
        backend.entrepreneur.create_business.assert_not_awaited()

    def test_non_pdf_plan_is_rejected(self, client, backend, auth_headers):
        resp = client.post("/entrepreneur/businesses/new", headers=auth_headers("entrepreneur"),
                           data={"title": "Agri"}, files={"business_plan": ("a.png", b"png", "image/png")})
        assert resp.json()["toast"]["description"] == "Please upload a PDF file"


class TestEntrepreneurIntakeWizard:
    base = "/entrepreneur/intakes/create/ideation"

    def test_view_starts_at_step_one(self, client, auth_headers):
        body = client.get(self.base, headers=auth_headers("entrepreneur")).json()
        assert body["wizard"]["step"] == 1
        assert body["wizard"]["total_steps"] == 7
        assert body["title"] == "Ideation Stage Intake Form"

    def test_draft_survives_between_requests(self, client, auth_headers):
        headers = auth_headers("entrepreneur")
        client.post(f"{self.base}/update", headers=headers, json={"fields": {"business_name": "Agri"}})
        client.post(f"{self.base}/update", headers=headers,
                    json={"toggle": {"field": "marketing_channels", "value": "Events", "checked": True}})
        client.post(f"{self.base}/next", headers=headers)

        wizard = client.get(self.base, headers=headers).json()["wizard"]
        assert wizard["step"] == 2
        assert wizard["form_data"]["business_name"] == "Agri"
        assert wizard["form_data"]["marketing_channels"] == ["Events"]

    def test_submit_before_last_step_is_refused(self, client, backend, auth_headers):
        resp = client.post(f"{self.base}/submit", headers=auth_headers("entrepreneur"))
        assert resp.status_code == 422
        assert resp.json()["toast"]["description"] == "Complete all 7 steps before submitting"
        backend.intake.create.assert_not_awaited()

    def test_submit_sends_form_type_and_clears_draft(self, client, backend, auth_headers):
        headers = auth_headers("entrepreneur")
        backend.intake.create.return_value = {"_id": "i1"}
        _walk_to_last_step(client, self.base, headers, 7)
        client.post(f"{self.base}/update", headers=headers, json={"fields": {
            "agreed_to_terms": True, "agreed_to_fees": True, "agreed_to_confidentiality": True,
        }})

        resp = client.post(f"{self.base}/submit", headers=headers)

        assert resp.status_code == 200
        assert resp.json()["redirect"] == "/entrepreneur/intakes"
        sent = backend.intake.create.await_args.args[1]
        assert sent["form_type"] == "ideation"
        assert client.get(self.base, headers=headers).json()["wizard"]["step"] == 1

    def test_team_members_only_on_active_business(self, client, auth_headers):
        headers = auth_headers("entrepreneur")
        assert client.post(f"{self.base}/team-members", headers=headers).status_code == 404

        active = "/entrepreneur/intakes/create/active_business"
        client.post(f"{active}/team-members", headers=headers)
        resp = client.put(f"{active}/team-members/1", headers=headers,
                          json={"name": "Grace", "position": "CFO", "ownership": "20", "salary": "", "years": "3"})
        assert resp.json()["wizard"]["team_members"][1]["name"] == "Grace"
        assert client.delete(f"{active}/team-members/5", headers=headers).status_code == 404

    def test_edit_seeds_from_backend(self, client, backend, auth_headers):
        backend.intake.get_by_id.return_value = {
            "_id": "i9", "form_type": "active_business", "status": "pending",
            "business_stage": "growth", "team_members": [{"name": "Ada", "ownership_percentage": 50}],
        }
        body = client.get("/entrepreneur/intakes/i9/edit", headers=auth_headers("entrepreneur")).json()
        assert body["wizard"]["form_data"]["business_stage"] == "Growth Stage (>6 months)"
        assert "status" not in body["wizard"]["form_data"]
        assert body["wizard"]["team_members"][0]["ownership"] == "50"


# ---------------------------------------------------------------------------
# Investor
# ---------------------------------------------------------------------------

LISTING = {"_id": "b1", "title": "Agri", "share_value": 10, "minimum_shares_per_request": 5,
           "remaining_shares": 100, "category_id": {"name": "Agritech"}}


class TestInvestor:
    def test_browse_passes_filters(self, client, backend, auth_headers):
        backend.investor.get_businesses.return_value = {"businesses": [LISTING]}
        body = client.get("/investor/browse?search=agri&category=Finance", headers=auth_headers("investor")).json()
        backend.investor.get_businesses.assert_awaited_once_with("jwt-investor", search="agri", category="Finance")
        card = body["businesses"][0]
        assert card["category_name"] == "Agritech"
        assert card["minimum_investment"] == 50.0
        assert card["can_request"] is True

    def test_all_categories_means_no_filter(self, client, backend, auth_headers):
        backend.investor.get_businesses.return_value = []
        client.get("/investor/browse", headers=auth_headers("investor"))
        backend.investor.get_businesses.assert_awaited_once_with("jwt-investor")

    def test_detail_preview(self, client, backend, auth_headers):
        backend.investor.get_business.return_value = LISTING
        body = client.get("/investor/browse/b1?requested_shares=3", headers=auth_headers("investor")).json()
        assert body["preview"]["amount"] == 30.0
        assert body["preview"]["error"] == "Minimum shares required: 5"

    def test_request_below_minimum_never_reaches_backend(self, client, backend, auth_headers):
        backend.investor.get_business.return_value = LISTING
        resp = client.post("/investor/browse/b1/request-shares", headers=auth_headers("investor"),
                           json={"requested_shares": "2"})
        assert resp.status_code == 400
        assert resp.json()["toast"]["description"] == "Minimum shares required: 5"
        backend.investor.request_shares.assert_not_awaited()

    def test_request_shares(self, client, backend, auth_headers):
        backend.investor.get_business.side_effect = [LISTING, {**LISTING, "remaining_shares": 90}]
        backend.investor.request_shares.return_value = {"_id": "sr1"}

        resp = client.post("/investor/browse/b1/request-shares", headers=auth_headers("investor"),
                           json={"requested_shares": "10"})

        assert resp.status_code == 200
        assert resp.json()["data"]["remaining_shares"] == 90
        backend.investor.request_shares.assert_awaited_once_with("jwt-investor", "b1", 10)

    def test_investor_intake_wizard_has_five_steps(self, client, auth_headers):
        body = client.get("/investor/intake", headers=auth_headers("investor")).json()
        assert body["wizard"]["total_steps"] == 5


# ---------------------------------------------------------------------------
# Shared intake wizard
# ---------------------------------------------------------------------------

class TestIntakeWizard:
    def test_entrepreneur_without_type_gets_choices(self, client, auth_headers):
        body = client.get("/intake-wizard", headers=auth_headers("entrepreneur")).json()
        assert [c["id"] for c in body["choices"]] == ["ideation", "active_business"]

    def test_investor_always_gets_investor_form(self, client, auth_headers):
        body = client.get("/intake-wizard?type=ideation", headers=auth_headers("investor")).json()
        assert body["wizard"]["form_type"] == "investor"

    def test_submit_marks_session_intake_completed(self, client, backend, auth_headers):
        headers = auth_headers("investor")
        backend.intake.create.return_value = {"_id": "i1"}
        _walk_to_last_step(client, "/intake-wizard", headers, 5)
        client.post("/intake-wizard/update", headers=headers, json={"fields": {
            "agree_to_network": True, "agree_to_fee_understanding": True, "agree_to_confidentiality": True,
        }})

        resp = client.post("/intake-wizard/submit", headers=headers)

        assert resp.status_code == 200
        assert resp.json()["redirect"] == "/investor"
        assert backend.intake.create.await_args.args[1]["form_type"] == "investor"
        session = session_from_token(resp.cookies[COOKIE_NAME])
        assert session.extra["intake_completed"] is True

    def test_admin_is_kept_out(self, client, auth_headers):
        resp = client.get("/intake-wizard", headers=auth_headers("admin"), follow_redirects=False)
        assert resp.status_code == 303
        assert resp.headers["location"] == "/admin"


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

class TestProfile:
    def test_profile_lists_document_types(self, client, backend, auth_headers):
        backend.auth.get_profile.return_value = {"name": "Ada"}
        body = client.get("/profile", headers=auth_headers("investor")).json()
        assert body["profile"] == {"name": "Ada"}
        assert body["document_types"][0] == {"value": "national_id", "label": "National ID"}

    def test_update_sends_only_given_fields(self, client, backend, auth_headers):
        backend.auth.update_profile.return_value = {"name": "Ada L"}
        resp = client.put("/profile", headers=auth_headers("admin"), json={"name": "Ada L"})
        assert resp.json()["toast"]["description"] == "Profile updated successfully"
        backend.auth.update_profile.assert_awaited_once_with("jwt-admin", {"name": "Ada L"})

    def test_document_requires_type(self, client, backend, auth_headers):
        resp = client.post("/profile/documents", headers=auth_headers("entrepreneur"),
                           files={"document": ("id.jpg", b"jpg", "image/jpeg")})
        assert resp.status_code == 422
        assert resp.json()["toast"]["description"] == "Please select document type and file"

    def test_document_submitted(self, client, backend, auth_headers):
        backend.auth.submit_documents.return_value = {"ok": True}
        resp = client.post("/profile/documents", headers=auth_headers("entrepreneur"),
                           data={"document_type": "passport"},
                           files={"document": ("id.jpg", b"jpg", "image/jpeg")})
        assert resp.status_code == 200
        form = backend.auth.submit_documents.await_args.args[1]
        assert form["document_type"] == "passport"
