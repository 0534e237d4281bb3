"""
Unit tests for the intake wizards (portal.forms).

Tests cover:
  • Step navigation bounds
  • Multi-select toggling
  • Submit gating (last step + required fields)
  • Variant specifics: ideation hint, active-business stage enum and team
  • Draft serialisation
"""

import asyncio

import pytest

from portal.forms import (
    ActiveBusinessForm, FORM_TYPES, FormIncomplete, IdeationForm, InvestorForm, form_class,
)
from portal.forms.active_business import stage_from_enum, stage_to_enum


def _agree(form, *fields):
    form.update({f: True for f in fields})


# ---------------------------------------------------------------------------
# Shared wizard behaviour
# ---------------------------------------------------------------------------

class TestNavigation:
    def test_starts_on_first_step(self):
        assert IdeationForm().step == 1

    def test_previous_is_capped_at_one(self):
        form = InvestorForm()
        assert form.previous() == 1

    def test_next_is_capped_at_last(self):
        form = InvestorForm()
        for _ in range(10):
            form.next()
        assert form.step == form.total_steps == 5
        assert form.is_last_step

    def test_navigation_is_never_gated(self):
        form = IdeationForm()
        form.next()
        form.next()
        assert form.step == 3
        assert not form.can_submit


def test_step_counts():
    assert IdeationForm().total_steps == 7
    assert ActiveBusinessForm().total_steps == 7
    assert InvestorForm().total_steps == 5


def test_initial_data_overlays_defaults():
    form = InvestorForm({"email": "i@example.com"})
    assert form.form_data["email"] == "i@example.com"
    assert form.form_data["industries_interested"] == []


def test_defaults_are_not_shared_between_instances():
    a, b = IdeationForm(), IdeationForm()
    a.toggle_option("marketing_channels", "Events", True)
    assert b.form_data["marketing_channels"] == []


class TestToggleOption:
    def test_add_once(self):
        form = InvestorForm()
        form.toggle_option("industries_interested", "Fintech", True)
        form.toggle_option("industries_interested", "Fintech", True)
        assert form.form_data["industries_interested"] == ["Fintech"]

    def test_remove(self):
        form = InvestorForm({"industries_interested": ["Fintech", "Agritech"]})
        form.toggle_option("industries_interested", "Fintech", False)
        assert form.form_data["industries_interested"] == ["Agritech"]


class TestSubmit:
    def test_refuses_before_last_step(self):
        form = InvestorForm()
        _agree(form, *form.required_fields)
        with pytest.raises(FormIncomplete) as exc:
            form.submit(lambda payload: payload)
        assert exc.value.message == "Complete all 5 steps before submitting"

    def test_refuses_with_missing_required_fields(self):
        form = InvestorForm()
        while not form.is_last_step:
            form.next()
        form.update({"agree_to_network": True})
        with pytest.raises(FormIncomplete) as exc:
            form.submit(lambda payload: payload)
        assert exc.value.message == "Please fill all required fields"
        assert exc.value.missing == ["agree_to_fee_understanding", "agree_to_confidentiality"]

    def test_hands_payload_to_callback(self):
        form = InvestorForm({"email": "i@example.com"})
        while not form.is_last_step:
            form.next()
        _agree(form, *form.required_fields)
        payload = form.submit(lambda data: data)
        assert payload["email"] == "i@example.com"
        assert payload["agree_to_network"] is True

    def test_async_callback_returns_awaitable(self):
        form = InvestorForm()
        while not form.is_last_step:
            form.next()
        _agree(form, *form.required_fields)

        async def on_submit(data):
            return {"saved": len(data) > 0}

        assert asyncio.run(form.submit(on_submit)) == {"saved": True}


def test_view_marks_step_states():
    form = InvestorForm()
    form.next()
    view = form.view()
    states = [s["state"] for s in view["steps"]]
    assert states == ["complete", "current", "upcoming", "upcoming", "upcoming"]
    assert view["missing"] == list(InvestorForm.required_fields)
    assert "industries_interested" in view["options"]


def test_round_trip_through_dict_clamps_step():
    form = IdeationForm({"business_name": "Agri Co"})
    data = form.to_dict()
    data["step"] = 99
    restored = IdeationForm.from_dict(data)
    assert restored.step == 7
    assert restored.form_data["business_name"] == "Agri Co"


def test_form_class_lookup():
    assert form_class("ideation") is IdeationForm
    assert form_class("investor") is InvestorForm
    assert form_class("nope") is None
    assert len(FORM_TYPES) == 3


# ---------------------------------------------------------------------------
# Ideation
# ---------------------------------------------------------------------------

class TestIdeationWarnings:
    def test_short_answer_warns(self):
        form = IdeationForm({"why_right_person": "I can"})
        assert form.warnings() == ["Please provide at least 10 characters"]

    def test_empty_or_long_enough_does_not_warn(self):
        assert IdeationForm().warnings() == []
        assert IdeationForm({"why_right_person": "Ten years in agriculture"}).warnings() == []


# ---------------------------------------------------------------------------
# Active business
# ---------------------------------------------------------------------------

class TestBusinessStage:
    def test_label_to_enum(self):
        assert stage_to_enum("Growth Stage (>6 months)") == "growth"
        assert stage_to_enum("mature") == "mature"
        assert stage_to_enum("Unknown") == "Unknown"

    def test_enum_to_label(self):
        assert stage_from_enum("early") == "Early Revenue (<6 months)"

    def test_seeded_enum_shows_as_label_and_submits_as_enum(self):
        form = ActiveBusinessForm({"business_stage": "pre-revenue"})
        assert form.form_data["business_stage"] == "Pre-revenue"
        assert form.to_payload()["business_stage"] == "pre-revenue"

    def test_empty_stage_is_omitted_from_payload(self):
        assert "business_stage" not in ActiveBusinessForm().to_payload()


class TestTeamMembers:
    def test_starts_with_one_blank_member(self):
        form = ActiveBusinessForm()
        assert form.team_members == [{"name": "", "position": "", "ownership": "", "salary": "", "years": ""}]

    def test_add_update_remove(self):
        form = ActiveBusinessForm()
        form.add_team_member()
        form.update_team_member(1, {"name": "Grace", "ownership": 40, "unknown": "x"})
        assert form.team_members[1]["name"] == "Grace"
        assert form.team_members[1]["ownership"] == "40"
        assert "unknown" not in form.team_members[1]
        form.remove_team_member(0)
        assert [m["name"] for m in form.team_members] == ["Grace"]

    def test_seeded_from_backend_fields(self):
        form = ActiveBusinessForm({"team_members": [
            {"name": "Ada", "position": "CTO", "ownership_percentage": 30, "salary": 1000, "years_with_company": 2},
        ]})
        assert form.team_members == [{"name": "Ada", "position": "CTO", "ownership": "30",
                                      "salary": "1000", "years": "2"}]
        assert "team_members" not in form.form_data

    def test_payload_and_draft_carry_team(self):
        form = ActiveBusinessForm()
        form.update_team_member(0, {"name": "Ada"})
        assert form.to_payload()["team_members"][0]["name"] == "Ada"

        restored = ActiveBusinessForm.from_dict(form.to_dict())
        assert restored.team_members[0]["name"] == "Ada"
