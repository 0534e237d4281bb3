"""
Active-business intake: companies already trading.

Besides the flat fields this form keeps an editable team-member list and
translates the business stage between its display label and the backend
enum value.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from portal.core import constants
from portal.domain.enums import IntakeFormType
from portal.forms.wizard import StepForm

# Display label -> backend enum value
STAGE_TO_ENUM: Dict[str, str] = {
    "Pre-revenue": "pre-revenue",
    "Early Revenue (<6 months)": "early",
    "Growth Stage (>6 months)": "growth",
    "Mature": "mature",
}
STAGE_FROM_ENUM: Dict[str, str] = {v: k for k, v in STAGE_TO_ENUM.items()}


def stage_to_enum(label: str) -> str:
    """Unknown labels pass through; matching ignores case."""
    for display, value in STAGE_TO_ENUM.items():
        if label == display or label.lower() == display.lower():
            return value
    return label


def stage_from_enum(value: str) -> str:
    return STAGE_FROM_ENUM.get(value, value)


def blank_member() -> Dict[str, str]:
    return {"name": "", "position": "", "ownership": "", "salary": "", "years": ""}


def _member_from_backend(member: dict) -> Dict[str, str]:
    def text(value: Any) -> str:
        return "" if value is None else str(value)

    return {
        "name": member.get("name") or "",
        "position": member.get("position") or "",
        "ownership": text(member.get("ownership_percentage")),
        "salary": text(member.get("salary")),
        "years": text(member.get("years_with_company")),
    }


class ActiveBusinessForm(StepForm):
    form_type = IntakeFormType.ACTIVE_BUSINESS

    step_titles = (
        "Founder Info",
        "Business Info",
        "Operations",
        "Financials",
        "Market Position",
        "Funding & Team",
        "Terms",
    )

    required_fields = ("agreed_to_terms", "agreed_to_fees")

    defaults = {
        # Founder info
        "full_name": "",
        "country": "",
        "national_id": "",
        "date_of_birth": "",
        "phone": "",
        "email": "",
        "physical_address": "",
        "gender": "",
        "marital_status": "",
        "dependents": "",
        "how_heard": "",
        "current_employment": {"position": "", "company": "", "start_date": "", "salary": ""},
        "previous_employment": [{"company": "", "position": ""}],
        "education": {"degree": "", "institution": "", "year": "", "field": ""},
        # Business info
        "business_legal_name": "",
        "trading_name": "",
        "registration_number": "",
        "date_of_incorporation": "",
        "business_address": "",
        "website": "",
        "business_phone": "",
        "business_email": "",
        "primary_contact": "",
        "primary_contact_position": "",
        # Operations
        "industry": "",
        "fulltime_employees": "",
        "parttime_employees": "",
        "business_stage": "",
        "business_model": "",
        "main_products": "",
        # Financials
        "revenue_month1": "",
        "revenue_month2": "",
        "revenue_month3": "",
        "monthly_expenses": "",
        "profit_margin": "",
        "bank_balance": "",
        "outstanding_debts": "",
        "previous_funding_source": "",
        "previous_funding_amount": "",
        "previous_funding_date": "",
        # Market
        "customer_base": "",
        "cac": "",
        "ltv": "",
        "monthly_growth": "",
        "competitors": "",
        "partnerships": "",
        # Funding
        "funding_amount": "",
        "funding_type": "",
        "valuation": "",
        "marketing_sales": "",
        "product_dev": "",
        "team_expansion": "",
        "operations": "",
        "debt_repayment": "",
        "other_allocation": "",
        "expected_milestones": "",
        "investor_types": [],
        "support_needed": [],
        # Terms
        "agreed_to_terms": False,
        "agreed_to_fees": False,
        "agreed_to_confidentiality": False,
    }

    options = {
        "gender": constants.GENDERS,
        "marital_status": constants.MARITAL_STATUSES,
        "industry": constants.ACTIVE_BUSINESS_INDUSTRIES,
        "business_stage": constants.BUSINESS_STAGES,
        "previous_funding_source": constants.FUNDING_SOURCES,
        "funding_type": constants.FUNDING_TYPES,
        "investor_types": constants.INVESTOR_TYPES,
        "support_needed": constants.SUPPORT_TYPES,
    }

    def __init__(self, initial_data: Optional[Dict[str, Any]] = None) -> None:
        self.team_members: List[Dict[str, str]] = [blank_member()]
        super().__init__(initial_data)

    def seed(self, initial_data: Dict[str, Any]) -> Dict[str, Any]:
        members = initial_data.pop("team_members", None)
        if isinstance(members, list) and members:
            self.team_members = [_member_from_backend(m) for m in members if isinstance(m, dict)]
        stage = initial_data.get("business_stage")
        initial_data["business_stage"] = stage_from_enum(stage) if stage else ""
        return initial_data

    # ------------------------------------------------------------------
    # Team members
    # ------------------------------------------------------------------

    def add_team_member(self) -> None:
        self.team_members.append(blank_member())

    def update_team_member(self, index: int, fields: Dict[str, Any]) -> None:
        member = self.team_members[index]
        for key, value in fields.items():
            if key in member:
                member[key] = "" if value is None else str(value)

    def remove_team_member(self, index: int) -> None:
        del self.team_members[index]

    # ------------------------------------------------------------------

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        stage = payload.pop("business_stage", "")
        if stage:
            payload["business_stage"] = stage_to_enum(stage)
        payload["team_members"] = copy.deepcopy(self.team_members)
        return payload

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "team_members": self.team_members}

    def restore(self, data: Dict[str, Any]) -> None:
        members = data.get("team_members")
        if isinstance(members, list):
            self.team_members = [{**blank_member(), **m} for m in members if isinstance(m, dict)]
