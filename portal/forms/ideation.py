"""Ideation-stage intake: founders with an idea but no operating business."""

from __future__ import annotations

from typing import List

from portal.core import constants
from portal.domain.enums import IntakeFormType
from portal.forms.wizard import StepForm

MIN_WHY_RIGHT_PERSON = 10


class IdeationForm(StepForm):
    form_type = IntakeFormType.IDEATION

    step_titles = (
        "Founder Information",
        "Business Concept",
        "Market Understanding",
        "Planning & Research",
        "Funding Needs",
        "Founder Background",
        "Terms & Signature",
    )

    required_fields = ("agreed_to_terms", "agreed_to_fees", "agreed_to_confidentiality")

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
        "current_occupation": "",
        "how_heard": "",
        # Employment & education
        "current_employment": {"position": "", "company": "", "start_date": "", "salary": ""},
        "previous_employment": [{"company": "", "position": "", "dates": ""}],
        "education": {"degree": "", "institution": "", "year": "", "field": ""},
        "entrepreneurial_exp": "",
        "work_experience": "",
        "education_level": "",
        # Business concept
        "business_name": "",
        "tagline": "",
        "industry": "",
        "idea_description": "",
        "problem_solved": "",
        "target_customers": "",
        "why_now": "",
        # Market
        "market_size": "",
        "competitors": "",
        "unique_value_proposition": "",
        "marketing_channels": [],
        # Planning
        "market_research_done": False,
        "market_research_description": "",
        "customer_interviews_done": False,
        "customer_interviews_feedback": "",
        # Funding
        "funding_amount": "",
        "product_dev": "",
        "marketing": "",
        "operations": "",
        "salaries": "",
        "other_allocation": "",
        "investor_type_seeking": [],
        "support_needed": [],
        # Founder background
        "why_right_person": "",
        "full_time": False,
        "service_package": "",
        # Terms
        "agreed_to_terms": False,
        "agreed_to_fees": False,
        "agreed_to_confidentiality": False,
    }

    options = {
        "gender": constants.GENDERS,
        "marital_status": constants.MARITAL_STATUSES,
        "industry": constants.IDEATION_INDUSTRIES,
        "marketing_channels": constants.MARKETING_CHANNELS,
        "investor_type_seeking": constants.INVESTOR_TYPES,
        "support_needed": constants.SUPPORT_TYPES,
        "service_package": constants.SERVICE_PACKAGES,
    }

    def warnings(self) -> List[str]:
        why = self.form_data.get("why_right_person") or ""
        if why and len(why) < MIN_WHY_RIGHT_PERSON:
            return [f"Please provide at least {MIN_WHY_RIGHT_PERSON} characters"]
        return []
