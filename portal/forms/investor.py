"""Investor intake: investment criteria and network agreement."""

from portal.core import constants
from portal.domain.enums import IntakeFormType
from portal.forms.wizard import StepForm


class InvestorForm(StepForm):
    form_type = IntakeFormType.INVESTOR

    step_titles = ("Personal Info", "Investment Criteria", "Experience", "Compliance", "Agreement")

    required_fields = ("agree_to_network", "agree_to_fee_understanding", "agree_to_confidentiality")

    defaults = {
        # Personal info
        "full_legal_name": "",
        "preferred_name": "",
        "title": "",
        "fund_name": "",
        "position_in_fund": "",
        "email": "",
        "phone": "",
        "whatsapp": "",
        # Investment criteria
        "industries_interested": [],
        "investment_stage": "",
        "min_investment": "",
        "max_investment": "",
        "geographic_focus": "",
        "investment_types_interested": [],
        # Experience
        "years_investing": "",
        "num_investments": "",
        "investment_philosophy": "",
        # Compliance
        "kyc_aml_compliant": False,
        "preferred_communication": "",
        "how_heard": "",
        # Agreement
        "agree_to_network": False,
        "agree_to_fee_understanding": False,
        "agree_to_confidentiality": False,
    }

    options = {
        "industries_interested": constants.INVESTOR_INDUSTRIES,
        "investment_stage": constants.INVESTMENT_STAGES,
        "investment_types_interested": constants.INVESTMENT_TYPES,
        "geographic_focus": constants.GEOGRAPHIC_FOCUS,
        "preferred_communication": constants.COMMUNICATION_CHANNELS,
    }
