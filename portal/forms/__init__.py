"""
portal.forms: Intake wizards.

Import pattern::

    from portal.forms import FORM_TYPES, form_class
"""

from typing import Dict, Optional, Type

from portal.domain.enums import IntakeFormType
from portal.forms.active_business import ActiveBusinessForm
from portal.forms.ideation import IdeationForm
from portal.forms.investor import InvestorForm
from portal.forms.wizard import FormIncomplete, StepForm

FORM_TYPES: Dict[IntakeFormType, Type[StepForm]] = {
    IntakeFormType.IDEATION: IdeationForm,
    IntakeFormType.ACTIVE_BUSINESS: ActiveBusinessForm,
    IntakeFormType.INVESTOR: InvestorForm,
}


def form_class(form_type) -> Optional[Type[StepForm]]:
    """Wizard class for a form type string, or ``None`` if unknown."""
    try:
        return FORM_TYPES[IntakeFormType(form_type)]
    except ValueError:
        return None


__all__ = [
    "ActiveBusinessForm",
    "FORM_TYPES",
    "FormIncomplete",
    "IdeationForm",
    "InvestorForm",
    "StepForm",
    "form_class",
]
