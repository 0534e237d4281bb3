"""
Post-registration intake wizard, shared by entrepreneurs and investors

GET  /intake-wizard[?type=ideation|active_business]   - type choice or the wizard
POST /intake-wizard/skip                              - leave without an intake (signs out)
     /intake-wizard/...                               - wizard actions (see portal.routers.wizard)

Entrepreneurs pick ideation or active_business via ``type``; investors always
get the investor form.  Submitting marks the session's user as having
completed intake.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from portal.api.resources import get_backend
from portal.auth import COOKIE_NAME, current_user
from portal.domain.enums import IntakeFormType, UserRole
from portal.domain.models import SessionUser
from portal.forms import FormIncomplete, form_class
from portal.forms.store import WizardStore
from portal.navigation import layout
from portal.role_guard import get_role_base_path
from portal.routers.entrepreneur import ENTREPRENEUR_FORM_TYPES, INTAKE_CHOICES
from portal.routers.wizard import WizardBinding, mount_wizard, wizard_page

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/intake-wizard", tags=["intake"])


def _form_type(request: Request, user: SessionUser) -> str:
    if user.role == UserRole.INVESTOR:
        return IntakeFormType.INVESTOR.value
    if user.role != UserRole.ENTREPRENEUR:
        raise HTTPException(status_code=403, detail="Intake forms are for entrepreneurs and investors")
    form_type = request.query_params.get("type")
    if not form_type:
        raise FormIncomplete(message="Please select a form type")
    if form_type not in ENTREPRENEUR_FORM_TYPES:
        raise HTTPException(status_code=404, detail="Invalid form type")
    return form_type


async def _binding(request: Request, user: SessionUser) -> WizardBinding:
    form_type = _form_type(request, user)

    async def on_submit(data: dict):
        return await get_backend().intake.create(user.token, {**data, "form_type": form_type})

    return WizardBinding(
        form_key=f"intake-wizard:{form_type}",
        form_cls=form_class(form_type),
        on_submit=on_submit,
        redirect=get_role_base_path(user.role),
        success_message="Your intake form has been submitted successfully",
        title="Complete Your Profile",
        marks_intake_completed=True,
    )


@router.get("")
async def intake_wizard(request: Request, user: SessionUser = Depends(current_user)):
    if user.role == UserRole.ENTREPRENEUR and not request.query_params.get("type"):
        return {**layout(user, request.url.path), "choices": INTAKE_CHOICES}
    return wizard_page(request, user, await _binding(request, user))


@router.post("/skip")
async def skip(user: SessionUser = Depends(current_user)):
    """Skipping the intake signs the user out, as on first login."""
    WizardStore().clear_session(user.session_id)
    logger.info("%s skipped the intake wizard", user.email)
    response = JSONResponse({"status": "logged_out", "redirect": "/login"})
    response.delete_cookie(COOKIE_NAME)
    return response


mount_wizard(router, "", _binding, include_view=False)
