"""
Entrepreneur pages for the SKY Solutions portal

GET  /entrepreneur                                 - dashboard stats + intake warning
GET  /entrepreneur/businesses                      - my businesses
GET  /entrepreneur/businesses/select-type          - ideation vs active choice
GET  /entrepreneur/businesses/new                  - new business form data
POST /entrepreneur/businesses/new                  - submit title + business plan PDF
GET  /entrepreneur/businesses/{id}                 - business detail
GET  /entrepreneur/intakes                         - my intake forms
GET  /entrepreneur/intakes/select                  - intake type choice
GET  /entrepreneur/intakes/{id}                    - intake detail
POST /entrepreneur/intakes/{id}/submit             - submit a saved intake for review
     /entrepreneur/intakes/create/{form_type}      - intake wizard (ideation | active_business)
     /entrepreneur/intakes/{id}/edit               - edit wizard for an existing intake
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile

from portal.api.client import ApiError
from portal.api.resources import get_backend
from portal.api.schemas import ActionResponse
from portal.auth import current_user
from portal.core.utils import format_money, is_filled, unwrap_list
from portal.dashboards import entrepreneur_stats, intake_warning, latest_intake
from portal.domain.enums import IntakeFormType, UploadKind, UserRole
from portal.domain.models import SessionUser, Toast
from portal.forms import FormIncomplete, form_class
from portal.funding import calculated_funding
from portal.navigation import layout
from portal.routers.wizard import WizardBinding, mount_wizard, normalize_intake
from portal.uploads import read_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/entrepreneur", tags=["entrepreneur"])

ENTREPRENEUR_FORM_TYPES = (IntakeFormType.IDEATION.value, IntakeFormType.ACTIVE_BUSINESS.value)

INTAKE_CHOICES = [
    {
        "id": IntakeFormType.IDEATION.value,
        "title": "Ideation Stage",
        "description": "For entrepreneurs with early-stage business ideas",
        "details": [
            "You have a business concept but haven't launched yet",
            "No revenue or operations yet",
            "Looking to validate your idea",
            "Seeking initial funding",
        ],
    },
    {
        "id": IntakeFormType.ACTIVE_BUSINESS.value,
        "title": "Active Business",
        "description": "For entrepreneurs with existing operating businesses",
        "details": [
            "You have an operational business",
            "Generating revenue or close to it",
            "Have customers and market traction",
            "Seeking expansion or growth funding",
        ],
    },
]

BUSINESS_TYPES = [
    {"id": "ideation", "title": "Ideation Stage", "href": "/entrepreneur/businesses/new?type=ideation"},
    {"id": "active", "title": "Active Business", "href": "/entrepreneur/businesses/new?type=active"},
]


def business_card(business: dict) -> dict:
    funding = calculated_funding(business.get("total_shares"), business.get("share_value"))
    return {**business, "funding": funding, "funding_label": format_money(funding)}


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

@router.get("")
async def dashboard(request: Request, user: SessionUser = Depends(current_user)):
    backend = get_backend()
    businesses = unwrap_list(await backend.entrepreneur.get_businesses(user.token), "businesses")

    try:
        latest = latest_intake(await backend.intake.get_all(user.token))
    except ApiError as exc:
        logger.warning("Intake status unavailable for %s: %s", user.email, exc.message)
        latest = None

    return {
        **layout(user, request.url.path),
        "stats": entrepreneur_stats(businesses),
        "intake_warning": intake_warning(latest, UserRole.ENTREPRENEUR),
        "recent_businesses": [business_card(b) for b in businesses[:5]],
    }


# ---------------------------------------------------------------------------
# Businesses
# ---------------------------------------------------------------------------

@router.get("/businesses")
async def list_businesses(request: Request, user: SessionUser = Depends(current_user)):
    businesses = unwrap_list(await get_backend().entrepreneur.get_businesses(user.token), "businesses")
    return {**layout(user, request.url.path), "businesses": [business_card(b) for b in businesses]}


@router.get("/businesses/select-type")
async def select_business_type(request: Request, user: SessionUser = Depends(current_user)):
    return {**layout(user, request.url.path), "choices": BUSINESS_TYPES}


@router.get("/businesses/new")
async def new_business_page(
    request: Request,
    business_type: str = Query("ideation", alias="type"),
    user: SessionUser = Depends(current_user),
):
    return {
        **layout(user, request.url.path),
        "business_type": business_type,
        "fields": [{"name": "title", "required": True}, {"name": "business_plan", "required": True,
                                                         "accept": "application/pdf", "max_size": "2MB"}],
    }


@router.post("/businesses/new", response_model=ActionResponse)
async def create_business(
    title: str = Form(""),
    business_plan: Optional[UploadFile] = File(None),
    user: SessionUser = Depends(current_user),
):
    plan = await read_upload(business_plan, UploadKind.BUSINESS_PLAN)
    missing = [name for name, value in (("title", title), ("business_plan", plan)) if not is_filled(value)]
    if missing:
        raise FormIncomplete(missing)

    result = await get_backend().entrepreneur.create_business(user.token, {"title": title, "business_plan": plan})
    logger.info("%s submitted business %r", user.email, title)
    return ActionResponse(
        toast=Toast.success("Business submitted successfully. Admin will review it soon."),
        redirect="/entrepreneur/businesses",
        data=result,
    )


@router.get("/businesses/{business_id}")
async def business_detail(business_id: str, request: Request, user: SessionUser = Depends(current_user)):
    business = await get_backend().entrepreneur.get_business(user.token, business_id)
    return {**layout(user, request.url.path), "business": business_card(business or {})}


# ---------------------------------------------------------------------------
# Intakes
# ---------------------------------------------------------------------------

@router.get("/intakes")
async def list_intakes(request: Request, user: SessionUser = Depends(current_user)):
    intakes = unwrap_list(await get_backend().intake.get_all(user.token), "intakes")
    return {**layout(user, request.url.path), "intakes": intakes}


@router.get("/intakes/select")
async def select_intake(request: Request, user: SessionUser = Depends(current_user)):
    return {**layout(user, request.url.path), "choices": INTAKE_CHOICES}


@router.get("/intakes/{intake_id}")
async def intake_detail(intake_id: str, request: Request, user: SessionUser = Depends(current_user)):
    intake = await get_backend().intake.get_by_id(user.token, intake_id)
    return {**layout(user, request.url.path), "intake": intake}


@router.post("/intakes/{intake_id}/submit", response_model=ActionResponse)
async def submit_intake(intake_id: str, user: SessionUser = Depends(current_user)):
    backend = get_backend()
    await backend.intake.submit(user.token, intake_id)
    intake = await backend.intake.get_by_id(user.token, intake_id)
    return ActionResponse(toast=Toast.success("Intake form submitted successfully"), data=intake)


# ---------------------------------------------------------------------------
# Intake wizards
# ---------------------------------------------------------------------------

async def _create_binding(request: Request, user: SessionUser) -> WizardBinding:
    form_type = request.path_params["form_type"]
    if form_type not in ENTREPRENEUR_FORM_TYPES:
        raise HTTPException(status_code=404, detail="Invalid form type")

    async def on_submit(data: dict):
        return await get_backend().intake.create(user.token, {"form_type": form_type, **data})

    return WizardBinding(
        form_key=f"entrepreneur:create:{form_type}",
        form_cls=form_class(form_type),
        on_submit=on_submit,
        redirect="/entrepreneur/intakes",
        success_message="Intake form saved successfully",
        title="Ideation Stage Intake Form" if form_type == "ideation" else "Active Business Intake Form",
    )


async def _edit_binding(request: Request, user: SessionUser) -> WizardBinding:
    intake_id = request.path_params["intake_id"]
    intake = await get_backend().intake.get_by_id(user.token, intake_id) or {}
    form_type = intake.get("form_type")
    if form_type not in ENTREPRENEUR_FORM_TYPES:
        raise HTTPException(status_code=404, detail="Invalid form type")

    async def on_submit(data: dict):
        return await get_backend().intake.update(user.token, intake_id, data)

    label = "Ideation Stage" if form_type == "ideation" else "Active Business"
    return WizardBinding(
        form_key=f"entrepreneur:edit:{intake_id}",
        form_cls=form_class(form_type),
        on_submit=on_submit,
        redirect=f"/entrepreneur/intakes/{intake_id}",
        success_message="Intake form updated successfully",
        initial_data=normalize_intake(intake),
        title=f"Edit {label} Intake Form",
    )


mount_wizard(router, "/intakes/create/{form_type}", _create_binding)
mount_wizard(router, "/intakes/{intake_id}/edit", _edit_binding)
