"""
Investor pages for the SKY Solutions portal

GET  /investor                                - dashboard stats + intake warning
GET  /investor/browse                         - approved listings (search, category)
GET  /investor/browse/{id}                    - listing detail + share-request preview
POST /investor/browse/{id}/request-shares     - request shares (min / remaining checks first)
GET  /investor/investments                    - my investments
GET  /investor/recommendations                - recommended listings
     /investor/intake                         - investor intake wizard
     /investor/intakes/{id}/edit              - edit wizard for an existing intake
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from portal.api.client import ApiError
from portal.api.resources import get_backend
from portal.api.schemas import ActionResponse, ShareRequestBody
from portal.auth import current_user
from portal.core.constants import ALL_CATEGORIES, BROWSE_CATEGORIES
from portal.core.utils import format_money, parse_int, unwrap_list
from portal.dashboards import intake_warning, investor_stats, latest_intake
from portal.domain.enums import IntakeFormType, UserRole
from portal.domain.models import SessionUser, Toast
from portal.forms import InvestorForm
from portal.funding import minimum_investment, share_request_amount, validate_share_request
from portal.navigation import layout
from portal.routers.wizard import WizardBinding, mount_wizard, normalize_intake

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/investor", tags=["investor"])


def category_name(business: dict) -> str:
    category = business.get("category_id")
    if isinstance(category, dict):
        return category.get("name") or "N/A"
    return category or "N/A"


def listing_card(business: dict) -> dict:
    minimum = minimum_investment(business)
    return {
        **business,
        "category_name": category_name(business),
        "remaining_shares": business.get("remaining_shares") or 0,
        "minimum_investment": minimum,
        "minimum_investment_label": format_money(minimum) if minimum is not None else None,
        "can_request": bool(business.get("remaining_shares")),
    }


def share_preview(business: dict, requested_shares: Optional[str]) -> Optional[dict]:
    if not requested_shares or not business.get("share_value"):
        return None
    amount = share_request_amount(requested_shares, business.get("share_value"))
    return {
        "requested_shares": parse_int(requested_shares) or 0,
        "share_value": business.get("share_value"),
        "amount": amount,
        "amount_label": format_money(amount),
        "error": validate_share_request(business, requested_shares),
    }


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

@router.get("")
async def dashboard(request: Request, user: SessionUser = Depends(current_user)):
    backend = get_backend()
    investments = unwrap_list(await backend.investor.get_investments(user.token), "investments")

    try:
        latest = latest_intake(await backend.intake.get_all(user.token))
    except ApiError as exc:
        logger.warning("Intake status unavailable for %s: %s", user.email, exc.message)
        latest = None

    return {
        **layout(user, request.url.path),
        "stats": investor_stats(investments),
        "intake_warning": intake_warning(latest, UserRole.INVESTOR),
        "recent_investments": investments[:5],
    }


# ---------------------------------------------------------------------------
# Browse
# ---------------------------------------------------------------------------

@router.get("/browse")
async def browse(
    request: Request,
    search: str = "",
    category: str = ALL_CATEGORIES,
    user: SessionUser = Depends(current_user),
):
    filters = {}
    if search:
        filters["search"] = search
    if category and category != ALL_CATEGORIES:
        filters["category"] = category

    businesses = unwrap_list(await get_backend().investor.get_businesses(user.token, **filters), "businesses")
    return {
        **layout(user, request.url.path),
        "filters": {"search": search, "category": category, "categories": list(BROWSE_CATEGORIES)},
        "businesses": [listing_card(b) for b in businesses],
    }


@router.get("/browse/{business_id}")
async def browse_detail(
    business_id: str,
    request: Request,
    requested_shares: Optional[str] = Query(None),
    user: SessionUser = Depends(current_user),
):
    business = await get_backend().investor.get_business(user.token, business_id) or {}
    return {
        **layout(user, request.url.path),
        "business": listing_card(business),
        "preview": share_preview(business, requested_shares),
    }


@router.post("/browse/{business_id}/request-shares", response_model=ActionResponse)
async def request_shares(business_id: str, body: ShareRequestBody, user: SessionUser = Depends(current_user)):
    backend = get_backend()
    business = await backend.investor.get_business(user.token, business_id) or {}

    error = validate_share_request(business, body.requested_shares)
    if error:
        raise HTTPException(status_code=400, detail=error)

    shares = parse_int(body.requested_shares)
    await backend.investor.request_shares(user.token, business_id, shares)
    logger.info("%s requested %d shares of %s", user.email, shares, business_id)

    refreshed = await backend.investor.get_business(user.token, business_id) or {}
    return ActionResponse(
        toast=Toast.success("Your share request has been submitted for review."),
        data=listing_card(refreshed),
    )


# ---------------------------------------------------------------------------
# Investments & recommendations
# ---------------------------------------------------------------------------

@router.get("/investments")
async def investments(request: Request, user: SessionUser = Depends(current_user)):
    rows = unwrap_list(await get_backend().investor.get_investments(user.token), "investments")
    return {**layout(user, request.url.path), "investments": rows, "stats": investor_stats(rows)}


@router.get("/recommendations")
async def recommendations(request: Request, user: SessionUser = Depends(current_user)):
    rows = unwrap_list(await get_backend().investor.get_recommendations(user.token), "recommendations")
    return {**layout(user, request.url.path), "businesses": [listing_card(b) for b in rows]}


# ---------------------------------------------------------------------------
# Intake wizards
# ---------------------------------------------------------------------------

async def _create_binding(request: Request, user: SessionUser) -> WizardBinding:
    async def on_submit(data: dict):
        return await get_backend().intake.create(user.token, {"form_type": IntakeFormType.INVESTOR.value, **data})

    return WizardBinding(
        form_key="investor:create",
        form_cls=InvestorForm,
        on_submit=on_submit,
        redirect="/investor",
        success_message="Intake form saved successfully",
        title="Investor Intake Form",
    )


async def _edit_binding(request: Request, user: SessionUser) -> WizardBinding:
    intake_id = request.path_params["intake_id"]
    intake = await get_backend().intake.get_by_id(user.token, intake_id) or {}
    if intake.get("form_type") != IntakeFormType.INVESTOR.value:
        raise HTTPException(status_code=404, detail="Invalid form type")

    async def on_submit(data: dict):
        return await get_backend().intake.update(user.token, intake_id, data)

    return WizardBinding(
        form_key=f"investor:edit:{intake_id}",
        form_cls=InvestorForm,
        on_submit=on_submit,
        redirect=f"/investor/intakes/{intake_id}/edit",
        success_message="Intake form updated successfully",
        initial_data=normalize_intake(intake),
        title="Edit Investor Intake Form",
    )


mount_wizard(router, "/intake", _create_binding)
mount_wizard(router, "/intakes/{intake_id}/edit", _edit_binding)
