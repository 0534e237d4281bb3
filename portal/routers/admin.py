"""
Admin pages for the SKY Solutions portal

GET    /admin                                   - platform stat cards
GET    /admin/businesses                        - submissions (status filter), public listings, categories
GET    /admin/businesses/{id}/funding-preview   - calculated funding for share terms
POST   /admin/businesses/{id}/approve           - approve with optional share terms
POST   /admin/businesses/{id}/reject            - reject (reason required)
DELETE /admin/businesses/{id}                   - delete a submission
POST   /admin/businesses/public                 - create a public listing (2MB image)
GET    /admin/users                             - users (role / active filters)
GET    /admin/users/{id}                        - user profile
PATCH  /admin/users/{id}/status                 - activate / deactivate
DELETE /admin/users/{id}                        - delete a user
POST   /admin/users/email                       - email one or more users
GET    /admin/categories                        - categories
POST   /admin/categories                        - create
PUT    /admin/categories/{id}                   - update
DELETE /admin/categories/{id}                   - delete
GET    /admin/investments                       - investments
PATCH  /admin/investments/{id}/status           - set investment status
GET    /admin/intakes                           - intake forms (status / type filter, search)
GET    /admin/intakes/{id}                      - intake detail
POST   /admin/intakes/{id}/approve              - approve
POST   /admin/intakes/{id}/reject               - reject (reason required)
GET    /admin/share-requests                    - pending share requests (paged)
POST   /admin/share-requests/{id}/approve       - approve N shares
POST   /admin/share-requests/{id}/reject        - reject
GET    /admin/review-queue                      - review queue + stats
GET    /admin/analytics                         - analytics dashboard
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile

from portal.api.resources import get_backend
from portal.api.schemas import (
    ActionResponse,
    ApproveSharesBody,
    CategoryBody,
    EmailMessage,
    RejectRequest,
    RejectSharesBody,
    StatusUpdate,
    UserStatusUpdate,
)
from portal.auth import current_user
from portal.core.constants import SHARE_REQUESTS_PAGE_SIZE
from portal.core.utils import drop_empty, is_filled, parse_float, parse_int, unwrap_list
from portal.dashboards import admin_stat_cards
from portal.domain.enums import BusinessStatus, IntakeStatus, UploadKind
from portal.domain.models import SessionUser, Toast
from portal.forms import FormIncomplete
from portal.funding import calculated_funding, format_calculated_funding
from portal.navigation import layout
from portal.uploads import read_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

ALL = "all"


def _filter(value: Optional[str]) -> Optional[str]:
    """"all" (or nothing) means no filter."""
    return None if not value or value == ALL else value


def _require_reason(reason: str) -> str:
    if not reason.strip():
        raise HTTPException(status_code=400, detail="Please provide a rejection reason")
    return reason


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

@router.get("")
async def dashboard(request: Request, user: SessionUser = Depends(current_user)):
    stats = await get_backend().admin.get_stats(user.token)
    return {**layout(user, request.url.path), "stats": stats, "cards": admin_stat_cards(stats)}


# ---------------------------------------------------------------------------
# Businesses
# ---------------------------------------------------------------------------

async def _submissions(token: str, status: Optional[str]) -> list:
    data = await get_backend().admin.get_businesses(token, status=_filter(status))
    return unwrap_list(data, "businesses")


@router.get("/businesses")
async def businesses(request: Request, status: str = ALL, user: SessionUser = Depends(current_user)):
    backend = get_backend()
    public = unwrap_list(await backend.admin.get_public_businesses(user.token), "businesses")
    categories = unwrap_list(await backend.admin.get_categories(user.token), "categories")
    return {
        **layout(user, request.url.path),
        "filter": status,
        "statuses": [ALL] + [s.value for s in (BusinessStatus.PENDING, BusinessStatus.APPROVED,
                                                BusinessStatus.REJECTED)],
        "businesses": await _submissions(user.token, status),
        "public_businesses": public,
        "categories": categories,
    }


@router.get("/businesses/{business_id}/funding-preview")
async def funding_preview(
    business_id: str,
    total_shares: str = "",
    share_value: str = "",
    user: SessionUser = Depends(current_user),
):
    return {
        "business_id": business_id,
        "calculated_funding": calculated_funding(total_shares, share_value),
        "calculated_funding_label": format_calculated_funding(total_shares, share_value),
    }


@router.post("/businesses/{business_id}/approve", response_model=ActionResponse)
async def approve_business(
    business_id: str,
    total_shares: str = Form(""),
    share_value: str = Form(""),
    minimum_shares_per_request: str = Form(""),
    status: str = ALL,
    user: SessionUser = Depends(current_user),
):
    form = {"status": BusinessStatus.APPROVED.value}
    terms = {
        "total_shares": parse_int(total_shares),
        "share_value": parse_float(share_value),
        "minimum_shares_per_request": parse_int(minimum_shares_per_request),
    }
    form.update(drop_empty(terms))

    await get_backend().admin.approve_business(user.token, business_id, form)
    logger.info("Admin %s approved business %s", user.email, business_id)
    return ActionResponse(
        toast=Toast.success("Business approved successfully"),
        data=await _submissions(user.token, status),
    )


@router.post("/businesses/{business_id}/reject", response_model=ActionResponse)
async def reject_business(
    business_id: str,
    body: RejectRequest,
    status: str = ALL,
    user: SessionUser = Depends(current_user),
):
    reason = _require_reason(body.reason)
    await get_backend().admin.reject_business(user.token, business_id, reason)
    logger.info("Admin %s rejected business %s", user.email, business_id)
    return ActionResponse(
        toast=Toast.success("Business rejected successfully"),
        data=await _submissions(user.token, status),
    )


@router.delete("/businesses/{business_id}", response_model=ActionResponse)
async def delete_business(business_id: str, status: str = ALL, user: SessionUser = Depends(current_user)):
    await get_backend().admin.delete_business(user.token, business_id)
    return ActionResponse(
        toast=Toast.success("Business deleted successfully"),
        data=await _submissions(user.token, status),
    )


@router.post("/businesses/public", response_model=ActionResponse)
async def create_public_business(
    title: str = Form(""),
    category: str = Form(""),
    description: str = Form(""),
    needed_funds: str = Form(""),
    image: Optional[UploadFile] = File(None),
    user: SessionUser = Depends(current_user),
):
    picture = await read_upload(image, UploadKind.BUSINESS_IMAGE)
    fields = {"title": title, "category": category, "description": description,
              "needed_funds": needed_funds, "image": picture}
    missing = [k for k, v in fields.items() if not is_filled(v)]
    if missing:
        raise FormIncomplete(missing)

    backend = get_backend()
    await backend.admin.create_public_business(user.token, fields)
    public = unwrap_list(await backend.admin.get_public_businesses(user.token), "businesses")
    return ActionResponse(toast=Toast.success("Public business listing created successfully"), data=public)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

async def _users(token: str, role: Optional[str] = None, is_active: Optional[str] = None) -> list:
    data = await get_backend().admin.get_users(token, role=_filter(role), is_active=_filter(is_active))
    return unwrap_list(data, "users")


@router.get("/users")
async def users(request: Request, role: str = ALL, is_active: str = ALL, user: SessionUser = Depends(current_user)):
    return {
        **layout(user, request.url.path),
        "filters": {"role": role, "is_active": is_active},
        "users": await _users(user.token, role, is_active),
    }


@router.post("/users/email", response_model=ActionResponse)
async def email_users(body: EmailMessage, user: SessionUser = Depends(current_user)):
    if not body.user_ids or not body.subject or not body.message:
        raise FormIncomplete()
    backend = get_backend()
    if len(body.user_ids) == 1:
        await backend.admin.send_email(user.token, body.user_ids[0], body.subject, body.message)
    else:
        await backend.admin.send_email_to_users(user.token, body.user_ids, body.subject, body.message)
    return ActionResponse(toast=Toast.success("Email sent successfully"))


@router.get("/users/{user_id}")
async def user_profile(user_id: str, request: Request, user: SessionUser = Depends(current_user)):
    profile = await get_backend().admin.get_user_profile(user.token, user_id)
    return {**layout(user, request.url.path), "profile": profile}


@router.patch("/users/{user_id}/status", response_model=ActionResponse)
async def update_user_status(user_id: str, body: UserStatusUpdate, user: SessionUser = Depends(current_user)):
    await get_backend().admin.update_user_status(user.token, user_id, body.is_active)
    verb = "activated" if body.is_active else "deactivated"
    return ActionResponse(toast=Toast.success(f"User {verb} successfully"), data=await _users(user.token))


@router.delete("/users/{user_id}", response_model=ActionResponse)
async def delete_user(user_id: str, user: SessionUser = Depends(current_user)):
    await get_backend().admin.delete_user(user.token, user_id)
    logger.info("Admin %s deleted user %s", user.email, user_id)
    return ActionResponse(toast=Toast.success("User deleted successfully"), data=await _users(user.token))


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

async def _categories(token: str) -> list:
    return unwrap_list(await get_backend().admin.get_categories(token), "categories")


def _category_fields(body: CategoryBody) -> CategoryBody:
    if not body.name or body.registration_fee is None:
        raise FormIncomplete(message="Please fill all fields")
    return body


@router.get("/categories")
async def categories(request: Request, user: SessionUser = Depends(current_user)):
    return {**layout(user, request.url.path), "categories": await _categories(user.token)}


@router.post("/categories", response_model=ActionResponse)
async def create_category(body: CategoryBody, user: SessionUser = Depends(current_user)):
    body = _category_fields(body)
    await get_backend().admin.create_category(user.token, body.name, body.registration_fee)
    return ActionResponse(toast=Toast.success("Category created successfully"), data=await _categories(user.token))


@router.put("/categories/{category_id}", response_model=ActionResponse)
async def update_category(category_id: str, body: CategoryBody, user: SessionUser = Depends(current_user)):
    body = _category_fields(body)
    await get_backend().admin.update_category(user.token, category_id, body.name, body.registration_fee)
    return ActionResponse(toast=Toast.success("Category updated successfully"), data=await _categories(user.token))


@router.delete("/categories/{category_id}", response_model=ActionResponse)
async def delete_category(category_id: str, user: SessionUser = Depends(current_user)):
    await get_backend().admin.delete_category(user.token, category_id)
    return ActionResponse(toast=Toast.success("Category deleted successfully"), data=await _categories(user.token))


# ---------------------------------------------------------------------------
# Investments
# ---------------------------------------------------------------------------

@router.get("/investments")
async def investments(request: Request, user: SessionUser = Depends(current_user)):
    rows = unwrap_list(await get_backend().admin.get_investments(user.token), "investments")
    return {**layout(user, request.url.path), "investments": rows}


@router.patch("/investments/{investment_id}/status", response_model=ActionResponse)
async def update_investment_status(investment_id: str, body: StatusUpdate, user: SessionUser = Depends(current_user)):
    backend = get_backend()
    await backend.admin.update_investment_status(user.token, investment_id, body.status)
    rows = unwrap_list(await backend.admin.get_investments(user.token), "investments")
    return ActionResponse(toast=Toast.success(f"Investment {body.status}"), data=rows)


# ---------------------------------------------------------------------------
# Intakes
# ---------------------------------------------------------------------------

def _intake_owner_name(intake: dict) -> str:
    owner = intake.get("user_id")
    return (owner.get("name") or "") if isinstance(owner, dict) else ""


def search_intakes(intakes: List[dict], search: str) -> List[dict]:
    """Case-insensitive match on applicant name, email, business name or owner name."""
    if not search:
        return intakes
    needle = search.lower()
    return [
        i for i in intakes
        if any(needle in (value or "").lower() for value in (
            i.get("full_name"), i.get("email"), i.get("business_name"), _intake_owner_name(i),
        ))
    ]


@router.get("/intakes")
async def intakes(
    request: Request,
    status: str = ALL,
    form_type: str = ALL,
    search: str = "",
    user: SessionUser = Depends(current_user),
):
    data = await get_backend().admin.get_intakes(user.token, status=_filter(status), form_type=_filter(form_type))
    rows = search_intakes(unwrap_list(data, "intakes"), search)
    return {
        **layout(user, request.url.path),
        "filters": {"status": status, "form_type": form_type, "search": search},
        "statuses": [ALL] + [s.value for s in IntakeStatus],
        "intakes": rows,
        "count": len(rows),
    }


@router.get("/intakes/{intake_id}")
async def intake_detail(intake_id: str, request: Request, user: SessionUser = Depends(current_user)):
    intake = await get_backend().admin.get_intake_by_id(user.token, intake_id)
    return {**layout(user, request.url.path), "intake": intake}


@router.post("/intakes/{intake_id}/approve", response_model=ActionResponse)
async def approve_intake(intake_id: str, user: SessionUser = Depends(current_user)):
    backend = get_backend()
    await backend.admin.update_intake_status(user.token, intake_id, IntakeStatus.APPROVED.value)
    logger.info("Admin %s approved intake %s", user.email, intake_id)
    return ActionResponse(
        toast=Toast.success("Intake form approved successfully"),
        data=await backend.admin.get_intake_by_id(user.token, intake_id),
    )


@router.post("/intakes/{intake_id}/reject", response_model=ActionResponse)
async def reject_intake(intake_id: str, body: RejectRequest, user: SessionUser = Depends(current_user)):
    reason = _require_reason(body.reason)
    backend = get_backend()
    await backend.admin.update_intake_status(user.token, intake_id, IntakeStatus.REJECTED.value, reason)
    logger.info("Admin %s rejected intake %s", user.email, intake_id)
    return ActionResponse(
        toast=Toast.success("Intake form rejected"),
        data=await backend.admin.get_intake_by_id(user.token, intake_id),
    )


# ---------------------------------------------------------------------------
# Share requests
# ---------------------------------------------------------------------------

async def _pending_requests(token: str, page: int) -> dict:
    data = await get_backend().shares.get_pending_requests(token, page=page, limit=SHARE_REQUESTS_PAGE_SIZE)
    data = data if isinstance(data, dict) else {"shareRequests": data or []}
    pagination = data.get("pagination") or {}
    return {
        "share_requests": data.get("shareRequests") or [],
        "page": page,
        "limit": SHARE_REQUESTS_PAGE_SIZE,
        "pages": pagination.get("pages") or 1,
    }


@router.get("/share-requests")
async def share_requests(request: Request, page: int = Query(1, ge=1), user: SessionUser = Depends(current_user)):
    return {**layout(user, request.url.path), **await _pending_requests(user.token, page)}


@router.post("/share-requests/{request_id}/approve", response_model=ActionResponse)
async def approve_share_request(request_id: str, body: ApproveSharesBody, user: SessionUser = Depends(current_user)):
    if body.approved_shares <= 0:
        raise HTTPException(status_code=400, detail="Please enter the number of shares to approve")
    await get_backend().shares.approve_request(user.token, request_id, body.approved_shares)
    logger.info("Admin %s approved %d shares on request %s", user.email, body.approved_shares, request_id)
    return ActionResponse(toast=Toast.success("Share request approved"), data=await _pending_requests(user.token, 1))


@router.post("/share-requests/{request_id}/reject", response_model=ActionResponse)
async def reject_share_request(request_id: str, body: RejectSharesBody, user: SessionUser = Depends(current_user)):
    reason = body.rejection_reason.strip() or "Rejected by admin"
    await get_backend().shares.reject_request(user.token, request_id, reason)
    return ActionResponse(toast=Toast.success("Share request rejected"), data=await _pending_requests(user.token, 1))


# ---------------------------------------------------------------------------
# Review queue & analytics
# ---------------------------------------------------------------------------

@router.get("/review-queue")
async def review_queue(
    request: Request,
    item_type: Optional[str] = Query(None, alias="type"),
    status: Optional[str] = None,
    priority: Optional[str] = None,
    page: int = Query(1, ge=1),
    user: SessionUser = Depends(current_user),
):
    backend = get_backend()
    filters = drop_empty({"type": _filter(item_type), "status": _filter(status),
                          "priority": _filter(priority), "page": page})
    return {
        **layout(user, request.url.path),
        "queue": await backend.admin.get_review_queue(user.token, **filters),
        "stats": await backend.admin.get_review_stats(user.token),
    }


@router.get("/analytics")
async def analytics(
    request: Request,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    user: SessionUser = Depends(current_user),
):
    backend = get_backend()
    return {
        **layout(user, request.url.path),
        "dashboard": await backend.admin.get_analytics(user.token, start_date, end_date),
        "businesses": await backend.admin.get_business_analytics(user.token),
        "investments": await backend.admin.get_investment_analytics(user.token),
    }
