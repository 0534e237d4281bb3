"""
Admin business-operations pages: employees, expenses, payroll and invoices

GET  /admin/employees                      - employees (status / search, paged) + business choices
POST /admin/employees                      - add an employee
GET  /admin/employees/{id}                 - attendance and performance for one employee
GET  /admin/expenses                       - expenses (category / status / date range, paged) + summary
GET  /admin/expenses/export.csv            - current expense page as CSV
POST /admin/expenses                       - add an expense (optional receipt, 5MB cap)
GET  /admin/payroll                        - payslips (status, paged) + totals
POST /admin/payroll                        - generate a payslip
GET  /admin/payroll/employees              - employees of one business (payslip form)
GET  /admin/payroll/invoices               - vendor invoices (status, paged) + totals
POST /admin/payroll/invoices               - add an invoice
PUT  /admin/payroll/invoices/{id}          - update an invoice's status
"""

import csv
import io
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel

from portal import config
from portal.api.resources import get_backend
from portal.api.schemas import ActionResponse, EmployeeCreate, InvoiceCreate, PayslipCreate, StatusUpdate
from portal.auth import current_user
from portal.core.utils import count_by, drop_empty, is_filled, parse_float, sum_field, unwrap_list
from portal.domain.enums import BusinessStatus, UploadKind
from portal.domain.models import SessionUser, Toast
from portal.forms import FormIncomplete
from portal.navigation import layout
from portal.uploads import read_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["operations"])

EXPENSE_CSV_HEADER = ("Date", "Category", "Amount", "Description", "Payment Method", "Status")


def _require(body: BaseModel, fields) -> None:
    missing = [f for f in fields if not is_filled(getattr(body, f))]
    if missing:
        raise FormIncomplete(missing)


def _page(data, key: str) -> dict:
    data = data if isinstance(data, dict) else {key: data or []}
    pagination = data.get("pagination") or {}
    return {key: unwrap_list(data, key), "pages": pagination.get("pages") or 1}


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------

async def business_choices(token: str) -> List[dict]:
    """Approved submissions followed by public listings."""
    backend = get_backend()
    approved = await backend.admin.get_businesses(token, status=BusinessStatus.APPROVED.value)
    public = await backend.admin.get_public_businesses(token)
    return unwrap_list(approved, "businesses") + unwrap_list(public, "businesses")


@router.get("/employees")
async def employees(
    request: Request,
    page: int = Query(1, ge=1),
    status: str = "all",
    search: str = "",
    user: SessionUser = Depends(current_user),
):
    data = await get_backend().employees.list(
        user.token, page=page, limit=config.DEFAULT_PAGE_SIZE, status=status, search=search or None,
    )
    listing = _page(data, "employees")
    rows = listing["employees"]
    return {
        **layout(user, request.url.path),
        **listing,
        "page": page,
        "filters": {"status": status, "search": search},
        "stats": {"total": len(rows), "active": count_by(rows, "status", "active")},
        "businesses": await business_choices(user.token),
    }


@router.post("/employees", response_model=ActionResponse)
async def add_employee(body: EmployeeCreate, user: SessionUser = Depends(current_user)):
    _require(body, body.required)
    payload = body.model_dump(by_alias=True)
    payload["salary"] = parse_float(body.salary)
    data = await get_backend().employees.create(user.token, payload)
    logger.info("Admin %s added employee %s to business %s", user.email, body.email, body.business_id)
    return ActionResponse(toast=Toast.success("Employee added successfully"), data=data)


@router.get("/employees/{employee_id}")
async def employee_detail(
    employee_id: str,
    request: Request,
    business_id: str = Query(..., alias="businessId"),
    user: SessionUser = Depends(current_user),
):
    backend = get_backend()
    return {
        **layout(user, request.url.path),
        "attendance": await backend.employees.get_attendance(user.token, business_id, employee_id),
        "performance": await backend.employees.get_performance(user.token, business_id, employee_id),
    }


# ---------------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------------

async def _expenses(token: str, page: int, category: str, status: str,
                    start_date: Optional[str], end_date: Optional[str]) -> dict:
    # "all" is forwarded; the backend treats it as no filter.
    data = await get_backend().expenses.list(
        token, page=page, limit=config.DEFAULT_PAGE_SIZE, category=category, status=status,
        startDate=start_date, endDate=end_date,
    )
    return _page(data, "expenses")


def expenses_csv(expenses: List[dict]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(EXPENSE_CSV_HEADER)
    for e in expenses:
        writer.writerow([
            str(e.get("date") or "")[:10],
            e.get("category", ""),
            e.get("amount", ""),
            e.get("description", ""),
            e.get("payment_method", ""),
            e.get("status", ""),
        ])
    return buf.getvalue()


@router.get("/expenses")
async def expenses(
    request: Request,
    page: int = Query(1, ge=1),
    category: str = "all",
    status: str = "all",
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    user: SessionUser = Depends(current_user),
):
    listing = await _expenses(user.token, page, category, status, start_date, end_date)
    return {
        **layout(user, request.url.path),
        **listing,
        "page": page,
        "filters": drop_empty({"category": category, "status": status,
                               "startDate": start_date, "endDate": end_date}),
        "stats": await get_backend().expenses.summary(user.token),
    }


@router.get("/expenses/export.csv")
async def export_expenses(
    page: int = Query(1, ge=1),
    category: str = "all",
    status: str = "all",
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    user: SessionUser = Depends(current_user),
):
    listing = await _expenses(user.token, page, category, status, start_date, end_date)
    filename = f"expenses-{date.today().isoformat()}.csv"
    return Response(
        content=expenses_csv(listing["expenses"]),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/expenses", response_model=ActionResponse)
async def add_expense(
    category: str = Form(""),
    amount: str = Form(""),
    expense_date: str = Form("", alias="date"),
    description: str = Form(""),
    payment_method: str = Form(""),
    receipt: Optional[UploadFile] = File(None),
    user: SessionUser = Depends(current_user),
):
    receipt_file = await read_upload(receipt, UploadKind.RECEIPT)
    form = {"category": category, "amount": amount, "date": expense_date,
            "description": description, "payment_method": payment_method}
    missing = [k for k, v in form.items() if not is_filled(v)]
    if missing:
        raise FormIncomplete(missing, message="Please fill in all required fields")
    if receipt_file is not None:
        form["receipt"] = receipt_file

    data = await get_backend().expenses.create(user.token, form)
    logger.info("Admin %s added %s expense of %s", user.email, category, amount)
    return ActionResponse(toast=Toast.success("Expense added successfully"), data=data)


# ---------------------------------------------------------------------------
# Payroll & invoices
# ---------------------------------------------------------------------------

def payroll_totals(payrolls: List[dict]) -> dict:
    return {
        "totalPayroll": sum_field(payrolls, "net_amount"),
        "paidPayroll": sum_field([p for p in payrolls if p.get("status") == "paid"], "net_amount"),
    }


def invoice_totals(invoices: List[dict]) -> dict:
    return {
        "pendingInvoices": count_by(invoices, "status", "pending"),
        "overdueInvoices": count_by(invoices, "status", "overdue"),
        "totalAmount": sum_field(invoices, "amount"),
    }


@router.get("/payroll")
async def payroll(
    request: Request,
    page: int = Query(1, ge=1),
    status: str = "all",
    user: SessionUser = Depends(current_user),
):
    data = await get_backend().payroll.list(user.token, page=page, limit=config.DEFAULT_PAGE_SIZE, status=status)
    listing = _page(data, "payrolls")
    return {
        **layout(user, request.url.path),
        **listing,
        "page": page,
        "filters": {"status": status},
        "stats": payroll_totals(listing["payrolls"]),
        "businesses": await business_choices(user.token),
    }


@router.post("/payroll", response_model=ActionResponse)
async def generate_payslip(body: PayslipCreate, user: SessionUser = Depends(current_user)):
    _require(body, body.required)
    payload = body.model_dump(by_alias=True)
    for field in ("salary", "deductions", "taxes"):
        payload[field] = parse_float(payload[field]) or 0.0
    data = await get_backend().payroll.generate_payslip(user.token, payload)
    return ActionResponse(toast=Toast.success("Payslip generated successfully"), data=data)


@router.get("/payroll/employees")
async def payroll_employees(business_id: str = Query(..., alias="businessId"), user: SessionUser = Depends(current_user)):
    data = await get_backend().employees.list(user.token, businessId=business_id)
    return {"employees": unwrap_list(data, "employees")}


@router.get("/payroll/invoices")
async def invoices(
    request: Request,
    page: int = Query(1, ge=1),
    status: str = "all",
    user: SessionUser = Depends(current_user),
):
    data = await get_backend().payroll.list_invoices(
        user.token, page=page, limit=config.DEFAULT_PAGE_SIZE, status=status,
    )
    listing = _page(data, "invoices")
    return {
        **layout(user, request.url.path),
        **listing,
        "page": page,
        "filters": {"status": status},
        "stats": invoice_totals(listing["invoices"]),
        "businesses": await business_choices(user.token),
    }


@router.post("/payroll/invoices", response_model=ActionResponse)
async def add_invoice(body: InvoiceCreate, user: SessionUser = Depends(current_user)):
    _require(body, body.required)
    payload = body.model_dump(by_alias=True)
    payload["amount"] = parse_float(body.amount)
    if not body.recurring:
        payload.pop("frequency", None)
    data = await get_backend().payroll.create_invoice(user.token, payload)
    return ActionResponse(toast=Toast.success("Invoice added successfully"), data=data)


@router.put("/payroll/invoices/{invoice_id}", response_model=ActionResponse)
async def update_invoice(invoice_id: str, body: StatusUpdate, user: SessionUser = Depends(current_user)):
    data = await get_backend().payroll.update_invoice(user.token, invoice_id, {"status": body.status})
    return ActionResponse(toast=Toast.success(f"Invoice marked {body.status}"), data=data)
