"""
portal.api.resources: Backend endpoints grouped by resource.

Each group wraps :class:`~portal.api.client.ApiClient` with one coroutine
per backend operation.  Token comes first in every signature; list filters
are keyword arguments and are dropped from the query string when empty.

Import pattern::

    from portal.api.resources import get_backend
    backend = get_backend()
    businesses = await backend.investor.get_businesses(token, category="Fintech")
"""

from __future__ import annotations

import threading
from typing import Any, Dict, List, Optional

from portal.api.client import ApiClient
from portal.core.constants import RECOMMENDATIONS_LIMIT, SHARE_REQUESTS_PAGE_SIZE


class _Resource:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def _call(self, endpoint: str, token: Optional[str] = None, **kwargs) -> Any:
        return await self._client.request(endpoint, token=token, **kwargs)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

class AuthApi(_Resource):
    async def register(self, data: Dict[str, Any]) -> Any:
        return await self._call("/auth/register", method="POST", body=data)

    async def login(self, email: str, password: str) -> Any:
        return await self._call("/auth/login", method="POST", body={"email": email, "password": password})

    async def verify(self, verification_token: str) -> Any:
        return await self._call(f"/auth/verify/{verification_token}")

    async def resend_verification(self, email: str) -> Any:
        return await self._call("/auth/resend-verification", method="POST", body={"email": email})

    async def forgot_password(self, email: str) -> Any:
        return await self._call("/auth/forgot-password", method="POST", body={"email": email})

    async def reset_password(self, reset_token: str, password: str) -> Any:
        return await self._call(f"/auth/reset-password/{reset_token}", method="POST", body={"password": password})

    async def get_profile(self, token: str) -> Any:
        return await self._call("/auth/profile", token)

    async def update_profile(self, token: str, data: Dict[str, Any]) -> Any:
        return await self._call("/auth/profile", token, method="PUT", body=data)

    async def submit_documents(self, token: str, form: Dict[str, Any]) -> Any:
        return await self._call("/auth/submit-documents", token, method="POST", body=form, is_form_data=True)


# ---------------------------------------------------------------------------
# Intake submissions
# ---------------------------------------------------------------------------

class IntakeApi(_Resource):
    async def get_all(self, token: str, page: Optional[int] = None, limit: Optional[int] = None) -> Any:
        return await self._call("/intake", token, params={"page": page, "limit": limit})

    async def get_by_id(self, token: str, intake_id: str) -> Any:
        return await self._call(f"/intake/{intake_id}", token)

    async def create(self, token: Optional[str], data: Dict[str, Any]) -> Any:
        return await self._call("/intake", token, method="POST", body=data)

    async def update(self, token: str, intake_id: str, data: Dict[str, Any]) -> Any:
        return await self._call(f"/intake/{intake_id}", token, method="PUT", body=data)

    async def submit(self, token: str, intake_id: str) -> Any:
        return await self._call(f"/intake/{intake_id}/submit", token, method="POST")


# ---------------------------------------------------------------------------
# Public listings (no token)
# ---------------------------------------------------------------------------

class PublicApi(_Resource):
    async def get_businesses(self, category: Optional[str] = None, search: Optional[str] = None,
                             page: Optional[int] = None, limit: Optional[int] = None) -> Any:
        params = {"category": category, "search": search, "page": page, "limit": limit}
        return await self._call("/public/businesses", params=params)

    async def get_categories(self) -> Any:
        return await self._call("/public/categories")

    async def get_stats(self) -> Any:
        return await self._call("/public/stats")


# ---------------------------------------------------------------------------
# Entrepreneur
# ---------------------------------------------------------------------------

class EntrepreneurApi(_Resource):
    async def get_businesses(self, token: str) -> Any:
        return await self._call("/entrepreneur/business", token)

    async def get_business(self, token: str, business_id: str) -> Any:
        return await self._call(f"/entrepreneur/business/{business_id}", token)

    async def create_business(self, token: str, form: Dict[str, Any]) -> Any:
        return await self._call("/entrepreneur/business", token, method="POST", body=form, is_form_data=True)


# ---------------------------------------------------------------------------
# Investor
# ---------------------------------------------------------------------------

class InvestorApi(_Resource):
    async def get_businesses(self, token: str, **filters) -> Any:
        """Filters: category, search, min/max_funding, min/max_equity, min/max_shares, sort_by, page, limit."""
        return await self._call("/investor/businesses", token, params=filters)

    async def get_business(self, token: str, business_id: str) -> Any:
        return await self._call(f"/investor/businesses/{business_id}", token)

    async def request_shares(self, token: str, business_id: str, requested_shares: int) -> Any:
        return await self._call(f"/investor/businesses/{business_id}/request-shares", token, method="POST",
                                body={"requested_shares": requested_shares})

    async def get_investments(self, token: str) -> Any:
        return await self._call("/investor/investments", token)

    async def get_recommendations(self, token: str, limit: int = RECOMMENDATIONS_LIMIT) -> Any:
        return await self._call("/recommendations/businesses", token, params={"limit": limit})


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------

class AdminApi(_Resource):
    async def get_stats(self, token: str) -> Any:
        return await self._call("/admin/stats", token)

    # Businesses ------------------------------------------------------------

    async def get_businesses(self, token: str, status: Optional[str] = None, category: Optional[str] = None,
                             page: Optional[int] = None, limit: Optional[int] = None) -> Any:
        params = {"status": status, "category": category, "page": page, "limit": limit}
        return await self._call("/admin/businesses", token, params=params)

    async def delete_business(self, token: str, business_id: str) -> Any:
        return await self._call(f"/admin/businesses/{business_id}", token, method="DELETE")

    async def approve_business(self, token: str, business_id: str, form: Dict[str, Any]) -> Any:
        return await self._call(f"/admin/businesses/{business_id}/approve", token, method="POST", body=form,
                                is_form_data=True)

    async def reject_business(self, token: str, business_id: str, reason: str) -> Any:
        return await self._call(f"/admin/businesses/{business_id}/reject", token, method="POST",
                                body={"reason": reason})

    async def get_public_businesses(self, token: str, page: Optional[int] = None, limit: Optional[int] = None) -> Any:
        return await self._call("/admin/businesses/public", token, params={"page": page, "limit": limit})

    async def create_public_business(self, token: str, form: Dict[str, Any]) -> Any:
        return await self._call("/admin/businesses/public", token, method="POST", body=form, is_form_data=True)

    # Users -----------------------------------------------------------------

    async def get_users(self, token: str, role: Optional[str] = None, is_active: Optional[str] = None,
                        page: Optional[int] = None, limit: Optional[int] = None) -> Any:
        params = {"role": role, "is_active": is_active, "page": page, "limit": limit}
        return await self._call("/admin/users", token, params=params)

    async def delete_user(self, token: str, user_id: str) -> Any:
        return await self._call(f"/admin/users/{user_id}", token, method="DELETE")

    async def update_user_status(self, token: str, user_id: str, is_active: bool) -> Any:
        return await self._call(f"/admin/users/{user_id}/status", token, method="PATCH",
                                body={"is_active": is_active})

    async def get_user_profile(self, token: str, user_id: str) -> Any:
        return await self._call(f"/admin/users/{user_id}/profile", token)

    async def send_email(self, token: str, user_id: str, subject: str, message: str) -> Any:
        return await self._call("/admin/email/send", token, method="POST",
                                body={"user_id": user_id, "subject": subject, "message": message})

    async def send_email_to_users(self, token: str, user_ids: List[str], subject: str, message: str) -> Any:
        return await self._call("/admin/send-email", token, method="POST",
                                body={"user_ids": user_ids, "subject": subject, "message": message})

    # Investments -----------------------------------------------------------

    async def get_investments(self, token: str) -> Any:
        return await self._call("/admin/investments", token)

    async def update_investment_status(self, token: str, investment_id: str, status: str) -> Any:
        return await self._call(f"/admin/investments/{investment_id}/status", token, method="PATCH",
                                body={"status": status})

    # Categories ------------------------------------------------------------

    async def get_categories(self, token: str) -> Any:
        return await self._call("/admin/categories", token)

    async def create_category(self, token: str, name: str, registration_fee: float) -> Any:
        return await self._call("/admin/categories", token, method="POST",
                                body={"name": name, "registration_fee": registration_fee})

    async def update_category(self, token: str, category_id: str, name: str, registration_fee: float) -> Any:
        return await self._call(f"/admin/categories/{category_id}", token, method="PUT",
                                body={"name": name, "registration_fee": registration_fee})

    async def delete_category(self, token: str, category_id: str) -> Any:
        return await self._call(f"/admin/categories/{category_id}", token, method="DELETE")

    # Review queue & analytics ---------------------------------------------

    async def get_review_queue(self, token: str, **filters) -> Any:
        """Filters: type, status, assigned_to, priority, page, limit."""
        return await self._call("/admin/review/queue", token, params=filters)

    async def get_review_stats(self, token: str) -> Any:
        return await self._call("/admin/review/stats", token)

    async def get_analytics(self, token: str, start_date: Optional[str] = None, end_date: Optional[str] = None) -> Any:
        return await self._call("/analytics/dashboard", token, params={"startDate": start_date, "endDate": end_date})

    async def get_business_analytics(self, token: str) -> Any:
        return await self._call("/analytics/businesses", token)

    async def get_investment_analytics(self, token: str) -> Any:
        return await self._call("/analytics/investments", token)

    # Intakes ---------------------------------------------------------------

    async def get_intakes(self, token: str, form_type: Optional[str] = None, status: Optional[str] = None,
                          user_id: Optional[str] = None, page: Optional[int] = None,
                          limit: Optional[int] = None) -> Any:
        params = {"form_type": form_type, "status": status, "user_id": user_id, "page": page, "limit": limit}
        return await self._call("/admin/intakes", token, params=params)

    async def get_intake_by_id(self, token: str, intake_id: str) -> Any:
        return await self._call(f"/admin/intakes/{intake_id}", token)

    async def update_intake_status(self, token: str, intake_id: str, status: str,
                                   rejection_reason: Optional[str] = None) -> Any:
        body: Dict[str, Any] = {"status": status}
        if rejection_reason:
            body["rejection_reason"] = rejection_reason
        return await self._call(f"/admin/intakes/{intake_id}/status", token, method="PATCH", body=body)


# ---------------------------------------------------------------------------
# Share requests
# ---------------------------------------------------------------------------

class ShareApi(_Resource):
    async def request_shares(self, token: str, business_id: str, requested_shares: int) -> Any:
        return await self._call(f"/shares/{business_id}/request", token, method="POST",
                                body={"requested_shares": requested_shares})

    async def get_pending_requests(self, token: str, page: int = 1, limit: int = SHARE_REQUESTS_PAGE_SIZE) -> Any:
        return await self._call("/shares/pending", token, params={"page": page, "limit": limit})

    async def approve_request(self, token: str, share_request_id: str, approved_shares: int) -> Any:
        return await self._call(f"/shares/{share_request_id}/approve", token, method="PUT",
                                body={"approved_shares": approved_shares})

    async def reject_request(self, token: str, share_request_id: str, rejection_reason: str) -> Any:
        return await self._call(f"/shares/{share_request_id}/reject", token, method="PUT",
                                body={"rejection_reason": rejection_reason})


# ---------------------------------------------------------------------------
# Document library
# ---------------------------------------------------------------------------

class LibraryApi(_Resource):
    async def create_folder(self, token: str, name: str, description: str = "",
                            parent_id: Optional[str] = None) -> Any:
        body: Dict[str, Any] = {"name": name, "description": description}
        if parent_id:
            body["parent_id"] = parent_id
        return await self._call("/library/folders", token, method="POST", body=body)

    async def get_folders(self, token: str, parent_id: Optional[str] = None) -> Any:
        # The backend reads the literal string "null" as "root level".
        return await self._call("/library/folders", token, params={"parent_id": parent_id or "null"})

    async def upload_document(self, token: str, form: Dict[str, Any]) -> Any:
        return await self._call("/library/upload", token, method="POST", body=form, is_form_data=True)

    async def get_documents(self, token: str, folder_id: str, page: int = 1, limit: int = 10,
                            sort: str = "date") -> Any:
        return await self._call(f"/library/documents/{folder_id}", token,
                                params={"page": page, "limit": limit, "sort": sort})

    async def delete_document(self, token: str, document_id: str) -> Any:
        return await self._call(f"/library/documents/{document_id}", token, method="DELETE")


# ---------------------------------------------------------------------------
# Business operations: expenses, employees, payroll
# ---------------------------------------------------------------------------

class ExpenseApi(_Resource):
    async def list(self, token: str, **filters) -> Any:
        """Filters: businessId, category, status, startDate, endDate, page, limit."""
        return await self._call("/expenses", token, params=filters)

    async def create(self, token: str, form: Dict[str, Any]) -> Any:
        return await self._call("/expenses", token, method="POST", body=form, is_form_data=True)

    async def summary(self, token: str) -> Any:
        return await self._call("/expenses/analytics/summary", token)


class EmployeeApi(_Resource):
    async def list(self, token: str, **filters) -> Any:
        """Filters: businessId, status, search, page, limit."""
        return await self._call("/employees", token, params=filters)

    async def create(self, token: str, data: Dict[str, Any]) -> Any:
        return await self._call("/employees", token, method="POST", body=data)

    async def get_attendance(self, token: str, business_id: str, employee_id: str) -> Any:
        return await self._call(f"/employees/{business_id}/attendance/{employee_id}", token)

    async def get_performance(self, token: str, business_id: str, employee_id: str) -> Any:
        return await self._call(f"/employees/{business_id}/performance/{employee_id}", token)


class PayrollApi(_Resource):
    async def list(self, token: str, **filters) -> Any:
        """Filters: status, page, limit."""
        return await self._call("/payroll", token, params=filters)

    async def generate_payslip(self, token: str, data: Dict[str, Any]) -> Any:
        return await self._call("/payroll", token, method="POST", body=data)

    async def list_invoices(self, token: str, **filters) -> Any:
        return await self._call("/payroll/invoices", token, params=filters)

    async def create_invoice(self, token: str, data: Dict[str, Any]) -> Any:
        return await self._call("/payroll/invoices", token, method="POST", body=data)

    async def update_invoice(self, token: str, invoice_id: str, data: Dict[str, Any]) -> Any:
        return await self._call(f"/payroll/invoices/{invoice_id}", token, method="PUT", body=data)


# ---------------------------------------------------------------------------
# Facade
# ---------------------------------------------------------------------------

class Backend:
    """All resource groups sharing one :class:`ApiClient`."""

    def __init__(self, client: Optional[ApiClient] = None) -> None:
        self.client = client or ApiClient()
        self.auth = AuthApi(self.client)
        self.intake = IntakeApi(self.client)
        self.public = PublicApi(self.client)
        self.entrepreneur = EntrepreneurApi(self.client)
        self.investor = InvestorApi(self.client)
        self.admin = AdminApi(self.client)
        self.shares = ShareApi(self.client)
        self.library = LibraryApi(self.client)
        self.expenses = ExpenseApi(self.client)
        self.employees = EmployeeApi(self.client)
        self.payroll = PayrollApi(self.client)

    async def aclose(self) -> None:
        await self.client.aclose()


_backend_singleton: Optional[Backend] = None
_backend_lock = threading.Lock()


def get_backend() -> Backend:
    global _backend_singleton
    if _backend_singleton is not None:
        return _backend_singleton
    with _backend_lock:
        if _backend_singleton is None:
            _backend_singleton = Backend()
        return _backend_singleton


def reset_backend_for_tests() -> None:
    """Test helper to clear the singleton backend."""
    global _backend_singleton
    with _backend_lock:
        _backend_singleton = None
