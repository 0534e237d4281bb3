"""
SKY Solutions portal: request/response schemas (Pydantic).

Bodies the browser posts to portal action endpoints.  Backend records stay
plain dicts; only what the portal itself checks is modelled here.
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from portal.domain.models import Toast


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class ActionResponse(BaseModel):
    """Outcome of a page action: a toast plus optional refreshed data."""
    toast: Toast
    redirect: Optional[str] = None
    data: Optional[Any] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    backend_url: str
    cache_backend: str


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str
    confirm_password: str = Field("", alias="confirmPassword")
    phone: str = ""
    location: str = ""
    role: str = ""

    model_config = {"populate_by_name": True}

    def backend_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "location": self.location,
            "password": self.password,
            "role": self.role,
        }


class EmailRequest(BaseModel):
    email: str


class PasswordResetRequest(BaseModel):
    password: str
    confirm_password: str = Field("", alias="confirmPassword")

    model_config = {"populate_by_name": True}


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None

    def backend_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


# ---------------------------------------------------------------------------
# Wizards
# ---------------------------------------------------------------------------

class OptionToggle(BaseModel):
    field: str
    value: str
    checked: bool


class WizardUpdate(BaseModel):
    """Field edits for a wizard draft; ``toggle`` flips a multi-select option."""
    fields: Dict[str, Any] = Field(default_factory=dict)
    toggle: Optional[OptionToggle] = None


class TeamMemberBody(BaseModel):
    name: str = ""
    position: str = ""
    ownership: str = ""
    salary: str = ""
    years: str = ""


# ---------------------------------------------------------------------------
# Review actions
# ---------------------------------------------------------------------------

class RejectRequest(BaseModel):
    reason: str = ""


class ShareRequestBody(BaseModel):
    requested_shares: Any = None


class ApproveSharesBody(BaseModel):
    approved_shares: int


class RejectSharesBody(BaseModel):
    rejection_reason: str = ""


class StatusUpdate(BaseModel):
    status: str


class UserStatusUpdate(BaseModel):
    is_active: bool


class EmailMessage(BaseModel):
    subject: str
    message: str
    user_ids: List[str] = Field(default_factory=list)


class CategoryBody(BaseModel):
    name: str = ""
    registration_fee: Optional[float] = Field(None, alias="fee")

    model_config = {"populate_by_name": True}


# ---------------------------------------------------------------------------
# Library
# ---------------------------------------------------------------------------

class FolderCreate(BaseModel):
    name: str
    description: str = ""


class FolderNavigate(BaseModel):
    """``action`` is one of enter, up, select."""
    action: str
    folder_id: Optional[str] = None
    name: Optional[str] = None


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

class EmployeeCreate(BaseModel):
    business_id: str = Field("", alias="businessId")
    name: str = ""
    email: str = ""
    phone: str = ""
    position: str = ""
    department: str = ""
    hire_date: str = ""
    employment_type: str = "full-time"
    salary: str = ""
    currency: str = "RWF"
    benefits: str = ""
    emergency_contact: str = ""
    emergency_contact_phone: str = ""
    national_id: str = ""
    passport_number: str = ""

    model_config = {"populate_by_name": True}

    required: ClassVar[Tuple[str, ...]] = ("business_id", "name", "email", "position", "salary")


class PayslipCreate(BaseModel):
    business_id: str = Field("", alias="businessId")
    employee_id: str = ""
    period_start: str = ""
    period_end: str = ""
    salary: str = ""
    deductions: str = "0"
    taxes: str = "0"
    notes: str = ""

    model_config = {"populate_by_name": True}

    required: ClassVar[Tuple[str, ...]] = ("business_id", "employee_id", "period_start", "period_end", "salary")


class InvoiceCreate(BaseModel):
    business_id: str = Field("", alias="businessId")
    vendor_name: str = ""
    amount: str = ""
    currency: str = "RWF"
    due_date: str = ""
    category: str = ""
    description: str = ""
    recurring: bool = False
    frequency: str = ""
    notes: str = ""

    model_config = {"populate_by_name": True}

    required: ClassVar[Tuple[str, ...]] = ("business_id", "vendor_name", "amount", "due_date")
