"""
portal.domain.enums: Enumerations shared across the portal.

Keep this module import-clean (stdlib only).
"""

from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# User roles
# ---------------------------------------------------------------------------

class UserRole(str, Enum):
    ADMIN        = "admin"
    ENTREPRENEUR = "entrepreneur"
    INVESTOR     = "investor"

    @classmethod
    def parse(cls, value) -> Optional["UserRole"]:
        """Return the matching role, or ``None`` for missing/unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


# ---------------------------------------------------------------------------
# Review pipelines
# ---------------------------------------------------------------------------

class BusinessStatus(str, Enum):
    """Entrepreneur business submissions. Review is approve/reject only."""
    PENDING  = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ACTIVE   = "active"
    DRAFT    = "draft"


class IntakeStatus(str, Enum):
    PENDING      = "pending"
    SUBMITTED    = "submitted"
    UNDER_REVIEW = "under_review"
    APPROVED     = "approved"
    REJECTED     = "rejected"


class IntakeFormType(str, Enum):
    IDEATION        = "ideation"
    ACTIVE_BUSINESS = "active_business"
    INVESTOR        = "investor"


class ShareRequestStatus(str, Enum):
    PENDING  = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class InvestmentStatus(str, Enum):
    PENDING  = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# ---------------------------------------------------------------------------
# UI feedback
# ---------------------------------------------------------------------------

class ToastVariant(str, Enum):
    DEFAULT     = "default"
    DESTRUCTIVE = "destructive"


# ---------------------------------------------------------------------------
# Upload kinds (each has its own size/type rule)
# ---------------------------------------------------------------------------

class UploadKind(str, Enum):
    BUSINESS_PLAN     = "business_plan"
    BUSINESS_IMAGE    = "business_image"
    IDENTITY_DOCUMENT = "identity_document"
    LIBRARY_DOCUMENT  = "library_document"
    RECEIPT           = "receipt"
