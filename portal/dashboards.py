"""
portal.dashboards: Stat cards and alerts for the role dashboards.

Pure functions over backend rows; routers fetch, these shape.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from portal.core.utils import count_by, format_money, parse_float, sum_field
from portal.domain.enums import BusinessStatus, IntakeStatus, InvestmentStatus, UserRole
from portal.funding import total_business_funding


# ---------------------------------------------------------------------------
# Intake warning
# ---------------------------------------------------------------------------

_INTAKE_LINKS = {
    UserRole.ENTREPRENEUR: ("/entrepreneur/intakes/select", "/entrepreneur/intakes/{id}"),
    UserRole.INVESTOR: ("/investor/intake", "/investor/intakes/{id}/edit"),
}


def latest_intake(intakes: Any) -> Optional[dict]:
    """The backend lists intakes newest first."""
    if isinstance(intakes, list) and intakes and isinstance(intakes[0], dict):
        return intakes[0]
    return None


def intake_warning(latest: Optional[dict], role: UserRole) -> Optional[Dict[str, str]]:
    """The dashboard alert shown until the user's latest intake is approved."""
    create_link, detail_link = _INTAKE_LINKS[role]
    if latest is None:
        return {
            "level": "warning",
            "title": "Intake Form Required",
            "message": "Please complete your intake form to access all features.",
            "link_label": "Complete Intake Form",
            "link": create_link,
        }

    status = latest.get("status")
    if status == IntakeStatus.APPROVED.value:
        return None

    link = detail_link.format(id=latest.get("_id") or latest.get("id") or "")
    if status == IntakeStatus.REJECTED.value:
        return {
            "level": "error",
            "title": "Intake Form Rejected",
            "message": "Your intake form has been rejected. Please review and resubmit.",
            "link_label": "View Details",
            "link": link,
        }
    if status in (IntakeStatus.SUBMITTED.value, IntakeStatus.UNDER_REVIEW.value):
        return {
            "level": "warning",
            "title": "Intake Form Under Review",
            "message": (
                "Your intake form is currently under review by administrators. "
                "You will be notified once it's approved."
            ),
            "link_label": "View Status",
            "link": link,
        }
    return {
        "level": "warning",
        "title": "Intake Form Pending",
        "message": "Your intake form is pending submission. Please complete and submit it.",
        "link_label": "Complete Form",
        "link": link,
    }


# ---------------------------------------------------------------------------
# Stat blocks
# ---------------------------------------------------------------------------

def entrepreneur_stats(businesses: List[dict]) -> Dict[str, Any]:
    total_funding = total_business_funding(businesses)
    return {
        "total": len(businesses),
        "active": count_by(businesses, "status", BusinessStatus.ACTIVE.value),
        "draft": count_by(businesses, "status", BusinessStatus.DRAFT.value),
        "total_funding": total_funding,
        "total_funding_label": format_money(total_funding),
    }


def investor_stats(investments: List[dict]) -> Dict[str, Any]:
    approved = [i for i in investments if i.get("status") == InvestmentStatus.APPROVED.value]
    total_invested = sum_field(approved, "amount")
    return {
        "total": len(investments),
        "pending": count_by(investments, "status", InvestmentStatus.PENDING.value),
        "approved": len(approved),
        "total_invested": total_invested,
        "total_invested_label": format_money(total_invested),
    }


def admin_stat_cards(stats: Optional[dict]) -> List[Dict[str, Any]]:
    stats = stats or {}

    def value(key: str) -> Any:
        return stats.get(key) or 0

    funded = parse_float(stats.get("totalInvestmentAmount")) or 0.0
    return [
        {"title": "Total Users", "value": value("totalUsers"), "description": "Registered users"},
        {"title": "Entrepreneurs", "value": value("entrepreneurs"), "description": "Business owners"},
        {"title": "Investors", "value": value("investors"), "description": "Active investors"},
        {"title": "Total Businesses", "value": value("totalBusinesses"), "description": "All submissions"},
        {"title": "Active Businesses", "value": value("activeBusinesses"), "description": "Approved & active"},
        {"title": "Total Investments", "value": value("totalInvestments"), "description": "Investment requests"},
        {"title": "Pending Investments", "value": value("pendingInvestments"), "description": "Awaiting approval"},
        {"title": "Total Funded", "value": f"${funded:,.0f}" if funded == int(funded) else f"${funded:,}",
         "description": "Approved investments"},
    ]
