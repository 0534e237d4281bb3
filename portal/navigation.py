"""
portal.navigation: Dashboard navigation per role.

Every authenticated page response carries the sidebar built here, so the
browser never needs its own copy of the table.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from portal.domain.enums import UserRole
from portal.domain.models import NavItem, SessionUser

NAV_ITEMS: Dict[UserRole, Tuple[NavItem, ...]] = {
    UserRole.ADMIN: (
        NavItem("/admin", "Dashboard", "home"),
        NavItem("/admin/businesses", "Businesses", "briefcase"),
        NavItem("/admin/users", "Users", "users"),
        NavItem("/admin/categories", "Categories", "users"),
        NavItem("/admin/investments", "Investments", "trending-up"),
        NavItem("/admin/intakes", "Intake Forms", "clipboard"),
        NavItem("/admin/share-requests", "Share Requests", "pie-chart"),
        NavItem("/admin/library", "Document Library", "folder"),
        NavItem("/admin/employees", "Employees", "users"),
        NavItem("/admin/expenses", "Expenses", "receipt"),
        NavItem("/admin/payroll", "Payroll", "wallet"),
    ),
    UserRole.ENTREPRENEUR: (
        NavItem("/entrepreneur", "Dashboard", "home"),
        NavItem("/entrepreneur/businesses", "My Businesses", "briefcase"),
        NavItem("/entrepreneur/businesses/new", "New Business", "building"),
        NavItem("/entrepreneur/intakes", "Intake Forms", "clipboard"),
    ),
    UserRole.INVESTOR: (
        NavItem("/investor", "Dashboard", "home"),
        NavItem("/investor/browse", "Browse Businesses", "briefcase"),
        NavItem("/investor/investments", "My Investments", "trending-up"),
    ),
}


def build_nav(role, pathname: str) -> List[dict]:
    """Sidebar entries for ``role``; the entry equal to ``pathname`` is active."""
    parsed = UserRole.parse(role)
    if parsed is None:
        return []
    return [
        {"href": item.href, "label": item.label, "icon": item.icon, "active": item.href == pathname}
        for item in NAV_ITEMS[parsed]
    ]


def layout(user: SessionUser, pathname: str) -> dict:
    """The dashboard chrome: who is signed in and their navigation."""
    return {
        "user": {"name": user.name, "role": user.role.value if user.role else None},
        "nav": build_nav(user.role, pathname),
    }
