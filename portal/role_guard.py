"""
portal.role_guard: Role/path access gate.

Maps each user role to the URL prefixes it may view and decides, for any
request path, whether to serve it or where to redirect instead.

Prefix matching is intentionally coarse: ``/investor`` admits every path
below it.  Which business or intake a user may actually see is enforced by
the backend, never here.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from portal.core.constants import LOGIN_PATH, PUBLIC_PREFIXES, ROOT_PATH
from portal.domain.enums import UserRole

logger = logging.getLogger(__name__)

# First entry is the role's landing page.
ROLE_PAGES: Dict[UserRole, Tuple[str, ...]] = {
    UserRole.ADMIN:        ("/admin", "/profile"),
    UserRole.ENTREPRENEUR: ("/entrepreneur", "/intake-wizard", "/profile"),
    UserRole.INVESTOR:     ("/investor", "/investor/browse", "/intake-wizard", "/profile"),
}


def is_public_path(pathname: str) -> bool:
    if pathname == ROOT_PATH:
        return True
    return any(pathname.startswith(prefix) for prefix in PUBLIC_PREFIXES)


def can_access_page(user_role, pathname: str) -> bool:
    """Return True if ``user_role`` may view ``pathname``.

    ``user_role`` may be a :class:`UserRole`, its string value, or ``None``.
    Unknown roles are treated like no role at all.
    """
    if is_public_path(pathname):
        return True

    role = UserRole.parse(user_role)
    if role is None:
        return False

    return any(pathname.startswith(page) for page in ROLE_PAGES[role])


def get_role_base_path(user_role) -> str:
    role = UserRole.parse(user_role)
    if role is None:
        return LOGIN_PATH
    return ROLE_PAGES[role][0]


def resolve_redirect(user_role, pathname: str, authenticated: bool = True) -> Optional[str]:
    """Where to send the visitor instead of ``pathname``, or ``None`` to serve it.

    * Not signed in on a non-public path → the login page.
    * Signed in but the role may not view the path → the role's base path.
    """
    if not authenticated or UserRole.parse(user_role) is None:
        if is_public_path(pathname):
            return None
        return LOGIN_PATH

    if can_access_page(user_role, pathname):
        return None

    target = get_role_base_path(user_role)
    logger.info("Role gate: %s denied %s, redirecting to %s", UserRole.parse(user_role).value, pathname, target)
    return target
