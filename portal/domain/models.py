"""
portal.domain.models: Portal value objects.

Import pattern::

    from portal.domain.models import SessionUser, Toast, UploadedFile
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from pydantic import BaseModel

from portal.domain.enums import ToastVariant, UserRole


# ---------------------------------------------------------------------------
# Session (resolved once per request)
# ---------------------------------------------------------------------------

@dataclass
class SessionUser:
    """
    The signed-in user as the portal knows them: the backend's user record
    plus the backend bearer token issued at login.
    """
    user_id: str
    name: str = ""
    email: str = ""
    role: Optional[UserRole] = None
    token: str = ""
    session_id: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_backend(cls, user: dict, token: str, session_id: str) -> "SessionUser":
        known = {"_id", "id", "name", "email", "role"}
        return cls(
            user_id=str(user.get("_id") or user.get("id") or ""),
            name=user.get("name", ""),
            email=user.get("email", ""),
            role=UserRole.parse(user.get("role")),
            token=token,
            session_id=session_id,
            extra={k: v for k, v in user.items() if k not in known},
        )

    def to_public(self) -> dict:
        """User fields safe to hand back to the browser (no backend token)."""
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value if self.role else None,
            **self.extra,
        }


# ---------------------------------------------------------------------------
# Toast notifications
# ---------------------------------------------------------------------------

class Toast(BaseModel):
    title: str
    description: str = ""
    variant: ToastVariant = ToastVariant.DEFAULT

    @classmethod
    def success(cls, description: str) -> "Toast":
        return cls(title="Success", description=description)

    @classmethod
    def error(cls, description: str) -> "Toast":
        return cls(title="Error", description=description, variant=ToastVariant.DESTRUCTIVE)


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------

@dataclass
class UploadedFile:
    """A file received from the browser, held in memory until forwarded."""
    filename: str
    content_type: str
    content: bytes = b""

    @property
    def size(self) -> int:
        return len(self.content)

    def as_httpx_file(self) -> tuple:
        return (self.filename, self.content, self.content_type)


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NavItem:
    href: str
    label: str
    icon: str = ""
