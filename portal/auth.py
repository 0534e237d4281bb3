"""
Session handling for the SKY Solutions portal.

Flow:
  1. Browser posts credentials to /login  -> portal calls backend /auth/login
  2. Backend answers {token, user}        -> portal issues a signed session
  3. Every later request carries the session (cookie or Bearer header); the
     middleware in portal.app resolves it and applies the role gate.
  4. /logout clears the cookie and the session's wizard drafts.

The session token embeds the backend bearer token, so it is signed (HMAC)
and kept in an httponly cookie.  Expiry follows SESSION_EXPIRY_SECONDS.
"""

import base64
import hashlib
import hmac
import json
import logging
import secrets
import time
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from portal import config
from portal.api.resources import get_backend
from portal.api.schemas import EmailRequest, LoginRequest, PasswordResetRequest, RegisterRequest
from portal.core.constants import LOGOUT_PATH
from portal.domain.models import SessionUser, Toast
from portal.forms.store import WizardStore
from portal.library import clear_browser
from portal.role_guard import get_role_base_path

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

COOKIE_NAME = "sky_session"


# ---------------------------------------------------------------------------
# HMAC-signed session tokens
# ---------------------------------------------------------------------------

def _sign(payload_bytes: bytes) -> str:
    """Create HMAC-SHA256 signature."""
    return hmac.new(config.AUTH_SECRET.encode(), payload_bytes, hashlib.sha256).hexdigest()


def create_token(user: dict, backend_token: str, session_id: Optional[str] = None) -> str:
    """Create a signed session token from the backend's login answer."""
    payload = {
        "sid": session_id or secrets.token_urlsafe(16),
        "tok": backend_token,
        "user": user,
        "exp": int(time.time()) + config.SESSION_EXPIRY_SECONDS,
    }
    # Unpadded so the value is a plain cookie token (no quoting).
    payload_b64 = base64.urlsafe_b64encode(json.dumps(payload).encode()).decode().rstrip("=")
    sig = _sign(payload_b64.encode())
    return f"{payload_b64}.{sig}"


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify a signed session token."""
    parts = token.split(".", 1)
    if len(parts) != 2:
        return None
    payload_b64, sig = parts
    expected_sig = _sign(payload_b64.encode())
    if not hmac.compare_digest(sig, expected_sig):
        return None
    try:
        payload = json.loads(base64.urlsafe_b64decode(payload_b64 + "=" * (-len(payload_b64) % 4)))
    except (ValueError, TypeError):
        return None
    if not isinstance(payload, dict) or payload.get("exp", 0) < time.time():
        return None
    return payload


def session_from_token(token: str) -> Optional[SessionUser]:
    payload = decode_token(token)
    if not payload or not isinstance(payload.get("user"), dict):
        return None
    return SessionUser.from_backend(payload["user"], payload.get("tok", ""), payload.get("sid", ""))


def reissue_session(user: SessionUser, **updates) -> str:
    """A fresh token for the same session with ``updates`` merged into the user."""
    record = {"_id": user.user_id, "name": user.name, "email": user.email,
              "role": user.role.value if user.role else None, **user.extra, **updates}
    user.extra.update(updates)
    return create_token(record, user.token, session_id=user.session_id)


def get_current_session(request: Request) -> Optional[SessionUser]:
    """Extract the session from Bearer token or session cookie."""
    auth_header = request.headers.get("authorization", "")
    if auth_header.startswith("Bearer "):
        session = session_from_token(auth_header[7:])
        if session:
            return session
    token = request.cookies.get(COOKIE_NAME)
    if token:
        return session_from_token(token)
    return None


def current_user(request: Request) -> SessionUser:
    """Route dependency: the session resolved by the middleware."""
    user = getattr(request.state, "session", None)
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated.")
    return user


def _toast_response(toast: Toast, status_code: int = 200, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"toast": toast.model_dump(mode="json"), **extra})


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.get("/login")
async def login_page(request: Request):
    """Login page data; signed-in visitors are pointed at their dashboard."""
    session = get_current_session(request)
    if session and session.role:
        return {"user": session.to_public(), "redirect": get_role_base_path(session.role)}
    return {"user": None, "redirect": None}


@router.post("/login")
async def login(body: LoginRequest):
    """Authenticate against the backend and issue the portal session."""
    result = await get_backend().auth.login(body.email, body.password)
    user = (result or {}).get("user") or {}
    backend_token = (result or {}).get("token") or ""

    session_token = create_token(user, backend_token)
    session = session_from_token(session_token)
    logger.info("User logged in: %s (%s)", session.email, session.role.value if session.role else "no role")

    response = _toast_response(
        Toast.success("Logged in successfully"),
        redirect=get_role_base_path(session.role),
        user=session.to_public(),
        token=session_token,
    )
    response.set_cookie(
        COOKIE_NAME,
        session_token,
        max_age=config.SESSION_EXPIRY_SECONDS,
        httponly=True,
        samesite="lax",
        secure=config.SESSION_COOKIE_SECURE,
    )
    return response


@router.post("/register")
async def register(body: RegisterRequest):
    if body.password != body.confirm_password:
        return _toast_response(Toast.error("Passwords do not match"), status_code=422)
    if not body.role:
        return _toast_response(Toast.error("Please select a role"), status_code=422)

    await get_backend().auth.register(body.backend_payload())
    logger.info("Registered %s as %s", body.email, body.role)
    return _toast_response(
        Toast.success("Registration successful. Check your email to verify your account."),
        email=body.email,
    )


@router.get("/verify/{token}")
async def verify(token: str):
    result = await get_backend().auth.verify(token)
    message = (result or {}).get("message") or "Email verified successfully"
    return {"status": "success", "message": message}


@router.post("/verify/resend")
async def resend_verification(body: EmailRequest):
    await get_backend().auth.resend_verification(body.email)
    return _toast_response(Toast.success("Verification email sent"))


@router.post("/login/forgot-password")
async def forgot_password(body: EmailRequest):
    await get_backend().auth.forgot_password(body.email)
    return _toast_response(Toast.success("If that email exists, a reset link has been sent"))


@router.post("/login/reset-password/{token}")
async def reset_password(token: str, body: PasswordResetRequest):
    if body.confirm_password and body.password != body.confirm_password:
        return _toast_response(Toast.error("Passwords do not match"), status_code=422)
    await get_backend().auth.reset_password(token, body.password)
    return _toast_response(Toast.success("Password reset successfully"), redirect="/login")


@router.post(LOGOUT_PATH)
async def logout(request: Request):
    """Clear the session cookie and any wizard drafts it owned."""
    session = get_current_session(request)
    if session and session.session_id:
        WizardStore().clear_session(session.session_id)
        clear_browser(session.session_id)
        logger.info("User logged out: %s", session.email)
    response = JSONResponse({"status": "logged_out", "redirect": "/login"})
    response.delete_cookie(COOKIE_NAME)
    return response
