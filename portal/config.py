"""
Centralized configuration for the SKY Solutions portal.
All settings come from environment variables for 12-factor deployment.
"""

import os
import secrets


def _env_bool(name: str, default: bool = False) -> bool:
    val = os.environ.get(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: str = "") -> list:
    return [s.strip() for s in os.environ.get(name, default).split(",") if s.strip()]


# ---------------------------------------------------------------------------
# Backend API
# ---------------------------------------------------------------------------
# NEXT_PUBLIC_API_URL is honoured so the portal can share an env file with
# the Next.js frontend.
API_URL = (
    os.environ.get("SKY_API_URL")
    or os.environ.get("NEXT_PUBLIC_API_URL")
    or "http://localhost:5000"
).rstrip("/")

# ---------------------------------------------------------------------------
# URLs
# ---------------------------------------------------------------------------
FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")
CORS_ORIGINS = _env_list("CORS_ORIGINS") or [FRONTEND_URL]

# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------
AUTH_SECRET = os.environ.get("AUTH_SECRET", "") or secrets.token_hex(32)
SESSION_EXPIRY_SECONDS = int(os.environ.get("SESSION_EXPIRY_SECONDS", str(7 * 24 * 3600)))
SESSION_COOKIE_SECURE = _env_bool("SESSION_COOKIE_SECURE", False)

# ---------------------------------------------------------------------------
# Cache (wizard drafts)
# ---------------------------------------------------------------------------
REDIS_URL = os.environ.get("REDIS_URL", "").strip()

# ---------------------------------------------------------------------------
# Uploads (bytes)
# ---------------------------------------------------------------------------
MAX_BUSINESS_UPLOAD_BYTES = int(os.environ.get("MAX_BUSINESS_UPLOAD_BYTES", str(2 * 1024 * 1024)))
MAX_DOCUMENT_UPLOAD_BYTES = int(os.environ.get("MAX_DOCUMENT_UPLOAD_BYTES", str(5 * 1024 * 1024)))

# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------
PORT = int(os.environ.get("PORT", "8080"))
DEFAULT_PAGE_SIZE = int(os.environ.get("DEFAULT_PAGE_SIZE", "10"))
