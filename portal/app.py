"""
SKY Solutions portal - FastAPI Application
Main entry point for the portal server.

Run with:
    uvicorn portal.app:app --reload --host 0.0.0.0 --port 8080
"""

import logging
import traceback
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal import __version__, config
from portal.api.client import ApiError
from portal.api.resources import get_backend
from portal.auth import get_current_session, router as auth_router
from portal.core.constants import GENERIC_ERROR_MESSAGE, INFRA_PREFIXES, LOGOUT_PATH
from portal.core.logging import configure_logging
from portal.domain.models import Toast
from portal.forms import FormIncomplete
from portal.role_guard import resolve_redirect
from portal.uploads import UploadRejected

configure_logging()
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan (startup / shutdown)
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Portal starting against backend %s", config.API_URL)
    yield
    await get_backend().aclose()
    logger.info("Backend client closed.")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------

app = FastAPI(
    title="SKY Solutions Portal",
    version=__version__,
    description="Role-gated portal for entrepreneurs, investors and administrators",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _toast_json(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "toast": Toast.error(message).model_dump(mode="json"), **extra},
    )


# ---------------------------------------------------------------------------
# Exception handlers -- every failure reaches the browser as an error toast
# ---------------------------------------------------------------------------

@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return _toast_json(exc.status_code, exc.message)


@app.exception_handler(httpx.HTTPError)
async def transport_error_handler(request: Request, exc: httpx.HTTPError):
    logger.error("Backend unreachable on %s %s: %s", request.method, request.url.path, exc)
    return _toast_json(502, GENERIC_ERROR_MESSAGE)


@app.exception_handler(UploadRejected)
async def upload_rejected_handler(request: Request, exc: UploadRejected):
    return _toast_json(400, str(exc))


@app.exception_handler(FormIncomplete)
async def form_incomplete_handler(request: Request, exc: FormIncomplete):
    return _toast_json(422, exc.message, missing=exc.missing)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    response = _toast_json(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    tb = traceback.format_exc()
    logger.error(
        "Unhandled exception on %s %s: %s\n%s",
        request.method, request.url.path, exc, tb,
    )
    return _toast_json(500, GENERIC_ERROR_MESSAGE, type=type(exc).__name__, path=request.url.path)


# ---------------------------------------------------------------------------
# Session middleware -- resolves the session and applies the role gate
# ---------------------------------------------------------------------------

def _gate_exempt(path: str) -> bool:
    return path == LOGOUT_PATH or any(path.startswith(prefix) for prefix in INFRA_PREFIXES)


@app.middleware("http")
async def session_middleware(request: Request, call_next):
    session = get_current_session(request)
    request.state.session = session

    path = request.url.path
    if request.method != "OPTIONS" and not _gate_exempt(path):
        target = resolve_redirect(session.role if session else None, path, authenticated=session is not None)
        if target is not None and target != path:
            return RedirectResponse(target, status_code=303)

    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(auth_router)

from portal.api.routes import register_routes  # noqa: E402
register_routes(app)


# ---------------------------------------------------------------------------
# Development entry-point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "portal.app:app",
        host="0.0.0.0",
        port=config.PORT,
        reload=True,
    )
