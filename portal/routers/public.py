"""
Public pages for the SKY Solutions portal

GET /         - landing page data: platform stats, categories, featured listings
"""

import logging

import httpx
from fastapi import APIRouter, Request

from portal.api.client import ApiError
from portal.api.resources import get_backend
from portal.auth import get_current_session
from portal.core.constants import FEATURED_LISTINGS
from portal.core.utils import unwrap_list
from portal.role_guard import get_role_base_path

logger = logging.getLogger(__name__)

router = APIRouter(tags=["public"])


@router.get("/")
async def landing(request: Request):
    """The landing page renders without any section it fails to load."""
    backend = get_backend()
    session = get_current_session(request)

    sections = {"stats": None, "categories": [], "featured": []}
    loaders = {
        "stats": backend.public.get_stats,
        "categories": backend.public.get_categories,
        "featured": backend.public.get_businesses,
    }
    for name, load in loaders.items():
        try:
            data = await load()
        except (ApiError, httpx.HTTPError) as exc:
            logger.warning("Landing section %s unavailable: %s", name, exc)
            continue
        if name == "stats":
            sections[name] = data
        elif name == "categories":
            sections[name] = unwrap_list(data, "categories")
        else:
            sections[name] = unwrap_list(data, "businesses")[:FEATURED_LISTINGS]

    return {
        **sections,
        "user": session.to_public() if session else None,
        "dashboard": get_role_base_path(session.role) if session and session.role else None,
    }
