"""
Profile page for the SKY Solutions portal (every role)

GET  /profile              - profile + identity document types
PUT  /profile              - update name / phone / location
POST /profile/documents    - submit an identity document (5MB cap)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from portal.api.resources import get_backend
from portal.api.schemas import ActionResponse, ProfileUpdate
from portal.auth import current_user
from portal.core.constants import DOCUMENT_TYPES
from portal.domain.enums import UploadKind
from portal.domain.models import SessionUser, Toast
from portal.forms import FormIncomplete
from portal.navigation import layout
from portal.uploads import read_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("")
async def profile(request: Request, user: SessionUser = Depends(current_user)):
    data = await get_backend().auth.get_profile(user.token)
    return {
        **layout(user, request.url.path),
        "profile": data,
        "document_types": [{"value": v, "label": label} for v, label in DOCUMENT_TYPES],
    }


@router.put("", response_model=ActionResponse)
async def update_profile(body: ProfileUpdate, user: SessionUser = Depends(current_user)):
    data = await get_backend().auth.update_profile(user.token, body.backend_payload())
    return ActionResponse(toast=Toast.success("Profile updated successfully"), data=data)


@router.post("/documents", response_model=ActionResponse)
async def submit_document(
    document_type: str = Form(""),
    document: Optional[UploadFile] = File(None),
    user: SessionUser = Depends(current_user),
):
    file = await read_upload(document, UploadKind.IDENTITY_DOCUMENT)
    if file is None or not document_type:
        raise FormIncomplete(message="Please select document type and file")

    data = await get_backend().auth.submit_documents(user.token, {"document": file, "document_type": document_type})
    logger.info("%s submitted %s document", user.email, document_type)
    return ActionResponse(toast=Toast.success("Document submitted successfully"), data=data)
