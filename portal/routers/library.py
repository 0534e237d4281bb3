"""
Admin document library

GET    /admin/library                  - folders at the current level + documents of the selected folder
POST   /admin/library/navigate         - enter / up / select a folder
POST   /admin/library/folders          - create a folder under the current level
POST   /admin/library/upload           - upload a document (5MB cap) into the selected folder
DELETE /admin/library/documents/{id}   - delete a document
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from portal.api.resources import get_backend
from portal.api.schemas import ActionResponse, FolderCreate, FolderNavigate
from portal.auth import current_user
from portal.core.utils import unwrap_list
from portal.domain.enums import UploadKind
from portal.domain.models import SessionUser, Toast
from portal.forms import FormIncomplete
from portal.library import FolderBrowser, document_row, load_browser, save_browser
from portal.navigation import layout
from portal.uploads import read_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/library", tags=["library"])


async def _listing(user: SessionUser, browser: FolderBrowser) -> dict:
    backend = get_backend()
    folders = unwrap_list(await backend.library.get_folders(user.token, browser.current_parent_id), "folders")
    browser.select_default(folders)

    documents = []
    if browser.selected_id:
        data = await backend.library.get_documents(user.token, browser.selected_id)
        documents = [document_row(d) for d in unwrap_list(data, "documents")]

    save_browser(user.session_id, browser)
    return {
        "breadcrumbs": browser.breadcrumbs(),
        "parent_id": browser.current_parent_id,
        "selected_id": browser.selected_id,
        "folders": folders,
        "documents": documents,
    }


@router.get("")
async def library(request: Request, user: SessionUser = Depends(current_user)):
    browser = load_browser(user.session_id)
    return {**layout(user, request.url.path), **await _listing(user, browser)}


@router.post("/navigate")
async def navigate(body: FolderNavigate, user: SessionUser = Depends(current_user)):
    browser = load_browser(user.session_id)
    if body.action == "enter":
        if not body.folder_id:
            raise HTTPException(status_code=400, detail="Folder id is required")
        browser.enter(body.folder_id, body.name or "")
    elif body.action == "up":
        browser.up()
    elif body.action == "select":
        browser.select(body.folder_id or None)
    else:
        raise HTTPException(status_code=400, detail=f"Unknown action: {body.action}")
    return await _listing(user, browser)


@router.post("/folders", response_model=ActionResponse)
async def create_folder(body: FolderCreate, user: SessionUser = Depends(current_user)):
    if not body.name.strip():
        raise FormIncomplete(["name"], message="Please enter a folder name")
    browser = load_browser(user.session_id)
    await get_backend().library.create_folder(
        user.token, body.name.strip(), body.description, parent_id=browser.current_parent_id,
    )
    logger.info("Admin %s created folder %r", user.email, body.name)
    return ActionResponse(toast=Toast.success("Folder created successfully"), data=await _listing(user, browser))


@router.post("/upload", response_model=ActionResponse)
async def upload(file: Optional[UploadFile] = File(None), user: SessionUser = Depends(current_user)):
    document = await read_upload(file, UploadKind.LIBRARY_DOCUMENT)
    browser = load_browser(user.session_id)
    if document is None or not browser.selected_id:
        raise FormIncomplete(message="Please select a folder and a file")

    await get_backend().library.upload_document(user.token, {"file": document, "folder_id": browser.selected_id})
    logger.info("Admin %s uploaded %r to folder %s", user.email, document.filename, browser.selected_id)
    return ActionResponse(toast=Toast.success("File uploaded successfully"), data=await _listing(user, browser))


@router.delete("/documents/{document_id}", response_model=ActionResponse)
async def delete_document(document_id: str, user: SessionUser = Depends(current_user)):
    await get_backend().library.delete_document(user.token, document_id)
    browser = load_browser(user.session_id)
    return ActionResponse(toast=Toast.success("Document deleted"), data=await _listing(user, browser))
