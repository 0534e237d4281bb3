"""
portal.uploads: Size and type guards for browser uploads.

Every file passes ``guard_upload`` before it is forwarded to the backend.  A
rejected file raises :class:`UploadRejected`, whose message is shown to the
user verbatim; the caller must then keep its file slot empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from fastapi import UploadFile

from portal import config
from portal.core.utils import format_megabytes
from portal.domain.enums import UploadKind
from portal.domain.models import UploadedFile

logger = logging.getLogger(__name__)


class UploadRejected(ValueError):
    """The selected file breaks its kind's size or type rule."""


@dataclass(frozen=True)
class UploadRule:
    max_bytes: int
    content_type: Optional[str] = None     # exact match
    content_prefix: Optional[str] = None   # e.g. "image/"
    type_message: str = ""


def _rules() -> Dict[UploadKind, UploadRule]:
    # Built per call so config overrides in tests take effect.
    business = config.MAX_BUSINESS_UPLOAD_BYTES
    document = config.MAX_DOCUMENT_UPLOAD_BYTES
    return {
        UploadKind.BUSINESS_PLAN: UploadRule(
            business, content_type="application/pdf", type_message="Please upload a PDF file",
        ),
        UploadKind.BUSINESS_IMAGE: UploadRule(
            business, content_prefix="image/", type_message="Please upload an image file",
        ),
        UploadKind.IDENTITY_DOCUMENT: UploadRule(document),
        UploadKind.LIBRARY_DOCUMENT: UploadRule(document),
        UploadKind.RECEIPT: UploadRule(document),
    }


def size_limit_label(max_bytes: int) -> str:
    mb = max_bytes / 1024 / 1024
    return f"{int(mb)}MB" if mb == int(mb) else f"{mb:.1f}MB"


def guard_upload(file: UploadedFile, kind: UploadKind) -> UploadedFile:
    """Return ``file`` unchanged if it satisfies ``kind``'s rule, else raise."""
    rule = _rules()[kind]

    if file.size > rule.max_bytes:
        logger.info("Rejected %s upload %r: %d bytes", kind.value, file.filename, file.size)
        raise UploadRejected(
            f"File size exceeds {size_limit_label(rule.max_bytes)} limit. "
            f"Your file is {format_megabytes(file.size)}"
        )

    if rule.content_type and file.content_type != rule.content_type:
        raise UploadRejected(rule.type_message)
    if rule.content_prefix and not (file.content_type or "").startswith(rule.content_prefix):
        raise UploadRejected(rule.type_message)

    return file


async def read_upload(upload: Optional[UploadFile], kind: UploadKind) -> Optional[UploadedFile]:
    """Read a multipart upload into memory and guard it.

    Returns ``None`` when the browser sent no file.
    """
    if upload is None or not upload.filename:
        return None
    content = await upload.read()
    file = UploadedFile(
        filename=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
        content=content,
    )
    return guard_upload(file, kind)
