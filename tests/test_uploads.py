import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from portal import uploads
from portal.domain.enums import UploadKind
from portal.domain.models import UploadedFile
from portal.uploads import UploadRejected, guard_upload, read_upload, size_limit_label

MB = 1024 * 1024


def _file(size: int, content_type: str = "application/pdf", name: str = "plan.pdf") -> UploadedFile:
    return UploadedFile(name, content_type, b"x" * size)


class TestGuardUpload:
    def test_business_plan_over_two_megabytes(self):
        with pytest.raises(UploadRejected) as exc:
            guard_upload(_file(3 * MB), UploadKind.BUSINESS_PLAN)
        assert str(exc.value) == "File size exceeds 2MB limit. Your file is 3.00MB"

    def test_business_plan_must_be_pdf(self):
        with pytest.raises(UploadRejected) as exc:
            guard_upload(_file(10, "image/png", "plan.png"), UploadKind.BUSINESS_PLAN)
        assert str(exc.value) == "Please upload a PDF file"

    def test_business_image_must_be_an_image(self):
        with pytest.raises(UploadRejected) as exc:
            guard_upload(_file(10, "application/pdf"), UploadKind.BUSINESS_IMAGE)
        assert str(exc.value) == "Please upload an image file"
        assert guard_upload(_file(10, "image/jpeg", "a.jpg"), UploadKind.BUSINESS_IMAGE).filename == "a.jpg"

    def test_documents_allow_any_type_up_to_five_megabytes(self):
        ok = _file(5 * MB, "application/zip", "docs.zip")
        assert guard_upload(ok, UploadKind.LIBRARY_DOCUMENT) is ok
        with pytest.raises(UploadRejected):
            guard_upload(_file(5 * MB + 1), UploadKind.IDENTITY_DOCUMENT)

    def test_limits_follow_config(self, monkeypatch):
        monkeypatch.setattr(uploads.config, "MAX_DOCUMENT_UPLOAD_BYTES", 1024)
        with pytest.raises(UploadRejected):
            guard_upload(_file(2048), UploadKind.RECEIPT)


def test_size_limit_label():
    assert size_limit_label(2 * MB) == "2MB"
    assert size_limit_label(int(1.5 * MB)) == "1.5MB"


@pytest.mark.asyncio
async def test_read_upload_without_file_is_none():
    assert await read_upload(None, UploadKind.RECEIPT) is None


@pytest.mark.asyncio
async def test_read_upload_reads_and_guards():
    upload = UploadFile(
        file=io.BytesIO(b"%PDF-1.4"),
        filename="plan.pdf",
        headers=Headers({"content-type": "application/pdf"}),
    )
    file = await read_upload(upload, UploadKind.BUSINESS_PLAN)
    assert file.content == b"%PDF-1.4"
    assert file.size == 8
