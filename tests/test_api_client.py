from __future__ import annotations

import json

import httpx
import pytest

from portal.api.client import ApiClient, ApiError, _form_parts
from portal.api.resources import Backend, _Resource
from portal.domain.models import UploadedFile


def _client(handler) -> ApiClient:
    return ApiClient(base_url="http://backend.test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_json_request_carries_bearer_and_body():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("authorization")
        seen["ctype"] = request.headers.get("content-type")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"ok": True})

    client = _client(handler)
    result = await client.request("/auth/profile", method="PUT", body={"name": "Ada"}, token="jwt")
    await client.aclose()

    assert result == {"ok": True}
    assert seen["auth"] == "Bearer jwt"
    assert seen["ctype"] == "application/json"
    assert seen["body"] == {"name": "Ada"}


@pytest.mark.asyncio
async def test_no_token_means_no_authorization_header():
    def handler(request: httpx.Request) -> httpx.Response:
        assert "authorization" not in request.headers
        return httpx.Response(200, json=[])

    client = _client(handler)
    assert await client.request("/public/businesses") == []


@pytest.mark.asyncio
async def test_empty_params_are_dropped():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=dict(request.url.params))

    client = _client(handler)
    result = await client.request("/admin/users", params={"role": "investor", "is_active": None, "page": ""})
    assert result == {"role": "investor"}


@pytest.mark.asyncio
async def test_error_status_raises_with_backend_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"message": "Account not verified"})

    client = _client(handler)
    with pytest.raises(ApiError) as exc:
        await client.request("/auth/login", method="POST", body={})
    assert exc.value.status_code == 403
    assert exc.value.message == "Account not verified"


@pytest.mark.asyncio
async def test_error_without_message_uses_generic_text():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    client = _client(handler)
    with pytest.raises(ApiError) as exc:
        await client.request("/admin/stats")
    assert exc.value.message == "Something went wrong"


@pytest.mark.asyncio
async def test_form_data_is_multipart_without_json_content_type():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["ctype"] = request.headers.get("content-type", "")
        seen["body"] = request.content
        return httpx.Response(201, json={"id": "d1"})

    client = _client(handler)
    file = UploadedFile("plan.pdf", "application/pdf", b"%PDF-1.4")
    await client.request("/library/upload", method="POST", token="jwt", is_form_data=True,
                         body={"file": file, "folder_id": "f1"})

    assert seen["ctype"].startswith("multipart/form-data")
    assert b'name="folder_id"' in seen["body"]
    assert b'filename="plan.pdf"' in seen["body"]


@pytest.mark.asyncio
async def test_empty_success_body_is_none():
    client = _client(lambda request: httpx.Response(204))
    assert await client.request("/library/documents/d1", method="DELETE") is None


def test_form_parts_encoding():
    parts = _form_parts({"a": 1, "b": True, "c": None, "f": UploadedFile("x.png", "image/png", b"1")})
    assert parts["a"] == (None, "1")
    assert parts["b"] == (None, "true")
    assert "c" not in parts
    assert parts["f"] == ("x.png", b"1", "image/png")


# ---------------------------------------------------------------------------
# Resource groups
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_library_root_folders_send_literal_null():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        return httpx.Response(200, json={"folders": []})

    backend = Backend(_client(handler))
    await backend.library.get_folders("jwt")
    assert "parent_id=null" in seen["url"]


@pytest.mark.asyncio
async def test_admin_user_status_is_patch():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={})

    backend = Backend(_client(handler))
    await backend.admin.update_user_status("jwt", "u1", False)
    assert seen["method"] == "PATCH"
    assert seen["path"].endswith("/u1/status")
    assert seen["body"] == {"is_active": False}


@pytest.mark.asyncio
async def test_share_approval_sends_approved_shares():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={})

    backend = Backend(_client(handler))
    await backend.shares.approve_request("jwt", "sr1", 25)
    assert seen["method"] == "PUT"
    assert seen["body"] == {"approved_shares": 25}


def test_backend_exposes_only_page_resource_groups():
    backend = Backend(_client(lambda request: httpx.Response(200)))
    groups = {name for name, value in vars(backend).items() if isinstance(value, _Resource)}
    assert groups == {
        "auth", "intake", "public", "entrepreneur", "investor", "admin", "shares",
        "library", "expenses", "employees", "payroll",
    }
