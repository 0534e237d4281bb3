"""
portal.api.client: HTTP client for the SKY Solutions backend API.

Every backend call in the portal goes through :meth:`ApiClient.request`.
The client is deliberately thin: one round trip per call, no retries, no
caching.  Non-2xx answers raise :class:`ApiError` carrying the backend's own
``message``; transport failures propagate as ``httpx`` exceptions.

Usage::

    client = ApiClient()
    user   = await client.request("/auth/profile", token=session.token)
    await client.request("/library/upload", method="POST",
                         body={"file": uploaded, "folder_id": fid},
                         token=session.token, is_form_data=True)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from portal import config
from portal.core.constants import GENERIC_ERROR_MESSAGE
from portal.core.utils import drop_empty
from portal.domain.models import UploadedFile

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """The backend answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int = 500, payload: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


def _form_parts(body: Dict[str, Any]) -> Dict[str, tuple]:
    """Encode a body as multipart parts; plain fields become filename-less parts."""
    parts: Dict[str, tuple] = {}
    for key, value in body.items():
        if value is None:
            continue
        if isinstance(value, UploadedFile):
            parts[key] = value.as_httpx_file()
        elif isinstance(value, bool):
            parts[key] = (None, "true" if value else "false")
        else:
            parts[key] = (None, str(value))
    return parts


class ApiClient:
    """Async client bound to one backend base URL.

    Instantiate once per process; the internal httpx.AsyncClient is lazily
    created and reused across calls.  ``transport`` lets tests substitute an
    ``httpx.MockTransport``.
    """

    def __init__(self, base_url: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.base_url = (base_url or config.API_URL).rstrip("/")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client_get(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(base_url=self.base_url, transport=self._transport)
        return self._client

    @staticmethod
    def _headers(token: Optional[str], is_form_data: bool) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if not is_form_data:
            headers["Content-Type"] = "application/json"
        return headers

    @staticmethod
    def _decode(resp: httpx.Response) -> Any:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
        is_form_data: bool = False,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Call ``endpoint`` and return the parsed JSON body.

        Raises :class:`ApiError` with the backend's ``message`` (or a generic
        one) when the status is not 2xx.
        """
        client = self._client_get()
        kwargs: Dict[str, Any] = {"headers": self._headers(token, is_form_data)}
        if params:
            kwargs["params"] = drop_empty(params)
        if body is not None:
            if is_form_data:
                kwargs["files"] = _form_parts(body)
            else:
                kwargs["json"] = body

        resp = await client.request(method, endpoint, **kwargs)
        payload = self._decode(resp)

        if not resp.is_success:
            message = payload.get("message") if isinstance(payload, dict) else None
            logger.warning("Backend %s %s failed with %d: %s", method, endpoint, resp.status_code, message)
            raise ApiError(message or GENERIC_ERROR_MESSAGE, status_code=resp.status_code, payload=payload)

        return payload

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None
