"""
Thin async transport for the Meta Graph API.

Every call opens a short-lived httpx.AsyncClient bounded by the configured
timeout, sends the access token as a query parameter (GET) or body field
(POST), and turns error envelopes into RemoteRejection.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from app.config import get_settings
from app.services.provisioning.errors import RemoteRejection

logger = logging.getLogger(__name__)


class GraphClient:
    """Authenticated GET/POST against the versioned Graph API base path."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.get_graph_api_base()).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.meta_request_timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def get(self, path: str, access_token: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        query = dict(params or {})
        query["access_token"] = access_token
        return await self._send("GET", path, params=query)

    async def post_form(self, path: str, access_token: str, data: Dict[str, Any]) -> Dict[str, Any]:
        form = {k: _form_value(v) for k, v in data.items() if v is not None}
        form["access_token"] = access_token
        return await self._send("POST", path, data=form)

    async def post_json(self, path: str, access_token: str, body: Dict[str, Any]) -> Dict[str, Any]:
        payload = {k: v for k, v in body.items() if v is not None}
        payload["access_token"] = access_token
        return await self._send("POST", path, json=payload)

    async def post_multipart(
        self,
        path: str,
        access_token: str,
        data: Dict[str, Any],
        files: Dict[str, Any],
    ) -> Dict[str, Any]:
        form = {k: _form_value(v) for k, v in data.items() if v is not None}
        form["access_token"] = access_token
        return await self._send("POST", path, data=form, files=files)

    async def _send(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = "/" + path.lstrip("/")
        logger.debug(f"Graph API {method} {url}")
        try:
            async with self._client() as client:
                response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise RemoteRejection(f"Graph API request timed out: {method} {url}") from e
        except httpx.HTTPError as e:
            raise RemoteRejection(f"Graph API request failed: {e}") from e
        return _parse_envelope(response)


def _form_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def _parse_envelope(response: httpx.Response) -> Dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        if not response.is_success:
            raise RemoteRejection(response.text or f"HTTP {response.status_code}", status_code=response.status_code)
        return {"raw": response.text}

    if not isinstance(payload, dict):
        payload = {"data": payload}

    if not response.is_success or "error" in payload:
        rejection = RemoteRejection.from_envelope(payload, status_code=response.status_code)
        logger.error(
            f"Graph API error: status={response.status_code} code={rejection.code} "
            f"subcode={rejection.subcode} msg={rejection.message}"
        )
        raise rejection
    return payload
