"""Dooray API HTTP client.

Handles authentication, envelope unwrapping and the two-step (HTTP 307)
file transfer protocol used by the Dooray file service.
"""
import logging
import mimetypes
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from . import envelope
from .config import Credential, REQUEST_TIMEOUT, TRANSFER_TIMEOUT
from .errors import AuthenticationError, DoorayAPIError, TransportError

logger = logging.getLogger("dooray-mcp.client")

AUTH_FAILURE_MESSAGE = "Invalid or expired API token"
REDIRECT_STATUS = 307


@dataclass
class DownloadedFile:
    """Binary payload and headers of an authoritative download response."""

    content: bytes
    content_type: str
    content_disposition: Optional[str] = None
    content_length: Optional[int] = None


def _content_length(response: httpx.Response) -> Optional[int]:
    value = response.headers.get("content-length")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class DoorayClient:
    """Authenticated client for the Dooray REST API.

    One instance is created at startup and shared by every tool call. The
    only state is the read-only credential and the connection pool.

    Redirect following is disabled on the underlying ``httpx.AsyncClient``:
    the file service answers with 307 and the follow-up request must replay
    method and body exactly, so transfers drive that step themselves.
    """

    def __init__(
        self,
        credential: Credential,
        *,
        timeout: float = REQUEST_TIMEOUT,
        transfer_timeout: float = TRANSFER_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.credential = credential
        self.transfer_timeout = transfer_timeout
        self._http = httpx.AsyncClient(
            base_url=credential.base_url,
            timeout=timeout,
            headers={"Authorization": credential.authorization},
            follow_redirects=False,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self.credential.base_url

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "DoorayClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Low-level helpers
    # ------------------------------------------------------------------

    async def _send(self, request: httpx.Request) -> httpx.Response:
        logger.debug(f"Request: {request.method} {request.url}")
        try:
            response = await self._http.send(request)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout during {request.method} {request.url}: {e}")
            raise TransportError(f"Network error: request timed out ({request.method} {request.url.path})") from e
        except httpx.RequestError as e:
            logger.error(f"Network error during {request.method} {request.url}: {type(e).__name__}: {e}")
            raise TransportError(f"Network error: {e or type(e).__name__}") from e
        logger.debug(f"Response: {response.status_code} {request.url}")
        return response

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Map non-2xx responses to AuthenticationError / DoorayAPIError."""
        if response.is_success:
            return

        body = _json_body(response)
        logger.error(f"API Error: {response.status_code} {response.request.url} {body!r}")
        if response.status_code == 401:
            raise AuthenticationError(AUTH_FAILURE_MESSAGE)
        raise DoorayAPIError(envelope.failure_message(body), response.status_code, body)

    def _envelope(self, response: httpx.Response) -> Any:
        self._raise_for_status(response)
        try:
            return response.json()
        except ValueError:
            raise DoorayAPIError("Invalid JSON in API response", response.status_code, response.text)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> httpx.Response:
        request = self._http.build_request(
            method, path, json=json, params=_clean_params(params), headers=headers,
        )
        return await self._send(request)

    # ------------------------------------------------------------------
    # Standard verbs
    # ------------------------------------------------------------------

    async def get(self, path: str, params: Optional[dict] = None, headers: Optional[dict] = None) -> Any:
        response = await self._request("GET", path, params=params, headers=headers)
        return envelope.unwrap(self._envelope(response), response.status_code)

    async def post(self, path: str, body: Any = None, params: Optional[dict] = None,
                   headers: Optional[dict] = None) -> Any:
        response = await self._request("POST", path, json=body, params=params, headers=headers)
        return envelope.unwrap(self._envelope(response), response.status_code)

    async def put(self, path: str, body: Any = None, params: Optional[dict] = None,
                  headers: Optional[dict] = None) -> Any:
        response = await self._request("PUT", path, json=body, params=params, headers=headers)
        return envelope.unwrap(self._envelope(response), response.status_code)

    async def patch(self, path: str, body: Any = None, params: Optional[dict] = None,
                    headers: Optional[dict] = None) -> Any:
        response = await self._request("PATCH", path, json=body, params=params, headers=headers)
        return envelope.unwrap(self._envelope(response), response.status_code)

    async def delete(self, path: str, params: Optional[dict] = None, headers: Optional[dict] = None) -> Any:
        response = await self._request("DELETE", path, params=params, headers=headers)
        return envelope.unwrap(self._envelope(response), response.status_code)

    async def get_paginated(self, path: str, params: Optional[dict] = None) -> envelope.Page:
        """GET a list endpoint; returns ``Page(total_count, data)``."""
        response = await self._request("GET", path, params=params)
        return envelope.unwrap_paginated(self._envelope(response), response.status_code)

    # ------------------------------------------------------------------
    # Two-step (307) file transfers
    # ------------------------------------------------------------------

    async def _transfer(self, initial: httpx.Request) -> httpx.Response:
        """Run the initial request and, on 307, replay it at ``Location``.

        Returns the authoritative response. A 2xx on the first leg is
        authoritative as-is; any other status fails.
        """
        logger.debug(f"File transfer step 1: {initial.method} {initial.url}")
        response = await self._send(initial)

        if response.status_code == REDIRECT_STATUS:
            location = response.headers.get("location")
            if not location:
                raise TransportError(
                    "307 redirect received but no Location header found", response.status_code,
                )
            follow_up = self._http.build_request(
                initial.method,
                location,
                content=initial.content or None,
                headers={k: v for k, v in initial.headers.items() if k.lower() in ("content-type", "authorization")},
                timeout=self.transfer_timeout,
            )
            logger.debug(f"File transfer step 2: {follow_up.method} {follow_up.url}")
            response = await self._send(follow_up)
        elif response.is_success:
            logger.debug("File transfer completed without redirect")
        elif response.status_code == 401:
            self._raise_for_status(response)
        else:
            raise TransportError("Unexpected status", response.status_code, _json_body(response))

        self._raise_for_status(response)
        return response

    async def upload_file(
        self,
        path: str,
        content: bytes,
        filename: str,
        *,
        method: str = "POST",
        params: Optional[dict] = None,
        mime_type: Optional[str] = None,
    ) -> Any:
        """Upload ``content`` as multipart field ``file``; returns the unwrapped result."""
        mime_type = mime_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
        initial = self._http.build_request(
            method,
            path,
            params=_clean_params(params),
            files={"file": (filename, content, mime_type)},
            timeout=self.transfer_timeout,
        )
        # Materialise the multipart body so the second leg sends identical bytes.
        initial.read()
        response = await self._transfer(initial)
        return envelope.unwrap(self._envelope(response), response.status_code)

    async def download_file(self, path: str, params: Optional[dict] = None) -> DownloadedFile:
        """Download raw bytes; headers are returned uninterpreted."""
        initial = self._http.build_request(
            "GET", path, params=_clean_params(params), timeout=self.transfer_timeout,
        )
        response = await self._transfer(initial)
        return DownloadedFile(
            content=response.content,
            content_type=response.headers.get("content-type", "application/octet-stream"),
            content_disposition=response.headers.get("content-disposition"),
            content_length=_content_length(response),
        )


def _clean_params(params: Optional[dict]) -> Optional[dict]:
    """Drop unset query parameters (httpx would send them as empty strings)."""
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None}
