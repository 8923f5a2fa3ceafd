"""HTTP 传输层：基于 httpx 的异步 HTTP 客户端，支持流式音频下载与表单上传。

Async HTTP transport for the ElevenLabs REST API.

Buffered requests return a fully read ``httpx.Response``; binary audio is
read through ``stream_request``. Both map httpx failures and error statuses
onto the raw error hierarchy (TransportError, DeadlineExceeded, RemoteError).
"""

from __future__ import annotations

import json
import os
from contextlib import asynccontextmanager
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING, Any

import httpx

from eleven_mcp.errors import DeadlineExceeded, RemoteError, TransportError
from eleven_mcp.transport.auth import get_auth_header

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

PROXY_ENV = "ELEVENLABS_PROXY_URL"
CONNECT_TIMEOUT = 10.0

FileParts = list[tuple[str, tuple[str, bytes, str]]]


@lru_cache(maxsize=1)
def user_agent() -> str:
    try:
        return f"eleven-mcp-server/{version('eleven-mcp-server')}"
    except PackageNotFoundError:
        return "eleven-mcp-server/dev"


def _error_body(raw: bytes) -> dict[str, Any] | None:
    try:
        body = json.loads(raw)
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def _remote_error(response: httpx.Response, raw: bytes) -> RemoteError:
    return RemoteError.from_response(
        response.status_code, _error_body(raw), dict(response.headers)
    )


class HttpTransport:
    """HTTP transport bound to one base URL and one API key.

    httpx's own read timeout is off by default; the API client bounds every
    operation with its own deadline.

    Example:
        >>> transport = HttpTransport("https://api.elevenlabs.io", api_key="sk_...")
        >>> async with transport.stream_request("POST", "/v1/sound-generation", json=payload) as resp:
        ...     audio = b"".join([c async for c in resp.aiter_bytes()])
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str | None = None,
        read_timeout: float | None = None,
        proxy: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Create a transport.

        Args:
            base_url: API base URL
            api_key: API key (falls back to ELEVENLABS_API_KEY)
            read_timeout: httpx read timeout in seconds, None for no limit
            proxy: Proxy URL (falls back to ELEVENLABS_PROXY_URL)
            client: Pre-built httpx client, e.g. one using ``httpx.MockTransport``
        """
        self._base_url = base_url.rstrip("/")
        self._read_timeout = read_timeout
        self._proxy = proxy or os.getenv(PROXY_ENV) or None
        self._auth = get_auth_header(api_key)
        self._client = client

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def client(self) -> httpx.AsyncClient:
        """The httpx client, created on first use."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=httpx.Timeout(self._read_timeout, connect=CONNECT_TIMEOUT),
                proxy=self._proxy,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _prepare(
        self,
        *,
        accept: str,
        json: dict[str, Any] | None,
        data: dict[str, Any] | None,
        files: FileParts | None,
        params: dict[str, Any] | None,
        headers: dict[str, str] | None,
    ) -> dict[str, Any]:
        request_headers = {"Accept": accept, "User-Agent": user_agent(), **self._auth}
        # httpx sets the multipart boundary itself
        if json is not None:
            request_headers["Content-Type"] = "application/json"
        request_headers.update(headers or {})
        return {
            "json": json,
            "data": data,
            "files": files,
            "params": params,
            "headers": request_headers,
        }

    def _translate(self, path: str, error: httpx.HTTPError) -> TransportError:
        url = f"{self._base_url}{path}"
        if isinstance(error, httpx.TimeoutException):
            return DeadlineExceeded(f"Request timed out: {error}", url=url, cause=error)
        if isinstance(error, httpx.ConnectError):
            return TransportError(f"Connection failed: {error}", url=url, cause=error)
        return TransportError(f"HTTP error: {error}", url=url, cause=error)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        files: FileParts | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send a request and read the whole response.

        Raises:
            TransportError: Network failure
            DeadlineExceeded: httpx gave up waiting
            RemoteError: Status 400 or above
        """
        kwargs = self._prepare(
            accept="application/json",
            json=json,
            data=data,
            files=files,
            params=params,
            headers=headers,
        )
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise self._translate(path, e) from e

        if response.is_error:
            raise _remote_error(response, response.content)
        return response

    async def get(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("GET", path, params=params, headers=headers)

    async def post(
        self,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        files: FileParts | None = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        return await self.request("POST", path, json=json, data=data, files=files, params=params)

    @asynccontextmanager
    async def stream_request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        files: FileParts | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> AsyncIterator[httpx.Response]:
        """Send a request whose body is read incrementally by the caller.

        The error body of a failed response is read before raising. httpx
        errors raised while the caller iterates are translated too.
        """
        kwargs = self._prepare(
            accept="*/*", json=json, data=data, files=files, params=params, headers=headers
        )
        try:
            async with self.client.stream(method, path, **kwargs) as response:
                if response.is_error:
                    raise _remote_error(response, await response.aread())
                yield response
        except httpx.HTTPError as e:
            raise self._translate(path, e) from e

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
