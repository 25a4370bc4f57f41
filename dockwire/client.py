"""Async HTTP client for the Docker engine API."""

from __future__ import annotations

import json
import os
from collections.abc import AsyncIterator, Mapping
from typing import Any
from urllib.parse import urlsplit, urlunsplit

import httpx

from .read import JsonDataError, JsonLineDecoder, iter_decoded
from .uri import ClientType, ClientVersion, build_uri

API_DEFAULT_VERSION = ClientVersion(1, 41)
DEFAULT_TIMEOUT = 120.0

_SOCKET_PREFIXES = {
    ClientType.UNIX: "unix://",
    ClientType.HTTP: "tcp://",
    ClientType.SSL: "tcp://",
}


class DockerError(Exception):
    """Base error for failed engine requests."""


class DockerResponseServerError(DockerError):
    """The engine answered with an error status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Docker responded with status code {status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300 or status_code in (101, 304)


def _server_error(response: httpx.Response) -> DockerResponseServerError:
    message = response.text
    try:
        payload = json.loads(response.content)
    except (ValueError, UnicodeDecodeError):
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        message = payload["message"]
    return DockerResponseServerError(response.status_code, message)


class DockerClient:
    """Sends requests to a Docker engine over a Unix socket, HTTP or HTTPS."""

    def __init__(
        self,
        socket: str | os.PathLike[str],
        client_type: ClientType = ClientType.UNIX,
        client_version: ClientVersion = API_DEFAULT_VERSION,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        prefix = _SOCKET_PREFIXES.get(client_type, "")
        self.socket = os.fsdecode(socket).removeprefix(prefix) if prefix else os.fsdecode(socket)
        self.client_type = client_type
        self.client_version = client_version
        if transport is None:
            transport = self._default_transport()
        self._http = httpx.AsyncClient(transport=transport, timeout=DEFAULT_TIMEOUT)

    def _default_transport(self) -> httpx.AsyncBaseTransport:
        if self.client_type is ClientType.UNIX:
            return httpx.AsyncHTTPTransport(uds=self.socket)
        if self.client_type is ClientType.NAMED_PIPE:
            raise DockerError("named pipe connections need an explicit transport")
        return httpx.AsyncHTTPTransport()

    def _url(self, path: str, query: Mapping[str, Any] | None) -> str:
        uri = build_uri(self.socket, self.client_type, path, query, self.client_version)
        if self.client_type in (ClientType.UNIX, ClientType.NAMED_PIPE):
            parts = urlsplit(uri)
            uri = urlunsplit(("http", "localhost", parts.path, parts.query, ""))
            if uri.endswith("?") is False and query is not None and not parts.query:
                uri += "?"
        return uri

    @staticmethod
    def _prepare(body: Any, headers: Mapping[str, str] | None) -> tuple[bytes | None, httpx.Headers]:
        merged = httpx.Headers(headers or {})
        if body is None:
            return None, merged
        if isinstance(body, (bytes, bytearray)):
            return bytes(body), merged
        if isinstance(body, str):
            return body.encode("utf-8"), merged
        if "content-type" not in merged:
            merged["content-type"] = "application/json"
        return json.dumps(body).encode("utf-8"), merged

    async def request(
        self,
        method: str,
        path: str,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        """Send a request and return the response; error statuses raise."""
        content, merged = self._prepare(body, headers)
        try:
            response = await self._http.request(
                method, self._url(path, query), content=content, headers=merged
            )
        except httpx.TransportError as err:
            raise DockerError(str(err)) from err
        if not _is_success(response.status_code):
            raise _server_error(response)
        return response

    async def request_json(self, method, path, query=None, body=None, headers=None) -> Any:
        """Send a request and decode the JSON response body."""
        response = await self.request(method, path, query, body, headers)
        try:
            return json.loads(response.content)
        except json.JSONDecodeError as err:
            raise JsonDataError(err.msg, err.colno, err.doc) from err
        except UnicodeDecodeError as err:
            raise JsonDataError(err.reason, err.start + 1) from err

    async def request_text(self, method, path, query=None, body=None, headers=None) -> str:
        """Send a request and return the response body as text."""
        response = await self.request(method, path, query, body, headers)
        return response.text

    async def request_unit(self, method, path, query=None, body=None, headers=None) -> None:
        """Send a request whose response body is ignored."""
        await self.request(method, path, query, body, headers)

    async def stream_json(
        self, method, path, query=None, body=None, headers=None
    ) -> AsyncIterator[Any]:
        """Send a request and yield each JSON document of the streamed response."""
        content, merged = self._prepare(body, headers)
        try:
            async with self._http.stream(
                method, self._url(path, query), content=content, headers=merged
            ) as response:
                if not _is_success(response.status_code):
                    await response.aread()
                    raise _server_error(response)
                async for item in iter_decoded(JsonLineDecoder(), response.aiter_bytes()):
                    yield item
        except httpx.TransportError as err:
            raise DockerError(str(err)) from err

    async def aclose(self) -> None:
        """Close the underlying connections."""
        await self._http.aclose()

    async def __aenter__(self) -> DockerClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()