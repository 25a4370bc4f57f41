"""Request URIs for the Docker engine API."""

from __future__ import annotations

import enum
import json
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, quote_plus, urlencode, urljoin, urlsplit


class ClientType(enum.Enum):
    """Kind of connection used to reach the engine."""

    HTTP = "http"
    SSL = "ssl"
    UNIX = "unix"
    NAMED_PIPE = "named_pipe"


_SCHEMES = {
    ClientType.HTTP: "http",
    ClientType.SSL: "https",
    ClientType.UNIX: "unix",
    ClientType.NAMED_PIPE: "net.pipe",
}

_PATH_SAFE = "/%:@!$&'()*+,;=~-._"


@dataclass(frozen=True, order=True)
class ClientVersion:
    """Engine API version, e.g. 1.41."""

    major_version: int
    minor_version: int

    def __str__(self) -> str:
        return f"{self.major_version}.{self.minor_version}"


def socket_scheme(client_type: ClientType) -> str:
    """URI scheme for a client type."""
    return _SCHEMES[client_type]


def socket_host(socket: str | os.PathLike[str], client_type: ClientType) -> str:
    """URI host for a socket; local sockets are hex-encoded."""
    text = os.fsdecode(socket)
    if client_type in (ClientType.UNIX, ClientType.NAMED_PIPE):
        return text.encode("utf-8", errors="replace").hex()
    return text


def _form_quote(text: Any, safe: str = "", encoding: Any = None, errors: Any = None) -> str:
    return quote_plus(text, safe="*", encoding=encoding, errors=errors).replace("~", "%7E")


def encode_query(query: Mapping[str, Any]) -> str:
    """Form-encode query parameters; None values are left out."""
    pairs: list[tuple[str, str]] = []
    for key, value in query.items():
        if value is None:
            continue
        if isinstance(value, bool):
            pairs.append((key, "true" if value else "false"))
        elif isinstance(value, (str, int, float)):
            pairs.append((key, str(value)))
        else:
            raise TypeError(f"unsupported query value for {key!r}: {type(value).__name__}")
    return urlencode(pairs, quote_via=_form_quote)


def encode_filters(filters: Mapping[str, Iterable[str]]) -> str:
    """Encode a filter map as compact JSON, as the engine expects."""
    return json.dumps(
        {str(key): list(values) for key, values in filters.items()},
        separators=(",", ":"),
        ensure_ascii=False,
    )


def build_uri(
    socket: str | os.PathLike[str],
    client_type: ClientType,
    path: str,
    query: Mapping[str, Any] | None,
    client_version: ClientVersion,
) -> str:
    """Build the request URI for ``path``.

    ``path`` is resolved against ``/v<version><path>`` on the socket host, so
    an absolute path replaces the versioned prefix.
    """
    scheme = socket_scheme(client_type)
    host = socket_host(socket, client_type)
    # urljoin only resolves well-known schemes, so join under http and swap back.
    joined = urlsplit(urljoin(f"http://{host}/v{client_version}{path}", path))
    uri = f"{scheme}://{joined.netloc}{quote(joined.path, safe=_PATH_SAFE)}"
    if query is not None:
        uri += "?" + encode_query(query)
    elif joined.query:
        uri += "?" + joined.query
    return uri


def socket_path_dest(dest: str, client_type: ClientType) -> str | None:
    """Recover the socket path hex-encoded in the host of ``dest``."""
    host = urlsplit(str(dest)).hostname or "UNKNOWN_HOST"
    hostname = urlsplit(f"{socket_scheme(client_type)}://{host}").hostname
    if not hostname:
        return None
    try:
        raw = bytes.fromhex(hostname)
    except ValueError:
        return None
    return raw.decode("utf-8", errors="replace")