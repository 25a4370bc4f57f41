"""Service API: manage and inspect services within a swarm."""

from __future__ import annotations

import base64
import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .client import DockerClient
from .uri import encode_filters


@dataclass
class ListServicesOptions:
    """Filters applied when listing services.

    Available filters: ``id``, ``label``, ``mode`` and ``name``.
    """

    filters: Mapping[str, Sequence[str]] = field(default_factory=dict)

    def to_query(self) -> dict[str, Any]:
        """Query parameters for the request."""
        return {"filters": encode_filters(self.filters)}


@dataclass
class InspectServiceOptions:
    """Query parameters for inspecting a service."""

    insert_defaults: bool = False

    def to_query(self) -> dict[str, Any]:
        """Query parameters for the request."""
        return {"insertDefaults": self.insert_defaults}


@dataclass
class UpdateServiceOptions:
    """Query parameters for updating a service.

    ``registry_auth_from`` selects credentials from the previous spec instead
    of the current one; ``rollback`` asks the engine to roll back to the
    previous spec, ignoring the supplied one.
    """

    version: int = 0
    registry_auth_from: bool = False
    rollback: bool = False

    def to_query(self) -> dict[str, Any]:
        """Query parameters for the request."""
        return {
            "version": self.version,
            "registryAuthFrom": "previous-spec" if self.registry_auth_from else "spec",
            "rollback": "previous" if self.rollback else "",
        }


def registry_auth_header(credentials: Mapping[str, Any] | None) -> str:
    """Encode registry credentials for the ``X-Registry-Auth`` header.

    Missing credentials encode as an empty object; unset (None) fields are left out.
    """
    payload = {
        key: value for key, value in (credentials or {}).items() if value is not None
    }
    text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")


def _auth_headers(credentials: Mapping[str, Any] | None) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "X-Registry-Auth": registry_auth_header(credentials),
    }


class Services:
    """Service endpoints of the engine API."""

    def __init__(self, client: DockerClient) -> None:
        self.client = client

    async def list(self, options: ListServicesOptions | None = None) -> Any:
        """Return the services running on the swarm."""
        query = options.to_query() if options is not None else None
        return await self.client.request_json("GET", "/services", query=query)

    async def create(
        self,
        service_spec: Mapping[str, Any],
        credentials: Mapping[str, Any] | None = None,
    ) -> Any:
        """Dispatch a new service and return the engine's create response."""
        return await self.client.request_json(
            "POST",
            "/services/create",
            body=dict(service_spec),
            headers=_auth_headers(credentials),
        )

    async def inspect(
        self, service_name: str, options: InspectServiceOptions | None = None
    ) -> Any:
        """Return details of a service."""
        query = options.to_query() if options is not None else None
        return await self.client.request_json("GET", f"/services/{service_name}", query=query)

    async def delete(self, service_name: str) -> None:
        """Delete a service."""
        await self.client.request_unit("DELETE", f"/services/{service_name}")

    async def update(
        self,
        service_name: str,
        service_spec: Mapping[str, Any],
        options: UpdateServiceOptions,
        credentials: Mapping[str, Any] | None = None,
    ) -> Any:
        """Update an existing service and return the engine's update response."""
        return await self.client.request_json(
            "POST",
            f"/services/{service_name}/update",
            query=options.to_query(),
            body=dict(service_spec),
            headers=_auth_headers(credentials),
        )