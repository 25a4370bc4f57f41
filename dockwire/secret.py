"""Secret API: manage and inspect secrets within a swarm."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .client import DockerClient
from .uri import encode_filters


@dataclass
class ListSecretsOptions:
    """Filters applied when listing secrets.

    Available filters: ``id``, ``label``, ``name`` and ``names``.
    """

    filters: Mapping[str, Sequence[str]] = field(default_factory=dict)

    def to_query(self) -> dict[str, Any]:
        """Query parameters for the request."""
        return {"filters": encode_filters(self.filters)}


@dataclass
class UpdateSecretOptions:
    """Query parameters for updating a secret.

    ``version`` must be the secret's current version, to avoid conflicting writes.
    """

    version: int = 0

    def to_query(self) -> dict[str, Any]:
        """Query parameters for the request."""
        return {"version": self.version}


class Secrets:
    """Secret endpoints of the engine API."""

    def __init__(self, client: DockerClient) -> None:
        self.client = client

    async def list(self, options: ListSecretsOptions | None = None) -> Any:
        """Return the secrets known to the swarm."""
        query = options.to_query() if options is not None else None
        return await self.client.request_json("GET", "/secrets", query=query)

    async def create(self, secret_spec: Mapping[str, Any]) -> Any:
        """Create a secret and return the engine's id response."""
        return await self.client.request_json(
            "POST", "/secrets/create", body=dict(secret_spec)
        )

    async def inspect(self, secret_id: str) -> Any:
        """Return details of a secret, looked up by id or name."""
        return await self.client.request_json("GET", f"/secrets/{secret_id}")

    async def delete(self, secret_id: str) -> None:
        """Delete a secret."""
        await self.client.request_unit("DELETE", f"/secrets/{secret_id}")

    async def update(
        self,
        secret_id: str,
        secret_spec: Mapping[str, Any],
        options: UpdateSecretOptions,
    ) -> None:
        """Update an existing secret's spec."""
        await self.client.request_unit(
            "POST",
            f"/secrets/{secret_id}/update",
            query=options.to_query(),
            body=dict(secret_spec),
        )