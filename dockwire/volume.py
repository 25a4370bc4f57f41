"""Volume API: persistent storage that can be attached to containers."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .client import DockerClient
from .uri import encode_filters


@dataclass
class ListVolumesOptions:
    """Filters applied when listing volumes."""

    filters: Mapping[str, Sequence[str]] = field(default_factory=dict)

    def to_query(self) -> dict[str, Any]:
        """Query parameters for the request."""
        return {"filters": encode_filters(self.filters)}


@dataclass
class CreateVolumeOptions:
    """Volume configuration used when creating a volume."""

    name: str = ""
    driver: str = ""
    driver_opts: Mapping[str, str] = field(default_factory=dict)
    labels: Mapping[str, str] = field(default_factory=dict)

    def to_body(self) -> dict[str, Any]:
        """Request body in the engine's field naming."""
        return {
            "Name": self.name,
            "Driver": self.driver,
            "DriverOpts": dict(self.driver_opts),
            "Labels": dict(self.labels),
        }


@dataclass
class RemoveVolumeOptions:
    """Query parameters for removing a volume."""

    force: bool = False

    def to_query(self) -> dict[str, Any]:
        """Query parameters for the request."""
        return {"force": self.force}


@dataclass
class PruneVolumesOptions:
    """Filters applied when pruning unused volumes."""

    filters: Mapping[str, Sequence[str]] = field(default_factory=dict)

    def to_query(self) -> dict[str, Any]:
        """Query parameters for the request."""
        return {"filters": encode_filters(self.filters)}


class Volumes:
    """Volume endpoints of the engine API."""

    def __init__(self, client: DockerClient) -> None:
        self.client = client

    async def list(self, options: ListVolumesOptions | None = None) -> Any:
        """Return the volume list response."""
        query = options.to_query() if options is not None else None
        return await self.client.request_json("GET", "/volumes", query=query)

    async def create(self, config: CreateVolumeOptions) -> Any:
        """Create a volume and return it."""
        return await self.client.request_json("POST", "/volumes/create", body=config.to_body())

    async def inspect(self, volume_name: str) -> Any:
        """Return details of a volume."""
        return await self.client.request_json("GET", f"/volumes/{volume_name}")

    async def remove(self, volume_name: str, options: RemoveVolumeOptions | None = None) -> None:
        """Remove a volume."""
        query = options.to_query() if options is not None else None
        await self.client.request_unit("DELETE", f"/volumes/{volume_name}", query=query)

    async def prune(self, options: PruneVolumesOptions | None = None) -> Any:
        """Delete unused volumes and return the prune report."""
        query = options.to_query() if options is not None else None
        return await self.client.request_json("POST", "/volumes/prune", query=query)