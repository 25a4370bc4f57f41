"""System API: information about the engine and the machine it runs on."""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .client import DockerClient
from .uri import encode_filters

_VERSION_KEYS = {
    "platform": "Platform",
    "components": "Components",
    "version": "Version",
    "api_version": "ApiVersion",
    "min_api_version": "MinAPIVersion",
    "git_commit": "GitCommit",
    "go_version": "GoVersion",
    "os": "Os",
    "arch": "Arch",
    "kernel_version": "KernelVersion",
    "experimental": "Experimental",
    "build_time": "BuildTime",
}


@dataclass
class VersionComponents:
    """One component of the engine reported by the version endpoint."""

    name: str
    version: str
    details: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VersionComponents:
        """Build from the engine's JSON object; Name and Version are required."""
        missing = [key for key in ("Name", "Version") if key not in data]
        if missing:
            raise ValueError(f"missing field(s) in version component: {', '.join(missing)}")
        details = data.get("Details")
        return cls(
            name=data["Name"],
            version=data["Version"],
            details=dict(details) if details is not None else None,
        )

    def _as_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"Name": self.name, "Version": self.version}
        if self.details is not None:
            result["Details"] = dict(self.details)
        return result


@dataclass
class Version:
    """Response of the engine's version endpoint."""

    platform: dict[str, Any] | None = None
    components: list[VersionComponents] | None = None
    version: str | None = None
    api_version: str | None = None
    min_api_version: str | None = None
    git_commit: str | None = None
    go_version: str | None = None
    os: str | None = None
    arch: str | None = None
    kernel_version: str | None = None
    experimental: Any = None
    build_time: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Version:
        """Build from the engine's JSON object; unknown keys are ignored."""
        values = {attr: data.get(key) for attr, key in _VERSION_KEYS.items()}
        if values["platform"] is not None:
            values["platform"] = dict(values["platform"])
        if values["components"] is not None:
            values["components"] = [
                VersionComponents.from_dict(item) for item in values["components"]
            ]
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """JSON object in the engine's field naming; unset fields are left out."""
        result: dict[str, Any] = {}
        for attr, key in _VERSION_KEYS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            if attr == "components":
                value = [component._as_dict() for component in value]
            elif attr == "platform":
                value = dict(value)
            result[key] = value
        return result


def _timestamp(value: str | int | float | datetime | None) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        delta = value - datetime(1970, 1, 1, tzinfo=timezone.utc)
        seconds = delta.days * 86400 + delta.seconds
        return f"{seconds}.{delta.microseconds * 1000:09d}"
    return str(value)


@dataclass
class EventsOptions:
    """Query parameters for the events stream.

    ``since`` and ``until`` may be timestamps as strings, numbers or datetimes;
    naive datetimes are taken as UTC.
    """

    since: str | int | float | datetime | None = None
    until: str | int | float | datetime | None = None
    filters: Mapping[str, Sequence[str]] = field(default_factory=dict)

    def to_query(self) -> dict[str, Any]:
        """Query parameters for the request."""
        return {
            "since": _timestamp(self.since),
            "until": _timestamp(self.until),
            "filters": encode_filters(self.filters),
        }


class System:
    """System endpoints of the engine API."""

    def __init__(self, client: DockerClient) -> None:
        self.client = client

    async def version(self) -> Version:
        """Return the engine's version and platform information."""
        return Version.from_dict(await self.client.request_json("GET", "/version"))

    async def info(self) -> Any:
        """Return system-wide information about the engine."""
        return await self.client.request_json("GET", "/info")

    async def ping(self) -> str:
        """Check that the engine is reachable; returns its reply text."""
        return await self.client.request_text("GET", "/_ping")

    def events(self, options: EventsOptions | None = None) -> AsyncIterator[Any]:
        """Stream real-time events from the engine."""
        query = options.to_query() if options is not None else None
        return self.client.stream_json("GET", "/events", query=query)

    async def df(self) -> Any:
        """Return disk usage information."""
        return await self.client.request_json("GET", "/system/df")