"""The Ping resource of the monitors API group."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class GroupVersion:
    """An API group and version, written ``group/version``."""

    group: str
    version: str

    def __str__(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version


GROUP_VERSION = GroupVersion(group="monitors.demo.io", version="v1beta1")


def _mapping(value: Any, what: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be an object")
    return value


def _typed(data: dict, key: str, kind: type, default: Any) -> Any:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"{key} must be of type {kind.__name__}")
    return value


@dataclass
class PingSpec:
    """Desired state of a Ping: which host, how many attempts."""

    hostname: str = ""
    attempts: int = 0


@dataclass
class Ping:
    """A request to ping a host from inside the cluster."""

    name: str = ""
    namespace: str = ""
    spec: PingSpec = field(default_factory=PingSpec)
    api_version: str = str(GROUP_VERSION)
    kind: str = "Ping"

    @classmethod
    def from_dict(cls, data: dict) -> "Ping":
        data = _mapping(data, "Ping")
        metadata = _mapping(data.get("metadata"), "metadata")
        spec = _mapping(data.get("spec"), "spec")
        return cls(
            name=_typed(metadata, "name", str, ""),
            namespace=_typed(metadata, "namespace", str, ""),
            spec=PingSpec(
                hostname=_typed(spec, "hostname", str, ""),
                attempts=_typed(spec, "attempts", int, 0),
            ),
            api_version=_typed(data, "apiVersion", str, ""),
            kind=_typed(data, "kind", str, ""),
        )

    def to_dict(self) -> dict:
        out: dict = {}
        if self.api_version:
            out["apiVersion"] = self.api_version
        if self.kind:
            out["kind"] = self.kind
        metadata = {}
        if self.name:
            metadata["name"] = self.name
        if self.namespace:
            metadata["namespace"] = self.namespace
        spec: dict = {}
        if self.spec.hostname:
            spec["hostname"] = self.spec.hostname
        if self.spec.attempts:
            spec["attempts"] = self.spec.attempts
        out.update(metadata=metadata, spec=spec, status={})
        return out


@dataclass
class PingList:
    """A list of Ping resources."""

    items: list[Ping] = field(default_factory=list)
    api_version: str = str(GROUP_VERSION)
    kind: str = "PingList"

    @classmethod
    def from_dict(cls, data: dict) -> "PingList":
        data = _mapping(data, "PingList")
        items: Optional[list] = data.get("items")
        if items is not None and not isinstance(items, list):
            raise ValueError("items must be a list")
        return cls(
            items=[Ping.from_dict(item) for item in items or []],
            api_version=_typed(data, "apiVersion", str, ""),
            kind=_typed(data, "kind", str, ""),
        )

    def to_dict(self) -> dict:
        out: dict = {}
        if self.api_version:
            out["apiVersion"] = self.api_version
        if self.kind:
            out["kind"] = self.kind
        out.update(metadata={}, items=[item.to_dict() for item in self.items])
        return out