"""Core data models used across manifest parsing, plugin loading, and CLI."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

DEFAULT_VERSION = "0.0.0"


@dataclass(frozen=True)
class PackageManifest:
    version: str = DEFAULT_VERSION
    main: str | None = None
    exports: str | Mapping[str, Any] | None = None
    type: str | None = None
    engines: dict[str, str] = field(default_factory=dict)
    dependencies: dict[str, str] = field(default_factory=dict)
    peer_dependencies: dict[str, str] | None = None

    @classmethod
    def from_mapping(cls, doc: Mapping[str, Any]) -> PackageManifest:
        peer_dependencies = doc.get("peerDependencies")
        return cls(
            version=doc.get("version") or DEFAULT_VERSION,
            main=doc.get("main"),
            exports=doc.get("exports"),
            type=doc.get("type"),
            engines=dict(doc.get("engines") or {}),
            dependencies=dict(doc.get("dependencies") or {}),
            peer_dependencies=dict(peer_dependencies) if peer_dependencies is not None else None,
        )


@dataclass(frozen=True)
class EntryPoint:
    main: str
    is_esm: bool


@dataclass(frozen=True)
class LoadContext:
    engines: dict[str, str]
    dependencies: dict[str, str]
