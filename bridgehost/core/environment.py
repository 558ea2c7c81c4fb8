"""Running host/runtime versions that plugin manifests are gated against."""

from __future__ import annotations

import os
from dataclasses import dataclass

from bridgehost import __version__

DEFAULT_RUNTIME_ENGINE = "node"


@dataclass(frozen=True)
class HostEnvironment:
    host_version: str = __version__
    # unset means no runtime answers to ``engines[runtime_engine]``; the check is skipped
    runtime_version: str | None = None
    runtime_engine: str = DEFAULT_RUNTIME_ENGINE

    @classmethod
    def from_env(cls) -> HostEnvironment:
        return cls(
            host_version=os.environ.get("BRIDGEHOST_HOST_VERSION", __version__),
            runtime_version=os.environ.get("BRIDGEHOST_RUNTIME_VERSION") or None,
            runtime_engine=os.environ.get("BRIDGEHOST_RUNTIME_ENGINE", DEFAULT_RUNTIME_ENGINE),
        )
