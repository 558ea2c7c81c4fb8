"""Stable public API for plugins and for tooling built on top of bridgehost.

``HostAPI`` is the capability object passed to a plugin initializer. The rest
of this module re-exports the supported integration surface; avoid importing
from internal modules unless intentionally depending on non-stable internals.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from bridgehost import hap
from bridgehost.core.environment import HostEnvironment
from bridgehost.core.errors import (
    AccessorySerializationError,
    BridgeHostError,
    DuplicateRegistrationError,
    ManifestValidationError,
    NotRegisteredError,
    PluginLoadError,
    PluginNotLoadedError,
)
from bridgehost.core.identifiers import platform_name
from bridgehost.core.model import EntryPoint, PackageManifest
from bridgehost.core.platform_accessory import PlatformAccessory
from bridgehost.core.plugin import Plugin
from bridgehost.resolvers.base import ModuleResolver
from bridgehost.resolvers.file import FileModuleResolver

__all__ = [
    "AccessorySerializationError",
    "BridgeHostError",
    "DuplicateRegistrationError",
    "ManifestValidationError",
    "NotRegisteredError",
    "PluginLoadError",
    "PluginNotLoadedError",
    "EntryPoint",
    "FileModuleResolver",
    "HostAPI",
    "HostEnvironment",
    "ModuleResolver",
    "PackageManifest",
    "PlatformAccessory",
    "Plugin",
]


class HostAPI:
    """Capabilities handed to one plugin's initializer.

    Registration calls are forwarded to the bound :class:`Plugin`. Platform
    accessories registered through this object are tagged with the plugin
    identifier and platform name so they can be serialized later.
    """

    hap = hap
    platform_accessory = PlatformAccessory

    def __init__(self, plugin: Plugin, environment: HostEnvironment | None = None) -> None:
        self._plugin = plugin
        self._environment = environment or HostEnvironment.from_env()
        self.accessories: list[PlatformAccessory] = []

    @property
    def server_version(self) -> str:
        return self._environment.host_version

    @property
    def plugin(self) -> Plugin:
        return self._plugin

    def register_accessory(self, name: str, constructor: type) -> None:
        self._plugin.register_accessory(name, constructor)

    def register_platform(self, name: str, constructor: type) -> None:
        self._plugin.register_platform(name, constructor)

    def register_platform_accessories(
        self,
        platform: str,
        accessories: Iterable[PlatformAccessory],
    ) -> None:
        name = platform_name(platform)
        for accessory in accessories:
            accessory.associated_plugin = self._plugin.identifier
            accessory.associated_platform = name
            if accessory not in self.accessories:
                self.accessories.append(accessory)

    def unregister_platform_accessories(self, accessories: Iterable[PlatformAccessory]) -> None:
        for accessory in accessories:
            if accessory in self.accessories:
                self.accessories.remove(accessory)

    def create_platform(self, identifier: str, config: dict[str, Any] | None = None) -> Any:
        constructor = self._plugin.get_platform_constructor(identifier)
        name = platform_name(identifier)
        logger = logging.getLogger(f"{self._plugin.identifier}.{name}")
        platform = constructor(logger, config or {}, self)
        if callable(getattr(platform, "configure_accessory", None)):
            self._plugin.assign_dynamic_platform(name, platform)
        return platform
