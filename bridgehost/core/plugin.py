"""Loaded plugin package: entry point, compatibility gating, and factory registries."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from bridgehost.core.environment import HostEnvironment
from bridgehost.core.errors import (
    DuplicateRegistrationError,
    NotRegisteredError,
    PluginLoadError,
    PluginNotLoadedError,
)
from bridgehost.core.identifiers import accessory_name, platform_name, plugin_identifier
from bridgehost.core.manifest import HOST_ENGINE, build_load_context, read_manifest, resolve_entry_point
from bridgehost.core.model import LoadContext, PackageManifest
from bridgehost.core.versions import satisfies_range
from bridgehost.resolvers.base import ModuleResolver
from bridgehost.resolvers.file import FileModuleResolver

LOGGER = logging.getLogger(__name__)

BUNDLED_HOST_PACKAGES = ("homebridge", "hap-nodejs")

PluginInitializer = Callable[[Any], Any]


class Plugin:
    """One installed plugin package.

    Construction resolves the entry point from manifest data without any I/O.
    ``load`` gates the manifest against the running versions and imports the
    initializer; ``initialize`` runs it with the host API so the plugin can
    register its accessory and platform factories.
    """

    def __init__(
        self,
        name: str,
        path: str | os.PathLike[str],
        manifest: PackageManifest,
        scope: str | None = None,
        *,
        resolver: ModuleResolver | None = None,
        environment: HostEnvironment | None = None,
    ) -> None:
        self.name = name
        self.scope = scope
        self.path = Path(path)
        self.version = manifest.version
        self.disabled = False

        entry_point = resolve_entry_point(manifest)
        self.main = entry_point.main
        self.is_esm = entry_point.is_esm

        self._resolver = resolver or FileModuleResolver()
        self._environment = environment or HostEnvironment.from_env()
        self._load_context: LoadContext | None = build_load_context(manifest)
        self._initializer: PluginInitializer | None = None

        self._accessories: dict[str, type] = {}
        self._platforms: dict[str, type] = {}
        self._active_dynamic_platforms: dict[str, list[Any]] = {}

    @classmethod
    def from_directory(
        cls,
        path: str | os.PathLike[str],
        name: str,
        scope: str | None = None,
        *,
        resolver: ModuleResolver | None = None,
        environment: HostEnvironment | None = None,
    ) -> Plugin:
        manifest = read_manifest(Path(path))
        return cls(name, path, manifest, scope, resolver=resolver, environment=environment)

    @property
    def identifier(self) -> str:
        return plugin_identifier(self.name, self.scope)

    @property
    def loaded(self) -> bool:
        return self._initializer is not None

    def register_accessory(self, name: str, constructor: type) -> None:
        if name in self._accessories:
            raise DuplicateRegistrationError(
                f"Plugin '{self.identifier}' tried to register an accessory '{name}' "
                "which has already been registered!"
            )
        if not self.disabled:
            LOGGER.info("Registering accessory '%s.%s'", self.identifier, name)
        self._accessories[name] = constructor

    def register_platform(self, name: str, constructor: type) -> None:
        if name in self._platforms:
            raise DuplicateRegistrationError(
                f"Plugin '{self.identifier}' tried to register a platform '{name}' "
                "which has already been registered!"
            )
        if not self.disabled:
            LOGGER.info("Registering platform '%s.%s'", self.identifier, name)
        self._platforms[name] = constructor

    def accessory_names(self) -> list[str]:
        return list(self._accessories)

    def platform_names(self) -> list[str]:
        return list(self._platforms)

    def get_accessory_constructor(self, identifier: str) -> type:
        name = accessory_name(identifier)
        constructor = self._accessories.get(name)
        if constructor is None:
            raise NotRegisteredError(
                f"The requested accessory '{name}' was not registered by the plugin '{self.identifier}'."
            )
        return constructor

    def get_platform_constructor(self, identifier: str) -> type:
        name = platform_name(identifier)
        constructor = self._platforms.get(name)
        if constructor is None:
            raise NotRegisteredError(
                f"The requested platform '{name}' was not registered by the plugin '{self.identifier}'."
            )

        if name in self._active_dynamic_platforms:
            LOGGER.warning(
                "The dynamic platform %s from the plugin %s seems to be configured multiple times "
                "in your config. Configuring a dynamic platform more than once is deprecated "
                "and will stop working in a future release.",
                name,
                self.identifier,
            )
        return constructor

    def assign_dynamic_platform(self, identifier: str, platform: Any) -> None:
        name = platform_name(identifier)
        # newest first: single-instance lookups see the last published platform
        self._active_dynamic_platforms.setdefault(name, []).insert(0, platform)

    def get_active_dynamic_platform(self, name: str) -> Any | None:
        platforms = self._active_dynamic_platforms.get(name)
        return platforms[0] if platforms else None

    def get_active_dynamic_platforms(self, name: str) -> tuple[Any, ...]:
        return tuple(self._active_dynamic_platforms.get(name, ()))

    async def load(self) -> None:
        context = self._load_context
        if context is None:
            raise PluginLoadError(f"Plugin '{self.identifier}' reached an illegal state: it was already loaded")
        self._load_context = None

        required = context.engines.get(HOST_ENGINE)
        if not required:
            raise PluginLoadError(f"Plugin {self.path} does not contain the '{HOST_ENGINE}' package in 'engines'.")

        self._check_versions(context, required)

        main_path = Path(os.path.normpath(self.path / self.main))
        module = await self._resolver.load(main_path, esm=self.is_esm)

        if callable(module):
            self._initializer = module
        elif callable(getattr(module, "default", None)):
            self._initializer = module.default
        else:
            raise PluginLoadError(f"Plugin {self.path} does not export an initializer function from main.")

    def _check_versions(self, context: LoadContext, required: str) -> None:
        environment = self._environment
        if not satisfies_range(environment.host_version, required, include_prerelease=True):
            LOGGER.error(
                'The plugin "%s" requires a host version of %s which does not satisfy the current '
                "host version of %s. You may need to update this plugin (or the host) to a newer "
                "version. You may face unexpected issues or stability problems running this plugin.",
                self.name,
                required,
                environment.host_version,
            )

        runtime_required = context.engines.get(environment.runtime_engine)
        if (
            runtime_required
            and environment.runtime_version is not None
            and not satisfies_range(environment.runtime_version, runtime_required)
        ):
            LOGGER.warning(
                'The plugin "%s" requires %s version of %s which does not satisfy the current '
                "version of %s. You may need to upgrade your runtime installation.",
                self.name,
                environment.runtime_engine,
                runtime_required,
                environment.runtime_version,
            )

        if any(package in context.dependencies for package in BUNDLED_HOST_PACKAGES):
            LOGGER.error(
                "The plugin \"%s\" defines %s in its 'dependencies' section, meaning it carries an "
                "additional copy of the host. This wastes disk space and can cause major "
                "incompatibility issues. Please inform the developer to update their plugin!",
                self.name,
                " and/or ".join(f"'{package}'" for package in BUNDLED_HOST_PACKAGES),
            )

    def initialize(self, api: Any) -> Any:
        if self._initializer is None:
            raise PluginNotLoadedError(f"Tried to initialize plugin '{self.identifier}' which hasn't been loaded yet!")
        return self._initializer(api)
