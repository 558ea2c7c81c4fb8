"""Module resolver that imports plugin entry points from Python source files."""

from __future__ import annotations

import asyncio
import hashlib
import importlib.util
import logging
import sys
from importlib.machinery import SourceFileLoader
from pathlib import Path
from types import ModuleType

from bridgehost.core.errors import PluginLoadError

LOGGER = logging.getLogger(__name__)
_MODULE_PREFIX = "bridgehost_plugin_"


def _module_name(path: Path) -> str:
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    stem = "".join(ch if ch.isalnum() else "_" for ch in path.parent.name)
    return f"{_MODULE_PREFIX}{stem}_{digest}"


class FileModuleResolver:
    """Import entry points with ``importlib``.

    The entry file is executed as Python source whatever its suffix, so
    ``index.js``-style manifest defaults still map onto a single file. A
    directory resolves to its ``__init__.py``. ESM-classified entry points
    are imported in a worker thread so the event loop is not blocked.
    """

    async def load(self, path: Path, *, esm: bool) -> ModuleType:
        if esm:
            return await asyncio.to_thread(self._import, path)
        return self._import(path)

    def _import(self, path: Path) -> ModuleType:
        source = path / "__init__.py" if path.is_dir() else path
        if not source.is_file():
            raise PluginLoadError(f"Plugin entry module {source} does not exist")

        name = _module_name(source)
        loader = SourceFileLoader(name, str(source))
        search_locations = [str(source.parent)] if source.name == "__init__.py" else None
        spec = importlib.util.spec_from_file_location(
            name,
            source,
            loader=loader,
            submodule_search_locations=search_locations,
        )
        if spec is None:
            raise PluginLoadError(f"Could not create an import spec for {source}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        LOGGER.debug("Importing plugin entry module %s as %s", source, name)
        try:
            loader.exec_module(module)
        except Exception as exc:
            sys.modules.pop(name, None)
            raise PluginLoadError(f"Importing {source} failed: {exc}") from exc
        return module
