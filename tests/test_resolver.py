from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from bridgehost.core.errors import PluginLoadError
from bridgehost.resolvers.file import FileModuleResolver


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_imports_source_file(tmp_path: Path) -> None:
    _write(tmp_path / "plugin.py", "VALUE = 42\n\ndef default(api):\n    return api\n")
    module = asyncio.run(FileModuleResolver().load(tmp_path / "plugin.py", esm=False))
    assert module.VALUE == 42
    assert module.default("api") == "api"


def test_imports_js_named_entry_off_the_loop(tmp_path: Path) -> None:
    _write(tmp_path / "index.mjs", "def default(api):\n    return 'esm'\n")
    module = asyncio.run(FileModuleResolver().load(tmp_path / "index.mjs", esm=True))
    assert module.default(None) == "esm"


def test_imports_package_directory(tmp_path: Path) -> None:
    _write(tmp_path / "pkg" / "helpers.py", "NAME = 'helper'\n")
    _write(
        tmp_path / "pkg" / "__init__.py",
        "from . import helpers\n\ndef default(api):\n    return helpers.NAME\n",
    )
    module = asyncio.run(FileModuleResolver().load(tmp_path / "pkg", esm=False))
    assert module.default(None) == "helper"


def test_missing_entry_module(tmp_path: Path) -> None:
    with pytest.raises(PluginLoadError, match="does not exist"):
        asyncio.run(FileModuleResolver().load(tmp_path / "missing.py", esm=False))


def test_failing_module_is_wrapped(tmp_path: Path) -> None:
    _write(tmp_path / "broken.py", "raise RuntimeError('nope')\n")
    with pytest.raises(PluginLoadError, match="nope") as excinfo:
        asyncio.run(FileModuleResolver().load(tmp_path / "broken.py", esm=False))
    assert isinstance(excinfo.value.__cause__, RuntimeError)
