from __future__ import annotations

from pathlib import Path

import pytest

from bridgehost.core.errors import ManifestValidationError
from bridgehost.core.manifest import (
    build_load_context,
    parse_manifest,
    read_manifest,
    read_package_name,
    resolve_entry_point,
    split_package_name,
)
from bridgehost.core.model import PackageManifest


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_string_exports_win_over_main() -> None:
    manifest = PackageManifest(exports="./dist/plugin.js", main="./lib/index.js")
    assert resolve_entry_point(manifest).main == "./dist/plugin.js"


@pytest.mark.parametrize(
    ("exports", "expected"),
    [
        ({"require": "./cjs.js", "import": "./esm.mjs"}, "./esm.mjs"),
        ({"require": "./cjs.js", "node": "./node.js"}, "./cjs.js"),
        ({"node": "./node.js", "default": "./default.js"}, "./node.js"),
        ({"default": "./default.js", ".": "./dot.js"}, "./default.js"),
        ({".": "./dot.js"}, "./dot.js"),
    ],
)
def test_conditional_exports_order(exports: dict[str, str], expected: str) -> None:
    assert resolve_entry_point(PackageManifest(exports=exports)).main == expected


def test_nested_exports_prefer_import() -> None:
    manifest = PackageManifest(
        exports={".": {"require": "./dist/index.cjs", "import": "./dist/index.mjs"}},
    )
    entry_point = resolve_entry_point(manifest)
    assert entry_point.main == "./dist/index.mjs"
    assert entry_point.is_esm is True


def test_deeply_nested_exports_prefer_import_at_every_level() -> None:
    manifest = PackageManifest(
        exports={
            "require": "./top.cjs",
            "import": {
                "require": "./inner.cjs",
                "import": {"default": "./innermost.mjs", "node": "./innermost-node.js"},
            },
        },
    )
    assert resolve_entry_point(manifest).main == "./innermost-node.js"


def test_nested_exports_without_import_fall_back_in_order() -> None:
    manifest = PackageManifest(exports={".": {"default": "./d.js", "node": "./n.js"}})
    assert resolve_entry_point(manifest).main == "./n.js"


def test_unusable_exports_fall_back_to_main() -> None:
    manifest = PackageManifest(exports={"types": "./index.d.ts"}, main="./lib/main.js")
    assert resolve_entry_point(manifest).main == "./lib/main.js"


def test_main_and_default_entry_point() -> None:
    assert resolve_entry_point(PackageManifest(main="./lib/main.js")).main == "./lib/main.js"
    assert resolve_entry_point(PackageManifest()).main == "./index.js"


@pytest.mark.parametrize(
    ("main", "module_type", "is_esm"),
    [
        ("./index.mjs", None, True),
        ("./index.mjs", "commonjs", True),
        ("./index.js", "module", True),
        ("./index.js", "commonjs", False),
        ("./index.js", None, False),
        ("./index.cjs", "module", False),
        ("./plugin.py", "module", False),
    ],
)
def test_esm_classification(main: str, module_type: str | None, is_esm: bool) -> None:
    assert resolve_entry_point(PackageManifest(main=main, type=module_type)).is_esm is is_esm


def test_peer_dependency_supplies_missing_host_engine() -> None:
    manifest = PackageManifest(peer_dependencies={"homebridge": "^1.6.0"}, engines={"node": ">=18"})
    context = build_load_context(manifest)
    assert context.engines == {"node": ">=18", "homebridge": "^1.6.0"}


def test_declared_host_engine_is_not_replaced_by_peer_dependency() -> None:
    manifest = PackageManifest(
        engines={"homebridge": "^1.8.0"},
        peer_dependencies={"homebridge": "^1.0.0"},
    )
    assert build_load_context(manifest).engines["homebridge"] == "^1.8.0"


def test_version_defaults_when_absent() -> None:
    assert parse_manifest({"name": "homebridge-demo"}).version == "0.0.0"


def test_parse_manifest_maps_camel_case_fields() -> None:
    manifest = parse_manifest(
        {
            "name": "homebridge-demo",
            "version": "2.1.0",
            "type": "module",
            "engines": {"homebridge": "^1.8.0"},
            "dependencies": {"axios": "^1.0.0"},
            "peerDependencies": {"homebridge": "^1.8.0"},
        }
    )
    assert manifest.version == "2.1.0"
    assert manifest.type == "module"
    assert manifest.dependencies == {"axios": "^1.0.0"}
    assert manifest.peer_dependencies == {"homebridge": "^1.8.0"}


def test_schema_violation_rejected() -> None:
    with pytest.raises(ManifestValidationError, match="engines"):
        parse_manifest({"name": "bad", "engines": {"homebridge": 1}})


def test_non_mapping_manifest_rejected() -> None:
    with pytest.raises(ManifestValidationError):
        parse_manifest(["not", "a", "mapping"])


def test_read_json_manifest(tmp_path: Path) -> None:
    _write(
        tmp_path / "package.json",
        '{"name": "@acme/homebridge-lights", "version": "1.2.3", "main": "lights.py"}',
    )
    manifest = read_manifest(tmp_path)
    assert manifest.version == "1.2.3"
    assert manifest.main == "lights.py"
    assert read_package_name(tmp_path) == "@acme/homebridge-lights"


def test_read_yaml_manifest(tmp_path: Path) -> None:
    _write(
        tmp_path / "package.yaml",
        """
name: homebridge-yaml
version: "0.4.0"
exports:
  import: ./esm.mjs
engines:
  homebridge: "^1.8.0"
""",
    )
    manifest = read_manifest(tmp_path)
    assert manifest.version == "0.4.0"
    assert resolve_entry_point(manifest).main == "./esm.mjs"


def test_yaml_duplicate_keys_rejected(tmp_path: Path) -> None:
    _write(
        tmp_path / "package.yml",
        """
name: homebridge-dup
main: ./a.py
main: ./b.py
""",
    )
    with pytest.raises(ManifestValidationError, match="Duplicate key"):
        read_manifest(tmp_path)


def test_invalid_json_rejected(tmp_path: Path) -> None:
    _write(tmp_path / "package.json", "{not json")
    with pytest.raises(ManifestValidationError, match="Invalid JSON"):
        read_manifest(tmp_path)


def test_missing_manifest_rejected(tmp_path: Path) -> None:
    with pytest.raises(ManifestValidationError, match="No manifest found"):
        read_manifest(tmp_path)


def test_split_package_name() -> None:
    assert split_package_name("@acme/homebridge-lights") == ("homebridge-lights", "@acme")
    assert split_package_name("homebridge-lights") == ("homebridge-lights", None)
