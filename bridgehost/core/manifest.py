"""Manifest reading, validation, and entry-point resolution for plugin packages."""

from __future__ import annotations

import json
from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from bridgehost.core.errors import ManifestValidationError
from bridgehost.core.model import EntryPoint, LoadContext, PackageManifest

DEFAULT_MAIN = "./index.js"
ESM_ONLY_SUFFIXES = (".mjs",)
AMBIGUOUS_SUFFIX = ".js"
MODULE_TYPE = "module"
HOST_ENGINE = "homebridge"

_MANIFEST_FILENAMES = ("package.json", "package.yaml", "package.yml")
_TOP_LEVEL_CONDITIONS = ("import", "require", "node", "default", ".")
_NESTED_CONDITIONS = ("import", "require", "node", "default")


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ManifestValidationError(f"Duplicate key '{key}' in YAML manifest")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def _load_schema_validator() -> Any:
    schema_text = resources.files("bridgehost.schemas").joinpath("manifest.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_document(path: Path) -> Any:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestValidationError(f"Could not read manifest {path}: {exc}") from exc

    if path.suffix == ".json":
        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            raise ManifestValidationError(f"Invalid JSON in {path}: {exc}") from exc

    try:
        return yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ManifestValidationError(f"Invalid YAML in {path}: {exc}") from exc


def parse_manifest(doc: Any, source: str = "<manifest>") -> PackageManifest:
    if not isinstance(doc, dict):
        raise ManifestValidationError(f"Manifest {source} must contain a mapping at root")

    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ManifestValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    return PackageManifest.from_mapping(doc)


def find_manifest(plugin_path: Path) -> Path:
    for filename in _MANIFEST_FILENAMES:
        candidate = plugin_path / filename
        if candidate.is_file():
            return candidate
    expected = ", ".join(_MANIFEST_FILENAMES)
    raise ManifestValidationError(f"No manifest found in {plugin_path} (looked for {expected})")


def read_manifest(plugin_path: Path) -> PackageManifest:
    manifest_path = find_manifest(plugin_path)
    return parse_manifest(_read_document(manifest_path), str(manifest_path))


def read_package_name(plugin_path: Path) -> str | None:
    doc = _read_document(find_manifest(plugin_path))
    if isinstance(doc, dict) and isinstance(doc.get("name"), str):
        return doc["name"]
    return None


def split_package_name(package_name: str) -> tuple[str, str | None]:
    """Split ``@scope/name`` into ``(name, "@scope")``; unscoped names get no scope."""
    if package_name.startswith("@") and "/" in package_name:
        scope, name = package_name.split("/", 1)
        return name, scope
    return package_name, None


def _first_condition(table: Mapping[str, Any], conditions: tuple[str, ...]) -> Any:
    for condition in conditions:
        value = table.get(condition)
        if value:
            return value
    return None


def _resolve_conditional(target: Any) -> str | None:
    # nested condition tables prefer "import" at every level
    if isinstance(target, str):
        return target or None
    if isinstance(target, Mapping):
        return _resolve_conditional(_first_condition(target, _NESTED_CONDITIONS))
    return None


def _main_from_exports(exports: str | Mapping[str, Any] | None) -> str | None:
    if isinstance(exports, str):
        return exports or None
    if isinstance(exports, Mapping):
        return _resolve_conditional(_first_condition(exports, _TOP_LEVEL_CONDITIONS))
    return None


def resolve_entry_point(manifest: PackageManifest) -> EntryPoint:
    main = _main_from_exports(manifest.exports) or manifest.main or DEFAULT_MAIN
    is_esm = main.endswith(ESM_ONLY_SUFFIXES) or (
        main.endswith(AMBIGUOUS_SUFFIX) and manifest.type == MODULE_TYPE
    )
    return EntryPoint(main=main, is_esm=is_esm)


def build_load_context(manifest: PackageManifest) -> LoadContext:
    engines = dict(manifest.engines)
    # early plugins only declared the host through peerDependencies
    if manifest.peer_dependencies is not None and not engines.get(HOST_ENGINE):
        peer_requirement = manifest.peer_dependencies.get(HOST_ENGINE)
        if peer_requirement:
            engines[HOST_ENGINE] = peer_requirement
    return LoadContext(engines=engines, dependencies=dict(manifest.dependencies))
