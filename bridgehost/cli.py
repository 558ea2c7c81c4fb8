"""Typer CLI entrypoint."""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from pathlib import Path

import typer

from bridgehost.api import HostAPI
from bridgehost.core.environment import HostEnvironment
from bridgehost.core.errors import BridgeHostError
from bridgehost.core.manifest import read_manifest, read_package_name, resolve_entry_point, split_package_name
from bridgehost.core.platform_accessory import PlatformAccessory
from bridgehost.core.plugin import Plugin

app = typer.Typer(help="Inspect and load bridge plugins and cached platform accessories")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show plugin host logs")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
    )


def _plugin_name(path: Path, name: str | None, scope: str | None) -> tuple[str, str | None]:
    if name:
        return name, scope
    package_name = read_package_name(path) or path.name
    bare, package_scope = split_package_name(package_name)
    return bare, scope or package_scope


async def _load_and_initialize(plugin: Plugin, api: HostAPI) -> None:
    await plugin.load()
    result = plugin.initialize(api)
    if inspect.isawaitable(result):
        await result


@app.command("inspect")
def inspect_plugin(
    path: Path = typer.Argument(..., help="Plugin package directory"),
    name: str | None = typer.Option(None, "--name", help="Override the package name"),
    scope: str | None = typer.Option(None, "--scope", help="Override the package scope"),
) -> None:
    """Show how a plugin's manifest resolves without importing it."""
    try:
        manifest = read_manifest(path)
        plugin_name, plugin_scope = _plugin_name(path, name, scope)
        entry_point = resolve_entry_point(manifest)
        plugin = Plugin(plugin_name, path, manifest, plugin_scope)
        typer.echo(f"{plugin.identifier} {plugin.version}")
        typer.echo(f"  main: {entry_point.main}")
        typer.echo(f"  format: {'esm' if entry_point.is_esm else 'commonjs'}")
        for engine, requirement in sorted(manifest.engines.items()):
            typer.echo(f"  engines.{engine}: {requirement}")
    except BridgeHostError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("load")
def load_plugin(
    path: Path = typer.Argument(..., help="Plugin package directory"),
    name: str | None = typer.Option(None, "--name", help="Override the package name"),
    scope: str | None = typer.Option(None, "--scope", help="Override the package scope"),
) -> None:
    """Load and initialize a plugin, then list what it registered."""
    try:
        environment = HostEnvironment.from_env()
        plugin_name, plugin_scope = _plugin_name(path, name, scope)
        plugin = Plugin.from_directory(path, plugin_name, plugin_scope, environment=environment)
        api = HostAPI(plugin, environment)
        asyncio.run(_load_and_initialize(plugin, api))

        typer.echo(f"Loaded {plugin.identifier} {plugin.version}")
        for accessory in plugin.accessory_names():
            typer.echo(f"  accessory: {plugin.identifier}.{accessory}")
        for platform in plugin.platform_names():
            typer.echo(f"  platform: {plugin.identifier}.{platform}")
    except BridgeHostError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("accessories")
def list_accessories(
    cache: Path = typer.Argument(..., help="JSON file holding serialized platform accessories"),
) -> None:
    """List the platform accessories stored in a cache file."""
    try:
        records = json.loads(cache.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        typer.echo(f"Error: Could not read accessory cache {cache}: {exc}", err=True)
        raise typer.Exit(code=1) from None

    if not isinstance(records, list):
        typer.echo(
            f"Error: Invalid accessory record in {cache}: expected a list of records, "
            f"got {type(records).__name__}",
            err=True,
        )
        raise typer.Exit(code=1)

    if not records:
        typer.echo("No cached accessories")
        return

    try:
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                raise ValueError(f"record {index} is a {type(record).__name__}, not a mapping")
            accessory = PlatformAccessory.deserialize(record)
            typer.echo(
                f"{accessory.UUID} {accessory.display_name} "
                f"[{accessory.category.name}] -> {accessory.associated_plugin}.{accessory.associated_platform}"
            )
    except (BridgeHostError, KeyError, ValueError) as exc:
        typer.echo(f"Error: Invalid accessory record in {cache}: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
