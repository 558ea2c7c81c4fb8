"""Plugin, accessory, and platform identifier helpers."""

from __future__ import annotations


def plugin_identifier(name: str, scope: str | None = None) -> str:
    return f"{scope}/{name}" if scope else name


def _bare_name(identifier: str) -> str:
    if "." not in identifier:
        return identifier
    return identifier.split(".")[1]


def accessory_name(identifier: str) -> str:
    """Reduce ``plugin.Accessory`` to ``Accessory``; bare names pass through."""
    return _bare_name(identifier)


def platform_name(identifier: str) -> str:
    """Reduce ``plugin.Platform`` to ``Platform``; bare names pass through."""
    return _bare_name(identifier)
