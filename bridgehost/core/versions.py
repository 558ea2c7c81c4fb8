"""npm-style version range checks."""

from __future__ import annotations

from nodesemver import satisfies


def satisfies_range(version: str, requirement: str, *, include_prerelease: bool = False) -> bool:
    """Return whether ``version`` falls in ``requirement``.

    Unparseable versions or ranges never satisfy.
    """
    try:
        return bool(satisfies(version, requirement, include_prerelease=include_prerelease))
    except (TypeError, ValueError):
        return False
