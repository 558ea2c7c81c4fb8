"""Module resolver interfaces."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol


class ModuleResolver(Protocol):
    async def load(self, path: Path, *, esm: bool) -> Any:
        """Import the module at ``path`` and return the imported object."""
