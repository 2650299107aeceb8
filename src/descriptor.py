"""Tool descriptor: name, version, author and description of TS-Nodify.

Read once from the installed distribution metadata and cached as an immutable
value for the rest of the process.
"""

from __future__ import annotations

from functools import lru_cache
from importlib import metadata

from pydantic import BaseModel, ConfigDict

DISTRIBUTION = "ts-nodify"
DISPLAY_NAME = "TS-Nodify"


class ToolDescriptor(BaseModel):
    """Immutable version/author/description record."""

    model_config = ConfigDict(frozen=True)

    name: str = DISPLAY_NAME
    version: str = "0.0.0"
    author: str = ""
    description: str = ""


@lru_cache(maxsize=1)
def get_descriptor() -> ToolDescriptor:
    """Return the descriptor of the installed ``ts-nodify`` distribution.

    When the package is imported from a source checkout without being
    installed, a descriptor with version ``0.0.0`` is returned.
    """
    try:
        meta = metadata.metadata(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return ToolDescriptor()

    author = meta.get("Author") or meta.get("Author-email") or ""
    return ToolDescriptor(
        version=meta.get("Version") or "0.0.0",
        author=author,
        description=meta.get("Summary") or "",
    )
