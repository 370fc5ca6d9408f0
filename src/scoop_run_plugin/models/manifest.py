from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class Manifest(BaseModel):
    """Contents of a bucket's ``<package>.json`` manifest (only the fields used here)."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)
    version: str | None = None
    description: str | None = None
    homepage: str | None = None
    url: str | list[str] | None = None
    # [[target, name], [target, name, args], [target, name, args, icon], ...]
    shortcuts: list[list[Any]] = []

    def first_shortcut_name(self) -> str | None:
        """Return the name of the first plain ``[target, name]`` shortcut."""
        for entry in self.shortcuts:
            if len(entry) == 2 and isinstance(entry[1], str):
                return entry[1]
        return None
