from __future__ import annotations

from enum import Enum
from urllib.parse import urljoin

from pydantic import BaseModel, ConfigDict, Field


class PackageAction(str, Enum):
    INSTALL = "install"
    UNINSTALL = "uninstall"
    UPDATE = "update"


class PackageMetadata(BaseModel):
    """Where the package manifest lives: bucket repository URL and path inside it."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)
    repository: str = Field(alias="Repository")
    file_path: str = Field(alias="FilePath")


class Package(BaseModel):
    """A package document from the search index."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)
    name: str = Field(alias="Name")
    description: str | None = Field(None, alias="Description")
    version: str | None = Field(None, alias="Version")
    homepage: str | None = Field(None, alias="Homepage")
    metadata: PackageMetadata = Field(alias="Metadata")

    @property
    def favicon_url(self) -> str | None:
        if not self.homepage:
            return None
        return urljoin(self.homepage, "/favicon.ico")
