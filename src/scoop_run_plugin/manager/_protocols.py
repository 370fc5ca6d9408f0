"""Protocols (ports) for the scoop manager."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..models.manifest import Manifest
    from ..models.package import Package
    from ..process import CommandOutput
    from ._manager import ActionResult


class CommandRunner(Protocol):
    """Runs scoop command lines (possibly chained with ``&&``) through a shell."""

    def is_scoop_installed(self) -> bool: ...
    def run(self, command: str) -> CommandOutput: ...
    def stream(self, command: str, on_char: Callable[[str], None]) -> int: ...


class MetadataSource(Protocol):
    """Remote metadata: search API key, official buckets, package manifests."""

    def get_api_key(self) -> str: ...
    def get_official_buckets(self) -> dict[str, str]: ...
    def get_manifest(self, package: Package) -> Manifest: ...


class SearchBackend(Protocol):
    async def search(self, query: str) -> list[Package]: ...
    async def aclose(self) -> None: ...


class ProgressReporter(Protocol):
    """Receives live status for one install/uninstall/update run."""

    def status(self, line: str) -> None: ...
    def progress(self, value: int) -> None: ...
    def finish(self, result: ActionResult) -> None: ...
