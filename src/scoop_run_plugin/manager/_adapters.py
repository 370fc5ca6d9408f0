"""Concrete adapters: the real shell and the real remote metadata."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from .. import process
from ..config import ScoopSettings
from ..fetchers._http import fetch_api_key, fetch_manifest, fetch_official_buckets

if TYPE_CHECKING:
    from ..models.manifest import Manifest
    from ..models.package import Package
    from ..process import CommandOutput


class ShellCommandRunner:
    """Runs commands through ``cmd /c`` (Windows) or ``/bin/sh -c``."""

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    def is_scoop_installed(self) -> bool:
        return process.is_scoop_installed()

    def run(self, command: str) -> CommandOutput:
        return process.run_with_output(command, timeout=self._timeout)

    def stream(self, command: str, on_char: Callable[[str], None]) -> int:
        return process.stream_output(command, on_char)


class HttpMetadataSource:
    """Fetches metadata from GitHub-hosted files listed in the settings."""

    def __init__(self, settings: ScoopSettings | None = None) -> None:
        self._settings = settings or ScoopSettings()

    def get_api_key(self) -> str:
        return fetch_api_key(self._settings.website_env_url, timeout=self._settings.http_timeout)

    def get_official_buckets(self) -> dict[str, str]:
        return fetch_official_buckets(
            self._settings.official_buckets_url, timeout=self._settings.http_timeout
        )

    def get_manifest(self, package: Package) -> Manifest:
        return fetch_manifest(
            package.metadata.repository,
            package.metadata.file_path,
            timeout=self._settings.http_timeout,
        )
