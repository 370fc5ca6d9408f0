"""In-memory adapters for testing (no processes, no network)."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from ..errors import FetchError
from ..models.manifest import Manifest
from ..models.package import Package
from ..process import CommandOutput
from ._manager import ActionResult


@dataclass
class ScriptedCommand:
    output: str = ""
    returncode: int = 0


class ScriptedCommandRunner:
    """Replays canned output per command line and records what was run."""

    def __init__(
        self,
        scoop_installed: bool = True,
        commands: dict[str, ScriptedCommand] | None = None,
    ) -> None:
        self._scoop_installed = scoop_installed
        self._commands = dict(commands or {})
        self.calls: list[str] = []

    def script(self, command: str, output: str = "", returncode: int = 0) -> None:
        self._commands[command] = ScriptedCommand(output, returncode)

    def is_scoop_installed(self) -> bool:
        return self._scoop_installed

    def run(self, command: str) -> CommandOutput:
        self.calls.append(command)
        scripted = self._commands.get(command, ScriptedCommand(returncode=1))
        return CommandOutput(
            ok=scripted.returncode == 0, output=scripted.output, returncode=scripted.returncode
        )

    def stream(self, command: str, on_char: Callable[[str], None]) -> int:
        self.calls.append(command)
        scripted = self._commands.get(command, ScriptedCommand(returncode=1))
        for ch in scripted.output:
            on_char(ch)
        return scripted.returncode


class InMemoryMetadataSource:
    def __init__(
        self,
        api_key: str = "test-key",
        official_buckets: dict[str, str] | None = None,
        manifests: dict[str, Manifest] | None = None,
    ) -> None:
        self._api_key = api_key
        self._buckets = dict(official_buckets or {})
        self._manifests = dict(manifests or {})

    def get_api_key(self) -> str:
        return self._api_key

    def get_official_buckets(self) -> dict[str, str]:
        return dict(self._buckets)

    def get_manifest(self, package: Package) -> Manifest:
        if package.name not in self._manifests:
            raise FetchError(f"No manifest for {package.name}", url=package.metadata.file_path)
        return self._manifests[package.name]


class InMemorySearchBackend:
    """Returns packages whose name contains the query."""

    def __init__(self, packages: list[Package] | None = None) -> None:
        self._packages = list(packages or [])
        self.queries: list[str] = []
        self.closed = False

    async def search(self, query: str) -> list[Package]:
        self.queries.append(query)
        q = query.lower()
        return [p for p in self._packages if q in p.name.lower()]

    async def aclose(self) -> None:
        self.closed = True


@dataclass
class RecordingReporter:
    statuses: list[str] = field(default_factory=list)
    progress_values: list[int] = field(default_factory=list)
    result: ActionResult | None = None

    def status(self, line: str) -> None:
        self.statuses.append(line)

    def progress(self, value: int) -> None:
        self.progress_values.append(value)

    def finish(self, result: ActionResult) -> None:
        self.result = result
