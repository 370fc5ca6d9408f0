"""Scoop management API — installed state, search, install, uninstall, update."""

from __future__ import annotations

from ..config import ScoopSettings
from ._adapters import HttpMetadataSource, ShellCommandRunner
from ._manager import ActionResult, ConfirmBucket, ScoopManager
from ._protocols import CommandRunner, MetadataSource, ProgressReporter, SearchBackend


def make_scoop_manager(settings: ScoopSettings | None = None) -> ScoopManager:
    """Build a ScoopManager that talks to the real shell and remote metadata.

    settings: defaults to ScoopSettings.from_env()
    """
    settings = settings or ScoopSettings.from_env()
    return ScoopManager(
        runner=ShellCommandRunner(),
        metadata=HttpMetadataSource(settings),
        settings=settings,
    )


__all__ = [
    "ActionResult",
    "CommandRunner",
    "ConfirmBucket",
    "HttpMetadataSource",
    "MetadataSource",
    "ProgressReporter",
    "ScoopManager",
    "SearchBackend",
    "ShellCommandRunner",
    "make_scoop_manager",
]
