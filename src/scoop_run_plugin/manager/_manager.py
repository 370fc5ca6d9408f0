"""ScoopManager — installed state, search, and install/uninstall/update runs."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from ..config import ScoopSettings
from ..errors import (
    BucketNotFoundError,
    FetchError,
    InitializationError,
    NotInitializedError,
    NotInstalledError,
)
from ..fetchers._search import ScoopSearchClient
from ..models.package import Package, PackageAction
from ..progress import COMPLETE, NOT_STARTED, ProgressTracker
from ..scanner import parse_installed_buckets, parse_installed_packages
from ._protocols import CommandRunner, MetadataSource, ProgressReporter, SearchBackend

logger = logging.getLogger(__name__)

ConfirmBucket = Callable[[str], bool]


@dataclass
class ActionResult:
    package: Package
    action: PackageAction
    command: str
    progress: int
    log: str
    returncode: int
    shortcut_path: Path | None = None

    @property
    def succeeded(self) -> bool:
        return self.progress == COMPLETE

    @property
    def has_error(self) -> bool:
        return not self.succeeded and "ERROR" in self.log

    @property
    def progress_visible(self) -> bool:
        """False when the command exited before scoop started working."""
        return self.progress != NOT_STARTED

    @property
    def can_open(self) -> bool:
        return not self.has_error and self.shortcut_path is not None


class ScoopManager:
    def __init__(
        self,
        runner: CommandRunner,
        metadata: MetadataSource,
        search: SearchBackend | None = None,
        settings: ScoopSettings | None = None,
    ) -> None:
        self._runner = runner
        self._metadata = metadata
        self._search = search
        self._settings = settings or ScoopSettings()
        self.is_scoop_installed = False
        self.installation_checked = False
        self.is_initialized = False
        self.official_buckets: dict[str, str] = {}
        self.installed_bucket_urls: set[str] = set()
        self.installed_packages: set[str] = set()

    @property
    def settings(self) -> ScoopSettings:
        return self._settings

    def check_scoop_installed(self) -> bool:
        self.is_scoop_installed = self._runner.is_scoop_installed()
        self.installation_checked = True
        return self.is_scoop_installed

    def init(self) -> None:
        """Gather everything needed for searching and package actions.

        Returns quietly without initializing when scoop is not installed.

        Raises:
            InitializationError: When the API key, bucket list or installed
                state cannot be obtained.
        """
        if not self.check_scoop_installed():
            logger.warning("scoop is not installed or not on PATH")
            return
        try:
            api_key = self._metadata.get_api_key()
            self.official_buckets = self._metadata.get_official_buckets()
            self.refresh_installed()
        except Exception as e:
            logger.error("Initialization failed: %s", e)
            raise InitializationError(f"Initialization failed: {e}") from e
        if self._search is None:
            self._search = ScoopSearchClient(api_key, settings=self._settings)
        self.is_initialized = True
        logger.info(
            "Initialized: %d official buckets, %d installed buckets, %d installed packages",
            len(self.official_buckets),
            len(self.installed_bucket_urls),
            len(self.installed_packages),
        )

    def refresh_installed(self) -> None:
        buckets = self._runner.run("scoop bucket list")
        self.installed_bucket_urls = parse_installed_buckets(buckets.output) if buckets.ok else set()
        packages = self._runner.run("scoop list")
        self.installed_packages = parse_installed_packages(packages.output) if packages.ok else set()

    def is_installed(self, name: str) -> bool:
        return name in self.installed_packages

    async def search(self, query: str) -> list[Package]:
        if not self.is_initialized or self._search is None:
            return []
        return await self._search.search(query)

    async def aclose(self) -> None:
        if self._search is not None:
            await self._search.aclose()

    def bucket_for(self, package: Package) -> str | None:
        repository = package.metadata.repository
        return next(
            (name for name, url in self.official_buckets.items() if url == repository), None
        )

    def install(
        self,
        package: Package,
        confirm: ConfirmBucket,
        reporter: ProgressReporter | None = None,
    ) -> ActionResult | None:
        """Install ``package`` from its official bucket.

        When the bucket is not added yet, ``confirm(bucket_name)`` decides
        whether to add it first; returns None if declined.
        """
        self._require_initialized()
        repository = package.metadata.repository
        bucket = self.bucket_for(package)
        if bucket is None:
            raise BucketNotFoundError(repository)

        command = f"scoop install {bucket}/{package.name}"
        if repository not in self.installed_bucket_urls:
            if not confirm(bucket):
                logger.info("Adding bucket %s declined, not installing %s", bucket, package.name)
                return None
            command = f"scoop bucket add {bucket} && {command}"

        result = self._run_action(command, package, PackageAction.INSTALL, reporter)
        if result.succeeded:
            self.installed_packages.add(package.name)
            self.installed_bucket_urls.add(repository)
        return result

    def uninstall(
        self, package: Package, reporter: ProgressReporter | None = None
    ) -> ActionResult:
        self._require_installed(package)
        result = self._run_action(
            f"scoop uninstall {package.name}", package, PackageAction.UNINSTALL, reporter
        )
        if result.succeeded:
            self.installed_packages.discard(package.name)
        return result

    def update(self, package: Package, reporter: ProgressReporter | None = None) -> ActionResult:
        self._require_installed(package)
        return self._run_action(
            f"scoop update {package.name}", package, PackageAction.UPDATE, reporter
        )

    def shortcut_path(self, package: Package) -> Path | None:
        """Start Menu shortcut scoop creates for ``package``, from its manifest."""
        try:
            manifest = self._metadata.get_manifest(package)
        except (FetchError, ValidationError) as e:
            logger.debug("No manifest for %s: %s", package.name, e)
            return None
        name = manifest.first_shortcut_name()
        if name is None:
            return None
        return self._settings.scoop_apps_shortcut_dir / f"{name}.lnk"

    def _run_action(
        self,
        command: str,
        package: Package,
        action: PackageAction,
        reporter: ProgressReporter | None,
    ) -> ActionResult:
        shortcut = None
        if action in (PackageAction.INSTALL, PackageAction.UPDATE):
            shortcut = self.shortcut_path(package)

        tracker = ProgressTracker(
            on_status=reporter.status if reporter else None,
            on_progress=reporter.progress if reporter else None,
        )
        logger.info("%s %s: %s", action.value, package.name, command)
        returncode = self._runner.stream(command, tracker.feed)
        tracker.finish()

        result = ActionResult(
            package=package,
            action=action,
            command=command,
            progress=tracker.progress,
            log=tracker.log,
            returncode=returncode,
            shortcut_path=shortcut,
        )
        if result.has_error:
            logger.error("%s %s failed:\n%s", action.value, package.name, result.log.rstrip())
        elif not result.succeeded:
            logger.warning("%s %s finished without confirmation", action.value, package.name)
        if reporter is not None:
            reporter.finish(result)
        return result

    def _require_initialized(self) -> None:
        if not self.is_initialized:
            raise NotInitializedError()

    def _require_installed(self, package: Package) -> None:
        self._require_initialized()
        if not self.is_installed(package.name):
            raise NotInstalledError(package.name)
