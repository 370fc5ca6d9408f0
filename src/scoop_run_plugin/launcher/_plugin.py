"""ScoopPlugin — turns launcher queries into results and context-menu entries."""

from __future__ import annotations

import logging
import threading
import time
import webbrowser
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from urllib.parse import quote_plus

from ..errors import BucketNotFoundError, NotInitializedError, NotInstalledError
from ..models.package import Package, PackageAction

if TYPE_CHECKING:
    from ..manager._manager import ConfirmBucket, ScoopManager
    from ..manager._protocols import ProgressReporter

logger = logging.getLogger(__name__)

ICON_PATH = "Images/scoop.png"

ReporterFactory = Callable[[Package, PackageAction], "ProgressReporter | None"]


@dataclass
class QueryResult:
    """One row in the launcher's result list.

    ``action`` runs when the row is chosen and reports whether the launcher
    should hide; ``context_data`` is the package for package rows.
    """

    title: str
    subtitle: str = ""
    query_text_display: str = " "
    icon: str | None = ICON_PATH
    action: Callable[[], bool] | None = None
    context_data: Package | None = None


@dataclass(frozen=True)
class ContextMenuEntry:
    title: str
    accelerator: str  # e.g. "Ctrl+H"
    action: Callable[[], bool] = field(compare=False)


class ScoopPlugin:
    """Host-neutral launcher plugin over a ScoopManager.

        plugin = ScoopPlugin(manager, confirm=ask_user, reporter_factory=make_window)
        plugin.start()
        results = await plugin.query("git")
        plugin.context_menu(results[0])
    """

    def __init__(
        self,
        manager: ScoopManager,
        confirm: ConfirmBucket,
        reporter_factory: ReporterFactory | None = None,
        open_url: Callable[[str], bool] = webbrowser.open,
        on_error: Callable[[str], None] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._manager = manager
        self._confirm = confirm
        self._reporter_factory = reporter_factory
        self._open_url = open_url
        self._on_error = on_error
        self._sleep = sleep
        self.init_exception: BaseException | None = None
        self._init_thread: threading.Thread | None = None

    # --- initialization ---

    def start(self) -> threading.Thread:
        """Initialize the manager in the background, retrying on failure."""
        thread = threading.Thread(target=self.init_with_retry, name="scoop-init", daemon=True)
        self._init_thread = thread
        thread.start()
        return thread

    def init_with_retry(self) -> bool:
        settings = self._manager.settings
        for attempt in range(1, settings.init_attempts + 1):
            try:
                self._manager.init()
                return self._manager.is_initialized
            except Exception as e:
                self.init_exception = e
                logger.warning(
                    "Init attempt %d/%d failed: %s", attempt, settings.init_attempts, e
                )
            if attempt < settings.init_attempts:
                self._sleep(settings.init_retry_delay)
        return False

    # --- queries ---

    async def query(self, search: str | None, delayed: bool = True) -> list[QueryResult]:
        manager = self._manager
        if manager.installation_checked and not manager.is_scoop_installed:
            return [self._scoop_not_installed_result()]
        if not manager.is_initialized:
            return [self._init_pending_result()]
        if not delayed or search is None or not search.strip():
            return [self._default_result()]

        term = search.strip()
        if len(term) < manager.settings.min_query_length:
            return [self._default_result()]

        packages = await manager.search(term)
        if not packages:
            return [self._not_found_result(term)]
        return [self._package_result(p) for p in packages]

    def context_menu(self, result: QueryResult) -> list[ContextMenuEntry]:
        package = result.context_data
        if not isinstance(package, Package):
            return []

        entries = [
            ContextMenuEntry(
                title="Open homepage",
                accelerator="Ctrl+H",
                action=lambda: self.open_url(package.homepage or ""),
            )
        ]
        if self._manager.is_installed(package.name):
            entries.append(
                ContextMenuEntry(
                    title="Update",
                    accelerator="Ctrl+U",
                    action=lambda: self._run(PackageAction.UPDATE, package),
                )
            )
            entries.append(
                ContextMenuEntry(
                    title="Uninstall",
                    accelerator="Ctrl+D",
                    action=lambda: self._run(PackageAction.UNINSTALL, package),
                )
            )
        return entries

    def open_url(self, url: str) -> bool:
        if url and self._open_url(url):
            return True
        self._report_error(f"Failed to open {url or 'an empty URL'} in the default browser")
        return False

    def issue_url(self) -> str:
        body = str(self.init_exception) if self.init_exception is not None else ""
        if self.init_exception is not None and self.init_exception.__cause__ is not None:
            body += f"\n\nCaused by: {self.init_exception.__cause__!r}"
        return self._manager.settings.new_issue_url.format(
            title=quote_plus("Bug: Initialization Failed"), body=quote_plus(body)
        )

    # --- result builders ---

    def _scoop_not_installed_result(self) -> QueryResult:
        return QueryResult(
            title="Scoop is not installed",
            subtitle="Press Enter to open scoop.sh and follow the installation guide",
            action=lambda: self.open_url(self._manager.settings.scoop_homepage_url),
        )

    def _init_pending_result(self) -> QueryResult:
        if self.init_exception is None:
            return QueryResult(
                title="Scoop plugin is initializing",
                subtitle="Package search will be available shortly",
            )
        return QueryResult(
            title="Scoop plugin failed to initialize",
            subtitle="Press Enter to report the problem",
            action=lambda: self.open_url(self.issue_url()),
        )

    def _default_result(self) -> QueryResult:
        return QueryResult(
            title="Search, install and manage Scoop packages",
            subtitle="Type a package name to search the official buckets",
        )

    def _not_found_result(self, term: str) -> QueryResult:
        return QueryResult(
            title=f"No package found for '{term}'",
            subtitle="Try a different search term",
            query_text_display=term,
        )

    def _package_result(self, package: Package) -> QueryResult:
        installed = self._manager.is_installed(package.name)
        return QueryResult(
            title=f"{package.name} (installed)" if installed else package.name,
            subtitle=package.description or "",
            query_text_display=package.name,
            icon=package.favicon_url,
            action=lambda: self._run(PackageAction.INSTALL, package),
            context_data=package,
        )

    # --- actions ---

    def _run(self, action: PackageAction, package: Package) -> bool:
        reporter = self._reporter_factory(package, action) if self._reporter_factory else None
        try:
            if action is PackageAction.INSTALL:
                self._manager.install(package, self._confirm, reporter)
            elif action is PackageAction.UNINSTALL:
                self._manager.uninstall(package, reporter)
            else:
                self._manager.update(package, reporter)
        except (BucketNotFoundError, NotInitializedError, NotInstalledError) as e:
            self._report_error(f"Cannot {action.value} {package.name}: {e}")
            return False
        return True

    def _report_error(self, message: str) -> None:
        logger.error(message)
        if self._on_error is not None:
            self._on_error(message)
