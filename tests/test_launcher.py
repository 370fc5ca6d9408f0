"""Tests for ScoopPlugin query results and context menus."""

import asyncio
from pathlib import Path
from urllib.parse import parse_qs, urlparse

from scoop_run_plugin import (
    FetchError,
    Package,
    PackageAction,
    QueryResult,
    ScoopManager,
    ScoopPlugin,
    ScoopSettings,
)
from scoop_run_plugin.manager._in_memory import (
    InMemoryMetadataSource,
    InMemorySearchBackend,
    RecordingReporter,
    ScriptedCommandRunner,
)

FIXTURES = Path(__file__).resolve().parent / "fixtures"

MAIN = "https://github.com/ScoopInstaller/Main"
EXTRAS = "https://github.com/ScoopInstaller/Extras"


def _package(name: str, repository: str = MAIN, homepage: str | None = None) -> Package:
    return Package(
        name=name,
        description=f"{name} description",
        version="1.0",
        homepage=homepage or f"https://{name}.example.com/docs",
        metadata={"repository": repository, "file_path": f"bucket/{name}.json"},
    )


PACKAGES = [_package("git"), _package("gitkraken", EXTRAS)]


def _runner(scoop_installed: bool = True) -> ScriptedCommandRunner:
    runner = ScriptedCommandRunner(scoop_installed=scoop_installed)
    runner.script("scoop bucket list", (FIXTURES / "bucket_list.txt").read_text())
    runner.script("scoop list", (FIXTURES / "scoop_list.txt").read_text())
    return runner


class FlakyMetadataSource(InMemoryMetadataSource):
    def __init__(self, failures: int) -> None:
        super().__init__(official_buckets={"main": MAIN, "extras": EXTRAS})
        self.failures = failures

    def get_api_key(self) -> str:
        if self.failures > 0:
            self.failures -= 1
            raise FetchError("temporarily offline")
        return "key"


def _plugin(runner=None, metadata=None, init=True, opened=None, errors=None, reporters=None):
    settings = ScoopSettings(init_attempts=3, init_retry_delay=0)
    manager = ScoopManager(
        runner=runner or _runner(),
        metadata=metadata or InMemoryMetadataSource(official_buckets={"main": MAIN, "extras": EXTRAS}),
        search=InMemorySearchBackend(PACKAGES),
        settings=settings,
    )

    def open_url(url):
        if opened is None:
            return False
        opened.append(url)
        return True

    def reporter_factory(package, action):
        reporter = RecordingReporter()
        if reporters is not None:
            reporters.append((package.name, action, reporter))
        return reporter

    plugin = ScoopPlugin(
        manager,
        confirm=lambda bucket: True,
        reporter_factory=reporter_factory,
        open_url=open_url,
        on_error=errors.append if errors is not None else None,
        sleep=lambda seconds: None,
    )
    if init:
        plugin.init_with_retry()
    return plugin, manager


def _query(plugin, search, delayed=True):
    return asyncio.run(plugin.query(search, delayed))


# --- initialization ---


def test_init_retries_until_success():
    metadata = FlakyMetadataSource(failures=2)
    plugin, manager = _plugin(metadata=metadata)
    assert manager.is_initialized is True
    assert metadata.failures == 0


def test_init_gives_up_and_keeps_exception():
    plugin, manager = _plugin(metadata=FlakyMetadataSource(failures=10))
    assert manager.is_initialized is False
    assert "temporarily offline" in str(plugin.init_exception)


def test_start_runs_in_background():
    plugin, manager = _plugin(init=False)
    plugin.start().join(timeout=5)
    assert manager.is_initialized is True


# --- query states ---


def test_scoop_not_installed_result_opens_scoop_sh():
    opened = []
    plugin, _ = _plugin(runner=_runner(scoop_installed=False), opened=opened)
    [result] = _query(plugin, "git")
    assert result.title == "Scoop is not installed"
    assert result.action() is True
    assert opened == ["https://scoop.sh/"]


def test_initializing_result_before_init():
    plugin, _ = _plugin(init=False)
    [result] = _query(plugin, "git")
    assert result.title == "Scoop plugin is initializing"
    assert result.action is None


def test_init_error_result_opens_issue():
    opened = []
    plugin, _ = _plugin(metadata=FlakyMetadataSource(failures=10), opened=opened)
    [result] = _query(plugin, "git")
    assert result.title == "Scoop plugin failed to initialize"
    result.action()
    query = parse_qs(urlparse(opened[0]).query)
    assert query["title"] == ["Bug: Initialization Failed"]
    assert "temporarily offline" in query["body"][0]
    assert query["labels"] == ["bug"]


def test_default_result_for_blank_or_immediate_query():
    plugin, _ = _plugin()
    assert _query(plugin, "   ")[0].title.startswith("Search, install")
    assert _query(plugin, None)[0].title.startswith("Search, install")
    assert _query(plugin, "git", delayed=False)[0].title.startswith("Search, install")


def test_single_character_query_does_not_search():
    plugin, manager = _plugin()
    [result] = _query(plugin, " g ")
    assert result.title.startswith("Search, install")
    assert manager._search.queries == []


def test_not_found_result():
    plugin, _ = _plugin()
    [result] = _query(plugin, "zzz")
    assert result.title == "No package found for 'zzz'"
    assert result.query_text_display == "zzz"


def test_package_results():
    plugin, _ = _plugin()
    results = _query(plugin, "  git ")
    assert [r.title for r in results] == ["git (installed)", "gitkraken"]
    assert results[1].subtitle == "gitkraken description"
    assert results[1].icon == "https://gitkraken.example.com/favicon.ico"
    assert results[1].context_data.name == "gitkraken"


def test_package_result_action_installs():
    runner = _runner()
    runner.script("scoop install extras/gitkraken", "'gitkraken' (1.0) was installed successfully!\n")
    reporters = []
    plugin, manager = _plugin(runner=runner, reporters=reporters)

    result = _query(plugin, "gitkraken")[0]
    assert result.action() is True

    assert manager.is_installed("gitkraken")
    [(name, action, reporter)] = reporters
    assert (name, action) == ("gitkraken", PackageAction.INSTALL)
    assert reporter.result.succeeded is True


# --- context menu ---


def test_context_menu_for_not_installed_package():
    plugin, _ = _plugin()
    result = _query(plugin, "gitkraken")[0]
    entries = plugin.context_menu(result)
    assert [(e.title, e.accelerator) for e in entries] == [("Open homepage", "Ctrl+H")]


def test_context_menu_for_installed_package():
    plugin, _ = _plugin()
    result = _query(plugin, "git")[0]
    entries = plugin.context_menu(result)
    assert [e.accelerator for e in entries] == ["Ctrl+H", "Ctrl+U", "Ctrl+D"]


def test_context_menu_homepage_opens_browser():
    opened = []
    plugin, _ = _plugin(opened=opened)
    result = _query(plugin, "git")[0]
    assert plugin.context_menu(result)[0].action() is True
    assert opened == ["https://git.example.com/docs"]


def test_context_menu_uninstall():
    runner = _runner()
    runner.script("scoop uninstall git", "'git' was uninstalled.\n")
    plugin, manager = _plugin(runner=runner)
    result = _query(plugin, "git")[0]

    uninstall = plugin.context_menu(result)[2]
    assert uninstall.title == "Uninstall"
    uninstall.action()

    assert not manager.is_installed("git")


def test_context_menu_update():
    runner = _runner()
    runner.script("scoop update git", "Updating one outdated app:\n")
    reporters = []
    plugin, _ = _plugin(runner=runner, reporters=reporters)
    result = _query(plugin, "git")[0]

    plugin.context_menu(result)[1].action()

    assert runner.calls[-1] == "scoop update git"
    assert reporters[0][1] is PackageAction.UPDATE


def test_context_menu_without_package():
    plugin, _ = _plugin()
    assert plugin.context_menu(QueryResult(title="nothing")) == []


def test_browser_failure_reports_error():
    errors = []
    plugin, _ = _plugin(errors=errors)
    assert plugin.open_url("https://example.com") is False
    assert errors == ["Failed to open https://example.com in the default browser"]


class BrokenMetadataSource(InMemoryMetadataSource):
    def get_api_key(self) -> str:
        raise RuntimeError("unexpected")


def test_unexpected_init_error_is_retried_and_reported():
    opened = []
    plugin, manager = _plugin(metadata=BrokenMetadataSource(), init=False, opened=opened)
    plugin.start().join(timeout=5)

    assert manager.is_initialized is False
    assert isinstance(plugin.init_exception.__cause__, RuntimeError)
    [result] = _query(plugin, "git")
    assert result.title == "Scoop plugin failed to initialize"
    result.action()
    assert "unexpected" in parse_qs(urlparse(opened[0]).query)["body"][0]


def test_install_from_unknown_bucket_reports_error():
    errors = []
    metadata = InMemoryMetadataSource(official_buckets={"main": MAIN + "/"})
    plugin, manager = _plugin(metadata=metadata, errors=errors)

    result = _query(plugin, "gitkraken")[0]

    assert result.action() is False
    assert errors == [f"Cannot install gitkraken: No official bucket for repository: {EXTRAS}"]
    assert not manager.is_installed("gitkraken")
