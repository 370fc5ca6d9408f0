"""
scoop-run: search, install, update and uninstall Scoop packages.

Usage:
    scoop-run search git
    scoop-run install git --yes
    scoop-run update git
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from collections.abc import Callable

import click
from pydantic import ValidationError

from . import __version__
from .config import ScoopSettings
from .errors import BucketNotFoundError, InitializationError, NotInstalledError, PackageNotFoundError
from .logging_config import setup_logging
from .manager import ActionResult, ScoopManager, make_scoop_manager
from .models.package import Package

ManagerFactory = Callable[[ScoopSettings], ScoopManager]


class ConsoleReporter:
    """Prints one ``[ pct%] line`` row per finished output line.

    The closing summary is printed by ``_report`` once the action returns.
    """

    def __init__(self) -> None:
        self._last = ""

    def status(self, line: str) -> None:
        self._last = line

    def progress(self, value: int) -> None:
        pct = f"{value:>3}%" if value >= 0 else "    "
        click.echo(f"[{pct}] {self._last}")
        self._last = ""

    def finish(self, result: ActionResult) -> None:
        self._last = ""


@click.group()
@click.version_option(version=__version__, prog_name="scoop-run")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """Search, install and manage Scoop packages."""
    ctx.ensure_object(dict)
    ctx.obj.setdefault("manager_factory", make_scoop_manager)

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("SCOOP_RUN_LOG_LEVEL", "WARNING")
    setup_logging(
        level=level,
        log_file=os.environ.get("SCOOP_RUN_LOG_FILE"),
        quiet_third_party=not debug,
    )


# ── Search ──────────────────────────────────────────────────────


@cli.command()
@click.argument("query")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def search(ctx: click.Context, query: str, as_json: bool) -> None:
    """Search the official buckets for QUERY."""
    manager = _initialized_manager(ctx)
    packages = asyncio.run(_search(manager, query))

    if as_json:
        click.echo(
            json.dumps(
                [
                    {**p.model_dump(mode="json"), "installed": manager.is_installed(p.name)}
                    for p in packages
                ],
                indent=2,
            )
        )
        return

    if not packages:
        click.secho(f"No package found for '{query}'", fg="yellow")
        return

    for p in packages:
        bucket = manager.bucket_for(p) or "?"
        marker = click.style(" (installed)", fg="green") if manager.is_installed(p.name) else ""
        click.echo(f"{p.name:<24} {p.version or '':<16} {bucket:<12}{marker}")
        if p.description:
            click.echo(f"    {p.description}")


# ── Actions ─────────────────────────────────────────────────────


@cli.command()
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Add the package's bucket without asking.")
@click.option("--open", "open_after", is_flag=True, help="Launch the app's shortcut afterwards.")
@click.pass_context
def install(ctx: click.Context, name: str, yes: bool, open_after: bool) -> None:
    """Install package NAME from its official bucket."""
    manager = _initialized_manager(ctx)
    package = _resolve(manager, name)

    def confirm(bucket: str) -> bool:
        return yes or click.confirm(f"Bucket '{bucket}' is not added yet. Add it?", default=True)

    try:
        result = manager.install(package, confirm, ConsoleReporter())
    except BucketNotFoundError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
    if result is None:
        click.secho("Cancelled", fg="yellow")
        return
    _report(result, open_after)


@cli.command()
@click.argument("name")
@click.pass_context
def uninstall(ctx: click.Context, name: str) -> None:
    """Uninstall package NAME."""
    manager = _initialized_manager(ctx)
    package = _resolve(manager, name)
    try:
        result = manager.uninstall(package, ConsoleReporter())
    except NotInstalledError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
    _report(result, open_after=False)


@cli.command()
@click.argument("name")
@click.option("--open", "open_after", is_flag=True, help="Launch the app's shortcut afterwards.")
@click.pass_context
def update(ctx: click.Context, name: str, open_after: bool) -> None:
    """Update package NAME."""
    manager = _initialized_manager(ctx)
    package = _resolve(manager, name)
    try:
        result = manager.update(package, ConsoleReporter())
    except NotInstalledError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
    _report(result, open_after)


@cli.command()
@click.argument("name")
@click.pass_context
def homepage(ctx: click.Context, name: str) -> None:
    """Open the homepage of package NAME."""
    manager = _initialized_manager(ctx)
    package = _resolve(manager, name)
    if not package.homepage:
        click.secho(f"⚠️  {package.name} has no homepage", fg="yellow")
        sys.exit(1)
    click.launch(package.homepage)


# ── Installed state ─────────────────────────────────────────────


@cli.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_installed(ctx: click.Context, as_json: bool) -> None:
    """List installed packages."""
    manager = _initialized_manager(ctx)
    names = sorted(manager.installed_packages)
    if as_json:
        click.echo(json.dumps(names, indent=2))
        return
    if not names:
        click.secho("No packages installed", fg="yellow")
        return
    for name in names:
        click.echo(name)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def buckets(ctx: click.Context, as_json: bool) -> None:
    """List official buckets and whether they are added."""
    manager = _initialized_manager(ctx)
    rows = [
        {"name": name, "url": url, "added": url in manager.installed_bucket_urls}
        for name, url in sorted(manager.official_buckets.items())
    ]
    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return
    for row in rows:
        mark = "✅" if row["added"] else "  "
        click.echo(f"{mark} {row['name']:<16} {row['url']}")


# ── Helpers ─────────────────────────────────────────────────────


def _initialized_manager(ctx: click.Context) -> ScoopManager:
    factory: ManagerFactory = ctx.obj["manager_factory"]
    try:
        settings = ScoopSettings.from_env()
    except ValidationError as e:
        click.secho(f"❌ Invalid SCOOP_RUN_* setting: {e}", fg="red")
        sys.exit(1)
    manager = factory(settings)
    try:
        manager.init()
    except InitializationError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
    if not manager.is_scoop_installed:
        click.secho("❌ Scoop is not installed. See https://scoop.sh/", fg="red")
        sys.exit(1)
    return manager


async def _search(manager: ScoopManager, query: str) -> list[Package]:
    try:
        return await manager.search(query)
    finally:
        await manager.aclose()


def _resolve(manager: ScoopManager, name: str) -> Package:
    try:
        return asyncio.run(_find_exact(manager, name))
    except PackageNotFoundError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


async def _find_exact(manager: ScoopManager, name: str) -> Package:
    for package in await _search(manager, name):
        if package.name.lower() == name.lower():
            return package
    raise PackageNotFoundError(name)


def _report(result: ActionResult, open_after: bool) -> None:
    verb = result.action.value
    if result.succeeded:
        click.secho(f"✅ {verb} {result.package.name}: done", fg="green")
    else:
        color = "red" if result.has_error else "yellow"
        click.secho(f"{verb} {result.package.name} did not complete:", fg=color, bold=True)
        click.echo(result.log.rstrip())

    if open_after and result.can_open and result.shortcut_path is not None:
        click.launch(str(result.shortcut_path))

    if result.has_error:
        sys.exit(1)


def main() -> None:
    cli(obj={})
