"""Parse the tabular text printed by ``scoop list`` and ``scoop bucket list``."""

from __future__ import annotations

import re

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")

# Package name, only when followed by more columns and not a failed install
_INSTALLED_PACKAGE = re.compile(r"^\s*(\S+)(?=\s+\S+)(?!.*Install failed)")
_BUCKET_SOURCE_URL = re.compile(r"https://\S+")

# "Installed apps:", header, separator
_PACKAGE_LIST_PREAMBLE = 3
# header, separator
_BUCKET_LIST_PREAMBLE = 2


def strip_ansi(text: str | None) -> str:
    if text is None:
        return ""
    return _ANSI_ESCAPE.sub("", text)


def parse_installed_packages(output: str) -> set[str]:
    """Return the names of successfully installed packages."""
    packages: set[str] = set()
    for line in _table_rows(output, _PACKAGE_LIST_PREAMBLE):
        match = _INSTALLED_PACKAGE.match(line)
        if match:
            packages.add(match.group(1))
    return packages


def parse_installed_buckets(output: str) -> set[str]:
    """Return the source URLs of installed buckets."""
    urls: set[str] = set()
    for line in _table_rows(output, _BUCKET_LIST_PREAMBLE):
        match = _BUCKET_SOURCE_URL.search(line)
        if match:
            urls.add(match.group(0))
    return urls


def _table_rows(output: str, preamble: int) -> list[str]:
    lines = [line for line in strip_ansi(output).splitlines() if line]
    return lines[preamble:]
