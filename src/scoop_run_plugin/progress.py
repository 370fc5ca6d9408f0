"""Estimate the progress of a running scoop command from its output lines."""

from __future__ import annotations

from collections.abc import Callable

from .scanner import strip_ansi

NOT_STARTED = -1
COMPLETE = 100

# Checked in order; first hit wins
_PROGRESS_RULES: tuple[tuple[str, str, int], ...] = (
    ("prefix", "Installing", 10),
    ("prefix", "Uninstalling", 10),
    ("prefix", "Updating one", 10),
    ("prefix", "Downloading", 20),
    ("prefix", "Loading", 20),
    ("prefix", "Checking hash", 40),
    ("prefix", "Extracting", 50),
    ("prefix", "Linking", 90),
    ("suffix", "installed successfully!", COMPLETE),
    ("suffix", "was uninstalled.", COMPLETE),
    ("prefix", "Latest versions for all apps are installed!", COMPLETE),
)

# Lines like " * a1b2c3 git: Update to version 2.45 | 2 hours ago"
_BUCKET_UPDATE_PREFIX = " *"


def classify_line(line: str) -> int | None:
    """Map a finished output line to an approximate percentage, or None."""
    for kind, text, value in _PROGRESS_RULES:
        if kind == "prefix" and line.startswith(text):
            return value
        if kind == "suffix" and line.endswith(text):
            return value
    return None


class ProgressTracker:
    """Consumes command output character by character.

    ``on_status`` receives the current, not yet finished line whenever it is
    non-blank; ``on_progress`` receives the percentage after every finished
    line. Progress never decreases.
    """

    def __init__(
        self,
        on_status: Callable[[str], None] | None = None,
        on_progress: Callable[[int], None] | None = None,
    ) -> None:
        self.progress = NOT_STARTED
        self._lines: list[str] = []
        self._current = ""
        self._on_status = on_status
        self._on_progress = on_progress

    @property
    def log(self) -> str:
        return "".join(line + "\n" for line in self._lines)

    def feed(self, ch: str) -> None:
        self._current += ch
        if ch == "\n":
            line = self._current.rstrip()
            self._current = ""
            self._complete_line(line)
        if self._current.strip() and self._on_status is not None:
            self._on_status(self._current.rstrip())

    def feed_text(self, text: str) -> None:
        for ch in text:
            self.feed(ch)

    def finish(self) -> None:
        """Treat a trailing line without newline as finished."""
        line = self._current.rstrip()
        self._current = ""
        if line:
            self._complete_line(line)

    def _complete_line(self, line: str) -> None:
        line = strip_ansi(line)
        if line.startswith(_BUCKET_UPDATE_PREFIX):
            return
        self._lines.append(line)
        value = classify_line(line)
        if value is not None:
            self.progress = max(self.progress, value)
        if self._on_progress is not None:
            self._on_progress(self.progress)
