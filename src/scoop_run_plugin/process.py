"""Run shell commands, either capturing all output or streaming it per character."""

from __future__ import annotations

import logging
import subprocess
import sys
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# No console window flashing up for every scoop call on Windows
_CREATION_FLAGS = getattr(subprocess, "CREATE_NO_WINDOW", 0) if sys.platform == "win32" else 0


@dataclass(frozen=True)
class CommandOutput:
    ok: bool
    output: str
    returncode: int


def run_with_output(command: str, timeout: float | None = None) -> CommandOutput:
    """Run ``command`` through the system shell and capture its combined output."""
    logger.debug("Running: %s", command)
    try:
        result = subprocess.run(
            command,
            shell=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            creationflags=_CREATION_FLAGS,
        )
    except subprocess.TimeoutExpired as e:
        logger.warning("Command timed out after %ss: %s", timeout, command)
        return CommandOutput(ok=False, output=_decode(e.output), returncode=-1)
    except OSError as e:
        logger.warning("Could not start %r: %s", command, e)
        return CommandOutput(ok=False, output=str(e), returncode=-1)
    return CommandOutput(ok=result.returncode == 0, output=result.stdout, returncode=result.returncode)


def stream_output(command: str, on_char: Callable[[str], None]) -> int:
    """Run ``command`` and hand every output character to ``on_char`` as it arrives.

    Returns:
        The process exit code.
    """
    logger.debug("Streaming: %s", command)
    with subprocess.Popen(
        command,
        shell=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        encoding="utf-8",
        errors="replace",
        creationflags=_CREATION_FLAGS,
    ) as proc:
        assert proc.stdout is not None
        while True:
            ch = proc.stdout.read(1)
            if not ch:
                break
            on_char(ch)
        returncode = proc.wait()
    logger.debug("Exit code %d: %s", returncode, command)
    return returncode


def is_scoop_installed() -> bool:
    return run_with_output("scoop -v").ok


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
