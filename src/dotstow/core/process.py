"""Thin subprocess wrapper with a normalized result shape."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging
import shutil
import subprocess

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of one external command."""

    args: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, in that order."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


def command_exists(name: str) -> bool:
    """Return True when *name* resolves to an executable on ``PATH``."""
    return shutil.which(name) is not None


def run_command(
    args: list[str],
    *,
    cwd: Path | None = None,
    capture: bool = True,
    timeout: float | None = None,
) -> CommandResult:
    """Run *args* and never raise for a non-zero exit.

    A missing executable maps to return code 127 and a timeout to 124, so
    callers branch on :attr:`CommandResult.ok` only.
    """
    logger.debug("Running: %s", " ".join(args))
    try:
        completed = subprocess.run(
            args,
            cwd=str(cwd) if cwd else None,
            capture_output=capture,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout,
        )
    except FileNotFoundError:
        return CommandResult(args, 127, "", f"{args[0]}: command not found")
    except subprocess.TimeoutExpired:
        return CommandResult(args, 124, "", f"command timed out: {' '.join(args)}")
    return CommandResult(
        args=list(args),
        returncode=completed.returncode,
        stdout=(completed.stdout or "").strip() if capture else "",
        stderr=(completed.stderr or "").strip() if capture else "",
    )


__all__ = ["CommandResult", "command_exists", "run_command"]
