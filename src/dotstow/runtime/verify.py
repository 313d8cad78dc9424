"""Informational post-install checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from dotstow.core import process
from dotstow.core.logging_setup import SUCCESS
from dotstow.runtime.bootstrap import font_installed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathState:
    path: Path
    state: str  # "symlink", "file", "missing"


def classify_path(path: Path) -> PathState:
    if path.is_symlink():
        return PathState(path, "symlink")
    if path.exists():
        return PathState(path, "file")
    return PathState(path, "missing")


def verify_installation(home: Path, verify_paths: list[str], font_query: str) -> list[PathState]:
    """Report how each expected path ended up, then check shell and font."""
    logger.info("Verifying installation...")
    logger.info("Checking symlinks...")

    states = [classify_path(home / rel) for rel in verify_paths]
    for item in states:
        if item.state == "symlink":
            logger.log(SUCCESS, "%s - symlink", item.path)
        elif item.state == "file":
            logger.info("  %s - regular file", item.path)
        else:
            logger.warning("  %s - missing", item.path)

    if process.command_exists("zsh"):
        logger.info("Testing Zsh integration...")
        result = process.run_command(["zsh", "-ic", "echo $ZSH"], timeout=30)
        if "oh-my-zsh" in result.output:
            logger.log(SUCCESS, "Zsh and Oh My Zsh integration OK")
        else:
            logger.warning("Zsh does not load Oh My Zsh yet")

    if font_installed(font_query):
        logger.log(SUCCESS, "JetBrains Mono Nerd Font is installed")
    else:
        logger.warning("JetBrains Mono Nerd Font not found - optional")
    return states


__all__ = ["PathState", "classify_path", "verify_installation"]
