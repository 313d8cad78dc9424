"""Path resolution for the configuration repository, link target and backups.

Resolution order for every path:
1. Environment variable (``DOTFILES_DIR``, ``STOW_TARGET``,
   ``DOTFILES_BACKUP_DIR``, ``DOTSTOW_CONFIG``)
2. Value from the settings file, when the caller passes one
3. Built-in default under the user's home directory
"""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_path, user_data_path

from dotstow.core.constants import (
    BACKUP_DIR_NAME,
    CONFIG_APP_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_DOTFILES_SUBDIR,
)


def _expand(value: str | os.PathLike[str]) -> Path:
    return Path(value).expanduser()


def get_home() -> Path:
    """Return the current user's home directory."""
    return Path.home()


def get_dotfiles_dir(configured: str | None = None) -> Path:
    """Return the configuration repository root (default ``~/dev/dotfiles``)."""
    if env_dir := os.environ.get("DOTFILES_DIR"):
        return _expand(env_dir)
    if configured:
        return _expand(configured)
    return get_home() / DEFAULT_DOTFILES_SUBDIR


def get_stow_target(configured: str | None = None) -> Path:
    """Return the link-target root (default ``~``)."""
    if env_target := os.environ.get("STOW_TARGET"):
        return _expand(env_target)
    if configured:
        return _expand(configured)
    return get_home()


def get_backup_root(configured: str | None = None) -> Path:
    """Return the directory holding timestamped backup runs.

    Defaults to ``~/.local/share/dotfiles-backups`` on Linux (via
    platformdirs, which honors ``XDG_DATA_HOME``).
    """
    if env_dir := os.environ.get("DOTFILES_BACKUP_DIR"):
        return _expand(env_dir)
    if configured:
        return _expand(configured)
    return user_data_path(BACKUP_DIR_NAME)


def get_settings_path() -> Path:
    """Return the location of the optional ``config.yaml`` settings file."""
    if env_path := os.environ.get("DOTSTOW_CONFIG"):
        return _expand(env_path)
    return user_config_path(CONFIG_APP_NAME) / CONFIG_FILE_NAME


def resolve_target_choice(choice: str, home: Path | None = None) -> Path:
    """Map a ``--target`` value to a directory.

    ``home`` and ``both`` place links under ``~`` (stow creates ``.config``
    itself); ``config`` places them under ``~/.config``.
    """
    base = home or get_home()
    if choice in ("home", "both"):
        return base
    if choice == "config":
        return base / ".config"
    raise ValueError(f"Invalid target: {choice} (expected home, config or both)")


__all__ = [
    "get_backup_root",
    "get_dotfiles_dir",
    "get_home",
    "get_settings_path",
    "get_stow_target",
    "resolve_target_choice",
]
