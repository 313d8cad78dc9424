"""Shared constants for the dotstow layout and external tool names."""

from __future__ import annotations

import re

DEFAULT_DOTFILES_SUBDIR = "dev/dotfiles"
BACKUP_DIR_NAME = "dotfiles-backups"
CONFIG_APP_NAME = "dotstow"
CONFIG_FILE_NAME = "config.yaml"

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
BACKUP_NAME_PATTERN = re.compile(r"^\d{8}_\d{6}$")
LOG_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

STOW_BIN = "stow"
PACKAGE_BIN_DIR = "bin"
VSCODE_PACKAGE = "vscode"

DEFAULT_PACKAGE_MANAGERS: tuple[str, ...] = ("paru", "yay", "pacman", "apt", "dnf")
REQUIRED_TOOLS: tuple[str, ...] = ("stow", "git")
OPTIONAL_TOOLS: tuple[str, ...] = ("kitty", "zsh", "starship", "hyprctl", "fc-list")

__all__ = [
    "BACKUP_DIR_NAME",
    "BACKUP_NAME_PATTERN",
    "BACKUP_TIMESTAMP_FORMAT",
    "CONFIG_APP_NAME",
    "CONFIG_FILE_NAME",
    "DEFAULT_DOTFILES_SUBDIR",
    "DEFAULT_PACKAGE_MANAGERS",
    "LOG_TIMESTAMP_FORMAT",
    "OPTIONAL_TOOLS",
    "PACKAGE_BIN_DIR",
    "REQUIRED_TOOLS",
    "STOW_BIN",
    "VSCODE_PACKAGE",
]
