"""Exception types raised by dotstow operations."""

from __future__ import annotations


class DotstowError(RuntimeError):
    """Base class for failures the CLI reports and exits on."""


class ConfigError(DotstowError):
    """Raised when the settings file cannot be parsed or validated."""


class PreflightError(DotstowError):
    """Raised when a required precondition for a run is not met."""


class BackupError(DotstowError):
    """Raised when a file cannot be copied into the backup directory."""


class StowError(DotstowError):
    """Raised when stow cannot be invoked for a package."""


class PackageManagerError(DotstowError):
    """Raised when no supported package manager can install a package."""


__all__ = [
    "BackupError",
    "ConfigError",
    "DotstowError",
    "PackageManagerError",
    "PreflightError",
    "StowError",
]
