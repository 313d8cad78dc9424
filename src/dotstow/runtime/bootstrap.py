"""Optional environment bootstrap run after packages are linked.

Three independent, best-effort steps:

- clone the shell framework (Oh My Zsh by default) and its plugins,
- make sure a Nerd Font is installed and the font cache rebuilt,
- make sure the prompt utility (Starship by default) is installed.

None of these steps aborts the run: failures are logged as warnings and
reported back as ``False`` so the caller can summarize them.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotstow.core import package_manager, process
from dotstow.core.config import BootstrapSettings
from dotstow.core.errors import PackageManagerError
from dotstow.core.logging_setup import SUCCESS

logger = logging.getLogger(__name__)

AUR_ONLY_FONT_MANAGERS = frozenset({"paru", "yay"})


def expand_home(value: str, home: Path) -> Path:
    """Expand a leading ``~`` against *home* rather than the process HOME."""
    if value == "~":
        return home
    if value.startswith("~/"):
        return home / value[2:]
    return Path(value)


def _clone(url: str, dest: Path, *, dry_run: bool) -> bool:
    if dry_run:
        logger.info("  [DRY-RUN] git clone %s %s", url, dest)
        return True
    result = process.run_command(["git", "clone", url, str(dest)])
    if not result.ok:
        logger.warning("Failed to clone %s: %s", url, result.stderr or result.returncode)
        return False
    return True


def plugins_dir(settings: BootstrapSettings, home: Path) -> Path:
    """Return ``$ZSH_CUSTOM/plugins``, defaulting under the framework dir."""
    if custom := os.environ.get("ZSH_CUSTOM"):
        return Path(custom).expanduser() / "plugins"
    return expand_home(settings.shell_framework_dir, home) / "custom" / "plugins"


def setup_shell_framework(settings: BootstrapSettings, home: Path, *, dry_run: bool = False) -> bool:
    """Clone the shell framework and its plugins when they are missing."""
    logger.info("Setting up Oh My Zsh...")
    ok = True

    framework_dir = expand_home(settings.shell_framework_dir, home)
    if framework_dir.is_dir():
        logger.log(SUCCESS, "Oh My Zsh already installed at %s", framework_dir)
    else:
        logger.info("Cloning Oh My Zsh...")
        if _clone(settings.shell_framework_repo, framework_dir, dry_run=dry_run):
            if not dry_run:
                logger.log(SUCCESS, "Oh My Zsh cloned")
        else:
            ok = False

    target_dir = plugins_dir(settings, home)
    if not dry_run:
        if not framework_dir.is_dir() and "ZSH_CUSTOM" not in os.environ:
            logger.warning("Skipping plugins: %s is missing", framework_dir)
            return False
        target_dir.mkdir(parents=True, exist_ok=True)

    for plugin in settings.plugins:
        plugin_dir = target_dir / plugin
        if plugin_dir.is_dir():
            logger.log(SUCCESS, "Plugin '%s' already installed", plugin)
            continue
        logger.info("Installing plugin '%s'...", plugin)
        url = settings.plugin_url_template.format(name=plugin)
        if _clone(url, plugin_dir, dry_run=dry_run):
            if not dry_run:
                logger.log(SUCCESS, "Plugin '%s' installed", plugin)
        else:
            ok = False
    return ok


def font_installed(query: str) -> bool:
    """Return True when ``fc-list`` reports a font matching *query*."""
    result = process.run_command(["fc-list"])
    return result.ok and query.lower() in result.stdout.lower()


def ensure_font(
    settings: BootstrapSettings,
    manager: str | None,
    *,
    pkg_install: bool = False,
    dry_run: bool = False,
) -> bool:
    """Install the configured Nerd Font when it is missing and allowed."""
    logger.info("Checking for JetBrains Mono Nerd Font...")
    if font_installed(settings.font_query):
        logger.log(SUCCESS, "JetBrains Mono Nerd Font is installed")
        return True

    logger.warning("JetBrains Mono Nerd Font not found")
    if not pkg_install:
        logger.warning("Skipping font installation - use --pkg-install yes to install")
        return False

    logger.info("Attempting to install JetBrains Mono Nerd Font...")
    if manager not in AUR_ONLY_FONT_MANAGERS:
        logger.warning(
            "Automatic font installation not supported for %s. Please install manually.", manager or "none"
        )
        return False

    if not package_manager.install_package(manager, settings.font_package, dry_run=dry_run):
        logger.warning("Failed to install font via %s", manager)
        return False

    if dry_run:
        logger.info("  [DRY-RUN] fc-cache -f")
        return True
    logger.info("Rebuilding font cache...")
    if not process.run_command(["fc-cache", "-f"]).ok:
        logger.warning("Failed to rebuild font cache")
        return False
    logger.log(SUCCESS, "Font cache rebuilt")
    return True


def ensure_prompt(
    settings: BootstrapSettings,
    manager: str | None,
    home: Path,
    *,
    pkg_install: bool = False,
    dry_run: bool = False,
) -> bool:
    """Install the prompt utility when it is missing and allowed."""
    name = settings.prompt_package
    logger.info("Setting up %s...", name.capitalize())

    if not process.command_exists(name):
        logger.warning("%s is not installed", name)
        if not pkg_install:
            logger.warning("Skipping %s installation - use --pkg-install yes to install", name)
            return False
        logger.info("Installing %s...", name)
        try:
            installed = package_manager.install_package(manager, name, dry_run=dry_run)
        except PackageManagerError as exc:
            logger.warning("Cannot auto-install %s on this system: %s", name, exc)
            return False
        if not installed:
            logger.warning("Failed to install %s", name)
            return False

    logger.log(SUCCESS, "%s is available", name)
    config = home / ".config" / f"{name}.toml"
    if config.is_file():
        logger.info("%s config found at %s", name.capitalize(), config)
    return True


__all__ = [
    "ensure_font",
    "ensure_prompt",
    "expand_home",
    "font_installed",
    "plugins_dir",
    "setup_shell_framework",
]
