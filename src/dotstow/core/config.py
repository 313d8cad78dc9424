"""Settings file loading and the per-run options record.

Settings live in an optional ``config.yaml`` (see
:func:`dotstow.runtime.home.get_settings_path`). Unknown keys are
rejected so typos surface instead of being silently ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from dotstow.core.constants import DEFAULT_PACKAGE_MANAGERS
from dotstow.core.errors import ConfigError

logger = logging.getLogger(__name__)


class BootstrapSettings(BaseModel):
    """Optional environment bootstrap: shell framework, font, prompt."""

    model_config = ConfigDict(extra="forbid")

    shell_framework_repo: str = "https://github.com/ohmyzsh/ohmyzsh.git"
    shell_framework_dir: str = "~/.oh-my-zsh"
    plugins: list[str] = Field(
        default_factory=lambda: ["zsh-autosuggestions", "zsh-syntax-highlighting"]
    )
    plugin_url_template: str = "https://github.com/zsh-users/{name}.git"
    font_package: str = "nerd-fonts-jetbrains-mono"
    font_query: str = "jetbrains"
    prompt_package: str = "starship"


class DotstowSettings(BaseModel):
    """Top-level settings file schema."""

    model_config = ConfigDict(extra="forbid")

    dotfiles_dir: str | None = None
    stow_target: str | None = None
    backup_dir: str | None = None
    package_managers: list[str] = Field(default_factory=lambda: list(DEFAULT_PACKAGE_MANAGERS))
    bootstrap: BootstrapSettings = Field(default_factory=BootstrapSettings)
    verify_paths: list[str] = Field(
        default_factory=lambda: [
            ".zshrc",
            ".config/starship.toml",
            ".config/kitty/kitty.conf",
            ".config/hypr/hyprland.conf",
            ".config/Code/User/settings.json",
        ]
    )
    expected_packages: list[str] = Field(
        default_factory=lambda: ["zshrc", "hypr", "kitty", "starship"]
    )


def load_settings(path: Path) -> DotstowSettings:
    """Load settings from *path*, returning defaults when it does not exist.

    Raises:
        ConfigError: If the file is not valid YAML or violates the schema.
    """
    if not path.exists():
        logger.debug("Settings file not found: %s", path)
        return DotstowSettings()

    yaml = YAML(typ="safe")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.load(f) or {}
    except (OSError, YAMLError) as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")

    try:
        return DotstowSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings in {path}: {exc}") from exc


@dataclass
class RunOptions:
    """Resolved paths and flags for one install or uninstall run."""

    dotfiles_dir: Path
    target: Path
    backup_root: Path
    home: Path
    settings: DotstowSettings = field(default_factory=DotstowSettings)
    dry_run: bool = False
    yes: bool = False
    force: bool = False
    pkg_install: bool = False
    restore_last: bool = False
    package: str | None = None
    log_file: Path | None = None


__all__ = [
    "BootstrapSettings",
    "DotstowSettings",
    "RunOptions",
    "load_settings",
]
