from __future__ import annotations

from pathlib import Path

import pytest

from dotstow.core.config import DotstowSettings, load_settings
from dotstow.core.errors import ConfigError


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "config.yaml")

    assert settings == DotstowSettings()
    assert settings.package_managers == ["paru", "yay", "pacman", "apt", "dnf"]
    assert settings.bootstrap.plugins == ["zsh-autosuggestions", "zsh-syntax-highlighting"]
    assert settings.expected_packages == ["zshrc", "hypr", "kitty", "starship"]


def test_values_override_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "dotfiles_dir: ~/src/dots\n"
        "package_managers: [apt]\n"
        "bootstrap:\n"
        "  plugins: [zsh-completions]\n"
        "  font_query: fira\n",
        encoding="utf-8",
    )

    settings = load_settings(path)

    assert settings.dotfiles_dir == "~/src/dots"
    assert settings.package_managers == ["apt"]
    assert settings.bootstrap.plugins == ["zsh-completions"]
    assert settings.bootstrap.font_query == "fira"
    assert settings.bootstrap.prompt_package == "starship"


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    assert load_settings(path) == DotstowSettings()


@pytest.mark.parametrize(
    "content, message",
    [
        ("key: [unclosed\n", "Invalid YAML"),
        ("- just\n- a list\n", "must contain a mapping"),
        ("unknown_key: 1\n", "Invalid settings"),
        ("bootstrap:\n  plugins: 5\n", "Invalid settings"),
    ],
)
def test_invalid_files_raise_config_error(tmp_path: Path, content: str, message: str) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError, match=message):
        load_settings(path)
