"""Shared helpers for dotstow CLI commands."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console

from dotstow.cli.ui import StepTracker, confirm
from dotstow.core.config import RunOptions, load_settings
from dotstow.runtime.home import (
    get_backup_root,
    get_dotfiles_dir,
    get_home,
    get_settings_path,
    get_stow_target,
    resolve_target_choice,
)
from dotstow.stow.linker import StowOutcome

console = Console(highlight=False)


class YesNo(str, Enum):
    yes = "yes"
    no = "no"


class TargetChoice(str, Enum):
    home = "home"
    config = "config"
    both = "both"


def is_verbose(ctx: typer.Context) -> bool:
    obj = ctx.find_root().obj
    return bool(obj and obj.get("verbose"))


def build_run_options(target_choice: TargetChoice | None = None, **flags: object) -> RunOptions:
    """Resolve settings, environment and flags into one :class:`RunOptions`.

    Raises:
        ConfigError: If the settings file is invalid.
    """
    settings = load_settings(get_settings_path())
    home = get_home()
    if target_choice is None:
        target = get_stow_target(settings.stow_target)
    else:
        target = resolve_target_choice(target_choice.value, home)
    log_file = flags.pop("log_file", None)
    return RunOptions(
        dotfiles_dir=get_dotfiles_dir(settings.dotfiles_dir).absolute(),
        target=target.absolute(),
        backup_root=get_backup_root(settings.backup_dir).absolute(),
        home=home,
        settings=settings,
        log_file=Path(log_file).expanduser() if log_file else None,
        **flags,
    )


def confirmer(assume_yes: bool) -> Callable[[str], bool]:
    """Return a prompt function bound to the ``--yes`` flag."""
    return lambda message: confirm(message, assume_yes=assume_yes, console=console)


def outcome_tracker(title: str, outcomes: list[StowOutcome]) -> StepTracker:
    """Build a tracker with one step per package outcome."""
    tracker = StepTracker(title)
    for outcome in outcomes:
        tracker.add(outcome.package, outcome.package)
        detail = f"{len(outcome.backups)} backed up" if outcome.backups else outcome.detail
        if outcome.status in ("stowed", "unstowed"):
            tracker.complete(outcome.package, detail)
        elif outcome.status == "dry-run":
            tracker.plan(outcome.package, detail)
        elif outcome.status == "skipped":
            tracker.skip(outcome.package, detail)
        else:
            tracker.error(outcome.package, detail)
    return tracker


__all__ = [
    "TargetChoice",
    "YesNo",
    "build_run_options",
    "confirmer",
    "console",
    "is_verbose",
    "outcome_tracker",
]
