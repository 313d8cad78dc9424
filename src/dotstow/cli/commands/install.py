"""``dotstow install`` command implementation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from dotstow.cli.helpers import (
    TargetChoice,
    YesNo,
    build_run_options,
    confirmer,
    console,
    is_verbose,
    outcome_tracker,
)
from dotstow.cli.ui import StepTracker
from dotstow.core.errors import DotstowError
from dotstow.core.logging_setup import close_logging, configure_logging
from dotstow.flows.install import InstallReport, run_install

logger = logging.getLogger(__name__)


def _render_tracker(report: InstallReport) -> StepTracker:
    tracker = outcome_tracker("Install Summary", report.outcomes)
    for step, ok in report.bootstrap.items():
        tracker.add(step, f"bootstrap: {step}")
        if ok:
            tracker.complete(step)
        else:
            tracker.skip(step, "see warnings above")
    return tracker


def install(
    ctx: typer.Context,
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be done without making changes"),
    yes: bool = typer.Option(False, "--yes", help="Non-interactive mode; auto-confirm prompts"),
    force: bool = typer.Option(False, "--force", help="Skip conflict confirmation; back up and overwrite"),
    pkg_install: YesNo = typer.Option(
        YesNo.no, "--pkg-install", help="Whether to install missing system packages (yes|no)"
    ),
    target: Optional[TargetChoice] = typer.Option(
        None, "--target", help="Stow target: home (~), config (~/.config), or both"
    ),
    log_file: Optional[Path] = typer.Option(None, "--log", help="Append logs to specified file"),
    package: Optional[str] = typer.Option(None, "--package", help="Only stow this package"),
) -> None:
    """Link dotfiles packages into the home directory with GNU Stow."""
    configure_logging(log_file=log_file, verbose=is_verbose(ctx), console=console, header="Install run started")
    try:
        options = build_run_options(
            target,
            dry_run=dry_run,
            yes=yes,
            force=force,
            pkg_install=pkg_install is YesNo.yes,
            package=package,
            log_file=log_file,
        )
        if options.log_file:
            logger.info("Logging to: %s", options.log_file)
        report = run_install(options, confirmer(yes))
    except DotstowError as exc:
        logger.error("%s", exc)
        raise typer.Exit(1)
    finally:
        close_logging()

    if report.cancelled:
        raise typer.Exit(0)
    if report.outcomes:
        console.print(_render_tracker(report).render())
    if report.failed:
        raise typer.Exit(1)


__all__ = ["install"]
