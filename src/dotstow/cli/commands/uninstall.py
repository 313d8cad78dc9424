"""``dotstow uninstall`` command implementation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from dotstow.cli.helpers import (
    TargetChoice,
    build_run_options,
    confirmer,
    console,
    is_verbose,
    outcome_tracker,
)
from dotstow.core.errors import DotstowError
from dotstow.core.logging_setup import close_logging, configure_logging
from dotstow.flows.uninstall import run_uninstall

logger = logging.getLogger(__name__)


def uninstall(
    ctx: typer.Context,
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be done without making changes"),
    restore_last: bool = typer.Option(
        False, "--restore-last", help="Restore files from the most recent backup after unstowing"
    ),
    yes: bool = typer.Option(False, "--yes", help="Non-interactive mode; auto-confirm prompts"),
    target: Optional[TargetChoice] = typer.Option(
        None, "--target", help="Stow target the links were placed in: home, config, or both"
    ),
    log_file: Optional[Path] = typer.Option(None, "--log", help="Append logs to specified file"),
    package: Optional[str] = typer.Option(None, "--package", help="Only unstow this package"),
) -> None:
    """Remove links created by install and optionally restore the last backup."""
    configure_logging(log_file=log_file, verbose=is_verbose(ctx), console=console, header="Uninstall run started")
    try:
        options = build_run_options(
            target,
            dry_run=dry_run,
            yes=yes,
            restore_last=restore_last,
            package=package,
            log_file=log_file,
        )
        if options.log_file:
            logger.info("Logging to: %s", options.log_file)
        report = run_uninstall(options, confirmer(yes))
    except DotstowError as exc:
        logger.error("%s", exc)
        raise typer.Exit(1)
    finally:
        close_logging()

    if report.outcomes:
        console.print(outcome_tracker("Uninstall Summary", report.outcomes).render())
    if report.restored_from is not None:
        console.print(
            f"[green]Restored {len(report.restored)} file(s) from[/green] {report.restored_from}"
        )


__all__ = ["uninstall"]
