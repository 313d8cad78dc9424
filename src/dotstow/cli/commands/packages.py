"""``dotstow dump-packages`` command."""

from __future__ import annotations

from pathlib import Path

import typer

from dotstow.cli.helpers import console, is_verbose
from dotstow.core.errors import DotstowError
from dotstow.core.logging_setup import close_logging, configure_logging
from dotstow.core.package_manager import dump_package_lists


def dump_packages(
    ctx: typer.Context,
    output_dir: Path = typer.Argument(Path("."), help="Directory to write pkglist.txt and aurlist.txt into"),
) -> None:
    """Export explicitly installed pacman packages (native and AUR) to text files."""
    configure_logging(verbose=is_verbose(ctx), console=console)
    console.print(f"Exporting package lists to {output_dir}...")
    try:
        written = dump_package_lists(output_dir)
    except DotstowError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)
    finally:
        close_logging()
    if written:
        console.print("Done.")


__all__ = ["dump_packages"]
