"""``dotstow backups`` commands: inspect and restore backup runs."""

from __future__ import annotations

import json
from typing import Optional

import typer
from rich.table import Table

from dotstow.cli.helpers import confirmer, console, is_verbose
from dotstow.core.config import load_settings
from dotstow.core.constants import BACKUP_NAME_PATTERN
from dotstow.core.errors import DotstowError
from dotstow.core.logging_setup import close_logging, configure_logging
from dotstow.runtime.home import get_backup_root, get_home, get_settings_path
from dotstow.stow.backup import latest_backup, list_backups, restore_backup

app = typer.Typer(
    name="backups",
    help="Inspect and restore timestamped dotfiles backups.",
    no_args_is_help=True,
)


def _backup_root():
    return get_backup_root(load_settings(get_settings_path()).backup_dir)


@app.command("list")
def list_cmd(
    limit: int = typer.Option(10, "--limit", min=1, help="Maximum number of backups to show"),
    json_output: bool = typer.Option(False, "--json", help="Output machine-readable JSON"),
) -> None:
    """Show the most recent backup directories."""
    try:
        root = _backup_root()
    except DotstowError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    entries = list_backups(root, limit=limit)
    if json_output:
        payload = {
            "backup_root": str(root),
            "backups": [
                {"name": e.name, "path": str(e.path), "files": e.file_count} for e in entries
            ],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    if not entries:
        console.print(f"[yellow]No backups found in[/yellow] {root}")
        return

    table = Table(title=f"Backups in {root}", show_header=True)
    table.add_column("Timestamp", style="cyan")
    table.add_column("Files", justify="right")
    for entry in entries:
        table.add_row(entry.name, str(entry.file_count))
    console.print(table)


@app.command("restore")
def restore_cmd(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Backup timestamp to restore (default: latest)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be restored"),
    yes: bool = typer.Option(False, "--yes", help="Non-interactive mode; auto-confirm prompts"),
) -> None:
    """Copy a backup's files back into the home directory."""
    configure_logging(verbose=is_verbose(ctx), console=console)
    try:
        root = _backup_root()
        if name is not None and not BACKUP_NAME_PATTERN.match(name):
            raise DotstowError(f"Invalid backup name: {name!r} (expected YYYYMMDD_HHMMSS)")
        backup_path = root / name if name else latest_backup(root)
        if backup_path is None:
            raise DotstowError(f"No backups found in {root}")
        if not confirmer(yes)(f"Restore from {backup_path}?"):
            console.print("Skipping backup restoration")
            return
        restored = restore_backup(backup_path, get_home(), dry_run=dry_run)
    except DotstowError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)
    finally:
        close_logging()

    verb = "Would restore" if dry_run else "Restored"
    console.print(f"[green]{verb} {len(restored)} file(s) from[/green] {backup_path}")


__all__ = ["app"]
