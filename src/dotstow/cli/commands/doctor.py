"""``dotstow doctor`` command: smoke checks for the repository and tools."""

from __future__ import annotations

import json

import typer
from rich.table import Table

from dotstow.cli.helpers import console
from dotstow.core.config import load_settings
from dotstow.core.errors import ConfigError
from dotstow.runtime.doctor import DoctorCheck, has_errors, run_checks
from dotstow.runtime.home import get_dotfiles_dir, get_settings_path

_SEVERITY_STYLE = {"error": "red", "warning": "yellow", "info": "green"}


def _print_table(checks: list[DoctorCheck]) -> None:
    table = Table(title="Dotfiles Installer - Smoke Test", show_header=True)
    table.add_column("Check", style="cyan")
    table.add_column("Result")
    table.add_column("Message")

    for check in checks:
        if check.passed:
            result = "[green]PASS[/green]"
        else:
            style = _SEVERITY_STYLE.get(check.severity, "white")
            label = "FAIL" if check.severity == "error" else "WARN"
            result = f"[{style}]{label}[/{style}]"
        table.add_row(check.name, result, check.message)

    console.print(table)


def doctor(
    json_output: bool = typer.Option(False, "--json", help="Output machine-readable JSON"),
) -> None:
    """Check the dotfiles repository layout and required tools."""
    try:
        settings = load_settings(get_settings_path())
    except ConfigError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    dotfiles_dir = get_dotfiles_dir(settings.dotfiles_dir)
    checks = run_checks(dotfiles_dir, settings.expected_packages)
    failed = has_errors(checks)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "dotfiles_dir": str(dotfiles_dir),
                    "passed": not failed,
                    "checks": [c.to_dict() for c in checks],
                },
                indent=2,
            )
        )
    else:
        _print_table(checks)
        errors = sum(1 for c in checks if not c.passed and c.severity == "error")
        warnings = sum(1 for c in checks if not c.passed and c.severity == "warning")
        console.print(f"Errors:   [red]{errors}[/red]")
        console.print(f"Warnings: [yellow]{warnings}[/yellow]")
        if failed:
            console.print("[red]Some checks failed. Review errors above.[/red]")
        else:
            console.print("[green]All critical checks passed![/green]")
            console.print("[dim]Next: dotstow install --dry-run[/dim]")

    if failed:
        raise typer.Exit(1)


__all__ = ["doctor"]
