"""dotstow - GNU Stow based dotfiles installer.

Usage:
    dotstow install --dry-run
    dotstow install --yes --pkg-install yes
    dotstow uninstall --restore-last
    dotstow doctor
"""

from __future__ import annotations

import typer

from dotstow.cli.commands import backups_app, doctor, dump_packages, install, uninstall

__version__ = "0.4.0"

app = typer.Typer(
    name="dotstow",
    help="Install, remove and back up dotfiles packages with GNU Stow",
    add_completion=False,
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"dotstow {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit"
    ),
) -> None:
    """Dotfiles installer built on GNU Stow."""
    ctx.obj = {"verbose": verbose}


app.command()(install)
app.command()(uninstall)
app.command()(doctor)
app.command("dump-packages")(dump_packages)
app.add_typer(backups_app, name="backups")


def main():
    app()


if __name__ == "__main__":
    main()
