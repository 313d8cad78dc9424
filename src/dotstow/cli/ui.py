"""Reusable UI helpers for dotstow CLI interactions."""

from __future__ import annotations

import logging
import sys

import readchar
from rich.console import Console
from rich.tree import Tree

logger = logging.getLogger(__name__)

_SYMBOLS = {
    "done": "[green]●[/green]",
    "pending": "[green dim]○[/green dim]",
    "planned": "[cyan]○[/cyan]",
    "error": "[red]●[/red]",
    "skipped": "[yellow]○[/yellow]",
}


class StepTracker:
    """Collect per-step results and render them as a Rich tree."""

    def __init__(self, title: str):
        self.title = title
        self.steps: list[dict[str, str]] = []  # {key, label, status, detail}

    def add(self, key: str, label: str) -> None:
        if key not in [s["key"] for s in self.steps]:
            self.steps.append({"key": key, "label": label, "status": "pending", "detail": ""})

    def complete(self, key: str, detail: str = "") -> None:
        self._update(key, "done", detail)

    def plan(self, key: str, detail: str = "") -> None:
        self._update(key, "planned", detail)

    def error(self, key: str, detail: str = "") -> None:
        self._update(key, "error", detail)

    def skip(self, key: str, detail: str = "") -> None:
        self._update(key, "skipped", detail)

    def _update(self, key: str, status: str, detail: str) -> None:
        for s in self.steps:
            if s["key"] == key:
                s["status"] = status
                if detail:
                    s["detail"] = detail
                return
        self.steps.append({"key": key, "label": key, "status": status, "detail": detail})

    def status_of(self, key: str) -> str | None:
        for s in self.steps:
            if s["key"] == key:
                return s["status"]
        return None

    @property
    def failed(self) -> bool:
        return any(s["status"] == "error" for s in self.steps)

    def render(self) -> Tree:
        tree = Tree(f"[cyan]{self.title}[/cyan]", guide_style="grey50")
        for step in self.steps:
            symbol = _SYMBOLS.get(step["status"], " ")
            detail = step["detail"].strip().splitlines()[0] if step["detail"].strip() else ""
            if step["status"] == "pending":
                text = f"{step['label']} ({detail})" if detail else step["label"]
                tree.add(f"{symbol} [bright_black]{text}[/bright_black]")
            elif detail:
                tree.add(f"{symbol} [white]{step['label']}[/white] [bright_black]({detail})[/bright_black]")
            else:
                tree.add(f"{symbol} [white]{step['label']}[/white]")
        return tree


def confirm(message: str, *, assume_yes: bool = False, console: Console | None = None) -> bool:
    """Ask a y/n question; only ``y``/``Y`` accepts.

    With *assume_yes* the question is logged and accepted. On a terminal a
    single keypress is read; otherwise one line is read from stdin and
    end-of-input declines.
    """
    if assume_yes:
        logger.info("%s - auto-confirmed with --yes", message)
        return True

    console = console or Console()
    console.print(f"[yellow]?[/yellow] {message} (y/n) ", end="")
    if sys.stdin is not None and sys.stdin.isatty():
        try:
            reply = readchar.readkey()
        except KeyboardInterrupt:
            console.print()
            return False
        console.print(reply)
    else:
        line = sys.stdin.readline() if sys.stdin is not None else ""
        console.print()
        reply = line.strip()[:1]
    return reply in ("y", "Y")


__all__ = ["StepTracker", "confirm"]
