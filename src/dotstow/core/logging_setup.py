"""Console and log-file handlers for the ``dotstow`` logger hierarchy.

Every module logs through ``logging.getLogger(__name__)``. The CLI calls
:func:`configure_logging` once per invocation to attach:

- a Rich console handler printing ``[INFO]``/``[✓]``/``[WARN]``/``[ERROR]``
  prefixed lines, and
- an optional append-mode file handler writing
  ``[YYYY-MM-DD HH:MM:SS] [LEVEL] message`` lines.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.text import Text

from dotstow.core.constants import LOG_TIMESTAMP_FORMAT

LOGGER_NAME = "dotstow"
SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

_MANAGED_ATTR = "_dotstow_managed"


def _label_for(levelno: int) -> tuple[str, str]:
    if levelno >= logging.ERROR:
        return "[ERROR]", "bold red"
    if levelno >= logging.WARNING:
        return "[WARN]", "yellow"
    if levelno >= SUCCESS:
        return "[✓]", "green"
    if levelno >= logging.INFO:
        return "[INFO]", "blue"
    return "[DEBUG]", "dim"


class ConsoleLogHandler(logging.Handler):
    """Render log records as single prefixed lines on a Rich console."""

    def __init__(self, console: Console | None = None, level: int = logging.INFO) -> None:
        super().__init__(level)
        self.console = console or Console(highlight=False)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            label, style = _label_for(record.levelno)
            line = Text(label, style=style)
            line.append(" ")
            line.append(self.format(record))
            self.console.print(line, soft_wrap=True)
        except Exception:
            self.handleError(record)


def _drop_managed_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if getattr(handler, _MANAGED_ATTR, False):
            logger.removeHandler(handler)
            handler.close()


def configure_logging(
    *,
    log_file: Path | None = None,
    verbose: bool = False,
    console: Console | None = None,
    header: str | None = None,
) -> logging.Logger:
    """Attach console (and optionally file) handlers to the ``dotstow`` logger.

    Safe to call repeatedly: handlers installed by a previous call are
    closed and replaced.

    Args:
        log_file: File to append timestamped lines to. Parent directories
            are created when missing.
        verbose: Show DEBUG records on the console.
        console: Console to render on (a fresh one by default).
        header: Raw line written to the log file before any record.

    Returns:
        The configured ``dotstow`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    _drop_managed_handlers(logger)
    logger.setLevel(logging.DEBUG)

    console_handler = ConsoleLogHandler(console, logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    setattr(console_handler, _MANAGED_ATTR, True)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = log_file.expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        if header:
            stamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
            with open(log_file, "a", encoding="utf-8") as fh:
                fh.write(f"[{stamp}] {header}\n")
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("[%(asctime)s] [%(levelname)s] %(message)s", datefmt=LOG_TIMESTAMP_FORMAT)
        )
        setattr(file_handler, _MANAGED_ATTR, True)
        logger.addHandler(file_handler)

    return logger


def close_logging() -> None:
    """Detach and close handlers installed by :func:`configure_logging`."""
    _drop_managed_handlers(logging.getLogger(LOGGER_NAME))


__all__ = [
    "ConsoleLogHandler",
    "LOGGER_NAME",
    "SUCCESS",
    "close_logging",
    "configure_logging",
]
