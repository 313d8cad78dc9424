"""Host facts queried during preflight."""

from __future__ import annotations

import os


def is_root() -> bool:
    """Return True when running with an effective UID of 0."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


__all__ = ["is_root"]
