"""CLI command modules for dotstow."""

from .backups import app as backups_app
from .doctor import doctor
from .install import install
from .packages import dump_packages
from .uninstall import uninstall

__all__ = ["backups_app", "doctor", "dump_packages", "install", "uninstall"]
