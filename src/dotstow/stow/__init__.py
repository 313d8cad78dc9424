"""Package scanning, backups and GNU Stow invocation."""
