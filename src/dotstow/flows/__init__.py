"""Install and uninstall orchestration."""
