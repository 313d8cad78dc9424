"""Health checks for ``dotstow doctor``.

Detects:
- Missing configuration repository
- A repository with no stow packages
- Expected packages or their key files missing
- Required and optional tools absent from ``PATH``
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path

from dotstow.core import process
from dotstow.core.constants import OPTIONAL_TOOLS, REQUIRED_TOOLS
from dotstow.stow.scanner import detect_packages

# Key path inside each well-known package.
EXPECTED_CONTENT: dict[str, str] = {
    "zshrc": ".zshrc",
    "hypr": ".config/hypr",
    "kitty": ".config/kitty",
    "starship": ".config",
}


@dataclass
class DoctorCheck:
    """Result of a single doctor health check."""

    name: str
    passed: bool
    message: str
    severity: str  # "error", "warning", "info"

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def check_repository_exists(dotfiles_dir: Path) -> DoctorCheck:
    """Check that the configuration repository directory exists."""
    if dotfiles_dir.is_dir():
        return DoctorCheck("repository_exists", True, f"{dotfiles_dir} exists", "info")
    return DoctorCheck(
        "repository_exists", False, f"Dotfiles directory not found: {dotfiles_dir}", "error"
    )


def check_packages_detected(dotfiles_dir: Path) -> DoctorCheck:
    """Check that at least one stow package is detected."""
    packages = detect_packages(dotfiles_dir)
    if packages:
        return DoctorCheck(
            "packages_detected",
            True,
            f"Found {len(packages)} packages: {' '.join(packages)}",
            "info",
        )
    return DoctorCheck("packages_detected", False, "No stow packages found", "error")


def check_expected_package(dotfiles_dir: Path, package: str) -> DoctorCheck:
    """Check a well-known package exists and holds its key path (warning only)."""
    name = f"package:{package}"
    pkg_dir = dotfiles_dir / package
    if not pkg_dir.is_dir():
        return DoctorCheck(name, False, f"Expected package '{package}' not found (may be OK)", "warning")

    content = EXPECTED_CONTENT.get(package)
    if content and not (pkg_dir / content).exists():
        return DoctorCheck(name, False, f"{package}/{content} not found", "warning")
    return DoctorCheck(name, True, f"Package '{package}' found", "info")


def check_tool(tool: str, *, required: bool) -> DoctorCheck:
    """Check *tool* is on PATH; missing required tools are errors."""
    name = f"tool:{tool}"
    if process.command_exists(tool):
        suffix = "" if required else " (optional)"
        return DoctorCheck(name, True, f"{tool} is available{suffix}", "info")
    if required:
        return DoctorCheck(name, False, f"{tool} is not installed (required)", "error")
    return DoctorCheck(name, False, f"{tool} is not installed (optional, but recommended)", "warning")


def run_checks(dotfiles_dir: Path, expected_packages: list[str]) -> list[DoctorCheck]:
    """Run every check against *dotfiles_dir*.

    Package checks are skipped when the repository itself is missing.
    """
    checks = [check_repository_exists(dotfiles_dir)]
    if checks[0].passed:
        checks.append(check_packages_detected(dotfiles_dir))
        checks.extend(check_expected_package(dotfiles_dir, pkg) for pkg in expected_packages)
    checks.extend(check_tool(tool, required=True) for tool in REQUIRED_TOOLS)
    checks.extend(check_tool(tool, required=False) for tool in OPTIONAL_TOOLS)
    return checks


def has_errors(checks: list[DoctorCheck]) -> bool:
    """Return True when any error-severity check failed."""
    return any(not c.passed and c.severity == "error" for c in checks)


__all__ = [
    "DoctorCheck",
    "EXPECTED_CONTENT",
    "check_expected_package",
    "check_packages_detected",
    "check_repository_exists",
    "check_tool",
    "has_errors",
    "run_checks",
]
