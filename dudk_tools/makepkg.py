"""
Script: dudk_tools/makepkg.py
What: Builds and installs the DarwinUDK firmware Arch package.
Doing: Clears the `pkg` staging directory, runs `makepkg -f`, then installs the archive
       with `sudo pacman -U`.
Why: Keeps packaging and install behavior in one place.
Goal: Install the firmware package that matches the freshly bumped `pkgver`.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Callable, Mapping

from dudk_tools.common import (
    CommandResult,
    DudkToolError,
    Runner,
    debug,
    error,
    info,
    run_captured,
    run_interactive,
)
from dudk_tools.paths import BuildLayout
from dudk_tools.pkgbuild import PackageVersion


MAKEPKG_COMMAND = ("makepkg", "-f")
PKGREL = "1"
PKG_ARCH = "x86_64"
PKG_EXT = "pkg.tar.zst"

# Shell conventions for exit statuses that have a known meaning.
EXIT_STATUS_HINTS = {
    126: "Permission denied",
    127: "Command not found",
}

Installer = Callable[..., int]


def remove_staging_dir(layout: BuildLayout) -> None:
    """Remove the `pkg` staging directory if it exists. Absence is fine."""
    staging = layout.staging_dir
    if not staging.is_dir():
        debug("'pkg' folder does not exist", "yellow")
        return

    debug("Removing existing 'pkg' folder...", "green")
    try:
        shutil.rmtree(staging)
    except OSError as exc:
        raise DudkToolError(f"Failed to remove 'pkg' folder: {exc}") from exc
    debug("'pkg' folder removed successfully", "green")


def reset_staging(layout: BuildLayout) -> None:
    """Check the packaging root is usable and clear leftovers from an earlier run."""
    if not layout.pkg_root.is_dir():
        raise DudkToolError(f"Unable to change directory to {layout.pkg_root}")
    debug(f"Using packaging root {layout.pkg_root}", "green")
    remove_staging_dir(layout)


def exit_status_hint(exit_status: int) -> str:
    hint = EXIT_STATUS_HINTS.get(exit_status)
    if hint:
        return f"{hint} (exit status {exit_status})"
    return f"Unexpected exit status {exit_status}"


def run_makepkg(
    layout: BuildLayout,
    env: Mapping[str, str],
    runner: Runner = run_captured,
) -> CommandResult:
    """
    Run `makepkg -f` from the packaging root.

    A failure is reported but not raised; the caller decides whether it is fatal.
    """
    info("Building package...")
    result = runner(list(MAKEPKG_COMMAND), cwd=str(layout.pkg_root), env=env)
    if result.ok:
        info("Package built successfully")
        return result

    error("Failed to build package")
    print(result.output, end="" if result.output.endswith("\n") else "\n")
    error(exit_status_hint(result.exit_status))
    return result


def package_filename(
    package_name: str,
    version: PackageVersion,
    *,
    pkgrel: str = PKGREL,
    arch: str = PKG_ARCH,
    ext: str = PKG_EXT,
) -> str:
    """Archive name `makepkg` produces, for example `DUDK-Firmware-1.0.8-1-x86_64.pkg.tar.zst`."""
    return f"{package_name}-{version}-{pkgrel}-{arch}.{ext}"


def install_command(filename: str, privilege_cmd: str = "sudo") -> list[str]:
    command = [privilege_cmd] if privilege_cmd else []
    command.extend(["pacman", "-U", filename])
    return command


def install_package(
    layout: BuildLayout,
    filename: str,
    *,
    privilege_cmd: str = "sudo",
    env: Mapping[str, str] | None = None,
    installer: Installer = run_interactive,
) -> None:
    # pacman asks for confirmation, so the command stays attached to the terminal.
    info("Installing firmware package...")
    package_path = Path(filename)
    if not (layout.pkg_root / package_path).exists():
        debug(f"{layout.pkg_root / package_path} not found, pacman will report the failure", "red")

    exit_status = installer(install_command(filename, privilege_cmd), cwd=str(layout.pkg_root), env=env)
    if exit_status != 0:
        raise DudkToolError("Failed to install firmware package")
    info("Firmware package installed successfully")
