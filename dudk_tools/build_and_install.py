"""
Script: dudk_tools/build_and_install.py
What: Runs the full DarwinUDK firmware lifecycle from one checkout.
Doing: Resolves paths, loads the EDK2 env, builds OvmfPkg, copies the images,
       bumps `pkgver`, runs `makepkg`, installs with `pacman`, and cleans up.
Why: Replaces `buildArchPkg.sh` with one testable, step-by-step Python flow.
Goal: Go from source tree to installed firmware package in a single command.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from dudk_tools.common import DudkToolError, Runner, debug, info, run_captured, run_interactive, set_debug
from dudk_tools.edk_env import load_edk_environment
from dudk_tools.firmware_build import copy_artifacts, run_firmware_build
from dudk_tools.makepkg import (
    Installer,
    install_package,
    package_filename,
    remove_staging_dir,
    reset_staging,
    run_makepkg,
)
from dudk_tools.paths import BuildLayout, derive_layout
from dudk_tools.pkgbuild import PackageVersion, bump_pkgver
from dudk_tools.settings import Settings, load_settings


END_MARKER = "END OF LINE."


@dataclass
class PipelineResult:
    """What one run did. Fields stay `None` for stages that did not run."""

    layout: BuildLayout
    old_version: PackageVersion | None = None
    new_version: PackageVersion | None = None
    package_file: str | None = None
    package_built: bool | None = None
    installed: bool = False


def resolve_layout(settings: Settings) -> BuildLayout:
    debug(f"Current directory is {settings.workdir}", "green")
    layout = derive_layout(settings.workdir, settings.anchor)
    debug(f"DUDK_ROOT is set to {layout.root}", "green")
    debug(f"PKG_ROOT is set to {layout.pkg_root}", "green")
    debug(f"BUILD_DIR is set to {layout.build_dir}", "blue")
    debug(f"PKG_DIR is set to {layout.pkg_dir}", "yellow")
    for artifact in layout.artifacts:
        debug(f"{artifact.name}: {artifact.compiled} -> {artifact.packaged}", "blue")
    return layout


def build_firmware(
    settings: Settings,
    layout: BuildLayout,
    environ: Mapping[str, str],
    runner: Runner,
) -> dict[str, str]:
    env = load_edk_environment(layout.root, settings.anchor, environ)
    run_firmware_build(layout, env, runner)
    copy_artifacts(layout.artifacts)
    return env


def package_and_install(
    settings: Settings,
    layout: BuildLayout,
    env: Mapping[str, str],
    result: PipelineResult,
    runner: Runner,
    installer: Installer,
) -> None:
    reset_staging(layout)
    result.old_version, result.new_version = bump_pkgver(layout.pkgbuild)

    makepkg_result = run_makepkg(layout, env, runner)
    result.package_built = makepkg_result.ok
    if not makepkg_result.ok and settings.strict_package:
        raise DudkToolError(f"makepkg failed with exit status {makepkg_result.exit_status}")
    # Without strict mode the install still runs, matching the old shell script.

    result.package_file = package_filename(settings.package_name, result.new_version)
    if settings.skip_install:
        info(f"Skipping install of {result.package_file}")
    else:
        install_package(
            layout,
            result.package_file,
            privilege_cmd=settings.privilege_cmd,
            env=env,
            installer=installer,
        )
        result.installed = True

    remove_staging_dir(layout)


def run_pipeline(
    settings: Settings,
    *,
    environ: Mapping[str, str] | None = None,
    runner: Runner = run_captured,
    installer: Installer = run_interactive,
    build: bool = True,
    package: bool = True,
) -> PipelineResult:
    """
    Run the workflow stages in order.

    `build=False` skips env loading, the EDK2 build, and the image copy.
    `package=False` stops right after the image copy.
    """
    set_debug(settings.debug)
    environ = dict(os.environ) if environ is None else dict(environ)

    layout = resolve_layout(settings)
    result = PipelineResult(layout=layout)

    env = environ
    if build:
        env = build_firmware(settings, layout, environ, runner)
    if package:
        package_and_install(settings, layout, env, result, runner, installer)

    info(END_MARKER)
    return result


def main() -> None:
    run_pipeline(load_settings())


def main_build_only() -> None:
    run_pipeline(load_settings(), package=False)


def main_package_only() -> None:
    run_pipeline(load_settings(), build=False)


if __name__ == "__main__":
    main()
