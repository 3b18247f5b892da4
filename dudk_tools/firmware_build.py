"""
Script: dudk_tools/firmware_build.py
What: Builds OvmfPkg with the EDK2 `build` tool and copies the firmware images into the package tree.
Doing: Runs `build -a X64 -b RELEASE -t GCC ...`, then checks and copies `OVMF_CODE.fd` / `OVMF_VARS.fd`.
Why: The Arch package ships the freshly built images as `DUDK_CODE.fd` / `DUDK_VARS.fd`.
Goal: Leave the packaging tree holding firmware from this exact build.
"""

from __future__ import annotations

import shutil
from typing import Iterable, Mapping, Sequence

from dudk_tools.common import CommandResult, DudkToolError, Runner, debug, error, info, run_captured
from dudk_tools.paths import Artifact, BuildLayout


ARCH = "X64"
BUILD_TARGET = "RELEASE"
TOOLCHAIN = "GCC"
PLATFORM_DSC = "OvmfPkg/OvmfPkgX64.dsc"
DEFINES = ("LINUX_LOADER",)


def build_command(
    platform: str = PLATFORM_DSC,
    defines: Sequence[str] = DEFINES,
) -> list[str]:
    command = ["build", "-a", ARCH, "-b", BUILD_TARGET, "-t", TOOLCHAIN, "-p", platform]
    for define in defines:
        command.extend(["-D", define])
    return command


def run_firmware_build(
    layout: BuildLayout,
    env: Mapping[str, str],
    runner: Runner = run_captured,
) -> CommandResult:
    """Run the EDK2 build from the project root. A failed build stops the workflow."""
    info("Building OvmfPkg...")
    result = runner(build_command(), cwd=str(layout.root), env=env)
    if not result.ok:
        error("OvmfPkg compilation failed")
        # Dump the full build log; it is the only clue about what broke.
        print(result.output, end="" if result.output.endswith("\n") else "\n")
        raise DudkToolError(f"build exited with status {result.exit_status}")

    info("OvmfPkg compiled successfully")
    return result


def copy_artifacts(artifacts: Iterable[Artifact]) -> None:
    """
    Copy each compiled image over its packaged counterpart, in order.

    Stops at the first missing image. Images copied before that point stay copied.
    """
    for artifact in artifacts:
        if not artifact.compiled.is_file():
            raise DudkToolError(f"{artifact.name} image does not exist: {artifact.compiled}")
        debug(f"{artifact.name} image exists: {artifact.compiled}", "green")

        artifact.packaged.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(artifact.compiled, artifact.packaged)
        debug(f"{artifact.packaged} updated with newly built {artifact.compiled.name}", "green")
