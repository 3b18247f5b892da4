"""
Script: dudk_tools/paths.py
What: Derives every filesystem path the workflow touches from one working directory.
Doing: Cuts the working directory at the anchor segment (`DarwinUDK`) and builds
       build-output, packaging, and staging paths under that root.
Why: Lets the helpers run from any subdirectory of the checkout.
Goal: Deterministic path layout for build and packaging steps.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


BUILD_SUBDIR = Path("Build/OvmfX64/RELEASE_GCC/FV")
PKG_ROOT_SUBDIR = Path("Package/Arch")
PKG_DEST_SUBDIR = PKG_ROOT_SUBDIR / "src/pkg/usr/share/DarwinUDK/x64"
STAGING_DIR_NAME = "pkg"
PKGBUILD_NAME = "PKGBUILD"

# (artifact name, compiled file name, packaged file name)
ARTIFACT_NAMES = (
    ("code", "OVMF_CODE.fd", "DUDK_CODE.fd"),
    ("vars", "OVMF_VARS.fd", "DUDK_VARS.fd"),
)


@dataclass(frozen=True)
class Artifact:
    """One firmware image: where the build puts it and where packaging expects it."""

    name: str
    compiled: Path
    packaged: Path


@dataclass(frozen=True)
class BuildLayout:
    root: Path
    build_dir: Path
    pkg_root: Path
    pkg_dir: Path
    artifacts: tuple[Artifact, ...]

    @property
    def staging_dir(self) -> Path:
        return self.pkg_root / STAGING_DIR_NAME

    @property
    def pkgbuild(self) -> Path:
        return self.pkg_root / PKGBUILD_NAME


def find_project_root(cwd: Path, anchor: str) -> Path:
    """
    Return `cwd` truncated right after the last path segment named `anchor`.

    Example: `/home/u/DarwinUDK/OvmfPkg/Include` becomes `/home/u/DarwinUDK`.
    When `anchor` is not a segment of `cwd`, `cwd` is returned unchanged and
    later existence checks report the problem.
    """
    parts = cwd.parts
    for index in range(len(parts) - 1, -1, -1):
        if parts[index] == anchor:
            return Path(*parts[: index + 1])
    return cwd


def derive_layout(cwd: Path, anchor: str) -> BuildLayout:
    root = find_project_root(cwd, anchor)
    build_dir = root / BUILD_SUBDIR
    pkg_root = root / PKG_ROOT_SUBDIR
    pkg_dir = root / PKG_DEST_SUBDIR
    artifacts = tuple(
        Artifact(name=name, compiled=build_dir / compiled, packaged=pkg_dir / packaged)
        for name, compiled, packaged in ARTIFACT_NAMES
    )
    return BuildLayout(
        root=root,
        build_dir=build_dir,
        pkg_root=pkg_root,
        pkg_dir=pkg_dir,
        artifacts=artifacts,
    )
