"""
Script: dudk_tools/pkgbuild.py
What: Reads and bumps `pkgver` in the Arch `PKGBUILD`.
Doing: Parses `pkgver=<major>.<minor>.<patch>`, increments the patch number, and rewrites the line.
Why: `makepkg` names the archive after `pkgver`, and the install step needs that exact name.
Goal: Every packaging run produces a new, strictly higher package version.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from dudk_tools.common import DudkToolError, info
from dudk_tools.paths import derive_layout
from dudk_tools.settings import load_settings


PKGVER_KEY = "pkgver"
VERSION_RE = re.compile(r"^([0-9]+)\.([0-9]+)\.([0-9]+)$")


@dataclass(frozen=True)
class PackageVersion:
    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> "PackageVersion":
        match = VERSION_RE.match(text.strip())
        if not match:
            raise DudkToolError(f"Unsupported {PKGVER_KEY} value '{text}', expected <major>.<minor>.<patch>")
        major, minor, patch = (int(part) for part in match.groups())
        return cls(major, minor, patch)

    def bump_patch(self) -> "PackageVersion":
        return PackageVersion(self.major, self.minor, self.patch + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def _is_pkgver_line(line: str) -> bool:
    return line.strip().startswith(f"{PKGVER_KEY}=")


def read_pkgver(pkgbuild: Path) -> str:
    """Return the raw `pkgver` value (text after `=`, whitespace stripped)."""
    for line in pkgbuild.read_text(encoding="utf-8").splitlines():
        if _is_pkgver_line(line):
            return "".join(line.split("=", 1)[1].split())
    raise DudkToolError(f"No {PKGVER_KEY}= line found in {pkgbuild}")


def write_pkgver(pkgbuild: Path, old_value: str, new: PackageVersion) -> None:
    """Replace `pkgver=<old_value>` with `pkgver=<new>`, keeping every other byte of the file."""
    text = pkgbuild.read_text(encoding="utf-8")
    lines = text.splitlines(keepends=True)
    old_line = f"{PKGVER_KEY}={old_value}"
    new_line = f"{PKGVER_KEY}={new}"

    changed = False
    for index, line in enumerate(lines):
        if _is_pkgver_line(line) and old_line in line:
            lines[index] = line.replace(old_line, new_line, 1)
            changed = True
            break
    if not changed:
        raise DudkToolError(f"Failed to update {PKGVER_KEY} variable in {pkgbuild}")

    try:
        pkgbuild.write_text("".join(lines), encoding="utf-8")
    except OSError as exc:
        raise DudkToolError(f"Failed to update {PKGVER_KEY} variable in {pkgbuild}: {exc}") from exc


def bump_pkgver(pkgbuild: Path) -> tuple[PackageVersion, PackageVersion]:
    """Increment the patch part of `pkgver` in place and return (old, new)."""
    if not pkgbuild.is_file():
        raise DudkToolError(f"PKGBUILD file does not exist in {pkgbuild.parent}")

    raw_value = read_pkgver(pkgbuild)
    current = PackageVersion.parse(raw_value)
    bumped = current.bump_patch()
    write_pkgver(pkgbuild, raw_value, bumped)

    info(f"Updated {PKGVER_KEY} variable in {pkgbuild} to {bumped}")
    return current, bumped


def main() -> None:
    settings = load_settings()
    layout = derive_layout(settings.workdir, settings.anchor)
    bump_pkgver(layout.pkgbuild)


if __name__ == "__main__":
    main()
