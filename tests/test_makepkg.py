"""
Script: tests/test_makepkg.py
What: Tests staging cleanup, packaging, and install helpers in `dudk_tools/makepkg.py`.
Doing: Uses a temporary packaging tree with fake makepkg/pacman runners.
Why: The install command must name the archive makepkg actually produced.
Goal: Keep package naming and failure reporting stable.
"""

from __future__ import annotations

import contextlib
import io
import tempfile
from pathlib import Path
from unittest import mock
import unittest

from dudk_tools.common import DudkToolError, set_debug
from dudk_tools.makepkg import (
    exit_status_hint,
    install_command,
    install_package,
    package_filename,
    remove_staging_dir,
    reset_staging,
    run_makepkg,
)
from dudk_tools.paths import derive_layout
from dudk_tools.pkgbuild import PackageVersion

from fakes import FakeInstaller, FakeRunner, make_checkout


class NamingTests(unittest.TestCase):
    def test_package_filename(self) -> None:
        self.assertEqual(
            package_filename("DUDK-Firmware", PackageVersion(1, 0, 8)),
            "DUDK-Firmware-1.0.8-1-x86_64.pkg.tar.zst",
        )

    def test_install_command_with_sudo(self) -> None:
        self.assertEqual(
            install_command("a.pkg.tar.zst"),
            ["sudo", "pacman", "-U", "a.pkg.tar.zst"],
        )

    def test_install_command_without_privilege_prefix(self) -> None:
        self.assertEqual(install_command("a.pkg.tar.zst", ""), ["pacman", "-U", "a.pkg.tar.zst"])

    def test_exit_status_hints(self) -> None:
        self.assertEqual(exit_status_hint(127), "Command not found (exit status 127)")
        self.assertEqual(exit_status_hint(126), "Permission denied (exit status 126)")
        self.assertEqual(exit_status_hint(4), "Unexpected exit status 4")


class StagingAndPackagingTests(unittest.TestCase):
    def setUp(self) -> None:
        set_debug(False)
        self.addCleanup(set_debug, True)
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = make_checkout(Path(self._tmp.name))
        self.layout = derive_layout(self.root, "DarwinUDK")

    def test_reset_staging_removes_leftover_pkg_dir(self) -> None:
        reset_staging(self.layout)
        self.assertFalse(self.layout.staging_dir.exists())
        # Second call with no staging dir is not an error.
        reset_staging(self.layout)

    def test_reset_staging_removal_failure_is_fatal(self) -> None:
        with mock.patch("dudk_tools.makepkg.shutil.rmtree", side_effect=OSError("busy")):
            with self.assertRaises(DudkToolError):
                reset_staging(self.layout)
        self.assertTrue(self.layout.staging_dir.exists())

    def test_cleanup_removal_failure_is_fatal(self) -> None:
        with mock.patch("dudk_tools.makepkg.shutil.rmtree", side_effect=PermissionError("denied")):
            with self.assertRaises(DudkToolError) as ctx:
                remove_staging_dir(self.layout)
        self.assertIn("Failed to remove 'pkg' folder", str(ctx.exception))

    def test_reset_staging_requires_packaging_root(self) -> None:
        layout = derive_layout(Path(self._tmp.name) / "elsewhere", "DarwinUDK")
        with self.assertRaises(DudkToolError):
            reset_staging(layout)

    def test_makepkg_failure_is_reported_not_raised(self) -> None:
        runner = FakeRunner({"makepkg": lambda args, cwd: ("==> ERROR: A failure occurred in package().\n", 4)})

        buffer = io.StringIO()
        with contextlib.redirect_stdout(buffer):
            result = run_makepkg(self.layout, {}, runner)

        self.assertFalse(result.ok)
        self.assertEqual(runner.calls, [(["makepkg", "-f"], str(self.layout.pkg_root))])
        printed = buffer.getvalue()
        self.assertIn("Error: Failed to build package", printed)
        self.assertIn("A failure occurred in package()", printed)
        self.assertIn("Unexpected exit status 4", printed)

    def test_install_failure_is_fatal(self) -> None:
        installer = FakeInstaller(exit_status=1)
        with contextlib.redirect_stdout(io.StringIO()):
            with self.assertRaises(DudkToolError):
                install_package(self.layout, "x.pkg.tar.zst", installer=installer)
        self.assertEqual(installer.calls, [["sudo", "pacman", "-U", "x.pkg.tar.zst"]])


if __name__ == "__main__":
    unittest.main()
