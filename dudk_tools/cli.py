from __future__ import annotations

import argparse
from collections.abc import Callable, Mapping

from dudk_tools.common import DudkToolError, error


def command_map() -> dict[str, Callable[[], None]]:
    """
    Map CLI command names to Python entry functions.

    Each value is a `main()`-style function from one workflow helper module.
    """
    from dudk_tools.build_and_install import main as build_and_install
    from dudk_tools.build_and_install import main_build_only as build_firmware
    from dudk_tools.build_and_install import main_package_only as package_and_install
    from dudk_tools.pkgbuild import main as bump_pkgver

    return {
        "build-and-install": build_and_install,
        "build-firmware": build_firmware,
        "bump-pkgver": bump_pkgver,
        "package-and-install": package_and_install,
    }


def build_parser(commands: Mapping[str, Callable[[], None]]) -> argparse.ArgumentParser:
    """Build argument parser with one positional command choice."""
    parser = argparse.ArgumentParser(
        prog="python3 -m dudk_tools.cli",
        description="Run one DarwinUDK firmware workflow command.",
        epilog="Settings are read from DUDK_* environment variables.",
    )
    parser.add_argument("command", choices=sorted(commands.keys()))
    return parser


def run_command(command: str, commands: Mapping[str, Callable[[], None]]) -> None:
    """
    Run one registered command.

    `commands` is passed in to keep this function easy to test.
    """
    commands[command]()


def main(argv: list[str] | None = None) -> None:
    # Build command registry once so parser and dispatcher use the same keys.
    commands = command_map()
    parser = build_parser(commands)
    args = parser.parse_args(argv)

    try:
        run_command(args.command, commands)
    except DudkToolError as exc:
        error(str(exc))
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
