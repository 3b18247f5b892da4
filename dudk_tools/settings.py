"""
Script: dudk_tools/settings.py
What: Collects workflow settings from environment variables.
Doing: Reads `DUDK_*` variables once and returns a frozen `Settings` value.
Why: Later steps take settings as a parameter instead of reading env themselves.
Goal: One place that documents every knob the workflow understands.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dudk_tools.common import env_flag, optional_env


DEFAULT_ANCHOR = "DarwinUDK"
DEFAULT_PACKAGE_NAME = "DUDK-Firmware"


@dataclass(frozen=True)
class Settings:
    """Settings for one workflow run."""

    workdir: Path
    anchor: str = DEFAULT_ANCHOR
    debug: bool = True
    strict_package: bool = False
    skip_install: bool = False
    package_name: str = DEFAULT_PACKAGE_NAME
    privilege_cmd: str = "sudo"


def load_settings() -> Settings:
    # The original script always ran with debug output on, so keep that default.
    workdir = Path(optional_env("DUDK_WORKDIR") or os.getcwd())
    return Settings(
        workdir=workdir,
        anchor=optional_env("DUDK_ANCHOR") or DEFAULT_ANCHOR,
        debug=env_flag("DUDK_DEBUG", default=True),
        strict_package=env_flag("DUDK_STRICT_PACKAGE", default=False),
        skip_install=env_flag("DUDK_SKIP_INSTALL", default=False),
        package_name=optional_env("DUDK_PACKAGE_NAME") or DEFAULT_PACKAGE_NAME,
        # An empty value means "run pacman directly" (for example when already root).
        privilege_cmd=optional_env("DUDK_PRIVILEGE_CMD", "sudo").strip(),
    )
