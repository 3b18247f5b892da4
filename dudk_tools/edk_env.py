"""
Script: dudk_tools/edk_env.py
What: Makes sure the EDK2 build environment (`CONF_PATH`, `WORKSPACE`, ...) is available.
Doing: Checks the current env and, when needed, sources `edksetup.sh` in a child shell
       and reads back the resulting variables.
Why: `edksetup.sh` only works when sourced; running it in a child keeps our own
     process environment untouched.
Goal: Return one env mapping that later tool calls receive explicitly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from dudk_tools.common import DudkToolError, debug, info, require_env, run_cmd


SETUP_SCRIPT = "edksetup.sh"

# `edksetup.sh` prints progress on stdout, so send that to stderr and keep stdout
# for the NUL-separated env dump.
SOURCE_AND_DUMP = f". ./{SETUP_SCRIPT} 1>&2 && env -0"


def config_loaded(environ: Mapping[str, str], anchor: str) -> bool:
    """True when `CONF_PATH` is set and points inside the anchor checkout."""
    return anchor in environ.get("CONF_PATH", "")


def parse_env_dump(text: str) -> dict[str, str]:
    """Parse `env -0` output into a dict."""
    values: dict[str, str] = {}
    for record in text.split("\0"):
        if not record or "=" not in record:
            continue
        key, value = record.split("=", 1)
        values[key] = value
    return values


def load_edk_environment(
    root: Path,
    anchor: str,
    environ: Mapping[str, str],
) -> dict[str, str]:
    """
    Return the env that build tools should run with.

    If the EDK2 configuration is already loaded, this is just a copy of
    `environ`. Otherwise `edksetup.sh` is sourced from `root`.
    """
    if config_loaded(environ, anchor):
        debug("Configuration is already loaded")
        return dict(environ)

    info("Environment variables are missing or not configured properly, running command to load configuration")
    if not (root / SETUP_SCRIPT).is_file():
        raise DudkToolError(f"{SETUP_SCRIPT} not found in {root}")

    output = run_cmd(["bash", "-c", SOURCE_AND_DUMP], cwd=str(root), env=environ)
    loaded = parse_env_dump(output)
    # `build` cannot find its Conf/ files without this, so stop here rather than later.
    conf_path = require_env("CONF_PATH", loaded)

    debug(f"CONF_PATH is set to {conf_path}", "green")
    return loaded
