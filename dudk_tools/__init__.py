"""
Script: dudk_tools package
What: Holds the Python workflow helpers that replaced `buildArchPkg.sh`.
Doing: Groups CLI entrypoints and shared utility code in one importable package.
Why: Keeps the firmware build and packaging steps readable and testable.
Goal: Provide a clear home for building, packaging, and installing DarwinUDK firmware.
"""
