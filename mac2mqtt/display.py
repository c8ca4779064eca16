"""Display control utilities for macOS."""

from __future__ import annotations

import logging

from .commands import command_output, run_command

_LOGGER = logging.getLogger("mac2mqtt.display")

BRIGHTNESS_CLI = "brightness"


def parse_brightness_listing(output: str) -> int | None:
    """Extract a 0-100 brightness from ``brightness -l`` output.

    The tool prints lines such as ``display 0: brightness 0.500000``; the first
    value following a ``brightness`` token is used, scaled from 0-1 and truncated.
    """
    parts = output.split()
    for index, part in enumerate(parts):
        if part != "brightness" or index + 1 >= len(parts):
            continue
        try:
            level = float(parts[index + 1])
        except ValueError:
            _LOGGER.debug("[display] Error parsing brightness value %r", parts[index + 1])
            return None
        return max(0, min(100, int(level * 100)))
    return None


def get_current_brightness() -> int | None:
    """Get current screen brightness percentage.

    Returns:
        Brightness percentage (0-100) or None if unavailable.
    """
    output = command_output([BRIGHTNESS_CLI, "-l"])
    if output is None:
        return None
    return parse_brightness_listing(output)


def set_brightness(percent: int) -> bool:
    """Set screen brightness.

    Args:
        percent: Brightness percentage (0-100), will be clamped to valid range.

    Returns:
        True if successful, False otherwise.
    """
    percent = max(0, min(100, int(percent)))
    # the CLI takes a 0-1 fraction
    return run_command([BRIGHTNESS_CLI, f"{percent / 100:.2f}"])


def display_sleep() -> bool:
    return run_command(["pmset", "displaysleepnow"])


def display_wake() -> bool:
    # a one-second user-activity assertion wakes the display
    return run_command(["/usr/bin/caffeinate", "-u", "-t", "1"])
