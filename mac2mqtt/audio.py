"""Audio control for macOS via AppleScript volume settings."""

from __future__ import annotations

import logging

from .commands import osascript, run_osascript
from .utils import format_bool, parse_bool_literal

_LOGGER = logging.getLogger("mac2mqtt.audio")


def get_current_volume() -> int | None:
    """Get the output volume percentage (0-100), or None if unavailable."""
    output = osascript("output volume of (get volume settings)")
    if output is None:
        return None
    try:
        return int(output.strip())
    except ValueError:
        # "missing value" is reported for outputs without volume control
        _LOGGER.debug("[audio] Unexpected volume output: %r", output)
        return None


def set_volume(percent: int) -> bool:
    """Set output volume.

    Args:
        percent: Volume percentage, clamped to 0-100.

    Returns:
        True if osascript succeeded, False otherwise.
    """
    percent = max(0, min(100, int(percent)))
    return run_osascript(f"set volume output volume {percent}")


def get_mute_status() -> bool | None:
    """Get whether output is muted, or None if unavailable."""
    output = osascript("output muted of (get volume settings)")
    if output is None:
        return None
    muted = parse_bool_literal(output)
    if muted is None:
        _LOGGER.debug("[audio] Unexpected mute output: %r", output)
    return muted


def set_mute(muted: bool) -> bool:
    return run_osascript(f"set volume output muted {format_bool(muted)}")
