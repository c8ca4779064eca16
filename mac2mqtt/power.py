"""
Power and session actions for macOS

Provides:
- Battery charge: parsed from ``pmset -g batt``, falling back to psutil
- Sleep, shutdown and screensaver actions
- Running a named Shortcuts action
"""

from __future__ import annotations

import logging
import os
import re

import psutil

from .commands import command_output, run_command, run_osascript

_LOGGER = logging.getLogger("mac2mqtt.power")

_BATTERY_PERCENT = re.compile(r"(\d+)%")


def parse_battery_percent(output: str) -> str:
    """Return the first ``NN%`` figure from pmset output as ``"NN"``, else ``""``.

    Example input::

        Now drawing from 'Battery Power'
         -InternalBattery-0 (id=4653155)        100%; discharging; 20:00 remaining present: true
    """
    match = _BATTERY_PERCENT.search(output)
    if not match:
        return ""
    return match.group(1)


def get_battery_charge_percent() -> str:
    """Get the battery charge as a digits-only string; empty when unknown."""
    output = command_output(["/usr/bin/pmset", "-g", "batt"])
    if output is not None:
        return parse_battery_percent(output)
    try:
        battery = psutil.sensors_battery()
    except (AttributeError, NotImplementedError, OSError) as exc:
        _LOGGER.debug("[power] psutil battery probe failed: %s", exc)
        return ""
    if battery is None:
        return ""
    return str(int(battery.percent))


def sleep() -> bool:
    return run_command(["pmset", "sleepnow"])


def shutdown() -> bool:
    """Shut the machine down.

    As root ``shutdown -h now`` always succeeds; an ordinary user goes through
    System Events, which may be refused while other users are logged in.
    """
    if os.getuid() == 0:
        return run_command(["shutdown", "-h", "now"])
    return run_osascript('tell app "System Events" to shut down')


def start_screensaver() -> bool:
    return run_command(["open", "-a", "ScreenSaverEngine"])


def run_shortcut(name: str) -> bool:
    _LOGGER.info("[power] Running shortcut %r", name)
    return run_command(["shortcuts", "run", name])
