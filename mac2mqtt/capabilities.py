"""Capability provider contract and the macOS implementation."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Protocol

from . import audio, display, power


class PowerAction(str, Enum):
    """Actions accepted on ``command/set``.

    ``UNRECOGNIZED`` stands for any other payload and maps to no action.
    """

    SLEEP = "sleep"
    DISPLAY_SLEEP = "displaysleep"
    DISPLAY_WAKE = "displaywake"
    SHUTDOWN = "shutdown"
    SCREENSAVER = "screensaver"
    UNRECOGNIZED = "<unrecognized>"

    @classmethod
    def from_payload(cls, payload: str) -> PowerAction:
        action = _ACTIONS_BY_NAME.get(payload)
        return action if action is not None else cls.UNRECOGNIZED


_ACTIONS_BY_NAME = {action.value: action for action in PowerAction if action is not PowerAction.UNRECOGNIZED}


class CapabilityProvider(Protocol):
    """OS-level reads and actions the bridge relies on.

    Reads return None when the value cannot be determined; actions return
    whether the underlying call succeeded. Implementations do not raise.
    """

    def get_volume(self) -> int | None: ...

    def set_volume(self, percent: int) -> bool: ...

    def get_mute(self) -> bool | None: ...

    def set_mute(self, muted: bool) -> bool: ...

    def get_brightness(self) -> int | None: ...

    def set_brightness(self, percent: int) -> bool: ...

    def get_battery(self) -> str: ...

    def perform(self, action: PowerAction) -> bool: ...

    def run_shortcut(self, name: str) -> bool: ...


class MacCapabilities:
    """CapabilityProvider backed by macOS command-line tools.

    Calls touching the same capability are serialized; distinct capabilities
    never wait on each other.
    """

    def __init__(self) -> None:
        self._volume_lock = threading.Lock()
        self._mute_lock = threading.Lock()
        self._brightness_lock = threading.Lock()
        self._battery_lock = threading.Lock()
        self._power_lock = threading.Lock()

    def get_volume(self) -> int | None:
        with self._volume_lock:
            return audio.get_current_volume()

    def set_volume(self, percent: int) -> bool:
        with self._volume_lock:
            return audio.set_volume(percent)

    def get_mute(self) -> bool | None:
        with self._mute_lock:
            return audio.get_mute_status()

    def set_mute(self, muted: bool) -> bool:
        with self._mute_lock:
            return audio.set_mute(muted)

    def get_brightness(self) -> int | None:
        with self._brightness_lock:
            return display.get_current_brightness()

    def set_brightness(self, percent: int) -> bool:
        with self._brightness_lock:
            return display.set_brightness(percent)

    def get_battery(self) -> str:
        with self._battery_lock:
            return power.get_battery_charge_percent()

    def perform(self, action: PowerAction) -> bool:
        handler = {
            PowerAction.SLEEP: power.sleep,
            PowerAction.DISPLAY_SLEEP: display.display_sleep,
            PowerAction.DISPLAY_WAKE: display.display_wake,
            PowerAction.SHUTDOWN: power.shutdown,
            PowerAction.SCREENSAVER: power.start_screensaver,
        }.get(action)
        if handler is None:
            return False
        with self._power_lock:
            return handler()

    def run_shortcut(self, name: str) -> bool:
        with self._power_lock:
            return power.run_shortcut(name)
