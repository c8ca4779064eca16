"""Topic namespace for a single host."""

from __future__ import annotations

from dataclasses import dataclass

from .utils import sanitize_host_id

TOPIC_ROOT = "mac2mqtt"

STATUS_ALIVE = "alive"
STATUS_VOLUME = "volume"
STATUS_MUTE = "mute"
STATUS_BRIGHTNESS = "brightness"
STATUS_BATTERY = "battery"

COMMAND_VOLUME = "volume"
COMMAND_BRIGHTNESS = "brightness"
COMMAND_MUTE = "mute"
COMMAND_SET = "set"
COMMAND_RUN_SHORTCUT = "runshortcut"


def resolve_host_id(raw_hostname: str) -> str:
    """Sanitize a raw hostname into the identifier used in topics.

    Raises ValueError when nothing usable is left after sanitizing.
    """
    host_id = sanitize_host_id(raw_hostname)
    if not host_id:
        raise ValueError(f"Hostname {raw_hostname!r} has no characters usable in a topic")
    return host_id


@dataclass(frozen=True)
class TopicNamespace:
    """Immutable ``mac2mqtt/<hostid>`` prefix plus topic builders."""

    host_id: str

    @classmethod
    def for_hostname(cls, raw_hostname: str) -> TopicNamespace:
        return cls(host_id=resolve_host_id(raw_hostname))

    @property
    def prefix(self) -> str:
        return f"{TOPIC_ROOT}/{self.host_id}"

    def status(self, kind: str) -> str:
        return f"{self.prefix}/status/{kind}"

    def command(self, kind: str) -> str:
        return f"{self.prefix}/command/{kind}"

    @property
    def alive(self) -> str:
        return self.status(STATUS_ALIVE)

    @property
    def command_filter(self) -> str:
        return f"{self.prefix}/command/#"

    def command_kind(self, topic: str) -> str | None:
        """Return the command suffix for a topic under this namespace, else None."""
        base = f"{self.prefix}/command/"
        if not topic.startswith(base):
            return None
        kind = topic[len(base) :]
        return kind or None
