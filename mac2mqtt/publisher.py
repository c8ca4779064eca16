"""Status publication for the mac2mqtt agent.

Every publish reads the capability fresh; nothing is cached between calls.
"""

from __future__ import annotations

import logging
from typing import Protocol

from .capabilities import CapabilityProvider
from .topics import (
    STATUS_ALIVE,
    STATUS_BATTERY,
    STATUS_BRIGHTNESS,
    STATUS_MUTE,
    STATUS_VOLUME,
    TopicNamespace,
)
from .utils import format_bool

LOGGER = logging.getLogger(__name__)


class StatusSink(Protocol):
    def publish(self, topic: str, payload: str, retain: bool = False, qos: int = 0) -> bool: ...


class StatusPublisher:
    """Reads capability state and publishes it under ``<prefix>/status``."""

    def __init__(
        self,
        bus: StatusSink,
        capabilities: CapabilityProvider,
        topics: TopicNamespace,
        logger: logging.Logger | None = None,
    ) -> None:
        self.bus = bus
        self.capabilities = capabilities
        self.topics = topics
        self.logger = logger or LOGGER

    def publish_alive(self) -> bool:
        return self._publish(STATUS_ALIVE, "true", retain=True)

    def publish_volume(self) -> bool:
        volume = self.capabilities.get_volume()
        if volume is None:
            self.logger.warning("[status] Volume unavailable; skipping status/volume")
            return False
        return self._publish(STATUS_VOLUME, str(volume))

    def publish_mute(self) -> bool:
        muted = self.capabilities.get_mute()
        if muted is None:
            self.logger.warning("[status] Mute state unavailable; skipping status/mute")
            return False
        return self._publish(STATUS_MUTE, format_bool(muted), retain=True)

    def publish_volume_and_mute(self) -> None:
        self.publish_volume()
        self.publish_mute()

    def publish_brightness(self) -> bool:
        brightness = self.capabilities.get_brightness()
        if brightness is None:
            self.logger.warning("[status] Brightness unavailable; skipping status/brightness")
            return False
        return self._publish(STATUS_BRIGHTNESS, str(brightness))

    def publish_battery(self) -> bool:
        # an unreadable battery is published as an empty payload
        return self._publish(STATUS_BATTERY, self.capabilities.get_battery())

    def publish_all(self) -> None:
        self.publish_alive()
        self.publish_volume_and_mute()
        self.publish_battery()
        self.publish_brightness()

    def _publish(self, kind: str, payload: str, *, retain: bool = False) -> bool:
        topic = self.topics.status(kind)
        ok = self.bus.publish(topic, payload, retain=retain, qos=0)
        if not ok:
            self.logger.warning("[status] Publish of %s=%r was not confirmed", kind, payload)
        return ok
