"""Inbound command handling.

Routes ``<prefix>/command/<kind>`` messages to the capability provider and
refreshes the affected status topics before returning. Rejected payloads are
logged and otherwise ignored; no error is published back to the bus.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .capabilities import CapabilityProvider, PowerAction
from .publisher import StatusPublisher
from .topics import (
    COMMAND_BRIGHTNESS,
    COMMAND_MUTE,
    COMMAND_RUN_SHORTCUT,
    COMMAND_SET,
    COMMAND_VOLUME,
    TopicNamespace,
)
from .utils import parse_bool_literal, parse_percent

LOGGER = logging.getLogger(__name__)


class CommandDispatcher:
    def __init__(
        self,
        capabilities: CapabilityProvider,
        publisher: StatusPublisher,
        topics: TopicNamespace,
        logger: logging.Logger | None = None,
    ) -> None:
        self.capabilities = capabilities
        self.publisher = publisher
        self.topics = topics
        self.logger = logger or LOGGER
        self._handlers: dict[str, Callable[[str], None]] = {
            COMMAND_VOLUME: self.handle_volume,
            COMMAND_BRIGHTNESS: self.handle_brightness,
            COMMAND_MUTE: self.handle_mute,
            COMMAND_SET: self.handle_set,
            COMMAND_RUN_SHORTCUT: self.handle_run_shortcut,
        }

    @property
    def subscription(self) -> str:
        return self.topics.command_filter

    def on_message(self, topic: str, payload: str) -> None:
        self.logger.debug("[dispatch] Received message %r from topic %s", payload, topic)
        kind = self.topics.command_kind(topic)
        handler = self._handlers.get(kind) if kind else None
        if handler is None:
            self.logger.debug("[dispatch] No handler for topic %s", topic)
            return
        handler(payload)

    def handle_volume(self, payload: str) -> None:
        volume = parse_percent(payload)
        if volume is None:
            self.logger.warning("[dispatch] volume: incorrect value %r, expected 0-100", payload)
            return
        if not self.capabilities.set_volume(volume):
            self.logger.warning("[dispatch] volume: failed to set %s%%", volume)
        self.publisher.publish_volume_and_mute()

    def handle_brightness(self, payload: str) -> None:
        brightness = parse_percent(payload)
        if brightness is None:
            self.logger.warning("[dispatch] brightness: incorrect value %r, expected 0-100", payload)
            return
        if not self.capabilities.set_brightness(brightness):
            self.logger.warning("[dispatch] brightness: failed to set %s%%", brightness)
        self.publisher.publish_brightness()

    def handle_mute(self, payload: str) -> None:
        muted = parse_bool_literal(payload)
        if muted is None:
            self.logger.warning("[dispatch] mute: incorrect value %r, expected true/false", payload)
            return
        if not self.capabilities.set_mute(muted):
            self.logger.warning("[dispatch] mute: failed to set %s", muted)
        self.publisher.publish_volume_and_mute()

    def handle_set(self, payload: str) -> None:
        action = PowerAction.from_payload(payload)
        if action is PowerAction.UNRECOGNIZED:
            return
        self.logger.info("[dispatch] set: %s", action.value)
        if not self.capabilities.perform(action):
            self.logger.warning("[dispatch] set: %s failed", action.value)

    def handle_run_shortcut(self, payload: str) -> None:
        if not self.capabilities.run_shortcut(payload):
            self.logger.warning("[dispatch] runshortcut: %r failed", payload)
