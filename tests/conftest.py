"""Shared test fixtures for the mac2mqtt test suite.

This module provides reusable fixtures for:
- Logger mocking
- A recording capability provider (no OS calls)
- A recording bus that captures publishes and subscriptions
- Configuration objects
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any
from unittest.mock import Mock

import pytest
from mac2mqtt.capabilities import PowerAction
from mac2mqtt.config import AgentConfig, IntervalConfig, MqttConfig
from mac2mqtt.topics import TopicNamespace

# ============================================================================
# Logging Fixtures
# ============================================================================


@pytest.fixture
def mock_logger():
    """Mock logger restricted to real logging.Logger methods."""
    return Mock(spec=logging.Logger)


# ============================================================================
# Fakes
# ============================================================================


class FakeCapabilities:
    """CapabilityProvider that records calls and returns canned readings."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.volume: int | None = 40
        self.muted: bool | None = False
        self.brightness: int | None = 75
        self.battery = "88"
        self.action_result = True
        self._lock = threading.Lock()

    def _record(self, *call: Any) -> None:
        with self._lock:
            self.calls.append(call)

    def get_volume(self) -> int | None:
        self._record("get_volume")
        return self.volume

    def set_volume(self, percent: int) -> bool:
        self._record("set_volume", percent)
        self.volume = percent
        return self.action_result

    def get_mute(self) -> bool | None:
        self._record("get_mute")
        return self.muted

    def set_mute(self, muted: bool) -> bool:
        self._record("set_mute", muted)
        self.muted = muted
        return self.action_result

    def get_brightness(self) -> int | None:
        self._record("get_brightness")
        return self.brightness

    def set_brightness(self, percent: int) -> bool:
        self._record("set_brightness", percent)
        self.brightness = percent
        return self.action_result

    def get_battery(self) -> str:
        self._record("get_battery")
        return self.battery

    def perform(self, action: PowerAction) -> bool:
        self._record("perform", action)
        return self.action_result

    def run_shortcut(self, name: str) -> bool:
        self._record("run_shortcut", name)
        return self.action_result

    def mutations(self) -> list[tuple[Any, ...]]:
        """Calls other than reads."""
        return [call for call in self.calls if not call[0].startswith("get_")]


class FakeBus:
    """Bus double: records publishes/subscriptions and replays connect listeners."""

    def __init__(self) -> None:
        self.published: list[tuple[str, str, bool]] = []
        self.subscriptions: list[tuple[str, Any]] = []
        self.events: list[tuple[str, ...]] = []
        self.publish_result = True
        self.connect_listeners: list[Callable[[], None]] = []
        self.connected = False
        self.disconnected = False
        self._lock = threading.Lock()

    def add_connect_listener(self, listener: Callable[[], None]) -> None:
        self.connect_listeners.append(listener)

    def connect(self) -> None:
        self.connected = True
        self.simulate_connect()

    def simulate_connect(self) -> None:
        for listener in self.connect_listeners:
            listener()

    def disconnect(self) -> None:
        self.disconnected = True

    def publish(self, topic: str, payload: str, retain: bool = False, qos: int = 0) -> bool:
        with self._lock:
            self.published.append((topic, payload, retain))
            self.events.append(("publish", topic, payload))
        return self.publish_result

    def subscribe(self, topic: str, handler: Any) -> bool:
        with self._lock:
            self.subscriptions.append((topic, handler))
            self.events.append(("subscribe", topic))
        return True

    def payloads_for(self, topic: str) -> list[str]:
        return [payload for published_topic, payload, _retain in self.published if published_topic == topic]


@pytest.fixture
def capabilities():
    return FakeCapabilities()


@pytest.fixture
def bus():
    return FakeBus()


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def topics():
    return TopicNamespace(host_id="testmac")


@pytest.fixture
def mqtt_config():
    """Basic MQTT configuration for testing."""
    return MqttConfig(
        host="localhost",
        port=1883,
        username="user",
        password="secret",
        tls_enabled=False,
        ca_cert=None,
        cert=None,
        key=None,
        keepalive=60,
    )


@pytest.fixture
def agent_config(mqtt_config, topics):
    return AgentConfig(
        hostname="testmac",
        topics=topics,
        mqtt=mqtt_config,
        intervals=IntervalConfig(alive=60, volume=60, battery=60, brightness=60),
    )
