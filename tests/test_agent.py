"""Tests for agent wiring and the command-line entry point."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock, patch

import pytest
from mac2mqtt.agent import Mac2MqttAgent, main
from mac2mqtt.capabilities import PowerAction
from mac2mqtt.mqtt import BusConnectionError

PREFIX = "mac2mqtt/testmac"


@pytest.fixture
def agent(agent_config, capabilities, bus, mock_logger):
    instance = Mac2MqttAgent(agent_config, capabilities=capabilities, bus=bus, logger=mock_logger)
    yield instance
    instance.scheduler.stop(timeout=1)


def _handler(bus):
    topic, handler = bus.subscriptions[-1]
    assert topic == f"{PREFIX}/command/#"
    return handler


class TestStartup:
    def test_alive_then_subscribe_then_statuses(self, agent, bus):
        agent.start()
        assert bus.events[0] == ("publish", f"{PREFIX}/status/alive", "true")
        assert bus.events[1] == ("subscribe", f"{PREFIX}/command/#")
        published_kinds = [event[1].rsplit("/", 1)[1] for event in bus.events[2:]]
        assert published_kinds == ["volume", "mute", "battery", "brightness"]

    def test_every_status_published_before_commands(self, agent, bus):
        agent.start()
        kinds = {topic.rsplit("/", 1)[1] for topic, _payload, _retain in bus.published}
        assert kinds == {"alive", "volume", "mute", "battery", "brightness"}

    def test_alive_is_retained(self, agent, bus):
        agent.start()
        assert (f"{PREFIX}/status/alive", "true", True) in bus.published

    def test_scheduler_started(self, agent):
        agent.start()
        assert agent.scheduler.is_running()


class TestReconnect:
    def test_reconnect_reannounces_and_resubscribes(self, agent, bus):
        agent.start()
        bus.published.clear()
        bus.events.clear()

        bus.simulate_connect()

        assert bus.events[0] == ("publish", f"{PREFIX}/status/alive", "true")
        assert bus.events[1] == ("subscribe", f"{PREFIX}/command/#")
        assert len(bus.subscriptions) == 2


class TestCommandsThroughAgent:
    def test_volume_command(self, agent, bus, capabilities):
        agent.start()
        bus.published.clear()

        _handler(bus).on_message(f"{PREFIX}/command/volume", "25")

        assert ("set_volume", 25) in capabilities.calls
        assert bus.published == [
            (f"{PREFIX}/status/volume", "25", False),
            (f"{PREFIX}/status/mute", "false", True),
        ]

    def test_set_command(self, agent, bus, capabilities):
        agent.start()
        bus.published.clear()

        _handler(bus).on_message(f"{PREFIX}/command/set", "screensaver")

        assert ("perform", PowerAction.SCREENSAVER) in capabilities.calls
        assert bus.published == []


class TestStop:
    def test_stop_reports_offline_and_disconnects(self, agent, bus):
        agent.start()
        agent.stop()
        assert bus.published[-1] == (f"{PREFIX}/status/alive", "false", True)
        assert bus.disconnected is True
        assert not agent.scheduler.is_running()


def test_default_bus_uses_host_identity(agent_config, capabilities):
    with patch("mac2mqtt.agent.AgentMqtt") as mock_mqtt:
        Mac2MqttAgent(agent_config, capabilities=capabilities)
    kwargs = mock_mqtt.call_args[1]
    assert kwargs["client_id"] == "mac2mqtt-testmac"
    assert kwargs["will_topic"] == f"{PREFIX}/status/alive"


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------


def test_main_missing_config_exits_1(tmp_path: Path):
    assert main(["--config", str(tmp_path / "missing.yaml")]) == 1


def test_main_incomplete_config_exits_1(tmp_path: Path):
    path = tmp_path / "mac2mqtt.yaml"
    path.write_text("mqtt_ip: 10.0.0.1\n", encoding="utf-8")
    assert main(["--config", str(path)]) == 1


def _write_valid_config(tmp_path: Path) -> Path:
    path = tmp_path / "mac2mqtt.yaml"
    path.write_text(
        "mqtt_ip: 10.0.0.1\nmqtt_port: 1883\nmqtt_user: u\nmqtt_password: p\nhostname: testmac\n",
        encoding="utf-8",
    )
    return path


def test_main_bus_failure_exits_2(tmp_path: Path):
    path = _write_valid_config(tmp_path)
    with patch("mac2mqtt.agent.Mac2MqttAgent") as mock_agent_class:
        mock_agent_class.return_value.start.side_effect = BusConnectionError("refused")
        assert main(["--config", str(path)]) == 2


def test_main_runs_until_signalled(tmp_path: Path):
    path = _write_valid_config(tmp_path)
    stop_event = Mock()
    with (
        patch("mac2mqtt.agent.Mac2MqttAgent") as mock_agent_class,
        patch("mac2mqtt.agent.threading.Event", return_value=stop_event),
        patch("mac2mqtt.agent.signal.signal") as mock_signal,
    ):
        assert main(["--config", str(path), "--log-level", "debug"]) == 0

    agent = mock_agent_class.return_value
    agent.start.assert_called_once()
    stop_event.wait.assert_called_once()
    agent.stop.assert_called_once()
    assert mock_signal.call_count == 2
    config = mock_agent_class.call_args[0][0]
    assert config.topics.prefix == "mac2mqtt/testmac"
