"""Process wiring and entry point for the mac2mqtt agent."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading

from . import __version__
from .capabilities import CapabilityProvider, MacCapabilities
from .config import AgentConfig, ConfigError
from .dispatcher import CommandDispatcher
from .mqtt import AgentMqtt, BusConnectionError
from .publisher import StatusPublisher
from .scheduler import StatusScheduler

LOGGER = logging.getLogger("mac2mqtt")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Mac2MqttAgent:
    """Connects the bus client, dispatcher, publisher and scheduler for one host."""

    def __init__(
        self,
        config: AgentConfig,
        capabilities: CapabilityProvider | None = None,
        bus: AgentMqtt | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.topics = config.topics
        self.logger = logger or LOGGER
        self.capabilities = capabilities or MacCapabilities()
        self.bus = bus or AgentMqtt(
            config.mqtt,
            client_id=f"mac2mqtt-{self.topics.host_id}",
            will_topic=self.topics.alive,
            logger=logging.getLogger("mac2mqtt.mqtt"),
        )
        self.publisher = StatusPublisher(self.bus, self.capabilities, self.topics)
        self.dispatcher = CommandDispatcher(self.capabilities, self.publisher, self.topics)
        self.scheduler = StatusScheduler.for_publisher(self.publisher, config.intervals)
        self.bus.add_connect_listener(self.on_connected)

    def on_connected(self) -> None:
        """Announce liveness, (re)subscribe to commands and refresh every status.

        Runs after the first connect and after every reconnect, before any
        command from the new session is handled.
        """
        self.logger.info("[agent] Sending 'true' to topic: %s", self.topics.alive)
        self.publisher.publish_alive()
        self.bus.subscribe(self.dispatcher.subscription, self.dispatcher)
        self.publisher.publish_volume_and_mute()
        self.publisher.publish_battery()
        self.publisher.publish_brightness()

    def start(self) -> None:
        self.bus.connect()
        self.scheduler.start()

    def stop(self) -> None:
        self.scheduler.stop()
        # a clean DISCONNECT suppresses the will, so report it ourselves
        self.bus.publish(self.topics.alive, "false", retain=True)
        self.bus.disconnect()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Bridge macOS volume, display and power controls to MQTT")
    parser.add_argument("--config", help="Path to mac2mqtt.yaml (defaults to $MAC2MQTT_CONFIG or ./mac2mqtt.yaml)")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format=LOG_FORMAT)

    LOGGER.info("[agent] Started mac2mqtt %s", __version__)
    try:
        config = AgentConfig.from_file(args.config)
    except ConfigError as exc:
        LOGGER.error("[agent] %s", exc)
        return 1

    agent = Mac2MqttAgent(config)
    try:
        agent.start()
    except BusConnectionError as exc:
        LOGGER.error("[agent] %s", exc)
        return 2

    stop_event = threading.Event()

    def _handle_signal(signum: int, _frame: object) -> None:
        LOGGER.info("[agent] Received signal %s, shutting down", signum)
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, _handle_signal)

    stop_event.wait()
    agent.stop()
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
