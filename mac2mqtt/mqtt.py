"""MQTT client wrapper for the agent.

Inbound messages and (re)connect notifications are handed from the paho
network thread to a single delivery thread, so handlers may block on
publish confirmations without stalling the network loop.
"""

from __future__ import annotations

import logging
import queue
import ssl
import threading
from collections.abc import Callable
from typing import Any, Protocol

import paho.mqtt.client as mqtt

from .config import MqttConfig

DEFAULT_CONNECT_TIMEOUT = 30.0
DEFAULT_PUBLISH_TIMEOUT = 10.0

ConnectListener = Callable[[], None]


class MessageHandler(Protocol):
    def on_message(self, topic: str, payload: str) -> None: ...


class BusConnectionError(Exception):
    """Raised when the initial broker connection cannot be established."""


class _Connected:
    pass


class _Stop:
    pass


_CONNECTED = _Connected()
_STOP = _Stop()


def _is_mqtt_success(reason_code: Any) -> bool:
    try:
        if hasattr(reason_code, "is_failure"):
            return not bool(reason_code.is_failure)
        candidate = reason_code.value if hasattr(reason_code, "value") else reason_code
        return int(candidate) == 0
    except (TypeError, ValueError):
        return False


class AgentMqtt:
    def __init__(
        self,
        config: MqttConfig,
        client_id: str,
        will_topic: str,
        logger: logging.Logger | None = None,
        *,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        publish_timeout: float = DEFAULT_PUBLISH_TIMEOUT,
    ) -> None:
        self.config = config
        self.client_id = client_id
        self.will_topic = will_topic
        self._logger = logger or logging.getLogger(__name__)
        self._connect_timeout = connect_timeout
        self._publish_timeout = publish_timeout
        self._client: mqtt.Client | None = None
        self._lock = threading.Lock()
        self._connect_listeners: list[ConnectListener] = []
        self._deliveries: queue.Queue[Any] = queue.Queue()
        self._worker: threading.Thread | None = None
        self._first_connack = threading.Event()
        self._first_connack_ok = False

    def add_connect_listener(self, listener: ConnectListener) -> None:
        """Run ``listener`` on the delivery thread after every successful (re)connect."""
        self._connect_listeners.append(listener)

    def connect(self) -> None:
        with self._lock:
            if self._client is not None:
                return
            client = mqtt.Client(
                callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
                client_id=self.client_id,
                clean_session=True,
            )
            client.username_pw_set(self.config.username, self.config.password)
            if self.config.tls_enabled:
                tls_kwargs: dict[str, object] = {}
                if self.config.ca_cert:
                    tls_kwargs["ca_certs"] = self.config.ca_cert
                if self.config.cert:
                    tls_kwargs["certfile"] = self.config.cert
                if self.config.key:
                    tls_kwargs["keyfile"] = self.config.key
                tls_kwargs["tls_version"] = ssl.PROTOCOL_TLS_CLIENT
                client.tls_set(**tls_kwargs)
            client.will_set(self.will_topic, payload="false", qos=0, retain=True)
            client.reconnect_delay_set(min_delay=1, max_delay=30)
            client.on_connect = self._on_connect
            client.on_disconnect = self._on_disconnect

            self._first_connack.clear()
            self._first_connack_ok = False
            self._start_worker()
            self._logger.info("[mqtt] Connecting to MQTT broker %s:%s", self.config.host, self.config.port)
            try:
                client.connect(self.config.host, self.config.port, keepalive=self.config.keepalive)
            except (OSError, ValueError) as exc:
                self._stop_worker()
                raise BusConnectionError(f"Failed to connect to {self.config.host}:{self.config.port}: {exc}") from exc
            client.loop_start()
            if not self._first_connack.wait(self._connect_timeout) or not self._first_connack_ok:
                client.loop_stop()
                client.disconnect()
                # a CONNACK racing the timeout may have set the client already
                self._client = None
                self._stop_worker()
                raise BusConnectionError(f"MQTT broker {self.config.host}:{self.config.port} did not accept the connection")
            self._client = client

    def disconnect(self) -> None:
        with self._lock:
            client = self._client
            self._client = None
        if client:
            client.disconnect()
            client.loop_stop()
        self._stop_worker()

    def is_connected(self) -> bool:
        client = self._client
        try:
            return bool(client and client.is_connected())
        except Exception:
            return False

    def publish(self, topic: str, payload: str, retain: bool = False, qos: int = 0) -> bool:
        """Publish and wait for the transport to confirm delivery at ``qos``.

        Failures are logged and reported as False; nothing is retried here.
        """
        client = self._client
        if not client:
            self._logger.warning("[mqtt] Not connected; dropping publish to %s", topic)
            return False
        try:
            info = client.publish(topic, payload=payload, qos=qos, retain=retain)
            if info.rc != mqtt.MQTT_ERR_SUCCESS:
                self._logger.warning("[mqtt] Failed to publish topic '%s' payload '%s' (rc=%s)", topic, payload, info.rc)
                return False
            info.wait_for_publish(timeout=self._publish_timeout)
        except (RuntimeError, ValueError) as exc:
            self._logger.warning("[mqtt] Failed to publish topic '%s': %s", topic, exc)
            return False
        if not info.is_published():
            self._logger.warning("[mqtt] Publish to '%s' was not confirmed within %.0fs", topic, self._publish_timeout)
            return False
        self._logger.debug("[mqtt] Published '%s' to %s (retain=%s)", payload, topic, retain)
        return True

    def subscribe(self, topic: str, handler: MessageHandler) -> bool:
        client = self._client
        if not client:
            raise RuntimeError("MQTT client is not connected")

        def _callback(_client, _userdata, message):  # type: ignore[no-untyped-def]
            try:
                payload = message.payload.decode("utf-8")
            except UnicodeDecodeError:
                self._logger.warning("[mqtt] Dropping non UTF-8 payload on %s: %r", message.topic, message.payload)
                return
            self._deliveries.put((message.topic, payload, handler))

        client.message_callback_add(topic, _callback)
        result, _mid = client.subscribe(topic, qos=0)
        if result != mqtt.MQTT_ERR_SUCCESS:
            self._logger.warning("[mqtt] Failed to subscribe to topic: %s (rc=%s)", topic, result)
            return False
        self._logger.info("[mqtt] Subscribed to %s", topic)
        return True

    # ------------------------------------------------------------------
    # paho callbacks (network thread)
    # ------------------------------------------------------------------

    def _on_connect(self, client, _userdata, _flags, reason_code, properties=None):  # type: ignore[no-untyped-def]
        if not _is_mqtt_success(reason_code):
            self._logger.warning("[mqtt] MQTT connection refused (reason=%s)", reason_code)
            if not self._first_connack.is_set():
                self._first_connack.set()
            return
        self._logger.info("[mqtt] Connected to MQTT (reason=%s)", reason_code)
        if not self._first_connack.is_set():
            # connect() stores the client after the first CONNACK; listeners need it
            self._client = client
            self._first_connack_ok = True
            self._first_connack.set()
        self._deliveries.put(_CONNECTED)

    def _on_disconnect(self, _client, _userdata, _flags, reason_code, properties=None):  # type: ignore[no-untyped-def]
        self._logger.warning("[mqtt] Disconnected from MQTT: %s", reason_code)

    # ------------------------------------------------------------------
    # delivery thread
    # ------------------------------------------------------------------

    def _start_worker(self) -> None:
        if self._worker and self._worker.is_alive():
            return
        self._deliveries = queue.Queue()
        worker = threading.Thread(target=self._delivery_loop, name="mac2mqtt-dispatch", daemon=True)
        self._worker = worker
        worker.start()

    def _stop_worker(self) -> None:
        worker = self._worker
        if not worker:
            return
        self._deliveries.put(_STOP)
        if worker is not threading.current_thread():
            worker.join(timeout=self._publish_timeout)
        self._worker = None

    def _delivery_loop(self) -> None:
        while True:
            item = self._deliveries.get()
            if item is _STOP:
                return
            if item is _CONNECTED:
                self._run_connect_listeners()
                continue
            topic, payload, handler = item
            try:
                handler.on_message(topic, payload)
            except Exception as exc:
                self._logger.error("[mqtt] Handler failed for topic '%s': %s", topic, exc, exc_info=True)

    def _run_connect_listeners(self) -> None:
        if self._client is None:
            return
        for listener in list(self._connect_listeners):
            try:
                listener()
            except Exception as exc:
                self._logger.error("[mqtt] Connect listener failed: %s", exc, exc_info=True)
