"""Configuration loading for the mac2mqtt agent."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .topics import TopicNamespace
from .utils import parse_bool, parse_int

DEFAULT_CONFIG_FILE = "mac2mqtt.yaml"
DEFAULT_INTERVAL_SECONDS = 60
DEFAULT_KEEPALIVE_SECONDS = 60
MIN_INTERVAL_SECONDS = 1

# YAML key -> environment override
_ENV_OVERRIDES = {
    "mqtt_ip": "MQTT_HOST",
    "mqtt_port": "MQTT_PORT",
    "mqtt_user": "MQTT_USER",
    "mqtt_password": "MQTT_PASSWORD",
    "hostname": "MAC2MQTT_HOSTNAME",
}

REQUIRED_KEYS = ("mqtt_ip", "mqtt_port", "mqtt_user", "mqtt_password", "hostname")


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


def _strip_or_none(value: Any) -> str | None:
    if value is None:
        return None
    stripped = str(value).strip()
    return stripped or None


@dataclass(frozen=True)
class MqttConfig:
    host: str
    port: int
    username: str
    password: str
    tls_enabled: bool
    ca_cert: str | None
    cert: str | None
    key: str | None
    keepalive: int


@dataclass(frozen=True)
class IntervalConfig:
    alive: int
    volume: int
    battery: int
    brightness: int


@dataclass(frozen=True)
class AgentConfig:
    hostname: str
    topics: TopicNamespace
    mqtt: MqttConfig
    intervals: IntervalConfig

    @staticmethod
    def from_file(path: str | Path | None = None, env: Mapping[str, str] | None = None) -> AgentConfig:
        source_env = os.environ if env is None else env
        config_path = Path(path or source_env.get("MAC2MQTT_CONFIG") or DEFAULT_CONFIG_FILE)
        try:
            content = config_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"No config file provided ({config_path}: {exc.strerror or exc})") from exc
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Unable to parse {config_path.name}: {exc}") from exc
        if data is None:
            raise ConfigError(f"No data in config file {config_path.name}")
        if not isinstance(data, Mapping):
            raise ConfigError(f"Config file {config_path.name} must contain a mapping")
        return AgentConfig.from_mapping(data, env=source_env, source_name=config_path.name)

    @staticmethod
    def from_mapping(
        data: Mapping[str, Any],
        env: Mapping[str, str] | None = None,
        source_name: str = DEFAULT_CONFIG_FILE,
    ) -> AgentConfig:
        source_env = os.environ if env is None else env
        values: dict[str, Any] = dict(data)
        for key, env_name in _ENV_OVERRIDES.items():
            override = _strip_or_none(source_env.get(env_name))
            if override is not None:
                values[key] = override

        for key in REQUIRED_KEYS:
            if _strip_or_none(values.get(key)) is None:
                raise ConfigError(f"Must specify {key} in {source_name}")

        port = parse_int(_strip_or_none(values["mqtt_port"]), 0)
        if not 0 < port < 65536:
            raise ConfigError(f"mqtt_port in {source_name} must be a port number, got {values['mqtt_port']!r}")

        hostname = str(values["hostname"]).strip()
        try:
            topics = TopicNamespace.for_hostname(hostname)
        except ValueError as exc:
            raise ConfigError(f"Invalid hostname in {source_name}: {exc}") from exc

        mqtt = MqttConfig(
            host=str(values["mqtt_ip"]).strip(),
            port=port,
            username=str(values["mqtt_user"]).strip(),
            password=str(values["mqtt_password"]),
            tls_enabled=parse_bool(values.get("mqtt_tls")),
            ca_cert=_strip_or_none(values.get("mqtt_ca_cert")),
            cert=_strip_or_none(values.get("mqtt_cert")),
            key=_strip_or_none(values.get("mqtt_key")),
            keepalive=max(5, parse_int(values.get("mqtt_keepalive"), DEFAULT_KEEPALIVE_SECONDS)),
        )
        intervals = IntervalConfig(
            alive=_interval(values, "alive_interval"),
            volume=_interval(values, "volume_interval"),
            battery=_interval(values, "battery_interval"),
            brightness=_interval(values, "brightness_interval"),
        )
        return AgentConfig(hostname=hostname, topics=topics, mqtt=mqtt, intervals=intervals)


def _interval(values: Mapping[str, Any], key: str) -> int:
    return max(MIN_INTERVAL_SECONDS, parse_int(values.get(key), DEFAULT_INTERVAL_SECONDS))
