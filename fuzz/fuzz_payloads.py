import sys

import atheris

with atheris.instrument_imports():
    from mac2mqtt.capabilities import PowerAction
    from mac2mqtt.display import parse_brightness_listing
    from mac2mqtt.power import parse_battery_percent
    from mac2mqtt.topics import TopicNamespace
    from mac2mqtt.utils import parse_bool_literal, parse_percent, sanitize_host_id


_TOPICS = TopicNamespace(host_id="fuzz")


def TestOneInput(data: bytes) -> None:
    """Fuzz command payload and tool output parsers with arbitrary input."""
    value = data.decode("utf-8", errors="ignore")

    # Command payload parsers never raise and stay in range
    percent = parse_percent(value)
    assert percent is None or 0 <= percent <= 100
    parse_bool_literal(value)
    PowerAction.from_payload(value)

    # Host ids only keep the topic-safe alphabet
    host_id = sanitize_host_id(value)
    assert all(ch.isascii() and (ch.isalnum() or ch in "_-") for ch in host_id)

    _TOPICS.command_kind(f"{_TOPICS.prefix}/command/{value}")

    # Tool output parsers
    battery = parse_battery_percent(value)
    assert battery == "" or battery.isdigit()
    brightness = parse_brightness_listing(value)
    assert brightness is None or 0 <= brightness <= 100


def main() -> None:
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
