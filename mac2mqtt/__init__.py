"""
mac2mqtt - host agent bridging macOS controls to MQTT

Publishes the machine's volume, mute, brightness, battery and liveness state to
``mac2mqtt/<hostid>/status/*`` and executes commands received on
``mac2mqtt/<hostid>/command/*``.

Core modules:
- topics: Host id sanitizing and topic namespace
- dispatcher: Inbound command routing and validation
- publisher: Status reads and publication
- scheduler: Periodic status refresh timers
- mqtt: paho-mqtt client wrapper with last will and reconnect hooks
- capabilities: OS capability provider (audio, display, power)
- agent: Process wiring and command-line entry point
"""

__version__ = "1.3.0"
