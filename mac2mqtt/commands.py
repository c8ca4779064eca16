"""Subprocess helpers shared by the macOS capability modules."""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - capability modules drive macOS CLI tools

_LOGGER = logging.getLogger("mac2mqtt.commands")

OSASCRIPT = "/usr/bin/osascript"


def command_output(args: list[str]) -> str | None:
    """Run a command and return its stdout without the trailing newline.

    Returns None when the command is missing or exits non-zero.
    """
    try:
        result = subprocess.run(  # nosec B603 - argument list, no shell
            args,
            capture_output=True,
            text=True,
            check=True,
        )
    except (subprocess.CalledProcessError, OSError) as exc:
        _LOGGER.debug("[commands] %s failed: %s", " ".join(args), exc)
        return None
    return result.stdout.removesuffix("\n")


def run_command(args: list[str]) -> bool:
    """Run a side-effecting command; failures are logged and reported as False."""
    try:
        subprocess.run(  # nosec B603 - argument list, no shell
            args,
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as exc:
        _LOGGER.warning("[commands] Error running command %s: exit code %s", args[0], exc.returncode)
        return False
    except OSError as exc:
        _LOGGER.warning("[commands] Error running command %s: %s", args[0], exc)
        return False
    return True


def osascript(script: str) -> str | None:
    return command_output([OSASCRIPT, "-e", script])


def run_osascript(script: str) -> bool:
    return run_command([OSASCRIPT, "-e", script])
