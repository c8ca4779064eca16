#!/usr/bin/env python3
"""Launch the mac2mqtt agent from a source checkout."""

from __future__ import annotations

import sys
from pathlib import Path

MODULE_ROOT = Path(__file__).resolve().parents[1]
if str(MODULE_ROOT) not in sys.path:
    sys.path.insert(0, str(MODULE_ROOT))

from mac2mqtt.agent import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
