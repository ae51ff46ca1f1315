"""
Default configuration. Every key can be overridden by the mapping passed to
``create_app`` or by a YAML/JSON file named in ``SHIFTROSTER_SETTINGS``.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

PACKAGE_DIR = Path(__file__).resolve().parent

SETTINGS_ENV_VAR = "SHIFTROSTER_SETTINGS"

DEFAULT_CONFIG: Dict[str, Any] = {
    "SECRET_KEY": os.environ.get("SECRET_KEY", "shift-secret"),
    # None means "<instance path>/shiftroster.sqlite"
    "DATABASE": None,
    # Create tables and seed an empty roster on startup
    "AUTO_INIT_DB": True,
    "SEED_PATH": str(PACKAGE_DIR / "seeds" / "roster.yaml"),
    "LOG_LEVEL": os.environ.get("LOG_LEVEL", "INFO"),
    "PERMANENT_SESSION_LIFETIME": 24 * 60 * 60,

    # Scheduling rules
    "MIN_DAILY_MANPOWER": 7,
    # OFF marks the weekly rest at which the employee hands over to the next shift
    "ROTATION_PATTERN": ["A", "OFF", "C", "OFF", "B"],
    # Sections working the fixed general shift (G) instead of the rotation
    "GENERAL_SHIFT_SECTIONS": ["GENERAL"],
}
