"""
Centralized configuration for Dayflow.

Deployment values live here, overridable via environment variables.
Tunables (tick intervals, badge window, channels) come from
~/.dayflow/config/dayflow.yaml via load_settings().

Usage:
    from dayflow.config import load_settings

    settings = load_settings()
    settings.background_interval_seconds  # 60
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from dayflow import paths

logger = logging.getLogger(__name__)

# ============================================================
# Google Calendar
# ============================================================

CALENDAR_API: str = os.environ.get("DAYFLOW_CALENDAR_API", "https://www.googleapis.com/calendar/v3")
"""Base URL of the Calendar v3 REST API."""

CALENDAR_ID: str = os.environ.get("DAYFLOW_CALENDAR_ID", "primary")
"""Calendar whose events make up the day."""

SCOPES: list[str] = ["https://www.googleapis.com/auth/calendar.readonly"]
"""OAuth scopes requested for the day fetch."""

CREDENTIALS_FILE: str = os.environ.get("DAYFLOW_CREDENTIALS", "")
"""Authorized-user or service-account JSON. Empty = ~/.dayflow/config/credentials.json."""

DELEGATED_USER: str = os.environ.get("DAYFLOW_DELEGATED_USER", "")
"""Subject to impersonate when CREDENTIALS_FILE is a service account."""

# ============================================================
# Logging
# ============================================================

LOG_LEVEL: str = os.environ.get("DAYFLOW_LOG_LEVEL", "INFO")

# ============================================================
# Tunables (defaults for dayflow.yaml)
# ============================================================

DEFAULTS: dict[str, Any] = {
    "interactive_interval_seconds": 30,
    "background_interval_seconds": 60,
    "badge_window_minutes": 15,
    "notify_lead_minutes": 5,
    "max_results": 20,
}


@dataclass
class Settings:
    """Runtime settings resolved from dayflow.yaml over DEFAULTS."""

    interactive_interval_seconds: int = DEFAULTS["interactive_interval_seconds"]
    background_interval_seconds: int = DEFAULTS["background_interval_seconds"]
    badge_window_minutes: int = DEFAULTS["badge_window_minutes"]
    notify_lead_minutes: int = DEFAULTS["notify_lead_minutes"]
    max_results: int = DEFAULTS["max_results"]
    calendar_id: str = CALENDAR_ID
    credentials_file: str = CREDENTIALS_FILE
    channels: dict[str, dict] = field(default_factory=lambda: {"log": {"enabled": True}})

    def credentials_path(self) -> Path:
        if self.credentials_file:
            return Path(self.credentials_file).expanduser()
        return paths.config_dir() / "credentials.json"


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load settings from YAML config.

    A missing file yields the defaults. Invalid values are logged and
    replaced by their default; unknown keys are ignored.

    Raises:
        yaml.YAMLError if the file is not valid YAML.
        ValueError if the top level is not a mapping.
    """
    config_path = Path(path) if path else paths.settings_path()
    if not config_path.exists():
        logger.debug(f"No settings file at {config_path}, using defaults")
        return Settings()

    with open(config_path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ValueError(f"{config_path.name} must contain a mapping at the top level")

    settings = Settings()

    for key, default in DEFAULTS.items():
        if key not in data:
            continue
        value = data[key]
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
            logger.warning(f"Invalid value for {key}: {value!r}, using {default}")
            continue
        setattr(settings, key, int(value))

    if isinstance(data.get("calendar_id"), str) and data["calendar_id"]:
        settings.calendar_id = data["calendar_id"]

    if isinstance(data.get("credentials_file"), str):
        settings.credentials_file = data["credentials_file"]

    channels = data.get("channels")
    if channels is not None:
        if isinstance(channels, dict):
            settings.channels = {
                name: cfg for name, cfg in channels.items() if isinstance(cfg, dict)
            }
        else:
            logger.warning("Skipping invalid channels section (expected a mapping)")

    return settings
