from __future__ import annotations

import os
from pathlib import Path

APP_ENV_HOME = "DAYFLOW_HOME"
APP_ENV_DB = "DAYFLOW_DB"


def app_home() -> Path:
    """
    User-writable home for Dayflow.
    Override with DAYFLOW_HOME.
    """
    if os.environ.get(APP_ENV_HOME):
        return Path(os.environ[APP_ENV_HOME]).expanduser().resolve()
    return (Path.home() / ".dayflow").resolve()


def config_dir() -> Path:
    d = app_home() / "config"
    d.mkdir(parents=True, exist_ok=True)
    return d


def data_dir() -> Path:
    d = app_home() / "data"
    d.mkdir(parents=True, exist_ok=True)
    return d


def db_path() -> Path:
    """
    Canonical store path.

    Resolution order:
    1. DAYFLOW_DB env var (explicit override)
    2. ~/.dayflow/data/dayflow.db (default)
    """
    if os.environ.get(APP_ENV_DB):
        return Path(os.environ[APP_ENV_DB]).expanduser().resolve()
    return data_dir() / "dayflow.db"


def settings_path() -> Path:
    """YAML settings file, ~/.dayflow/config/dayflow.yaml."""
    return config_dir() / "dayflow.yaml"


def badge_path() -> Path:
    """Status file the background daemon keeps the badge text in."""
    return data_dir() / "badge.txt"
