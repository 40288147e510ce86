#!/usr/bin/env python3
"""Platform path helpers for datepad."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

APP_NAME = "datepad"
DATA_FILENAME = "calendar.json"

logger = logging.getLogger(__name__)


def xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", "~/.config")).expanduser()


def user_data_dir() -> Optional[Path]:
    """Per-application data directory, or None if the platform gives no hint."""
    if sys.platform.startswith("win"):
        appdata = os.environ.get("APPDATA")
        return Path(appdata) / APP_NAME if appdata else None
    try:
        home = Path.home()
    except RuntimeError:
        home = None
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / APP_NAME if home else None
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data).expanduser() / APP_NAME
    return home / ".local" / "share" / APP_NAME if home else None


def default_data_path() -> Path:
    data_dir = user_data_dir()
    if data_dir is None:
        logger.warning("No data directory for this platform, using %s", Path.cwd())
        data_dir = Path.cwd()
    return data_dir / DATA_FILENAME


__all__ = [
    "APP_NAME",
    "DATA_FILENAME",
    "xdg_config_home",
    "user_data_dir",
    "default_data_path",
]
