#!/usr/bin/env python3
"""Configuration loading and path resolution for datepad."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from paths import APP_NAME, default_data_path, xdg_config_home
from persistence import DEFAULT_SAVE_INTERVAL


@dataclass
class Config:
    data_path: Path
    save_interval: float = DEFAULT_SAVE_INTERVAL
    log_level: str = "WARNING"


CONFIG_FILENAME = "config.json"
DEFAULT_LOG_LEVEL = "WARNING"

logger = logging.getLogger(__name__)


def config_path() -> Path:
    return xdg_config_home() / APP_NAME / CONFIG_FILENAME


def load_config(path: Optional[Path] = None) -> Config:
    """Load config from the XDG path, falling back to defaults.

    A missing file, invalid JSON or an out-of-range value falls back to the
    default for that setting; the config file never stops the app starting.
    """

    path = path or config_path()
    raw: Dict[str, Any] = {}

    if path.exists():
        try:
            raw_text = path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning("Cannot read %s: %s", path, exc)
            raw_text = ""
        if raw_text:
            try:
                raw = json.loads(raw_text)
            except json.JSONDecodeError:
                try:
                    raw = json.loads(_strip_trailing_commas(raw_text))
                except json.JSONDecodeError as exc:
                    logger.warning("Ignoring invalid config %s: %s", path, exc)
                    raw = {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring config %s: top level must be an object", path)
            raw = {}

    data_value = raw.get("data_path")
    data_path = Path(data_value).expanduser() if isinstance(data_value, str) and data_value else default_data_path()

    return Config(
        data_path=data_path,
        save_interval=_coerce_interval(raw.get("save_interval")),
        log_level=_coerce_level(raw.get("log_level")),
    )


def _coerce_interval(value: object) -> float:
    if value is None:
        return DEFAULT_SAVE_INTERVAL
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        logger.warning("Invalid save_interval %r, using %s", value, DEFAULT_SAVE_INTERVAL)
        return DEFAULT_SAVE_INTERVAL
    return float(value)


def _coerce_level(value: object) -> str:
    if value is None:
        return DEFAULT_LOG_LEVEL
    level = str(value).strip().upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        logger.warning("Invalid log_level %r, using %s", value, DEFAULT_LOG_LEVEL)
        return DEFAULT_LOG_LEVEL
    return level


def _strip_trailing_commas(text: str) -> str:
    """Remove trailing commas before closing braces/brackets."""
    return re.sub(r",(\s*[}\]])", r"\1", text)


__all__ = ["Config", "load_config", "config_path", "CONFIG_FILENAME"]
