"""
Configuration management for the Dijkstra visualizer.

Handles persistent configuration including:
- Default animation speed (milliseconds per step)
- Initial edge mode (directed / undirected)
- Server port and log level

Config is stored in config.json next to the executable/project root.
Environment variables (PATHVIZ_*) take priority over the file.
"""

import json
import logging
import math
import os
from pathlib import Path
from typing import Optional

from src.paths import get_config_path

logger = logging.getLogger(__name__)

DEFAULT_SPEED_MS = 350
MIN_SPEED_MS = 50
MAX_SPEED_MS = 3000
SPEED_STEP_MS = 50

EDGE_MODE_DIRECTED = "directed"
EDGE_MODE_UNDIRECTED = "undirected"
EDGE_MODES = (EDGE_MODE_DIRECTED, EDGE_MODE_UNDIRECTED)

DEFAULT_PORT = 8081
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration from config.json."""
    config_path = config_path or get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable config file {config_path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}
    return {}


def clamp_speed(value) -> int:
    """
    Coerce a speed value to an int within [MIN_SPEED_MS, MAX_SPEED_MS].

    Unparseable values fall back to DEFAULT_SPEED_MS.
    """
    try:
        speed = float(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_SPEED_MS
    if isinstance(value, bool) or not math.isfinite(speed):
        return DEFAULT_SPEED_MS
    return int(max(MIN_SPEED_MS, min(MAX_SPEED_MS, round(speed))))


def _lookup(env_name: str, key: str, config: Optional[dict]):
    env_value = os.environ.get(env_name)
    if env_value:
        return env_value
    if config is None:
        config = load_config()
    return config.get(key)


def get_speed_ms(config: Optional[dict] = None) -> int:
    """
    Get the default animation speed.

    Priority:
    1. Environment variable PATHVIZ_SPEED_MS
    2. "speed_ms" in config.json
    3. DEFAULT_SPEED_MS
    """
    value = _lookup("PATHVIZ_SPEED_MS", "speed_ms", config)
    if value is None:
        return DEFAULT_SPEED_MS
    return clamp_speed(value)


def get_edge_mode(config: Optional[dict] = None) -> str:
    """Get the initial edge mode, defaulting to directed."""
    value = _lookup("PATHVIZ_EDGE_MODE", "edge_mode", config)
    mode = str(value or "").strip().lower()
    if mode in EDGE_MODES:
        return mode
    if mode:
        logger.warning(f"Unknown edge mode {value!r}, using {EDGE_MODE_DIRECTED}")
    return EDGE_MODE_DIRECTED


def get_port(config: Optional[dict] = None) -> int:
    value = _lookup("PATHVIZ_PORT", "port", config)
    try:
        port = int(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_PORT
    return port if 0 < port < 65536 else DEFAULT_PORT


def get_log_level(config: Optional[dict] = None) -> str:
    value = _lookup("PATHVIZ_LOG_LEVEL", "log_level", config)
    level = str(value or DEFAULT_LOG_LEVEL).strip().upper()
    if level not in LOG_LEVELS:
        return DEFAULT_LOG_LEVEL
    return level
