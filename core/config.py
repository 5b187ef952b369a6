# =============================================================================
# core/config.py  -  Runtime Configuration
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads the handful of settings the server needs from the environment.
#   A local .env file is loaded first (python-dotenv), so developers can keep
#   DOPPIO_API_KEY out of their shell profile.
#
# VARIABLES:
#   DOPPIO_API_URL       Backend base URL
#   DOPPIO_API_KEY       Sent as the X-API-Key header on every request
#   DOPPIO_CONFIG_DIR    Directory holding preferences.json
#   DOPPIO_HTTP_TIMEOUT  Per-request timeout in seconds
#   DOPPIO_LOG_LEVEL     Log level for the stderr logger
# =============================================================================

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_API_URL = "https://doppio-coffee-mcp.tomas-chudjak.workers.dev"
DEFAULT_TIMEOUT_SECONDS = 10.0
PREFERENCES_FILENAME = "preferences.json"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_log_level(name: str, default: str) -> str:
    raw = (os.getenv(name) or "").strip().upper()
    if isinstance(logging.getLevelName(raw), int):
        return raw
    return default


API_URL = os.getenv("DOPPIO_API_URL", DEFAULT_API_URL).strip() or DEFAULT_API_URL
API_KEY = os.getenv("DOPPIO_API_KEY", "").strip()
HTTP_TIMEOUT = _env_float("DOPPIO_HTTP_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)
LOG_LEVEL = _env_log_level("DOPPIO_LOG_LEVEL", "INFO")


def config_dir() -> Path:
    """Directory that holds the user's saved preferences.

    Read on every call so tests (and users) can point it elsewhere with
    DOPPIO_CONFIG_DIR without re-importing the module.
    """
    override = os.getenv("DOPPIO_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".doppio-coffee"


def preferences_path() -> Path:
    return config_dir() / PREFERENCES_FILENAME
