from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

# --- Configuration ---
API_BASE = "https://financeradar.pages.dev/api/candidates"
FETCH_TOP = 500
PAGE_SIZE = 50
MAX_VISIBLE_PAGES = 10
HTTP_TIMEOUT = 15

CONFIG_DIR = os.path.expanduser("~/.config/radar")
CONFIG_PATH = os.path.join(CONFIG_DIR, "config.json")
STORE_PATH = os.path.join(CONFIG_DIR, "ifr_state_v3.json")
THEME_PATH = os.path.join(CONFIG_DIR, "ifr_theme_v3.json")

REQUEST_HEADERS = {
    "User-Agent": "radar-tui/0.1 (+https://financeradar.pages.dev)",
    "Accept": "application/json",
    "Cache-Control": "no-store",
}
RETRY_ATTEMPTS = 3
RETRY_BACKOFF = 0.3

DEFAULT_SETTINGS: Dict[str, Any] = {
    "api_base": API_BASE,
    "fetch_top": FETCH_TOP,
    "page_size": PAGE_SIZE,
    "max_visible_pages": MAX_VISIBLE_PAGES,
    "http_timeout": HTTP_TIMEOUT,
}

# --- Logging ---
logger = logging.getLogger("radar")


def setup_logging(debug: bool = False) -> Optional[str]:
    """Configure logging."""
    if not debug:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    ts = datetime.now().strftime("%Y%m%dT%H%M%S")
    pid = os.getpid()
    debug_path = f"/tmp/radar_debug_{ts}_{pid}.log"

    logging.basicConfig(
        level=logging.DEBUG,
        filename=debug_path,
        filemode="a",
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    logger.debug("Debug logging enabled to %s", debug_path)
    return debug_path


def read_json_slot(path: str) -> Tuple[Any, Optional[str]]:
    """Return ``(value, problem)`` for a JSON slot.

    ``value`` is None when the slot is absent or unreadable; ``problem``
    describes why an existing slot could not be decoded.
    """
    if not os.path.exists(path):
        return None, None
    try:
        with open(path, "r") as f:
            return json.load(f), None
    except (IOError, ValueError) as e:
        return None, f"unreadable JSON ({e})"


def write_json_slot(path: str, value: Any) -> bool:
    """Persist a value to a JSON slot. Returns False if the write failed."""
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w") as f:
            json.dump(value, f)
        return True
    except (IOError, OSError, TypeError) as e:
        logger.error("Failed to write %s: %s", path, e)
        return False


def load_config(path: str = CONFIG_PATH) -> Dict[str, Any]:
    """Load the main configuration file."""
    if not os.path.exists(path):
        logger.info("Config file not found at %s, using defaults.", path)
        return {}
    try:
        with open(path, "r") as f:
            config = json.load(f)
    except (IOError, json.JSONDecodeError) as e:
        logger.error("Failed to load config from %s: %s", path, e)
        return {}
    if not isinstance(config, dict):
        logger.error("Ignoring config in %s: expected an object", path)
        return {}
    logger.info("Loaded config from %s", path)
    return config


def save_config(config: Dict[str, Any], path: str = CONFIG_PATH) -> None:
    """Save the main configuration file."""
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            json.dump(config, f, indent=2)
        logger.info("Saved config to %s", path)
    except IOError as e:
        logger.error("Failed to save config to %s: %s", path, e)


def settings_from_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Merge user config over the defaults, dropping invalid values."""
    settings = dict(DEFAULT_SETTINGS)

    api_base = config.get("api_base")
    if isinstance(api_base, str) and api_base.strip():
        settings["api_base"] = api_base.strip()

    for key in ("fetch_top", "page_size", "max_visible_pages", "http_timeout"):
        if key not in config:
            continue
        value = config[key]
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            logger.warning(
                "Ignoring invalid %s=%r in config, using %r", key, value, settings[key]
            )
            continue
        settings[key] = value

    return settings
