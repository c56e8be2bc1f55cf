"""
Settings Module for Roster Scan

Provides persistent storage for service configuration using JSON.
Settings are stored in rosterscan.json in the working directory.
"""

import copy
import json
import logging
import tempfile
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("rosterscan.json")

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "icons_dir": "assets/icons",
    "cache_dir": str(Path(tempfile.gettempdir()) / "rosterscan" / "champion-cache"),
    "catalog_file": "champions.json",
    "ocr_engine": "easyocr",
    "ocr_languages": ["en"],
    "ocr_gpu": False,
    "ocr_fixtures_dir": "fixtures/ocr",
    "ocr_timeout_sec": 60.0,
    "download_timeout_sec": 15.0,
    "debug_enabled": False,
}


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load settings from a JSON file.

    Args:
        path: Settings file to read (defaults to SETTINGS_FILE)

    Returns:
        Settings dictionary. Returns defaults if file missing or invalid.
    """
    settings_file = Path(path) if path is not None else SETTINGS_FILE

    if not settings_file.exists():
        logger.debug(f"Settings file {settings_file} not found, using defaults")
        return copy.deepcopy(DEFAULT_SETTINGS)

    try:
        with open(settings_file, 'r', encoding='utf-8') as f:
            settings = json.load(f)

        if not isinstance(settings, dict):
            raise ValueError("settings root must be an object")

        # Merge with defaults to handle missing keys
        result = copy.deepcopy(DEFAULT_SETTINGS)
        result.update(settings)
        logger.debug(f"Settings loaded: {result}")
        return result

    except (json.JSONDecodeError, ValueError, IOError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return copy.deepcopy(DEFAULT_SETTINGS)


def save_settings(settings: Dict[str, Any], path: Optional[Path] = None) -> None:
    """
    Save settings to a JSON file.

    Args:
        settings: Settings dictionary to save
        path: Settings file to write (defaults to SETTINGS_FILE)
    """
    settings_file = Path(path) if path is not None else SETTINGS_FILE
    try:
        with open(settings_file, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2)
        logger.debug(f"Settings saved: {settings}")
    except IOError as e:
        logger.error(f"Failed to save settings: {e}")
