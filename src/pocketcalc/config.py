"""
Configuration & Path Management
===============================
Central registry for bundled resources and global constants.

Why is this file needed?
------------------------
1. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find the window icon when the app is frozen into an executable.
2. Environment: Logging verbosity can be changed without touching code via
   POCKETCALC_LOG_LEVEL and POCKETCALC_LOG_FILE.

Exports:
    ICON_PATH (str): Absolute path to the application icon.
    LOG_LEVEL (int): Level passed to `setup_logging`.
    LOG_FILE (str | None): Optional log file path.
"""
import logging
import os
import sys
from importlib.resources import files
from typing import Optional

ORG_ID = "pocketcalc"
APP_ID = "pocketcalc"
VISIBLE_APP_NAME = "Calc"

WINDOW_WIDTH = 200
WINDOW_HEIGHT = 300


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to a bundled resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, "resources", relative_path)

    return str(files("pocketcalc") / "resources" / relative_path)


def get_log_level(value: Optional[str]) -> int:
    """Translate a level name such as 'debug' into a logging level, defaulting to INFO."""
    if not value:
        return logging.INFO
    level = logging.getLevelName(value.strip().upper())
    if isinstance(level, int):
        return level
    return logging.INFO


ICON_PATH: str = get_resource_path("icon.svg")
LOG_LEVEL: int = get_log_level(os.environ.get("POCKETCALC_LOG_LEVEL"))
LOG_FILE: Optional[str] = os.environ.get("POCKETCALC_LOG_FILE") or None
