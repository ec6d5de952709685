"""Centralized path definitions for the Daily Word application.

All application paths hang off a single base directory, ``~/.dailyword`` by
default. Setting ``DAILYWORD_HOME`` moves the whole tree elsewhere.
"""

import os
from pathlib import Path

# Base application directory
DAILYWORD_DIR = Path(os.environ.get("DAILYWORD_HOME") or Path.home() / ".dailyword")

# Subdirectories
DATA_DIR = DAILYWORD_DIR / "data"
LOGS_DIR = DAILYWORD_DIR / "logs"

# Specific files
CONFIG_PATH = DAILYWORD_DIR / "config.json"
STORAGE_PATH = DATA_DIR / "storage.json"
