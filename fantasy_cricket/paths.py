"""Centralized path resolution for frozen (PyInstaller) and development modes."""

import os
import sys
from pathlib import Path

if getattr(sys, "frozen", False):
    BASE_DIR = Path(sys.executable).parent
else:
    BASE_DIR = Path(__file__).resolve().parent.parent

OUTPUT_DIR = BASE_DIR / "output"
DB_PATH = Path(os.environ.get("FANTASY_CRICKET_DB", OUTPUT_DIR / "fantasy.db"))
