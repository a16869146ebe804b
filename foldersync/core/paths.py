"""
Centralized path management for Folder Sync.

Statistics and logs are kept relative to the working directory, so every
session started from the same directory shares one statistics file.

Directory structure:
    ./tmp/estatisticas_copias.properties  - Cross-run statistics (ETA estimation)
    ./tmp/logs/                           - Session logs (when --log auto is used)
    ./foldersync.json                     - Default job settings file
"""

from datetime import datetime
from pathlib import Path

# Directory (relative to the working directory) for runtime data
DATA_DIR_NAME = "tmp"

# File name kept for compatibility with statistics written by earlier releases
STATS_FILE_NAME = "estatisticas_copias.properties"

SETTINGS_FILE_NAME = "foldersync.json"


def get_data_dir() -> Path:
    """Get the runtime data directory (not created here, writers create it on save)."""
    return Path(DATA_DIR_NAME)


def get_stats_path() -> Path:
    """Get the shared statistics file path."""
    return get_data_dir() / STATS_FILE_NAME


def get_settings_path() -> Path:
    """Get the default job settings file path."""
    return Path(SETTINGS_FILE_NAME)


def get_log_path() -> Path:
    """Get a fresh, timestamped log file path under tmp/logs/."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return get_data_dir() / "logs" / f"sync_{stamp}.log"
