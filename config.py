"""
config.py - Where the time tracker keeps its files

Everything lives in one folder under the user's home directory. The
folder is not created here; the store makes it the first time it saves.
"""

from pathlib import Path

# Use a dedicated folder in the user's local data directory
DATA_DIR = Path.home() / ".local" / "share" / "asstime"
DATA_FILE = DATA_DIR / "times.json"

# Log files go in a folder next to whichever data file is in use
LOG_DIR_NAME = "logs"
LOG_FILE_NAME = "asstime.log"
LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 3


def log_dir_for(data_file: Path) -> Path:
    """Folder that holds the logs for a given data file."""
    return data_file.parent / LOG_DIR_NAME
