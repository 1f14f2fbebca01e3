"""Shared constants for sheetbox."""

import os
from pathlib import Path


HOME_DIR = Path.home() / ".sheetbox"
LOG_DIR = HOME_DIR / "logs"
MACHINES_DIR = HOME_DIR / "machines"
MACHINE_FILE_ENV_VAR = "SHEETBOX_MACHINE_FILE"
MACHINE_FILE = Path(os.environ.get(MACHINE_FILE_ENV_VAR, MACHINES_DIR / "machine.json"))
DEFAULT_LOCALE = "en"
DATA_KEY = "Data"
METADATA_KEY = "Metadata"
SERVER_HOST = "127.0.0.1"
SERVER_PORT = 9890
LOG_LEVEL_ENV_VAR = "SHEETBOX_LOG_LEVEL"
