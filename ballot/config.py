"""
BALLOT v1.0 - Configuration.
Shared settings and paths for the entire codebase.
"""

import getpass
import os
from pathlib import Path

# Base Paths
BALLOT_DIR = Path.home() / ".ballot"

# Database Configuration
DEFAULT_DB_PATH = BALLOT_DIR / "ballot.db"
DB_PATH = os.environ.get("BALLOT_DB", str(DEFAULT_DB_PATH))

# BALLOT_STORAGE: "sqlite" (default) | "memory"
STORAGE_MODE = os.environ.get("BALLOT_STORAGE", "sqlite")

# Caller identity used by the CLI when --as is not given
DEFAULT_CALLER = os.environ.get("BALLOT_CALLER", "")

# Security Configuration
ALLOWED_ORIGINS = os.environ.get(
    "BALLOT_ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173"
).split(",")

LOG_LEVEL = os.environ.get("BALLOT_LOG_LEVEL", "INFO").upper()


def default_caller() -> str:
    """Caller identity for host bindings that have no other source."""
    if DEFAULT_CALLER:
        return DEFAULT_CALLER
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "anonymous"


def reload() -> None:
    """Re-read every setting from the environment."""
    global DB_PATH, STORAGE_MODE, DEFAULT_CALLER, ALLOWED_ORIGINS, LOG_LEVEL

    DB_PATH = os.environ.get("BALLOT_DB", str(DEFAULT_DB_PATH))
    STORAGE_MODE = os.environ.get("BALLOT_STORAGE", "sqlite")
    DEFAULT_CALLER = os.environ.get("BALLOT_CALLER", "")
    ALLOWED_ORIGINS = os.environ.get(
        "BALLOT_ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173"
    ).split(",")
    LOG_LEVEL = os.environ.get("BALLOT_LOG_LEVEL", "INFO").upper()
