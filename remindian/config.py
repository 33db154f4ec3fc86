"""
Configuration Management

Centralizes all configurable settings with environment variable overrides.
A .env file at the project root is loaded first.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent.parent / ".env")


def _get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


def get_env(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    """Get environment variable with optional default."""
    value = os.environ.get(key, default)
    if required and not value:
        raise ValueError(
            f"Required environment variable {key} is not set. "
            f"Set it with: export {key}='your-value'"
        )
    return value


# =============================================================================
# Apple Reminders Configuration
# =============================================================================

# Path to reminders-cli binary
REMINDERS_CLI_PATH = os.path.expanduser(
    get_env("REMINDERS_CLI_PATH", "~/.local/bin/reminders")
)

# Seconds to wait for a single reminders-cli call before giving up
REMINDERS_CLI_TIMEOUT = float(get_env("REMINDERS_CLI_TIMEOUT", "30"))


# =============================================================================
# Sync Configuration
# =============================================================================

# Reminder list used when none is given on the command line
DEFAULT_LIST = get_env("REMINDIAN_LIST", "remindian")


# =============================================================================
# Data Paths
# =============================================================================

# Project root for relative paths
PROJECT_ROOT = _get_project_root()

# Per-user data directory; the install location may be read-only
DATA_DIR = Path(os.path.expanduser(
    get_env("REMINDIAN_DATA_DIR", "~/.local/share/remindian")
))

# Audit log database path
SYNC_LOG_DB = Path(os.path.expanduser(
    get_env("SYNC_LOG_DB", str(DATA_DIR / "sync_log.db"))
))


# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL = get_env("REMINDIAN_LOG_LEVEL", "INFO").upper()


# =============================================================================
# Helper to print current configuration
# =============================================================================

def print_config():
    """Print current configuration (for debugging)."""
    print("Current Configuration:")
    print(f"  REMINDERS_CLI_PATH: {REMINDERS_CLI_PATH}")
    print(f"  REMINDERS_CLI_TIMEOUT: {REMINDERS_CLI_TIMEOUT}")
    print(f"  REMINDIAN_LIST: {DEFAULT_LIST}")
    print(f"  REMINDIAN_DATA_DIR: {DATA_DIR}")
    print(f"  SYNC_LOG_DB: {SYNC_LOG_DB}")
    print(f"  REMINDIAN_LOG_LEVEL: {LOG_LEVEL}")
