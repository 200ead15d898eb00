# infra/path.py
from __future__ import annotations
import os
import sys
from pathlib import Path

APP_NAME = "JobCostingLite"
COMPANY_NAME = "TECHASH"


def user_data_dir() -> Path:
    """
    Per-user data directory holding the database and the logs:

    Windows:
        %APPDATA%\\TECHASH\\JobCostingLite

    macOS:
        ~/Library/Application Support/TECHASH/JobCostingLite

    Linux:
        $XDG_DATA_HOME/TECHASH/JobCostingLite (default ~/.local/share)
    """
    try:
        if sys.platform.startswith("win"):
            base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
        elif sys.platform == "darwin":
            base = Path.home() / "Library" / "Application Support"
        else:
            base = Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share"))

        path = base / COMPANY_NAME / APP_NAME
        path.mkdir(parents=True, exist_ok=True)
        return path
    except OSError:
        fallback = Path.home() / f".{APP_NAME}"
        fallback.mkdir(parents=True, exist_ok=True)
        return fallback


def default_db_path() -> Path:
    return user_data_dir() / "job_costing.db"


def default_db_url() -> str:
    """``JC_DB_URL`` wins; otherwise a SQLite file under the user data dir."""
    override = (os.getenv("JC_DB_URL") or "").strip()
    if override:
        return override
    return f"sqlite:///{default_db_path().as_posix()}"
