from __future__ import annotations

import logging
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config

from infra.operational_support import redact_text
from infra.path import default_db_url


logger = logging.getLogger(__name__)


def _app_dir() -> Path:
    """
    Directory holding the ``migration`` folder.
    - Frozen onefile builds unpack resources into sys._MEIPASS.
    - Frozen onedir builds keep them beside the executable.
    - In dev: the project root (infra -> project root).
    """
    if getattr(sys, "frozen", False):
        meipass = getattr(sys, "_MEIPASS", None)
        if meipass:
            return Path(meipass).resolve()
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


def _find_script_location(app_dir: Path) -> Path:
    candidates = [
        app_dir / "migration",
        app_dir / "_internal" / "migration",
        app_dir / "JobCostingLite" / "migration",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    raise RuntimeError(
        "Alembic script_location missing. Tried the following locations: "
        + ", ".join(str(p) for p in candidates)
    )


def run_migrations(db_url: str | None = None) -> None:
    """Upgrade the job-costing database to the latest revision."""
    url = db_url or default_db_url()
    script_location = _find_script_location(_app_dir())
    alembic_ini = script_location / "alembic.ini"
    if not alembic_ini.exists():
        raise RuntimeError(f"Alembic config missing: {alembic_ini}")

    cfg = Config(str(alembic_ini))
    cfg.set_main_option("script_location", str(script_location))
    cfg.set_main_option("sqlalchemy.url", url)

    logger.info("Running migrations against %s", redact_text(url))
    command.upgrade(cfg, "head")


__all__ = ["run_migrations"]
