from __future__ import annotations

from sqlalchemy import create_engine, inspect

import infra.db.models  # noqa: F401
from infra.db.base import Base
from infra.migrate import run_migrations


def test_migrations_create_every_mapped_table(tmp_path):
    db_url = f"sqlite:///{tmp_path / 'job_costing.db'}"

    run_migrations(db_url)

    engine = create_engine(db_url, future=True)
    try:
        tables = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    assert set(Base.metadata.tables) <= tables
    assert "alembic_version" in tables


def test_migrations_are_idempotent(tmp_path):
    db_url = f"sqlite:///{tmp_path / 'job_costing.db'}"

    run_migrations(db_url)
    run_migrations(db_url)
