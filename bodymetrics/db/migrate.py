"""Programmatic Alembic runner applying pending migrations at startup."""

from __future__ import annotations

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, text

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def _alembic_config(url: str) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.set_main_option("sqlalchemy.url", url)
    return cfg


def current_revision(db_path: str | Path) -> str | None:
    """Return the revision recorded in ``alembic_version``, if any."""
    engine = create_engine(f"sqlite:///{Path(db_path)}")
    try:
        with engine.connect() as conn:
            has_table = conn.execute(
                text("SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'alembic_version'")
            ).first()
            if has_table is None:
                return None
            return conn.execute(text("SELECT version_num FROM alembic_version")).scalar()
    finally:
        engine.dispose()


def run_migrations(db_path: str | Path) -> None:
    """Upgrade the database at ``db_path`` to the latest revision.

    Runs synchronously; call it through ``asyncio.to_thread`` from async code.
    A fresh file gets every migration, an up-to-date one gets none.
    """
    db_path = Path(db_path)
    before = current_revision(db_path)

    command.upgrade(_alembic_config(f"sqlite:///{db_path}"), "head")

    logger.info(
        "db.migrations_complete",
        extra={"from_revision": before, "to_revision": current_revision(db_path)},
    )
