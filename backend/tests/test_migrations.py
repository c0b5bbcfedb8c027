"""
Product API Backend: Migration Tests
=====================================

What:  Runs the Alembic migrations against a throwaway SQLite file.
Why:   The migration and the Product model describe the same table and must
       not drift apart.
"""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from app.config import settings

ALEMBIC_DIR = Path(__file__).resolve().parent.parent / "alembic"


@pytest.fixture
def migration_db(tmp_path, monkeypatch):
    """Points the migration environment at a fresh SQLite file."""
    db_file = tmp_path / "migrations.db"
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{db_file}")
    config = Config()
    config.set_main_option("script_location", str(ALEMBIC_DIR))
    return config, create_engine(f"sqlite:///{db_file}")


def test_upgrade_creates_products_table(migration_db):
    config, engine = migration_db

    command.upgrade(config, "head")

    columns = {c["name"]: c for c in inspect(engine).get_columns("products")}
    assert set(columns) == {"id", "name", "price", "availability"}
    assert not columns["name"]["nullable"]
    assert inspect(engine).get_pk_constraint("products")["constrained_columns"] == ["id"]
    engine.dispose()


def test_downgrade_drops_products_table(migration_db):
    config, engine = migration_db

    command.upgrade(config, "head")
    command.downgrade(config, "base")

    assert "products" not in inspect(engine).get_table_names()
    engine.dispose()
