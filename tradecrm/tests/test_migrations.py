"""Smoke tests for the Alembic migrations."""

from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from tradecrm.config import settings


def test_alembic_upgrade_creates_schema(tmp_path: Path, monkeypatch):
    db_path = tmp_path / "tradecrm_migrations.db"
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{db_path}")

    cfg = Config(str(settings.base_dir / "alembic.ini"))
    command.upgrade(cfg, "head")

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names())
        lead_columns = {c["name"] for c in inspector.get_columns("lead")}
    finally:
        engine.dispose()

    assert {"app_user", "trade_profile", "lead", "payment", "activity_log"} <= tables
    assert {"status", "priority", "urgency", "assigned_trade_id", "town"} <= lead_columns


def test_alembic_downgrade_drops_schema(tmp_path: Path, monkeypatch):
    db_path = tmp_path / "tradecrm_downgrade.db"
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{db_path}")

    cfg = Config(str(settings.base_dir / "alembic.ini"))
    command.upgrade(cfg, "head")
    command.downgrade(cfg, "base")

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        tables = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()

    assert "lead" not in tables
