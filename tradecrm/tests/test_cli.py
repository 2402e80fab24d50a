"""Tests for the tradecrm CLI."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from tradecrm.cli import app
from tradecrm.config import settings


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture
def migrated_db(tmp_path: Path, monkeypatch, cli_runner):
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")
    result = cli_runner.invoke(app, ["migrate"])
    assert result.exit_code == 0, result.output
    return tmp_path / "cli.db"


class TestCreateAdmin:
    """Tests for 'tradecrm create-admin'."""

    def test_creates_once(self, cli_runner, migrated_db):
        args = ["create-admin", "--email", "boss@crm.com", "--password", "pw12345"]

        result = cli_runner.invoke(app, args)
        assert result.exit_code == 0
        assert "created" in result.output

        result = cli_runner.invoke(app, args)
        assert result.exit_code == 0
        assert "already exists" in result.output


class TestReports:
    """Tests for read-only report commands."""

    def test_trades_empty(self, cli_runner, migrated_db):
        result = cli_runner.invoke(app, ["trades"])
        assert result.exit_code == 0
        assert "No trades yet" in result.output

    def test_dashboard(self, cli_runner, migrated_db):
        result = cli_runner.invoke(app, ["dashboard"])
        assert result.exit_code == 0
        assert "Leads:" in result.output

    def test_dashboard_bad_month(self, cli_runner, migrated_db):
        result = cli_runner.invoke(app, ["dashboard", "--month", "2026-13"])
        assert result.exit_code == 1
        assert "YYYY-MM" in result.output

    def test_dashboard_out_of_range_month(self, cli_runner, migrated_db):
        result = cli_runner.invoke(app, ["dashboard", "--month", "9999-12"])
        assert result.exit_code == 1
        assert "YYYY-MM" in result.output
