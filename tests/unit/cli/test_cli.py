"""Unit tests for the bookstore command-line interface."""

import pytest
from rich.console import Console
from typer.testing import CliRunner

from src.bookstore.runtime.context import with_context
from src.cli import app, catalog_commands

runner = CliRunner()


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    # Keep table rows on one line regardless of the runner terminal
    monkeypatch.setattr(catalog_commands, "console", Console(width=200))


@pytest.fixture
def cli_config(file_config):
    with with_context(file_config):
        yield file_config


class TestSeedCommand:
    """`bookstore seed`."""

    def test_seed_twice(self, cli_config):
        first = runner.invoke(app, ["seed"])
        second = runner.invoke(app, ["seed"])

        assert first.exit_code == 0, first.output
        assert "3 inserted, 0 already present" in first.output
        assert second.exit_code == 0, second.output
        assert "0 inserted, 3 already present" in second.output

    def test_seed_fails_when_store_is_unreachable(self, file_config, tmp_path):
        config = file_config.model_copy(deep=True)
        config.database.url = f"sqlite:///{tmp_path}/missing/dir/books.db"

        with with_context(config):
            result = runner.invoke(app, ["seed"])

        assert result.exit_code == 1
        assert "Seeding failed" in result.output

    def test_seed_fails_on_unknown_database_backend(self, file_config):
        config = file_config.model_copy(deep=True)
        config.database.url = "notadialect://bookstore/books"

        with with_context(config):
            result = runner.invoke(app, ["seed"])

        assert result.exit_code == 1
        assert "Seeding failed" in result.output
        assert "Cannot create a database engine" in result.output


class TestInitDbCommand:
    """`bookstore init-db`."""

    def test_creates_the_collection(self, cli_config, database_path):
        result = runner.invoke(app, ["init-db"])

        assert result.exit_code == 0, result.output
        assert database_path.exists()


class TestServicesCommand:
    """`bookstore services`."""

    def test_lists_profiles(self, cli_config):
        result = runner.invoke(app, ["services"])

        assert result.exit_code == 0, result.output
        for name in ("books-post", "books-get", "web-server", "data-seeder"):
            assert name in result.output
        assert "degrade" in result.output
        assert "fail_fast" in result.output


class TestServeCommand:
    """`bookstore serve`."""

    def test_unknown_service(self, cli_config):
        result = runner.invoke(app, ["serve", "books-patch"])

        assert result.exit_code == 2
        assert "Unknown service" in result.output

    def test_runs_uvicorn_with_configured_port(self, cli_config, monkeypatch):
        calls = {}

        def fake_run(application, host, port, access_log):
            calls.update(app=application, host=host, port=port)

        monkeypatch.setattr("uvicorn.run", fake_run)

        result = runner.invoke(app, ["serve", "books-get", "--port", "9001"])

        assert result.exit_code == 0, result.output
        assert calls["port"] == 9001
        assert calls["host"] == "0.0.0.0"
        assert calls["app"].title == "bookstore books-get"
