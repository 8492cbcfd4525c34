"""Unit tests for the command line interface."""

import pytest
from typer.testing import CliRunner

from book_catalog import cli
from book_catalog.core.services import BookService

runner = CliRunner()


@pytest.fixture
def cli_database(monkeypatch, database_service):
    """Point every CLI command at the shared in-memory test database."""
    monkeypatch.setattr(cli, "get_database_service", lambda: database_service)
    return database_service


class TestResolveCover:
    def test_relative_path(self):
        result = runner.invoke(cli.app, ["resolve-cover", "/covers/a.jpg", "--base-url", "http://s/"])

        assert result.exit_code == 0
        assert result.stdout.strip() == "http://s/covers/a.jpg"

    def test_defaults_to_configured_base_url(self):
        result = runner.invoke(cli.app, ["resolve-cover", "a.jpg"])

        assert result.exit_code == 0
        assert result.stdout.strip() == "http://covers.test/a.jpg"

    def test_absolute_url_is_unchanged(self):
        result = runner.invoke(cli.app, ["resolve-cover", "https://img.example/x.jpg", "-b", "http://s"])

        assert result.stdout.strip() == "https://img.example/x.jpg"


class TestSeedCommand:
    def test_seed_empty_store(self, cli_database):
        result = runner.invoke(cli.app, ["seed"])

        assert result.exit_code == 0
        assert "Seeded 9 books" in result.stdout

    def test_seed_twice_fails(self, cli_database):
        runner.invoke(cli.app, ["seed"])

        result = runner.invoke(cli.app, ["seed"])

        assert result.exit_code == 1
        assert "Not seeding again" in result.stdout


class TestListCommand:
    def test_empty_store(self, cli_database):
        result = runner.invoke(cli.app, ["list"])

        assert result.exit_code == 0
        assert "No books found" in result.stdout

    def test_lists_stored_books(self, cli_database, book_data):
        with cli_database.session_scope() as session:
            BookService(session).create_book(book_data)

        result = runner.invoke(cli.app, ["list", "--resolve"])

        assert result.exit_code == 0
        assert "Found 1 books" in result.stdout


class TestInitDbCommand:
    def test_creates_tables(self):
        result = runner.invoke(cli.app, ["init-db"])

        assert result.exit_code == 0
        assert "Database initialized" in result.stdout

    def test_reset_can_be_cancelled(self):
        result = runner.invoke(cli.app, ["init-db", "--reset"], input="n\n")

        assert result.exit_code == 0
        assert "Reset cancelled" in result.stdout

    def test_forced_reset(self):
        result = runner.invoke(cli.app, ["init-db", "--reset", "--force"])

        assert result.exit_code == 0
        assert "Database initialized" in result.stdout
