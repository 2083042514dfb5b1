"""Tests for the library-catalog command line interface."""

from pathlib import Path

import pytest
from sqlmodel import select
from typer.testing import CliRunner

from library_catalog.cli import app
from library_catalog.cli.catalog_commands import load_seed_file
from library_catalog.core.services import DbSessionService
from library_catalog.entities.book import BookTable
from library_catalog.runtime.config.config_data import ConfigData, DatabaseConfig
from library_catalog.runtime.context import get_config, with_context

SAMPLE_BOOKS = Path(__file__).resolve().parents[3] / "data" / "books.yaml"

runner = CliRunner()


@pytest.fixture
def file_database(tmp_path):
    """Point the application config at a throwaway SQLite file."""
    with with_context(ConfigData(database=DatabaseConfig(url=f"sqlite:///{tmp_path / 'library.db'}"))):
        yield get_config()


def _stored_titles(config: ConfigData) -> list[str]:
    service = DbSessionService(config)
    try:
        with service.session_scope() as session:
            return sorted(session.exec(select(BookTable.title)).all())
    finally:
        service.dispose()


class TestInitDb:
    def test_creates_tables(self, file_database):
        """init-db should create the catalog tables."""
        result = runner.invoke(app, ["init-db"])

        assert result.exit_code == 0, result.output
        assert "Database tables created" in result.output
        assert _stored_titles(file_database) == []


class TestSeed:
    def test_seeds_sample_books(self, file_database):
        """seed should load the bundled sample books."""
        result = runner.invoke(app, ["seed", str(SAMPLE_BOOKS)])

        assert result.exit_code == 0, result.output
        assert "6 created, 0 skipped" in result.output
        assert "The Hobbit" in _stored_titles(file_database)

    def test_invalid_entries_are_skipped(self, file_database, tmp_path):
        """Entries failing validation should be skipped and counted."""
        seed_file = tmp_path / "books.yaml"
        seed_file.write_text(
            "- title: Dune\n"
            "  author: Frank Herbert\n"
            "- title: Nameless\n"
            "- title: Emma\n"
            "  author: Jane Austen\n"
            "  year: soon\n"
        )

        result = runner.invoke(app, ["seed", str(seed_file)])

        assert result.exit_code == 0, result.output
        assert "1 created, 2 skipped" in result.output
        assert _stored_titles(file_database) == ["Dune"]

    def test_unquoted_numbers_are_text(self, file_database, tmp_path):
        """YAML scalars like `title: 1984` should seed as titles, not be skipped."""
        seed_file = tmp_path / "books.yaml"
        seed_file.write_text("- title: 1984\n  author: George Orwell\n  year: 1949\n")

        result = runner.invoke(app, ["seed", str(seed_file)])

        assert result.exit_code == 0, result.output
        assert "1 created, 0 skipped" in result.output
        assert _stored_titles(file_database) == ["1984"]

    def test_malformed_file_fails(self, file_database, tmp_path):
        """A seed file that is not a list should exit with status 1."""
        seed_file = tmp_path / "books.yaml"
        seed_file.write_text("title: Dune\n")

        result = runner.invoke(app, ["seed", str(seed_file)])

        assert result.exit_code == 1
        assert "list of book mappings" in result.output

    def test_missing_file_is_rejected(self, tmp_path):
        """A missing seed file should be rejected by the argument parser."""
        result = runner.invoke(app, ["seed", str(tmp_path / "absent.yaml")])

        assert result.exit_code != 0


class TestLoadSeedFile:
    def test_empty_file(self, tmp_path):
        """An empty seed file should yield no entries."""
        seed_file = tmp_path / "books.yaml"
        seed_file.write_text("")

        assert load_seed_file(seed_file) == []

    def test_invalid_yaml(self, tmp_path):
        """Unparseable YAML should raise ValueError."""
        seed_file = tmp_path / "books.yaml"
        seed_file.write_text("- [unclosed\n")

        with pytest.raises(ValueError, match="Error parsing YAML"):
            load_seed_file(seed_file)


class TestServe:
    def test_runs_uvicorn_with_config_defaults(self, monkeypatch):
        """serve should run uvicorn with the configured host and port."""
        calls = []
        monkeypatch.setattr("uvicorn.run", lambda *args, **kwargs: calls.append((args, kwargs)))

        result = runner.invoke(app, ["serve"])

        assert result.exit_code == 0, result.output
        [(args, kwargs)] = calls
        assert args == ("library_catalog.api.http.app:app",)
        assert kwargs["host"] == get_config().app.host
        assert kwargs["port"] == get_config().app.port
        assert kwargs["reload"] is False

    def test_options_override_config(self, monkeypatch):
        """Command line options should override the configured values."""
        calls = []
        monkeypatch.setattr("uvicorn.run", lambda *args, **kwargs: calls.append(kwargs))

        result = runner.invoke(app, ["serve", "--host", "0.0.0.0", "--port", "9000", "--reload"])

        assert result.exit_code == 0, result.output
        assert calls == [
            {"host": "0.0.0.0", "port": 9000, "reload": True, "access_log": False}
        ]
