"""Tests for the database engine/session service and schema management."""

import pytest
from sqlalchemy import StaticPool, inspect
from sqlmodel import select

from library_catalog.core.services import DbManageService, DbSessionService
from library_catalog.entities.book import BookTable
from library_catalog.runtime.config.config_data import AppConfig, ConfigData, DatabaseConfig


def _config(url: str, environment: str = "test") -> ConfigData:
    return ConfigData(
        app=AppConfig(environment=environment),
        database=DatabaseConfig(url=url, environment_mode=environment),
    )


@pytest.fixture
def memory_service():
    service = DbSessionService(_config("sqlite://"))
    DbManageService(service.engine).create_all()
    yield service
    service.dispose()


class TestDbSessionService:
    def test_in_memory_sqlite_shares_one_connection(self, memory_service):
        """In-memory SQLite should use a StaticPool."""
        assert isinstance(memory_service.engine.pool, StaticPool)

    def test_file_sqlite_uses_regular_pool(self, tmp_path):
        """File-backed SQLite should keep the default pool."""
        service = DbSessionService(_config(f"sqlite:///{tmp_path / 'library.db'}"))
        try:
            assert not isinstance(service.engine.pool, StaticPool)
            assert service.health_check()
        finally:
            service.dispose()

    def test_sqlite_connect_args(self, memory_service):
        """SQLite should allow cross-thread use with a lock timeout."""
        args = memory_service._get_connect_args(_config("sqlite://"))

        assert args == {"check_same_thread": False, "timeout": 20}

    def test_postgres_connect_args(self, memory_service):
        """PostgreSQL should get an application name and connect timeout."""
        args = memory_service._get_connect_args(
            _config("postgresql://catalog@db/library", environment="production")
        )

        assert args == {"application_name": "production_library_catalog", "connect_timeout": 30}

    def test_health_check(self, memory_service):
        """Health check should pass on a reachable database."""
        assert memory_service.health_check() is True

    def test_health_check_failure(self, tmp_path):
        """Health check should fail when the database cannot be opened."""
        service = DbSessionService(_config(f"sqlite:///{tmp_path / 'missing' / 'library.db'}"))
        try:
            assert service.health_check() is False
        finally:
            service.dispose()

    def test_session_scope_commits(self, memory_service):
        """session_scope should commit on a clean exit."""
        with memory_service.session_scope() as session:
            session.add(BookTable(title="Dune", author="Frank Herbert"))

        with memory_service.session_scope() as session:
            titles = session.exec(select(BookTable.title)).all()

        assert titles == ["Dune"]

    def test_session_scope_rolls_back_on_error(self, memory_service):
        """session_scope should roll back and re-raise on error."""
        with pytest.raises(RuntimeError):
            with memory_service.session_scope() as session:
                session.add(BookTable(title="Dune", author="Frank Herbert"))
                session.flush()
                raise RuntimeError("abort")

        with memory_service.session_scope() as session:
            assert session.exec(select(BookTable)).all() == []


class TestDbManageService:
    def test_create_all_builds_books_table(self, memory_service):
        """create_all should build the books table with every column."""
        columns = {c["name"] for c in inspect(memory_service.engine).get_columns("books")}

        assert {"id", "title", "author", "genre", "year", "created_at", "updated_at"} <= columns

    def test_create_all_is_idempotent(self, memory_service):
        """create_all should be safe to run twice."""
        DbManageService(memory_service.engine).create_all()

        assert inspect(memory_service.engine).has_table("books")
