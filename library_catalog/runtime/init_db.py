"""Database initialization script."""

from library_catalog.core.services import DbManageService, DbSessionService
from library_catalog.runtime.context import get_config


def init_db() -> None:
    """Create all database tables for the configured database."""
    database_service = DbSessionService(get_config())
    try:
        DbManageService(database_service.engine).create_all()
    finally:
        database_service.dispose()


if __name__ == "__main__":
    init_db()
