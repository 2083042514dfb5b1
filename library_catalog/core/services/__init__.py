from .catalog import BookCatalog, BookPage
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

__all__ = [
    "BookCatalog",
    "BookPage",
    "DbManageService",
    "DbSessionService",
]
