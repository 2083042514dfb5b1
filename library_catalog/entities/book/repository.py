"""Book repository: data access for the books table."""

from datetime import UTC, datetime

from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import Session, col, func, select

from library_catalog.entities.book.entity import Book
from library_catalog.entities.book.table import BookTable


class BookRepository:
    """Data-access layer for books."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, book: Book) -> Book:
        row = BookTable.model_validate(book.model_dump())
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Book.model_validate(row, from_attributes=True)

    def get(self, book_id: str) -> Book | None:
        row = self._session.get(BookTable, book_id)
        if row is None:
            return None
        return Book.model_validate(row, from_attributes=True)

    def update(self, book: Book) -> Book:
        row = self._session.get(BookTable, book.id)
        if row is None:
            raise ValueError(f"Book with id {book.id} not found")

        for name, value in book.form_values().items():
            setattr(row, name, value)
        row.updated_at = datetime.now(UTC)
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Book.model_validate(row, from_attributes=True)

    def delete(self, book_id: str) -> bool:
        row = self._session.get(BookTable, book_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def list_page(
        self,
        offset: int,
        limit: int,
        where: ColumnElement[bool] | None = None,
    ) -> list[Book]:
        """Books newest first, optionally filtered."""
        statement = select(BookTable)
        if where is not None:
            statement = statement.where(where)
        statement = (
            statement.order_by(col(BookTable.created_at).desc(), col(BookTable.id))
            .offset(offset)
            .limit(limit)
        )
        rows = self._session.exec(statement).all()
        return [Book.model_validate(row, from_attributes=True) for row in rows]

    def count(self, where: ColumnElement[bool] | None = None) -> int:
        statement = select(func.count()).select_from(BookTable)
        if where is not None:
            statement = statement.where(where)
        return self._session.exec(statement).one()
