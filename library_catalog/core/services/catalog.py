"""Catalog service: the operations behind each books page.

The service is HTTP-free. It returns view models or entities and raises
:mod:`library_catalog.core.errors` exceptions, leaving rendering and
redirects to the router.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import ValidationError
from sqlmodel import Session

from library_catalog.core.errors import (
    BookNotFoundError,
    BookValidationError,
    PageNotFoundError,
    field_errors_from_pydantic,
)
from library_catalog.core.queries import (
    PageWindow,
    book_search_filter,
    page_indices,
    page_window,
)
from library_catalog.entities.book import Book, BookRepository
from library_catalog.entities.book.entity import BOOK_FIELDS

ALL_BOOKS = "allbooks"
NO_SEARCH_RESULTS = "No books have been found from that search"


@dataclass
class BookPage:
    """One page of books plus what the index view needs to draw page links."""

    books: list[Book]
    current_page: int
    pages: list[int]
    page_link: str
    search_query: str
    title: str
    total: int = 0


def submitted_values(form: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only the editable book fields from submitted form data."""
    return {name: form.get(name) for name in BOOK_FIELDS}


class BookCatalog:
    def __init__(self, session: Session) -> None:
        self._session = session
        self._repository = BookRepository(session)

    def list_page(self, page: int) -> BookPage:
        window = self._window(page)
        books = self._repository.list_page(window.offset, window.limit)
        total = self._repository.count()
        return BookPage(
            books=books,
            current_page=page,
            pages=page_indices(total),
            page_link="/books/",
            search_query=ALL_BOOKS,
            title="Library",
            total=total,
        )

    def search(self, query: str, page: int) -> BookPage:
        window = self._window(page)
        where = book_search_filter(query)
        total = self._repository.count(where)
        if not total:
            logger.info("Search for {!r} matched no books", query)
            raise PageNotFoundError(NO_SEARCH_RESULTS)

        books = self._repository.list_page(window.offset, window.limit, where)
        return BookPage(
            books=books,
            current_page=page,
            pages=page_indices(total),
            page_link="/books/search/",
            search_query=query,
            title="Library-Search",
            total=total,
        )

    def get(self, book_id: str) -> Book:
        book = self._repository.get(book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        return book

    def create(self, form: Mapping[str, Any]) -> Book:
        values = submitted_values(form)
        book = self._validate(values)
        created = self._repository.create(book)
        self._commit()
        logger.info("Created book {} ({!r})", created.id, created.title)
        return created

    def update(self, book_id: str, form: Mapping[str, Any]) -> Book:
        existing = self.get(book_id)
        values = submitted_values(form)
        book = self._validate(
            values,
            id=existing.id,
            created_at=existing.created_at,
        )
        updated = self._repository.update(book)
        self._commit()
        logger.info("Updated book {}", updated.id)
        return updated

    def delete(self, book_id: str) -> None:
        if not self._repository.delete(book_id):
            raise BookNotFoundError(book_id)
        self._commit()
        logger.info("Deleted book {}", book_id)

    def _validate(self, values: dict[str, Any], **identity: Any) -> Book:
        try:
            return Book.model_validate({**values, **identity})
        except ValidationError as exc:
            errors = field_errors_from_pydantic(exc.errors())
            draft = Book.model_construct(**values, **identity)
            logger.info(
                "Book failed validation on {}",
                ", ".join(sorted({error.field for error in errors})),
            )
            raise BookValidationError(errors, draft) from exc

    def _window(self, page: int) -> PageWindow:
        if page < 1:
            raise PageNotFoundError("That page does not exist")
        return page_window(page)

    def _commit(self) -> None:
        try:
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
