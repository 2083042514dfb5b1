"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Form, Request
from sqlmodel import Session

from library_catalog.api.http.app_data import ApplicationDependencies
from library_catalog.core.services import BookCatalog


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(request: Request) -> Iterator[Session]:
    """Open a database session for the duration of one request."""
    app_deps = get_app_dependencies(request)
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_book_catalog(session: Session = Depends(get_db_session)) -> BookCatalog:
    return BookCatalog(session)


def get_book_form(
    title: str | None = Form(None),
    author: str | None = Form(None),
    genre: str | None = Form(None),
    year: str | None = Form(None),
) -> dict[str, str | None]:
    """Book fields submitted from the new/edit forms."""
    return {"title": title, "author": author, "genre": genre, "year": year}
