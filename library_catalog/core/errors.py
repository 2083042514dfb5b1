"""Catalog error taxonomy.

Every error the catalog raises carries an :class:`ErrorKind` so that callers
branch on the kind instead of matching class names or messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from library_catalog.entities.book import Book


class ErrorKind(StrEnum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class FieldError:
    """A single failed validation rule, keyed by the field it belongs to."""

    field: str
    message: str


class CatalogError(Exception):
    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BookNotFoundError(CatalogError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, book_id: str | None = None, message: str = "I do not have that book") -> None:
        super().__init__(message)
        self.book_id = book_id


class PageNotFoundError(CatalogError):
    kind = ErrorKind.NOT_FOUND


class BookValidationError(CatalogError):
    """Raised when submitted book values break one or more field rules.

    ``book`` is an unpersisted Book built from the submitted values so the
    form can be re-rendered without losing the user's input.
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, errors: list[FieldError], book: Book | None = None) -> None:
        super().__init__("; ".join(error.message for error in errors) or "Validation failed")
        self.errors = errors
        self.book = book

    def messages_by_field(self) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = {}
        for error in self.errors:
            grouped.setdefault(error.field, []).append(error.message)
        return grouped


def error_kind(exc: BaseException) -> ErrorKind:
    """Classify any exception into the catalog's error kinds."""
    if isinstance(exc, CatalogError):
        return exc.kind
    return ErrorKind.UNEXPECTED


def field_errors_from_pydantic(errors: list[dict[str, Any]]) -> list[FieldError]:
    """Turn ``ValidationError.errors()`` into field-keyed messages."""
    field_errors = []
    for err in errors:
        loc = err.get("loc") or ()
        field = str(loc[0]) if loc else "__root__"
        ctx_error = (err.get("ctx") or {}).get("error")
        message = str(ctx_error) if ctx_error is not None else err.get("msg", "Invalid value")
        field_errors.append(FieldError(field=field, message=message))
    return field_errors
