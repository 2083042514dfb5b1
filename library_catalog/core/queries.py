"""Query building helpers: page windows and search filters."""

import math
from dataclasses import dataclass

import sqlalchemy as sa
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import col

from library_catalog.entities.book import BookTable

PAGE_SIZE = 5
LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class PageWindow:
    offset: int
    limit: int


def page_window(page: int) -> PageWindow:
    """Offset/limit for a 1-based page number.

    Pages below 1 give a negative offset; callers are expected to reject them.
    """
    return PageWindow(offset=page * PAGE_SIZE - PAGE_SIZE, limit=PAGE_SIZE)


def page_count(total: int) -> int:
    return math.ceil(total / PAGE_SIZE)


def page_indices(total: int) -> list[int]:
    """Zero-based indices of every page needed to show ``total`` records."""
    return list(range(page_count(total)))


def escape_like(term: str) -> str:
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def book_search_filter(term: str) -> ColumnElement[bool]:
    """Case-insensitive substring match on title, author, genre or year."""
    pattern = f"%{escape_like(term)}%"
    return sa.or_(
        col(BookTable.title).ilike(pattern, escape=LIKE_ESCAPE),
        col(BookTable.author).ilike(pattern, escape=LIKE_ESCAPE),
        col(BookTable.genre).ilike(pattern, escape=LIKE_ESCAPE),
        sa.cast(col(BookTable.year), sa.String).ilike(pattern, escape=LIKE_ESCAPE),
    )
