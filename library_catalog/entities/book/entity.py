"""Entity: Book."""

import re
from typing import Any

from pydantic import Field, ValidationInfo, field_validator

from library_catalog.entities._base import Entity

REQUIRED_FIELD_MESSAGES = {
    "title": 'Please provide a value for "title"',
    "author": 'Please provide a name for "author"',
}
YEAR_MESSAGE = 'Please provide a whole number for "year"'
YEAR_RANGE = (-9999, 9999)
_WHOLE_NUMBER = re.compile(r"[+-]?[0-9]+")

BOOK_FIELDS = ("title", "author", "genre", "year")


def _clean_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class Book(Entity):
    """Book entity representing a catalogued book.

    ``title`` and ``author`` are typed as optional so that a missing value
    reaches the validators below and produces the catalog's own message
    instead of pydantic's generic "field required".
    """

    title: str | None = Field(default=None, validate_default=True, description="Title")
    author: str | None = Field(default=None, validate_default=True, description="Author")
    genre: str | None = Field(default=None, description="Genre")
    year: int | None = Field(default=None, description="Publication year")

    @field_validator("title", "author", "genre", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        return _clean_text(value)

    @field_validator("title", "author", mode="after")
    @classmethod
    def _require_value(cls, value: str | None, info: ValidationInfo) -> str:
        if not value:
            raise ValueError(REQUIRED_FIELD_MESSAGES[info.field_name])
        return value

    @field_validator("year", mode="before")
    @classmethod
    def _parse_year(cls, value: Any) -> int | None:
        """Accept a signed run of ASCII digits within ``YEAR_RANGE``."""
        value = _clean_text(value)
        if value is None:
            return None
        if not isinstance(value, str) or not _WHOLE_NUMBER.fullmatch(value):
            raise ValueError(YEAR_MESSAGE)
        year = int(value)
        low, high = YEAR_RANGE
        if not low <= year <= high:
            raise ValueError(YEAR_MESSAGE)
        return year

    def form_values(self) -> dict[str, Any]:
        """The user-editable fields, as submitted or stored."""
        return {name: getattr(self, name, None) for name in BOOK_FIELDS}

    def __eq__(self, other: Any) -> bool:
        """Compare books by business attributes, ignoring timestamps."""
        if not isinstance(other, Book):
            return False

        return (
            self.id == other.id
            and self.title == other.title
            and self.author == other.author
            and self.genre == other.genre
            and self.year == other.year
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((self.id, self.title, self.author, self.genre, self.year))
