"""Entities organised by business concept.

Each entity has its own package containing:
- entity.py: Domain model with field rules
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .book import Book, BookRepository, BookTable

__all__ = [
    "Book",
    "BookTable",
    "BookRepository",
]
