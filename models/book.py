"""
models/book.py
--------------
Domain model for catalog books.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from config import PLACEHOLDER_COVER

GENRES = [
    "Fiction", "Nonfiction", "Biography", "Science", "Fantasy",
    "Mystery", "Romance", "History", "Children", "Computer Science", "Young Adult",
    "Thriller", "Horror", "Self-Help", "Graphic Novel", "Classic",
    "Adventure", "Poetry", "Programming", "Science Fiction", "Memoir", "Travel", "Technology",
    "Spirituality", "Cookbook", "Art", "Business", "Health",
    "Politics", "Philosophy", "Short Stories", "Humor", "Other",
]


@dataclass
class Book:
    """
    Represents a book in the catalog.

    Attributes:
        isbn13: Unique 13-digit ISBN.
        title: Book title.
        author: Author(s) as free text.
        page_count: Number of pages (>= 1).
        genre: Optional genre (see GENRES for suggestions).
        summary: Optional summary.
        date_published: Optional publication date.
        book_cover: Cover image URL, placeholder when unknown.
        average_rating: Mean of the book's review ratings (2 decimals), 0 when
            unreviewed. Maintained by the database, read-only for the application.
        book_id: Database primary key (None for new records).
    """
    isbn13: str
    title: str
    author: str
    page_count: Optional[int] = None
    genre: Optional[str] = None
    summary: Optional[str] = None
    date_published: Optional[date] = None
    book_cover: str = PLACEHOLDER_COVER
    average_rating: Decimal = Decimal("0.00")
    book_id: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.title} by {self.author} ({self.average_rating}/10)"
