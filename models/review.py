"""
models/review.py
----------------
Domain models for reviews: the stored record and the read shape joined
with the reviewed book's title.
"""

from dataclasses import dataclass
from typing import Optional

MIN_RATING = 1
MAX_RATING = 10


@dataclass
class Review:
    """
    A user's rating and notes for one book.

    Attributes:
        user_id: Author of the review.
        book_id: Reviewed book. Fixed once the review exists.
        rating: Integer in [MIN_RATING, MAX_RATING].
        short_description: Required one-line verdict.
        long_description: Optional full notes.
        review_id: Database primary key (None for new records).
    """
    user_id: int
    book_id: int
    rating: int
    short_description: str
    long_description: Optional[str] = None
    review_id: Optional[int] = None


@dataclass
class ReviewWithBook:
    """Review row joined with the title of the reviewed book."""
    review_id: int
    user_id: int
    book_id: int
    rating: int
    short_description: str
    book_title: str
    long_description: Optional[str] = None

    def __str__(self) -> str:
        return f"#{self.review_id} {self.book_title}: {self.rating}/10 - {self.short_description}"
