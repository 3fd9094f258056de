"""
models/ - Domain Layer
======================
Plain dataclasses for users, books and reviews, plus one explicit type per
joined read shape (profile with favorite title, review with book title).
"""

from models.book import Book
from models.review import Review, ReviewWithBook
from models.user import User, UserProfile

__all__ = ["Book", "Review", "ReviewWithBook", "User", "UserProfile"]
