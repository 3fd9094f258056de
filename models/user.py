"""
models/user.py
--------------
Domain models for users: the stored record (also the session principal)
and the profile read shape joined with the favorite book.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class User:
    """
    A registered user.

    Attributes:
        email: Unique login identity.
        password_hash: bcrypt hash of the password. Never the plaintext.
        name: Display name.
        about: Optional free-text bio.
        phone_number: Optional phone, must match the schema's phone format.
        favorite_book_id: Optional reference to a Book (nulled when the book is deleted).
        user_color: Optional profile color.
        user_id: Database primary key (None for new records).
    """
    email: str
    password_hash: str = field(repr=False)
    name: str
    about: Optional[str] = None
    phone_number: Optional[str] = None
    favorite_book_id: Optional[int] = None
    user_color: Optional[str] = None
    user_id: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


@dataclass
class UserProfile:
    """User joined with the title of their favorite book and their review count."""
    user_id: int
    name: str
    email: str
    about: Optional[str] = None
    phone_number: Optional[str] = None
    user_color: Optional[str] = None
    favorite_book_title: Optional[str] = None
    review_count: int = 0
