"""
services/book_service.py
-------------------------
Business logic for the book catalog.
Orchestrates between the ISBN lookup and the BookRepository.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from config import PLACEHOLDER_COVER
from db.errors import ConstraintViolation, ISBN_UNIQUE, NotFound, PAGE_COUNT_CHECK
from models.book import Book
from models.user import User
from repositories.book_repo import BookRepository
from services.isbn_service import IsbnLookup, IsbnLookupService, normalize_isbn
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class BookFields:
    """Add/edit book form."""
    isbn13: str
    title: str
    author: str
    page_count: Optional[int]
    genre: Optional[str] = None
    summary: Optional[str] = None
    date_published: Optional[date] = None
    book_cover: Optional[str] = None


class BookService:
    """
    Handles catalog use cases.

    Workflow for adding a book:
        1. Normalize and validate the ISBN.
        2. Ask Open Library for the cover (failures fall back to the placeholder).
        3. Persist via the repository; the aggregate rating starts at 0.
    """

    def __init__(
        self,
        book_repo: Optional[BookRepository] = None,
        isbn_lookup: Optional[IsbnLookupService] = None,
    ):
        self.repo = book_repo or BookRepository()
        self.isbn_lookup = isbn_lookup or IsbnLookupService()

    def check_isbn(self, isbn: str) -> IsbnLookup:
        """Validate an ISBN against Open Library. Raises ValueError on a malformed ISBN."""
        return self.isbn_lookup.lookup(isbn)

    def add_book(self, principal: User, fields: BookFields) -> Book:
        """
        Add a book to the catalog.

        Raises:
            ValueError: Missing fields, malformed ISBN, duplicate ISBN or page count < 1.
        """
        _require(fields)
        lookup = self.isbn_lookup.lookup(fields.isbn13)
        cover = lookup.cover_url if lookup.found else (fields.book_cover or PLACEHOLDER_COVER)

        book = Book(
            isbn13=lookup.isbn,
            title=fields.title.strip(),
            author=fields.author.strip(),
            page_count=fields.page_count,
            genre=fields.genre or None,
            summary=fields.summary or None,
            date_published=fields.date_published,
            book_cover=cover,
        )
        try:
            saved = self.repo.add(book)
        except ConstraintViolation as e:
            raise _book_error(e, book.isbn13) from e
        logger.info(f"User #{principal.user_id} added book #{saved.book_id} (cover found: {lookup.found})")
        return saved

    def edit_book(self, principal: User, book_id: int, fields: BookFields) -> Book:
        """
        Edit a book's descriptive fields. The ISBN and the aggregate rating are kept.

        Raises:
            NotFound: No such book.
            ValueError: Missing fields or page count < 1.
        """
        _require(fields, isbn_required=False)
        current = self.get_book(book_id)
        current.title = fields.title.strip()
        current.author = fields.author.strip()
        current.page_count = fields.page_count
        current.genre = fields.genre or None
        current.summary = fields.summary or None
        current.date_published = fields.date_published
        if fields.book_cover:
            current.book_cover = fields.book_cover
        try:
            if not self.repo.update(current):
                raise NotFound("book", book_id)
        except ConstraintViolation as e:
            raise _book_error(e, current.isbn13) from e
        logger.info(f"User #{principal.user_id} edited book #{book_id}")
        return current

    def delete_book(self, principal: User, book_id: int) -> None:
        """
        Delete a book, its reviews, and clear it from users' favorites.

        Raises:
            NotFound: No such book.
        """
        if not self.repo.delete(book_id):
            raise NotFound("book", book_id)
        logger.info(f"User #{principal.user_id} deleted book #{book_id}")

    def get_book(self, book_id: int) -> Book:
        """Fetch a book. Raises NotFound."""
        book = self.repo.get_by_id(book_id)
        if book is None:
            raise NotFound("book", book_id)
        return book

    def list_books(self) -> list[Book]:
        """The whole catalog ordered by title."""
        return self.repo.list_all()

    def books_not_reviewed_by(self, principal: User) -> list[Book]:
        """Books the principal can still review."""
        return self.repo.list_not_reviewed_by(principal.user_id)

    def close(self) -> None:
        """Release the ISBN lookup's HTTP connections."""
        self.isbn_lookup.close()


def _require(fields: BookFields, isbn_required: bool = True) -> None:
    missing = [
        name for name, value in (
            ("title", fields.title), ("author", fields.author), ("page_count", fields.page_count),
        )
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if isbn_required and not (fields.isbn13 or "").strip():
        missing.insert(0, "isbn13")
    if missing:
        raise ValueError(f"Please fill in all required fields: {', '.join(missing)}.")
    if isbn_required:
        normalize_isbn(fields.isbn13)


def _book_error(e: ConstraintViolation, isbn: str) -> ValueError:
    """Translate a books-table constraint violation into a user-facing error."""
    if e.constraint == ISBN_UNIQUE:
        return ValueError(f"A book with ISBN {isbn} already exists.")
    if e.constraint == PAGE_COUNT_CHECK:
        return ValueError("Page count must be at least 1.")
    return ValueError("Book data was rejected by the database.")
