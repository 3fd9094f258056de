"""
repositories/book_repo.py
--------------------------
Data access layer for the book catalog.
`average_rating` is only ever read here: the database trigger owns it.
"""

from decimal import Decimal
from typing import Optional

import psycopg2

from db.connection import get_connection, release_connection
from db.errors import translate_error
from models.book import Book
from utils.logger import get_logger

logger = get_logger(__name__)

_BOOK_COLUMNS = (
    "book_id, isbn13, title, author, genre, page_count, summary, "
    "date_published, book_cover, average_rating"
)


class BookRepository:
    """Repository for CRUD operations on the books table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, book: Book) -> Book:
        """
        Insert a new book. The aggregate starts at the column default (0).

        Returns:
            The same Book with `book_id` and `average_rating` populated.

        Raises:
            ConstraintViolation: Duplicate ISBN or page_count < 1.
        """
        sql = """
            INSERT INTO books (isbn13, title, author, genre, page_count, summary, date_published, book_cover)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING book_id, average_rating;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    book.isbn13, book.title, book.author, book.genre,
                    book.page_count, book.summary, book.date_published, book.book_cover,
                ))
                row = cur.fetchone()
                book.book_id = row[0]
                book.average_rating = Decimal(row[1])
            conn.commit()
            logger.info(f"Added book #{book.book_id} (ISBN {book.isbn13})")
            return book
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to add book {book.isbn13}: {e}")
            raise translate_error(e, "add book", book.isbn13) from e
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, book_id: int) -> Optional[Book]:
        """Fetch a single book by primary key, or None."""
        rows = self._fetch_all(
            f"SELECT {_BOOK_COLUMNS} FROM books WHERE book_id = %s;", (book_id,),
            "get book", book_id,
        )
        return rows[0] if rows else None

    def get_by_isbn(self, isbn13: str) -> Optional[Book]:
        """Fetch a single book by ISBN-13, or None."""
        rows = self._fetch_all(
            f"SELECT {_BOOK_COLUMNS} FROM books WHERE isbn13 = %s;", (isbn13,),
            "get book by isbn", isbn13,
        )
        return rows[0] if rows else None

    def list_all(self) -> list[Book]:
        """All books ordered by title."""
        return self._fetch_all(
            f"SELECT {_BOOK_COLUMNS} FROM books ORDER BY title, book_id;", (), "list books"
        )

    def list_not_reviewed_by(self, user_id: int) -> list[Book]:
        """
        Books the given user has not reviewed yet (anti-join), ordered by title.

        Args:
            user_id: The reviewer whose reviewed books are excluded.
        """
        sql = f"""
            SELECT {_BOOK_COLUMNS}
            FROM books b
            WHERE NOT EXISTS (
                SELECT 1 FROM reviews r
                WHERE r.book_id = b.book_id AND r.user_id = %s
            )
            ORDER BY title, book_id;
        """
        return self._fetch_all(sql, (user_id,), "list unreviewed books", user_id)

    # ── UPDATE ────────────────────────────────────────────

    def update(self, book: Book) -> bool:
        """
        Update a book's descriptive fields. ISBN and average_rating are not touched.

        Returns:
            True if a row was updated, False otherwise.
        """
        sql = """
            UPDATE books
            SET title = %s, author = %s, genre = %s, page_count = %s,
                summary = %s, date_published = %s, book_cover = %s
            WHERE book_id = %s;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    book.title, book.author, book.genre, book.page_count,
                    book.summary, book.date_published, book.book_cover, book.book_id,
                ))
                updated = cur.rowcount > 0
            conn.commit()
            if updated:
                logger.info(f"Updated book #{book.book_id}")
            return updated
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to update book #{book.book_id}: {e}")
            raise translate_error(e, "update book", book.book_id) from e
        finally:
            release_connection(conn)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, book_id: int) -> bool:
        """
        Delete a book. Its reviews are cascaded and favorites pointing at it
        are set to NULL by the schema.

        Returns:
            True if a row was deleted, False otherwise.
        """
        sql = "DELETE FROM books WHERE book_id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (book_id,))
                deleted = cur.rowcount > 0
            conn.commit()
            if deleted:
                logger.info(f"Deleted book #{book_id}")
            return deleted
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to delete book #{book_id}: {e}")
            raise translate_error(e, "delete book", book_id) from e
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    def _fetch_all(self, sql: str, params: tuple, operation: str, key=None) -> list[Book]:
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [self._row_to_book(r) for r in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Failed to {operation} (key={key}): {e}")
            raise translate_error(e, operation, key) from e
        finally:
            release_connection(conn)

    @staticmethod
    def _row_to_book(row: tuple) -> Book:
        """Convert a database row tuple to a Book domain object."""
        return Book(
            book_id=row[0],
            isbn13=row[1],
            title=row[2],
            author=row[3],
            genre=row[4],
            page_count=row[5],
            summary=row[6],
            date_published=row[7],
            book_cover=row[8],
            average_rating=Decimal(row[9]),
        )
