"""
repositories/review_repo.py
----------------------------
Data access layer for reviews.

Every write here fires the `trg_update_avg_rating` trigger, which recomputes
the reviewed book's `average_rating` inside the same transaction. Updates only
name the `rating` column when the rating is being changed, so edits to the
descriptions do not fire the trigger.
"""

from typing import Optional

import psycopg2

from db.connection import get_connection, release_connection
from db.errors import translate_error
from models.review import Review, ReviewWithBook
from utils.logger import get_logger

logger = get_logger(__name__)

_REVIEW_WITH_BOOK_SELECT = """
    SELECT r.review_id, r.user_id, r.book_id, r.rating, r.short_description,
           b.title AS book_title, r.long_description
    FROM reviews r
    JOIN books b ON r.book_id = b.book_id
"""


class ReviewRepository:
    """Repository for CRUD operations on the reviews table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, review: Review) -> Review:
        """
        Insert a new review.

        Returns:
            The same Review with its `review_id` populated.

        Raises:
            ConstraintViolation: Second review of the same book by the same
                user, rating outside [1, 10], or unknown user/book.
        """
        sql = """
            INSERT INTO reviews (user_id, book_id, rating, short_description, long_description)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING review_id;
        """
        key = (review.user_id, review.book_id)
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    review.user_id, review.book_id, review.rating,
                    review.short_description, review.long_description,
                ))
                review.review_id = cur.fetchone()[0]
            conn.commit()
            logger.info(
                f"Added review #{review.review_id} by user {review.user_id} "
                f"for book {review.book_id} (rating {review.rating})"
            )
            return review
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to add review {key}: {e}")
            raise translate_error(e, "add review", key) from e
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_with_book(self, review_id: int) -> Optional[ReviewWithBook]:
        """Fetch one review joined with its book title, or None."""
        rows = self._fetch_all(
            _REVIEW_WITH_BOOK_SELECT + " WHERE r.review_id = %s;", (review_id,),
            "get review", review_id,
        )
        return rows[0] if rows else None

    def list_by_user(self, user_id: int) -> list[ReviewWithBook]:
        """All reviews written by a user, joined with book titles, ordered by title."""
        return self._fetch_all(
            _REVIEW_WITH_BOOK_SELECT + " WHERE r.user_id = %s ORDER BY b.title, r.review_id;",
            (user_id,), "list reviews by user", user_id,
        )

    def list_by_book(self, book_id: int) -> list[ReviewWithBook]:
        """All reviews of a book, newest first."""
        return self._fetch_all(
            _REVIEW_WITH_BOOK_SELECT + " WHERE r.book_id = %s ORDER BY r.review_id DESC;",
            (book_id,), "list reviews by book", book_id,
        )

    # ── UPDATE ────────────────────────────────────────────

    def update(self, review: Review, include_rating: bool = True) -> bool:
        """
        Update a review, scoped to its author. The reviewed book never changes.

        Args:
            review: Review with updated fields (review_id and user_id set).
            include_rating: Write the rating column. Pass False when only the
                descriptions changed so the rating trigger does not fire.

        Returns:
            True if a row was updated, False if no such review belongs to the user.
        """
        assignments = ["short_description = %s", "long_description = %s"]
        params: list = [review.short_description, review.long_description]
        if include_rating:
            assignments.insert(0, "rating = %s")
            params.insert(0, review.rating)
        sql = f"UPDATE reviews SET {', '.join(assignments)} WHERE review_id = %s AND user_id = %s;"
        params += [review.review_id, review.user_id]

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                updated = cur.rowcount > 0
            conn.commit()
            if updated:
                logger.info(f"Updated review #{review.review_id} (rating written: {include_rating})")
            return updated
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to update review #{review.review_id}: {e}")
            raise translate_error(e, "update review", review.review_id) from e
        finally:
            release_connection(conn)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, review_id: int, user_id: int) -> bool:
        """
        Delete a review by ID, scoped to its author.

        Returns:
            True if a row was deleted, False otherwise.
        """
        sql = "DELETE FROM reviews WHERE review_id = %s AND user_id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (review_id, user_id))
                deleted = cur.rowcount > 0
            conn.commit()
            if deleted:
                logger.info(f"Deleted review #{review_id} for user {user_id}")
            return deleted
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to delete review #{review_id}: {e}")
            raise translate_error(e, "delete review", review_id) from e
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    def _fetch_all(self, sql: str, params: tuple, operation: str, key) -> list[ReviewWithBook]:
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [self._row_to_review(r) for r in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Failed to {operation} (key={key}): {e}")
            raise translate_error(e, operation, key) from e
        finally:
            release_connection(conn)

    @staticmethod
    def _row_to_review(row: tuple) -> ReviewWithBook:
        """Convert a review/book join row to a ReviewWithBook."""
        return ReviewWithBook(
            review_id=row[0],
            user_id=row[1],
            book_id=row[2],
            rating=row[3],
            short_description=row[4],
            book_title=row[5],
            long_description=row[6],
        )
