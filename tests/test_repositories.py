from datetime import date
from decimal import Decimal

import psycopg2
import pytest

from db.errors import (
    ConstraintViolation, ISBN_UNIQUE, REVIEW_UNIQUE, TransientFailure,
)
from models.book import Book
from models.review import Review
from models.user import User
from repositories.book_repo import BookRepository
from repositories.review_repo import ReviewRepository
from repositories.user_repo import UserRepository

USER_ROW = (1, "testuser1@example.com", "$2b$10$hash", "Test User 1", "About", "+1234567890", 2, "blue")
BOOK_ROW = (
    3, "9780134190440", "Effective Java", "Joshua Bloch", "Programming", 416,
    "Best practices for Java programming.", date(2018, 1, 11), "/img/placeholder.jpg", Decimal("8.50"),
)


# ── users ─────────────────────────────────────────────────

def test_add_user_returns_generated_id(fake_conn):
    fake_conn.results = [(7,)]
    user = UserRepository().add(User(email="a@b.c", password_hash="h", name="A"))

    assert user.user_id == 7
    assert fake_conn.commits == 1
    assert fake_conn.last_params[:3] == ("a@b.c", "h", "A")
    assert fake_conn.pool.returned == 1


def test_add_user_duplicate_email_rolls_back(fake_conn, make_integrity_error):
    fake_conn.error = make_integrity_error("users_email_key")

    with pytest.raises(ConstraintViolation) as exc_info:
        UserRepository().add(User(email="a@b.c", password_hash="h", name="A"))

    assert exc_info.value.constraint == "users_email_key"
    assert fake_conn.rollbacks == 1
    assert fake_conn.commits == 0
    assert fake_conn.pool.returned == 1


def test_get_by_email_maps_row(fake_conn):
    fake_conn.results = [USER_ROW]
    user = UserRepository().get_by_email("testuser1@example.com")

    assert user.user_id == 1
    assert user.password_hash == "$2b$10$hash"
    assert user.favorite_book_id == 2
    assert fake_conn.last_params == ("testuser1@example.com",)


def test_get_by_email_missing_returns_none(fake_conn):
    assert UserRepository().get_by_email("nobody@example.com") is None


def test_read_failure_is_transient_without_rollback(fake_conn):
    fake_conn.error = psycopg2.OperationalError("connection lost")

    with pytest.raises(TransientFailure):
        UserRepository().get_by_id(1)
    assert fake_conn.rollbacks == 0
    assert fake_conn.pool.returned == 1


def test_profile_joins_favorite_title_and_counts_reviews(fake_conn):
    fake_conn.results = [(1, "Test User 1", "a@b.c", None, None, "blue", "Effective Java", 2)]
    profile = UserRepository().get_profile(1)

    assert profile.favorite_book_title == "Effective Java"
    assert profile.review_count == 2
    assert "LEFT JOIN books" in fake_conn.last_sql


def test_delete_missing_user_returns_false(fake_conn):
    fake_conn.rowcount = 0
    assert UserRepository().delete(99) is False


# ── books ─────────────────────────────────────────────────

def test_add_book_reads_back_default_average(fake_conn):
    fake_conn.results = [(3, Decimal("0"))]
    book = BookRepository().add(Book(isbn13="9780134190440", title="Effective Java",
                                     author="Joshua Bloch", page_count=416))

    assert book.book_id == 3
    assert book.average_rating == Decimal("0")
    assert "average_rating" not in fake_conn.last_sql.split("RETURNING")[0]


def test_add_book_duplicate_isbn(fake_conn, make_integrity_error):
    fake_conn.error = make_integrity_error(ISBN_UNIQUE)

    with pytest.raises(ConstraintViolation) as exc_info:
        BookRepository().add(Book(isbn13="9780134190440", title="T", author="A", page_count=1))
    assert exc_info.value.constraint == ISBN_UNIQUE
    assert exc_info.value.key == "9780134190440"


def test_get_book_maps_row(fake_conn):
    fake_conn.results = [[BOOK_ROW]]
    book = BookRepository().get_by_id(3)

    assert book.title == "Effective Java"
    assert book.page_count == 416
    assert book.average_rating == Decimal("8.50")


def test_update_book_never_writes_isbn_or_average(fake_conn):
    book = Book(isbn13="9780134190440", title="Effective Java", author="Joshua Bloch",
                page_count=416, book_id=3)
    assert BookRepository().update(book) is True

    set_clause = fake_conn.last_sql.split("WHERE")[0]
    assert "isbn13" not in set_clause
    assert "average_rating" not in set_clause
    assert fake_conn.last_params[-1] == 3


def test_books_not_reviewed_by_uses_anti_join(fake_conn):
    fake_conn.results = [[BOOK_ROW]]
    books = BookRepository().list_not_reviewed_by(5)

    assert [b.book_id for b in books] == [3]
    assert "NOT EXISTS" in fake_conn.last_sql
    assert fake_conn.last_params == (5,)


# ── reviews ───────────────────────────────────────────────

def test_add_review_duplicate(fake_conn, make_integrity_error):
    fake_conn.error = make_integrity_error(REVIEW_UNIQUE)

    with pytest.raises(ConstraintViolation) as exc_info:
        ReviewRepository().add(Review(user_id=1, book_id=3, rating=8, short_description="Good"))
    assert exc_info.value.key == (1, 3)
    assert fake_conn.rollbacks == 1


def test_update_review_without_rating_leaves_rating_column_alone(fake_conn):
    review = Review(user_id=1, book_id=3, rating=8, short_description="Better", review_id=5)
    ReviewRepository().update(review, include_rating=False)

    assert "rating" not in fake_conn.last_sql
    assert fake_conn.last_params == ["Better", None, 5, 1]


def test_update_review_with_rating(fake_conn):
    review = Review(user_id=1, book_id=3, rating=9, short_description="Better", review_id=5)
    ReviewRepository().update(review)

    assert "SET rating = %s" in fake_conn.last_sql
    assert "book_id" not in fake_conn.last_sql
    assert fake_conn.last_params == [9, "Better", None, 5, 1]


def test_delete_review_is_scoped_to_author(fake_conn):
    fake_conn.rowcount = 0
    assert ReviewRepository().delete(5, 2) is False
    assert fake_conn.last_params == (5, 2)
    assert "user_id = %s" in fake_conn.last_sql


def test_list_reviews_by_user_includes_book_title(fake_conn):
    fake_conn.results = [[(5, 1, 3, 8, "Great book on Java!", "Effective Java", None)]]
    reviews = ReviewRepository().list_by_user(1)

    assert reviews[0].book_title == "Effective Java"
    assert str(reviews[0]) == "#5 Effective Java: 8/10 - Great book on Java!"
