"""
db/errors.py
------------
Error taxonomy of the data layer and translation of psycopg2 exceptions.

Repositories never let a raw psycopg2 exception escape: every failure is
re-raised as one of the classes below, carrying the operation and the key it
was working on so the log line (and the caller) can tell what went wrong.
"""

from typing import Optional

import psycopg2

# Constraint names declared in db/init_db.py
EMAIL_UNIQUE = "users_email_key"
ISBN_UNIQUE = "books_isbn13_key"
REVIEW_UNIQUE = "unique_user_book_review"
PHONE_FORMAT = "phone_number_format"
PAGE_COUNT_CHECK = "books_page_count_check"
RATING_CHECK = "reviews_rating_check"
FAVORITE_BOOK_FK = "fk_users_favorite_book"
REVIEW_BOOK_FK = "reviews_book_id_fkey"


class StoreError(Exception):
    """Base class for every failure surfaced by the repositories."""

    def __init__(self, operation: str, key=None, message: Optional[str] = None):
        self.operation = operation
        self.key = key
        super().__init__(message or f"{operation} failed (key={key})")


class NotFound(StoreError):
    """A lookup expected to return exactly one row returned none."""

    def __init__(self, entity: str, key):
        self.entity = entity
        super().__init__(f"get {entity}", key, f"{entity} {key} not found")


class ConstraintViolation(StoreError):
    """A write was rejected by a unique, foreign-key, check or not-null constraint."""

    def __init__(self, operation: str, key=None, constraint: Optional[str] = None,
                 detail: Optional[str] = None):
        self.constraint = constraint
        self.detail = detail
        super().__init__(
            operation, key,
            f"{operation} violates constraint {constraint or 'unknown'} (key={key})",
        )


class TransientFailure(StoreError):
    """Connectivity or timeout problem talking to the store. Not retried here."""


def translate_error(exc: psycopg2.Error, operation: str, key=None) -> StoreError:
    """
    Map a psycopg2 exception onto the data-layer taxonomy.

    Args:
        exc: The exception raised by psycopg2.
        operation: Short description of what was being done ("add user").
        key: The identifying value of the row involved (email, id...).

    Returns:
        The StoreError to raise in place of ``exc``.
    """
    if isinstance(exc, psycopg2.IntegrityError):
        diag = getattr(exc, "diag", None)
        return ConstraintViolation(
            operation,
            key,
            constraint=getattr(diag, "constraint_name", None),
            detail=getattr(diag, "message_detail", None),
        )
    if isinstance(exc, (psycopg2.OperationalError, psycopg2.InterfaceError)):
        return TransientFailure(operation, key, f"{operation} failed: database unavailable")
    return StoreError(operation, key, f"{operation} failed: {exc}")
