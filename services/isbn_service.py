"""
services/isbn_service.py
-------------------------
Optional book-metadata enrichment through the Open Library API.

A lookup only answers "does this ISBN exist?" and, if so, where its cover is.
Any failure (network error, timeout, non-200) is logged and degrades to
"not found"; it never blocks a catalog write.
"""

import re
from dataclasses import dataclass
from typing import Optional

import httpx

from config import (
    ISBN_LOOKUP_TIMEOUT,
    OPENLIBRARY_BOOKS_URL,
    OPENLIBRARY_COVERS_URL,
    PLACEHOLDER_COVER,
)
from utils.logger import get_logger

logger = get_logger(__name__)

_ISBN13_RE = re.compile(r"^\d{13}$")


class ExternalLookupFailure(Exception):
    """The metadata service was unreachable or answered with a non-200 status."""

    def __init__(self, isbn: str, reason: str):
        self.isbn = isbn
        self.reason = reason
        super().__init__(f"ISBN lookup for {isbn} failed: {reason}")


@dataclass
class IsbnLookup:
    """Outcome of an ISBN lookup."""
    isbn: str
    found: bool
    cover_url: str = PLACEHOLDER_COVER
    message: Optional[str] = None


def normalize_isbn(isbn: str) -> str:
    """
    Strip hyphens and whitespace from an ISBN.

    Raises:
        ValueError: The result is not exactly 13 digits.
    """
    cleaned = re.sub(r"[\s\-]", "", isbn or "")
    if not _ISBN13_RE.match(cleaned):
        raise ValueError("ISBN must be 13 digits (hyphens are allowed).")
    return cleaned


class IsbnLookupService:
    """Client for the Open Library ISBN and covers endpoints."""

    def __init__(self, client: Optional[httpx.Client] = None):
        self._client = client or httpx.Client(timeout=ISBN_LOOKUP_TIMEOUT, follow_redirects=True)

    def cover_url(self, isbn: str) -> str:
        """Large cover image URL for an ISBN."""
        return f"{OPENLIBRARY_COVERS_URL}/{isbn}-L.jpg"

    def book_exists(self, isbn: str) -> bool:
        """
        Ask Open Library whether the ISBN is known.

        Raises:
            ExternalLookupFailure: Transport error or any status other than 200/404.
        """
        url = f"{OPENLIBRARY_BOOKS_URL}/{isbn}.json"
        try:
            response = self._client.get(url)
        except httpx.TimeoutException as e:
            raise ExternalLookupFailure(isbn, "timed out") from e
        except httpx.HTTPError as e:
            raise ExternalLookupFailure(isbn, str(e) or type(e).__name__) from e

        if response.status_code == 200:
            return True
        if response.status_code == 404:
            return False
        raise ExternalLookupFailure(isbn, f"HTTP {response.status_code}")

    def lookup(self, isbn: str) -> IsbnLookup:
        """
        Validate an ISBN and resolve its cover.

        Returns:
            IsbnLookup with ``found`` True and the Open Library cover URL, or
            ``found`` False with the placeholder cover and a reason.

        Raises:
            ValueError: The ISBN is not 13 digits.
        """
        isbn = normalize_isbn(isbn)
        try:
            exists = self.book_exists(isbn)
        except ExternalLookupFailure as e:
            logger.warning(f"{e}; falling back to placeholder cover")
            return IsbnLookup(isbn=isbn, found=False,
                              message="Book lookup service is unavailable right now.")

        if not exists:
            logger.info(f"ISBN {isbn} not found on Open Library")
            return IsbnLookup(isbn=isbn, found=False, message="Book not found! Try another ISBN.")
        return IsbnLookup(isbn=isbn, found=True, cover_url=self.cover_url(isbn))

    def close(self) -> None:
        self._client.close()
