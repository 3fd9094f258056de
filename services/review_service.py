"""
services/review_service.py
---------------------------
Business logic for reviews and the user dashboard.

Reviews are owned by their author: every mutation is scoped to the principal.
The book's average rating is never computed here; the database trigger
recomputes it on each review insert, rating change and delete.
"""

from dataclasses import dataclass, field
from typing import Optional

from db.errors import (
    ConstraintViolation, NotFound, RATING_CHECK, REVIEW_BOOK_FK, REVIEW_UNIQUE,
)
from models.book import Book
from models.review import MAX_RATING, MIN_RATING, Review, ReviewWithBook
from models.user import User, UserProfile
from repositories.book_repo import BookRepository
from repositories.review_repo import ReviewRepository
from repositories.user_repo import UserRepository
from utils.logger import get_logger

logger = get_logger(__name__)

_KEEP = object()


@dataclass
class Dashboard:
    """Everything the principal's home screen shows."""
    profile: UserProfile
    reviews: list[ReviewWithBook] = field(default_factory=list)
    unreviewed_books: list[Book] = field(default_factory=list)


class ReviewService:
    """Handles review use cases for the logged-in principal."""

    def __init__(
        self,
        review_repo: Optional[ReviewRepository] = None,
        book_repo: Optional[BookRepository] = None,
        user_repo: Optional[UserRepository] = None,
    ):
        self.repo = review_repo or ReviewRepository()
        self.book_repo = book_repo or BookRepository()
        self.user_repo = user_repo or UserRepository()

    def add_review(
        self,
        principal: User,
        book_id: int,
        rating: int,
        short_description: str,
        long_description: Optional[str] = None,
    ) -> Review:
        """
        Post the principal's review of a book.

        Raises:
            NotFound: The book does not exist.
            ValueError: Missing short description, rating outside [1, 10], or
                the principal already reviewed this book.
        """
        short_description = (short_description or "").strip()
        if not book_id or rating is None or not short_description:
            raise ValueError("Please fill in all required fields (book, rating, short description).")
        _check_rating(rating)

        review = Review(
            user_id=principal.user_id,
            book_id=book_id,
            rating=rating,
            short_description=short_description,
            long_description=long_description or None,
        )
        try:
            return self.repo.add(review)
        except ConstraintViolation as e:
            raise _review_error(e, book_id) from e

    def edit_review(
        self,
        principal: User,
        review_id: int,
        rating: Optional[int] = None,
        short_description: Optional[str] = None,
        long_description=_KEEP,
    ) -> ReviewWithBook:
        """
        Edit one of the principal's reviews.

        Omitted arguments keep their current value; ``long_description=None``
        clears the long text. The rating column is only written when the rating
        actually changes, so description-only edits leave the aggregate alone.

        Raises:
            NotFound: No such review owned by the principal.
            ValueError: Empty short description or rating outside [1, 10].
        """
        current = self.get_review(principal, review_id)

        new_rating = current.rating if rating is None else rating
        _check_rating(new_rating)
        new_short = current.short_description
        if short_description is not None:
            new_short = short_description.strip()
            if not new_short:
                raise ValueError("Short description must not be empty.")
        new_long = current.long_description if long_description is _KEEP else (long_description or None)

        review = Review(
            review_id=review_id,
            user_id=principal.user_id,
            book_id=current.book_id,
            rating=new_rating,
            short_description=new_short,
            long_description=new_long,
        )
        try:
            updated = self.repo.update(review, include_rating=new_rating != current.rating)
        except ConstraintViolation as e:
            raise _review_error(e, current.book_id) from e
        if not updated:
            raise NotFound("review", review_id)

        return ReviewWithBook(
            review_id=review_id,
            user_id=principal.user_id,
            book_id=current.book_id,
            rating=new_rating,
            short_description=new_short,
            book_title=current.book_title,
            long_description=new_long,
        )

    def delete_review(self, principal: User, review_id: int) -> None:
        """
        Delete one of the principal's reviews.

        Raises:
            NotFound: No such review owned by the principal.
        """
        if not self.repo.delete(review_id, principal.user_id):
            raise NotFound("review", review_id)

    def get_review(self, principal: User, review_id: int) -> ReviewWithBook:
        """
        Fetch one of the principal's reviews. Reviews of other users are
        reported as not found.
        """
        review = self.repo.get_with_book(review_id)
        if review is None or review.user_id != principal.user_id:
            raise NotFound("review", review_id)
        return review

    def reviews_for(self, principal: User) -> list[ReviewWithBook]:
        """All reviews written by the principal."""
        return self.reviews_by_user(principal.user_id)

    def reviews_by_user(self, user_id: int) -> list[ReviewWithBook]:
        """All reviews written by any user, for their public profile."""
        return self.repo.list_by_user(user_id)

    def reviews_of_book(self, book_id: int) -> list[ReviewWithBook]:
        """All reviews of a book."""
        return self.repo.list_by_book(book_id)

    def dashboard(self, principal: User) -> Dashboard:
        """
        Profile, own reviews and books not reviewed yet.

        Raises:
            NotFound: The principal's account no longer exists.
        """
        profile = self.user_repo.get_profile(principal.user_id)
        if profile is None:
            raise NotFound("user", principal.user_id)
        return Dashboard(
            profile=profile,
            reviews=self.repo.list_by_user(principal.user_id),
            unreviewed_books=self.book_repo.list_not_reviewed_by(principal.user_id),
        )


def _check_rating(rating: int) -> None:
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValueError(f"Rating must be between {MIN_RATING} and {MAX_RATING}.")


def _review_error(e: ConstraintViolation, book_id: int) -> Exception:
    """Translate a reviews-table constraint violation into the domain error."""
    if e.constraint == REVIEW_UNIQUE:
        return ValueError("You have already reviewed this book.")
    if e.constraint == RATING_CHECK:
        return ValueError("Rating must be between 1 and 10.")
    if e.constraint == REVIEW_BOOK_FK:
        return NotFound("book", book_id)
    return ValueError("Review data was rejected by the database.")
