"""
seed.py
-------
Loads sample data into an empty database: ten programming books, two test
users (password "password") and two reviews. Goes through the services so
passwords are hashed and the rating trigger runs as in normal use.

    python seed.py
"""

from datetime import date

from db.connection import close_pool, init_pool
from db.init_db import create_tables
from models.book import Book
from repositories.book_repo import BookRepository
from services.auth_service import AuthService, DuplicateEmail, ProfileFields
from services.review_service import ReviewService
from utils.logger import get_logger

logger = get_logger(__name__)

_COVER = "https://covers.openlibrary.org/b/isbn/{}.jpg"

SAMPLE_BOOKS = [
    ("9780134190440", "Effective Java", "Joshua Bloch", "Programming", 416,
     "Best practices for Java programming.", date(2018, 1, 11)),
    ("9781491950357", "Designing Data-Intensive Applications", "Martin Kleppmann", "Technology", 616,
     "Architectural patterns for reliable software systems.", date(2017, 3, 16)),
    ("9780131103627", "The C Programming Language", "Brian W. Kernighan and Dennis M. Ritchie",
     "Programming", 274, "Classic book on C programming language.", date(1988, 4, 1)),
    ("9780596009205", "Head First Design Patterns", "Eric Freeman et al.", "Programming", 694,
     "A brain-friendly guide to design patterns.", date(2004, 10, 25)),
    ("9780262033848", "Introduction to Algorithms", "Thomas H. Cormen et al.", "Computer Science", 1312,
     "Comprehensive textbook on algorithms.", date(2009, 7, 31)),
    ("9780132350884", "Clean Code", "Robert C. Martin", "Programming", 464,
     "A handbook of agile software craftsmanship.", date(2008, 8, 11)),
    ("9780201633610", "Design Patterns", "Erich Gamma et al.", "Programming", 395,
     "Elements of reusable object-oriented software.", date(1994, 10, 31)),
    ("9780134685991", "Effective Modern C++", "Scott Meyers", "Programming", 334,
     "42 specific ways to improve your use of C++11 and C++14.", date(2014, 11, 5)),
    ("9780134494166", "Refactoring", "Martin Fowler", "Programming", 448,
     "Improving the design of existing code.", date(2018, 11, 19)),
    ("9781492078005", "Fluent Python", "Luciano Ramalho", "Programming", 792,
     "Clear, concise, and effective programming in Python.", date(2015, 7, 30)),
]

SAMPLE_USERS = [
    ("testuser1@example.com", "Test User 1", "About Test User 1", "+1234567890", 0, "blue"),
    ("testuser2@example.com", "Test User 2", "About Test User 2", "+0987654321", 1, "green"),
]


def seed() -> None:
    """Insert the sample rows. Books or users that already exist are skipped."""
    book_repo = BookRepository()
    books = []
    for isbn, title, author, genre, pages, summary, published in SAMPLE_BOOKS:
        book = book_repo.get_by_isbn(isbn) or book_repo.add(Book(
            isbn13=isbn, title=title, author=author, genre=genre, page_count=pages,
            summary=summary, date_published=published, book_cover=_COVER.format(isbn),
        ))
        books.append(book)

    auth = AuthService()
    users = []
    for email, name, about, phone, favorite_idx, color in SAMPLE_USERS:
        fields = ProfileFields(
            email=email, name=name, about=about, phone_number=phone,
            favorite_book_id=books[favorite_idx].book_id, user_color=color,
        )
        try:
            users.append(auth.register(fields, "password"))
        except DuplicateEmail:
            logger.info(f"Seed user {email} already present, skipping")
            return

    reviews = ReviewService()
    reviews.add_review(users[0], books[0].book_id, 8, "Great book on Java!",
                       "Effective Java provides best practices for Java programming.")
    reviews.add_review(users[0], books[1].book_id, 9, "A must-read for software architects.",
                       "Designing Data-Intensive Applications is essential for understanding "
                       "modern software architecture.")
    logger.info(f"Seeded {len(books)} books, {len(users)} users and 2 reviews.")


if __name__ == "__main__":
    init_pool()
    try:
        create_tables()
        seed()
    finally:
        close_pool()
