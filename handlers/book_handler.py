"""
handlers/book_handler.py
-------------------------
Catalog commands. Delegates all logic to BookService.
"""

import asyncio

from telegram import Update
from telegram.ext import ContextTypes

from handlers.errors import replies_on_error
from models.book import GENRES
from models.user import User
from security.auth import login_required
from security.rate_limiter import rate_limited
from services.book_service import BookFields, BookService
from services.review_service import ReviewService
from utils.logger import get_logger
from utils.parsing import parse_date, parse_fields, parse_int

logger = get_logger(__name__)
book_service = BookService()
review_service = ReviewService()

_BOOK_KEYS = ("isbn", "title", "author", "pages", "genre", "summary", "published", "cover")


def _book_fields(fields: dict) -> BookFields:
    return BookFields(
        isbn13=fields.get("isbn", ""),
        title=fields.get("title", ""),
        author=fields.get("author", ""),
        page_count=parse_int(fields.get("pages"), "pages"),
        genre=fields.get("genre") or None,
        summary=fields.get("summary") or None,
        date_published=parse_date(fields.get("published"), "published"),
        book_cover=fields.get("cover") or None,
    )


def _parse_id(context: ContextTypes.DEFAULT_TYPE, name: str) -> int:
    if not context.args:
        raise ValueError(f"Please give the {name} number.")
    book_id = parse_int(context.args[0], f"{name} number")
    if book_id is None or book_id < 1:
        raise ValueError(f"{name.capitalize()} number must be a positive whole number.")
    return book_id


@rate_limited
@replies_on_error
async def books_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /books - list the catalog ordered by title."""
    books = book_service.list_books()
    if not books:
        await update.message.reply_text("📭 The catalog is empty. Add a book with /addbook.")
        return

    lines = ["📚 Books:\n"]
    for b in books:
        lines.append(f"  #{b.book_id} {b.title} - {b.author} | ⭐ {b.average_rating}")
    await update.message.reply_text("\n".join(lines))


@rate_limited
@replies_on_error
async def book_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /book <id> - book details with its reviews."""
    book_id = _parse_id(context, "book")
    book = book_service.get_book(book_id)
    reviews = review_service.reviews_of_book(book_id)

    lines = [
        f"📖 {book.title}",
        f"✍️ {book.author}",
        f"🔖 ISBN {book.isbn13}",
        f"⭐ {book.average_rating}/10 ({len(reviews)} reviews)",
    ]
    if book.genre:
        lines.append(f"🏷️ {book.genre}")
    if book.page_count:
        lines.append(f"📄 {book.page_count} pages")
    if book.date_published:
        lines.append(f"📅 {book.date_published}")
    if book.summary:
        lines.append(f"\n{book.summary}")
    lines.append(f"\n🖼️ {book.book_cover}")
    for r in reviews:
        lines.append(f"  • {r.rating}/10 - {r.short_description}")
    await update.message.reply_text("\n".join(lines))


@rate_limited
@replies_on_error
@login_required
async def add_book_command(update: Update, context: ContextTypes.DEFAULT_TYPE, principal: User) -> None:
    """
    Handle /addbook - add a book to the catalog.
    Usage: /addbook isbn:978-0134190440 title:Effective Java author:Joshua Bloch pages:416
    """
    text = " ".join(context.args or [])
    if not text:
        await update.message.reply_text(
            "➕ Usage: /addbook isbn:<isbn13> title:<title> author:<author> pages:<n> "
            "[genre:<genre> summary:<text> published:YYYY-MM-DD cover:<url>]\n"
            "See /genres for genre suggestions."
        )
        return

    fields = _book_fields(parse_fields(text, _BOOK_KEYS))
    # The ISBN lookup is a blocking HTTP call
    book = await asyncio.to_thread(book_service.add_book, principal, fields)
    await update.message.reply_text(f"✅ Book added successfully!\n#{book.book_id} {book.title}\n🖼️ {book.book_cover}")


@rate_limited
@replies_on_error
@login_required
async def edit_book_command(update: Update, context: ContextTypes.DEFAULT_TYPE, principal: User) -> None:
    """
    Handle /editbook <id> - replace a book's details. The ISBN cannot change.
    Usage: /editbook 3 title:Clean Code author:Robert C. Martin pages:464
    """
    if not context.args or len(context.args) < 2:
        await update.message.reply_text(
            "✏️ Usage: /editbook <id> title:<title> author:<author> pages:<n> "
            "[genre: summary: published:YYYY-MM-DD cover:]"
        )
        return

    book_id = _parse_id(context, "book")
    fields = _book_fields(parse_fields(" ".join(context.args[1:]), _BOOK_KEYS))
    book = book_service.edit_book(principal, book_id, fields)
    await update.message.reply_text(f"✅ Book #{book.book_id} modified successfully!")


@rate_limited
@replies_on_error
@login_required
async def delete_book_command(update: Update, context: ContextTypes.DEFAULT_TYPE, principal: User) -> None:
    """Handle /deletebook <id> - remove a book along with its reviews."""
    book_id = _parse_id(context, "book")
    book_service.delete_book(principal, book_id)
    await update.message.reply_text(f"🗑️ Book #{book_id} deleted, together with its reviews.")


@rate_limited
@replies_on_error
async def isbn_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /isbn <isbn> - check whether Open Library knows the ISBN."""
    if not context.args:
        await update.message.reply_text("🔖 Usage: /isbn <isbn13>")
        return

    lookup = await asyncio.to_thread(book_service.check_isbn, "".join(context.args))
    if lookup.found:
        await update.message.reply_text(f"✅ Book found! ISBN {lookup.isbn}\n🖼️ {lookup.cover_url}")
    else:
        await update.message.reply_text(f"❌ {lookup.message}")


@rate_limited
async def genres_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /genres - list suggested genres."""
    await update.message.reply_text("🏷️ Genres:\n" + ", ".join(GENRES))
