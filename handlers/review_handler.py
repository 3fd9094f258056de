"""
handlers/review_handler.py
---------------------------
Review commands. Delegates all logic to ReviewService; every command acts
for the logged-in principal only.
"""

from telegram import Update
from telegram.ext import ContextTypes

from handlers.book_handler import book_service
from handlers.errors import replies_on_error
from models.user import User
from security.auth import login_required
from security.rate_limiter import rate_limited
from services.review_service import ReviewService
from utils.logger import get_logger
from utils.parsing import parse_fields, parse_int

logger = get_logger(__name__)
review_service = ReviewService()

_REVIEW_KEYS = ("book", "rating", "short", "long")


@rate_limited
@replies_on_error
@login_required
async def review_command(update: Update, context: ContextTypes.DEFAULT_TYPE, principal: User) -> None:
    """
    Handle /review - post a review.
    Usage: /review book:3 rating:9 short:A must-read long:Explains replication really well.
    """
    text = " ".join(context.args or [])
    if not text:
        await update.message.reply_text(
            "✍️ Usage: /review book:<id> rating:<1-10> short:<one line> [long:<notes>]\n"
            "Use /unreviewed to see which books you can review."
        )
        return

    fields = parse_fields(text, _REVIEW_KEYS)
    review = review_service.add_review(
        principal,
        book_id=parse_int(fields.get("book"), "book"),
        rating=parse_int(fields.get("rating"), "rating"),
        short_description=fields.get("short", ""),
        long_description=fields.get("long"),
    )
    book = book_service.get_book(review.book_id)
    await update.message.reply_text(
        f"✅ Review #{review.review_id} added successfully!\n"
        f"📖 {book.title} is now rated ⭐ {book.average_rating}"
    )


@rate_limited
@replies_on_error
@login_required
async def my_reviews_command(update: Update, context: ContextTypes.DEFAULT_TYPE, principal: User) -> None:
    """Handle /myreviews - list the principal's reviews."""
    reviews = review_service.reviews_for(principal)
    if not reviews:
        await update.message.reply_text("📭 You have not reviewed any book yet. Try /unreviewed.")
        return

    lines = ["✍️ Your reviews:\n"]
    for r in reviews:
        lines.append(f"  {r}")
        if r.long_description:
            lines.append(f"      {r.long_description}")
    await update.message.reply_text("\n".join(lines))


@rate_limited
@replies_on_error
@login_required
async def unreviewed_command(update: Update, context: ContextTypes.DEFAULT_TYPE, principal: User) -> None:
    """Handle /unreviewed - books the principal has not reviewed yet."""
    books = book_service.books_not_reviewed_by(principal)
    if not books:
        await update.message.reply_text("🎉 You have reviewed every book in the catalog!")
        return

    lines = ["📚 Waiting for your review:\n"]
    lines.extend(f"  #{b.book_id} {b.title} - {b.author}" for b in books)
    await update.message.reply_text("\n".join(lines))


@rate_limited
@replies_on_error
@login_required
async def edit_review_command(update: Update, context: ContextTypes.DEFAULT_TYPE, principal: User) -> None:
    """
    Handle /editreview <id> - change rating and/or descriptions.
    Omitted keys keep their value; `long:` with nothing after it clears the notes.
    """
    if not context.args or len(context.args) < 2:
        await update.message.reply_text(
            "✏️ Usage: /editreview <id> [rating:<1-10> short:<one line> long:<notes>]\n"
            "At least one field is required."
        )
        return

    review_id = parse_int(context.args[0], "review number")
    fields = parse_fields(" ".join(context.args[1:]), ("rating", "short", "long"))
    if not fields:
        raise ValueError("Please give at least one of rating:, short:, long:.")

    changes = {}
    if "rating" in fields:
        changes["rating"] = parse_int(fields["rating"], "rating")
    if "short" in fields:
        changes["short_description"] = fields["short"]
    if "long" in fields:
        changes["long_description"] = fields["long"] or None

    review = review_service.edit_review(principal, review_id, **changes)
    await update.message.reply_text(f"✅ Review modified successfully!\n{review}")


@rate_limited
@replies_on_error
@login_required
async def delete_review_command(update: Update, context: ContextTypes.DEFAULT_TYPE, principal: User) -> None:
    """
    Handle /deletereview <id> - delete one of the principal's reviews.
    Usage: /deletereview 5
    """
    if not context.args:
        await update.message.reply_text("⚠️ Usage: /deletereview <review id>\nExample: /deletereview 5")
        return

    review_id = parse_int(context.args[0], "review number")
    review_service.delete_review(principal, review_id)
    await update.message.reply_text(f"🗑️ Review #{review_id} deleted successfully!")
