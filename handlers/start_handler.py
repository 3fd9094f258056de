"""
handlers/start_handler.py
--------------------------
Handles /start and /help commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.rate_limiter import rate_limited
from security.session import sessions
from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = """
📚 *BookNotes*
Catalog books, rate them from 1 to 10 and keep your reading notes.

*Account:*
/register email:<email> password:<password> name:<name> \\[phone: about: color: favorite:<book id>\\]
/login <email> <password>
/logout
/me - your dashboard
/editprofile email: name: phone: about: color: favorite: password:<new>
/deleteaccount confirm
/users - all readers
/user <id> - a reader's profile and reviews

*Books:*
/books - the catalog
/book <id> - details and reviews
/addbook isbn: title: author: pages: \\[genre: summary: published:YYYY-MM-DD cover:<url>\\]
/editbook <id> title: author: pages: \\[genre: summary: published: cover:\\]
/deletebook <id>
/isbn <isbn> - check an ISBN on Open Library
/genres

*Reviews:*
/review book:<id> rating:<1-10> short:<one line> \\[long:<notes>\\]
/myreviews
/unreviewed - books you have not reviewed yet
/editreview <id> \\[rating: short: long:\\]
/deletereview <id>
"""


@rate_limited
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - greet and show how to get in."""
    user = update.effective_user
    principal = sessions.get(user.id)
    logger.info(f"Chat user {user.id} started the bot (logged in: {principal is not None}).")

    if principal:
        greeting = f"Welcome back, {principal.name}! 👋\nUse /me to see your dashboard."
    else:
        greeting = (
            f"Hello {user.first_name}! 👋\n"
            f"Log in with /login <email> <password> or create an account with /register."
        )
    await update.message.reply_text(f"{greeting}\n\nType /help to see all commands.")


@rate_limited
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT, parse_mode="Markdown")
