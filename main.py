"""
main.py
-------
Entry point for the BookNotes Telegram bot.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Configure and start the Telegram bot with all handlers.
"""

from telegram import BotCommand
from telegram.ext import Application, CommandHandler

from config import TELEGRAM_BOT_TOKEN
from db.connection import init_pool, close_pool
from db.init_db import create_tables
from handlers.start_handler import start_command, help_command
from handlers.auth_handler import (
    register_command,
    login_command,
    logout_command,
    me_command,
    edit_profile_command,
    delete_account_command,
    users_command,
    user_command,
)
from handlers.book_handler import (
    book_service,
    books_command,
    book_command,
    add_book_command,
    edit_book_command,
    delete_book_command,
    isbn_command,
    genres_command,
)
from handlers.review_handler import (
    review_command,
    my_reviews_command,
    unreviewed_command,
    edit_review_command,
    delete_review_command,
)
from handlers.errors import error_handler
from utils.logger import get_logger

logger = get_logger(__name__)

COMMANDS = {
    "start": start_command,
    "help": help_command,
    "register": register_command,
    "login": login_command,
    "logout": logout_command,
    "me": me_command,
    "editprofile": edit_profile_command,
    "deleteaccount": delete_account_command,
    "users": users_command,
    "user": user_command,
    "books": books_command,
    "book": book_command,
    "addbook": add_book_command,
    "editbook": edit_book_command,
    "deletebook": delete_book_command,
    "isbn": isbn_command,
    "genres": genres_command,
    "review": review_command,
    "myreviews": my_reviews_command,
    "unreviewed": unreviewed_command,
    "editreview": edit_review_command,
    "deletereview": delete_review_command,
}


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    commands = [
        BotCommand("start", "🚀 Start"),
        BotCommand("help", "📖 All commands"),
        BotCommand("login", "🔑 Log in"),
        BotCommand("register", "📝 Create an account"),
        BotCommand("me", "👤 Your dashboard"),
        BotCommand("books", "📚 The catalog"),
        BotCommand("addbook", "➕ Add a book"),
        BotCommand("review", "✍️ Review a book"),
        BotCommand("myreviews", "🗂️ Your reviews"),
        BotCommand("unreviewed", "📬 Books to review"),
        BotCommand("users", "👥 Readers"),
        BotCommand("logout", "👋 Log out"),
    ]
    await application.bot.set_my_commands(commands)
    logger.info("Bot commands menu registered successfully.")


def build_application(token: str = TELEGRAM_BOT_TOKEN) -> Application:
    """Build the Telegram application with every command handler registered."""
    app = Application.builder().token(token).post_init(set_bot_commands).build()
    for name, callback in COMMANDS.items():
        app.add_handler(CommandHandler(name, callback))
    app.add_error_handler(error_handler)
    return app


def shutdown() -> None:
    """Release the database pool and the ISBN lookup's HTTP client."""
    close_pool()
    book_service.close()
    logger.info("BookNotes stopped.")


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    create_tables()

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = build_application()

    # ── 3. Start polling ──────────────────────────────────
    logger.info("📚 BookNotes is running! Press Ctrl+C to stop.")
    try:
        app.run_polling(drop_pending_updates=True, allowed_updates=["message"])
    finally:
        # ── 4. Cleanup on shutdown ────────────────────────
        shutdown()


if __name__ == "__main__":
    main()
