"""
security/auth.py
-----------------
Authentication middleware for the Telegram bot.
Resolves the logged-in principal of the chat and passes it to the handler
explicitly; handlers never look the session up themselves.
"""

from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

from security.session import sessions
from utils.logger import get_logger

logger = get_logger(__name__)

LOGIN_REQUIRED_TEXT = "🔒 You must be logged in to do that. Use /login <email> <password>."


def login_required(func: Callable):
    """
    Decorator that restricts a handler to logged-in chats.

    Usage:
        @login_required
        async def my_handler(update, context, principal):
            ...

    Behavior:
        - The principal (a models.user.User) is passed as the ``principal``
          keyword argument.
        - Anonymous attempts get a hint to /login and the handler is skipped.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        principal = sessions.get(user.id)
        if principal is None:
            logger.info(f"Anonymous access to {func.__name__} from chat user {user.id}")
            await update.message.reply_text(LOGIN_REQUIRED_TEXT)
            return

        return await func(update, context, *args, principal=principal, **kwargs)

    return wrapper
