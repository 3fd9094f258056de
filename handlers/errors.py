"""
handlers/errors.py
-------------------
Maps domain errors onto chat replies, and the application-wide error handler
for everything else.
"""

from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

from db.errors import NotFound, StoreError, TransientFailure
from services.auth_service import AuthFailure, DuplicateEmail, PasswordUnchanged
from utils.logger import get_logger

logger = get_logger(__name__)

GENERIC_FAILURE_TEXT = "⚠️ Something went wrong on our side. Please try again in a moment."


def error_message(exc: Exception) -> str:
    """User-facing text for a domain error."""
    if isinstance(exc, AuthFailure):
        return f"⛔ {exc.user_message}"
    if isinstance(exc, NotFound):
        return f"🔍 {exc.entity.capitalize()} #{exc.key} not found."
    if isinstance(exc, (DuplicateEmail, PasswordUnchanged, ValueError)):
        return f"⚠️ {exc}"
    return GENERIC_FAILURE_TEXT


def replies_on_error(func: Callable):
    """
    Decorator that turns domain errors raised by a handler into a reply.

    Validation and not-found errors are expected and logged at INFO;
    store failures are logged at ERROR with the operation and key.
    Anything else propagates to the application error handler.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        try:
            return await func(update, context, *args, **kwargs)
        except (AuthFailure, NotFound, DuplicateEmail, PasswordUnchanged, ValueError) as e:
            logger.info(f"{func.__name__}: {type(e).__name__}: {e}")
            await update.effective_chat.send_message(error_message(e))
        except TransientFailure as e:
            logger.error(f"{func.__name__}: store unavailable during {e.operation} (key={e.key})")
            await update.effective_chat.send_message(GENERIC_FAILURE_TEXT)
        except StoreError as e:
            logger.error(f"{func.__name__}: {e.operation} failed (key={e.key}): {e}")
            await update.effective_chat.send_message(GENERIC_FAILURE_TEXT)

    return wrapper


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Application error handler: log the traceback and tell the user."""
    logger.error("Unhandled exception while processing an update", exc_info=context.error)
    if isinstance(update, Update) and update.effective_message:
        await update.effective_message.reply_text(GENERIC_FAILURE_TEXT)
