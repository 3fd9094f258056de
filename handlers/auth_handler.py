"""
handlers/auth_handler.py
-------------------------
Account commands: register, login, logout, dashboard, profile edit,
account deletion and the user directory.

bcrypt is slow on purpose, so every call that hashes or checks a password
runs in a worker thread to keep other chats responsive.
"""

import asyncio
from dataclasses import replace

from telegram import Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from handlers.errors import replies_on_error
from models.user import User
from security.auth import login_required
from security.rate_limiter import rate_limited
from security.session import sessions
from services.auth_service import AuthService, ProfileFields
from services.review_service import ReviewService
from utils.logger import get_logger
from utils.parsing import parse_fields, parse_int

logger = get_logger(__name__)
auth_service = AuthService()
review_service = ReviewService()

_PROFILE_KEYS = ("email", "password", "name", "phone", "about", "color", "favorite")
_PROFILE_ATTRS = {
    "email": "email",
    "name": "name",
    "about": "about",
    "phone": "phone_number",
    "color": "user_color",
    "favorite": "favorite_book_id",
}


async def _forget_message(update: Update) -> None:
    """Delete a message that carried a password from the chat history."""
    try:
        await update.message.delete()
    except TelegramError as e:
        logger.warning(f"Could not delete credential message in chat {update.effective_chat.id}: {e}")


def _profile_changes(fields: dict) -> dict:
    """Map the keys actually typed to ProfileFields attribute names."""
    changes = {}
    for key, attr in _PROFILE_ATTRS.items():
        if key in fields:
            changes[attr] = parse_int(fields[key], key) if key == "favorite" else fields[key]
    return changes


@rate_limited
@replies_on_error
async def register_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /register - create an account and log in.
    Usage: /register email:me@example.com password:secret name:Jane Doe [phone: about: color: favorite:]
    """
    text = " ".join(context.args or [])
    if not text:
        await update.message.reply_text(
            "📝 Usage: /register email:<email> password:<password> name:<name> "
            "[phone:<phone> about:<bio> color:<color> favorite:<book id>]"
        )
        return

    fields = parse_fields(text, _PROFILE_KEYS)
    await _forget_message(update)
    form = replace(ProfileFields(email="", name=""), **_profile_changes(fields))
    user = await asyncio.to_thread(auth_service.register, form, fields.get("password", ""))
    sessions.login(update.effective_user.id, user)
    await update.effective_chat.send_message(
        f"✅ Welcome, {user.name}! Your account is ready and you are logged in.\n"
        f"Use /me to see your dashboard."
    )


@rate_limited
@replies_on_error
async def login_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /login <email> <password> - verify credentials and bind the session.
    """
    if not context.args or len(context.args) < 2:
        await update.message.reply_text(
            "🔑 Usage: /login <email> <password>\n"
            "Spaces at either end of the password are dropped and runs of spaces count as one."
        )
        return

    email = context.args[0]
    password = " ".join(context.args[1:])
    await _forget_message(update)
    user = await asyncio.to_thread(auth_service.verify, email, password)
    sessions.login(update.effective_user.id, user)
    await update.effective_chat.send_message(f"✅ Successfully logged in as {user.name}!")


@rate_limited
async def logout_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /logout - drop the session."""
    if sessions.logout(update.effective_user.id):
        await update.message.reply_text("👋 Logged out.")
    else:
        await update.message.reply_text("You were not logged in.")


@rate_limited
@replies_on_error
@login_required
async def me_command(update: Update, context: ContextTypes.DEFAULT_TYPE, principal: User) -> None:
    """Handle /me - profile, own reviews and books left to review."""
    dashboard = review_service.dashboard(principal)
    profile = dashboard.profile

    lines = [f"👤 {profile.name} ({profile.email})"]
    if profile.about:
        lines.append(f"📝 {profile.about}")
    if profile.phone_number:
        lines.append(f"📞 {profile.phone_number}")
    if profile.user_color:
        lines.append(f"🎨 {profile.user_color}")
    lines.append(f"❤️ Favorite book: {profile.favorite_book_title or '-'}")
    lines.append(f"✍️ Reviews: {profile.review_count}\n")

    if dashboard.reviews:
        lines.append("Your reviews:")
        lines.extend(f"  {r}" for r in dashboard.reviews)
    if dashboard.unreviewed_books:
        lines.append(f"\n📚 {len(dashboard.unreviewed_books)} books waiting for your review: /unreviewed")

    await update.message.reply_text("\n".join(lines))


@rate_limited
@replies_on_error
@login_required
async def edit_profile_command(update: Update, context: ContextTypes.DEFAULT_TYPE, principal: User) -> None:
    """
    Handle /editprofile - change profile fields and optionally the password.
    Omitted keys keep their value; an empty value (e.g. `about:`) clears an optional field.
    """
    text = " ".join(context.args or [])
    if not text:
        await update.message.reply_text(
            "✏️ Usage: /editprofile [email: name: phone: about: color: favorite: password:<new>]\n"
            "At least one field is required."
        )
        return

    fields = parse_fields(text, _PROFILE_KEYS)
    new_password = fields.get("password") or None
    if new_password:
        await _forget_message(update)
    changes = _profile_changes(fields)
    if not changes and not new_password:
        raise ValueError("Please give at least one field to change.")
    updated = await asyncio.to_thread(auth_service.update_profile, principal, changes, new_password)
    sessions.refresh(updated)
    suffix = " and password" if new_password else ""
    await update.effective_chat.send_message(f"✅ Profile{suffix} updated successfully!")


@rate_limited
@replies_on_error
@login_required
async def delete_account_command(update: Update, context: ContextTypes.DEFAULT_TYPE, principal: User) -> None:
    """Handle /deleteaccount confirm - delete the account and every review in it."""
    if not context.args or context.args[0].lower() != "confirm":
        await update.message.reply_text(
            "⚠️ This deletes your account and all your reviews.\nSend /deleteaccount confirm to proceed."
        )
        return

    auth_service.delete_account(principal)
    sessions.logout_user(principal.user_id)
    await update.message.reply_text("🗑️ Your account has been deleted.")


@rate_limited
@replies_on_error
async def users_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /users - list every reader with favorite book and review count."""
    profiles = auth_service.list_profiles()
    if not profiles:
        await update.message.reply_text("📭 No users yet.")
        return

    lines = ["👥 Readers:\n"]
    for p in profiles:
        favorite = f" | ❤️ {p.favorite_book_title}" if p.favorite_book_title else ""
        lines.append(f"  • #{p.user_id} {p.name} - {p.review_count} reviews{favorite}")
    lines.append("\nSee a reader's reviews with /user <id>.")
    await update.message.reply_text("\n".join(lines))


@rate_limited
@replies_on_error
async def user_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /user <id> - public profile of a reader with their reviews.
    Email and phone number are not shown.
    """
    if not context.args:
        await update.message.reply_text("👤 Usage: /user <id>\nUse /users to find reader ids.")
        return

    user_id = parse_int(context.args[0], "user number")
    profile = auth_service.get_profile(user_id)
    reviews = review_service.reviews_by_user(user_id)

    lines = [f"👤 {profile.name}"]
    if profile.about:
        lines.append(f"📝 {profile.about}")
    if profile.user_color:
        lines.append(f"🎨 {profile.user_color}")
    lines.append(f"❤️ Favorite book: {profile.favorite_book_title or '-'}")
    lines.append(f"✍️ Reviews: {profile.review_count}")
    for r in reviews:
        lines.append(f"  • {r.book_title}: {r.rating}/10 - {r.short_description}")
    await update.message.reply_text("\n".join(lines))
