"""
services/auth_service.py
-------------------------
Business logic for credentials: registration, verification and profile edits.

Every operation that acts on an account takes the principal explicitly.
"""

from dataclasses import dataclass, fields as dataclass_fields, replace
from typing import Optional

from db.errors import (
    ConstraintViolation, EMAIL_UNIQUE, FAVORITE_BOOK_FK, NotFound, PHONE_FORMAT,
)
from models.user import User
from repositories.user_repo import UserRepository
from security.passwords import check_password, hash_password
from utils.logger import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS_TEXT = "Invalid email or password."


class AuthFailure(Exception):
    """Login failed. Both subclasses show the same text to the caller."""

    user_message = INVALID_CREDENTIALS_TEXT


class UserNotFound(AuthFailure):
    """No user with the submitted email."""


class InvalidCredentials(AuthFailure):
    """The password does not match the stored hash."""


class DuplicateEmail(Exception):
    """Registration or profile edit with an email that already belongs to an account."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email {email} is already registered. Please log in.")


class PasswordUnchanged(Exception):
    """The new password equals the current one."""

    def __init__(self):
        super().__init__("New password must be different from the old password.")


@dataclass
class ProfileFields:
    """Registration / profile form. ``None`` leaves optional fields empty."""
    email: str
    name: str
    about: Optional[str] = None
    phone_number: Optional[str] = None
    favorite_book_id: Optional[int] = None
    user_color: Optional[str] = None


class AuthService:
    """Registers users, verifies credentials and maintains profiles."""

    def __init__(self, user_repo: Optional[UserRepository] = None):
        self.repo = user_repo or UserRepository()

    def register(self, fields: ProfileFields, password: str) -> User:
        """
        Create an account.

        The existence check gives a friendly early answer; the unique
        constraint on users.email is what actually settles concurrent
        registrations, and its violation is reported the same way.

        Raises:
            DuplicateEmail: The email is taken.
            ValueError: Missing required field, bad phone format, unknown
                favorite book, or unusable password.
        """
        fields = _clean(fields)
        if self.repo.get_by_email(fields.email) is not None:
            logger.info(f"Registration rejected, email already registered: {fields.email}")
            raise DuplicateEmail(fields.email)

        user = User(
            email=fields.email,
            password_hash=hash_password(password),
            name=fields.name,
            about=fields.about,
            phone_number=fields.phone_number,
            favorite_book_id=fields.favorite_book_id,
            user_color=fields.user_color,
        )
        try:
            return self.repo.add(user)
        except ConstraintViolation as e:
            raise _profile_error(e, fields.email) from e

    def verify(self, email: str, password: str) -> User:
        """
        Check an (email, password) pair.

        Returns:
            The full User record, to be bound to the session as principal.

        Raises:
            UserNotFound: No account with that email.
            InvalidCredentials: Wrong password.
        """
        email = (email or "").strip()
        user = self.repo.get_by_email(email)
        if user is None:
            logger.warning(f"Login failed: no user with email {email}")
            raise UserNotFound(email)
        if not check_password(password, user.password_hash):
            logger.warning(f"Login failed: wrong password for user #{user.user_id}")
            raise InvalidCredentials(email)
        logger.info(f"User #{user.user_id} authenticated")
        return user

    def update_profile(
        self, principal: User, changes: dict, new_password: Optional[str] = None
    ) -> User:
        """
        Edit the principal's profile and optionally rotate the password.

        Args:
            principal: The logged-in user. Only its id is used.
            changes: ProfileFields attribute names mapped to new values.
                Omitted attributes keep the value currently stored, not the
                one cached in the session.
            new_password: Plaintext of the new password, or None to keep it.

        Returns:
            The updated User, to replace the session principal.

        Raises:
            NotFound: The account no longer exists.
            PasswordUnchanged: ``new_password`` matches the current password.
            DuplicateEmail: The new email belongs to someone else.
            ValueError: Invalid field values or an unknown field name.
        """
        current = self.repo.get_by_id(principal.user_id)
        if current is None:
            raise NotFound("user", principal.user_id)

        unknown = set(changes) - {f.name for f in dataclass_fields(ProfileFields)}
        if unknown:
            raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}.")
        merged = replace(
            ProfileFields(
                email=current.email,
                name=current.name,
                about=current.about,
                phone_number=current.phone_number,
                favorite_book_id=current.favorite_book_id,
                user_color=current.user_color,
            ),
            **changes,
        )
        profile = _clean(merged)

        password_hash = current.password_hash
        if new_password:
            if check_password(new_password, current.password_hash):
                raise PasswordUnchanged()
            password_hash = hash_password(new_password)

        updated = User(
            user_id=current.user_id,
            email=profile.email,
            password_hash=password_hash,
            name=profile.name,
            about=profile.about,
            phone_number=profile.phone_number,
            favorite_book_id=profile.favorite_book_id,
            user_color=profile.user_color,
        )
        try:
            if not self.repo.update(updated):
                raise NotFound("user", principal.user_id)
        except ConstraintViolation as e:
            raise _profile_error(e, profile.email) from e
        logger.info(f"User #{updated.user_id} updated profile (password changed: {bool(new_password)})")
        return updated

    def delete_account(self, principal: User) -> None:
        """
        Delete the principal's account and, by cascade, their reviews.

        Raises:
            NotFound: The account was already gone.
        """
        if not self.repo.delete(principal.user_id):
            raise NotFound("user", principal.user_id)

    def get_profile(self, user_id: int):
        """Profile read shape of a user. Raises NotFound."""
        profile = self.repo.get_profile(user_id)
        if profile is None:
            raise NotFound("user", user_id)
        return profile

    def list_profiles(self):
        """Directory of all users with favorite titles and review counts."""
        return self.repo.list_profiles()


def _clean(fields: ProfileFields) -> ProfileFields:
    email = (fields.email or "").strip()
    name = (fields.name or "").strip()
    if not email or not name:
        raise ValueError("Please fill in all required fields (email and name).")
    return ProfileFields(
        email=email,
        name=name,
        about=fields.about or None,
        phone_number=(fields.phone_number or "").strip() or None,
        favorite_book_id=fields.favorite_book_id or None,
        user_color=fields.user_color or None,
    )


def _profile_error(e: ConstraintViolation, email: str) -> Exception:
    """Translate a users-table constraint violation into the domain error."""
    if e.constraint == EMAIL_UNIQUE:
        return DuplicateEmail(email)
    if e.constraint == PHONE_FORMAT:
        return ValueError("Phone number format is invalid.")
    if e.constraint == FAVORITE_BOOK_FK:
        return ValueError("Favorite book does not exist.")
    return ValueError("Profile data was rejected by the database.")
