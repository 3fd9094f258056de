"""
repositories/user_repo.py
--------------------------
Data access layer for user records.
All SQL queries related to the `users` table live here.
"""

from typing import Optional

import psycopg2

from db.connection import get_connection, release_connection
from db.errors import translate_error
from models.user import User, UserProfile
from utils.logger import get_logger

logger = get_logger(__name__)

_USER_COLUMNS = (
    "user_id, email, password, name, about, phone_number, favorite_book_id, user_color"
)

_PROFILE_SELECT = """
    SELECT u.user_id, u.name, u.email, u.about, u.phone_number, u.user_color,
           b.title AS favorite_book_title,
           (SELECT COUNT(*) FROM reviews r WHERE r.user_id = u.user_id) AS review_count
    FROM users u
    LEFT JOIN books b ON u.favorite_book_id = b.book_id
"""


class UserRepository:
    """Repository for CRUD operations on the users table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, user: User) -> User:
        """
        Insert a new user.

        Args:
            user: The User to persist. ``password_hash`` must already be hashed.

        Returns:
            The same User with its `user_id` populated.

        Raises:
            ConstraintViolation: Duplicate email, bad phone format or unknown
                favorite book.
        """
        sql = """
            INSERT INTO users (email, password, name, about, phone_number, favorite_book_id, user_color)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING user_id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    user.email, user.password_hash, user.name, user.about,
                    user.phone_number, user.favorite_book_id, user.user_color,
                ))
                user.user_id = cur.fetchone()[0]
            conn.commit()
            logger.info(f"Added user #{user.user_id} ({user.email})")
            return user
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to add user {user.email}: {e}")
            raise translate_error(e, "add user", user.email) from e
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Fetch a user by primary key, or None."""
        return self._fetch_one(
            f"SELECT {_USER_COLUMNS} FROM users WHERE user_id = %s;", user_id, "get user"
        )

    def get_by_email(self, email: str) -> Optional[User]:
        """Fetch a user by exact email match, or None."""
        return self._fetch_one(
            f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s;", email, "get user by email"
        )

    def get_profile(self, user_id: int) -> Optional[UserProfile]:
        """
        Fetch a user's public profile: favorite book title and review count included.

        Returns:
            A UserProfile or None if the user does not exist.
        """
        sql = _PROFILE_SELECT + " WHERE u.user_id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                row = cur.fetchone()
                return self._row_to_profile(row) if row else None
        except psycopg2.Error as e:
            logger.error(f"Failed to fetch profile of user #{user_id}: {e}")
            raise translate_error(e, "get profile", user_id) from e
        finally:
            release_connection(conn)

    def list_profiles(self) -> list[UserProfile]:
        """All user profiles ordered by name."""
        sql = _PROFILE_SELECT + " ORDER BY u.name, u.user_id;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [self._row_to_profile(r) for r in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Failed to list user profiles: {e}")
            raise translate_error(e, "list profiles") from e
        finally:
            release_connection(conn)

    # ── UPDATE ────────────────────────────────────────────

    def update(self, user: User) -> bool:
        """
        Update an existing user's profile and credential.

        Args:
            user: User with updated fields (must have user_id set).

        Returns:
            True if a row was updated, False otherwise.
        """
        sql = """
            UPDATE users
            SET email = %s, password = %s, name = %s, about = %s,
                phone_number = %s, favorite_book_id = %s, user_color = %s
            WHERE user_id = %s;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    user.email, user.password_hash, user.name, user.about,
                    user.phone_number, user.favorite_book_id, user.user_color,
                    user.user_id,
                ))
                updated = cur.rowcount > 0
            conn.commit()
            if updated:
                logger.info(f"Updated user #{user.user_id}")
            return updated
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to update user #{user.user_id}: {e}")
            raise translate_error(e, "update user", user.user_id) from e
        finally:
            release_connection(conn)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, user_id: int) -> bool:
        """
        Delete a user. Their reviews go with them (ON DELETE CASCADE).

        Returns:
            True if a row was deleted, False otherwise.
        """
        sql = "DELETE FROM users WHERE user_id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                deleted = cur.rowcount > 0
            conn.commit()
            if deleted:
                logger.info(f"Deleted user #{user_id}")
            return deleted
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to delete user #{user_id}: {e}")
            raise translate_error(e, "delete user", user_id) from e
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    def _fetch_one(self, sql: str, key, operation: str) -> Optional[User]:
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (key,))
                row = cur.fetchone()
                return self._row_to_user(row) if row else None
        except psycopg2.Error as e:
            logger.error(f"Failed to {operation} {key}: {e}")
            raise translate_error(e, operation, key) from e
        finally:
            release_connection(conn)

    @staticmethod
    def _row_to_user(row: tuple) -> User:
        """Convert a database row tuple to a User domain object."""
        return User(
            user_id=row[0],
            email=row[1],
            password_hash=row[2],
            name=row[3],
            about=row[4],
            phone_number=row[5],
            favorite_book_id=row[6],
            user_color=row[7],
        )

    @staticmethod
    def _row_to_profile(row: tuple) -> UserProfile:
        """Convert a profile join row to a UserProfile."""
        return UserProfile(
            user_id=row[0],
            name=row[1],
            email=row[2],
            about=row[3],
            phone_number=row[4],
            user_color=row[5],
            favorite_book_title=row[6],
            review_count=int(row[7] or 0),
        )
