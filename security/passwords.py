"""
security/passwords.py
----------------------
Salted one-way password hashing with bcrypt at a fixed work factor.
"""

import bcrypt

from config import BCRYPT_ROUNDS

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    if not password:
        raise ValueError("Password must not be empty.")
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
    return raw


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """
    Hash a plaintext password.

    Args:
        password: The plaintext. Never stored.
        rounds: bcrypt cost factor.

    Returns:
        The bcrypt hash as text, salt included.

    Raises:
        ValueError: Empty password or longer than 72 bytes.
    """
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    """Return True if ``password`` matches the stored bcrypt hash."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except ValueError:
        # Over-long input or a malformed stored hash never matches
        return False
