"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── Telegram ──────────────────────────────────────────────
TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")

# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "booknotes")
DB_USER: str = os.getenv("DB_USER", "booknotes_user")
DB_PASS: str = os.getenv("DB_PASS", "")

DATABASE_URL: str = os.getenv("DATABASE_URL") or (
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

DB_POOL_MIN: int = int(os.getenv("DB_POOL_MIN", "1"))
DB_POOL_MAX: int = int(os.getenv("DB_POOL_MAX", "10"))

# ── Security ──────────────────────────────────────────────
# bcrypt work factor (log2 of the number of rounds)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "10"))

# ── Rate Limiting ─────────────────────────────────────────
RATE_LIMIT_MESSAGES: int = int(os.getenv("RATE_LIMIT_MESSAGES", "30"))
RATE_LIMIT_WINDOW_SECONDS: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))

# ── ISBN lookup (Open Library) ────────────────────────────
OPENLIBRARY_BOOKS_URL: str = os.getenv("OPENLIBRARY_BOOKS_URL", "https://openlibrary.org/isbn")
OPENLIBRARY_COVERS_URL: str = os.getenv(
    "OPENLIBRARY_COVERS_URL", "https://covers.openlibrary.org/b/isbn"
)
ISBN_LOOKUP_TIMEOUT: float = float(os.getenv("ISBN_LOOKUP_TIMEOUT", "5"))
PLACEHOLDER_COVER: str = os.getenv("PLACEHOLDER_COVER", "/img/placeholder.jpg")

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
