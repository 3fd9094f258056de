"""
db/init_db.py
-------------
Creates the database schema (tables, constraints and the rating trigger)
if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = r"""
-- Books table: the catalog. average_rating is derived, see trigger below.
CREATE TABLE IF NOT EXISTS books (
    book_id         SERIAL PRIMARY KEY,
    isbn13          CHAR(13) NOT NULL,
    title           TEXT NOT NULL,
    author          TEXT NOT NULL,
    genre           TEXT,
    page_count      INTEGER,
    summary         TEXT,
    date_published  DATE,
    book_cover      TEXT DEFAULT '/img/placeholder.jpg',
    average_rating  NUMERIC(4, 2) NOT NULL DEFAULT 0,
    CONSTRAINT books_isbn13_key UNIQUE (isbn13),
    CONSTRAINT books_page_count_check CHECK (page_count >= 1)
);

-- Users table: credentials (bcrypt hash) and profile
CREATE TABLE IF NOT EXISTS users (
    user_id          SERIAL PRIMARY KEY,
    email            TEXT NOT NULL,
    password         TEXT NOT NULL,
    name             TEXT NOT NULL,
    about            TEXT,
    phone_number     TEXT,
    favorite_book_id INTEGER,
    user_color       TEXT,
    CONSTRAINT users_email_key UNIQUE (email),
    CONSTRAINT fk_users_favorite_book
        FOREIGN KEY (favorite_book_id)
        REFERENCES books(book_id)
        ON DELETE SET NULL,
    CONSTRAINT phone_number_format CHECK (
        phone_number IS NULL OR
        phone_number ~ '^\+?[\d\s\-\(\)]{7,15}$'
    )
);

-- Reviews table: one review per (user, book)
CREATE TABLE IF NOT EXISTS reviews (
    review_id         SERIAL PRIMARY KEY,
    rating            INTEGER NOT NULL,
    short_description TEXT NOT NULL,
    long_description  TEXT,
    user_id           INTEGER NOT NULL REFERENCES users(user_id) ON DELETE CASCADE,
    book_id           INTEGER NOT NULL REFERENCES books(book_id) ON DELETE CASCADE,
    CONSTRAINT reviews_rating_check CHECK (rating BETWEEN 1 AND 10),
    CONSTRAINT unique_user_book_review UNIQUE (user_id, book_id)
);

CREATE INDEX IF NOT EXISTS idx_reviews_book ON reviews(book_id);
"""

TRIGGER_SQL = """
-- Recompute books.average_rating for the book touched by a review row
CREATE OR REPLACE FUNCTION update_average_rating()
RETURNS TRIGGER AS $$
DECLARE
    target_book_id INTEGER;
BEGIN
    IF (TG_OP = 'DELETE') THEN
        target_book_id := OLD.book_id;
    ELSE
        target_book_id := NEW.book_id;
    END IF;

    UPDATE books
    SET average_rating = COALESCE((
        SELECT ROUND(AVG(rating)::numeric, 2)
        FROM reviews
        WHERE book_id = target_book_id
    ), 0)
    WHERE book_id = target_book_id;

    IF (TG_OP = 'DELETE') THEN
        RETURN OLD;
    END IF;
    RETURN NEW;
END;
$$ LANGUAGE plpgsql;

-- Fires on insert, delete, and updates that touch the rating column only
DROP TRIGGER IF EXISTS trg_update_avg_rating ON reviews;
CREATE TRIGGER trg_update_avg_rating
AFTER INSERT OR UPDATE OF rating OR DELETE ON reviews
FOR EACH ROW
EXECUTE FUNCTION update_average_rating();
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables and the rating trigger.
    Safe to call multiple times.
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
            cur.execute(TRIGGER_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        release_connection(conn)


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")
