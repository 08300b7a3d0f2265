import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from dotenv import load_dotenv

# Make sure .env is loaded before anything reads LIBRARY_DB_FILE.
load_dotenv()

logger = logging.getLogger(__name__)


def get_db_connection(db_file: str) -> sqlite3.Connection:
    """Open a connection to the SQLite store with dict-like rows."""
    conn = sqlite3.connect(db_file)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def connection(db_file: str) -> Iterator[sqlite3.Connection]:
    """Per-operation connection, always closed on exit."""
    conn = get_db_connection(db_file)
    try:
        yield conn
    finally:
        conn.close()


def create_tables(db_file: str) -> None:
    """Create the books table and its indexes if they do not exist yet."""
    with connection(db_file) as conn:
        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS books (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                author TEXT NOT NULL,
                notes TEXT,
                rating INTEGER NOT NULL CHECK(rating >= 1 AND rating <= 10),
                date_read TEXT NOT NULL,
                UNIQUE (title, author)
            )
        """)

        # Indexes backing the list orderings
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_books_date_read ON books(date_read)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_books_rating_date ON books(rating, date_read)")

        conn.commit()


def initialize_database(db_file: str) -> None:
    """Initialize the store, creating the schema when needed."""
    create_tables(db_file)
    logger.debug(f"Database ready at {db_file}")
