import logging
import sqlite3
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path

from config import CONFIG_DIR, get_config_value
from utils.errors import StoreUnavailable
from .schema import SCHEMA_SQL, INDEXES_SQL, SCHEMA_VERSION, OWNED_TABLES

logger = logging.getLogger(__name__)

DB_PATH = CONFIG_DIR / "medrecall.db"


@lru_cache(maxsize=1)
def resolve_db_path() -> Path:
    """Configured database path, falling back to DB_PATH under the config dir. Read once per process."""
    configured = get_config_value("database", "path", "")
    return Path(configured).expanduser() if configured else DB_PATH

def init_db():
    """Initialize the database by creating tables and indexes if they don't exist."""
    db_path = resolve_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with get_conn() as conn:
        conn.executescript(SCHEMA_SQL)
        conn.executescript(INDEXES_SQL)
        ensure_soft_delete_columns(conn)
        ensure_flashcard_media_columns(conn)
        ensure_schema_version(conn)
        conn.commit()
    logger.info("Database ready at %s (schema v%s)", db_path, SCHEMA_VERSION)

def ensure_soft_delete_columns(conn: sqlite3.Connection) -> None:
    """Ensure owned tables have deleted_at columns for soft deletes."""
    cursor = conn.cursor()
    for table in OWNED_TABLES:
        cursor.execute(f"PRAGMA table_info({table})")
        columns = {row[1] for row in cursor.fetchall()}
        if "deleted_at" not in columns:
            cursor.execute(f"ALTER TABLE {table} ADD COLUMN deleted_at TEXT")

def ensure_flashcard_media_columns(conn: sqlite3.Connection) -> None:
    """Ensure flashcards table has image and updated_at columns for existing installs."""
    cursor = conn.cursor()
    cursor.execute("PRAGMA table_info(flashcards)")
    columns = {row[1] for row in cursor.fetchall()}
    for column in ("image_url", "answer_image_url", "updated_at"):
        if column not in columns:
            cursor.execute(f"ALTER TABLE flashcards ADD COLUMN {column} TEXT")

def get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the SQLite schema version from PRAGMA user_version."""
    cursor = conn.cursor()
    cursor.execute("PRAGMA user_version")
    row = cursor.fetchone()
    return int(row[0]) if row else 0

def set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    """Set the SQLite schema version via PRAGMA user_version."""
    conn.execute(f"PRAGMA user_version = {int(version)}")

def ensure_schema_version(conn: sqlite3.Connection) -> None:
    """Ensure the current schema version is written to the database."""
    current = get_schema_version(conn)
    if current != SCHEMA_VERSION:
        set_schema_version(conn, SCHEMA_VERSION)

@contextmanager
def get_conn():
    """Context manager for SQLite connection, using row_factory for dict-like rows."""
    db_path = resolve_db_path()
    try:
        conn = sqlite3.connect(db_path, detect_types=sqlite3.PARSE_DECLTYPES, check_same_thread=False)
    except sqlite3.Error as exc:
        raise StoreUnavailable(f"cannot open {db_path}: {exc}") from exc
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()

def get_db():
    """FastAPI dependency that yields a DB connection and closes it afterwards."""
    with get_conn() as conn:
        yield conn
