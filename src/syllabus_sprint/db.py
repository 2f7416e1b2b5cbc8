"""Database initialization and key/value access."""
import json
import logging
import os
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = os.environ.get(
    "SYLLABUS_SPRINT_DB", str(Path.home() / ".syllabus_sprint" / "sprint.db")
)

QUESTIONS_KEY = "questions"
USERS_KEY = "users"
SESSION_KEY = "session"
SETTINGS_KEY = "settings"
STATS_KEY = "stats"

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating the store if it doesn't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def kv_get(db_path: str, key: str, default=None):
    """Read a JSON value. Missing keys and unreadable values yield the default."""
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
    conn.close()
    if row is None or row["value"] is None:
        return default
    try:
        return json.loads(row["value"])
    except json.JSONDecodeError:
        logger.warning("Stored value for %r is not valid JSON; using default", key)
        return default


def kv_set(db_path: str, key: str, value) -> None:
    payload = json.dumps(value)
    conn = get_connection(db_path)
    conn.execute(
        """INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
        ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=CURRENT_TIMESTAMP""",
        (key, payload),
    )
    conn.commit()
    conn.close()


def kv_has(db_path: str, key: str) -> bool:
    conn = get_connection(db_path)
    row = conn.execute("SELECT 1 FROM kv_store WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row is not None
