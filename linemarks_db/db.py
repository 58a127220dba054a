import sqlite3
from pathlib import Path

DB_PATH = Path("linemarks.db")

STATE_SCHEMA = """
CREATE TABLE IF NOT EXISTS state (
    key TEXT PRIMARY KEY,
    value_json TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""


def get_connection(db_path=None):
    """
    Open the state database. Rows come back as sqlite3.Row.
    """
    conn = sqlite3.connect(str(db_path or DB_PATH), timeout=5.0)
    conn.row_factory = sqlite3.Row
    # one writer per command, readers never block it
    conn.execute("PRAGMA journal_mode=WAL;")
    return conn


def init_db(db_path=None):
    """
    Create the key-value table if missing.
    """
    conn = get_connection(db_path)
    conn.execute(STATE_SCHEMA)
    conn.commit()
    conn.close()
