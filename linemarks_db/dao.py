import json
import logging
from datetime import datetime, timezone
from typing import Any, List

from .db import DB_PATH, get_connection, init_db
from .models import StateEntry

log = logging.getLogger("linemarks.db")


def dumps_json(data: Any) -> str:
    return json.dumps(data, sort_keys=False)


def loads_json(s: str) -> Any:
    return json.loads(s) if s else None


# --------------------------------------------------
# Input Validation Boundary
# --------------------------------------------------

def _validate_key(value: str, max_len: int = 128) -> str:
    if not isinstance(value, str):
        raise ValueError("State key must be a string")

    value = value.strip()

    if not value:
        raise ValueError("State key must not be empty")

    if len(value) > max_len:
        raise ValueError(f"State key exceeds {max_len} characters")

    return value


# --------------------------------------------------
# State DAO
# --------------------------------------------------

class StateDAO:
    """
    Flat key-value state backed by SQLite.

    Values are stored as JSON. Every set() is a single upsert inside its
    own transaction, so readers never observe a partial write.
    """

    def __init__(self, db_path=None):
        self.db_path = db_path or DB_PATH
        init_db(self.db_path)

    def get(self, key: str, default: Any = None) -> Any:
        key = _validate_key(key)

        conn = get_connection(self.db_path)
        row = conn.execute(
            "SELECT value_json FROM state WHERE key = ?",
            (key,),
        ).fetchone()
        conn.close()

        if row is None:
            return default

        try:
            return loads_json(row["value_json"])
        except json.JSONDecodeError as err:
            raise RuntimeError(f"Corrupt state value for key '{key}': {err}") from err

    def set(self, key: str, value: Any) -> None:
        key = _validate_key(key)
        now = datetime.now(timezone.utc).isoformat()

        conn = get_connection(self.db_path)
        conn.execute(
            """
            INSERT INTO state (key, value_json, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value_json = excluded.value_json,
                updated_at = excluded.updated_at
            """,
            (key, dumps_json(value), now),
        )
        conn.commit()
        conn.close()

        log.debug("Persisted state key %s", key)

    def delete(self, key: str) -> bool:
        key = _validate_key(key)

        conn = get_connection(self.db_path)
        cur = conn.execute("DELETE FROM state WHERE key = ?", (key,))
        conn.commit()
        conn.close()

        return cur.rowcount > 0

    def list_entries(self) -> List[StateEntry]:
        conn = get_connection(self.db_path)
        rows = conn.execute(
            "SELECT * FROM state ORDER BY key"
        ).fetchall()
        conn.close()

        return [StateEntry(**dict(row)) for row in rows]


class MemoryStateDAO:
    """
    Dict-backed state with the same contract as StateDAO.

    Values round-trip through JSON so callers never share mutable
    objects with the store.
    """

    def __init__(self, initial=None):
        self._data = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        key = _validate_key(key)
        if key not in self._data:
            return default
        return loads_json(self._data[key])

    def set(self, key: str, value: Any) -> None:
        key = _validate_key(key)
        self._data[key] = dumps_json(value)

    def delete(self, key: str) -> bool:
        key = _validate_key(key)
        return self._data.pop(key, None) is not None

    def list_entries(self) -> List[StateEntry]:
        return [
            StateEntry(key=k, value_json=v, updated_at="")
            for k, v in sorted(self._data.items())
        ]
