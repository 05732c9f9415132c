"""Key-value stores for persisting editor state between sessions."""

import os
import sqlite3
from pathlib import Path

from flowspec.utils.identifiers import utc_timestamp


# fixed keys of the persisted editor state
SPEC_KEY = "flowspec-yaml-spec"
EDGE_LABELS_KEY = "flowspec-edge-labels"
GRAPH_CONFIG_KEY = "flowspec-graph-config"
LANGUAGE_KEY = "flowspec-language"
SKIP_TEMPLATES_KEY = "flowspec-skip-templates"
CUSTOM_TEMPLATES_KEY = "flowspec-custom-templates"

DEFAULT_DB_PATH = Path(__file__).parent.parent / "data" / "flowspec.db"
FLOWSPEC_DB_PATH = Path(os.getenv("FLOWSPEC_DB_PATH", str(DEFAULT_DB_PATH)))


class KeyValueStore:
    """Protocol for durable string storage."""

    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is unset."""
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        """Store a value under a key, replacing any previous one."""
        raise NotImplementedError

    def delete(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""
        raise NotImplementedError


class InMemoryStore(KeyValueStore):
    """Keeps values in a dict."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def delete(self, key: str) -> None:
        self.values.pop(key, None)

    def clear(self) -> None:
        """Remove all values."""
        self.values.clear()


class SqliteStore(KeyValueStore):
    """Stores values in a single sqlite table."""

    def __init__(self, path: Path | str = FLOWSPEC_DB_PATH) -> None:
        self.path = Path(path)
        self.init_db()

    def _connect(self) -> sqlite3.Connection:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                create table if not exists kv_store (
                    key text primary key,
                    value text not null,
                    updated_at text not null
                )
                """
            )
            conn.commit()

    def get(self, key: str) -> str | None:
        with self._connect() as conn:
            row = conn.execute(
                "select value from kv_store where key = ?",
                (key,),
            ).fetchone()
        if not row:
            return None
        return row["value"]

    def set(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                insert into kv_store (key, value, updated_at)
                values (?, ?, ?)
                on conflict(key) do update set
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, utc_timestamp()),
            )
            conn.commit()

    def delete(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("delete from kv_store where key = ?", (key,))
            conn.commit()
