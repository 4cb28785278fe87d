"""SQLite persistence for moments and settings.

Two independently keyed records live in a single ``kv`` table: the moment
collection and the user settings. Reads never raise. A missing or corrupt
record resets to an empty default.
"""

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import structlog
from pydantic import ValidationError

from .models import MOMENT_LIST, Moment, Settings

logger = structlog.get_logger()

MOMENTS_KEY = "moments"
SETTINGS_KEY = "settings"


def wal_connect(db_path: str | Path) -> sqlite3.Connection:
    """Open SQLite connection with WAL journal mode."""
    conn = sqlite3.connect(str(db_path))
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


class KeyValueStore:
    """JSON records keyed by string, backed by SQLite."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path).expanduser()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._init_tables()
        except sqlite3.DatabaseError as e:
            self._quarantine(e)

    def _quarantine(self, error: Exception) -> None:
        """Move an unreadable database aside and start a fresh one."""
        aside = self.db_path.with_name(self.db_path.name + ".corrupt")
        logger.warning("kv_init_failed", path=str(self.db_path), moved_to=str(aside), error=str(error))
        try:
            self.db_path.replace(aside)
            self._init_tables()
        except (OSError, sqlite3.Error) as e:
            logger.error("kv_reset_failed", path=str(self.db_path), error=str(e))

    def _init_tables(self):
        with wal_connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

    def load(self, key: str) -> Optional[Any]:
        """Return the decoded record for ``key``, or None if absent/unreadable."""
        try:
            with wal_connect(self.db_path) as conn:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            logger.warning("kv_load_failed", key=key, error=str(e))
            return None
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            logger.warning("kv_record_corrupt", key=key, error=str(e))
            return None

    def save(self, key: str, record: Any) -> bool:
        """Overwrite ``key`` with ``record``. Last write wins."""
        try:
            payload = json.dumps(record)
            with wal_connect(self.db_path) as conn:
                conn.execute(
                    """INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                                   updated_at = excluded.updated_at""",
                    (key, payload, datetime.now().isoformat()),
                )
            return True
        except (sqlite3.Error, TypeError, ValueError) as e:
            logger.error("kv_save_failed", key=key, error=str(e))
            return False

    def delete(self, key: str) -> bool:
        try:
            with wal_connect(self.db_path) as conn:
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            return True
        except sqlite3.Error as e:
            logger.error("kv_delete_failed", key=key, error=str(e))
            return False

    def keys(self, prefix: str = "") -> list[str]:
        try:
            with wal_connect(self.db_path) as conn:
                rows = conn.execute("SELECT key FROM kv ORDER BY key").fetchall()
        except sqlite3.Error as e:
            logger.warning("kv_keys_failed", prefix=prefix, error=str(e))
            return []
        return [r[0] for r in rows if r[0].startswith(prefix)]


class MomentStorage:
    """Load/save the moment collection and settings over a KeyValueStore."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self) -> list[Moment]:
        data = self.store.load(MOMENTS_KEY)
        if data is None:
            return []
        try:
            return MOMENT_LIST.validate_python(data)
        except ValidationError as e:
            logger.warning("moments_load_failed", error_count=e.error_count())
            return []

    def save(self, moments: list[Moment]) -> bool:
        return self.store.save(MOMENTS_KEY, MOMENT_LIST.dump_python(list(moments), mode="json"))

    def load_settings(self) -> Settings:
        data = self.store.load(SETTINGS_KEY)
        if not data:
            return Settings()
        try:
            return Settings.model_validate(data)
        except ValidationError as e:
            logger.warning("settings_load_failed", error_count=e.error_count())
            return Settings()

    def save_settings(self, settings: Settings) -> bool:
        return self.store.save(SETTINGS_KEY, settings.model_dump(mode="json"))
