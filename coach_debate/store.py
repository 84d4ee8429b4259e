"""SQLite storage layer for debate turns."""
import logging
import sqlite3
import threading
import time
import uuid
from typing import Optional

from .config import DB_PATH
from .errors import NotFoundError, StorageError
from .types import Turn, TopicThread, parse_persona, validate_turn_fields

logger = logging.getLogger(__name__)

_COLUMNS = "id, topic, persona, message, created_at"


class SQLiteTurnStore:
    """Append-only collection of turns keyed by topic.

    All methods are synchronous; the orchestrator awaits them through
    ``asyncio.to_thread``. Any sqlite failure surfaces as StorageError.
    """

    def __init__(self, db_path: str = DB_PATH):
        self.db_path = db_path
        self._lock = threading.Lock()
        self._last_ts = 0.0
        try:
            self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open database {db_path}: {e}") from e
        self.conn.row_factory = sqlite3.Row
        self._init_tables()
        logger.info("Turn store ready at %s", db_path)

    def _exec(self, sql: str, params: tuple = ()):  # helper
        with self._lock:
            try:
                cur = self.conn.cursor()
                cur.execute(sql, params)
                self.conn.commit()
                return cur
            except sqlite3.Error as e:
                logger.error("SQLite error on %r: %s", sql.split()[0], e)
                raise StorageError(str(e)) from e

    def _fetch(self, sql: str, params: tuple = ()) -> list:
        with self._lock:
            try:
                return self.conn.execute(sql, params).fetchall()
            except sqlite3.Error as e:
                logger.error("SQLite error on %r: %s", sql.split()[0], e)
                raise StorageError(str(e)) from e

    def _init_tables(self):
        self._exec("""
        CREATE TABLE IF NOT EXISTS turns (
          id TEXT PRIMARY KEY,
          topic TEXT NOT NULL,
          persona TEXT NOT NULL,
          message TEXT NOT NULL,
          created_at REAL NOT NULL
        );
        """)
        self._exec("CREATE INDEX IF NOT EXISTS idx_turns_topic ON turns(topic, created_at);")

    def _now(self) -> float:
        # strictly increasing so ordering by created_at is total within a process
        ts = max(time.time(), self._last_ts + 1e-6)
        self._last_ts = ts
        return ts

    @staticmethod
    def _row_to_turn(row) -> Turn:
        return Turn(
            id=row["id"],
            topic=row["topic"],
            persona=parse_persona(row["persona"]),
            message=row["message"],
            created_at=row["created_at"],
        )

    # --- CRUD ---
    def create(self, topic: str, persona, message: str) -> Turn:
        persona = validate_turn_fields(topic, persona, message)
        turn = Turn(id=str(uuid.uuid4()), topic=topic, persona=persona,
                    message=message, created_at=self._now())
        self._exec("INSERT INTO turns(id,topic,persona,message,created_at) VALUES (?,?,?,?,?)",
                   (turn.id, turn.topic, turn.persona.value, turn.message, turn.created_at))
        return turn

    def get(self, turn_id: str) -> Turn:
        rows = self._fetch(f"SELECT {_COLUMNS} FROM turns WHERE id = ?", (turn_id,))
        if not rows:
            raise NotFoundError(turn_id)
        return self._row_to_turn(rows[0])

    def list_by_topic(self, topic: str) -> list[Turn]:
        rows = self._fetch(
            f"SELECT {_COLUMNS} FROM turns WHERE topic = ? ORDER BY created_at ASC, rowid ASC",
            (topic,))
        return [self._row_to_turn(r) for r in rows]

    def list_all(self) -> list[Turn]:
        rows = self._fetch(f"SELECT {_COLUMNS} FROM turns ORDER BY created_at ASC, rowid ASC")
        return [self._row_to_turn(r) for r in rows]

    def list_grouped_by_topic(self) -> list[TopicThread]:
        """Turns grouped by topic, most recently active topic first."""
        groups: dict[str, list[Turn]] = {}
        for turn in self.list_all():
            groups.setdefault(turn.topic, []).append(turn)
        threads = [TopicThread(topic=topic, turns=turns) for topic, turns in groups.items()]
        threads.sort(key=lambda t: (t.latest.created_at, t.latest.id), reverse=True)
        return threads

    def update(self, turn_id: str, message: str) -> Turn:
        existing = self.get(turn_id)
        validate_turn_fields(existing.topic, existing.persona, message)
        cur = self._exec("UPDATE turns SET message = ? WHERE id = ?", (message, turn_id))
        if cur.rowcount == 0:
            # deleted between the read and the write
            raise NotFoundError(turn_id)
        return Turn(id=existing.id, topic=existing.topic, persona=existing.persona,
                    message=message, created_at=existing.created_at)

    def delete_one(self, turn_id: str) -> None:
        cur = self._exec("DELETE FROM turns WHERE id = ?", (turn_id,))
        if cur.rowcount == 0:
            raise NotFoundError(turn_id)

    def delete_topic(self, topic: str) -> int:
        cur = self._exec("DELETE FROM turns WHERE topic = ?", (topic,))
        return cur.rowcount

    def delete_all(self) -> int:
        cur = self._exec("DELETE FROM turns")
        return cur.rowcount

    def count(self, topic: Optional[str] = None) -> int:
        if topic is None:
            rows = self._fetch("SELECT COUNT(*) FROM turns")
        else:
            rows = self._fetch("SELECT COUNT(*) FROM turns WHERE topic = ?", (topic,))
        return rows[0][0]

    def close(self):
        with self._lock:
            self.conn.commit()
            self.conn.close()
