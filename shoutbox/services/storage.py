"""
Defines storage management APIs, using SQLite, for
message persistence.
"""

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List

from shoutbox.core.message import Message, MessageCreate


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


class StorageService:
    """Handles persistence of the message collection."""

    def __init__(self, db_name: str):
        self.db_name = db_name
        self._init_db()

    @contextmanager
    def _get_conn(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_name)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._get_conn() as conn:
            cursor = conn.cursor()

            # AUTOINCREMENT guarantees ids are never reused
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS messages (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT NOT NULL,
                    content TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                    )
                """
            )

            cursor.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_messages_created_at
                    ON messages(created_at, id)
                """
            )

            conn.commit()

    def add_message(self, candidate: MessageCreate) -> Message:
        """
        Inserts a new message and returns the stored record.
        """
        timestamp = _now()

        with self._get_conn() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO messages
                    (username, content, created_at, updated_at)
                    VALUES (?, ?, ?, ?)
                """,
                (candidate.username, candidate.content, timestamp, timestamp),
            )
            conn.commit()
            message_id = cursor.lastrowid

        return Message(
            id=message_id,
            username=candidate.username,
            content=candidate.content,
            created_at=timestamp,
            updated_at=timestamp,
        )

    def get_all_messages(self) -> List[Message]:
        """Retrieves every message, oldest first, as Pydantic objects"""
        with self._get_conn() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, username, content, created_at, updated_at
                    FROM messages
                    ORDER BY created_at ASC, id ASC
                """
            )
            rows = cursor.fetchall()

        return [Message(**dict(row)) for row in rows]

