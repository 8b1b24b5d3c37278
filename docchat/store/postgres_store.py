from typing import Any

import psycopg
from psycopg import sql
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from docchat.database.connection import get_connection
from docchat.ingestion.exceptions import ChatNotFoundError
from docchat.ingestion.models import ChatMessage, ConversationRecord
from docchat.ingestion.records import file_descriptor_to_dict, record_from_dict
from docchat.store.base import BaseConversationStore, check_update_fields


def _db_value(name: str, value: Any) -> Any:
    if name == "file":
        payload = file_descriptor_to_dict(value)
        return Jsonb(payload) if payload is not None else None
    return value


class PostgresConversationStore(BaseConversationStore):
    """Database operations for the chats and chat_messages tables."""

    def add(self, record: ConversationRecord) -> None:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO chats
                    (id, title, file, full_text, processing_complete,
                     processing_error, user_id, created_at)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                    ON CONFLICT (id) DO NOTHING
                    """,
                    (
                        record.id,
                        record.title,
                        _db_value("file", record.file),
                        record.full_text,
                        record.processing_complete,
                        record.processing_error,
                        record.user_id,
                        record.created_at,
                    ),
                )
                if cur.rowcount == 0:
                    raise ValueError(f"Chat {record.id} already exists")
                for position, message in enumerate(record.messages):
                    cur.execute(
                        """
                        INSERT INTO chat_messages (chat_id, position, sender, text)
                        VALUES (%s, %s, %s, %s)
                        """,
                        (record.id, position, message.sender, message.text),
                    )
            conn.commit()

    def get(self, chat_id: str) -> ConversationRecord:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, title, file, full_text, processing_complete,
                           processing_error, user_id, created_at
                    FROM chats
                    WHERE id = %s
                    """,
                    (chat_id,),
                )
                row = cur.fetchone()
                if row is None:
                    raise ChatNotFoundError(f"Chat {chat_id} not found")
                cur.execute(
                    """
                    SELECT sender, text FROM chat_messages
                    WHERE chat_id = %s
                    ORDER BY position
                    """,
                    (chat_id,),
                )
                message_rows = cur.fetchall()

        return self._build_record(row, message_rows)

    def exists(self, chat_id: str) -> bool:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1 FROM chats WHERE id = %s", (chat_id,))
                return cur.fetchone() is not None

    def list_chats(self, user_id: str | None = None) -> list[ConversationRecord]:
        with get_connection() as conn:
            with conn.cursor() as cur:
                if user_id is None:
                    cur.execute("SELECT id FROM chats ORDER BY created_at")
                else:
                    cur.execute(
                        "SELECT id FROM chats WHERE user_id = %s ORDER BY created_at",
                        (user_id,),
                    )
                ids = [row[0] for row in cur.fetchall()]
        records: list[ConversationRecord] = []
        for chat_id in ids:
            try:
                records.append(self.get(chat_id))
            except ChatNotFoundError:
                continue  # deleted between the two queries
        return records

    def update_fields(self, chat_id: str, **fields: Any) -> None:
        check_update_fields(fields)
        if not fields:
            return
        with get_connection() as conn:
            with conn.cursor() as cur:
                self._update_chat(cur, chat_id, fields)
            conn.commit()

    def append_message(self, chat_id: str, message: ChatMessage) -> None:
        with get_connection() as conn:
            with conn.cursor() as cur:
                self._lock_chat(cur, chat_id)
                self._insert_next_message(cur, chat_id, message)
            conn.commit()

    def commit_terminal(self, chat_id: str, fields: dict[str, Any], message: ChatMessage) -> None:
        check_update_fields(fields)
        with get_connection() as conn:
            with conn.cursor() as cur:
                self._lock_chat(cur, chat_id)
                if fields:
                    self._update_chat(cur, chat_id, fields)
                self._insert_next_message(cur, chat_id, message)
            conn.commit()

    def replace_messages(self, chat_id: str, messages: list[ChatMessage]) -> None:
        with get_connection() as conn:
            with conn.cursor() as cur:
                self._lock_chat(cur, chat_id)
                cur.execute("DELETE FROM chat_messages WHERE chat_id = %s", (chat_id,))
                for position, message in enumerate(messages):
                    cur.execute(
                        """
                        INSERT INTO chat_messages (chat_id, position, sender, text)
                        VALUES (%s, %s, %s, %s)
                        """,
                        (chat_id, position, message.sender, message.text),
                    )
            conn.commit()

    def delete(self, chat_id: str) -> bool:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM chats WHERE id = %s", (chat_id,))
                deleted = cur.rowcount > 0
            conn.commit()
        return deleted

    @staticmethod
    def _lock_chat(cur: psycopg.Cursor[Any], chat_id: str) -> None:
        # row lock serializes concurrent writers to the same chat
        cur.execute("SELECT id FROM chats WHERE id = %s FOR UPDATE", (chat_id,))
        if cur.fetchone() is None:
            raise ChatNotFoundError(f"Chat {chat_id} not found")

    @staticmethod
    def _update_chat(cur: psycopg.Cursor[Any], chat_id: str, fields: dict[str, Any]) -> None:
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(name)) for name in fields
        )
        query = sql.SQL("UPDATE chats SET {}, updated_at = NOW() WHERE id = %s").format(
            assignments
        )
        params = [_db_value(name, value) for name, value in fields.items()]
        cur.execute(query, (*params, chat_id))
        if cur.rowcount == 0:
            raise ChatNotFoundError(f"Chat {chat_id} not found")

    @staticmethod
    def _insert_next_message(cur: psycopg.Cursor[Any], chat_id: str, message: ChatMessage) -> None:
        cur.execute(
            """
            INSERT INTO chat_messages (chat_id, position, sender, text)
            SELECT %s, COALESCE(MAX(position) + 1, 0), %s, %s
            FROM chat_messages
            WHERE chat_id = %s
            """,
            (chat_id, message.sender, message.text, chat_id),
        )

    @staticmethod
    def _build_record(
        row: dict[str, Any],
        message_rows: list[dict[str, Any]],
    ) -> ConversationRecord:
        return record_from_dict({**row, "messages": message_rows})
