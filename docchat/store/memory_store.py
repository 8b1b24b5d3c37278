import copy
import threading
from typing import Any

from docchat.ingestion.exceptions import ChatNotFoundError
from docchat.ingestion.models import ChatMessage, ConversationRecord
from docchat.store.base import BaseConversationStore, check_update_fields


class InMemoryConversationStore(BaseConversationStore):
    """Process-local store. Reads return deep copies of the stored records."""

    def __init__(self) -> None:
        self._records: dict[str, ConversationRecord] = {}
        self._lock = threading.Lock()

    def add(self, record: ConversationRecord) -> None:
        with self._lock:
            if record.id in self._records:
                raise ValueError(f"Chat {record.id} already exists")
            self._records[record.id] = copy.deepcopy(record)

    def get(self, chat_id: str) -> ConversationRecord:
        with self._lock:
            return copy.deepcopy(self._require(chat_id))

    def exists(self, chat_id: str) -> bool:
        with self._lock:
            return chat_id in self._records

    def list_chats(self, user_id: str | None = None) -> list[ConversationRecord]:
        with self._lock:
            records = [
                r for r in self._records.values()
                if user_id is None or r.user_id == user_id
            ]
            return [copy.deepcopy(r) for r in records]

    def update_fields(self, chat_id: str, **fields: Any) -> None:
        check_update_fields(fields)
        with self._lock:
            record = self._require(chat_id)
            for name, value in fields.items():
                setattr(record, name, value)

    def append_message(self, chat_id: str, message: ChatMessage) -> None:
        with self._lock:
            self._require(chat_id).messages.append(message)

    def commit_terminal(self, chat_id: str, fields: dict[str, Any], message: ChatMessage) -> None:
        check_update_fields(fields)
        with self._lock:
            record = self._require(chat_id)
            for name, value in fields.items():
                setattr(record, name, value)
            record.messages.append(message)

    def replace_messages(self, chat_id: str, messages: list[ChatMessage]) -> None:
        with self._lock:
            self._require(chat_id).messages = list(messages)

    def delete(self, chat_id: str) -> bool:
        with self._lock:
            return self._records.pop(chat_id, None) is not None

    def _require(self, chat_id: str) -> ConversationRecord:
        record = self._records.get(chat_id)
        if record is None:
            raise ChatNotFoundError(f"Chat {chat_id} not found")
        return record
