from abc import ABC, abstractmethod
from typing import Any

from docchat.ingestion.models import ChatMessage, ConversationRecord

# Fields the field-level merge may touch. messages only change through
# append_message / replace_messages.
UPDATABLE_FIELDS = frozenset({
    "title",
    "file",
    "full_text",
    "processing_complete",
    "processing_error",
})


def check_update_fields(fields: dict[str, Any]) -> None:
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update fields {sorted(unknown)}; allowed: {sorted(UPDATABLE_FIELDS)}")


class BaseConversationStore(ABC):
    """Single source of truth for conversation records, keyed by chat id."""

    @abstractmethod
    def add(self, record: ConversationRecord) -> None:
        """Insert a new record. Raises ValueError if the id already exists."""

    @abstractmethod
    def get(self, chat_id: str) -> ConversationRecord:
        """Return a snapshot of the record.

        Raises:
            ChatNotFoundError: if no chat with this id exists.
        """

    @abstractmethod
    def exists(self, chat_id: str) -> bool:
        ...

    @abstractmethod
    def list_chats(self, user_id: str | None = None) -> list[ConversationRecord]:
        """Return records in creation order, optionally only those of *user_id*."""

    @abstractmethod
    def update_fields(self, chat_id: str, **fields: Any) -> None:
        """Merge the given fields into the record, leaving all others untouched.

        Raises:
            ChatNotFoundError: if no chat with this id exists.
            ValueError: if a field outside UPDATABLE_FIELDS is given.
        """

    @abstractmethod
    def append_message(self, chat_id: str, message: ChatMessage) -> None:
        """Append one message to the end of the chat.

        Raises:
            ChatNotFoundError: if no chat with this id exists.
        """

    @abstractmethod
    def commit_terminal(self, chat_id: str, fields: dict[str, Any], message: ChatMessage) -> None:
        """Merge *fields* and append *message* atomically: both land or neither does.

        Raises:
            ChatNotFoundError: if no chat with this id exists.
            ValueError: if a field outside UPDATABLE_FIELDS is given.
        """

    @abstractmethod
    def replace_messages(self, chat_id: str, messages: list[ChatMessage]) -> None:
        """Overwrite the message list (user edit / file removal flows only)."""

    @abstractmethod
    def delete(self, chat_id: str) -> bool:
        """Remove the record. Returns False if it did not exist."""
