from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Literal

Sender = Literal["user", "ai"]


@dataclass(frozen=True)
class UploadedArtifact:
    """A file as handed over by the upload surface. Never persisted directly."""

    name: str
    size_bytes: int
    media_type: str
    content: bytes = field(repr=False)
    last_modified: int | None = None


@dataclass(frozen=True)
class ExtractionResult:
    """Output of one extraction. Exactly one of text/failure is set."""

    text: str | None = None
    failure: str | None = None

    def __post_init__(self) -> None:
        if (self.text is None) == (self.failure is None):
            raise ValueError("ExtractionResult needs exactly one of text or failure")

    @classmethod
    def success(cls, text: str) -> "ExtractionResult":
        return cls(text=text)

    @classmethod
    def failed(cls, cause: str) -> "ExtractionResult":
        return cls(failure=cause)

    @property
    def ok(self) -> bool:
        return self.text is not None


@dataclass(frozen=True)
class FileDescriptor:
    """Metadata kept on a chat for its uploaded file (no raw bytes)."""

    name: str
    media_type: str
    size_bytes: int
    is_image: bool = False
    last_modified: int | None = None
    data_url: str | None = field(default=None, repr=False)


@dataclass(frozen=True)
class ChatMessage:
    sender: Sender
    text: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ConversationRecord:
    """A chat as held by the conversation store."""

    id: str
    title: str
    file: FileDescriptor | None = None
    full_text: str = ""
    messages: list[ChatMessage] = field(default_factory=list)
    processing_complete: bool = True
    processing_error: bool = False
    user_id: str | None = None
    created_at: datetime = field(default_factory=_utcnow)


class IngestionState(str, Enum):
    ACCEPTED = "accepted"
    PLACEHOLDER_SHOWN = "placeholder_shown"
    EXTRACTING = "extracting"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (IngestionState.COMPLETED, IngestionState.FAILED, IngestionState.CANCELLED)
