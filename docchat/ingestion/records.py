"""Helpers that build and serialize conversation records."""

import base64
from dataclasses import asdict
from datetime import datetime
from typing import Any

from docchat.ingestion.formats import Format, classify
from docchat.ingestion.models import (
    ChatMessage,
    ConversationRecord,
    FileDescriptor,
    UploadedArtifact,
)

_MAX_TITLE_LENGTH = 25
_TRUNCATED_TITLE_LENGTH = 22


def derive_title(filename: str) -> str:
    """Default chat title: the file name, shortened to 22 chars + '...' past 25."""
    if len(filename) > _MAX_TITLE_LENGTH:
        return filename[:_TRUNCATED_TITLE_LENGTH] + "..."
    return filename


def to_data_url(content: bytes, media_type: str) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{media_type or 'application/octet-stream'};base64,{encoded}"


def describe_file(artifact: UploadedArtifact, keep_preview: bool = True) -> FileDescriptor:
    """Build the persisted descriptor for *artifact* (raw bytes only as a preview URL)."""
    return FileDescriptor(
        name=artifact.name,
        media_type=artifact.media_type,
        size_bytes=artifact.size_bytes,
        is_image=classify(artifact.media_type, artifact.name) is Format.IMAGE,
        last_modified=artifact.last_modified,
        data_url=to_data_url(artifact.content, artifact.media_type) if keep_preview else None,
    )


def file_descriptor_to_dict(descriptor: FileDescriptor | None) -> dict[str, Any] | None:
    if descriptor is None:
        return None
    return asdict(descriptor)


def file_descriptor_from_dict(raw: dict[str, Any] | None) -> FileDescriptor | None:
    if not raw:
        return None
    return FileDescriptor(
        name=raw["name"],
        media_type=raw.get("media_type", ""),
        size_bytes=int(raw.get("size_bytes", 0)),
        is_image=bool(raw.get("is_image", False)),
        last_modified=raw.get("last_modified"),
        data_url=raw.get("data_url"),
    )


def record_to_dict(record: ConversationRecord, include_preview: bool = False) -> dict[str, Any]:
    """JSON-ready representation of a chat. Preview data URLs are dropped by default."""
    file_payload = file_descriptor_to_dict(record.file)
    if file_payload is not None and not include_preview:
        file_payload.pop("data_url", None)
    return {
        "id": record.id,
        "title": record.title,
        "file": file_payload,
        "full_text": record.full_text,
        "messages": [asdict(m) for m in record.messages],
        "processing_complete": record.processing_complete,
        "processing_error": record.processing_error,
        "user_id": record.user_id,
        "created_at": record.created_at.isoformat(),
    }


def record_from_dict(raw: dict[str, Any]) -> ConversationRecord:
    created_at = raw.get("created_at")
    record = ConversationRecord(
        id=raw["id"],
        title=raw.get("title", ""),
        file=file_descriptor_from_dict(raw.get("file")),
        full_text=raw.get("full_text", ""),
        messages=[ChatMessage(sender=m["sender"], text=m["text"]) for m in raw.get("messages", [])],
        processing_complete=bool(raw.get("processing_complete", True)),
        processing_error=bool(raw.get("processing_error", False)),
        user_id=raw.get("user_id"),
    )
    if isinstance(created_at, str):
        record.created_at = datetime.fromisoformat(created_at)
    elif isinstance(created_at, datetime):
        record.created_at = created_at
    return record
