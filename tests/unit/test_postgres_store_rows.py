from datetime import datetime, timezone

from docchat.ingestion.models import ChatMessage, FileDescriptor
from docchat.store.postgres_store import PostgresConversationStore


class TestBuildRecord:
    def test_rebuilds_record_from_rows(self) -> None:
        created_at = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        row = {
            "id": "c1",
            "title": "scan.png",
            "file": {
                "name": "scan.png",
                "media_type": "image/png",
                "size_bytes": 10,
                "is_image": True,
                "last_modified": None,
                "data_url": None,
            },
            "full_text": "text",
            "processing_complete": True,
            "processing_error": False,
            "user_id": None,
            "created_at": created_at,
        }
        message_rows = [{"sender": "ai", "text": "notice"}, {"sender": "user", "text": "q"}]

        record = PostgresConversationStore._build_record(row, message_rows)

        assert record.file == FileDescriptor(
            name="scan.png", media_type="image/png", size_bytes=10, is_image=True
        )
        assert record.messages == [
            ChatMessage(sender="ai", text="notice"),
            ChatMessage(sender="user", text="q"),
        ]
        assert record.created_at == created_at

    def test_null_file_column(self) -> None:
        row = {
            "id": "c2",
            "title": "t",
            "file": None,
            "full_text": "",
            "processing_complete": True,
            "processing_error": False,
            "user_id": "u",
            "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        }
        record = PostgresConversationStore._build_record(row, [])
        assert record.file is None
        assert record.user_id == "u"
