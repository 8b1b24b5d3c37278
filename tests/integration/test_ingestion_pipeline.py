from unittest.mock import MagicMock

import pytest

from docchat.config.settings import Settings
from docchat.extractors.dispatcher import ExtractionDispatcher
from docchat.extractors.docx_extractor import DocxExtractor
from docchat.ingestion.exceptions import FileTooLargeError
from docchat.ingestion.formats import DOCX_MEDIA_TYPE
from docchat.ingestion.models import ChatMessage, IngestionState, UploadedArtifact
from docchat.ingestion.orchestrator import IngestionOrchestrator, build_orchestrator
from docchat.pdf.pdfplumber_adapter import PdfPlumberAdapter
from docchat.store.memory_store import InMemoryConversationStore
from docchat.store.postgres_store import PostgresConversationStore
from docchat.vision.analyzer import ImageContentAnalyzer
from docchat.vision.example_client_adapter import ExampleClientAdapter


def _artifact(name: str, media_type: str, content: bytes) -> UploadedArtifact:
    return UploadedArtifact(name=name, size_bytes=len(content), media_type=media_type, content=content)


@pytest.fixture()
def orchestrator() -> IngestionOrchestrator:
    return build_orchestrator(
        Settings(vision_provider="example", store_backend="memory"),
        store=InMemoryConversationStore(),
    )


@pytest.mark.integration
class TestIngestionPipeline:
    async def test_invoice_pdf_becomes_chat_context(
        self, orchestrator: IngestionOrchestrator, invoice_pdf_bytes: bytes
    ) -> None:
        chat_id = orchestrator.begin_ingestion(
            _artifact("invoice.pdf", "application/pdf", invoice_pdf_bytes)
        )
        assert orchestrator.store.get(chat_id).processing_complete is False

        assert await orchestrator.wait(chat_id) is IngestionState.COMPLETED
        record = orchestrator.store.get(chat_id)
        assert record.full_text == "Invoice Total: $42.00"
        assert record.processing_error is False

    async def test_multi_page_pdf_keeps_page_order(
        self, orchestrator: IngestionOrchestrator, multi_page_pdf_bytes: bytes
    ) -> None:
        chat_id = orchestrator.begin_ingestion(
            _artifact("pages.pdf", "application/pdf", multi_page_pdf_bytes)
        )
        await orchestrator.wait(chat_id)
        text = orchestrator.store.get(chat_id).full_text
        assert text.index("Hello") < text.index("World")

    async def test_scanned_pdf_fails_with_readable_cause(
        self, orchestrator: IngestionOrchestrator, empty_pdf_bytes: bytes
    ) -> None:
        chat_id = orchestrator.begin_ingestion(_artifact("scan.pdf", "application/pdf", empty_pdf_bytes))
        assert await orchestrator.wait(chat_id) is IngestionState.FAILED
        record = orchestrator.store.get(chat_id)
        assert record.processing_complete is True
        assert record.processing_error is True
        assert "No extractable text" in record.messages[-1].text

    async def test_truncated_docx_fails(
        self, orchestrator: IngestionOrchestrator, truncated_docx_bytes: bytes
    ) -> None:
        chat_id = orchestrator.begin_ingestion(
            _artifact("contract.docx", DOCX_MEDIA_TYPE, truncated_docx_bytes)
        )
        assert await orchestrator.wait(chat_id) is IngestionState.FAILED
        record = orchestrator.store.get(chat_id)
        assert record.processing_error is True
        assert record.full_text.startswith("Error processing contract.docx:")
        assert "contract.docx" in record.messages[-1].text

    async def test_oversized_upload_is_rejected(self, orchestrator: IngestionOrchestrator) -> None:
        artifact = UploadedArtifact(
            name="huge.pdf",
            size_bytes=20 * 1024 * 1024,
            media_type="application/pdf",
            content=b"%PDF-1.4",
        )
        with pytest.raises(FileTooLargeError, match="exceeds the 15MB limit"):
            orchestrator.begin_ingestion(artifact)
        assert orchestrator.store.list_chats() == []

    async def test_docx_and_text_uploads(
        self, orchestrator: IngestionOrchestrator, docx_bytes: bytes
    ) -> None:
        docx_chat = orchestrator.begin_ingestion(_artifact("report.docx", DOCX_MEDIA_TYPE, docx_bytes))
        text_chat = orchestrator.begin_ingestion(
            _artifact("notes.txt", "text/plain", "Line one\nLine two".encode("utf-8"))
        )
        await orchestrator.drain()

        assert "Region | North" in orchestrator.store.get(docx_chat).full_text
        assert orchestrator.store.get(text_chat).full_text == "Line one\nLine two"

    async def test_image_with_ocr_text(self, png_bytes: bytes) -> None:
        ocr_engine = MagicMock()
        ocr_engine.recognize.return_value = "INVOICE #123"
        orchestrator = IngestionOrchestrator(
            store=InMemoryConversationStore(),
            dispatcher=ExtractionDispatcher(
                pdf_extractor=PdfPlumberAdapter(),
                docx_extractor=DocxExtractor(),
                image_analyzer=ImageContentAnalyzer(
                    ocr_engine=ocr_engine,
                    vision_client=ExampleClientAdapter(),
                    model="example",
                ),
            ),
            max_upload_size_bytes=15 * 1024 * 1024,
        )
        chat_id = orchestrator.begin_ingestion(_artifact("invoice.png", "image/png", png_bytes))
        assert await orchestrator.wait(chat_id) is IngestionState.COMPLETED

        text = orchestrator.store.get(chat_id).full_text
        assert text.startswith("TEXT CONTENT FOUND IN IMAGE:\nINVOICE #123")
        assert ExampleClientAdapter.DEFAULT_DESCRIPTION in text

    async def test_image_with_real_tesseract(
        self,
        tesseract_available: None,
        orchestrator: IngestionOrchestrator,
        invoice_png_bytes: bytes,
    ) -> None:
        chat_id = orchestrator.begin_ingestion(_artifact("invoice.png", "image/png", invoice_png_bytes))
        await orchestrator.wait(chat_id)
        text = orchestrator.store.get(chat_id).full_text
        assert "INVOICE" in text
        assert "VISUAL CONTENT DESCRIPTION:" in text


@pytest.mark.integration
class TestIngestionPipelineOnPostgres:
    async def test_user_message_survives_terminal_write(
        self,
        pg_store: PostgresConversationStore,
        invoice_pdf_bytes: bytes,
    ) -> None:
        orchestrator = build_orchestrator(Settings(vision_provider="example"), store=pg_store)
        chat_id = orchestrator.begin_ingestion(
            _artifact("invoice.pdf", "application/pdf", invoice_pdf_bytes)
        )
        try:
            pg_store.append_message(chat_id, ChatMessage(sender="user", text="Total?"))
            await orchestrator.wait(chat_id)

            record = pg_store.get(chat_id)
            assert record.full_text == "Invoice Total: $42.00"
            assert [m.sender for m in record.messages] == ["ai", "user", "ai"]
        finally:
            pg_store.delete(chat_id)
