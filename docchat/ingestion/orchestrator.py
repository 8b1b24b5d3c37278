"""Background ingestion of uploaded files into conversation records.

Lifecycle per upload:
    ACCEPTED -> PLACEHOLDER_SHOWN -> EXTRACTING -> COMPLETED | FAILED
with CANCELLED when the chat is deleted (or its file removed) before the
terminal write. begin_ingestion() creates the chat and returns its id at once;
extraction runs as an asyncio task whose blocking work (extraction and the
terminal store write) happens in worker threads, and ends with exactly one
atomic terminal write into the store.
"""

import asyncio
import threading
import uuid
from dataclasses import dataclass, field

from docchat.config.settings import Settings
from docchat.extractors.dispatcher import ExtractionDispatcher, build_dispatcher
from docchat.ingestion import messages
from docchat.ingestion.exceptions import ChatNotFoundError, IngestionError
from docchat.ingestion.formats import Format, classify
from docchat.ingestion.models import (
    ChatMessage,
    ConversationRecord,
    ExtractionResult,
    IngestionState,
    UploadedArtifact,
)
from docchat.ingestion.records import derive_title, describe_file
from docchat.ingestion.validation import validate_artifact
from docchat.logging.logger import Log
from docchat.store.base import BaseConversationStore
from docchat.store.factory import ConversationStoreFactory


@dataclass
class ExtractionHandle:
    """Tracks one chat's extraction: its task, state and cancellation token.

    lock is held across the token check and the terminal write, and by cancel()
    while it sets the token, so a cancelled chat is never written afterwards.
    """

    chat_id: str
    state: IngestionState = IngestionState.ACCEPTED
    cancelled: threading.Event = field(default_factory=threading.Event)
    lock: threading.Lock = field(default_factory=threading.Lock)
    task: "asyncio.Task[IngestionState] | None" = None
    started: bool = False


class IngestionOrchestrator:
    """Owns the asynchronous upload -> extraction -> terminal write lifecycle."""

    def __init__(
        self,
        *,
        store: BaseConversationStore,
        dispatcher: ExtractionDispatcher,
        max_upload_size_bytes: int,
        keep_file_preview: bool = True,
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher
        self._max_upload_size_bytes = max_upload_size_bytes
        self._keep_file_preview = keep_file_preview
        self._handles: dict[str, ExtractionHandle] = {}
        self._tasks: set[asyncio.Task[IngestionState]] = set()

    @property
    def store(self) -> BaseConversationStore:
        return self._store

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def begin_ingestion(self, artifact: UploadedArtifact, user_id: str | None = None) -> str:
        """Validate *artifact*, create its chat with a placeholder and schedule extraction.

        Must be called while an event loop is running. Returns the new chat id
        without waiting for extraction.

        Raises:
            FileTooLargeError / UnsupportedFileTypeError: before any chat exists.
            RuntimeError: if no event loop is running.
        """
        validate_artifact(artifact, self._max_upload_size_bytes)
        loop = asyncio.get_running_loop()

        chat_id = str(uuid.uuid4())
        handle = ExtractionHandle(chat_id=chat_id)
        self._handles[chat_id] = handle

        is_image = classify(artifact.media_type, artifact.name) is Format.IMAGE
        record = ConversationRecord(
            id=chat_id,
            title=derive_title(artifact.name),
            file=describe_file(artifact, keep_preview=self._keep_file_preview),
            full_text=messages.placeholder_for(is_image),
            messages=[ChatMessage(sender="ai", text=messages.upload_notice_for(is_image))],
            processing_complete=False,
            processing_error=False,
            user_id=user_id,
        )
        try:
            self._store.add(record)
        except Exception:
            del self._handles[chat_id]
            raise
        handle.state = IngestionState.PLACEHOLDER_SHOWN
        Log.info(
            f"Accepted {artifact.name} ({artifact.size_bytes} bytes, "
            f"{artifact.media_type or 'unknown type'}) as chat {chat_id}"
        )

        task = loop.create_task(
            self.run_extraction(chat_id, artifact),
            name=f"ingest-{chat_id}",
        )
        handle.task = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return chat_id

    async def run_extraction(self, chat_id: str, artifact: UploadedArtifact) -> IngestionState:
        """Extract *artifact* and commit the result into chat *chat_id*.

        Extraction and store errors never propagate: they end in a FAILED state.

        Raises:
            IngestionError: if an extraction for this chat has already started.
        """
        handle = self._claim(chat_id)
        handle.state = IngestionState.EXTRACTING
        Log.info(f"Extracting {artifact.name} for chat {chat_id}")

        try:
            text = await asyncio.to_thread(self._dispatcher.extract, artifact)
        except asyncio.CancelledError:
            handle.state = IngestionState.CANCELLED
            Log.info(f"Extraction for chat {chat_id} cancelled")
            raise
        except Exception as exc:
            Log.error(f"Extraction of {artifact.name} for chat {chat_id} failed: {exc}")
            result = ExtractionResult.failed(str(exc) or type(exc).__name__)
        else:
            Log.info(f"Extracted {len(text)} chars from {artifact.name} for chat {chat_id}")
            result = ExtractionResult.success(text)

        return await asyncio.to_thread(self._commit, handle, artifact, result)

    def cancel(self, chat_id: str) -> bool:
        """Stop waiting for an in-flight extraction and suppress its terminal write.

        Returns True if an extraction was still pending. Blocks while a terminal
        write for this chat is in progress.
        """
        handle = self._handles.get(chat_id)
        if handle is None:
            return False
        with handle.lock:
            if handle.state.is_terminal:
                return False
            handle.cancelled.set()
            handle.state = IngestionState.CANCELLED
        if handle.task is not None and not handle.task.done():
            handle.task.cancel()
        Log.info(f"Cancelled ingestion for chat {chat_id}")
        return True

    def delete_chat(self, chat_id: str) -> bool:
        """Cancel any pending extraction, forget it, then delete the chat from the store."""
        self.cancel(chat_id)
        self._handles.pop(chat_id, None)
        deleted = self._store.delete(chat_id)
        if deleted:
            Log.info(f"Deleted chat {chat_id}")
        return deleted

    def remove_file(self, chat_id: str) -> None:
        """Detach the file from a chat: no file, empty text, no messages.

        Raises:
            ChatNotFoundError: if the chat does not exist.
        """
        self.cancel(chat_id)
        self._store.update_fields(
            chat_id,
            file=None,
            full_text="",
            processing_complete=True,
            processing_error=False,
        )
        self._store.replace_messages(chat_id, [])
        Log.info(f"Removed file from chat {chat_id}")

    def state(self, chat_id: str) -> IngestionState | None:
        handle = self._handles.get(chat_id)
        return handle.state if handle is not None else None

    async def wait(self, chat_id: str) -> IngestionState | None:
        """Wait until the extraction for *chat_id* settles and return its final state."""
        handle = self._handles.get(chat_id)
        if handle is None:
            return None
        if handle.task is not None:
            await asyncio.wait([handle.task])
        return handle.state

    async def drain(self) -> None:
        """Wait for every scheduled extraction, including those of deleted chats, to settle."""
        if self._tasks:
            await asyncio.wait(list(self._tasks))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _claim(self, chat_id: str) -> ExtractionHandle:
        handle = self._handles.setdefault(chat_id, ExtractionHandle(chat_id=chat_id))
        if handle.started:
            raise IngestionError(f"Extraction for chat {chat_id} already started")
        handle.started = True
        return handle

    def _commit(
        self,
        handle: ExtractionHandle,
        artifact: UploadedArtifact,
        result: ExtractionResult,
    ) -> IngestionState:
        """The single terminal write for a chat. Runs in a worker thread."""
        chat_id = handle.chat_id
        with handle.lock:
            if handle.cancelled.is_set():
                handle.state = IngestionState.CANCELLED
                Log.info(f"Chat {chat_id} was cancelled, dropping extraction result")
                return handle.state
            try:
                if not self._store.exists(chat_id):
                    raise ChatNotFoundError(f"Chat {chat_id} not found")
                self._store.commit_terminal(chat_id, *self._terminal_write(artifact, result))
            except ChatNotFoundError:
                handle.state = IngestionState.CANCELLED
                self._handles.pop(chat_id, None)
                Log.info(f"Chat {chat_id} was deleted, dropping extraction result")
                return handle.state
            except Exception as exc:
                handle.state = IngestionState.FAILED
                Log.error(f"Terminal write for chat {chat_id} failed: {exc}")
                self._commit_store_failure(chat_id, artifact, exc)
                return handle.state
            handle.state = IngestionState.COMPLETED if result.ok else IngestionState.FAILED

        Log.info(f"Chat {chat_id} ingestion finished: {handle.state.value}")
        return handle.state

    def _commit_store_failure(
        self,
        chat_id: str,
        artifact: UploadedArtifact,
        error: Exception,
    ) -> None:
        # e.g. Postgres rejects NUL bytes in extracted text; the chat must not stay pending
        failure = ExtractionResult.failed(f"The extracted content could not be saved ({error}).")
        try:
            self._store.commit_terminal(chat_id, *self._terminal_write(artifact, failure))
        except Exception as exc:
            Log.error(f"Could not record the failure for chat {chat_id} either: {exc}")

    @staticmethod
    def _terminal_write(
        artifact: UploadedArtifact,
        result: ExtractionResult,
    ) -> tuple[dict[str, object], ChatMessage]:
        is_image = classify(artifact.media_type, artifact.name) is Format.IMAGE
        if result.ok:
            fields: dict[str, object] = {
                "full_text": result.text,
                "processing_complete": True,
                "processing_error": False,
            }
            text = messages.completion_message(artifact.name, is_image)
        else:
            cause = result.failure or "unknown error"
            fields = {
                "full_text": messages.failure_full_text(artifact.name, cause),
                "processing_complete": True,
                "processing_error": True,
            }
            text = messages.failure_message(artifact.name, cause)
        return fields, ChatMessage(sender="ai", text=text)


def build_orchestrator(
    settings: Settings,
    store: BaseConversationStore | None = None,
) -> IngestionOrchestrator:
    """Build an IngestionOrchestrator with all required adapters."""
    return IngestionOrchestrator(
        store=store if store is not None else ConversationStoreFactory.create(settings),
        dispatcher=build_dispatcher(settings),
        max_upload_size_bytes=settings.max_upload_size_bytes,
        keep_file_preview=settings.keep_file_preview,
    )
