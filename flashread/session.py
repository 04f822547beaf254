# flashread/session.py
"""
Client-side session state for FlashRead.

`SessionManager` is the single owner of uploaded documents, summary history,
the active chat context/transcript and the stored provider keys. Every
in-memory mutation is written through to the injected storage port right
away. Storage is a mirror: it is only read back in `load()`.

Document removal re-issues the storage write from the in-memory list once
more after `RECONCILE_DELAY` seconds (an asyncio task when a loop is
running). Callers that need storage to reflect a removal should
`await manager.settle()`.
"""
import asyncio
import json
import logging
from typing import List, Optional, Set, Tuple
from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from .client import FlashReadClient
from .errors import ChatBusyError, FlashReadError, ValidationError
from .extraction import validate_upload
from .schemas import ChatMessage, Credentials, Document, HistoryItem, SummaryResult
from .storage import CREDENTIALS_KEY, DOCUMENTS_KEY, HISTORY_KEY, Storage
from .utils import excerpt

logger = logging.getLogger(__name__)

_documents_adapter = TypeAdapter(List[Document])
_history_adapter = TypeAdapter(List[HistoryItem])

MAX_HISTORY = 50
CHAT_HISTORY_MESSAGES = 10
RECONCILE_DELAY = 0.1

APOLOGY_MESSAGE = "I'm sorry, I encountered an error while processing your request. Please try again."


def welcome_message(name: Optional[str]) -> str:
    target = f'"{name}"' if name else "your content"
    return (
        f"Hi! I'm ready to help you explore {target}. You can ask me questions about the document, "
        "request explanations, or get deeper insights. What would you like to know?"
    )


class SessionManager:
    def __init__(self, storage: Storage, client: Optional[FlashReadClient] = None):
        self.storage = storage
        self.client = client or FlashReadClient()
        self._documents: List[Document] = []
        self._history: List[HistoryItem] = []
        self._credentials = Credentials()
        self._chat_messages: List[ChatMessage] = []
        self._chat_context: Optional[Tuple[str, str]] = None
        self._chat_key: Optional[Tuple[str, int]] = None
        self._chat_busy = False
        self._pending: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Read history, documents and credentials from storage."""
        self._history = self._read(HISTORY_KEY, _history_adapter, [])[:MAX_HISTORY]
        self._documents = self._read(DOCUMENTS_KEY, _documents_adapter, [])
        raw = self.storage.get(CREDENTIALS_KEY)
        self._credentials = Credentials()
        if raw:
            try:
                self._credentials = Credentials.model_validate_json(raw)
            except PydanticValidationError as e:
                logger.error("Ignoring unreadable %s: %s", CREDENTIALS_KEY, e)
        logger.info("Loaded %d documents and %d history items", len(self._documents), len(self._history))

    def _read(self, key: str, adapter: TypeAdapter, default):
        raw = self.storage.get(key)
        if not raw:
            return default
        try:
            return adapter.validate_json(raw)
        except PydanticValidationError as e:
            logger.error("Ignoring unreadable %s: %s", key, e)
            return default

    @staticmethod
    def _dump(items) -> str:
        return json.dumps([item.model_dump(mode="json", by_alias=True) for item in items])

    def _write_documents(self) -> None:
        self.storage.set(DOCUMENTS_KEY, self._dump(self._documents))

    def _write_history(self) -> None:
        self.storage.set(HISTORY_KEY, self._dump(self._history))

    async def settle(self) -> None:
        """Wait for delayed storage reconciliation to finish."""
        pending = [t for t in self._pending if not t.done()]
        while pending:
            await asyncio.gather(*pending)
            pending = [t for t in self._pending if not t.done()]
        self._pending.clear()

    # ------------------------------------------------------------------
    # documents
    # ------------------------------------------------------------------
    @property
    def documents(self) -> Tuple[Document, ...]:
        return tuple(self._documents)

    def get_document(self, document_id: str) -> Optional[Document]:
        for doc in self._documents:
            if doc.id == document_id:
                return doc
        return None

    def add_document(self, document: Document) -> Document:
        """Insert, or replace the document with the same id."""
        for i, doc in enumerate(self._documents):
            if doc.id == document.id:
                self._documents[i] = document
                break
        else:
            self._documents.append(document)
        self._write_documents()
        return document

    def update_document_status(
        self, document_id: str, status: str, *, error: Optional[str] = None, **changes
    ) -> Optional[Document]:
        current = self.get_document(document_id)
        if current is None:
            # removed while its extraction was still in flight
            logger.info("Skipping update for unknown document %s", document_id)
            return None
        updated = Document.model_validate(
            {**current.model_dump(), **changes, "status": status, "error": error}
        )
        return self.add_document(updated)

    def remove_document(self, document_id: str) -> None:
        self._documents = [d for d in self._documents if d.id != document_id]
        self._write_documents()
        self._schedule_reconcile(document_id)

    def clear_documents(self) -> None:
        self._documents = []
        self.storage.remove(DOCUMENTS_KEY)

    def _schedule_reconcile(self, document_id: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._reconcile_removal(document_id)
            return
        task = loop.create_task(self._reconcile_later(document_id))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _reconcile_later(self, document_id: str) -> None:
        await asyncio.sleep(RECONCILE_DELAY)
        self._reconcile_removal(document_id)

    def _reconcile_removal(self, document_id: str) -> None:
        self._write_documents()
        logger.debug("Storage reconciled after removing %s, %d documents remain", document_id, len(self._documents))

    # ------------------------------------------------------------------
    # history
    # ------------------------------------------------------------------
    @property
    def history(self) -> Tuple[HistoryItem, ...]:
        return tuple(self._history)

    def record_summary(self, mode: str, source: str, provider: str, length: str, summary: str) -> HistoryItem:
        item = HistoryItem(
            mode=mode,
            source=excerpt(source) if mode == "text" else source,
            provider=provider,
            length=length,
            summary=summary,
        )
        self._history = [item] + self._history[: MAX_HISTORY - 1]
        self._write_history()
        return item

    def clear_history(self) -> None:
        self._history = []
        self.storage.remove(HISTORY_KEY)

    # ------------------------------------------------------------------
    # credentials
    # ------------------------------------------------------------------
    @property
    def credentials(self) -> Credentials:
        return self._credentials

    def save_credentials(self, rapidapi_key: str = "", groq_key: str = "") -> Credentials:
        self._credentials = Credentials(rapidapi_key=rapidapi_key.strip(), groq_key=groq_key.strip())
        self.storage.set(CREDENTIALS_KEY, self._credentials.model_dump_json(by_alias=True))
        return self._credentials

    def clear_credentials(self) -> None:
        self._credentials = Credentials()
        self.storage.remove(CREDENTIALS_KEY)

    # ------------------------------------------------------------------
    # chat context
    # ------------------------------------------------------------------
    @property
    def chat_messages(self) -> Tuple[ChatMessage, ...]:
        return tuple(self._chat_messages)

    @property
    def active_chat_context(self) -> Optional[Tuple[str, str]]:
        """(content, name) of the document or summary being chatted about."""
        return self._chat_context

    @property
    def chat_busy(self) -> bool:
        return self._chat_busy

    def set_active_chat_context(self, content: str, name: str) -> bool:
        """
        Point the chat at new content. Returns True when the transcript was reset.

        The session is keyed on (name, len(content)): re-selecting the same
        document keeps the conversation, a different one starts over.
        """
        key = (name, len(content or ""))
        if key == self._chat_key:
            self._chat_context = (content, name)
            return False
        self._chat_key = key
        self._chat_context = (content, name)
        self._chat_messages = []
        if content:
            self._chat_messages.append(ChatMessage(role="assistant", content=welcome_message(name)))
        return True

    def clear_chat(self) -> None:
        self._chat_messages = []
        self._chat_context = None
        self._chat_key = None

    # ------------------------------------------------------------------
    # operations driven through the API client
    # ------------------------------------------------------------------
    async def summarize(self, mode: str, payload: str, provider: str = "rapidapi", length: str = "medium") -> HistoryItem:
        result: SummaryResult = await self.client.summarize(mode, payload, provider, length, self._credentials)
        logger.info("Summary ready, used %s", result.provider)
        return self.record_summary(mode, payload.strip(), result.provider, length, result.summary)

    async def upload_document(self, file_name: str, content_type: str, data: bytes) -> Document:
        validate_upload(file_name, content_type, len(data))

        doc = self.add_document(Document(file_name=file_name, file_type=content_type, file_size=len(data)))
        try:
            result = await self.client.process_document(file_name, content_type, data)
        except Exception as e:
            message = e.message if isinstance(e, FlashReadError) else str(e)
            self.update_document_status(doc.id, "error", error=message or "Processing failed")
            raise
        updated = self.update_document_status(
            doc.id,
            "completed",
            extracted_text=result.text,
            word_count=result.word_count,
            char_count=result.char_count,
        )
        logger.info("%s is ready for analysis", file_name)
        return updated or doc

    async def summarize_document(self, document_id: str, length: str = "medium") -> HistoryItem:
        doc = self.get_document(document_id)
        if doc is None:
            raise ValidationError(f"Unknown document: {document_id}")
        if doc.status != "completed":
            raise ValidationError(f"{doc.file_name} is not ready for summarization")

        result = await self.client.summarize("text", doc.extracted_text, "groq", length, self._credentials)
        self.update_document_status(doc.id, doc.status, error=doc.error, summary=result.summary)
        return self.record_summary("document", doc.file_name, result.provider, length, result.summary)

    def chat_with_document(self, document_id: str) -> bool:
        doc = self.get_document(document_id)
        if doc is None:
            raise ValidationError(f"Unknown document: {document_id}")
        return self.set_active_chat_context(doc.extracted_text, doc.file_name)

    async def send_chat_message(self, text: str) -> ChatMessage:
        """
        Send one message in the active chat.

        Only one message may be outstanding; a failed call leaves an apology
        in the transcript and the error is re-raised to the caller.
        """
        if self._chat_busy:
            raise ChatBusyError("Please wait for the previous message to finish")
        text = (text or "").strip()
        if not text:
            raise ValidationError("Message is required")

        content, name = self._chat_context or ("", None)
        transcript = self._chat_messages
        history = transcript[-CHAT_HISTORY_MESSAGES:]
        transcript.append(ChatMessage(role="user", content=text))
        self._chat_busy = True
        try:
            reply = await self.client.chat(
                text,
                self._credentials,
                document_content=content or None,
                document_name=name,
                history=history,
            )
        except Exception:
            if transcript is self._chat_messages:
                transcript.append(ChatMessage(role="assistant", content=APOLOGY_MESSAGE))
            raise
        finally:
            self._chat_busy = False

        message = ChatMessage(role="assistant", content=reply, document_context=name)
        if transcript is self._chat_messages:
            transcript.append(message)
        else:
            # chat context changed while the reply was in flight
            logger.info("Dropping reply for %s, chat session was reset", name or "untitled content")
        return message

    async def enhance_summary(self, content: str, document_name: Optional[str] = None) -> str:
        return await self.client.enhance(content, self._credentials, document_name=document_name)
