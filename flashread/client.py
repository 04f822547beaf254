# flashread/client.py
import logging
from typing import Any, Dict, Iterable, Optional
import httpx

from . import config
from .errors import FlashReadError, ProviderError
from .schemas import Credentials, ExtractionResult, SummaryResult

logger = logging.getLogger(__name__)


class FlashReadClient:
    """
    Async HTTP client for the FlashRead API.

    Every non-2xx answer is raised as FlashReadError carrying the server's
    `error` message and status code.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = config.HTTP_TIMEOUT,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url or config.FLASHREAD_API_URL,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "FlashReadClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @staticmethod
    def _headers(credentials: Credentials) -> Dict[str, str]:
        return {
            "x-rapidapi-key": credentials.rapidapi_key.strip(),
            "x-groq-key": credentials.groq_key.strip(),
        }

    @staticmethod
    def _unwrap(resp: httpx.Response) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not resp.is_success:
            message = data.get("error") if isinstance(data, dict) else None
            logger.warning("%s %s -> %s: %s", resp.request.method, resp.request.url.path, resp.status_code, message)
            raise FlashReadError(message or f"Request failed with status {resp.status_code}", resp.status_code)
        if not isinstance(data, dict):
            raise ProviderError("Malformed response from FlashRead API")
        return data

    async def summarize(
        self,
        mode: str,
        payload: str,
        provider: str,
        length: str,
        credentials: Credentials,
    ) -> SummaryResult:
        body = {
            "mode": mode,
            "url": payload.strip() if mode == "url" else None,
            "text": payload.strip() if mode == "text" else None,
            "provider": provider,
            "length": length,
        }
        resp = await self._http.post("/api/summarize", json=body, headers=self._headers(credentials))
        data = self._unwrap(resp)
        return SummaryResult(summary=data.get("summary") or "", provider=data.get("provider") or provider)

    async def chat(
        self,
        message: str,
        credentials: Credentials,
        *,
        document_content: Optional[str] = None,
        document_name: Optional[str] = None,
        history: Iterable = (),
    ) -> str:
        body = {
            "message": message,
            "documentContent": document_content,
            "documentName": document_name,
            "chatHistory": [{"role": m.role, "content": m.content} for m in history],
        }
        resp = await self._http.post("/api/chat", json=body, headers=self._headers(credentials))
        return self._unwrap(resp).get("response") or ""

    async def enhance(self, content: str, credentials: Credentials, *, document_name: Optional[str] = None) -> str:
        body = {"content": content, "documentName": document_name}
        resp = await self._http.post("/api/enhance-summary", json=body, headers=self._headers(credentials))
        return self._unwrap(resp).get("enhanced") or ""

    async def process_document(self, file_name: str, content_type: str, data: bytes) -> ExtractionResult:
        files = {"file": (file_name, data, content_type)}
        resp = await self._http.post("/api/process-document", files=files)
        body = self._unwrap(resp)
        return ExtractionResult(
            text=body.get("extractedText") or "",
            word_count=int(body.get("wordCount") or 0),
            char_count=int(body.get("charCount") or 0),
        )
