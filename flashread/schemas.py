# flashread/schemas.py
import time
import uuid
from typing import Optional, List, Literal
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Mode = Literal["url", "text"]
HistoryMode = Literal["url", "text", "document"]
Provider = Literal["rapidapi", "groq"]
Length = Literal["short", "medium", "detailed"]
DocumentStatus = Literal["processing", "completed", "error"]
Role = Literal["user", "assistant"]

MODES = ("url", "text")
PROVIDERS = ("rapidapi", "groq")
LENGTHS = ("short", "medium", "detailed")


def new_id() -> str:
    return uuid.uuid4().hex


def now_ms() -> int:
    return int(time.time() * 1000)


class _CamelModel(BaseModel):
    # camelCase on the wire and in storage, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Document(_CamelModel):
    id: str = Field(default_factory=new_id)
    file_name: str
    file_type: str
    file_size: int = Field(default=0, ge=0)
    extracted_text: str = ""
    word_count: int = 0
    char_count: int = 0
    summary: Optional[str] = None
    status: DocumentStatus = "processing"
    error: Optional[str] = None


class HistoryItem(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(default_factory=new_id)
    mode: HistoryMode
    source: str
    provider: Provider
    length: Length
    summary: str
    created_at: int = Field(default_factory=now_ms)


class ChatMessage(_CamelModel):
    id: str = Field(default_factory=new_id)
    role: Role
    content: str
    timestamp: int = Field(default_factory=now_ms)
    document_context: Optional[str] = None


class Credentials(_CamelModel):
    rapidapi_key: str = ""
    groq_key: str = ""

    @property
    def has_rapidapi(self) -> bool:
        return bool(self.rapidapi_key.strip())

    @property
    def has_groq(self) -> bool:
        return bool(self.groq_key.strip())


class SummaryResult(BaseModel):
    summary: str
    provider: Provider


class ExtractionResult(BaseModel):
    text: str
    word_count: int
    char_count: int


# ======================================
# API request bodies
# ======================================
# mode/provider/length stay plain strings here so the gateway can answer
# unknown values with its own {"error": ...} body instead of a 422.

class SummarizeRequest(BaseModel):
    mode: str = "url"
    url: Optional[str] = None
    text: Optional[str] = None
    provider: str = "rapidapi"
    length: str = "medium"


class ChatTurn(BaseModel):
    role: str
    content: str = ""


class ChatRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str = ""
    document_content: Optional[str] = None
    document_name: Optional[str] = None
    chat_history: List[ChatTurn] = []


class EnhanceRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content: str = ""
    document_name: Optional[str] = None
