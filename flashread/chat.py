# flashread/chat.py
import logging
from typing import Iterable, Optional

from . import config, llm
from .errors import CredentialError, ValidationError
from .prompts import build_chat_system_prompt
from .schemas import Credentials

logger = logging.getLogger(__name__)

CHAT_TEMPERATURE = 0.3


async def chat(
    message: str,
    credentials: Credentials,
    *,
    document_content: Optional[str] = None,
    document_name: Optional[str] = None,
    history: Iterable = (),
) -> str:
    """Answer one user message about the given document (or summary) content."""
    if not credentials.has_groq:
        raise CredentialError("Missing Groq API key")
    if not message or not message.strip():
        raise ValidationError("Message is required")

    system = build_chat_system_prompt(document_content, document_name, history)
    logger.info("Chat message for %s (%d context chars)", document_name or "untitled", len(document_content or ""))
    return await llm.complete(
        credentials.groq_key,
        system,
        message.strip(),
        model=config.GROQ_CHAT_MODEL,
        temperature=CHAT_TEMPERATURE,
    )
