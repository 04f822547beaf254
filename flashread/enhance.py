# flashread/enhance.py
from typing import Optional

from . import config, llm
from .errors import CredentialError, ValidationError
from .prompts import ENHANCER_SYSTEM, build_enhance_prompt
from .schemas import Credentials

ENHANCE_TEMPERATURE = 0.2


async def enhance(content: str, credentials: Credentials, *, document_name: Optional[str] = None) -> str:
    """Restructure an existing summary into cleaner markdown without changing its meaning."""
    if not credentials.has_groq:
        raise CredentialError("Missing Groq API key")
    if not content or not content.strip():
        raise ValidationError("Content is required")
    return await llm.complete(
        credentials.groq_key,
        ENHANCER_SYSTEM,
        build_enhance_prompt(content, document_name),
        model=config.GROQ_CHAT_MODEL,
        temperature=ENHANCE_TEMPERATURE,
    )
