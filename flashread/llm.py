# flashread/llm.py
import logging
from typing import Optional
from langchain_groq import ChatGroq
from langchain_core.messages import HumanMessage, SystemMessage

from .errors import CredentialError, ProviderError

logger = logging.getLogger(__name__)


def get_llm(api_key: str, model: str, temperature: float = 0.2, max_tokens: Optional[int] = None) -> ChatGroq:
    """Return a ChatGroq bound to the caller's key."""
    if not api_key or not api_key.strip():
        raise CredentialError("Missing Groq API key")
    kwargs = {"model": model, "groq_api_key": api_key.strip(), "temperature": temperature}
    if max_tokens is not None:
        kwargs["max_tokens"] = max_tokens
    return ChatGroq(**kwargs)


async def complete(
    api_key: str,
    system: str,
    prompt: str,
    *,
    model: str,
    temperature: float = 0.2,
    max_tokens: Optional[int] = None,
) -> str:
    """One system+user completion. Provider failures come back as ProviderError."""
    llm = get_llm(api_key, model, temperature=temperature, max_tokens=max_tokens)
    messages = [SystemMessage(content=system), HumanMessage(content=prompt)]
    try:
        response = await llm.ainvoke(messages)
    except Exception as e:
        logger.error("Groq completion failed (model=%s): %s", model, e)
        raise ProviderError(str(e) or "Groq request failed") from e

    text = response.content if hasattr(response, "content") else str(response)
    if not isinstance(text, str) or not text.strip():
        raise ProviderError("Groq returned an empty response")
    return text
