# flashread/summarizer.py
"""
Summarization gateway.

Two providers:
  - groq: the LLM summarizes raw text, or a fetched and tag-stripped web page.
  - rapidapi: Article Extractor and Summarizer, URL mode only.

The single fallback: a URL summary requested from RapidAPI that comes back
non-2xx is re-run through Groq when a Groq key is present. Text mode and
groq-primary failures never fall back.
"""
import logging
from typing import Optional
import httpx

from . import config, llm
from .errors import CredentialError, ProviderError, ValidationError
from .prompts import RAPIDAPI_SENTENCES, SUMMARIZER_SYSTEM, build_summary_prompt
from .schemas import LENGTHS, MODES, PROVIDERS, Credentials, SummaryResult
from .utils import html_to_text

logger = logging.getLogger(__name__)

PAGE_TEXT_CHARS = 28_000
URL_MAX_TOKENS = 1200
TEXT_MAX_TOKENS = 900
SUMMARY_TEMPERATURE = 0.2


def _validate(mode: str, payload: Optional[str], provider: str, length: str) -> str:
    if mode not in MODES:
        raise ValidationError(f"Unknown mode: {mode!r}")
    if provider not in PROVIDERS:
        raise ValidationError(f"Unknown provider: {provider!r}")
    if length not in LENGTHS:
        raise ValidationError(f"Unknown length: {length!r}")
    payload = (payload or "").strip()
    if not payload:
        raise ValidationError("Missing URL" if mode == "url" else "Missing text")
    if mode == "url" and not payload.lower().startswith(("http://", "https://")):
        raise ValidationError("URL must start with http:// or https://")
    return payload


async def fetch_page_text(client: httpx.AsyncClient, url: str) -> str:
    try:
        resp = await client.get(url, follow_redirects=True)
    except httpx.HTTPError as e:
        raise ProviderError(f"Failed to fetch URL: {e}") from e
    if not resp.is_success:
        raise ProviderError(f"Failed to fetch URL: {resp.status_code}")
    return html_to_text(resp.text)[:PAGE_TEXT_CHARS]


async def summarize_url_with_groq(client: httpx.AsyncClient, url: str, length: str, groq_key: str) -> SummaryResult:
    text = await fetch_page_text(client, url)
    out = await llm.complete(
        groq_key,
        SUMMARIZER_SYSTEM,
        build_summary_prompt("url", length, text, url),
        model=config.GROQ_SUMMARY_MODEL,
        temperature=SUMMARY_TEMPERATURE,
        max_tokens=URL_MAX_TOKENS,
    )
    return SummaryResult(summary=out, provider="groq")


async def summarize_url_with_rapidapi(
    client: httpx.AsyncClient, url: str, length: str, credentials: Credentials
) -> SummaryResult:
    params = {"autoparse": "true", "url": url, "length": RAPIDAPI_SENTENCES[length]}
    headers = {
        "X-RapidAPI-Key": credentials.rapidapi_key.strip(),
        "X-RapidAPI-Host": config.RAPIDAPI_HOST,
    }
    try:
        resp = await client.get(config.RAPIDAPI_SUMMARIZE_URL, params=params, headers=headers)
    except httpx.HTTPError as e:
        raise ProviderError(f"RapidAPI request failed: {e}") from e

    try:
        data = resp.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}

    if not resp.is_success:
        if credentials.has_groq:
            logger.warning("RapidAPI returned %s for %s, falling back to Groq", resp.status_code, url)
            return await summarize_url_with_groq(client, url, length, credentials.groq_key)
        raise ProviderError(
            data.get("message") or "RapidAPI summarization failed",
            status_code=resp.status_code or 500,
        )

    summary = data.get("summary") or data.get("summary_text") or data.get("result") or ""
    if not summary:
        raise ProviderError("No summary returned", status_code=502)
    return SummaryResult(summary=summary, provider="rapidapi")


async def _summarize(client, mode, payload, provider, length, credentials) -> SummaryResult:
    if mode == "url":
        if provider == "groq":
            return await summarize_url_with_groq(client, payload, length, credentials.groq_key)
        return await summarize_url_with_rapidapi(client, payload, length, credentials)

    out = await llm.complete(
        credentials.groq_key,
        SUMMARIZER_SYSTEM,
        build_summary_prompt("text", length, payload),
        model=config.GROQ_SUMMARY_MODEL,
        temperature=SUMMARY_TEMPERATURE,
        max_tokens=TEXT_MAX_TOKENS,
    )
    return SummaryResult(summary=out, provider="groq")


async def summarize(
    mode: str,
    payload: Optional[str],
    provider: str = "rapidapi",
    length: str = "medium",
    credentials: Optional[Credentials] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> SummaryResult:
    """
    Produce one markdown summary.

    All input and credential checks happen before any network call. `client` is
    used as-is when given, otherwise a short-lived AsyncClient is opened.
    """
    credentials = credentials or Credentials()
    payload = _validate(mode, payload, provider, length)

    if mode == "url" and provider == "groq" and not credentials.has_groq:
        raise CredentialError("Missing Groq key")
    if mode == "url" and provider == "rapidapi" and not credentials.has_rapidapi:
        raise CredentialError("Missing RapidAPI key")
    if mode == "text" and not credentials.has_groq:
        if provider == "rapidapi":
            raise CredentialError(
                "RapidAPI may not support raw text; provide Groq key or switch to Groq provider."
            )
        raise CredentialError("Missing Groq key")

    logger.info("Summarizing %s via %s (length=%s)", mode, provider, length)
    if client is not None:
        return await _summarize(client, mode, payload, provider, length, credentials)
    async with httpx.AsyncClient(timeout=config.HTTP_TIMEOUT) as own_client:
        return await _summarize(own_client, mode, payload, provider, length, credentials)
