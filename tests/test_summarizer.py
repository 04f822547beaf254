# tests/test_summarizer.py
import httpx
import pytest

from flashread import config
from flashread.errors import CredentialError, ProviderError, ValidationError
from flashread.schemas import Credentials
from flashread.summarizer import PAGE_TEXT_CHARS, summarize

ARTICLE_URL = "https://example.com/post"


def mock_client(handler, seen):
    def recording(request):
        seen.append(request)
        return handler(request)

    return httpx.AsyncClient(transport=httpx.MockTransport(recording))


def page(body: str) -> httpx.Response:
    return httpx.Response(200, text=f"<html><body><p>{body}</p><script>ignored()</script></body></html>")


def rapid_failure(request):
    if request.url.host == config.RAPIDAPI_HOST:
        return httpx.Response(429, json={"message": "You have exceeded the rate limit"})
    return page("Article body")


@pytest.mark.asyncio
@pytest.mark.parametrize("length,sentences", [("short", "3-4"), ("medium", "6-8"), ("detailed", "10-12")])
async def test_text_mode_sentence_instruction(fake_groq, groq_only, length, sentences):
    result = await summarize("text", "Some long text to summarize.", "groq", length, groq_only)

    assert result.provider == "groq"
    assert result.summary == fake_groq.reply
    llm = fake_groq.instances[0]
    assert llm.kwargs["max_tokens"] == 900
    assert llm.kwargs["temperature"] == 0.2
    assert llm.kwargs["groq_api_key"] == "groq-test"
    system, human = llm.calls[0]
    assert "FlashRead" in system.content
    assert f"in {sentences} sentences" in human.content


@pytest.mark.asyncio
async def test_url_mode_groq_fetches_and_strips_page(fake_groq, groq_only):
    seen = []
    async with mock_client(lambda r: page("Hello from the page"), seen) as client:
        result = await summarize("url", ARTICLE_URL, "groq", "short", groq_only, client=client)

    assert result.provider == "groq"
    assert [str(r.url) for r in seen] == [ARTICLE_URL]
    human = fake_groq.instances[0].calls[0][1].content
    assert "Hello from the page" in human
    assert "ignored()" not in human
    assert f"Source URL: {ARTICLE_URL}" in human
    assert fake_groq.instances[0].kwargs["max_tokens"] == 1200


@pytest.mark.asyncio
async def test_url_mode_groq_truncates_page_text(fake_groq, groq_only):
    seen = []
    async with mock_client(lambda r: page("z" * (PAGE_TEXT_CHARS * 2)), seen) as client:
        await summarize("url", ARTICLE_URL, "groq", "medium", groq_only, client=client)

    human = fake_groq.instances[0].calls[0][1].content
    assert "z" * PAGE_TEXT_CHARS in human
    assert "z" * (PAGE_TEXT_CHARS + 1) not in human


@pytest.mark.asyncio
async def test_url_mode_groq_page_fetch_failure(fake_groq, groq_only):
    seen = []
    async with mock_client(lambda r: httpx.Response(404), seen) as client:
        with pytest.raises(ProviderError, match="Failed to fetch URL: 404"):
            await summarize("url", ARTICLE_URL, "groq", "medium", groq_only, client=client)
    assert fake_groq.call_count() == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("length,count", [("short", "3"), ("medium", "5"), ("detailed", "8")])
async def test_rapidapi_success(fake_groq, rapid_only, length, count):
    seen = []
    handler = lambda r: httpx.Response(200, json={"summary": "Rapid summary."})
    async with mock_client(handler, seen) as client:
        result = await summarize("url", ARTICLE_URL, "rapidapi", length, rapid_only, client=client)

    assert result.provider == "rapidapi"
    assert result.summary == "Rapid summary."
    request = seen[0]
    assert request.url.host == config.RAPIDAPI_HOST
    assert request.url.params["url"] == ARTICLE_URL
    assert request.url.params["length"] == count
    assert request.headers["X-RapidAPI-Key"] == "rapid-test"
    assert fake_groq.call_count() == 0


@pytest.mark.asyncio
async def test_rapidapi_failure_falls_back_to_groq(fake_groq, both_keys):
    seen = []
    async with mock_client(rapid_failure, seen) as client:
        result = await summarize("url", ARTICLE_URL, "rapidapi", "medium", both_keys, client=client)

    assert result.provider == "groq"
    assert result.summary == fake_groq.reply
    assert [r.url.host for r in seen] == [config.RAPIDAPI_HOST, "example.com"]
    assert "Article body" in fake_groq.instances[0].calls[0][1].content


@pytest.mark.asyncio
async def test_rapidapi_failure_without_groq_key_surfaces_error(fake_groq, rapid_only):
    seen = []
    async with mock_client(rapid_failure, seen) as client:
        with pytest.raises(ProviderError) as excinfo:
            await summarize("url", ARTICLE_URL, "rapidapi", "medium", rapid_only, client=client)

    assert excinfo.value.message == "You have exceeded the rate limit"
    assert excinfo.value.status_code == 429
    assert len(seen) == 1
    assert fake_groq.call_count() == 0


@pytest.mark.asyncio
async def test_rapidapi_failure_without_message(fake_groq, rapid_only):
    seen = []
    async with mock_client(lambda r: httpx.Response(500, text="oops"), seen) as client:
        with pytest.raises(ProviderError, match="RapidAPI summarization failed"):
            await summarize("url", ARTICLE_URL, "rapidapi", "medium", rapid_only, client=client)


@pytest.mark.asyncio
async def test_rapidapi_empty_summary_does_not_fall_back(fake_groq, both_keys):
    seen = []
    async with mock_client(lambda r: httpx.Response(200, json={}), seen) as client:
        with pytest.raises(ProviderError, match="No summary returned") as excinfo:
            await summarize("url", ARTICLE_URL, "rapidapi", "medium", both_keys, client=client)

    assert excinfo.value.status_code == 502
    assert fake_groq.call_count() == 0


@pytest.mark.asyncio
async def test_groq_failure_does_not_fall_back_to_rapidapi(fake_groq, both_keys):
    fake_groq.error = RuntimeError("model overloaded")
    seen = []
    async with mock_client(lambda r: page("text"), seen) as client:
        with pytest.raises(ProviderError, match="model overloaded"):
            await summarize("url", ARTICLE_URL, "groq", "medium", both_keys, client=client)

    assert all(r.url.host != config.RAPIDAPI_HOST for r in seen)


@pytest.mark.asyncio
async def test_text_mode_failure_does_not_fall_back(fake_groq, both_keys):
    fake_groq.error = RuntimeError("bad gateway")
    seen = []
    async with mock_client(lambda r: httpx.Response(200, json={"summary": "never"}), seen) as client:
        with pytest.raises(ProviderError, match="bad gateway"):
            await summarize("text", "Some text", "rapidapi", "medium", both_keys, client=client)
    assert seen == []


@pytest.mark.asyncio
async def test_text_mode_with_rapidapi_requires_groq_key(fake_groq, rapid_only):
    with pytest.raises(CredentialError, match="RapidAPI may not support raw text"):
        await summarize("text", "Some text", "rapidapi", "medium", rapid_only)
    assert fake_groq.call_count() == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "mode,payload,provider,creds",
    [
        ("url", "", "rapidapi", Credentials(rapidapi_key="k")),
        ("url", "   ", "groq", Credentials(groq_key="k")),
        ("text", None, "groq", Credentials(groq_key="k")),
        ("url", "example.com/no-scheme", "groq", Credentials(groq_key="k")),
        ("pdf", "x", "groq", Credentials(groq_key="k")),
        ("text", "x", "openai", Credentials(groq_key="k")),
    ],
)
async def test_validation_happens_before_network(fake_groq, mode, payload, provider, creds):
    seen = []
    async with mock_client(lambda r: httpx.Response(200), seen) as client:
        with pytest.raises(ValidationError):
            await summarize(mode, payload, provider, "medium", creds, client=client)
    assert seen == []
    assert fake_groq.call_count() == 0


@pytest.mark.asyncio
async def test_missing_credentials(fake_groq):
    with pytest.raises(CredentialError, match="Missing RapidAPI key"):
        await summarize("url", ARTICLE_URL, "rapidapi", "medium", Credentials())
    with pytest.raises(CredentialError, match="Missing Groq key"):
        await summarize("url", ARTICLE_URL, "groq", "medium", Credentials(rapidapi_key="k"))
    with pytest.raises(CredentialError, match="Missing Groq key"):
        await summarize("text", "Some text", "groq", "medium", Credentials(groq_key="   "))
