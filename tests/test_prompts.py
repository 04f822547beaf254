# tests/test_prompts.py
import pytest

from flashread.prompts import (
    CHAT_CONTEXT_CHARS,
    build_chat_system_prompt,
    build_enhance_prompt,
    build_summary_prompt,
    format_history,
)


@pytest.mark.parametrize("length,sentences", [("short", "3-4"), ("medium", "6-8"), ("detailed", "10-12")])
def test_summary_prompt_sentence_counts(length, sentences):
    prompt = build_summary_prompt("text", length, "Some content")
    assert prompt.startswith(f"Summarize the following content in {sentences} sentences.")
    assert prompt.endswith("Content:\nSome content")


def test_summary_prompt_source_url_only_for_url_mode():
    assert "Source URL: https://example.com" in build_summary_prompt("url", "short", "x", "https://example.com")
    assert "Source URL" not in build_summary_prompt("text", "short", "x", "https://example.com")


def test_format_history_keeps_last_six_turns():
    history = [{"role": "user" if i % 2 == 0 else "assistant", "content": f"m{i}"} for i in range(10)]
    lines = format_history(history).splitlines()
    assert len(lines) == 6
    assert lines[0] == "User: m4"
    assert lines[-1] == "Assistant: m9"


def test_chat_prompt_truncates_document():
    content = "a" * (CHAT_CONTEXT_CHARS + 500)
    prompt = build_chat_system_prompt(content, "big.txt", [])
    assert 'Document: "big.txt"' in prompt
    assert "a" * CHAT_CONTEXT_CHARS + "..." in prompt
    assert "a" * (CHAT_CONTEXT_CHARS + 1) not in prompt


def test_chat_prompt_without_document():
    prompt = build_chat_system_prompt(None, None, [])
    assert "No document content available." in prompt


def test_enhance_prompt_mentions_document():
    assert 'for "notes.md"' in build_enhance_prompt("body", "notes.md")
    assert "for" not in build_enhance_prompt("body").split(":")[0]
