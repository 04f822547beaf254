# tests/conftest.py
import pytest
from langchain_core.messages import AIMessage

from flashread import llm
from flashread.schemas import Credentials


class FakeChatGroq:
    """Stands in for langchain_groq.ChatGroq; records every construction and call."""

    instances = []
    reply = "# Title\n- point one\n- point two\n\nTakeaway."
    error = None

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.calls = []
        type(self).instances.append(self)

    async def ainvoke(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.reply)

    @classmethod
    def call_count(cls):
        return sum(len(i.calls) for i in cls.instances)


@pytest.fixture
def fake_groq(monkeypatch):
    cls = type("FakeChatGroq", (FakeChatGroq,), {"instances": [], "error": None})
    monkeypatch.setattr(llm, "ChatGroq", cls)
    return cls


@pytest.fixture
def both_keys():
    return Credentials(rapidapi_key="rapid-test", groq_key="groq-test")


@pytest.fixture
def groq_only():
    return Credentials(groq_key="groq-test")


@pytest.fixture
def rapid_only():
    return Credentials(rapidapi_key="rapid-test")
