import pytest
from fastapi.testclient import TestClient

from seocraft import build, llm_client
from seocraft.main import app, get_store
from seocraft.store import MemoryBackend, ToolStore


@pytest.fixture(autouse=True)
def offline(monkeypatch):
    # No test talks to a real provider or waits on the build timer
    monkeypatch.setattr(llm_client, "AZURE_OPENAI_API_KEY", "")
    monkeypatch.setattr(llm_client, "AZURE_OPENAI_BASE", "")
    monkeypatch.setattr(llm_client, "OPENAI_API_KEY", "")
    monkeypatch.setattr(llm_client, "LLM_TIMEOUT_SECS", 0.0)
    monkeypatch.setattr(build, "BUILD_STEP_DELAY_MS", 0)
    monkeypatch.setattr(build, "BUILD_FINAL_DELAY_MS", 0)
    monkeypatch.delenv("ALLOW_OFFLINE_GENERATION", raising=False)


@pytest.fixture
def store():
    return ToolStore(MemoryBackend())


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_store, None)


@pytest.fixture
def fake_llm(monkeypatch):
    """Replace chat_json; returns the list of recorded (system, user, max_tokens) calls."""
    calls = []
    replies = []

    def _chat_json(system, user, max_tokens, temperature=0.7):
        calls.append((system, user, max_tokens))
        reply = replies.pop(0) if replies else "{}"
        if isinstance(reply, Exception):
            raise reply
        return reply

    monkeypatch.setattr(llm_client, "chat_json", _chat_json)
    return calls, replies
