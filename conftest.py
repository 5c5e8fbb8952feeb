"""Shared fixtures for the LingoTales test suite."""
import json

import pytest
from fastapi.testclient import TestClient

import auth
import cache
import db
import llm


@pytest.fixture(autouse=True)
def isolated_state(tmp_path, monkeypatch):
    """Fresh database, open password gate, empty rate buckets and cache."""
    monkeypatch.setattr(db, "DB_PATH", tmp_path / "lingotales-test.db")
    monkeypatch.setattr(auth, "APP_PASSWORD", "")
    auth.rate_limit_reset()
    cache.cache_clear()
    db.init_db()
    yield
    auth.rate_limit_reset()
    cache.cache_clear()


@pytest.fixture()
def app():
    from backend import app as lingotales_app
    return lingotales_app


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client


class FakeLLM:
    """Stands in for llm.chat_completion.

    Queue answers with `reply(dict_or_str)`; a queued exception is raised.
    With an empty queue every call answers `default`.
    """

    def __init__(self):
        self.calls = []
        self.queue = []
        self.default = None

    def reply(self, answer):
        self.queue.append(answer)

    async def __call__(self, messages, **kwargs):
        self.calls.append({"messages": messages, **kwargs})
        answer = self.queue.pop(0) if self.queue else self.default
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, dict):
            return json.dumps(answer, ensure_ascii=False)
        return answer

    @property
    def prompts(self):
        return [c["messages"][-1]["content"] for c in self.calls]


@pytest.fixture()
def fake_llm(monkeypatch):
    fake = FakeLLM()
    monkeypatch.setattr(llm, "chat_completion", fake)
    return fake
