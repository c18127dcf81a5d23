"""Shared fixtures: an evaluator service faked with httpx.MockTransport."""

import json

import httpx
import pytest

from replbook.repl import ReplAPI
from replbook.storage import MemoryStorage
from replbook.transport.http import HttpClient

BASE = "http://evaluator.test"


class FakeEvaluator:
    """Scripted stand-in for the evaluator service.

    ``results`` maps input text to a result string; ``handlers`` maps input
    text to a coroutine function returning a full httpx.Response.
    """

    def __init__(self, new_id=42):
        self.new_id = new_id
        self.results: dict = {}
        self.handlers: dict = {}
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/repl":
            return httpx.Response(200, json={"id": self.new_id})
        text = json.loads(request.content)["text"]
        if text in self.handlers:
            return await self.handlers[text](request)
        return httpx.Response(200, json={"result": self.results.get(text, text)})

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def evaluator():
    return FakeEvaluator()


@pytest.fixture
def transport(evaluator):
    return httpx.MockTransport(evaluator)


@pytest.fixture
def repl(transport):
    return ReplAPI(HttpClient(base_url=BASE, transport=transport))


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("REPLBOOK_HOME", str(tmp_path / "home"))
    monkeypatch.delenv("REPLBOOK_API_BASE", raising=False)
