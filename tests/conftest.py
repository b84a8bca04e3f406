"""Shared fixtures: an ApiProbeTool wired to an in-process fake backend."""

import json
from typing import Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest

from qa_engine.common.logger import LoggerFactory
from qa_engine.common.token_store import InMemoryTokenStore
from qa_engine.tools.api_probe import ApiProbeTool

BASE_URL = "http://api.test"

Reply = Union[Tuple[int, object], Callable[[httpx.Request], httpx.Response]]


class FakeBackend:
    """Routes (method, path) to canned replies and records every request."""

    def __init__(self, routes: Optional[Dict[Tuple[str, str], Reply]] = None):
        self.routes: Dict[Tuple[str, str], Reply] = dict(routes or {})
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.routes.get((request.method, request.url.path))
        if reply is None:
            return httpx.Response(404, json={"message": "Not found"})
        if callable(reply):
            return reply(request)
        status, body = reply
        return httpx.Response(status, json=body)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [
            r for r in self.requests if r.method == method and r.url.path == path
        ]

    @staticmethod
    def body(request: httpx.Request) -> object:
        return json.loads(request.content) if request.content else None


@pytest.fixture(autouse=True)
def reset_loggers():
    yield
    LoggerFactory.clear_cache()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def make_probe(backend):
    def factory(token: Optional[str] = "session-token", **kwargs) -> ApiProbeTool:
        store = InMemoryTokenStore()
        if token:
            store.set("ieosuia_auth_token", token)
        return ApiProbeTool(
            base_url=BASE_URL,
            token_store=store,
            token_key="ieosuia_auth_token",
            transport=httpx.MockTransport(backend),
            **kwargs,
        )

    return factory


@pytest.fixture
def probe(make_probe) -> ApiProbeTool:
    return make_probe()
