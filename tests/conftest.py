import copy
from typing import Any

import httpx
import pytest

from search_proxy.config import Settings

DUCKDUCKGO_CATS = {
    "Heading": "Cats",
    "Abstract": "Feline",
    "AbstractURL": "http://example.com/cats",
    "RelatedTopics": [],
}

DUCKDUCKGO_NESTED = {
    "Heading": "",
    "RelatedTopics": [
        {"Text": "Cat breeds", "FirstURL": "https://duckduckgo.com/Cat_breeds"},
        {
            "Name": "Biology",
            "Topics": [
                {"Text": "Felidae", "FirstURL": "https://duckduckgo.com/Felidae"},
                {"Text": "Carnivora", "FirstURL": "https://duckduckgo.com/Carnivora"},
            ],
        },
        {"Text": "No link here"},
    ],
}

GOOGLE_PAGE = {
    "items": [
        {
            "title": "Cat - Wikipedia",
            "snippet": "The cat is a domestic species.",
            "link": "https://en.wikipedia.org/wiki/Cat",
            "displayLink": "en.wikipedia.org",
        },
        {
            "title": "Cats | ASPCA",
            "snippet": "Caring for cats.",
            "link": "https://www.aspca.org/cats",
            "displayLink": "www.aspca.org",
        },
    ],
    "queries": {"nextPage": [{"startIndex": 11, "count": 10}]},
}

BING_PAGE = {
    "webPages": {
        "value": [
            {"name": "First", "snippet": "one", "url": "https://a.example/1", "displayUrl": "a.example/1"},
            {"name": "Second", "snippet": "two", "url": "https://b.example/2", "displayUrl": "b.example/2"},
            {"name": "Third", "snippet": "three", "url": "https://c.example/3", "displayUrl": "c.example/3"},
        ]
    }
}


class FakeUpstream:
    """Records outbound requests and answers them with a canned response."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: Any = {}
        self.content: bytes | None = None
        self.error: Exception | None = None

    def respond(self, body: Any = None, status_code: int = 200, content: bytes | None = None) -> None:
        self.body = body
        self.status_code = status_code
        self.content = content

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        google_api_key="google-key",
        google_cx="engine-id",
        bing_api_key="bing-key",
        upstream_timeout=15.0,
    )


@pytest.fixture
def unconfigured_settings() -> Settings:
    return Settings(google_api_key=None, google_cx=None, bing_api_key=None)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
async def upstream_client(upstream: FakeUpstream):
    async with upstream.client() as client:
        yield client


@pytest.fixture
def duckduckgo_cats() -> dict:
    return copy.deepcopy(DUCKDUCKGO_CATS)


@pytest.fixture
def duckduckgo_nested() -> dict:
    return copy.deepcopy(DUCKDUCKGO_NESTED)


@pytest.fixture
def google_page() -> dict:
    return copy.deepcopy(GOOGLE_PAGE)


@pytest.fixture
def bing_page() -> dict:
    return copy.deepcopy(BING_PAGE)
