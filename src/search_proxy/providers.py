from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import ValidationError

from search_proxy.config import Settings, settings as default_settings
from search_proxy.errors import ConfigurationMissing, UpstreamRejected, UpstreamUnreachable
from search_proxy.models import Provider, ResultItem, SearchResponse
from search_proxy.payloads import BingPayload, DuckDuckGoPayload, DuckDuckGoTopic, GooglePayload

logger = logging.getLogger(__name__)

DUCKDUCKGO_ENDPOINT = "https://api.duckduckgo.com/"
GOOGLE_ENDPOINT = "https://www.googleapis.com/customsearch/v1"
BING_ENDPOINT = "https://api.bing.microsoft.com/v7.0/search"
BING_KEY_HEADER = "Ocp-Apim-Subscription-Key"

PLACEHOLDER_URL = "#"


@dataclass
class UpstreamRequest:
    url: str
    params: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class NormalizedPage:
    items: list[ResultItem]
    next_start: int | None = None


def make_item(
    title: str | None,
    snippet: str | None,
    url: str | None,
    display_url: str | None = None,
) -> ResultItem | None:
    """Build a canonical item, or return None when the upstream entry has no url."""
    try:
        return ResultItem(
            title=title or "",
            snippet=snippet or "",
            url=url or "",
            display_url=display_url,
        )
    except ValidationError:
        logger.warning("Dropping result without url (title=%r)", title)
        return None


def _collect(items: Iterable[ResultItem | None]) -> list[ResultItem]:
    return [item for item in items if item is not None]


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


class ProviderAdapter(ABC):
    provider: Provider

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or default_settings

    def check_configured(self) -> None:
        """Raise ConfigurationMissing when a required credential is unset."""

    def is_configured(self) -> bool:
        try:
            self.check_configured()
        except ConfigurationMissing:
            return False
        return True

    @abstractmethod
    def build_request(self, query: str, start: int) -> UpstreamRequest: ...

    @abstractmethod
    def normalize(self, body: Any) -> NormalizedPage: ...

    async def fetch_and_normalize(
        self,
        client: httpx.AsyncClient,
        query: str,
        start: int = 1,
    ) -> SearchResponse:
        self.check_configured()
        request = self.build_request(query, start)
        timeout = self._settings.upstream_timeout or None

        try:
            response = await client.get(
                request.url,
                params=request.params,
                headers=request.headers,
                timeout=timeout,
            )
        except httpx.HTTPError as exc:
            raise UpstreamUnreachable(self.provider, str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            logger.warning(
                "%s rejected query %r with HTTP %d",
                self.provider.label,
                query,
                response.status_code,
            )
            raise UpstreamRejected(self.provider, response.status_code, _decode_json(response))

        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamUnreachable(self.provider, "response body is not JSON") from exc

        try:
            page = self.normalize(body)
        except ValidationError as exc:
            raise UpstreamUnreachable(self.provider, "unexpected response shape") from exc

        return SearchResponse(provider=self.provider, items=page.items, next_start=page.next_start)


def _parse_topics(raw_topics: list[Any] | None) -> Iterator[DuckDuckGoTopic]:
    for raw in raw_topics or []:
        try:
            yield DuckDuckGoTopic.model_validate(raw)
        except ValidationError:
            logger.debug("Skipping malformed DuckDuckGo topic: %r", raw)


def _flatten_topics(raw_topics: list[Any] | None) -> Iterator[DuckDuckGoTopic]:
    for topic in _parse_topics(raw_topics):
        if topic.topics is not None:
            yield from _parse_topics(topic.topics)
        else:
            yield topic


class DuckDuckGoAdapter(ProviderAdapter):
    """Instant-answer API. Has no pagination, so ``start`` is ignored."""

    provider = Provider.DUCKDUCKGO

    def build_request(self, query: str, start: int) -> UpstreamRequest:
        return UpstreamRequest(
            url=DUCKDUCKGO_ENDPOINT,
            params={
                "q": query,
                "format": "json",
                "no_html": "1",
                "skip_disambig": "1",
            },
        )

    def normalize(self, body: Any) -> NormalizedPage:
        payload = DuckDuckGoPayload.model_validate(body)

        primary: list[ResultItem | None] = []
        if payload.heading:
            primary.append(
                make_item(payload.heading, payload.abstract, payload.abstract_url or PLACEHOLDER_URL)
            )

        related = (
            make_item(topic.text, "", topic.first_url)
            for topic in _flatten_topics(payload.related_topics)
            if topic.text and topic.first_url
        )

        items = _collect([*primary, *related])
        return NormalizedPage(items=items[: self._settings.duckduckgo_max_results])


class GoogleAdapter(ProviderAdapter):
    provider = Provider.GOOGLE

    def check_configured(self) -> None:
        if not self._settings.google_api_key or not self._settings.google_cx:
            raise ConfigurationMissing(self.provider)

    def build_request(self, query: str, start: int) -> UpstreamRequest:
        return UpstreamRequest(
            url=GOOGLE_ENDPOINT,
            params={
                "key": self._settings.google_api_key or "",
                "cx": self._settings.google_cx or "",
                "q": query,
                "start": str(start),
            },
        )

    def normalize(self, body: Any) -> NormalizedPage:
        payload = GooglePayload.model_validate(body)
        items = _collect(
            make_item(it.title, it.snippet, it.link, it.display_link) for it in payload.items or []
        )

        next_start = None
        if payload.queries and payload.queries.next_page:
            next_start = payload.queries.next_page[0].start_index or None

        return NormalizedPage(items=items, next_start=next_start)


class BingAdapter(ProviderAdapter):
    """Web Search v7. Bing's offset/count paging is not surfaced."""

    provider = Provider.BING

    def check_configured(self) -> None:
        if not self._settings.bing_api_key:
            raise ConfigurationMissing(self.provider)

    def build_request(self, query: str, start: int) -> UpstreamRequest:
        return UpstreamRequest(
            url=BING_ENDPOINT,
            params={"q": query},
            headers={BING_KEY_HEADER: self._settings.bing_api_key or ""},
        )

    def normalize(self, body: Any) -> NormalizedPage:
        payload = BingPayload.model_validate(body)
        pages = payload.web_pages.value if payload.web_pages else None
        items = _collect(
            make_item(page.name, page.snippet, page.url, page.display_url) for page in pages or []
        )
        return NormalizedPage(items=items)


ADAPTER_TYPES: dict[Provider, type[ProviderAdapter]] = {
    Provider.DUCKDUCKGO: DuckDuckGoAdapter,
    Provider.GOOGLE: GoogleAdapter,
    Provider.BING: BingAdapter,
}


def build_adapters(settings: Settings | None = None) -> dict[Provider, ProviderAdapter]:
    missing = set(Provider) - ADAPTER_TYPES.keys()
    if missing:
        raise RuntimeError(f"No adapter registered for: {sorted(p.value for p in missing)}")
    return {provider: adapter_type(settings) for provider, adapter_type in ADAPTER_TYPES.items()}
