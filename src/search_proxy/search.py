from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

import httpx

from search_proxy.config import Settings, settings as default_settings
from search_proxy.errors import (
    BadRequest,
    ConfigurationMissing,
    SearchProxyError,
    UpstreamRejected,
)
from search_proxy.models import Provider, SearchRequest, SearchResponse
from search_proxy.providers import ProviderAdapter, build_adapters

logger = logging.getLogger(__name__)

_LEADING_INT_RE = re.compile(r"^\s*\+?(\d+)")

UPSTREAM_FAILED = "Upstream fetch failed"


def parse_provider(raw: str | None) -> Provider:
    name = (raw or "").strip().lower() or Provider.DUCKDUCKGO.value
    try:
        return Provider(name)
    except ValueError:
        raise BadRequest("Unknown provider") from None


def parse_start(raw: str | int | None) -> int:
    """Leading integer of ``raw``; anything unusable or below 1 becomes 1."""
    if isinstance(raw, int):
        return max(raw, 1)
    match = _LEADING_INT_RE.match(raw or "")
    if not match:
        return 1
    try:
        value = int(match.group(1))
    except ValueError:
        # digit strings past the int conversion limit
        return 1
    return max(value, 1)


def parse_request(query: str | None, provider: str | None = None, start: str | int | None = None) -> SearchRequest:
    query = (query or "").strip()
    if not query:
        raise BadRequest("Missing q")
    return SearchRequest(query=query, provider=parse_provider(provider), start=parse_start(start))


def translate_error(exc: SearchProxyError) -> tuple[int, dict[str, Any]]:
    if isinstance(exc, BadRequest):
        return 400, {"error": str(exc)}
    if isinstance(exc, ConfigurationMissing):
        return 500, {"error": str(exc)}
    if isinstance(exc, UpstreamRejected):
        if isinstance(exc.body, dict):
            return exc.status_code, exc.body
        return exc.status_code, {"error": f"{exc.provider.label} failed"}
    # UpstreamUnreachable and anything unclassified
    return 502, {"error": UPSTREAM_FAILED}


class SearchRouter:
    """Validates a search request and hands it to exactly one provider adapter.

    There is no fallback: a failing provider is reported as-is, never
    replaced by another one.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Settings | None = None,
        adapters: Mapping[Provider, ProviderAdapter] | None = None,
    ) -> None:
        self._client = client
        self._settings = settings or default_settings
        self._adapters = dict(adapters) if adapters is not None else build_adapters(self._settings)

    def adapter_for(self, provider: Provider) -> ProviderAdapter:
        return self._adapters[provider]

    def configured_providers(self) -> dict[str, bool]:
        return {provider.value: self.adapter_for(provider).is_configured() for provider in Provider}

    async def dispatch(self, request: SearchRequest) -> SearchResponse:
        adapter = self.adapter_for(request.provider)
        response = await adapter.fetch_and_normalize(self._client, request.query, request.start)
        logger.info(
            "%s returned %d results for query: %s",
            request.provider.label,
            len(response.items),
            request.query,
        )
        return response

    async def search(
        self,
        query: str | None,
        provider: str | None = Provider.DUCKDUCKGO.value,
        start: str | int | None = 1,
    ) -> SearchResponse:
        return await self.dispatch(parse_request(query, provider, start))
