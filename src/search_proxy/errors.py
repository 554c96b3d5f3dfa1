from __future__ import annotations

from typing import Any

from search_proxy.models import Provider


class SearchProxyError(Exception):
    pass


class BadRequest(SearchProxyError):
    pass


class ConfigurationMissing(SearchProxyError):
    def __init__(self, provider: Provider) -> None:
        super().__init__(f"{provider.label} not configured")
        self.provider = provider


class UpstreamRejected(SearchProxyError):
    def __init__(self, provider: Provider, status_code: int, body: Any = None) -> None:
        super().__init__(f"{provider.label} responded with HTTP {status_code}")
        self.provider = provider
        self.status_code = status_code
        self.body = body


class UpstreamUnreachable(SearchProxyError):
    def __init__(self, provider: Provider, reason: str) -> None:
        super().__init__(f"{provider.label} unreachable: {reason}")
        self.provider = provider
        self.reason = reason
