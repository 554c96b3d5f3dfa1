from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _UpstreamModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class DuckDuckGoTopic(_UpstreamModel):
    text: str | None = Field(default=None, alias="Text")
    first_url: str | None = Field(default=None, alias="FirstURL")
    topics: list[Any] | None = Field(default=None, alias="Topics")


class DuckDuckGoPayload(_UpstreamModel):
    heading: str | None = Field(default=None, alias="Heading")
    abstract: str | None = Field(default=None, alias="Abstract")
    abstract_url: str | None = Field(default=None, alias="AbstractURL")
    related_topics: list[Any] | None = Field(default=None, alias="RelatedTopics")


class GoogleItem(_UpstreamModel):
    title: str | None = None
    snippet: str | None = None
    link: str | None = None
    display_link: str | None = Field(default=None, alias="displayLink")


class GooglePage(_UpstreamModel):
    start_index: int | None = Field(default=None, alias="startIndex")


class GoogleQueries(_UpstreamModel):
    next_page: list[GooglePage] | None = Field(default=None, alias="nextPage")


class GooglePayload(_UpstreamModel):
    items: list[GoogleItem] | None = None
    queries: GoogleQueries | None = None


class BingWebPage(_UpstreamModel):
    name: str | None = None
    snippet: str | None = None
    url: str | None = None
    display_url: str | None = Field(default=None, alias="displayUrl")


class BingWebPages(_UpstreamModel):
    value: list[BingWebPage] | None = None


class BingPayload(_UpstreamModel):
    web_pages: BingWebPages | None = Field(default=None, alias="webPages")
