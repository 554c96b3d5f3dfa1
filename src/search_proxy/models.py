from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator


class Provider(str, Enum):
    DUCKDUCKGO = "duckduckgo"
    GOOGLE = "google"
    BING = "bing"

    @property
    def label(self) -> str:
        return {
            Provider.DUCKDUCKGO: "DuckDuckGo",
            Provider.GOOGLE: "Google",
            Provider.BING: "Bing",
        }[self]


class SearchRequest(BaseModel):
    query: str
    provider: Provider = Provider.DUCKDUCKGO
    start: int = Field(default=1, ge=1)

    @field_validator("query")
    @classmethod
    def _query_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("query must not be empty")
        return value


class ResultItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    snippet: str = ""
    url: str
    display_url: str | None = Field(default=None, alias="displayUrl")

    @field_validator("url")
    @classmethod
    def _url_present(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("url must not be empty")
        return value

    @model_validator(mode="after")
    def _title_defaults_to_url(self) -> "ResultItem":
        if not self.title:
            self.title = self.url
        return self


class SearchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    provider: Provider
    items: list[ResultItem]
    next_start: int | None = Field(default=None, alias="nextStart")

    @field_serializer("items")
    def _items_without_empty_fields(self, items: list[ResultItem]) -> list[dict]:
        return [item.model_dump(by_alias=True, exclude_none=True) for item in items]


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    providers: dict[str, bool]
    bookmarks: int
    history: int


class EntryPayload(BaseModel):
    title: str | None = None
    url: str | None = None


class StoredEntry(BaseModel):
    id: str
    title: str
    url: str
    ts: int


class EntryList(BaseModel):
    items: list[StoredEntry]


class DeleteResponse(BaseModel):
    ok: bool = True


class PromptRequest(BaseModel):
    prompt: str | None = None


class ChatRequest(BaseModel):
    message: str | None = None


class ReplyResponse(BaseModel):
    reply: str
