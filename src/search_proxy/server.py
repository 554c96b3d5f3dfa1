from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Awaitable, Callable

import httpx
import uvicorn
from fastapi import FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from search_proxy.config import settings
from search_proxy.errors import SearchProxyError
from search_proxy.models import (
    ChatRequest,
    DeleteResponse,
    EntryList,
    EntryPayload,
    ErrorResponse,
    HealthResponse,
    PromptRequest,
    ReplyResponse,
    SearchResponse,
    StoredEntry,
)
from search_proxy.search import UPSTREAM_FAILED, SearchRouter, translate_error
from search_proxy.store import ListStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    client = httpx.AsyncClient(follow_redirects=True)
    app.state.search_router = SearchRouter(client)
    app.state.bookmarks = ListStore("bookmarks")
    app.state.history = ListStore("history", limit=settings.history_limit)
    yield
    await client.aclose()


app = FastAPI(title="Search Proxy", lifespan=lifespan)


@app.middleware("http")
async def limit_body_size(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    length = request.headers.get("content-length")
    if length and length.isdigit() and int(length) > settings.max_body_bytes:
        return JSONResponse(status_code=413, content={"error": "Request body too large"})
    return await call_next(request)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.get(
    "/search",
    response_model=SearchResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def search(
    q: str | None = Query(default=None),
    provider: str = Query(default="duckduckgo"),
    start: str = Query(default="1"),
) -> SearchResponse | JSONResponse:
    router: SearchRouter = app.state.search_router
    try:
        return await router.search(q, provider, start)
    except SearchProxyError as exc:
        status_code, body = translate_error(exc)
        return JSONResponse(status_code=status_code, content=body)
    except Exception:
        logger.exception("Unexpected error during search")
        return _error(502, UPSTREAM_FAILED)


@app.post("/ai", response_model=ReplyResponse, responses={400: {"model": ErrorResponse}})
async def ai(payload: PromptRequest | None = None) -> ReplyResponse | JSONResponse:
    if payload is None or not payload.prompt:
        return _error(400, "Missing prompt")
    return ReplyResponse(reply=f"Echo: {payload.prompt}")


@app.post("/chat", response_model=ReplyResponse, responses={400: {"model": ErrorResponse}})
async def chat(payload: ChatRequest | None = None) -> ReplyResponse | JSONResponse:
    if payload is None or not payload.message:
        return _error(400, "Missing message")
    received_at = datetime.now().strftime("%I:%M:%S %p").lstrip("0")
    return ReplyResponse(reply=f'Server received "{payload.message}" at {received_at}')


async def _list(store: ListStore) -> EntryList:
    return EntryList(items=await store.items())


async def _add(store: ListStore, payload: EntryPayload | None) -> StoredEntry | JSONResponse:
    if payload is None or not payload.url:
        return _error(400, "Missing url")
    return await store.add(payload.url, payload.title)


async def _remove(store: ListStore, entry_id: str) -> DeleteResponse:
    await store.remove(entry_id)
    return DeleteResponse()


@app.get("/bookmarks", response_model=EntryList)
async def list_bookmarks() -> EntryList:
    return await _list(app.state.bookmarks)


@app.post("/bookmarks", response_model=StoredEntry, responses={400: {"model": ErrorResponse}})
async def add_bookmark(payload: EntryPayload | None = None) -> StoredEntry | JSONResponse:
    return await _add(app.state.bookmarks, payload)


@app.delete("/bookmarks/{entry_id}", response_model=DeleteResponse)
async def delete_bookmark(entry_id: str) -> DeleteResponse:
    return await _remove(app.state.bookmarks, entry_id)


@app.get("/history", response_model=EntryList)
async def list_history() -> EntryList:
    return await _list(app.state.history)


@app.post("/history", response_model=StoredEntry, responses={400: {"model": ErrorResponse}})
async def add_history(payload: EntryPayload | None = None) -> StoredEntry | JSONResponse:
    return await _add(app.state.history, payload)


@app.delete("/history/{entry_id}", response_model=DeleteResponse)
async def delete_history(entry_id: str) -> DeleteResponse:
    return await _remove(app.state.history, entry_id)


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    router: SearchRouter = app.state.search_router
    return HealthResponse(
        status="ok",
        providers=router.configured_providers(),
        bookmarks=len(app.state.bookmarks),
        history=len(app.state.history),
    )


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host=settings.host, port=settings.port)
