from __future__ import annotations

import argparse
import asyncio
import shlex
import sys

import httpx

from search_proxy.errors import SearchProxyError
from search_proxy.models import Provider, SearchResponse
from search_proxy.search import SearchRouter, translate_error


def _parse_input(raw: str, default_provider: str = Provider.DUCKDUCKGO.value) -> tuple[str, str, str]:
    tokens = shlex.split(raw)
    query_parts: list[str] = []
    provider = default_provider
    start = "1"
    i = 0
    while i < len(tokens):
        if tokens[i] == "--provider" and i + 1 < len(tokens):
            provider = tokens[i + 1]
            i += 2
        elif tokens[i] == "--start" and i + 1 < len(tokens):
            start = tokens[i + 1]
            i += 2
        else:
            query_parts.append(tokens[i])
            i += 1
    return " ".join(query_parts), provider, start


def _print_results(response: SearchResponse) -> None:
    print(f"\nProvider: {response.provider.value}")
    print(f"Results: {len(response.items)}\n")
    for position, item in enumerate(response.items, start=1):
        print(f"  {position}. {item.title}")
        print(f"     {item.url}")
        if item.snippet:
            print(f"     {item.snippet}")
        print()
    if response.next_start is not None:
        print(f"Next page: --start {response.next_start}")


async def _run(default_provider: str) -> None:
    async with httpx.AsyncClient(follow_redirects=True) as client:
        router = SearchRouter(client)

        print(f"Search Proxy CLI (default provider: {default_provider}) - type 'help' for usage, 'quit' to exit")
        while True:
            try:
                raw = input("search> ").strip()
            except EOFError:
                break

            if not raw:
                continue
            if raw in ("exit", "quit", "q"):
                break
            if raw == "help":
                print("Usage: <query> [--provider duckduckgo|google|bing] [--start 11]")
                print("Commands: help, exit/quit/q")
                continue

            try:
                query, provider, start = _parse_input(raw, default_provider)
            except ValueError as exc:
                print(f"Parse error: {exc}")
                continue

            try:
                response = await router.search(query, provider, start)
            except SearchProxyError as exc:
                status_code, body = translate_error(exc)
                print(f"Error ({status_code}): {body.get('error', body)}")
                continue
            except Exception as exc:
                print(f"Error: {exc}")
                continue
            _print_results(response)


def main() -> None:
    parser = argparse.ArgumentParser(description="Search Proxy CLI")
    parser.add_argument(
        "--provider",
        choices=[p.value for p in Provider],
        default=Provider.DUCKDUCKGO.value,
        help="Provider used when a query does not name one",
    )
    args = parser.parse_args()

    try:
        asyncio.run(_run(args.provider))
    except KeyboardInterrupt:
        print("\nBye!")
        sys.exit(0)
