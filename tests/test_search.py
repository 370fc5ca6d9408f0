"""Tests for the search index client."""

import asyncio
import json
from pathlib import Path

import httpx

from scoop_run_plugin.config import ScoopSettings
from scoop_run_plugin.fetchers import ScoopSearchClient

FIXTURES = Path(__file__).resolve().parent / "fixtures"
SEARCH_URL = "https://search.example.com/indexes/apps/docs/search"
SETTINGS = ScoopSettings(search_url=SEARCH_URL, search_top=3)


def _search_response() -> dict:
    return json.loads((FIXTURES / "search_response.json").read_text())


def _search(client: ScoopSearchClient, query: str):
    async def run():
        try:
            return await client.search(query)
        finally:
            await client.aclose()

    return asyncio.run(run())


def test_search_returns_packages(httpx_mock):
    httpx_mock.add_response(url=SEARCH_URL, method="POST", json=_search_response())
    packages = _search(ScoopSearchClient("secret", settings=SETTINGS), "git")
    assert [p.name for p in packages] == ["git", "gitkraken"]


def test_search_sends_api_key_and_payload(httpx_mock):
    httpx_mock.add_response(url=SEARCH_URL, method="POST", json={"value": []})
    _search(ScoopSearchClient("secret", settings=SETTINGS), "git")

    request = httpx_mock.get_request()
    assert request.headers["api-key"] == "secret"
    body = json.loads(request.content)
    assert body["search"] == "git"
    assert body["top"] == 3
    assert body["searchMode"] == "all"
    assert body["orderby"].startswith("search.score() desc")
    assert "Metadata/DuplicateOf eq null" in body["filter"]


def test_search_http_error_returns_empty(httpx_mock):
    httpx_mock.add_response(url=SEARCH_URL, method="POST", status_code=403)
    assert _search(ScoopSearchClient("bad-key", settings=SETTINGS), "git") == []


def test_search_network_error_returns_empty(httpx_mock):
    httpx_mock.add_exception(httpx.ConnectError("unreachable"), url=SEARCH_URL)
    assert _search(ScoopSearchClient("secret", settings=SETTINGS), "git") == []


def test_search_malformed_response_returns_empty(httpx_mock):
    httpx_mock.add_response(url=SEARCH_URL, method="POST", json={"value": [{"Name": "x"}]})
    assert _search(ScoopSearchClient("secret", settings=SETTINGS), "git") == []


def test_new_search_cancels_previous():
    gate = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        if json.loads(request.content)["search"] == "slow":
            await gate.wait()
        return httpx.Response(200, json=_search_response())

    client = ScoopSearchClient("secret", settings=SETTINGS, transport=httpx.MockTransport(handler))

    async def scenario():
        first = asyncio.create_task(client.search("slow"))
        await asyncio.sleep(0.01)
        second = await client.search("git")
        try:
            return await first, second
        finally:
            await client.aclose()

    first, second = asyncio.run(scenario())
    assert first == []
    assert [p.name for p in second] == ["git", "gitkraken"]


def test_outer_cancellation_propagates():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.Event().wait()
        return httpx.Response(200, json={"value": []})

    client = ScoopSearchClient("secret", settings=SETTINGS, transport=httpx.MockTransport(handler))

    async def scenario():
        task = asyncio.create_task(client.search("git"))
        await asyncio.sleep(0.01)
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            return "cancelled"
        finally:
            await client.aclose()
        return "completed"

    assert asyncio.run(scenario()) == "cancelled"
